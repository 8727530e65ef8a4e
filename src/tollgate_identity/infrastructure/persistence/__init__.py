"""Persistence implementations for tollgate_identity."""
