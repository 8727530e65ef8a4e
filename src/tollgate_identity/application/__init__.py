"""Application layer: use-case services and request context."""
