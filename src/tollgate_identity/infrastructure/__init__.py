"""Infrastructure adapters: persistence and OAuth provider clients."""
