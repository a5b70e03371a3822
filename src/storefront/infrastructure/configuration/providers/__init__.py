"""Identity provider implementations."""
