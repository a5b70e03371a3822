"""Configuration of external identity providers."""
