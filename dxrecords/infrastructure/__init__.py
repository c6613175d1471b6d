"""Infrastructure: configuration and settings."""
