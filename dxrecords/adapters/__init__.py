"""Adapters (Hexagonal Architecture outer layer)."""
