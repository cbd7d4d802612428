"""Core utilities shared across contrib-stats."""
