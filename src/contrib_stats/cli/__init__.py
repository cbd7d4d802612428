"""Command line interface for contrib-stats."""
