"""contrib-stats: per-contributor commit statistics for a GitHub repository."""

__version__ = "0.1.0"
