"""Adapters to external statistics sources."""
