"""Logging and metrics for rolloutcheck."""
