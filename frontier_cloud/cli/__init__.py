"""Command-line entry points (batch and interactive)."""
