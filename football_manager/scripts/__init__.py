"""Command-line entry points for batch simulation."""
