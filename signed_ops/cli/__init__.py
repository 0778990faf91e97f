"""Command-line entry points (`signed-ops`)."""
