"""Command-line entry points for tweed-docs."""
