"""Local preview server for the compiled documentation site."""
