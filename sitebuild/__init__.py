"""Documentation site compiler for Tweed (Markdown/YAML -> JSON fragments)."""

__version__ = "0.3.0"
