"""Content indexing and context retrieval for AI-assisted code review."""

__version__ = "0.1.0"
