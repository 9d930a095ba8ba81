"""HTTP API for repo-context."""
