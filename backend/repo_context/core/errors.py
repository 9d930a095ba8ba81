"""Error types raised by the indexing and retrieval stages."""

from __future__ import annotations


class RepoContextError(Exception):
    """Base class for repo-context errors."""


class ContentClientError(RepoContextError):
    """The source-control host answered with an error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DiscoveryError(RepoContextError):
    """A directory listing failed. Fatal: a partial tree would under-index."""


class FetchError(RepoContextError):
    """A single file could not be fetched or decoded."""


class EmbeddingError(RepoContextError):
    """A single embedding call failed."""


class UpsertError(RepoContextError):
    """Writing a batch to the vector index failed. Fatal for the run."""


class QueryError(RepoContextError):
    """A context lookup failed."""
