"""Repository file discovery and content fetching."""

from .policy import DEFAULT_POLICY, ExclusionPolicy
from .github import ContentClient, ContentEntry, GitHubContentClient, RepoContent
from .discoverer import FileDiscoverer
from .fetcher import ContentFetcher, FetchResult

__all__ = [
    "DEFAULT_POLICY",
    "ExclusionPolicy",
    "ContentClient",
    "ContentEntry",
    "GitHubContentClient",
    "RepoContent",
    "FileDiscoverer",
    "ContentFetcher",
    "FetchResult",
]
