"""Configuration management for repo-context."""

from .manager import (
    DEFAULT_CONFIG,
    DEFAULT_EXCLUDED_DIRS,
    DEFAULT_EXCLUDED_CONFIGS,
    DEFAULT_EXCLUDED_EXTENSIONS,
    DEFAULT_LOCK_FILES,
    load_config,
    merge_config,
    cfg_fingerprint,
    embedding_fingerprint,
)

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_EXCLUDED_DIRS",
    "DEFAULT_EXCLUDED_CONFIGS",
    "DEFAULT_EXCLUDED_EXTENSIONS",
    "DEFAULT_LOCK_FILES",
    "load_config",
    "merge_config",
    "cfg_fingerprint",
    "embedding_fingerprint",
]
