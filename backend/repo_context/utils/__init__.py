"""Utility functions for repo-context."""

from .concurrency import GroupedExecutor, Outcome
from .file_utils import (
    decode_base64_text,
    is_binary_bytes,
    split_repo_key,
    text_sha256,
)

__all__ = [
    "GroupedExecutor",
    "Outcome",
    "decode_base64_text",
    "is_binary_bytes",
    "split_repo_key",
    "text_sha256",
]
