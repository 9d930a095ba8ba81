"""File content helpers."""

from __future__ import annotations

import base64
import binascii
import hashlib
from typing import Optional


def is_binary_bytes(data: bytes) -> bool:
    """Check if content is binary by looking for null bytes."""
    return b"\x00" in data[:2048]


def decode_base64_text(encoded: str) -> Optional[str]:
    """Decode base64 file content as UTF-8 text.

    Returns None when the payload is not valid base64 or looks binary.
    """
    try:
        raw = base64.b64decode(encoded)
    except (binascii.Error, ValueError):
        return None
    if is_binary_bytes(raw):
        return None
    return raw.decode("utf-8", errors="replace")


def text_sha256(*parts: str) -> str:
    """Calculate SHA256 hash over text parts."""
    h = hashlib.sha256()
    for part in parts:
        h.update(part.encode("utf-8"))
        h.update(b"\x00")
    return h.hexdigest()


def split_repo_key(repo_key: str) -> tuple[str, str]:
    """Split ``owner/name`` into its two parts."""
    owner, sep, name = repo_key.strip().strip("/").partition("/")
    if not sep or not owner or not name or "/" in name:
        raise ValueError(f"repo_key must look like 'owner/name', got {repo_key!r}")
    return owner, name
