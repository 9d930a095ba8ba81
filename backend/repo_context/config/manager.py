"""Configuration management for repo-context."""

from __future__ import annotations

import copy
import hashlib
import json
import os
from typing import Dict, List, Optional


DEFAULT_EXCLUDED_DIRS: List[str] = [
    "node_modules",
    ".git",
    "dist",
    "build",
    ".next",
    "out",
    "coverage",
    ".turbo",
    ".vercel",
    ".cache",
    "public/assets",
    "public/images",
    ".husky",
    ".vscode",
    ".idea",
]

DEFAULT_LOCK_FILES: List[str] = [
    "package-lock.json",
    "pnpm-lock.yaml",
    "yarn.lock",
    "bun.lockb",
]

DEFAULT_EXCLUDED_CONFIGS: List[str] = [
    "eslint.config.mjs",
    "eslint.config.js",
    ".eslintrc",
    ".eslintrc.js",
    ".eslintrc.json",
    ".prettierrc",
    ".prettierrc.js",
    ".prettierrc.json",
    "prettier.config.js",
    "next.config.mjs",
    "next.config.ts",
    "next.config.js",
    "components.json",
    "postcss.config.js",
    "postcss.config.mjs",
    ".editorconfig",
    ".nvmrc",
    ".npmrc",
    "vercel.json",
    ".gitignore",
    ".gitattributes",
]

DEFAULT_EXCLUDED_EXTENSIONS: List[str] = [
    "png", "jpg", "jpeg", "gif", "ico", "svg", "webp", "bmp", "tiff",
    "pdf", "zip", "tar", "gz", "rar", "7z", "exe", "dmg",
    "woff", "woff2", "ttf", "eot",
    "mp4", "mp3", "wav", "avi", "mov",
]

DEFAULT_CONFIG: Dict = {
    "github": {
        "api_url": "https://api.github.com",
        "token": None,
        "timeout": 30.0,
    },
    "discovery": {
        "extra_excluded_dirs": [],
        "extra_excluded_files": [],
    },
    "fetch": {
        "batch_size": 20,
        "timeout": 30.0,
    },
    "chunking": {
        "max_chunk_chars": 4000,
        "max_chunks_per_file": 3,
        "drop_continuation_boilerplate": True,
    },
    "embedding": {
        "backend": "gemini",
        "model": "gemini-embedding-001",
        "api_url": "https://generativelanguage.googleapis.com/v1beta",
        "api_key": None,
        "sentence_transformers_model": "sentence-transformers/all-MiniLM-L6-v2",
        "concurrency": 10,
        "timeout": 30.0,
    },
    "vector_store": {
        "backend": "qdrant",
        "collection": "codebase",
        "upsert_batch_size": 100,
        "prune_stale": False,
        "qdrant": {
            "url": None,
            "host": "localhost",
            "port": 6333,
            "api_key": None,
        },
    },
    "search": {"top_k": 5},
    "incremental": False,
}

# (env var, config path, cast)
_ENV_OVERRIDES = [
    ("GITHUB_TOKEN", ("github", "token"), str),
    ("GITHUB_API_URL", ("github", "api_url"), str),
    ("GEMINI_API_KEY", ("embedding", "api_key"), str),
    ("EMBEDDING_BACKEND", ("embedding", "backend"), str),
    ("EMBEDDING_MODEL", ("embedding", "model"), str),
    ("EMBEDDING_CONCURRENCY", ("embedding", "concurrency"), int),
    ("FETCH_BATCH_SIZE", ("fetch", "batch_size"), int),
    ("QDRANT_URL", ("vector_store", "qdrant", "url"), str),
    ("QDRANT_HOST", ("vector_store", "qdrant", "host"), str),
    ("QDRANT_PORT", ("vector_store", "qdrant", "port"), int),
    ("QDRANT_API_KEY", ("vector_store", "qdrant", "api_key"), str),
    ("QDRANT_COLLECTION", ("vector_store", "collection"), str),
]


def _set_path(cfg: Dict, path: tuple, value) -> None:
    node = cfg
    for key in path[:-1]:
        node = node.setdefault(key, {})
    node[path[-1]] = value


def merge_config(base: Dict, overrides: Dict) -> Dict:
    """Recursively merge ``overrides`` into ``base`` (in place) and return it."""
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            merge_config(base[key], value)
        else:
            base[key] = value
    return base


def load_config(overrides: Optional[Dict] = None) -> Dict:
    """Load configuration.

    Starts from a copy of ``DEFAULT_CONFIG``, applies environment variables,
    then explicit ``overrides``.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    for env_name, path, cast in _ENV_OVERRIDES:
        raw = os.getenv(env_name)
        if raw:
            _set_path(config, path, cast(raw))

    # GOOGLE_API_KEY is what the Google SDKs read; accept it as a fallback
    if not config["embedding"]["api_key"] and os.getenv("GOOGLE_API_KEY"):
        config["embedding"]["api_key"] = os.getenv("GOOGLE_API_KEY")

    if overrides:
        merge_config(config, overrides)

    return config


def cfg_fingerprint(cfg: Dict) -> str:
    """Generate fingerprint hash for config."""
    payload = json.dumps(cfg, sort_keys=True, ensure_ascii=False).encode("utf-8")
    return hashlib.sha256(payload).hexdigest()


def embedding_fingerprint(cfg: Dict) -> str:
    """Fingerprint of the settings that change what a chunk embeds to."""
    emb = cfg.get("embedding", {})
    backend = emb.get("backend", "")
    model = emb.get("sentence_transformers_model") if backend == "sentence_transformers" else emb.get("model")
    return cfg_fingerprint({"backend": backend, "model": model})
