"""Tests for the configuration layer."""
from repo_context.config import (
    DEFAULT_CONFIG,
    cfg_fingerprint,
    embedding_fingerprint,
    load_config,
    merge_config,
)


def test_defaults(cfg):
    assert cfg["fetch"]["batch_size"] == 20
    assert cfg["embedding"]["concurrency"] == 10
    assert cfg["vector_store"]["upsert_batch_size"] == 100
    assert cfg["chunking"]["max_chunk_chars"] == 4000
    assert cfg["chunking"]["max_chunks_per_file"] == 3
    assert cfg["incremental"] is False


def test_load_config_does_not_mutate_defaults(cfg):
    cfg["chunking"]["max_chunk_chars"] = 10
    assert DEFAULT_CONFIG["chunking"]["max_chunk_chars"] == 4000


def test_env_overrides(cfg, monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_test")
    monkeypatch.setenv("EMBEDDING_CONCURRENCY", "4")
    monkeypatch.setenv("QDRANT_URL", "http://qdrant:6333")
    loaded = load_config()
    assert loaded["github"]["token"] == "ghp_test"
    assert loaded["embedding"]["concurrency"] == 4
    assert loaded["vector_store"]["qdrant"]["url"] == "http://qdrant:6333"


def test_google_api_key_fallback(cfg, monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "g-key")
    assert load_config()["embedding"]["api_key"] == "g-key"

    monkeypatch.setenv("GEMINI_API_KEY", "gem-key")
    assert load_config()["embedding"]["api_key"] == "gem-key"


def test_explicit_overrides_win(cfg, monkeypatch):
    monkeypatch.setenv("FETCH_BATCH_SIZE", "50")
    loaded = load_config({"fetch": {"batch_size": 5}})
    assert loaded["fetch"]["batch_size"] == 5
    assert loaded["fetch"]["timeout"] == 30.0


def test_merge_config_is_recursive():
    merged = merge_config({"a": {"b": 1, "c": 2}, "d": 3}, {"a": {"b": 10}, "e": 4})
    assert merged == {"a": {"b": 10, "c": 2}, "d": 3, "e": 4}


def test_fingerprints(cfg):
    assert cfg_fingerprint({"a": 1, "b": 2}) == cfg_fingerprint({"b": 2, "a": 1})

    before = embedding_fingerprint(cfg)
    cfg["chunking"]["max_chunk_chars"] = 1000
    assert embedding_fingerprint(cfg) == before

    cfg["embedding"]["model"] = "text-embedding-004"
    assert embedding_fingerprint(cfg) != before
