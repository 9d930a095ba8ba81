"""Splitting fetched files into bounded-size chunks for embedding.

Small files become a single chunk. Larger files are cut on line boundaries by
a small state machine:

    state         line category     action
    -----------   ---------------   ------------------------------------------
    FIRST         fits              append
    FIRST         overflows         flush, seed "part N" with the line -> CONTINUATION
    CONTINUATION  boilerplate       discard (when drop_boilerplate is set)
    CONTINUATION  fits              append
    CONTINUATION  overflows         flush, seed "part N" with the line

A line is boilerplate when it trim-starts with ``import ``, ``//``, ``/*`` or
``*``. Only the first ``max_chunks`` chunks of a file are kept.
"""

from __future__ import annotations

import enum
import functools
import logging
from typing import List

import tiktoken

from .models import Chunk, FileRecord

logger = logging.getLogger(__name__)

MAX_CHUNK_SIZE = 4000
MAX_CHUNKS_PER_FILE = 3
BOILERPLATE_PREFIXES = ("import ", "//", "/*", "*")


@functools.lru_cache(maxsize=1)
def _encoder() -> tiktoken.Encoding:
    # cl100k_base is compatible with most modern models
    return tiktoken.get_encoding("cl100k_base")


def count_tokens(text: str) -> int:
    """Count tokens in text using tiktoken."""
    return len(_encoder().encode(text, disallowed_special=()))


class ChunkState(enum.Enum):
    FIRST = "first"
    CONTINUATION = "continuation"


class LineKind(enum.Enum):
    NORMAL = "normal"
    BOILERPLATE = "boilerplate"
    BOUNDARY = "boundary"


def is_boilerplate(line: str) -> bool:
    return line.strip().startswith(BOILERPLATE_PREFIXES)


def file_header(path: str, part: int = 1) -> str:
    if part == 1:
        return f"File: {path}\n\n"
    return f"File: {path} (part {part})\n\n"


class _Accumulator:
    """Line accumulator for one file."""

    def __init__(self, path: str, max_size: int, drop_boilerplate: bool):
        self.path = path
        self.max_size = max_size
        self.drop_boilerplate = drop_boilerplate
        self.state = ChunkState.FIRST
        self.chunks: List[str] = []
        self.header = file_header(path)
        self.buffer = self.header

    def has_body(self) -> bool:
        return bool(self.buffer[len(self.header):].strip())

    def classify(self, line: str) -> LineKind:
        if (
            self.state is ChunkState.CONTINUATION
            and self.drop_boilerplate
            and is_boilerplate(line)
        ):
            return LineKind.BOILERPLATE
        # A buffer with no body yet absorbs any line, even an oversize one
        if len(self.buffer + line) > self.max_size and self.has_body():
            return LineKind.BOUNDARY
        return LineKind.NORMAL

    def feed(self, line: str) -> None:
        kind = self.classify(line)
        if kind is LineKind.BOILERPLATE:
            return
        if kind is LineKind.BOUNDARY:
            self.chunks.append(self.buffer.strip())
            self.header = file_header(self.path, len(self.chunks) + 1)
            self.buffer = self.header + line + "\n"
            self.state = ChunkState.CONTINUATION
            return
        self.buffer += line + "\n"

    def finish(self) -> List[str]:
        if self.has_body():
            self.chunks.append(self.buffer.strip())
        return self.chunks


class Chunker:
    """Character-bounded, line-based chunker."""

    def __init__(
        self,
        max_chunk_size: int = MAX_CHUNK_SIZE,
        max_chunks: int = MAX_CHUNKS_PER_FILE,
        drop_boilerplate: bool = True,
    ):
        self.max_chunk_size = max_chunk_size
        self.max_chunks = max_chunks
        self.drop_boilerplate = drop_boilerplate

    @classmethod
    def from_config(cls, cfg: dict) -> "Chunker":
        chunk_cfg = cfg.get("chunking", {})
        return cls(
            max_chunk_size=int(chunk_cfg.get("max_chunk_chars", MAX_CHUNK_SIZE)),
            max_chunks=int(chunk_cfg.get("max_chunks_per_file", MAX_CHUNKS_PER_FILE)),
            drop_boilerplate=bool(chunk_cfg.get("drop_continuation_boilerplate", True)),
        )

    def split(self, path: str, content: str) -> List[str]:
        if len(content) <= self.max_chunk_size:
            return [f"{file_header(path)}{content}"]

        acc = _Accumulator(path, self.max_chunk_size, self.drop_boilerplate)
        for line in content.split("\n"):
            acc.feed(line)
        texts = acc.finish()

        if len(texts) > self.max_chunks:
            logger.debug(f"{path}: keeping {self.max_chunks} of {len(texts)} chunks")
        return texts[: self.max_chunks]

    def chunk(self, record: FileRecord) -> List[Chunk]:
        texts = self.split(record.path, record.content)
        return [Chunk(source_path=record.path, part_index=i, text=t) for i, t in enumerate(texts)]


def chunk_file(
    record: FileRecord,
    max_chunk_size: int = MAX_CHUNK_SIZE,
    max_chunks: int = MAX_CHUNKS_PER_FILE,
    drop_boilerplate: bool = True,
) -> List[Chunk]:
    """Chunk a single file (functional wrapper)."""
    chunker = Chunker(max_chunk_size=max_chunk_size, max_chunks=max_chunks, drop_boilerplate=drop_boilerplate)
    return chunker.chunk(record)
