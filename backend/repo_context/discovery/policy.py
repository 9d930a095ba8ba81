"""Which repository paths are worth indexing."""

from __future__ import annotations

import dataclasses
import re
from typing import Dict, FrozenSet, Iterable

from ..config import (
    DEFAULT_EXCLUDED_CONFIGS,
    DEFAULT_EXCLUDED_DIRS,
    DEFAULT_EXCLUDED_EXTENSIONS,
    DEFAULT_LOCK_FILES,
)

_ENV_FILE = re.compile(r"^\.env")
_LEGAL_OR_HISTORY = re.compile(r"^(LICENSE|LICENCE|CHANGELOG)", re.IGNORECASE)


def _basename(path: str) -> str:
    return path.rstrip("/").split("/")[-1]


@dataclasses.dataclass(frozen=True)
class ExclusionPolicy:
    """Stateless rule set evaluated on path strings only."""

    excluded_dirs: FrozenSet[str]
    excluded_files: FrozenSet[str]
    excluded_extensions: FrozenSet[str]

    @classmethod
    def build(
        cls,
        extra_dirs: Iterable[str] = (),
        extra_files: Iterable[str] = (),
    ) -> "ExclusionPolicy":
        return cls(
            excluded_dirs=frozenset(DEFAULT_EXCLUDED_DIRS) | frozenset(extra_dirs),
            excluded_files=frozenset(DEFAULT_LOCK_FILES) | frozenset(DEFAULT_EXCLUDED_CONFIGS) | frozenset(extra_files),
            excluded_extensions=frozenset(e.lower() for e in DEFAULT_EXCLUDED_EXTENSIONS),
        )

    @classmethod
    def from_config(cls, cfg: Dict) -> "ExclusionPolicy":
        discovery = cfg.get("discovery", {})
        return cls.build(
            extra_dirs=discovery.get("extra_excluded_dirs", []),
            extra_files=discovery.get("extra_excluded_files", []),
        )

    def skip_directory(self, path: str) -> bool:
        """True when the directory (and so everything under it) is excluded."""
        path = path.rstrip("/")
        if _basename(path) in self.excluded_dirs:
            return True
        # multi-segment entries such as public/assets
        return any(
            "/" in d and (path == d or path.endswith("/" + d))
            for d in self.excluded_dirs
        )

    def include_file(self, path: str) -> bool:
        name = _basename(path)
        if name in self.excluded_files:
            return False
        if _ENV_FILE.match(name):
            return False
        _, dot, ext = name.rpartition(".")
        if dot and ext.lower() in self.excluded_extensions:
            return False
        if path.endswith(".map"):
            return False
        if _LEGAL_OR_HISTORY.match(name):
            return False
        return True

    def include_path(self, path: str) -> bool:
        """Full-path check: the file passes and no ancestor directory is skipped."""
        parts = path.strip("/").split("/")
        for i in range(1, len(parts)):
            if self.skip_directory("/".join(parts[:i])):
                return False
        return self.include_file(path)


DEFAULT_POLICY = ExclusionPolicy.build()
