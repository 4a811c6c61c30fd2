"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _env_int(key: str, default: int) -> int:
    return int(os.environ.get(key, default))


def _env_path(key: str, default: Path) -> Path:
    value = os.environ.get(key)
    return Path(value).expanduser() if value else default


@dataclass(frozen=True)
class Settings:
    """Scan settings.

    Environment variables:
        DEPSENTINEL_CONCURRENCY       — modules analysed at once (default: CPU count)
        DEPSENTINEL_LOCAL_REPOSITORY  — Maven local repository (default: ~/.m2/repository)
        DEPSENTINEL_GRADLE_CACHE      — Gradle module cache (default: ~/.gradle/caches/modules-2)
    """

    concurrency: int
    local_repository: Path
    gradle_cache: Path

    @classmethod
    def from_env(cls) -> Settings:
        concurrency = _env_int("DEPSENTINEL_CONCURRENCY", os.cpu_count() or 1)
        if concurrency < 1:
            raise ValueError(f"DEPSENTINEL_CONCURRENCY must be >= 1, got {concurrency}")
        return cls(
            concurrency=concurrency,
            local_repository=_env_path(
                "DEPSENTINEL_LOCAL_REPOSITORY", Path.home() / ".m2" / "repository"
            ),
            gradle_cache=_env_path(
                "DEPSENTINEL_GRADLE_CACHE", Path.home() / ".gradle" / "caches" / "modules-2"
            ),
        )
