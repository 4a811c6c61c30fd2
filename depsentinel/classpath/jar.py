"""Resolvers that read exported types from jars in local artifact caches."""

from __future__ import annotations

import re
import struct
import zipfile
import zlib
from abc import ABC, abstractmethod
from functools import lru_cache
from pathlib import Path

import structlog

from depsentinel.exceptions import UnresolvedDependencyError
from depsentinel.models import DependencyRecord, SymbolSet

log = structlog.get_logger("depsentinel.classpath")

_VERSIONED_PREFIX_RE = re.compile(r"^META-INF/versions/\d+/")
_VERSION_TOKEN_RE = re.compile(r"\d+|[A-Za-z]+")

_ACC_PUBLIC = 0x0001
_ACC_SYNTHETIC = 0x1000

# Constant pool entry sizes (excluding the tag byte), keyed by tag.
_CP_SIZES = {3: 4, 4: 4, 5: 8, 6: 8, 7: 2, 8: 2, 9: 4, 10: 4, 11: 4, 12: 4,
             15: 3, 16: 2, 17: 4, 18: 4, 19: 2, 20: 2}


def _access_flags(data: bytes) -> int | None:
    """Read a class file's access_flags; None if the header is malformed."""
    try:
        magic, count = struct.unpack_from(">I4xH", data, 0)
        if magic != 0xCAFEBABE:
            return None
        pos = 10
        index = 1
        while index < count:
            tag = data[pos]
            if tag == 1:
                (length,) = struct.unpack_from(">H", data, pos + 1)
                pos += 3 + length
            elif tag in _CP_SIZES:
                pos += 1 + _CP_SIZES[tag]
            else:
                return None
            # long and double occupy two slots
            index += 2 if tag in (5, 6) else 1
        (flags,) = struct.unpack_from(">H", data, pos)
        return flags
    except (struct.error, IndexError):
        return None


def _type_name(entry: str) -> str | None:
    """Map a jar entry to the source-level name of the class it holds."""
    if not entry.endswith(".class"):
        return None
    entry = _VERSIONED_PREFIX_RE.sub("", entry)
    if entry.startswith("META-INF/"):
        return None
    binary = entry[: -len(".class")]
    simple = binary.rpartition("/")[2]
    if simple in ("module-info", "package-info"):
        return None
    # Anonymous and local classes (Outer$1, Outer$1Local) cannot be named.
    parts = simple.split("$")
    if any(not part or part[0].isdigit() for part in parts):
        return None
    return binary.replace("/", ".").replace("$", ".")


@lru_cache(maxsize=512)
def read_jar_types(jar: Path) -> SymbolSet:
    """Return the public, nameable types packaged in *jar*.

    Raises ``OSError``, ``zipfile.BadZipFile``, ``zlib.error`` or
    ``RuntimeError`` (encrypted entries) if the jar cannot be read.
    """
    types: set[str] = set()
    with zipfile.ZipFile(jar) as zf:
        for info in zf.infolist():
            name = _type_name(info.filename)
            if name is None:
                continue
            flags = _access_flags(zf.read(info))
            if flags is not None and (not flags & _ACC_PUBLIC or flags & _ACC_SYNTHETIC):
                continue
            types.add(name)
    return frozenset(types)


def version_key(version: str) -> tuple:
    """Numeric-aware ordering key for version directory names."""
    return tuple(
        (1, int(tok), "") if tok.isdigit() else (0, 0, tok.lower())
        for tok in _VERSION_TOKEN_RE.findall(version)
    )


class _JarResolver(ABC):
    """Shared lookup: exact version first, else the highest cached version."""

    layout = ""

    def __init__(self, root: Path) -> None:
        self.root = root

    @abstractmethod
    def _candidates(self, record: DependencyRecord, version: str) -> list[Path]: ...

    @abstractmethod
    def _artifact_dir(self, record: DependencyRecord) -> Path: ...

    def _locate(self, record: DependencyRecord) -> Path | None:
        if record.version:
            for jar in self._candidates(record, record.version):
                if jar.is_file():
                    return jar
        artifact_dir = self._artifact_dir(record)
        if not artifact_dir.is_dir():
            return None
        versions = sorted(
            (d.name for d in artifact_dir.iterdir() if d.is_dir()),
            key=version_key,
            reverse=True,
        )
        for version in versions:
            for jar in self._candidates(record, version):
                if jar.is_file():
                    if record.version:
                        log.debug(
                            "classpath.version_fallback",
                            dependency=record.coordinates,
                            used_version=version,
                        )
                    return jar
        return None

    def resolve(self, record: DependencyRecord) -> SymbolSet:
        jar = self._locate(record)
        if jar is None:
            raise UnresolvedDependencyError(record, f"no jar in {self.layout} {self.root}")
        try:
            return read_jar_types(jar)
        except (OSError, zipfile.BadZipFile, zlib.error, RuntimeError) as e:
            raise UnresolvedDependencyError(record, f"cannot read {jar}: {e}") from e


class MavenRepositoryResolver(_JarResolver):
    """Maven local repository layout:
    ``<root>/<group path>/<artifact>/<version>/<artifact>-<version>.jar``.
    """

    layout = "maven repository"

    def _artifact_dir(self, record: DependencyRecord) -> Path:
        return self.root.joinpath(*record.group.split("."), record.artifact)

    def _candidates(self, record: DependencyRecord, version: str) -> list[Path]:
        return [self._artifact_dir(record) / version / f"{record.artifact}-{version}.jar"]


class GradleCacheResolver(_JarResolver):
    """Gradle module cache layout:
    ``<root>/files-2.1/<group>/<artifact>/<version>/<sha1>/<artifact>-<version>.jar``.
    """

    layout = "gradle cache"

    def __init__(self, root: Path) -> None:
        files = root / "files-2.1"
        super().__init__(files if files.is_dir() else root)

    def _artifact_dir(self, record: DependencyRecord) -> Path:
        return self.root / record.group / record.artifact

    def _candidates(self, record: DependencyRecord, version: str) -> list[Path]:
        version_dir = self._artifact_dir(record) / version
        if not version_dir.is_dir():
            return []
        name = f"{record.artifact}-{version}.jar"
        return sorted(version_dir.glob(f"*/{name}"))
