"""Data models for dependency usage reconciliation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

SymbolSet = frozenset[str]


class DependencyType(Enum):
    """Build system a dependency was declared in."""

    MAVEN = "MAVEN"
    GRADLE = "GRADLE"


@dataclass(frozen=True)
class DependencyRecord:
    """A dependency declared in a build manifest.

    Identity is ``(type, group, artifact)``. ``version`` and ``scope`` are
    metadata and do not take part in equality or hashing.
    """

    type: DependencyType
    group: str
    artifact: str
    version: str | None = field(default=None, compare=False)
    scope: str | None = field(default=None, compare=False)

    @property
    def key(self) -> tuple[str, str]:
        """Group/artifact pair used to look the dependency up on a classpath."""
        return (self.group, self.artifact)

    @property
    def coordinates(self) -> str:
        if self.version:
            return f"{self.group}:{self.artifact}:{self.version}"
        return f"{self.group}:{self.artifact}"


@dataclass(frozen=True)
class SourceFile:
    """One source file of a module.

    ``resolved_symbols`` is set when a compiler front-end has already
    resolved the file; extractors then return it unchanged.
    """

    path: str  # relative to project root
    language: str
    content: bytes = b""
    resolved_symbols: SymbolSet | None = None


@dataclass(frozen=True)
class Module:
    """One compilable unit with its own dependency and source sets."""

    name: str
    path: Path
    dependencies: tuple[DependencyRecord, ...] = ()
    sources: tuple[SourceFile, ...] = ()

    def __post_init__(self) -> None:
        seen: set[DependencyRecord] = set()
        for dep in self.dependencies:
            if dep in seen:
                raise ValueError(
                    f"module {self.name!r} declares {dep.type.value} "
                    f"{dep.group}:{dep.artifact} more than once"
                )
            seen.add(dep)


@dataclass(frozen=True)
class Project:
    """Root unit of analysis: an ordered sequence of modules."""

    name: str
    modules: tuple[Module, ...] = ()


@dataclass(frozen=True)
class UnusedDependencyRow:
    """Report row for a declared dependency no source file references."""

    module: str
    dependency_type: DependencyType
    group: str
    artifact: str

    def as_dict(self) -> dict[str, str]:
        return {
            "module": self.module,
            "dependency_type": self.dependency_type.value,
            "group": self.group,
            "artifact": self.artifact,
        }


@dataclass(frozen=True)
class UnresolvedDependency:
    """Signal: the classpath could not produce symbols for a dependency."""

    module: str
    dependency: DependencyRecord
    reason: str


@dataclass(frozen=True)
class UnparsableSource:
    """Warning: a source file was skipped, so usage data may be incomplete."""

    module: str
    path: str
    reason: str


@dataclass(frozen=True)
class ModuleFailure:
    """A module whose analysis raised unexpectedly and produced no rows."""

    module: str
    reason: str


@dataclass
class ModuleResult:
    """Outcome of reconciling one module."""

    module: str
    rows: list[UnusedDependencyRow] = field(default_factory=list)
    unresolved: list[UnresolvedDependency] = field(default_factory=list)
    unparsable: list[UnparsableSource] = field(default_factory=list)
    used: dict[DependencyRecord, list[str]] = field(default_factory=dict)


@dataclass
class ScanReport:
    """Result of scanning a whole project."""

    project: str
    rows: tuple[UnusedDependencyRow, ...]
    unresolved: list[UnresolvedDependency] = field(default_factory=list)
    warnings: list[UnparsableSource] = field(default_factory=list)
    failures: list[ModuleFailure] = field(default_factory=list)
    cancelled: bool = False
    modules_scanned: int = 0

    @property
    def complete(self) -> bool:
        """True when every dependency of every module was classified."""
        return not (self.unresolved or self.failures or self.cancelled)
