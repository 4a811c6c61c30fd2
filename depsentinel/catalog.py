"""Symbol Catalog — per-module table of the symbols each dependency provides."""

from __future__ import annotations

import structlog

from depsentinel.classpath.base import ClasspathResolver
from depsentinel.exceptions import UnresolvedDependencyError
from depsentinel.models import DependencyRecord, Module, SymbolSet

log = structlog.get_logger("depsentinel.catalog")


def packages_of(symbols: SymbolSet) -> frozenset[str]:
    """Owners of *symbols*: the package of a top-level type, the outer type of a nested one."""
    return frozenset(owner for owner, _, _ in (s.rpartition(".") for s in symbols) if owner)


class SymbolCatalog:
    """Mapping from declared dependency to its exported symbols.

    Dependencies whose resolution failed are kept apart with the failure
    reason; they have no symbol set.
    """

    def __init__(
        self,
        resolved: dict[DependencyRecord, SymbolSet],
        unresolved: dict[DependencyRecord, str] | None = None,
    ) -> None:
        self._resolved = dict(resolved)
        self._unresolved = dict(unresolved or {})
        self._packages: dict[DependencyRecord, frozenset[str]] = {}

    def __contains__(self, record: object) -> bool:
        return record in self._resolved or record in self._unresolved

    def __len__(self) -> int:
        return len(self._resolved) + len(self._unresolved)

    def is_resolved(self, record: DependencyRecord) -> bool:
        return record in self._resolved

    def unresolved_reason(self, record: DependencyRecord) -> str | None:
        return self._unresolved.get(record)

    @property
    def unresolved(self) -> dict[DependencyRecord, str]:
        return dict(self._unresolved)

    def symbols(self, record: DependencyRecord) -> SymbolSet:
        """Symbols exported by *record*; raises KeyError if it is unresolved or unknown."""
        return self._resolved[record]

    def packages(self, record: DependencyRecord) -> frozenset[str]:
        if record not in self._packages:
            self._packages[record] = packages_of(self._resolved[record])
        return self._packages[record]


def build_catalog(module: Module, resolver: ClasspathResolver) -> SymbolCatalog:
    """Resolve every declared dependency of *module* against *resolver*."""
    resolved: dict[DependencyRecord, SymbolSet] = {}
    unresolved: dict[DependencyRecord, str] = {}
    for dep in module.dependencies:
        try:
            resolved[dep] = frozenset(resolver.resolve(dep))
        except UnresolvedDependencyError as e:
            unresolved[dep] = e.reason
            log.warning(
                "catalog.unresolved",
                module=module.name,
                dependency=dep.coordinates,
                reason=e.reason,
            )
    catalog = SymbolCatalog(resolved, unresolved)
    log.debug(
        "catalog.built",
        module=module.name,
        resolved=len(resolved),
        unresolved=len(unresolved),
    )
    return catalog
