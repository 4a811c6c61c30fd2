"""Resolver that tries several resolvers in order."""

from __future__ import annotations

from depsentinel.classpath.base import ClasspathResolver
from depsentinel.exceptions import UnresolvedDependencyError
from depsentinel.models import DependencyRecord, SymbolSet


class ChainedResolver:
    """First resolver that succeeds wins; unresolved only if all fail."""

    def __init__(self, *resolvers: ClasspathResolver) -> None:
        if not resolvers:
            raise ValueError("ChainedResolver needs at least one resolver")
        self._resolvers = resolvers

    def resolve(self, record: DependencyRecord) -> SymbolSet:
        reasons: list[str] = []
        for resolver in self._resolvers:
            try:
                return resolver.resolve(record)
            except UnresolvedDependencyError as e:
                reasons.append(e.reason)
        raise UnresolvedDependencyError(record, "; ".join(reasons))
