"""UsageIndex — module-wide union of every source file's referenced symbols."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

import structlog

# Ensure extractors are registered before any index is built.
import depsentinel.extractors  # noqa: F401
from depsentinel.exceptions import UnparsableSourceError
from depsentinel.extractors.jvm import WILDCARD
from depsentinel.extractors.registry import EXTRACTOR_REGISTRY, SymbolExtractor
from depsentinel.models import Module, SymbolSet, UnparsableSource

log = structlog.get_logger("depsentinel.usage")


@dataclass(frozen=True)
class UsageIndex:
    """Referenced symbols, with wildcard imports (``pkg.*``) kept apart as packages."""

    symbols: frozenset[str] = frozenset()
    wildcards: frozenset[str] = frozenset()

    @classmethod
    def from_symbol_sets(cls, symbol_sets: Iterable[SymbolSet]) -> UsageIndex:
        symbols: set[str] = set()
        wildcards: set[str] = set()
        for symbol_set in symbol_sets:
            for symbol in symbol_set:
                if symbol.endswith(WILDCARD):
                    wildcards.add(symbol[: -len(WILDCARD)])
                else:
                    symbols.add(symbol)
        return cls(frozenset(symbols), frozenset(wildcards))

    def __len__(self) -> int:
        return len(self.symbols) + len(self.wildcards)

    def evidence(self, symbols: SymbolSet, packages: frozenset[str] = frozenset()) -> list[str]:
        """References that hit *symbols* directly or through a wildcard import of *packages*."""
        hits = sorted(symbols & self.symbols)
        hits.extend(sorted(p + WILDCARD for p in packages & self.wildcards))
        return hits


def build_usage_index(
    module: Module,
    extractors: Mapping[str, SymbolExtractor] | None = None,
) -> tuple[UsageIndex, list[UnparsableSource]]:
    """Extract every source file of *module* and union the results.

    Files that cannot be extracted are skipped and reported as warnings.
    """
    registry = EXTRACTOR_REGISTRY if extractors is None else extractors
    symbol_sets: list[SymbolSet] = []
    warnings: list[UnparsableSource] = []

    for source in module.sources:
        if source.resolved_symbols is not None:
            symbol_sets.append(source.resolved_symbols)
            continue
        extractor = registry.get(source.language)
        if extractor is None:
            reason = f"no extractor for language {source.language!r}"
        else:
            try:
                symbol_sets.append(extractor.extract(source))
                continue
            except UnparsableSourceError as e:
                reason = e.reason
        log.warning("usage.unparsable_source", module=module.name, path=source.path, reason=reason)
        warnings.append(UnparsableSource(module=module.name, path=source.path, reason=reason))

    return UsageIndex.from_symbol_sets(symbol_sets), warnings
