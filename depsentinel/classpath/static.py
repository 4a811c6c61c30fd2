"""Resolver backed by an in-memory coordinates → types table."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path

from depsentinel.exceptions import UnresolvedDependencyError
from depsentinel.models import DependencyRecord, SymbolSet


def _parse_coordinates(coordinates: str) -> tuple[str, str]:
    parts = coordinates.split(":")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise ValueError(f"expected 'group:artifact[:version]', got {coordinates!r}")
    return (parts[0], parts[1])


class StaticClasspathResolver:
    """Resolve dependencies from a precomputed table.

    Keys are ``group:artifact`` or ``group:artifact:version``; the version
    is ignored. Values are the fully-qualified type names the artifact
    provides.
    """

    def __init__(self, table: Mapping[str, Iterable[str]]) -> None:
        self._table: dict[tuple[str, str], SymbolSet] = {}
        for coordinates, types in table.items():
            key = _parse_coordinates(coordinates)
            self._table[key] = self._table.get(key, frozenset()) | frozenset(types)

    @classmethod
    def from_json_file(cls, path: Path) -> StaticClasspathResolver:
        """Load a ``{"group:artifact[:version]": ["fq.Type", ...]}`` JSON file."""
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a JSON object")
        return cls(data)

    def resolve(self, record: DependencyRecord) -> SymbolSet:
        try:
            return self._table[record.key]
        except KeyError:
            raise UnresolvedDependencyError(record, "not on classpath") from None
