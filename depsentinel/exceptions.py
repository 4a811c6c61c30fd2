"""Custom exceptions for depsentinel."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from depsentinel.models import DependencyRecord


class DepSentinelError(Exception):
    """Base exception for all depsentinel errors."""


class ManifestError(DepSentinelError):
    """Raised when a build manifest cannot be read."""


class UnresolvedDependencyError(DepSentinelError):
    """Raised when the classpath resolver cannot produce symbols for a dependency."""

    def __init__(self, record: DependencyRecord, reason: str):
        self.record = record
        self.reason = reason
        super().__init__(f"Cannot resolve {record.coordinates}: {reason}")


class UnparsableSourceError(DepSentinelError):
    """Raised when a source file cannot be scanned for symbol references."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot parse {path}: {reason}")
