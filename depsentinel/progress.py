"""Progress tracking for per-module analysis."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable

import structlog

from depsentinel.models import ModuleResult

log = structlog.get_logger("depsentinel.progress")


@dataclass
class ModuleProgress:
    module: str
    status: str = "pending"  # "pending" | "running" | "completed" | "failed" | "skipped"
    start_time: float | None = None
    end_time: float | None = None
    unused: int = 0
    unresolved: int = 0
    unparsable: int = 0
    detail: str = ""
    error: str | None = None

    @property
    def duration(self) -> float | None:
        if self.start_time is not None and self.end_time is not None:
            return round(self.end_time - self.start_time, 3)
        return None


class ProgressTracker:
    """Track the status of every module in a scan."""

    def __init__(self) -> None:
        self.modules: list[ModuleProgress] = []
        self._by_name: dict[str, ModuleProgress] = {}
        self.callbacks: list[Callable[[ModuleProgress], None]] = []

    def _entry(self, module: str) -> ModuleProgress:
        p = self._by_name.get(module)
        if p is None:
            p = ModuleProgress(module=module)
            self.modules.append(p)
            self._by_name[module] = p
        return p

    def get(self, module: str) -> ModuleProgress | None:
        return self._by_name.get(module)

    def start(self, module: str) -> None:
        p = self._entry(module)
        p.status = "running"
        p.start_time = time.monotonic()
        self._notify(p)

    def complete(self, module: str, result: ModuleResult) -> None:
        p = self._entry(module)
        p.status = "completed"
        p.end_time = time.monotonic()
        p.unused = len(result.rows)
        p.unresolved = len(result.unresolved)
        p.unparsable = len(result.unparsable)
        p.detail = f"{len(result.used)} used, {p.unused} unused"
        self._notify(p)

    def fail(self, module: str, error: str) -> None:
        p = self._entry(module)
        p.status = "failed"
        p.end_time = time.monotonic()
        p.error = error
        self._notify(p)

    def skip(self, module: str, reason: str) -> None:
        p = self._entry(module)
        p.status = "skipped"
        p.detail = reason
        self._notify(p)

    def get_summary(self) -> dict[str, Any]:
        counts: dict[str, int] = {}
        for p in self.modules:
            counts[p.status] = counts.get(p.status, 0) + 1
        return {
            "modules": [
                {
                    "module": p.module,
                    "status": p.status,
                    "duration": p.duration,
                    "unused": p.unused,
                    "unresolved": p.unresolved,
                    "unparsable": p.unparsable,
                    "detail": p.detail,
                    "error": p.error,
                }
                for p in self.modules
            ],
            "by_status": dict(sorted(counts.items())),
            "total_duration": round(sum(p.duration or 0 for p in self.modules), 3),
        }

    def _notify(self, p: ModuleProgress) -> None:
        for cb in self.callbacks:
            try:
                cb(p)
            except Exception:
                log.debug("progress.callback_error", module=p.module, exc_info=True)
