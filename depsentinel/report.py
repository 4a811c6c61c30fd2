"""Report Sink — ordered accumulation and rendering of unused-dependency rows."""

from __future__ import annotations

import csv
import io
import json
import threading
from collections.abc import Iterable

from depsentinel.models import ScanReport, UnusedDependencyRow

COLUMNS = ("module", "dependency_type", "group", "artifact")


class ReportSink:
    """Append-only, thread-safe accumulator of report rows.

    Rows are never deduplicated: the same artifact unused in two modules
    yields two rows, each carrying its module.
    """

    def __init__(self) -> None:
        self._rows: list[UnusedDependencyRow] = []
        self._lock = threading.Lock()
        self._snapshot: tuple[UnusedDependencyRow, ...] | None = None

    def append(self, row: UnusedDependencyRow) -> None:
        with self._lock:
            self._rows.append(row)
            self._snapshot = None

    def extend(self, rows: Iterable[UnusedDependencyRow]) -> None:
        with self._lock:
            self._rows.extend(rows)
            self._snapshot = None

    def __len__(self) -> int:
        return len(self._rows)

    def finalize(self) -> tuple[UnusedDependencyRow, ...]:
        """Return every row appended so far, in append order.

        Repeated calls without new appends return the same tuple.
        """
        with self._lock:
            if self._snapshot is None:
                self._snapshot = tuple(self._rows)
            return self._snapshot


def render_csv(rows: Iterable[UnusedDependencyRow]) -> str:
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=COLUMNS, lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow(row.as_dict())
    return buf.getvalue()


def render_json(report: ScanReport) -> str:
    doc = {
        "project": report.project,
        "complete": report.complete,
        "cancelled": report.cancelled,
        "modules_scanned": report.modules_scanned,
        "unused": [row.as_dict() for row in report.rows],
        "unresolved": [
            {
                "module": u.module,
                "dependency_type": u.dependency.type.value,
                "group": u.dependency.group,
                "artifact": u.dependency.artifact,
                "version": u.dependency.version,
                "reason": u.reason,
            }
            for u in report.unresolved
        ],
        "unparsable_sources": [
            {"module": w.module, "path": w.path, "reason": w.reason} for w in report.warnings
        ],
        "module_failures": [{"module": f.module, "reason": f.reason} for f in report.failures],
    }
    return json.dumps(doc, indent=2) + "\n"


def render_table(rows: Iterable[UnusedDependencyRow]) -> str:
    """Fixed-width text table for terminals."""
    data = [tuple(row.as_dict()[c] for c in COLUMNS) for row in rows]
    if not data:
        return "No unused dependencies found.\n"
    widths = [max(len(c), *(len(r[i]) for r in data)) for i, c in enumerate(COLUMNS)]
    lines = ["  ".join(c.ljust(w) for c, w in zip(COLUMNS, widths)).rstrip()]
    lines.append("  ".join("-" * w for w in widths))
    for r in data:
        lines.append("  ".join(v.ljust(w) for v, w in zip(r, widths)).rstrip())
    return "\n".join(lines) + "\n"
