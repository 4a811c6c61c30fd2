"""ProjectScanner — analyse every module of a project with bounded concurrency."""

from __future__ import annotations

import asyncio
import os
import threading
from collections.abc import Mapping

import structlog

from depsentinel.catalog import build_catalog
from depsentinel.classpath.base import ClasspathResolver
from depsentinel.extractors.registry import SymbolExtractor
from depsentinel.models import Module, ModuleFailure, ModuleResult, Project, ScanReport
from depsentinel.progress import ProgressTracker
from depsentinel.reconcile import finalize_module
from depsentinel.report import ReportSink
from depsentinel.usage import build_usage_index

log = structlog.get_logger("depsentinel.engine")

CancelEvent = asyncio.Event | threading.Event


class ProjectScanner:
    """Find unused dependencies across all modules of a project.

    Modules are independent and run concurrently, at most *concurrency* at
    a time. Within a module, catalog construction and source extraction run
    in parallel worker threads and are joined before reconciliation.
    Results are merged in module order, so the report never depends on
    which module finished first.
    """

    def __init__(
        self,
        resolver: ClasspathResolver,
        extractors: Mapping[str, SymbolExtractor] | None = None,
        concurrency: int | None = None,
    ) -> None:
        if concurrency is not None and concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        self.resolver = resolver
        self.extractors = extractors
        self.concurrency = concurrency or os.cpu_count() or 1
        self.progress = ProgressTracker()

    async def analyze_module(self, module: Module) -> ModuleResult:
        catalog, (usage, unparsable) = await asyncio.gather(
            asyncio.to_thread(build_catalog, module, self.resolver),
            asyncio.to_thread(build_usage_index, module, self.extractors),
        )
        return finalize_module(module, catalog, usage, unparsable)

    async def scan(
        self,
        project: Project,
        cancel: CancelEvent | None = None,
        sink: ReportSink | None = None,
    ) -> ScanReport:
        """Scan *project* and return the merged report.

        Setting *cancel* stops modules that have not started yet; modules
        already running finish normally. When *sink* is given, rows are
        appended to it and the report holds everything the sink contains.
        """
        progress = ProgressTracker()
        self.progress = progress
        sink = sink if sink is not None else ReportSink()
        sem = asyncio.Semaphore(self.concurrency)

        async def _run(module: Module) -> ModuleResult | ModuleFailure | None:
            async with sem:
                if cancel is not None and cancel.is_set():
                    progress.skip(module.name, "scan cancelled")
                    return None
                progress.start(module.name)
                try:
                    result = await self.analyze_module(module)
                except Exception as e:
                    log.error("scanner.module_failed", module=module.name, exc_info=True)
                    progress.fail(module.name, str(e))
                    return ModuleFailure(module=module.name, reason=f"{type(e).__name__}: {e}")
                progress.complete(module.name, result)
                return result

        log.info(
            "scanner.started",
            project=project.name,
            modules=len(project.modules),
            concurrency=self.concurrency,
        )
        outcomes = await asyncio.gather(*(_run(m) for m in project.modules))

        report = ScanReport(project=project.name, rows=())
        for outcome in outcomes:
            if outcome is None:
                report.cancelled = True
            elif isinstance(outcome, ModuleFailure):
                report.failures.append(outcome)
            else:
                sink.extend(outcome.rows)
                report.unresolved.extend(outcome.unresolved)
                report.warnings.extend(outcome.unparsable)
                report.modules_scanned += 1
        report.rows = sink.finalize()

        log.info(
            "scanner.completed",
            project=project.name,
            modules_scanned=report.modules_scanned,
            unused=len(report.rows),
            unresolved=len(report.unresolved),
            unparsable=len(report.warnings),
            failures=len(report.failures),
            cancelled=report.cancelled,
        )
        return report

    def scan_sync(
        self,
        project: Project,
        cancel: CancelEvent | None = None,
        sink: ReportSink | None = None,
    ) -> ScanReport:
        """Blocking wrapper around :meth:`scan` for callers without an event loop."""
        return asyncio.run(self.scan(project, cancel=cancel, sink=sink))


def scan_project(
    project: Project,
    resolver: ClasspathResolver,
    *,
    concurrency: int | None = None,
) -> ScanReport:
    """One-shot synchronous scan with the default extractors."""
    return ProjectScanner(resolver, concurrency=concurrency).scan_sync(project)
