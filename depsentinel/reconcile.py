"""Reconciliation Engine — classify each declared dependency as used or unused."""

from __future__ import annotations

from collections.abc import Mapping

import structlog

from depsentinel.catalog import SymbolCatalog, build_catalog
from depsentinel.classpath.base import ClasspathResolver
from depsentinel.extractors.registry import SymbolExtractor
from depsentinel.models import (
    Module,
    ModuleResult,
    UnparsableSource,
    UnresolvedDependency,
    UnusedDependencyRow,
)
from depsentinel.usage import UsageIndex, build_usage_index

log = structlog.get_logger("depsentinel.engine")


def reconcile(module: Module, catalog: SymbolCatalog, usage: UsageIndex) -> ModuleResult:
    """Classify every dependency of *module*, in declaration order.

    - unresolved in *catalog*  -> resolution-failure signal, no row
    - any exported symbol used -> used, no row
    - otherwise                -> one ``UnusedDependencyRow``

    A symbol exported by several dependencies credits all of them.
    """
    result = ModuleResult(module=module.name)
    for dep in module.dependencies:
        if not catalog.is_resolved(dep):
            reason = catalog.unresolved_reason(dep) or "not in symbol catalog"
            result.unresolved.append(
                UnresolvedDependency(module=module.name, dependency=dep, reason=reason)
            )
            continue

        evidence = usage.evidence(catalog.symbols(dep), catalog.packages(dep))
        if evidence:
            result.used[dep] = evidence
            continue

        log.info(
            "reconcile.unused_dependency",
            module=module.name,
            dependency_type=dep.type.value,
            dependency=f"{dep.group}:{dep.artifact}",
        )
        result.rows.append(
            UnusedDependencyRow(
                module=module.name,
                dependency_type=dep.type,
                group=dep.group,
                artifact=dep.artifact,
            )
        )
    return result


def analyze_module(
    module: Module,
    resolver: ClasspathResolver,
    extractors: Mapping[str, SymbolExtractor] | None = None,
) -> ModuleResult:
    """Catalog, extract and reconcile one module synchronously."""
    catalog = build_catalog(module, resolver)
    usage, unparsable = build_usage_index(module, extractors)
    return finalize_module(module, catalog, usage, unparsable)


def finalize_module(
    module: Module,
    catalog: SymbolCatalog,
    usage: UsageIndex,
    unparsable: list[UnparsableSource],
) -> ModuleResult:
    """Reconcile and attach the extraction warnings to the result."""
    result = reconcile(module, catalog, usage)
    result.unparsable.extend(unparsable)
    if unparsable and result.rows:
        log.warning(
            "reconcile.incomplete_usage",
            module=module.name,
            unparsable_files=[w.path for w in unparsable],
            unused=[f"{r.group}:{r.artifact}" for r in result.rows],
        )
    return result
