"""Project loader — build a Project from a source tree on disk.

Every directory holding a recognised build manifest is one module. A
module's sources are the files below its directory that some registered
extractor handles, excluding nested modules and build/VCS directories.
"""

from __future__ import annotations

import os
from pathlib import Path

import structlog

import depsentinel.manifests  # noqa: F401
from depsentinel.exceptions import ManifestError
from depsentinel.extractors.registry import extractor_for_path
from depsentinel.manifests.registry import EXCLUDED_DIRS, discover_manifests
from depsentinel.models import DependencyRecord, Module, Project, SourceFile

log = structlog.get_logger("depsentinel.project")

# Kotlin build scripts configure the build; they are not module sources.
_BUILD_SCRIPTS = frozenset({"build.gradle.kts", "settings.gradle.kts"})


def read_module_dependencies(root: Path) -> dict[Path, list[DependencyRecord]]:
    """Map each module directory under *root* to its declared dependencies."""
    by_dir: dict[Path, list[DependencyRecord]] = {}
    for reader, file_path in discover_manifests(root):
        records = by_dir.setdefault(file_path.parent, [])
        content = file_path.read_text(encoding="utf-8", errors="replace")
        try:
            parsed = reader.read(file_path, content)
        except ManifestError as e:
            log.warning(
                "project.manifest_unreadable",
                path=file_path.relative_to(root).as_posix(),
                error=str(e),
            )
            continue
        seen = set(records)
        for record in parsed:
            if record not in seen:
                seen.add(record)
                records.append(record)
    return by_dir


def collect_sources(root: Path, module_dir: Path, other_modules: set[Path]) -> list[SourceFile]:
    """Source files owned by the module at *module_dir*, sorted by path."""
    sources: list[SourceFile] = []
    for dirpath, dirnames, filenames in os.walk(module_dir):
        current = Path(dirpath)
        dirnames[:] = sorted(
            d for d in dirnames if d not in EXCLUDED_DIRS and current / d not in other_modules
        )
        for filename in sorted(filenames):
            if filename in _BUILD_SCRIPTS:
                continue
            rel_path = (current / filename).relative_to(root).as_posix()
            extractor = extractor_for_path(rel_path)
            if extractor is None:
                continue
            sources.append(
                SourceFile(
                    path=rel_path,
                    language=extractor.language,
                    content=(current / filename).read_bytes(),
                )
            )
    return sources


def load_project(root: Path, name: str | None = None) -> Project:
    """Discover modules, their declared dependencies and their sources under *root*."""
    root = root.resolve()
    by_dir = read_module_dependencies(root)
    module_dirs = sorted(by_dir, key=lambda d: (d != root, d.relative_to(root).as_posix()))
    project_name = name or root.name

    modules: list[Module] = []
    for module_dir in module_dirs:
        others = set(module_dirs) - {module_dir}
        module_name = project_name if module_dir == root else module_dir.relative_to(root).as_posix()
        module = Module(
            name=module_name,
            path=module_dir,
            dependencies=tuple(by_dir[module_dir]),
            sources=tuple(collect_sources(root, module_dir, others)),
        )
        log.debug(
            "project.module_loaded",
            module=module.name,
            dependencies=len(module.dependencies),
            sources=len(module.sources),
        )
        modules.append(module)

    return Project(name=project_name, modules=tuple(modules))
