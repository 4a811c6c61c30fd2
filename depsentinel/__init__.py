"""depsentinel: find declared build dependencies that no source file uses."""

__version__ = "0.1.0"

from depsentinel.catalog import SymbolCatalog, build_catalog
from depsentinel.classpath import (
    ChainedResolver,
    ClasspathResolver,
    GradleCacheResolver,
    MavenRepositoryResolver,
    StaticClasspathResolver,
)
from depsentinel.exceptions import (
    DepSentinelError,
    ManifestError,
    UnparsableSourceError,
    UnresolvedDependencyError,
)
from depsentinel.extractors import SymbolExtractor
from depsentinel.models import (
    DependencyRecord,
    DependencyType,
    Module,
    ModuleResult,
    Project,
    ScanReport,
    SourceFile,
    UnparsableSource,
    UnresolvedDependency,
    UnusedDependencyRow,
)
from depsentinel.project import load_project
from depsentinel.reconcile import analyze_module, reconcile
from depsentinel.report import ReportSink
from depsentinel.scanner import ProjectScanner, scan_project
from depsentinel.usage import UsageIndex, build_usage_index

__all__ = [
    "ChainedResolver",
    "ClasspathResolver",
    "DepSentinelError",
    "DependencyRecord",
    "DependencyType",
    "GradleCacheResolver",
    "ManifestError",
    "MavenRepositoryResolver",
    "Module",
    "ModuleResult",
    "Project",
    "ProjectScanner",
    "ReportSink",
    "ScanReport",
    "SourceFile",
    "StaticClasspathResolver",
    "SymbolCatalog",
    "SymbolExtractor",
    "UnparsableSource",
    "UnparsableSourceError",
    "UnresolvedDependency",
    "UnresolvedDependencyError",
    "UnusedDependencyRow",
    "UsageIndex",
    "analyze_module",
    "build_catalog",
    "build_usage_index",
    "load_project",
    "reconcile",
    "scan_project",
]
