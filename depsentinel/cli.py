"""CLI entry point: depsentinel.

Subcommands:
    depsentinel scan /path/to/project                  # report unused dependencies
    depsentinel scan . --classpath types.json --format csv
    depsentinel manifests /path/to/project             # list declared dependencies
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from depsentinel.classpath import (
    ChainedResolver,
    ClasspathResolver,
    GradleCacheResolver,
    MavenRepositoryResolver,
    StaticClasspathResolver,
)
from depsentinel.config import Settings
from depsentinel.core.logging import setup_logging
from depsentinel.project import load_project, read_module_dependencies
from depsentinel.report import render_csv, render_json, render_table
from depsentinel.scanner import ProjectScanner

EXIT_INCOMPLETE = 2


def _load_settings() -> Settings:
    try:
        return Settings.from_env()
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _build_resolver(
    classpath_file: Path | None,
    local_repo: Path,
    gradle_cache: Path,
) -> ClasspathResolver:
    """Static table first (if given), then the Maven repository, then the Gradle cache."""
    resolvers: list[ClasspathResolver] = []
    if classpath_file is not None:
        try:
            resolvers.append(StaticClasspathResolver.from_json_file(classpath_file))
        except (json.JSONDecodeError, ValueError) as e:
            click.echo(f"Error: Invalid classpath file {classpath_file}: {e}", err=True)
            sys.exit(1)
    resolvers.append(MavenRepositoryResolver(local_repo))
    resolvers.append(GradleCacheResolver(gradle_cache))
    return ChainedResolver(*resolvers)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"]),
    default=None,
    help="Log renderer (default: $DEPSENTINEL_LOG_FORMAT or console)",
)
def main(verbose: bool, log_format: str | None) -> None:
    """depsentinel: find declared build dependencies that no source file uses."""
    setup_logging("DEBUG" if verbose else None, log_format)


@main.command("scan")
@click.argument("root", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--name", default=None, help="Project name (default: root directory name)")
@click.option(
    "--classpath",
    "classpath_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help='JSON file mapping "group:artifact[:version]" to exported type names',
)
@click.option(
    "--local-repo",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Maven local repository (default: $DEPSENTINEL_LOCAL_REPOSITORY or ~/.m2/repository)",
)
@click.option(
    "--gradle-cache",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Gradle module cache (default: $DEPSENTINEL_GRADLE_CACHE or ~/.gradle/caches/modules-2)",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["table", "csv", "json"]),
    default="table",
    help="Report format",
)
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.option("--concurrency", type=click.IntRange(min=1), default=None, help="Modules analysed at once")
@click.option(
    "--strict",
    is_flag=True,
    help="Exit with status 2 if any dependency is unresolved or any module failed",
)
def scan(
    root: Path,
    name: str | None,
    classpath_file: Path | None,
    local_repo: Path | None,
    gradle_cache: Path | None,
    fmt: str,
    output: Path | None,
    concurrency: int | None,
    strict: bool,
) -> None:
    """Report declared dependencies that no source file references."""
    settings = _load_settings()
    resolver = _build_resolver(
        classpath_file,
        local_repo or settings.local_repository,
        gradle_cache or settings.gradle_cache,
    )
    project = load_project(root, name)
    scanner = ProjectScanner(resolver, concurrency=concurrency or settings.concurrency)
    report = scanner.scan_sync(project)

    if fmt == "json":
        text = render_json(report)
    elif fmt == "csv":
        text = render_csv(report.rows)
    else:
        text = render_table(report.rows)

    if output is not None:
        output.write_text(text)
        click.echo(f"Report written to {output}", err=True)
    else:
        click.echo(text, nl=False)

    for u in report.unresolved:
        click.echo(
            f"Unresolved: [{u.module}] {u.dependency.coordinates} ({u.reason})", err=True
        )
    for w in report.warnings:
        click.echo(f"Unparsable: [{w.module}] {w.path} ({w.reason})", err=True)
    for f in report.failures:
        click.echo(f"Module failed: [{f.module}] {f.reason}", err=True)

    if strict and not report.complete:
        sys.exit(EXIT_INCOMPLETE)


@main.command("manifests")
@click.argument("root", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def manifests(root: Path, as_json: bool) -> None:
    """List the dependencies each module declares."""
    root = root.resolve()
    by_dir = read_module_dependencies(root)
    if not by_dir:
        click.echo("No build manifests found.")
        return

    modules = sorted(by_dir, key=lambda d: (d != root, d.relative_to(root).as_posix()))
    if as_json:
        rows = [
            {
                "module": d.relative_to(root).as_posix(),
                "dependency_type": r.type.value,
                "group": r.group,
                "artifact": r.artifact,
                "version": r.version,
                "scope": r.scope,
            }
            for d in modules
            for r in by_dir[d]
        ]
        click.echo(json.dumps(rows, indent=2))
        return

    total = sum(len(records) for records in by_dir.values())
    click.echo(f"Found {total} dependencies in {len(modules)} module(s)\n")
    for d in modules:
        click.echo(f"  {d.relative_to(root).as_posix()}")
        for r in by_dir[d]:
            scope = f"  ({r.scope})" if r.scope else ""
            click.echo(f"    {r.type.value:6s} {r.coordinates}{scope}")
        click.echo()


if __name__ == "__main__":
    main()
