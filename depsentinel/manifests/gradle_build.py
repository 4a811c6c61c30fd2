"""Reader for Gradle build files (build.gradle / build.gradle.kts).

Extracts dependencies declared with standard Gradle configurations like
implementation, api, compileOnly, runtimeOnly, etc.

Handles both Groovy DSL and Kotlin DSL syntax:
  - implementation "group:artifact:version"
  - implementation("group:artifact:version")
  - implementation "group:artifact:$version"  → version kept unresolved
  - implementation group: 'group', name: 'artifact', version: 'version'
  - implementation(group = "group", name = "artifact", version = "version")
  - api(project(":submodule"))          → skipped (internal)
  - implementation(platform("g:a:v"))   → skipped (BOM)
  - implementation(libs.guava)          → skipped (version catalog)
"""

from __future__ import annotations

import re
from pathlib import Path

from depsentinel.manifests.registry import register_reader
from depsentinel.models import DependencyRecord, DependencyType

# Gradle configuration names (not exhaustive, but covers the common ones)
_CONFIGS = (
    r"\b(implementation|api|compileOnly|compileOnlyApi|runtimeOnly|"
    r"annotationProcessor|kapt|ksp|"
    r"testImplementation|testCompileOnly|testRuntimeOnly|"
    r"androidTestImplementation|debugImplementation|releaseImplementation|"
    r"optional|provided|compile|runtime|testCompile|testRuntime|"
    r"\w+Implementation|\w+Api|\w+CompileOnly|\w+RuntimeOnly)"
)

# Match: configuration("group:artifact:version") or configuration "group:artifact:version"
# Captures configuration, group, artifact and optional version
_DEP_RE = re.compile(
    rf"{_CONFIGS}"
    r"\s*\(?\s*"
    r"""["']"""                          # opening quote
    r"([A-Za-z0-9._-]+)"                # group
    r":"
    r"([A-Za-z0-9._-]+)"                # artifact
    r"""(?::([^"':\s]+))?"""         # optional version, incl. $v and ${v}
    r"""(?::[^"':\s]+)?"""           # optional classifier
    r"""["']"""                          # closing quote
)

# Match: configuration group: 'g', name: 'a', version: 'v' (Groovy)
#    or: configuration(group = "g", name = "a", version = "v") (Kotlin)
_MAP_RE = re.compile(
    rf"{_CONFIGS}"
    r"\s*\(?\s*"
    r"""group\s*[:=]\s*["']([A-Za-z0-9._-]+)["']\s*,\s*"""
    r"""name\s*[:=]\s*["']([A-Za-z0-9._-]+)["']"""
    r"""(?:\s*,\s*version\s*[:=]\s*["']([^"']+)["'])?"""
)

# Group 1 is a string literal (kept); anything else matched is a comment.
_COMMENT_RE = re.compile(
    r"""("(?:\\.|[^"\\\n])*"|'(?:\\.|[^'\\\n])*')|//[^\n]*|/\*.*?\*/""",
    re.DOTALL,
)


class GradleBuildReader:
    dependency_type = DependencyType.GRADLE
    file_patterns = ["**/build.gradle", "**/build.gradle.kts"]

    def read(self, file_path: Path, content: str) -> list[DependencyRecord]:
        content = _COMMENT_RE.sub(lambda m: m.group(1) or "", content)

        matches = [*_DEP_RE.finditer(content), *_MAP_RE.finditer(content)]
        matches.sort(key=lambda m: m.start())

        seen: set[DependencyRecord] = set()
        records: list[DependencyRecord] = []

        for m in matches:
            config, group, artifact, version = m.group(1, 2, 3, 4)

            record = DependencyRecord(
                type=self.dependency_type,
                group=group,
                artifact=artifact,
                version=version,
                scope=config,
            )

            # Dedup, first declaration wins
            if record in seen:
                continue
            seen.add(record)
            records.append(record)

        return records


register_reader(GradleBuildReader())
