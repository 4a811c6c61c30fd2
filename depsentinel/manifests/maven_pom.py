"""Reader for Maven pom.xml files."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from pathlib import Path

from depsentinel.exceptions import ManifestError
from depsentinel.manifests.registry import register_reader
from depsentinel.models import DependencyRecord, DependencyType

_NS = "{http://maven.apache.org/POM/4.0.0}"


_PROP_RE = re.compile(r"\$\{([^}]+)\}")


def _resolve_props(value: str, props: dict[str, str]) -> str:
    """Replace ${property} placeholders with values from <properties>."""

    def _replace(m: re.Match) -> str:
        key = m.group(1)
        return props.get(key, m.group(0))  # keep original if not found

    return _PROP_RE.sub(_replace, value)


def _text(element: ET.Element | None) -> str | None:
    if element is None:
        return None
    return element.text.strip() if element.text else None


class MavenPomReader:
    dependency_type = DependencyType.MAVEN
    file_patterns = ["**/pom.xml"]

    def read(self, file_path: Path, content: str) -> list[DependencyRecord]:
        try:
            root = ET.fromstring(content)
        except ET.ParseError as e:
            raise ManifestError(f"{file_path}: malformed POM: {e}") from e

        ns = _NS if root.tag.startswith(_NS) else ""
        props = self._extract_properties(root, ns)

        seen: set[DependencyRecord] = set()
        records: list[DependencyRecord] = []

        # Direct dependencies only: <dependencyManagement> and plugin
        # dependencies never reach the module's compile classpath.
        deps_el = root.find(f"{ns}dependencies")
        if deps_el is None:
            return records

        for dep_el in deps_el.findall(f"{ns}dependency"):
            group_id = _text(dep_el.find(f"{ns}groupId"))
            artifact_id = _text(dep_el.find(f"{ns}artifactId"))
            if not group_id or not artifact_id:
                continue

            scope = _text(dep_el.find(f"{ns}scope")) or "compile"
            packaging = _text(dep_el.find(f"{ns}type")) or "jar"
            if scope == "import" or packaging == "pom":
                continue

            version = _text(dep_el.find(f"{ns}version"))
            if version:
                version = _resolve_props(version, props)

            record = DependencyRecord(
                type=self.dependency_type,
                group=_resolve_props(group_id, props),
                artifact=_resolve_props(artifact_id, props),
                version=version,
                scope=scope,
            )
            if record in seen:
                continue
            seen.add(record)
            records.append(record)

        return records

    @staticmethod
    def _extract_properties(root: ET.Element, ns: str) -> dict[str, str]:
        """Collect <properties> plus the project.* coordinates for ${...} substitution."""
        props: dict[str, str] = {}
        parent = root.find(f"{ns}parent")
        for tag in ("groupId", "version"):
            value = _text(root.find(f"{ns}{tag}"))
            if value is None and parent is not None:
                value = _text(parent.find(f"{ns}{tag}"))
            if value is not None:
                props[f"project.{tag}"] = value
        props_el = root.find(f"{ns}properties")
        if props_el is not None:
            for child in props_el:
                if not isinstance(child.tag, str):
                    continue
                # Strip namespace from tag name
                tag = child.tag.split("}")[-1] if "}" in child.tag else child.tag
                if child.text:
                    props[tag] = child.text.strip()
        return props


register_reader(MavenPomReader())
