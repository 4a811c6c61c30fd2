"""Java symbol extractor."""

from __future__ import annotations

import re

from depsentinel.extractors.jvm import WILDCARD, Header, JvmExtractor, is_type_name
from depsentinel.extractors.registry import register_extractor

_PACKAGE_RE = re.compile(r"^\s*package\s+([\w$.\s]+?)\s*;", re.MULTILINE)
_IMPORT_RE = re.compile(
    r"^\s*import\s+(static\s+)?([\w$.\s]+?)\s*(\.\s*\*)?\s*;", re.MULTILINE
)
_SPACE_RE = re.compile(r"\s+")


class JavaExtractor(JvmExtractor):
    language = "java"
    file_extensions = [".java"]

    def parse_header(self, code: str) -> tuple[Header, str]:
        header = Header()
        m = _PACKAGE_RE.search(code)
        if m:
            header.package = _SPACE_RE.sub("", m.group(1))

        for m in _IMPORT_RE.finditer(code):
            is_static = m.group(1) is not None
            path = _SPACE_RE.sub("", m.group(2))
            owner, _, name = path.rpartition(".")

            if m.group(3):
                # import a.b.*;  /  import static a.b.Type.*;
                header.wildcards.append(path)
                header.symbols.add(path + WILDCARD)
                if is_static or is_type_name(name):
                    header.symbols.add(path)
                continue

            header.symbols.add(path)
            if is_static:
                # import static a.b.Type.member;
                header.symbols.add(owner)
                if not is_type_name(name):
                    continue
            header.imports[name] = path

        body = _IMPORT_RE.sub("", _PACKAGE_RE.sub("", code))
        return header, body


register_extractor(JavaExtractor())
