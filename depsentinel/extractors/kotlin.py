"""Kotlin symbol extractor."""

from __future__ import annotations

import re

from depsentinel.extractors.jvm import WILDCARD, Header, JvmExtractor, is_type_name
from depsentinel.extractors.registry import register_extractor

_PACKAGE_RE = re.compile(r"^[ \t]*package[ \t]+([\w.]+)[ \t]*;?", re.MULTILINE)
_IMPORT_RE = re.compile(
    r"^[ \t]*import[ \t]+([\w.]+?)(\.\*)?(?:[ \t]+as[ \t]+(\w+))?[ \t]*;?[ \t]*$",
    re.MULTILINE,
)


class KotlinExtractor(JvmExtractor):
    language = "kotlin"
    file_extensions = [".kt", ".kts"]
    nested_comments = True
    templates = True

    def parse_header(self, code: str) -> tuple[Header, str]:
        header = Header()
        m = _PACKAGE_RE.search(code)
        if m:
            header.package = m.group(1)

        for m in _IMPORT_RE.finditer(code):
            path, star, alias = m.group(1, 2, 3)
            if star:
                header.wildcards.append(path)
                header.symbols.add(path + WILDCARD)
                if is_type_name(path.rpartition(".")[2]):
                    # import a.b.Type.*  brings in the members of Type.
                    header.symbols.add(path)
                continue

            header.symbols.add(path)
            owner, _, name = path.rpartition(".")
            if alias:
                header.imports[alias] = path
            elif is_type_name(name):
                header.imports[name] = path

            if not is_type_name(name) and owner:
                # Top-level functions and properties compile into a facade
                # class (FooKt) of the owning package, whose name the source
                # never mentions.
                owner_name = owner.rpartition(".")[2]
                header.symbols.add(owner if is_type_name(owner_name) else owner + WILDCARD)

        body = _IMPORT_RE.sub("", _PACKAGE_RE.sub("", code))
        return header, body


register_extractor(KotlinExtractor())
