"""Shared symbol resolution for JVM languages.

A file's references are recovered without compiling it: the package and
import declarations give the name bindings, and every dotted identifier
chain in the remaining code is resolved against them. Names that cannot be
bound exactly produce candidate qualified names (current package and
wildcard-imported packages); a candidate only matters if some dependency
really exports it.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field

from depsentinel.exceptions import UnparsableSourceError
from depsentinel.extractors.lexer import LexError, check_brackets, strip_code
from depsentinel.models import SourceFile, SymbolSet

WILDCARD = ".*"

_CHAIN_RE = re.compile(r"(?<![\w$.])[A-Za-z_$][\w$]*(?:\s*\.\s*[A-Za-z_$][\w$]*)*")
_DOT_RE = re.compile(r"\s*\.\s*")


@dataclass
class Header:
    """Name bindings declared at the top of a source file."""

    package: str = ""
    imports: dict[str, str] = field(default_factory=dict)  # simple name -> FQN
    wildcards: list[str] = field(default_factory=list)  # packages / types
    symbols: set[str] = field(default_factory=set)  # referenced by the imports themselves


def _prefixes(base: str, rest: list[str]) -> Iterator[str]:
    yield base
    name = base
    for segment in rest:
        name = f"{name}.{segment}"
        yield name


def is_type_name(segment: str) -> bool:
    return segment[:1].isupper()


class JvmExtractor(ABC):
    """Base class for JVM language extractors.

    Subclasses provide the language name, extensions, lexer options and
    ``parse_header``.
    """

    language: str = ""
    file_extensions: list[str] = []
    nested_comments = False
    templates = False

    def extract(self, source: SourceFile) -> SymbolSet:
        if source.resolved_symbols is not None:
            return source.resolved_symbols
        try:
            text = source.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise UnparsableSourceError(source.path, f"not valid UTF-8: {e.reason}") from e
        try:
            code = strip_code(
                text, nested_comments=self.nested_comments, templates=self.templates
            )
            check_brackets(code)
        except LexError as e:
            raise UnparsableSourceError(source.path, str(e)) from e

        header, body = self.parse_header(code)
        symbols = set(header.symbols)
        for match in _CHAIN_RE.finditer(body):
            symbols.update(self._resolve_chain(_DOT_RE.split(match.group(0)), header))
        return frozenset(symbols)

    @abstractmethod
    def parse_header(self, code: str) -> tuple[Header, str]:
        """Return the file's name bindings and the code with declarations removed."""

    @staticmethod
    def _resolve_chain(segments: list[str], header: Header) -> Iterator[str]:
        head, rest = segments[0], segments[1:]
        bound = header.imports.get(head)
        if bound is not None:
            yield from _prefixes(bound, rest)
            return

        if not is_type_name(head):
            # Fully-qualified use, e.g. com.google.common.base.Strings.isNullOrEmpty
            for i, segment in enumerate(rest):
                if is_type_name(segment):
                    yield from _prefixes(".".join(segments[: i + 2]), rest[i + 1 :])
                    return
            return

        for owner in [header.package, *header.wildcards]:
            base = f"{owner}.{head}" if owner else head
            yield from _prefixes(base, rest)
