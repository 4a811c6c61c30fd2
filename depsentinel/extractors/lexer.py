"""Comment and literal stripping for JVM source text.

The scanners below blank out everything that is not code so that later
symbol matching cannot pick up names from comments or string contents.
Newlines are preserved so line-anchored patterns still work on the output.
"""

from __future__ import annotations

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = {v: k for k, v in _OPENERS.items()}


class LexError(ValueError):
    """Raised when source text is not lexically well formed."""

    def __init__(self, message: str, line: int):
        self.line = line
        super().__init__(f"line {line}: {message}")


class _Scanner:
    def __init__(self, text: str, *, nested_comments: bool, templates: bool) -> None:
        self.text = text
        self.pos = 0
        self.out: list[str] = []
        self.nested_comments = nested_comments
        self.templates = templates

    def line_at(self, pos: int) -> int:
        return self.text.count("\n", 0, pos) + 1

    def scan(self) -> str:
        self._code(in_template=False)
        return "".join(self.out)

    def _code(self, in_template: bool) -> None:
        text = self.text
        start = self.pos
        depth = 0
        while self.pos < len(text):
            c = text[self.pos]
            nxt = text[self.pos + 1 : self.pos + 2]
            if c == "/" and nxt == "/":
                end = text.find("\n", self.pos)
                self.pos = len(text) if end == -1 else end
            elif c == "/" and nxt == "*":
                self._block_comment()
            elif text.startswith('"""', self.pos):
                self._text_block()
            elif c == '"':
                self._string()
            elif c == "'":
                self._char()
            elif c == "`" and self.templates:
                self._backtick_name()
            elif in_template and c == "{":
                depth += 1
                self.out.append(c)
                self.pos += 1
            elif in_template and c == "}":
                self.pos += 1
                if depth == 0:
                    return
                depth -= 1
                self.out.append(c)
            else:
                self.out.append(c)
                self.pos += 1
        if in_template:
            raise LexError("unterminated string template", self.line_at(start))

    def _block_comment(self) -> None:
        text = self.text
        start = self.pos
        depth = 0
        while self.pos < len(text):
            if text.startswith("/*", self.pos) and (depth == 0 or self.nested_comments):
                depth += 1
                self.pos += 2
            elif text.startswith("*/", self.pos):
                depth -= 1
                self.pos += 2
                if depth == 0:
                    self.out.append(" ")
                    return
            else:
                if text[self.pos] == "\n":
                    self.out.append("\n")
                self.pos += 1
        raise LexError("unterminated block comment", self.line_at(start))

    def _template(self) -> None:
        # Kotlin "${expr}": the expression is code.
        self.pos += 2
        self.out.append(" ")
        self._code(in_template=True)
        self.out.append(" ")

    def _text_block(self) -> None:
        text = self.text
        start = self.pos
        self.pos += 3
        while self.pos < len(text):
            if text.startswith('"""', self.pos):
                self.pos += 3
                # Kotlin raw strings may end in more than three quotes.
                while text.startswith('"', self.pos):
                    self.pos += 1
                self.out.append('""')
                return
            c = text[self.pos]
            if c == "\\" and not self.templates:
                self.pos += 2
                continue
            if self.templates and text.startswith("${", self.pos):
                self._template()
                continue
            if c == "\n":
                self.out.append("\n")
            self.pos += 1
        raise LexError("unterminated text block", self.line_at(start))

    def _string(self) -> None:
        text = self.text
        start = self.pos
        self.pos += 1
        while self.pos < len(text):
            c = text[self.pos]
            if c == "\\":
                self.pos += 2
            elif c == '"':
                self.pos += 1
                self.out.append('""')
                return
            elif c == "\n":
                break
            elif self.templates and text.startswith("${", self.pos):
                self._template()
            else:
                self.pos += 1
        raise LexError("unterminated string literal", self.line_at(start))

    def _char(self) -> None:
        text = self.text
        start = self.pos
        self.pos += 1
        while self.pos < len(text):
            c = text[self.pos]
            if c == "\\":
                self.pos += 2
            elif c == "'":
                self.pos += 1
                self.out.append(" ")
                return
            elif c == "\n":
                break
            else:
                self.pos += 1
        raise LexError("unterminated character literal", self.line_at(start))

    def _backtick_name(self) -> None:
        text = self.text
        end = text.find("`", self.pos + 1)
        newline = text.find("\n", self.pos + 1)
        if end == -1 or (newline != -1 and newline < end):
            raise LexError("unterminated backtick identifier", self.line_at(self.pos))
        self.out.append(text[self.pos + 1 : end])
        self.pos = end + 1


def strip_code(text: str, *, nested_comments: bool = False, templates: bool = False) -> str:
    """Return *text* with comments and literal contents removed.

    ``nested_comments`` enables Kotlin-style nested block comments and
    ``templates`` enables Kotlin string templates, raw strings and
    backtick identifiers.
    """
    return _Scanner(text, nested_comments=nested_comments, templates=templates).scan()


def check_brackets(code: str) -> None:
    """Raise LexError unless (), [] and {} are balanced in stripped *code*."""
    stack: list[tuple[str, int]] = []
    line = 1
    for c in code:
        if c == "\n":
            line += 1
        elif c in _OPENERS:
            stack.append((c, line))
        elif c in _CLOSERS:
            if not stack or stack[-1][0] != _CLOSERS[c]:
                raise LexError(f"unexpected '{c}'", line)
            stack.pop()
    if stack:
        opener, opened_at = stack[-1]
        raise LexError(f"unclosed '{opener}'", opened_at)
