"""Indented text buffer used to render file contents.

Writers accept file contents as bytes, str, or a callable that fills a
Text buffer line by line:

    def contents(text: Text) -> None:
        text.line("java_library(")
        with text.indent():
            text.line('name = "lib",')
        text.line(")")
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

_INDENT = "  "


class Text:
    """Line-oriented text accumulator with two-space indentation."""

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._depth = 0

    def line(self, contents: str = "") -> None:
        if contents:
            self._lines.append(_INDENT * self._depth + contents)
        else:
            self._lines.append("")

    def lines(self, *contents: str) -> None:
        for c in contents:
            self.line(c)

    @contextmanager
    def indent(self) -> Iterator[Text]:
        self._depth += 1
        try:
            yield self
        finally:
            self._depth -= 1

    def getvalue(self) -> str:
        return "".join(f"{line}\n" for line in self._lines)


Contents = bytes | str | Callable[[Text], None]


def render(contents: Contents) -> bytes:
    """Turn any accepted contents form into UTF-8 bytes."""
    if isinstance(contents, bytes):
        return contents
    if isinstance(contents, str):
        return contents.encode("utf-8")
    text = Text()
    contents(text)
    return text.getvalue().encode("utf-8")
