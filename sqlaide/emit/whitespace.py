"""Whitespace helpers for composing SQL from indented python source."""
from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from typing import Any

_INDENT_RE = re.compile(r"^[ \t]*(?=\S)", re.MULTILINE)

#: ``(literal_index) -> literal_text``
LiteralSupplier = Callable[[int], str]


def min_whitespace_indent(text: str) -> int:
    """Smallest indentation of any line that has content."""
    indents = [len(m) for m in _INDENT_RE.findall(text)]
    return min(indents) if indents else 0


def unindent_whitespace(text: str, remove_initial_newline: bool = True) -> str:
    """Remove the common indentation of ``text``.

    Unlike :func:`textwrap.dedent`, blank lines do not participate and the
    first newline is dropped so triple-quoted strings can start on their own
    line.
    """
    indent = min_whitespace_indent(text)
    result = re.sub(rf"^[ \t]{{{indent}}}", "", text, flags=re.MULTILINE) if indent else text
    return result[1:] if remove_initial_newline and result.startswith("\n") else result


def single_line_trim(text: str) -> str:
    """Collapse ``text`` onto a single line with single spaces."""
    return " ".join(text.split())


def whitespace_sensitive_literal_supplier(
    literals: Sequence[str],
    expressions: Sequence[Any],
    remove_initial_newline: bool = True,
) -> LiteralSupplier:
    """Return a supplier of unindented literals for a composition.

    The common indentation is computed over the whole composition (with a
    placeholder standing in for each expression) and then removed from the
    start of every line inside each literal.  Text that continues a line
    after an expression is left untouched.
    """
    sample = "".join(
        f"{literal}${{expr{i}}}" for i, literal in enumerate(literals[:-1])
    ) + (literals[-1] if literals else "")
    indent = min_whitespace_indent(sample)
    line_start = re.compile(rf"(?<=\n)[ \t]{{{indent}}}") if indent else None

    def supplier(index: int) -> str:
        text = literals[index]
        if line_start is not None:
            if index == 0:
                text = re.sub(rf"^[ \t]{{{indent}}}", "", text)
            text = line_start.sub("", text)
        if index == 0 and remove_initial_newline and text.startswith("\n"):
            text = text[1:]
        return text

    return supplier
