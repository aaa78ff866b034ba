"""The renderable contracts every composable object implements.

``SqlTextSupplier`` is the universal contract: anything with
``sql(ctx) -> str`` can be placed in a composition.  The other ABCs mark
additional capabilities the composition engine looks for:

* :class:`SqlSymbolSupplier` -- has a short name (``"person"``) usable where an
  identifier rather than a full statement is wanted.
* :class:`SqlTextLintIssuesPopulator` -- contributes lint issues before
  rendering.
* :class:`SqlTextBehaviorSupplier` -- a directive evaluated at render time.
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from sqlaide.emit.context import SqlEmitContext
    from sqlaide.emit.lint import SqlLintIssues


class SqlTextSupplier(ABC):
    """Anything that renders to SQL text."""

    @abstractmethod
    def sql(self, ctx: SqlEmitContext) -> str:
        """Render this object as SQL text for ``ctx``."""


class SqlText(SqlTextSupplier):
    """A SQL fragment from a static string or a ``(ctx) -> str`` callable.

    Example::

        SqlText("CURRENT_TIMESTAMP")
        SqlText(lambda ctx: ctx.naming(quote_identifiers=True).table_name("t"))
    """

    def __init__(self, text: str | Callable[[SqlEmitContext], str]) -> None:
        self.text = text

    def sql(self, ctx: SqlEmitContext) -> str:
        return self.text(ctx) if callable(self.text) else self.text

    def __repr__(self) -> str:
        return f"SqlText({self.text!r})"


class SqlSymbolSupplier(ABC):
    """Anything with a short, renderable name."""

    @abstractmethod
    def sql_symbol(self, ctx: SqlEmitContext) -> str:
        """Return the (quoted) identifier for this object."""


def is_sql_text_supplier(o: object) -> bool:
    return isinstance(o, SqlTextSupplier)


def is_only_sql_symbol_supplier(o: object) -> bool:
    """True for objects with a symbol but no full SQL body (e.g. domains)."""
    return isinstance(o, SqlSymbolSupplier) and not isinstance(o, SqlTextSupplier)


class SqlTextLintIssuesPopulator(ABC):
    """Anything that contributes lint issues to a shared registry."""

    @abstractmethod
    def populate_sql_text_lint_issues(
        self,
        lint_issues: SqlLintIssues,
        ctx: SqlEmitContext,
    ) -> None:
        """Register this object's lint issues into ``lint_issues``."""


@dataclass(frozen=True)
class SqlInjection:
    """Raw text rendered verbatim, never quoted or delimited."""

    sql_injection: str


@dataclass(frozen=True)
class PersistableSqlText:
    """A fragment that should be handed to the caller's persistence hook.

    Attributes:
        sql_text_supplier: The fragment to persist.
        persist_dest: Destination name, or ``(ctx, index) -> name``.
    """

    sql_text_supplier: SqlTextSupplier
    persist_dest: str | Callable[[SqlEmitContext, int], str]

    def destination(self, ctx: SqlEmitContext, index: int) -> str:
        if callable(self.persist_dest):
            return self.persist_dest(ctx, index)
        return self.persist_dest


@dataclass(frozen=True)
class SqlTextEmitTransformer:
    """Rewrites the emitted text around a behavioral directive.

    Attributes:
        before: ``(text_so_far, expr_index) -> text``; applied to everything
            emitted before the directive.
        after: ``(next_literal, expr_index) -> literal``; applied to the
            literal that follows the directive.
    """

    before: Callable[[str, int], str]
    after: Callable[[str, int], str]


_LAST_LINE_RE = re.compile(r"\n[^\n]*\Z")
_FIRST_LINE_RE = re.compile(r"\A[^\n]*\n")

#: Deletes the line a directive sits on: the partial line already emitted
#: and the rest of the line in the following literal.
remove_line_from_emit_stream = SqlTextEmitTransformer(
    before=lambda text, _: _LAST_LINE_RE.sub("", text, count=1),
    after=lambda literal, _: _FIRST_LINE_RE.sub("\n", literal, count=1),
)

BehaviorResult = Union[
    SqlTextEmitTransformer,
    SqlTextSupplier,
    Sequence[SqlTextSupplier],
]


class SqlTextBehaviorSupplier(ABC):
    """A directive evaluated while rendering a composition."""

    @abstractmethod
    def execute_sql_behavior(self, ctx: SqlEmitContext) -> BehaviorResult:
        """Run the directive.

        Returns:
            Either fragments to insert in place of the directive or a
            :class:`SqlTextEmitTransformer` that rewrites the surrounding
            text.
        """


class SqlBehavior(SqlTextBehaviorSupplier):
    """Adapts a ``(ctx) -> result`` callable into a behavior supplier."""

    def __init__(self, behavior: Callable[[SqlEmitContext], BehaviorResult]) -> None:
        self.behavior = behavior

    def execute_sql_behavior(self, ctx: SqlEmitContext) -> BehaviorResult:
        return self.behavior(ctx)
