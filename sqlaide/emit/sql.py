"""The SQL composition engine.

Python has no tagged template literals, so a composition is built from an
ordered list of parts: ``str`` parts are literal text, everything else is an
expression slot::

    from sqlaide.emit import SQL, typical_sql_text_supplier_options

    options = typical_sql_text_supplier_options()
    ddl = SQL(options)(
        "-- generated, do not edit\\n",
        options.sql_text_lint_state.sql_text_lint_summary(), "\\n\\n",
        person_table, "\\n",
        person_table.indexes,
    )
    print(ddl.sql(ctx))

The tagged-template form (``SQL(options).template(literals, *expressions)``)
accepts the literals explicitly, which is needed when a naked ``str`` should
be treated as an expression.

Rendering is done in passes:

1. *Preprocess*: every slot (arrays flattened one level) contributes lint
   issues and documentation comments and fires its ``*_encountered`` event.
2. *Tokenize*: slots are rendered into a flat list of literal, text,
   delimiter and directive tokens.  Behaviors are executed here, in order.
3. *Transform*: tokens are concatenated; each directive's ``before`` is
   applied to the text accumulated so far and its ``after`` to the next
   literal.

Rendering has side effects on the registries held by the options object
(lint issues, documentation comments, catalog, persistence index); use
independent options instances for independent render sessions.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Literal, NamedTuple

from sqlaide.emit.comment import SqlObjectComment, SqlObjectsCommentsSupplier
from sqlaide.emit.context import SqlEmitContext
from sqlaide.emit.lint import SqlLintIssue, SqlLintIssues, is_fatal_issue
from sqlaide.emit.supplier import (
    BehaviorResult,
    PersistableSqlText,
    SqlBehavior,
    SqlInjection,
    SqlSymbolSupplier,
    SqlText,
    SqlTextBehaviorSupplier,
    SqlTextEmitTransformer,
    SqlTextLintIssuesPopulator,
    SqlTextSupplier,
    is_only_sql_symbol_supplier,
)
from sqlaide.emit.whitespace import LiteralSupplier, whitespace_sensitive_literal_supplier

if TYPE_CHECKING:
    from sqlaide.catalog import SqlCatalog

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class SqlTextEvents:
    """Listener for composition events; override the methods you need.

    Events fire synchronously, in the left-to-right, depth-first order in
    which expressions appear in the composition.
    """

    def symbol_encountered(self, ctx: SqlEmitContext, sss: SqlSymbolSupplier) -> None:
        pass

    def sql_encountered(self, ctx: SqlEmitContext, sts: SqlTextSupplier) -> None:
        pass

    def persistable_sql_encountered(self, ctx: SqlEmitContext, sts: SqlTextSupplier) -> None:
        pass

    def sql_behavior_encountered(self, ctx: SqlEmitContext, stbs: SqlTextBehaviorSupplier) -> None:
        pass

    def symbol_emitted(self, ctx: SqlEmitContext, sss: SqlSymbolSupplier, symbol: str) -> None:
        pass

    def sql_emitted(self, ctx: SqlEmitContext, sts: SqlTextSupplier, sql: str) -> None:
        pass

    def sql_persisted(
        self,
        ctx: SqlEmitContext,
        dest: str,
        persistable: PersistableSqlText,
        emitted: SqlTextSupplier | None,
    ) -> None:
        pass

    def behavior_activity(
        self,
        ctx: SqlEmitContext,
        stbs: SqlTextBehaviorSupplier,
        result: BehaviorResult,
    ) -> None:
        pass


# ---------------------------------------------------------------------------
# Lint state
# ---------------------------------------------------------------------------


def _unique_comment_lines(ctx: SqlEmitContext, issues: SqlLintIssues, no_issues_text: str) -> str:
    steo = ctx.sql_text_emit_options
    if not issues.lint_issues:
        return steo.comments(no_issues_text)
    lines = dict.fromkeys(steo.comments(li.message()) for li in issues.lint_issues)
    return "\n".join(lines)


class SqlTextLintState:
    """The two lint registries of a render session and their summaries.

    Attributes:
        lint_sql_text: Issues about the SQL being generated.
        lint_sql_tmpl_engine: Issues about the composition itself (e.g. a
            persistable fragment with no persistence hook).
    """

    def __init__(self) -> None:
        self.lint_sql_text = SqlLintIssues()
        self.lint_sql_tmpl_engine = SqlLintIssues()

    @staticmethod
    def is_fatal_issue(issue: SqlLintIssue) -> bool:
        return is_fatal_issue(issue)

    def sql_text_lint_summary(
        self,
        no_issues_text: str = "no SQL lint issues (typicalSqlTextLintManager)",
    ) -> SqlTextBehaviorSupplier:
        """A directive that renders the unique SQL lint issues as comments.

        The summary is evaluated during rendering, after every slot has been
        preprocessed, so it reports issues of objects that appear later in
        the same composition.
        """
        registry = self.lint_sql_text
        return SqlBehavior(
            lambda _: SqlText(lambda ctx: _unique_comment_lines(ctx, registry, no_issues_text))
        )

    def sql_tmpl_engine_lint_summary(
        self,
        no_issues_text: str = "no template engine lint issues (typicalSqlTextLintManager)",
    ) -> SqlTextBehaviorSupplier:
        registry = self.lint_sql_tmpl_engine
        return SqlBehavior(
            lambda _: SqlText(lambda ctx: _unique_comment_lines(ctx, registry, no_issues_text))
        )


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


@dataclass
class PersistIndexer:
    """Counts persistable fragments across a render session."""

    active_index: int = 0


#: ``(ctx, persistable, indexer) -> remark to inline | None``
PersistHook = Callable[[SqlEmitContext, PersistableSqlText, PersistIndexer], SqlTextSupplier | None]


def default_expr_in_array_delim(_entry: Any, is_last: bool) -> str:
    return "" if is_last else "\n"


@dataclass
class SqlTextSupplierOptions:
    """Options and shared mutable state for one render session.

    The dataclass defaults render literally (no delimiter, no unindenting,
    no persistence); :func:`typical_sql_text_supplier_options` returns the
    conventional configuration.

    Attributes:
        sql_suppliers_delim_text: Appended after each SQL fragment unless
            the text already ends with it.
        symbols_first: Render anything with a symbol as its symbol.
        quote_naked_scalars: ``(value) -> (value, quoted)`` for naked str
            and number slots; ``None`` emits them verbatim.
        expr_in_array_delim: ``(entry, is_last) -> text`` between array
            elements.
        literal_supplier: ``(literals, expressions) -> (index) -> literal``.
        persist: Caller-supplied persistence hook.
        persist_indexer: Shared persistence counter.
        sql_text_lint_state: Shared lint registries.
        sql_object_comments: Shared documentation-comment accumulator.
        catalog: Caller-owned catalog of tables and views encountered.
        events: Additional event listeners.
    """

    sql_suppliers_delim_text: str | None = None
    symbols_first: bool = False
    quote_naked_scalars: Callable[[Any], tuple[Any, str]] | None = None
    expr_in_array_delim: Callable[[Any, bool], str] = default_expr_in_array_delim
    literal_supplier: Callable[[Sequence[str], Sequence[Any]], LiteralSupplier] | None = None
    persist: PersistHook | None = None
    persist_indexer: PersistIndexer = field(default_factory=PersistIndexer)
    sql_text_lint_state: SqlTextLintState | None = None
    sql_object_comments: list[SqlObjectComment] = field(default_factory=list)
    catalog: SqlCatalog | None = None
    events: list[SqlTextEvents] = field(default_factory=list)

    def listeners(self) -> list[SqlTextEvents]:
        if self.catalog is None:
            return self.events
        return [*self.events, self.catalog]


def typical_persist(
    ctx: SqlEmitContext,
    persistable: PersistableSqlText,
    indexer: PersistIndexer,
) -> SqlTextSupplier:
    """Persistence hook that only leaves a remark in the output."""
    dest = persistable.destination(ctx, indexer.active_index)
    return SqlText(f"-- encountered persistence request for {dest}")


def typical_sql_text_supplier_options(**overrides: Any) -> SqlTextSupplierOptions:
    """Options with ``;`` delimiters, unindented literals, a remark-only
    persistence hook and a fresh lint state.

    Args:
        **overrides: Any :class:`SqlTextSupplierOptions` field.
    """
    settings: dict[str, Any] = {
        "sql_suppliers_delim_text": ";",
        "literal_supplier": whitespace_sensitive_literal_supplier,
        "persist": typical_persist,
        "sql_text_lint_state": SqlTextLintState(),
    }
    settings.update(overrides)
    return SqlTextSupplierOptions(**settings)


def sql_objects_comments(
    options: SqlTextSupplierOptions,
    no_comments_text: str = "no SQL object comments",
) -> SqlTextBehaviorSupplier:
    """A directive that renders the documentation comments accumulated in
    ``options`` (one ``COMMENT ON`` statement per line)."""

    def render(ctx: SqlEmitContext) -> str:
        if not options.sql_object_comments:
            return ctx.sql_text_emit_options.comments(no_comments_text)
        statements = dict.fromkeys(f"{c.sql(ctx)};" for c in options.sql_object_comments)
        return "\n".join(statements)

    return SqlBehavior(lambda _: SqlText(render))


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------


class _Token(NamedTuple):
    kind: Literal["literal", "text", "delim", "directive"]
    text: str = ""
    index: int = 0
    transformer: SqlTextEmitTransformer | None = None


_NAKED_SCALARS = (str, int, float, Decimal)


class ComposedSql(SqlTextSupplier, SqlTextLintIssuesPopulator):
    """A composition ready to render.

    Attributes:
        literals: Literal fragments; one more than ``expressions``.
        expressions: Expression slots in order.
        options: The render session options.
    """

    def __init__(
        self,
        literals: Sequence[str],
        expressions: Sequence[Any],
        options: SqlTextSupplierOptions,
    ) -> None:
        if len(literals) != len(expressions) + 1:
            raise ValueError(
                f"A composition needs exactly one more literal than expressions "
                f"(got {len(literals)} literals, {len(expressions)} expressions)."
            )
        self.literals = list(literals)
        self.expressions = list(expressions)
        self.options = options
        if options.literal_supplier is not None:
            self._literal: LiteralSupplier = options.literal_supplier(self.literals, self.expressions)
        else:
            self._literal = self.literals.__getitem__

    # -- public ---------------------------------------------------------------

    def sql(self, ctx: SqlEmitContext) -> str:
        expressions = [self._resolve(ctx, e) for e in self.expressions]
        for expr in expressions:
            for e in self._flatten(expr):
                self._preprocess(ctx, e)
        return self._transform(self._tokenize(ctx, expressions))

    def populate_sql_text_lint_issues(self, lint_issues: SqlLintIssues, ctx: SqlEmitContext) -> None:
        for expr in self.expressions:
            for e in self._flatten(self._resolve(ctx, expr)):
                if isinstance(e, SqlTextLintIssuesPopulator):
                    e.populate_sql_text_lint_issues(lint_issues, ctx)

    # -- helpers --------------------------------------------------------------

    def _resolve(self, ctx: SqlEmitContext, expr: Any) -> Any:
        if callable(expr) and not isinstance(expr, type):
            return expr(ctx, self.options)
        return expr

    @staticmethod
    def _flatten(expr: Any) -> list[Any]:
        return list(expr) if isinstance(expr, (list, tuple)) else [expr]

    def _is_symbol(self, expr: Any) -> bool:
        return is_only_sql_symbol_supplier(expr) or (
            self.options.symbols_first and isinstance(expr, SqlSymbolSupplier)
        )

    def _emit(self, event: str, *args: Any) -> None:
        logger.debug("composition event %s: %r", event, args[1] if len(args) > 1 else None)
        for listener in self.options.listeners():
            getattr(listener, event)(*args)

    # -- pass 1: preprocess ---------------------------------------------------

    def _preprocess(self, ctx: SqlEmitContext, expr: Any) -> None:
        lint_state = self.options.sql_text_lint_state
        if lint_state is not None and isinstance(expr, SqlTextLintIssuesPopulator):
            expr.populate_sql_text_lint_issues(lint_state.lint_sql_text, ctx)
        if self._is_symbol(expr):
            self._emit("symbol_encountered", ctx, expr)
            return
        if isinstance(expr, PersistableSqlText):
            self._emit("persistable_sql_encountered", ctx, expr.sql_text_supplier)
        elif isinstance(expr, SqlTextSupplier):
            self._emit("sql_encountered", ctx, expr)
            if isinstance(expr, SqlObjectsCommentsSupplier):
                self.options.sql_object_comments.extend(expr.sql_objects_comments())
        elif isinstance(expr, SqlTextBehaviorSupplier):
            self._emit("sql_behavior_encountered", ctx, expr)

    # -- pass 2: tokenize -----------------------------------------------------

    def _tokenize(self, ctx: SqlEmitContext, expressions: list[Any]) -> list[_Token]:
        tokens: list[_Token] = []
        for i, expr in enumerate(expressions):
            tokens.append(_Token("literal", self._literal(i), i))
            if isinstance(expr, (list, tuple)):
                self._tokenize_array(ctx, expr, tokens)
            else:
                self._tokenize_single(ctx, expr, i, tokens)
        last = len(self.literals) - 1
        tokens.append(_Token("literal", self._literal(last), last))
        return tokens

    def _tokenize_array(self, ctx: SqlEmitContext, exprs: Sequence[Any], tokens: list[_Token]) -> None:
        last_index = len(exprs) - 1
        for j, e in enumerate(exprs):
            self._tokenize_single(ctx, e, j, tokens)
            delim = self.options.expr_in_array_delim(e, j == last_index)
            if delim:
                tokens.append(_Token("text", delim, j))

    def _tokenize_single(self, ctx: SqlEmitContext, expr: Any, index: int, tokens: list[_Token]) -> None:
        options = self.options
        if self._is_symbol(expr):
            symbol = expr.sql_symbol(ctx)
            tokens.append(_Token("text", symbol, index))
            self._emit("symbol_emitted", ctx, expr, symbol)
        elif isinstance(expr, PersistableSqlText):
            self._tokenize_persistable(ctx, expr, index, tokens)
        elif isinstance(expr, SqlTextSupplier):
            sql = expr.sql(ctx)
            tokens.append(_Token("text", sql, index))
            if options.sql_suppliers_delim_text:
                tokens.append(_Token("delim", options.sql_suppliers_delim_text, index))
            self._emit("sql_emitted", ctx, expr, sql)
        elif isinstance(expr, SqlInjection):
            tokens.append(_Token("text", expr.sql_injection, index))
        elif isinstance(expr, _NAKED_SCALARS) and not isinstance(expr, bool):
            text = options.quote_naked_scalars(expr)[1] if options.quote_naked_scalars else str(expr)
            tokens.append(_Token("text", text, index))
        elif isinstance(expr, SqlTextBehaviorSupplier):
            result = expr.execute_sql_behavior(ctx)
            if isinstance(result, SqlTextEmitTransformer):
                tokens.append(_Token("directive", index=index, transformer=result))
            elif isinstance(result, SqlTextSupplier):
                tokens.append(_Token("text", result.sql(ctx), index))
            else:
                self._tokenize_array(ctx, list(result), tokens)
            self._emit("behavior_activity", ctx, expr, result)
        else:
            tokens.append(_Token("text", repr(expr), index))

    def _tokenize_persistable(
        self,
        ctx: SqlEmitContext,
        persistable: PersistableSqlText,
        index: int,
        tokens: list[_Token],
    ) -> None:
        options = self.options
        options.persist_indexer.active_index += 1
        if options.persist is not None:
            remark = options.persist(ctx, persistable, options.persist_indexer)
            dest = persistable.destination(ctx, options.persist_indexer.active_index)
            logger.debug("persistence requested for %s", dest)
            self._emit("sql_persisted", ctx, dest, persistable, remark)
            if remark is not None:
                tokens.append(_Token("text", remark.sql(ctx), index))
        elif options.sql_text_lint_state is not None:
            options.sql_text_lint_state.lint_sql_tmpl_engine.register_lint_issue(
                SqlLintIssue(
                    lint_issue=(
                        "persistable SQL encountered but no persistence handler "
                        f"available: '{persistable!r}'"
                    )
                )
            )

    # -- pass 3: transform ----------------------------------------------------

    @staticmethod
    def _transform(tokens: list[_Token]) -> str:
        text = ""
        pending: SqlTextEmitTransformer | None = None
        for token in tokens:
            if token.kind == "literal":
                literal = token.text
                if pending is not None:
                    literal = pending.after(literal, token.index)
                    pending = None
                text += literal
            elif token.kind == "text":
                text += token.text
            elif token.kind == "delim":
                if not text.endswith(token.text):
                    text += token.text
            elif token.transformer is not None:
                text = token.transformer.before(text, token.index)
                pending = token.transformer
        return text


class SqlComposer:
    """Builds :class:`ComposedSql` objects bound to one options instance."""

    def __init__(self, options: SqlTextSupplierOptions | None = None) -> None:
        self.options = options if options is not None else SqlTextSupplierOptions()

    def __call__(self, *parts: Any) -> ComposedSql:
        """Compose from interleaved parts; ``str`` parts are literal text."""
        literals: list[str] = []
        expressions: list[Any] = []
        current = ""
        for part in parts:
            if isinstance(part, str):
                current += part
            else:
                literals.append(current)
                expressions.append(part)
                current = ""
        literals.append(current)
        return ComposedSql(literals, expressions, self.options)

    def template(self, literals: Sequence[str], *expressions: Any) -> ComposedSql:
        """Compose from explicit literals, as a tagged template would."""
        return ComposedSql(literals, expressions, self.options)


def SQL(options: SqlTextSupplierOptions | None = None) -> SqlComposer:  # noqa: N802
    """Return a composer for ``options`` (bare options when omitted)."""
    return SqlComposer(options)
