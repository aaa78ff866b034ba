"""Filter criteria: a record of attribute values turned into a ``WHERE`` body.

Plain values compare with ``=`` and are joined with ``AND``; wrap a value to
change the connective::

    preparer = filter_criteria_preparer(lambda group: ["name", "age"])
    criteria = preparer(ctx, {"name": "Ann", "age": or_(42)})
    criteria.sql(ctx)   # "name" = 'Ann' OR "age" = 42

``None`` values render as ``IS NULL``; SQL fragments are parenthesized.
"""
from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from sqlaide.emit.supplier import SqlTextSupplier

if TYPE_CHECKING:
    from sqlaide.emit.context import SqlEmitContext
    from sqlaide.emit.naming import SqlObjectNames

FilterCriteriaConnect = Literal["AND", "OR", "NOT"]
CandidateGroup = Literal["all", "primary-keys"]

#: ``(left_hand_side, value_sql_text) -> comparison text``
FilterCriteriaCompare = Callable[[str, str], str]


def value_is_null(value_sql: str) -> bool:
    return value_sql.strip().upper() == "NULL"


def equals(lhs: str, value_sql: str) -> str:
    return f"{lhs} IS NULL" if value_is_null(value_sql) else f"{lhs} = {value_sql}"


@dataclass(frozen=True)
class FilterCriteriaValue:
    """A record value with an explicit comparison and connective."""

    value: Any
    connect: FilterCriteriaConnect | None = None
    compare: FilterCriteriaCompare = equals


def fc_value(
    value: Any,
    connect: FilterCriteriaConnect | None = None,
    compare: FilterCriteriaCompare = equals,
) -> FilterCriteriaValue:
    if isinstance(value, FilterCriteriaValue):
        return FilterCriteriaValue(value.value, connect or value.connect, value.compare)
    return FilterCriteriaValue(value, connect, compare)


def and_(value: Any) -> FilterCriteriaValue:
    return fc_value(value, "AND")


def or_(value: Any) -> FilterCriteriaValue:
    return fc_value(value, "OR")


def not_(value: Any) -> FilterCriteriaValue:
    return fc_value(value, "NOT")


@dataclass(frozen=True)
class FilterCriterion:
    """One comparison of a prepared filter."""

    identity: str
    value: Any
    value_sql: str
    compare: FilterCriteriaCompare = equals
    connect: FilterCriteriaConnect | None = None


@dataclass
class FilterCriteria:
    """The prepared comparisons for one filterable record."""

    filterable: Mapping[str, Any]
    candidate_attrs: Callable[[CandidateGroup], list[str]]
    criteria: list[FilterCriterion] = field(default_factory=list)

    def sql(
        self,
        ctx: SqlEmitContext,
        attr_name_supplier: Callable[[str, SqlObjectNames], str] | None = None,
    ) -> str:
        ns = ctx.naming(quote_identifiers=True)
        name = attr_name_supplier or (lambda attr, names: names.domain_name(attr))
        text = ""
        for c in self.criteria:
            if c.connect:
                text += f" {c.connect} "
            text += c.compare(name(c.identity, ns), c.value_sql)
        return text


def criterion_value_sql(ctx: SqlEmitContext, value: Any) -> str:
    if isinstance(value, SqlTextSupplier):
        return f"({value.sql(ctx)})"
    return ctx.sql_text_emit_options.quoted_literal(value)[1]


#: ``(ctx, record) -> FilterCriteria``
FilterCriteriaPreparer = Callable[["SqlEmitContext", Mapping[str, Any]], FilterCriteria]


def filter_criteria_preparer(
    candidate_attrs: Callable[[CandidateGroup], list[str]],
    is_attr_filterable: Callable[[str, Mapping[str, Any]], bool] | None = None,
) -> FilterCriteriaPreparer:
    """Return a preparer filtering on ``candidate_attrs("all")``.

    Attributes absent from the record are skipped unless
    ``is_attr_filterable`` says otherwise; candidates keep their declared
    order, not the record's.
    """
    filterable = is_attr_filterable or (lambda attr, record: attr in record)

    def prepare(ctx: SqlEmitContext, record: Mapping[str, Any]) -> FilterCriteria:
        criteria: list[FilterCriterion] = []
        for attr in candidate_attrs("all"):
            if not filterable(attr, record):
                continue
            raw = record.get(attr)
            fcv = raw if isinstance(raw, FilterCriteriaValue) else FilterCriteriaValue(raw)
            criteria.append(
                FilterCriterion(
                    identity=attr,
                    value=fcv.value,
                    value_sql=criterion_value_sql(ctx, fcv.value),
                    compare=fcv.compare,
                    connect=(fcv.connect or "AND") if criteria else None,
                )
            )
        return FilterCriteria(record, candidate_attrs, criteria)

    return prepare
