"""Query preparers: free-form selects and record-driven filters."""
from sqlaide.dql.criteria import (
    FilterCriteria,
    FilterCriteriaValue,
    FilterCriterion,
    and_,
    fc_value,
    filter_criteria_preparer,
    not_,
    or_,
)
from sqlaide.dql.select import (
    PreparedSelect,
    Select,
    SelectComposer,
    SelectStmtPreparerOptions,
    SelectTemplateOptions,
    TableSelectFactory,
    entity_select_stmt_preparer,
    table_select_factory,
    untyped_select,
)

__all__ = [
    "FilterCriteria",
    "FilterCriteriaValue",
    "FilterCriterion",
    "PreparedSelect",
    "Select",
    "SelectComposer",
    "SelectStmtPreparerOptions",
    "SelectTemplateOptions",
    "TableSelectFactory",
    "and_",
    "entity_select_stmt_preparer",
    "fc_value",
    "filter_criteria_preparer",
    "not_",
    "or_",
    "table_select_factory",
    "untyped_select",
]
