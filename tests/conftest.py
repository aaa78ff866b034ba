"""Shared pytest fixtures for sqlaide unit and integration tests."""
from __future__ import annotations

import pytest

from sqlaide.emit import (
    SqlEmitContext,
    SqlTextSupplierOptions,
    typical_sql_emit_context,
    typical_sql_text_supplier_options,
)
from tests.fixtures import PublishingSchema, SyntheticSchema, publishing_schema, synthetic_schema


@pytest.fixture()
def ctx() -> SqlEmitContext:
    """ANSI context with double-quoted identifiers."""
    return typical_sql_emit_context()


@pytest.fixture()
def options() -> SqlTextSupplierOptions:
    """Fresh typical options; one per test so registries never leak."""
    return typical_sql_text_supplier_options()


@pytest.fixture(scope="session")
def synthetic() -> SyntheticSchema:
    return synthetic_schema()


@pytest.fixture(scope="session")
def publishing() -> PublishingSchema:
    return publishing_schema()
