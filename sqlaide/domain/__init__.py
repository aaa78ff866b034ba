"""Typed field descriptors: python validators paired with SQL domains."""
from sqlaide.domain.domain import (
    SQL_DOMAIN_NOT_IN_COLLECTION,
    SqlDomain,
    SqlField,
    bigint,
    boolean,
    created_at,
    date,
    date_time,
    enum_integer,
    enum_text,
    floating,
    integer,
    json_text,
    sql_field,
    text,
)
from sqlaide.domain.domains import SqlDomains, SqlDomainSymbol, sql_domains

__all__ = [
    "SQL_DOMAIN_NOT_IN_COLLECTION",
    "SqlDomain",
    "SqlDomainSymbol",
    "SqlDomains",
    "SqlField",
    "bigint",
    "boolean",
    "created_at",
    "date",
    "date_time",
    "enum_integer",
    "enum_text",
    "floating",
    "integer",
    "json_text",
    "sql_domains",
    "sql_field",
    "text",
]
