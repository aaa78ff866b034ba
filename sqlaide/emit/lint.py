"""Lint issues: recoverable structural concerns found while rendering.

Lint issues never stop rendering.  They accumulate in a
:class:`SqlLintIssues` registry (usually the one owned by the caller's
:class:`~sqlaide.emit.sql.SqlTextSupplierOptions`) and callers decide,
using :func:`is_fatal_issue`, whether a build should be aborted.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class SqlLintIssueConsequence(str, Enum):
    """How serious a lint issue is, and which kind of statement it concerns."""

    INFORMATIONAL_DDL = "Informational (DDL)"
    INFORMATIONAL_DML = "Informational (DML)"
    INFORMATIONAL_DQL = "Informational (DQL)"
    CONVENTION_DDL = "Convention (DDL)"
    CONVENTION_DML = "Convention (DML)"
    CONVENTION_DQL = "Convention (DQL)"
    WARNING_DDL = "DDL Warning"
    WARNING_DML = "DML Warning"
    WARNING_DQL = "DQL Warning"
    FATAL_DDL = "FATAL DDL"
    FATAL_DML = "FATAL DML"
    FATAL_DQL = "FATAL DQL"


class SqlLintIssue(BaseModel):
    """A single lint finding.

    Attributes:
        lint_issue: Human-readable description.
        location: Where the issue was found (object name or source excerpt).
        consequence: Severity classification; ``None`` means unclassified.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    lint_issue: str
    location: str | None = None
    consequence: SqlLintIssueConsequence | None = None

    def message(self, max_location_length: int = 50) -> str:
        """Render as ``[consequence] issue (location)``.

        Locations longer than ``max_location_length`` are cut and end in ``...``.
        """
        text = f"[{self.consequence.value}] " if self.consequence else ""
        text += self.lint_issue
        if self.location:
            location = self.location
            if len(location) > max_location_length:
                location = f"{location[:max_location_length]}..."
            text += f" ({location})"
        return text


def is_fatal_issue(issue: SqlLintIssue) -> bool:
    """True when the issue's consequence is one of the ``FATAL_*`` values."""
    return bool(issue.consequence and issue.consequence.value.startswith("FATAL"))


class SqlLintIssues:
    """Ordered, append-only registry of lint issues."""

    def __init__(self, issues: Iterable[SqlLintIssue] | None = None) -> None:
        self.lint_issues: list[SqlLintIssue] = list(issues or [])

    def register_lint_issue(self, *issues: SqlLintIssue) -> None:
        self.lint_issues.extend(issues)

    def fatal_issues(self) -> list[SqlLintIssue]:
        return [li for li in self.lint_issues if is_fatal_issue(li)]

    def __len__(self) -> int:
        return len(self.lint_issues)

    def __iter__(self):
        return iter(self.lint_issues)


def template_string_lint_issue(
    issue: str,
    literals: Sequence[str],
    expressions: Sequence[Any] | None = None,
    consequence: SqlLintIssueConsequence | None = None,
) -> SqlLintIssue:
    """Build a lint issue located by the composition's literal text.

    The location joins the literals with ``${}`` placeholders and flattens
    newlines, which is enough to recognise the offending composition.
    """
    location = "${}".join(literals).replace("\n", " ")
    return SqlLintIssue(lint_issue=issue, location=location, consequence=consequence)


class SqlLintRule(ABC):
    """A reusable check that registers issues into a registry."""

    @abstractmethod
    def lint(self, registry: SqlLintIssues) -> None:
        """Inspect the rule's subject and register any issues found."""


class AggregatedLintRules(SqlLintRule):
    """Runs several rules in order."""

    def __init__(self, *rules: SqlLintRule) -> None:
        self.rules = list(rules)

    def add(self, *rules: SqlLintRule) -> None:
        self.rules.extend(rules)

    def lint(self, registry: SqlLintIssues) -> None:
        for rule in self.rules:
            rule.lint(registry)
