"""
Helpers to group, count and filter the issues of a style response.
"""

from collections.abc import Iterable
from enum import StrEnum

import structlog

from markup_toolkit.style.models import StyleIssue

log = structlog.get_logger(__name__)


class IssueCategory(StrEnum):
    grammar = "grammar"
    simple_vocab = "simple_vocab"
    sentence_structure = "sentence_structure"
    sentence_length = "sentence_length"
    tone = "tone"
    style_guide = "style_guide"
    terminology = "terminology"


def categorize_issues(issues: Iterable[StyleIssue]) -> dict[IssueCategory, list[StyleIssue]]:
    """
    Group issues by category.

    Every known category is present in the result, possibly empty. Issues of
    an unknown category are logged and left out.
    """
    categorized: dict[IssueCategory, list[StyleIssue]] = {category: [] for category in IssueCategory}
    for issue in issues:
        if issue.category not in categorized:
            log.warning(event="Unknown issue category", category=issue.category)
            continue
        categorized[IssueCategory(issue.category)].append(issue)
    return categorized


def get_issue_counts(issues: Iterable[StyleIssue]) -> dict[IssueCategory, int]:
    return {category: len(grouped) for category, grouped in categorize_issues(issues).items()}


def get_issues_by_category(issues: Iterable[StyleIssue], category: IssueCategory | str) -> list[StyleIssue]:
    return [issue for issue in issues if issue.category == category]


def has_suggestion(issue: StyleIssue) -> bool:
    return issue.suggestion is not None


def get_issues_with_suggestions(issues: Iterable[StyleIssue]) -> list[StyleIssue]:
    return [issue for issue in issues if has_suggestion(issue)]


def get_issues_without_suggestions(issues: Iterable[StyleIssue]) -> list[StyleIssue]:
    return [issue for issue in issues if not has_suggestion(issue)]
