import pytest

from markup_toolkit.style.issues import (
    IssueCategory,
    categorize_issues,
    get_issue_counts,
    get_issues_by_category,
    get_issues_with_suggestions,
    get_issues_without_suggestions,
    has_suggestion,
)
from markup_toolkit.style.models import StyleIssue


@pytest.fixture
def issues() -> list[StyleIssue]:
    return [
        StyleIssue(original="teh", category="grammar", subcategory="spelling", suggestion="the"),
        StyleIssue(original="utilize", category="simple_vocab", subcategory="complex_word"),
        StyleIssue(original="was written", category="grammar", subcategory="passive_voice"),
        StyleIssue(original="gonna", category="tone", suggestion="going to"),
    ]


def test_categorize_issues_groups_every_category(issues):
    categorized = categorize_issues(issues)

    assert set(categorized) == set(IssueCategory)
    assert [issue.original for issue in categorized[IssueCategory.grammar]] == ["teh", "was written"]
    assert [issue.original for issue in categorized[IssueCategory.tone]] == ["gonna"]
    assert categorized[IssueCategory.terminology] == []


def test_categorize_issues_skips_unknown_category(issues):
    unknown = StyleIssue(original="x", category="mystery")

    categorized = categorize_issues([*issues, unknown])

    assert sum(len(grouped) for grouped in categorized.values()) == len(issues)


def test_get_issue_counts(issues):
    counts = get_issue_counts(issues)

    assert counts[IssueCategory.grammar] == 2
    assert counts[IssueCategory.simple_vocab] == 1
    assert counts[IssueCategory.tone] == 1
    assert counts[IssueCategory.style_guide] == 0
    assert len(counts) == len(IssueCategory)


def test_get_issues_by_category_accepts_plain_strings(issues):
    assert get_issues_by_category(issues, "simple_vocab") == [issues[1]]
    assert get_issues_by_category(issues, IssueCategory.grammar) == [issues[0], issues[2]]


def test_suggestion_filters(issues):
    assert has_suggestion(issues[0])
    assert not has_suggestion(issues[1])
    assert get_issues_with_suggestions(issues) == [issues[0], issues[3]]
    assert get_issues_without_suggestions(issues) == [issues[1], issues[2]]
