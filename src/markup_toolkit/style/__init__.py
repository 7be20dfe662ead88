from .api import get_style_check as get_style_check
from .api import get_style_rewrite as get_style_rewrite
from .api import get_style_suggestion as get_style_suggestion
from .api import style_check as style_check
from .api import style_rewrite as style_rewrite
from .api import style_suggestions as style_suggestions
from .api import submit_style_check as submit_style_check
from .api import submit_style_rewrite as submit_style_rewrite
from .api import submit_style_suggestion as submit_style_suggestion
from .guides import CreateStyleGuideRequest as CreateStyleGuideRequest
from .guides import StyleGuide as StyleGuide
from .guides import StyleGuideUpdate as StyleGuideUpdate
from .guides import create_style_guide as create_style_guide
from .guides import create_style_guide_request_from_path as create_style_guide_request_from_path
from .guides import create_style_guide_request_from_url as create_style_guide_request_from_url
from .guides import delete_style_guide as delete_style_guide
from .guides import get_style_guide as get_style_guide
from .guides import list_style_guides as list_style_guides
from .guides import update_style_guide as update_style_guide
from .guides import validate_token as validate_token
from .issues import IssueCategory as IssueCategory
from .issues import categorize_issues as categorize_issues
from .issues import get_issue_counts as get_issue_counts
from .issues import get_issues_by_category as get_issues_by_category
from .issues import get_issues_with_suggestions as get_issues_with_suggestions
from .issues import get_issues_without_suggestions as get_issues_without_suggestions
from .issues import has_suggestion as has_suggestion
from .models import StyleAnalysisRequest as StyleAnalysisRequest

__all__ = [
    "CreateStyleGuideRequest",
    "IssueCategory",
    "StyleAnalysisRequest",
    "StyleGuide",
    "StyleGuideUpdate",
    "categorize_issues",
    "create_style_guide",
    "create_style_guide_request_from_path",
    "create_style_guide_request_from_url",
    "delete_style_guide",
    "get_issue_counts",
    "get_issues_by_category",
    "get_issues_with_suggestions",
    "get_issues_without_suggestions",
    "get_style_check",
    "get_style_guide",
    "get_style_rewrite",
    "get_style_suggestion",
    "has_suggestion",
    "list_style_guides",
    "style_check",
    "style_rewrite",
    "style_suggestions",
    "submit_style_check",
    "submit_style_rewrite",
    "submit_style_suggestion",
    "update_style_guide",
    "validate_token",
]
