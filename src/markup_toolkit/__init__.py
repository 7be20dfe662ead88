from .batching import BatchHandle as BatchHandle
from .batching import BatchOptions as BatchOptions
from .batching import BatchProgress as BatchProgress
from .batching import style_batch_check_requests as style_batch_check_requests
from .batching import style_batch_operation as style_batch_operation
from .batching import style_batch_rewrites as style_batch_rewrites
from .batching import style_batch_suggestions as style_batch_suggestions
from .batching import submit_batch as submit_batch
from .config import Config as Config
from .config import Environment as Environment
from .exceptions import ApiError as ApiError
from .exceptions import BatchCancelledError as BatchCancelledError
from .exceptions import BatchValidationError as BatchValidationError
from .exceptions import ErrorType as ErrorType
from .status import BatchItemStatus as BatchItemStatus
from .style import IssueCategory as IssueCategory
from .style import StyleAnalysisRequest as StyleAnalysisRequest
from .style import categorize_issues as categorize_issues
from .style import create_style_guide as create_style_guide
from .style import list_style_guides as list_style_guides
from .style import style_check as style_check
from .style import style_rewrite as style_rewrite
from .style import style_suggestions as style_suggestions
from .style import validate_token as validate_token

__all__ = [
    "ApiError",
    "BatchCancelledError",
    "BatchHandle",
    "BatchItemStatus",
    "BatchOptions",
    "BatchProgress",
    "BatchValidationError",
    "Config",
    "Environment",
    "ErrorType",
    "IssueCategory",
    "StyleAnalysisRequest",
    "categorize_issues",
    "create_style_guide",
    "list_style_guides",
    "style_batch_check_requests",
    "style_batch_operation",
    "style_batch_rewrites",
    "style_batch_suggestions",
    "style_check",
    "style_rewrite",
    "style_suggestions",
    "submit_batch",
    "validate_token",
]
