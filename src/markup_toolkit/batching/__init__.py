from .api import BatchOperation as BatchOperation
from .api import style_batch_check_requests as style_batch_check_requests
from .api import style_batch_operation as style_batch_operation
from .api import style_batch_rewrites as style_batch_rewrites
from .api import style_batch_suggestions as style_batch_suggestions
from .api import submit_batch as submit_batch
from .core import BatchScheduler as BatchScheduler
from .core import CancellationToken as CancellationToken
from .models import BatchItemError as BatchItemError
from .models import BatchItemRecord as BatchItemRecord
from .models import BatchOptions as BatchOptions
from .models import BatchProgress as BatchProgress
from .progress import BatchHandle as BatchHandle
from .progress import ProgressView as ProgressView
from .retry import execute_with_retry as execute_with_retry
from .retry import is_retryable_error as is_retryable_error

__all__ = [
    "BatchHandle",
    "BatchItemError",
    "BatchItemRecord",
    "BatchOperation",
    "BatchOptions",
    "BatchProgress",
    "BatchScheduler",
    "CancellationToken",
    "ProgressView",
    "execute_with_retry",
    "is_retryable_error",
    "style_batch_check_requests",
    "style_batch_operation",
    "style_batch_rewrites",
    "style_batch_suggestions",
    "submit_batch",
]
