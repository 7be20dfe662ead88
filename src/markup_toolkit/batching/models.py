import typing as t

from pydantic import BaseModel, ConfigDict, Field

from markup_toolkit.exceptions import ApiError
from markup_toolkit.status import BatchItemStatus

MAX_BATCH_SIZE = 1000


class BatchOptions(BaseModel):
    """
    Tuning knobs of a batch call.

    Parameters
    ----------
    max_concurrent : int
        Maximum number of items in flight at once, between 1 and 100.
    retry_attempts : int
        Retries per item after the initial attempt, between 0 and 5.
    retry_delay : float
        Base backoff delay in milliseconds, doubled before each further retry.
    timeout : float
        Batch timeout in milliseconds. Stored but not enforced.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    max_concurrent: int = Field(default=100, ge=1, le=100)
    retry_attempts: int = Field(default=2, ge=0, le=5)
    retry_delay: float = Field(default=1000, ge=0)
    timeout: float = Field(default=300_000, gt=0)


class BatchItemError(BaseModel):
    """Normalized failure of one batch item."""

    message: str
    type: str | None = None
    status_code: int | None = None

    @classmethod
    def from_exception(cls, error: BaseException) -> "BatchItemError":
        if isinstance(error, ApiError):
            return cls(message=error.message, type=str(error.type), status_code=error.status_code)
        return cls(message=str(error) or type(error).__name__, type=type(error).__name__)


class BatchItemRecord(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    index: int
    request: t.Any
    status: BatchItemStatus = BatchItemStatus.PENDING
    result: t.Any = None
    error: BatchItemError | None = None
    start_time: int | None = None
    end_time: int | None = None


class BatchProgress(BaseModel):
    """Point-in-time view of a batch, as delivered by its completion future."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    total: int
    completed: int
    failed: int
    in_progress: int
    pending: int
    results: list[BatchItemRecord]
    start_time: int
    estimated_completion_time: int | None = None
