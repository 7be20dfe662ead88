"""
Live progress view and the handle returned to batch callers.
"""

from __future__ import annotations

import asyncio
import typing as t
from collections.abc import Generator, Sequence

import structlog

from markup_toolkit.batching.models import BatchItemRecord, BatchProgress
from markup_toolkit.status import BatchItemStatus

log = structlog.get_logger(__name__)


def _copy_record(record: BatchItemRecord) -> BatchItemRecord:
    """
    Copy a record for callers, deeply when its request and result allow it.

    Values that refuse ``deepcopy`` (locks, sockets, clients...) are shared
    with the live record instead of failing the read.
    """
    try:
        return record.model_copy(deep=True)
    except Exception as error:
        log.debug(event="Record not deep-copyable, sharing values", index=record.index, error=str(error))
        return record.model_copy()


class ProgressView:
    """
    Read-only view over the live records of a batch.

    Every property is recomputed from the records on access, so two reads may
    differ while the batch is running. ``results`` hands out copies: deep ones
    unless a request or result cannot be deep-copied.

    Parameters
    ----------
    records : Sequence[BatchItemRecord]
        Records owned by the scheduler, in request order.
    start_time : int
        Batch start, in milliseconds since epoch.
    """

    def __init__(self, *, records: Sequence[BatchItemRecord], start_time: int) -> None:
        self._records = records
        self._start_time = start_time

    def _count(self, status: BatchItemStatus) -> int:
        return sum(1 for record in self._records if record.status == status)

    @property
    def total(self) -> int:
        return len(self._records)

    @property
    def completed(self) -> int:
        return self._count(BatchItemStatus.COMPLETED)

    @property
    def failed(self) -> int:
        return self._count(BatchItemStatus.FAILED)

    @property
    def in_progress(self) -> int:
        return self._count(BatchItemStatus.IN_PROGRESS)

    @property
    def pending(self) -> int:
        return self._count(BatchItemStatus.PENDING)

    @property
    def results(self) -> list[BatchItemRecord]:
        return [_copy_record(record) for record in self._records]

    @property
    def start_time(self) -> int:
        return self._start_time

    @property
    def estimated_completion_time(self) -> int | None:
        return None

    def snapshot(self) -> BatchProgress:
        """Freeze the current state into a ``BatchProgress``."""
        return BatchProgress(
            total=self.total,
            completed=self.completed,
            failed=self.failed,
            in_progress=self.in_progress,
            pending=self.pending,
            results=self.results,
            start_time=self.start_time,
            estimated_completion_time=self.estimated_completion_time,
        )

    def __repr__(self) -> str:
        return (
            f"ProgressView(total={self.total}, completed={self.completed}, "
            f"failed={self.failed}, in_progress={self.in_progress}, pending={self.pending})"
        )


class BatchHandle:
    """
    Handle on a running batch.

    Parameters
    ----------
    progress : ProgressView
        Live progress of the batch.
    future : asyncio.Future[BatchProgress]
        Resolves with the final snapshot once every item is terminal, or fails
        with ``BatchCancelledError`` when the batch is cancelled first.
    cancel : Callable[[], None]
        Cancellation trigger of the owning scheduler.

    Notes
    -----
    The handle is awaitable: ``await handle`` is ``await handle.future``.
    """

    def __init__(
        self,
        *,
        progress: ProgressView,
        future: asyncio.Future[BatchProgress],
        cancel: t.Callable[[], None],
    ) -> None:
        self.progress = progress
        self.future = future
        self._cancel = cancel

    def cancel(self) -> None:
        """Stop admitting pending items and fail the future if still pending."""
        self._cancel()

    def done(self) -> bool:
        return self.future.done()

    def __await__(self) -> Generator[t.Any, None, BatchProgress]:
        return self.future.__await__()
