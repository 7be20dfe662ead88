"""
Core engine of batch processing.
The scheduler admits items up to a concurrency ceiling, drives each one through
the retry policy, and resolves the batch once no item is pending or in flight.
"""

from __future__ import annotations

import asyncio
import time
import typing as t
import uuid

import structlog

from markup_toolkit.batching.models import (
    BatchItemError,
    BatchItemRecord,
    BatchOptions,
    BatchProgress,
)
from markup_toolkit.batching.progress import BatchHandle, ProgressView
from markup_toolkit.batching.retry import Operation, Sleep, execute_with_retry
from markup_toolkit.exceptions import BatchCancelledError
from markup_toolkit.status import BatchItemStatus
from markup_toolkit.utils.logging import logging_context

log = structlog.get_logger(__name__)

UNDEFINED_RESULT_MESSAGE = "Batch operation returned undefined result"
ITEM_CANCELLED_MESSAGE = "Batch item was cancelled"


def _mark_exception_retrieved(future: asyncio.Future[t.Any]) -> None:
    # A cancelled batch nobody awaits must not log "exception was never retrieved".
    if not future.cancelled():
        future.exception()


def _now_ms() -> int:
    return int(time.time() * 1000)


class CancellationToken:
    """One-way cancellation flag owned by a single batch."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> bool:
        """
        Flip the flag.

        Returns
        -------
        bool
            ``True`` only for the call that actually cancelled.
        """
        if self._cancelled:
            return False
        self._cancelled = True
        return True


class BatchScheduler:
    """
    Concurrency-capped scheduler of one batch.

    Item state is only mutated between suspension points (the operation call
    and the retry backoff), so no lock is needed on the event loop.

    Parameters
    ----------
    requests : Sequence[typing.Any]
        Requests of the batch, already validated.
    config : typing.Any
        Connection configuration forwarded to the operation.
    operation : Operation
        Async single-item operation.
    options : BatchOptions
        Validated batch options.
    sleep : Sleep, optional
        Coroutine function used for retry backoff, receiving seconds.
    """

    def __init__(
        self,
        *,
        requests: t.Sequence[t.Any],
        config: t.Any,
        operation: Operation[t.Any, t.Any, t.Any],
        options: BatchOptions,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._loop = asyncio.get_running_loop()
        self._batch_id = uuid.uuid4().hex[:12]
        self._config = config
        self._operation = operation
        self._options = options
        self._sleep = sleep

        self._records = [
            BatchItemRecord(index=index, request=request) for index, request in enumerate(requests)
        ]
        self._in_flight = 0
        self._token = CancellationToken()
        self._start_time = _now_ms()
        self._future: asyncio.Future[BatchProgress] = self._loop.create_future()
        self._future.add_done_callback(_mark_exception_retrieved)
        self._tasks: set[asyncio.Task[None]] = set()
        self._progress = ProgressView(records=self._records, start_time=self._start_time)

        log.debug(
            event="Initialized BatchScheduler",
            batch_id=self._batch_id,
            total=len(self._records),
            max_concurrent=options.max_concurrent,
            retry_attempts=options.retry_attempts,
            retry_delay_ms=options.retry_delay,
            timeout_ms=options.timeout,
        )

    @property
    def batch_id(self) -> str:
        return self._batch_id

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @property
    def cancelled(self) -> bool:
        return self._token.cancelled

    def start(self) -> BatchHandle:
        """
        Admit the first wave of items and hand out the batch handle.

        Returns
        -------
        BatchHandle
            Handle whose progress already reflects the admitted items.
        """
        initial = min(self._options.max_concurrent, len(self._records))
        for _ in range(initial):
            self._admit_next()
        log.info(
            event="Batch started",
            batch_id=self._batch_id,
            total=len(self._records),
            admitted=self._in_flight,
        )
        return BatchHandle(progress=self._progress, future=self._future, cancel=self.cancel)

    def cancel(self) -> None:
        if not self._token.cancel():
            return
        log.info(
            event="Batch cancelled",
            batch_id=self._batch_id,
            in_flight=self._in_flight,
            pending=self._progress.pending,
        )
        if not self._future.done():
            self._future.set_exception(BatchCancelledError())

    def _next_pending(self) -> BatchItemRecord | None:
        for record in self._records:
            if record.status == BatchItemStatus.PENDING:
                return record
        return None

    def _admit_next(self) -> bool:
        """
        Move the lowest-index pending item in flight, capacity permitting.

        Returns
        -------
        bool
            ``True`` if an item was admitted.
        """
        if self._token.cancelled or self._in_flight >= self._options.max_concurrent:
            return False
        record = self._next_pending()
        if record is None:
            return False

        record.status = BatchItemStatus.IN_PROGRESS
        record.start_time = _now_ms()
        self._in_flight += 1
        log.debug(
            event="Admitted batch item",
            batch_id=self._batch_id,
            index=record.index,
            in_flight=self._in_flight,
        )

        task = self._loop.create_task(
            self._run_item(record=record),
            name=f"batch_item_{self._batch_id}_{record.index}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return True

    async def _run_item(self, *, record: BatchItemRecord) -> None:
        with logging_context(batch_id=self._batch_id):
            try:
                result = await execute_with_retry(
                    record.request,
                    self._config,
                    self._operation,
                    self._options.retry_attempts,
                    self._options.retry_delay,
                    sleep=self._sleep,
                )
            except asyncio.CancelledError:
                self._fail(
                    record=record,
                    error=BatchItemError(message=ITEM_CANCELLED_MESSAGE, type="CancelledError"),
                )
                raise
            except Exception as error:
                self._fail(record=record, error=BatchItemError.from_exception(error))
            else:
                if result is None:
                    self._fail(record=record, error=BatchItemError(message=UNDEFINED_RESULT_MESSAGE))
                else:
                    self._complete(record=record, result=result)
            finally:
                self._release()

    def _complete(self, *, record: BatchItemRecord, result: t.Any) -> None:
        record.result = result
        record.status = BatchItemStatus.COMPLETED
        record.end_time = _now_ms()
        log.debug(event="Batch item completed", index=record.index)

    def _fail(self, *, record: BatchItemRecord, error: BatchItemError) -> None:
        record.error = error
        record.status = BatchItemStatus.FAILED
        record.end_time = _now_ms()
        log.warning(event="Batch item failed", index=record.index, error=error.message)

    def _release(self) -> None:
        """Free a slot, admit the next pending item, or settle the batch."""
        self._in_flight -= 1
        if self._admit_next():
            return
        if self._in_flight == 0 and self._next_pending() is None and not self._future.done():
            try:
                snapshot = self._progress.snapshot()
            except Exception as error:
                log.error(event="Could not build final batch snapshot", batch_id=self._batch_id, error=str(error))
                self._future.set_exception(error)
                return
            log.info(
                event="Batch finished",
                batch_id=self._batch_id,
                completed=snapshot.completed,
                failed=snapshot.failed,
                duration_ms=_now_ms() - self._start_time,
            )
            self._future.set_result(snapshot)
