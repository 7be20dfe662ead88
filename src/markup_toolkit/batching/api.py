"""
Main endpoint for batch users.
Exposes ``submit_batch`` for any async single-item operation and the
``style_batch_*`` helpers bound to the style check, suggestion and rewrite
operations.
"""

from __future__ import annotations

import asyncio
import typing as t
from collections.abc import Mapping, Sequence
from enum import StrEnum

from pydantic import ValidationError

from markup_toolkit.batching.core import BatchScheduler
from markup_toolkit.batching.models import MAX_BATCH_SIZE, BatchOptions
from markup_toolkit.batching.progress import BatchHandle
from markup_toolkit.batching.retry import Operation, Sleep
from markup_toolkit.config import Config
from markup_toolkit.exceptions import BatchValidationError
from markup_toolkit.style.api import style_check, style_rewrite, style_suggestions
from markup_toolkit.style.models import StyleAnalysisRequest

BatchOptionsLike = BatchOptions | Mapping[str, t.Any] | None


class BatchOperation(StrEnum):
    check = "check"
    suggestions = "suggestions"
    rewrite = "rewrite"


STYLE_OPERATIONS: dict[BatchOperation, Operation[StyleAnalysisRequest, Config, t.Any]] = {
    BatchOperation.check: style_check,
    BatchOperation.suggestions: style_suggestions,
    BatchOperation.rewrite: style_rewrite,
}


def resolve_batch_options(options: BatchOptionsLike) -> BatchOptions:
    """
    Validate user-supplied batch options.

    Parameters
    ----------
    options : BatchOptions | Mapping[str, typing.Any] | None
        Options model, plain mapping of option fields, or ``None`` for defaults.

    Returns
    -------
    BatchOptions
        Validated options.

    Raises
    ------
    BatchValidationError
        If a field is unknown or out of bounds.
    """
    if options is None:
        return BatchOptions()
    if isinstance(options, BatchOptions):
        return options
    try:
        return BatchOptions.model_validate(dict(options))
    except ValidationError as error:
        raise BatchValidationError(f"Invalid batch options: {error}") from error


def submit_batch(
    requests: Sequence[t.Any],
    config: t.Any,
    options: BatchOptionsLike = None,
    *,
    operation: Operation[t.Any, t.Any, t.Any],
    sleep: Sleep = asyncio.sleep,
) -> BatchHandle:
    """
    Start processing ``requests`` concurrently and return immediately.<br>
    Up to ``max_concurrent`` items are in flight before this function returns.

    Parameters
    ----------
    requests : Sequence[typing.Any]
        Between 1 and 1000 requests, each passed to ``operation``.
    config : typing.Any
        Connection configuration forwarded to ``operation``.
    options : BatchOptions | Mapping[str, typing.Any] | None, optional
        ``max_concurrent`` (1-100, default 100), ``retry_attempts`` (0-5,
        default 2), ``retry_delay`` (ms, default 1000) and ``timeout`` (ms,
        default 300000, not enforced).
    operation : Operation
        Async function ``(request, config) -> result``. Raising marks the item
        failed once retries are exhausted; returning ``None`` marks it failed.
    sleep : Sleep, optional
        Coroutine function used for retry backoff.

    Returns
    -------
    BatchHandle
        Live progress, completion future and cancellation trigger.

    Raises
    ------
    BatchValidationError
        If ``requests`` is empty, holds more than 1000 items, or options are
        out of bounds. Nothing is scheduled in that case.
    RuntimeError
        If called without a running event loop.
    """
    requests = list(requests)
    if not requests:
        raise BatchValidationError("Batch requests cannot be empty")
    if len(requests) > MAX_BATCH_SIZE:
        raise BatchValidationError(
            f"Batch size cannot exceed {MAX_BATCH_SIZE} requests, got {len(requests)}"
        )
    batch_options = resolve_batch_options(options)

    scheduler = BatchScheduler(
        requests=requests,
        config=config,
        operation=operation,
        options=batch_options,
        sleep=sleep,
    )
    return scheduler.start()


def style_batch_operation(
    requests: Sequence[StyleAnalysisRequest],
    config: Config,
    options: BatchOptionsLike = None,
    operation_type: BatchOperation | str = BatchOperation.check,
) -> BatchHandle:
    """
    Run a batch of style check, suggestion or rewrite requests.

    Parameters
    ----------
    requests : Sequence[StyleAnalysisRequest]
        Documents to analyse.
    config : Config
        Connection configuration.
    options : BatchOptions | Mapping[str, typing.Any] | None, optional
        Batch options, see ``submit_batch``.
    operation_type : BatchOperation | str, optional
        ``"check"``, ``"suggestions"`` or ``"rewrite"``.

    Returns
    -------
    BatchHandle
        Handle on the running batch.
    """
    try:
        operation = STYLE_OPERATIONS[BatchOperation(operation_type)]
    except ValueError as error:
        raise BatchValidationError(
            f"Unsupported batch operation type: {operation_type!r}, supported types are: "
            f"{', '.join(BatchOperation)}"
        ) from error
    return submit_batch(requests, config, options, operation=operation)


def style_batch_check_requests(
    requests: Sequence[StyleAnalysisRequest],
    config: Config,
    options: BatchOptionsLike = None,
) -> BatchHandle:
    return style_batch_operation(requests, config, options, BatchOperation.check)


def style_batch_suggestions(
    requests: Sequence[StyleAnalysisRequest],
    config: Config,
    options: BatchOptionsLike = None,
) -> BatchHandle:
    return style_batch_operation(requests, config, options, BatchOperation.suggestions)


def style_batch_rewrites(
    requests: Sequence[StyleAnalysisRequest],
    config: Config,
    options: BatchOptionsLike = None,
) -> BatchHandle:
    return style_batch_operation(requests, config, options, BatchOperation.rewrite)
