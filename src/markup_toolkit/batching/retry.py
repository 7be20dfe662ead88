"""
Retry policy applied to every batch item.
"""

from __future__ import annotations

import asyncio
import typing as t

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

log = structlog.get_logger(__name__)

RequestT = t.TypeVar("RequestT")
ConfigT = t.TypeVar("ConfigT")
ResultT = t.TypeVar("ResultT")

Operation = t.Callable[[RequestT, ConfigT], t.Awaitable[ResultT]]
Sleep = t.Callable[[float], t.Awaitable[t.Any]]

# Message fragments of errors that a retry cannot fix.
NON_RETRYABLE_KEYWORDS = (
    "authentication",
    "authorization",
    "validation",
    "invalid",
    "unauthorized",
    "forbidden",
)


def is_retryable_error(error: BaseException) -> bool:
    """
    Tell whether another attempt may fix ``error``.

    Only ``Exception`` subclasses are retried, so cancellation and interpreter
    exits propagate. Errors whose lower-cased message mentions one of
    ``NON_RETRYABLE_KEYWORDS`` are final.
    """
    if not isinstance(error, Exception):
        return False
    message = str(error).lower()
    return not any(keyword in message for keyword in NON_RETRYABLE_KEYWORDS)


def _log_before_retry(retry_state: RetryCallState) -> None:
    outcome = retry_state.outcome
    log.debug(
        event="Retryable error, backing off",
        attempt=retry_state.attempt_number,
        delay_seconds=retry_state.next_action.sleep if retry_state.next_action else None,
        error=str(outcome.exception()) if outcome is not None else None,
    )


def build_retrying(
    *,
    retry_attempts: int,
    retry_delay: float,
    sleep: Sleep = asyncio.sleep,
) -> AsyncRetrying:
    """
    Build the tenacity controller of one batch item.

    Parameters
    ----------
    retry_attempts : int
        Retries allowed after the initial attempt.
    retry_delay : float
        Base backoff delay in milliseconds.
    sleep : Sleep, optional
        Coroutine function used to wait, receiving seconds.

    Returns
    -------
    tenacity.AsyncRetrying
        Controller waiting ``retry_delay * 2**(n - 1)`` ms before retry ``n``
        and re-raising the last error once attempts are exhausted.
    """
    return AsyncRetrying(
        stop=stop_after_attempt(retry_attempts + 1),
        wait=wait_exponential(multiplier=retry_delay / 1000, exp_base=2),
        retry=retry_if_exception(is_retryable_error),
        before_sleep=_log_before_retry,
        reraise=True,
        sleep=sleep,
    )


async def execute_with_retry(
    request: RequestT,
    config: ConfigT,
    operation: Operation[RequestT, ConfigT, ResultT],
    retry_attempts: int,
    retry_delay: float,
    *,
    sleep: Sleep = asyncio.sleep,
) -> ResultT:
    """
    Run ``operation`` with exponential backoff between failed attempts.

    Parameters
    ----------
    request : RequestT
        Payload forwarded to the operation.
    config : ConfigT
        Connection configuration forwarded to the operation.
    operation : Operation
        Async single-item operation.
    retry_attempts : int
        Retries allowed after the initial attempt.
    retry_delay : float
        Base backoff delay in milliseconds.
    sleep : Sleep, optional
        Coroutine function used to wait, receiving seconds.

    Returns
    -------
    ResultT
        Value returned by the first successful attempt.

    Raises
    ------
    Exception
        The error of a non-retryable failure immediately, or the error of the
        last attempt once all attempts are exhausted.
    """
    retrying = build_retrying(retry_attempts=retry_attempts, retry_delay=retry_delay, sleep=sleep)
    try:
        return await retrying(operation, request, config)
    except Exception as error:
        log.debug(
            event="Batch item attempts over",
            retryable=is_retryable_error(error),
            retry_attempts=retry_attempts,
            error=str(error),
        )
        raise
