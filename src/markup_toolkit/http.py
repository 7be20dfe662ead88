"""
HTTP transport for the style API: authenticated requests and workflow polling.
"""

from __future__ import annotations

import asyncio
import typing as t

import httpx
import structlog
from tenacity import AsyncRetrying, RetryCallState, retry_if_result, stop_after_attempt

from markup_toolkit.config import Config
from markup_toolkit.exceptions import ApiError, ErrorType
from markup_toolkit.status import WorkflowStatus

log = structlog.get_logger(__name__)

DEFAULT_RETRY_AFTER_SECONDS = 1.0
HTTP_TOO_MANY_REQUESTS = 429


def _retry_after_seconds(*, response: httpx.Response) -> float:
    """
    Read the ``Retry-After`` header of a rate-limited response.

    Parameters
    ----------
    response : httpx.Response
        ``429`` response.

    Returns
    -------
    float
        Seconds to wait, ``DEFAULT_RETRY_AFTER_SECONDS`` when the header is
        missing or not a number.
    """
    value = response.headers.get("retry-after")
    if value is None:
        return DEFAULT_RETRY_AFTER_SECONDS
    try:
        return max(float(value), 0.0)
    except ValueError:
        return DEFAULT_RETRY_AFTER_SECONDS


def _decode_error_payload(*, response: httpx.Response) -> t.Any:
    try:
        return response.json()
    except ValueError:
        return {}


def _is_rate_limited(response: httpx.Response) -> bool:
    return response.status_code == HTTP_TOO_MANY_REQUESTS


def _wait_retry_after(retry_state: RetryCallState) -> float:
    return _retry_after_seconds(response=retry_state.outcome.result())


def _log_rate_limited(retry_state: RetryCallState) -> None:
    response: httpx.Response = retry_state.outcome.result()
    log.warning(
        event="Rate limited, retrying",
        method=response.request.method,
        url=str(response.request.url),
        attempt=retry_state.attempt_number,
        retry_after_seconds=retry_state.next_action.sleep if retry_state.next_action else None,
    )


def _last_response(retry_state: RetryCallState) -> httpx.Response:
    # Out of rate-limit retries: hand the final 429 back for error mapping.
    return retry_state.outcome.result()


async def _send(
    *,
    config: Config,
    method: str,
    url: str,
    data: dict[str, str] | None,
    files: dict[str, t.Any] | None,
    json: t.Any,
) -> httpx.Response:
    try:
        async with config.client_factory() as client:
            return await client.request(
                method=method,
                url=url,
                headers=config.headers,
                data=data,
                files=files,
                json=json,
            )
    except httpx.TimeoutException as error:
        log.error(event="HTTP request timed out", method=method, url=url, error=str(error))
        raise ApiError.from_error(error, ErrorType.TIMEOUT_ERROR) from error
    except httpx.TransportError as error:
        log.error(event="HTTP transport error", method=method, url=url, error=str(error))
        raise ApiError.from_error(error, ErrorType.NETWORK_ERROR) from error


async def _request(
    *,
    config: Config,
    method: str,
    endpoint: str,
    data: dict[str, str] | None = None,
    files: dict[str, t.Any] | None = None,
    json: t.Any = None,
) -> t.Any:
    """
    Send one authenticated request and decode its JSON body.

    Parameters
    ----------
    config : Config
        Connection configuration.
    method : str
        HTTP method.
    endpoint : str
        Path relative to the platform URL.
    data : dict[str, str] | None, optional
        Form fields.
    files : dict[str, typing.Any] | None, optional
        Multipart files.
    json : typing.Any, optional
        JSON body.

    Returns
    -------
    typing.Any
        Decoded JSON payload, ``{}`` for empty bodies.

    Raises
    ------
    ApiError
        On non-2xx responses (after exhausting rate-limit retries) and on
        transport failures.
    """
    url = f"{config.base_url}{endpoint}"
    retrying = AsyncRetrying(
        retry=retry_if_result(_is_rate_limited),
        stop=stop_after_attempt(config.rate_limit_retries + 1),
        wait=_wait_retry_after,
        before_sleep=_log_rate_limited,
        retry_error_callback=_last_response,
    )
    response = await retrying(
        _send, config=config, method=method, url=url, data=data, files=files, json=json
    )

    if response.is_error:
        error = ApiError.from_response(response.status_code, _decode_error_payload(response=response))
        log.debug(
            event="HTTP request failed",
            method=method,
            url=url,
            status_code=response.status_code,
            error=error.message,
        )
        raise error

    log.debug(event="HTTP request succeeded", method=method, url=url)
    if response.status_code == 204 or not response.content:
        return {}
    return response.json()


async def get_data(config: Config, endpoint: str) -> t.Any:
    return await _request(config=config, method="GET", endpoint=endpoint)


async def post_data(
    config: Config,
    endpoint: str,
    data: dict[str, str] | None = None,
    files: dict[str, t.Any] | None = None,
) -> t.Any:
    return await _request(config=config, method="POST", endpoint=endpoint, data=data, files=files)


async def put_data(
    config: Config,
    endpoint: str,
    data: dict[str, str] | None = None,
    files: dict[str, t.Any] | None = None,
) -> t.Any:
    return await _request(config=config, method="PUT", endpoint=endpoint, data=data, files=files)


async def patch_data(config: Config, endpoint: str, json: dict[str, t.Any]) -> t.Any:
    return await _request(config=config, method="PATCH", endpoint=endpoint, json=json)


async def delete_data(config: Config, endpoint: str) -> t.Any:
    return await _request(config=config, method="DELETE", endpoint=endpoint)


def extract_workflow_status(payload: dict[str, t.Any]) -> str:
    """
    Read the workflow status from a poll payload.

    Both the flat ``{"status": ...}`` and nested ``{"workflow": {"status": ...}}``
    shapes are supported.
    """
    workflow = payload.get("workflow")
    if isinstance(workflow, dict) and "status" in workflow:
        return str(workflow["status"])
    if "status" in payload:
        return str(payload["status"])
    raise ApiError("Poll response does not contain a workflow status", ErrorType.POLLING_ERROR)


async def poll_workflow_for_result(
    workflow_id: str,
    endpoint: str,
    config: Config,
) -> dict[str, t.Any]:
    """
    Poll a workflow until it reaches a terminal status.

    Parameters
    ----------
    workflow_id : str
        Workflow identifier returned on submission.
    endpoint : str
        Endpoint the workflow was submitted to.
    config : Config
        Connection configuration, also holding the poll budget.

    Returns
    -------
    dict[str, typing.Any]
        Payload of the completed workflow.

    Raises
    ------
    ApiError
        If the workflow fails, reports an unknown status, or does not finish
        within ``config.max_poll_attempts`` polls.
    """
    poll_endpoint = f"{endpoint.rstrip('/')}/{workflow_id}"
    for attempt in range(1, config.max_poll_attempts + 1):
        payload = await get_data(config, poll_endpoint)
        status = extract_workflow_status(payload).lower()
        log.debug(
            event="Workflow poll tick",
            workflow_id=workflow_id,
            status=status,
            attempt=attempt,
            max_attempts=config.max_poll_attempts,
        )

        if status == WorkflowStatus.FAILED.value:
            raise ApiError(
                f"Workflow failed with status: {WorkflowStatus.FAILED.value}",
                ErrorType.WORKFLOW_FAILED,
                raw_error_data=payload,
            )
        if status == WorkflowStatus.COMPLETED.value:
            log.info(event="Workflow completed", workflow_id=workflow_id, attempts=attempt)
            return payload
        if status not in (WorkflowStatus.QUEUED.value, WorkflowStatus.RUNNING.value):
            raise ApiError(
                f"Unexpected workflow status: {status}",
                ErrorType.UNEXPECTED_STATUS,
                raw_error_data=payload,
            )

        if attempt < config.max_poll_attempts:
            await asyncio.sleep(config.poll_interval_seconds)

    log.error(event="Workflow timed out", workflow_id=workflow_id, attempts=config.max_poll_attempts)
    raise ApiError(
        f"Workflow timed out after {config.max_poll_attempts} attempts",
        ErrorType.TIMEOUT_ERROR,
    )
