"""Form building and submit-then-poll helpers for style analysis."""

import typing as t

import structlog
from pydantic import BaseModel

from markup_toolkit.config import Config
from markup_toolkit.exceptions import ApiError, ErrorType
from markup_toolkit.http import poll_workflow_for_result, post_data
from markup_toolkit.status import WorkflowStatus
from markup_toolkit.style.models import (
    Dialect,
    StyleAnalysisRequest,
    StyleAnalysisSubmitResponse,
    Tone,
)

log = structlog.get_logger(__name__)

DEFAULT_DOCUMENT_NAME = "unknown.txt"

MIME_TYPES = {
    "pdf": "application/pdf",
    "txt": "text/plain",
    "md": "text/markdown",
    "html": "text/html",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "doc": "application/msword",
}

ResponseT = t.TypeVar("ResponseT", bound=BaseModel)


def get_mime_type_from_filename(filename: str) -> str:
    extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return MIME_TYPES.get(extension, "application/octet-stream")


def build_style_form(
    request: StyleAnalysisRequest,
) -> tuple[dict[str, str], dict[str, tuple[str, bytes, str]]]:
    """
    Build the multipart payload of a style analysis submission.

    Parameters
    ----------
    request : StyleAnalysisRequest
        Document and guidance settings.

    Returns
    -------
    tuple[dict[str, str], dict[str, tuple[str, bytes, str]]]
        Form fields and the ``file_upload`` part, in the shape httpx expects
        for ``data=`` and ``files=``.
    """
    filename = request.document_name or DEFAULT_DOCUMENT_NAME
    if isinstance(request.content, str):
        upload = (filename, request.content.encode("utf-8"), "text/plain")
    else:
        mime_type = request.mime_type or get_mime_type_from_filename(filename)
        upload = (filename, request.content, mime_type)

    data = {
        "style_guide": request.style_guide or "",
        "dialect": request.dialect or Dialect.american_english.value,
        "tone": request.tone or Tone.formal.value,
    }
    return data, {"file_upload": upload}


async def submit_style_analysis(
    endpoint: str,
    request: StyleAnalysisRequest,
    config: Config,
) -> StyleAnalysisSubmitResponse:
    data, files = build_style_form(request)
    payload = await post_data(config, endpoint, data=data, files=files)
    return StyleAnalysisSubmitResponse.model_validate(payload)


async def submit_and_poll_style_analysis(
    endpoint: str,
    request: StyleAnalysisRequest,
    config: Config,
    response_model: type[ResponseT],
) -> ResponseT:
    """
    Submit a document and wait for its workflow to complete.

    Parameters
    ----------
    endpoint : str
        Style endpoint to submit to.
    request : StyleAnalysisRequest
        Document and guidance settings.
    config : Config
        Connection configuration.
    response_model : type[ResponseT]
        Model used to validate the completed workflow payload.

    Returns
    -------
    ResponseT
        Validated workflow result.

    Raises
    ------
    ApiError
        If no workflow id is returned, or the workflow does not complete.
    """
    submission = await submit_style_analysis(endpoint, request, config)
    if not submission.workflow_id:
        raise ApiError(
            f"No workflow_id received from initial {endpoint} request",
            ErrorType.UNEXPECTED_STATUS,
        )
    log.debug(event="Submitted style analysis", endpoint=endpoint, workflow_id=submission.workflow_id)

    payload = await poll_workflow_for_result(submission.workflow_id, endpoint, config)
    response = response_model.model_validate(payload)
    status = str(getattr(response, "status", "")).lower()
    if status != WorkflowStatus.COMPLETED.value:
        raise ApiError(f"{endpoint} failed with status: {status}", ErrorType.WORKFLOW_FAILED)
    return response
