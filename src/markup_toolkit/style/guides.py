"""
Style guide management: list, fetch, create from a PDF, update, delete.
"""

from pathlib import Path
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

import structlog
from pydantic import BaseModel, ConfigDict, TypeAdapter

from markup_toolkit.config import Config
from markup_toolkit.exceptions import ApiError
from markup_toolkit.http import delete_data, get_data, patch_data, post_data

log = structlog.get_logger(__name__)

STYLE_GUIDES_ENDPOINT = "/v1/style-guides"
PDF_MIME_TYPE = "application/pdf"


class StyleGuide(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    status: str | None = None
    created_at: str | None = None
    created_by: str | None = None
    updated_at: str | None = None
    updated_by: str | None = None


class CreateStyleGuideRequest(BaseModel):
    """A PDF document turned into a new style guide."""

    content: bytes
    filename: str
    name: str


class StyleGuideUpdate(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str | None = None


def _check_pdf_filename(filename: str) -> None:
    extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if extension != "pdf":
        raise ValueError(f"Unsupported file type: {extension}. Only .pdf files are supported.")


def create_style_guide_request_from_url(
    file_url: str, name: str | None = None
) -> CreateStyleGuideRequest:
    """
    Read a local PDF into a style guide creation request.

    Parameters
    ----------
    file_url : str
        Local path or ``file://`` URL of the PDF.
    name : str | None, optional
        Style guide name, defaults to the file name without its extension.

    Returns
    -------
    CreateStyleGuideRequest
        Request ready for ``create_style_guide``.

    Raises
    ------
    ValueError
        If the URL is not local, the file is not a PDF, or cannot be read.
    """
    parsed = urlparse(file_url)
    if parsed.scheme == "file":
        path = Path(url2pathname(unquote(parsed.path)))
    elif parsed.scheme and len(parsed.scheme) > 1:
        raise ValueError(
            "Failed to create style guide request from URL: only file:// URLs are supported. "
            "Please provide a local file path or file:// URL."
        )
    else:
        path = Path(file_url)

    try:
        _check_pdf_filename(path.name)
        content = path.read_bytes()
    except (OSError, ValueError) as error:
        raise ValueError(f"Failed to create style guide request from URL: {error}") from error

    return CreateStyleGuideRequest(
        content=content,
        filename=path.name,
        name=name or path.name[: -len(".pdf")],
    )


def create_style_guide_request_from_path(
    file_path: str | Path, name: str | None = None
) -> CreateStyleGuideRequest:
    return create_style_guide_request_from_url(str(file_path), name)


async def list_style_guides(config: Config) -> list[StyleGuide]:
    payload = await get_data(config, STYLE_GUIDES_ENDPOINT)
    return TypeAdapter(list[StyleGuide]).validate_python(payload)


async def get_style_guide(style_guide_id: str, config: Config) -> StyleGuide:
    payload = await get_data(config, f"{STYLE_GUIDES_ENDPOINT}/{style_guide_id}")
    return StyleGuide.model_validate(payload)


async def create_style_guide(request: CreateStyleGuideRequest, config: Config) -> StyleGuide:
    """
    Upload a PDF as a new style guide.

    Raises
    ------
    ValueError
        If the file is not a PDF. Nothing is sent in that case.
    ApiError
        If the platform rejects the upload.
    """
    _check_pdf_filename(request.filename)
    payload = await post_data(
        config,
        STYLE_GUIDES_ENDPOINT,
        data={"name": request.name},
        files={"file_upload": (request.filename, request.content, PDF_MIME_TYPE)},
    )
    style_guide = StyleGuide.model_validate(payload)
    log.info(event="Created style guide", style_guide_id=style_guide.id)
    return style_guide


async def update_style_guide(
    style_guide_id: str, updates: StyleGuideUpdate, config: Config
) -> StyleGuide:
    payload = await patch_data(
        config,
        f"{STYLE_GUIDES_ENDPOINT}/{style_guide_id}",
        json=updates.model_dump(exclude_none=True),
    )
    return StyleGuide.model_validate(payload)


async def delete_style_guide(style_guide_id: str, config: Config) -> None:
    await delete_data(config, f"{STYLE_GUIDES_ENDPOINT}/{style_guide_id}")
    log.info(event="Deleted style guide", style_guide_id=style_guide_id)


async def validate_token(config: Config) -> bool:
    """Tell whether the configured API key is accepted, by listing style guides."""
    try:
        await list_style_guides(config)
    except ApiError as error:
        log.warning(event="Token validation failed", status_code=error.status_code, error=error.message)
        return False
    return True
