"""
Single-document style operations: submit, fetch by workflow id, submit and poll.
"""

from markup_toolkit.config import Config
from markup_toolkit.http import get_data
from markup_toolkit.style.models import (
    StyleAnalysisRequest,
    StyleAnalysisSubmitResponse,
    StyleCheckResponse,
    StyleRewriteResponse,
    StyleSuggestionResponse,
)
from markup_toolkit.style.utils import submit_and_poll_style_analysis, submit_style_analysis

STYLE_CHECKS_ENDPOINT = "/v1/style/checks"
STYLE_SUGGESTIONS_ENDPOINT = "/v1/style/suggestions"
STYLE_REWRITES_ENDPOINT = "/v1/style/rewrites"


async def submit_style_check(
    request: StyleAnalysisRequest, config: Config
) -> StyleAnalysisSubmitResponse:
    return await submit_style_analysis(STYLE_CHECKS_ENDPOINT, request, config)


async def submit_style_suggestion(
    request: StyleAnalysisRequest, config: Config
) -> StyleAnalysisSubmitResponse:
    return await submit_style_analysis(STYLE_SUGGESTIONS_ENDPOINT, request, config)


async def submit_style_rewrite(
    request: StyleAnalysisRequest, config: Config
) -> StyleAnalysisSubmitResponse:
    return await submit_style_analysis(STYLE_REWRITES_ENDPOINT, request, config)


async def style_check(request: StyleAnalysisRequest, config: Config) -> StyleCheckResponse:
    """Submit a document for a style check and wait for the result."""
    return await submit_and_poll_style_analysis(
        STYLE_CHECKS_ENDPOINT, request, config, StyleCheckResponse
    )


async def style_suggestions(
    request: StyleAnalysisRequest, config: Config
) -> StyleSuggestionResponse:
    """Submit a document for style suggestions and wait for the result."""
    return await submit_and_poll_style_analysis(
        STYLE_SUGGESTIONS_ENDPOINT, request, config, StyleSuggestionResponse
    )


async def style_rewrite(request: StyleAnalysisRequest, config: Config) -> StyleRewriteResponse:
    """Submit a document for a rewrite and wait for the result."""
    return await submit_and_poll_style_analysis(
        STYLE_REWRITES_ENDPOINT, request, config, StyleRewriteResponse
    )


async def get_style_check(workflow_id: str, config: Config) -> StyleCheckResponse:
    payload = await get_data(config, f"{STYLE_CHECKS_ENDPOINT}/{workflow_id}")
    return StyleCheckResponse.model_validate(payload)


async def get_style_suggestion(workflow_id: str, config: Config) -> StyleSuggestionResponse:
    """
    Retrieve style suggestion results for a submitted workflow.

    Parameters
    ----------
    workflow_id : str
        Workflow id returned by ``submit_style_suggestion``.
    config : Config
        Connection configuration.
    """
    payload = await get_data(config, f"{STYLE_SUGGESTIONS_ENDPOINT}/{workflow_id}")
    return StyleSuggestionResponse.model_validate(payload)


async def get_style_rewrite(workflow_id: str, config: Config) -> StyleRewriteResponse:
    """
    Retrieve rewrite results for a submitted workflow.

    Parameters
    ----------
    workflow_id : str
        Workflow id returned by ``submit_style_rewrite``.
    config : Config
        Connection configuration.
    """
    payload = await get_data(config, f"{STYLE_REWRITES_ENDPOINT}/{workflow_id}")
    return StyleRewriteResponse.model_validate(payload)
