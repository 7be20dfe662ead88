import httpx
import pytest

from markup_toolkit.config import Config
from markup_toolkit.style.models import StyleAnalysisRequest
from tests.mocks.style_api import FakeStyleAPI, make_config


@pytest.fixture(autouse=True)
def test_set_env(monkeypatch):
    monkeypatch.setenv("MARKUP_API_KEY", "test-key")
    monkeypatch.delenv("MARKUP_PLATFORM_URL", raising=False)
    monkeypatch.delenv("MARKUP_ENVIRONMENT", raising=False)


@pytest.fixture
def fake_api() -> FakeStyleAPI:
    """
    Create a fake style API completing each workflow after one running poll.
    """
    return FakeStyleAPI()


@pytest.fixture
def mock_style_api_transport(fake_api: FakeStyleAPI) -> httpx.MockTransport:
    return fake_api.transport()


@pytest.fixture
def config(mock_style_api_transport: httpx.MockTransport) -> Config:
    """
    Create a configuration routed to the fake style API.

    Returns
    -------
    Config
        Configuration with no polling delay.
    """
    return make_config(mock_style_api_transport)


@pytest.fixture
def style_request() -> StyleAnalysisRequest:
    return StyleAnalysisRequest(
        content="This is a test sentence.",
        style_guide="ap",
        dialect="american_english",
        tone="academic",
        document_name="sample.txt",
    )
