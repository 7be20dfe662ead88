"""
Connection configuration for the style API.
"""

import os
import typing as t
from enum import StrEnum

import httpx
import structlog
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

log = structlog.get_logger(__name__)

API_KEY_ENV_VAR = "MARKUP_API_KEY"
PLATFORM_URL_ENV_VAR = "MARKUP_PLATFORM_URL"
ENVIRONMENT_ENV_VAR = "MARKUP_ENVIRONMENT"


class Environment(StrEnum):
    DEV = "dev"
    STAGE = "stage"
    PROD = "prod"


PLATFORM_URLS: dict[Environment, str] = {
    Environment.DEV: "https://app.dev.acrolinx-cloud.net",
    Environment.STAGE: "https://app.stg.acrolinx-cloud.net",
    Environment.PROD: "https://app.acrolinx.cloud",
}


def _default_client_factory() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=30.0)


class Config(BaseModel):
    """
    Credentials and platform selection passed to every API call.

    Parameters
    ----------
    api_key : str
        API key sent in the ``Authorization`` header.
    auth_scheme : str | None, optional
        Scheme put before the key, such as ``Bearer``. The raw key is sent by default.
    environment : Environment, optional
        Named platform used when ``platform_url`` is not set.
    platform_url : str | None, optional
        Explicit platform URL, takes precedence over ``environment``.
    poll_interval_seconds : float, optional
        Delay between two workflow polls.
    max_poll_attempts : int, optional
        Number of polls before a workflow is reported as timed out.
    rate_limit_retries : int, optional
        Number of times a ``429`` response is retried.
    client_factory : Callable[[], httpx.AsyncClient], optional
        Factory of the httpx client used for each request.
    """

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(repr=False)
    auth_scheme: str | None = None
    environment: Environment = Environment.PROD
    platform_url: str | None = None
    poll_interval_seconds: float = Field(default=2.0, ge=0)
    max_poll_attempts: int = Field(default=30, ge=1)
    rate_limit_retries: int = Field(default=3, ge=0)
    client_factory: t.Callable[[], httpx.AsyncClient] = Field(
        default=_default_client_factory, exclude=True, repr=False
    )

    @field_validator("api_key")
    @classmethod
    def check_api_key(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("api_key cannot be empty")
        return value

    @property
    def base_url(self) -> str:
        """Platform URL without trailing slash."""
        if self.platform_url:
            return self.platform_url.rstrip("/")
        return PLATFORM_URLS[self.environment]

    @property
    def headers(self) -> dict[str, str]:
        """Request headers. The key is sent as is unless ``auth_scheme`` prefixes it."""
        if self.auth_scheme:
            return {"Authorization": f"{self.auth_scheme} {self.api_key}"}
        return {"Authorization": self.api_key}

    @classmethod
    def from_env(cls, **overrides: t.Any) -> "Config":
        """
        Build a configuration from environment variables and a local ``.env`` file.

        Parameters
        ----------
        **overrides : typing.Any
            Fields that take precedence over the environment.

        Returns
        -------
        Config
            Resolved configuration.

        Raises
        ------
        ValueError
            If no API key is found.
        """
        load_dotenv()
        values: dict[str, t.Any] = {}
        api_key = os.getenv(API_KEY_ENV_VAR)
        if api_key:
            values["api_key"] = api_key
        platform_url = os.getenv(PLATFORM_URL_ENV_VAR)
        if platform_url:
            values["platform_url"] = platform_url
        environment = os.getenv(ENVIRONMENT_ENV_VAR)
        if environment:
            values["environment"] = environment.lower()
        values.update({key: value for key, value in overrides.items() if value is not None})

        if not values.get("api_key"):
            raise ValueError(
                f"API key not found. Either set {API_KEY_ENV_VAR} in the environment variables "
                "or provide it through the api_key parameter."
            )
        config = cls(**values)
        log.debug(event="Loaded config", base_url=config.base_url)
        return config
