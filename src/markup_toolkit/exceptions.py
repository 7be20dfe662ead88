"""
Error taxonomy shared by the HTTP layer and the batch engine.
"""

from __future__ import annotations

import typing as t
from enum import StrEnum


class ErrorType(StrEnum):
    # Server-side error codes
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    WORKFLOW_NOT_FOUND = "workflowNotFound"

    # Client-side failures
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    WORKFLOW_FAILED = "WORKFLOW_FAILED"
    UNEXPECTED_STATUS = "UNEXPECTED_STATUS"
    POLLING_ERROR = "POLLING_ERROR"


class ApiError(Exception):
    """
    Error raised by the style API client.

    Parameters
    ----------
    message : str
        Human-readable error message.
    type : ErrorType | str
        Error classification. Server codes that are not part of ``ErrorType``
        are kept as plain strings.
    status_code : int | None, optional
        HTTP status code, only set for errors built from an API response.
    raw_error_data : dict[str, typing.Any] | None, optional
        Decoded error payload or extra context.
    """

    def __init__(
        self,
        message: str,
        type: ErrorType | str = ErrorType.UNKNOWN_ERROR,
        status_code: int | None = None,
        raw_error_data: dict[str, t.Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.type = type
        self.status_code = status_code
        self.raw_error_data = raw_error_data or {}

    def __repr__(self) -> str:
        return (
            f"ApiError(message={self.message!r}, type={str(self.type)!r}, "
            f"status_code={self.status_code!r})"
        )

    @classmethod
    def from_response(cls, status_code: int, error_data: t.Any) -> ApiError:
        """
        Build an error from a non-2xx API response.

        Parameters
        ----------
        status_code : int
            HTTP status code of the response.
        error_data : typing.Any
            Decoded JSON body, or an empty dict when the body was not JSON.

        Returns
        -------
        ApiError
            Error carrying the best available message and classification.

        Notes
        -----
        Two payload shapes are recognised:
        - ``{"error": {"code", "message", "description"}}`` (404 and friends)
        - ``{"detail": [{"loc", "msg", "type"}]}`` (422 validation errors)
        """
        if not isinstance(error_data, dict):
            error_data = {}

        if _is_api_error_payload(error_data):
            error = error_data["error"]
            message = error.get("description") or error["message"]
            code = error["code"]
            error_type: ErrorType | str = (
                ErrorType(code) if code in ErrorType._value2member_map_ else code
            )
            return cls(message, error_type, status_code, error_data)

        if _is_validation_error_payload(error_data):
            messages = "; ".join(detail["msg"] for detail in error_data["detail"])
            return cls(
                f"Validation failed: {messages}",
                ErrorType.VALIDATION_ERROR,
                status_code,
                error_data,
            )

        detail = error_data.get("detail") if isinstance(error_data.get("detail"), str) else None
        message = error_data.get("message") if isinstance(error_data.get("message"), str) else None
        return cls(
            message or detail or f"HTTP error! status: {status_code}",
            ErrorType.UNKNOWN_ERROR,
            status_code,
            error_data,
        )

    @classmethod
    def from_error(cls, error: BaseException, type: ErrorType) -> ApiError:
        """Wrap a non-API failure (network, timeout...)."""
        return cls(str(error) or type.value, type, None, {"original_error": error})

    @property
    def is_api_error(self) -> bool:
        return self.status_code is not None

    @property
    def is_validation_error(self) -> bool:
        return self.type == ErrorType.VALIDATION_ERROR or self.status_code == 422

    @property
    def is_not_found_error(self) -> bool:
        return self.status_code == 404 or self.type == ErrorType.WORKFLOW_NOT_FOUND

    @property
    def is_network_error(self) -> bool:
        return self.type == ErrorType.NETWORK_ERROR

    @property
    def is_timeout_error(self) -> bool:
        return self.type == ErrorType.TIMEOUT_ERROR

    @property
    def is_workflow_failed(self) -> bool:
        return self.type == ErrorType.WORKFLOW_FAILED

    def get_validation_errors(self) -> dict[str, list[str]]:
        """
        Group validation messages by dotted field location.

        Returns
        -------
        dict[str, list[str]]
            Mapping such as ``{"body.tone": ["field required"]}``. Empty for
            non-validation errors.
        """
        details = self.raw_error_data.get("detail")
        if not self.is_validation_error or not isinstance(details, list):
            return {}

        errors: dict[str, list[str]] = {}
        for detail in details:
            field = ".".join(str(part) for part in detail.get("loc", []))
            errors.setdefault(field, []).append(detail.get("msg", ""))
        return errors


def _is_api_error_payload(error_data: dict[str, t.Any]) -> bool:
    error = error_data.get("error")
    return (
        isinstance(error, dict)
        and isinstance(error.get("code"), str)
        and isinstance(error.get("message"), str)
    )


def _is_validation_error_payload(error_data: dict[str, t.Any]) -> bool:
    details = error_data.get("detail")
    if not isinstance(details, list) or not details:
        return False
    return all(
        isinstance(item, dict)
        and isinstance(item.get("loc"), list)
        and isinstance(item.get("msg"), str)
        and isinstance(item.get("type"), str)
        for item in details
    )


class BatchValidationError(ValueError):
    """Raised synchronously when a batch call has malformed arguments."""


class BatchCancelledError(Exception):
    """Set on a batch future when the batch is cancelled before completion."""

    def __init__(self, message: str = "Batch operation cancelled") -> None:
        super().__init__(message)
