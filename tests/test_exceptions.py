import httpx

from markup_toolkit.batching.models import BatchItemError
from markup_toolkit.exceptions import ApiError, BatchCancelledError, ErrorType


def test_from_response_with_error_payload():
    error = ApiError.from_response(
        404,
        {"error": {"code": "workflowNotFound", "message": "Not found", "description": "Gone"}},
    )

    assert error.message == "Gone"
    assert error.type == ErrorType.WORKFLOW_NOT_FOUND
    assert error.status_code == 404
    assert error.is_api_error
    assert error.is_not_found_error


def test_from_response_keeps_unknown_codes():
    error = ApiError.from_response(
        403, {"error": {"code": "quotaExceeded", "message": "Quota exceeded"}}
    )

    assert error.message == "Quota exceeded"
    assert error.type == "quotaExceeded"


def test_from_response_with_validation_payload():
    payload = {
        "detail": [
            {"loc": ["body", "tone"], "msg": "field required", "type": "missing"},
            {"loc": ["body", "dialect"], "msg": "bad dialect", "type": "enum"},
        ]
    }

    error = ApiError.from_response(422, payload)

    assert error.message == "Validation failed: field required; bad dialect"
    assert error.is_validation_error
    assert error.get_validation_errors() == {
        "body.tone": ["field required"],
        "body.dialect": ["bad dialect"],
    }


def test_from_response_fallbacks():
    assert ApiError.from_response(500, {"message": "Server exploded"}).message == "Server exploded"
    assert ApiError.from_response(500, {"detail": "Plain detail"}).message == "Plain detail"
    assert ApiError.from_response(502, {}).message == "HTTP error! status: 502"
    assert ApiError.from_response(502, ["not", "a", "dict"]).message == "HTTP error! status: 502"


def test_get_validation_errors_is_empty_for_other_errors():
    error = ApiError.from_response(500, {"message": "boom"})

    assert error.get_validation_errors() == {}
    assert not error.is_validation_error


def test_from_error_wraps_original():
    original = httpx.ConnectError("connection refused")

    error = ApiError.from_error(original, ErrorType.NETWORK_ERROR)

    assert error.message == "connection refused"
    assert error.is_network_error
    assert not error.is_api_error
    assert error.raw_error_data["original_error"] is original


def test_batch_cancelled_error_message():
    assert str(BatchCancelledError()) == "Batch operation cancelled"


def test_batch_item_error_from_exception():
    api_error = BatchItemError.from_exception(
        ApiError("Workflow failed with status: failed", ErrorType.WORKFLOW_FAILED)
    )
    plain_error = BatchItemError.from_exception(KeyError())

    assert api_error.message == "Workflow failed with status: failed"
    assert api_error.type == "WORKFLOW_FAILED"
    assert api_error.status_code is None
    assert plain_error.message == "KeyError"
    assert plain_error.type == "KeyError"
