"""Error hierarchy, status selection and JSON payloads."""
import pytest

from rest_provider.errors import (
    BadRequest,
    GeneralError,
    MethodNotAllowed,
    NotFound,
    RestError,
    Unprocessable,
    error_payload,
    error_status,
)


@pytest.mark.parametrize(
    "cls, code",
    [
        (BadRequest, 400),
        (NotFound, 404),
        (MethodNotAllowed, 405),
        (Unprocessable, 422),
        (GeneralError, 500),
    ],
)
def test_error_codes(cls, code):
    error = cls("msg")
    assert isinstance(error, RestError)
    assert error.code == code
    assert error_status(error) == code


def test_default_message_is_the_name():
    assert str(NotFound()) == "NotFound"


def test_payload_shape():
    error = MethodNotAllowed("Method `get` is not supported", data={"path": "/x"})
    assert error.to_dict() == {
        "name": "MethodNotAllowed",
        "message": "Method `get` is not supported",
        "code": 405,
        "className": "method-not-allowed",
        "data": {"path": "/x"},
    }


def test_retagged_code_is_used():
    error = BadRequest("bad id")
    error.code = 422
    assert error_status(error) == 422
    assert error_payload(error)["code"] == 422
    assert BadRequest.code == 400


def test_plain_exception_payload():
    error = ValueError("boom")
    assert error_status(error) == 500
    assert error_payload(error) == {
        "name": "ValueError",
        "message": "boom",
        "code": 500,
        "className": "value-error",
    }


def test_fallback_status_used_when_error_has_no_code():
    assert error_status(RuntimeError(), fallback=405) == 405


@pytest.mark.parametrize("code", [200, 99, "404", True, None])
def test_invalid_codes_are_ignored(code):
    error = RuntimeError()
    error.code = code
    assert error_status(error) == 500


def test_unclassified_errors_fall_back_to_general_error_status():
    assert error_status(KeyError("x")) == GeneralError.code
    assert error_payload(KeyError("x"))["code"] == GeneralError.code
