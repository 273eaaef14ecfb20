"""
Typed errors shared by services and the REST layer.

Each class carries the HTTP status it maps to as ``code``.  The value is a
class attribute so it can be re-tagged per instance (the dispatcher marks
synchronously raised service errors as 422 on the same object).
"""
from typing import Any


class RestError(Exception):
    """Base class for every error rendered by the REST layer."""

    name = "GeneralError"
    code = 500

    def __init__(self, message: str | None = None, data: Any = None) -> None:
        self.message = message or self.name
        self.data = data
        super().__init__(self.message)

    @property
    def class_name(self) -> str:
        return _class_name(self.name)

    def to_dict(self) -> dict:
        payload = {
            "name": self.name,
            "message": self.message,
            "code": self.code,
            "className": self.class_name,
        }
        if self.data is not None:
            payload["data"] = self.data
        return payload


class BadRequest(RestError):
    name = "BadRequest"
    code = 400


class NotFound(RestError):
    name = "NotFound"
    code = 404


class MethodNotAllowed(RestError):
    name = "MethodNotAllowed"
    code = 405


class Unprocessable(RestError):
    name = "Unprocessable"
    code = 422


class GeneralError(RestError):
    name = "GeneralError"
    code = 500


def _class_name(name: str) -> str:
    """``MethodNotAllowed`` -> ``method-not-allowed``."""
    out = []
    for i, ch in enumerate(name):
        if ch.isupper() and i:
            out.append("-")
        out.append(ch.lower())
    return "".join(out)


def _http_code(value: Any) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool) and 400 <= value < 600:
        return value
    return None


def error_status(error: BaseException, fallback: int | None = None) -> int:
    """
    Return the HTTP status to render for *error*.

    The error's own ``code`` wins when it is a valid 4xx/5xx status; next
    comes *fallback* (the status already set on the response); anything
    else is a ``GeneralError`` (500).
    """
    return (
        _http_code(getattr(error, "code", None))
        or _http_code(fallback)
        or GeneralError.code
    )


def error_payload(error: BaseException, status: int | None = None) -> dict:
    """Serialise any exception into the JSON error body."""
    if isinstance(error, RestError):
        payload = error.to_dict()
        if status is not None:
            payload["code"] = status
        return payload

    name = type(error).__name__
    return {
        "name": name,
        "message": str(error) or name,
        "code": status if status is not None else error_status(error),
        "className": _class_name(name),
    }
