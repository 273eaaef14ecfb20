from typing import Any

from fastapi import Request

from rest_provider.errors import BadRequest
from rest_provider.schemas import RestRequest


async def get_rest_request(request: Request) -> RestRequest:
    """
    FastAPI dependency that turns the incoming request into a ``RestRequest``.

    - ``params``: the matched route parameters (``id``, ``collection``,
      ``documentId``), as strings.
    - ``query``: the query string; for repeated keys the last value wins.
    - ``body``: the decoded JSON body, or None when the body is empty.

    A body that is not valid JSON raises ``BadRequest``.  No other checks
    are made; whether the values make sense is for the service to decide.
    """
    return RestRequest(
        method=request.method,
        url=request.url.path,
        params=dict(request.path_params),
        query=dict(request.query_params),
        body=await _read_body(request),
    )


async def _read_body(request: Request) -> Any:
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return await request.json()
    except ValueError as exc:
        raise BadRequest("Request body is not valid JSON", data={"error": str(exc)}) from exc


def get_request_context(request: Request) -> dict:
    """Return a copy of the ambient context seeded by ``RequestContextMiddleware``."""
    return dict(getattr(request.state, "context", None) or {})
