import time
import uuid

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from rest_provider.config import settings

REQUEST_ID_HEADER = b"x-request-id"


# ---------------------------------------------------------------------------
# Middleware (pure ASGI, no BaseHTTPMiddleware)
# ---------------------------------------------------------------------------

class RequestContextMiddleware:
    """
    Pure ASGI middleware that seeds the ambient request context.

    Every HTTP request gets ``scope["state"]["context"]``, a fresh dict
    that the REST dispatcher merges into the params of the service call:

    - ``provider``: ``settings.PROVIDER_NAME`` (``"rest"`` by default).
    - ``request_id``: the incoming ``X-Request-Id`` header, or a new
      random hex id.

    Two response headers are added on the way out:

    - ``X-Request-Id``: the id placed in the context.
    - ``X-Response-Time-Ms``: wall-clock time for the entire request.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = _header(scope, REQUEST_ID_HEADER) or uuid.uuid4().hex
        state = scope.setdefault("state", {})
        state["context"] = {
            "provider": settings.PROVIDER_NAME,
            "request_id": request_id,
        }
        start = time.perf_counter()

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                duration_ms = round((time.perf_counter() - start) * 1000, 2)
                headers = list(message.get("headers", []))
                headers.append((REQUEST_ID_HEADER, request_id.encode("latin-1")))
                headers.append((b"x-response-time-ms", str(duration_ms).encode()))
                message["headers"] = headers
            await send(message)

        await self.app(scope, receive, send_wrapper)


def _header(scope: Scope, name: bytes) -> str | None:
    for key, value in scope.get("headers", []):
        if key.lower() == name:
            return value.decode("latin-1")
    return None
