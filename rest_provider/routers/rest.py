"""
FastAPI binding for the REST handlers.

``service_router`` mounts a service under a prefix with the standard
resource routes; each route runs the matching handler from
``rest_provider.wrappers`` and then renders whatever the handler left on
the ``RestResponse`` (or the error it passed to ``next``).
"""
import asyncio
import logging

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

from rest_provider.dependencies import get_request_context, get_rest_request
from rest_provider.errors import error_payload, error_status
from rest_provider.schemas import RestRequest, RestResponse
from rest_provider.wrappers import NO_CONTENT, Handler, handlers_for

logger = logging.getLogger(__name__)

# (operation, path, HTTP method)
ROUTES: tuple[tuple[str, str, str], ...] = (
    ("find", "", "GET"),
    ("create", "", "POST"),
    ("get", "/{id}", "GET"),
    ("update", "/{id}", "PUT"),
    ("patch", "/{id}", "PATCH"),
    ("remove", "/{id}", "DELETE"),
    ("findInCollection", "/{id}/{collection}", "GET"),
    ("addToCollection", "/{id}/{collection}", "POST"),
    ("getInCollection", "/{id}/{collection}/{documentId}", "GET"),
    ("removeFromCollection", "/{id}/{collection}/{documentId}", "DELETE"),
)


async def dispatch(
    handler: Handler,
    request: RestRequest,
    context: dict | None = None,
) -> tuple[RestResponse, BaseException | None]:
    """
    Run *handler* and wait for it to call ``next``.

    Returns the response state and the error passed to ``next`` (None on
    success).  ``next`` may be called from inside the handler, from a later
    loop callback, or from another thread.
    """
    loop = asyncio.get_running_loop()
    done: asyncio.Future = loop.create_future()
    response = RestResponse()

    def resolve(error: BaseException | None) -> None:
        if not done.done():
            done.set_result(error)

    def next_(error: BaseException | None = None) -> None:
        loop.call_soon_threadsafe(resolve, error)

    handler(request, response, next_, context)
    error = await done
    return response, error


def render(response: RestResponse, error: BaseException | None = None) -> Response:
    """Turn the handler's outcome into an HTTP response."""
    if error is not None:
        status = error_status(error, response.status_code)
        if status >= 500:
            logger.error("Unhandled service error: %s", error, exc_info=error)
        return JSONResponse(error_payload(error, status), status_code=status)

    if response.status_code == NO_CONTENT:
        return Response(status_code=NO_CONTENT)

    return JSONResponse(
        jsonable_encoder(response.data),
        status_code=response.status_code or 200,
    )


def _endpoint(handler: Handler):
    async def endpoint(
        rest_request: RestRequest = Depends(get_rest_request),
        context: dict = Depends(get_request_context),
    ) -> Response:
        response, error = await dispatch(handler, rest_request, context)
        return render(response, error)

    endpoint.__name__ = handler.__name__
    return endpoint


def service_router(prefix: str, service, tags: list[str] | None = None) -> APIRouter:
    """Return an ``APIRouter`` exposing *service* under *prefix*."""
    router = APIRouter(prefix=prefix, tags=tags)
    handlers = handlers_for(service)
    for operation, path, method in ROUTES:
        router.add_api_route(
            path,
            _endpoint(handlers[operation]),
            methods=[method],
            name=f"{prefix}:{operation}",
        )
    return router
