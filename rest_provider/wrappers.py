"""
REST handler factory: binds one service operation to a request handler.

Design notes
------------
- A handler is built from an ``Operation`` descriptor (name, arity and an
  argument-extraction function) plus the target service.  It is called as
  ``handler(request, response, next, context)`` where ``next`` is the
  continuation: ``next()`` on success, ``next(error)`` on failure.
- The service is looked up on every call; services are heterogeneous and
  any of the ten operations may be missing.
- Services answer through ``callback(error, data)``, synchronously or on a
  later loop iteration.  A synchronous raise is caught, tagged with
  ``code = 422`` and fed through the same callback, so both failure paths
  end up as one ``Result`` handed to ``next``.
- The handler never renders a response.  It sets ``response.data`` and,
  where the policy asks for it, ``response.status_code``; rendering and the
  final error status belong to whatever runs after ``next``.
"""
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from rest_provider.errors import MethodNotAllowed, Unprocessable
from rest_provider.schemas import RestRequest, RestResponse, Result

logger = logging.getLogger(__name__)

CREATED = 201
NO_CONTENT = 204
METHOD_NOT_ALLOWED = MethodNotAllowed.code
UNPROCESSABLE = Unprocessable.code

Next = Callable[..., Any]
Callback = Callable[..., None]
Handler = Callable[..., None]


# ---------------------------------------------------------------------------
# Argument extraction
# ---------------------------------------------------------------------------
# Each strategy returns the leading positional arguments for one operation.
# Route values are passed through untouched; a missing one becomes None and
# it is up to the service to reject it.

def no_args(request: RestRequest) -> list:
    return []


def id_args(request: RestRequest) -> list:
    return [request.params.get("id")]


def id_body_args(request: RestRequest) -> list:
    return [request.params.get("id"), request.body]


def body_args(request: RestRequest) -> list:
    return [request.body]


def collection_args(request: RestRequest) -> list:
    return [request.params.get("id"), request.params.get("collection")]


def collection_body_args(request: RestRequest) -> list:
    return [request.params.get("id"), request.params.get("collection"), request.body]


def document_args(request: RestRequest) -> list:
    return [
        request.params.get("id"),
        request.params.get("collection"),
        request.params.get("documentId"),
    ]


@dataclass(frozen=True)
class Operation:
    name: str
    arity: int
    extract: Callable[[RestRequest], list]


OPERATIONS: dict[str, Operation] = {
    op.name: op
    for op in (
        Operation("find", 0, no_args),
        Operation("get", 1, id_args),
        Operation("create", 1, body_args),
        Operation("update", 2, id_body_args),
        Operation("patch", 2, id_body_args),
        Operation("remove", 1, id_args),
        Operation("findInCollection", 2, collection_args),
        Operation("addToCollection", 3, collection_body_args),
        Operation("getInCollection", 3, document_args),
        Operation("removeFromCollection", 3, document_args),
    )
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def get_method(service: Any, name: str) -> Callable | None:
    """Return the service's callable for *name*, or None if it has none."""
    if isinstance(service, Mapping):
        method = service.get(name)
    else:
        method = getattr(service, name, None)
    return method if callable(method) else None


def service_params(request: RestRequest, context: Mapping | None = None) -> dict:
    """
    Build the params mapping passed to every service call.

    ``{"query": ...}`` first, then the route params, then the ambient
    context.  ``id`` is always dropped; it travels as a leading argument.
    """
    params: dict[str, Any] = {"query": dict(request.query or {})}
    params.update(request.params or {})
    if context:
        params.update(context)
    params.pop("id", None)
    return params


# ---------------------------------------------------------------------------
# Handler factory
# ---------------------------------------------------------------------------

def build_handler(operation: Operation, service: Any) -> Handler:
    """Return a request handler dispatching *operation* to *service*."""

    def handler(
        request: RestRequest,
        response: RestResponse,
        next: Next,
        context: Mapping | None = None,
    ) -> None:
        method = get_method(service, operation.name)
        if method is None:
            logger.debug("Method `%s` not allowed on `%s`", operation.name, request.url)
            response.status_code = METHOD_NOT_ALLOWED
            next(
                MethodNotAllowed(
                    f"Method `{operation.name}` is not supported by `{request.url}`."
                )
            )
            return

        args = operation.extract(request)
        params = service_params(request, context)
        settled = False

        def settle(result: Result) -> None:
            if not result.ok:
                logger.debug("Error in REST handler: `%s`", result.error)
                next(result.error)
                return

            response.data = result.data
            if not result.data:
                logger.debug("No content returned for `%s`", request.url)
                response.status_code = NO_CONTENT
            elif operation.name == "create":
                response.status_code = CREATED
            next()

        def callback(error: BaseException | None = None, data: Any = None) -> None:
            nonlocal settled
            if settled:
                logger.warning(
                    "Service called back more than once for `%s` on `%s`; ignoring",
                    operation.name,
                    request.url,
                )
                return
            settled = True
            settle(Result.failure(error) if error is not None else Result.success(data))

        logger.debug("REST handler calling `%s` from `%s`", operation.name, request.url)
        try:
            method(*args, params, callback)
        except Exception as error:
            # Raised after the request was settled: not a service failure.
            if settled:
                raise
            error.code = UNPROCESSABLE
            callback(error)

    handler.__name__ = f"{operation.name}_handler"
    return handler


def handlers_for(service: Any) -> dict[str, Handler]:
    """Build a handler for each of the ten operations, keyed by name."""
    return {name: build_handler(op, service) for name, op in OPERATIONS.items()}
