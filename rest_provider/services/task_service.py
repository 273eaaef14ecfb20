"""
Task service: an in-memory service that implements all ten REST operations.

Every method follows the callback contract the REST handlers expect::

    method(*leading_args, params, callback)

and answers with ``callback(None, data)`` or ``callback(error)``.

Design notes
------------
- Bad input (an id that is not an integer, a body that is not an object)
  is raised synchronously as ``BadRequest``; the dispatcher reports such
  raises as 422.  A missing task or document is an answer, not a raise: it
  goes through the callback as ``NotFound``.
- With ``defer=True`` the callback is scheduled on the running event loop
  instead of being called in place, so the service behaves like one backed
  by real I/O.  Without a running loop it always answers in place.
- Nothing is persisted; ``reset()`` restores the seed data.
"""
import asyncio
import copy
from collections.abc import Callable
from typing import Any

from rest_provider.errors import BadRequest, NotFound

Callback = Callable[..., None]

SEED_TASKS: list[dict] = [
    {
        "id": 0,
        "description": "You have to do something",
        "subtasks": [
            {"id": 0, "description": "play a video game"},
            {"id": 1, "description": "watch a movie"},
        ],
    },
    {
        "id": 1,
        "description": "You have to do laundry",
        "subtasks": [
            {"id": 0, "description": "the blue jean"},
            {"id": 1, "description": "the red shirt"},
        ],
    },
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_id(value: Any, label: str = "id") -> int:
    """Return *value* as an int, raising ``BadRequest`` if it is not one."""
    if isinstance(value, bool):
        raise BadRequest(f"Invalid {label}: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise BadRequest(f"Invalid {label}: {value!r}") from None


def _require_object(data: Any) -> dict:
    if not isinstance(data, dict):
        raise BadRequest("Task data must be a JSON object")
    return data


def _next_id(items: list) -> int:
    """One past the largest integer id among the object items of *items*."""
    ids = (
        item["id"]
        for item in items
        if isinstance(item, dict)
        and isinstance(item.get("id"), int)
        and not isinstance(item["id"], bool)
    )
    return max(ids, default=-1) + 1


def _find_document(items: list, document_id: int) -> dict | None:
    # Collections may hold arbitrary JSON; only objects can match.
    return next(
        (d for d in items if isinstance(d, dict) and d.get("id") == document_id),
        None,
    )


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class TaskService:
    def __init__(self, tasks: list[dict] | None = None, defer: bool = False) -> None:
        self._seed = copy.deepcopy(SEED_TASKS if tasks is None else tasks)
        self.defer = defer
        self.tasks: list[dict] = []
        self.reset()

    def reset(self) -> None:
        self.tasks = copy.deepcopy(self._seed)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _reply(self, callback: Callback, error: BaseException | None, data: Any = None) -> None:
        if self.defer:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                loop = None
            if loop is not None:
                loop.call_soon(callback, error, data)
                return
        callback(error, data)

    def _find_task(self, task_id: int) -> dict | None:
        return next((t for t in self.tasks if t["id"] == task_id), None)

    def _collection(self, task: dict, collection: Any) -> list[dict] | None:
        items = task.get(collection) if isinstance(collection, str) else None
        return items if isinstance(items, list) else None

    # ------------------------------------------------------------------
    # Resource operations
    # ------------------------------------------------------------------

    def find(self, params: dict, callback: Callback) -> None:
        self._reply(callback, None, copy.deepcopy(self.tasks))

    def get(self, id: Any, params: dict, callback: Callback) -> None:
        task = self._find_task(_parse_id(id))
        if task is None:
            self._reply(callback, NotFound(f"No task found for id '{id}'"))
            return
        self._reply(callback, None, copy.deepcopy(task))

    def create(self, data: Any, params: dict, callback: Callback) -> None:
        task = dict(_require_object(data))
        task["id"] = _next_id(self.tasks)
        task["status"] = "created"
        self.tasks.append(task)
        self._reply(callback, None, copy.deepcopy(task))

    def update(self, id: Any, data: Any, params: dict, callback: Callback) -> None:
        task_id = _parse_id(id)
        data = _require_object(data)
        task = self._find_task(task_id)
        if task is None:
            self._reply(callback, NotFound(f"No task found for id '{id}'"))
            return
        replacement = dict(data, id=task_id, status="updated")
        self.tasks[self.tasks.index(task)] = replacement
        self._reply(callback, None, copy.deepcopy(replacement))

    def patch(self, id: Any, data: Any, params: dict, callback: Callback) -> None:
        task_id = _parse_id(id)
        data = _require_object(data)
        task = self._find_task(task_id)
        if task is None:
            self._reply(callback, NotFound(f"No task found for id '{id}'"))
            return
        task.update(data)
        task["id"] = task_id
        task["status"] = "patched"
        self._reply(callback, None, copy.deepcopy(task))

    def remove(self, id: Any, params: dict, callback: Callback) -> None:
        task = self._find_task(_parse_id(id))
        if task is None:
            self._reply(callback, NotFound(f"No task found for id '{id}'"))
            return
        self.tasks.remove(task)
        self._reply(callback, None, {"id": task["id"]})

    # ------------------------------------------------------------------
    # Collection operations
    # ------------------------------------------------------------------

    def _resolve_collection(self, id: Any, collection: Any, callback: Callback) -> list[dict] | None:
        """Return the collection list, or answer NotFound and return None."""
        task = self._find_task(_parse_id(id))
        if task is None:
            self._reply(callback, NotFound(f"No task found for id '{id}'"))
            return None
        items = self._collection(task, collection)
        if items is None:
            self._reply(callback, NotFound(f"Task '{id}' has no collection '{collection}'"))
            return None
        return items

    def findInCollection(self, id: Any, collection: Any, params: dict, callback: Callback) -> None:
        items = self._resolve_collection(id, collection, callback)
        if items is not None:
            self._reply(callback, None, copy.deepcopy(items))

    def addToCollection(
        self, id: Any, collection: Any, data: Any, params: dict, callback: Callback
    ) -> None:
        data = _require_object(data)
        items = self._resolve_collection(id, collection, callback)
        if items is None:
            return
        document = dict(data, id=_next_id(items), status="added")
        items.append(document)
        self._reply(callback, None, copy.deepcopy(document))

    def getInCollection(
        self, id: Any, collection: Any, documentId: Any, params: dict, callback: Callback
    ) -> None:
        document_id = _parse_id(documentId, "documentId")
        items = self._resolve_collection(id, collection, callback)
        if items is None:
            return
        document = _find_document(items, document_id)
        if document is None:
            self._reply(callback, NotFound(f"No document '{documentId}' in '{collection}'"))
            return
        self._reply(callback, None, copy.deepcopy(document))

    def removeFromCollection(
        self, id: Any, collection: Any, documentId: Any, params: dict, callback: Callback
    ) -> None:
        document_id = _parse_id(documentId, "documentId")
        items = self._resolve_collection(id, collection, callback)
        if items is None:
            return
        document = _find_document(items, document_id)
        if document is None:
            self._reply(callback, NotFound(f"No document '{documentId}' in '{collection}'"))
            return
        items.remove(document)
        self._reply(callback, None, {"id": document_id, "status": "removed"})
