from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# --- Transport ---

class RestRequest(BaseModel):
    """A request as delivered by the routing layer, already parsed."""

    method: str = "GET"
    url: str = "/"
    params: dict[str, Any] = Field(default_factory=dict)
    query: dict[str, Any] = Field(default_factory=dict)
    body: Any = None


class RestResponse(BaseModel):
    """Mutable response state filled in by a handler and read by the renderer."""

    status_code: int | None = None
    data: Any = None


# --- Service outcome ---

class Result(BaseModel):
    """Outcome of one service call, from either the callback or a raised exception."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    data: Any = None
    error: Any = None

    @classmethod
    def success(cls, data: Any) -> "Result":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: Any) -> "Result":
        return cls(ok=False, error=error)
