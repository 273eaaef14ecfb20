"""
Test infrastructure for the REST provider.

Strategy
--------
- End-to-end tests drive the FastAPI app through httpx.AsyncClient and
  ASGITransport, so no server process is needed.
- The task service mounted by the app is a module-level in-memory
  instance; it is reset to its seed data before every test so each test
  starts from the same two tasks.
- Dispatcher tests do not touch the app at all: they call handlers
  directly with a ``Recorder`` standing in for ``next``.
"""
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from rest_provider.main import app
from rest_provider.routers import tasks


class Recorder:
    """Stand-in for ``next`` that records every call it receives."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def __call__(self, *args) -> None:
        self.calls.append(args)

    @property
    def called(self) -> bool:
        return bool(self.calls)

    @property
    def error(self):
        """The error passed to the single recorded call, or None."""
        assert len(self.calls) == 1, f"expected one call, got {self.calls!r}"
        return self.calls[0][0] if self.calls[0] else None


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def reset_tasks():
    """Restore the mounted task service's seed data around each test."""
    tasks.tasks.reset()
    yield
    tasks.tasks.reset()


@pytest.fixture
def next_recorder() -> Recorder:
    return Recorder()


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    """Yield an httpx.AsyncClient wired to the FastAPI app via ASGITransport."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
