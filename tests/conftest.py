import asyncio
import sys
import threading
import time
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from backend.app.config import Settings, get_settings  # noqa: E402
from backend.app.jobs.jobs import JobRegistry, get_registry  # noqa: E402
from backend.app.logging_config import reset_metrics  # noqa: E402
from backend.app.main import app, get_generator  # noqa: E402


class FakeGenerator:
    """Yields canned fragments, optionally waiting on a gate or failing midway."""

    def __init__(self, fragments=("Once ", "upon ", "a time."), error=None, gate=None):
        self.fragments = list(fragments)
        self.error = error
        self.gate = gate
        self.prompts = []

    async def stream(self, prompt):
        self.prompts.append(prompt)
        if self.gate is not None:
            while not self.gate.is_set():
                await asyncio.sleep(0.01)
        for fragment in self.fragments:
            await asyncio.sleep(0)
            yield fragment
        if self.error is not None:
            raise self.error


def wait_for_terminal(client, job_id, timeout=5.0):
    deadline = time.monotonic() + timeout
    while True:
        body = client.get(f"/status/{job_id}").json()
        if body["status"] != "processing" or time.monotonic() > deadline:
            return body
        time.sleep(0.02)


@pytest.fixture
def gate():
    return threading.Event()


@pytest.fixture
def registry():
    return JobRegistry()


@pytest.fixture
def make_client(registry):
    reset_metrics()

    def _make(generator, **settings):
        app.dependency_overrides[get_registry] = lambda: registry
        app.dependency_overrides[get_generator] = lambda: generator
        app.dependency_overrides[get_settings] = lambda: Settings(**settings)
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()
