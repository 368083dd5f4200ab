"""Shared test fixtures."""

import threading
from pathlib import Path

import pytest

from graph_sketch.config import RenderSettings
from graph_sketch.event import _registrars
from graph_sketch.graph import GraphModel
from graph_sketch.models.vertex import Vertex
from graph_sketch.store import VertexStore


# --- Test doubles ---


class FakeProcess:
    """Stands in for subprocess.Popen: blocks until killed or finished."""

    _pids = iter(range(40000, 50000))

    def __init__(self):
        self.pid = next(self._pids)
        self.returncode = None
        self.killed = threading.Event()

    def poll(self):
        return self.returncode

    def kill(self):
        if self.returncode is None:
            self.returncode = -9
        self.killed.set()

    def wait(self, timeout=None):
        self.killed.wait(timeout)
        return self.returncode


class FakeRenderer:
    """DiagramRenderer double recording every request.

    ``block`` lists the (1-based) render calls that hang until their process
    is killed; all other calls exit immediately with ``returncode``.
    """

    def __init__(self, returncode: int = 0, block: tuple[int, ...] = (), error: Exception | None = None):
        self.returncode = returncode
        self.block = block
        self.error = error
        self.requests = []
        self.processes = []
        self.started = threading.Event()

    def render(self, request, token):
        self.requests.append(request)
        if self.error is not None:
            raise self.error

        process = FakeProcess()
        self.processes.append(process)
        token.bind(process)
        self.started.set()
        try:
            if len(self.requests) in self.block:
                process.killed.wait(timeout=5)
            else:
                process.returncode = self.returncode
                request.output_path.write_bytes(b"\x89PNG fake image")
        finally:
            token.release()
        return process.returncode


class RecordingSurface:
    """DisplaySurface double that records deliveries and the delivering thread."""

    def __init__(self):
        self.images: list[Path] = []
        self.existed: list[bool] = []
        self.errors: list[str] = []
        self.threads: list[int] = []

    def show_image(self, path: Path) -> None:
        self.images.append(path)
        self.existed.append(path.exists())
        self.threads.append(threading.get_ident())

    def show_error(self, message: str) -> None:
        self.errors.append(message)
        self.threads.append(threading.get_ident())


# --- Fixtures ---


@pytest.fixture(autouse=True)
def clear_registrars():
    """Keep event handlers from leaking between tests."""
    _registrars.clear()
    yield
    _registrars.clear()


@pytest.fixture
def store():
    return VertexStore()


@pytest.fixture
def model(store):
    return GraphModel(store)


@pytest.fixture
def vertex_a():
    return Vertex(id=1, label="A")


@pytest.fixture
def vertex_b():
    return Vertex(id=2, label="B")


@pytest.fixture
def chain_text():
    return "A -> B\nB -> C"


@pytest.fixture
def big_text():
    """104 distinct edges over vertices A..Z; 8 of them touch A."""
    labels = [chr(ord("A") + i) for i in range(26)]
    lines = [f"A -> {labels[i]}" for i in range(1, 9)]
    rest = [
        f"{left} -> {right}"
        for left in labels[1:]
        for right in labels[1:]
        if left < right
    ]
    lines.extend(rest[:96])
    return "\n".join(lines)


@pytest.fixture
def settings(tmp_path):
    return RenderSettings(settle_delay=0.05, temp_dir=tmp_path)


@pytest.fixture
def renderer():
    return FakeRenderer()


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def make_renderer():
    return FakeRenderer
