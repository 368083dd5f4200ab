"""Diagram renderer collaborator and cooperative cancellation."""

from __future__ import annotations

import logging
import subprocess
import threading
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ConfigDict

from graph_sketch.exceptions import RenderCancelledError, RendererError

log = logging.getLogger(__name__)


class RenderRequest(BaseModel):
    """Everything a renderer needs for one invocation."""

    model_config = ConfigDict(frozen=True)

    source: str
    input_path: Path
    output_path: Path
    width: int
    height: int
    background: str = "light"


class CancelToken:
    """Cancellation flag shared between the scheduler and one render worker.

    The worker binds the external process it spawns; ``cancel()`` (called from
    the presentation context) marks the token and force-kills that process.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._cancelled = False
        self._process: subprocess.Popen | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def process(self) -> subprocess.Popen | None:
        return self._process

    def bind(self, process: subprocess.Popen) -> None:
        """Attach the live process. Kills it at once if already cancelled."""
        with self._lock:
            if not self._cancelled:
                self._process = process
                return
        _kill(process)
        process.wait()
        raise RenderCancelledError("Render cancelled before the renderer started")

    def release(self) -> None:
        """Detach the process once it has exited."""
        with self._lock:
            self._process = None

    def cancel(self) -> None:
        with self._lock:
            self._cancelled = True
            process, self._process = self._process, None
        if process is not None:
            _kill(process)

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise RenderCancelledError("Render cancelled")


def _kill(process: subprocess.Popen) -> None:
    if process.poll() is None:
        log.debug("Killing renderer process %s", process.pid)
        process.kill()


class DiagramRenderer(Protocol):
    """Turns Mermaid source on disk into an image file.

    ``render`` blocks until the renderer exits and returns its exit status.
    It raises RendererError if the renderer cannot be launched, and must bind
    any process it spawns to ``token`` so it can be killed on supersession.
    """

    def render(self, request: RenderRequest, token: CancelToken) -> int: ...


class MermaidCliRenderer:
    """Renders through the Mermaid CLI (``mmdc``).

    Usage:
        renderer = MermaidCliRenderer(command="mmdc")
        code = renderer.render(request, CancelToken())
    """

    def __init__(self, command: str = "mmdc", extra_args: list[str] | None = None):
        self.command = command
        self.extra_args = list(extra_args or [])

    def build_command(self, request: RenderRequest) -> list[str]:
        return [
            self.command,
            "-i", str(request.input_path),
            "-o", str(request.output_path),
            "-b", request.background,
            "-w", str(request.width),
            "-H", str(request.height),
            *self.extra_args,
        ]

    def render(self, request: RenderRequest, token: CancelToken) -> int:
        token.raise_if_cancelled()
        command = self.build_command(request)
        log.debug("Launching renderer: %s", " ".join(command))

        try:
            process = subprocess.Popen(
                command,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
            )
        except OSError as exc:
            raise RendererError(f"Failed to launch {self.command!r}: {exc}") from exc

        token.bind(process)
        try:
            _, stderr = process.communicate()
        finally:
            token.release()

        if process.returncode != 0 and not token.cancelled and stderr:
            log.warning(
                "Renderer exited with %d: %s",
                process.returncode,
                stderr.decode(errors="replace").strip(),
            )
        return process.returncode
