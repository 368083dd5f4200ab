"""Debounced, single-flight render scheduling.

The scheduler lives on an asyncio event loop (the presentation context). Edge
snapshots arrive through ``notify``; a settle timer collapses bursts so only
the last snapshot is rendered. Rendering runs on a one-thread executor and
its outcome is posted back to the loop with ``call_soon_threadsafe``, so the
display surface is only ever touched from the loop.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import os
import tempfile
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from pathlib import Path
from typing import Iterable, Protocol, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from graph_sketch.config import RenderSettings
from graph_sketch.exceptions import RenderCancelledError, RendererError
from graph_sketch.render.renderer import CancelToken, DiagramRenderer, RenderRequest
from graph_sketch.utils.mermaid import output_size, to_mermaid

if TYPE_CHECKING:
    from graph_sketch.models.edge import Edge

log = logging.getLogger(__name__)


class RenderState(str, Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


class RenderOutcome(BaseModel):
    """Terminal result of one render job."""

    model_config = ConfigDict(frozen=True)

    job: int
    state: RenderState
    returncode: int | None = None
    error: str | None = None


class DisplaySurface(Protocol):
    """Where rendered images and render errors end up."""

    def show_image(self, path: Path) -> None: ...

    def show_error(self, message: str) -> None: ...


class RenderJob:
    """One render: Mermaid source, requested size and its temp artifacts."""

    def __init__(self, number: int, source: str, size: int, background: str):
        self.number = number
        self.source = source
        self.size = size
        self.background = background
        self.token = CancelToken()
        self.input_path: Path | None = None
        self.output_path: Path | None = None

    def prepare(self, temp_dir: Path | None = None) -> RenderRequest:
        """Create the input/output temp files and write the source."""
        self.input_path = _make_temp_file("graph", ".mmd", temp_dir)
        self.output_path = _make_temp_file("diagram", ".png", temp_dir)
        self.input_path.write_text(self.source, encoding="utf-8")
        return RenderRequest(
            source=self.source,
            input_path=self.input_path,
            output_path=self.output_path,
            width=self.size,
            height=self.size,
            background=self.background,
        )

    def cleanup(self) -> None:
        for path in (self.input_path, self.output_path):
            if path is not None:
                path.unlink(missing_ok=True)

    def __repr__(self):
        return f"RenderJob(#{self.number}, size={self.size}, cancelled={self.token.cancelled})"


def _make_temp_file(prefix: str, suffix: str, temp_dir: Path | None) -> Path:
    fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=temp_dir)
    os.close(fd)
    return Path(name)


class RenderScheduler:
    """Turns a stream of enabled-edge snapshots into at most one live render.

    States: IDLE -> DEBOUNCING -> RUNNING -> {SUCCEEDED, FAILED, CANCELLED} -> IDLE.
    A new snapshot always restarts the settle timer; when it fires, any job
    still running is cancelled and its renderer process killed before the
    next job is submitted. Cancelled jobs deliver nothing.

    Usage:
        async with RenderScheduler(MermaidCliRenderer(), surface) as scheduler:
            scheduler.notify(model.get_enabled_edges())
            await scheduler.wait_idle()
    """

    def __init__(
        self,
        renderer: DiagramRenderer,
        surface: DisplaySurface,
        settings: RenderSettings | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        self.renderer = renderer
        self.surface = surface
        self.settings = settings or RenderSettings()
        self._loop = loop
        self._timer: asyncio.TimerHandle | None = None
        self._pending: frozenset["Edge"] = frozenset()
        self._job: RenderJob | None = None
        self._numbers = itertools.count(1)
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="graph-sketch-render"
        )
        self._state = RenderState.IDLE
        self._idle = asyncio.Event()
        self._idle.set()
        self._closed = False
        self.last_outcome: RenderOutcome | None = None

    @property
    def state(self) -> RenderState:
        return self._state

    @property
    def settle_delay(self) -> float:
        return self.settings.settle_delay

    @property
    def current_job(self) -> RenderJob | None:
        return self._job

    # === Presentation context ===

    def notify(self, edges: Iterable["Edge"]) -> None:
        """Record a new edge snapshot and restart the settle timer."""
        if self._closed:
            log.debug("Ignoring edge snapshot on closed scheduler")
            return

        loop = self._get_loop()
        self._pending = frozenset(edges)
        if self._timer is not None:
            self._timer.cancel()
            log.debug("Settle timer restarted")
        self._timer = loop.call_later(self.settings.settle_delay, self._fire)
        self._state = RenderState.DEBOUNCING
        self._idle.clear()

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def _fire(self) -> None:
        self._timer = None
        self._cancel_running()

        settings = self.settings
        source = to_mermaid(self._pending, header=settings.header)
        size = output_size(source, settings.base_size, settings.density_divisor)
        job = RenderJob(next(self._numbers), source, size, settings.background)

        self._job = job
        self._state = RenderState.RUNNING
        log.info("Starting render #%d (%d edges, %dpx)", job.number, len(self._pending), size)
        self._executor.submit(self._work, job)

    def _cancel_running(self) -> None:
        job = self._job
        if job is None:
            return
        log.info("Cancelling render #%d", job.number)
        job.token.cancel()
        self._job = None
        self._state = RenderState.CANCELLED

    def _finish(self, job: RenderJob, outcome: RenderOutcome) -> None:
        if job is not self._job or outcome.state is RenderState.CANCELLED:
            log.debug("Discarding outcome of render #%d (%s)", job.number, outcome.state.value)
            job.cleanup()
            self._settle()
            return

        self._job = None
        self._state = outcome.state
        self.last_outcome = outcome

        try:
            if outcome.state is RenderState.SUCCEEDED:
                log.info("Render #%d succeeded", job.number)
                try:
                    self.surface.show_image(job.output_path)
                finally:
                    job.cleanup()
            else:
                log.warning("Render #%d failed: %s", job.number, outcome.error)
                job.cleanup()
                self.surface.show_error(outcome.error or "Failed to generate diagram.")
        finally:
            self._settle()

    def _settle(self) -> None:
        if self._timer is not None:
            self._state = RenderState.DEBOUNCING
        elif self._job is not None:
            self._state = RenderState.RUNNING
        else:
            self._state = RenderState.IDLE
            self._idle.set()

    async def wait_idle(self) -> None:
        """Wait until no timer is pending and no render is in flight."""
        await self._idle.wait()

    def close(self) -> None:
        """Cancel the timer and any running render; stop the worker."""
        if self._closed:
            return
        self._closed = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._cancel_running()
        self._executor.shutdown(wait=False, cancel_futures=True)
        self._state = RenderState.IDLE
        self._idle.set()

    async def __aenter__(self) -> "RenderScheduler":
        self._get_loop()
        return self

    async def __aexit__(self, *args) -> None:
        self.close()

    # === Worker context ===

    def _work(self, job: RenderJob) -> None:
        try:
            job.token.raise_if_cancelled()
            request = job.prepare(self.settings.temp_dir)
            returncode = self.renderer.render(request, job.token)
        except RenderCancelledError:
            outcome = RenderOutcome(job=job.number, state=RenderState.CANCELLED)
        except RendererError as exc:
            outcome = RenderOutcome(
                job=job.number,
                state=RenderState.FAILED,
                returncode=exc.returncode,
                error=str(exc),
            )
        except OSError as exc:
            log.exception("I/O error during render #%d", job.number)
            outcome = RenderOutcome(
                job=job.number, state=RenderState.FAILED, error=f"Failed to generate diagram: {exc}"
            )
        except Exception as exc:
            log.exception("Unexpected error during render #%d", job.number)
            outcome = RenderOutcome(
                job=job.number, state=RenderState.FAILED, error=f"Failed to generate diagram: {exc}"
            )
        else:
            if job.token.cancelled:
                outcome = RenderOutcome(
                    job=job.number, state=RenderState.CANCELLED, returncode=returncode
                )
            elif returncode != 0:
                outcome = RenderOutcome(
                    job=job.number,
                    state=RenderState.FAILED,
                    returncode=returncode,
                    error=f"Failed to generate diagram (renderer exited with {returncode}).",
                )
            else:
                outcome = RenderOutcome(
                    job=job.number, state=RenderState.SUCCEEDED, returncode=returncode
                )
        self._post(job, outcome)

    def _post(self, job: RenderJob, outcome: RenderOutcome) -> None:
        try:
            self._loop.call_soon_threadsafe(self._finish, job, outcome)
        except RuntimeError:
            log.debug("Event loop closed; dropping outcome of render #%d", job.number)
            job.cleanup()
