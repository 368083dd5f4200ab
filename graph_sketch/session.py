"""GraphSession: text editing wired through to the render pipeline."""

from __future__ import annotations

import logging

from graph_sketch.config import RenderSettings
from graph_sketch.graph import GraphModel
from graph_sketch.models.edge import Edge
from graph_sketch.render.renderer import DiagramRenderer, MermaidCliRenderer
from graph_sketch.render.scheduler import DisplaySurface, RenderScheduler
from graph_sketch.store import VertexStore

log = logging.getLogger(__name__)


class GraphSession:
    """One editing session: a vertex store, its graph model and a render scheduler.

    Every text edit and every vertex status change pushes the enabled-edge
    snapshot to the scheduler, which renders it once typing settles.

    Usage:
        async with GraphSession(surface) as session:
            session.edit("A -> B\\nB -> C")
            session.set_vertex_status("C", False)
            await session.wait_idle()
    """

    def __init__(
        self,
        surface: DisplaySurface,
        renderer: DiagramRenderer | None = None,
        settings: RenderSettings | None = None,
    ):
        self.settings = settings or RenderSettings()
        if renderer is None:
            renderer = MermaidCliRenderer(command=self.settings.command)
        self.scheduler = RenderScheduler(renderer, surface, settings=self.settings)
        self.model = GraphModel(VertexStore(), on_edges_change=self.scheduler.notify)

    @property
    def vertices(self) -> VertexStore:
        return self.model.vertices

    @property
    def vertex_count(self) -> int:
        return self.model.vertices.count()

    @property
    def enabled_edges(self) -> frozenset[Edge]:
        return self.model.get_enabled_edges()

    def edit(self, text: str) -> None:
        """Apply the full current editor text."""
        self.model.reconcile(text)

    def set_vertex_status(self, label: str, enabled: bool) -> bool:
        return self.model.set_vertex_status(label, enabled)

    async def wait_idle(self) -> None:
        await self.scheduler.wait_idle()

    def close(self) -> None:
        self.scheduler.close()

    async def __aenter__(self) -> "GraphSession":
        await self.scheduler.__aenter__()
        return self

    async def __aexit__(self, *args) -> None:
        self.close()
