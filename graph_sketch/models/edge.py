"""Edge model for directed graph edges."""

from __future__ import annotations

from typing import Any

from .base import SketchModel
from .vertex import Vertex


class Edge(SketchModel):
    """Directed edge between two shared Vertex instances.

    ``enabled`` is derived from the endpoints when the edge is built and
    whenever ``refresh()`` is called:

        edge = Edge(left=a, right=b)
        a.enabled = False
        edge.refresh()  # edge.enabled is now False
    """

    left: Vertex
    right: Vertex
    enabled: bool = True

    def model_post_init(self, context: Any, /) -> None:
        self.refresh()

    def refresh(self) -> bool:
        """Recompute ``enabled`` from the endpoints and return it."""
        self.enabled = self.left.enabled and self.right.enabled
        return self.enabled

    def touches(self, label: str) -> bool:
        """Whether either endpoint carries the given label."""
        return self.left.label == label or self.right.label == label

    @property
    def key(self) -> tuple[str, str]:
        return (self.left.label, self.right.label)

    def __hash__(self) -> int:
        return hash(("Edge", self.left.label, self.right.label))

    def __str__(self):
        return f"{self.left.label}->{self.right.label}"
