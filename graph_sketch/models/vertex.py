"""Vertex model for graph vertices."""

from __future__ import annotations

from .base import SketchModel


class Vertex(SketchModel):
    """A labeled node with enable state and an occurrence counter.

    Identity is the label; ``id`` is informational only. ``degree`` counts how
    many times the label was offered to a VertexStore, not incident edges.

        v = Vertex(id=1, label="A")
        v.enabled = False
    """

    id: int
    label: str
    enabled: bool = True
    degree: int = 1

    @property
    def key(self) -> str:
        return self.label

    def __hash__(self) -> int:
        return hash(("Vertex", self.label))

    def __str__(self):
        return self.label
