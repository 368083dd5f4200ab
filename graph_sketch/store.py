"""Vertex storage keyed by label."""

from __future__ import annotations

import itertools
import logging
from typing import Iterator

from graph_sketch.models.vertex import Vertex

log = logging.getLogger(__name__)


class VertexStore:
    """Owns vertex identity, enable state and occurrence counters.

    Holds at most one Vertex per label. Lookups by label are O(1); iteration
    follows insertion order. Expected misses (unknown label, disabled vertex)
    are reported through return values, never exceptions.

    Usage:
        store = VertexStore()
        store.add_vertex(Vertex(id=store.next_id(), label="A"))
        store.set_state("A", False)
    """

    def __init__(self):
        self._vertices: dict[str, Vertex] = {}
        self._ids = itertools.count(1)

    def next_id(self) -> int:
        """Return the next informational vertex id (monotonic for this store)."""
        return next(self._ids)

    def add_vertex(self, vertex: Vertex) -> bool:
        """Insert a vertex, or bump the degree of the one already holding its label.

        Returns False without touching the store if the vertex is disabled.
        """
        if not vertex.enabled:
            return False

        existing = self._vertices.get(vertex.label)
        if existing is not None:
            existing.degree += 1
            return True

        self._vertices[vertex.label] = vertex
        log.debug("Added vertex %s (id=%d)", vertex.label, vertex.id)
        return True

    def remove_by_label(self, label: str) -> bool:
        """Remove the vertex with the given label. False if absent."""
        if self._vertices.pop(label, None) is None:
            return False
        log.debug("Removed vertex %s", label)
        return True

    def set_state(self, label: str, enabled: bool) -> bool:
        """Set the enabled flag in place. False if absent.

        Edges are not touched here; cascading belongs to GraphModel.
        """
        vertex = self._vertices.get(label)
        if vertex is None:
            return False
        vertex.enabled = enabled
        return True

    def get_by_label(self, label: str) -> Vertex | None:
        return self._vertices.get(label)

    def get_all(self) -> set[Vertex]:
        return set(self._vertices.values())

    def labels(self) -> list[str]:
        """Labels in insertion order."""
        return list(self._vertices)

    def count(self) -> int:
        return len(self._vertices)

    def __len__(self) -> int:
        return len(self._vertices)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Vertex):
            return item.label in self._vertices
        return item in self._vertices

    def __iter__(self) -> Iterator[Vertex]:
        return iter(list(self._vertices.values()))
