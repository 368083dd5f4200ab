"""GraphModel: edge set consistency and text-to-graph reconciliation."""

from __future__ import annotations

import logging
from typing import Callable, Iterator

from graph_sketch.event import dispatch
from graph_sketch.models.edge import Edge
from graph_sketch.models.vertex import Vertex
from graph_sketch.store import VertexStore

log = logging.getLogger(__name__)

EDGE_SEPARATOR = "->"

EdgesListener = Callable[[frozenset[Edge]], None]


def parse_edge_line(line: str) -> tuple[str, str] | None:
    """Split an ``A -> B`` line into its two labels.

    Returns None unless the separator occurs exactly once and both sides are
    non-empty after stripping.
    """
    parts = [part.strip() for part in line.split(EDGE_SEPARATOR)]
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return None
    return parts[0], parts[1]


def parse_edge_text(text: str) -> list[tuple[str, str]]:
    """Parse every valid edge line of ``text``, in order, duplicates included.

    Malformed lines are dropped silently; this is a best-effort parse for
    live typing, not a validator.
    """
    pairs = []
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        pair = parse_edge_line(line)
        if pair is None:
            log.debug("Skipping malformed edge line: %r", line)
            continue
        pairs.append(pair)
    return pairs


class GraphModel:
    """Edge set derived from free-form text, over vertices owned by a VertexStore.

    Edges are transient and rebuilt on every ``reconcile``; only vertex enable
    state survives edits, keyed by label. An adjacency index maps each label
    to the edges touching it so status changes cascade without a full scan.

    Usage:
        model = GraphModel(on_edges_change=print)
        model.reconcile("A -> B\\nB -> C")
        model.set_vertex_status("B", False)
    """

    def __init__(
        self,
        vertices: VertexStore | None = None,
        on_edges_change: EdgesListener | None = None,
    ):
        self._vertices = vertices if vertices is not None else VertexStore()
        self.on_edges_change = on_edges_change
        self._edges: dict[tuple[str, str], Edge] = {}
        self._adjacency: dict[str, set[tuple[str, str]]] = {}

    @property
    def vertices(self) -> VertexStore:
        return self._vertices

    @property
    def edges(self) -> list[Edge]:
        """All edges, enabled or not, in text order."""
        return list(self._edges.values())

    # === Reconciliation ===

    def reconcile(self, text: str) -> None:
        """Rebuild the edge set from ``text``, preserving vertex enable state.

        Steps:
            1. capture the current label -> enabled map and the labels
               referenced by the valid lines of ``text``;
            2. drop every edge and rebuild one per valid, distinct line,
               creating missing endpoint vertices on the way;
            3. restore the captured state of referenced vertices;
            4. remove vertices no longer referenced;
            5. re-apply the captured states, refresh edges and notify.
        """
        pairs = parse_edge_text(text)

        states = {vertex.label: vertex.enabled for vertex in self._vertices}
        referenced: dict[str, None] = {}
        for left, right in pairs:
            referenced[left] = None
            referenced[right] = None

        self._edges.clear()
        self._adjacency.clear()

        for left, right in pairs:
            self._add_edge(self._ensure_vertex(left), self._ensure_vertex(right))

        for label in referenced:
            self._ensure_vertex(label)
            self._restore_state(label, states)

        for vertex in self._vertices:
            if vertex.label not in referenced:
                self._vertices.remove_by_label(vertex.label)
                dispatch(vertex, "post_remove", model=self)

        for vertex in self._vertices:
            self._restore_state(vertex.label, states)

        for edge in self._edges.values():
            edge.refresh()

        log.debug(
            "Reconciled %d edges over %d vertices", len(self._edges), len(self._vertices)
        )
        self._notify()

    def _ensure_vertex(self, label: str) -> Vertex:
        vertex = self._vertices.get_by_label(label)
        if vertex is not None:
            return vertex

        vertex = Vertex(id=self._vertices.next_id(), label=label)
        self._vertices.add_vertex(vertex)
        dispatch(vertex, "post_add", model=self)
        return vertex

    def _add_edge(self, left: Vertex, right: Vertex) -> Edge:
        key = (left.label, right.label)
        edge = self._edges.get(key)
        if edge is None:
            edge = Edge(left=left, right=right)
            self._edges[key] = edge
            self._adjacency.setdefault(left.label, set()).add(key)
            self._adjacency.setdefault(right.label, set()).add(key)
        return edge

    def _restore_state(self, label: str, states: dict[str, bool]) -> None:
        if label in states:
            self._vertices.set_state(label, states[label])

    # === Vertex status ===

    def set_vertex_status(self, label: str, enabled: bool) -> bool:
        """Enable or disable a vertex and cascade to every edge touching it.

        Returns False, without notifying, when no vertex has that label.
        """
        vertex = self._vertices.get_by_label(label)
        if vertex is None:
            log.debug("Status change for unknown vertex %r ignored", label)
            return False

        dispatch(vertex, "pre_state_change", enabled=enabled, model=self)
        self._vertices.set_state(label, enabled)
        for edge in self.edges_for(label):
            edge.refresh()
        dispatch(vertex, "post_state_change", enabled=enabled, model=self)

        self._notify()
        return True

    # === Queries ===

    def edges_for(self, label: str) -> list[Edge]:
        """Edges with ``label`` at either end."""
        return [self._edges[key] for key in self._adjacency.get(label, ())]

    def get_enabled_edges(self) -> frozenset[Edge]:
        """Snapshot of the enabled edges, detached from the live model.

        Endpoints are copied once per label, so later status changes and
        reconciliations never show through a snapshot already handed out.
        """
        copies: dict[str, Vertex] = {}

        def detach(vertex: Vertex) -> Vertex:
            if vertex.label not in copies:
                copies[vertex.label] = vertex.model_copy()
            return copies[vertex.label]

        return frozenset(
            edge.model_copy(update={"left": detach(edge.left), "right": detach(edge.right)})
            for edge in self._edges.values()
            if edge.enabled
        )

    def contains(self, edge: Edge) -> bool:
        return edge.key in self._edges

    def _notify(self) -> None:
        if self.on_edges_change is not None:
            self.on_edges_change(self.get_enabled_edges())

    def __len__(self) -> int:
        return len(self._edges)

    def __iter__(self) -> Iterator[Edge]:
        return iter(self.edges)

    def __str__(self):
        return EDGE_SEPARATOR.join(str(edge) for edge in self._edges.values())
