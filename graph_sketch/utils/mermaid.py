"""Mermaid source generation and output sizing for edge snapshots."""

from __future__ import annotations

import math
from typing import Iterable, TYPE_CHECKING

from graph_sketch.config import DEFAULT_BASE_SIZE, DEFAULT_DENSITY_DIVISOR, DEFAULT_HEADER

if TYPE_CHECKING:
    from graph_sketch.models.edge import Edge
    from graph_sketch.models.vertex import Vertex

MERMAID_ARROW = "-->"


def escape_label(label: str) -> str:
    """Escape a label for a double-quoted Mermaid node text."""
    return label.replace('"', "#quot;")


def format_node(vertex: "Vertex") -> str:
    """Format a vertex as ``v<id>["label"]``.

    Node ids come from the vertex id so any label (spaces, punctuation,
    Mermaid keywords such as ``end``) renders as text.
    """
    return f'v{vertex.id}["{escape_label(vertex.label)}"]'


def format_edge(edge: "Edge") -> str:
    """Format one edge as a Mermaid link line: ``LEFT --> RIGHT``."""
    return f"{format_node(edge.left)} {MERMAID_ARROW} {format_node(edge.right)}"


def to_mermaid(edges: Iterable["Edge"], header: str = DEFAULT_HEADER) -> str:
    """Build Mermaid flowchart source for the given edges.

    Edges are ordered by their endpoint ids, i.e. by first appearance of the
    labels, so a snapshot always renders to the same text.
    """
    ordered = sorted(edges, key=lambda e: (e.left.id, e.right.id, e.left.label, e.right.label))
    lines = [header]
    lines.extend(f"  {format_edge(edge)}" for edge in ordered)
    return "\n".join(lines)


def count_edge_lines(source: str) -> int:
    """Count the lines of Mermaid source that describe an edge."""
    return sum(1 for line in source.splitlines() if MERMAID_ARROW in line)


def scale_factor(edge_count: int, divisor: int = DEFAULT_DENSITY_DIVISOR) -> float:
    """Growth factor for the output image: 1.0 until ``divisor`` edges, then sqrt."""
    return max(1.0, math.sqrt(edge_count / divisor))


def output_size(
    source: str,
    base: int = DEFAULT_BASE_SIZE,
    divisor: int = DEFAULT_DENSITY_DIVISOR,
) -> int:
    """Requested width (and height) in pixels for rendering ``source``."""
    return round(base * scale_factor(count_edge_lines(source), divisor))
