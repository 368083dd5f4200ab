"""graph-sketch: live Mermaid rendering of a graph typed as ``A -> B`` lines."""

from .models import Vertex, Edge
from .store import VertexStore
from .graph import GraphModel
from .config import RenderSettings
from .render import (
    CancelToken,
    MermaidCliRenderer,
    RenderRequest,
    RenderScheduler,
    RenderState,
)
from .session import GraphSession
from .event import listen, listens_for

__version__ = "0.1.0"

__all__ = [
    "Vertex",
    "Edge",
    "VertexStore",
    "GraphModel",
    "RenderSettings",
    "CancelToken",
    "MermaidCliRenderer",
    "RenderRequest",
    "RenderScheduler",
    "RenderState",
    "GraphSession",
    "listen",
    "listens_for",
]
