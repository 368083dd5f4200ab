from .vertex import Vertex
from .edge import Edge

__all__ = ["Vertex", "Edge"]
