from .renderer import CancelToken, DiagramRenderer, MermaidCliRenderer, RenderRequest
from .scheduler import (
    DisplaySurface,
    RenderJob,
    RenderOutcome,
    RenderScheduler,
    RenderState,
)

__all__ = [
    "CancelToken",
    "DiagramRenderer",
    "DisplaySurface",
    "MermaidCliRenderer",
    "RenderJob",
    "RenderOutcome",
    "RenderRequest",
    "RenderScheduler",
    "RenderState",
]
