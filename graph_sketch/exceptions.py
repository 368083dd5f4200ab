"""Custom exceptions for graph-sketch."""


class GraphSketchError(Exception):
    """Base exception for all graph-sketch errors."""


class RendererError(GraphSketchError):
    """Raised when the diagram renderer cannot be launched or exits non-zero."""

    def __init__(self, message: str, returncode: int | None = None):
        super().__init__(message)
        self.returncode = returncode


class RenderCancelledError(GraphSketchError):
    """Raised inside a render worker when its job was superseded."""
