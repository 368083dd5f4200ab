"""Render settings with environment overrides (``GRAPH_SKETCH_*``)."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SETTLE_DELAY = 0.3
DEFAULT_BASE_SIZE = 4000
DEFAULT_DENSITY_DIVISOR = 50
DEFAULT_HEADER = "graph TD"


class RenderSettings(BaseSettings):
    """Configuration for the debounced render pipeline.

    Values can be passed directly or read from the environment, e.g.
    ``GRAPH_SKETCH_SETTLE_DELAY=0.5`` or ``GRAPH_SKETCH_COMMAND=/opt/bin/mmdc``.
    """

    model_config = SettingsConfigDict(env_prefix="GRAPH_SKETCH_", extra="forbid")

    settle_delay: float = Field(
        default=DEFAULT_SETTLE_DELAY,
        gt=0,
        description="Quiet period in seconds before a burst of edits is rendered",
    )
    command: str = Field(default="mmdc", description="Mermaid CLI executable")
    background: str = Field(
        default="light", description="Background color mode passed to the renderer"
    )
    header: str = Field(default=DEFAULT_HEADER, description="Mermaid diagram header line")
    base_size: int = Field(
        default=DEFAULT_BASE_SIZE, gt=0, description="Output width/height for small graphs"
    )
    density_divisor: int = Field(
        default=DEFAULT_DENSITY_DIVISOR,
        gt=0,
        description="Edge count at which the output size starts to grow",
    )
    temp_dir: Path | None = Field(
        default=None, description="Directory for render artifacts (system default if unset)"
    )
