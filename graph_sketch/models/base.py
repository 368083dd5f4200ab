"""Base model for graph entities (vertices and edges)."""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class SketchModel(BaseModel):
    """Base for all graph entities.

    Entities are mutable and shared by reference: an Edge points at the
    canonical Vertex objects owned by a VertexStore, so pydantic must never
    copy nested models on validation.
    """

    model_config: ClassVar[dict] = ConfigDict(
        populate_by_name=True,
        revalidate_instances="never",
    )

    @property
    def key(self):
        """Identity key used for equality and hashing."""
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.key))

    def __repr__(self):
        return f"{type(self).__name__}({BaseModel.__str__(self)})"
