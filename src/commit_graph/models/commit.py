"""Commit model for the commit graph."""

from typing import Any, List, Optional

from pydantic import BaseModel, Field


class Commit(BaseModel):
    """Represents a single commit in the graph.

    ``branch`` is the lineage the commit was authored on. It is recorded once
    and only used to group commits into lanes.
    """

    id: str
    parent_id: Optional[str] = Field(default=None, alias="parentId")
    second_parent_id: Optional[str] = Field(default=None, alias="secondParentId")
    branch: Optional[str] = None
    message: Optional[str] = ""
    timestamp: Optional[Any] = None

    model_config = {"frozen": True, "populate_by_name": True}

    @property
    def parent_ids(self) -> List[str]:
        """First and second parent ids, skipping absent ones."""
        return [p for p in (self.parent_id, self.second_parent_id) if p]

    @property
    def is_merge(self) -> bool:
        return bool(self.second_parent_id)
