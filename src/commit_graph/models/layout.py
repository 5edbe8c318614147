"""Layout output models handed to the rendering layer."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from commit_graph.errors import Diagnostic


class LayoutNode(BaseModel):
    """A commit placed on the grid."""

    id: str
    row: int
    column: int
    lane: int
    is_head: bool = Field(default=False, alias="isHead")
    parent_id: Optional[str] = Field(default=None, alias="parentId")
    second_parent_id: Optional[str] = Field(default=None, alias="secondParentId")
    branch: Optional[str] = None
    message: Optional[str] = ""
    timestamp: Optional[Any] = None

    model_config = {"frozen": True, "populate_by_name": True}


class LayoutEdge(BaseModel):
    """A parent to child link. Merge edges come from second parents."""

    id: str
    from_id: str = Field(alias="fromId")
    to_id: str = Field(alias="toId")
    is_merge: bool = Field(default=False, alias="isMerge")

    model_config = {"frozen": True, "populate_by_name": True}


class GraphLayout(BaseModel):
    """Nodes, edges and resolved HEAD for one layout pass."""

    nodes: List[LayoutNode] = []
    edges: List[LayoutEdge] = []
    head_commit_id: Optional[str] = Field(default=None, alias="headCommitId")
    lanes: Dict[str, int] = {}
    diagnostics: List[Diagnostic] = []

    model_config = {"frozen": True, "populate_by_name": True}

    def node_for(self, commit_id: str) -> Optional[LayoutNode]:
        for node in self.nodes:
            if node.id == commit_id:
                return node
        return None

    @property
    def lane_count(self) -> int:
        if not self.lanes:
            return 0
        return max(self.lanes.values()) + 1

    @property
    def width(self) -> int:
        """Number of columns spanned, in layout units."""
        if not self.nodes:
            return 0
        return max(node.column for node in self.nodes) + 1

    def to_render_dict(self) -> Dict[str, Any]:
        """Renderer payload: nodes, edges and headCommitId with camelCase keys."""
        return self.model_dump(
            mode="json", by_alias=True, include={"nodes", "edges", "head_commit_id"}
        )
