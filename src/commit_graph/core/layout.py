"""Layout engine: grid positions, edges and HEAD highlight for a store."""

import logging
from typing import Dict, List, Optional, Tuple

from commit_graph.config import DEFAULT_SETTINGS, EngineSettings
from commit_graph.core.lanes import LaneAssigner
from commit_graph.errors import Diagnostic, dangling, unresolved
from commit_graph.models.commit import Commit
from commit_graph.models.layout import GraphLayout, LayoutEdge, LayoutNode
from commit_graph.models.store import GraphStore, require_store

logger = logging.getLogger(__name__)


def compute_layout(
    store: GraphStore, settings: Optional[EngineSettings] = None
) -> GraphLayout:
    """Lay out every commit of ``store`` on a lane/column grid.

    Columns follow commit order, rows follow the commit's lineage lane. One
    edge is emitted per parent that is present in the store; parents missing
    from the store (e.g. cut off by a filtered view) are reported as
    diagnostics rather than raised.

    Args:
        store: Snapshot to lay out.
        settings: Spacing and lineage names; defaults when omitted.

    Returns:
        The nodes, edges, resolved HEAD and lane table for this pass.
    """
    require_store(store)
    settings = settings or DEFAULT_SETTINGS
    if store.is_empty:
        # Fresh repository; an unborn HEAD branch is expected here
        return GraphLayout()

    lanes = LaneAssigner(
        store.commits,
        main_lineage=settings.main_lineage,
        detached_lineage=settings.detached_lineage,
    )
    diagnostics: List[Diagnostic] = []

    positions: Dict[str, Tuple[int, int, int]] = {}
    for index, commit in enumerate(store.commits):
        lane = lanes.lane_of(commit.branch)
        positions[commit.id] = (
            lane * settings.row_spacing,
            index * settings.column_spacing,
            lane,
        )

    edges: List[LayoutEdge] = []
    for commit in store.commits:
        for parent_id, is_merge in _parent_links(commit):
            if parent_id not in positions:
                logger.debug("Omitting edge %s-%s: parent not in view", parent_id, commit.id)
                diagnostics.append(dangling(parent_id, commit.id))
                continue
            edges.append(
                LayoutEdge(
                    id=f"{parent_id}-{commit.id}",
                    from_id=parent_id,
                    to_id=commit.id,
                    is_merge=is_merge,
                )
            )

    head_commit_id = _resolve_head(store, positions, diagnostics)

    nodes = []
    for commit in store.commits:
        row, column, lane = positions[commit.id]
        nodes.append(
            LayoutNode(
                id=commit.id,
                row=row,
                column=column,
                lane=lane,
                is_head=commit.id == head_commit_id,
                parent_id=commit.parent_id,
                second_parent_id=commit.second_parent_id,
                branch=commit.branch,
                message=commit.message,
                timestamp=commit.timestamp,
            )
        )

    return GraphLayout(
        nodes=nodes,
        edges=edges,
        head_commit_id=head_commit_id,
        lanes=lanes.lanes,
        diagnostics=diagnostics,
    )


def _parent_links(commit: Commit) -> List[Tuple[str, bool]]:
    links = []
    if commit.parent_id:
        links.append((commit.parent_id, False))
    if commit.is_merge:
        links.append((commit.second_parent_id, True))
    return links


def _resolve_head(
    store: GraphStore, positions: Dict[str, Tuple[int, int, int]], diagnostics: List[Diagnostic]
) -> Optional[str]:
    """HEAD's commit id, or None when it does not land on a laid-out commit."""
    head_id = store.head_commit_id()
    if head_id is None:
        if store.current_branch is not None:
            diagnostics.append(unresolved(store.current_branch, "HEAD names a missing branch"))
        return None
    if head_id not in positions:
        logger.debug("HEAD points at '%s', which is not in the layout", head_id)
        diagnostics.append(unresolved("HEAD", f"points at '{head_id}'"))
        return None
    return head_id
