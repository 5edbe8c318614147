"""Reachability over the commit graph.

Answers "which commits can be reached from these tips" by following first
and second parents. Used to derive filtered views of a store, such as the
commits a remote can see.
"""

import logging
from typing import Iterable, List, Optional, Set

from pydantic import BaseModel

from commit_graph.errors import Diagnostic, cycle, unresolved
from commit_graph.models.store import GraphStore, require_store

logger = logging.getLogger(__name__)


class Reachability(BaseModel):
    """Result of a reachability walk."""

    reachable: Set[str] = set()
    diagnostics: List[Diagnostic] = []

    model_config = {"frozen": True}

    def __contains__(self, commit_id: object) -> bool:
        return commit_id in self.reachable

    def __len__(self) -> int:
        return len(self.reachable)


def find_reachable(store: GraphStore, tips: Iterable[Optional[str]]) -> Reachability:
    """Collect every commit reachable from ``tips``, tips included.

    Tips that are not commits in the store are skipped and reported. The
    walk is an iterative depth-first search; a parent already on the current
    path is a cycle, which is reported and not followed again.
    """
    require_store(store)
    index = store.commit_index
    reachable: Set[str] = set()
    diagnostics: List[Diagnostic] = []
    cyclic: Set[str] = set()

    for tip in tips:
        if not tip:
            continue
        if tip not in index:
            logger.warning("Skipping tip '%s': not a commit in the store", tip)
            diagnostics.append(unresolved(tip, "tip is not a stored commit"))
            continue
        if tip in reachable:
            continue

        reachable.add(tip)
        on_path = {tip}
        stack = [(tip, iter(index[tip].parent_ids))]
        while stack:
            current, parents = stack[-1]
            parent = next(parents, None)
            if parent is None:
                stack.pop()
                on_path.discard(current)
                continue
            if parent not in index:
                # Truncated history; check_integrity reports it
                continue
            if parent in on_path:
                if parent not in cyclic:
                    cyclic.add(parent)
                    logger.warning("Cycle detected through commit '%s'", parent)
                    diagnostics.append(cycle(parent, f"reached again from {current}"))
                continue
            if parent in reachable:
                continue
            reachable.add(parent)
            on_path.add(parent)
            stack.append((parent, iter(index[parent].parent_ids)))

    return Reachability(reachable=reachable, diagnostics=diagnostics)


def filter_store(store: GraphStore, reachable: Iterable[str]) -> GraphStore:
    """Copy of ``store`` keeping only ``reachable`` commits.

    Commit order is preserved. Branches and tags whose target was dropped are
    removed as well; HEAD is carried over unchanged.
    """
    require_store(store)
    keep = set(reachable)
    return store.model_copy(
        update={
            "commits": [c for c in store.commits if c.id in keep],
            "branches": {n: t for n, t in store.branches.items() if t in keep},
            "tags": {n: t for n, t in store.tags.items() if t in keep},
        }
    )


def is_ancestor(store: GraphStore, ancestor_id: str, descendant_id: str) -> bool:
    """True when ``ancestor_id`` is ``descendant_id`` or one of its ancestors."""
    require_store(store)
    if ancestor_id == descendant_id:
        return store.has_commit(ancestor_id)
    return any(a == ancestor_id for a in store.ancestors_of(descendant_id))
