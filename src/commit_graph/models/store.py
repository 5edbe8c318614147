"""Graph store: the snapshot of commits, references and HEAD."""

from collections import deque
from typing import Dict, Iterator, List, Optional

from pydantic import BaseModel, Field, field_validator

from commit_graph.errors import (
    Diagnostic,
    InvalidStoreError,
    UnresolvedReference,
    dangling,
    unresolved,
)
from commit_graph.models.commit import Commit
from commit_graph.models.head import Head, HeadType


class GraphStore(BaseModel):
    """Immutable snapshot of a repository's commit graph.

    Commits are kept in creation order. The engine only reads stores; every
    operation that changes something returns a new store.
    """

    commits: List[Commit] = []
    branches: Dict[str, str] = {}
    tags: Dict[str, str] = {}
    head: Head = Field(default_factory=Head.none, alias="HEAD")

    # Working-tree state that only exists locally
    staging: List[str] = []
    modified: List[str] = []
    untracked: List[str] = []

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("commits")
    @classmethod
    def _unique_ids(cls, commits: List[Commit]) -> List[Commit]:
        seen = set()
        for commit in commits:
            if commit.id in seen:
                raise ValueError(f"duplicate commit id '{commit.id}'")
            seen.add(commit.id)
        return commits

    @property
    def commit_index(self) -> Dict[str, Commit]:
        """Map of commit id to commit, in creation order."""
        return {c.id: c for c in self.commits}

    @property
    def is_empty(self) -> bool:
        return not self.commits

    @property
    def current_branch(self) -> Optional[str]:
        if self.head.type == HeadType.BRANCH:
            return self.head.ref
        return None

    def get_commit(self, commit_id: Optional[str]) -> Optional[Commit]:
        if not commit_id:
            return None
        for commit in self.commits:
            if commit.id == commit_id:
                return commit
        return None

    def has_commit(self, commit_id: Optional[str]) -> bool:
        return self.get_commit(commit_id) is not None

    def resolve(self, ref: str) -> str:
        """Resolve a branch name, tag name or commit id to a commit id.

        Raises:
            UnresolvedReference: if nothing in the store matches, or the
                matching branch/tag points at a commit that is not stored.
        """
        index = self.commit_index
        for refs in (self.branches, self.tags):
            if ref in refs:
                target = refs[ref]
                if target in index:
                    return target
                raise UnresolvedReference(ref)
        if ref in index:
            return ref
        raise UnresolvedReference(ref)

    def ancestors_of(self, commit_id: str) -> Iterator[str]:
        """Lazily yield every ancestor of ``commit_id`` (not the commit itself).

        Both first and second parents are followed. Each id is yielded once,
        so malformed cyclic input still terminates.
        """
        index = self.commit_index
        start = index.get(commit_id)
        if start is None:
            return
        visited = {commit_id}
        queue = deque(start.parent_ids)
        while queue:
            current = queue.popleft()
            if current in visited or current not in index:
                continue
            visited.add(current)
            yield current
            queue.extend(index[current].parent_ids)

    def head_commit_id(self) -> Optional[str]:
        """The commit HEAD points at, without checking it is stored."""
        if self.head.type == HeadType.COMMIT:
            return self.head.id
        if self.head.type == HeadType.BRANCH:
            return self.branches.get(self.head.ref)
        return None

    def tips(self) -> List[str]:
        """Branch targets, tag targets and HEAD, deduplicated in that order."""
        tips: List[str] = []
        candidates = list(self.branches.values()) + list(self.tags.values())
        candidates.append(self.head_commit_id())
        for commit_id in candidates:
            if commit_id and commit_id not in tips:
                tips.append(commit_id)
        return tips

    def check_integrity(self) -> List[Diagnostic]:
        """List dangling parents, unresolved refs and cycles.

        Nothing here raises; an empty list means the store is well formed.
        """
        from commit_graph.core.reachability import find_reachable

        index = self.commit_index
        diagnostics: List[Diagnostic] = []

        for commit in self.commits:
            for parent in commit.parent_ids:
                if parent not in index:
                    diagnostics.append(dangling(parent, commit.id))

        for kind, refs in (("branch", self.branches), ("tag", self.tags)):
            for name, target in refs.items():
                if target not in index:
                    diagnostics.append(unresolved(name, f"{kind} points at '{target}'"))

        if self.head.type == HeadType.BRANCH and self.head.ref not in self.branches:
            diagnostics.append(unresolved(self.head.ref, "HEAD names a missing branch"))
        elif self.head.type != HeadType.NONE:
            head_id = self.head_commit_id()
            if head_id not in index:
                diagnostics.append(unresolved("HEAD", f"points at '{head_id}'"))

        # Walking from every commit is the only way to see cycles that no
        # ref reaches.
        diagnostics.extend(find_reachable(self, list(index)).diagnostics)
        return diagnostics


def require_store(store: object) -> GraphStore:
    """Fail fast when something other than a GraphStore is passed."""
    if not isinstance(store, GraphStore):
        raise InvalidStoreError(
            f"Expected a GraphStore, got {type(store).__name__}"
        )
    return store
