"""Reference listings for branch/tag panels and ref dumps."""

from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel

from commit_graph.models.commit import Commit
from commit_graph.models.head import HeadType
from commit_graph.models.store import GraphStore, require_store

SHORT_ID_LENGTH = 7


class RefKind(str, Enum):
    BRANCHES = "branches"
    TAGS = "tags"


class ReferenceEntry(BaseModel):
    """A named ref with the commit it points at, if that commit is known."""

    name: str
    commit_id: str
    short_id: str
    commit: Optional[Commit] = None

    model_config = {"frozen": True}


def list_references(store: GraphStore, kind: RefKind = RefKind.BRANCHES) -> List[ReferenceEntry]:
    """Branches or tags sorted by name, joined with their commits."""
    require_store(store)
    refs = store.branches if RefKind(kind) == RefKind.BRANCHES else store.tags
    index = store.commit_index
    return [
        ReferenceEntry(
            name=name,
            commit_id=commit_id,
            short_id=commit_id[:SHORT_ID_LENGTH],
            commit=index.get(commit_id),
        )
        for name, commit_id in sorted(refs.items())
    ]


def describe_refs(store: GraphStore) -> List[Tuple[str, str, str]]:
    """(section, name, target) rows for branches, tags and HEAD."""
    require_store(store)
    rows = [("branch", name, target) for name, target in sorted(store.branches.items())]
    rows.extend(("tag", name, target) for name, target in sorted(store.tags.items()))

    head = store.head
    if head.type == HeadType.BRANCH:
        rows.append(("HEAD", f"ref: {head.ref}", store.branches.get(head.ref, "")))
    elif head.type == HeadType.COMMIT:
        rows.append(("HEAD", "detached", head.id))
    else:
        rows.append(("HEAD", "none", ""))
    return rows
