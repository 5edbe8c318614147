"""Remote view projection.

Builds the store a remote would hold from the local store plus the
remote-tracking refs (``origin/<branch>`` and optionally ``origin/HEAD``).
The result has the same shape as any other store, so it can go straight
into the layout engine.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from pydantic import BaseModel

from commit_graph.config import DEFAULT_SETTINGS, EngineSettings
from commit_graph.core.reachability import filter_store, find_reachable
from commit_graph.errors import Diagnostic, unresolved
from commit_graph.models.head import Head
from commit_graph.models.store import GraphStore, require_store

logger = logging.getLogger(__name__)

REMOTE_HEAD = "HEAD"


class RemoteProjection(BaseModel):
    """Projected remote store plus what had to be dropped to build it."""

    store: GraphStore
    diagnostics: List[Diagnostic] = []

    model_config = {"frozen": True}


def split_remote_refs(
    remote_refs: Mapping[str, str], remote: str = "origin"
) -> Tuple[Dict[str, str], Optional[str]]:
    """Strip the remote prefix from tracking refs.

    Returns the local-looking branch map and the value of ``<remote>/HEAD``
    (None if not published). Refs of other remotes are ignored.
    """
    prefix = f"{remote}/"
    branches: Dict[str, str] = {}
    remote_head: Optional[str] = None
    for name, target in remote_refs.items():
        if not name.startswith(prefix):
            logger.debug("Ignoring ref '%s': not under %s", name, prefix)
            continue
        short_name = name[len(prefix):]
        if short_name == REMOTE_HEAD:
            remote_head = target
        elif short_name:
            branches[short_name] = target
    return branches, remote_head


def synthesize_head(
    branches: Mapping[str, str],
    remote_head: Optional[str],
    known_commits: Set[str],
    remote: str = "origin",
    fallbacks: Iterable[str] = ("main", "master"),
) -> Head:
    """Pick the HEAD the remote most plausibly has.

    ``<remote>/HEAD`` wins when published: as a branch HEAD if it names or
    points at the same commit as a branch, otherwise detached at its commit.
    Without it, fall back to the first of ``fallbacks`` that exists. The
    fallback has no git equivalent; git always publishes a remote HEAD after
    clone.
    """
    fallbacks = list(fallbacks)
    if remote_head:
        prefix = f"{remote}/"
        symbolic = remote_head[len(prefix):] if remote_head.startswith(prefix) else remote_head
        if symbolic in branches:
            return Head.on_branch(symbolic)

        matching = [name for name, target in branches.items() if target == remote_head]
        if matching:
            return Head.on_branch(_preferred_branch(matching, fallbacks))
        if remote_head in known_commits:
            return Head.detached(remote_head)
        logger.debug("%sHEAD points at unknown commit '%s'", prefix, remote_head)

    for name in fallbacks:
        if name in branches:
            return Head.on_branch(name)
    return Head.none()


def _preferred_branch(candidates: List[str], fallbacks: List[str]) -> str:
    for name in fallbacks:
        if name in candidates:
            return name
    return sorted(candidates)[0]


def project_remote_view(
    store: GraphStore,
    remote_refs: Optional[Mapping[str, str]],
    remote: Optional[str] = None,
    settings: Optional[EngineSettings] = None,
) -> RemoteProjection:
    """Project ``store`` into the view of ``remote``.

    The local store is never modified. Working-tree state is cleared, refs
    that point outside the store are dropped, and only commits reachable
    from the remote branches, tags or detached remote HEAD are kept.
    """
    require_store(store)
    settings = settings or DEFAULT_SETTINGS
    remote = remote or settings.remote_name
    index = store.commit_index
    diagnostics: List[Diagnostic] = []

    stripped, remote_head = split_remote_refs(remote_refs or {}, remote)

    branches = _known_refs(stripped, index, f"{remote}/", diagnostics)
    tags = _known_refs(store.tags, index, "", diagnostics)

    head = synthesize_head(
        branches,
        remote_head,
        set(index),
        remote=remote,
        fallbacks=settings.head_fallbacks,
    )

    tips = list(branches.values()) + list(tags.values())
    if head.is_detached:
        tips.append(head.id)
    reachability = find_reachable(store, tips)
    diagnostics.extend(reachability.diagnostics)

    projected = filter_store(store, reachability.reachable).model_copy(
        update={
            "branches": branches,
            "tags": tags,
            "head": head,
            "staging": [],
            "modified": [],
            "untracked": [],
        }
    )
    return RemoteProjection(store=projected, diagnostics=diagnostics)


def _known_refs(
    refs: Mapping[str, str],
    index: Mapping[str, object],
    prefix: str,
    diagnostics: List[Diagnostic],
) -> Dict[str, str]:
    known: Dict[str, str] = {}
    for name, target in refs.items():
        if target in index:
            known[name] = target
        else:
            logger.warning("Dropping ref '%s%s': commit '%s' not in store", prefix, name, target)
            diagnostics.append(unresolved(f"{prefix}{name}", f"points at '{target}'"))
    return known
