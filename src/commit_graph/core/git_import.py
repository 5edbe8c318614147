"""Build graph store snapshots from real git repositories."""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import git
from git import Repo

from commit_graph.config import DEFAULT_SETTINGS, EngineSettings
from commit_graph.errors import InvalidStoreError
from commit_graph.models.commit import Commit
from commit_graph.models.head import Head
from commit_graph.models.store import GraphStore

logger = logging.getLogger(__name__)

REMOTE_HEAD = "HEAD"


def open_repo(repo_path: Union[str, Path]) -> Repo:
    """Open a git repository or raise InvalidStoreError."""
    try:
        return Repo(Path(repo_path))
    except (git.InvalidGitRepositoryError, git.NoSuchPathError) as e:
        raise InvalidStoreError(f"No git repository found in {repo_path}") from e


def load_snapshot(
    repo_path: Union[str, Path], settings: Optional[EngineSettings] = None
) -> GraphStore:
    """Snapshot every commit reachable from branches, tags and HEAD.

    Remote-tracking branches count as tips too, so fetched commits that are
    not merged locally are part of the snapshot. Commits come out parents
    first. Lineages are assigned by walking the first-parent chain of each
    branch tip; local branches go before remote-tracking ones, and within
    each group the fallback branches (``main``, ``master``) claim their
    history first, then the rest alphabetically.
    """
    settings = settings or DEFAULT_SETTINGS
    repo = open_repo(repo_path)

    branches = _resolve_refs(repo.heads)
    tags = _resolve_refs(repo.tags)
    tracking = _tracking_tips(repo)

    if repo.head.is_detached:
        head = Head.detached(repo.head.commit.hexsha)
    else:
        head = Head.on_branch(repo.head.ref.name)

    revs = set(branches.values()) | set(tags.values())
    revs |= {sha for _, sha in tracking}
    if head.is_detached:
        revs.add(head.id)
    git_commits = []
    if revs:
        git_commits = list(repo.iter_commits(sorted(revs), topo_order=True, reverse=True))

    tips = _lineage_order(list(branches.items()), settings)
    tips += _lineage_order([t for t in tracking if t[0] != REMOTE_HEAD], settings)
    lineages = _assign_lineages(git_commits, tips)
    commits = [_to_commit(c, lineages.get(c.hexsha)) for c in git_commits]

    staging: List[str] = []
    modified: List[str] = []
    untracked: List[str] = []
    if not repo.bare and repo.head.is_valid():
        staging = sorted({d.a_path or d.b_path for d in repo.index.diff("HEAD")})
        modified = sorted({d.a_path or d.b_path for d in repo.index.diff(None)})
        untracked = sorted(repo.untracked_files)

    return GraphStore(
        commits=commits,
        branches=branches,
        tags=tags,
        head=head,
        staging=staging,
        modified=modified,
        untracked=untracked,
    )


def load_remote_refs(repo_path: Union[str, Path], remote: str = "origin") -> Dict[str, str]:
    """Remote-tracking refs of ``remote`` as ``{"origin/main": sha, ...}``.

    ``<remote>/HEAD`` is included, peeled to its commit, when it exists.
    """
    repo = open_repo(repo_path)
    try:
        tracking = repo.remote(remote)
    except ValueError:
        logger.debug("Repository has no remote named '%s'", remote)
        return {}

    refs = _resolve_refs(tracking.refs)
    remote_head = git.SymbolicReference(repo, f"refs/remotes/{remote}/HEAD")
    if remote_head.is_valid():
        refs[f"{remote}/HEAD"] = remote_head.commit.hexsha
    return refs


def _resolve_refs(refs) -> Dict[str, str]:
    resolved: Dict[str, str] = {}
    for ref in refs:
        try:
            resolved[ref.name] = ref.commit.hexsha
        except ValueError as e:
            logger.warning("Skipping ref '%s': %s", ref.name, e)
    return resolved


def _tracking_tips(repo: Repo) -> List[Tuple[str, str]]:
    """``(short name, sha)`` for every remote-tracking ref, ``HEAD`` included."""
    tips: List[Tuple[str, str]] = []
    for remote in repo.remotes:
        prefix = f"{remote.name}/"
        for name, sha in _resolve_refs(remote.refs).items():
            short_name = name[len(prefix):] if name.startswith(prefix) else name
            if short_name != REMOTE_HEAD:
                tips.append((short_name, sha))
        remote_head = git.SymbolicReference(repo, f"refs/remotes/{remote.name}/HEAD")
        if remote_head.is_valid():
            tips.append((REMOTE_HEAD, remote_head.commit.hexsha))
    return tips


def _lineage_order(tips: List[Tuple[str, str]], settings: EngineSettings) -> List[Tuple[str, str]]:
    preferred = [settings.main_lineage] + list(settings.head_fallbacks)
    return sorted(
        tips,
        key=lambda tip: (
            preferred.index(tip[0]) if tip[0] in preferred else len(preferred),
            tip[0],
        ),
    )


def _assign_lineages(
    git_commits: List[git.Commit], tips: List[Tuple[str, str]]
) -> Dict[str, str]:
    index = {c.hexsha: c for c in git_commits}

    lineages: Dict[str, str] = {}
    for name, sha in tips:
        while sha in index and sha not in lineages:
            lineages[sha] = name
            parents = index[sha].parents
            sha = parents[0].hexsha if parents else None
    return lineages


def _to_commit(git_commit: git.Commit, lineage: Optional[str]) -> Commit:
    parents = [p.hexsha for p in git_commit.parents]
    if len(parents) > 2:
        logger.warning(
            "Commit %s has %d parents; only the first two are kept",
            git_commit.hexsha,
            len(parents),
        )
    summary = git_commit.summary
    if isinstance(summary, bytes):
        summary = summary.decode("utf-8", errors="replace")
    return Commit(
        id=git_commit.hexsha,
        parent_id=parents[0] if parents else None,
        second_parent_id=parents[1] if len(parents) > 1 else None,
        branch=lineage,
        message=summary,
        timestamp=git_commit.committed_datetime.isoformat(),
    )
