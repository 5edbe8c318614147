"""Tests for importing snapshots from real git repositories."""

import tempfile
from pathlib import Path

import pytest
from git import Repo

from commit_graph.core.git_import import load_remote_refs, load_snapshot
from commit_graph.core.layout import compute_layout
from commit_graph.core.remote import project_remote_view
from commit_graph.errors import InvalidStoreError
from commit_graph.models import Head, HeadType


@pytest.fixture(autouse=True)
def git_identity(monkeypatch):
    """Commit as a fixed identity so tests don't depend on git config."""
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test User")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test User")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.com")


@pytest.fixture
def temp_dir():
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def merge_repo(temp_dir):
    """main: c1 - c2 - c4, feature: c3 off c1, merged into c4, v1 tags c2."""
    repo = Repo.init(temp_dir / "repo", initial_branch="main")
    c1 = repo.index.commit("initial")
    c2 = repo.index.commit("second")
    c3 = repo.index.commit("feature work", parent_commits=[c1], head=False)
    repo.create_head("feature", c3)
    c4 = repo.index.commit("merge feature", parent_commits=[c2, c3])
    repo.create_tag("v1", ref=c2)
    shas = {"c1": c1.hexsha, "c2": c2.hexsha, "c3": c3.hexsha, "c4": c4.hexsha}
    return repo, shas


def test_snapshot_of_merge_repo(merge_repo):
    repo, shas = merge_repo
    store = load_snapshot(repo.working_tree_dir)

    ids = [c.id for c in store.commits]
    assert ids[0] == shas["c1"]
    assert ids[-1] == shas["c4"]
    assert set(ids) == set(shas.values())

    assert store.branches == {"main": shas["c4"], "feature": shas["c3"]}
    assert store.tags == {"v1": shas["c2"]}
    assert store.head == Head.on_branch("main")

    merge = store.get_commit(shas["c4"])
    assert merge.parent_id == shas["c2"]
    assert merge.second_parent_id == shas["c3"]
    assert merge.message == "merge feature"
    assert merge.timestamp is not None


def test_lineages_follow_first_parent(merge_repo):
    repo, shas = merge_repo
    store = load_snapshot(repo.working_tree_dir)

    lineages = {c.id: c.branch for c in store.commits}
    assert lineages[shas["c1"]] == "main"
    assert lineages[shas["c2"]] == "main"
    assert lineages[shas["c4"]] == "main"
    assert lineages[shas["c3"]] == "feature"


def test_snapshot_lays_out(merge_repo):
    repo, shas = merge_repo
    layout = compute_layout(load_snapshot(repo.working_tree_dir))

    assert layout.lanes == {"main": 0, "feature": 1}
    assert layout.head_commit_id == shas["c4"]
    merges = [e for e in layout.edges if e.is_merge]
    assert [(e.from_id, e.to_id) for e in merges] == [(shas["c3"], shas["c4"])]


def test_clean_working_tree(merge_repo):
    repo, _ = merge_repo
    store = load_snapshot(repo.working_tree_dir)
    assert store.staging == []
    assert store.modified == []
    assert store.untracked == []


def test_untracked_files(merge_repo):
    repo, _ = merge_repo
    (Path(repo.working_tree_dir) / "notes.txt").write_text("hello")

    assert load_snapshot(repo.working_tree_dir).untracked == ["notes.txt"]


def test_detached_head(merge_repo):
    repo, shas = merge_repo
    repo.head.reference = repo.commit(shas["c2"])

    store = load_snapshot(repo.working_tree_dir)

    assert store.head == Head.detached(shas["c2"])
    assert compute_layout(store).head_commit_id == shas["c2"]


def test_octopus_keeps_two_parents(merge_repo):
    repo, shas = merge_repo
    octopus = repo.index.commit(
        "octopus",
        parent_commits=[repo.commit(shas["c4"]), repo.commit(shas["c3"]), repo.commit(shas["c1"])],
    )

    commit = load_snapshot(repo.working_tree_dir).get_commit(octopus.hexsha)

    assert commit.parent_id == shas["c4"]
    assert commit.second_parent_id == shas["c3"]


def test_empty_repository(temp_dir):
    repo = Repo.init(temp_dir / "empty", initial_branch="main")
    store = load_snapshot(repo.working_tree_dir)

    assert store.commits == []
    assert store.branches == {}
    assert store.head == Head.on_branch("main")
    assert compute_layout(store).nodes == []


def test_not_a_repository(temp_dir):
    with pytest.raises(InvalidStoreError):
        load_snapshot(temp_dir)
    with pytest.raises(InvalidStoreError):
        load_remote_refs(temp_dir / "missing")


def test_no_remote(merge_repo):
    repo, _ = merge_repo
    assert load_remote_refs(repo.working_tree_dir) == {}


def test_remote_refs_of_clone(merge_repo, temp_dir):
    repo, shas = merge_repo
    clone = repo.clone(str(temp_dir / "clone"))

    refs = load_remote_refs(clone.working_tree_dir)

    assert refs["origin/main"] == shas["c4"]
    assert refs["origin/feature"] == shas["c3"]
    assert refs["origin/HEAD"] == shas["c4"]


def test_project_clone_remote_view(merge_repo, temp_dir):
    repo, shas = merge_repo
    clone = repo.clone(str(temp_dir / "clone"))
    clone.index.commit("local only")

    store = load_snapshot(clone.working_tree_dir)
    remote = project_remote_view(store, load_remote_refs(clone.working_tree_dir)).store

    assert remote.head.type == HeadType.BRANCH
    assert remote.head.ref == "main"
    assert remote.branches == {"main": shas["c4"], "feature": shas["c3"]}
    assert {c.id for c in remote.commits} == set(shas.values())
    assert len(store.commits) == 5


def test_fetched_commits_are_imported(merge_repo, temp_dir):
    repo, shas = merge_repo
    clone = repo.clone(str(temp_dir / "clone"))
    ahead = repo.index.commit("only on origin")
    clone.remote("origin").fetch()

    store = load_snapshot(clone.working_tree_dir)
    assert store.branches["main"] == shas["c4"]
    assert store.get_commit(ahead.hexsha).branch == "main"

    projection = project_remote_view(store, load_remote_refs(clone.working_tree_dir))
    remote = projection.store

    assert projection.diagnostics == []
    assert remote.branches == {"main": ahead.hexsha, "feature": shas["c3"]}
    assert remote.head == Head.on_branch("main")
    assert ahead.hexsha in {c.id for c in remote.commits}
