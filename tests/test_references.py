"""Tests for reference listings."""

from commit_graph.core.references import RefKind, describe_refs, list_references
from commit_graph.models import Commit, GraphStore, Head


def make_store(head=None):
    return GraphStore(
        commits=[
            Commit(id="1111111aaaa", branch="main", message="init"),
            Commit(id="2222222bbbb", parent_id="1111111aaaa", branch="main", message="more"),
        ],
        branches={"zeta": "1111111aaaa", "main": "2222222bbbb"},
        tags={"v1.0": "1111111aaaa", "broken": "ffff"},
        head=head or Head.on_branch("main"),
    )


def test_branches_sorted_with_commits():
    entries = list_references(make_store(), RefKind.BRANCHES)

    assert [e.name for e in entries] == ["main", "zeta"]
    assert entries[0].short_id == "2222222"
    assert entries[0].commit.message == "more"


def test_tags_with_unknown_commit():
    entries = list_references(make_store(), "tags")

    assert [e.name for e in entries] == ["broken", "v1.0"]
    assert entries[0].commit is None
    assert entries[0].short_id == "ffff"


def test_empty_store_has_no_references():
    assert list_references(GraphStore()) == []


def test_describe_refs_branch_head():
    rows = describe_refs(make_store())
    assert rows[0] == ("branch", "main", "2222222bbbb")
    assert ("tag", "v1.0", "1111111aaaa") in rows
    assert rows[-1] == ("HEAD", "ref: main", "2222222bbbb")


def test_describe_refs_detached_and_none():
    assert describe_refs(make_store(Head.detached("1111111aaaa")))[-1] == (
        "HEAD",
        "detached",
        "1111111aaaa",
    )
    assert describe_refs(GraphStore())[-1] == ("HEAD", "none", "")
