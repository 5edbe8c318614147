"""Commit graph engine: layout, reachability and remote views of commit graphs."""

from commit_graph.core.layout import compute_layout
from commit_graph.core.reachability import find_reachable
from commit_graph.core.remote import project_remote_view
from commit_graph.models import Commit, GraphLayout, GraphStore, Head

__version__ = "0.1.0"

__all__ = [
    "Commit",
    "GraphLayout",
    "GraphStore",
    "Head",
    "compute_layout",
    "find_reachable",
    "project_remote_view",
]
