"""Data models for the commit graph engine."""

from .commit import Commit
from .head import Head, HeadType
from .layout import GraphLayout, LayoutEdge, LayoutNode
from .store import GraphStore, require_store

__all__ = [
    "Commit",
    "GraphLayout",
    "GraphStore",
    "Head",
    "HeadType",
    "LayoutEdge",
    "LayoutNode",
    "require_store",
]
