"""Errors and non-fatal diagnostics for the commit graph engine.

Only programmer errors and explicit lookups raise. Everything that can happen
in a transient, partially updated store (stale refs, truncated history) is
reported as a :class:`Diagnostic` value instead.
"""

from enum import Enum

from pydantic import BaseModel


class CommitGraphError(Exception):
    """Base class for commit graph errors."""


class UnresolvedReference(CommitGraphError, LookupError):
    """A branch, tag, HEAD ref or commit id does not resolve to a commit."""

    def __init__(self, ref: str):
        super().__init__(f"Reference '{ref}' does not resolve to a commit")
        self.ref = ref


class InvalidStoreError(CommitGraphError, TypeError):
    """Something other than a graph store was passed where one is required."""


class DiagnosticKind(str, Enum):
    """Kind of integrity problem found in a store."""

    UNRESOLVED_REFERENCE = "unresolved_reference"
    DANGLING_PARENT = "dangling_parent"
    CYCLE_DETECTED = "cycle_detected"


class Diagnostic(BaseModel):
    """A recovered problem, returned to callers who want to inspect it."""

    kind: DiagnosticKind
    subject: str
    detail: str = ""

    model_config = {"frozen": True}

    @property
    def message(self) -> str:
        if self.kind == DiagnosticKind.UNRESOLVED_REFERENCE:
            text = f"unresolved reference '{self.subject}'"
        elif self.kind == DiagnosticKind.DANGLING_PARENT:
            text = f"dangling parent '{self.subject}'"
        else:
            text = f"cycle through commit '{self.subject}'"
        return f"{text}: {self.detail}" if self.detail else text


def unresolved(subject: str, detail: str = "") -> Diagnostic:
    return Diagnostic(
        kind=DiagnosticKind.UNRESOLVED_REFERENCE, subject=subject, detail=detail
    )


def dangling(parent_id: str, child_id: str) -> Diagnostic:
    return Diagnostic(
        kind=DiagnosticKind.DANGLING_PARENT,
        subject=parent_id,
        detail=f"referenced by {child_id}",
    )


def cycle(commit_id: str, detail: str = "") -> Diagnostic:
    return Diagnostic(kind=DiagnosticKind.CYCLE_DETECTED, subject=commit_id, detail=detail)
