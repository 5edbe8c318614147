"""HEAD model: nothing, a branch, or a detached commit."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, model_validator


class HeadType(str, Enum):
    """What HEAD points at."""

    NONE = "none"
    BRANCH = "branch"
    COMMIT = "commit"


class Head(BaseModel):
    """The current HEAD of a graph store."""

    type: HeadType = HeadType.NONE
    ref: Optional[str] = None  # branch name, for BRANCH
    id: Optional[str] = None  # commit id, for COMMIT

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_target(self) -> "Head":
        if self.type == HeadType.BRANCH and not self.ref:
            raise ValueError("branch HEAD requires a ref")
        if self.type == HeadType.COMMIT and not self.id:
            raise ValueError("detached HEAD requires a commit id")
        return self

    @classmethod
    def none(cls) -> "Head":
        return cls(type=HeadType.NONE)

    @classmethod
    def on_branch(cls, ref: str) -> "Head":
        return cls(type=HeadType.BRANCH, ref=ref)

    @classmethod
    def detached(cls, commit_id: str) -> "Head":
        return cls(type=HeadType.COMMIT, id=commit_id)

    @property
    def is_detached(self) -> bool:
        return self.type == HeadType.COMMIT
