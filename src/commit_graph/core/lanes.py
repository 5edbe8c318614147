"""Lane assignment for commit lineages."""

from typing import Dict, Iterable, Optional

from commit_graph.models.commit import Commit


class LaneAssigner:
    """Maps lineage names to lanes for a single layout pass.

    The main lineage always owns lane 0. Every other lineage takes the next
    free lane in the order it is first seen in the commit list. Commits with
    no lineage share the detached lineage. Lane numbers are only meaningful
    within the pass that produced them.
    """

    def __init__(
        self,
        commits: Iterable[Commit],
        main_lineage: str = "main",
        detached_lineage: str = "detached",
    ):
        self.main_lineage = main_lineage
        self.detached_lineage = detached_lineage
        self._lanes: Dict[str, int] = {}
        self._next_lane = 1

        for commit in commits:
            self._observe(self.lineage_of(commit.branch))

    def lineage_of(self, branch_name: Optional[str]) -> str:
        return branch_name or self.detached_lineage

    def _observe(self, lineage: str) -> None:
        if lineage in self._lanes:
            return
        if lineage == self.main_lineage:
            self._lanes[lineage] = 0
        else:
            self._lanes[lineage] = self._next_lane
            self._next_lane += 1

    def lane_of(self, branch_name: Optional[str]) -> int:
        """Lane of a lineage; unknown lineages fall back to the main lane."""
        return self._lanes.get(self.lineage_of(branch_name), 0)

    @property
    def lanes(self) -> Dict[str, int]:
        """Observed lineages and their lanes, ordered by lane."""
        return dict(sorted(self._lanes.items(), key=lambda item: item[1]))


def assign_lanes(
    commits: Iterable[Commit],
    main_lineage: str = "main",
    detached_lineage: str = "detached",
) -> Dict[str, int]:
    """Lineage to lane mapping for ``commits``."""
    return LaneAssigner(commits, main_lineage, detached_lineage).lanes
