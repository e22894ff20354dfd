from __future__ import annotations

from collections.abc import Iterator

from .models import ContributorStats


def merge_contributor_stats(dst: ContributorStats, src: ContributorStats) -> None:
    dst.additions += src.additions
    dst.deletions += src.deletions
    dst.pair_additions += src.pair_additions
    dst.pair_deletions += src.pair_deletions
    if not dst.name and src.name:
        dst.name = src.name
    if not dst.email and src.email:
        dst.email = src.email


class ContributionAccumulator:
    """
    Running per-identity totals for one run (or one pull request).

    Counts only ever grow; name/email are kept from the first delta that
    carries them. Not safe for concurrent use: callers serialize merges.
    """

    def __init__(self) -> None:
        self._stats: dict[str, ContributorStats] = {}

    def merge(self, identity: str, delta: ContributorStats) -> None:
        cur = self._stats.get(identity)
        if cur is None:
            cur = ContributorStats()
            self._stats[identity] = cur
        merge_contributor_stats(cur, delta)

    def merge_accumulator(self, other: ContributionAccumulator) -> None:
        for identity, st in other.items():
            self.merge(identity, st)

    def get(self, identity: str) -> ContributorStats | None:
        return self._stats.get(identity)

    def items(self) -> Iterator[tuple[str, ContributorStats]]:
        return iter(self._stats.items())

    def __contains__(self, identity: object) -> bool:
        return identity in self._stats

    def __len__(self) -> int:
        return len(self._stats)

    @property
    def total_additions(self) -> int:
        return sum(st.additions + st.pair_additions for st in self._stats.values())

    @property
    def total_deletions(self) -> int:
        return sum(st.deletions + st.pair_deletions for st in self._stats.values())

    @property
    def total_edit_lines(self) -> int:
        return self.total_additions + self.total_deletions

    @property
    def pair_additions(self) -> int:
        return sum(st.pair_additions for st in self._stats.values())

    @property
    def pair_deletions(self) -> int:
        return sum(st.pair_deletions for st in self._stats.values())
