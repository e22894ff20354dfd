from __future__ import annotations

from collections.abc import Iterable

from .analysis_aggregate import ContributionAccumulator
from .identity import is_ai_email
from .models import AnalysisResult, AnalysisScope, ContributionBucket, ContributionRecord, ContributorStats


def percentage(part: int, whole: int) -> int:
    """Integer percentage rounded half up; 0 when `whole` is 0."""
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


def build_contribution_records(accumulator: ContributionAccumulator, total_edit_lines: int) -> list[ContributionRecord]:
    records: list[ContributionRecord] = []
    for user, st in accumulator.items():
        total = st.total_lines
        records.append(
            ContributionRecord(
                user=user,
                name=st.name,
                email=st.email,
                additions=st.additions,
                deletions=st.deletions,
                pair_additions=st.pair_additions,
                pair_deletions=st.pair_deletions,
                total_lines=total,
                pair_lines=st.pair_lines,
                solo_lines=st.solo_lines,
                percentage=percentage(total, total_edit_lines),
                pair_percentage=percentage(st.pair_lines, total),
                solo_percentage=percentage(st.solo_lines, total),
            )
        )
    # sorted() is stable: ties keep first-seen order.
    return sorted(records, key=lambda r: -r.total_lines)


def contribution_bucket(members: Iterable[ContributorStats], total_edit_lines: int) -> ContributionBucket:
    people = 0
    adds = 0
    dels = 0
    for st in members:
        people += 1
        adds += st.additions
        dels += st.deletions
    return ContributionBucket(
        total_additions=adds,
        total_deletions=dels,
        total_edit_lines=adds + dels,
        percentage=percentage(adds + dels, total_edit_lines),
        people_count=people,
    )


def pair_bucket(pair_additions: int, pair_deletions: int, total_edit_lines: int) -> ContributionBucket:
    lines = pair_additions + pair_deletions
    return ContributionBucket(
        total_additions=pair_additions,
        total_deletions=pair_deletions,
        total_edit_lines=lines,
        percentage=percentage(lines, total_edit_lines),
        people_count=0,
    )


def finish_analysis(accumulator: ContributionAccumulator, ai_emails: frozenset[str], scope: AnalysisScope) -> AnalysisResult:
    total_additions = accumulator.total_additions
    total_deletions = accumulator.total_deletions
    total_edit_lines = total_additions + total_deletions

    humans: list[ContributorStats] = []
    ais: list[ContributorStats] = []
    for _user, st in accumulator.items():
        if is_ai_email(st.email, ai_emails):
            ais.append(st)
        else:
            humans.append(st)

    return AnalysisResult(
        scope=scope,
        total_additions=total_additions,
        total_deletions=total_deletions,
        total_edit_lines=total_edit_lines,
        contributions=build_contribution_records(accumulator, total_edit_lines),
        human=contribution_bucket(humans, total_edit_lines),
        ai=contribution_bucket(ais, total_edit_lines),
        pair=pair_bucket(accumulator.pair_additions, accumulator.pair_deletions, total_edit_lines),
    )
