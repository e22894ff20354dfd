"""
Per-file line attribution.

GitHub only reports aggregate added/deleted counts per file, so a file's
changes are split evenly between the distinct authors of the pull request's
commits. Commits co-authored by a human and an AI form a separate "pair"
pool sized by their share of the commit list.
"""

from __future__ import annotations

import dataclasses
import logging

from .analysis_aggregate import ContributionAccumulator
from .exclusions import should_exclude_contributor
from .identity import is_pair_commit
from .models import UNKNOWN_IDENTITY, ClassificationConfig, CommitRecord, ContributorStats, FileChange

LOG = logging.getLogger(__name__)


@dataclasses.dataclass
class FileAttribution:
    contributions: dict[str, ContributorStats]
    pair_additions: int = 0
    pair_deletions: int = 0


def split_evenly(total: int, parts: int) -> list[int]:
    """Floor share per part; the last part absorbs the remainder."""
    if parts <= 0:
        return []
    per = total // parts
    return [per] * (parts - 1) + [total - per * (parts - 1)]


def distinct_authors(commits: list[CommitRecord]) -> dict[str, CommitRecord]:
    # First commit seen for each identity, in first-seen order.
    out: dict[str, CommitRecord] = {}
    for c in commits:
        if c.author_identity not in out:
            out[c.author_identity] = c
    return out


def partition_pair_commits(commits: list[CommitRecord], ai_emails: frozenset[str]) -> tuple[list[CommitRecord], list[CommitRecord]]:
    pair: list[CommitRecord] = []
    solo: list[CommitRecord] = []
    for c in commits:
        if is_pair_commit(c.author_email, c.co_author_emails, ai_emails):
            pair.append(c)
        else:
            solo.append(c)
    return pair, solo


def _stats_for(out: dict[str, ContributorStats], identity: str, commit: CommitRecord) -> ContributorStats:
    st = out.get(identity)
    if st is None:
        st = ContributorStats(name=commit.author_name, email=commit.author_email)
        out[identity] = st
    return st


def distribute_file_changes(file: FileChange, commits: list[CommitRecord], ai_emails: frozenset[str] = frozenset()) -> FileAttribution:
    out: dict[str, ContributorStats] = {}
    if not commits:
        out[UNKNOWN_IDENTITY] = ContributorStats(additions=file.additions, deletions=file.deletions)
        return FileAttribution(contributions=out)

    pair_commits, solo_commits = partition_pair_commits(commits, ai_emails)

    pair_additions = file.additions * len(pair_commits) // len(commits)
    pair_deletions = file.deletions * len(pair_commits) // len(commits)

    # Only primary authors share the pair pool; co-authors are not credited.
    if pair_commits:
        authors = distinct_authors(pair_commits)
        adds = split_evenly(pair_additions, len(authors))
        dels = split_evenly(pair_deletions, len(authors))
        for (identity, commit), a, d in zip(authors.items(), adds, dels):
            st = _stats_for(out, identity, commit)
            st.pair_additions += a
            st.pair_deletions += d

    if solo_commits:
        authors = distinct_authors(solo_commits)
        adds = split_evenly(file.additions - pair_additions, len(authors))
        dels = split_evenly(file.deletions - pair_deletions, len(authors))
        for (identity, commit), a, d in zip(authors.items(), adds, dels):
            st = _stats_for(out, identity, commit)
            st.additions += a
            st.deletions += d

    return FileAttribution(contributions=out, pair_additions=pair_additions, pair_deletions=pair_deletions)


def attribute_file(
    file: FileChange,
    commits: list[CommitRecord],
    config: ClassificationConfig,
    accumulator: ContributionAccumulator,
) -> FileAttribution:
    """
    Attribute one file's changes and merge every non-excluded contributor into
    `accumulator`. Returns the attribution restricted to the merged contributors.
    """
    attribution = distribute_file_changes(file, commits, config.ai_emails)
    kept: dict[str, ContributorStats] = {}
    for identity, st in attribution.contributions.items():
        if should_exclude_contributor(identity, st.email, config):
            LOG.debug("Excluding user: %s (%s) <%s>", identity, st.name or "no name", st.email or "no email")
            continue
        accumulator.merge(identity, st)
        kept[identity] = st
    return FileAttribution(
        contributions=kept,
        pair_additions=sum(st.pair_additions for st in kept.values()),
        pair_deletions=sum(st.pair_deletions for st in kept.values()),
    )
