from __future__ import annotations

import dataclasses
import enum

UNKNOWN_IDENTITY = "Unknown"


@dataclasses.dataclass(frozen=True)
class FileChange:
    path: str
    additions: int = 0
    deletions: int = 0


@dataclasses.dataclass(frozen=True)
class CoAuthor:
    name: str
    email: str


@dataclasses.dataclass(frozen=True)
class CommitRecord:
    author_identity: str = UNKNOWN_IDENTITY
    author_name: str = ""
    author_email: str = ""
    co_authors: tuple[CoAuthor, ...] = ()
    message: str = ""

    @property
    def co_author_emails(self) -> list[str]:
        return [ca.email for ca in self.co_authors if ca.email]


@dataclasses.dataclass(frozen=True)
class ClassificationConfig:
    ai_emails: frozenset[str] = frozenset()
    exclude_users: frozenset[str] = frozenset()
    exclude_emails: frozenset[str] = frozenset()
    exclude_file_patterns: tuple[str, ...] = ()
    exclude_message_patterns: tuple[str, ...] = ()

    @property
    def has_exclusions(self) -> bool:
        return bool(self.exclude_users or self.exclude_emails or self.exclude_file_patterns or self.exclude_message_patterns)


@dataclasses.dataclass
class ContributorStats:
    additions: int = 0
    deletions: int = 0
    pair_additions: int = 0
    pair_deletions: int = 0
    name: str = ""
    email: str = ""

    @property
    def solo_lines(self) -> int:
        return self.additions + self.deletions

    @property
    def pair_lines(self) -> int:
        return self.pair_additions + self.pair_deletions

    @property
    def total_lines(self) -> int:
        return self.solo_lines + self.pair_lines


@dataclasses.dataclass(frozen=True)
class ContributionRecord:
    user: str
    name: str
    email: str
    additions: int
    deletions: int
    pair_additions: int
    pair_deletions: int
    total_lines: int
    pair_lines: int
    solo_lines: int
    percentage: int
    pair_percentage: int
    solo_percentage: int


@dataclasses.dataclass(frozen=True)
class ContributionBucket:
    total_additions: int = 0
    total_deletions: int = 0
    total_edit_lines: int = 0
    percentage: int = 0
    people_count: int = 0


class ScopeKind(str, enum.Enum):
    SINGLE_PR = "single_pr"
    DATE_RANGE = "date_range"
    PR_LIST = "pr_list"


@dataclasses.dataclass(frozen=True)
class SinglePullRequestScope:
    pr_number: int
    kind: ScopeKind = dataclasses.field(default=ScopeKind.SINGLE_PR, init=False)

    @property
    def pr_numbers(self) -> list[int]:
        return [self.pr_number]


@dataclasses.dataclass(frozen=True)
class DateRangeScope:
    start_date: str
    end_date: str
    pr_numbers: tuple[int, ...] = ()
    kind: ScopeKind = dataclasses.field(default=ScopeKind.DATE_RANGE, init=False)

    @property
    def total_prs(self) -> int:
        return len(self.pr_numbers)


@dataclasses.dataclass(frozen=True)
class PullRequestListScope:
    pr_numbers: tuple[int, ...] = ()
    kind: ScopeKind = dataclasses.field(default=ScopeKind.PR_LIST, init=False)


AnalysisScope = SinglePullRequestScope | DateRangeScope | PullRequestListScope


@dataclasses.dataclass(frozen=True)
class AnalysisResult:
    scope: AnalysisScope
    total_additions: int
    total_deletions: int
    total_edit_lines: int
    contributions: list[ContributionRecord]
    human: ContributionBucket
    ai: ContributionBucket
    pair: ContributionBucket
