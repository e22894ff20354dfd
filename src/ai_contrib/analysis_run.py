from __future__ import annotations

import dataclasses
import logging

from .analysis_aggregate import ContributionAccumulator
from .analysis_periods import DateRange
from .analysis_stats import finish_analysis
from .attribution import attribute_file
from .exclusions import filter_commits, filter_files
from .github import GitHubApiError, GitHubClient, Repository
from .models import AnalysisResult, AnalysisScope, ClassificationConfig, DateRangeScope, PullRequestListScope, SinglePullRequestScope

LOG = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class AnalysisRequest:
    repositories: tuple[Repository, ...]
    pr_numbers: tuple[int, ...] = ()
    date_range: DateRange | None = None

    def __post_init__(self) -> None:
        if not self.repositories:
            raise ValueError("At least one repository is required")
        if (self.date_range is None) == (not self.pr_numbers):
            raise ValueError("Exactly one of pr_numbers or date_range must be provided")


def analysis_scope(request: AnalysisRequest, pr_numbers: list[int]) -> AnalysisScope:
    if request.date_range is not None:
        return DateRangeScope(
            start_date=request.date_range.start_iso,
            end_date=request.date_range.end_iso,
            pr_numbers=tuple(sorted(set(pr_numbers))),
        )
    # PR numbers are per repository; one number over several repositories is still a list.
    if len(request.repositories) == 1 and len(request.pr_numbers) == 1:
        return SinglePullRequestScope(pr_number=request.pr_numbers[0])
    return PullRequestListScope(pr_numbers=tuple(sorted(set(pr_numbers))))


def analyze_pull_request(
    client: GitHubClient,
    repo: Repository,
    number: int,
    config: ClassificationConfig,
) -> ContributionAccumulator:
    """
    Attribute one pull request into a fresh accumulator. Raises GitHubApiError
    before any delta is produced if the files or commits cannot be fetched.
    """
    files = client.list_pull_request_files(repo, number)
    LOG.debug("PR #%d: %d changed files", number, len(files))
    commits = client.list_pull_request_commits(repo, number)
    LOG.debug("PR #%d: %d commits", number, len(commits))

    commits = filter_commits(commits, config)
    files = filter_files(files, config)

    acc = ContributionAccumulator()
    for f in files:
        LOG.debug("Processing file: %s (+%d/-%d)", f.path, f.additions, f.deletions)
        attribute_file(f, commits, config, acc)
    return acc


def analyze_pull_requests(
    client: GitHubClient,
    request: AnalysisRequest,
    config: ClassificationConfig,
) -> AnalysisResult:
    LOG.info("Analyzing %d repositories...", len(request.repositories))
    run_acc = ContributionAccumulator()
    all_numbers: list[int] = []

    for repo in request.repositories:
        LOG.info("Processing repository: %s", repo.full_name)
        if request.date_range is not None:
            try:
                numbers = client.find_merged_pull_requests(repo, request.date_range)
            except GitHubApiError as e:
                LOG.error("Error analyzing repository %s: %s", repo.full_name, e)
                continue
            if not numbers:
                LOG.info("No PRs found in the specified date range for %s", repo.full_name)
                continue
        else:
            numbers = list(request.pr_numbers)
        all_numbers.extend(numbers)

        for i, number in enumerate(numbers, start=1):
            LOG.info("[%d/%d] Analyzing %s#%d...", i, len(numbers), repo.full_name, number)
            try:
                pr_acc = analyze_pull_request(client, repo, number, config)
            except GitHubApiError as e:
                LOG.error("Error analyzing PR #%d in %s: %s", number, repo.full_name, e)
                continue
            run_acc.merge_accumulator(pr_acc)

    LOG.info("Analyzed %d contributors across %d pull requests", len(run_acc), len(all_numbers))
    return finish_analysis(run_acc, config.ai_emails, analysis_scope(request, all_numbers))
