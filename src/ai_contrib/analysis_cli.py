from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .analysis_periods import parse_date_range
from .analysis_render import render_json, render_options, render_report
from .analysis_run import AnalysisRequest, analyze_pull_requests
from .config import build_classification_config, load_config, resolve_token
from .github import DEFAULT_API_URL, GitHubClient, parse_repository
from .logging_utils import configure_logging

LOG = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ai-contrib",
        description="Estimate human, AI and pair-programmed line contributions across GitHub pull requests.",
        epilog=(
            "examples:\n"
            "  ai-contrib -r WillBooster/gen-pr -p 65\n"
            "  ai-contrib -r WillBooster/gen-pr -p 55,56,57\n"
            "  ai-contrib -r org/a org/b -s 2025-06-01 -e 2025-06-30 --ai-emails bot@example.com\n"
            "\n"
            "Set GH_TOKEN (or GITHUB_TOKEN) for private repositories and higher rate limits."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-r", "--repo", dest="repos", type=str, nargs="+", required=True, help="Repositories as owner/repo.")
    parser.add_argument("-p", "--pr-number", dest="pr_numbers", type=str, nargs="+", default=[], help="Pull request numbers (space or comma separated).")
    parser.add_argument("-s", "--start-date", type=str, default="", help="Start of the merge window (YYYY-MM-DD, inclusive).")
    parser.add_argument("-e", "--end-date", type=str, default="", help="End of the merge window (YYYY-MM-DD, inclusive).")
    parser.add_argument("--exclude-files", type=str, nargs="+", default=[], help="Glob patterns of files to ignore (supports ** and {a,b}).")
    parser.add_argument("--exclude-users", type=str, nargs="+", default=[], help="GitHub logins (or author names) to drop from the results.")
    parser.add_argument("--exclude-emails", type=str, nargs="+", default=[], help="Author emails to drop from the results.")
    parser.add_argument("--exclude-commit-messages", type=str, nargs="+", default=[], help="Skip commits whose message contains any of these substrings.")
    parser.add_argument("--ai-emails", type=str, nargs="+", default=[], help="Author emails that identify AI contributors.")
    parser.add_argument("--config", type=Path, default=Path("config.json"), help="Path to config.json (optional).")
    parser.add_argument("--format", choices=["text", "json"], default="text", help="Output format.")
    parser.add_argument("--api-url", type=str, default="", help=f"GitHub API base URL (default: config `api_url` or {DEFAULT_API_URL}).")
    parser.add_argument("--ca-bundle", type=str, default="", help="Path to a CA bundle file/dir for HTTPS verification.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v info, -vv debug).")
    return parser


def _split_csv_args(values: list[str]) -> list[str]:
    out: list[str] = []
    for v in values:
        for part in str(v).split(","):
            part = part.strip()
            if part:
                out.append(part)
    return out


def _parse_pr_numbers(values: list[str]) -> tuple[int, ...]:
    out: list[int] = []
    for tok in _split_csv_args(values):
        tok = tok.lstrip("#")
        if not tok.isdigit() or int(tok) <= 0:
            raise SystemExit(f"Invalid pull request number: {tok!r}")
        n = int(tok)
        if n not in out:
            out.append(n)
    return tuple(out)


def build_request(args: argparse.Namespace) -> AnalysisRequest:
    try:
        repos = tuple(parse_repository(s) for s in _split_csv_args(args.repos))
    except ValueError as e:
        raise SystemExit(str(e)) from None

    pr_numbers = _parse_pr_numbers(args.pr_numbers)
    has_start = bool(str(args.start_date).strip())
    has_end = bool(str(args.end_date).strip())
    if has_start != has_end:
        raise SystemExit("Both --start-date and --end-date must be provided together")
    has_range = has_start and has_end
    if pr_numbers and has_range:
        raise SystemExit("Cannot specify both --pr-number and date range options")
    if not pr_numbers and not has_range:
        raise SystemExit("Either --pr-number or both --start-date and --end-date must be provided")

    date_range = None
    if has_range:
        try:
            date_range = parse_date_range(args.start_date, args.end_date)
        except ValueError as e:
            raise SystemExit(str(e)) from None
    return AnalysisRequest(repositories=repos, pr_numbers=pr_numbers, date_range=date_range)


def main(argv: list[str]) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(int(args.verbose))
    request = build_request(args)

    try:
        config = load_config(args.config)
    except ValueError as e:
        raise SystemExit(str(e)) from None
    classification = build_classification_config(
        config,
        ai_emails=_split_csv_args(args.ai_emails),
        exclude_users=_split_csv_args(args.exclude_users),
        exclude_emails=_split_csv_args(args.exclude_emails),
        exclude_files=args.exclude_files,
        exclude_commit_messages=args.exclude_commit_messages,
    )
    client = GitHubClient(
        token=resolve_token(),
        api_url=str(args.api_url or config.get("api_url") or DEFAULT_API_URL),
        ca_bundle_path=str(args.ca_bundle or config.get("ca_bundle_path") or ""),
    )
    if not client.token:
        LOG.warning("GH_TOKEN is not set; unauthenticated requests are heavily rate limited.")

    if args.format == "text":
        options = render_options(classification)
        if options:
            print(options)

    result = analyze_pull_requests(client, request, classification)

    if args.format == "json":
        sys.stdout.write(render_json(result))
    else:
        print(render_report(result, classification))
    return 0
