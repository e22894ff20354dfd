from __future__ import annotations

import dataclasses
import json

from .models import AnalysisResult, ClassificationConfig, ContributionBucket, DateRangeScope, ScopeKind

BOX_WIDTH = 48


def fmt_int(n: int) -> str:
    return f"{int(n):,}"


def bar(percentage: int, width: int = 16) -> str:
    filled = int(round((percentage / 100) * width))
    filled = max(0, min(width, filled))
    return ("█" * filled) + ("░" * (width - filled))


def format_user_info(user: str, name: str = "", email: str = "") -> str:
    name_info = f" ({name})" if name else ""
    email_info = f" <{email}>" if email else ""
    return f"{user}{name_info}{email_info}"


def _box_line(text: str) -> str:
    return f"║ {text.ljust(BOX_WIDTH)} ║"


def scope_label(result: AnalysisResult) -> str:
    scope = result.scope
    if scope.kind is ScopeKind.SINGLE_PR:
        return f"PR #{scope.pr_numbers[0]}"
    if isinstance(scope, DateRangeScope):
        return f"Date: {scope.start_date} to {scope.end_date} (PRs: {scope.total_prs})"
    shown = ", ".join(f"#{n}" for n in scope.pr_numbers[:6])
    more = "..." if len(scope.pr_numbers) > 6 else ""
    return f"PRs: {shown}{more}"


def render_options(config: ClassificationConfig) -> str:
    if not (config.has_exclusions or config.ai_emails):
        return ""
    lines = ["Options:"]
    if config.exclude_file_patterns:
        lines.append(f"  Exclude files: {', '.join(config.exclude_file_patterns)}")
    if config.exclude_users:
        lines.append(f"  Exclude users: {', '.join(sorted(config.exclude_users))}")
    if config.exclude_emails:
        lines.append(f"  Exclude emails: {', '.join(sorted(config.exclude_emails))}")
    if config.exclude_message_patterns:
        lines.append(f"  Exclude commit messages containing: {', '.join(config.exclude_message_patterns)}")
    if config.ai_emails:
        lines.append(f"  AI emails: {', '.join(sorted(config.ai_emails))}")
    return "\n".join(lines) + "\n"


def _header(result: AnalysisResult, show_ai: bool) -> list[str]:
    rule = "═" * (BOX_WIDTH + 2)
    lines = [
        f"╔{rule}╗",
        _box_line("CONTRIBUTION ANALYSIS REPORT".center(BOX_WIDTH).rstrip()),
        f"╠{rule}╣",
        _box_line(scope_label(result)),
        _box_line(
            f"Total Edits: {fmt_int(result.total_edit_lines)} "
            f"(+{fmt_int(result.total_additions)} / -{fmt_int(result.total_deletions)})"
        ),
    ]
    if show_ai:
        lines.append(f"╠{rule}╣")
        if result.pair.percentage > 0:
            lines.append(_box_line(f"AI: {result.ai.percentage}% | Human: {result.human.percentage}% | Pair: {result.pair.percentage}%"))
        else:
            lines.append(_box_line(f"AI vs Human: [{bar(result.ai.percentage, 22)}] {result.ai.percentage}% / {result.human.percentage}%"))
        lines.append(_box_line(f"Contributors: {result.ai.people_count} AI, {result.human.people_count} Human"))
    lines.append(f"╚{rule}╝")
    lines.append("")
    return lines


def _bucket_line(label: str, bucket: ContributionBucket) -> str:
    return (
        f"{label}: [{bar(bucket.percentage)}] {bucket.percentage:>3}% | {fmt_int(bucket.total_edit_lines):>8} Edits "
        f"(+{fmt_int(bucket.total_additions)} / -{fmt_int(bucket.total_deletions)})"
    )


def _breakdown(result: AnalysisResult) -> list[str]:
    lines = ["DETAILED BREAKDOWN", "─" * 40]
    lines.append(_bucket_line("AI   ", result.ai))
    lines.append(_bucket_line("Human", result.human))
    if result.pair.percentage > 0:
        lines.append(_bucket_line("Pair ", result.pair))
    lines.append("")
    return lines


def _individuals(result: AnalysisResult) -> list[str]:
    lines = ["INDIVIDUAL CONTRIBUTIONS", "─" * 40]
    if not result.contributions:
        if isinstance(result.scope, DateRangeScope):
            lines.append("No contributions found in the specified date range.")
        else:
            lines.append("No contributions found.")
        return lines
    for c in result.contributions:
        lines.append(f"{format_user_info(c.user, c.name, c.email)}:")
        line = (
            f"  [{bar(c.percentage)}] {c.percentage:>3}% | {fmt_int(c.total_lines):>8} Edits: "
            f"(+{fmt_int(c.additions)} / -{fmt_int(c.deletions)})"
        )
        if c.pair_lines:
            line += f" | Pair: {fmt_int(c.pair_lines)} ({c.pair_percentage}%)"
        lines.append(line)
        lines.append("")
    return lines


def render_report(result: AnalysisResult, config: ClassificationConfig) -> str:
    show_ai = bool(config.ai_emails)
    lines = _header(result, show_ai)
    if show_ai:
        lines.extend(_breakdown(result))
    lines.extend(_individuals(result))
    return "\n".join(lines)


def result_to_dict(result: AnalysisResult) -> dict:
    data = dataclasses.asdict(result)
    data["scope"]["kind"] = result.scope.kind.value
    return data


def render_json(result: AnalysisResult) -> str:
    return json.dumps(result_to_dict(result), indent=2, ensure_ascii=False) + "\n"
