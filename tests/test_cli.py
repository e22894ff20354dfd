from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from ai_contrib import analysis_cli
from ai_contrib.analysis_aggregate import ContributionAccumulator
from ai_contrib.analysis_cli import _build_parser, build_request
from ai_contrib.analysis_run import AnalysisRequest
from ai_contrib.analysis_stats import finish_analysis
from ai_contrib.github import Repository
from ai_contrib.models import AnalysisResult, ClassificationConfig, ContributorStats, SinglePullRequestScope


def _request(argv: list[str]) -> AnalysisRequest:
    return build_request(_build_parser().parse_args(argv))


def test_build_request_pr_numbers() -> None:
    req = _request(["-r", "WillBooster/gen-pr", "-p", "55,56", "#57", "56"])
    assert req.repositories == (Repository(owner="WillBooster", repo="gen-pr"),)
    assert req.pr_numbers == (55, 56, 57)
    assert req.date_range is None


def test_build_request_date_range_multi_repo() -> None:
    req = _request(["--repo", "org/a", "org/b", "--start-date", "2025-06-01", "--end-date", "2025-06-10"])
    assert [r.full_name for r in req.repositories] == ["org/a", "org/b"]
    assert req.date_range is not None
    assert req.date_range.end_iso == "2025-06-10"


@pytest.mark.parametrize(
    ("argv", "message"),
    [
        (["-r", "org/a"], "Either --pr-number"),
        (["-r", "org/a", "-p", "1", "-s", "2025-06-01", "-e", "2025-06-02"], "Cannot specify both"),
        (["-r", "org/a", "-s", "2025-06-01"], "must be provided together"),
        (["-r", "org/a", "-s", "2025-06-10", "-e", "2025-06-01"], "before or equal"),
        (["-r", "org/a", "-s", "yesterday", "-e", "2025-06-01"], "start-date"),
        (["-r", "not-a-repo", "-p", "1"], "owner/repo"),
        (["-r", "org/a", "-p", "abc"], "Invalid pull request number"),
    ],
)
def test_build_request_rejects_invalid_arguments(argv: list[str], message: str) -> None:
    with pytest.raises(SystemExit, match=message):
        _request(argv)


def _fake_result() -> AnalysisResult:
    acc = ContributionAccumulator()
    acc.merge("exKAZUu", ContributorStats(additions=3, deletions=1, email="exkazuu@gmail.com"))
    return finish_analysis(acc, frozenset(), SinglePullRequestScope(pr_number=65))


def test_main_json_output(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    seen: dict[str, object] = {}

    def fake_analyze(client: object, request: AnalysisRequest, config: ClassificationConfig) -> AnalysisResult:
        seen["client"] = client
        seen["request"] = request
        seen["config"] = config
        return _fake_result()

    monkeypatch.setattr(analysis_cli, "analyze_pull_requests", fake_analyze)
    monkeypatch.setenv("GH_TOKEN", "tok")
    cfg_path = tmp_path / "config.json"
    cfg_path.write_text('{"ai_emails": ["bot@example.com"], "api_url": "https://ghe.example.com/api/v3"}', encoding="utf-8")

    code = analysis_cli.main(
        ["-r", "WillBooster/gen-pr", "-p", "65", "--config", str(cfg_path), "--format", "json", "--exclude-files", "*.{md,lock}"]
    )

    assert code == 0
    data = json.loads(capsys.readouterr().out)
    assert data["scope"]["kind"] == "single_pr"
    assert data["total_edit_lines"] == 4
    config = seen["config"]
    assert isinstance(config, ClassificationConfig)
    assert config.ai_emails == frozenset({"bot@example.com"})
    assert config.exclude_file_patterns == ("*.{md,lock}",)
    client = seen["client"]
    assert getattr(client, "token") == "tok"
    assert getattr(client, "api_url") == "https://ghe.example.com/api/v3"


def test_main_text_output(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(analysis_cli, "analyze_pull_requests", lambda client, request, config: _fake_result())
    monkeypatch.delenv("GH_TOKEN", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)

    code = analysis_cli.main(["-r", "WillBooster/gen-pr", "-p", "65", "--config", str(tmp_path / "missing.json"), "--exclude-users", "renovate[bot]"])

    assert code == 0
    out = capsys.readouterr().out
    assert "Exclude users: renovate[bot]" in out
    assert "PR #65" in out
    assert "exKAZUu <exkazuu@gmail.com>:" in out


def test_main_rejects_bad_config(tmp_path: Path) -> None:
    cfg_path = tmp_path / "config.json"
    cfg_path.write_text("{", encoding="utf-8")
    with pytest.raises(SystemExit, match="Invalid JSON"):
        analysis_cli.main(["-r", "org/a", "-p", "1", "--config", str(cfg_path)])


def test_module_help(tmp_path: Path) -> None:
    env = os.environ.copy()
    env["PYTHONPATH"] = str(Path(__file__).resolve().parents[1] / "src")
    proc = subprocess.run([sys.executable, "-m", "ai_contrib", "--help"], cwd=str(tmp_path), env=env, text=True, capture_output=True)
    assert proc.returncode == 0, proc.stderr
    assert "--pr-number" in proc.stdout
    assert "--ai-emails" in proc.stdout
    assert "GH_TOKEN" in proc.stdout
