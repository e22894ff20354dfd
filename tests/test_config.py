from __future__ import annotations

from pathlib import Path

import pytest

from ai_contrib.config import build_classification_config, load_config, resolve_token


def test_load_config_missing_file_is_empty(tmp_path: Path) -> None:
    assert load_config(tmp_path / "config.json") == {}


def test_load_config_rejects_bad_json(tmp_path: Path) -> None:
    p = tmp_path / "config.json"
    p.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid JSON"):
        load_config(p)
    p.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError, match="JSON object"):
        load_config(p)


def test_build_classification_config_merges_config_and_cli(tmp_path: Path) -> None:
    p = tmp_path / "config.json"
    p.write_text(
        '{"ai_emails": ["Bot@Example.com"], "exclude_files": ["*.md"], "exclude_users": ["renovate[bot]"]}',
        encoding="utf-8",
    )
    cfg = build_classification_config(
        load_config(p),
        ai_emails=["aider@example.com", "bot@example.com"],
        exclude_files=["*.md", "**/*.lock"],
        exclude_emails=["CI@example.com"],
        exclude_commit_messages=["Merge branch"],
    )
    assert cfg.ai_emails == frozenset({"bot@example.com", "aider@example.com"})
    assert cfg.exclude_file_patterns == ("*.md", "**/*.lock")
    assert cfg.exclude_users == frozenset({"renovate[bot]"})
    assert cfg.exclude_emails == frozenset({"ci@example.com"})
    assert cfg.exclude_message_patterns == ("Merge branch",)
    assert cfg.has_exclusions is True


def test_build_classification_config_defaults() -> None:
    cfg = build_classification_config({})
    assert cfg.ai_emails == frozenset()
    assert cfg.has_exclusions is False


def test_resolve_token_order() -> None:
    assert resolve_token({"GH_TOKEN": "a", "GITHUB_TOKEN": "b"}) == "a"
    assert resolve_token({"GH_TOKEN": " ", "GITHUB_TOKEN": "b"}) == "b"
    assert resolve_token({}) == ""
