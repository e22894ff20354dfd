from __future__ import annotations

import json
import os
from collections.abc import Iterable
from pathlib import Path

from .identity import normalize_emails
from .models import ClassificationConfig

TOKEN_ENV_VARS = ("GH_TOKEN", "GITHUB_TOKEN")


def load_config(config_path: Path) -> dict:
    if not config_path.exists():
        return {}
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {config_path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a JSON object")
    return data


def merge_list(config_values: object, cli_values: Iterable[str] | None) -> list[str]:
    out: list[str] = []
    seen: set[str] = set()
    items = list(config_values or []) if isinstance(config_values, (list, tuple)) else []
    for v in [*items, *(cli_values or [])]:
        s = str(v).strip()
        if s and s not in seen:
            seen.add(s)
            out.append(s)
    return out


def build_classification_config(
    config: dict,
    *,
    ai_emails: Iterable[str] | None = None,
    exclude_users: Iterable[str] | None = None,
    exclude_emails: Iterable[str] | None = None,
    exclude_files: Iterable[str] | None = None,
    exclude_commit_messages: Iterable[str] | None = None,
) -> ClassificationConfig:
    return ClassificationConfig(
        ai_emails=normalize_emails(merge_list(config.get("ai_emails"), ai_emails)),
        exclude_users=frozenset(merge_list(config.get("exclude_users"), exclude_users)),
        exclude_emails=normalize_emails(merge_list(config.get("exclude_emails"), exclude_emails)),
        exclude_file_patterns=tuple(merge_list(config.get("exclude_files"), exclude_files)),
        exclude_message_patterns=tuple(merge_list(config.get("exclude_commit_messages"), exclude_commit_messages)),
    )


def resolve_token(env: dict[str, str] | None = None) -> str:
    env = os.environ if env is None else env
    for k in TOKEN_ENV_VARS:
        v = (env.get(k) or "").strip()
        if v:
            return v
    return ""
