from __future__ import annotations

import logging

from wcmatch import glob as wcglob

from .identity import normalize_email
from .models import ClassificationConfig, CommitRecord, FileChange

LOG = logging.getLogger(__name__)

# `**` spans directories, `*` stays within one path segment, `{a,b}` expands.
GLOB_FLAGS = wcglob.GLOBSTAR | wcglob.BRACE


def should_exclude_commit(message: str, exclude_patterns: tuple[str, ...] | list[str]) -> bool:
    msg = message or ""
    for pat in exclude_patterns:
        if pat and pat in msg:
            return True
    return False


def should_exclude_file(path: str, exclude_globs: tuple[str, ...] | list[str]) -> bool:
    p = path.replace("\\", "/")
    for pat in exclude_globs:
        if pat and wcglob.globmatch(p, pat, flags=GLOB_FLAGS):
            return True
    return False


def should_exclude_contributor(identity: str, email: str, config: ClassificationConfig) -> bool:
    if identity in config.exclude_users:
        return True
    e = normalize_email(email)
    if e and e in config.exclude_emails:
        return True
    return False


def filter_commits(commits: list[CommitRecord], config: ClassificationConfig) -> list[CommitRecord]:
    kept = [c for c in commits if not should_exclude_commit(c.message, config.exclude_message_patterns)]
    if len(kept) != len(commits):
        LOG.debug("Filtered out %d commits based on exclusion criteria", len(commits) - len(kept))
    return kept


def filter_files(files: list[FileChange], config: ClassificationConfig) -> list[FileChange]:
    kept = [f for f in files if not should_exclude_file(f.path, config.exclude_file_patterns)]
    if len(kept) != len(files):
        LOG.debug("Filtered out %d files based on exclusion criteria", len(files) - len(kept))
    return kept
