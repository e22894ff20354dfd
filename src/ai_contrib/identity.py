from __future__ import annotations

import re
from collections.abc import Iterable

from .models import UNKNOWN_IDENTITY, CoAuthor

CO_AUTHOR_RE = re.compile(r"^Co-authored-by:\s*(.+?)\s*<(.+?)>\s*$", re.MULTILINE)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def normalize_emails(emails: Iterable[str]) -> frozenset[str]:
    return frozenset(e for e in (normalize_email(x) for x in emails) if e)


def resolve_identity(login: str | None, name: str | None) -> str:
    login = (login or "").strip()
    if login:
        return login
    name = (name or "").strip()
    if name:
        return name
    return UNKNOWN_IDENTITY


def parse_co_authors(message: str) -> list[CoAuthor]:
    """Return `Co-authored-by: Name <email>` trailers in message order."""
    out: list[CoAuthor] = []
    for m in CO_AUTHOR_RE.finditer(message or ""):
        name = m.group(1).strip()
        email = m.group(2).strip()
        if name and email:
            out.append(CoAuthor(name=name, email=email))
    return out


def is_ai_email(email: str, ai_emails: frozenset[str]) -> bool:
    e = normalize_email(email)
    return bool(e) and e in ai_emails


def is_pair_commit(author_email: str | None, co_author_emails: Iterable[str], ai_emails: frozenset[str]) -> bool:
    """
    A commit is a pair commit when its author and co-authors include at least
    one AI email and at least one non-AI email. `ai_emails` must be normalized.
    """
    emails = normalize_emails([author_email or "", *co_author_emails])
    if len(emails) < 2:
        return False
    has_ai = any(e in ai_emails for e in emails)
    has_human = any(e not in ai_emails for e in emails)
    return has_ai and has_human
