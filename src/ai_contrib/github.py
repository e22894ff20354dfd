from __future__ import annotations

import dataclasses
import datetime as dt
import json
import logging
import os
import ssl
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

import certifi

from . import __version__
from .analysis_periods import DateRange, parse_timestamp
from .identity import parse_co_authors, resolve_identity
from .models import CommitRecord, FileChange

LOG = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
PER_PAGE = 100

T = TypeVar("T")


class GitHubApiError(RuntimeError):
    pass


@dataclasses.dataclass(frozen=True)
class Repository:
    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


def parse_repository(spec: str) -> Repository:
    parts = (spec or "").strip().split("/")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ValueError(f'Invalid repository format: "{spec}". Expected format: "owner/repo"')
    return Repository(owner=parts[0], repo=parts[1])


def file_change_from_api(payload: dict) -> FileChange:
    return FileChange(
        path=str(payload.get("filename", "") or ""),
        additions=int(payload.get("additions", 0) or 0),
        deletions=int(payload.get("deletions", 0) or 0),
    )


def commit_record_from_api(payload: dict) -> CommitRecord:
    author = payload.get("author") or {}
    commit = payload.get("commit") or {}
    git_author = commit.get("author") or {}
    name = str(git_author.get("name", "") or "")
    message = str(commit.get("message", "") or "")
    return CommitRecord(
        author_identity=resolve_identity(author.get("login"), name),
        author_name=name,
        author_email=str(git_author.get("email", "") or ""),
        co_authors=tuple(parse_co_authors(message)),
        message=message,
    )


def _merged_pull_request(payload: dict) -> tuple[int, dt.datetime | None]:
    return int(payload["number"]), parse_timestamp(str(payload.get("merged_at") or ""))


def _convert(path: str, items: list[dict], fn: Callable[[dict], T]) -> list[T]:
    try:
        return [fn(x) for x in items]
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise GitHubApiError(f"GET {path} returned a malformed item: {e!r}") from e


def ssl_context(*, ca_bundle_path: str = "") -> ssl.SSLContext:
    p = (ca_bundle_path or "").strip()
    if not p:
        for k in ("SSL_CERT_FILE", "REQUESTS_CA_BUNDLE", "CURL_CA_BUNDLE"):
            p = (os.environ.get(k) or "").strip()
            if p:
                break
    if p:
        path = Path(p).expanduser()
        if path.is_dir():
            return ssl.create_default_context(capath=str(path))
        return ssl.create_default_context(cafile=str(path))
    return ssl.create_default_context(cafile=certifi.where())


def _is_cert_verify_error(e: urllib.error.URLError) -> bool:
    reason = getattr(e, "reason", None)
    if isinstance(reason, ssl.SSLCertVerificationError):
        return True
    s = str(e)
    return "CERTIFICATE_VERIFY_FAILED" in s or "certificate verify failed" in s.lower()


class GitHubClient:
    def __init__(
        self,
        *,
        token: str = "",
        api_url: str = DEFAULT_API_URL,
        ca_bundle_path: str = "",
        timeout_s: int = 30,
    ) -> None:
        self.token = (token or "").strip()
        self.api_url = (api_url or DEFAULT_API_URL).strip().rstrip("/")
        self.ca_bundle_path = ca_bundle_path
        self.timeout_s = timeout_s
        self._ctx: ssl.SSLContext | None = None

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": f"ai-contrib/{__version__}",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def get_json(self, path: str, params: dict[str, object] | None = None) -> object:
        url = self.api_url + path
        if params:
            url = url + "?" + urllib.parse.urlencode(params)
        if self._ctx is None:
            self._ctx = ssl_context(ca_bundle_path=self.ca_bundle_path)
        req = urllib.request.Request(url, method="GET", headers=self._headers())
        LOG.debug("GET %s", url)
        try:
            with urllib.request.urlopen(req, timeout=self.timeout_s, context=self._ctx) as resp:
                body = resp.read().decode("utf-8", errors="replace")
        except urllib.error.HTTPError as e:
            payload = ""
            try:
                payload = e.read().decode("utf-8", errors="replace")
            except OSError:
                payload = ""
            raise GitHubApiError(f"GET {path} failed: HTTP {e.code}: {payload[:500]}") from e
        except urllib.error.URLError as e:
            msg = f"GET {path} failed: {e}"
            if _is_cert_verify_error(e):
                msg = msg + "\nHint: HTTPS certificate verification failed; pass --ca-bundle or set SSL_CERT_FILE."
            raise GitHubApiError(msg) from e
        try:
            return json.loads(body) if body else None
        except json.JSONDecodeError as e:
            raise GitHubApiError(f"GET {path} returned invalid JSON: {e}") from e

    def get_pages(self, path: str, params: dict[str, object] | None = None) -> list[dict]:
        out: list[dict] = []
        page = 1
        while True:
            data = self.get_json(path, {**(params or {}), "per_page": PER_PAGE, "page": page})
            if not isinstance(data, list):
                raise GitHubApiError(f"GET {path} returned {type(data).__name__}, expected a list")
            out.extend(x for x in data if isinstance(x, dict))
            if len(data) < PER_PAGE:
                return out
            page += 1

    def list_pull_request_files(self, repo: Repository, number: int) -> list[FileChange]:
        items = self.get_pages(f"/repos/{repo.full_name}/pulls/{number}/files")
        return _convert(f"/repos/{repo.full_name}/pulls/{number}/files", items, file_change_from_api)

    def list_pull_request_commits(self, repo: Repository, number: int) -> list[CommitRecord]:
        items = self.get_pages(f"/repos/{repo.full_name}/pulls/{number}/commits")
        return _convert(f"/repos/{repo.full_name}/pulls/{number}/commits", items, commit_record_from_api)

    def find_merged_pull_requests(self, repo: Repository, date_range: DateRange) -> list[int]:
        LOG.info("Searching for PRs in %s merged between %s and %s", repo.full_name, date_range.start_iso, date_range.end_iso)
        path = f"/repos/{repo.full_name}/pulls"
        numbers: list[int] = []
        page = 1
        while True:
            LOG.debug("Fetching PRs page %d", page)
            data = self.get_json(
                path,
                {"state": "closed", "sort": "updated", "direction": "desc", "per_page": PER_PAGE, "page": page},
            )
            if not isinstance(data, list):
                raise GitHubApiError(f"GET {path} returned {type(data).__name__}, expected a list")
            if not data:
                break
            found_older = False
            for number, merged_at in _convert(path, data, _merged_pull_request):
                if merged_at is None:
                    continue
                if date_range.contains(merged_at):
                    numbers.append(number)
                    LOG.debug("Found PR #%d merged on %s", number, merged_at.isoformat())
                elif merged_at < date_range.start_at:
                    found_older = True
                    break
            if found_older or len(data) < PER_PAGE:
                break
            page += 1
        LOG.info("Found %d PRs in the specified date range", len(numbers))
        return sorted(numbers)
