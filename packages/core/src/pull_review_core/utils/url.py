"""URL extraction and GitHub URL parsing for chat message text."""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from pull_review_core.models import ParsedGithubURL

GITHUB_HOST = "github.com"

_URL_RE = re.compile(r"https?://[^\s<>\"'`]+", re.IGNORECASE)

# Sentence punctuation that commonly trails a pasted link ("see https://x.y/1.").
_TRAILING_PUNCTUATION = ".,;:!?)]}'\""


def extract_urls(text: str) -> list[str]:
    """Return every http(s) URL in ``text`` in the order it appears.

    Duplicates are kept; callers decide how to deduplicate.
    """
    urls = []
    for match in _URL_RE.finditer(text or ""):
        url = match.group(0).rstrip(_TRAILING_PUNCTUATION)
        if urlsplit(url).hostname:
            urls.append(url)
    return urls


def parse_github_url(url: str) -> ParsedGithubURL | None:
    """Parse a github.com URL into its resource parts.

    Returns None for any other host. ``/owner/repo/pull/12`` yields
    resource_type ``"pull"`` and number ``12``; shorter paths leave the
    missing fields as None.
    """
    parts = urlsplit(url)
    if (parts.hostname or "").lower() != GITHUB_HOST:
        return None

    segments = [s for s in parts.path.split("/") if s]
    owner = segments[0] if len(segments) > 0 else None
    repo = segments[1] if len(segments) > 1 else None
    resource_type = segments[2] if len(segments) > 2 else None
    number = int(segments[3]) if len(segments) > 3 and segments[3].isdigit() else None

    return ParsedGithubURL(href=url, owner=owner, repo=repo, resource_type=resource_type, number=number)
