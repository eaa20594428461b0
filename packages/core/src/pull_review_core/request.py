"""Classify an incoming chat message as link sharing or a review request."""

from __future__ import annotations

import logging
import re

from pull_review_core.errors import AccessDenied
from pull_review_core.models import ReviewRequest
from pull_review_core.utils.url import extract_urls, parse_github_url

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def fold_text(text: str) -> str:
    """Collapse whitespace runs to single spaces and lower-case the text."""
    return _WHITESPACE_RE.sub(" ", text or "").lower()


def match_review_intent(folded_text: str, href: str) -> tuple[bool, bool]:
    """Return ``(is_review, is_review_again)`` for one URL.

    This is plain substring containment: "review <url>" anywhere in the
    folded text asks for a review, "review <url> again" asks for a fresh one.
    """
    trigger = "review " + href.lower()
    again = (trigger + " again") in folded_text
    return (again or trigger in folded_text), again


def classify(text: str, room: str | None = None, required_rooms=()) -> ReviewRequest:
    """Build a ReviewRequest from raw message text.

    ``required_rooms`` is the review allow-list. When it is non-empty, a
    review request coming from any other room raises AccessDenied. Messages
    that only share links are never gated, and neither are requests that
    carry no room at all.
    """
    seen: set[str] = set()
    github_urls = []
    for url in extract_urls(text):
        if url in seen:
            continue
        seen.add(url)
        parsed = parse_github_url(url)
        if parsed is not None:
            github_urls.append(parsed)

    folded = fold_text(text)
    is_review = False
    review_again = False
    for parsed in github_urls:
        review, again = match_review_intent(folded, parsed.href)
        is_review = is_review or review
        review_again = review_again or again

    rooms = [r for r in required_rooms if r]
    if is_review and rooms and room is not None and room not in rooms:
        logger.info("Rejected review request from room %r (allowed: %s)", room, ", ".join(rooms))
        raise AccessDenied("Review requests from this room are disabled")

    return ReviewRequest(
        raw_text=text,
        room=room,
        is_review=is_review,
        review_again=review_again,
        github_urls=tuple(github_urls),
    )
