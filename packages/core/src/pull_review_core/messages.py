"""Render review outcomes for each chat surface.

An outcome is one of three things: ``None`` (nothing to say), a
ReviewOutcome, or a ReviewError. Each renderer handles all three and
returns None when it has nothing to post.
"""

from __future__ import annotations

import re

from pull_review_core.errors import ReviewError
from pull_review_core.models import PullRequestResource, ReviewOutcome, UserRef

_IMAGE_URL_RE = re.compile(r"https?://\S+?\.(?:png|jpe?g|gif|webp)", re.IGNORECASE)
_MARKDOWN_IMAGE_RE = re.compile(r"!\[[^\]]*\]\(([^)\s]+)\)")


def mention_list(reviewers: list[UserRef], reviewer_map: dict[str, str] | None = None) -> str:
    reviewer_map = reviewer_map or {}
    return ", ".join(f"@{reviewer_map.get(r.login, r.login)}" for r in reviewers)


def review_comment(reviewers: list[UserRef]) -> str:
    """Body of the comment posted on the pull request itself (GitHub logins, no mapping)."""
    return f"{mention_list(reviewers)}: please review this pull request"


def find_image_url(body: str | None) -> str | None:
    """Return the first image URL in a PR body, preferring Markdown image syntax."""
    if not body:
        return None
    match = _MARKDOWN_IMAGE_RE.search(body)
    if match:
        return match.group(1)
    match = _IMAGE_URL_RE.search(body)
    return match.group(0) if match else None


def generic_message(outcome) -> str | None:
    """Plain-text rendering, e.g. ``Assigning @a, @b to OWNER/REPO#1``."""
    if isinstance(outcome, ReviewError):
        return outcome.message
    if outcome is None or not outcome.reviewers:
        return None
    targets = ", ".join(r.slug for r in outcome.resources)
    return f"Assigning {mention_list(outcome.reviewers, outcome.reviewer_map)} to {targets}"


def github_message(outcome) -> str | None:
    if isinstance(outcome, ReviewError):
        return None
    if outcome is None or not outcome.reviewers:
        return None
    return review_comment(outcome.reviewers)


def slack_attachment(resource: PullRequestResource) -> dict:
    attachment = {
        "fallback": f"{resource.title} by {resource.author.login}: {resource.html_url}",
        "title": f"{resource.owner}/{resource.repo}: {resource.title}",
        "title_link": resource.html_url,
        "author_name": resource.author.login,
        "text": resource.body,
    }
    if resource.author.html_url:
        attachment["author_link"] = resource.author.html_url
    image_url = find_image_url(resource.body)
    if image_url:
        attachment["image_url"] = image_url
        attachment["text"] = ""
    return attachment


def slack_message(outcome, resources: list[PullRequestResource] | None = None) -> dict | None:
    """Slack rendering: a mention line plus one attachment per resource.

    ``resources`` lets link-sharing messages (no outcome) still unfurl.
    """
    if isinstance(outcome, ReviewError):
        return {"text": outcome.message}
    if outcome is not None:
        resources = outcome.resources
    if not resources:
        return None

    message = {"attachments": [slack_attachment(r) for r in resources]}
    if outcome is not None and outcome.reviewers:
        mentions = mention_list(outcome.reviewers, outcome.reviewer_map)
        message["text"] = f"{mentions}: please review this pull request"
    return message


RENDERERS = {
    "generic": generic_message,
    "github": github_message,
    "slack": slack_message,
}


def render(adapter: str, outcome):
    try:
        renderer = RENDERERS[adapter]
    except KeyError:
        raise ValueError(f"Unknown adapter: {adapter!r}. Choose one of {', '.join(sorted(RENDERERS))}.")
    return renderer(outcome)
