"""Core review orchestration: from a classified request to assigned reviewers."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

from pull_review_core.config import DEFAULT_CONFIG, load_policy
from pull_review_core.errors import NoGithubUrls, NotOpen, TooManyUrls, UnsupportedResourceType
from pull_review_core.messages import review_comment
from pull_review_core.models import (
    ChangedFile,
    FileBlame,
    PullRequestResource,
    ReviewOutcome,
    ReviewRequest,
)
from pull_review_core.scoring import score, select_blame_targets
from pull_review_core.selection import select

logger = logging.getLogger(__name__)

_UNSUPPORTED = "Reviews for resources other than pull requests are not supported"


def fetch_review_target(request: ReviewRequest, client) -> PullRequestResource:
    """Validate the request and fetch the one open pull request it names.

    Raises before any mutating call is made: NoGithubUrls, TooManyUrls,
    UnsupportedResourceType, NotOpen, or the upstream NotFound/UpstreamError.
    """
    if not request.github_urls:
        raise NoGithubUrls("No GitHub URLs")
    if len(request.github_urls) > 1:
        raise TooManyUrls("Only one GitHub URL can be reviewed at a time")

    url = request.github_urls[0]
    if not url.owner or not url.repo or url.number is None:
        raise UnsupportedResourceType(_UNSUPPORTED)

    resource = client.fetch_resource(url.owner, url.repo, url.number, url.resource_type)
    if resource.resource_type != "pull":
        raise UnsupportedResourceType(_UNSUPPORTED)
    if resource.state != "open":
        raise NotOpen("Pull request is not open")
    return resource


def fetch_blame_map(
    client,
    resource: PullRequestResource,
    files: list[ChangedFile],
    max_workers: int = DEFAULT_CONFIG["max_workers"],
) -> dict[str, FileBlame]:
    """Fetch blame for every file concurrently and wait for all of them.

    A failed query for one file is logged and treated as "no blame data";
    it neither aborts the request nor cancels the other queries.
    """
    if not files:
        return {}

    def _blame(file: ChangedFile) -> FileBlame:
        try:
            return client.fetch_blame(resource.owner, resource.repo, resource.head_sha, file.filename)
        except Exception as e:
            logger.warning("Could not fetch blame for %s; it will not be scored: %s", file.filename, e)
            return FileBlame()

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(files)))) as pool:
        results = list(pool.map(_blame, files))

    return {file.filename: blame for file, blame in zip(files, results)}


def run_review(
    request: ReviewRequest,
    client,
    policy_path: str = DEFAULT_CONFIG["policy_path"],
    max_workers: int = DEFAULT_CONFIG["max_workers"],
    shadow: bool = False,
) -> ReviewOutcome | None:
    """Run the full reviewer-assignment pipeline for one request.

    Returns None when the message is not a review request (no GitHub call is
    made). Returns a ReviewOutcome on success, possibly with an empty
    reviewer list. Any failure is raised as a ReviewError.

    With ``shadow`` set, every read and the selection still happen but no
    assignee or comment is written.
    """
    if not request.is_review:
        return None

    resource = fetch_review_target(request, client)
    policy = load_policy(client, resource.owner, resource.repo, policy_path)

    changed_files = client.fetch_changed_files(resource.owner, resource.repo, resource.number)
    targets = select_blame_targets(changed_files, policy)
    logger.debug(
        "%s: %d changed file(s), blaming %d: %s",
        resource.slug,
        len(changed_files),
        len(targets),
        ", ".join(f.filename for f in targets),
    )
    blame_by_file = fetch_blame_map(client, resource, targets, max_workers)

    candidates = score(targets, blame_by_file, resource.author.login, policy.blame_half_life)

    existing = [a.login for a in resource.assignees]
    reviewers = select(
        candidates,
        policy,
        existing_assignees=existing,
        exclude_for_again=existing if request.review_again else (),
        review_again=request.review_again,
        pr_author=resource.author.login,
    )
    if len(reviewers) < policy.min_reviewers:
        logger.info(
            "%s: only %d reviewer(s) found, policy asks for at least %d",
            resource.slug,
            len(reviewers),
            policy.min_reviewers,
        )

    unassigned = list(resource.assignees) if request.review_again else []

    if not shadow:
        # Unassign before assign: an interruption in between leaves nobody
        # assigned rather than two conflicting sets.
        if unassigned:
            client.unassign_reviewers(resource.owner, resource.repo, resource.number, [u.login for u in unassigned])
        if reviewers:
            logins = [r.login for r in reviewers]
            client.assign_reviewers(resource.owner, resource.repo, resource.number, logins)
            client.post_comment(resource.owner, resource.repo, resource.number, review_comment(reviewers))

    return ReviewOutcome(
        resources=[resource],
        reviewers=reviewers,
        unassigned=unassigned,
        candidates=candidates,
        reviewer_map=dict(policy.reviewer_map),
        shadow=shadow,
    )
