"""Turn ranked candidates into the final reviewer list."""

from __future__ import annotations

from pull_review_core.models import ReviewerCandidate, ReviewPolicy, UserRef


def available_slots(policy: ReviewPolicy, existing_assignees, review_again: bool = False) -> int:
    """How many new reviewers may be added.

    On a normal request existing assignees use up slots when
    ``policy.count_existing_assignees`` is set; a "review again" request
    unassigns them first, so every slot is free.
    """
    if review_again or not policy.count_existing_assignees:
        return policy.max_reviewers
    return max(policy.max_reviewers - len(set(existing_assignees)), 0)


def select(
    candidates: list[ReviewerCandidate],
    policy: ReviewPolicy,
    existing_assignees=(),
    exclude_for_again=(),
    review_again: bool = False,
    pr_author: str | None = None,
) -> list[UserRef]:
    """Pick reviewers: required owners first, then by descending score.

    Never returns the PR author, anyone already assigned, anyone on the
    policy's exclude list, or (on "review again") anyone who was just
    unassigned. Returning fewer than ``policy.min_reviewers`` is not an
    error; the short list is the answer.
    """
    excluded = set(existing_assignees) | set(policy.exclude_logins)
    if review_again:
        excluded |= set(exclude_for_again)
    if pr_author:
        excluded.add(pr_author)

    slots = available_slots(policy, existing_assignees, review_again)

    picked: list[str] = []
    for login in policy.required_owners:
        if login not in excluded and login not in picked:
            picked.append(login)
    for candidate in candidates:
        if candidate.score <= 0:
            continue
        if candidate.login not in excluded and candidate.login not in picked:
            picked.append(candidate.login)

    return [UserRef(login=login) for login in picked[:slots]]
