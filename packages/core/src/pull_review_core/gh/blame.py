"""GraphQL blame query and response parsing.

The REST API has no blame endpoint, so blame comes from a single GraphQL
query per file, pinned to the PR's head commit.
"""

from __future__ import annotations

import logging

from pull_review_core.models import BlameRange, FileBlame

logger = logging.getLogger(__name__)

BLAME_QUERY = """
query($owner: String!, $repo: String!, $sha: GitObjectID!, $path: String!) {
  repository(owner: $owner, name: $repo) {
    object(oid: $sha) {
      ... on Commit {
        blame(path: $path) {
          ranges {
            startingLine
            endingLine
            age
            commit {
              author {
                user {
                  login
                }
              }
            }
          }
        }
      }
    }
  }
}
"""


def blame_variables(owner: str, repo: str, sha: str, path: str) -> dict:
    return {"owner": owner, "repo": repo, "sha": sha, "path": path}


def _dig(data, *keys):
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def parse_blame(payload: dict | None, path: str = "") -> FileBlame:
    """Convert a GraphQL blame response into a FileBlame.

    A response without blame data (unknown commit, binary or oversized file,
    GraphQL errors) yields an empty FileBlame. Ranges whose commit author is
    not linked to a GitHub account are dropped since nobody can be assigned,
    but they still count toward the file's line count.
    """
    if not payload:
        return FileBlame()
    if payload.get("errors"):
        logger.warning("Blame query for %s returned errors: %s", path, payload["errors"])

    ranges = _dig(payload, "data", "repository", "object", "blame", "ranges")
    if not isinstance(ranges, list):
        return FileBlame()

    results = []
    line_count = 0
    for r in ranges:
        try:
            start = int(r["startingLine"])
            end = int(r["endingLine"])
        except (KeyError, TypeError, ValueError):
            continue
        if end < start:
            continue
        line_count = max(line_count, end)

        login = _dig(r, "commit", "author", "user", "login")
        if not login:
            continue
        try:
            age = int(r.get("age") or 0)
        except (TypeError, ValueError):
            age = 0
        results.append(BlameRange(starting_line=start, ending_line=end, age=age, author_login=login))
    return FileBlame(ranges=tuple(results), line_count=line_count)
