"""Thin GitHub client over PyGithub for the review pipeline.

Every method takes plain owner/repo/number values and returns the value
objects from pull_review_core.models, so the rest of the pipeline never
touches PyGithub types. PyGithub exceptions are translated to
NotFound/UpstreamError here and nowhere else.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager

from github import Auth, Github, GithubException

from pull_review_core.errors import InvalidInput, NotFound, UnsupportedResourceType, UpstreamError
from pull_review_core.gh.blame import BLAME_QUERY, blame_variables, parse_blame
from pull_review_core.models import ChangedFile, FileBlame, ParsedGithubURL, PullRequestResource, UserRef

logger = logging.getLogger(__name__)

PAGE_SIZE = 100

_SUPPORTED_RESOURCE_TYPES = ("pull", "issues")
_UNSUPPORTED = "Reviews for resources other than pull requests are not supported"


def is_addressable(url: ParsedGithubURL) -> bool:
    """True when the URL names one pull request or issue by number."""
    return bool(url.owner and url.repo and url.number is not None and url.resource_type in _SUPPORTED_RESOURCE_TYPES)


def _upstream_message(exc: GithubException) -> str:
    data = exc.data
    if isinstance(data, (dict, list)):
        return json.dumps(data, separators=(",", ":"))
    if data:
        return str(data)
    return str(exc)


@contextmanager
def translate_errors():
    """Re-raise PyGithub failures as NotFound / UpstreamError.

    The upstream response body becomes the message unmodified so operators
    can match it against GitHub's own logs.
    """
    try:
        yield
    except GithubException as e:
        message = _upstream_message(e)
        if e.status == 404:
            raise NotFound(message, status=404) from e
        raise UpstreamError(message, status=e.status) from e


def _check_logins(logins) -> list[str]:
    logins = list(logins)
    if not all(isinstance(login, str) for login in logins):
        raise InvalidInput("Assignees must be specified as strings")
    return logins


def _user_ref(user) -> UserRef | None:
    login = getattr(user, "login", None)
    if not isinstance(login, str) or not login:
        return None
    html_url = getattr(user, "html_url", None)
    return UserRef(login=login, html_url=html_url if isinstance(html_url, str) else None)


def _assignees(obj) -> tuple[UserRef, ...]:
    """Collect assignees from both the ``assignees`` list and the legacy single ``assignee``."""
    refs: list[UserRef] = []
    for user in list(obj.assignees or []) + [obj.assignee]:
        ref = _user_ref(user)
        if ref is not None and ref.login not in {r.login for r in refs}:
            refs.append(ref)
    return tuple(refs)


class GitHubClient:
    """Request-scoped facade over one authenticated ``Github`` instance."""

    def __init__(self, token: str | None = None, gh: Github | None = None, base_url: str | None = None):
        if gh is None:
            kwargs = {"per_page": PAGE_SIZE}
            if token:
                kwargs["auth"] = Auth.Token(token)
            if base_url:
                kwargs["base_url"] = base_url
            gh = Github(**kwargs)
        self._gh = gh
        # Pull requests already loaded by fetch_resource, reused for their files.
        self._pulls: dict[tuple[str, str, int], object] = {}

    def _repo(self, owner: str, repo: str):
        return self._gh.get_repo(f"{owner}/{repo}", lazy=True)

    def _pull(self, owner: str, repo: str, number: int):
        key = (owner, repo, int(number))
        if key not in self._pulls:
            self._pulls[key] = self._repo(owner, repo).get_pull(int(number))
        return self._pulls[key]

    # ------------------------------------------------------------------ #
    # Reads                                                                #
    # ------------------------------------------------------------------ #

    def fetch_resource(self, owner: str, repo: str, number: int, resource_type: str = "pull") -> PullRequestResource:
        """Fetch a pull request (or issue) and flatten it into a PullRequestResource.

        A type other than pull/issues, or a missing owner, repo or number
        (e.g. ``/pull/new/<branch>``), raises UnsupportedResourceType
        without a request.
        """
        if resource_type not in _SUPPORTED_RESOURCE_TYPES or not owner or not repo or number is None:
            raise UnsupportedResourceType(_UNSUPPORTED)

        with translate_errors():
            if resource_type == "pull":
                obj = self._pull(owner, repo, number)
                head_sha = obj.head.sha
            else:
                obj = self._repo(owner, repo).get_issue(int(number))
                head_sha = None

            author = _user_ref(obj.user) or UserRef(login="")
            return PullRequestResource(
                owner=owner,
                repo=repo,
                number=int(number),
                html_url=obj.html_url,
                state=obj.state,
                title=obj.title or "",
                body=obj.body or "",
                author=author,
                assignees=_assignees(obj),
                head_sha=head_sha,
                resource_type=resource_type,
            )

    def fetch_resources(self, urls: list[ParsedGithubURL]) -> list[PullRequestResource]:
        """Fetch several parsed URLs in order, e.g. to describe shared links.

        Links that do not name a pull request or issue by number (repository
        pages, ``/pull/new/<branch>``) are skipped.
        """
        resources = []
        for u in urls:
            if not is_addressable(u):
                logger.debug("Skipping %s: not a pull request or issue link", u.href)
                continue
            resources.append(self.fetch_resource(u.owner, u.repo, u.number, u.resource_type))
        return resources

    def fetch_changed_files(self, owner: str, repo: str, number: int) -> list[ChangedFile]:
        with translate_errors():
            pr = self._pull(owner, repo, number)
            return [
                ChangedFile(filename=f.filename, status=f.status, change_count=f.changes or 0) for f in pr.get_files()
            ]

    def fetch_blame(self, owner: str, repo: str, sha: str, filename: str) -> FileBlame:
        """Return blame for ``filename`` at commit ``sha``; an empty FileBlame when GitHub has none."""
        with translate_errors():
            _, payload = self._gh.requester.requestJsonAndCheck(
                "POST",
                "/graphql",
                input={"query": BLAME_QUERY, "variables": blame_variables(owner, repo, sha, filename)},
            )
        blame = parse_blame(payload, filename)
        logger.debug(
            "Blame for %s/%s:%s@%s: %d range(s) over %d line(s)",
            owner,
            repo,
            filename,
            sha[:7],
            len(blame.ranges),
            blame.line_count,
        )
        return blame

    def fetch_repo_file(self, owner: str, repo: str, path: str, encoding: str = "utf-8") -> str:
        with translate_errors():
            content = self._repo(owner, repo).get_contents(path)
        if isinstance(content, list):
            raise InvalidInput(f"{path} is a directory, not a file")
        return content.decoded_content.decode(encoding)

    # ------------------------------------------------------------------ #
    # Writes                                                               #
    # ------------------------------------------------------------------ #

    def assign_reviewers(self, owner: str, repo: str, number: int, logins) -> None:
        logins = _check_logins(logins)
        with translate_errors():
            self._repo(owner, repo).get_issue(int(number)).add_to_assignees(*logins)
        logger.info("Assigned %s to %s/%s#%s", ", ".join(logins), owner, repo, number)

    def unassign_reviewers(self, owner: str, repo: str, number: int, logins) -> None:
        logins = _check_logins(logins)
        with translate_errors():
            self._repo(owner, repo).get_issue(int(number)).remove_from_assignees(*logins)
        logger.info("Unassigned %s from %s/%s#%s", ", ".join(logins), owner, repo, number)

    def post_comment(self, owner: str, repo: str, number: int, body: str) -> None:
        with translate_errors():
            self._repo(owner, repo).get_issue(int(number)).create_comment(body)
