"""Request-scoped value objects passed between pipeline stages.

Nothing here is cached across requests: every object is built from the
incoming message or from a live GitHub response and dropped once the
outcome has been rendered.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ParsedGithubURL:
    href: str
    owner: str | None = None
    repo: str | None = None
    resource_type: str | None = None  # "pull" | "issues" | other path segment
    number: int | None = None


@dataclass(frozen=True)
class ReviewRequest:
    raw_text: str
    room: str | None = None
    is_review: bool = False
    review_again: bool = False
    github_urls: tuple[ParsedGithubURL, ...] = ()


@dataclass(frozen=True)
class UserRef:
    login: str
    html_url: str | None = None


@dataclass(frozen=True)
class PullRequestResource:
    owner: str
    repo: str
    number: int
    html_url: str
    state: str
    title: str
    body: str
    author: UserRef
    assignees: tuple[UserRef, ...] = ()
    head_sha: str | None = None
    resource_type: str = "pull"

    @property
    def slug(self) -> str:
        """Short reference in the ``owner/repo#number`` form."""
        return f"{self.owner}/{self.repo}#{self.number}"


@dataclass(frozen=True)
class ChangedFile:
    filename: str
    status: str  # "added" | "modified" | "removed" | "renamed" | ...
    change_count: int = 0


@dataclass(frozen=True)
class BlameRange:
    starting_line: int
    ending_line: int
    age: int
    author_login: str

    @property
    def line_count(self) -> int:
        return self.ending_line - self.starting_line + 1


@dataclass(frozen=True)
class FileBlame:
    """Blame for one file at the PR head.

    ``line_count`` is the file's last blamed line, taken before ranges with
    no linked GitHub user are dropped from ``ranges``.
    """

    ranges: tuple[BlameRange, ...] = ()
    line_count: int = 0


@dataclass(frozen=True)
class ReviewerCandidate:
    login: str
    score: float


@dataclass(frozen=True)
class ReviewPolicy:
    """Per-repository reviewer policy, resolved once per request."""

    max_reviewers: int = 2
    min_reviewers: int = 1
    max_files: int = 5
    required_owners: tuple[str, ...] = ()
    exclude_logins: frozenset[str] = frozenset()
    file_blacklist: tuple[str, ...] = ()
    blame_half_life: float = 10.0
    # Existing assignees take up reviewer slots on a normal (non-"again") request.
    count_existing_assignees: bool = True
    reviewer_map: dict[str, str] = field(default_factory=dict, hash=False, compare=False)


@dataclass
class ReviewOutcome:
    """Terminal value of a completed review run.

    ``None`` (not a ReviewOutcome) is what the orchestrator returns for a
    message that is not a review request at all.
    """

    resources: list[PullRequestResource]
    reviewers: list[UserRef] = field(default_factory=list)
    unassigned: list[UserRef] = field(default_factory=list)
    candidates: list[ReviewerCandidate] = field(default_factory=list)
    reviewer_map: dict[str, str] = field(default_factory=dict)
    shadow: bool = False

    @property
    def logins(self) -> list[str]:
        return [r.login for r in self.reviewers]
