import logging
import os
from pathlib import Path
from typing import Optional

import yaml

from pull_review_core.errors import InvalidInput, NotFound
from pull_review_core.models import ReviewPolicy

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict = {
    "policy_path": ".pull-review",  # per-repository policy file, read through the GitHub API
    "adapter": "generic",
    "github_base_url": None,  # None = api.github.com; set for GitHub Enterprise
    "max_workers": 4,  # concurrent blame queries per request
}

REQUIRED_ROOMS_ENV = "PULL_REVIEW_REQUIRED_ROOMS"

# Checked in order: the bot account's own token, then the usual GitHub variables.
GITHUB_TOKEN_ENV_VARS = ("PULL_REVIEW_GITHUB_TOKEN", "GITHUB_TOKEN", "GH_TOKEN")

POLICY_DEFAULTS: dict = {
    "max_reviewers": 2,
    "min_reviewers": 1,
    "max_files": 5,
    "required_owners": [],
    "review_blacklist": [],
    "file_blacklist": [],
    "blame_half_life": 10,
    "count_existing_assignees": True,
    "reviewers": {},
}


def load_config(config_path: str = ".pull-review.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load local settings by merging (in order of precedence):
      1. Built-in defaults
      2. .pull-review.yml in the current directory
      3. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    # Resolve credentials and room gating from environment variables
    config["github_token"] = github_token_from_env()
    config["required_rooms"] = load_required_rooms()

    return config


def github_token_from_env() -> Optional[str]:
    """Return the first non-empty token among GITHUB_TOKEN_ENV_VARS, or None."""
    for name in GITHUB_TOKEN_ENV_VARS:
        token = os.environ.get(name, "").strip()
        if token:
            logger.debug("Using GitHub token from %s", name)
            return token
    return None


def load_required_rooms() -> list[str]:
    """Return the review room allow-list from the environment.

    Read on every call so an updated allow-list applies to the next message
    without a restart. An empty list means every room may request reviews.
    """
    raw = os.environ.get(REQUIRED_ROOMS_ENV, "")
    return [room.strip() for room in raw.split(",") if room.strip()]


def _as_list(value, key: str) -> list:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return list(value)
    raise InvalidInput(f"Invalid pull-review config: {key} must be a list")


def _as_int(value, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidInput(f"Invalid pull-review config: {key} must be a non-negative integer")
    return value


def parse_policy(text: str | None) -> ReviewPolicy:
    """Parse the YAML policy file content into a ReviewPolicy.

    Missing keys take POLICY_DEFAULTS. ``review_blacklist`` is exposed as
    ``exclude_logins``; ``reviewers`` maps GitHub logins to chat handles.
    """
    try:
        raw = yaml.safe_load(text or "") or {}
    except yaml.YAMLError as e:
        raise InvalidInput(f"Invalid pull-review config: {e}") from e
    if not isinstance(raw, dict):
        raise InvalidInput("Invalid pull-review config: expected a mapping")

    values = {**POLICY_DEFAULTS, **raw}

    max_reviewers = _as_int(values["max_reviewers"], "max_reviewers")
    min_reviewers = min(_as_int(values["min_reviewers"], "min_reviewers"), max_reviewers)
    max_files = _as_int(values["max_files"], "max_files")

    half_life = values["blame_half_life"]
    if isinstance(half_life, bool) or not isinstance(half_life, (int, float)) or half_life <= 0:
        raise InvalidInput("Invalid pull-review config: blame_half_life must be a positive number")

    reviewers = values["reviewers"] or {}
    if not isinstance(reviewers, dict):
        raise InvalidInput("Invalid pull-review config: reviewers must be a mapping")
    reviewer_map = {}
    for login, handle in reviewers.items():
        # Entries may be a bare handle or a mapping such as {slack: handle}.
        if isinstance(handle, dict):
            handle = handle.get("slack") or handle.get("handle")
        if handle:
            reviewer_map[str(login)] = str(handle)

    return ReviewPolicy(
        max_reviewers=max_reviewers,
        min_reviewers=min_reviewers,
        max_files=max_files,
        required_owners=tuple(str(o) for o in _as_list(values["required_owners"], "required_owners")),
        exclude_logins=frozenset(str(o) for o in _as_list(values["review_blacklist"], "review_blacklist")),
        file_blacklist=tuple(str(p) for p in _as_list(values["file_blacklist"], "file_blacklist")),
        blame_half_life=float(half_life),
        count_existing_assignees=bool(values["count_existing_assignees"]),
        reviewer_map=reviewer_map,
    )


def load_policy(client, owner: str, repo: str, path: str = DEFAULT_CONFIG["policy_path"]) -> ReviewPolicy:
    """Load the reviewer policy stored in the repository itself.

    A repository without a policy file gets the defaults.
    """
    try:
        text = client.fetch_repo_file(owner, repo, path)
    except NotFound:
        logger.debug("No %s in %s/%s; using default policy", path, owner, repo)
        return parse_policy(None)
    return parse_policy(text)
