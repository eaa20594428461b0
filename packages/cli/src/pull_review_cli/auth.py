"""GitHub token lookup for the chat bot and for local runs.

Order (first hit wins):
  1. PULL_REVIEW_GITHUB_TOKEN, GITHUB_TOKEN, GH_TOKEN
  2. `gh auth token` for the host the client talks to: github.com, or the
     Enterprise host taken from `github_base_url`
"""

from __future__ import annotations

import logging
import subprocess
from urllib.parse import urlsplit

from pull_review_core.config import github_token_from_env

logger = logging.getLogger(__name__)

GH_CLI_TIMEOUT = 5

_PUBLIC_HOSTS = ("github.com", "api.github.com")


def github_host(base_url: str | None) -> str | None:
    """Host to pass to `gh auth token --hostname`; None for public GitHub."""
    if not base_url:
        return None
    host = urlsplit(base_url).hostname
    if not host or host in _PUBLIC_HOSTS:
        return None
    return host


def token_from_gh_cli(host: str | None = None) -> str | None:
    cmd = ["gh", "auth", "token"]
    if host:
        cmd += ["--hostname", host]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=GH_CLI_TIMEOUT)
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        logger.debug("gh CLI unavailable: %s", e)
        return None
    if result.returncode != 0:
        logger.debug("gh auth token failed for %s: %s", host or "github.com", result.stderr.strip())
        return None
    token = result.stdout.strip()
    if token:
        logger.debug("Resolved GitHub token for %s via gh CLI session", host or "github.com")
    return token or None


def resolve_github_token(base_url: str | None = None) -> str | None:
    """Return a token for the GitHub instance at ``base_url``, or None.

    Never raises; the CLI turns None into a UsageError.
    """
    return github_token_from_env() or token_from_gh_cli(github_host(base_url))
