"""Error taxonomy for the review pipeline.

Every failure the orchestrator can reject with is a ReviewError subclass.
Message renderers dispatch on ``kind``; the message text is whatever the
raising site produced, and for upstream failures it is the provider's
response body unmodified.
"""

from __future__ import annotations


class ReviewError(Exception):
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AccessDenied(ReviewError):
    kind = "access_denied"


class NoGithubUrls(ReviewError):
    kind = "no_github_urls"


class TooManyUrls(ReviewError):
    kind = "too_many_urls"


class UnsupportedResourceType(ReviewError):
    kind = "unsupported_resource_type"


class NotOpen(ReviewError):
    kind = "not_open"


class InvalidInput(ReviewError):
    kind = "invalid_input"


class UpstreamError(ReviewError):
    """A non-success response from GitHub."""

    kind = "upstream_error"

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class NotFound(UpstreamError):
    kind = "not_found"
