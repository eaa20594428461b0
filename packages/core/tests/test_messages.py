"""Tests for outcome renderers."""

import dataclasses

import pytest

from pull_review_core.errors import NotOpen
from pull_review_core.messages import (
    find_image_url,
    generic_message,
    github_message,
    render,
    slack_message,
)
from pull_review_core.models import PullRequestResource, ReviewOutcome, UserRef


def _resource(number=1, body="Hello world"):
    return PullRequestResource(
        owner="OWNER",
        repo="REPO",
        number=number,
        html_url=f"https://mockhub.com/OWNER/REPO/pull/{number}",
        state="open",
        title="Lorem ipsum",
        body=body,
        author=UserRef("mockuser", "https://mockhub.com/mockuser"),
    )


REVIEWERS = [UserRef("foo"), UserRef("bar")]


class TestGenericMessage:
    def test_outputs_error(self):
        assert generic_message(NotOpen("test")) == "test"

    def test_outputs_review_message(self):
        outcome = ReviewOutcome(resources=[_resource()], reviewers=REVIEWERS)
        assert generic_message(outcome) == "Assigning @foo, @bar to OWNER/REPO#1"

    def test_uses_reviewer_map(self):
        outcome = ReviewOutcome(resources=[_resource()], reviewers=REVIEWERS, reviewer_map={"foo": "uvw", "bar": "xyz"})
        assert generic_message(outcome) == "Assigning @uvw, @xyz to OWNER/REPO#1"

    def test_nothing_without_reviewers(self):
        assert generic_message(ReviewOutcome(resources=[_resource()])) is None
        assert generic_message(None) is None


class TestGitHubMessage:
    def test_outputs_review_message(self):
        outcome = ReviewOutcome(resources=[_resource()], reviewers=REVIEWERS)
        assert github_message(outcome) == "@foo, @bar: please review this pull request"

    def test_ignores_reviewer_map(self):
        outcome = ReviewOutcome(resources=[_resource()], reviewers=REVIEWERS, reviewer_map={"foo": "uvw"})
        assert github_message(outcome) == "@foo, @bar: please review this pull request"

    def test_no_message_for_non_review(self):
        assert github_message(None) is None
        assert github_message(NotOpen("closed")) is None


class TestSlackMessage:
    def test_non_review_message(self):
        message = slack_message(None, [_resource(1), _resource(2)])
        attachments = message["attachments"]
        assert attachments[0]["fallback"] == "Lorem ipsum by mockuser: https://mockhub.com/OWNER/REPO/pull/1"
        assert attachments[0]["title"] == "OWNER/REPO: Lorem ipsum"
        assert attachments[1]["fallback"] == "Lorem ipsum by mockuser: https://mockhub.com/OWNER/REPO/pull/2"
        assert "text" not in message

    def test_review_message(self):
        outcome = ReviewOutcome(resources=[_resource()], reviewers=REVIEWERS)
        message = slack_message(outcome)
        assert message["text"] == "@foo, @bar: please review this pull request"
        assert len(message["attachments"]) == 1

    def test_image_from_body(self):
        message = slack_message(None, [_resource(body="http://example.com/example.png")])
        attachment = message["attachments"][0]
        assert attachment["text"] == ""
        assert attachment["image_url"] == "http://example.com/example.png"

    def test_image_from_markdown_body(self):
        body = "![foo](http://example.com/foo.png)\n![bar](http://example.com/bar.png)"
        attachment = slack_message(None, [_resource(body=body)])["attachments"][0]
        assert attachment["text"] == ""
        assert attachment["image_url"] == "http://example.com/foo.png"

    def test_error(self):
        assert slack_message(NotOpen("Pull request is not open")) == {"text": "Pull request is not open"}

    def test_nothing_to_say(self):
        assert slack_message(None) is None


def test_find_image_url_none():
    assert find_image_url("no images here") is None
    assert find_image_url(None) is None


def test_render_dispatches():
    outcome = ReviewOutcome(resources=[_resource()], reviewers=REVIEWERS)
    assert render("generic", outcome) == generic_message(outcome)
    assert render("github", dataclasses.replace(outcome)) == github_message(outcome)


def test_render_unknown_adapter():
    with pytest.raises(ValueError, match="Unknown adapter"):
        render("irc", None)
