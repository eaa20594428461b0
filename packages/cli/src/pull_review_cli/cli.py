"""CLI entry point for pull-review.

Commands:
  review   handle one chat message: classify it, assign reviewers, print the notification
  suggest  score reviewers for a pull request without assigning anyone
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console

from pull_review_cli.commands.review import review_cmd
from pull_review_cli.commands.suggest import suggest_cmd

console = Console()


def _build_client(config: dict):
    """Create the GitHub client from resolved settings.

    Kept here so pull_review_core never reads CLI settings or resolves
    credentials itself.
    """
    from pull_review_core.gh.client import GitHubClient

    return GitHubClient(token=config.get("github_token"), base_url=config.get("github_base_url"))


def require_client(ctx: click.Context):
    """Return the shared GitHub client, failing with a usage error when no token is available."""
    config = ctx.obj["config"]
    if not config.get("github_token"):
        raise click.UsageError(
            "No GitHub token found. Set PULL_REVIEW_GITHUB_TOKEN or GITHUB_TOKEN, or run `gh auth login` first.\n"
            "Create a token at https://github.com/settings/tokens"
        )
    if ctx.obj.get("client") is None:
        ctx.obj["client"] = _build_client(config)
    return ctx.obj["client"]


@click.group()
@click.version_option(
    version=importlib.metadata.version("pull-review"),
    prog_name="pull-review",
)
@click.option(
    "--config",
    "config_path",
    default=".pull-review.yml",
    show_default=True,
    help="Path to the local settings file.",
    envvar="PULL_REVIEW_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log pipeline details to stderr.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Assign GitHub pull request reviewers based on who wrote the changed code."""
    from pull_review_cli.auth import resolve_github_token
    from pull_review_core.config import load_config

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    ctx.ensure_object(dict)

    config = load_config(config_path)

    # Resolve token early so all subcommands share the same resolution.
    token = resolve_github_token(config.get("github_base_url"))
    if token:
        config["github_token"] = token

    ctx.obj["config"] = config
    ctx.obj.setdefault("client", None)


main.add_command(review_cmd)
main.add_command(suggest_cmd)
