"""review command: handle one chat message the way the chat bot would."""

from __future__ import annotations

import click
from rich.console import Console

from pull_review_core.errors import ReviewError
from pull_review_core.messages import RENDERERS, render, slack_message
from pull_review_core.request import classify
from pull_review_core.reviewer import run_review

console = Console()


def _print_message(message) -> None:
    if isinstance(message, dict):
        console.print_json(data=message)
    else:
        console.print(message, markup=False, highlight=False)


@click.command("review")
@click.argument("text")
@click.option("--room", default=None, help="Chat room the message came from (checked against the room allow-list).")
@click.option(
    "--adapter",
    type=click.Choice(sorted(RENDERERS)),
    default=None,
    help="Notification format. Overrides config file.",
)
@click.option(
    "--shadow",
    "-s",
    is_flag=True,
    help="Dry-run mode: select reviewers without assigning or commenting on GitHub.",
)
@click.pass_context
def review_cmd(ctx, text: str, room: str | None, adapter: str | None, shadow: bool):
    """Assign reviewers for a chat message such as "review <PR URL>".

    A message that only shares links is not a review request; with the
    slack adapter its pull requests are still unfurled.

    \b
    Environment variables:
      PULL_REVIEW_GITHUB_TOKEN     Bot account token (GITHUB_TOKEN / GH_TOKEN also work, or use gh CLI)
      PULL_REVIEW_REQUIRED_ROOMS   Comma-separated rooms allowed to request reviews
    """
    from pull_review_cli.cli import require_client
    from pull_review_core.config import load_required_rooms

    config = ctx.obj["config"]
    adapter = adapter or config.get("adapter", "generic")

    try:
        request = classify(text, room=room, required_rooms=load_required_rooms())

        if not request.is_review:
            if adapter == "slack" and request.github_urls:
                resources = require_client(ctx).fetch_resources(list(request.github_urls))
                unfurled = slack_message(None, resources)
                if unfurled is not None:
                    _print_message(unfurled)
                    return
            console.print("[dim]Not a review request.[/dim]")
            return

        outcome = run_review(
            request,
            require_client(ctx),
            policy_path=config.get("policy_path", ".pull-review"),
            max_workers=config.get("max_workers", 4),
            shadow=shadow,
        )
    except ReviewError as e:
        raise click.ClickException(e.message)

    message = render(adapter, outcome)
    if message is None:
        console.print(f"[yellow]No reviewers found for {outcome.resources[0].slug}.[/yellow]")
    else:
        _print_message(message)

    if shadow:
        console.print("[dim]Shadow mode: nothing was assigned on GitHub.[/dim]")
