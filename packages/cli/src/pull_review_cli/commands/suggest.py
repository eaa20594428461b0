"""suggest command: rank candidate reviewers for a pull request without assigning."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from pull_review_core.errors import ReviewError
from pull_review_core.models import ParsedGithubURL, ReviewRequest
from pull_review_core.reviewer import run_review

console = Console()


def _request_for(repo: str, pr_number: int, again: bool) -> ReviewRequest:
    owner, _, name = repo.partition("/")
    if not owner or not name:
        raise click.BadParameter("expected owner/name", param_hint="--repo")
    url = ParsedGithubURL(
        href=f"https://github.com/{owner}/{name}/pull/{pr_number}",
        owner=owner,
        repo=name,
        resource_type="pull",
        number=pr_number,
    )
    return ReviewRequest(raw_text="", is_review=True, review_again=again, github_urls=(url,))


@click.command("suggest")
@click.option("--repo", required=True, help="GitHub repository in owner/name format.")
@click.option("--pr", "pr_number", type=int, required=True, help="Pull request number.")
@click.option("--again", is_flag=True, help="Score as a \"review again\" request (current assignees excluded).")
@click.option("--top", default=10, show_default=True, help="Number of candidates to show.")
@click.pass_context
def suggest_cmd(ctx, repo: str, pr_number: int, again: bool, top: int):
    """Show blame-based reviewer scores for a pull request.

    Runs the same pipeline as `review` in shadow mode: nothing is assigned
    and no comment is posted.
    """
    from pull_review_cli.cli import require_client

    config = ctx.obj["config"]
    request = _request_for(repo, pr_number, again)

    try:
        outcome = run_review(
            request,
            require_client(ctx),
            policy_path=config.get("policy_path", ".pull-review"),
            max_workers=config.get("max_workers", 4),
            shadow=True,
        )
    except ReviewError as e:
        raise click.ClickException(e.message)

    resource = outcome.resources[0]
    if not outcome.candidates:
        console.print(f"[yellow]No blame data to score for {resource.slug}.[/yellow]")
    else:
        selected = set(outcome.logins)
        table = Table(title=f"Reviewer candidates for {resource.slug}", show_header=True, header_style="bold cyan")
        table.add_column("#", justify="right", width=4)
        table.add_column("Login", style="bold")
        table.add_column("Score", justify="right")
        table.add_column("Selected", justify="center")
        for i, candidate in enumerate(outcome.candidates[:top], 1):
            table.add_row(
                str(i),
                candidate.login,
                f"{candidate.score:.2f}",
                "[green]yes[/green]" if candidate.login in selected else "",
            )
        console.print(table)

    if outcome.reviewers:
        console.print(f"Would assign: {', '.join('@' + login for login in outcome.logins)}")
    else:
        console.print("[yellow]No reviewers would be assigned.[/yellow]")
    if outcome.unassigned:
        console.print(f"Would unassign: {', '.join('@' + u.login for u in outcome.unassigned)}")
