"""Command-line interface for gitmine."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from gitmine.context import GitContext
from gitmine.errors import GitMineError
from gitmine.extraction import create_git_manager
from gitmine.log import configure_logging
from gitmine.models import IteratorRequest, Settings

app = typer.Typer(
    name="gitmine",
    help="Extract commit history and diff statistics from Git checkouts",
    add_completion=False,
)
console = Console()


def _setup(backend: Optional[str]) -> Settings:
    settings = Settings(backend=backend) if backend else Settings()
    configure_logging(settings.log_level)
    return settings


@app.command()
def log(
    repo_path: Path = typer.Argument(..., help="Path to Git checkout"),
    branch: str = typer.Option("HEAD", "--branch", "-b", help="Branch ref to read history from"),
    max_count: Optional[int] = typer.Option(None, "--max", "-n", help="Maximum commits to show"),
    from_commit: Optional[str] = typer.Option(None, "--from", help="Oldest commit to include"),
    to_commit: Optional[str] = typer.Option(None, "--to", help="Newest commit to include"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output JSON file"),
    backend: Optional[str] = typer.Option(None, "--backend", help="cli or library"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Seconds before giving up"),
) -> None:
    """List commits of a branch, optionally bounded by --from/--to."""
    try:
        settings = _setup(backend)
        manager = create_git_manager(settings)
        repository = manager.open_existing(repo_path)
        request = IteratorRequest(
            branch_ref=branch,
            branch=branch,
            commit_count=max_count or settings.default_commit_count,
            from_commit_hash=from_commit,
            to_commit_hash=to_commit,
        )
        commits = list(manager.commits_for_range(GitContext(timeout=timeout), repository, request))

        if output:
            output.parent.mkdir(parents=True, exist_ok=True)
            with open(output, "w") as f:
                json.dump([c.model_dump(mode="json") for c in commits], f, indent=2)
            console.print(f"[bold green]✓[/bold green] Saved {len(commits)} commits to {output}")
            return

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Hash", style="cyan", width=10)
        table.add_column("Author", style="green")
        table.add_column("Date", style="blue")
        table.add_column("Subject", style="white")

        for commit in commits:
            table.add_row(commit.short_hash, commit.author, commit.date, commit.subject[:60])

        console.print(table)

    except (GitMineError, ValueError, OSError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def show(
    repo_path: Path = typer.Argument(..., help="Path to Git checkout"),
    ref: str = typer.Argument(..., help="Commit hash or tag"),
    stats: bool = typer.Option(False, "--stats", "-s", help="Show file statistics"),
    backend: Optional[str] = typer.Option(None, "--backend", help="cli or library"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Seconds before giving up"),
) -> None:
    """Show one commit by hash or tag."""
    try:
        settings = _setup(backend)
        manager = create_git_manager(settings)
        repository = manager.open_existing(repo_path)
        context = GitContext(timeout=timeout)
        commit = manager.commit_by_tag_or_hash(context, repository.root_dir, ref)

        console.print("\n[bold]Commit Information[/bold]")
        console.print(f"[cyan]Hash:[/cyan] {commit.hash}")
        console.print(f"[cyan]Author:[/cyan] {commit.author}")
        console.print(f"[cyan]Date:[/cyan] {commit.date}")
        console.print(f"[cyan]Message:[/cyan] {commit.message.rstrip()}")

        if stats:
            _print_stats(manager.stats_for_commit(context, commit))

    except (GitMineError, ValueError, OSError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def stats(
    repo_path: Path = typer.Argument(..., help="Path to Git checkout"),
    ref: str = typer.Argument("HEAD", help="Commit hash or tag"),
    backend: Optional[str] = typer.Option(None, "--backend", help="cli or library"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Seconds before giving up"),
) -> None:
    """Show per-file line statistics of the changes made by a commit."""
    try:
        settings = _setup(backend)
        manager = create_git_manager(settings)
        repository = manager.open_existing(repo_path)
        context = GitContext(timeout=timeout)
        commit = manager.commit_by_tag_or_hash(context, repository.root_dir, ref)
        _print_stats(manager.stats_for_commit(context, commit))

    except (GitMineError, ValueError, OSError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def init(
    root_dir: Path = typer.Argument(..., help="Directory to initialize"),
    remote_url: str = typer.Argument(..., help="URL registered as origin"),
    bare: bool = typer.Option(False, "--bare", help="Create a bare repository"),
    backend: Optional[str] = typer.Option(None, "--backend", help="cli or library"),
) -> None:
    """Initialize a repository with an origin remote."""
    try:
        settings = _setup(backend)
        create_git_manager(settings).init(GitContext(), root_dir, remote_url, is_bare=bare)
        console.print(f"[bold green]✓[/bold green] Initialized {root_dir} (origin: {remote_url})")

    except (GitMineError, ValueError, OSError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


def _print_stats(file_stats) -> None:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("File", style="yellow")
    table.add_column("+", justify="right", style="green")
    table.add_column("-", justify="right", style="red")

    for path, stat in file_stats.items():
        if stat.binary:
            table.add_row(path, "bin", "bin")
        else:
            table.add_row(path, str(stat.additions), str(stat.deletions))

    console.print(table)
    console.print(f"\n[bold]{len(file_stats)}[/bold] files changed")


if __name__ == "__main__":
    app()
