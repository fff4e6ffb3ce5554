"""
Command line interface for Repoget.
"""

import asyncio
from typing import List, Optional

import typer
from rich.console import Console

from ..infrastructure.error_handler import JumpError, RepogetError
from ..models import FetchConfig
from .api import Repoget


app = typer.Typer(
    name="repoget",
    help="Fetch remote repositories into a URL-keyed tree and jump into them.",
    add_completion=False,
)
err_console = Console(stderr=True)


def _fail(error: RepogetError) -> None:
    err_console.print(str(error), style="red", markup=False, highlight=False)
    if isinstance(error, JumpError) and error.returncode:
        raise typer.Exit(error.returncode)
    raise typer.Exit(1)


def _repoget(ctx: typer.Context) -> Repoget:
    return Repoget(verbose=bool(ctx.obj and ctx.obj.get("verbose")))


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    ctx.obj = {"verbose": verbose}


@app.command()
def get(
    ctx: typer.Context,
    targets: Optional[List[str]] = typer.Argument(None, help="Repositories to fetch; read from stdin when omitted"),
    update: bool = typer.Option(False, "--update", "-u", help="Update local repository if cloned already"),
    ssh: bool = typer.Option(False, "-p", help="Clone with SSH"),
    shallow: bool = typer.Option(False, "--shallow", help="Do a shallow clone"),
    look: bool = typer.Option(False, "--look", "-l", help="Look after get"),
    vcs: Optional[str] = typer.Option(None, "--vcs", help="Specify VCS backend for cloning"),
    silent: bool = typer.Option(False, "--silent", "-s", help="Clone or update silently"),
    no_recursive: bool = typer.Option(False, "--no-recursive", help="Prevent recursive fetching"),
    branch: Optional[str] = typer.Option(None, "--branch", "-b", help="Specify branch name. This flag implies --single-branch on git"),
    parallel: bool = typer.Option(False, "--parallel", "-P", help="Import in parallel"),
    bare: bool = typer.Option(False, "--bare", help="Do a bare clone"),
):
    """
    Clone or update remote repositories under the root directory.
    """
    config = FetchConfig(
        update=update,
        shallow=shallow,
        ssh=ssh,
        vcs=vcs,
        branch=branch,
        recursive=not no_recursive,
        bare=bare,
        silent=silent,
    )
    try:
        asyncio.run(_repoget(ctx).get(targets or [], config, parallel=parallel, look=look))
    except RepogetError as e:
        _fail(e)


@app.command("look")
def look_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Repository name, path suffix or URL"),
    bare: bool = typer.Option(False, "--bare", help="Look for a bare repository"),
):
    """
    Start a shell inside a local repository.
    """
    try:
        _repoget(ctx).look(name, bare=bare)
    except RepogetError as e:
        _fail(e)


@app.command("list")
def list_command(
    ctx: typer.Context,
    query: Optional[str] = typer.Argument(None, help="Only list repositories containing this"),
    exact: bool = typer.Option(False, "--exact", "-e", help="Match whole path segments"),
    full_path: bool = typer.Option(False, "--full-path", "-p", help="Print full paths"),
):
    """
    List local repositories.
    """
    try:
        paths = _repoget(ctx).list(query, exact=exact, full_path=full_path)
    except RepogetError as e:
        _fail(e)
        return
    for path in paths:
        typer.echo(path)


@app.command()
def root(
    ctx: typer.Context,
    all: bool = typer.Option(False, "--all", help="Show all roots"),
):
    """
    Show the repository root directory.
    """
    for path in _repoget(ctx).roots(all=all):
        typer.echo(path)


def main() -> None:
    app()


__all__ = [
    "app",
    "main",
]
