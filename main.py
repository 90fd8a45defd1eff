"""Typer CLI for rgm: index, tag and browse local git repositories."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console

from commands import CommandInterpreter
from config import AppPaths, load_paths, setup_logging
from exceptions import CacheError, RgmError, TerminalError
from git_client import GitClient
from index import RepoIndex
from loop import run_main_loop
from navigation import NavigationState
from shell import ShellType, clear_shell_file, wrapper_source
from terminal import TerminalController

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Index, tag and jump between the git repositories on this machine.",
    add_completion=False,
)
console = Console()


def _git_client() -> GitClient:
    return GitClient()


def _fail(message: str, code: int = 1) -> NoReturn:
    typer.secho(message, err=True, fg=typer.colors.RED)
    raise typer.Exit(code)


def _paths(ctx: typer.Context) -> AppPaths:
    return ctx.obj["paths"]


def _load_index(paths: AppPaths) -> RepoIndex:
    try:
        return RepoIndex.load(paths.cache_file)
    except CacheError as err:
        _fail(f"{err}\nRun `rgm import <path>` to build the index first.")


def _save(index: RepoIndex) -> Path:
    try:
        return index.save()
    except CacheError as err:
        _fail(str(err))


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    home: Optional[Path] = typer.Option(
        None,
        "--home",
        help="Directory holding the index, shell and log files (default: $RGM_HOME or ~/.rgm).",
        file_okay=False,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Without a subcommand, open the interactive repository view."""
    try:
        paths = load_paths(home)
    except RgmError as err:
        _fail(str(err))
    setup_logging(paths, verbose)
    clear_shell_file(paths.shell_file)
    ctx.ensure_object(dict)
    ctx.obj["paths"] = paths
    if ctx.invoked_subcommand is None:
        _run_interactive(paths)


def _run_interactive(paths: AppPaths) -> None:
    index = _load_index(paths)
    if not sys.stdin.isatty():
        _fail("Interactive mode requires a TTY.")
    state = NavigationState(index)
    interpreter = CommandInterpreter(state)
    try:
        terminal = TerminalController(sys.stdin.fileno(), sys.stdout.fileno())
        run_main_loop(
            state=state,
            interpreter=interpreter,
            terminal=terminal,
            shell_file=paths.shell_file,
        )
    except (TerminalError, OSError) as err:
        logger.error("Interactive view failed: %s", err)
        _fail(f"Terminal error: {err}")


@app.command("import", help="Scan a directory tree and add its repositories to the index")
def import_repos(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Directory to scan.", exists=True, file_okay=False),
    sort: bool = typer.Option(False, "--sort", help="Sort the whole index by repository name."),
) -> None:
    paths = _paths(ctx)
    index = _load_index(paths) if paths.cache_file.exists() else RepoIndex(paths.cache_file)
    scanned = RepoIndex.from_directory(path, paths.cache_file, _git_client())
    added = index.merge(scanned)
    if sort:
        index.sort_by_name()
    written = _save(index)
    console.print(f"Imported {added} new repos ({index.size} total) into {written}")


@app.command(help="Tag a repository")
def tag(
    ctx: typer.Context,
    tags: list[str] = typer.Argument(..., help="Tags to add."),
    path: Path = typer.Argument(..., help="Repository path."),
) -> None:
    index = _load_index(_paths(ctx))
    repo = index.find(path)
    if repo is None:
        _fail(f"{path} is not in the index.")
    if index.add_tags(repo, tags):
        _save(index)
    console.print(f"{repo.name}: {', '.join(repo.tags)}")


@app.command(help="Set the alias of a repository")
def alias(
    ctx: typer.Context,
    alias: str = typer.Argument(..., help="Alias to set."),
    path: Path = typer.Argument(..., help="Repository path."),
) -> None:
    index = _load_index(_paths(ctx))
    repo = index.find(path)
    if repo is None:
        _fail(f"{path} is not in the index.")
    index.add_alias(repo, alias)
    _save(index)
    console.print(f"{repo.name} is now aliased as [bold]{alias}[/bold]")


@app.command(help="Refresh branch, remotes and status of indexed repositories")
def update(
    ctx: typer.Context,
    path: Optional[Path] = typer.Argument(None, help="Only refresh repositories under this path."),
) -> None:
    index = _load_index(_paths(ctx))
    try:
        refreshed = index.update(_git_client(), under=path)
    except CacheError as err:
        _fail(str(err))
    console.print(f"Updated {refreshed} of {index.size} repos")


@app.command(help="Print the shell wrapper that lets rgm change directory")
def init(ctx: typer.Context, shell: ShellType = typer.Argument(..., help="Target shell.")) -> None:
    typer.echo(wrapper_source(shell, _paths(ctx).shell_file))


if __name__ == "__main__":
    app()
