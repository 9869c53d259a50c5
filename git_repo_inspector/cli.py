"""Typer CLI entrypoint for git-repo-inspector."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Sequence

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .config import Settings, load_settings
from .exceptions import InspectorError, ValidationError
from .interactive import build_choices, fuzzy_select
from .models import RepositoryInfo
from .repository import open_repository
from .service import RepositoryInspector
from .workspaces import WorkspaceStore

app = typer.Typer(
    help="Inspect branches, history, status and storage of a git repository",
    add_completion=False,
    no_args_is_help=True,
)
workspace_app = typer.Typer(help="Manage the list of recently opened repositories", no_args_is_help=True)
app.add_typer(workspace_app, name="workspace")

console = Console()
logger = logging.getLogger(__name__)


@dataclass
class AppState:
    inspector: RepositoryInspector
    settings: Settings
    verbose: bool = False


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"git-repo-inspector {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    package_logger = logging.getLogger("git_repo_inspector")
    if any(isinstance(handler, RichHandler) for handler in package_logger.handlers):
        return
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)


@app.callback()
def main(
    ctx: typer.Context,
    repo: Optional[Path] = typer.Option(
        None,
        "--repo",
        "-r",
        help="Path inside the repository to inspect (defaults to current working directory).",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Trace repository discovery and git calls."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the git-repo-inspector version and exit.",
    ),
) -> None:
    _ = version  # handled via callback
    configure_logging(verbose)
    try:
        settings = load_settings()
    except InspectorError as err:
        _fail(str(err))
    repo_path = repo.expanduser() if repo else Path.cwd()
    if repo is not None:
        _touch_workspace(settings, repo_path)
    ctx.obj = AppState(inspector=RepositoryInspector(repo_path), settings=settings, verbose=verbose)


def _touch_workspace(settings: Settings, repo_path: Path) -> None:
    """Refresh the last-opened time of a remembered repository, if any."""

    try:
        handle = open_repository(repo_path)
        store = WorkspaceStore(settings.workspaces_file)
        workspace = store.find_by_path(handle.workdir or handle.git_dir)
        if workspace is not None:
            store.touch(workspace.id)
    except InspectorError as err:
        logger.warning("Could not update workspace for %s: %s", repo_path, err)


def _state(ctx: typer.Context) -> AppState:
    state = ctx.find_root().obj
    if not isinstance(state, AppState):  # pragma: no cover
        raise typer.Exit(1)
    return state


def _emit_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2))


def _table(columns: Sequence[str], rows: Sequence[Sequence[str]]) -> Table:
    table = Table(show_header=True, header_style="bold")
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*row)
    return table


@app.command(help="List local and remote-tracking branches")
def branches(ctx: typer.Context, as_json: bool = typer.Option(False, "--json", help="Output JSON.")) -> None:
    try:
        entries = _state(ctx).inspector.branches()
    except InspectorError as err:
        _fail(str(err))
    if as_json:
        _emit_json([entry.to_payload() for entry in entries])
        return
    rows = [
        ("*" if entry.is_current else "", entry.name, "remote" if entry.is_remote else "local")
        for entry in entries
    ]
    console.print(_table(["", "Branch", "Kind"], rows))


@app.command(help="List configured remotes")
def remotes(ctx: typer.Context, as_json: bool = typer.Option(False, "--json", help="Output JSON.")) -> None:
    try:
        entries = _state(ctx).inspector.remotes()
    except InspectorError as err:
        _fail(str(err))
    if as_json:
        _emit_json([entry.to_payload() for entry in entries])
        return
    if not entries:
        console.print("No remotes configured.")
        return
    console.print(_table(["Name", "URL"], [(entry.name, entry.url) for entry in entries]))


@app.command(help="Show recent commits reachable from HEAD")
def commits(
    ctx: typer.Context,
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Maximum number of commits to show."),
    as_json: bool = typer.Option(False, "--json", help="Output JSON."),
) -> None:
    state = _state(ctx)
    try:
        entries = state.inspector.commits(limit or state.settings.commit_limit)
    except InspectorError as err:
        _fail(str(err))
    if as_json:
        _emit_json([entry.to_payload() for entry in entries])
        return
    rows = [
        (entry.hash[:10], entry.author, entry.date, entry.message.splitlines()[0] if entry.message else "")
        for entry in entries
    ]
    console.print(_table(["Commit", "Author", "Date", "Message"], rows))


@app.command(help="List the paths changed by a commit")
def changes(
    ctx: typer.Context,
    commit_hash: str = typer.Argument(..., help="Commit id to inspect."),
    renames: bool = typer.Option(False, "--renames", help="Detect renamed and copied files."),
    as_json: bool = typer.Option(False, "--json", help="Output JSON."),
) -> None:
    try:
        entries = _state(ctx).inspector.commit_changes(commit_hash, detect_renames=renames)
    except InspectorError as err:
        _fail(str(err))
    if as_json:
        _emit_json([entry.to_payload() for entry in entries])
        return
    console.print(_table(["Status", "Path"], [(entry.status.value, entry.path) for entry in entries]))


@app.command(help="Show a file's content before and after a commit")
def diff(
    ctx: typer.Context,
    commit_hash: str = typer.Argument(..., help="Commit id to inspect."),
    file_path: str = typer.Argument(..., help="Repository-relative path of the file."),
    as_json: bool = typer.Option(False, "--json", help="Output JSON."),
) -> None:
    try:
        pair = _state(ctx).inspector.commit_file_diff(commit_hash, file_path)
    except InspectorError as err:
        _fail(str(err))
    if as_json:
        _emit_json(pair.to_payload())
        return
    console.rule(f"{file_path} (before)")
    console.print(pair.original, markup=False, highlight=False)
    console.rule(f"{file_path} (after)")
    console.print(pair.modified, markup=False, highlight=False)


@app.command(help="Show working tree status")
def status(
    ctx: typer.Context,
    include_index: bool = typer.Option(False, "--include-index", help="Also report staged changes."),
    as_json: bool = typer.Option(False, "--json", help="Output JSON."),
) -> None:
    try:
        entries = _state(ctx).inspector.status(include_index=include_index)
    except InspectorError as err:
        _fail(str(err))
    if as_json:
        _emit_json([entry.to_payload() for entry in entries])
        return
    if not entries:
        console.print("Working tree clean.")
        return
    console.print(_table(["Status", "Path"], [(entry.status.value, entry.path) for entry in entries]))


@app.command(help="List the primary and linked worktrees")
def worktrees(ctx: typer.Context, as_json: bool = typer.Option(False, "--json", help="Output JSON.")) -> None:
    try:
        entries = _state(ctx).inspector.worktrees()
    except InspectorError as err:
        _fail(str(err))
    if as_json:
        _emit_json([entry.to_payload() for entry in entries])
        return
    console.print(_table(["Branch", "Path"], [(entry.branch or "?", entry.path) for entry in entries]))


@app.command(help="Switch the working tree to a local branch")
def checkout(
    ctx: typer.Context,
    branch: Optional[str] = typer.Argument(None, help="Local branch name. If omitted, a picker is shown."),
) -> None:
    inspector = _state(ctx).inspector
    try:
        target = branch or _prompt_branch(inspector)
        inspector.checkout(target)
    except InspectorError as err:
        _fail(str(err))
    console.print(f"Switched to branch {target}")


@app.command(help="Summarize repository layout and storage footprint")
def info(ctx: typer.Context, as_json: bool = typer.Option(False, "--json", help="Output JSON.")) -> None:
    try:
        summary = _state(ctx).inspector.info()
    except InspectorError as err:
        _fail(str(err))
    if as_json:
        _emit_json(summary.to_payload())
        return
    console.print(_info_table(summary))


@workspace_app.command("add", help="Remember a repository")
def workspace_add(ctx: typer.Context, path: Path = typer.Argument(..., help="Path inside the repository.")) -> None:
    state = _state(ctx)
    try:
        repo = open_repository(path)
        workspace = WorkspaceStore(state.settings.workspaces_file).add(repo.workdir or repo.git_dir)
    except InspectorError as err:
        _fail(str(err))
    console.print(f"Added workspace {workspace.name} ({workspace.id})")


@workspace_app.command("ls", help="List remembered repositories")
def workspace_ls(ctx: typer.Context, as_json: bool = typer.Option(False, "--json", help="Output JSON.")) -> None:
    entries = WorkspaceStore(_state(ctx).settings.workspaces_file).all()
    if as_json:
        _emit_json([entry.to_payload() for entry in entries])
        return
    if not entries:
        console.print("No workspaces saved.")
        return
    console.print(_table(["Id", "Name", "Path"], [(entry.id, entry.name, entry.path) for entry in entries]))


@workspace_app.command("rm", help="Forget a remembered repository")
def workspace_rm(ctx: typer.Context, workspace_id: str = typer.Argument(..., help="Workspace id.")) -> None:
    try:
        removed = WorkspaceStore(_state(ctx).settings.workspaces_file).remove(workspace_id)
    except InspectorError as err:
        _fail(str(err))
    if not removed:
        _fail(f"No workspace with id {workspace_id}")
    console.print(f"Removed workspace {workspace_id}")


def _prompt_branch(inspector: RepositoryInspector) -> str:
    local = [entry for entry in inspector.branches() if not entry.is_remote]
    if not local:
        raise ValidationError("No local branches to check out.")
    current = [entry.name for entry in local if entry.is_current]
    choices = build_choices([entry.name for entry in local], highlight=current)
    return str(fuzzy_select("Select branch", choices))


def format_size(size: int) -> str:
    value = float(size)
    for unit in ("B", "KiB", "MiB", "GiB", "TiB"):
        if value < 1024 or unit == "TiB":
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{size} B"  # pragma: no cover


def _info_table(summary: RepositoryInfo) -> Table:
    rows = [
        ("Repository", summary.repo_path),
        ("Git directory", summary.metadata_dir_path),
        ("Worktree", summary.worktree_path),
        ("Bare", "yes" if summary.is_bare else "no"),
        ("Total size", format_size(summary.total_size_bytes)),
        ("Worktree size", format_size(summary.worktree_size_bytes)),
        ("Metadata size", format_size(summary.metadata_size_bytes)),
        ("Objects size", format_size(summary.objects_size_bytes)),
        ("Packfiles size", format_size(summary.packfiles_size_bytes)),
        ("Refs size", format_size(summary.refs_size_bytes)),
        ("LFS enabled", "yes" if summary.lfs_enabled else "no"),
        ("LFS objects size", format_size(summary.lfs_objects_size_bytes)),
    ]
    return _table(["Field", "Value"], rows)


def _fail(message: str, code: int = 1) -> None:
    typer.secho(message, err=True, fg=typer.colors.RED)
    raise typer.Exit(code)


if __name__ == "__main__":
    app()
