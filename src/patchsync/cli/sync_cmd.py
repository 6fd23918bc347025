from __future__ import annotations

import logging
import os
from pathlib import Path

import typer
import yaml
from pydantic import ValidationError

from patchsync.config.settings import CONFIG_FILENAME, load_config
from patchsync.events.dispatcher import EventDispatcher
from patchsync.events.observer import StderrObserver
from patchsync.interviewer.console import ConsoleInterviewer
from patchsync.sync.driver import run_sync
from patchsync.sync.errors import SyncError
from patchsync.sync.messages import USAGE
from patchsync.workspace import git_ops
from patchsync.workspace.git_ops import GitError
from patchsync.workspace.session import SyncSession

LOG_LEVEL_ENV = "PATCHSYNC_LOG_LEVEL"


def _log_level(value: str) -> int:
    """Map a level name to its number; unknown names fall back to WARNING."""
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else logging.WARNING


def _configure_logging() -> None:
    logging.basicConfig(
        level=_log_level(os.environ.get(LOG_LEVEL_ENV, "WARNING")),
        format="%(levelname)s %(name)s: %(message)s",
    )


def _report(error: SyncError) -> None:
    typer.echo(f"error: {error.message}", err=True)
    if error.remediation:
        typer.echo(f"\n{error.remediation}\n", err=True)


def sync(ctx: typer.Context) -> None:
    """Verify the stored patches (stage 1), then merge upstream and replay them (stage 2)."""
    if ctx.args:
        typer.echo(USAGE, err=True)
        raise typer.Exit(code=1)

    _configure_logging()

    cwd = Path.cwd()
    if not git_ops.is_git_repo(cwd):
        typer.echo(f"error: not a git repository: {cwd}", err=True)
        raise typer.Exit(code=1)

    repo_root = git_ops.toplevel(cwd=cwd)
    try:
        config = load_config(start=cwd, stop=repo_root)
    except (ValidationError, yaml.YAMLError) as e:
        typer.echo(f"error: invalid {CONFIG_FILENAME}: {e}", err=True)
        raise typer.Exit(code=1)

    dispatcher = EventDispatcher()
    dispatcher.add_observer(StderrObserver())
    session = SyncSession(
        repo_path=repo_root,
        config=config,
        interviewer=ConsoleInterviewer(),
        dispatcher=dispatcher,
    )

    try:
        result = run_sync(session)
    except SyncError as e:
        _report(e)
        raise typer.Exit(code=int(e.exit_code))
    except GitError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(result.summary)
