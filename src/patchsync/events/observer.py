from __future__ import annotations

import shlex
from typing import Protocol

import typer

from patchsync.events.types import (
    Event,
    GitCommandStarted,
    PatchesApplied,
    PatchesSnapshotted,
    ScratchBranchRemoved,
    StageAnnounced,
    StageCompleted,
    TargetBranchCreated,
    UpstreamReverted,
)


class EventObserver(Protocol):
    def on_event(self, event: Event) -> None: ...


class StderrObserver:
    """Renders driver progress on stderr, one line per event."""

    def on_event(self, event: Event) -> None:
        if isinstance(event, StageAnnounced):
            typer.echo(f"## {event.description}", err=True)
        elif isinstance(event, GitCommandStarted):
            typer.echo(f"+ git {shlex.join(event.args)}", err=True)
        elif isinstance(event, PatchesSnapshotted):
            typer.echo(f"## Copied {event.count} patches to {event.snapshot_dir}", err=True)
        elif isinstance(event, UpstreamReverted):
            typer.echo(f"## Upstream paths reset to {event.source} ({event.commit_sha[:8]})", err=True)
        elif isinstance(event, PatchesApplied):
            typer.echo(f"## Applied {event.count} patches, HEAD is {event.head_sha[:8]}", err=True)
        elif isinstance(event, ScratchBranchRemoved):
            typer.echo(f"## Removed scratch branch {event.branch_name}", err=True)
        elif isinstance(event, TargetBranchCreated):
            typer.echo(f"## Created {event.branch_name} (verified base {event.base_sha[:8]})", err=True)
        elif isinstance(event, StageCompleted):
            typer.echo(f"## {event.stage} finished", err=True)
