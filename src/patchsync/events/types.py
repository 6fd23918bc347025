from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class Event(BaseModel):
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    event_type: str


class StageAnnounced(Event):
    event_type: str = "StageAnnounced"
    stage: str
    description: str = ""


class GitCommandStarted(Event):
    event_type: str = "GitCommandStarted"
    args: list[str] = Field(default_factory=list)


class PatchesSnapshotted(Event):
    event_type: str = "PatchesSnapshotted"
    count: int = 0
    snapshot_dir: str = ""


class UpstreamReverted(Event):
    event_type: str = "UpstreamReverted"
    source: str
    commit_sha: str = ""


class PatchesApplied(Event):
    event_type: str = "PatchesApplied"
    count: int = 0
    head_sha: str = ""


class ScratchBranchRemoved(Event):
    event_type: str = "ScratchBranchRemoved"
    branch_name: str


class TargetBranchCreated(Event):
    event_type: str = "TargetBranchCreated"
    branch_name: str
    base_sha: str = ""


class StageCompleted(Event):
    event_type: str = "StageCompleted"
    stage: str


EVENT_TYPE_MAP: dict[str, type[Event]] = {
    "StageAnnounced": StageAnnounced,
    "GitCommandStarted": GitCommandStarted,
    "PatchesSnapshotted": PatchesSnapshotted,
    "UpstreamReverted": UpstreamReverted,
    "PatchesApplied": PatchesApplied,
    "ScratchBranchRemoved": ScratchBranchRemoved,
    "TargetBranchCreated": TargetBranchCreated,
    "StageCompleted": StageCompleted,
}
