"""Two-stage upstream synchronization.

Stage 1 proves the stored patches rebuild the current downstream state from
the upstream merge base. Stage 2 merges the newer upstream commit, keeping our
content, resets upstream-owned paths to upstream, and replays the patches.
The stage is chosen by the branch that is checked out; see ``detect_stage``.

Nothing here retries or rolls back. Failures leave the repository as they
found it at the point of failure so the operator can inspect it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from patchsync.interviewer.models import Question
from patchsync.sync import messages
from patchsync.sync.errors import (
    AbortedError,
    PatchReplayError,
    PreconditionError,
    StalePatchesError,
)
from patchsync.sync.patches import find_patches, snapshot_patches
from patchsync.sync.stage import Stage, detect_stage
from patchsync.workspace.git_ops import GitError
from patchsync.workspace.session import SyncSession

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    stage: Stage
    branch: str
    base: str
    initial_ref: str
    head_sha: str
    patch_count: int
    summary: str


def run_sync(session: SyncSession) -> SyncResult:
    starting_branch = session.current_branch()
    stage = detect_stage(starting_branch, session.config.target_branch)

    session.dispatcher.emit(
        "StageAnnounced",
        stage=stage.value,
        description=messages.stage_banner(stage, session.config, session.testing_branch),
    )
    confirm(session, stage)

    patches = check_preconditions(session, stage, starting_branch)
    if stage is Stage.VERIFY:
        return verify_patches(session, starting_branch, patches)
    return integrate_upstream(session, patches)


def confirm(session: SyncSession, stage: Stage) -> None:
    answer = session.interviewer.ask(
        Question(text="Do you want to proceed?", stage=stage.label)
    )
    if not answer.approved:
        raise AbortedError("aborted by the operator, nothing was changed")


def check_preconditions(session: SyncSession, stage: Stage, starting_branch: str) -> list[Path]:
    """Validate the repository state and return the patches to replay.

    Raises ``PreconditionError`` before anything has been modified.
    """
    config = session.config

    if not starting_branch:
        raise PreconditionError("HEAD is detached, check out a branch first")

    if not session.is_clean():
        raise PreconditionError("Your working tree and stage must be clean")

    if not session.upstream_exists():
        raise PreconditionError(
            f"there is no upstream to merge with ('{config.merge_with}').",
            messages.missing_upstream_help(config),
        )

    patches = find_patches(session.patches_dir)
    if not patches:
        raise PreconditionError(f"no patches found in '{session.patches_dir}'")

    if stage is Stage.VERIFY:
        if session.branch_exists(config.target_branch):
            raise PreconditionError(
                f"target branch '{config.target_branch}' must not exist on stage1",
                f"Switch to it to run stage 2, or delete it to verify again:\n\n"
                f"  git branch -D '{config.target_branch}'",
            )
    else:
        if session.stage_marker() is None:
            raise PreconditionError(
                f"branch '{config.target_branch}' was not created by a successful stage 1",
                f"Switch away from it, delete it and run stage 1 again:\n\n"
                f"  git switch - && git branch -D '{config.target_branch}'",
            )
        if session.is_ancestor(config.merge_with, "HEAD"):
            raise PreconditionError(
                f"'{config.merge_with}' is already merged into '{config.target_branch}', "
                "nothing to integrate"
            )

    return patches


def _replay(session: SyncSession, stage: Stage, patches: list[Path], initial_ref: str) -> str:
    try:
        session.apply_patches(patches)
    except GitError as e:
        logger.debug("git am failed: %s", e.stderr)
        raise PatchReplayError(
            f"Patches are not up to date.\n{e.stderr}",
            messages.replay_failed_help(stage, session.patches_dir, initial_ref),
        ) from e
    head = session.rev_parse("HEAD")
    session.dispatcher.emit("PatchesApplied", count=len(patches), head_sha=head)
    return head


def verify_patches(session: SyncSession, starting_branch: str, patches: list[Path]) -> SyncResult:
    config = session.config
    testing_branch = session.testing_branch

    base = session.merge_base("HEAD", config.merge_with)
    logger.info("Verifying %d patches on base %s", len(patches), base)
    session.switch(testing_branch, create=True)

    with snapshot_patches(patches) as snapshot:
        session.dispatcher.emit(
            "PatchesSnapshotted", count=len(snapshot), snapshot_dir=str(snapshot[0].parent)
        )
        session.restore_upstream(base)
        reverted = session.commit(
            f"[merge-upstream] Reverted upstream changes since '{base}'", allow_empty=True
        )
        session.dispatcher.emit("UpstreamReverted", source=base, commit_sha=reverted)

        initial_ref = session.rev_parse("HEAD")
        head = _replay(session, Stage.VERIFY, snapshot, initial_ref)

    if not session.upstream_paths_match(starting_branch):
        raise StalePatchesError(
            "There are changes that are still not part of the patches:",
            messages.stale_patches_help(starting_branch, session.patches_dir, initial_ref),
        )

    session.switch(starting_branch)
    session.branch_delete(testing_branch)
    session.dispatcher.emit("ScratchBranchRemoved", branch_name=testing_branch)

    session.switch(config.target_branch, create=True)
    session.record_stage_marker(base)
    session.dispatcher.emit("TargetBranchCreated", branch_name=config.target_branch, base_sha=base)
    session.dispatcher.emit("StageCompleted", stage=Stage.VERIFY.label)

    return SyncResult(
        stage=Stage.VERIFY,
        branch=config.target_branch,
        base=base,
        initial_ref=initial_ref,
        head_sha=head,
        patch_count=len(patches),
        summary=messages.verify_completed(),
    )


def integrate_upstream(session: SyncSession, patches: list[Path]) -> SyncResult:
    config = session.config
    upstream = config.merge_with
    logger.info("Integrating %s (%s)", upstream, session.describe(upstream))

    session.merge_keep_ours(upstream)

    with snapshot_patches(patches) as snapshot:
        session.dispatcher.emit(
            "PatchesSnapshotted", count=len(snapshot), snapshot_dir=str(snapshot[0].parent)
        )
        session.restore_upstream(upstream)
        merged = session.commit(f"Merge {upstream} (to be finished)")
        session.dispatcher.emit("UpstreamReverted", source=upstream, commit_sha=merged)

        initial_ref = session.rev_parse("HEAD")
        head = _replay(session, Stage.INTEGRATE, snapshot, initial_ref)

    session.dispatcher.emit("StageCompleted", stage=Stage.INTEGRATE.label)

    return SyncResult(
        stage=Stage.INTEGRATE,
        branch=config.target_branch,
        base=upstream,
        initial_ref=initial_ref,
        head_sha=head,
        patch_count=len(patches),
        summary=messages.integrate_completed(session.patches_dir, initial_ref),
    )
