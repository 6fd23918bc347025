"""Operator-facing text: stage banners, remediation steps and completion notes.

Every command shown here is meant to be copied and pasted as-is.
"""

from __future__ import annotations

from pathlib import Path

from patchsync.config.settings import SyncConfig
from patchsync.sync.patches import format_patch_command
from patchsync.sync.stage import Stage

USAGE = """usage: patchsync

  Helper to merge (and verify our changes in) upstream code.

  The parameters aren't supposed to be modified per run, so there are no
  arguments. Defaults can be overridden in patchsync.yaml, and the upstream
  ref with the MERGE_WITH environment variable."""


def stage_banner(stage: Stage, config: SyncConfig, testing_branch: str) -> str:
    if stage is Stage.VERIFY:
        return f"""Stage 1: Validate that the existing patches represent the current state
  - First, create a new '{testing_branch}' branch to perform the validation
  - On that branch, reset the upstream folders to the upstream version
  - Apply all the stored patches and check if they match the original branch
    - If so, proceed to the second stage
    - If not, give instructions on how to fix the issue"""
    return f"""Stage 2: Finish the upstream update
  - It is assumed that the first stage finished successfully.
  - We will merge the '{config.merge_with}' branch discarding all our changes
  - To then apply all the stored patches one by one
  - After solving all conflicts, the merge should be ready to:
    - Pass tests, prepare for review and finally recreate the patches"""


def missing_upstream_help(config: SyncConfig) -> str:
    upstream = config.upstream
    return f"""You can add it with:

  git remote add '{upstream.remote_name}' {upstream.remote_url}
  git fetch {upstream.remote_name} {upstream.branch}"""


def replay_failed_help(stage: Stage, patches_dir: Path, initial_ref: str) -> str:
    regenerate = format_patch_command(patches_dir, initial_ref)
    if stage is Stage.VERIFY:
        return f"""You'll need to address the issues and redo the patches before trying again.

    {regenerate}"""
    return f"""Resolve the conflicts by hand, stage the result and continue:

    git add <resolved files>
    git am --continue

  Once every patch is applied, recreate the patches:

    {regenerate}"""


def stale_patches_help(starting_branch: str, patches_dir: Path, initial_ref: str) -> str:
    return f"""    git diff HEAD..'{starting_branch}'

  If the changes are new, just commit them as normal. If the changes are
  modifications of previous commits, you can try to amend them automatically:

    git diff HEAD..'{starting_branch}' | git apply --index
    git absorb --base '{initial_ref}'

  Review carefully the changes you need to do, and then recreate the patches.

    {format_patch_command(patches_dir, initial_ref)}"""


def verify_completed() -> str:
    return """
# Stage 1 completed successfully. You are ready to jump to stage 2:
  patchsync"""


def integrate_completed(patches_dir: Path, initial_ref: str) -> str:
    return f"""
# Stage 2 completed successfully. You're now on your own. Don't forget to:
  - Ensure that the patches compile successfully.
  - Fix the failing tests.
  - Update the final patches to the new version and open a PR to review them.
    {format_patch_command(patches_dir, initial_ref)}
  - Squash all the patches in the final merge commit!

  Good luck!"""
