from __future__ import annotations

import logging
import shlex
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)

PATCH_GLOB = "*.patch"


def find_patches(patches_dir: Path) -> list[Path]:
    """Patch files in application order (sorted by filename)."""
    if not patches_dir.is_dir():
        return []
    return sorted((p for p in patches_dir.glob(PATCH_GLOB) if p.is_file()), key=lambda p: p.name)


@contextmanager
def snapshot_patches(patches: list[Path]) -> Iterator[list[Path]]:
    """Copy patches into a temporary directory for the duration of a run.

    The copies keep their file names, so their order is the same as the
    originals. Edits made to the patches directory while ``git am`` is running
    do not affect the replay. The directory is removed on exit.
    """
    tmp_dir = Path(tempfile.mkdtemp(prefix="patchsync-"))
    try:
        copies = []
        for patch in patches:
            target = tmp_dir / patch.name
            shutil.copy2(patch, target)
            copies.append(target)
        yield copies
    finally:
        try:
            shutil.rmtree(tmp_dir)
        except OSError:
            logger.warning("Failed to remove patch snapshot %s", tmp_dir, exc_info=True)


def format_patch_command(patches_dir: Path, initial_ref: str) -> str:
    quoted_dir = shlex.quote(str(patches_dir))
    return (
        f"rm {quoted_dir}/* && git format-patch --no-signature --keep-subject --zero-commit "
        f"--output-directory {quoted_dir} {shlex.quote(initial_ref)}..HEAD"
    )
