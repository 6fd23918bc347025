from __future__ import annotations

from enum import Enum


class Stage(str, Enum):
    VERIFY = "verify"
    INTEGRATE = "integrate"

    @property
    def label(self) -> str:
        return "Stage 1" if self is Stage.VERIFY else "Stage 2"


def detect_stage(current_branch: str, target_branch: str) -> Stage:
    """Being on the target branch means stage 1 already succeeded."""
    if current_branch == target_branch:
        return Stage.INTEGRATE
    return Stage.VERIFY
