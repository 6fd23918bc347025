from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from pathlib import Path

from patchsync.config.settings import SyncConfig
from patchsync.events.dispatcher import EventDispatcher
from patchsync.interviewer.base import Interviewer
from patchsync.workspace import git_ops

logger = logging.getLogger(__name__)


def _testing_branch_name(prefix: str) -> str:
    return f"{prefix}{random.randint(0, 32767)}"


@dataclass
class SyncSession:
    """One run against one repository checkout.

    Every git invocation goes through this object so that it is announced to
    the dispatcher before it runs.
    """

    repo_path: Path
    config: SyncConfig
    interviewer: Interviewer
    dispatcher: EventDispatcher = field(default_factory=EventDispatcher)
    testing_branch: str = ""

    def __post_init__(self) -> None:
        if not self.testing_branch:
            self.testing_branch = _testing_branch_name(self.config.testing_branch_prefix)

    @property
    def patches_dir(self) -> Path:
        return self.config.patches_path(self.repo_path)

    @property
    def pathspecs(self) -> list[str]:
        return self.config.upstream_pathspecs

    def _trace(self, *args: str) -> None:
        logger.debug("git %s (cwd=%s)", " ".join(args), self.repo_path)
        self.dispatcher.emit("GitCommandStarted", args=list(args))

    def current_branch(self) -> str:
        self._trace("branch", "--show-current")
        return git_ops.current_branch(cwd=self.repo_path)

    def is_clean(self) -> bool:
        self._trace("status", "--porcelain")
        return git_ops.status(cwd=self.repo_path) == ""

    def upstream_exists(self) -> bool:
        self._trace("rev-parse", "--verify", "--quiet", f"{self.config.merge_with}^{{commit}}")
        return git_ops.resolves_to_commit(self.config.merge_with, cwd=self.repo_path)

    def describe(self, ref: str) -> str:
        self._trace("describe", "--always", ref)
        return git_ops.describe(ref, cwd=self.repo_path)

    def branch_exists(self, name: str) -> bool:
        self._trace("show-ref", "--quiet", "--verify", f"refs/heads/{name}")
        return git_ops.branch_exists(name, cwd=self.repo_path)

    def merge_base(self, a: str, b: str) -> str:
        self._trace("merge-base", a, b)
        return git_ops.merge_base(a, b, cwd=self.repo_path)

    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        self._trace("merge-base", "--is-ancestor", ancestor, descendant)
        return git_ops.is_ancestor(ancestor, descendant, cwd=self.repo_path)

    def switch(self, ref: str, *, create: bool = False) -> None:
        self._trace("switch", *(["--create"] if create else []), ref)
        git_ops.switch(ref, create=create, cwd=self.repo_path)

    def branch_delete(self, name: str) -> None:
        self._trace("branch", "-D", name)
        git_ops.branch_delete(name, cwd=self.repo_path)

    def merge_keep_ours(self, ref: str) -> None:
        self._trace("merge", "--strategy=ours", "--no-commit", ref)
        git_ops.merge_keep_ours(ref, cwd=self.repo_path)

    def restore_upstream(self, source: str) -> None:
        """Reset every upstream-owned path to ``source``."""
        self._trace("restore", f"--source={source}", "--worktree", "--staged", "--", *self.pathspecs)
        git_ops.restore(source, self.pathspecs, cwd=self.repo_path)

    def commit(self, message: str, *, allow_empty: bool = False) -> str:
        self._trace("commit", "-m", message, *(["--allow-empty"] if allow_empty else []))
        return git_ops.commit(message, allow_empty=allow_empty, cwd=self.repo_path)

    def rev_parse(self, ref: str) -> str:
        self._trace("rev-parse", ref)
        return git_ops.rev_parse(ref, cwd=self.repo_path)

    def apply_patches(self, patches: list[Path]) -> None:
        self._trace("am", "--3way", "-k", *(str(p) for p in patches))
        git_ops.apply_mailbox(patches, cwd=self.repo_path)

    def upstream_paths_match(self, ref: str) -> bool:
        range_ = f"HEAD..{ref}"
        self._trace("diff", "--quiet", range_, "--", *self.pathspecs)
        return git_ops.diff_is_empty(range_, self.pathspecs, cwd=self.repo_path)

    def stage_marker(self) -> str | None:
        self._trace("config", "--get", self.config.stage_marker_key)
        return git_ops.config_get(self.config.stage_marker_key, cwd=self.repo_path)

    def record_stage_marker(self, base_sha: str) -> None:
        self._trace("config", self.config.stage_marker_key, base_sha)
        git_ops.config_set(self.config.stage_marker_key, base_sha, cwd=self.repo_path)
