"""Throwaway fork repositories for driver and CLI tests.

Layout of the ``fork`` fixture:

* ``upstream-master`` branch: the upstream grammar (``grammar.js``,
  ``README.md``, ``src/parser.c``).
* ``main`` branch: upstream plus a downstream-only commit (``codee/``,
  ``src/parser.c``), two commits to ``grammar.js`` and a final commit storing
  those two commits as patches under ``codee/patches``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest

from patchsync.config.settings import SyncConfig
from patchsync.events.dispatcher import EventDispatcher
from patchsync.interviewer.auto_approve import AutoApproveInterviewer
from patchsync.workspace.git_ops import rev_parse, run_git
from patchsync.workspace.session import SyncSession

UPSTREAM = "upstream-master"

GRAMMAR_V1 = "line one\nline two\nline three\n"

BROKEN_PATCH = """From 0000000000000000000000000000000000000000 Mon Sep 17 00:00:00 2001
From: Test <test@test.com>
Date: Mon, 1 Jan 2024 00:00:00 +0000
Subject: Touch a line that never existed

---
 grammar.js | 2 +-
 1 file changed, 1 insertion(+), 1 deletion(-)

diff --git a/grammar.js b/grammar.js
index 1111111..2222222 100644
--- a/grammar.js
+++ b/grammar.js
@@ -1 +1 @@
-this line is not in the file
+replacement
"""


class RecordingObserver:
    def __init__(self) -> None:
        self.events: list[Any] = []

    def on_event(self, event: Any) -> None:
        self.events.append(event)

    def of_type(self, event_type: str) -> list[Any]:
        return [e for e in self.events if e.event_type == event_type]


@dataclass
class Fork:
    path: Path
    upstream_base: str

    def write(self, rel: str, content: str) -> None:
        target = self.path / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)

    def read(self, rel: str) -> str:
        return (self.path / rel).read_text()

    def commit_all(self, message: str) -> str:
        run_git("add", "-A", cwd=self.path)
        run_git("commit", "-m", message, cwd=self.path)
        return rev_parse("HEAD", cwd=self.path)

    def git(self, *args: str) -> str:
        return run_git(*args, cwd=self.path)

    def advance_upstream(self, files: dict[str, str], message: str = "Upstream update") -> str:
        """Add a commit on the upstream branch, then return to the current branch."""
        current = self.git("branch", "--show-current")
        self.git("switch", UPSTREAM)
        for rel, content in files.items():
            self.write(rel, content)
        sha = self.commit_all(message)
        self.git("switch", current)
        return sha


def init_repo(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)
    run_git("init", cwd=path)
    run_git("symbolic-ref", "HEAD", "refs/heads/main", cwd=path)
    run_git("config", "user.email", "test@test.com", cwd=path)
    run_git("config", "user.name", "Test", cwd=path)
    run_git("config", "commit.gpgsign", "false", cwd=path)


@pytest.fixture()
def fork(tmp_path: Path) -> Fork:
    repo = tmp_path / "fork"
    init_repo(repo)
    f = Fork(path=repo, upstream_base="")

    f.write("README.md", "# Fortran grammar\n")
    f.write("grammar.js", GRAMMAR_V1)
    f.write("src/parser.c", "/* generated v1 */\n")
    f.upstream_base = f.commit_all("Upstream initial")
    f.git("branch", UPSTREAM)

    f.write("codee/README.md", "downstream tooling\n")
    f.write("src/parser.c", "/* generated v1 + codee */\n")
    downstream_only = f.commit_all("Add codee tooling")

    f.write("grammar.js", GRAMMAR_V1 + "codee extension\n")
    f.commit_all("Add codee extension")
    f.write("grammar.js", "line one\nline two (codee)\nline three\ncodee extension\n")
    f.commit_all("Tweak line two for codee")

    f.git(
        "format-patch",
        "--no-signature",
        "--keep-subject",
        "--zero-commit",
        "--output-directory",
        "codee/patches",
        f"{downstream_only}..HEAD",
    )
    f.commit_all("Store codee patches")
    return f


@pytest.fixture()
def sync_config() -> SyncConfig:
    return SyncConfig(merge_with=UPSTREAM)


@pytest.fixture()
def recorder() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture()
def session(fork: Fork, sync_config: SyncConfig, recorder: RecordingObserver) -> SyncSession:
    dispatcher = EventDispatcher()
    dispatcher.add_observer(recorder)
    return SyncSession(
        repo_path=fork.path,
        config=sync_config,
        interviewer=AutoApproveInterviewer(),
        dispatcher=dispatcher,
        testing_branch="merge-upstream-testing-42",
    )
