from __future__ import annotations

import subprocess
from pathlib import Path


class GitError(Exception):
    def __init__(self, command: list[str], returncode: int, stderr: str) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"git command failed ({returncode}): {' '.join(command)}\n{stderr}")


def run_git(*args: str, cwd: Path) -> str:
    cmd = ["git", *args]
    result = subprocess.run(
        cmd,
        cwd=cwd,
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        # git am and merge report conflicts on stdout
        detail = "\n".join(s for s in (result.stderr.strip(), result.stdout.strip()) if s)
        raise GitError(cmd, result.returncode, detail)
    return result.stdout.strip()


def rev_parse(ref: str, *, cwd: Path) -> str:
    return run_git("rev-parse", ref, cwd=cwd)


def resolves_to_commit(ref: str, *, cwd: Path) -> bool:
    try:
        run_git("rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}", cwd=cwd)
        return True
    except GitError:
        return False


def describe(ref: str, *, cwd: Path) -> str:
    return run_git("describe", "--always", ref, cwd=cwd)


def current_branch(*, cwd: Path) -> str:
    """Return the checked-out branch name, or "" on a detached HEAD."""
    return run_git("branch", "--show-current", cwd=cwd)


def branch_exists(name: str, *, cwd: Path) -> bool:
    try:
        run_git("show-ref", "--quiet", "--verify", f"refs/heads/{name}", cwd=cwd)
        return True
    except GitError:
        return False


def list_branches(pattern: str, *, cwd: Path) -> list[str]:
    output = run_git("branch", "--list", "--format=%(refname:short)", pattern, cwd=cwd)
    return output.splitlines() if output else []


def switch(ref: str, *, create: bool = False, cwd: Path) -> None:
    if create:
        run_git("switch", "--create", ref, cwd=cwd)
    else:
        run_git("switch", ref, cwd=cwd)


def branch_delete(name: str, *, cwd: Path) -> None:
    run_git("branch", "-D", name, cwd=cwd)


def merge_base(a: str, b: str, *, cwd: Path) -> str:
    return run_git("merge-base", a, b, cwd=cwd)


def is_ancestor(ancestor: str, descendant: str, *, cwd: Path) -> bool:
    try:
        run_git("merge-base", "--is-ancestor", ancestor, descendant, cwd=cwd)
        return True
    except GitError as e:
        if e.returncode == 1:
            return False
        raise


def merge_keep_ours(ref: str, *, cwd: Path) -> None:
    run_git("merge", "--strategy=ours", "--no-commit", ref, cwd=cwd)


def restore(source: str, pathspecs: list[str], *, cwd: Path) -> None:
    run_git("restore", f"--source={source}", "--worktree", "--staged", "--", *pathspecs, cwd=cwd)


def commit(message: str, *, allow_empty: bool = False, cwd: Path) -> str:
    args = ["commit", "-m", message]
    if allow_empty:
        args.append("--allow-empty")
    run_git(*args, cwd=cwd)
    return rev_parse("HEAD", cwd=cwd)


def apply_mailbox(patches: list[Path], *, cwd: Path) -> None:
    """Replay patch files with ``git am --3way -k``, in the order given."""
    if not patches:
        return
    run_git("am", "--3way", "-k", *(str(p) for p in patches), cwd=cwd)


def am_in_progress(*, cwd: Path) -> bool:
    git_dir = Path(run_git("rev-parse", "--absolute-git-dir", cwd=cwd))
    return (git_dir / "rebase-apply").is_dir()


def status(*, cwd: Path) -> str:
    return run_git("status", "--porcelain", cwd=cwd)


def diff_is_empty(range_: str, pathspecs: list[str] | None = None, *, cwd: Path) -> bool:
    args = ["diff", "--quiet", range_]
    if pathspecs:
        args.extend(["--", *pathspecs])
    try:
        run_git(*args, cwd=cwd)
        return True
    except GitError as e:
        if e.returncode == 1:
            return False
        raise


def config_get(key: str, *, cwd: Path) -> str | None:
    try:
        return run_git("config", "--get", key, cwd=cwd)
    except GitError as e:
        if e.returncode == 1:
            return None
        raise


def config_set(key: str, value: str, *, cwd: Path) -> None:
    run_git("config", key, value, cwd=cwd)


def toplevel(*, cwd: Path) -> Path:
    return Path(run_git("rev-parse", "--show-toplevel", cwd=cwd))


def is_git_repo(path: Path) -> bool:
    try:
        run_git("rev-parse", "--is-inside-work-tree", cwd=path)
        return True
    except (GitError, FileNotFoundError, NotADirectoryError):
        return False
