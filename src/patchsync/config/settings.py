from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

CONFIG_FILENAME = "patchsync.yaml"
MERGE_WITH_ENV = "MERGE_WITH"


class UpstreamConfig(BaseModel):
    remote_name: str = "tree-sitter-fortran"
    remote_url: str = "git@github.com:stadelmanma/tree-sitter-fortran.git"
    branch: str = "master"


class SyncConfig(BaseModel):
    upstream: UpstreamConfig = UpstreamConfig()
    merge_with: str = "tree-sitter-fortran/master"
    target_branch: str = "feature/UpgradeTreeSitterFortranAuto"
    testing_branch_prefix: str = "merge-upstream-testing-"
    patches_dir: str = "codee/patches"
    downstream_paths: list[str] = Field(
        default_factory=lambda: [
            "codee",
            "src/tree_sitter",
            "src/grammar.json",
            "src/node-types.json",
            "src/parser.c",
        ]
    )

    @property
    def upstream_pathspecs(self) -> list[str]:
        """Every path in the repository except the downstream-owned ones."""
        return [":/", *(f":^{p}" for p in self.downstream_paths)]

    @property
    def stage_marker_key(self) -> str:
        return f"branch.{self.target_branch}.patchsyncVerifiedBase"

    def patches_path(self, repo_root: Path) -> Path:
        path = Path(self.patches_dir)
        if not path.is_absolute():
            path = repo_root / path
        return path


def _find_config_file(start: Path | None = None, stop: Path | None = None) -> Path | None:
    """Walk up from ``start`` looking for the config file, not past ``stop``."""
    current = (start or Path.cwd()).resolve()
    boundary = stop.resolve() if stop is not None else None
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if current == boundary or parent == current:
            break
        current = parent
    return None


def load_config(start: Path | None = None, stop: Path | None = None) -> SyncConfig:
    config_path = _find_config_file(start, stop)

    if config_path is not None:
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}
        config = SyncConfig.model_validate(raw)
    else:
        config = SyncConfig()

    merge_with_env = os.environ.get(MERGE_WITH_ENV)
    if merge_with_env:
        config.merge_with = merge_with_env

    return config
