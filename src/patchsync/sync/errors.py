from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    OK = 0
    FAILURE = 1
    STALE_PATCHES = 2
    REPLAY_FAILED = 3


class SyncError(Exception):
    exit_code: ExitCode = ExitCode.FAILURE

    def __init__(self, message: str, remediation: str = "") -> None:
        self.message = message
        self.remediation = remediation
        super().__init__(message)


class UsageError(SyncError):
    pass


class PreconditionError(SyncError):
    """Raised before the repository has been touched."""


class AbortedError(SyncError):
    pass


class StalePatchesError(SyncError):
    exit_code = ExitCode.STALE_PATCHES


class PatchReplayError(SyncError):
    exit_code = ExitCode.REPLAY_FAILED
