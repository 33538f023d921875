from __future__ import annotations

from typing import Sequence


class UsageError(ValueError):
    """Bad command line or an unrecognized answer to a y/n prompt."""


class InstallerError(RuntimeError):
    pass


class CommandError(InstallerError):
    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"Command failed ({returncode}): {' '.join(self.argv)}\n{stderr}")


class PreconditionMissing(InstallerError):
    """A bundled archive or installer the step consumes is absent."""


class FatalFailure(InstallerError):
    def __init__(self, step_id: str, cause: BaseException | None = None) -> None:
        self.step_id = step_id
        self.cause = cause
        super().__init__(f"Step {step_id} failed: {cause}")
