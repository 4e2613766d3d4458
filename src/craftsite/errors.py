"""Exception hierarchy for the scaffold run.

Every failure that aborts a run is a ScaffoldError; the CLI reports it and
exits non-zero. ProvisioningError never leaves BucketProvisioner.
"""

from typing import Optional, Sequence


class ScaffoldError(RuntimeError):
    """Base class for failures that abort the scaffold run."""


class ExternalCommandError(ScaffoldError):
    """An external command exited with a non-zero status."""

    def __init__(self, command: Sequence[str], exit_code: int, stderr: str = ""):
        self.command = list(command)
        self.exit_code = exit_code
        self.stderr = stderr
        message = f"Command failed with exit code {exit_code}: {' '.join(self.command)}"
        if stderr.strip():
            message += f"\n{stderr.strip()}"
        super().__init__(message)


class TransferError(ScaffoldError):
    """Downloading a remote resource failed."""

    def __init__(self, message: str, *, url: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class FileOperationError(ScaffoldError):
    """Reading, writing or moving a file failed."""

    def __init__(self, message: str, *, path: str):
        super().__init__(message)
        self.path = path


class TargetDirectoryError(ScaffoldError):
    """The target directory cannot be scaffolded into."""


class ProvisioningError(ScaffoldError):
    """Setting up the storage bucket failed."""
