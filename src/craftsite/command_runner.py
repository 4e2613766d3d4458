"""CommandRunner: runs external tools in the project directory."""

import subprocess
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

from craftsite.errors import ExternalCommandError

COMMAND_NOT_FOUND = 127


class CommandRunner:
    """Runs commands with captured output, defaulting to a fixed directory.

    All subprocess calls go through run() so a failing tool always
    surfaces as ExternalCommandError with its stderr attached.
    """

    def __init__(self, cwd: str):
        self._cwd = cwd

    @property
    def cwd(self) -> str:
        return self._cwd

    def run(self, command: Sequence[str], cwd: Optional[str] = None) -> str:
        """Run *command* and return its stdout.

        Args:
            command: Program and arguments.
            cwd: Directory override, e.g. a nested sub-project.

        Raises:
            ExternalCommandError: If the command exits non-zero or the
                program cannot be found.
        """
        try:
            result = subprocess.run(
                list(command),
                cwd=cwd or self._cwd,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as exc:
            raise ExternalCommandError(command, COMMAND_NOT_FOUND, str(exc)) from exc
        if result.returncode != 0:
            raise ExternalCommandError(command, result.returncode, result.stderr)
        return result.stdout

    def run_all(self, commands: Sequence[Tuple[Sequence[str], Optional[str]]]) -> List[str]:
        """Run (command, cwd) pairs concurrently and wait for all of them.

        Returns the stdout of each command in submission order. If any
        command failed, the first failure in submission order is raised
        once every command has finished.
        """
        if not commands:
            return []
        with ThreadPoolExecutor(max_workers=len(commands)) as pool:
            futures = [pool.submit(self.run, command, cwd) for command, cwd in commands]
        errors = [f.exception() for f in futures if f.exception() is not None]
        if errors:
            raise errors[0]
        return [f.result() for f in futures]
