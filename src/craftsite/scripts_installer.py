"""ScriptsInstaller: fetches the craft-scripts bundle into the project."""

import glob
import os
import shutil
import tempfile

from craftsite.errors import FileOperationError

DEFAULT_SCRIPTS_URL = "https://github.com/nystudio107/craft-scripts/archive/master.zip"
SCRIPTS_DIR = "scripts"
SCRATCH_PREFIX = "craftsite-"


def unzip_command(archive, dest_dir):
    return ["unzip", "-q", "-o", archive, "-d", dest_dir]


class ScriptsInstaller:
    """Downloads, unpacks and relocates the scripts subtree of a zip bundle."""

    def __init__(self, runner, transfer):
        self._runner = runner
        self._transfer = transfer

    def install(self, url: str, target_dir: str) -> str:
        """Install the bundle's scripts directory as <target_dir>/scripts.

        The scratch directory is removed once the scripts are in place; a
        failure leaves it behind for inspection.

        Returns:
            Path of the installed scripts directory.
        """
        scratch_dir = tempfile.mkdtemp(prefix=SCRATCH_PREFIX)
        archive = self._transfer.download(url, scratch_dir)
        self._runner.run(unzip_command(archive, scratch_dir), cwd=scratch_dir)

        source = _find_scripts_dir(scratch_dir)
        dest = os.path.join(target_dir, SCRIPTS_DIR)
        try:
            if os.path.lexists(dest):
                shutil.rmtree(dest)
            shutil.move(source, dest)
            shutil.rmtree(scratch_dir)
        except OSError as exc:
            raise FileOperationError(f"Could not install scripts into {dest}: {exc}", path=dest) from exc
        return dest


def _find_scripts_dir(scratch_dir):
    """Locate the scripts directory under the archive's top-level folder."""
    matches = sorted(
        path for path in glob.glob(os.path.join(scratch_dir, "*", SCRIPTS_DIR))
        if os.path.isdir(path)
    )
    if not matches:
        raise FileOperationError(
            f"No {SCRIPTS_DIR}/ directory found in the downloaded bundle", path=scratch_dir,
        )
    return matches[0]
