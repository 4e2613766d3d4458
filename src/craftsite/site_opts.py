"""Options dataclass for the create-craft-site command."""

import os
from dataclasses import dataclass
from typing import Optional

from craftsite.bucket_provisioner import derive_bucket_name
from craftsite.file_transfer import DEFAULT_MAX_REDIRECTS
from craftsite.scripts_installer import DEFAULT_SCRIPTS_URL


def resolve_target_directory(directory: str, base_dir: Optional[str] = None) -> str:
    """Resolve *directory* against *base_dir* (default: the process cwd)."""
    base = base_dir or os.getcwd()
    return os.path.normpath(os.path.join(base, os.path.expanduser(directory)))


@dataclass
class SiteOpts:
    """All options for a scaffold run.

    ``bucket`` is None when no bucket was requested and an empty string
    when one was requested without a name.
    """

    target_directory: str
    bucket: Optional[str] = None
    scripts_url: str = DEFAULT_SCRIPTS_URL
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    dry_run: bool = False

    @property
    def wants_bucket(self):
        return self.bucket is not None

    @property
    def bucket_name(self):
        if not self.wants_bucket:
            return None
        return self.bucket or derive_bucket_name(self.target_directory)
