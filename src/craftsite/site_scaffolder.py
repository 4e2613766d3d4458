"""SiteScaffolder: sequences the whole create-craft-site run."""

import os
from dataclasses import dataclass
from typing import Callable

import click

from craftsite.bucket_provisioner import BucketProvisioner
from craftsite.command_runner import CommandRunner
from craftsite.errors import FileOperationError, TargetDirectoryError
from craftsite.file_transfer import FileTransfer
from craftsite.scripts_installer import ScriptsInstaller, unzip_command
from craftsite.site_opts import SiteOpts
from craftsite.template_renderer import render_template
from craftsite.tree_reshaper import TreeReshaper

STARTER_INIT_COMMAND = [
    "npm", "init", "@gentsagency/static-site", "--yes", "--scope=@gentsagency",
]
CMS_INSTALL_COMMAND = ["composer", "create-project", "craftcms/craft", "./craft"]


@dataclass
class ScaffolderDeps:
    """Collaborators of a scaffold run, all bound to one target directory."""

    runner: CommandRunner
    scripts_installer: ScriptsInstaller
    reshaper: TreeReshaper
    provisioner: BucketProvisioner
    echo: Callable = click.echo

    @classmethod
    def for_opts(cls, opts: SiteOpts) -> "ScaffolderDeps":
        runner = CommandRunner(opts.target_directory)
        transfer = FileTransfer(max_redirects=opts.max_redirects)
        return cls(
            runner=runner,
            scripts_installer=ScriptsInstaller(runner, transfer),
            reshaper=TreeReshaper(opts.target_directory),
            provisioner=BucketProvisioner(runner),
        )


class SiteScaffolder:
    """Creates a new Craft website in opts.target_directory."""

    def __init__(self, opts: SiteOpts, deps: ScaffolderDeps):
        self._opts = opts
        self._deps = deps

    def _echo(self, message=""):
        self._deps.echo(message)

    def run(self):
        """Run every phase; any ScaffoldError aborts with no rollback."""
        target = self._opts.target_directory
        if self._opts.dry_run:
            self._print_plan()
            return

        self._echo(f"👋 Creating a new Craft website in {target}")
        self._echo()
        self.prepare_target_directory()

        self._echo("📥 Installing Craft CMS & a front-end setup")
        self._echo("☕️ This might take a while")
        self._echo()
        self._deps.runner.run_all([
            (STARTER_INIT_COMMAND, target),
            (CMS_INSTALL_COMMAND, target),
        ])

        self._echo("📜 Downloading craft-scripts")
        self._echo()
        self._deps.scripts_installer.install(self._opts.scripts_url, target)

        self._echo("🚢 Moving some files around")
        self._echo("🔧 Tweaking your configuration")
        self._echo()
        self._deps.reshaper.reshape()

        bucket = None
        if self._opts.wants_bucket:
            bucket = self._provision_bucket()

        self._echo(render_template(
            "next-steps.j2", target_directory=target, bucket=bucket,
        ))

    def prepare_target_directory(self):
        """Create the target directory, refusing one that already has content."""
        target = self._opts.target_directory
        if os.path.exists(target) and not os.path.isdir(target):
            raise TargetDirectoryError(f"Target is not a directory: {target}")
        if os.path.isdir(target) and os.listdir(target):
            raise TargetDirectoryError(
                f"Target directory is not empty: {target}\n"
                "Scaffolding into an existing project is not supported."
            )
        try:
            os.makedirs(target, exist_ok=True)
        except OSError as exc:
            raise FileOperationError(f"Could not create {target}: {exc}", path=target) from exc

    def _provision_bucket(self):
        result = self._deps.provisioner.provision(self._opts.bucket_name)
        if not result.created:
            self._echo(f"⚠️  {result.advisory}")
            self._echo()
            return None
        return result.bucket

    def _print_plan(self):
        target = self._opts.target_directory
        self._echo(f"Target: {target}")
        self._echo(f"Run: {' '.join(STARTER_INIT_COMMAND)}")
        self._echo(f"Run: {' '.join(CMS_INSTALL_COMMAND)}")
        self._echo(f"Download: {self._opts.scripts_url}")
        self._echo(f"Run: {' '.join(unzip_command('<archive>', '<scratch>'))}")
        if self._opts.wants_bucket:
            self._echo(f"Bucket: {self._opts.bucket_name}")
