"""Click command for create-craft-site."""

import sys

import click

from craftsite.errors import ScaffoldError
from craftsite.file_transfer import DEFAULT_MAX_REDIRECTS
from craftsite.scripts_installer import DEFAULT_SCRIPTS_URL
from craftsite.site_opts import SiteOpts, resolve_target_directory
from craftsite.site_scaffolder import ScaffolderDeps, SiteScaffolder


@click.command("create-craft-site")
@click.argument("directory", default=".", type=click.Path(file_okay=False))
@click.option("--bucket", is_flag=False, flag_value="", default=None, metavar="[NAME]",
              help="Create a public-read S3 bucket. Without a value the name is derived "
                   "from the directory; pass a name as --bucket=NAME.")
@click.option("--scripts-url", envvar="CRAFTSITE_SCRIPTS_URL", default=DEFAULT_SCRIPTS_URL,
              show_default=True, help="Zip archive containing the scripts/ bundle.")
@click.option("--max-redirects", type=click.IntRange(min=0), default=DEFAULT_MAX_REDIRECTS,
              show_default=True, help="Redirects to follow when downloading.")
@click.option("--dry-run", is_flag=True, help="Show what would be done without making changes")
def main(directory, bucket, scripts_url, max_redirects, dry_run):
    """Create a new Craft CMS website in DIRECTORY (default: current directory)."""
    opts = SiteOpts(
        target_directory=resolve_target_directory(directory),
        bucket=bucket,
        scripts_url=scripts_url,
        max_redirects=max_redirects,
        dry_run=dry_run,
    )
    scaffolder = SiteScaffolder(opts, ScaffolderDeps.for_opts(opts))
    try:
        scaffolder.run()
    except ScaffoldError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
