"""cli command reconciling the manifest version against branch history"""

from pathlib import Path
from typing import Optional

import click

from versionguard.cli.error_formatting import format_fatal_error
from versionguard.cli.outputs import write_outputs
from versionguard.cli.utils.args import resolve_manifest
from versionguard.cli.utils.logging import logger, running_in_actions
from versionguard.config import ConfigAccessor
from versionguard.versioning import (
    GitContext,
    GitHistoryProvider,
    Manifest,
    Reconciler,
    VersioningError,
)


@click.command(name="check")
@click.option(
    "--branch",
    "-b",
    default=None,
    envvar="VERSIONGUARD_BRANCH",
    help="Branch whose history the version is checked against.",
)
@click.option(
    "--manifest",
    "-m",
    default=None,
    help="Manifest holding the version, relative to the repository root.",
)
@click.option(
    "--repo",
    default=".",
    show_default=True,
    type=click.Path(exists=True, file_okay=False),
    help="Path to the git working tree.",
)
@click.option(
    "--max-commits",
    type=click.IntRange(min=1),
    default=None,
    help="How many commits of the branch history to scan.",
)
@click.option("--commit-message", default=None, help="Template for the bump commit.")
@click.option("--author-name", default=None, help="Override the commit author name.")
@click.option("--author-email", default=None, help="Override the commit author email.")
@click.option(
    "--token",
    envvar="GITHUB_TOKEN",
    default=None,
    help="Token used to push to GitHub remotes.",
)
@click.option("--remote", default=None, help="Remote to fetch from and push to.")
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Report the correction without writing, committing or pushing.",
)
@click.option(
    "--explain",
    is_flag=True,
    default=False,
    help="Log every scanned commit with the version found in it.",
)
@click.option(
    "--outputs",
    "outputs_path",
    type=click.Path(dir_okay=False),
    envvar="GITHUB_OUTPUT",
    default=None,
    help="File the run outputs are appended to.",
)
@click.pass_context
def check(
    ctx,
    branch: Optional[str],
    manifest: Optional[str],
    repo: str,
    max_commits: Optional[int],
    commit_message: Optional[str],
    author_name: Optional[str],
    author_email: Optional[str],
    token: Optional[str],
    remote: Optional[str],
    dry_run: bool,
    explain: bool,
    outputs_path: Optional[str],
):
    """Check the manifest version against branch history and fix it if needed.

    The version must be greater than the most recent different version on the
    branch, and must not be reused across commits. Otherwise it is bumped,
    committed, tagged and pushed.
    """
    repo_path = Path(repo)
    config = ConfigAccessor(project_dir=repo_path)

    branch = branch or config.get("check", "branch")
    manifest = manifest or config.get("check", "manifest")
    max_commits = max_commits or config.getint("check", "max_commits", 100)
    commit_message = commit_message or config.get("check", "commit_message")
    remote = remote or config.get("check", "remote")
    tag_prefix = config.get("check", "tag_prefix", "v")

    context = GitContext(
        token=token,
        author_name=author_name or config.get("author", "name"),
        author_email=author_email or config.get("author", "email"),
        remote=remote,
    )
    color = not running_in_actions()

    logger.info(f"Checking version in {manifest} against {branch} branch...")

    try:
        provider = GitHistoryProvider(repo_path, context)
        manifest_file = resolve_manifest(repo_path, manifest)

        if dry_run:
            provider.widen(branch)
        else:
            provider.prepare(branch)

        reconciler = Reconciler(
            Manifest(manifest_file),
            provider,
            manifest_path=provider.relative_path(manifest_file),
            commit_message=commit_message,
            tag_prefix=tag_prefix,
        )
        outcome = reconciler.run(branch, max_commits=max_commits, dry_run=dry_run)
    except VersioningError as e:
        logger.error(format_fatal_error(e, color=color))
        ctx.exit(1)

    if explain:
        logger.info(f"History of {branch}, newest first:")
        for observation in outcome.observations:
            logger.info(f"  {observation.describe()}")

    outputs = outcome.as_outputs()
    if outputs_path:
        write_outputs(outputs, outputs_path)

    for name, value in outputs.items():
        logger.info(f"{name}: {value}")

    if outcome.updated:
        logger.info(
            f"Version has been auto-incremented and committed: {outcome.new_version}"
        )
