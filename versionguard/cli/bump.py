"""cli command bumping the manifest version from the latest release tag"""

from pathlib import Path
from typing import Optional

import click

from versionguard.cli.error_formatting import format_fatal_error
from versionguard.cli.utils.args import resolve_manifest
from versionguard.cli.utils.logging import logger, running_in_actions
from versionguard.config import ConfigAccessor
from versionguard.versioning import (
    GitContext,
    GitHistoryProvider,
    Manifest,
    ManifestError,
    TagPushError,
    VersioningError,
    parse_version,
    plan_bump,
)
from versionguard.versioning.bump import BUMP_TYPES
from versionguard.versioning.reconciler import (
    DEFAULT_TAG_MESSAGE,
    render_message,
    tag_for,
)


@click.command(name="bump")
@click.option(
    "--type",
    "-t",
    "bump_type",
    type=click.Choice(BUMP_TYPES, case_sensitive=False),
    default="auto",
    show_default=True,
    help="Version component to bump; auto picks it from the latest tag.",
)
@click.option(
    "--from-tags/--no-from-tags",
    default=True,
    show_default=True,
    help="Use the highest release tag as the baseline.",
)
@click.option(
    "--force",
    "-f",
    is_flag=True,
    default=False,
    help="Bump even if there are no tags or the version is already ahead.",
)
@click.option(
    "--dry-run",
    "-d",
    is_flag=True,
    default=False,
    help="Show what would be done without making changes.",
)
@click.option(
    "--tag",
    "create_tag",
    is_flag=True,
    default=False,
    help="Commit the bump, create the release tag and push the tag.",
)
@click.option("--manifest", "-m", default=None, help="Manifest holding the version.")
@click.option(
    "--repo",
    default=".",
    show_default=True,
    type=click.Path(exists=True, file_okay=False),
    help="Path to the git working tree.",
)
@click.option("--token", envvar="GITHUB_TOKEN", default=None, help="Push token.")
@click.pass_context
def bump(
    ctx,
    bump_type: str,
    from_tags: bool,
    force: bool,
    dry_run: bool,
    create_tag: bool,
    manifest: Optional[str],
    repo: str,
    token: Optional[str],
):
    """Bump the manifest version, using the latest release tag as baseline."""
    repo_path = Path(repo)
    config = ConfigAccessor(project_dir=repo_path)
    manifest = manifest or config.get("check", "manifest")
    tag_prefix = config.get("check", "tag_prefix", "v")
    manifest_file = resolve_manifest(repo_path, manifest)
    color = not running_in_actions()

    try:
        store = Manifest(manifest_file)
        raw = store.read_version()
        current = parse_version(raw)
        if current is None:
            raise ManifestError(str(manifest_file), f"unparsable version '{raw}'")
        logger.info(f"Current version in {manifest_file}: {raw}")

        provider = None
        latest = None
        if from_tags or create_tag:
            provider = GitHistoryProvider(
                repo_path,
                GitContext(
                    token=token,
                    author_name=config.get("author", "name"),
                    author_email=config.get("author", "email"),
                    remote=config.get("check", "remote"),
                ),
            )
        staged_path = provider.relative_path(manifest_file) if create_tag else None
        if from_tags:
            latest = provider.latest_tag_version(tag_prefix)
            if latest is None:
                logger.info("No release tags found in repository")
            else:
                logger.info(f"Latest tag: {tag_for(latest, tag_prefix)}")

        plan = plan_bump(current, latest, bump_type, force=force or not from_tags)
        if not plan.needed:
            logger.info(f"No version bump needed: {plan.reason}")
            return

        new_tag = tag_for(plan.new_version, tag_prefix)
        logger.info(f"Version bump: {raw} -> {plan.new_version} ({plan.component})")

        if dry_run:
            logger.info(f"Dry run: would update {manifest_file} to {plan.new_version}")
            if create_tag:
                logger.info(f"Dry run: would create and push tag {new_tag}")
            return

        store.write_version(str(plan.new_version))
        logger.info(f"Updated {manifest_file} to version: {plan.new_version}")

        if create_tag:
            fields = {
                "previous_version": raw,
                "current_version": raw,
                "new_version": str(plan.new_version),
                "tag": new_tag,
            }
            provider.configure_identity()
            provider.configure_auth()
            provider.commit_and_tag(
                [staged_path],
                f"Bump version to {plan.new_version}",
                new_tag,
                render_message(DEFAULT_TAG_MESSAGE, fields),
            )
            try:
                provider.push_tag(new_tag)
            except TagPushError as e:
                logger.warning(str(e))
            else:
                logger.info(f"Created and pushed tag {new_tag}")
    except VersioningError as e:
        logger.error(format_fatal_error(e, color=color))
        ctx.exit(1)
