"""cli commands describing version strings"""

import click

from versionguard.cli.utils.logging import logger
from versionguard.versioning import (
    VersionFormatError,
    compare_versions,
    next_version,
    parse_version,
    strict_parse_version,
)


@click.command(name="parse")
@click.argument("version")
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Reject anything but x.y.z or x.y.z+build.",
)
@click.pass_context
def parse(ctx, version: str, strict: bool):
    """Show the components of VERSION."""
    if strict:
        try:
            parsed = strict_parse_version(version)
        except VersionFormatError as e:
            logger.error(str(e))
            ctx.exit(1)
    else:
        parsed = parse_version(version)
        if parsed is None:
            logger.error(f"Invalid version: '{version}'")
            ctx.exit(1)

    click.echo(f"major: {parsed.major}")
    click.echo(f"minor: {parsed.minor}")
    click.echo(f"patch: {parsed.patch}")
    click.echo(f"build: {parsed.build}")
    click.echo(f"base: {parsed.base}")
    click.echo(f"canonical: {parsed}")


@click.command(name="next")
@click.argument("version", required=False, default="")
def next_(version: str):
    """Print the corrected version that follows VERSION.

    Patch and build are both incremented; an empty VERSION yields 1.0.0+1.
    """
    click.echo(str(next_version(version)))


@click.command(name="compare")
@click.argument("first")
@click.argument("second")
@click.pass_context
def compare(ctx, first: str, second: str):
    """Compare FIRST with SECOND and print greater, equal or less."""
    a, b = parse_version(first), parse_version(second)
    if a is None or b is None:
        logger.error("Both versions must be non-empty")
        ctx.exit(1)
    click.echo(compare_versions(a, b).name.lower())
