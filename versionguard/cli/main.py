"""versionguard CLI"""

import click

from versionguard import __version__
from versionguard.cli.bump import bump
from versionguard.cli.check import check
from versionguard.cli.describe import compare, next_, parse
from versionguard.cli.utils.logging import configure_logging


def _set_debug(ctx, param, value: bool):
    ctx.ensure_object(dict)
    ctx.obj["DEBUG"] = value
    configure_logging(value)
    return value


@click.group()
@click.version_option(__version__, prog_name="versionguard")
@click.option(
    "--debug/--no-debug",
    default=False,
    is_eager=True,
    expose_value=False,
    callback=_set_debug,
    help="Enable debug mode",
)
@click.pass_context
def cli(ctx):
    """
    Keep the manifest version monotonic across commits on a branch.
    """
    ctx.ensure_object(dict)


cli.add_command(check)
cli.add_command(bump)
cli.add_command(parse)
cli.add_command(next_)
cli.add_command(compare)

if __name__ == "__main__":
    cli(obj={})
