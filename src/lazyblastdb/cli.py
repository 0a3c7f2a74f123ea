"""
Command line entry point for lazyblastdb.
"""

import click

from lazyblastdb._version import __version__
from lazyblastdb.commands.fetch import fetch_cmd
from lazyblastdb.commands.info import info_cmd


@click.group(
    help='Fetch sequences from BLAST databases without loading them whole.',
    invoke_without_command=True,
)
@click.version_option(version=__version__, prog_name='lazyblastdb')
@click.pass_context
def main(ctx):
    """
    Fetch sequences from BLAST databases without loading them whole.

    Parameters
    ----------
    ctx : click.Context
        Click context object.
    """
    ctx.ensure_object(dict)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)


main.add_command(fetch_cmd)
main.add_command(info_cmd)


if __name__ == '__main__':
    main()
