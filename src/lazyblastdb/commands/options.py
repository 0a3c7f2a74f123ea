"""
Options shared by the lazyblastdb sub-commands.
"""

import click

from lazyblastdb.database import BlastDatabase
from lazyblastdb.retrieval import SUPPORTED_TOOLS, CommandRetriever


def database_options(func):
    """Add the database, identifier and retrieval tool options to a command."""
    decorators = [
        click.argument('db', type=str),
        click.argument('seq_id', metavar='ID', type=str),
        click.option(
            '--tool',
            type=click.Choice(SUPPORTED_TOOLS),
            default=None,
            help='Retrieval tool to run. Default: $LAZYBLASTDB_TOOL or blastdbcmd.',
        ),
        click.option(
            '--executable',
            type=click.Path(dir_okay=False),
            default=None,
            help='Path to the retrieval tool. Default: found on PATH.',
        ),
        click.option(
            '--db-type',
            type=click.Choice(['nucleotide', 'protein']),
            default=None,
            help='Molecule type of the database. Default: inferred from file extensions.',
        ),
        click.option(
            '--log-level',
            default='WARNING',
            type=click.Choice(
                ['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False
            ),
            help='Logging level (default: WARNING).',
        ),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def open_database(db, tool=None, executable=None, db_type=None):
    """
    Open a database for a sub-command, reporting failures as click errors.

    Raises
    ------
    click.ClickException
        If the database files cannot be found or the tool is not supported.
    """
    try:
        retriever = CommandRetriever(tool=tool, executable=executable)
        return BlastDatabase.open(db, type=db_type, retriever=retriever)
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e)) from e
