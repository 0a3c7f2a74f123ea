"""
Info sub-command: summarise a sequence in a BLAST database.
"""

import click

from lazyblastdb.commands.options import database_options, open_database
from lazyblastdb.errors import LazyBlastDBError
from lazyblastdb.logs import init_logging


@click.command(
    'info', help='Print identifier, description, alphabet and length of a sequence.'
)
@database_options
def info_cmd(db, seq_id, tool, executable, db_type, log_level):
    """
    Print a tab separated summary line for one sequence.

    Reporting the length reads the whole sequence, as the retrieval tools
    cannot be asked for it directly.
    """
    init_logging(log_level)
    database = open_database(db, tool=tool, executable=executable, db_type=db_type)

    try:
        handle = database.get_sequence(seq_id)
        if handle is None:
            raise click.ClickException(f'Sequence {seq_id} not found in {db}')
        # Length forces the whole sequence to be read
        fields = [
            handle.id,
            handle.description or '',
            handle.alphabet or '',
            str(handle.length),
        ]
    except LazyBlastDBError as e:
        raise click.ClickException(str(e)) from e

    click.echo('\t'.join(fields))
