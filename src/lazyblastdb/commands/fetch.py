"""
Fetch sub-command: write a sequence, or a range of it, as FASTA.
"""

import logging
import sys

from Bio.SeqIO.FastaIO import FastaWriter
import click

from lazyblastdb.commands.options import database_options, open_database
from lazyblastdb.errors import LazyBlastDBError
from lazyblastdb.logs import init_logging


@click.command('fetch', help='Write a sequence from a BLAST database as FASTA.')
@database_options
@click.option('--start', type=click.IntRange(min=1), help='First position, 1-based.')
@click.option('--end', type=click.IntRange(min=1), help='Last position, inclusive.')
@click.option(
    '--line-width',
    default=60,
    type=click.IntRange(min=0),
    help='Residues per line of FASTA output, 0 for no wrapping. Default: 60',
)
def fetch_cmd(
    db, seq_id, tool, executable, db_type, log_level, start, end, line_width
):
    """
    Write a sequence from a BLAST database to stdout as FASTA.

    Parameters
    ----------
    db : str
        Database basename, or the path of one of its files.
    seq_id : str
        Sequence identifier.
    tool : str
        Retrieval tool, 'blastdbcmd' or 'fastacmd'.
    executable : str
        Path to the retrieval tool.
    db_type : str
        Molecule type of the database.
    log_level : str
        Logging level.
    start : int
        First position of the range to fetch.
    end : int
        Last position of the range to fetch.
    line_width : int
        Residues per output line.

    Examples
    --------
    .. code-block:: bash

        lazyblastdb fetch dbs/nt chr1 --start 1000 --end 2000 > region.fa
    """
    # Initialize logging
    init_logging(log_level)

    if (start is None) != (end is None):
        raise click.UsageError('--start and --end must be given together.')

    database = open_database(db, tool=tool, executable=executable, db_type=db_type)

    try:
        handle = database.get_sequence(seq_id)
        if handle is None:
            raise click.ClickException(f'Sequence {seq_id} not found in {db}')

        # Whole sequence, or a fresh retrieval of the requested range
        if start is None:
            record = handle.to_seqrecord()
        else:
            truncated = handle.trunc(start, end)
            if truncated is None:
                raise click.ClickException(f'Sequence {seq_id} not found in {db}')
            record = truncated.to_seqrecord()
            logging.info(f'Fetched {len(record)} residues of {seq_id}')
    except LazyBlastDBError as e:
        logging.error(f'Error fetching {seq_id}: {e}')
        raise click.ClickException(str(e)) from e

    FastaWriter(sys.stdout, wrap=line_width).write_file([record])
