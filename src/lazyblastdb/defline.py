"""
Parsing of the first line emitted by a BLAST database retrieval tool.

The first line is either a FASTA defline for the requested entry or an
error message saying the entry does not exist.
"""

import logging
import re
from typing import NamedTuple, Optional, Union

from lazyblastdb.errors import MalformedOutputError

# >lcl|seq1 description text
DEFLINE_RE = re.compile(r'^>(?:lcl\|)?(\S+)(?:\s+(.*?))?\s*$')

# fastacmd: ERROR: Entry "XYZ" not found
# blastdbcmd: Error: [blastdbcmd] Entry not found: XYZ
NOT_FOUND_RES = (
    re.compile(r'^\s*ERROR:\s+Entry\s*"[^"]+"\s+not found'),
    re.compile(r'^\s*Error:.*Entry not found'),
)

NO_DEFLINE_RE = re.compile(r'^No definition line found\.?$')


class Defline(NamedTuple):
    """Identifier and optional description from a FASTA header."""

    id: str
    description: Optional[str]


def is_not_found(line: str) -> bool:
    """
    Check whether a line is a retrieval tool "entry not found" message.

    Parameters
    ----------
    line : str
        First line of tool output.

    Returns
    -------
    bool
        True if the line reports a missing entry.
    """
    return any(pattern.match(line) for pattern in NOT_FOUND_RES)


def parse_defline(line: Union[str, bytes]) -> Optional[Defline]:
    """
    Parse the first line of retrieval tool output.

    Parameters
    ----------
    line : str or bytes
        First line of output, with or without its line terminator.

    Returns
    -------
    Defline or None
        Parsed identifier and description, or None when the tool reported
        that the entry was not found.

    Raises
    ------
    MalformedOutputError
        If the line is neither a defline nor a not-found message.

    Examples
    --------
    >>> parse_defline('>lcl|seq1 No definition line found.')
    Defline(id='seq1', description=None)
    >>> parse_defline('>seq2 Example protein')
    Defline(id='seq2', description='Example protein')
    """
    if isinstance(line, bytes):
        line = line.decode('ascii', errors='replace')

    # A defline always wins, whatever its description says
    match = DEFLINE_RE.match(line.rstrip('\r\n'))
    if not match:
        if is_not_found(line):
            logging.debug(f'Entry not found: {line.strip()}')
            return None
        raise MalformedOutputError(line)

    seq_id, description = match.groups()
    if not description or NO_DEFLINE_RE.match(description):
        description = None

    return Defline(seq_id, description)
