"""
Streaming ingest of retrieval tool output into a sequence representation.

The representation is chosen from the length of the span that was requested,
since the real size of the data is not known until it has all been read.
Requests for a whole sequence are treated as large.
"""

import logging
from typing import BinaryIO, Optional, Union

from lazyblastdb.defline import parse_defline
from lazyblastdb.errors import MalformedOutputError
from lazyblastdb.stores import ChunkedSequence, ContiguousSequence

# Spans longer than this many residues are stored in pages
LARGE_SEQUENCE_THRESHOLD = 4_000_000

# Bytes read from the stream per page on the chunked path
CHUNK_SIZE = 4_000_000


def use_chunked(span_length: Optional[int]) -> bool:
    """
    Decide whether a requested span should be stored in pages.

    Parameters
    ----------
    span_length : int or None
        Number of residues requested, or None for a whole sequence.

    Returns
    -------
    bool
        True for unbounded requests and for spans over the threshold.
    """
    return span_length is None or span_length > LARGE_SEQUENCE_THRESHOLD


def strip_whitespace(data: Union[bytes, str]) -> str:
    """
    Remove all whitespace from a block of sequence data.

    Raises
    ------
    MalformedOutputError
        If the data contains non-ASCII bytes.

    Examples
    --------
    >>> strip_whitespace(b'ACGT\\nAC GT\\r\\n')
    'ACGTACGT'
    """
    if isinstance(data, bytes):
        residues = b''.join(data.split())
        try:
            return residues.decode('ascii')
        except UnicodeDecodeError as exc:
            # Residues are always ASCII, anything else is stray tool output
            raise MalformedOutputError(
                residues.decode('ascii', errors='replace')
            ) from exc
    return ''.join(data.split())


def parse_large_seq(
    stream: BinaryIO, chunk_size: int = CHUNK_SIZE
) -> Optional[ChunkedSequence]:
    """
    Read a defline and stream the residues that follow into pages.

    At most ``chunk_size`` bytes are read at a time, so peak working memory
    stays around one chunk regardless of the sequence size.

    Parameters
    ----------
    stream : BinaryIO
        Retrieval tool output.
    chunk_size : int, optional
        Maximum number of bytes read per page.

    Returns
    -------
    ChunkedSequence or None
        Frozen chunked sequence, or None if the entry was not found.
    """
    defline = parse_defline(stream.readline())
    if defline is None:
        return None

    # Read fixed-size increments until the tool closes its output
    seq = ChunkedSequence(defline.id, defline.description)
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        seq.append(strip_whitespace(chunk))

    logging.debug(
        f'Read {seq.length} residues of {seq.id} into {seq.page_count} pages'
    )
    return seq.freeze()


def parse_small_seq(stream: BinaryIO) -> Optional[ContiguousSequence]:
    """
    Read a defline and slurp the residues that follow into one string.

    Parameters
    ----------
    stream : BinaryIO
        Retrieval tool output.

    Returns
    -------
    ContiguousSequence or None
        Contiguous sequence, or None if the entry was not found.
    """
    defline = parse_defline(stream.readline())
    if defline is None:
        return None

    # Span is small, so slurp the rest of the output
    seq = ContiguousSequence(
        defline.id, defline.description, strip_whitespace(stream.read())
    )
    logging.debug(f'Read {seq.length} residues of {seq.id} contiguously')
    return seq


def ingest(
    stream: BinaryIO,
    span_length: Optional[int],
    chunk_size: int = CHUNK_SIZE,
) -> Union[ChunkedSequence, ContiguousSequence, None]:
    """
    Parse retrieval tool output into the representation suited to the span.

    Parameters
    ----------
    stream : BinaryIO
        Retrieval tool output, positioned at the defline.
    span_length : int or None
        Number of residues requested, or None for a whole sequence.
    chunk_size : int, optional
        Maximum number of bytes read per page on the chunked path.

    Returns
    -------
    ChunkedSequence, ContiguousSequence or None
        The sequence, or None if the tool reported that the entry does not
        exist.

    Raises
    ------
    MalformedOutputError
        If the first line of output cannot be parsed.
    """
    if use_chunked(span_length):
        return parse_large_seq(stream, chunk_size=chunk_size)
    return parse_small_seq(stream)
