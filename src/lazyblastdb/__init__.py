"""
Lazy, memory-bounded access to sequences stored in BLAST databases.
"""

from lazyblastdb._version import __version__
from lazyblastdb.database import BlastDatabase
from lazyblastdb.errors import (
    ImmutableSequenceError,
    InconsistentMetadataError,
    InvalidRangeError,
    LazyBlastDBError,
    MalformedOutputError,
    RetrievalError,
    SequenceNotFoundError,
)
from lazyblastdb.sequence import LazySequence
from lazyblastdb.stores import ChunkedSequence, ContiguousSequence

__all__ = [
    '__version__',
    'BlastDatabase',
    'ChunkedSequence',
    'ContiguousSequence',
    'ImmutableSequenceError',
    'InconsistentMetadataError',
    'InvalidRangeError',
    'LazyBlastDBError',
    'LazySequence',
    'MalformedOutputError',
    'RetrievalError',
    'SequenceNotFoundError',
]
