"""
Lazy handle on a single sequence in a BLAST database.

Nothing but the defline is read when a handle is created. The whole sequence
is retrieved the first time it is needed and kept for the life of the
handle. Truncations are retrieved afresh on every call and never cached.
"""

import logging
import threading
from typing import Optional, Union

from Bio.SeqRecord import SeqRecord

from lazyblastdb.errors import (
    ImmutableSequenceError,
    InconsistentMetadataError,
    SequenceNotFoundError,
)
from lazyblastdb.ingest import ingest
from lazyblastdb.stores import (
    READ_ONLY_ATTRIBUTES,
    ChunkedSequence,
    ContiguousSequence,
    check_range,
)

ALPHABETS = {'nucleotide': 'dna', 'protein': 'protein'}


class LazySequence:
    """
    A sequence whose residues are fetched from its database on demand.

    Handles are normally obtained from ``BlastDatabase.get_sequence`` or
    ``LazySequence.from_database``, which return None for unknown
    identifiers.

    Parameters
    ----------
    id : str
        Sequence identifier.
    database : BlastDatabase
        Database the sequence belongs to.
    description : str, optional
        Description from the defline.
    """

    def __init__(self, id: str, database, description: Optional[str] = None):
        if not id:
            raise ValueError('must give id!')
        if database is None:
            raise ValueError('must give database!')
        object.__setattr__(self, '_id', id)
        object.__setattr__(self, '_description', description)
        self._database = database
        self._whole_seq: Optional[ChunkedSequence] = None
        self._whole_seq_lock = threading.Lock()

    @classmethod
    def from_database(cls, database, id: str) -> Optional['LazySequence']:
        """
        Create a handle, reading its description from the database.

        A single residue is retrieved to obtain the defline.

        Parameters
        ----------
        database : BlastDatabase
            Database to read from.
        id : str
            Sequence identifier.

        Returns
        -------
        LazySequence or None
            The handle, or None if the identifier is not in the database.
        """
        # Fetch one residue just to read the defline
        handle = cls(id, database)
        first_residue = handle.trunc(1, 1)
        if first_residue is None:
            logging.debug(f'No sequence {id} in {database.full_file_basename}')
            return None
        object.__setattr__(handle, '_description', first_residue.description)
        return handle

    def __setattr__(self, name, value):
        if name in READ_ONLY_ATTRIBUTES:
            raise ImmutableSequenceError(type(self).__name__, name)
        object.__setattr__(self, name, value)

    @property
    def id(self) -> str:
        return self._id

    display_id = id
    primary_id = id

    @property
    def description(self) -> Optional[str]:
        return self._description

    desc = description

    @property
    def accession_number(self) -> str:
        return 'unknown'

    @property
    def database(self):
        return self._database

    def whole_seq(self) -> ChunkedSequence:
        """
        Return the fully materialised sequence, retrieving it on first use.

        The size of a whole sequence is not known before it is read, so it is
        always stored in pages.

        Raises
        ------
        SequenceNotFoundError
            If the entry has disappeared from the database since the handle
            was created.
        """
        if self._whole_seq is None:
            with self._whole_seq_lock:
                if self._whole_seq is None:
                    with self._database.retrieve(self._id) as stream:
                        seq = ingest(stream, None)
                    if seq is None:
                        raise SequenceNotFoundError(
                            self._id, self._database.full_file_basename
                        )
                    self._whole_seq = seq
        return self._whole_seq

    @property
    def seq(self) -> str:
        return self.whole_seq().seq

    def sequence_text(self) -> str:
        """Return the full residue string."""
        return self.seq

    @property
    def length(self) -> int:
        """
        Number of residues.

        The retrieval tools offer no length query, so this reads the whole
        sequence.
        """
        return self.whole_seq().length

    def __len__(self) -> int:
        return self.length

    def trunc(
        self, start: int, end: int
    ) -> Union[ChunkedSequence, ContiguousSequence, None]:
        """
        Retrieve a 1-based inclusive range of the sequence.

        Every call runs a new retrieval; the whole-sequence cache is neither
        read nor filled. Ranges over 4,000,000 residues are stored in pages.

        Parameters
        ----------
        start : int
            First position, 1-based.
        end : int
            Last position, inclusive.

        Returns
        -------
        ChunkedSequence, ContiguousSequence or None
            The range, or None if the entry is not in the database.

        Raises
        ------
        InvalidRangeError
            If ``start > end`` or ``start < 1``.
        """
        check_range(start, end)
        start, end = int(start), int(end)

        # Requested span decides the representation
        with self._database.retrieve(self._id, start, end) as stream:
            return ingest(stream, end - start + 1)

    def subseq(self, start: int, end: int) -> str:
        """Return the residues of a 1-based inclusive range."""
        truncated = self.trunc(start, end)
        if truncated is None:
            raise SequenceNotFoundError(self._id, self._database.full_file_basename)
        return truncated.seq

    subsequence_text = subseq

    @property
    def alphabet(self) -> Optional[str]:
        """
        'dna' or 'protein', from the database molecule type.

        Returns None if the database type is not known.

        Raises
        ------
        InconsistentMetadataError
            If the database type is neither nucleotide nor protein.
        """
        mol_type = self._database.type
        if not mol_type:
            return None
        try:
            return ALPHABETS[mol_type]
        except KeyError as exc:
            raise InconsistentMetadataError(
                mol_type, self._database.full_file_basename
            ) from exc

    def to_seqrecord(self) -> SeqRecord:
        """Return the whole sequence as a Biopython ``SeqRecord``."""
        record = self.whole_seq().to_seqrecord()
        record.description = self.description or ''
        return record

    def __repr__(self):
        return f'LazySequence(id={self._id!r}, database={self._database!r})'
