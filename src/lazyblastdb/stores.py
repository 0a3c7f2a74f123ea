"""
In-memory sequence representations.

Two representations share one read interface:

* ``ContiguousSequence`` holds the residues in a single string and is used for
  small spans whose size is known before reading.
* ``ChunkedSequence`` holds the residues as an ordered list of pages and is
  used for large spans or for whole sequences of unknown size. Pages are
  appended while the retrieval stream is read, then the object is frozen.

Both are read-only once built.
"""

from abc import ABC, abstractmethod
import bisect
from typing import List, Optional, Tuple

from Bio.Seq import Seq, SequenceDataAbstractBaseClass
from Bio.SeqRecord import SeqRecord

from lazyblastdb.errors import ImmutableSequenceError, InvalidRangeError

READ_ONLY_ATTRIBUTES = frozenset({'id', 'description', 'seq', 'length', 'alphabet'})


def check_range(start: int, end: int) -> None:
    """
    Validate a 1-based inclusive range.

    Raises
    ------
    InvalidRangeError
        If ``start`` is below 1 or greater than ``end``.
    """
    if start < 1 or start > end:
        raise InvalidRangeError(start, end)


class SequenceRepresentation(ABC):
    """
    Read interface shared by the contiguous and chunked representations.

    Coordinates passed to ``subseq`` and ``trunc`` are 1-based and inclusive.
    Ranges running past the end of the sequence are clipped to it.
    """

    def __init__(self, id: str, description: Optional[str] = None):
        object.__setattr__(self, '_id', id)
        object.__setattr__(self, '_description', description)

    def __setattr__(self, name, value):
        if name in READ_ONLY_ATTRIBUTES:
            raise ImmutableSequenceError(type(self).__name__, name)
        object.__setattr__(self, name, value)

    @property
    def id(self) -> str:
        return self._id

    @property
    def description(self) -> Optional[str]:
        return self._description

    desc = description

    @property
    def display_id(self) -> str:
        return self._id

    @property
    def primary_id(self) -> str:
        return self._id

    @property
    def accession_number(self) -> str:
        return 'unknown'

    @property
    @abstractmethod
    def seq(self) -> str:
        """Full residue string."""

    @property
    @abstractmethod
    def length(self) -> int:
        """Number of residues."""

    @abstractmethod
    def _extract(self, begin: int, stop: int) -> str:
        """Return residues in the 0-based half-open interval [begin, stop)."""

    def __len__(self) -> int:
        return self.length

    def __eq__(self, other):
        if not isinstance(other, SequenceRepresentation):
            return NotImplemented
        return (
            self.id == other.id
            and self.description == other.description
            and self.length == other.length
            and self.seq == other.seq
        )

    __hash__ = None

    def subseq(self, start: int, end: int) -> str:
        """
        Return the residues between two 1-based inclusive positions.

        Parameters
        ----------
        start : int
            First position, 1-based.
        end : int
            Last position, inclusive.

        Returns
        -------
        str
            Residue text, clipped to the end of the sequence.
        """
        check_range(start, end)
        return self._extract(start - 1, min(end, self.length))

    def trunc(self, start: int, end: int) -> 'ContiguousSequence':
        """Return a new contiguous representation of a 1-based inclusive range."""
        return ContiguousSequence(self.id, self.description, self.subseq(start, end))

    def to_seq(self) -> Seq:
        """Return the residues as a Biopython ``Seq``."""
        return Seq(self.seq)

    def to_seqrecord(self) -> SeqRecord:
        """
        Return a Biopython ``SeqRecord`` for this sequence.

        Returns
        -------
        SeqRecord
            Record with ``id`` and ``name`` set to the identifier and the
            description set to the description, or an empty string.
        """
        return SeqRecord(
            self.to_seq(),
            id=self.id,
            name=self.id,
            description=self.description or '',
        )

    def __repr__(self):
        return (
            f'{type(self).__name__}(id={self.id!r}, '
            f'description={self.description!r}, length={self.length})'
        )


class ContiguousSequence(SequenceRepresentation):
    """
    A sequence held in a single string.

    Parameters
    ----------
    id : str
        Sequence identifier.
    description : str, optional
        Description from the defline.
    seq : str
        Residues, without whitespace.
    """

    def __init__(self, id: str, description: Optional[str] = None, seq: str = ''):
        super().__init__(id, description)
        object.__setattr__(self, '_seq', seq)

    @property
    def seq(self) -> str:
        return self._seq

    @property
    def length(self) -> int:
        return len(self._seq)

    def _extract(self, begin: int, stop: int) -> str:
        return self._seq[begin:stop]


class ChunkedSequence(SequenceRepresentation):
    """
    A sequence held as an ordered list of pages.

    Pages are added with ``append`` while the sequence is being read and the
    total length is kept up to date as they arrive. Once ``freeze`` is called
    no more pages may be added.

    Parameters
    ----------
    id : str
        Sequence identifier.
    description : str, optional
        Description from the defline.
    """

    def __init__(self, id: str, description: Optional[str] = None):
        super().__init__(id, description)
        self._pages: List[str] = []
        # Start offset of each page within the full sequence
        self._offsets: List[int] = []
        self._length = 0
        self._frozen = False

    def append(self, text: str) -> None:
        """
        Add a page of residues to the end of the sequence.

        Parameters
        ----------
        text : str
            Residues without whitespace. Empty text is ignored.

        Raises
        ------
        ImmutableSequenceError
            If the sequence has been frozen.
        """
        if self._frozen:
            raise ImmutableSequenceError(type(self).__name__, 'seq')
        if not text:
            return
        self._offsets.append(self._length)
        self._pages.append(text)
        self._length += len(text)

    def freeze(self) -> 'ChunkedSequence':
        """Mark the sequence as complete and return it."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def pages(self) -> Tuple[str, ...]:
        return tuple(self._pages)

    @property
    def page_count(self) -> int:
        return len(self._pages)

    @property
    def seq(self) -> str:
        return ''.join(self._pages)

    @property
    def length(self) -> int:
        return self._length

    def _extract(self, begin: int, stop: int) -> str:
        if begin >= stop:
            return ''
        first = bisect.bisect_right(self._offsets, begin) - 1
        last = bisect.bisect_right(self._offsets, stop - 1) - 1
        if first == last:
            offset = self._offsets[first]
            return self._pages[first][begin - offset : stop - offset]

        parts = [self._pages[first][begin - self._offsets[first] :]]
        parts.extend(self._pages[first + 1 : last])
        parts.append(self._pages[last][: stop - self._offsets[last]])
        return ''.join(parts)

    def to_seq(self) -> Seq:
        """Return a Biopython ``Seq`` that reads from the pages on demand."""
        return Seq(PagedSequenceData(self))


class PagedSequenceData(SequenceDataAbstractBaseClass):
    """
    Biopython sequence data backed by a ``ChunkedSequence``.

    Slices are served from the overlapping pages only, so wrapping a large
    chunked sequence in a ``Seq`` does not copy it.
    """

    __slots__ = ('_chunked',)

    def __init__(self, chunked: ChunkedSequence):
        self._chunked = chunked
        super().__init__()

    def __len__(self):
        return self._chunked.length

    def __getitem__(self, key):
        length = self._chunked.length
        if isinstance(key, slice):
            begin, stop, step = key.indices(length)
            if step == 1:
                return self._chunked._extract(begin, max(begin, stop)).encode('ascii')
            return self._chunked.seq.encode('ascii')[key]

        if key < 0:
            key += length
        if not 0 <= key < length:
            raise IndexError('sequence index out of range')
        return ord(self._chunked._extract(key, key + 1))
