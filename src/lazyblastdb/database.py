"""
BLAST database lookup.

A ``BlastDatabase`` knows where the database files live and what kind of
molecules they hold. It hands out lazy sequence handles and opens retrieval
streams on their behalf.
"""

from contextlib import contextmanager
import logging
from pathlib import Path
import re
from typing import Iterator, List, Optional, Union

from lazyblastdb.retrieval import CommandRetriever, RetrievalRequest, ToolOutput
from lazyblastdb.sequence import LazySequence

# Index, sequence and header extensions for each molecule type
NUCLEOTIDE_EXTENSIONS = ('nin', 'nsq', 'nhr')
PROTEIN_EXTENSIONS = ('pin', 'psq', 'phr')
ALIAS_EXTENSIONS = {'nal': 'nucleotide', 'pal': 'protein'}

# Any file belonging to a database, optionally split into numbered volumes
DB_FILE_RE = re.compile(r'^(?P<base>.+?)(?:\.\d{2,3})?\.(?P<ext>[np][a-z]{2})$')

MOL_TYPES = {
    **{ext: 'nucleotide' for ext in NUCLEOTIDE_EXTENSIONS},
    **{ext: 'protein' for ext in PROTEIN_EXTENSIONS},
    **ALIAS_EXTENSIONS,
}


def normalize_basename(path: Union[str, Path]) -> str:
    """
    Strip a BLAST database extension (and volume number) from a path.

    Examples
    --------
    >>> normalize_basename('dbs/nt.00.nsq')
    'dbs/nt'
    >>> normalize_basename('dbs/swissprot')
    'dbs/swissprot'
    """
    path = Path(path)
    match = DB_FILE_RE.match(path.name)
    if match and match.group('ext') in MOL_TYPES:
        return str(path.with_name(match.group('base')))
    return str(path)


def database_files(full_file_basename: Union[str, Path]) -> List[Path]:
    """
    Find the files that make up a database.

    Parameters
    ----------
    full_file_basename : str or Path
        Database path without extension.

    Returns
    -------
    List[Path]
        Sorted list of existing files with a known BLAST extension.
    """
    base = Path(full_file_basename)
    if not base.parent.is_dir():
        return []

    files = []
    for candidate in base.parent.iterdir():
        match = DB_FILE_RE.match(candidate.name)
        if (
            match
            and match.group('base') == base.name
            and match.group('ext') in MOL_TYPES
            and candidate.is_file()
        ):
            files.append(candidate)
    return sorted(files)


def guess_type(files: List[Path]) -> Optional[str]:
    """
    Infer the molecule type from database file extensions.

    Returns
    -------
    str or None
        'nucleotide', 'protein', or None if the files are missing or mixed.
    """
    types = {MOL_TYPES[DB_FILE_RE.match(f.name).group('ext')] for f in files}
    if len(types) == 1:
        return types.pop()
    if len(types) > 1:
        logging.warning(f'Database files of mixed molecule types: {types}')
    return None


class BlastDatabase:
    """
    A BLAST database from which sequences are retrieved lazily.

    Parameters
    ----------
    full_file_basename : str or Path
        Database path without extension, as passed to the retrieval tool.
    type : str, optional
        Molecule type, normally 'nucleotide' or 'protein'.
    retriever : CommandRetriever, optional
        Object whose ``open(request)`` yields the tool output stream.
        Defaults to a ``CommandRetriever`` configured from the environment.
    """

    def __init__(
        self,
        full_file_basename: Union[str, Path],
        type: Optional[str] = None,
        retriever: Optional[CommandRetriever] = None,
    ):
        self.full_file_basename = str(full_file_basename)
        self.type = type
        self.retriever = retriever if retriever is not None else CommandRetriever()

    @classmethod
    def open(
        cls,
        path: Union[str, Path],
        type: Optional[str] = None,
        retriever: Optional[CommandRetriever] = None,
    ) -> 'BlastDatabase':
        """
        Open an existing database on disk.

        Parameters
        ----------
        path : str or Path
            Database basename, or the path of any one of its files.
        type : str, optional
            Molecule type. Inferred from the file extensions if not given.
        retriever : CommandRetriever, optional
            Retrieval backend.

        Returns
        -------
        BlastDatabase
            The opened database.

        Raises
        ------
        FileNotFoundError
            If no database files exist for the basename.
        """
        # Accept the path of any database file as well as the basename
        basename = normalize_basename(path)
        files = database_files(basename)
        if not files:
            raise FileNotFoundError(f'BLAST database not found: {basename}')

        if type is None:
            type = guess_type(files)
        logging.info(f'Opened {type or "untyped"} BLAST database {basename}')
        return cls(basename, type=type, retriever=retriever)

    def list_files(self) -> List[Path]:
        """Return the files belonging to this database."""
        return database_files(self.full_file_basename)

    def files_are_complete(self) -> bool:
        """
        Check that index, sequence and header files are all present.

        An alias file (.nal/.pal) on its own also counts as complete.
        """
        extensions = {
            DB_FILE_RE.match(f.name).group('ext') for f in self.list_files()
        }
        # Alias files point at other databases
        if extensions & set(ALIAS_EXTENSIONS):
            return True
        return any(
            set(required) <= extensions
            for required in (NUCLEOTIDE_EXTENSIONS, PROTEIN_EXTENSIONS)
        )

    @contextmanager
    def retrieve(
        self,
        identifier: str,
        start: Optional[int] = None,
        end: Optional[int] = None,
    ) -> Iterator[ToolOutput]:
        """Yield the retrieval tool output for an entry or a range of it."""
        request = RetrievalRequest(self.full_file_basename, identifier, start, end)
        with self.retriever.open(request) as stream:
            yield stream

    def get_sequence(self, identifier: str) -> Optional[LazySequence]:
        """
        Return a lazy handle for a sequence in this database.

        Parameters
        ----------
        identifier : str
            Sequence identifier.

        Returns
        -------
        LazySequence or None
            The handle, or None if the database has no such entry.
        """
        return LazySequence.from_database(self, identifier)

    def __repr__(self):
        return f'BlastDatabase({self.full_file_basename!r}, type={self.type!r})'
