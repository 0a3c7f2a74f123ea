"""
Pytest configuration and fixtures for lazyblastdb tests.
"""

from contextlib import contextmanager
import io
from pathlib import Path
import tempfile

import pytest

from lazyblastdb.database import BlastDatabase


def wrap_residues(residues, width=60):
    """Format residues as fixed-width lines, as the retrieval tools do."""
    return ''.join(
        residues[i : i + width] + '\n' for i in range(0, len(residues), width)
    )


class FakeRetriever:
    """
    Stand-in for CommandRetriever that serves canned fastacmd-style output.

    Parameters
    ----------
    sequences : dict
        Mapping of identifier to (description, residues). A description of
        None is emitted as the 'No definition line found.' placeholder.
    width : int
        Line width used to wrap residues.
    """

    def __init__(self, sequences, width=60):
        self.sequences = sequences
        self.width = width
        self.requests = []

    def output_for(self, request):
        entry = self.sequences.get(request.identifier)
        if entry is None:
            return f'ERROR: Entry "{request.identifier}" not found\n'

        description, residues = entry
        if request.start is not None:
            residues = residues[request.start - 1 : request.end]
        title = description if description is not None else 'No definition line found.'
        header = f'>lcl|{request.identifier} {title}\n'
        return header + wrap_residues(residues, self.width)

    @contextmanager
    def open(self, request):
        self.requests.append(request)
        yield io.BytesIO(self.output_for(request).encode('ascii'))


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def sample_sequences():
    """Sequences served by the fake retriever."""
    return {
        'seq1': (None, 'ACGTACGTTTGACCATGA' * 10),
        'seq2': ('Example protein', 'MKTAYIAKQRQISFVKSHFSRQ'),
        'chr1': ('Chromosome 1 test fragment', 'GATTACA' * 50),
    }


@pytest.fixture
def fake_retriever(sample_sequences):
    """Fake retriever over the sample sequences."""
    return FakeRetriever(sample_sequences)


@pytest.fixture
def nucleotide_db(fake_retriever):
    """Nucleotide database backed by the fake retriever."""
    return BlastDatabase('dbs/test', type='nucleotide', retriever=fake_retriever)


@pytest.fixture
def create_db_files(temp_dir):
    """Create empty BLAST database files with the given extensions."""

    def _create(basename, extensions):
        for ext in extensions:
            (temp_dir / f'{basename}.{ext}').touch()
        return temp_dir / basename

    return _create
