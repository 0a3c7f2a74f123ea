"""Unit tests for lazyblastdb.ingest module.

Tests representation selection and whitespace handling while streaming
retrieval tool output.
"""

import io

import pytest

from lazyblastdb.errors import MalformedOutputError
from lazyblastdb.ingest import (
    CHUNK_SIZE,
    LARGE_SEQUENCE_THRESHOLD,
    ingest,
    parse_large_seq,
    parse_small_seq,
    strip_whitespace,
    use_chunked,
)
from lazyblastdb.stores import ChunkedSequence, ContiguousSequence


def tool_output(header, body):
    """Build a binary stream of retrieval tool output."""
    return io.BytesIO((header + '\n' + body).encode('ascii'))


class TestStripWhitespace:
    """Test strip_whitespace function."""

    def test_line_breaks(self):
        """Test wrapped lines are joined."""
        assert strip_whitespace(b'ACGT\nACGT\n') == 'ACGTACGT'

    def test_all_whitespace_kinds(self):
        """Test spaces, tabs and carriage returns are removed."""
        assert strip_whitespace(b'AC GT\tA\r\nC \x0b\x0c') == 'ACGTAC'

    def test_str_input(self):
        """Test text input is handled too."""
        assert strip_whitespace(' AC\nGT ') == 'ACGT'

    def test_only_whitespace(self):
        """Test a block of pure whitespace strips to nothing."""
        assert strip_whitespace(b'\n\n  \n') == ''

    def test_non_ascii_bytes(self):
        """Test non-ASCII bytes are reported as malformed output."""
        with pytest.raises(MalformedOutputError):
            strip_whitespace(b'ACGT\xe9\n')


class TestUseChunked:
    """Test the representation threshold."""

    def test_unbounded_is_chunked(self):
        """Test whole-sequence requests always use pages."""
        assert use_chunked(None)

    def test_threshold_boundary(self):
        """Test exactly the threshold is contiguous and one more is chunked."""
        assert LARGE_SEQUENCE_THRESHOLD == 4_000_000
        assert not use_chunked(4_000_000)
        assert use_chunked(4_000_001)

    def test_small_span(self):
        """Test a one-residue span is contiguous."""
        assert not use_chunked(1)


class TestIngest:
    """Test ingest function."""

    def test_small_span_is_contiguous(self):
        """Test a small requested span produces a contiguous sequence."""
        seq = ingest(tool_output('>seq2 Example protein', 'MKTA\nYIAK\n'), 8)
        assert isinstance(seq, ContiguousSequence)
        assert seq.id == 'seq2'
        assert seq.description == 'Example protein'
        assert seq.seq == 'MKTAYIAK'

    def test_unbounded_is_chunked(self):
        """Test a whole-sequence request produces a chunked sequence."""
        seq = ingest(tool_output('>lcl|seq1 No definition line found.', 'ACGT\nACGT\n'), None)
        assert isinstance(seq, ChunkedSequence)
        assert seq.frozen
        assert seq.id == 'seq1'
        assert seq.description is None
        assert seq.seq == 'ACGTACGT'

    def test_threshold_selects_representation(self):
        """Test the requested span, not the data size, picks the representation."""
        body = 'ACGT\n'
        small = ingest(tool_output('>seq1 d', body), LARGE_SEQUENCE_THRESHOLD)
        large = ingest(tool_output('>seq1 d', body), LARGE_SEQUENCE_THRESHOLD + 1)
        assert isinstance(small, ContiguousSequence)
        assert isinstance(large, ChunkedSequence)
        assert small == large

    def test_chunked_and_contiguous_agree(self):
        """Test both paths give the same residues for the same bytes."""
        body = 'ACGTTGCA\n' * 20 + 'AC GT\n'
        contiguous = parse_small_seq(tool_output('>seq1 d', body))
        chunked = parse_large_seq(tool_output('>seq1 d', body), chunk_size=7)
        assert chunked.page_count > 1
        assert ''.join(chunked.pages) == contiguous.seq

    def test_small_chunks_never_leave_whitespace(self):
        """Test chunk boundaries falling on line breaks leave no empty pages."""
        body = 'ACGT\n' * 10
        chunked = parse_large_seq(tool_output('>seq1 d', body), chunk_size=5)
        assert chunked.page_count == 10
        assert all(chunked.pages)
        assert chunked.seq == 'ACGT' * 10

    def test_large_sequence_spans_multiple_pages(self):
        """Test residue data larger than one chunk is paged."""
        residues = 'ACGTA' * 1_000_000 + 'C'
        assert len(residues) == 5_000_001
        body = '\n'.join(residues[i : i + 80] for i in range(0, len(residues), 80))
        seq = ingest(tool_output('>lcl|big Big sequence', body), None)

        assert isinstance(seq, ChunkedSequence)
        assert seq.page_count >= 2
        assert seq.length == 5_000_001
        assert seq.subseq(CHUNK_SIZE - 2, CHUNK_SIZE + 2) == residues[CHUNK_SIZE - 3 : CHUNK_SIZE + 2]
        assert seq.seq == residues

    def test_not_found_returns_none(self):
        """Test a not-found message yields no representation."""
        stream = io.BytesIO(b'ERROR: Entry "XYZ" not found\n')
        assert ingest(stream, None) is None
        stream = io.BytesIO(b'ERROR: Entry "XYZ" not found\n')
        assert ingest(stream, 10) is None

    def test_malformed_output_raises(self):
        """Test an unparseable first line is fatal."""
        with pytest.raises(MalformedOutputError):
            ingest(io.BytesIO(b'Segmentation fault\n'), None)
        with pytest.raises(MalformedOutputError):
            ingest(io.BytesIO(b''), 5)

    def test_empty_body(self):
        """Test a defline followed by no residues."""
        seq = ingest(io.BytesIO(b'>seq1 empty\n'), None)
        assert seq.length == 0
        assert seq.page_count == 0

    @pytest.mark.parametrize('span_length', [5, None])
    def test_non_ascii_body_is_malformed(self, span_length):
        """Test stray non-ASCII output in the body fails on both paths."""
        stream = io.BytesIO(b'>seq1 d\nACGT\xe9\n')
        with pytest.raises(MalformedOutputError) as exc_info:
            ingest(stream, span_length)
        assert 'ACGT' in exc_info.value.line
