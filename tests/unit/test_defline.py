"""Unit tests for lazyblastdb.defline module."""

import pytest

from lazyblastdb.defline import Defline, is_not_found, parse_defline
from lazyblastdb.errors import MalformedOutputError


class TestParseDefline:
    """Test parse_defline function."""

    def test_local_id_without_definition(self):
        """Test that the placeholder description is treated as absent."""
        assert parse_defline('>lcl|seq1 No definition line found.') == Defline(
            'seq1', None
        )

    def test_plain_id_with_description(self):
        """Test identifier and description without lcl tag."""
        defline = parse_defline('>seq2 Example protein')
        assert defline.id == 'seq2'
        assert defline.description == 'Example protein'

    def test_placeholder_without_period(self):
        """Test placeholder description with no trailing period."""
        assert parse_defline('>seq1 No definition line found\n').description is None

    def test_placeholder_is_case_sensitive(self):
        """Test that a differently cased placeholder is kept as text."""
        defline = parse_defline('>seq1 no definition line found.')
        assert defline.description == 'no definition line found.'

    def test_bytes_input_with_newline(self):
        """Test parsing raw bytes as read from a pipe."""
        defline = parse_defline(b'>lcl|contig_7 Assembled contig 7\r\n')
        assert defline == Defline('contig_7', 'Assembled contig 7')

    def test_gi_style_identifier(self):
        """Test that composite identifiers are kept whole."""
        defline = parse_defline('>gi|12345|ref|NC_000001.1| Homo sapiens chr 1')
        assert defline.id == 'gi|12345|ref|NC_000001.1|'
        assert defline.description == 'Homo sapiens chr 1'

    def test_identifier_only(self):
        """Test a defline with no description at all."""
        assert parse_defline('>seq9\n') == Defline('seq9', None)

    def test_fastacmd_not_found(self):
        """Test fastacmd not-found message returns None."""
        assert parse_defline('ERROR: Entry "XYZ" not found\n') is None

    def test_blastdbcmd_not_found(self):
        """Test blastdbcmd not-found message returns None."""
        line = b'Error: [blastdbcmd] Entry not found: XYZ\n'
        assert parse_defline(line) is None

    def test_description_mentioning_missing_entry(self):
        """Test a defline whose description reads like an error is still a defline."""
        defline = parse_defline('>seq3 Error: knockout, Entry not found in screen\n')
        assert defline == Defline('seq3', 'Error: knockout, Entry not found in screen')

    def test_fastacmd_style_description(self):
        """Test a fastacmd-like message inside a description is kept."""
        defline = parse_defline(b'>lcl|seq4 ERROR: Entry "seq9" not found upstream\n')
        assert defline.id == 'seq4'
        assert defline.description == 'ERROR: Entry "seq9" not found upstream'

    @pytest.mark.parametrize(
        'line',
        [
            '',
            'ACGTACGT\n',
            'BLAST Database error: No alias or index file found\n',
            '> missing identifier\n',
        ],
    )
    def test_malformed_lines(self, line):
        """Test that anything else is a fatal parse failure."""
        with pytest.raises(MalformedOutputError) as exc_info:
            parse_defline(line)
        assert exc_info.value.line == line


class TestIsNotFound:
    """Test is_not_found function."""

    def test_not_found_messages(self):
        """Test recognised not-found messages."""
        assert is_not_found('ERROR: Entry "seq1" not found')
        assert is_not_found('Error: [blastdbcmd] Entry not found in BLAST database')

    def test_defline_is_not_a_not_found_message(self):
        """Test that ordinary deflines are not mistaken for errors."""
        assert not is_not_found('>seq1 Entry for a gene that was not found before')

    def test_message_must_start_the_line(self):
        """Test not-found text later in a line is not a not-found message."""
        assert not is_not_found('warning: Error: Entry not found')
        assert not is_not_found('>seq3 Error: knockout, Entry not found in screen')
