"""
Running the external BLAST database retrieval tool.

Sequences are extracted with ``blastdbcmd`` from BLAST+ or with the legacy
``fastacmd``. Output is exposed as a binary stream scoped by a context manager
that always reaps the child process, including when the consumer raises.
"""

from contextlib import contextmanager
import logging
import os
import shutil
import subprocess
from typing import BinaryIO, Iterator, List, NamedTuple, Optional

from lazyblastdb.defline import is_not_found
from lazyblastdb.errors import RetrievalError

SUPPORTED_TOOLS = ('blastdbcmd', 'fastacmd')
DEFAULT_TOOL = 'blastdbcmd'

TOOL_ENV_VAR = 'LAZYBLASTDB_TOOL'
EXECUTABLE_ENV_VAR = 'LAZYBLASTDB_EXECUTABLE'


class RetrievalRequest(NamedTuple):
    """
    A request for one entry, or a 1-based inclusive range of it.

    ``start`` and ``end`` are both None for a whole-sequence request.
    """

    database: str
    identifier: str
    start: Optional[int] = None
    end: Optional[int] = None

    @property
    def span_length(self) -> Optional[int]:
        if self.start is None or self.end is None:
            return None
        return self.end - self.start + 1


def find_executable(tool: str) -> Optional[str]:
    """Return the absolute path of a tool on PATH, or None."""
    return shutil.which(tool)


def build_command(
    request: RetrievalRequest,
    tool: str = DEFAULT_TOOL,
    executable: Optional[str] = None,
) -> List[str]:
    """
    Build the argument vector that extracts a request from a database.

    Parameters
    ----------
    request : RetrievalRequest
        Database basename, identifier and optional range.
    tool : str, optional
        Either 'blastdbcmd' or 'fastacmd'.
    executable : str, optional
        Path to the tool. Defaults to the tool name.

    Returns
    -------
    List[str]
        Command and arguments.

    Raises
    ------
    ValueError
        If the tool is not supported.

    Examples
    --------
    >>> build_command(RetrievalRequest('db/nt', 'seq1', 5, 10))
    ['blastdbcmd', '-db', 'db/nt', '-entry', 'seq1', '-range', '5-10']
    >>> build_command(RetrievalRequest('db/nt', 'seq1', 5, 10), tool='fastacmd')
    ['fastacmd', '-d', 'db/nt', '-s', 'seq1', '-L', '5,10']
    """
    exe = executable or tool
    ranged = request.start is not None and request.end is not None

    # Ranges are 1-based inclusive for both tools
    if tool == 'blastdbcmd':
        command = [exe, '-db', request.database, '-entry', request.identifier]
        if ranged:
            command += ['-range', f'{request.start}-{request.end}']
    elif tool == 'fastacmd':
        command = [exe, '-d', request.database, '-s', request.identifier]
        if ranged:
            command += ['-L', f'{request.start},{request.end}']
    else:
        raise ValueError(
            f'Unsupported retrieval tool: {tool}. '
            f'Choose from: {", ".join(SUPPORTED_TOOLS)}'
        )
    return command


class ToolOutput:
    """
    Binary reader over a tool's stdout that remembers the first line read.

    Parameters
    ----------
    handle : BinaryIO
        Pipe connected to the tool's stdout.
    """

    def __init__(self, handle: BinaryIO):
        self._handle = handle
        self.first_line: Optional[bytes] = None

    def readline(self) -> bytes:
        line = self._handle.readline()
        if self.first_line is None:
            self.first_line = line
        return line

    def read(self, size: int = -1) -> bytes:
        return self._handle.read(size)

    @property
    def reported_not_found(self) -> bool:
        if not self.first_line:
            return False
        return is_not_found(self.first_line.decode('ascii', errors='replace'))


class CommandRetriever:
    """
    Retrieve sequences by running an external extraction tool.

    Parameters
    ----------
    tool : str, optional
        'blastdbcmd' or 'fastacmd'. Defaults to ``$LAZYBLASTDB_TOOL`` or
        'blastdbcmd'.
    executable : str, optional
        Path to the tool. Defaults to ``$LAZYBLASTDB_EXECUTABLE``, then to the
        tool found on PATH.
    """

    def __init__(self, tool: Optional[str] = None, executable: Optional[str] = None):
        self.tool = tool or os.environ.get(TOOL_ENV_VAR) or DEFAULT_TOOL
        if self.tool not in SUPPORTED_TOOLS:
            raise ValueError(
                f'Unsupported retrieval tool: {self.tool}. '
                f'Choose from: {", ".join(SUPPORTED_TOOLS)}'
            )
        self.executable = (
            executable
            or os.environ.get(EXECUTABLE_ENV_VAR)
            or find_executable(self.tool)
            or self.tool
        )

    def command(self, request: RetrievalRequest) -> List[str]:
        return build_command(request, tool=self.tool, executable=self.executable)

    @contextmanager
    def open(self, request: RetrievalRequest) -> Iterator[ToolOutput]:
        """
        Run the tool for a request and yield its output stream.

        stderr is merged into stdout so error messages from the tool appear
        as the first line of output.

        Parameters
        ----------
        request : RetrievalRequest
            What to retrieve.

        Yields
        ------
        ToolOutput
            Binary stream of tool output.

        Raises
        ------
        RetrievalError
            If the tool cannot be started, or exits non-zero without having
            reported a missing entry.
        """
        command = self.command(request)
        logging.debug(f'Running: {" ".join(command)}')

        try:
            process = subprocess.Popen(
                command, stdout=subprocess.PIPE, stderr=subprocess.STDOUT
            )
        except OSError as e:
            raise RetrievalError(command, reason=str(e)) from e

        # Remember the first line so a missing entry can be told apart from a failure
        output = ToolOutput(process.stdout)
        try:
            yield output
            # Drain anything the consumer left unread before reaping
            while process.stdout.read(65536):
                pass
        except BaseException:
            # Consumer failed, stop the tool before reaping it
            process.kill()
            raise
        finally:
            process.stdout.close()
            returncode = process.wait()

        if returncode != 0:
            if output.reported_not_found:
                logging.debug(f'{command[0]} exited {returncode} for missing entry')
                return
            logging.warning(f'{command[0]} exited with status {returncode}')
            raise RetrievalError(command, returncode=returncode)
