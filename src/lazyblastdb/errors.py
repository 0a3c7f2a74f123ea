"""
Exceptions raised by lazyblastdb.

An identifier that is absent from a database is not an error: every layer
reports it by returning ``None``. Only an entry that disappears after its
handle was created raises ``SequenceNotFoundError``.
"""

from typing import Optional, Sequence


class LazyBlastDBError(Exception):
    """Base class for all lazyblastdb errors."""


class MalformedOutputError(LazyBlastDBError, ValueError):
    """
    The retrieval tool produced a first line that could not be parsed.

    Parameters
    ----------
    line : str
        The offending line, as read from the tool output.
    """

    def __init__(self, line: str):
        self.line = line
        super().__init__(f'could not parse retrieval tool output:\n{line!r}')


class InvalidRangeError(LazyBlastDBError, ValueError):
    """A 1-based inclusive range with ``start > end`` or ``start < 1``."""

    def __init__(self, start: int, end: int):
        self.start = start
        self.end = end
        if start < 1:
            msg = f'start ({start}) must be at least 1'
        else:
            msg = f'start ({start}) is greater than end ({end})'
        super().__init__(msg)


class ImmutableSequenceError(LazyBlastDBError, AttributeError):
    """Attempt to assign a read-only sequence attribute."""

    def __init__(self, owner: str, attribute: str):
        self.owner = owner
        self.attribute = attribute
        super().__init__(f'{owner} objects are immutable, cannot set {attribute}')


class InconsistentMetadataError(LazyBlastDBError, ValueError):
    """The database reports a molecule type that is neither nucleotide nor protein."""

    def __init__(self, mol_type: str, database: str):
        self.mol_type = mol_type
        self.database = database
        super().__init__(f"invalid type '{mol_type}' for blast database {database}")


class RetrievalError(LazyBlastDBError, RuntimeError):
    """
    The retrieval tool could not be run or exited with an error.

    Parameters
    ----------
    command : Sequence[str]
        Argument vector that was executed.
    returncode : int, optional
        Exit status of the tool, if it ran.
    reason : str, optional
        Extra detail for the message.
    """

    def __init__(
        self,
        command: Sequence[str],
        returncode: Optional[int] = None,
        reason: Optional[str] = None,
    ):
        self.command = list(command)
        self.returncode = returncode
        msg = f'retrieval command failed: {" ".join(self.command)}'
        if returncode is not None:
            msg += f' (exit status {returncode})'
        if reason:
            msg += f': {reason}'
        super().__init__(msg)


class SequenceNotFoundError(LazyBlastDBError, LookupError):
    """
    An entry that existed when its handle was created can no longer be found.

    Parameters
    ----------
    identifier : str
        Sequence identifier.
    database : str
        Database basename.
    """

    def __init__(self, identifier: str, database: str):
        self.identifier = identifier
        self.database = database
        super().__init__(f'Sequence {identifier} not found in {database}')
