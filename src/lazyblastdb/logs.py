"""
Logging setup for the lazyblastdb command line.

Library modules only emit records through ``logging``; handlers are installed
here, with ``rich`` formatting on stderr so that sequence output on stdout
stays clean.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

FILE_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def init_logging(
    loglevel: str = 'INFO', logfile: Optional[Union[str, Path]] = None
) -> None:
    """
    Configure the root logger with a rich console handler.

    Parameters
    ----------
    loglevel : str, optional
        Name of the log level, case insensitive. Default: 'INFO'.
    logfile : str or Path, optional
        Also write records to this file, creating parent directories.

    Raises
    ------
    ValueError
        If ``loglevel`` is not a known level name.
    """
    # Convert log level name to its numeric value
    numeric_level = getattr(logging, loglevel.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f'Invalid log level: {loglevel}')

    # Replace any handlers left by an earlier call
    root_logger = logging.getLogger()
    if root_logger.hasHandlers():
        root_logger.handlers.clear()
    root_logger.setLevel(numeric_level)

    # Console output goes to stderr, stdout is reserved for sequences
    console_handler = RichHandler(console=Console(stderr=True))
    console_handler.setLevel(numeric_level)
    root_logger.addHandler(console_handler)

    if not logfile:
        return

    # Optional file handler, creating parent directories as needed
    logfile_path = Path(logfile)
    try:
        logfile_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(logfile_path, mode='w', encoding='utf-8')
    except OSError as e:
        # Keep console-only logging if the file cannot be opened
        logging.warning(f'Could not open log file {logfile}: {e}')
        return

    # Plain timestamped records in the file
    file_handler.setLevel(numeric_level)
    file_handler.setFormatter(
        logging.Formatter(fmt=FILE_LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')
    )
    root_logger.addHandler(file_handler)
    logging.debug(f'Writing log to {logfile_path.absolute()}')
