"""Input file loading."""

from pathlib import Path
from typing import List, Union

from .errors import InputSourceError
from ..utils.logging_setup import get_logger

logger = get_logger(__name__)


def read_lines(path: Union[str, Path], encoding: str = "utf-8") -> List[str]:
    """Read a line-delimited file into a list of raw lines.

    Line terminators (``\\n``, ``\\r\\n``, ``\\r``) are removed; nothing else
    is trimmed. A trailing newline at end of file does not add an empty line.

    Args:
        path: File to read
        encoding: Text encoding of the file

    Returns:
        Lines in file order

    Raises:
        InputSourceError: If the file is missing or cannot be decoded
    """
    path = Path(path)
    if not path.is_file():
        raise InputSourceError(f"Input file not found: {path}")

    lines = []
    try:
        with open(path, "r", encoding=encoding) as f:
            for line in f:
                if line.endswith("\n"):
                    line = line[:-1]
                lines.append(line)
    except (OSError, UnicodeDecodeError, LookupError) as e:
        raise InputSourceError(f"Cannot read input file {path}: {e}") from e

    logger.info(f"Read {len(lines)} lines from {path}")
    return lines
