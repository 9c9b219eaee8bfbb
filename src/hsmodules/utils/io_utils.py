"""
File I/O for Haskell sources.

Every read and write of a source file goes through here so the encoding is
decided in one place.
"""

from pathlib import Path
from typing import Optional, Union

from .config import DEFAULT_FILE_ENCODING


def read_source_file(path: Union[Path, str]) -> str:
    return Path(path).read_text(encoding=DEFAULT_FILE_ENCODING)


def try_read_source_file(path: Union[Path, str]) -> Optional[str]:
    """Contents of path, or None when it is missing, unreadable or not text."""
    try:
        return read_source_file(path)
    except (OSError, UnicodeDecodeError):
        return None


def write_source_file(path: Union[Path, str], content: str) -> None:
    """Write content, creating missing parent directories first."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding=DEFAULT_FILE_ENCODING)
