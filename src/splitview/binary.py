"""
Binary content detection by sampling the first bytes of a file.

A sample counts as binary when more than 10% of its bytes are control
characters. NUL, bytes 1-8 and 15-31 count, except bell (7) and escape (27);
bytes 9-14 never count. This heuristic is kept as-is so the same files are
skipped as in the editor extension.
"""

from __future__ import annotations

import logging
from pathlib import Path

from splitview.file_resolver.filesystem import FileSystem, LocalFileSystem

logger = logging.getLogger(__name__)

SAMPLE_SIZE = 1000
NON_PRINTABLE_RATIO = 0.1


def _is_non_printable(byte: int) -> bool:
    return byte == 0 or (byte < 9 and byte != 7) or (14 < byte < 32 and byte != 27)


def count_non_printable(sample: bytes) -> int:
    return sum(1 for byte in sample if _is_non_printable(byte))


def is_binary(data: bytes) -> bool:
    """Classify the first `SAMPLE_SIZE` bytes. Empty input is text."""
    sample = data[:SAMPLE_SIZE]
    return count_non_printable(sample) > len(sample) * NON_PRINTABLE_RATIO


def is_binary_file(path: Path, filesystem: FileSystem | None = None) -> bool:
    """
    Read a sample of `path` and classify it. Files that cannot be read are
    reported as text and left for the caller to fail on later.
    """
    fs = filesystem or LocalFileSystem()
    try:
        sample = fs.read_file(path, limit=SAMPLE_SIZE)
    except OSError as e:
        logger.error("Error checking if file is binary: %s", e)
        return False
    return is_binary(sample)
