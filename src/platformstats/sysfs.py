"""Scalar readers for procfs/sysfs pseudo files."""

import logging
from pathlib import Path
from typing import Callable, TextIO, TypeVar

from platformstats.errors import PseudoFileError, PseudoFileFormatError

logger = logging.getLogger(__name__)

T = TypeVar("T", int, float, str)


def get_sys_abs_path(base: str, id: int, suffix: str) -> Path:
    """Build ``<base><id><suffix>``, e.g. ``/sys/class/hwmon/hwmon`` + 2 + ``/name``."""
    return Path(f"{base}{id}{suffix}")


def skip_lines(fh: TextIO, count: int) -> int:
    """
    Consume and discard ``count`` lines from ``fh``.

    Leaves the cursor at the start of the next line. Stops early at EOF and
    returns the number of lines actually skipped. Callers relying on a fixed
    offset are coupled to the kernel's field ordering.
    """
    skipped = 0
    while skipped < count:
        if not fh.readline():
            break
        skipped += 1
    return skipped


def milli(value: int) -> int:
    """Divide a milli-unit reading by 1000, truncating toward zero like C long division."""
    quotient = abs(value) // 1000
    return quotient if value >= 0 else -quotient


def read_text(path: str | Path) -> str:
    """
    Return the whole content of a pseudo file.

    Raises:
        PseudoFileError: The file could not be opened or read.
        PseudoFileFormatError: The content is not valid text.
    """
    try:
        with open(path, "r") as fh:
            return fh.read()
    except UnicodeDecodeError as e:
        raise PseudoFileFormatError(str(path), f"not valid text ({e.reason})") from e
    except OSError as e:
        raise PseudoFileError.from_os_error(str(path), e) from e


def read_token(path: str | Path) -> str:
    """Open ``path`` and return its first whitespace-delimited token."""
    tokens = read_text(path).split()
    if not tokens:
        raise PseudoFileFormatError(str(path), "empty file")
    return tokens[0]


def read_sysfs_entry(base: str, suffix: str, id: int, kind: Callable[[str], T]) -> T:
    """
    Read one scalar value from ``<base><id><suffix>``.

    Args:
        base: Path prefix up to the numeric id.
        suffix: Attribute path appended after the id.
        id: Device or CPU index.
        kind: ``int``, ``float`` or ``str``.

    Raises:
        PseudoFileError: The file could not be opened. Nothing is parsed.
        PseudoFileFormatError: The content is not text or the token is not
            a valid ``kind``.
    """
    path = get_sys_abs_path(base, id, suffix)
    token = read_token(path)
    try:
        value = kind(token)
    except ValueError as e:
        raise PseudoFileFormatError(str(path), f"{token!r} is not a valid {kind.__name__}") from e
    logger.debug("%s = %r", path, value)
    return value


def read_int_entry(base: str, suffix: str, id: int) -> int:
    """Read an integer attribute such as ``in1_input``."""
    return read_sysfs_entry(base, suffix, id, int)


def read_float_entry(base: str, suffix: str, id: int) -> float:
    """Read a floating point attribute such as ``cpuinfo_cur_freq``."""
    return read_sysfs_entry(base, suffix, id, float)


def read_str_entry(base: str, suffix: str, id: int) -> str:
    """Read a string attribute such as a hwmon ``name``."""
    return read_sysfs_entry(base, suffix, id, str)
