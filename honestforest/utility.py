"""Shared helpers: sequence splitting, text parsing and binary serialisation."""

from __future__ import annotations

import enum
import math
import re
import struct
from typing import BinaryIO, Iterable, Iterator, Sequence

import numpy as np


class TreeType(enum.IntEnum):
    """Identifiers of the supported tree kinds."""

    TREE_QUANTILE = 11
    TREE_INSTRUMENTAL = 15


DEFAULT_NUM_TREE = 500
DEFAULT_NUM_THREADS = 0

DEFAULT_MIN_NODE_SIZE_CLASSIFICATION = 1
DEFAULT_MIN_NODE_SIZE_REGRESSION = 5
DEFAULT_MIN_NODE_SIZE_PROBABILITY = 10

# Interval to print progress, in seconds.
STATUS_INTERVAL = 30.0

# Threshold for the q value split method switch.
Q_THRESHOLD = 0.02

_SIZE = struct.Struct("<Q")
_DOUBLE = struct.Struct("<d")
_DOUBLE_PATTERN = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def _scan_doubles(text: str) -> Iterator[float]:
    """Yield numbers read from the start of text, stopping at the first non-number."""
    pos = 0
    while True:
        match = _DOUBLE_PATTERN.match(text, pos)
        if match is None:
            return
        yield float(match.group(1))
        pos = match.end()


def _leading_double(token: str) -> float:
    """Read the number at the start of token, or 0.0 if there is none."""
    match = _DOUBLE_PATTERN.match(token)
    return float(match.group(1)) if match else 0.0


def split_sequence(start: int, end: int, num_parts: int) -> list[int]:
    """Split start..end into num_parts ranges of nearly equal size.

    The result holds the boundaries: part i covers result[i] .. result[i + 1] - 1.
    """
    if num_parts < 1:
        raise ValueError("num_parts must be at least 1")
    if num_parts == 1:
        return [start, end + 1]

    length = end - start + 1
    if num_parts > length:
        return list(range(start, end + 2))

    part_length_short = length // num_parts
    part_length_long = -(-length // num_parts)
    cut_pos = length % num_parts
    long_end = start + cut_pos * part_length_long

    result = list(range(start, long_end, part_length_long))
    result.extend(range(long_end, end + 2, part_length_short))
    return result


def read_vector_from_file(filename: str) -> list[float]:
    """Read the numbers on the first line of a text file."""
    try:
        with open(filename, encoding="utf-8") as handle:
            line = handle.readline()
    except OSError as exc:
        raise OSError(f"Could not open file: {filename}") from exc
    return list(_scan_doubles(line))


def beautify_time(seconds: int) -> str:
    """Render a number of seconds as days, hours, minutes and seconds."""
    result = f"{seconds % 60} seconds"
    if seconds // 60 == 0:
        return result
    minutes = (seconds // 60) % 60
    result = ("1 minute, " if minutes == 1 else f"{minutes} minutes, ") + result

    if seconds // 3600 == 0:
        return result
    hours = (seconds // 3600) % 24
    result = ("1 hour, " if hours == 1 else f"{hours} hours, ") + result

    days = seconds // 86400
    if days == 0:
        return result
    return ("1 day, " if days == 1 else f"{days} days, ") + result


def round_to_next_multiple(value: int, multiple: int) -> int:
    """Round value up to the next multiple of multiple; 0 leaves it unchanged."""
    if multiple == 0:
        return value
    remainder = value % multiple
    if remainder == 0:
        return value
    return value + multiple - remainder


def split_string(text: str, split_char: str) -> list[str]:
    """Split text at split_char; a trailing separator yields no empty last part."""
    parts = text.split(split_char)
    if text == "" or text.endswith(split_char):
        parts.pop()
    return parts


def equal_doubles(first: float, second: float, epsilon: float) -> bool:
    """Compare two floats within epsilon, treating NaN as equal to NaN."""
    if math.isnan(first):
        return math.isnan(second)
    return abs(first - second) < epsilon


def _read_exact(file: BinaryIO, size: int) -> bytes:
    data = file.read(size)
    if len(data) < size:
        raise EOFError("Unexpected end of stream.")
    return data


def _read_size(file: BinaryIO) -> int:
    return _SIZE.unpack(_read_exact(file, _SIZE.size))[0]


def write_vector(values: Iterable, file: BinaryIO, fmt: str) -> None:
    """Write a length prefix followed by the values packed with struct format fmt."""
    items = list(values)
    file.write(_SIZE.pack(len(items)))
    file.write(struct.pack(f"<{len(items)}{fmt}", *items))


def read_vector(file: BinaryIO, fmt: str) -> list:
    """Read a vector written by write_vector with the same format."""
    length = _read_size(file)
    layout = struct.Struct(f"<{length}{fmt}")
    return list(layout.unpack(_read_exact(file, layout.size)))


def write_nested(vectors: Iterable[Iterable], file: BinaryIO, fmt: str) -> None:
    """Write a vector of vectors: the outer length, then each inner vector."""
    inner = list(vectors)
    file.write(_SIZE.pack(len(inner)))
    for vector in inner:
        write_vector(vector, file, fmt)


def read_nested(file: BinaryIO, fmt: str) -> list[list]:
    """Read a vector of vectors written by write_nested."""
    length = _read_size(file)
    return [read_vector(file, fmt) for _ in range(length)]


def write_matrix(matrix: Sequence[Sequence[float]] | np.ndarray, file: BinaryIO) -> None:
    """Write a 2-D matrix of doubles: rows, columns, then the values row by row."""
    array = np.asarray(matrix, dtype=float)
    if array.ndim != 2:
        raise ValueError("matrix must be two-dimensional")
    rows, cols = array.shape
    file.write(_SIZE.pack(rows))
    file.write(_SIZE.pack(cols))
    file.write(array.astype("<f8").tobytes(order="C"))


def read_matrix(file: BinaryIO) -> np.ndarray:
    """Read a matrix written by write_matrix."""
    rows = _read_size(file)
    cols = _read_size(file)
    data = _read_exact(file, rows * cols * _DOUBLE.size)
    return np.frombuffer(data, dtype="<f8").reshape(rows, cols).astype(float)


def write_string(text: str, file: BinaryIO) -> None:
    """Write a UTF-8 string with its byte length as prefix."""
    encoded = text.encode("utf-8")
    file.write(_SIZE.pack(len(encoded)))
    file.write(encoded)


def read_string(file: BinaryIO) -> str:
    """Read a string written by write_string."""
    size = _read_size(file)
    return _read_exact(file, size).decode("utf-8")