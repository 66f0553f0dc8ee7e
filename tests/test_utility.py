import io
import math
import struct

import numpy as np
import pytest

from honestforest.utility import (
    TreeType,
    beautify_time,
    equal_doubles,
    read_matrix,
    read_nested,
    read_string,
    read_vector,
    read_vector_from_file,
    round_to_next_multiple,
    split_sequence,
    split_string,
    write_matrix,
    write_nested,
    write_string,
    write_vector,
)


@pytest.mark.parametrize(
    "start,end,parts", [(0, 9, 3), (0, 99, 7), (5, 20, 4), (0, 10, 11), (3, 3, 1), (0, 499, 8)]
)
def test_split_sequence_invariants(start, end, parts):
    result = split_sequence(start, end, parts)
    assert result[0] == start
    assert result[-1] == end + 1
    assert len(result) == parts + 1
    sizes = [b - a for a, b in zip(result, result[1:])]
    assert all(size >= 1 for size in sizes)
    assert max(sizes) - min(sizes) <= 1
    assert sizes == sorted(sizes, reverse=True)


def test_split_sequence_single_part():
    assert split_sequence(2, 8, 1) == [2, 9]


def test_split_sequence_more_parts_than_elements():
    assert split_sequence(0, 2, 5) == [0, 1, 2, 3]


def test_split_sequence_rejects_zero_parts():
    with pytest.raises(ValueError):
        split_sequence(0, 5, 0)


def test_beautify_time_seconds_only():
    assert beautify_time(59) == "59 seconds"


def test_beautify_time_singular_units():
    assert beautify_time(60) == "1 minute, 0 seconds"
    assert beautify_time(86400 + 3600 + 60 + 1).startswith("1 day, 1 hour, 1 minute")


def test_beautify_time_structure():
    text = beautify_time(3 * 86400 + 5 * 3600 + 7 * 60 + 9)
    assert text.split(", ") == ["3 days", "5 hours", "7 minutes", "9 seconds"]


def test_round_to_next_multiple():
    assert round_to_next_multiple(10, 0) == 10
    assert round_to_next_multiple(12, 4) == 12
    for value in range(1, 30):
        rounded = round_to_next_multiple(value, 7)
        assert rounded % 7 == 0
        assert value <= rounded < value + 7


def test_split_string_roundtrip():
    assert ",".join(split_string("a,b,c", ",")) == "a,b,c"
    assert split_string(",a", ",") == ["", "a"]


def test_split_string_drops_trailing_empty():
    assert split_string("a;b;", ";") == ["a", "b"]
    assert split_string("", ";") == []


def test_equal_doubles():
    assert equal_doubles(1.0, 1.0 + 1e-12, 1e-9)
    assert not equal_doubles(1.0, 1.1, 1e-9)
    assert equal_doubles(math.nan, math.nan, 1e-9)
    assert not equal_doubles(math.nan, 1.0, 1e-9)


def test_vector_roundtrip_and_prefix():
    buffer = io.BytesIO()
    write_vector([1.5, -2.25, 3.0], buffer, "d")
    raw = buffer.getvalue()
    assert raw[:8] == struct.pack("<Q", 3)
    assert len(raw) == 8 + 3 * 8
    buffer.seek(0)
    assert read_vector(buffer, "d") == [1.5, -2.25, 3.0]


def test_bool_vector_roundtrip():
    buffer = io.BytesIO()
    write_vector([True, False, True], buffer, "?")
    assert len(buffer.getvalue()) == 8 + 3
    buffer.seek(0)
    assert read_vector(buffer, "?") == [True, False, True]


def test_read_vector_truncated():
    buffer = io.BytesIO()
    write_vector([1, 2, 3], buffer, "Q")
    truncated = io.BytesIO(buffer.getvalue()[:-4])
    with pytest.raises(EOFError):
        read_vector(truncated, "Q")


def test_nested_roundtrip():
    nested = [[1, 2], [], [3, 4, 5]]
    buffer = io.BytesIO()
    write_nested(nested, buffer, "Q")
    buffer.seek(0)
    assert read_nested(buffer, "Q") == nested


def test_matrix_roundtrip():
    matrix = np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
    buffer = io.BytesIO()
    write_matrix(matrix, buffer)
    raw = buffer.getvalue()
    assert raw[:16] == struct.pack("<QQ", 2, 3)
    assert raw[16:24] == struct.pack("<d", 1.0)
    assert raw[24:32] == struct.pack("<d", 2.0)
    buffer.seek(0)
    np.testing.assert_array_equal(read_matrix(buffer), matrix)


def test_matrix_rejects_one_dimensional():
    with pytest.raises(ValueError):
        write_matrix(np.array([1.0, 2.0]), io.BytesIO())


def test_string_roundtrip():
    buffer = io.BytesIO()
    write_string("forêt", buffer)
    write_string("", buffer)
    buffer.seek(0)
    assert read_string(buffer) == "forêt"
    assert read_string(buffer) == ""


def test_read_vector_from_file_first_line_only(tmp_path):
    path = tmp_path / "weights.txt"
    path.write_text("1.5 2 3\n4 5\n")
    assert read_vector_from_file(str(path)) == [1.5, 2.0, 3.0]


def test_read_vector_from_file_stops_at_non_number(tmp_path):
    path = tmp_path / "weights.txt"
    path.write_text("0.25 0.5 x 0.75\n")
    assert read_vector_from_file(str(path)) == [0.25, 0.5]


def test_read_vector_from_file_missing(tmp_path):
    with pytest.raises(OSError, match="Could not open file"):
        read_vector_from_file(str(tmp_path / "missing.txt"))


def test_tree_type_lookup_by_value():
    assert TreeType(11) is TreeType.TREE_QUANTILE
    assert TreeType(15) is TreeType.TREE_INSTRUMENTAL