"""In-memory numeric tables loaded from delimited text files."""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np

from honestforest.utility import _leading_double, _scan_doubles, split_string


class DefaultData:
    """A table of doubles with named columns and optional per-column value indices."""

    def __init__(
        self,
        values: Sequence[Sequence[float]] | np.ndarray | None = None,
        variable_names: Iterable[str] | None = None,
    ) -> None:
        if values is None:
            table = np.zeros((0, 0))
        else:
            table = np.array(values, dtype=float)
            if table.ndim != 2:
                raise ValueError("data must be a two-dimensional table")
        self._values = table
        self.variable_names = list(variable_names) if variable_names is not None else []
        self._index_data: np.ndarray | None = None
        self._unique_values: list[np.ndarray] = []
        self.max_num_unique_values = 0

    @property
    def num_rows(self) -> int:
        return self._values.shape[0]

    @property
    def num_cols(self) -> int:
        return self._values.shape[1]

    @classmethod
    def from_file(cls, filename: str) -> DefaultData:
        """Load a table whose first line is a header, separated by commas,
        semicolons or whitespace (detected from the header)."""
        try:
            with open(filename, encoding="utf-8") as handle:
                lines = handle.read().splitlines()
        except OSError as exc:
            raise OSError("Could not open input file.") from exc

        if not lines:
            return cls()
        header, body = lines[0], lines[1:]
        if "," in header:
            return cls._from_separated(header, body, ",")
        if ";" in header:
            return cls._from_separated(header, body, ";")
        return cls._from_whitespace(header, body)

    @classmethod
    def _from_whitespace(cls, header: str, body: list[str]) -> DefaultData:
        names = header.split()
        table = np.zeros((len(body), len(names)))
        for row, line in enumerate(body):
            tokens = list(_scan_doubles(line))
            if len(tokens) > len(names):
                raise ValueError("Could not open input file. Too many columns in a row.")
            if len(tokens) < len(names):
                raise ValueError(
                    "Could not open input file. Too few columns in a row. "
                    "Are all values numeric?"
                )
            table[row, :] = tokens
        return cls(table, names)

    @classmethod
    def _from_separated(cls, header: str, body: list[str], separator: str) -> DefaultData:
        names = split_string(header, separator)
        table = np.zeros((len(body), len(names)))
        for row, line in enumerate(body):
            tokens = split_string(line, separator)
            if len(tokens) > len(names):
                raise ValueError("Could not open input file. Too many columns in a row.")
            table[row, : len(tokens)] = [_leading_double(token) for token in tokens]
        return cls(table, names)

    def get(self, row: int, col: int) -> float:
        return float(self._values[row, col])

    def set(self, col: int, row: int, value: float) -> None:
        self._values[row, col] = value

    def get_all_values(self, samples: Iterable[int], var: int) -> list[float]:
        """Sorted distinct values of column var over the given rows."""
        return sorted({self.get(sample, var) for sample in samples})

    def sort(self) -> None:
        """Compute each column's sorted unique values and each cell's index into them."""
        self._unique_values = [np.unique(self._values[:, col]) for col in range(self.num_cols)]
        index = np.empty(self._values.shape, dtype=np.intp)
        for col, unique in enumerate(self._unique_values):
            index[:, col] = np.searchsorted(unique, self._values[:, col], side="left")
        self._index_data = index
        self.max_num_unique_values = max((len(u) for u in self._unique_values), default=0)

    def _require_sorted(self) -> np.ndarray:
        if self._index_data is None:
            raise RuntimeError("Data has not been sorted.")
        return self._index_data

    def get_index(self, row: int, col: int) -> int:
        return int(self._require_sorted()[row, col])

    def get_unique_data_value(self, var: int, index: int) -> float:
        self._require_sorted()
        return float(self._unique_values[var][index])

    def num_unique_data_values(self, var: int) -> int:
        self._require_sorted()
        return len(self._unique_values[var])


def load_data(file_name: str) -> DefaultData:
    """Load a table from file and prepare its value indices."""
    data = DefaultData.from_file(file_name)
    data.sort()
    return data