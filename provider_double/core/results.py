"""Row-oriented result sets built from canned expectation rows."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any, Union

from provider_double.core.errors import MalformedRowError


@dataclass(frozen=True, slots=True)
class RowByField:
    """Canned row keyed by column name."""

    values: dict[str, Any]


@dataclass(frozen=True, slots=True)
class RowByPosition:
    """Canned row whose values line up with the result columns."""

    values: tuple[Any, ...]


Row = Union[RowByField, RowByPosition]


@dataclass(slots=True)
class MatrixCursor:
    """In-memory result set with a fixed column list."""

    columns: list[str]
    rows: list[tuple[Any, ...]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[tuple[Any, ...]]:
        return iter(self.rows)

    def add_row(self, values: Sequence[Any]) -> None:
        if len(values) != len(self.columns):
            raise MalformedRowError(
                f"Row has {len(values)} values but the cursor has {len(self.columns)} columns"
            )
        self.rows.append(tuple(values))

    def column_index(self, name: str) -> int:
        try:
            return self.columns.index(name)
        except ValueError:
            raise KeyError(f"Column '{name}' not found in result columns") from None

    def get(self, position: int, column: str) -> Any:
        """Return the value of *column* in the row at *position*."""

        return self.rows[position][self.column_index(column)]

    def to_dicts(self) -> list[dict[str, Any]]:
        return [dict(zip(self.columns, row)) for row in self.rows]


def build_result(columns: Sequence[str], rows: Sequence[Row]) -> MatrixCursor:
    """Materialize *rows* against *columns*, preserving registration order.

    Field rows contribute ``None`` for columns they do not mention. Positional
    rows must supply exactly one value per column or ``MalformedRowError``
    is raised.
    """

    cursor = MatrixCursor(columns=list(columns))
    for row in rows:
        if isinstance(row, RowByPosition):
            cursor.add_row(row.values)
        else:
            cursor.add_row([row.values.get(column) for column in cursor.columns])
    return cursor


__all__ = ["MatrixCursor", "Row", "RowByField", "RowByPosition", "build_result"]
