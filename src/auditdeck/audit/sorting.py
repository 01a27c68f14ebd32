"""
Row sorting for the results table.

The status column sorts by severity rank (CRITICAL first when ascending);
every other column sorts on its own value, numerically when both values are
numbers and by a case- and accent-insensitive collation otherwise.

Python's sort is stable, so rows that compare equal keep their incoming
order in both directions.
"""

import unicodedata
from enum import Enum
from functools import cmp_to_key
from typing import Any, Iterable, List, Optional, Union

from pydantic.alias_generators import to_camel

from .classify import classify_control
from .models import ComplianceControl, DisplayRow

STATUS_COLUMN = "status"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @property
    def multiplier(self) -> int:
        return 1 if self is SortDirection.ASC else -1

    @classmethod
    def parse(cls, value: Union[str, "SortDirection", None]) -> "SortDirection":
        """Accept "asc"/"desc" and their long forms; default ascending."""
        if isinstance(value, SortDirection):
            return value
        text = (value or "").strip().lower()
        if text in ("desc", "descending"):
            return cls.DESC
        return cls.ASC

    def toggled(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


def resolve_column(column: str) -> Optional[str]:
    """Map a column key (camelCase or snake_case) to a DisplayRow field."""
    if column == STATUS_COLUMN:
        return "severity_rank"
    for name in DisplayRow.model_fields:
        if column in (name, to_camel(name)):
            return name
    return None


def _sort_value(row: DisplayRow, field: Optional[str]) -> Any:
    value = getattr(row, field, None) if field else None
    if isinstance(value, Enum):
        value = value.value
    return value if value else ""


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _collation_key(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def compare_values(a: Any, b: Any) -> int:
    """Three-way comparison: numeric when both are numbers, else collated text."""
    if _is_number(a) and _is_number(b):
        return (a > b) - (a < b)

    text_a, text_b = str(a), str(b)
    key_a, key_b = _collation_key(text_a), _collation_key(text_b)
    if key_a != key_b:
        return -1 if key_a < key_b else 1
    return (text_a > text_b) - (text_a < text_b)


def sort_rows(
    rows: Iterable[DisplayRow],
    column: str = STATUS_COLUMN,
    direction: Union[str, SortDirection] = SortDirection.ASC,
) -> List[DisplayRow]:
    """
    Sort display rows by column in the given direction.

    Args:
        rows: Rows to sort; left untouched
        column: Column key; "status" sorts by severity rank
        direction: "asc" or "desc"

    Returns:
        New list of copied rows in sorted order
    """
    sign = SortDirection.parse(direction).multiplier
    field = resolve_column(column)

    def compare(a: DisplayRow, b: DisplayRow) -> int:
        return sign * compare_values(_sort_value(a, field), _sort_value(b, field))

    copied = [row.model_copy(deep=True) for row in rows]
    return sorted(copied, key=cmp_to_key(compare))


def sort_controls(controls: Iterable[ComplianceControl]) -> List[ComplianceControl]:
    """Order compliance controls failing first, then by control id."""
    return sorted(
        controls,
        key=lambda c: (classify_control(c.status).rank, _collation_key(c.control_id)),
    )
