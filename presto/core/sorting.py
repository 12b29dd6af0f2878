"""
Sorting — Ordering table rows by declared sort directives

Each value is projected onto a comparable key:

    nil       sorts before everything else
    bool      "0" / "1"
    numbers   fixed-width digit string; "#" prefix for non-negatives,
              "!" prefix plus complemented digits for negatives, so plain
              string comparison gives numeric order
    other     str(value)

Rows are sorted once per directive, last-priority directive first, so the
lowest priority number dominates; list.sort() stability keeps ties in
input order.
"""

from decimal import Decimal
from typing import Any, List, Optional, Sequence, Tuple

from .kinds import deref, kind_of, ValueKind
from .model import FieldSpec, FieldValue, PresentationSchema, Row, SortDirective

# Integer and fractional digit counts of the numeric projection
INT_DIGITS = 24
FRAC_DIGITS = 10

_COMPLEMENT = str.maketrans("0123456789", "9876543210")


def _number_key(value: Any) -> str:
    number = Decimal(value) if not isinstance(value, Decimal) else value
    if not number.is_finite():
        if number.is_nan():
            return "~nan"
        return "!" if number < 0 else "~inf"
    width = INT_DIGITS + FRAC_DIGITS + 1
    digits = f"{abs(number):0{width}.{FRAC_DIGITS}f}"
    if number < 0:
        return "!" + digits.translate(_COMPLEMENT)
    return "#" + digits


def sort_key(value: Any) -> Tuple[int, str]:
    """
    Comparable projection of one value.

    Returns:
        (0, "") for nil, otherwise (1, projected string)
    """
    if isinstance(value, FieldValue):
        value = value.value
    value = deref(value)
    kind = kind_of(value)
    if kind == ValueKind.NIL:
        return (0, "")
    if kind == ValueKind.BOOL:
        return (1, "1" if value else "0")
    if kind in (ValueKind.INT, ValueKind.FLOAT):
        return (1, _number_key(value))
    if kind == ValueKind.ENUM:
        return (1, str(value.value))
    return (1, str(value))


def compare(left: Any, right: Any) -> int:
    """Three-way comparison of two values by their sort keys."""
    a, b = sort_key(left), sort_key(right)
    return (a > b) - (a < b)


def table_directives(table: FieldSpec) -> List[SortDirective]:
    """
    Sort directives applying to the rows of a table field.

    Collects the child schema's per-field directives plus a table-level
    `sort=<field>` directive, ordered by priority.
    """
    children = table.children or PresentationSchema()
    directives = list(children.sort_directives())
    if table.sort is not None and table.sort.field in children:
        directives.append(table.sort)
    return sorted(directives, key=lambda d: d.priority)


def sort_rows(rows: List[Row], directives: Sequence[SortDirective]) -> List[Row]:
    """
    Return rows ordered by the directives (lower priority dominates).

    Args:
        rows: Table rows
        directives: Sort directives in any order

    Returns:
        New sorted list; input is not modified
    """
    result = list(rows)
    if not directives:
        return result

    ordered = sorted(directives, key=lambda d: d.priority)
    for directive in reversed(ordered):
        result.sort(
            key=lambda row, name=directive.field: sort_key(_row_value(row, name)),
            reverse=directive.descending,
        )
    return result


def _row_value(row: Row, name: str) -> Optional[Any]:
    cell = row.get(name)
    return cell.value if cell is not None else None
