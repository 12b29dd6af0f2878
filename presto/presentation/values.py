"""
ValueFormatter — FieldValue to display string

Dispatch order for formatted():

    1. circular marker          -> "<circular>"
    2. registered render fn     -> fn(value, field)
    3. nested values            -> {key:value, ...}
       compact sequence         -> a, b, c
    4. field format             -> currency | date | float | pretty
    5. default visitor          -> by ValueKind

color() picks the display color: a fixed field color, else the first
matching conditional rule.

Usage:
    formatter = ValueFormatter(registry=registry, date_format="%d %b %Y")
    text = formatter.formatted(field_value)
    color = formatter.color(field_value)
"""

import datetime
import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Optional, Set

from ..core.kinds import deref, iter_elements, iter_items, kind_of, NUMERIC_KINDS, ValueKind
from ..core.model import FieldValue, Format
from ..core.registry import RenderRegistry

logger = logging.getLogger(__name__)

DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_FLOAT_DIGITS = 2
DEFAULT_CURRENCY_SYMBOL = "$"

CIRCULAR = "<circular>"
NULL = "null"

# Predicate: operator followed by a numeric literal
_PREDICATE = re.compile(r"^\s*(>=|<=|>|<|=)\s*(-?\d+(?:\.\d+)?)\s*$")

_OPERATORS: Dict[str, Callable[[float, float], bool]] = {
    ">=": lambda a, b: a >= b,
    "<=": lambda a, b: a <= b,
    ">": lambda a, b: a > b,
    "<": lambda a, b: a < b,
    "=": lambda a, b: a == b,
}


# =============================================================================
# Conversions
# =============================================================================

def to_number(value: Any) -> Optional[float]:
    """
    Numeric view of a value: ints, floats, Decimals, numeric strings.

    Bools are not numbers here.
    """
    kind = kind_of(value)
    if kind in NUMERIC_KINDS:
        return float(value)
    if kind == ValueKind.STRING:
        text = value.decode() if isinstance(value, bytes) else value
        try:
            return float(Decimal(text.strip()))
        except (InvalidOperation, ValueError):
            return None
    return None


def parse_date(value: Any) -> Optional[datetime.datetime]:
    """
    Interpret a value as a point in time.

    Accepts date/datetime objects, epoch seconds (int, float, or numeric
    string, read as UTC), RFC 3339 strings, "YYYY-MM-DD" and
    "YYYY-MM-DD HH:MM:SS". Returns None when nothing fits.
    """
    if isinstance(value, datetime.datetime):
        return value
    if isinstance(value, datetime.date):
        return datetime.datetime(value.year, value.month, value.day)

    kind = kind_of(value)
    if kind in NUMERIC_KINDS:
        return _from_epoch(float(value))
    if kind != ValueKind.STRING:
        return None

    text = (value.decode() if isinstance(value, bytes) else value).strip()
    if re.fullmatch(r"-?\d+(\.\d+)?", text):
        return _from_epoch(float(text))
    if "T" in text:
        try:
            return datetime.datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            pass
    for layout in ("%Y-%m-%d", "%Y-%m-%d %H:%M:%S"):
        try:
            return datetime.datetime.strptime(text, layout)
        except ValueError:
            continue
    return None


def _from_epoch(seconds: float) -> Optional[datetime.datetime]:
    try:
        return datetime.datetime.fromtimestamp(seconds, tz=datetime.timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def matches_predicate(predicate: str, value: Any, text: str) -> bool:
    """
    Test one color-rule predicate.

    Operator predicates compare numerically and never match non-numeric
    values. Anything else is an exact, case-sensitive literal match
    against the value's default string form.
    """
    match = _PREDICATE.match(predicate)
    if match is None:
        return predicate == text
    number = to_number(value)
    if number is None:
        return False
    operator, literal = match.groups()
    return _OPERATORS[operator](number, float(literal))


# =============================================================================
# Formatter
# =============================================================================

class ValueFormatter:
    """
    Turns FieldValues into display strings.

    Args:
        registry: Named render functions for `render=` fields
        date_format: strftime layout when a field sets no date_format
        float_digits: Digits for format=float when a field sets no digits
    """

    def __init__(
        self,
        registry: Optional[RenderRegistry] = None,
        date_format: str = DEFAULT_DATE_FORMAT,
        float_digits: int = DEFAULT_FLOAT_DIGITS,
    ):
        self.registry = registry if registry is not None else RenderRegistry()
        self.date_format = date_format
        self.float_digits = float_digits
        self._visitors: Dict[ValueKind, Callable[[Any, Set[int]], str]] = {
            ValueKind.NIL: lambda value, visited: NULL,
            ValueKind.BOOL: lambda value, visited: "true" if value else "false",
            ValueKind.INT: lambda value, visited: str(value),
            ValueKind.FLOAT: lambda value, visited: str(value),
            ValueKind.STRING: self._visit_string,
            ValueKind.DATE: self._visit_date,
            ValueKind.ENUM: lambda value, visited: self.default(value.value, visited),
            ValueKind.MAPPING: self._visit_structured,
            ValueKind.RECORD: self._visit_structured,
            ValueKind.SEQUENCE: self._visit_sequence,
            ValueKind.OTHER: lambda value, visited: str(value),
        }

    # =========================================================================
    # Public API
    # =========================================================================

    def formatted(self, fv: FieldValue) -> str:
        """Display string for a FieldValue."""
        return self._formatted(fv, set())

    def color(self, fv: FieldValue) -> Optional[str]:
        """
        Display color for a FieldValue, or None.

        A fixed `color` wins; otherwise rules are tried in order.
        """
        spec = fv.field
        if spec.color:
            return spec.color
        if not spec.color_rules:
            return None

        value = deref(fv.value)
        text = self.default(value)
        for rule in spec.color_rules:
            if matches_predicate(rule.predicate, value, text):
                return rule.color
        return None

    def default(self, value: Any, visited: Optional[Set[int]] = None) -> str:
        """
        Default string form of any value.

        `visited` holds ids of composites on the current call path; a
        revisit prints `<circular>`.
        """
        value = deref(value)
        return self._visitors[kind_of(value)](value, visited if visited is not None else set())

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _formatted(self, fv: FieldValue, visited: Set[int]) -> str:
        spec = fv.field
        value = deref(fv.value)

        if fv.circular:
            return CIRCULAR

        render = self.registry.get(spec.render)
        if render is not None:
            return render(value, spec)
        if spec.render:
            logger.debug("No render function '%s' for field '%s'", spec.render, spec.name)

        if fv.nested is not None:
            return self._format_nested(fv, visited)
        if spec.compact and kind_of(value) == ValueKind.SEQUENCE:
            return self._format_compact(value, visited)

        if spec.format == Format.CURRENCY:
            return self._format_currency(value, spec.options, visited)
        if spec.format == Format.DATE:
            return self._format_date(value, spec.options.get("date_format"), visited)
        if spec.format == Format.FLOAT:
            return self._format_float(value, spec.options, visited)
        if spec.format == Format.PRETTY and hasattr(value, "__pretty__"):
            return value.__pretty__()
        return self.default(value, visited)

    def _format_nested(self, fv: FieldValue, visited: Set[int]) -> str:
        key = id(fv.value)
        if key in visited:
            return CIRCULAR
        visited.add(key)
        try:
            pairs = [
                f"{name}:{self._formatted(child, visited)}"
                for name, child in fv.nested.items()
                if not child.field.is_hidden
            ]
        finally:
            visited.discard(key)
        return "{" + ", ".join(pairs) + "}"

    def _format_compact(self, value: Any, visited: Set[int]) -> str:
        """Sequence as a bare `a, b, c` list."""
        key = id(value)
        visited.add(key)
        try:
            return ", ".join(self.default(item, visited) for item in iter_elements(value))
        finally:
            visited.discard(key)

    def _format_currency(self, value: Any, options: Dict[str, str], visited: Set[int]) -> str:
        if kind_of(value) not in NUMERIC_KINDS:
            return self.default(value, visited)
        symbol = options.get("symbol", DEFAULT_CURRENCY_SYMBOL)
        return f"{symbol}{value:.2f}"

    def _format_float(self, value: Any, options: Dict[str, str], visited: Set[int]) -> str:
        # Numeric strings count; Decimals keep their exact digits
        number = value if kind_of(value) in NUMERIC_KINDS else to_number(value)
        if number is None:
            return self.default(value, visited)
        try:
            digits = int(options.get("digits", self.float_digits))
        except ValueError:
            digits = self.float_digits
        return f"{number:.{digits}f}"

    def _format_date(self, value: Any, layout: Optional[str], visited: Set[int]) -> str:
        moment = parse_date(value)
        if moment is None:
            logger.debug("Unparseable date value %r", value)
            return self.default(value, visited)
        return moment.strftime(layout or self.date_format)

    # =========================================================================
    # Default visitors
    # =========================================================================

    @staticmethod
    def _visit_string(value: Any, visited: Set[int]) -> str:
        if isinstance(value, bytes):
            return value.decode(errors="replace")
        return value

    def _visit_date(self, value: Any, visited: Set[int]) -> str:
        if isinstance(value, datetime.time):
            return value.strftime("%H:%M:%S")
        if isinstance(value, datetime.datetime):
            return value.strftime(self.date_format)
        return value.strftime("%Y-%m-%d")

    def _visit_structured(self, value: Any, visited: Set[int]) -> str:
        key = id(value)
        if key in visited:
            return CIRCULAR
        visited.add(key)
        try:
            pairs = [f"{name}:{self.default(item, visited)}" for name, item in iter_items(value)]
        finally:
            visited.discard(key)
        return "{" + ", ".join(pairs) + "}"

    def _visit_sequence(self, value: Any, visited: Set[int]) -> str:
        key = id(value)
        if key in visited:
            return CIRCULAR
        visited.add(key)
        try:
            items = [self.default(item, visited) for item in iter_elements(value)]
        finally:
            visited.discard(key)
        return "[" + ", ".join(items) + "]"
