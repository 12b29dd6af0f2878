"""
Annotations — Per-field annotation mini-language

Records declare presentation hints per field as a comma-separated,
order-independent token list:

    @dataclass
    class Invoice:
        id: str = pretty("label=Invoice #")
        total: float = pretty("format=currency,sort=1,dir=desc")
        score: int = pretty("green=>=50,red=<50")
        lines: list = pretty("table,title=Line Items")
        deps: Node = pretty("tree,max_depth=2,ascii,no_icons")
        secret: str = pretty("hide")

Tokens split on the first '='; bare tokens are flags. Parsing never
fails: unknown keys are kept in `options` for custom renderers.

Annotation sources, in order:
    1. dataclass field metadata key "pretty" (set by pretty())
    2. class attribute __pretty_fields__ = {"attr": "annotation"}
"""

import dataclasses
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .model import (
    ColorRule, FieldSpec, FieldType, Format, PresentationSchema, SortDirective,
    SORT_ASC, SORT_DESC,
)


METADATA_KEY = "pretty"
CLASS_ANNOTATIONS_ATTR = "__pretty_fields__"

# Token keys treated as conditional color rules
COLOR_NAMES = ("green", "red", "yellow", "blue", "cyan", "magenta", "white", "gray")

HIDE_TOKENS = ("hide", "-")


def pretty(annotation: str = "", **kwargs) -> Any:
    """
    Declare a dataclass field with a presentation annotation.

    Args:
        annotation: Token string (e.g. "format=currency,label=Price")
        **kwargs: Passed through to dataclasses.field()

    Returns:
        A dataclasses.Field carrying the annotation in its metadata
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[METADATA_KEY] = annotation
    return field(metadata=metadata, **kwargs)


# =============================================================================
# Parsed annotation
# =============================================================================

@dataclass
class Annotation:
    """Typed result of parsing one annotation string."""
    label: Optional[str] = None
    name: Optional[str] = None
    format: Optional[Format] = None
    hidden: bool = False
    color_rules: List[ColorRule] = field(default_factory=list)
    color: Optional[str] = None
    sort_priority: Optional[int] = None
    sort_field: Optional[str] = None
    direction: Optional[str] = None
    title: Optional[str] = None
    style: Optional[str] = None
    label_style: Optional[str] = None
    render: Optional[str] = None
    compact: bool = False
    max_depth: Optional[int] = None
    ascii: bool = False
    no_icons: bool = False
    options: Dict[str, str] = field(default_factory=dict)

    @property
    def wants_table(self) -> bool:
        return self.format == Format.TABLE

    def sort_directive(self, field_name: str) -> Optional[SortDirective]:
        """
        Sort directive declared by this annotation, if any.

        `sort=N` sorts by the annotated field itself at priority N;
        `sort=<name>` (table-level) sorts rows by the named field.
        """
        direction = self.direction or SORT_ASC
        if self.sort_priority is not None:
            return SortDirective(field_name, self.sort_priority, direction)
        if self.sort_field:
            return SortDirective(self.sort_field, 0, direction)
        return None

    def to_field_spec(
        self,
        name: str,
        field_type: Optional[FieldType] = None,
        children: Optional[PresentationSchema] = None,
        format: Optional[Format] = None,
    ) -> FieldSpec:
        """Build the FieldSpec for a field carrying this annotation."""
        effective = format or self.format or Format.PLAIN
        if effective == Format.TABLE and children is None:
            children = PresentationSchema()
        return FieldSpec(
            name=self.name or name,
            label=self.label or prettify_field_name(self.name or name),
            type=field_type,
            format=effective,
            children=children if effective == Format.TABLE else None,
            color_rules=tuple(self.color_rules),
            sort=self.sort_directive(self.name or name),
            style=self.style,
            label_style=self.label_style,
            title=self.title,
            color=self.color,
            render=self.render,
            compact=self.compact,
            max_depth=self.max_depth,
            ascii=self.ascii,
            no_icons=self.no_icons,
            options=dict(self.options),
        )


def _split_token(token: str) -> Tuple[str, Optional[str]]:
    if "=" not in token:
        return token, None
    key, value = token.split("=", 1)
    return key.strip(), value.strip()


def parse_annotation(text: Optional[str]) -> Annotation:
    """
    Parse an annotation string into an Annotation.

    Args:
        text: Comma-separated key[=value] tokens (None/empty allowed)

    Returns:
        Annotation; never raises
    """
    result = Annotation()
    if not text:
        return result

    for raw in text.split(","):
        token = raw.strip()
        if not token:
            continue
        key, value = _split_token(token)

        if value is None:
            _apply_flag(result, key)
            continue

        if key == "label":
            result.label = value
        elif key == "name":
            result.name = value or None
        elif key == "format":
            if value in HIDE_TOKENS:
                result.hidden = True
            result.format = Format.parse(value)
        elif key in COLOR_NAMES:
            result.color_rules.append(ColorRule(key, value))
        elif key == "color":
            result.color = value
        elif key == "sort":
            try:
                result.sort_priority = int(value)
            except ValueError:
                result.sort_field = value
        elif key in ("dir", "direction"):
            result.direction = SORT_DESC if value.lower() == SORT_DESC else SORT_ASC
        elif key == "title":
            result.title = value
        elif key == "style":
            result.style = value
        elif key == "label_style":
            result.label_style = value
        elif key == "render":
            result.render = value
        elif key == "max_depth":
            try:
                result.max_depth = int(value)
            except ValueError:
                result.options[key] = value
        else:
            result.options[key] = value

    return result


def _apply_flag(result: Annotation, flag: str) -> None:
    if flag in HIDE_TOKENS:
        result.hidden = True
        result.format = Format.HIDE
    elif flag == "table":
        result.format = Format.TABLE
    elif flag == "tree":
        result.format = Format.TREE
    elif flag == "struct":
        result.format = Format.STRUCT
    elif flag in (SORT_ASC, SORT_DESC):
        result.direction = flag
    elif flag == "compact":
        result.compact = True
    elif flag == "ascii":
        result.ascii = True
    elif flag == "no_icons":
        result.no_icons = True
    else:
        result.options[flag] = "true"


# =============================================================================
# Lookup
# =============================================================================

def annotation_text(record: Any, attr: str) -> Optional[str]:
    """Raw annotation string declared for `attr` on a record, if any."""
    if dataclasses.is_dataclass(record):
        for f in dataclasses.fields(record):
            if f.name == attr:
                text = f.metadata.get(METADATA_KEY)
                if text is not None:
                    return text
                break
    declared = getattr(type(record), CLASS_ANNOTATIONS_ATTR, None)
    if isinstance(declared, dict):
        return declared.get(attr)
    return None


def annotation_for(record: Any, attr: str) -> Annotation:
    return parse_annotation(annotation_text(record, attr))


# =============================================================================
# Labels
# =============================================================================

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def split_camel_case(text: str) -> List[str]:
    """
    Split camelCase into words; acronyms stay together.

    "firstName" -> ["first", "Name"], "HTTPRequest" -> ["HTTPRequest"]
    """
    return [part for part in _CAMEL_BOUNDARY.split(text) if part]


def prettify_field_name(name: str) -> str:
    """
    Convert snake_case, kebab-case, or camelCase to Title Case.

    "unit_price" -> "Unit Price", "createdAt" -> "Created At"
    """
    words = [w for w in re.split(r"[_\-\s]+", name) if w]
    if len(words) == 1:
        words = split_camel_case(words[0])
    return " ".join(word.lower().capitalize() for word in words)
