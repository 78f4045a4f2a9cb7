"""
Per-element style properties.

A Style is a mapping over a fixed set of recognized presentation properties.
Keys may be given in snake_case (``stroke_width``) or camelCase
(``strokeWidth``); they are emitted as the kebab-case SVG attribute names
(``stroke-width``). Properties left unset are omitted from the output, there
is no inheritance between elements.
"""

import re
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

from .errors import ConfigurationError

# Recognized properties, in emission order
STYLE_PROPERTIES: Tuple[str, ...] = (
    "fill",
    "stroke",
    "stroke_width",
    "opacity",
    "fill_opacity",
    "stroke_opacity",
    "stroke_dasharray",
    "stroke_linecap",
    "stroke_linejoin",
    "font_family",
    "font_size",
    "font_weight",
    "text_anchor",
)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def _canonical_key(key: str) -> str:
    return _CAMEL_BOUNDARY.sub(r"_\1", key).replace("-", "_").lower()


class Style:
    """
    Immutable-by-convention set of style properties for one element.

    Example:
        >>> Style(fill="#fff", strokeWidth=2).to_attributes()
        {'fill': '#fff', 'stroke-width': '2'}
    """

    __slots__ = ("_values",)

    def __init__(self, values: Optional[Mapping[str, Any]] = None, **kwargs: Any):
        if isinstance(values, Style):
            values = values._values
        merged: Dict[str, Any] = {}
        for source in (values or {}, kwargs):
            for key, value in source.items():
                name = _canonical_key(key)
                if name not in STYLE_PROPERTIES:
                    raise ConfigurationError(
                        f"Unknown style property {key!r}; "
                        f"recognized properties: {', '.join(STYLE_PROPERTIES)}"
                    )
                if value is None:
                    merged.pop(name, None)
                else:
                    merged[name] = value
        self._values = merged

    @classmethod
    def coerce(cls, value: "StyleLike") -> "Style":
        if isinstance(value, Style):
            return value
        return cls(value)

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(_canonical_key(name), default)

    def merged(self, other: "StyleLike") -> "Style":
        """New style with `other`'s properties layered over this one."""
        combined = dict(self._values)
        combined.update(Style.coerce(other)._values)
        return Style(combined)

    def with_defaults(self, defaults: Mapping[str, Any]) -> "Style":
        """New style where `defaults` fill in properties left unset."""
        return Style(defaults).merged(self)

    def to_attributes(self) -> Dict[str, str]:
        """SVG attribute mapping for the properties that are set."""
        attrs = {}
        for name in STYLE_PROPERTIES:
            if name in self._values:
                attrs[name.replace("_", "-")] = _format_value(self._values[name])
        return attrs

    def __contains__(self, name: str) -> bool:
        return _canonical_key(name) in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Style):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"Style({self._values!r})"


StyleLike = Union[Style, Mapping[str, Any], None]


def _format_value(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return " ".join(_format_value(v) for v in value)
    return str(value)
