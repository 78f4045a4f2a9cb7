"""
CSS-style box model.

An element's width and height are its border box. Margin lies outside the
border box; border and padding lie inside it. The nested boxes are derived
on demand from the border-box size and the per-side insets::

    margin box  ⊇  border box  ⊇  padding box  ⊇  content box

Classes:
    Insets: Per-side amounts (top, right, bottom, left).
    Box: An offset + size pair relative to the border-box origin.
    BoxModel: Margin, border and padding insets of one element.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple, Union

from .errors import ConfigurationError
from .models import Point

SIDES = ("top", "right", "bottom", "left")


@dataclass(frozen=True)
class Insets:
    """
    Per-side inset amounts.

    Attributes:
        top: Amount on the top side.
        right: Amount on the right side.
        bottom: Amount on the bottom side.
        left: Amount on the left side.
    """

    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0

    def __post_init__(self):
        for side in SIDES:
            value = getattr(self, side)
            if value < 0:
                raise ConfigurationError(f"Inset {side} must be non-negative, got {value}")

    @classmethod
    def parse(cls, value: "InsetsLike", what: str = "inset") -> "Insets":
        """
        Build insets from a number, a per-side mapping or an Insets.

        Args:
            value: A single number applied to all sides, a mapping with any
                of top/right/bottom/left (missing sides are 0), or None.
            what: Name used in error messages (e.g. "padding").

        Returns:
            The resolved Insets.
        """
        if value is None:
            return cls()
        if isinstance(value, Insets):
            return value
        if isinstance(value, Mapping):
            unknown = set(value) - set(SIDES)
            if unknown:
                raise ConfigurationError(
                    f"Unknown {what} side(s) {sorted(unknown)}; expected {', '.join(SIDES)}"
                )
            try:
                return cls(**{side: float(value.get(side, 0)) for side in SIDES})
            except ConfigurationError as exc:
                raise ConfigurationError(f"Invalid {what}: {exc}") from exc
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigurationError(f"Invalid {what} {value!r}: expected a number or per-side mapping")
        if value < 0:
            raise ConfigurationError(f"Invalid {what} {value!r}: must be non-negative")
        amount = float(value)
        return cls(amount, amount, amount, amount)

    @property
    def horizontal(self) -> float:
        return self.left + self.right

    @property
    def vertical(self) -> float:
        return self.top + self.bottom

    def __add__(self, other: "Insets") -> "Insets":
        return Insets(
            self.top + other.top,
            self.right + other.right,
            self.bottom + other.bottom,
            self.left + other.left,
        )


InsetsLike = Union[Insets, float, Mapping[str, float], None]


@dataclass(frozen=True)
class Box:
    """
    An offset + size pair, relative to the owning element's border-box origin.

    Attributes:
        x: Left edge.
        y: Top edge.
        width: Horizontal extent.
        height: Vertical extent.
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def origin(self) -> Point:
        return Point(self.x, self.y)

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)


@dataclass(frozen=True)
class BoxModel:
    """
    Margin, border and padding of an element.

    Attributes:
        margin: Space outside the border box.
        border: Border thickness, inside the border box.
        padding: Space between the border and the content box.
    """

    margin: Insets = field(default_factory=Insets)
    border: Insets = field(default_factory=Insets)
    padding: Insets = field(default_factory=Insets)

    @classmethod
    def from_config(cls, config: Optional[Union["BoxModel", Mapping[str, Any]]] = None) -> "BoxModel":
        """
        Build a box model from ``{margin, border, padding}``.

        Each entry is either a single number applied to every side or a
        per-side mapping ``{top, right, bottom, left}``.
        """
        if config is None:
            return cls()
        if isinstance(config, BoxModel):
            return config
        unknown = set(config) - {"margin", "border", "padding"}
        if unknown:
            raise ConfigurationError(
                f"Unknown box model key(s) {sorted(unknown)}; expected margin, border, padding"
            )
        return cls(
            margin=Insets.parse(config.get("margin"), "margin"),
            border=Insets.parse(config.get("border"), "border"),
            padding=Insets.parse(config.get("padding"), "padding"),
        )

    @property
    def content_inset(self) -> Insets:
        """Combined border and padding, i.e. border box to content box."""
        return self.border + self.padding

    def content_size(self, width: float, height: float, owner: str = "element") -> Tuple[float, float]:
        """
        Content-box size for a given border-box size.

        Raises:
            ConfigurationError: If border and padding exceed the border box
                on either axis.
        """
        inset = self.content_inset
        content_w = width - inset.horizontal
        content_h = height - inset.vertical
        if content_w < 0 or content_h < 0:
            axis, size, needed = (
                ("width", width, inset.horizontal)
                if content_w < 0
                else ("height", height, inset.vertical)
            )
            raise ConfigurationError(
                f"{owner}: border + padding ({needed:g}) exceed border-box {axis} "
                f"({size:g}); content {axis} would be {size - needed:g}"
            )
        return content_w, content_h

    def border_size_for_content(self, content_width: float, content_height: float) -> Tuple[float, float]:
        inset = self.content_inset
        return content_width + inset.horizontal, content_height + inset.vertical

    def margin_box(self, width: float, height: float) -> Box:
        m = self.margin
        return Box(-m.left, -m.top, width + m.horizontal, height + m.vertical)

    def border_box(self, width: float, height: float) -> Box:
        return Box(0.0, 0.0, width, height)

    def padding_box(self, width: float, height: float) -> Box:
        b = self.border
        return Box(b.left, b.top, max(0.0, width - b.horizontal), max(0.0, height - b.vertical))

    def content_box(self, width: float, height: float, owner: str = "element") -> Box:
        content_w, content_h = self.content_size(width, height, owner)
        inset = self.content_inset
        return Box(inset.left, inset.top, content_w, content_h)
