"""Data models for smartarrow connectors."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True)
class Point:
    """A 2D canvas coordinate."""

    x: float
    y: float

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)


@dataclass(frozen=True)
class Rectangle:
    """An axis-aligned rectangle, (x, y) is the top-left corner."""

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
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def inflate(self, padding: float) -> Rectangle:
        """Grow the rectangle by padding on every side."""
        return Rectangle(
            self.x - padding,
            self.y - padding,
            self.width + 2 * padding,
            self.height + 2 * padding,
        )

    def contains(self, point: Point, padding: float = 0.0) -> bool:
        """Check if a point lies inside (or on the border of) the padded rectangle."""
        bounds = self.inflate(padding) if padding else self
        return (
            bounds.x <= point.x <= bounds.right
            and bounds.y <= point.y <= bounds.bottom
        )

    def closest_point(self, point: Point) -> Point:
        """Closest point of the rectangle (boundary or interior) to a point."""
        return Point(
            max(self.x, min(point.x, self.right)),
            max(self.y, min(point.y, self.bottom)),
        )

    def distance_to(self, point: Point) -> float:
        """Euclidean distance to the rectangle, 0 when the point is inside."""
        return point.distance_to(self.closest_point(point))

    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in (self.x, self.y, self.width, self.height))


class Side(Enum):
    """Boundary side of a rectangle where a connector attaches."""

    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"

    @property
    def angle(self) -> float:
        """Outward-pointing direction in radians."""
        return _SIDE_ANGLES[self]


_SIDE_ANGLES = {
    Side.TOP: -math.pi / 2,
    Side.RIGHT: 0.0,
    Side.BOTTOM: math.pi / 2,
    Side.LEFT: math.pi,
}


@dataclass(frozen=True)
class ConnectionPoint(Point):
    """A point on a rectangle boundary with its side and outward angle."""

    side: Side = Side.RIGHT
    angle: float = 0.0


@dataclass
class PathResult:
    """A routed connector.

    ``points`` is the flattened cubic Bezier sequence
    ``[x, y, cx1, cy1, cx2, cy2, x, y, ...]``; consecutive segments share
    their anchor. ``waypoints`` are the anchors the curve passes through.
    """

    points: list[float]
    segments: int
    waypoints: list[Point] = field(default_factory=list)

    @property
    def start(self) -> Point:
        return Point(self.points[0], self.points[1])

    @property
    def end(self) -> Point:
        return Point(self.points[-2], self.points[-1])


class CurveType(Enum):
    """How a connector is drawn between its endpoints."""

    SMOOTH = "smooth"
    STRAIGHT = "straight"
    STEP = "step"


class ArrowHeadType(Enum):
    """Arrowhead shapes."""

    TRIANGLE = "triangle"
    CIRCLE = "circle"
    DIAMOND = "diamond"
    NONE = "none"


@dataclass(frozen=True)
class ArrowStyle:
    """Visual configuration of an arrow, passed through to the renderer."""

    stroke_color: str
    stroke_width: float
    opacity: float
    curve_type: CurveType = CurveType.SMOOTH
    arrow_head_type: ArrowHeadType = ArrowHeadType.TRIANGLE
    arrow_head_size: float = 11
    dash_enabled: bool = False
    dash_pattern: tuple[float, ...] | None = None
    shadow_enabled: bool = False
    shadow_blur: float | None = None
    shadow_color: str | None = None

    def merged(self, **overrides: Any) -> ArrowStyle:
        """Return a copy with the given fields replaced.

        Enum fields also accept their string values ("step", "diamond", ...).
        """
        unknown = set(overrides) - {f.name for f in fields(self)}
        if unknown:
            raise ValueError(f"Unknown arrow style fields: {sorted(unknown)}")
        if "curve_type" in overrides:
            overrides["curve_type"] = CurveType(overrides["curve_type"])
        if "arrow_head_type" in overrides:
            overrides["arrow_head_type"] = ArrowHeadType(overrides["arrow_head_type"])
        if overrides.get("dash_pattern") is not None:
            overrides["dash_pattern"] = tuple(overrides["dash_pattern"])
        return replace(self, **overrides)


ARROW_STYLE_PRESETS: Mapping[str, ArrowStyle] = MappingProxyType({
    # Arrows drawn by the user
    "manual": ArrowStyle(
        stroke_color="#3b82f6",
        stroke_width=2.5,
        opacity=0.95,
        arrow_head_size=11,
        shadow_enabled=True,
        shadow_blur=10,
        shadow_color="rgba(59, 130, 246, 0.25)",
    ),
    # Arrows generated from note links
    "auto": ArrowStyle(
        stroke_color="#94a3b8",
        stroke_width=2,
        opacity=0.35,
        arrow_head_size=9,
    ),
    "selected": ArrowStyle(
        stroke_color="#06b6d4",
        stroke_width=3.5,
        opacity=1,
        arrow_head_size=13,
        shadow_enabled=True,
        shadow_blur=16,
        shadow_color="rgba(6, 182, 212, 0.5)",
    ),
    # Arrow being dragged out of a connection handle
    "preview": ArrowStyle(
        stroke_color="#a855f7",
        stroke_width=2.5,
        opacity=0.7,
        arrow_head_size=11,
        dash_enabled=True,
        dash_pattern=(12, 6),
    ),
})


def preset(name: str) -> ArrowStyle:
    """Look up a style preset by name."""
    try:
        return ARROW_STYLE_PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown arrow style preset '{name}', "
            f"expected one of {sorted(ARROW_STYLE_PRESETS)}"
        ) from None


def resolve_style(
    manual: bool = True,
    preview: bool = False,
    selected: bool = False,
    overrides: Mapping[str, Any] | None = None,
) -> ArrowStyle:
    """Pick the effective style of an arrow.

    Preview wins over selection, selection wins over a custom style.
    Custom overrides are applied on top of the manual preset; without
    overrides the arrow falls back to the manual or auto preset. A
    previewed or selected arrow keeps its custom curve and head shape.
    """
    overrides = dict(overrides or {})
    if preview or selected:
        base = ARROW_STYLE_PRESETS["preview" if preview else "selected"]
        shape = {k: v for k, v in overrides.items() if k in _SHAPE_FIELDS}
        return base.merged(**shape) if shape else base
    if overrides:
        return ARROW_STYLE_PRESETS["manual"].merged(**overrides)
    return ARROW_STYLE_PRESETS["manual" if manual else "auto"]


_SHAPE_FIELDS = frozenset({"curve_type", "arrow_head_type"})
