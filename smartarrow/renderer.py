"""SVG renderer for whiteboards using drawsvg."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import drawsvg as draw

from .board import CardKind
from .curves import (
    arrow_head_shape,
    curve_center,
    polyline_path_data,
    step_path,
    straight_line,
    svg_path_data,
)
from .models import ArrowHeadType, CurveType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .board import Card, RoutedArrow, Whiteboard
    from .models import ArrowStyle, Point


class Theme:
    """Color theme for whiteboards."""

    def __init__(
        self,
        background: str = "#f8fafc",
        card_stroke: str = "#cbd5e1",
        card_fills: dict[CardKind, str] | None = None,
        text_color: str = "#1e293b",
        text_secondary: str = "#64748b",
        waypoint_radius: float = 4,
    ):
        self.background = background
        self.card_stroke = card_stroke
        self.card_fills = card_fills or {
            CardKind.NOTE: "#ffffff",
            CardKind.STICKY: "#fef08a",
            CardKind.TEXT: "none",
            CardKind.PDF: "#fee2e2",
            CardKind.HIGHLIGHT: "#fef9c3",
        }
        self.text_color = text_color
        self.text_secondary = text_secondary
        self.waypoint_radius = waypoint_radius


DEFAULT_THEME = Theme()


def _local_to_world(
    polygon: list[float], position: Point, rotation_degrees: float
) -> list[float]:
    """Rotate a local polygon around the origin and move it to position."""
    angle = math.radians(rotation_degrees)
    cos_a, sin_a = math.cos(angle), math.sin(angle)
    world = []
    for i in range(0, len(polygon), 2):
        lx, ly = polygon[i], polygon[i + 1]
        world.append(position.x + lx * cos_a - ly * sin_a)
        world.append(position.y + lx * sin_a + ly * cos_a)
    return world


class WhiteboardRenderer:
    """Renders whiteboard cards and routed arrows to SVG."""

    def __init__(self, theme: Theme | None = None, padding: float = 40):
        self.theme = theme or DEFAULT_THEME
        self.padding = padding

    def render(
        self,
        board: Whiteboard,
        selected: str | None = None,
        show_waypoints: bool = False,
    ) -> draw.Drawing:
        """Render a whiteboard to an SVG Drawing object.

        Args:
            board: Cards and arrows to draw
            selected: Id of the selected arrow, drawn with the selected style
            show_waypoints: Draw the selected arrow's route waypoints as dots
        """
        cards = list(board.cards())
        routed = board.route_all(selected=selected)

        min_x, min_y, max_x, max_y = self._bounds(cards, routed.values())
        width = max_x - min_x + 2 * self.padding
        height = max_y - min_y + 2 * self.padding
        d = draw.Drawing(width, height, origin=(min_x - self.padding, min_y - self.padding))

        d.append(
            draw.Rectangle(
                min_x - self.padding, min_y - self.padding, width, height,
                fill=self.theme.background,
            )
        )

        for card in cards:
            self._render_card(d, card)

        # Arrows on top so arrowheads stay visible over card borders
        for arrow_id, arrow in routed.items():
            is_selected = arrow_id == selected
            self._render_arrow(d, arrow, is_selected, show_waypoints and is_selected)

        return d

    def _bounds(
        self,
        cards: list[Card],
        routed: Iterable[RoutedArrow],
    ) -> tuple[float, float, float, float]:
        xs: list[float] = []
        ys: list[float] = []
        for card in cards:
            xs.extend([card.rect.x, card.rect.right])
            ys.extend([card.rect.y, card.rect.bottom])
        for arrow in routed:
            points = arrow.connector.path.points
            xs.extend(points[0::2])
            ys.extend(points[1::2])
        if not xs:
            return (0, 0, 200, 200)
        return (min(xs), min(ys), max(xs), max(ys))

    def _render_card(self, d: draw.Drawing, card: Card) -> None:
        rect = card.rect
        d.append(
            draw.Rectangle(
                rect.x, rect.y, rect.width, rect.height,
                fill=self.theme.card_fills.get(card.kind, "#ffffff"),
                stroke=self.theme.card_stroke,
                stroke_width=1,
                rx=8, ry=8,
            )
        )
        if card.label:
            d.append(
                draw.Text(
                    card.label,
                    13,
                    rect.x + rect.width / 2,
                    rect.y + rect.height / 2,
                    fill=self.theme.text_color,
                    font_family="Inter, system-ui, sans-serif",
                    text_anchor="middle",
                    dominant_baseline="middle",
                )
            )

    def _arrow_geometry(self, arrow: RoutedArrow) -> tuple[str, list[float]]:
        """Build SVG path data for the arrow's curve type.

        Returns the path data and the coordinates used to orient the arrowhead.
        """
        connector = arrow.connector
        curve_type = arrow.style.curve_type

        if curve_type == CurveType.SMOOTH:
            points = connector.path.points
            return svg_path_data(points), points

        if curve_type == CurveType.STEP:
            points = step_path(connector.start, connector.end)
        else:
            points = straight_line(connector.start, connector.end)
        return polyline_path_data(points), points

    def _stroke(self, style: ArrowStyle, **overrides: object) -> dict[str, object]:
        attrs: dict[str, object] = {
            "stroke": style.stroke_color,
            "stroke_width": style.stroke_width,
            "stroke_opacity": style.opacity,
            "stroke_linecap": "round",
            "stroke_linejoin": "round",
            "fill": "none",
        }
        if style.dash_enabled and style.dash_pattern:
            attrs["stroke_dasharray"] = ",".join(f"{v:g}" for v in style.dash_pattern)
        attrs.update(overrides)
        return attrs

    def _render_arrow(
        self,
        d: draw.Drawing,
        arrow: RoutedArrow,
        is_selected: bool,
        show_waypoints: bool,
    ) -> None:
        """Render one routed arrow with glow, main stroke and arrowhead."""
        style = arrow.style
        data, head_points = self._arrow_geometry(arrow)

        if style.shadow_enabled:
            # Soft glow under the stroke
            d.append(draw.Path(d=data, **self._stroke(
                style,
                stroke_width=style.stroke_width + 6,
                stroke_opacity=0.15,
                stroke_dasharray="none",
            )))
            d.append(draw.Path(d=data, **self._stroke(
                style,
                stroke=style.shadow_color or "rgba(0, 0, 0, 0.2)",
                stroke_opacity=style.opacity * 0.4,
            )))

        d.append(draw.Path(d=data, **self._stroke(style)))

        if is_selected:
            # Bright core line
            d.append(draw.Path(d=data, **self._stroke(
                style,
                stroke="white",
                stroke_width=style.stroke_width * 0.4,
                stroke_opacity=0.6,
                stroke_dasharray="none",
            )))

        self._render_arrow_head(d, head_points, style)

        if arrow.arrow.label:
            self._render_label(d, arrow.arrow.label, arrow)

        if show_waypoints:
            for waypoint in arrow.connector.path.waypoints:
                d.append(
                    draw.Circle(
                        waypoint.x, waypoint.y, self.theme.waypoint_radius,
                        fill=style.stroke_color,
                        fill_opacity=0.4,
                    )
                )

    def _render_arrow_head(self, d: draw.Drawing, points: list[float], style: ArrowStyle) -> None:
        head = arrow_head_shape(points, style.arrow_head_size, style.arrow_head_type)
        if head is None:
            return

        if head.head_type == ArrowHeadType.CIRCLE:
            d.append(
                draw.Circle(
                    head.position.x, head.position.y, style.arrow_head_size / 2,
                    fill=style.stroke_color,
                    fill_opacity=style.opacity,
                )
            )
            return

        d.append(
            draw.Lines(
                *_local_to_world(head.points, head.position, head.rotation),
                close=True,
                fill=style.stroke_color,
                fill_opacity=style.opacity,
                stroke=style.stroke_color,
                stroke_width=1,
            )
        )

    def _render_label(self, d: draw.Drawing, label: str, arrow: RoutedArrow) -> None:
        center = curve_center(arrow.connector.path.points)
        label_width = len(label) * 7 + 12
        d.append(
            draw.Rectangle(
                center.x - label_width / 2, center.y - 9, label_width, 18,
                fill="white",
                stroke=arrow.style.stroke_color,
                stroke_width=1,
                rx=4, ry=4,
            )
        )
        d.append(
            draw.Text(
                label,
                11,
                center.x, center.y,
                fill=self.theme.text_secondary,
                font_family="Inter, system-ui, sans-serif",
                text_anchor="middle",
                dominant_baseline="middle",
            )
        )


def render_to_svg(
    board: Whiteboard,
    filename: str | None = None,
    selected: str | None = None,
    show_waypoints: bool = False,
) -> str:
    """Render a whiteboard to SVG.

    Args:
        board: The whiteboard to render
        filename: Optional filename to save to (without extension)
        selected: Id of the selected arrow
        show_waypoints: Draw the selected arrow's waypoints

    Returns:
        SVG content as string
    """
    renderer = WhiteboardRenderer()
    drawing = renderer.render(board, selected=selected, show_waypoints=show_waypoints)

    if filename:
        drawing.save_svg(f"{filename}.svg")

    return drawing.as_svg()
