"""smartarrow - Obstacle-aware connector routing for whiteboards.

Example usage:
    from smartarrow import whiteboard, card

    with whiteboard(filename="research"):
        paper = card(0, 0, 160, 90, kind="pdf", label="Paper")
        notes = card(400, 0, 160, 90, label="Notes")
        card(220, -20, 120, 140, kind="sticky", label="Open questions")

        paper >> notes | "summarised in"

Or route a single connector directly:
    from smartarrow import Point, Rectangle, find_arrow_path

    path = find_arrow_path(Point(100, 25), Point(300, 25), [Rectangle(150, 0, 50, 100)])
"""

from .board import (
    Arrow,
    Card,
    CardKind,
    RoutedArrow,
    UnknownArrowError,
    UnknownCardError,
    Whiteboard,
)
from .curves import (
    ArrowHead,
    arrow_head_shape,
    create_smooth_curve,
    sample_curve,
    svg_path_data,
)
from .dsl import (
    ArrowRef,
    CardRef,
    arrow,
    card,
    whiteboard,
)
from .edges import (
    connection_point,
    select_edge_point,
)
from .models import (
    ARROW_STYLE_PRESETS,
    ArrowHeadType,
    ArrowStyle,
    ConnectionPoint,
    CurveType,
    PathResult,
    Point,
    Rectangle,
    Side,
    preset,
    resolve_style,
)
from .pathfinding import (
    RoutingConfig,
    adjust_waypoints_for_clearance,
    astar,
    simplify_path,
)
from .renderer import (
    DEFAULT_THEME,
    Theme,
    WhiteboardRenderer,
    render_to_svg,
)
from .router import (
    Connector,
    find_arrow_path,
    route_connector,
)

__version__ = "0.1.0"

__all__ = [
    # DSL functions
    "whiteboard",
    "card",
    "arrow",
    "CardRef",
    "ArrowRef",
    # Models
    "Point",
    "Rectangle",
    "Side",
    "ConnectionPoint",
    "PathResult",
    "CurveType",
    "ArrowHeadType",
    "ArrowStyle",
    "ARROW_STYLE_PRESETS",
    "preset",
    "resolve_style",
    # Board
    "Whiteboard",
    "Card",
    "CardKind",
    "Arrow",
    "RoutedArrow",
    "UnknownCardError",
    "UnknownArrowError",
    # Routing
    "find_arrow_path",
    "route_connector",
    "Connector",
    "select_edge_point",
    "connection_point",
    "RoutingConfig",
    "astar",
    "simplify_path",
    "adjust_waypoints_for_clearance",
    # Curves
    "create_smooth_curve",
    "sample_curve",
    "svg_path_data",
    "arrow_head_shape",
    "ArrowHead",
    # Rendering
    "render_to_svg",
    "WhiteboardRenderer",
    "Theme",
    "DEFAULT_THEME",
    # Version
    "__version__",
]
