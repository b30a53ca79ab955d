"""Connection point selection on card boundaries."""

from __future__ import annotations

import math

from .models import ConnectionPoint, Point, Rectangle, Side


def select_edge_point(rect: Rectangle, target: Point) -> Point:
    """Find where a ray from the rectangle center towards target leaves it.

    The exit point is clamped into the rectangle to absorb floating-point
    overshoot. When the target sits on the center there is no direction to
    follow and the right-middle point is returned.

    Args:
        rect: The card the connector attaches to
        target: Point the connector heads towards (usually the other card's center)

    Returns:
        Boundary point of rect
    """
    center = rect.center
    dx = target.x - center.x
    dy = target.y - center.y

    half_width = rect.width / 2
    half_height = rect.height / 2

    t_right = half_width / dx if dx > 0 else math.inf
    t_left = -half_width / dx if dx < 0 else math.inf
    t_bottom = half_height / dy if dy > 0 else math.inf
    t_top = -half_height / dy if dy < 0 else math.inf

    t = min(t_right, t_left, t_bottom, t_top)
    if not math.isfinite(t):
        return _right_middle(rect)

    edge_x = center.x + t * dx
    edge_y = center.y + t * dy
    if not (math.isfinite(edge_x) and math.isfinite(edge_y)):
        return _right_middle(rect)

    return Point(
        max(rect.x, min(edge_x, rect.right)),
        max(rect.y, min(edge_y, rect.bottom)),
    )


def _right_middle(rect: Rectangle) -> Point:
    return Point(rect.right, rect.y + rect.height / 2)


def side_of_point(rect: Rectangle, point: Point) -> Side:
    """Return the boundary side closest to a point.

    Corner points resolve in the order right, bottom, left, top.
    """
    distances = [
        (abs(point.x - rect.right), Side.RIGHT),
        (abs(point.y - rect.bottom), Side.BOTTOM),
        (abs(point.x - rect.x), Side.LEFT),
        (abs(point.y - rect.y), Side.TOP),
    ]
    best_distance, best_side = distances[0]
    for distance, side in distances[1:]:
        if distance < best_distance:
            best_distance, best_side = distance, side
    return best_side


def connection_point_on_side(
    rect: Rectangle,
    side: Side,
    target: Point | None = None,
) -> ConnectionPoint:
    """Get a connection point on a specific side of a rectangle.

    With a target the point slides along the side to line up with it,
    otherwise the side midpoint is used.
    """
    if side in (Side.TOP, Side.BOTTOM):
        y = rect.y if side == Side.TOP else rect.bottom
        if target is not None:
            x = max(rect.x, min(rect.right, target.x))
        else:
            x = rect.x + rect.width / 2
    else:
        x = rect.right if side == Side.RIGHT else rect.x
        if target is not None:
            y = max(rect.y, min(rect.bottom, target.y))
        else:
            y = rect.y + rect.height / 2
    return ConnectionPoint(x, y, side=side, angle=side.angle)


def connection_point(
    rect: Rectangle,
    target: Point,
    preferred_side: Side | None = None,
) -> ConnectionPoint:
    """Turn a card rectangle into the connection point handed to the router.

    Args:
        rect: Card bounds
        target: The other endpoint's center
        preferred_side: Side chosen by the user, if any

    Returns:
        ConnectionPoint on the card boundary
    """
    if preferred_side is not None:
        return connection_point_on_side(rect, preferred_side, target)

    edge = select_edge_point(rect, target)
    side = side_of_point(rect, edge)
    return ConnectionPoint(edge.x, edge.y, side=side, angle=side.angle)
