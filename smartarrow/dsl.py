"""Python DSL for sketching whiteboards."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Literal

from .board import Arrow, CardKind, Whiteboard
from .models import Rectangle, Side
from .renderer import render_to_svg

if TYPE_CHECKING:
    from collections.abc import Generator, Mapping

    from .pathfinding import RoutingConfig

# Type aliases for string shorthands
KindLiteral = Literal["note", "sticky", "text", "pdf", "highlight"]
SideLiteral = Literal["top", "right", "bottom", "left"]

# Context stack for nested whiteboard blocks
_board_stack: list[Whiteboard] = []


def _current_board() -> Whiteboard:
    """Get the current whiteboard context."""
    if not _board_stack:
        raise RuntimeError("card() and arrow() must be called inside a whiteboard() block")
    return _board_stack[-1]


def _parse_side(value: SideLiteral | Side | None) -> Side | None:
    if value is None or isinstance(value, Side):
        return value
    return Side(value)


@contextmanager
def whiteboard(
        filename: str | None = None,
        config: RoutingConfig | None = None,
        selected: str | None = None,
        show_waypoints: bool = False,
) -> Generator[Whiteboard]:
    """Create a whiteboard context.

    Usage:
        with whiteboard(filename="research"):
            paper = card(0, 0, 160, 90, kind="pdf", label="Paper")
            notes = card(400, 0, 160, 90, label="Notes")
            card(220, -20, 120, 140, kind="sticky", label="Open questions")
            paper >> notes | "summarised in"

    Args:
        filename: Output filename (without extension); nothing is written when None
        config: Routing configuration for every arrow on the board
        selected: Id of the arrow to draw as selected
        show_waypoints: Draw the selected arrow's route waypoints

    Yields:
        The Whiteboard object
    """
    board = Whiteboard(config=config)
    _board_stack.append(board)
    try:
        yield board
    finally:
        _board_stack.pop()

    if filename:
        render_to_svg(board, filename, selected=selected, show_waypoints=show_waypoints)


class CardRef:
    """Handle on a card of the current whiteboard.

    ``a >> b`` draws a manual arrow, ``a - b`` an auto (link) arrow.
    """

    def __init__(self, board: Whiteboard, card_id: str):
        self.board = board
        self.id = card_id

    @property
    def rect(self) -> Rectangle:
        return self.board.card(self.id).rect

    def move_to(self, x: float, y: float) -> CardRef:
        rect = self.rect
        self.board.move_card(self.id, Rectangle(x, y, rect.width, rect.height))
        return self

    def __rshift__(self, other: CardRef) -> ArrowRef:
        return ArrowRef(self.board, self.board.connect(self.id, other.id, manual=True))

    def __sub__(self, other: CardRef) -> ArrowRef:
        return ArrowRef(self.board, self.board.connect(self.id, other.id, manual=False))

    def __repr__(self) -> str:
        return f"CardRef({self.id!r})"


class ArrowRef:
    """Handle on an arrow; supports chaining and labels."""

    def __init__(self, board: Whiteboard, arrow: Arrow):
        self.board = board
        self.id = arrow.id

    @property
    def arrow(self) -> Arrow:
        return self.board.arrow(self.id)

    def __or__(self, label: str) -> ArrowRef:
        """Add a label to the arrow using | operator."""
        self.board.relabel(self.id, label)
        return self

    def __rshift__(self, other: CardRef) -> ArrowRef:
        """Chain arrows: a >> b >> c."""
        current = self.arrow
        return ArrowRef(
            self.board,
            self.board.connect(current.target, other.id, manual=current.manual),
        )

    def __repr__(self) -> str:
        return f"ArrowRef({self.id!r})"


def card(
        x: float,
        y: float,
        width: float = 200,
        height: float = 120,
        kind: KindLiteral | CardKind = "note",
        label: str = "",
        id: str | None = None,
) -> CardRef:
    """Place a card on the current whiteboard.

    Args:
        x: Left edge
        y: Top edge
        width: Card width
        height: Card height
        kind: "note", "sticky", "text", "pdf" or "highlight"
        label: Text drawn in the card
        id: Card id; defaults to the label, or to "<kind>-N" when the label
            is empty or already taken

    Returns:
        CardRef usable with the >> and - operators
    """
    board = _current_board()
    card_kind = kind if isinstance(kind, CardKind) else CardKind(kind)
    card_id = id or _generate_card_id(board, card_kind, label)
    board.add_card(card_id, Rectangle(x, y, width, height), kind=card_kind, label=label)
    return CardRef(board, card_id)


def _generate_card_id(board: Whiteboard, kind: CardKind, label: str) -> str:
    if label and label not in board.graph:
        return label
    n = board.graph.number_of_nodes() + 1
    while f"{kind.value}-{n}" in board.graph:
        n += 1
    return f"{kind.value}-{n}"


def arrow(
        source: CardRef,
        target: CardRef,
        label: str = "",
        manual: bool = True,
        style: Mapping[str, Any] | None = None,
        source_side: SideLiteral | Side | None = None,
        target_side: SideLiteral | Side | None = None,
) -> ArrowRef:
    """Connect two cards with full control over the arrow.

    Usage:
        arrow(paper, notes, label="cites", target_side="left")
        arrow(a, b, style={"stroke_color": "#ef4444", "dash_enabled": True,
                           "dash_pattern": (4, 4)})

    Args:
        source: Card the arrow leaves from
        target: Card the arrow points at
        label: Optional arrow label
        manual: Manual (user drawn) or auto (link) arrow
        style: ArrowStyle field overrides
        source_side: Preferred side on the source card
        target_side: Preferred side on the target card

    Returns:
        The ArrowRef
    """
    board = source.board
    return ArrowRef(
        board,
        board.connect(
            source.id,
            target.id,
            manual=manual,
            style=style,
            label=label,
            source_side=_parse_side(source_side),
            target_side=_parse_side(target_side),
        ),
    )
