"""Whiteboard connection graph: cards as nodes, arrows as edges."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any

import networkx as nx

from .models import ArrowStyle, Rectangle, Side, resolve_style
from .router import Connector, route_connector

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from .pathfinding import RoutingConfig

logger = logging.getLogger(__name__)


class CardKind(Enum):
    """Kinds of whiteboard elements an arrow can attach to."""

    NOTE = "note"
    STICKY = "sticky"
    TEXT = "text"
    PDF = "pdf"
    HIGHLIGHT = "highlight"


class UnknownCardError(KeyError):
    """Raised when a card id is not on the board."""


class UnknownArrowError(KeyError):
    """Raised when an arrow id is not on the board."""


@dataclass(frozen=True)
class Card:
    """A whiteboard element with its current on-screen bounds."""

    id: str
    rect: Rectangle
    kind: CardKind = CardKind.NOTE
    label: str = ""


@dataclass(frozen=True)
class Arrow:
    """A connection between two cards."""

    id: str
    source: str
    target: str
    # Manual arrows are drawn by the user, auto arrows come from note links
    manual: bool = True
    style: Mapping[str, Any] = field(default_factory=dict)
    label: str = ""
    source_side: Side | None = None
    target_side: Side | None = None


@dataclass
class RoutedArrow:
    """An arrow with its route and effective style."""

    arrow: Arrow
    connector: Connector
    style: ArrowStyle


class Whiteboard:
    """Cards and the arrows connecting them.

    Backed by a ``networkx.MultiDiGraph`` keyed by arrow id, so several
    arrows may join the same pair of cards.
    """

    def __init__(self, config: RoutingConfig | None = None):
        self.config = config
        self.graph: nx.MultiDiGraph = nx.MultiDiGraph()
        self._arrow_ends: dict[str, tuple[str, str]] = {}
        self._ids = itertools.count(1)

    # -- cards -----------------------------------------------------------

    def add_card(
        self,
        card_id: str,
        rect: Rectangle,
        kind: CardKind = CardKind.NOTE,
        label: str = "",
    ) -> Card:
        if card_id in self.graph:
            raise ValueError(f"Card '{card_id}' is already on the board")
        card = Card(id=card_id, rect=rect, kind=kind, label=label)
        self.graph.add_node(card_id, card=card)
        return card

    def card(self, card_id: str) -> Card:
        try:
            return self.graph.nodes[card_id]["card"]
        except KeyError:
            raise UnknownCardError(card_id) from None

    def cards(self) -> Iterator[Card]:
        for _, card in self.graph.nodes(data="card"):
            yield card

    def move_card(self, card_id: str, rect: Rectangle) -> Card:
        """Update a card's bounds, e.g. while it is being dragged."""
        card = replace(self.card(card_id), rect=rect)
        self.graph.nodes[card_id]["card"] = card
        return card

    def remove_card(self, card_id: str) -> None:
        """Remove a card together with every arrow attached to it."""
        self.card(card_id)
        for arrow in list(self.arrows_for(card_id)):
            del self._arrow_ends[arrow.id]
        self.graph.remove_node(card_id)

    # -- arrows ----------------------------------------------------------

    def connect(
        self,
        source: str,
        target: str,
        arrow_id: str | None = None,
        manual: bool = True,
        style: Mapping[str, Any] | None = None,
        label: str = "",
        source_side: Side | None = None,
        target_side: Side | None = None,
    ) -> Arrow:
        """Add an arrow between two cards already on the board.

        Raises ValueError for unknown style fields or enum values, so an
        invalid arrow never reaches the board.
        """
        self.card(source)
        self.card(target)
        resolve_style(manual=manual, overrides=style)
        if arrow_id is None:
            arrow_id = f"arrow-{next(self._ids)}"
            while arrow_id in self._arrow_ends:
                arrow_id = f"arrow-{next(self._ids)}"
        elif arrow_id in self._arrow_ends:
            raise ValueError(f"Arrow '{arrow_id}' is already on the board")

        arrow = Arrow(
            id=arrow_id,
            source=source,
            target=target,
            manual=manual,
            style=dict(style or {}),
            label=label,
            source_side=source_side,
            target_side=target_side,
        )
        self.graph.add_edge(source, target, key=arrow_id, arrow=arrow)
        self._arrow_ends[arrow_id] = (source, target)
        return arrow

    def arrow(self, arrow_id: str) -> Arrow:
        try:
            source, target = self._arrow_ends[arrow_id]
        except KeyError:
            raise UnknownArrowError(arrow_id) from None
        return self.graph.edges[source, target, arrow_id]["arrow"]

    def arrows(self) -> Iterator[Arrow]:
        for _, _, arrow in self.graph.edges(data="arrow"):
            yield arrow

    def relabel(self, arrow_id: str, label: str) -> Arrow:
        arrow = replace(self.arrow(arrow_id), label=label)
        self.graph.edges[arrow.source, arrow.target, arrow_id]["arrow"] = arrow
        return arrow

    def disconnect(self, arrow_id: str) -> None:
        arrow = self.arrow(arrow_id)
        self.graph.remove_edge(arrow.source, arrow.target, key=arrow_id)
        del self._arrow_ends[arrow_id]

    def arrows_for(self, card_id: str) -> Iterator[Arrow]:
        """Arrows leaving or entering a card, i.e. those to re-route when it moves."""
        self.card(card_id)
        seen: set[str] = set()
        edges = itertools.chain(
            self.graph.out_edges(card_id, data="arrow"),
            self.graph.in_edges(card_id, data="arrow"),
        )
        for _, _, arrow in edges:
            # Self-loops show up on both sides
            if arrow.id not in seen:
                seen.add(arrow.id)
                yield arrow

    # -- routing ---------------------------------------------------------

    def obstacles_for(self, arrow_id: str) -> list[Rectangle]:
        """Bounds of every card except the arrow's own two."""
        arrow = self.arrow(arrow_id)
        return [
            card.rect for card in self.cards()
            if card.id not in (arrow.source, arrow.target)
        ]

    def route(
        self,
        arrow_id: str,
        selected: bool = False,
        preview: bool = False,
    ) -> RoutedArrow:
        """Route a single arrow against the current card positions."""
        arrow = self.arrow(arrow_id)
        connector = route_connector(
            self.card(arrow.source).rect,
            self.card(arrow.target).rect,
            self.obstacles_for(arrow_id),
            source_side=arrow.source_side,
            target_side=arrow.target_side,
            config=self.config,
        )
        style = resolve_style(
            manual=arrow.manual,
            preview=preview,
            selected=selected,
            overrides=arrow.style,
        )
        return RoutedArrow(arrow=arrow, connector=connector, style=style)

    def route_all(self, selected: str | None = None) -> dict[str, RoutedArrow]:
        """Route every arrow on the board, keyed by arrow id."""
        routed = {
            arrow.id: self.route(arrow.id, selected=arrow.id == selected)
            for arrow in self.arrows()
        }
        logger.debug("Routed %d arrows across %d cards", len(routed), self.graph.number_of_nodes())
        return routed
