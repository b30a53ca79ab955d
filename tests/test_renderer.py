"""Tests for renderer.py module."""

import drawsvg as draw
import pytest

from smartarrow.board import Whiteboard
from smartarrow.models import Point, Rectangle
from smartarrow.renderer import Theme, WhiteboardRenderer, _local_to_world, render_to_svg


class TestWhiteboardRenderer:
    """Rendering cards and arrows to SVG."""

    def test_returns_drawing(self, board):
        board.connect("a", "b")
        drawing = WhiteboardRenderer().render(board)
        assert isinstance(drawing, draw.Drawing)

    def test_cards_and_labels(self, board):
        svg = render_to_svg(board)
        assert svg.count("<rect") >= 4  # Background plus three cards
        assert "Source" in svg
        assert "Blocker" in svg

    def test_empty_board(self):
        svg = render_to_svg(Whiteboard())
        assert svg.startswith("<?xml") or "<svg" in svg

    def test_routed_arrow_is_a_curve(self, board):
        board.connect("a", "b")
        svg = render_to_svg(board)
        assert " C" in svg
        assert "#3b82f6" in svg

    def test_step_arrow_is_a_polyline(self, board):
        board.connect("a", "b", style={"curve_type": "step"})
        svg = render_to_svg(board)
        assert " L" in svg

    def test_dash_pattern(self, board):
        board.connect("a", "b", style={"dash_enabled": True, "dash_pattern": (8, 4)})
        svg = render_to_svg(board)
        assert 'stroke-dasharray="8,4"' in svg

    def test_arrow_label(self, board):
        board.connect("a", "b", label="summarised in")
        assert "summarised in" in render_to_svg(board)

    def test_circle_head(self, board):
        board.connect("a", "b", style={"arrow_head_type": "circle"})
        assert "<circle" in render_to_svg(board)

    def test_waypoints_only_for_selected_arrow(self, board):
        board.connect("a", "b")
        waypoints = board.route("arrow-1", selected=True).connector.path.waypoints

        plain = render_to_svg(board, show_waypoints=True)
        selected = render_to_svg(board, selected="arrow-1", show_waypoints=True)

        assert "<circle" not in plain
        assert selected.count("<circle") == len(waypoints)

    def test_custom_theme(self, board):
        renderer = WhiteboardRenderer(theme=Theme(background="#123456"))
        assert "#123456" in renderer.render(board).as_svg()

    def test_save_to_file(self, board, tmp_path):
        board.connect("a", "b")
        filename = tmp_path / "board"

        svg = render_to_svg(board, str(filename))

        saved = (tmp_path / "board.svg").read_text()
        assert "<path" in svg
        assert "<path" in saved


class TestLocalToWorld:
    def test_rotation_and_translation(self):
        world = _local_to_world([0, 0, -10, 0], Point(5, 5), 90)
        assert world == pytest.approx([5, 5, 5, -5])

    def test_no_rotation(self):
        assert _local_to_world([-11, -5.5], Point(100, 0), 0) == [89, -5.5]
