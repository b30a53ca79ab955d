"""Showcase examples for smartarrow."""

import logging

from smartarrow import RoutingConfig, arrow, card, whiteboard


def hero_example():
    """Hero example: a manual arrow routed around a sticky note."""
    with whiteboard(filename="output/hero", selected="arrow-1", show_waypoints=True):
        paper = card(0, 0, 160, 90, kind="pdf", label="Paper")
        notes = card(420, 0, 160, 90, label="Notes")
        card(220, -40, 120, 170, kind="sticky", label="Open questions")

        paper >> notes | "summarised in"


def example_research_board():
    """Mixed manual and auto arrows between several cards."""
    with whiteboard(filename="output/research_board"):
        question = card(0, 160, 180, 80, kind="text", label="Research question")
        paper_a = card(300, 0, 160, 90, kind="pdf", label="Paper A")
        paper_b = card(300, 320, 160, 90, kind="pdf", label="Paper B")
        quote = card(320, 150, 120, 100, kind="highlight", label="Key quote")
        synthesis = card(620, 160, 180, 80, label="Synthesis")

        # Auto arrows come from links inside the notes
        question - paper_a
        question - paper_b

        # Manual arrows have to find their way around the quote
        question >> synthesis | "answers"
        paper_a >> synthesis
        arrow(paper_b, synthesis, label="contradicts",
              style={"stroke_color": "#ef4444", "arrow_head_type": "diamond"})


def example_styles():
    """Curve types, arrowheads and dashes side by side."""
    with whiteboard(filename="output/styles"):
        for row, (curve, head) in enumerate([
            ("smooth", "triangle"),
            ("straight", "circle"),
            ("step", "diamond"),
        ]):
            y = row * 140
            a = card(0, y, 140, 80, label=f"{curve} from")
            b = card(360, y + 40, 140, 80, label=f"{curve} to")
            arrow(a, b, label=head, style={
                "curve_type": curve,
                "arrow_head_type": head,
                "dash_enabled": row == 1,
                "dash_pattern": (8, 4),
            })


def example_coarse_grid():
    """Same obstacle course routed on a coarse and a fine grid."""
    for name, grid_size in (("coarse", 40), ("fine", 10)):
        with whiteboard(
                filename=f"output/grid_{name}",
                config=RoutingConfig(grid_size=grid_size),
                selected="arrow-1",
                show_waypoints=True,
        ):
            start = card(0, 100, 120, 80, label="Start")
            goal = card(620, 100, 120, 80, label="Goal")
            card(200, 40, 80, 200, kind="sticky", label="Wall 1")
            card(400, 60, 80, 160, kind="sticky", label="Wall 2")

            start >> goal


if __name__ == "__main__":
    import os

    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    os.makedirs("output", exist_ok=True)

    print("Generating hero example...")
    hero_example()

    print("Generating research board...")
    example_research_board()

    print("Generating style gallery...")
    example_styles()

    print("Generating grid comparison...")
    example_coarse_grid()

    print("\nAll examples generated in output/")
