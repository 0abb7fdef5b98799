"""Grid pattern detection."""

from collections.abc import Iterable, Sequence

from flexinfer.geometry import get_node_frame
from flexinfer.schema import GridPattern, NodeSchema

from .tolerance import DEFAULT_TOLERANCES, LayoutTolerances


def _cluster(values: Iterable[float], tolerance: float) -> list[float]:
    """First-fit clustering: a value joins the first representative within tolerance."""
    representatives: list[float] = []
    for value in values:
        if not any(abs(value - rep) <= tolerance for rep in representatives):
            representatives.append(value)
    return representatives


def detect_grid_pattern(
    children: Sequence[NodeSchema],
    tolerances: LayoutTolerances | None = None,
) -> GridPattern:
    """Detect a rows x columns arrangement of framed children.

    Distinct `left` values give the columns and distinct `top` values the
    rows. A grid needs at least two of each and a child count within one of
    `rows * columns`, which allows a short last row.
    """
    tol = tolerances or DEFAULT_TOLERANCES
    frames = [f for f in map(get_node_frame, children) if f is not None]
    if len(frames) < tol.grid_min_children:
        return GridPattern()

    columns = len(_cluster((f.left for f in frames), tol.grid_cluster))
    rows = len(_cluster((f.top for f in frames), tol.grid_cluster))
    is_grid = columns >= 2 and rows >= 2 and abs(len(frames) - rows * columns) <= 1

    return GridPattern(is_grid=is_grid, columns=columns, rows=rows)


__all__ = ["detect_grid_pattern"]
