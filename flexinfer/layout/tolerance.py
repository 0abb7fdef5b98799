"""Named thresholds and strategy switches consumed by the layout detectors.

Each detector takes an optional `tolerances` argument. Omitting it uses
`DEFAULT_TOLERANCES`; the layout parser resolves them from the environment
with `LayoutTolerances.from_environment()`.

The switches all default to the band sweep with fixed ratios and the
margin-rule alignment; the scored and adaptive paths are opt-in.
"""

from dataclasses import dataclass
from enum import Enum

from flexinfer.config import EnvVar, get_environment
from flexinfer.core.log import get_logger

logger = get_logger(__name__)


class SplitMode(str, Enum):
    """Split analysis used by the layout-type determiner.

    - SWEEP: Order-preserving band sweep (`split_to_row` / `split_to_column`)
    - SCORED: Highest scoring of the four strategies in `strategies`
    """

    SWEEP = "sweep"
    SCORED = "scored"


@dataclass(frozen=True)
class LayoutTolerances:
    """Heuristic thresholds for classification, splitting and alignment.

    Attributes:
        overlap_light: First-pass overlap tolerance (px, negative shrinks).
        overlap_confirm: Overlap tolerance that confirms stacking (px).
        row_split_gap_ratio: Allowed overlap between rows, ratio of mean height.
        column_split_gap_ratio: Allowed overlap between columns, ratio of mean width.
        split_fallback: Split tolerance when no child has a usable size (px).
        align_min: Minimum margin tolerance for alignment (px).
        align_ratio: Margin tolerance as a ratio of the container dimension.
        space_between_gap_spread: Max gap deviation from the mean (px).
        padding_threshold: Insets at or below this are reported as 0 (px).
        grid_cluster: Distance within which edges share a grid line (px).
        grid_min_children: Minimum framed children for grid detection.
        split_mode: Split analysis used by the determiner.
        adaptive: Replace the split ratios and overlap thresholds with
            tolerances measured from the children.
        scored_alignment: Pick alignment by confidence score.
    """

    overlap_light: float = -5.0
    overlap_confirm: float = -10.0
    row_split_gap_ratio: float = 0.2
    column_split_gap_ratio: float = 0.25
    split_fallback: float = -2.0
    align_min: float = 5.0
    align_ratio: float = 0.05
    space_between_gap_spread: float = 10.0
    padding_threshold: float = 2.0
    grid_cluster: float = 5.0
    grid_min_children: int = 4
    split_mode: SplitMode = SplitMode.SWEEP
    adaptive: bool = False
    scored_alignment: bool = False

    @classmethod
    def from_environment(cls) -> "LayoutTolerances":
        """Build tolerances from FLEXINFER_* variables, falling back to defaults."""
        return cls(
            overlap_light=get_environment(EnvVar.OVERLAP_LIGHT_TOLERANCE),
            overlap_confirm=get_environment(EnvVar.OVERLAP_CONFIRM_TOLERANCE),
            row_split_gap_ratio=get_environment(EnvVar.ROW_SPLIT_GAP_RATIO),
            column_split_gap_ratio=get_environment(EnvVar.COLUMN_SPLIT_GAP_RATIO),
            split_fallback=get_environment(EnvVar.SPLIT_FALLBACK_TOLERANCE),
            align_min=get_environment(EnvVar.ALIGN_MIN_TOLERANCE),
            align_ratio=get_environment(EnvVar.ALIGN_TOLERANCE_RATIO),
            space_between_gap_spread=get_environment(EnvVar.SPACE_BETWEEN_GAP_SPREAD),
            padding_threshold=get_environment(EnvVar.PADDING_THRESHOLD),
            grid_cluster=get_environment(EnvVar.GRID_CLUSTER_TOLERANCE),
            grid_min_children=get_environment(EnvVar.GRID_MIN_CHILDREN),
            split_mode=_split_mode(get_environment(EnvVar.SPLIT_STRATEGY)),
            adaptive=get_environment(EnvVar.ADAPTIVE_TOLERANCE),
            scored_alignment=get_environment(EnvVar.SCORED_ALIGNMENT),
        )


def _split_mode(value: str) -> SplitMode:
    try:
        return SplitMode(value.strip().lower())
    except ValueError:
        logger.warning("Unknown split strategy '%s', using 'sweep'", value)
        return SplitMode.SWEEP


DEFAULT_TOLERANCES = LayoutTolerances()


__all__ = ["LayoutTolerances", "SplitMode", "DEFAULT_TOLERANCES"]
