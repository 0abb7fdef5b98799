"""Environment-driven configuration for flexinfer.

Each variable is an `EnvVar` member carrying its name, default, type and
category. `get_environment()` resolves a value as override, then the
process environment, then the default.

Every heuristic threshold used by the layout detectors is exposed here as a
named variable, so detectors can be tuned without touching their code.

Example:
    >>> from flexinfer.config import EnvVar, get_environment
    >>>
    >>> # Typed lookup
    >>> light = get_environment(EnvVar.OVERLAP_LIGHT_TOLERANCE)  # Returns float
    >>>
    >>> # Override at runtime
    >>> light = get_environment(EnvVar.OVERLAP_LIGHT_TOLERANCE, override=-3.0)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, overload

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "FLEXINFER_LOG_LEVEL").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str, int, float, bool).
        description: Human-readable description.
        category: Grouping category for documentation.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """All environment variables used by flexinfer.

    Each member contains an EnvConfig with name, default, type, and description.
    Use with `get_environment()` for type-safe access.

    Categories:
        - classify: Overlap thresholds for child classification
        - split: Row/column band splitting thresholds
        - alignment: Alignment, gap and padding thresholds
        - grid: Grid pattern clustering
        - strategy: Optional split, tolerance and alignment strategies
        - logging: Log output configuration
    """

    # -------------------------------------------------------------------------
    # Child Classification
    # -------------------------------------------------------------------------
    OVERLAP_LIGHT_TOLERANCE = EnvConfig(
        name="FLEXINFER_OVERLAP_LIGHT_TOLERANCE",
        default=-5.0,
        var_type=float,
        description="First-pass overlap tolerance in px (negative shrinks frames)",
        category="classify",
    )
    OVERLAP_CONFIRM_TOLERANCE = EnvConfig(
        name="FLEXINFER_OVERLAP_CONFIRM_TOLERANCE",
        default=-10.0,
        var_type=float,
        description="Overlap depth (px) required to treat a child as stacked",
        category="classify",
    )

    # -------------------------------------------------------------------------
    # Split Analysis
    # -------------------------------------------------------------------------
    ROW_SPLIT_GAP_RATIO = EnvConfig(
        name="FLEXINFER_ROW_SPLIT_GAP_RATIO",
        default=0.2,
        var_type=float,
        description="Allowed vertical overlap between rows, as a ratio of mean height",
        category="split",
    )
    COLUMN_SPLIT_GAP_RATIO = EnvConfig(
        name="FLEXINFER_COLUMN_SPLIT_GAP_RATIO",
        default=0.25,
        var_type=float,
        description="Allowed horizontal overlap between columns, as a ratio of mean width",
        category="split",
    )
    SPLIT_FALLBACK_TOLERANCE = EnvConfig(
        name="FLEXINFER_SPLIT_FALLBACK_TOLERANCE",
        default=-2.0,
        var_type=float,
        description="Split tolerance (px) when no element has a usable size",
        category="split",
    )

    # -------------------------------------------------------------------------
    # Alignment, Gap and Padding
    # -------------------------------------------------------------------------
    ALIGN_MIN_TOLERANCE = EnvConfig(
        name="FLEXINFER_ALIGN_MIN_TOLERANCE",
        default=5.0,
        var_type=float,
        description="Minimum margin tolerance (px) for alignment detection",
        category="alignment",
    )
    ALIGN_TOLERANCE_RATIO = EnvConfig(
        name="FLEXINFER_ALIGN_TOLERANCE_RATIO",
        default=0.05,
        var_type=float,
        description="Margin tolerance as a ratio of the container dimension",
        category="alignment",
    )
    SPACE_BETWEEN_GAP_SPREAD = EnvConfig(
        name="FLEXINFER_SPACE_BETWEEN_GAP_SPREAD",
        default=10.0,
        var_type=float,
        description="Max deviation (px) of a gap from the mean for space-between",
        category="alignment",
    )
    PADDING_THRESHOLD = EnvConfig(
        name="FLEXINFER_PADDING_THRESHOLD",
        default=2.0,
        var_type=float,
        description="Padding insets at or below this value (px) are reported as 0",
        category="alignment",
    )

    # -------------------------------------------------------------------------
    # Grid Detection
    # -------------------------------------------------------------------------
    GRID_CLUSTER_TOLERANCE = EnvConfig(
        name="FLEXINFER_GRID_CLUSTER_TOLERANCE",
        default=5.0,
        var_type=float,
        description="Distance (px) within which left/top values share a grid line",
        category="grid",
    )
    GRID_MIN_CHILDREN = EnvConfig(
        name="FLEXINFER_GRID_MIN_CHILDREN",
        default=4,
        var_type=int,
        description="Minimum number of framed children for grid detection",
        category="grid",
    )

    # -------------------------------------------------------------------------
    # Detection Strategies
    # -------------------------------------------------------------------------
    SPLIT_STRATEGY = EnvConfig(
        name="FLEXINFER_SPLIT_STRATEGY",
        default="sweep",
        var_type=str,
        description="Split analysis: 'sweep' or 'scored' (best scored strategy)",
        category="strategy",
    )
    ADAPTIVE_TOLERANCE = EnvConfig(
        name="FLEXINFER_ADAPTIVE_TOLERANCE",
        default=False,
        var_type=bool,
        description="Derive split and overlap tolerances from the children",
        category="strategy",
    )
    SCORED_ALIGNMENT = EnvConfig(
        name="FLEXINFER_SCORED_ALIGNMENT",
        default=False,
        var_type=bool,
        description="Pick alignment by confidence score instead of margin rules",
        category="strategy",
    )

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    LOG_LEVEL = EnvConfig(
        name="FLEXINFER_LOG_LEVEL",
        default="INFO",
        var_type=str,
        description="Log level for the CLI (DEBUG, INFO, WARNING, ERROR)",
        category="logging",
    )
    LOG_DECISIONS = EnvConfig(
        name="FLEXINFER_LOG_DECISIONS",
        default=False,
        var_type=bool,
        description="Log every per-container layout decision at INFO level",
        category="logging",
    )


# =============================================================================
# Type Conversion Helpers
# =============================================================================

_TRUTHY = frozenset({"true", "1", "yes", "on"})
_FALSY = frozenset({"false", "0", "no", "off"})


def _parse_bool(value: str) -> bool | None:
    """Map a flag-like string to a bool, or None when it is not one."""
    token = value.strip().lower()
    if token in _TRUTHY:
        return True
    if token in _FALSY:
        return False
    return None


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Coerce a raw environment string to `var_type`.

    Unset or unparseable values resolve to `default`; a malformed threshold
    never raises.
    """
    if value is None or var_type is str:
        return default if value is None else value

    if var_type is bool:
        parsed = _parse_bool(value)
        return default if parsed is None else parsed

    if var_type in (int, float):
        try:
            return var_type(value)
        except ValueError:
            return default

    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...
@overload
def get_environment(env_var: EnvVar, override: float) -> float: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: bool) -> bool: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Resolve a configuration variable to a typed value.

    An explicit `override` wins, then the process environment, then the
    default declared on the variable.

    Args:
        env_var: Environment variable enum member.
        override: Value used instead of the environment when not None.

    Returns:
        Value converted to the appropriate type (str, int, float, or bool).

    Example:
        >>> get_environment(EnvVar.GRID_CLUSTER_TOLERANCE)
        5.0
        >>> get_environment(EnvVar.GRID_CLUSTER_TOLERANCE, override=8.0)
        8.0
    """
    config: EnvConfig = env_var.value

    if override is not None:
        return override

    raw_value = os.environ.get(config.name)

    return _convert_value(raw_value, config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable.

    Args:
        env_var: Environment variable enum member.

    Returns:
        EnvConfig with name, default, type, and description.
    """
    return env_var.value


def get_log_level(override: str | None = None) -> str:
    """Get the configured log level name, upper-cased.

    Unknown names fall back to the default so a typo in the environment
    never prevents the CLI from starting.
    """
    default = EnvVar.LOG_LEVEL.value.default
    level = str(get_environment(EnvVar.LOG_LEVEL, override=override)).upper()
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        return default
    return level


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (classify, split, alignment, grid,
                 logging). None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    "get_log_level",
    # Introspection
    "list_environment_variables",
]
