"""Centralized configuration management for flexinfer.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from flexinfer.config import EnvVar, get_environment
    >>>
    >>> # Get any environment variable with automatic type conversion
    >>> light = get_environment(EnvVar.OVERLAP_LIGHT_TOLERANCE)  # -5.0
    >>>
    >>> # Override at runtime
    >>> light = get_environment(EnvVar.OVERLAP_LIGHT_TOLERANCE, override=-3.0)
    >>>
    >>> # List available variables by category
    >>> for var in list_environment_variables("split"):
    ...     info = get_environment_info(var)
    ...     print(f"{info.name}: {info.description}")

Environment Variable Categories:
    classify: Overlap thresholds used to detect stacked children
    split: Row/column band splitting thresholds
    alignment: Alignment, gap and padding thresholds
    grid: Grid pattern clustering
    logging: Log output configuration
"""

from .lib import (
    EnvConfig,
    EnvVar,
    get_environment,
    get_environment_info,
    get_log_level,
    list_environment_variables,
)

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
