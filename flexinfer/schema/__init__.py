"""Schema models for design trees and inferred layout annotations.

Example usage:
    >>> from flexinfer.schema import Frame, NodeSchema
    >>> node = NodeSchema.model_validate({
    ...     "id": "card",
    ...     "componentName": "View",
    ...     "frame": {"left": 0, "top": 0, "width": 320, "height": 120},
    ...     "x-layout": {"fixed": True},
    ... })
    >>> node.fixed_position
    True
"""

from .lib import (
    AlignHorizontal,
    AlignVertical,
    ExtendedAlignHorizontal,
    ExtendedAlignVertical,
    Frame,
    GridPattern,
    LayoutAnnotation,
    LayoutType,
    LoopConfig,
    NodeSchema,
    Padding,
    Placement,
    export_json_schema,
)

__all__ = [
    # Enums
    "LayoutType",
    "AlignHorizontal",
    "AlignVertical",
    "ExtendedAlignHorizontal",
    "ExtendedAlignVertical",
    "Placement",
    # Models
    "Frame",
    "LoopConfig",
    "Padding",
    "GridPattern",
    "LayoutAnnotation",
    "NodeSchema",
    # Export
    "export_json_schema",
]
