"""flexinfer: infer flex layout from absolutely positioned design trees."""

from flexinfer.layout import (
    LayoutError,
    LayoutTolerances,
    analyze_layout,
    doc_layout_parser,
    layout_parser,
    process_children,
)
from flexinfer.schema import Frame, LayoutAnnotation, LayoutType, NodeSchema, export_json_schema

__version__ = "0.1.0"

__all__ = [
    # Schema
    "NodeSchema",
    "Frame",
    "LayoutType",
    "LayoutAnnotation",
    "export_json_schema",
    # Layout
    "layout_parser",
    "doc_layout_parser",
    "process_children",
    "analyze_layout",
    "LayoutTolerances",
    "LayoutError",
]
