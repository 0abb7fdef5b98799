"""Authoritative schema module for design trees and inferred layouts.

This module is the single source of truth for the data exchanged with
flexinfer. It provides:
- Layout vocabulary enums (layout type, alignment, child placement)
- The `Frame` geometry model and the recursive `NodeSchema` tree node
- Output annotation models written by the layout parser
- JSON Schema export for producers of design trees

Input trees arrive in the design-tool shape (camelCase keys, an untyped
`x-layout` bag, `props.style.display`). Those loosely typed markers are lifted
into explicit fields at validation time, so the rest of the package never
inspects property bags.
"""

from enum import Enum
from numbers import Real
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class LayoutType(str, Enum):
    """Inferred arrangement of a container's normal-flow children.

    Maps to CSS flex-direction concepts:
    - ROW: Children flow left-to-right (flex-direction: row)
    - COLUMN: Children flow top-to-bottom (flex-direction: column)
    - MIX: No clean single-axis split; children keep absolute positions
    """

    ROW = "row"
    COLUMN = "column"
    MIX = "mix"


class AlignHorizontal(str, Enum):
    """Horizontal placement of content inside its container."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    JUSTIFY = "justify"
    SPACE_BETWEEN = "space-between"


class AlignVertical(str, Enum):
    """Vertical placement of content inside its container."""

    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"
    STRETCH = "stretch"


class ExtendedAlignHorizontal(str, Enum):
    """Horizontal alignments told apart by the scored analysis.

    SPACE_AROUND and SPACE_EVENLY have no annotation value of their own and
    normalize to `AlignHorizontal.SPACE_BETWEEN`.
    """

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    JUSTIFY = "justify"
    SPACE_BETWEEN = "space-between"
    SPACE_AROUND = "space-around"
    SPACE_EVENLY = "space-evenly"


class ExtendedAlignVertical(str, Enum):
    """Vertical alignments told apart by the scored analysis.

    BASELINE and the distributed values normalize to `AlignVertical.TOP`.
    """

    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"
    STRETCH = "stretch"
    BASELINE = "baseline"
    SPACE_BETWEEN = "space-between"
    SPACE_AROUND = "space-around"
    SPACE_EVENLY = "space-evenly"


class Placement(str, Enum):
    """Bucket a child was sorted into by the classifier.

    - NORMAL: Participates in the flex flow
    - ABSOLUTE: Stacked or explicitly fixed; keeps its offset
    - HIDDEN: Not rendered
    - SLOT: Placeholder arranged by the consumer
    """

    NORMAL = "normal"
    ABSOLUTE = "absolute"
    HIDDEN = "hidden"
    SLOT = "slot"


_FRAME_KEYS = ("left", "top", "width", "height", "right", "bottom")


class Frame(BaseModel):
    """Axis-aligned pixel bounding box of a design element.

    `right` and `bottom` are derived fields; raw input may omit them and
    `flexinfer.geometry.normalize_frame` fills them in.
    """

    left: float = Field(default=0, description="Left edge (px)")
    top: float = Field(default=0, description="Top edge (px)")
    width: float = Field(default=0, description="Width (px)")
    height: float = Field(default=0, description="Height (px)")
    right: float | None = Field(default=None, description="left + width")
    bottom: float | None = Field(default=None, description="top + height")

    model_config = ConfigDict(frozen=True)


class LoopConfig(BaseModel):
    """Repeated-element marker.

    Design exports carry loops as anything from a binding expression to a
    dict; whatever arrives is kept, the scalar form under `source`.
    """

    source: Any = Field(default=None, description="Data source binding")
    item: str | None = Field(default=None, description="Item variable name")
    index: str | None = Field(default=None, description="Index variable name")

    model_config = ConfigDict(extra="allow")


class Padding(BaseModel):
    """Insets between a container's edges and its content (px)."""

    top: float = 0
    right: float = 0
    bottom: float = 0
    left: float = 0


class GridPattern(BaseModel):
    """Uniform rows × columns arrangement signal."""

    is_grid: bool = False
    columns: int = 0
    rows: int = 0


class LayoutAnnotation(BaseModel):
    """Layout intent inferred for a container node.

    Attributes:
        layout_type: Flex direction, or mix for absolute fallback.
        groups: Index lists into the annotated node's `children`, one per
            flex line in flow order.
        gaps: Raw distances between consecutive groups (negative = overlap).
        gap: Representative flex gap (px).
        align_horizontal: Horizontal content alignment.
        align_vertical: Vertical content alignment.
        padding: Content insets.
        grid: Grid signal, present only when a grid was recognized.
        has_absolute_children: Whether the container hosts stacked children
            and therefore needs a positioning context.
    """

    layout_type: LayoutType = Field(..., description="row, column or mix")
    groups: list[list[int]] = Field(default_factory=list)
    gaps: list[float] = Field(default_factory=list)
    gap: int = Field(default=0, ge=0, description="Flex gap in pixels")
    align_horizontal: AlignHorizontal | None = None
    align_vertical: AlignVertical | None = None
    padding: Padding | None = None
    grid: GridPattern | None = None
    has_absolute_children: bool = False

    model_config = {"use_enum_values": True}


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and value == value


class NodeSchema(BaseModel):
    """Recursive design tree node.

    Attributes:
        id: Identifier, unique within the tree.
        component_name: Component identifier (`componentName` in JSON).
        frame: Absolute bounding box; absent or invalid frames are None.
        children: Ordered child nodes.
        hidden: Node is not rendered.
        slot: Slot name when the node is a placeholder.
        loop: Repeated-element marker.
        condition: Conditional rendering expression (opaque).
        fixed_position: Explicit absolute-position override.
        props: Opaque component props, passed through untouched.
        layout: Inferred layout (output, containers only).
        placement: Classifier bucket (output, children only).
        offset: Frame relative to the parent (output, absolute children).
    """

    # Identity
    id: str | None = Field(default=None, description="Unique node identifier")
    component_name: str = Field(
        default="Div",
        alias="componentName",
        description="Component identifier",
    )

    # Geometry
    frame: Frame | None = Field(default=None, description="Absolute bounding box")

    # Structure
    children: list["NodeSchema"] = Field(
        default_factory=list,
        description="Ordered child nodes",
    )

    # Markers
    hidden: bool = Field(default=False, description="Node is not rendered")
    slot: str | None = Field(default=None, description="Slot name")
    loop: LoopConfig | None = Field(default=None, description="Repeat marker")
    condition: Any = Field(default=None, description="Render condition")
    fixed_position: bool = Field(
        default=False,
        alias="fixedPosition",
        description="Explicit absolute-position override",
    )

    props: dict[str, Any] = Field(default_factory=dict)

    # Output
    layout: LayoutAnnotation | None = None
    placement: Placement | None = None
    offset: Frame | None = None

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    @model_validator(mode="before")
    @classmethod
    def _lift_markers(cls, data: Any) -> Any:
        """Lift design-tool property bags into explicit fields."""
        if not isinstance(data, dict):
            return data
        data = dict(data)

        x_layout = data.pop("x-layout", None)
        explicit_fixed = "fixedPosition" in data or "fixed_position" in data
        if isinstance(x_layout, dict) and x_layout.get("fixed") and not explicit_fixed:
            data["fixedPosition"] = True

        props = data.get("props")
        if isinstance(props, dict):
            style = props.get("style")
            if isinstance(style, dict) and style.get("display") == "none":
                data["hidden"] = True

        slot = data.get("slot")
        if slot is True:
            slot = "default"
        elif slot is False:
            slot = None
        name = data.get("componentName", data.get("component_name"))
        if slot is None and name == "Slot":
            slot = "default"
        if slot is not None:
            data["slot"] = str(slot)
        elif "slot" in data:
            data["slot"] = None

        loop = data.get("loop")
        if loop is not None and not isinstance(loop, (dict, LoopConfig)):
            data["loop"] = {"source": loop}

        # Invalid frames are dropped rather than rejected
        frame = data.get("frame")
        if isinstance(frame, dict):
            present = {k: frame[k] for k in _FRAME_KEYS if frame.get(k) is not None}
            if all(_is_number(v) for v in present.values()):
                data["frame"] = present
            else:
                data["frame"] = None

        return data


def export_json_schema() -> dict[str, Any]:
    """Export the NodeSchema JSON Schema.

    Returns:
        JSON Schema dictionary describing design trees accepted and produced
        by flexinfer.
    """
    return NodeSchema.model_json_schema(by_alias=True)


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
