"""Unit tests for the Schema module."""

import pytest
from pydantic import ValidationError

from flexinfer.schema import (
    AlignHorizontal,
    Frame,
    LayoutAnnotation,
    LayoutType,
    LoopConfig,
    NodeSchema,
    Placement,
    export_json_schema,
)


class TestEnums:
    """Tests for layout vocabulary enums."""

    @pytest.mark.unit
    def test_layout_type_values(self):
        assert [t.value for t in LayoutType] == ["row", "column", "mix"]

    @pytest.mark.unit
    def test_enums_compare_as_strings(self):
        """str-based enums compare equal to their JSON values."""
        assert LayoutType.ROW == "row"
        assert AlignHorizontal.SPACE_BETWEEN == "space-between"
        assert Placement.ABSOLUTE == "absolute"


class TestFrame:
    """Tests for the Frame model."""

    @pytest.mark.unit
    def test_defaults(self):
        frame = Frame()
        assert (frame.left, frame.top, frame.width, frame.height) == (0, 0, 0, 0)
        assert frame.right is None
        assert frame.bottom is None

    @pytest.mark.unit
    def test_frozen(self):
        frame = Frame(left=1)
        with pytest.raises(ValidationError):
            frame.left = 2


class TestNodeSchemaParsing:
    """Tests for NodeSchema validation of design-tool input."""

    @pytest.mark.unit
    def test_minimal_node(self):
        node = NodeSchema.model_validate({"id": "root"})
        assert node.id == "root"
        assert node.component_name == "Div"
        assert node.frame is None
        assert node.children == []

    @pytest.mark.unit
    def test_camel_case_aliases(self):
        node = NodeSchema.model_validate(
            {"componentName": "Button", "fixedPosition": True}
        )
        assert node.component_name == "Button"
        assert node.fixed_position is True

    @pytest.mark.unit
    def test_populate_by_field_name(self):
        node = NodeSchema(component_name="Text", fixed_position=True)
        assert node.component_name == "Text"
        assert node.fixed_position is True

    @pytest.mark.unit
    def test_recursive_children(self):
        node = NodeSchema.model_validate(
            {
                "id": "root",
                "children": [
                    {"id": "a", "children": [{"id": "a1"}]},
                    {"id": "b"},
                ],
            }
        )
        assert [c.id for c in node.children] == ["a", "b"]
        assert node.children[0].children[0].id == "a1"

    @pytest.mark.unit
    def test_props_pass_through(self):
        props = {"text": "Hello", "style": {"color": "red"}}
        node = NodeSchema.model_validate({"props": props})
        assert node.props == props
        assert node.hidden is False


class TestMarkerLifting:
    """Tests for lifting x-layout, style and slot markers into fields."""

    @pytest.mark.unit
    def test_x_layout_fixed(self):
        node = NodeSchema.model_validate({"x-layout": {"fixed": True}})
        assert node.fixed_position is True

    @pytest.mark.unit
    def test_explicit_fixed_wins_over_x_layout(self):
        node = NodeSchema.model_validate(
            {"x-layout": {"fixed": True}, "fixedPosition": False}
        )
        assert node.fixed_position is False

    @pytest.mark.unit
    def test_display_none_marks_hidden(self):
        node = NodeSchema.model_validate({"props": {"style": {"display": "none"}}})
        assert node.hidden is True

    @pytest.mark.unit
    def test_display_flex_not_hidden(self):
        node = NodeSchema.model_validate({"props": {"style": {"display": "flex"}}})
        assert node.hidden is False

    @pytest.mark.unit
    def test_slot_component_gets_default_slot(self):
        node = NodeSchema.model_validate({"componentName": "Slot"})
        assert node.slot == "default"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "raw, expected",
        [(True, "default"), (False, None), ("header", "header"), (3, "3")],
    )
    def test_slot_values(self, raw, expected):
        node = NodeSchema.model_validate({"slot": raw})
        assert node.slot == expected

    @pytest.mark.unit
    def test_scalar_loop_kept_as_source(self):
        node = NodeSchema.model_validate({"loop": "{{ items }}"})
        assert isinstance(node.loop, LoopConfig)
        assert node.loop.source == "{{ items }}"

    @pytest.mark.unit
    def test_dict_loop_keeps_extra_keys(self):
        node = NodeSchema.model_validate(
            {"loop": {"source": "items", "item": "row", "key": "id"}}
        )
        assert node.loop.item == "row"
        assert node.loop.model_extra == {"key": "id"}

    @pytest.mark.unit
    def test_condition_is_opaque(self):
        node = NodeSchema.model_validate({"condition": {"expr": "visible"}})
        assert node.condition == {"expr": "visible"}


class TestFrameParsing:
    """Tests for how node frames are accepted or dropped."""

    @pytest.mark.unit
    def test_valid_frame(self):
        node = NodeSchema.model_validate(
            {"frame": {"left": 1, "top": 2, "width": 3, "height": 4}}
        )
        assert node.frame == Frame(left=1, top=2, width=3, height=4)

    @pytest.mark.unit
    def test_null_fields_are_ignored(self):
        node = NodeSchema.model_validate(
            {"frame": {"left": 1, "top": 2, "width": 3, "height": 4, "right": None}}
        )
        assert node.frame.right is None

    @pytest.mark.unit
    @pytest.mark.parametrize("bad", ["10px", True, float("nan"), [1]])
    def test_non_numeric_frame_dropped(self, bad):
        node = NodeSchema.model_validate(
            {"frame": {"left": bad, "top": 0, "width": 10, "height": 10}}
        )
        assert node.frame is None


class TestLayoutAnnotation:
    """Tests for the layout output model."""

    @pytest.mark.unit
    def test_enum_values_serialized(self):
        layout = LayoutAnnotation(layout_type=LayoutType.ROW, groups=[[0], [1]])
        assert layout.layout_type == "row"
        assert layout.model_dump()["layout_type"] == "row"

    @pytest.mark.unit
    def test_negative_gap_rejected(self):
        with pytest.raises(ValidationError):
            LayoutAnnotation(layout_type=LayoutType.ROW, gap=-1)

    @pytest.mark.unit
    def test_node_round_trips_annotation(self):
        node = NodeSchema(id="x", layout=LayoutAnnotation(layout_type="column"))
        dumped = node.model_dump(by_alias=True, exclude_none=True)
        assert dumped["layout"]["layout_type"] == "column"
        assert NodeSchema.model_validate(dumped).layout.layout_type == "column"


def _node_definition(schema: dict) -> dict:
    """Resolve the NodeSchema definition whether inlined or behind a $ref."""
    if "properties" in schema:
        return schema
    return schema["$defs"][schema["$ref"].rsplit("/", 1)[-1]]


class TestJsonSchemaExport:
    """Tests for JSON Schema export."""

    @pytest.mark.unit
    def test_schema_uses_aliases(self):
        props = _node_definition(export_json_schema())["properties"]
        assert "componentName" in props
        assert "fixedPosition" in props
        assert "component_name" not in props

    @pytest.mark.unit
    def test_schema_is_recursive(self):
        schema = export_json_schema()
        assert "$defs" in schema
        assert "Frame" in schema["$defs"]
