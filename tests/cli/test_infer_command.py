"""Tests for the infer, analyze, env and schema CLI commands."""

import json
import logging

import pytest

from flexinfer.__main__ import main
from flexinfer.schema import NodeSchema


def _write_tree(path, node: NodeSchema):
    path.write_text(node.model_dump_json(by_alias=True, exclude_none=True))
    return path


class TestInferCommand:
    """Tests for `flexinfer infer`."""

    @pytest.mark.unit
    def test_prints_annotated_tree(self, tmp_path, row_container, capsys):
        tree = _write_tree(tmp_path / "tree.json", row_container)

        assert main(["infer", str(tree)]) == 0

        result = json.loads(capsys.readouterr().out)
        assert result["componentName"] == "View"
        assert result["layout"]["layout_type"] == "row"
        assert result["layout"]["gap"] == 20
        assert [c["placement"] for c in result["children"]] == ["normal"] * 3

    @pytest.mark.unit
    def test_writes_output_file(self, tmp_path, column_container, capsys):
        tree = _write_tree(tmp_path / "tree.json", column_container)
        output = tmp_path / "out" / "annotated.json"

        assert main(["infer", str(tree), "-o", str(output)]) == 0

        assert capsys.readouterr().out == ""
        result = NodeSchema.model_validate_json(output.read_text())
        assert result.layout.layout_type == "column"

    @pytest.mark.unit
    def test_document_mode(self, tmp_path, row_container, capsys):
        doc = NodeSchema(
            id="doc", component_name="Document", children=[row_container]
        )
        tree = _write_tree(tmp_path / "doc.json", doc)

        assert main(["infer", str(tree), "--doc"]) == 0

        result = json.loads(capsys.readouterr().out)
        assert "layout" not in result
        assert result["children"][0]["layout"]["layout_type"] == "row"

    @pytest.mark.unit
    def test_document_mode_rejects_plain_tree(self, tmp_path, row_container, caplog):
        tree = _write_tree(tmp_path / "tree.json", row_container)

        with caplog.at_level(logging.ERROR, logger="flexinfer"):
            assert main(["infer", str(tree), "--doc"]) == 1

        assert "Document" in caplog.text

    @pytest.mark.unit
    def test_missing_file(self, tmp_path, caplog):
        with caplog.at_level(logging.ERROR, logger="flexinfer"):
            assert main(["infer", str(tmp_path / "missing.json")]) == 1

        assert "Layout inference failed" in caplog.text

    @pytest.mark.unit
    def test_invalid_json(self, tmp_path):
        tree = tmp_path / "broken.json"
        tree.write_text("{not json")
        assert main(["infer", str(tree)]) == 1

    @pytest.mark.unit
    def test_file_argument_required(self):
        with pytest.raises(SystemExit):
            main(["infer"])


class TestAnalyzeCommand:
    """Tests for `flexinfer analyze`."""

    @pytest.mark.unit
    def test_prints_stats(self, tmp_path, nested_page, capsys):
        tree = _write_tree(tmp_path / "page.json", nested_page)

        assert main(["analyze", str(tree)]) == 0

        stats = json.loads(capsys.readouterr().out)
        assert stats == {
            "total_nodes": 13,
            "layout_types": {"row": 1, "column": 2, "mix": 0},
            "max_depth": 2,
        }


class TestEnvCommand:
    """Tests for `flexinfer env`."""

    @pytest.mark.unit
    def test_lists_all_categories(self, capsys):
        assert main(["env"]) == 0
        out = capsys.readouterr().out
        for category in ("classify", "split", "alignment", "grid", "strategy", "logging"):
            assert f"[{category}]" in out

    @pytest.mark.unit
    def test_category_filter_shows_current_values(self, monkeypatch, capsys):
        monkeypatch.setenv("FLEXINFER_GRID_MIN_CHILDREN", "6")

        assert main(["env", "--category", "grid"]) == 0

        out = capsys.readouterr().out
        assert "FLEXINFER_GRID_MIN_CHILDREN = 6" in out
        assert "FLEXINFER_OVERLAP_LIGHT_TOLERANCE" not in out

    @pytest.mark.unit
    def test_unknown_category(self):
        assert main(["env", "--category", "nope"]) == 1


class TestSchemaCommand:
    """Tests for `flexinfer schema`."""

    @pytest.mark.unit
    def test_prints_json_schema(self, capsys):
        assert main(["schema"]) == 0
        schema = json.loads(capsys.readouterr().out)
        assert "componentName" in json.dumps(schema)


@pytest.mark.unit
def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out.lower()
