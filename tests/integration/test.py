"""Integration tests running the flexinfer CLI as a subprocess."""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

# Get the project root directory (three levels up from this file)
PROJECT_ROOT = Path(__file__).parent.parent.parent


def _run(*args: str, env_overrides: dict[str, str] | None = None):
    env = {k: v for k, v in os.environ.items() if not k.startswith("FLEXINFER_")}
    env.update(env_overrides or {})
    return subprocess.run(
        [sys.executable, "-m", "flexinfer", *args],
        capture_output=True,
        text=True,
        cwd=PROJECT_ROOT,
        env=env,
        timeout=60,
    )


@pytest.mark.integration
class TestCliEndToEnd:
    """Run `python -m flexinfer` against design trees on disk."""

    def test_infer_nested_page(self, tmp_path, nested_page):
        tree = tmp_path / "page.json"
        tree.write_text(nested_page.model_dump_json(by_alias=True, exclude_none=True))

        result = _run("infer", str(tree))

        assert result.returncode == 0, result.stderr
        page = json.loads(result.stdout)
        assert page["layout"]["layout_type"] == "column"
        header, cards = page["children"]
        assert header["layout"]["has_absolute_children"] is True
        assert cards["layout"]["grid"] == {"is_grid": True, "columns": 3, "rows": 2}

    def test_decision_log_goes_to_stderr(self, tmp_path, row_container):
        tree = tmp_path / "row.json"
        tree.write_text(row_container.model_dump_json(by_alias=True, exclude_none=True))

        result = _run(
            "infer",
            str(tree),
            env_overrides={"FLEXINFER_LOG_DECISIONS": "1"},
        )

        assert result.returncode == 0
        assert "container: row, 3 group(s), 0 absolute" in result.stderr
        assert "group(s)" not in result.stdout

    def test_invalid_input_exits_nonzero(self, tmp_path):
        tree = tmp_path / "bad.json"
        tree.write_text("[1, 2, 3]")

        result = _run("infer", str(tree))

        assert result.returncode == 1
        assert "Layout inference failed" in result.stderr
