"""Root pytest configuration and fixtures.

This module provides:
- Environment isolation for FLEXINFER_* configuration variables
- Node factories for building design trees in tests
- Sample design trees shared by unit and integration tests
"""

from __future__ import annotations

import os
from typing import Any, Callable

import pytest

from flexinfer.schema import NodeSchema

# =============================================================================
# Configuration Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def _isolate_flexinfer_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop FLEXINFER_* variables so tests always see default tolerances."""
    for name in list(os.environ):
        if name.startswith("FLEXINFER_"):
            monkeypatch.delenv(name, raising=False)


# =============================================================================
# Node Factories
# =============================================================================


NodeFactory = Callable[..., NodeSchema]


@pytest.fixture
def make_node() -> NodeFactory:
    """Factory for framed design nodes.

    Usage:
        node = make_node("a", 0, 0, 50, 50, loop="items")
    """

    def _make(
        node_id: str,
        left: float | None = None,
        top: float | None = None,
        width: float | None = None,
        height: float | None = None,
        children: list[NodeSchema] | None = None,
        component_name: str = "View",
        **extra: Any,
    ) -> NodeSchema:
        data: dict[str, Any] = {"id": node_id, "componentName": component_name}
        if left is not None:
            data["frame"] = {
                "left": left,
                "top": top or 0,
                "width": width or 0,
                "height": height or 0,
            }
        if children is not None:
            data["children"] = children
        data.update(extra)
        return NodeSchema.model_validate(data)

    return _make


# =============================================================================
# Sample Trees
# =============================================================================


@pytest.fixture
def row_container(make_node: NodeFactory) -> NodeSchema:
    """Three equal cards laid out left-to-right with 20px gaps."""
    return make_node(
        "container",
        0,
        0,
        300,
        100,
        children=[
            make_node("a", 10, 25, 80, 50),
            make_node("b", 110, 25, 80, 50),
            make_node("c", 210, 25, 80, 50),
        ],
    )


@pytest.fixture
def column_container(make_node: NodeFactory) -> NodeSchema:
    """Three equal rows stacked top-to-bottom with 20px gaps."""
    return make_node(
        "container",
        0,
        0,
        100,
        300,
        children=[
            make_node("a", 10, 10, 80, 50),
            make_node("b", 10, 80, 80, 50),
            make_node("c", 10, 150, 80, 50),
        ],
    )


@pytest.fixture
def nested_page(make_node: NodeFactory) -> NodeSchema:
    """Page with a header row (menu icon under a badge) and a 3x2 card grid."""
    header = make_node(
        "header",
        0,
        0,
        400,
        60,
        children=[
            make_node("logo", 16, 14, 32, 32),
            make_node("title", 64, 18, 120, 24),
            make_node("menu", 352, 14, 32, 32),
            make_node("badge", 370, 8, 20, 20),
        ],
    )
    cards = make_node(
        "cards",
        0,
        80,
        400,
        200,
        children=[
            make_node(f"card-{row}-{col}", 10 + col * 130, 90 + row * 100, 120, 80)
            for row in range(2)
            for col in range(3)
        ],
    )
    return make_node(
        "page",
        0,
        0,
        400,
        300,
        children=[header, cards],
        component_name="Page",
    )
