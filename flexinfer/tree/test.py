"""Unit tests for design tree utilities."""

import pytest

from flexinfer.schema import NodeSchema
from flexinfer.tree import (
    count_nodes,
    find_all_nodes,
    find_node,
    find_node_by_component_name,
    find_node_by_id,
    get_leaf_nodes,
    get_node_path,
    has_condition,
    has_loop,
    is_container,
    is_hidden_node,
    is_slot_node,
    iter_nodes,
    map_tree,
    traverse_tree,
    traverse_tree_post_order,
    tree_depth,
)


@pytest.fixture
def tree() -> NodeSchema:
    return NodeSchema.model_validate(
        {
            "id": "root",
            "componentName": "Page",
            "children": [
                {
                    "id": "a",
                    "componentName": "View",
                    "children": [{"id": "a1", "componentName": "Text"}],
                },
                {"id": "b", "componentName": "Button"},
            ],
        }
    )


class TestTraversal:
    """Tests for pre-order and post-order traversal."""

    @pytest.mark.unit
    def test_pre_order(self, tree):
        visited = []
        traverse_tree(
            tree,
            lambda node, parent, index, depth: visited.append(
                (node.id, parent.id if parent else None, index, depth)
            ),
        )
        assert visited == [
            ("root", None, 0, 0),
            ("a", "root", 0, 1),
            ("a1", "a", 0, 2),
            ("b", "root", 1, 1),
        ]

    @pytest.mark.unit
    def test_returning_false_skips_children(self, tree):
        visited = []

        def visit(node, parent, index, depth):
            visited.append(node.id)
            return node.id != "a"

        traverse_tree(tree, visit)
        assert visited == ["root", "a", "b"]

    @pytest.mark.unit
    def test_post_order(self, tree):
        visited = []
        traverse_tree_post_order(tree, lambda node, *_: visited.append(node.id))
        assert visited == ["a1", "a", "b", "root"]

    @pytest.mark.unit
    def test_iter_nodes(self, tree):
        assert [n.id for n in iter_nodes(tree)] == ["root", "a", "a1", "b"]


class TestMapTree:
    """Tests for map_tree."""

    @pytest.mark.unit
    def test_builds_new_tree(self, tree):
        def rename(node, depth):
            node.id = f"{node.id}@{depth}"
            return node

        mapped = map_tree(tree, rename)
        assert [n.id for n in iter_nodes(mapped)] == ["root@0", "a@1", "a1@2", "b@1"]
        assert [n.id for n in iter_nodes(tree)] == ["root", "a", "a1", "b"]

    @pytest.mark.unit
    def test_mapper_can_prune(self, tree):
        def prune(node, depth):
            if node.id == "a":
                node.children = []
            return node

        mapped = map_tree(tree, prune)
        assert count_nodes(mapped) == 3
        assert count_nodes(tree) == 4


class TestSearch:
    """Tests for node lookup helpers."""

    @pytest.mark.unit
    def test_find_node(self, tree):
        found = find_node(tree, lambda n: n.component_name == "Text")
        assert found.id == "a1"

    @pytest.mark.unit
    def test_find_node_missing(self, tree):
        assert find_node(tree, lambda n: False) is None

    @pytest.mark.unit
    def test_find_by_id(self, tree):
        assert find_node_by_id(tree, "b").component_name == "Button"
        assert find_node_by_id(tree, "zzz") is None

    @pytest.mark.unit
    def test_find_by_component_name(self, tree):
        assert find_node_by_component_name(tree, "View").id == "a"

    @pytest.mark.unit
    def test_find_all_and_leaves(self, tree):
        assert [n.id for n in find_all_nodes(tree, lambda n: n.id != "root")] == [
            "a",
            "a1",
            "b",
        ]
        assert [n.id for n in get_leaf_nodes(tree)] == ["a1", "b"]

    @pytest.mark.unit
    def test_node_path(self, tree):
        assert [n.id for n in get_node_path(tree, "a1")] == ["root", "a", "a1"]
        assert get_node_path(tree, "nope") is None


class TestMetrics:
    """Tests for tree_depth and count_nodes."""

    @pytest.mark.unit
    def test_depth(self, tree):
        assert tree_depth(tree) == 3
        assert tree_depth(NodeSchema()) == 1

    @pytest.mark.unit
    def test_count(self, tree):
        assert count_nodes(tree) == 4


class TestPredicates:
    """Tests for node predicates."""

    @pytest.mark.unit
    def test_is_container(self, tree):
        assert is_container(tree)
        assert is_container(NodeSchema(component_name="Div"))
        assert not is_container(NodeSchema(component_name="Button"))

    @pytest.mark.unit
    def test_is_slot_node(self):
        assert is_slot_node(NodeSchema.model_validate({"componentName": "Slot"}))
        assert is_slot_node(NodeSchema.model_validate({"slot": "footer"}))
        assert not is_slot_node(NodeSchema())

    @pytest.mark.unit
    def test_is_hidden_node(self):
        assert is_hidden_node(NodeSchema(hidden=True))
        assert is_hidden_node(NodeSchema(props={"style": {"display": "none"}}))
        assert not is_hidden_node(NodeSchema(props={"style": "display: none"}))

    @pytest.mark.unit
    def test_loop_and_condition(self):
        node = NodeSchema.model_validate({"loop": "items", "condition": "x > 1"})
        assert has_loop(node)
        assert has_condition(node)
        assert not has_loop(NodeSchema())
        assert not has_condition(NodeSchema())
