"""Tests for isomorphic app composition in infra-components.

Tests cover:
- Layer merging, precedence and collision reporting
- ComposedNode mapping and attribute access
- Composition of empty and populated trees
- Deferred plugin pipeline on composed nodes
- Recognition of composed nodes by other searches
"""

import copy
import logging
import pickle

import pytest

from infra_components.core.composer import (
    ISOMORPHIC_INSTANCE_TYPE,
    ComposedNode,
    compose_isomorphic,
    is_isomorphic_app,
    merge_layers,
)
from infra_components.core.config import InfrastructureMode, IsomorphicArgs
from infra_components.core.node import (
    INFRASTRUCTURE_TYPE_CONFIGURATION,
    InstanceType,
    Node,
    get_instance_id,
)
from infra_components.core.search import find_recursively
from infra_components.plugins.pipeline import PLUGIN_ORDER, PipelineFactory


def ids(nodes):
    return [get_instance_id(n) for n in nodes]


class TestMergeLayers:
    """Tests for merge_layers."""

    def test_disjoint_layers(self):
        merged = merge_layers({"a": 1}, {"b": 2}, {"c": 3})

        assert merged == {"a": 1, "b": 2, "c": 3}

    def test_last_write_wins(self):
        merged = merge_layers({"x": 1}, {"x": 2}, {"x": 3})

        assert merged["x"] == 3

    def test_descriptor_overrides_args(self):
        merged = merge_layers({"x": 1}, {"x": 2}, {})

        assert merged["x"] == 2

    def test_collision_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="infra_components.core.composer"):
            merge_layers({"x": 1}, {"x": 2}, {"x": 3})

        assert "'x' from descriptor overwrites value from args" in caplog.text
        assert "'x' from derived overwrites value from descriptor" in caplog.text

    def test_no_warning_without_collision(self, caplog):
        with caplog.at_level(logging.WARNING, logger="infra_components.core.composer"):
            merge_layers({"a": 1}, {"b": 2}, {"c": 3})

        assert caplog.records == []

    def test_strict_collision_raises(self):
        with pytest.raises(ValueError, match="'x' from derived"):
            merge_layers({}, {"x": 2}, {"x": 3}, strict=True)

    def test_inputs_are_not_mutated(self):
        args = {"x": 1}

        merge_layers(args, {"x": 2}, {"y": 3})

        assert args == {"x": 1}


class TestComposedNode:
    """Tests for ComposedNode."""

    def test_mapping_and_attribute_access(self):
        node = ComposedNode({"instance_type": "X", "instance_id": "id"})

        assert node["instance_type"] == "X"
        assert node.instance_id == "id"
        assert len(node) == 2
        assert set(node) == {"instance_type", "instance_id"}
        assert node.get("missing") is None

    def test_missing_attribute(self):
        node = ComposedNode({})

        with pytest.raises(AttributeError, match="missing"):
            node.missing

    def test_read_only(self):
        node = ComposedNode({"instance_id": "id"})

        with pytest.raises(AttributeError, match="read-only"):
            node.instance_id = "other"
        with pytest.raises(TypeError):
            node["instance_id"] = "other"

        assert node.instance_id == "id"

    def test_copies_props(self):
        props = {"instance_id": "id"}
        node = ComposedNode(props)
        props["instance_id"] = "changed"

        assert node.instance_id == "id"
        assert node.to_dict() == {"instance_id": "id"}

    def test_copy_and_pickle(self):
        node = compose_isomorphic(
            {"stack_name": "s1", "build_path": "build", "infrastructure_mode": "COMPILATION"}
        )

        for clone in (copy.copy(node), copy.deepcopy(node), pickle.loads(pickle.dumps(node))):
            assert isinstance(clone, ComposedNode)
            assert clone == node
            assert clone.instance_id == "s1"
            assert clone.create_plugins == node.create_plugins
            with pytest.raises(AttributeError, match="read-only"):
                clone.instance_id = "other"


class TestComposeIsomorphic:
    """Tests for compose_isomorphic."""

    def test_empty_app(self):
        node = compose_isomorphic(
            {
                "stack_name": "s1",
                "build_path": "build",
                "assets_path": "assets",
                "region": "us-east-1",
                "children": [],
            }
        )

        assert node.instance_type == ISOMORPHIC_INSTANCE_TYPE
        assert node.instance_type == "IsomorphicComponent"
        assert node.instance_id == "s1"
        assert node.infrastructure_type == INFRASTRUCTURE_TYPE_CONFIGURATION
        assert node.middlewares == []
        assert node.webapps == []
        assert node.services == []
        assert node.data_layer_id is None

    def test_children_absent(self):
        node = compose_isomorphic({"stack_name": "s1"})

        assert node.middlewares == []
        assert node.data_layer_id is None

    def test_args_layer_is_kept(self):
        node = compose_isomorphic(
            IsomorphicArgs(stack_name="s1", build_path="build", region="us-east-1", extra={"domain": "x.org"})
        )

        assert node.stack_name == "s1"
        assert node.build_path == "build"
        assert node.region == "us-east-1"
        assert node.domain == "x.org"

    def test_camel_case_mapping(self):
        node = compose_isomorphic({"stackName": "s1", "buildPath": "build"})

        assert node.instance_id == "s1"
        assert node.build_path == "build"

    def test_discovery(self, sample_tree):
        node = compose_isomorphic(IsomorphicArgs(stack_name="app", children=sample_tree))

        assert ids(node.middlewares) == ["mw1", "mw2"]
        assert ids(node.webapps) == ["web", "web2"]
        assert ids(node.services) == ["svc", "store"]
        assert node.data_layer_id == "dl"

    def test_first_data_layer_wins(self):
        children = [
            Node(InstanceType.DATALAYER, "a", children=[Node(InstanceType.DATALAYER, "b")]),
            Node(InstanceType.DATALAYER, "c"),
        ]

        node = compose_isomorphic(IsomorphicArgs(stack_name="app", children=children))

        assert node.data_layer_id == "a"

    def test_single_child_node(self):
        """Test that a lone child node is accepted in place of a list."""
        child = Node(InstanceType.WEBAPP, "web")

        node = compose_isomorphic({"stack_name": "app", "children": child})

        assert node.webapps == [child]

    def test_no_collisions_between_layers(self, sample_tree, caplog):
        """Test that normal arguments never collide with generated layers."""
        with caplog.at_level(logging.WARNING, logger="infra_components.core.composer"):
            compose_isomorphic(
                IsomorphicArgs(
                    stack_name="app",
                    build_path="build",
                    assets_path="assets",
                    region="us-east-1",
                    infrastructure_mode="COMPILATION",
                    children=sample_tree,
                ),
                strict=True,
            )

        assert caplog.records == []

    def test_colliding_extra_argument(self, caplog):
        """Test that a user argument named like a descriptor key is overwritten."""
        with caplog.at_level(logging.WARNING, logger="infra_components.core.composer"):
            node = compose_isomorphic({"stack_name": "s1", "instance_id": "custom"})

        assert node.instance_id == "s1"
        assert "'instance_id' from descriptor" in caplog.text

    def test_colliding_extra_argument_strict(self):
        with pytest.raises(ValueError, match="'middlewares' from derived"):
            compose_isomorphic({"stack_name": "s1", "middlewares": []}, strict=True)

    def test_invalid_args(self):
        with pytest.raises(ValueError):
            compose_isomorphic({"region": "us-east-1"})


class TestDeferredPlugins:
    """Tests for the plugin factory attached to composed nodes."""

    def test_factory_captures_args(self):
        node = compose_isomorphic(
            {"stack_name": "s1", "build_path": "build", "assets_path": "assets", "infrastructure_mode": "COMPILATION"}
        )

        assert node.create_plugins == PipelineFactory(
            mode=InfrastructureMode.COMPILATION, build_path="build", assets_path="assets"
        )

    def test_compilation_mode_builds_pipeline(self, recording_registry):
        registry, calls = recording_registry()
        node = compose_isomorphic(
            {"stack_name": "s1", "build_path": "build", "assets_path": "assets", "infrastructure_mode": "COMPILATION"}
        )

        units = node.create_plugins("config.tsx", "dev", "MODE_BUILD", registry=registry)

        assert [u["unit"] for u in units] == list(PLUGIN_ORDER)
        assert units[2]["config"].assets_path == "assets"

    def test_composition_constructs_nothing(self, recording_registry):
        """Test that composing alone never constructs plugins."""
        registry, calls = recording_registry()

        compose_isomorphic({"stack_name": "s1", "infrastructure_mode": "COMPILATION"})

        assert calls == []

    def test_unknown_mode_builds_nothing(self, recording_registry):
        """Test that an unrecognized mode composes and yields an empty pipeline."""
        registry, calls = recording_registry()
        node = compose_isomorphic({"stackName": "s1", "infrastructureMode": "MODE_X"})

        assert node.infrastructure_mode == "MODE_X"
        assert node.create_plugins("c", "dev", "p") == []
        assert node.create_plugins("c", "dev", "p", registry=registry) == []
        assert calls == []

    @pytest.mark.parametrize("mode", [None, "SYNTHESIS", "DEPLOYMENT", "RUNTIME"])
    def test_other_modes_build_nothing(self, mode, recording_registry):
        registry, calls = recording_registry()
        node = compose_isomorphic({"stack_name": "s1", "build_path": "build", "infrastructure_mode": mode})

        assert node.create_plugins("config.tsx", "dev", "MODE_BUILD", registry=registry) == []
        assert calls == []


class TestIsIsomorphicApp:
    """Tests for is_isomorphic_app."""

    def test_recognizes_composed_node(self):
        assert is_isomorphic_app(compose_isomorphic({"stack_name": "s1"}))

    def test_rejects_others(self):
        assert not is_isomorphic_app(None)
        assert not is_isomorphic_app(Node(InstanceType.WEBAPP))
        assert not is_isomorphic_app({"stack_name": "s1"})

    def test_composed_nodes_are_searchable(self, sample_tree):
        """Test that sibling composers can discover isomorphic apps and their children."""
        app = compose_isomorphic(IsomorphicArgs(stack_name="inner", children=sample_tree))
        root = [Node("Environment", "env", children=[app])]

        assert find_recursively(root, is_isomorphic_app) == [app]
        assert ids(find_recursively(root, lambda n: get_instance_id(n) == "web2")) == ["web2"]
