"""Pytest fixtures for infra-components tests.

This module provides reusable component trees and plugin registries.
"""

import pytest
from typing import Any, Dict, List

from infra_components.core.node import InstanceType, Node
from infra_components.plugins.pipeline import BuildContext, PLUGIN_ORDER
from infra_components.plugins.registry import PluginRegistry


@pytest.fixture
def sample_tree() -> List[Node]:
    """Create a heterogeneous component tree.

    Structure (pre-order):
        - mw1 (middleware)
        - web (webapp)
            - mw2 (middleware)
            - svc (service)
        - store (storage)
        - dl (data layer)
            - web2 (webapp)
    """
    return [
        Node(InstanceType.MIDDLEWARE, "mw1"),
        Node(
            InstanceType.WEBAPP,
            "web",
            children=[
                Node(InstanceType.MIDDLEWARE, "mw2"),
                Node(InstanceType.SERVICE, "svc"),
            ],
        ),
        Node(InstanceType.STORAGE, "store"),
        Node(
            InstanceType.DATALAYER,
            "dl",
            children=[Node(InstanceType.WEBAPP, "web2")],
        ),
    ]


@pytest.fixture
def build_context() -> BuildContext:
    """Create a build context with every field set."""
    return BuildContext(
        parser_mode="MODE_BUILD",
        build_path="build",
        config_file_path="src/config.tsx",
        assets_path="assets",
        stage="dev",
    )


@pytest.fixture
def recording_registry():
    """Factory fixture for registries whose constructors record their calls.

    Returns a (registry, calls) tuple; each constructed unit is a dict holding
    the unit name and its construction record.
    """

    def _create_registry(names=PLUGIN_ORDER):
        registry = PluginRegistry()
        calls: List[Dict[str, Any]] = []

        def make_constructor(name):
            def constructor(config):
                unit = {"unit": name, "config": config}
                calls.append(unit)
                return unit

            return constructor

        for name in names:
            registry.register(name, make_constructor(name))
        return registry, calls

    return _create_registry
