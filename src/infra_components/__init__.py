"""
infra-components - Declarative composition of infrastructure component trees.

Classifies the nodes of a component tree by capability tag, harvests them
recursively, and describes the plugin pipeline of an isomorphic app.
"""

__version__ = "0.1.0"

from infra_components.core.node import (
    INFRASTRUCTURE_TYPE_CONFIGURATION,
    InstanceType,
    Node,
    any_of,
    get_children_array,
    get_instance_id,
    get_instance_type,
    has_instance_type,
    is_authentication,
    is_data_layer,
    is_environment,
    is_identity,
    is_middleware,
    is_service,
    is_storage,
    is_webapp,
)
from infra_components.core.search import find_recursively, first_instance_id
from infra_components.core.config import InfrastructureMode, IsomorphicArgs
from infra_components.core.composer import (
    ISOMORPHIC_INSTANCE_TYPE,
    ComposedNode,
    compose_isomorphic,
    is_isomorphic_app,
    merge_layers,
)
from infra_components.plugins.pipeline import (
    PLUGIN_ORDER,
    BuildContext,
    PipelineFactory,
    PluginConfig,
    PluginSpec,
    build_plugin_pipeline,
)
from infra_components.plugins.registry import PluginRegistry

__all__ = [
    # Version
    "__version__",
    # Nodes and predicates
    "INFRASTRUCTURE_TYPE_CONFIGURATION",
    "InstanceType",
    "Node",
    "any_of",
    "get_instance_id",
    "get_instance_type",
    "has_instance_type",
    "is_authentication",
    "is_data_layer",
    "is_environment",
    "is_identity",
    "is_middleware",
    "is_service",
    "is_storage",
    "is_webapp",
    # Search
    "find_recursively",
    "first_instance_id",
    "get_children_array",
    # Config
    "InfrastructureMode",
    "IsomorphicArgs",
    # Composition
    "ISOMORPHIC_INSTANCE_TYPE",
    "ComposedNode",
    "compose_isomorphic",
    "is_isomorphic_app",
    "merge_layers",
    # Plugins
    "PLUGIN_ORDER",
    "BuildContext",
    "PipelineFactory",
    "PluginConfig",
    "PluginSpec",
    "PluginRegistry",
    "build_plugin_pipeline",
]
