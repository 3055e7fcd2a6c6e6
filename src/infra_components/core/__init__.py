"""Core module for infra-components.

This module provides tagged nodes, capability predicates, recursive tree
search and the isomorphic app composer.
"""

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
    tag_equals,
)
from infra_components.core.search import (
    find_recursively,
    first_instance_id,
    get_children,
)
from infra_components.core.config import InfrastructureMode, IsomorphicArgs
from infra_components.core.composer import (
    ISOMORPHIC_INSTANCE_TYPE,
    ComposedNode,
    compose_isomorphic,
    is_isomorphic_app,
    merge_layers,
)

__all__ = [
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
    "tag_equals",
    "find_recursively",
    "first_instance_id",
    "get_children",
    "get_children_array",
    "InfrastructureMode",
    "IsomorphicArgs",
    "ISOMORPHIC_INSTANCE_TYPE",
    "ComposedNode",
    "compose_isomorphic",
    "is_isomorphic_app",
    "merge_layers",
]
