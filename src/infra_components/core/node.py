"""Tagged nodes and capability predicates.

Nodes in a composition tree are classified by a structural ``instance_type``
tag rather than by class. Any object exposing an ``instance_type`` attribute
(or a mapping with an ``"instance_type"`` key) takes part in discovery, so
node kinds defined elsewhere need no shared base class.
"""

import logging
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

INFRASTRUCTURE_TYPE_CONFIGURATION = "configuration"

Predicate = Callable[[Any], bool]


class InstanceType(str, Enum):
    """Discriminators of the node kinds known to this package."""

    ISOMORPHIC = "IsomorphicComponent"
    MIDDLEWARE = "MiddlewareComponent"
    WEBAPP = "WebAppComponent"
    SERVICE = "ServiceComponent"
    STORAGE = "StorageComponent"
    DATALAYER = "DataLayerComponent"
    ENVIRONMENT = "EnvironmentComponent"
    IDENTITY = "IdentityComponent"
    AUTHENTICATION = "AuthenticationComponent"


class Node:
    """A plain tagged node.

    Uses __slots__ so the tag cannot be replaced after construction.

    Attributes:
        instance_type: Discriminator used by capability predicates.
        instance_id: Identifier, unique within the composition scope.
        children: Ordered child nodes.
        props: Any further node-specific properties.
    """

    __slots__ = ("_instance_type", "instance_id", "children", "props")

    def __init__(
        self,
        instance_type: str,
        instance_id: Optional[str] = None,
        children: Any = None,
        props: Optional[Dict[str, Any]] = None,
    ):
        if not instance_type:
            raise ValueError("Node requires an instance_type")
        self._instance_type = instance_type
        self.instance_id = instance_id
        self.children: Tuple[Any, ...] = tuple(get_children_array(children))
        self.props = props or {}

    @property
    def instance_type(self) -> str:
        """Get the node's discriminator."""
        return self._instance_type

    def __repr__(self) -> str:
        tag = self._instance_type.value if isinstance(self._instance_type, Enum) else self._instance_type
        return f"Node(instance_type={tag!r}, instance_id={self.instance_id!r}, children={len(self.children)})"


def get_property(node: Any, key: str) -> Any:
    """Read a property from an attribute or mapping key, never raising."""
    if node is None:
        return None
    try:
        value = getattr(node, key, None)
        if value is None and isinstance(node, Mapping):
            value = node.get(key)
        return value
    except Exception as e:
        logger.debug(f"Lookup of {key!r} failed on {type(node).__name__}: {e}")
        return None


def get_instance_type(node: Any) -> Optional[str]:
    """Get a node's tag, or None for absent or untagged nodes."""
    return get_property(node, "instance_type")


def get_instance_id(node: Any) -> Optional[str]:
    """Get a node's identifier, or None if it has none."""
    return get_property(node, "instance_id")


def tag_equals(instance_type: Any, tag: Any) -> bool:
    """Compare a node's tag with a discriminator, never raising."""
    if instance_type is None:
        return False
    try:
        return bool(instance_type == tag)
    except Exception as e:
        logger.debug(f"Comparing tag of type {type(instance_type).__name__} failed: {e}")
        return False


def has_instance_type(tag: str) -> Predicate:
    """Build a capability predicate matching a single tag.

    Args:
        tag: Discriminator value to match.

    Returns:
        Predicate that is True only for nodes carrying ``tag``.
    """

    def predicate(node: Any) -> bool:
        return tag_equals(get_instance_type(node), tag)

    predicate.__name__ = f"has_instance_type_{getattr(tag, 'value', tag)}"
    return predicate


def any_of(*predicates: Predicate) -> Predicate:
    """Combine predicates with logical OR."""

    def predicate(node: Any) -> bool:
        return any(p(node) for p in predicates)

    return predicate


is_middleware = has_instance_type(InstanceType.MIDDLEWARE)
is_webapp = has_instance_type(InstanceType.WEBAPP)
is_service = has_instance_type(InstanceType.SERVICE)
is_storage = has_instance_type(InstanceType.STORAGE)
is_data_layer = has_instance_type(InstanceType.DATALAYER)
is_environment = has_instance_type(InstanceType.ENVIRONMENT)
is_identity = has_instance_type(InstanceType.IDENTITY)
is_authentication = has_instance_type(InstanceType.AUTHENTICATION)


def get_children_array(children: Any) -> List[Any]:
    """Normalize a ``children`` value to a list.

    Args:
        children: None, a sequence of nodes, or a single tagged node.

    Returns:
        List of child nodes. Malformed values give an empty list.
    """
    if children is None:
        return []
    if isinstance(children, Sequence) and not isinstance(children, (str, bytes)):
        return list(children)
    if get_instance_type(children) is not None:
        return [children]

    logger.debug(f"Ignoring malformed children value of type {type(children).__name__}")
    return []
