"""Composition of isomorphic app nodes.

An isomorphic app node is the merge of three property layers:

1. the user's arguments,
2. the infrastructure descriptor (tag, id and deferred plugin pipeline),
3. properties derived from the app's children (middlewares, webapps,
   services and the owning data layer).

Layers are merged in that order, later layers winning on collisions.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterator, Union

from infra_components.core.config import IsomorphicArgs
from infra_components.core.node import (
    INFRASTRUCTURE_TYPE_CONFIGURATION,
    InstanceType,
    any_of,
    get_instance_type,
    is_data_layer,
    is_middleware,
    is_service,
    is_storage,
    is_webapp,
    tag_equals,
)
from infra_components.core.search import find_recursively, first_instance_id
from infra_components.plugins.pipeline import PipelineFactory

logger = logging.getLogger(__name__)

ISOMORPHIC_INSTANCE_TYPE = InstanceType.ISOMORPHIC

LAYER_NAMES = ("args", "descriptor", "derived")


def merge_layers(
    args: Mapping,
    descriptor: Mapping,
    derived: Mapping,
    strict: bool = False,
) -> Dict[str, Any]:
    """Merge the three property layers of a composed node.

    Precedence is args < descriptor < derived. A key defined by more than one
    layer keeps the value of the last one and is logged as a warning.

    Args:
        args: User arguments.
        descriptor: Infrastructure descriptor.
        derived: Properties derived from child discovery.
        strict: Raise instead of warning on collisions.

    Returns:
        Merged dictionary.

    Raises:
        ValueError: If strict and two layers define the same key.
    """
    merged: Dict[str, Any] = {}
    origin: Dict[str, str] = {}

    for layer_name, layer in zip(LAYER_NAMES, (args, descriptor, derived)):
        for key, value in layer.items():
            if key in origin:
                message = f"Key {key!r} from {layer_name} overwrites value from {origin[key]}"
                if strict:
                    raise ValueError(message)
                logger.warning(message)
            merged[key] = value
            origin[key] = layer_name

    return merged


class ComposedNode(Mapping):
    """Read-only result of a composition.

    Properties are available both as mapping keys and as attributes, so a
    composed node can itself be found by other composers' searches.
    """

    __slots__ = ("_props",)

    def __init__(self, props: Mapping):
        object.__setattr__(self, "_props", dict(props))

    def __getitem__(self, key: str) -> Any:
        return self._props[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._props)

    def __len__(self) -> int:
        return len(self._props)

    def __getattr__(self, name: str) -> Any:
        if name == "_props":
            raise AttributeError(name)
        try:
            return self._props[name]
        except KeyError:
            raise AttributeError(f"ComposedNode has no property {name!r}") from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("ComposedNode is read-only")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("ComposedNode is read-only")

    def to_dict(self) -> Dict[str, Any]:
        """Get a shallow copy of the merged properties."""
        return dict(self._props)

    def __reduce__(self):
        # rebuild through __init__, since __setattr__ rejects restored state
        return (self.__class__, (self._props,))

    def __repr__(self) -> str:
        return (
            f"ComposedNode(instance_type={self._props.get('instance_type')!r}, "
            f"instance_id={self._props.get('instance_id')!r})"
        )


def compose_isomorphic(args: Union[IsomorphicArgs, Mapping], strict: bool = False) -> ComposedNode:
    """Compose an isomorphic app node.

    Args:
        args: IsomorphicArgs, or a mapping accepted by IsomorphicArgs.from_dict.
        strict: Raise on key collisions between layers instead of warning.

    Returns:
        The composed node.
    """
    if not isinstance(args, IsomorphicArgs):
        args = IsomorphicArgs.from_dict(args)

    children = args.children

    descriptor = {
        "infrastructure_type": INFRASTRUCTURE_TYPE_CONFIGURATION,
        "instance_id": args.stack_name,
        "instance_type": ISOMORPHIC_INSTANCE_TYPE,
        # only builds plugins when invoked in compilation mode
        "create_plugins": PipelineFactory(
            mode=args.infrastructure_mode,
            build_path=args.build_path,
            assets_path=args.assets_path,
        ),
    }

    derived = {
        "middlewares": find_recursively(children, is_middleware),
        "webapps": find_recursively(children, is_webapp),
        "services": find_recursively(children, any_of(is_service, is_storage)),
        "data_layer_id": first_instance_id(find_recursively(children, is_data_layer)),
    }

    node = ComposedNode(merge_layers(args.to_dict(), descriptor, derived, strict=strict))
    logger.info(
        f"Composed isomorphic app {args.stack_name}: "
        f"{len(derived['middlewares'])} middleware(s), {len(derived['webapps'])} webapp(s), "
        f"{len(derived['services'])} service(s), data layer {derived['data_layer_id']!r}"
    )
    return node


def is_isomorphic_app(node: Any) -> bool:
    """Check whether a node is an isomorphic app."""
    return tag_equals(get_instance_type(node), ISOMORPHIC_INSTANCE_TYPE)
