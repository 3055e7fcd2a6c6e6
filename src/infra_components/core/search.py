"""Recursive discovery of nodes in a composition tree.

The search is a pre-order, depth-first walk over a forest of children. It is
shared by every composer: a composer only supplies the capability predicate
of the node kind it wants to harvest.
"""

import logging
from typing import Any, Iterable, List, Optional

from infra_components.core.node import Predicate, get_children_array, get_instance_id, get_property

logger = logging.getLogger(__name__)


def get_children(node: Any) -> List[Any]:
    """Get a node's own children, or an empty list for leaf nodes."""
    return get_children_array(get_property(node, "children"))


def find_recursively(children: Any, predicate: Predicate, exclusive: bool = False) -> List[Any]:
    """Find all descendants satisfying a predicate.

    Walks depth-first in pre-order, so results follow document order of the
    tree. By default the walk continues below a match, so nested matches are
    all reported.

    Args:
        children: Root children (anything accepted by get_children_array).
        predicate: Capability predicate to test each node with.
        exclusive: If True, do not descend into a matched node's subtree.

    Returns:
        Matching nodes in pre-order.
    """
    found: List[Any] = []
    # Explicit stack instead of recursion so deep trees cannot hit the recursion limit
    stack = list(reversed(get_children_array(children)))

    while stack:
        node = stack.pop()
        if node is None:
            continue

        matched = predicate(node)
        if matched:
            found.append(node)
        if matched and exclusive:
            continue

        stack.extend(reversed(get_children(node)))

    logger.debug(f"find_recursively({getattr(predicate, '__name__', 'predicate')}) found {len(found)} node(s)")
    return found


def first_instance_id(nodes: Iterable[Any]) -> Optional[str]:
    """Fold nodes left to right, keeping the first non-empty identifier.

    Later candidates are discarded without error.

    Args:
        nodes: Candidate nodes in discovery order.

    Returns:
        The first non-empty instance_id, or None.
    """
    result: Optional[str] = None
    discarded = 0

    for node in nodes:
        instance_id = get_instance_id(node)
        if result:
            discarded += 1
        elif instance_id:
            result = instance_id

    if discarded:
        logger.debug(f"Kept {result!r}, ignored {discarded} later candidate(s)")
    return result
