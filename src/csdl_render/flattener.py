"""Flattening of the namespace tree into renderable schemas."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from csdl_render.identifiers import namespace_string

if TYPE_CHECKING:
    from csdl_render.types import Namespace

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDED_NAMESPACES: tuple[str, ...] = ("Cadl",)


def expand_namespaces(namespace: Namespace) -> list[Namespace]:
    """List a namespace and all descendants, parents before children."""
    expanded = [namespace]
    for child in namespace.namespaces.values():
        expanded.extend(expand_namespaces(child))
    return expanded


def has_renderable_children(namespace: Namespace) -> bool:
    return bool(
        namespace.enums or namespace.models or namespace.interfaces or namespace.operations
    )


def is_excluded(name: str, excluded: Iterable[str]) -> bool:
    """Check a qualified namespace name against excluded prefixes."""
    return any(name.startswith(prefix) for prefix in excluded)


def flatten_namespaces(
    root: Namespace,
    excluded: Iterable[str] = DEFAULT_EXCLUDED_NAMESPACES,
) -> list[Namespace]:
    """Flatten a namespace tree into the namespaces that get a schema.

    A namespace is kept when its qualified name is non-empty, it declares at
    least one enum, model, interface or operation, and the name does not start
    with any excluded prefix. Descendants of an excluded namespace share its
    prefix and are therefore excluded too.

    Args:
        root: Root of the tree, usually the program's global namespace.
        excluded: Qualified-name prefixes to drop.

    Returns:
        Included namespaces in depth-first pre-order.
    """
    excluded = tuple(excluded)
    included: list[Namespace] = []
    for namespace in expand_namespaces(root):
        name = namespace_string(namespace)
        if not name:
            continue
        if not has_renderable_children(namespace):
            logger.debug("Skipping empty namespace %s", name)
            continue
        if is_excluded(name, excluded):
            logger.debug("Skipping excluded namespace %s", name)
            continue
        included.append(namespace)
    return included
