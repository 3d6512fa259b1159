# catalogsync/core/deep_merge.py

"""Pure recursive merge of a patch tree into a base catalog.

Shape policy: where both sides hold a branch the children are merged;
anywhere else the patch node replaces the base node outright. Keys
only in the base are carried through. Shared keys keep the base order,
new keys are appended in patch order.
"""

from __future__ import annotations

import logging

from catalogsync.core.catalog_tree import CatalogTree, check_key, copy_tree, is_branch
from catalogsync.core.exceptions import InvalidCatalogError

__all__ = ["merge"]

logger = logging.getLogger("catalogsync.deep_merge")


def _merge_branch(base: CatalogTree, patch: CatalogTree, prefix: str) -> CatalogTree:
    result = copy_tree(base)
    for key, value in patch.items():
        check_key(key, prefix)
        path = f"{prefix}.{key}" if prefix else key
        current = result.get(key)
        if is_branch(current) and is_branch(value):
            result[key] = _merge_branch(current, value, path)
        else:
            if key in result:
                logger.debug("Patch replaces '%s'", path)
            # existing keys keep their position on reassignment
            result[key] = copy_tree(value)
    return result


def merge(base: CatalogTree, patch: CatalogTree) -> CatalogTree:
    """Merge ``patch`` into ``base`` and return a new tree.

    Neither input is modified, and the result shares no dicts with them.

    Args:
        base: The full catalog.
        patch: A partial tree of updates.

    Returns:
        The merged catalog.

    Raises:
        InvalidCatalogError: If either root is not a mapping or a node is not a leaf/branch.
        MalformedPathError: If the patch contains an invalid key.
    """
    if not is_branch(base) or not is_branch(patch):
        raise InvalidCatalogError("Both merge operands must be mappings")
    return _merge_branch(base, patch, "")
