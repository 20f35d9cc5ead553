"""
Path resolution for Drive items.

Drive is ID-based: an item only knows its parent id. This module turns the
parent chain of every item into an absolute, slugified site path such as
"/engineering/runbooks/on-call". Results are memoized for one sync pass only,
since names and parents may change between passes.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from .models import ResolvedItem
from .utils import slugify_name, get_unique_slug

logger = logging.getLogger(__name__)


def assign_slugs(items: Iterable[ResolvedItem]) -> Dict[str, str]:
    """
    Compute a slug per item id, unique among siblings.

    Siblings are visited in ascending id order, so the first item by id keeps
    the bare slug and later collisions get -1, -2 suffixes. The outcome is
    stable from pass to pass as long as the sibling set does not change.

    Args:
        items: Items indexed in this pass

    Returns:
        Dict of item id -> slug
    """
    siblings: Dict[Optional[str], List[ResolvedItem]] = defaultdict(list)
    for item in items:
        siblings[item.parent].append(item)

    slugs = {}
    for parent_id, children in siblings.items():
        seen: Dict[str, int] = {}
        for child in sorted(children, key=lambda c: c.id):
            base = slugify_name(child.name)
            slug = get_unique_slug(base, seen)
            if slug != base:
                logger.warning(
                    f"Path collision under {parent_id}: '{child.name}' ({child.id}) indexed as '{slug}'"
                )
            slugs[child.id] = slug
    return slugs


class PathResolver:
    """
    Resolves item ids to absolute site paths.

    One instance lives for exactly one pass; construct a fresh one per pass.
    """

    def __init__(self, items: Iterable[ResolvedItem], root_id: str):
        """
        Args:
            items: Every item taking part in the pass (folders included)
            root_id: Id of the mirrored root folder (never indexed itself)
        """
        items = list(items)
        self.root_id = root_id
        self._items: Dict[str, ResolvedItem] = {item.id: item for item in items}
        self._slugs = assign_slugs(items)
        self._cache: Dict[str, str] = {}

    def resolve(self, item_id: str) -> str:
        """
        Resolve an item id to its absolute path.

        Unknown ids, and unknown ancestors, contribute an empty fragment
        instead of failing. A parent chain that loops back on itself is cut
        at the first repeated id.

        Args:
            item_id: Drive item id

        Returns:
            Absolute path ("/a/b"), or "" for the root or an unknown id
        """
        if item_id in self._cache:
            return self._cache[item_id]

        chain: List[ResolvedItem] = []
        visited = set()
        current = item_id
        prefix = ''

        while True:
            if current in self._cache:
                prefix = self._cache[current]
                break
            if current is None or current == self.root_id:
                break
            item = self._items.get(current)
            if item is None:
                if current != item_id:
                    logger.debug(f"Parent {current} of {chain[-1].id} not in listing")
                break
            if current in visited:
                logger.warning(f"Parent chain of {item_id} loops at {current}; cutting it there")
                break
            visited.add(current)
            chain.append(item)
            current = item.parent

        for item in reversed(chain):
            prefix = f"{prefix}/{self._slugs[item.id]}"
            self._cache[item.id] = prefix

        return self._cache.get(item_id, '')
