"""
Shortcut resolution.

A Drive shortcut is a pointer to another entry's content. The shortcut keeps
its own id, name and folder in the site, but is served and downloaded as its
target.
"""

import logging
from typing import Callable, Dict, Optional

from .models import INDEXABLE_MIME_TYPES, RemoteItem, ResolvedItem

logger = logging.getLogger(__name__)

# Shortcut-to-shortcut hops followed before giving up
MAX_SHORTCUT_HOPS = 5

FetchMissing = Callable[[str], Optional[RemoteItem]]


class ShortcutResolver:
    """
    Resolves shortcuts for one sync pass.

    Targets fetched out-of-band are remembered for the lifetime of the
    instance, so several shortcuts to one target cost a single lookup.
    """

    def __init__(self, fetch_missing: Optional[FetchMissing] = None):
        """
        Args:
            fetch_missing: Point lookup for targets outside the listing
        """
        self.fetch_missing = fetch_missing
        self._fetched: Dict[str, Optional[RemoteItem]] = {}

    def resolve(
        self,
        item: RemoteItem,
        items_by_id: Dict[str, RemoteItem],
        fetch_missing: Optional[FetchMissing] = None,
    ) -> Optional[ResolvedItem]:
        """
        Resolve an item to the content it stands for.

        Args:
            item: Listed item (shortcut or not)
            items_by_id: All items of the current listing
            fetch_missing: Overrides the lookup given at construction

        Returns:
            ResolvedItem, or None when the item must not be indexed
            (unresolvable shortcut or unsupported content type)
        """
        target = item
        hops = 0
        while target.is_shortcut:
            if hops >= MAX_SHORTCUT_HOPS or not target.shortcut_target_id:
                logger.warning(f"Skipping shortcut '{item.name}' ({item.id}): target cannot be resolved")
                return None
            target = self._lookup(target.shortcut_target_id, items_by_id, fetch_missing or self.fetch_missing)
            if target is None:
                logger.info(f"Skipping shortcut '{item.name}' ({item.id}): target not found")
                return None
            hops += 1

        if target.mime_type not in INDEXABLE_MIME_TYPES:
            logger.debug(f"Not indexing '{item.name}' ({target.mime_type})")
            return None

        return ResolvedItem(
            id=item.id,
            name=item.name,
            mime_type=target.mime_type,
            modified_time=target.modified_time,
            parents=list(item.parents),
            download_id=target.id,
            last_modifying_user=target.last_modifying_user,
            web_view_link=target.web_view_link,
        )

    def _lookup(
        self,
        target_id: str,
        items_by_id: Dict[str, RemoteItem],
        fetch_missing: Optional[FetchMissing],
    ) -> Optional[RemoteItem]:
        """Find a shortcut target in the listing, else fetch it once."""
        if target_id in items_by_id:
            return items_by_id[target_id]
        if target_id in self._fetched:
            return self._fetched[target_id]
        if fetch_missing is None:
            return None

        try:
            target = fetch_missing(target_id)
        except Exception as e:
            logger.warning(f"Could not fetch shortcut target {target_id}: {e}")
            target = None

        self._fetched[target_id] = target
        return target
