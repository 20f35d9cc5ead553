"""
Reconciliation of a remote listing against the previous path index.

`plan_pass` is side-effect free: it resolves shortcuts and paths, builds the
next index generation and decides which content must be downloaded. The
MirrorSync pass driver executes the plan.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .models import RemoteItem, entry_download_id, is_folder_entry
from .paths import PathResolver
from .shortcuts import FetchMissing, ShortcutResolver

logger = logging.getLogger(__name__)


REASON_NEW = 'new'
REASON_UPDATED = 'updated'
REASON_MISSING = 'missing on disk'


@dataclass
class DownloadAction:
    """Content to fetch for one downloadId, shared by every path showing it"""

    download_id: str
    mime_type: str
    name: str
    modified_time: str
    reason: str
    paths: List[str] = field(default_factory=list)
    previous_modified_time: Optional[str] = None


def _download_reason(
    entry: dict,
    previous: Optional[dict],
    content_exists: Callable[[str], bool],
) -> Optional[str]:
    """Why an entry needs downloading, or None when the cached copy is current."""
    if previous is None:
        return REASON_NEW
    # ISO-8601 UTC timestamps from Drive compare correctly as strings
    if (entry.get('modifiedTime') or '') > (previous.get('modifiedTime') or ''):
        return REASON_UPDATED
    if not content_exists(entry['downloadId']):
        return REASON_MISSING
    return None


def plan_pass(
    remote_items: Sequence[RemoteItem],
    previous_index: Dict[str, dict],
    root_id: str,
    content_exists: Callable[[str], bool],
    fetch_missing: Optional[FetchMissing] = None,
) -> Tuple[Dict[str, dict], List[DownloadAction]]:
    """
    Build the next index and the downloads it requires.

    Args:
        remote_items: Flat listing of everything under the root folder
        previous_index: Index written by the previous pass
        root_id: Mirrored root folder id
        content_exists: Whether a content file is present for a downloadId
        fetch_missing: Point lookup for shortcut targets outside the listing

    Returns:
        Tuple of (new_index, download_actions)
    """
    if not remote_items:
        return {}, []

    items_by_id = {item.id: item for item in remote_items}
    shortcuts = ShortcutResolver(fetch_missing)

    resolved = []
    for item in remote_items:
        if item.id == root_id:
            continue
        resolved_item = shortcuts.resolve(item, items_by_id)
        if resolved_item is not None:
            resolved.append(resolved_item)

    paths = PathResolver(resolved, root_id)

    new_index: Dict[str, dict] = {}
    for item in resolved:
        path = paths.resolve(item.id)
        if path in new_index:
            logger.warning(
                f"Path {path} claimed by both {new_index[path]['id']} and {item.id}; keeping {item.id}"
            )
        new_index[path] = item.to_entry()

    # Lets a renamed or moved item find its previous generation
    previous_by_download_id = {
        entry_download_id(entry): entry
        for entry in previous_index.values()
        if not is_folder_entry(entry)
    }

    actions: Dict[str, DownloadAction] = {}
    for path, entry in new_index.items():
        if is_folder_entry(entry):
            continue

        download_id = entry['downloadId']
        previous = previous_index.get(path)
        if previous is None or is_folder_entry(previous) or entry_download_id(previous) != download_id:
            previous = previous_by_download_id.get(download_id)

        if download_id in actions:
            actions[download_id].paths.append(path)
            continue

        reason = _download_reason(entry, previous, content_exists)
        if reason is None:
            continue

        actions[download_id] = DownloadAction(
            download_id=download_id,
            mime_type=entry['mimeType'],
            name=entry['name'],
            modified_time=entry['modifiedTime'],
            reason=reason,
            paths=[path],
            previous_modified_time=previous.get('modifiedTime') if previous else None,
        )

    return new_index, list(actions.values())
