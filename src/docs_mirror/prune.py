"""
Removal of cached content no longer referenced by the index.
"""

import logging
from typing import Iterable

from .cache import ContentStore

logger = logging.getLogger(__name__)


def prune(content_store: ContentStore, required_ids: Iterable[str]) -> int:
    """
    Delete every content file whose id is not required.

    A file that disappears before it can be deleted counts as removed. Any
    other failure is logged and the scan moves on. Temp files left by
    interrupted writes are removed too but not counted.

    Args:
        content_store: Store holding `{downloadId}.json` files
        required_ids: downloadIds referenced by the new index

    Returns:
        Number of files removed
    """
    required = set(required_ids)
    removed = 0

    for download_id in content_store.list_ids():
        if download_id in required:
            continue
        try:
            content_store.delete(download_id)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Failed to delete {content_store.path_for(download_id)}: {e}")
            continue
        logger.info(f"Pruned stale content {download_id}")
        removed += 1

    for temp_file in content_store.list_temp_files():
        try:
            temp_file.unlink()
        except FileNotFoundError:
            continue
        except OSError as e:
            logger.error(f"Failed to delete {temp_file}: {e}")
            continue
        logger.info(f"Removed leftover temp file {temp_file.name}")

    return removed
