"""
Local storage for docs-mirror.

- PathIndexStore: the path -> entry index written at the end of every pass
- ContentStore: one JSON file per downloadId with the fetched document
"""

import os
import json
import logging
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from .models import is_folder_entry

logger = logging.getLogger(__name__)


INDEX_FILENAME = 'index.json'


def _is_valid_entry(entry: Any) -> bool:
    if not isinstance(entry, dict):
        return False
    if not isinstance(entry.get('id'), str) or not isinstance(entry.get('mimeType'), str):
        return False
    return all(isinstance(entry.get(key), (str, type(None))) for key in ('downloadId', 'modifiedTime'))


def _write_json_atomic(target: Path, payload: Any):
    """Write JSON next to the target, then swap it into place."""
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix='.tmp', dir=str(target.parent))
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(payload, f, indent=2)
        os.replace(temp_name, target)
    except BaseException:
        try:
            os.unlink(temp_name)
        except FileNotFoundError:
            pass
        raise


class PathIndexStore:
    """Persists the path index as a single JSON object"""

    def __init__(self, cache_dir: str = 'cache', index_file: Optional[str] = None):
        """
        Initialize index store

        Args:
            cache_dir: Cache directory (index.json lives here)
            index_file: Explicit index path (takes precedence over cache_dir)
        """
        self.index_file = Path(index_file) if index_file else Path(cache_dir) / INDEX_FILENAME
        self.index: Dict[str, dict] = {}

    def load(self) -> Dict[str, dict]:
        """
        Load index from disk

        A missing or unreadable file yields an empty index; a sync pass
        will rebuild it. Entries that are not objects carrying string
        `id` and `mimeType` are dropped.

        Returns:
            Index dictionary
        """
        if not self.index_file.exists():
            logger.info(f"No existing index at {self.index_file} - starting fresh")
            self.index = {}
            return self.index

        try:
            with open(self.index_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Error loading index {self.index_file}: {e}")
            data = {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring index {self.index_file}: expected a JSON object")
            data = {}

        malformed = sorted(path for path, entry in data.items() if not _is_valid_entry(entry))
        if malformed:
            logger.warning(
                f"Dropping {len(malformed)} malformed entries from index {self.index_file}: {malformed[:5]}"
            )
            data = {path: entry for path, entry in data.items() if path not in malformed}

        self.index = data
        logger.debug(f"Loaded index with {len(self.index)} entries")
        return self.index

    def save(self, index: Optional[Dict[str, dict]] = None):
        """
        Replace the index on disk

        Args:
            index: New index (defaults to the in-memory one)
        """
        if index is not None:
            self.index = index
        _write_json_atomic(self.index_file, self.index)
        logger.info(f"Index saved to {self.index_file} ({len(self.index)} entries)")

    def get_stats(self) -> Dict[str, int]:
        """
        Get index statistics

        Returns:
            Dictionary with index stats
        """
        folders = sum(1 for entry in self.index.values() if is_folder_entry(entry))
        return {
            'total_entries': len(self.index),
            'total_folders': folders,
            'total_files': len(self.index) - folders,
        }


class ContentStore:
    """Cached content files, one `{downloadId}.json` per backing item"""

    SUFFIX = '.json'

    def __init__(self, docs_dir: str = 'cache/docs'):
        self.docs_dir = Path(docs_dir)

    def ensure_directory(self):
        self.docs_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, download_id: str) -> Path:
        return self.docs_dir / f"{download_id}{self.SUFFIX}"

    def exists(self, download_id: str) -> bool:
        return self.path_for(download_id).is_file()

    def write(self, download_id: str, payload: Any) -> Path:
        """
        Store content for an id, replacing any previous version

        Args:
            download_id: Id of the content-bearing Drive item
            payload: JSON-serializable content

        Returns:
            Path of the written file
        """
        path = self.path_for(download_id)
        _write_json_atomic(path, payload)
        return path

    def read(self, download_id: str) -> Any:
        with open(self.path_for(download_id), 'r', encoding='utf-8') as f:
            return json.load(f)

    def list_ids(self) -> List[str]:
        """Ids of all content files currently on disk"""
        if not self.docs_dir.is_dir():
            return []
        return sorted(
            path.stem for path in self.docs_dir.iterdir()
            if path.suffix == self.SUFFIX and path.is_file()
        )

    def list_temp_files(self) -> List[Path]:
        """Temp files left behind by writes that never reached the final rename"""
        if not self.docs_dir.is_dir():
            return []
        return sorted(self.docs_dir.glob(f".*{self.SUFFIX}.*.tmp"))

    def delete(self, download_id: str):
        """
        Delete a content file

        Raises:
            FileNotFoundError: If the file is already gone
            OSError: For any other removal failure
        """
        self.path_for(download_id).unlink()
