"""
Serving-side view of the path index.

Keeps an in-memory copy of the index that is reloaded whenever a sync pass
completes, and answers the routing questions a page renderer asks: what
lives at a request path, what a folder contains, and what the navigation
tree looks like.
"""

import logging
import posixpath
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .cache import ContentStore, PathIndexStore
from .models import entry_download_id, is_folder_entry
from .signals import SyncNotifier

logger = logging.getLogger(__name__)


ROUTE_DIRECTORY = 'directory'
ROUTE_DOCUMENT = 'document'
ROUTE_REDIRECT = 'redirect'
ROUTE_NOT_FOUND = 'not_found'


@dataclass
class RouteMatch:
    kind: str
    path: str
    entry: Optional[Dict[str, Any]] = None


def _parent_of(path: str) -> str:
    return posixpath.dirname(path) or '/'


class PathIndexView:
    """In-memory copy of the index for request handling"""

    def __init__(
        self,
        index_store: PathIndexStore,
        content_store: ContentStore,
        notifier: Optional[SyncNotifier] = None,
    ):
        """
        Args:
            index_store: Where the sync engine writes the index
            content_store: Cached content files
            notifier: When given, the view reloads on every sync-complete
        """
        self.index_store = index_store
        self.content_store = content_store
        self._lock = threading.Lock()
        self._index: Dict[str, dict] = {}
        self._unsubscribe = notifier.subscribe(self.reload) if notifier else None
        self.reload()

    def reload(self):
        """Replace the in-memory copy with the index on disk."""
        index = PathIndexStore(index_file=str(self.index_store.index_file)).load()
        with self._lock:
            self._index = index
        logger.info(f"Path index loaded into memory ({len(index)} entries)")

    def close(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    @property
    def index(self) -> Dict[str, dict]:
        with self._lock:
            return self._index

    def lookup(self, request_path: str) -> RouteMatch:
        """
        Route a request path.

        - "/" and "/index.html" are the root directory
        - "/x/" is a directory when /x is an indexed folder
        - "/x" is a document when indexed as one, and redirects to "/x/"
          when it is a folder

        Args:
            request_path: URL path of the request

        Returns:
            RouteMatch
        """
        index = self.index
        normalized = posixpath.normpath(request_path or '/')
        if normalized.startswith('//'):
            normalized = '/' + normalized.lstrip('/')
        if request_path.endswith('/') and normalized != '/':
            normalized += '/'

        if normalized in ('/', '/index.html'):
            return RouteMatch(ROUTE_DIRECTORY, '/')

        if normalized.endswith('/'):
            dir_path = normalized[:-1]
            entry = index.get(dir_path)
            if entry is not None and is_folder_entry(entry):
                return RouteMatch(ROUTE_DIRECTORY, dir_path, entry)
        else:
            entry = index.get(normalized)
            if entry is not None:
                if is_folder_entry(entry):
                    return RouteMatch(ROUTE_REDIRECT, f"{normalized}/", entry)
                return RouteMatch(ROUTE_DOCUMENT, normalized, entry)

        logger.warning(f"404 - Path not found in index: {normalized}")
        return RouteMatch(ROUTE_NOT_FOUND, normalized)

    def list_directory(self, path: str) -> Tuple[List[Tuple[str, dict]], List[Tuple[str, dict]]]:
        """
        Direct children of a directory.

        Args:
            path: "/" or an indexed folder path (no trailing slash)

        Returns:
            Tuple of (folders, files), each a path-sorted list of (path, entry)
        """
        folders = []
        files = []
        for child_path, entry in self.index.items():
            if _parent_of(child_path) != path:
                continue
            if is_folder_entry(entry):
                folders.append((child_path, entry))
            else:
                files.append((child_path, entry))

        folders.sort(key=lambda pair: pair[0])
        files.sort(key=lambda pair: pair[0])
        return folders, files

    def content_path(self, entry: Dict[str, Any]) -> Path:
        """Location of the cached content for a document entry."""
        return self.content_store.path_for(entry_download_id(entry))

    def build_nav_tree(self) -> List[Dict[str, Any]]:
        """
        Build a hierarchical navigation tree from the flat index.

        Returns:
            List of {name, path, children} nodes; folder paths end with "/".
            Each level lists nodes with children first, then sorts by name.
        """
        index = self.index
        nodes = {}
        for full_path, entry in index.items():
            if full_path == '/':
                continue
            nodes[full_path] = {
                'name': entry.get('name', ''),
                'path': f"{full_path}/" if is_folder_entry(entry) else full_path,
                'children': [],
            }

        tree = []
        for full_path, node in nodes.items():
            parent = _parent_of(full_path)
            if parent == '/':
                tree.append(node)
            elif parent in nodes:
                nodes[parent]['children'].append(node)

        def sort_level(level):
            level.sort(key=lambda node: (not node['children'], node['name'].casefold()))
            for node in level:
                sort_level(node['children'])

        sort_level(tree)
        return tree
