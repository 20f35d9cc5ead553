"""
Core synchronization pass for mirroring a Drive folder to the local cache.

Workflow of one pass:
1. List everything under the root folder
2. Resolve shortcuts and site paths, build the next index generation
3. Download new, updated, or missing content (documents as Docs API JSON,
   spreadsheets as a placeholder)
4. Prune content files no longer referenced
5. Save the index and notify subscribers
"""

import enum
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .cache import ContentStore, PathIndexStore
from .models import DOCUMENT_MIME, SPREADSHEET_MIME, RemoteItem, is_folder_entry
from .prune import prune
from .reconcile import REASON_MISSING, REASON_NEW, REASON_UPDATED, DownloadAction, plan_pass
from .signals import SyncNotifier

logger = logging.getLogger(__name__)


SHEET_PLACEHOLDER_MESSAGE = "Google Sheet conversion is not yet implemented."


class RemoteLister(Protocol):
    def list_files(self, root_id: str) -> Sequence[RemoteItem]: ...

    def get_file(self, file_id: str) -> Optional[RemoteItem]: ...


class ContentFetcher(Protocol):
    def get_document(self, document_id: str) -> Dict[str, Any]: ...


class PassState(enum.Enum):
    IDLE = 'idle'
    RUNNING = 'running'


class PassGuard:
    """Single slot for the running pass; a second caller is turned away, not queued."""

    def __init__(self):
        self._lock = threading.Lock()
        self._state = PassState.IDLE

    @property
    def state(self) -> PassState:
        return self._state

    def try_enter(self) -> bool:
        with self._lock:
            if self._state is PassState.RUNNING:
                return False
            self._state = PassState.RUNNING
            return True

    def leave(self):
        with self._lock:
            self._state = PassState.IDLE


@dataclass
class SyncStats:
    """Statistics from a sync pass."""

    indexed: int = 0
    created: int = 0
    updated: int = 0
    restored: int = 0
    unchanged: int = 0
    failed: int = 0
    pruned: int = 0
    duration: float = 0.0


class MirrorSync:
    """Runs reconciliation passes for one root folder"""

    def __init__(
        self,
        root_id: str,
        lister: RemoteLister,
        fetcher: ContentFetcher,
        index_store: PathIndexStore,
        content_store: ContentStore,
        notifier: Optional[SyncNotifier] = None,
        guard: Optional[PassGuard] = None,
        download_workers: int = 4,
    ):
        """
        Initialize the pass driver.

        Args:
            root_id: Google Drive folder ID to mirror
            lister: Remote directory lister (listing + single file lookup)
            fetcher: Docs content fetcher
            index_store: Persisted path index
            content_store: Cached content files
            notifier: Receives a notification after every committed pass
            guard: Pass slot shared by every trigger of this mirror
            download_workers: Concurrent downloads within one pass
        """
        self.root_id = root_id
        self.lister = lister
        self.fetcher = fetcher
        self.index_store = index_store
        self.content_store = content_store
        self.notifier = notifier or SyncNotifier()
        self.guard = guard or PassGuard()
        self.download_workers = max(1, download_workers)

    def run(self) -> Optional[SyncStats]:
        """
        Run one pass unless another one is in flight.

        Returns:
            SyncStats of the committed pass, or None when the trigger was
            dropped or the remote listing failed
        """
        if not self.guard.try_enter():
            logger.info("Sync is already in progress. Skipping this run.")
            return None

        try:
            return self._run_pass()
        finally:
            self.guard.leave()

    def _run_pass(self) -> Optional[SyncStats]:
        started = time.monotonic()
        logger.info(f"Starting Google Drive sync of {self.root_id}...")

        try:
            remote_items = self.lister.list_files(self.root_id)
        except Exception as e:
            logger.error(f"Listing {self.root_id} failed, keeping previous index: {e}")
            return None

        if not remote_items:
            logger.warning(
                f"Remote listing of {self.root_id} is empty; "
                "the index will be emptied and all cached content pruned"
            )

        previous_index = self.index_store.load()
        self.content_store.ensure_directory()

        new_index, actions = plan_pass(
            remote_items,
            previous_index,
            self.root_id,
            content_exists=self.content_store.exists,
            fetch_missing=self.lister.get_file,
        )

        stats = SyncStats(indexed=len(new_index))
        content_ids = {
            entry['downloadId'] for entry in new_index.values() if not is_folder_entry(entry)
        }
        stats.unchanged = len(content_ids) - len(actions)

        failures = self._download_all(actions, stats)
        for action in failures:
            self._keep_previous_timestamp(new_index, action)

        stats.pruned = prune(self.content_store, content_ids)

        self.index_store.save(new_index)
        stats.duration = time.monotonic() - started

        logger.info(
            f"Sync complete. {stats.indexed} paths indexed "
            f"({stats.created} new, {stats.updated} updated, {stats.restored} restored, "
            f"{stats.unchanged} unchanged, {stats.failed} failed, {stats.pruned} pruned) "
            f"in {stats.duration:.1f}s"
        )
        self.notifier.notify()
        return stats

    def _download_all(self, actions: List[DownloadAction], stats: SyncStats) -> List[DownloadAction]:
        """
        Execute downloads concurrently.

        Returns:
            Actions whose download failed
        """
        failures = []
        if not actions:
            return failures

        with ThreadPoolExecutor(max_workers=self.download_workers) as executor:
            futures = {executor.submit(self.download, action): action for action in actions}
            for future in as_completed(futures):
                action = futures[future]
                try:
                    future.result()
                except Exception as e:
                    logger.error(f"Failed to sync '{action.name}' ({action.download_id}): {e}")
                    stats.failed += 1
                    failures.append(action)
                    continue

                if action.reason == REASON_NEW:
                    stats.created += 1
                elif action.reason == REASON_UPDATED:
                    stats.updated += 1
                elif action.reason == REASON_MISSING:
                    stats.restored += 1

        return failures

    def download(self, action: DownloadAction):
        """Fetch and store the content behind one action."""
        logger.info(f"Syncing: {action.paths[0]} (Reason: {action.reason})")

        if action.mime_type == DOCUMENT_MIME:
            payload = self.fetcher.get_document(action.download_id)
        elif action.mime_type == SPREADSHEET_MIME:
            payload = {
                'id': action.download_id,
                'name': action.name,
                'modifiedTime': action.modified_time,
                'message': SHEET_PLACEHOLDER_MESSAGE,
            }
        else:
            raise ValueError(f"Unsupported content type: {action.mime_type}")

        self.content_store.write(action.download_id, payload)

    @staticmethod
    def _keep_previous_timestamp(new_index: Dict[str, dict], action: DownloadAction):
        """Leave a failed item looking outdated so the next pass retries it."""
        if action.previous_modified_time is None:
            return
        for path in action.paths:
            new_index[path]['modifiedTime'] = action.previous_modified_time

