"""
Builders and in-memory fakes shared by the sync tests.
"""

import threading

from docs_mirror.cache import ContentStore, PathIndexStore
from docs_mirror.models import (
    DOCUMENT_MIME,
    FOLDER_MIME,
    SHORTCUT_MIME,
    SPREADSHEET_MIME,
    RemoteItem,
    ResolvedItem,
)
from docs_mirror.signals import SyncNotifier
from docs_mirror.sync import MirrorSync


ROOT = 'root-folder'
T1 = '2024-01-01T10:00:00.000Z'
T2 = '2024-02-01T10:00:00.000Z'
T3 = '2024-03-01T10:00:00.000Z'


def folder(item_id, name, parent=ROOT, modified=T1):
    return RemoteItem(item_id, name, FOLDER_MIME, modified, [parent])


def doc(item_id, name, parent=ROOT, modified=T1):
    return RemoteItem(item_id, name, DOCUMENT_MIME, modified, [parent])


def sheet(item_id, name, parent=ROOT, modified=T1):
    return RemoteItem(item_id, name, SPREADSHEET_MIME, modified, [parent])


def shortcut(item_id, name, target_id, parent=ROOT, modified=T1):
    return RemoteItem(item_id, name, SHORTCUT_MIME, modified, [parent], shortcut_target_id=target_id)


def resolved(item_id, name, parent=ROOT, mime_type=FOLDER_MIME, modified=T1):
    return ResolvedItem(item_id, name, mime_type, modified, [parent] if parent else [], item_id)


def entry(item_id, modified=T1, download_id=None, mime_type=DOCUMENT_MIME, name=None, parent=ROOT):
    return {
        'id': item_id,
        'downloadId': download_id or item_id,
        'name': name or item_id,
        'mimeType': mime_type,
        'modifiedTime': modified,
        'parent': parent,
        'lastModifyingUser': None,
        'webViewLink': None,
    }


class FakeLister:
    """Remote listing served from memory"""

    def __init__(self, items=None, outside=None):
        self.items = list(items or [])
        self.outside = dict(outside or {})
        self.list_error = None
        self.get_file_error = None
        self.list_calls = 0
        self.get_file_calls = []
        self.on_list = None

    def list_files(self, root_id):
        self.list_calls += 1
        if self.on_list is not None:
            self.on_list()
        if self.list_error is not None:
            raise self.list_error
        return list(self.items)

    def get_file(self, file_id):
        self.get_file_calls.append(file_id)
        if self.get_file_error is not None:
            raise self.get_file_error
        return self.outside.get(file_id)


class FakeFetcher:
    """Docs fetcher returning a new revision on every call"""

    def __init__(self):
        self.failing = set()
        self.calls = []
        self._lock = threading.Lock()

    def get_document(self, document_id):
        with self._lock:
            self.calls.append(document_id)
            revision = self.calls.count(document_id)
        if document_id in self.failing:
            raise RuntimeError(f"boom {document_id}")
        return {'documentId': document_id, 'revisionId': f"rev-{revision}", 'body': {'content': []}}


def make_sync(tmp_path, lister, fetcher, notifier=None, **kwargs):
    return MirrorSync(
        root_id=ROOT,
        lister=lister,
        fetcher=fetcher,
        index_store=PathIndexStore(cache_dir=str(tmp_path / 'cache')),
        content_store=ContentStore(str(tmp_path / 'cache' / 'docs')),
        notifier=notifier or SyncNotifier(),
        **kwargs,
    )
