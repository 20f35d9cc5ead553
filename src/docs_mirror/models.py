"""
Records exchanged between the Drive listing, the resolvers and the index.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


FOLDER_MIME = 'application/vnd.google-apps.folder'
DOCUMENT_MIME = 'application/vnd.google-apps.document'
SPREADSHEET_MIME = 'application/vnd.google-apps.spreadsheet'
SHORTCUT_MIME = 'application/vnd.google-apps.shortcut'

INDEXABLE_MIME_TYPES = frozenset({FOLDER_MIME, DOCUMENT_MIME, SPREADSHEET_MIME})

# Drive API fields requested for every file resource
FILE_FIELDS = (
    'id, name, mimeType, modifiedTime, parents, shortcutDetails(targetId), '
    'lastModifyingUser, webViewLink'
)


@dataclass
class RemoteItem:
    """One Drive entry as returned by the lister."""

    id: str
    name: str
    mime_type: str
    modified_time: str = ''
    parents: List[str] = field(default_factory=list)
    shortcut_target_id: Optional[str] = None
    last_modifying_user: Optional[Dict[str, Any]] = None
    web_view_link: Optional[str] = None

    @property
    def parent(self) -> Optional[str]:
        """First parent id; Drive items have at most one in practice."""
        return self.parents[0] if self.parents else None

    @property
    def is_shortcut(self) -> bool:
        return self.mime_type == SHORTCUT_MIME

    @classmethod
    def from_api(cls, resource: Dict[str, Any]) -> 'RemoteItem':
        """
        Build from a Drive API v3 `files` resource.

        Args:
            resource: Dict with the keys listed in FILE_FIELDS

        Returns:
            RemoteItem
        """
        shortcut = resource.get('shortcutDetails') or {}
        return cls(
            id=resource['id'],
            name=resource.get('name', ''),
            mime_type=resource.get('mimeType', ''),
            modified_time=resource.get('modifiedTime', ''),
            parents=list(resource.get('parents') or []),
            shortcut_target_id=shortcut.get('targetId'),
            last_modifying_user=resource.get('lastModifyingUser'),
            web_view_link=resource.get('webViewLink'),
        )


@dataclass
class ResolvedItem:
    """
    A RemoteItem after shortcut resolution.

    Identity, name and location come from the entry itself; content type,
    timestamps and `download_id` come from the content-bearing target.
    """

    id: str
    name: str
    mime_type: str
    modified_time: str
    parents: List[str]
    download_id: str
    last_modifying_user: Optional[Dict[str, Any]] = None
    web_view_link: Optional[str] = None

    @property
    def parent(self) -> Optional[str]:
        return self.parents[0] if self.parents else None

    @property
    def is_folder(self) -> bool:
        return self.mime_type == FOLDER_MIME

    def to_entry(self) -> Dict[str, Any]:
        """Serialize as a path index entry."""
        return {
            'id': self.id,
            'downloadId': self.download_id,
            'name': self.name,
            'mimeType': self.mime_type,
            'modifiedTime': self.modified_time,
            'parent': self.parent,
            'lastModifyingUser': self.last_modifying_user,
            'webViewLink': self.web_view_link,
        }


def is_folder_entry(entry: Dict[str, Any]) -> bool:
    return entry.get('mimeType') == FOLDER_MIME


def entry_download_id(entry: Dict[str, Any]) -> str:
    """Content id backing an index entry (indexes written before downloadId fall back to id)."""
    return entry.get('downloadId') or entry.get('id')
