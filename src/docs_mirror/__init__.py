"""
Docs Mirror - keeps a local, statically servable copy of a Google Drive folder.

Lists the folder tree, downloads changed Google Docs as JSON and maintains a
slug-based path index for the serving layer.
"""

__version__ = "1.0.0"

from .cache import ContentStore, PathIndexStore
from .config import ConfigError, MirrorSettings
from .gdocs import GoogleDocsFetcher, GoogleDocsError
from .gdrive import GoogleDriveLister, GoogleDriveError
from .models import RemoteItem, ResolvedItem
from .scheduler import SyncScheduler
from .signals import SyncNotifier
from .site import PathIndexView
from .sync import MirrorSync, PassGuard, SyncStats

__all__ = [
    "ContentStore",
    "PathIndexStore",
    "ConfigError",
    "MirrorSettings",
    "GoogleDocsFetcher",
    "GoogleDocsError",
    "GoogleDriveLister",
    "GoogleDriveError",
    "RemoteItem",
    "ResolvedItem",
    "SyncScheduler",
    "SyncNotifier",
    "PathIndexView",
    "MirrorSync",
    "PassGuard",
    "SyncStats",
]
