#!/usr/bin/env python3
"""
Docs Mirror - Entry point script.

Mirrors the configured Google Drive folder into the local cache and keeps it
current on a fixed polling interval.
"""

import sys
import signal
import logging
import threading
from pathlib import Path

# Add src to Python path
sys.path.insert(0, str(Path(__file__).parent / 'src'))

from docs_mirror.auth import GoogleAuthenticator
from docs_mirror.cache import ContentStore, PathIndexStore
from docs_mirror.config import ConfigError, MirrorSettings
from docs_mirror.gdocs import GoogleDocsFetcher
from docs_mirror.gdrive import GoogleDriveLister
from docs_mirror.scheduler import SyncScheduler
from docs_mirror.signals import SyncNotifier
from docs_mirror.sync import MirrorSync


def setup_logging(level: str = 'INFO'):
    """Configure logging output"""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )


def build_sync(settings: MirrorSettings, notifier: SyncNotifier) -> MirrorSync:
    """Wire the Google API clients and local stores into a pass driver"""
    auth = GoogleAuthenticator(settings.credentials_file, settings.credentials_json)

    lister = GoogleDriveLister(auth.drive_service(), rate_limit_delay=settings.rate_limit_delay)
    fetcher = GoogleDocsFetcher(auth.docs_service(), credentials=auth.credentials)

    return MirrorSync(
        root_id=settings.folder_id,
        lister=lister,
        fetcher=fetcher,
        index_store=PathIndexStore(index_file=str(settings.index_file)),
        content_store=ContentStore(str(settings.docs_dir)),
        notifier=notifier,
        download_workers=settings.download_workers,
    )


def main():
    """Main mirror workflow"""
    try:
        settings = MirrorSettings.from_env()
    except ConfigError as e:
        setup_logging()
        logging.getLogger(__name__).error(f"❌ {e}")
        sys.exit(1)

    setup_logging(settings.log_level)
    logger = logging.getLogger(__name__)

    logger.info(f"📂 Root folder ID: {settings.folder_id}")
    logger.info(f"🗂️  Index: {settings.index_file}")
    logger.info(f"📝 Docs directory: {settings.docs_dir}")
    logger.info(f"⏱️  Sync interval: {settings.sync_interval_seconds}s")

    try:
        sync = build_sync(settings, SyncNotifier())
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"❌ {e}")
        sys.exit(1)

    scheduler = SyncScheduler(sync, settings.sync_interval_seconds)
    stop_event = threading.Event()

    def shutdown(signum, frame):
        logger.info("Stopping sync scheduler...")
        scheduler.stop()
        stop_event.set()

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    logger.info("Performing initial data sync...")
    scheduler.start()

    stop_event.wait()


if __name__ == '__main__':
    main()
