"""
Environment configuration for docs-mirror.
"""

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

logger = logging.getLogger(__name__)


DEFAULT_SYNC_INTERVAL_SECONDS = 60
DEFAULT_DOWNLOAD_WORKERS = 4


class ConfigError(Exception):
    """Raised when required configuration is missing"""
    pass


def _int_setting(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Invalid {name}={raw!r}, using {default}")
        return default
    if value <= 0:
        logger.warning(f"{name} must be positive, using {default}")
        return default
    return value


class MirrorSettings:
    """Settings for one mirror, normally read from the environment"""

    def __init__(
        self,
        folder_id: str,
        credentials_json: Optional[str] = None,
        credentials_file: str = 'credentials.json',
        sync_interval_seconds: int = DEFAULT_SYNC_INTERVAL_SECONDS,
        cache_dir: str = 'cache',
        docs_dir: Optional[str] = None,
        download_workers: int = DEFAULT_DOWNLOAD_WORKERS,
        rate_limit_delay: float = 0.0,
        log_level: str = 'INFO',
    ):
        self.folder_id = folder_id
        self.credentials_json = credentials_json
        self.credentials_file = credentials_file
        self.sync_interval_seconds = sync_interval_seconds
        self.cache_dir = Path(cache_dir)
        self.docs_dir = Path(docs_dir) if docs_dir else self.cache_dir / 'docs'
        self.download_workers = download_workers
        self.rate_limit_delay = rate_limit_delay
        self.log_level = log_level

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> 'MirrorSettings':
        """
        Read settings from environment variables.

        Args:
            env: Mapping to read instead of os.environ

        Returns:
            MirrorSettings

        Raises:
            ConfigError: If GOOGLE_DRIVE_FOLDER_ID is not set
        """
        env = os.environ if env is None else env

        folder_id = (env.get('GOOGLE_DRIVE_FOLDER_ID') or '').strip()
        if not folder_id:
            raise ConfigError("GOOGLE_DRIVE_FOLDER_ID not set in environment")

        try:
            rate_limit_delay = float(env.get('RATE_LIMIT_DELAY', '0') or 0)
        except ValueError:
            logger.warning(f"Invalid RATE_LIMIT_DELAY={env.get('RATE_LIMIT_DELAY')!r}, using 0")
            rate_limit_delay = 0.0

        return cls(
            folder_id=folder_id,
            credentials_json=env.get('GOOGLE_API_CREDENTIALS') or None,
            credentials_file=env.get('GOOGLE_CREDENTIALS_FILE', 'credentials.json'),
            sync_interval_seconds=_int_setting(
                env, 'GOOGLE_DRIVE_SYNC_INTERVAL_SECONDS', DEFAULT_SYNC_INTERVAL_SECONDS
            ),
            cache_dir=env.get('CACHE_DIRECTORY') or 'cache',
            docs_dir=env.get('DOCS_DIRECTORY') or None,
            download_workers=_int_setting(env, 'DOWNLOAD_WORKERS', DEFAULT_DOWNLOAD_WORKERS),
            rate_limit_delay=max(0.0, rate_limit_delay),
            log_level=(env.get('LOG_LEVEL') or 'INFO').upper(),
        )

    @property
    def index_file(self) -> Path:
        return self.cache_dir / 'index.json'
