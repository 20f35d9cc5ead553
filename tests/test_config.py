"""
Tests for environment configuration.
"""

from pathlib import Path

import pytest

from docs_mirror.config import ConfigError, MirrorSettings


class TestMirrorSettings:
    """Test MirrorSettings.from_env."""

    def test_folder_id_required(self):
        with pytest.raises(ConfigError):
            MirrorSettings.from_env({})

    def test_blank_folder_id_rejected(self):
        with pytest.raises(ConfigError):
            MirrorSettings.from_env({'GOOGLE_DRIVE_FOLDER_ID': '   '})

    def test_defaults(self):
        settings = MirrorSettings.from_env({'GOOGLE_DRIVE_FOLDER_ID': 'abc'})

        assert settings.folder_id == 'abc'
        assert settings.credentials_json is None
        assert settings.credentials_file == 'credentials.json'
        assert settings.sync_interval_seconds == 60
        assert settings.cache_dir == Path('cache')
        assert settings.docs_dir == Path('cache/docs')
        assert settings.index_file == Path('cache/index.json')
        assert settings.download_workers == 4
        assert settings.rate_limit_delay == 0.0
        assert settings.log_level == 'INFO'

    def test_overrides(self):
        settings = MirrorSettings.from_env({
            'GOOGLE_DRIVE_FOLDER_ID': 'abc',
            'GOOGLE_API_CREDENTIALS': '{"type": "service_account"}',
            'GOOGLE_CREDENTIALS_FILE': '/etc/mirror/key.json',
            'GOOGLE_DRIVE_SYNC_INTERVAL_SECONDS': '300',
            'CACHE_DIRECTORY': '/var/cache/mirror',
            'DOCS_DIRECTORY': '/srv/docs',
            'DOWNLOAD_WORKERS': '8',
            'RATE_LIMIT_DELAY': '0.25',
            'LOG_LEVEL': 'debug',
        })

        assert settings.credentials_json == '{"type": "service_account"}'
        assert settings.credentials_file == '/etc/mirror/key.json'
        assert settings.sync_interval_seconds == 300
        assert settings.index_file == Path('/var/cache/mirror/index.json')
        assert settings.docs_dir == Path('/srv/docs')
        assert settings.download_workers == 8
        assert settings.rate_limit_delay == 0.25
        assert settings.log_level == 'DEBUG'

    def test_docs_dir_follows_cache_dir(self):
        settings = MirrorSettings.from_env({
            'GOOGLE_DRIVE_FOLDER_ID': 'abc',
            'CACHE_DIRECTORY': '/data',
        })
        assert settings.docs_dir == Path('/data/docs')

    @pytest.mark.parametrize("raw", ['soon', '0', '-5', ''])
    def test_invalid_interval_falls_back(self, raw):
        settings = MirrorSettings.from_env({
            'GOOGLE_DRIVE_FOLDER_ID': 'abc',
            'GOOGLE_DRIVE_SYNC_INTERVAL_SECONDS': raw,
        })
        assert settings.sync_interval_seconds == 60

    def test_invalid_rate_limit_falls_back(self):
        settings = MirrorSettings.from_env({
            'GOOGLE_DRIVE_FOLDER_ID': 'abc',
            'RATE_LIMIT_DELAY': 'fast',
        })
        assert settings.rate_limit_delay == 0.0
