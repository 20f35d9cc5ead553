"""
Tests for the Drive lister and Docs fetcher.

Google API service objects are replaced by MagicMock.
"""

from unittest.mock import MagicMock

import httplib2
import pytest
from googleapiclient.errors import HttpError

from docs_mirror import gdocs
from docs_mirror.gdocs import GoogleDocsError, GoogleDocsFetcher
from docs_mirror.gdrive import GoogleDriveError, GoogleDriveLister
from docs_mirror.models import FOLDER_MIME, SHORTCUT_MIME


def http_error(status):
    return HttpError(httplib2.Response({'status': status}), b'error body')


def resource(file_id, name, mime_type='application/vnd.google-apps.document', parent='root', **extra):
    data = {
        'id': file_id,
        'name': name,
        'mimeType': mime_type,
        'modifiedTime': '2024-01-01T10:00:00.000Z',
        'parents': [parent],
    }
    data.update(extra)
    return data


@pytest.fixture
def service():
    return MagicMock()


def make_lister(service, **kwargs):
    sleeps = []
    lister = GoogleDriveLister(service, sleep=sleeps.append, **kwargs)
    return lister, sleeps


class TestListFiles:
    """Test recursive listing."""

    def test_paginates_and_recurses(self, service):
        execute = service.files.return_value.list.return_value.execute
        execute.side_effect = [
            {'files': [resource('f', 'Team', FOLDER_MIME), resource('a', 'A')], 'nextPageToken': 'p2'},
            {'files': [resource('b', 'B')]},
            {'files': [resource('c', 'C', parent='f')]},
        ]
        lister, _ = make_lister(service)

        items = lister.list_files('root')

        assert [item.id for item in items] == ['f', 'a', 'b', 'c']
        calls = service.files.return_value.list.call_args_list
        assert calls[0].kwargs['q'] == "'root' in parents and trashed = false"
        assert calls[0].kwargs['pageToken'] is None
        assert calls[1].kwargs['pageToken'] == 'p2'
        assert calls[2].kwargs['q'] == "'f' in parents and trashed = false"
        assert calls[0].kwargs['supportsAllDrives'] is True
        assert 'shortcutDetails(targetId)' in calls[0].kwargs['fields']

    def test_shortcut_target_parsed(self, service):
        execute = service.files.return_value.list.return_value.execute
        execute.side_effect = [
            {'files': [resource('s', 'Link', SHORTCUT_MIME, shortcutDetails={'targetId': 'x'})]},
        ]
        lister, _ = make_lister(service)

        item = lister.list_files('root')[0]

        assert item.is_shortcut
        assert item.shortcut_target_id == 'x'

    def test_folder_listed_once(self, service):
        """Test a folder reachable twice is only listed once."""
        execute = service.files.return_value.list.return_value.execute
        execute.side_effect = [
            {'files': [resource('f', 'Team', FOLDER_MIME), resource('f', 'Team', FOLDER_MIME)]},
            {'files': []},
        ]
        lister, _ = make_lister(service)

        lister.list_files('root')

        assert execute.call_count == 2

    def test_retries_rate_limit(self, service):
        execute = service.files.return_value.list.return_value.execute
        execute.side_effect = [http_error(429), http_error(503), {'files': [resource('a', 'A')]}]
        lister, sleeps = make_lister(service)

        items = lister.list_files('root')

        assert [item.id for item in items] == ['a']
        assert sleeps == [1, 2]

    def test_gives_up_after_max_retries(self, service):
        execute = service.files.return_value.list.return_value.execute
        execute.side_effect = [http_error(500), http_error(500)]
        lister, _ = make_lister(service, max_retries=2)

        with pytest.raises(GoogleDriveError):
            lister.list_files('root')

    def test_client_error_not_retried(self, service):
        execute = service.files.return_value.list.return_value.execute
        execute.side_effect = [http_error(403)]
        lister, sleeps = make_lister(service)

        with pytest.raises(GoogleDriveError):
            lister.list_files('root')
        assert sleeps == []


class TestGetFile:
    """Test single file lookup."""

    def test_returns_item(self, service):
        service.files.return_value.get.return_value.execute.return_value = resource(
            'x', 'Outside', parent='other', webViewLink='https://docs.google.com/document/d/x'
        )
        lister, _ = make_lister(service)

        item = lister.get_file('x')

        assert item.id == 'x'
        assert item.parents == ['other']
        assert item.web_view_link == 'https://docs.google.com/document/d/x'
        assert service.files.return_value.get.call_args.kwargs['fileId'] == 'x'

    def test_not_found(self, service):
        service.files.return_value.get.return_value.execute.side_effect = [http_error(404)]
        lister, _ = make_lister(service)

        assert lister.get_file('x') is None

    def test_other_errors_raise(self, service):
        service.files.return_value.get.return_value.execute.side_effect = [http_error(403)]
        lister, _ = make_lister(service)

        with pytest.raises(GoogleDriveError):
            lister.get_file('x')


class TestGoogleDocsFetcher:
    """Test document fetching."""

    def test_get_document(self, service):
        service.documents.return_value.get.return_value.execute.return_value = {'documentId': 'd', 'title': 'Plan'}

        document = GoogleDocsFetcher(service).get_document('d')

        assert document['title'] == 'Plan'
        assert service.documents.return_value.get.call_args.kwargs == {'documentId': 'd'}

    def test_error_wrapped(self, service):
        service.documents.return_value.get.return_value.execute.side_effect = [http_error(500)]

        with pytest.raises(GoogleDocsError):
            GoogleDocsFetcher(service).get_document('d')

    def test_per_request_transport(self, service, monkeypatch):
        """Test requests run on a fresh authorized Http when credentials are given."""
        transports = []

        def fake_authorized_http(credentials, http=None):
            transports.append((credentials, http))
            return f"http-{len(transports)}"

        monkeypatch.setattr(gdocs, 'AuthorizedHttp', fake_authorized_http)
        execute = service.documents.return_value.get.return_value.execute
        execute.return_value = {'documentId': 'd'}
        fetcher = GoogleDocsFetcher(service, credentials='creds')

        fetcher.get_document('d')
        fetcher.get_document('d')

        assert [call.kwargs['http'] for call in execute.call_args_list] == ['http-1', 'http-2']
        assert transports[0][0] == 'creds'
        assert transports[0][1] is not transports[1][1]
