"""
Google Docs Tool - fetches document content as structured JSON.
"""

import logging
from typing import Any, Dict

import httplib2
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.errors import HttpError


logger = logging.getLogger(__name__)


class GoogleDocsError(Exception):
    """Base exception for Google Docs operations"""
    pass


class GoogleDocsFetcher:
    """
    Google Docs service wrapper for reading documents.

    The shared httplib2 transport of a service object is not thread-safe.
    When credentials are given, every request runs on its own authorized
    Http instance so downloads can run from a thread pool.
    """

    def __init__(self, service, credentials=None):
        """
        Args:
            service: Docs v1 service object (googleapiclient)
            credentials: Credentials for per-request transports
        """
        self.service = service
        self.credentials = credentials

    def _new_http(self):
        return AuthorizedHttp(self.credentials, http=httplib2.Http())

    def get_document(self, document_id: str) -> Dict[str, Any]:
        """
        Fetch a Google Doc.

        Args:
            document_id: Document ID

        Returns:
            Dict: The Docs API document resource

        Raises:
            GoogleDocsError: If the request fails
        """
        request = self.service.documents().get(documentId=document_id)
        try:
            if self.credentials is not None:
                document = request.execute(http=self._new_http())
            else:
                document = request.execute()
        except HttpError as error:
            logger.error(f"Failed to fetch document {document_id}: {error}")
            raise GoogleDocsError(f"Failed to fetch document {document_id}: {error}")

        logger.debug(f"Fetched document {document_id} ({document.get('title', '')})")
        return document
