"""
Google Drive Tool - read-only listing of a mirrored folder tree.

Provides:
- Recursive, paginated listing of every file/folder/shortcut under a root
- Single file metadata lookup (used for shortcut targets outside the tree)
- Retry with exponential backoff on rate limits and server errors
"""

import logging
import time
from collections import deque
from typing import Callable, List, Optional

from googleapiclient.errors import HttpError

from .models import FILE_FIELDS, FOLDER_MIME, RemoteItem


logger = logging.getLogger(__name__)


class GoogleDriveError(Exception):
    """Base exception for Google Drive operations"""
    pass


class GoogleDriveLister:
    """
    Google Drive service wrapper for listing a folder tree.
    """

    def __init__(
        self,
        service,
        rate_limit_delay: float = 0.0,
        max_retries: int = 5,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the lister.

        Args:
            service: Drive v3 service object (googleapiclient)
            rate_limit_delay: Delay in seconds between API calls
            max_retries: Attempts per request on 429 / 5xx responses
            sleep: Sleep function (replaceable in tests)
        """
        self.service = service
        self.rate_limit_delay = rate_limit_delay
        self.max_retries = max_retries
        self._sleep = sleep
        self.api_call_count = 0
        self.last_api_call = 0.0

    def _rate_limit(self):
        """Apply rate limiting between API calls"""
        if self.rate_limit_delay > 0:
            elapsed = time.time() - self.last_api_call
            if elapsed < self.rate_limit_delay:
                self._sleep(self.rate_limit_delay - elapsed)
        self.last_api_call = time.time()
        self.api_call_count += 1

    def _execute_with_retry(self, request):
        """Execute Google Drive API request with exponential backoff retry logic"""
        for attempt in range(self.max_retries):
            try:
                self._rate_limit()
                return request.execute()
            except HttpError as error:
                status = error.resp.status
                if status != 429 and status < 500:
                    raise
                if attempt == self.max_retries - 1:
                    raise
                wait_time = 2 ** attempt
                kind = "Rate limit hit" if status == 429 else "Server error"
                logger.warning(f"{kind}, retrying in {wait_time:.1f}s (attempt {attempt + 1}/{self.max_retries})")
                self._sleep(wait_time)
        raise GoogleDriveError("Unexpected error in retry logic")

    def list_files(self, root_id: str) -> List[RemoteItem]:
        """
        List every item below a folder, descending into subfolders.

        Args:
            root_id: Folder ID to start from (not included in the result)

        Returns:
            List[RemoteItem]: Flat list of files, folders and shortcuts

        Raises:
            GoogleDriveError: If any listing request fails
        """
        items = []
        pending = deque([root_id])
        processed = set()

        while pending:
            folder_id = pending.popleft()
            if folder_id in processed:
                continue
            processed.add(folder_id)

            page_token = None
            while True:
                request = self.service.files().list(
                    q=f"'{folder_id}' in parents and trashed = false",
                    fields=f"nextPageToken, files({FILE_FIELDS})",
                    corpora='allDrives',
                    includeItemsFromAllDrives=True,
                    supportsAllDrives=True,
                    pageToken=page_token,
                )
                try:
                    response = self._execute_with_retry(request)
                except HttpError as error:
                    logger.error(f"Failed to list folder {folder_id}: {error}")
                    raise GoogleDriveError(f"Failed to list folder {folder_id}: {error}")

                for resource in response.get('files', []):
                    item = RemoteItem.from_api(resource)
                    if item.mime_type == FOLDER_MIME:
                        pending.append(item.id)
                    items.append(item)

                page_token = response.get('nextPageToken')
                if not page_token:
                    break

        logger.info(f"Listed {len(items)} items under {root_id} ({len(processed)} folders)")
        return items

    def get_file(self, file_id: str) -> Optional[RemoteItem]:
        """
        Fetch metadata for a single file.

        Args:
            file_id: File ID

        Returns:
            RemoteItem, or None if the file does not exist or is not visible

        Raises:
            GoogleDriveError: If the lookup fails for another reason
        """
        request = self.service.files().get(
            fileId=file_id,
            fields=FILE_FIELDS,
            supportsAllDrives=True,
        )
        try:
            resource = self._execute_with_retry(request)
        except HttpError as error:
            if error.resp.status == 404:
                logger.info(f"File {file_id} not found")
                return None
            logger.error(f"Failed to get file {file_id}: {error}")
            raise GoogleDriveError(f"Failed to get file {file_id}: {error}")

        return RemoteItem.from_api(resource)
