"""
Google API authentication module
"""

import json
from pathlib import Path
from typing import Optional

from google.oauth2 import service_account
from googleapiclient.discovery import build


SCOPES = [
    'https://www.googleapis.com/auth/drive.readonly',
    'https://www.googleapis.com/auth/documents.readonly',
]


class GoogleAuthenticator:
    """Handle service account authentication for the Drive and Docs APIs"""

    def __init__(self, credentials_file='credentials.json', credentials_json: Optional[str] = None):
        """
        Initialize authenticator

        Args:
            credentials_file: Path to service account JSON file
            credentials_json: Inline service account JSON (takes precedence)
        """
        self.credentials_file = Path(credentials_file)
        self.credentials_json = credentials_json
        self._credentials = None

    def load_credentials(self):
        """
        Build service account credentials

        Returns:
            google.oauth2.service_account.Credentials

        Raises:
            FileNotFoundError: If neither inline JSON nor the file is available
            ValueError: If credentials are invalid
        """
        if self.credentials_json:
            try:
                info = json.loads(self.credentials_json)
                return service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
            except Exception as e:
                raise ValueError(f"Invalid GOOGLE_API_CREDENTIALS: {e}")

        if not self.credentials_file.exists():
            raise FileNotFoundError(
                f"Credentials file not found: {self.credentials_file}\n\n"
                "Setup instructions:\n"
                "1. Go to https://console.cloud.google.com\n"
                "2. Create a project and enable the Google Drive and Google Docs APIs\n"
                "3. Create a service account and download its JSON key\n"
                "4. Set GOOGLE_API_CREDENTIALS to the key's contents, or\n"
                "   GOOGLE_CREDENTIALS_FILE to its path\n"
                "5. Share the Google Drive folder with the service account email"
            )

        try:
            return service_account.Credentials.from_service_account_file(
                str(self.credentials_file),
                scopes=SCOPES
            )
        except Exception as e:
            raise ValueError(f"Invalid credentials file: {e}")

    @property
    def credentials(self):
        """Get or load credentials"""
        if self._credentials is None:
            self._credentials = self.load_credentials()
        return self._credentials

    def drive_service(self):
        """Google Drive v3 service object"""
        return build('drive', 'v3', credentials=self.credentials, cache_discovery=False)

    def docs_service(self):
        """Google Docs v1 service object"""
        return build('docs', 'v1', credentials=self.credentials, cache_discovery=False)
