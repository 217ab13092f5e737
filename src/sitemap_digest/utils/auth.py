"""Google Sheets client for the sheet-backed store and feed list."""

from pathlib import Path
from typing import List, Optional

import gspread
from oauth2client.service_account import ServiceAccountCredentials

from ..exceptions import ConfigurationError

SHEETS_SCOPES = [
    "https://spreadsheets.google.com/feeds",
    "https://www.googleapis.com/auth/drive",
]


def get_google_sheets_client(creds_file: str, scopes: Optional[List[str]] = None) -> gspread.Client:
    """Authorize a gspread client with a service account key file.

    Raises:
        ConfigurationError: If the key file does not exist
    """
    if not Path(creds_file).exists():
        raise ConfigurationError([f"Google credentials file not found: {creds_file}"])

    creds = ServiceAccountCredentials.from_json_keyfile_name(creds_file, scopes or SHEETS_SCOPES)
    return gspread.authorize(creds)
