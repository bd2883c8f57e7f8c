# taskflow/services/sheets_client.py
"""
Read-only client for the Google Sheets v4 values API using an API key.
The spreadsheet must be shared with "anyone with the link".
"""

import logging
from typing import List, Optional
from urllib.parse import quote

import requests

from taskflow.config import settings
from taskflow.services.errors import SheetsUnavailable

logger = logging.getLogger(__name__)

SHEETS_API_URL = "https://sheets.googleapis.com/v4/spreadsheets"


class SheetsClient:
    """Fetches raw cell values from one spreadsheet"""

    def __init__(
        self,
        spreadsheet_id: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.spreadsheet_id = spreadsheet_id if spreadsheet_id is not None else settings.GOOGLE_SHEETS_SPREADSHEET_ID
        self.api_key = api_key if api_key is not None else settings.GOOGLE_API_KEY
        self.timeout = timeout or settings.SHEETS_TIMEOUT
        self.session = session or requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self.spreadsheet_id and self.api_key)

    def get_values(self, range_: str) -> List[List[str]]:
        """Return the rows of an A1 range; trailing empty cells are omitted by the API"""
        if not self.configured:
            raise SheetsUnavailable("Google Sheets is not configured")

        url = f"{SHEETS_API_URL}/{self.spreadsheet_id}/values/{quote(range_, safe='')}"
        try:
            response = self.session.get(url, params={"key": self.api_key}, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Error reading sheet range {range_}: {e}")
            raise SheetsUnavailable(f"Unable to read {range_}: {e}") from e

        return payload.get("values") or []
