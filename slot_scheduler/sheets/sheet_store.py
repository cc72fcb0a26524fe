"""
Google Sheets backed schedule store
"""
import logging
from typing import Any, List, Tuple

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from slot_scheduler.scheduler.errors import ScheduleStoreError, WriteError
from slot_scheduler.sheets.cells import a1_range, column_letter

logger = logging.getLogger(__name__)


class GoogleSheetStore:
    """
    Reads and writes the schedule sheet through the Sheets API v4.

    Reads return every row including the header, padded to the schedule
    width. Writes are range-addressed and always sent as one batchUpdate.
    """

    def __init__(self, config, service=None):
        self.config = config
        self.spreadsheet_id = config.SPREADSHEET_ID
        self.sheet_name = config.SCHEDULE_SHEET_NAME
        self.width = config.SCHEDULE_LAST_COLUMN
        self._service = service

    def _get_credentials(self) -> Credentials:
        """Get OAuth credentials for the Sheets API"""
        try:
            token_path = self.config.get_token_path()
            return Credentials.from_authorized_user_file(token_path, self.config.GOOGLE_SCOPES)
        except FileNotFoundError as e:
            logger.error(f"❌ Sheets token not available: {e}")
            raise ScheduleStoreError(f"Cannot authorize Sheets access: {e}") from e

    def _sheets(self):
        if self._service is None:
            self._service = build("sheets", "v4", credentials=self._get_credentials(), cache_discovery=False)
        return self._service.spreadsheets()

    def _pad(self, row: List[Any]) -> List[Any]:
        return list(row) + [""] * (self.width - len(row))

    def read_rows(self) -> List[List[Any]]:
        """Read the whole schedule in one call"""
        sheet_range = f"'{self.sheet_name}'!A1:{column_letter(self.width)}"
        try:
            result = self._sheets().values().get(
                spreadsheetId=self.spreadsheet_id,
                range=sheet_range,
                valueRenderOption="UNFORMATTED_VALUE",
                dateTimeRenderOption="SERIAL_NUMBER",
            ).execute()
        except HttpError as e:
            logger.error(f"HTTP error reading {sheet_range}: {e}")
            raise ScheduleStoreError(f"Cannot read schedule sheet: {e}") from e

        rows = [self._pad(row) for row in result.get("values", [])]
        logger.info(f"📅 Read {len(rows)} rows from '{self.sheet_name}'")
        return rows

    def write_ranges(self, updates: List[Tuple[int, int, List[List[Any]]]]):
        """Write (row, column, values) blocks in a single batchUpdate"""
        data = [
            {
                "range": a1_range(self.sheet_name, row, column, len(values), len(values[0])),
                "values": values,
            }
            for row, column, values in updates
            if values
        ]
        if not data:
            return
        try:
            self._sheets().values().batchUpdate(
                spreadsheetId=self.spreadsheet_id,
                body={"valueInputOption": "USER_ENTERED", "data": data},
            ).execute()
        except HttpError as e:
            logger.error(f"HTTP error writing {len(data)} ranges: {e}")
            raise WriteError(f"Batched write failed: {e}") from e
        logger.info(f"✅ Wrote {len(data)} ranges to '{self.sheet_name}'")

    def append_rows(self, values: List[List[Any]]):
        """Append rows after the last non-empty row"""
        if not values:
            return
        try:
            self._sheets().values().append(
                spreadsheetId=self.spreadsheet_id,
                range=f"'{self.sheet_name}'!A1",
                valueInputOption="USER_ENTERED",
                insertDataOption="INSERT_ROWS",
                body={"values": values},
            ).execute()
        except HttpError as e:
            logger.error(f"HTTP error appending {len(values)} rows: {e}")
            raise WriteError(f"Append failed: {e}") from e
        logger.info(f"✅ Appended {len(values)} rows to '{self.sheet_name}'")
