"""Transport for the spreadsheet backing service."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from ...core.error_handler import SheetsServiceError
from ..config import Settings
from ..models.sheets import AppendValuesResponse, Spreadsheet, ValueRange

logger = logging.getLogger(__name__)


class SheetsService(ABC):
    """Operations the store needs from the backing spreadsheet service.

    All operations address one spreadsheet, fixed at construction.
    """

    @abstractmethod
    async def get_spreadsheet(self) -> Spreadsheet:
        """Get the spreadsheet metadata with the properties of every sheet."""

    @abstractmethod
    async def batch_update(self, requests: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Apply structural requests (addSheet, updateCells, ...) in one call."""

    @abstractmethod
    async def get_values(self, range: str) -> ValueRange:
        """Read the raw values of a range."""

    @abstractmethod
    async def update_values(
        self,
        range: str,
        values: List[List[Any]],
        value_input_option: str = "USER_ENTERED"
    ) -> Dict[str, Any]:
        """Write the values of a range."""

    @abstractmethod
    async def append_values(
        self,
        range: str,
        values: List[List[Any]],
        value_input_option: str = "RAW"
    ) -> AppendValuesResponse:
        """Append rows after the table found in range."""

    @abstractmethod
    async def batch_update_values(
        self,
        data: List[ValueRange],
        value_input_option: str = "USER_ENTERED"
    ) -> Dict[str, Any]:
        """Write several ranges in a single atomic call."""

    async def close(self) -> None:
        """Release transport resources."""


class HttpSheetsService(SheetsService):
    """Service for the Google Sheets v4 REST API."""

    def __init__(
        self,
        spreadsheet_id: str,
        api_url: str = "https://sheets.googleapis.com/v4",
        access_token: Optional[str] = None,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None
    ):
        """Initialize the service.

        Args:
            spreadsheet_id: Spreadsheet all requests address
            api_url: Base URL of the Sheets API
            access_token: Optional bearer token sent with every request
            timeout: Request timeout in seconds
            client: Optional client, closed by the caller rather than close()
        """
        self.spreadsheet_id = spreadsheet_id
        self.base_url = f"{api_url.rstrip('/')}/spreadsheets/{spreadsheet_id}"
        self.headers = self._build_headers(access_token)
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> "HttpSheetsService":
        return cls(
            spreadsheet_id=settings.spreadsheet_id,
            api_url=settings.api_url,
            access_token=settings.access_token,
            timeout=settings.timeout
        )

    @staticmethod
    def _build_headers(access_token: Optional[str]) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    def _values_url(self, range: str, suffix: str = "") -> str:
        return f"{self.base_url}/values/{quote(range, safe='')}{suffix}"

    async def _request(self, method: str, url: str, **kwargs: Any) -> Dict[str, Any]:
        logger.debug(f"{method} {url}")
        response = await self.client.request(method, url, headers=self.headers, **kwargs)
        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = {"raw": response.text}
            error = body.get("error", body) if isinstance(body, dict) else {"raw": body}
            message = error.get("message", response.reason_phrase) if isinstance(error, dict) else str(error)
            logger.error(f"Sheets API error {response.status_code} on {method} {url}: {message}")
            raise SheetsServiceError(
                f"Sheets API request failed ({response.status_code}): {message}",
                status_code=response.status_code,
                details=error if isinstance(error, dict) else {"error": error}
            )
        if not response.content:
            return {}
        return response.json()

    async def get_spreadsheet(self) -> Spreadsheet:
        data = await self._request(
            "GET", self.base_url, params={"fields": "spreadsheetId,sheets.properties"}
        )
        return Spreadsheet.model_validate(data)

    async def batch_update(self, requests: List[Dict[str, Any]]) -> Dict[str, Any]:
        return await self._request(
            "POST", f"{self.base_url}:batchUpdate", json={"requests": requests}
        )

    async def get_values(self, range: str) -> ValueRange:
        data = await self._request("GET", self._values_url(range))
        return ValueRange.model_validate(data)

    async def update_values(
        self,
        range: str,
        values: List[List[Any]],
        value_input_option: str = "USER_ENTERED"
    ) -> Dict[str, Any]:
        return await self._request(
            "PUT",
            self._values_url(range),
            params={"valueInputOption": value_input_option},
            json={"range": range, "values": values}
        )

    async def append_values(
        self,
        range: str,
        values: List[List[Any]],
        value_input_option: str = "RAW"
    ) -> AppendValuesResponse:
        data = await self._request(
            "POST",
            self._values_url(range, ":append"),
            params={"valueInputOption": value_input_option},
            json={"values": values}
        )
        return AppendValuesResponse.model_validate(data)

    async def batch_update_values(
        self,
        data: List[ValueRange],
        value_input_option: str = "USER_ENTERED"
    ) -> Dict[str, Any]:
        return await self._request(
            "POST",
            f"{self.base_url}/values:batchUpdate",
            json={
                "data": [d.model_dump(exclude_none=True) for d in data],
                "valueInputOption": value_input_option,
                "includeValuesInResponse": False
            }
        )

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()
