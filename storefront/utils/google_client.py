# storefront/utils/google_client.py
import json
import logging
import time
import uuid
from typing import Dict, List, Optional, Tuple
from urllib.parse import quote

import httpx
from jose import jwt

logger = logging.getLogger(__name__)

DRIVE_SCOPE = "https://www.googleapis.com/auth/drive.file"
SHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets"

DRIVE_API_URL = "https://www.googleapis.com/drive/v3"
DRIVE_UPLOAD_URL = "https://www.googleapis.com/upload/drive/v3"
SHEETS_API_URL = "https://sheets.googleapis.com/v4"

TOKEN_REFRESH_MARGIN = 60


class GoogleServiceAccount:
    """Exchanges a signed service-account assertion for an OAuth access token."""

    def __init__(self, client_email: str, private_key: str, token_uri: str,
                 timeout: float = 15.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.client_email = client_email
        self.private_key = private_key
        self.token_uri = token_uri
        self.timeout = timeout
        self.transport = transport
        # scope string -> (access token, epoch seconds after which it is refreshed)
        self._tokens: Dict[str, Tuple[str, float]] = {}

    def _assertion(self, scopes: List[str]) -> str:
        now = int(time.time())
        claims = {
            "iss": self.client_email,
            "scope": " ".join(scopes),
            "aud": self.token_uri,
            "iat": now,
            "exp": now + 3600,
        }
        return jwt.encode(claims, self.private_key, algorithm="RS256")

    async def get_access_token(self, scopes: List[str]) -> str:
        key = " ".join(scopes)
        cached = self._tokens.get(key)
        if cached and cached[1] > time.time():
            return cached[0]

        payload = {
            "grant_type": "urn:ietf:params:oauth:grant-type:jwt-bearer",
            "assertion": self._assertion(scopes),
        }
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.post(self.token_uri, data=payload)
                response.raise_for_status()
                data = response.json()
            except (httpx.RequestError, httpx.HTTPStatusError) as e:
                logger.error("Google token exchange failed: %s", e)
                raise

        token = data["access_token"]
        # Refreshed a minute before Google expires it
        expires_in = int(data.get("expires_in", 3600))
        self._tokens[key] = (token, time.time() + max(expires_in - TOKEN_REFRESH_MARGIN, 0))
        return token


class _GoogleApiClient:
    scope = ""

    def __init__(self, account, timeout: float = 15.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        # Anything with an async get_access_token(scopes) works as the account
        self.account = account
        self.timeout = timeout
        self.transport = transport

    async def _client(self) -> httpx.AsyncClient:
        token = await self.account.get_access_token([self.scope])
        return httpx.AsyncClient(
            timeout=self.timeout,
            transport=self.transport,
            headers={"Authorization": f"Bearer {token}"},
        )


class DriveClient(_GoogleApiClient):
    scope = DRIVE_SCOPE

    def __init__(self, account, folder_id: str, **kwargs):
        super().__init__(account, **kwargs)
        self.folder_id = folder_id

    def _multipart_body(self, name: str, content_type: str, content: bytes) -> Tuple[bytes, str]:
        # multipart/related: JSON metadata first, then the file itself
        boundary = uuid.uuid4().hex
        metadata = json.dumps({"name": name, "parents": [self.folder_id]})
        body = b"".join([
            f"--{boundary}\r\nContent-Type: application/json; charset=UTF-8\r\n\r\n".encode(),
            metadata.encode(),
            f"\r\n--{boundary}\r\nContent-Type: {content_type}\r\n\r\n".encode(),
            content,
            f"\r\n--{boundary}--\r\n".encode(),
        ])
        return body, f"multipart/related; boundary={boundary}"

    async def upload_public(self, name: str, content_type: str, content: bytes) -> str:
        """Upload a file into the folder, share it read-only with anyone, return its view URL."""
        body, body_type = self._multipart_body(name, content_type, content)
        async with await self._client() as client:
            # Name and folder are set in the same request that creates the file
            response = await client.post(
                f"{DRIVE_UPLOAD_URL}/files",
                params={"uploadType": "multipart", "fields": "id"},
                content=body,
                headers={"Content-Type": body_type},
            )
            response.raise_for_status()
            file_id = response.json()["id"]

            response = await client.post(
                f"{DRIVE_API_URL}/files/{file_id}/permissions",
                json={"role": "reader", "type": "anyone"},
            )
            response.raise_for_status()

        return f"https://drive.google.com/file/d/{file_id}/view"


class SheetsClient(_GoogleApiClient):
    scope = SHEETS_SCOPE

    def __init__(self, account, spreadsheet_id: str, **kwargs):
        super().__init__(account, **kwargs)
        self.spreadsheet_id = spreadsheet_id

    @property
    def base_url(self) -> str:
        return f"{SHEETS_API_URL}/spreadsheets/{self.spreadsheet_id}"

    async def append_row(self, range_: str, values: list) -> dict:
        async with await self._client() as client:
            response = await client.post(
                f"{self.base_url}/values/{quote(range_, safe='!:')}:append",
                params={"valueInputOption": "RAW", "insertDataOption": "INSERT_ROWS"},
                json={"values": [values]},
            )
            response.raise_for_status()
            return response.json()

    async def sheet_titles(self) -> List[str]:
        async with await self._client() as client:
            response = await client.get(self.base_url, params={"fields": "sheets.properties.title"})
            response.raise_for_status()
            sheets = response.json().get("sheets", [])
        return [s["properties"]["title"] for s in sheets]

    async def add_sheet(self, title: str) -> None:
        async with await self._client() as client:
            response = await client.post(
                f"{self.base_url}:batchUpdate",
                json={"requests": [{"addSheet": {"properties": {"title": title}}}]},
            )
            response.raise_for_status()
