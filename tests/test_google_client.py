import asyncio
import json

import httpx
import pytest

from storefront.utils.google_client import DRIVE_SCOPE, SHEETS_SCOPE, DriveClient, GoogleServiceAccount, SheetsClient


class StubAccount:
    def __init__(self):
        self.scopes = []

    async def get_access_token(self, scopes):
        self.scopes.append(scopes)
        return "test-token"


class Recorder:
    """MockTransport handler that answers from a list of canned responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses.pop(0)


def test_append_row():
    recorder = Recorder(httpx.Response(200, json={"updates": {"updatedRows": 1}}))
    account = StubAccount()
    sheets = SheetsClient(account, "sheet-123", transport=httpx.MockTransport(recorder))

    result = asyncio.run(sheets.append_row("Orders!A:N", [1, "Asha"]))

    assert result == {"updates": {"updatedRows": 1}}
    assert account.scopes == [[SHEETS_SCOPE]]
    (request,) = recorder.requests
    assert request.method == "POST"
    assert request.url.path == "/v4/spreadsheets/sheet-123/values/Orders!A:N:append"
    assert request.url.params["valueInputOption"] == "RAW"
    assert request.url.params["insertDataOption"] == "INSERT_ROWS"
    assert request.headers["Authorization"] == "Bearer test-token"
    assert json.loads(request.content) == {"values": [[1, "Asha"]]}


def test_append_row_raises_on_api_error():
    recorder = Recorder(httpx.Response(400, json={"error": {"message": "Unable to parse range"}}))
    sheets = SheetsClient(StubAccount(), "sheet-123", transport=httpx.MockTransport(recorder))

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(sheets.append_row("Sheet1!A:N", []))


def test_sheet_titles():
    recorder = Recorder(httpx.Response(200, json={"sheets": [
        {"properties": {"title": "Sheet1"}},
        {"properties": {"title": "Orders"}},
    ]}))
    sheets = SheetsClient(StubAccount(), "sheet-123", transport=httpx.MockTransport(recorder))

    assert asyncio.run(sheets.sheet_titles()) == ["Sheet1", "Orders"]
    (request,) = recorder.requests
    assert request.method == "GET"
    assert request.url.path == "/v4/spreadsheets/sheet-123"
    assert request.url.params["fields"] == "sheets.properties.title"


def test_add_sheet():
    recorder = Recorder(httpx.Response(200, json={"replies": [{}]}))
    sheets = SheetsClient(StubAccount(), "sheet-123", transport=httpx.MockTransport(recorder))

    asyncio.run(sheets.add_sheet("Orders"))

    (request,) = recorder.requests
    assert request.url.path == "/v4/spreadsheets/sheet-123:batchUpdate"
    assert json.loads(request.content) == {"requests": [{"addSheet": {"properties": {"title": "Orders"}}}]}


def test_drive_upload_public_sets_folder_on_create():
    recorder = Recorder(
        httpx.Response(200, json={"id": "file-9"}),
        httpx.Response(200, json={"id": "perm-1"}),
    )
    account = StubAccount()
    drive = DriveClient(account, "folder-1", transport=httpx.MockTransport(recorder))

    url = asyncio.run(drive.upload_public("payment.png", "image/png", b"\x89PNG"))

    assert url == "https://drive.google.com/file/d/file-9/view"
    assert account.scopes == [[DRIVE_SCOPE]]

    # No follow-up PATCH: Drive files have a single parent, set at creation
    upload, share = recorder.requests
    assert (upload.method, upload.url.path) == ("POST", "/upload/drive/v3/files")
    assert upload.url.params["uploadType"] == "multipart"

    body_type = upload.headers["Content-Type"]
    assert body_type.startswith("multipart/related; boundary=")
    boundary = body_type.split("boundary=", 1)[1]
    _, metadata_part, file_part, closing = upload.content.split(f"--{boundary}".encode())

    metadata_headers, metadata = metadata_part.split(b"\r\n\r\n", 1)
    assert b"application/json" in metadata_headers
    assert json.loads(metadata) == {"name": "payment.png", "parents": ["folder-1"]}

    file_headers, file_body = file_part.split(b"\r\n\r\n", 1)
    assert b"Content-Type: image/png" in file_headers
    assert file_body == b"\x89PNG\r\n"
    assert closing == b"--\r\n"

    assert (share.method, share.url.path) == ("POST", "/drive/v3/files/file-9/permissions")
    assert json.loads(share.content) == {"role": "reader", "type": "anyone"}
    assert all(r.headers["Authorization"] == "Bearer test-token" for r in recorder.requests)


def test_service_account_reuses_token_until_expiry(monkeypatch):
    recorder = Recorder(
        httpx.Response(200, json={"access_token": "first", "expires_in": 3600}),
        httpx.Response(200, json={"access_token": "second", "expires_in": 3600}),
    )
    account = GoogleServiceAccount(
        "svc@project.iam.gserviceaccount.com", "unused-key", "https://oauth2.googleapis.com/token",
        transport=httpx.MockTransport(recorder),
    )
    monkeypatch.setattr(account, "_assertion", lambda scopes: "signed")

    async def fetch_three():
        return [await account.get_access_token([SHEETS_SCOPE]) for _ in range(3)]

    assert asyncio.run(fetch_three()) == ["first", "first", "first"]
    assert len(recorder.requests) == 1

    # Another scope is a separate token
    assert asyncio.run(account.get_access_token([DRIVE_SCOPE])) == "second"
    assert len(recorder.requests) == 2


def test_service_account_refreshes_expired_token(monkeypatch):
    recorder = Recorder(
        httpx.Response(200, json={"access_token": "short", "expires_in": 30}),
        httpx.Response(200, json={"access_token": "fresh", "expires_in": 3600}),
    )
    account = GoogleServiceAccount(
        "svc@project.iam.gserviceaccount.com", "unused-key", "https://oauth2.googleapis.com/token",
        transport=httpx.MockTransport(recorder),
    )
    monkeypatch.setattr(account, "_assertion", lambda scopes: "signed")

    # A token inside the refresh margin is never reused
    assert asyncio.run(account.get_access_token([SHEETS_SCOPE])) == "short"
    assert asyncio.run(account.get_access_token([SHEETS_SCOPE])) == "fresh"
    assert len(recorder.requests) == 2


def test_service_account_token_exchange(monkeypatch):
    recorder = Recorder(httpx.Response(200, json={"access_token": "ya29.token", "expires_in": 3600}))
    account = GoogleServiceAccount(
        "svc@project.iam.gserviceaccount.com", "unused-key", "https://oauth2.googleapis.com/token",
        transport=httpx.MockTransport(recorder),
    )
    monkeypatch.setattr(account, "_assertion", lambda scopes: "signed." + ",".join(scopes))

    token = asyncio.run(account.get_access_token([SHEETS_SCOPE]))

    assert token == "ya29.token"
    (request,) = recorder.requests
    assert str(request.url) == "https://oauth2.googleapis.com/token"
    form = dict(httpx.QueryParams(request.content.decode()))
    assert form == {
        "grant_type": "urn:ietf:params:oauth:grant-type:jwt-bearer",
        "assertion": f"signed.{SHEETS_SCOPE}",
    }


def test_service_account_token_failure_propagates(monkeypatch):
    recorder = Recorder(httpx.Response(401, json={"error": "invalid_grant"}))
    account = GoogleServiceAccount(
        "svc@project.iam.gserviceaccount.com", "unused-key", "https://oauth2.googleapis.com/token",
        transport=httpx.MockTransport(recorder),
    )
    monkeypatch.setattr(account, "_assertion", lambda scopes: "signed")

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(account.get_access_token([DRIVE_SCOPE]))
