"""
Google Drive gateway used by the relay.

The Google API client is synchronous, so every call is executed in a
worker thread with `asyncio.to_thread`. httplib2 is not thread safe, so
each request is built with its own authorized Http object.
"""
import asyncio
import io
import logging
from typing import Any, Dict, Optional, Protocol

import google_auth_httplib2
import httplib2
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.http import HttpRequest, MediaIoBaseUpload

from drive_relay.config.settings import Settings
from drive_relay.drive.query import build_folder_query
from drive_relay.schemas import FOLDER_MIME_TYPE, FilePayload, UploadResult

logger = logging.getLogger(__name__)

TOKEN_URI = "https://oauth2.googleapis.com/token"
FILE_FIELDS = "id, name, webViewLink, webContentLink"


class DriveGateway(Protocol):
    """Operations the relay needs from Drive."""

    async def find_folder(self, parent_id: str, name: str) -> Optional[str]:
        ...

    async def create_folder(self, parent_id: str, name: str) -> str:
        ...

    async def create_file(self, parent_id: str, payload: FilePayload) -> UploadResult:
        ...

    async def verify_credentials(self) -> bool:
        ...


def build_credentials(settings: Settings) -> Credentials:
    """OAuth user credentials that mint access tokens from the stored refresh token."""
    return Credentials(
        token=None,
        refresh_token=settings.google_refresh_token,
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret,
        token_uri=TOKEN_URI,
    )


def build_drive_service(credentials: Credentials):
    """Drive v3 resource whose requests each carry a fresh authorized Http."""

    def build_request(http, *args, **kwargs):
        new_http = google_auth_httplib2.AuthorizedHttp(credentials, http=httplib2.Http())
        return HttpRequest(new_http, *args, **kwargs)

    authorized_http = google_auth_httplib2.AuthorizedHttp(credentials, http=httplib2.Http())
    return build(
        "drive",
        "v3",
        requestBuilder=build_request,
        http=authorized_http,
        cache_discovery=False,
    )


class GoogleDriveClient:
    """DriveGateway backed by google-api-python-client."""

    def __init__(self, service, credentials: Optional[Credentials] = None):
        self._service = service
        self._credentials = credentials

    @classmethod
    def from_settings(cls, settings: Settings) -> "GoogleDriveClient":
        credentials = build_credentials(settings)
        return cls(build_drive_service(credentials), credentials)

    async def find_folder(self, parent_id: str, name: str) -> Optional[str]:
        return await asyncio.to_thread(self._find_folder, parent_id, name)

    async def create_folder(self, parent_id: str, name: str) -> str:
        return await asyncio.to_thread(self._create_folder, parent_id, name)

    async def create_file(self, parent_id: str, payload: FilePayload) -> UploadResult:
        return await asyncio.to_thread(self._create_file, parent_id, payload)

    async def verify_credentials(self) -> bool:
        """Refresh the access token once; log the outcome instead of raising."""
        if self._credentials is None:
            logger.warning("[AUTH] no credentials attached, skipping refresh check")
            return False
        try:
            await asyncio.to_thread(self._credentials.refresh, Request())
        except GoogleAuthError as e:
            logger.error("[AUTH] refresh failed: %s", e)
            return False
        logger.info("[AUTH] access token ok: %s", bool(self._credentials.token))
        return bool(self._credentials.token)

    def _find_folder(self, parent_id: str, name: str) -> Optional[str]:
        response = self._service.files().list(
            q=build_folder_query(parent_id, name),
            fields="files(id, name)",
            spaces="drive",
            supportsAllDrives=True,
            includeItemsFromAllDrives=True,
        ).execute()
        files = response.get("files") or []
        if files:
            return files[0]["id"]
        return None

    def _create_folder(self, parent_id: str, name: str) -> str:
        body = {
            "name": name,
            "mimeType": FOLDER_MIME_TYPE,
            "parents": [parent_id],
        }
        created = self._service.files().create(
            body=body,
            fields="id, name",
            supportsAllDrives=True,
        ).execute()
        logger.info("Created folder '%s' (%s) under %s", name, created["id"], parent_id)
        return created["id"]

    def _create_file(self, parent_id: str, payload: FilePayload) -> UploadResult:
        media = MediaIoBaseUpload(
            io.BytesIO(payload.data),
            mimetype=payload.mime_type,
            resumable=False,
        )
        created: Dict[str, Any] = self._service.files().create(
            body={"name": payload.name, "parents": [parent_id]},
            media_body=media,
            fields=FILE_FIELDS,
            # harmless for My Drive; needed when the parent is a Shared Drive
            supportsAllDrives=True,
        ).execute()
        logger.debug("Uploaded %s (%d bytes) as %s", payload.name, payload.size_bytes, created.get("id"))
        return UploadResult(
            id=created["id"],
            name=created.get("name", payload.name),
            webViewLink=created.get("webViewLink"),
            webContentLink=created.get("webContentLink"),
        )
