"""Task tree storage in the Google Drive ``appDataFolder``."""
from __future__ import annotations

import io
import json
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseDownload, MediaIoBaseUpload

from core.settings import GOOGLE
from services.errors import InconsistentState, RemoteUnavailable
from services.kv_tasks import Node, decode_tree, encode_tree
from services.logs import ensure_logger


_RETRYABLE_STATUS = {429, 500, 502, 503, 504}
_MAX_RETRIES = 5
_INITIAL_BACKOFF = 1.0
_MAX_BACKOFF = 32.0


class AppDataBlobStore:
    """Blob store keeping the whole task tree in one appData JSON file."""

    def __init__(self, auth: Any, filename: str = GOOGLE.tasks_filename):
        self.auth = auth
        self.filename = filename
        self.service = None
        self._file_id: Optional[str] = None
        self.logger = ensure_logger("planner.appdata")

    # ----- blob store contract -----
    def get_tasks(self) -> Optional[List[Node]]:
        try:
            file_id = self._resolve_file_id(create=False)
            if file_id is None:
                return None
            payload = self._download_json(file_id)
        except HttpError as exc:
            raise self._unavailable("read", exc) from exc
        return decode_tree(payload)

    def save_tasks(self, tree: List[Node]) -> None:
        payload = encode_tree(tree)
        try:
            file_id = self._resolve_file_id(create=True, payload=payload)
            self._upload_json(file_id, payload)
        except HttpError as exc:
            raise self._unavailable("save", exc) from exc

    # ----- internal helpers -----
    def _unavailable(self, action: str, exc: HttpError) -> RemoteUnavailable:
        status = getattr(getattr(exc, "resp", None), "status", None)
        self.logger.error("appData %s failed (status %s): %s", action, status, exc)
        return RemoteUnavailable(f"Could not {action} tasks in Google Drive.", cause=exc)

    def _maybe_build_service(self) -> None:
        if self.service is not None:
            return
        creds = self._find_creds(GOOGLE.scopes)
        if creds and getattr(creds, "valid", False):
            self.service = build("drive", "v3", credentials=creds, cache_discovery=False)
        else:
            raise RemoteUnavailable("Google credentials are unavailable.")

    def _find_creds(self, scopes: tuple[str, ...]):
        if hasattr(self.auth, "get_credentials"):
            creds = self.auth.get_credentials()
            if creds and getattr(creds, "valid", False):
                return creds
        if hasattr(self.auth, "token_path"):
            token_path = getattr(self.auth, "token_path")
            if token_path and Path(token_path).exists():
                try:
                    return Credentials.from_authorized_user_file(str(token_path), list(scopes))
                except ValueError:
                    self.logger.warning("Stored Google token at %s is unreadable", token_path)
                    return None
        return None

    def _resolve_file_id(self, *, create: bool, payload: Optional[Dict[str, Any]] = None) -> Optional[str]:
        if self._file_id:
            return self._file_id
        self._maybe_build_service()
        response = self._call_with_backoff(
            self.service.files().list,
            spaces="appDataFolder",
            q=f"name = '{self.filename}'",
            fields="files(id, name)",
        )
        for item in response.get("files", []):
            if item.get("name") == self.filename and item.get("id"):
                self._file_id = item["id"]
                return self._file_id
        if not create:
            return None
        self._file_id = self._create_file(payload or encode_tree([]))
        return self._file_id

    def _create_file(self, payload: Dict[str, Any]) -> str:
        body = {"name": self.filename, "parents": ["appDataFolder"]}
        media = MediaIoBaseUpload(
            io.BytesIO(self._encode_json(payload)),
            mimetype="application/json",
            resumable=False,
        )
        response = self._call_with_backoff(
            self.service.files().create,
            body=body,
            media_body=media,
            fields="id",
        )
        self.logger.info("Created appData file %s", self.filename)
        return response.get("id")

    def _download_json(self, file_id: str) -> Any:
        request = self.service.files().get_media(fileId=file_id)
        buffer = io.BytesIO()
        downloader = MediaIoBaseDownload(buffer, request)
        done = False
        while not done:
            _, done = downloader.next_chunk()
        raw = buffer.getvalue()
        if not raw:
            return None
        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise InconsistentState("The stored task tree is malformed.", cause=exc) from exc

    def _upload_json(self, file_id: str, payload: Dict[str, Any]) -> None:
        media = MediaIoBaseUpload(
            io.BytesIO(self._encode_json(payload)),
            mimetype="application/json",
            resumable=False,
        )
        self._call_with_backoff(self.service.files().update, fileId=file_id, media_body=media)

    def _call_with_backoff(self, method, **kwargs) -> Dict[str, Any]:
        delay = _INITIAL_BACKOFF
        for attempt in range(_MAX_RETRIES):
            try:
                return method(**kwargs).execute()
            except HttpError as exc:
                status = getattr(getattr(exc, "resp", None), "status", None)
                if status not in _RETRYABLE_STATUS or attempt == _MAX_RETRIES - 1:
                    raise
                self.logger.warning("appData call returned %s, retrying in %.0fs", status, delay)
            time.sleep(delay)
            delay = min(delay * 2, _MAX_BACKOFF)
        return {}

    @staticmethod
    def _encode_json(payload: Dict[str, Any]) -> bytes:
        text = json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True)
        return text.encode("utf-8")


__all__ = ["AppDataBlobStore"]
