# planner/services/google_auth.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from core.settings import GOOGLE
from services.errors import RemoteUnavailable
from services.logs import ensure_logger


class GoogleAuth:
    """OAuth credentials for the Drive appData scope, cached in ``token.json``."""

    def __init__(
        self,
        secrets_path: str | Path = GOOGLE.client_secret_path,
        token_path: str | Path = GOOGLE.token_path,
        scopes: tuple[str, ...] = GOOGLE.scopes,
    ):
        self.secrets_path = Path(secrets_path)
        self.token_path = Path(token_path)
        self.scopes = list(scopes)
        self.creds: Optional[Credentials] = None
        self.logger = ensure_logger("planner.auth")

    def get_credentials(self) -> Optional[Credentials]:
        return self.creds

    def ensure_credentials(self) -> bool:
        if self._usable(self.creds):
            return True

        creds = self._load_cached()
        if creds is not None and creds.expired and creds.refresh_token:
            creds = self._refresh(creds)
        if not self._usable(creds):
            creds = self._run_consent()

        self.creds = creds
        self._save(creds)
        self.logger.info("Google credentials ready (%s)", ", ".join(sorted(creds.scopes or [])))
        return True

    def reset_credentials(self) -> None:
        self.creds = None
        if self.token_path.exists():
            try:
                self.token_path.unlink()
            except OSError as exc:
                self.logger.warning("Could not remove cached token %s: %s", self.token_path, exc)
            else:
                self.logger.info("Removed cached Google token")

    # ----- steps -----
    def _usable(self, creds: Optional[Credentials]) -> bool:
        if creds is None or not creds.valid:
            return False
        granted = set(creds.scopes or [])
        return all(scope in granted for scope in self.scopes)

    def _load_cached(self) -> Optional[Credentials]:
        if not self.token_path.exists():
            return None
        try:
            creds = Credentials.from_authorized_user_file(str(self.token_path), self.scopes)
        except (ValueError, json.JSONDecodeError) as exc:
            self.logger.warning("Cached token is unreadable (%s); asking for consent again", exc)
            self.reset_credentials()
            return None
        if creds.scopes and not set(self.scopes) <= set(creds.scopes):
            self.logger.info("Cached token lacks the appData scope; asking for consent again")
            self.reset_credentials()
            return None
        return creds

    def _refresh(self, creds: Credentials) -> Optional[Credentials]:
        try:
            creds.refresh(Request())
        except RefreshError as exc:
            self.logger.warning("Token refresh failed: %s", exc)
            self.reset_credentials()
            return None
        return creds

    def _run_consent(self) -> Credentials:
        if not self.secrets_path.exists():
            raise RemoteUnavailable(
                f"Google client secret not found at {self.secrets_path}. "
                "Download a Desktop OAuth client JSON from Google Cloud."
            )
        flow = InstalledAppFlow.from_client_secrets_file(str(self.secrets_path), self.scopes)
        self.logger.info("Running OAuth consent flow (local server)")
        creds = flow.run_local_server(port=0, access_type="offline", prompt="consent")
        if creds is None:
            raise RemoteUnavailable("Could not obtain Google credentials.")
        return creds

    def _save(self, creds: Credentials) -> None:
        self.token_path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.token_path.with_suffix(".tmp")
        tmp.write_text(creds.to_json(), encoding="utf-8")
        tmp.replace(self.token_path)


__all__ = ["GoogleAuth"]
