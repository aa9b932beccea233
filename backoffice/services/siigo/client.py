"""HTTP client for the Siigo accounting REST API (api.siigo.com)."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any

import httpx
from sqlalchemy.orm import Session

from backoffice.config import settings
from backoffice.models.siigo import SiigoCredentials

logger = logging.getLogger(__name__)


class SiigoError(Exception):
    """Base exception for Siigo client errors."""

    def __init__(self, message: str, status_code: int | None = None, response: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class SiigoCredentialsError(SiigoError):
    """No active Siigo credentials are configured."""

    pass


class SiigoAuthError(SiigoError):
    """Login against /auth failed or the token was rejected (401/403)."""

    pass


class SiigoAPIError(SiigoError):
    """Siigo answered an authenticated request with an error status."""

    pass


class SiigoNetworkError(SiigoError):
    """Siigo could not be reached (timeouts, DNS, connection resets)."""

    pass


@dataclass(frozen=True)
class SiigoAuthCredentials:
    email: str
    access_key: str
    platform: str


class SiigoClient:
    """
    HTTP client for the Siigo REST API.

    Features:
    - Credentials loaded from the active ``siigo_credentials`` row
    - Bearer token cached in process memory until ``expires_in`` elapses
    - ``Partner-Id`` header carrying the configured platform
    """

    DEFAULT_TIMEOUT = 30

    def __init__(
        self,
        base_url: str,
        timeout: int = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the Siigo client.

        Args:
            base_url: Base URL for the Siigo API (e.g., "https://api.siigo.com")
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used to fake Siigo in tests
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self._client: httpx.Client | None = None
        self._lock = threading.Lock()
        self._token: str | None = None
        self._token_expires_at: float = 0.0
        self._credentials: SiigoAuthCredentials | None = None

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
                headers={
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
            )
        return self._client

    def close(self):
        """Close the HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    # ------------------------------------------------------------------
    # Credentials and token cache
    # ------------------------------------------------------------------

    def clear_token(self) -> None:
        """Forget the cached token and credentials."""
        with self._lock:
            self._token = None
            self._token_expires_at = 0.0
            self._credentials = None

    def _load_credentials(self, db: Session) -> SiigoAuthCredentials:
        if self._credentials is not None:
            return self._credentials
        row = (
            db.query(SiigoCredentials)
            .filter(SiigoCredentials.is_active.is_(True))
            .order_by(SiigoCredentials.updated_at.desc())
            .first()
        )
        if not row:
            raise SiigoCredentialsError("No active Siigo credentials configured")
        self._credentials = SiigoAuthCredentials(
            email=row.email,
            access_key=row.access_key,
            platform=row.platform.value,
        )
        return self._credentials

    def _fetch_token(self, credentials: SiigoAuthCredentials) -> tuple[str, int]:
        logger.info("siigo_auth_request email=%s platform=%s", credentials.email, credentials.platform)
        try:
            response = self._get_client().post(
                "/auth",
                json={"username": credentials.email, "access_key": credentials.access_key},
            )
        except httpx.RequestError as exc:
            raise SiigoNetworkError(f"Could not reach Siigo: {exc}") from exc

        data = self._parse_body(response)
        if response.status_code >= 400:
            logger.warning("siigo_auth_failed status=%s body=%s", response.status_code, data)
            raise SiigoAuthError(
                f"Authentication failed: {response.status_code}",
                status_code=response.status_code,
                response=data,
            )
        if not isinstance(data, dict) or not data.get("access_token"):
            raise SiigoAuthError("Authentication response did not include an access token", response=data)
        return data["access_token"], int(data.get("expires_in") or 0)

    def authenticate(self, db: Session) -> str:
        """Return a valid bearer token, logging in again only once it expired."""
        with self._lock:
            if self._token and time.monotonic() < self._token_expires_at:
                return self._token
            credentials = self._load_credentials(db)
            token, expires_in = self._fetch_token(credentials)
            self._token = token
            self._token_expires_at = time.monotonic() + expires_in
            return token

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_body(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    @staticmethod
    def _auth_headers(token: str, platform: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}", "Partner-Id": platform}

    def _handle_response(self, response: httpx.Response) -> Any:
        """Handle API response and raise appropriate errors."""
        data = self._parse_body(response)

        if response.status_code in (401, 403):
            raise SiigoAuthError(
                f"Authentication failed: {response.status_code}",
                status_code=response.status_code,
                response=data,
            )

        if response.status_code >= 400:
            if isinstance(data, dict):
                errors = data.get("Errors") or data.get("errors")
                error_msg = data.get("message") or (str(errors) if errors else str(data))
            else:
                error_msg = str(data)
            logger.warning("siigo_api_error status=%s body=%s", response.status_code, data)
            raise SiigoAPIError(
                f"Siigo API error ({response.status_code}): {error_msg}",
                status_code=response.status_code,
                response=data,
            )

        return data

    def _request(
        self,
        db: Session,
        method: str,
        endpoint: str,
        params: dict | None = None,
        json_data: dict | list | None = None,
    ) -> Any:
        """
        Make an authenticated request against ``/v1<endpoint>``.

        Args:
            db: Session used to look up credentials on a cold cache
            method: HTTP method
            endpoint: API path below /v1 (e.g., "/warehouses")
            params: Query parameters
            json_data: JSON body data

        Returns:
            Parsed JSON response
        """
        token = self.authenticate(db)
        credentials = self._load_credentials(db)
        try:
            response = self._get_client().request(
                method=method,
                url=f"/v1{endpoint}",
                params=params,
                json=json_data,
                headers=self._auth_headers(token, credentials.platform),
            )
        except httpx.RequestError as exc:
            raise SiigoNetworkError(f"Could not reach Siigo: {exc}") from exc
        return self._handle_response(response)

    # ------------------------------------------------------------------
    # API operations
    # ------------------------------------------------------------------

    def get_warehouses(self, db: Session) -> list[dict]:
        data = self._request(db, "GET", "/warehouses")
        logger.info("siigo_warehouses_fetched count=%s", len(data or []))
        return data or []

    def get_cost_centers(self, db: Session) -> list[dict]:
        data = self._request(db, "GET", "/cost-centers")
        logger.info("siigo_cost_centers_fetched count=%s", len(data or []))
        return data or []

    def get_accounts_payable(self, db: Session, page: int = 1, page_size: int | None = None) -> dict:
        """Fetch one page of accounts payable.

        Returns a dict with ``results`` (list of records) and ``pagination``
        (``page``, ``page_size``, ``total_results``).
        """
        page_size = page_size or settings.siigo_page_size
        data = self._request(
            db,
            "GET",
            "/accounts-payable",
            params={"page": page, "page_size": page_size},
        )
        data = data if isinstance(data, dict) else {}
        pagination = data.get("pagination") or {}
        return {
            "results": data.get("results") or [],
            "pagination": {
                "page": int(pagination.get("page") or page),
                "page_size": int(pagination.get("page_size") or page_size),
                "total_results": int(pagination.get("total_results") or 0),
            },
        }

    def create_journal(self, db: Session, payload: dict) -> dict:
        data = self._request(db, "POST", "/journals", json_data=payload)
        logger.info("siigo_journal_created id=%s", (data or {}).get("id") if isinstance(data, dict) else None)
        return data

    def test_connection(
        self,
        db: Session | None = None,
        credentials: SiigoAuthCredentials | None = None,
    ) -> dict:
        """Log in and list warehouses.

        With explicit ``credentials`` nothing is read from or written to the
        token cache, so unsaved credentials can be tried out.
        """
        try:
            if credentials is not None:
                token, _ = self._fetch_token(credentials)
                platform = credentials.platform
            else:
                token = self.authenticate(db)
                platform = self._load_credentials(db).platform
            response = self._get_client().get(
                "/v1/warehouses",
                headers=self._auth_headers(token, platform),
            )
        except httpx.RequestError as exc:
            return {"success": False, "status": 0, "message": f"Could not reach Siigo: {exc}"}
        except SiigoError as exc:
            return {"success": False, "status": exc.status_code or 0, "message": str(exc)}
        return {
            "success": response.is_success,
            "status": response.status_code,
            "message": "Connection successful" if response.is_success else f"Error: {response.status_code}",
        }


siigo_client = SiigoClient(settings.siigo_api_url, timeout=settings.siigo_timeout)
