"""Transport client - authenticated JSON requests against the Qwilt CDN API."""

import logging
from typing import Any

import httpx

from apps.cdn.client.endpoints import LOGIN_SERVICE, EndpointBuilder
from apps.cdn.config import QCDNSettings
from apps.cdn.exceptions import QCDNAPIError, QCDNAuthError

logger = logging.getLogger(__name__)

LOGIN_TOKEN_COOKIE = "cqloudLoginToken"

SUCCESS_STATUSES = frozenset({200, 201})


class QCDNClient:
    """
    Synchronous HTTP transport shared by all resource sub-clients.

    Authentication is chosen once: an API key is sent as
    ``Authorization: X-API-KEY <token>``; otherwise sign_in() exchanges the
    username and password for a session token sent as a bearer token.
    Sessions are never refreshed, a 401 just tells the caller to sign in
    again.
    """

    def __init__(
        self,
        settings: QCDNSettings,
        http_client: httpx.Client | None = None,
    ) -> None:
        """
        Initialize the transport.

        Args:
            settings: Credentials, environment and timeouts.
            http_client: Optional HTTP client for dependency injection (testing).
        """
        self.settings = settings
        self.endpoints = EndpointBuilder(settings.env_type, settings.endpoint_prefix)
        self._client = http_client or httpx.Client(timeout=settings.http_timeout)
        self._owns_client = http_client is None
        self._token = settings.xapi_token
        self._auth_scheme = "X-API-KEY" if settings.xapi_token else "Bearer"

    def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "QCDNClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    # =========================================================================
    # Authentication
    # =========================================================================

    def sign_in(self) -> str:
        """
        Obtain a session token from the login service.

        The login endpoint answers a successful sign-in with a redirect and
        sets the token as a cookie.

        Returns:
            The session token, also stored for subsequent requests.

        Raises:
            QCDNAuthError: If credentials are missing or the login fails.
        """
        username = self.settings.username
        password = self.settings.password
        if not username or not password:
            raise QCDNAuthError(
                "Please define the username and password to authenticate"
            )

        login_url = f"{self.endpoints.build(LOGIN_SERVICE)}/login"
        logger.info("Signing in to Qwilt CDN as %s", username)

        response = self._client.request(
            "GET",
            login_url,
            auth=(username, password),
            json={"username": username, "password": password},
            follow_redirects=False,
        )

        if response.status_code != httpx.codes.FOUND:
            raise QCDNAuthError(
                f"Authentication failed - status: {response.status_code}",
                status_code=response.status_code,
            )

        token = response.cookies.get(LOGIN_TOKEN_COOKIE)
        if not token:
            raise QCDNAuthError(
                f"No {LOGIN_TOKEN_COOKIE} cookie in the login response",
                status_code=response.status_code,
            )

        self._token = token
        self._auth_scheme = "Bearer"
        return token

    # =========================================================================
    # HTTP Helpers
    # =========================================================================

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"{self._auth_scheme} {self._token}",
            "Content-Type": "application/json",
        }

    def request(
        self,
        method: str,
        url: str,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """
        Make an authenticated request and decode the JSON response.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Absolute request URL
            json: Optional request body
            params: Optional query parameters

        Returns:
            The decoded JSON body, or None when the body is empty.

        Raises:
            QCDNAuthError: On 401.
            QCDNAPIError: On any other status besides 200 and 201.
        """
        logger.debug("%s %s", method, url)
        response = self._client.request(
            method, url, headers=self._headers(), json=json, params=params
        )

        if response.status_code == httpx.codes.UNAUTHORIZED:
            raise QCDNAuthError(
                "401 Unauthorized. Please re-authenticate",
                status_code=response.status_code,
            )

        if response.status_code not in SUCCESS_STATUSES:
            raise QCDNAPIError(
                f"API command failed - status: {response.status_code}, "
                f"body: {response.text}",
                status_code=response.status_code,
                response_body=response.text,
            )

        if not response.content:
            return None
        return response.json()


class ServiceClient:
    """Base for resource sub-clients bound to one service host."""

    SERVICE: str = ""

    def __init__(self, client: QCDNClient) -> None:
        self._client = client
        self.base_url = client.endpoints.build(self.SERVICE)

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"
