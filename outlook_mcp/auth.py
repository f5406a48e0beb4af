"""
MS Graph device code authentication.

Handles the OAuth 2.0 device authorization grant with MSAL (Microsoft
Authentication Library). The token is acquired once per process and never
refreshed; when it expires Graph rejects requests and the server has to be
restarted to sign in again.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, Optional

import httpx
import msal

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Raised when the device code flow cannot be started or is not completed."""


class GraphAuth:
    """
    Owns one identity and the bearer token negotiated for it.

    Flow: device code displayed, user signs in on another device,
    token cached in memory for the lifetime of the process.
    """

    GRAPH_API_BASE = "https://graph.microsoft.com/v1.0"

    SCOPES = [
        "https://graph.microsoft.com/Mail.ReadWrite",
        "https://graph.microsoft.com/Mail.Send",
        "https://graph.microsoft.com/Calendars.ReadWrite",
        "https://graph.microsoft.com/Contacts.ReadWrite",
        "https://graph.microsoft.com/User.Read",
    ]

    def __init__(
        self,
        client_id: str,
        tenant_id: str,
        app: Optional[msal.PublicClientApplication] = None,
        device_code_callback: Optional[Callable[[Dict[str, Any]], None]] = None,
    ):
        """
        Initialize the auth handler.

        Args:
            client_id: Azure AD application (client) ID
            tenant_id: Azure AD directory (tenant) ID
            app: MSAL application to use instead of building one
            device_code_callback: Called with the device flow before waiting for sign-in
        """
        self.client_id = client_id
        self.tenant_id = tenant_id
        self.access_token: Optional[str] = None
        self.device_code_callback = device_code_callback or self._log_device_code
        self._client: Optional[httpx.AsyncClient] = None

        if app is None:
            app = msal.PublicClientApplication(
                client_id=client_id,
                authority=f"https://login.microsoftonline.com/{tenant_id}",
            )
        self._app = app

    @staticmethod
    def _log_device_code(flow: Dict[str, Any]):
        logger.warning("=== Microsoft Graph Authentication Required ===")
        logger.warning(f"1. Open this URL in your browser: {flow.get('verification_uri')}")
        logger.warning(f"2. Enter this code: {flow.get('user_code')}")
        logger.warning("3. Sign in with your Microsoft account")

    def is_authenticated(self) -> bool:
        """Check if a token has been acquired."""
        return self.access_token is not None

    async def get_access_token(self) -> str:
        """
        Run the device code flow and cache the resulting token.

        Blocks until the user redeems the code or the code expires.

        Returns:
            Access token string

        Raises:
            AuthenticationError: If the flow cannot start or does not yield a token
        """
        flow = self._app.initiate_device_flow(scopes=self.SCOPES)
        if "user_code" not in flow:
            error = flow.get("error_description") or flow.get("error") or "Unknown error"
            logger.error(f"Could not start device code flow: {error}")
            raise AuthenticationError(f"Could not start device code flow: {error}")

        self.device_code_callback(flow)

        # acquire_token_by_device_flow polls until redeemed or expired
        result = await asyncio.to_thread(self._app.acquire_token_by_device_flow, flow)

        if not result or "access_token" not in result:
            error = (result or {}).get("error_description") or (result or {}).get("error") or "Unknown error"
            logger.error(f"Authentication failed: {error}")
            raise AuthenticationError(error)

        self.access_token = result["access_token"]
        logger.info(f"Authenticated with Microsoft Graph; token valid for {result.get('expires_in', 'unknown')}s")
        return self.access_token

    async def get_client(self) -> httpx.AsyncClient:
        """
        Get an httpx client that sends the cached bearer token.

        Authenticates first if no token has been acquired yet.
        """
        if not self.access_token:
            await self.get_access_token()

        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.GRAPH_API_BASE,
                headers={
                    "Authorization": f"Bearer {self.access_token}",
                    "Content-Type": "application/json",
                },
                timeout=30.0,
            )
        return self._client

    async def close(self):
        """Close the httpx client."""
        if self._client:
            await self._client.aclose()
            self._client = None
