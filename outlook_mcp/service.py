"""
Outlook Service - orchestrates Graph access for the tool classes.

Holds the authenticated httpx client and builds the mail, calendar and
contact tool classes once the device code sign-in has completed.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from .auth import GraphAuth

logger = logging.getLogger(__name__)


class OutlookService:
    """Microsoft Graph service providing Mail, Calendar, and Contacts functionality."""

    def __init__(self, auth: GraphAuth):
        """
        Initialize the service.

        Args:
            auth: GraphAuth instance owning the token
        """
        self.auth = auth
        self._client: Optional[httpx.AsyncClient] = None

        # Tool classes - initialized after authentication
        self.mail_tools = None
        self.calendar_tools = None
        self.contact_tools = None

    async def initialize(self):
        """
        Authenticate and build the tool classes.

        Raises:
            AuthenticationError: If the device code flow fails
        """
        self._client = await self.auth.get_client()

        # Lazy import to avoid circular imports
        from .mail_tools import MailTools
        from .calendar_tools import CalendarTools
        from .contact_tools import ContactTools

        self.mail_tools = MailTools(self)
        self.calendar_tools = CalendarTools(self)
        self.contact_tools = ContactTools(self)

    @property
    def client(self) -> httpx.AsyncClient:
        """
        Authenticated httpx client.

        Raises:
            RuntimeError: If initialize() has not completed
        """
        if not self._client:
            raise RuntimeError("Service not initialized - call initialize() first")
        return self._client

    def is_ready(self) -> bool:
        """Check if service is ready to handle requests."""
        return self._client is not None and self.mail_tools is not None

    async def close(self):
        await self.auth.close()
        self._client = None

    def is_auth_error(self, exc: Exception) -> bool:
        """Check if an exception is an HTTP 401/403 auth error."""
        return (
            isinstance(exc, httpx.HTTPStatusError)
            and exc.response.status_code in (401, 403)
        )

    @staticmethod
    def quote_search(term: str) -> str:
        """Wrap a search term as a KQL phrase, escaping embedded quotes."""
        escaped = term.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'

    @staticmethod
    def error_message(exc: Exception) -> str:
        """Prefer the message Graph puts in the error body over the HTTP status line."""
        if isinstance(exc, httpx.HTTPStatusError):
            try:
                body = exc.response.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                error = body.get("error")
                if isinstance(error, dict) and error.get("message"):
                    return error["message"]
        return str(exc) or exc.__class__.__name__

    def handle_tool_error(self, exc: Exception, operation: str) -> Dict[str, Any]:
        """Turn an exception from a tool method into an error envelope."""
        message = self.error_message(exc)
        logger.error(f"Error {operation}: {message}")
        result: Dict[str, Any] = {"success": False, "error": message}
        if self.is_auth_error(exc):
            result["error"] = (
                f"{message} - the access token was rejected (expired or revoked). "
                "Restart the server to sign in again."
            )
            result["auth_required"] = True
        return result
