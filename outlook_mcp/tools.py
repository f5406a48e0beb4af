"""
Tool catalog and dispatcher.

The dispatcher owns the Outlook service. The first tool call resolves the
identity configuration and runs the device code sign-in; every later call
reuses that session. Every call returns a result envelope, never an exception.
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from mcp.types import TextContent
from pydantic import ValidationError

from .auth import AuthenticationError, GraphAuth
from .config import ConfigurationError, IdentityConfig
from .schemas import (
    TOOL_PARAMS,
    CreateCalendarEventParams,
    CreateContactParams,
    GetCalendarEventsParams,
    ReadEmailsParams,
    SearchContactsParams,
    SendEmailParams,
    ToolParams,
)
from .service import OutlookService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    input_schema: Dict[str, Any] = field(default_factory=dict)


def _input_schema(params: type) -> Dict[str, Any]:
    schema = params.model_json_schema(by_alias=True)
    schema.pop("title", None)
    return schema


TOOL_DESCRIPTIONS = {
    "send_email": "Send an email through Outlook",
    "read_emails": "Read and search emails from Outlook",
    "create_calendar_event": "Create a new calendar event in Outlook",
    "get_calendar_events": "Retrieve calendar events from Outlook",
    "search_contacts": "Search for contacts in Outlook",
    "create_contact": "Create a new contact in Outlook",
}

TOOL_DEFINITIONS: List[ToolDefinition] = [
    ToolDefinition(name=name, description=TOOL_DESCRIPTIONS[name], input_schema=_input_schema(params))
    for name, params in TOOL_PARAMS.items()
]


def default_service_factory(config: IdentityConfig) -> OutlookService:
    return OutlookService(GraphAuth(config.client_id, config.tenant_id))


class ToolDispatcher:
    """Single entry point from tool calls to Graph operations."""

    def __init__(
        self,
        config_resolver: Callable[[], IdentityConfig],
        service_factory: Callable[[IdentityConfig], OutlookService] = default_service_factory,
    ):
        """
        Args:
            config_resolver: Returns the identity configuration, called on bootstrap
            service_factory: Builds an (uninitialized) OutlookService for an identity
        """
        self._resolve_config = config_resolver
        self._service_factory = service_factory
        self._service: Optional[OutlookService] = None
        self._init_lock = asyncio.Lock()

    def list_tools(self) -> List[ToolDefinition]:
        return list(TOOL_DEFINITIONS)

    def is_ready(self) -> bool:
        return self._service is not None and self._service.is_ready()

    async def ensure_session(self) -> OutlookService:
        """
        Bootstrap the session once.

        Concurrent callers wait for the bootstrap in progress instead of
        starting another device code flow. A failed bootstrap leaves the
        dispatcher uninitialized so the next call starts over.

        Raises:
            ConfigurationError: If the identity is missing or a placeholder
            AuthenticationError: If the device code sign-in fails
        """
        async with self._init_lock:
            if self._service is None:
                config = self._resolve_config().validate()
                service = self._service_factory(config)
                await service.initialize()
                self._service = service
                logger.info("Outlook session initialized")
        return self._service

    async def dispatch(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """
        Run a tool and return its result envelope.

        Args:
            name: Tool name
            arguments: Tool arguments (camelCase keys); None values count as missing

        Returns:
            {"success": True, ...} or {"success": False, "error": message}
        """
        try:
            service = await self.ensure_session()

            params_model = TOOL_PARAMS.get(name)
            if params_model is None:
                raise ValueError(f"Unknown tool: {name}")

            provided = {k: v for k, v in (arguments or {}).items() if v is not None}
            params = params_model.model_validate(provided)

            return await self._run(service, params)

        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            return {"success": False, "error": f"Configuration error: {e}"}
        except AuthenticationError as e:
            logger.error(f"Authentication failed: {e}")
            return {"success": False, "error": f"Authentication failed: {e}"}
        except ValidationError as e:
            logger.error(f"Invalid arguments for tool {name}: {e}")
            return {"success": False, "error": f"Invalid arguments for {name}: {e}"}
        except Exception as e:
            logger.error(f"Error executing tool {name}: {e}")
            return {"success": False, "error": str(e) or e.__class__.__name__}

    async def _run(self, service: OutlookService, params: ToolParams) -> Dict[str, Any]:
        if isinstance(params, SendEmailParams):
            return await service.mail_tools.send_email(
                params.to, params.subject, params.body, params.is_html
            )
        if isinstance(params, ReadEmailsParams):
            return await service.mail_tools.read_emails(params.folder_id, params.top, params.search)
        if isinstance(params, CreateCalendarEventParams):
            return await service.calendar_tools.create_calendar_event(
                params.subject, params.start, params.end, params.attendees, params.body, params.location
            )
        if isinstance(params, GetCalendarEventsParams):
            return await service.calendar_tools.get_calendar_events(
                params.start_date, params.end_date, params.top
            )
        if isinstance(params, SearchContactsParams):
            return await service.contact_tools.search_contacts(params.search_term, params.top)
        if isinstance(params, CreateContactParams):
            return await service.contact_tools.create_contact(
                params.display_name, params.email, params.phone, params.company, params.job_title
            )
        raise ValueError(f"No operation for {type(params).__name__}")

    async def call_tool(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> List[TextContent]:
        """Dispatch and wrap the envelope as MCP text content."""
        result = await self.dispatch(name, arguments)
        return [TextContent(type="text", text=json.dumps(result, indent=2))]

    async def close(self):
        if self._service:
            await self._service.close()
