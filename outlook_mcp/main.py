#!/usr/bin/env python3
"""
Outlook MCP Server - Microsoft 365 Email, Calendar, and Contacts integration.

This is the main entry point for the Outlook MCP server that provides
access to Outlook mail, calendar and contacts via the MS Graph API through
FastMCP. Sign-in uses the device code flow on the first tool call.
"""

import argparse
import logging
import sys
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from dotenv import load_dotenv
from fastapi.responses import JSONResponse
from fastmcp import FastMCP
from fastmcp.server.middleware import Middleware, MiddlewareContext
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult
from pydantic import Field

from . import __version__
from .config import resolve_identity
from .schemas import TOOL_PARAMS
from .tools import TOOL_DEFINITIONS, ToolDefinition, ToolDispatcher

logger = logging.getLogger(__name__)

SERVER_NAME = "outlook-desktop-extension"

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class OutlookTool(Tool):
    """
    MCP tool built from a catalog entry.

    Arguments are handed to the dispatcher unvalidated, so missing or
    mistyped arguments come back as a result envelope like any other failure.
    """

    dispatcher: Any = Field(exclude=True)

    @classmethod
    def from_definition(cls, definition: ToolDefinition, dispatcher: ToolDispatcher) -> "OutlookTool":
        return cls(
            name=definition.name,
            description=definition.description,
            parameters=definition.input_schema,
            dispatcher=dispatcher,
        )

    async def run(self, arguments: Dict[str, Any]) -> ToolResult:
        return ToolResult(content=await self.dispatcher.call_tool(self.name, arguments))


class UnknownToolMiddleware(Middleware):
    """Answers calls to names outside the catalog with an error envelope."""

    def __init__(self, dispatcher: ToolDispatcher):
        self.dispatcher = dispatcher

    async def on_call_tool(self, context: MiddlewareContext, call_next):
        name = context.message.name
        if name not in TOOL_PARAMS:
            logger.warning(f"Call to unknown tool: {name}")
            return ToolResult(content=await self.dispatcher.call_tool(name, context.message.arguments))
        return await call_next(context)


def setup_tools(mcp: FastMCP, dispatcher: ToolDispatcher):
    """Register the six Outlook tools from the catalog; each forwards to the dispatcher."""
    for definition in dispatcher.list_tools():
        mcp.add_tool(OutlookTool.from_definition(definition, dispatcher))
    mcp.add_middleware(UnknownToolMiddleware(dispatcher))


def setup_health_endpoints(mcp: FastMCP, dispatcher: ToolDispatcher):
    """Set up health and info endpoints (streamable-http transport only)."""

    @mcp.custom_route("/health", methods=["GET"])
    async def health_check(request):
        """Health check endpoint for server monitoring."""
        return JSONResponse({
            "status": "healthy",
            "service": SERVER_NAME,
            "version": __version__,
            "timestamp": str(datetime.now()),
            "mcp_endpoint": "/mcp",
            "authenticated": dispatcher.is_ready(),
            "tools_count": len(TOOL_DEFINITIONS),
        })

    @mcp.custom_route("/tools/count", methods=["GET"])
    async def tools_count(request):
        """Tools count endpoint."""
        return JSONResponse({
            "tools_count": len(TOOL_DEFINITIONS),
            "email_tools": 2,
            "calendar_tools": 2,
            "contact_tools": 2,
            "total_tools": len(TOOL_DEFINITIONS),
        })


def create_server(dispatcher: ToolDispatcher) -> FastMCP:
    mcp = FastMCP(name=SERVER_NAME)
    setup_tools(mcp, dispatcher)
    setup_health_endpoints(mcp, dispatcher)
    return mcp


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Outlook MCP Server (Microsoft Graph)')
    parser.add_argument('--client-id', help='Azure AD application (client) ID')
    parser.add_argument('--tenant-id', help='Azure AD directory (tenant) ID')
    parser.add_argument('--transport', choices=['stdio', 'streamable-http'], default='stdio',
                        help='MCP transport (default: stdio)')
    parser.add_argument('--host', default='127.0.0.1', help='Host to bind the HTTP server to')
    parser.add_argument('--port', type=int, default=8000, help='Port to bind the HTTP server to')
    parser.add_argument('--log-level', type=str.upper, choices=LOG_LEVELS, default='INFO',
                        help='Logging level (default: INFO)')
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None):
    argv = list(sys.argv[1:] if argv is None else argv)
    args = parse_args(argv)

    # Load environment variables
    load_dotenv()

    # Logs go to stderr so the stdio transport stays clean
    logging.basicConfig(level=args.log_level)

    dispatcher = ToolDispatcher(config_resolver=lambda: resolve_identity(argv))
    mcp = create_server(dispatcher)

    if args.transport == 'stdio':
        logger.info("Outlook MCP Server running on stdio")
        mcp.run(transport="stdio")
    else:
        logger.info(f"Starting Outlook MCP server on http://{args.host}:{args.port}")
        logger.info(f"MCP endpoint: http://{args.host}:{args.port}/mcp")
        logger.info(f"Health endpoint: http://{args.host}:{args.port}/health")
        mcp.run(transport="streamable-http", host=args.host, port=args.port, path="/mcp")


if __name__ == "__main__":
    main()
