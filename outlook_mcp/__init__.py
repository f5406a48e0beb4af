"""Outlook MCP server: Outlook mail, calendar and contacts over Microsoft Graph."""

__version__ = "1.0.0"
