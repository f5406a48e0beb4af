"""
Identity configuration for the Outlook MCP server.

Resolves the Azure AD application (client) ID and directory (tenant) ID from
command line flags, a list of alternately named environment variables, and
finally a placeholder default. Precedence is the order of the source tables
below.
"""

import logging
import os
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

CLIENT_ID_PLACEHOLDER = "your-client-id-here"
TENANT_ID_PLACEHOLDER = "your-tenant-id-here"

# (kind, key) pairs evaluated in order; the first non-empty value wins.
CLIENT_ID_SOURCES: Tuple[Tuple[str, str], ...] = (
    ("arg", "--client-id"),
    ("env", "CLIENT_ID"),
    ("env", "client_id"),
    ("env", "MCP_CLIENT_ID"),
    ("env", "USER_CONFIG_CLIENT_ID"),
    ("env", "MS365_MCP_CLIENT_ID"),
    ("default", CLIENT_ID_PLACEHOLDER),
)

TENANT_ID_SOURCES: Tuple[Tuple[str, str], ...] = (
    ("arg", "--tenant-id"),
    ("env", "TENANT_ID"),
    ("env", "tenant_id"),
    ("env", "MCP_TENANT_ID"),
    ("env", "USER_CONFIG_TENANT_ID"),
    ("env", "MS365_MCP_TENANT_ID"),
    ("default", TENANT_ID_PLACEHOLDER),
)


class ConfigurationError(Exception):
    """Raised when the identity configuration is missing or still a placeholder."""


@dataclass(frozen=True)
class IdentityConfig:
    """Azure AD identity used for the device code flow."""

    client_id: str
    tenant_id: str

    @property
    def client_id_set(self) -> bool:
        return bool(self.client_id) and self.client_id != CLIENT_ID_PLACEHOLDER

    @property
    def tenant_id_set(self) -> bool:
        return bool(self.tenant_id) and self.tenant_id != TENANT_ID_PLACEHOLDER

    def validate(self) -> "IdentityConfig":
        """
        Check that both identifiers are configured.

        Raises:
            ConfigurationError: If either value is empty or a placeholder
        """
        if self.client_id_set and self.tenant_id_set:
            return self

        raise ConfigurationError(
            "\n=== CONFIGURATION REQUIRED ===\n"
            "Please configure your Azure App Registration details:\n"
            f"1. CLIENT_ID: {'Set' if self.client_id_set else 'NOT SET'}\n"
            f"2. TENANT_ID: {'Set' if self.tenant_id_set else 'NOT SET'}\n\n"
            "Pass --client-id/--tenant-id or set them as environment variables."
        )


def _arg_value(argv: Sequence[str], flag: str) -> Optional[str]:
    """Return the value following the last occurrence of flag (or flag=value)."""
    value = None
    for i, arg in enumerate(argv):
        if arg == flag and i + 1 < len(argv):
            value = argv[i + 1]
        elif arg.startswith(f"{flag}="):
            value = arg.split("=", 1)[1]
    return value


def resolve_value(
    sources: Sequence[Tuple[str, str]],
    argv: Sequence[str],
    environ: Mapping[str, str],
) -> str:
    """Evaluate a source table and return the first non-empty value."""
    for kind, key in sources:
        if kind == "arg":
            value = _arg_value(argv, key)
        elif kind == "env":
            value = environ.get(key)
        elif kind == "default":
            value = key
        else:
            raise ValueError(f"Unknown configuration source kind: {kind}")

        if value:
            return value

    return ""


def _mask(value: str) -> str:
    if not value:
        return "Missing"
    return value[:10] + "..." if len(value) > 10 else value


def resolve_identity(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> IdentityConfig:
    """
    Resolve the identity configuration.

    Args:
        argv: Command line arguments (default: empty, flags are ignored)
        environ: Environment mapping (default: os.environ)

    Returns:
        IdentityConfig, possibly still holding placeholder values
    """
    argv = list(argv or [])
    environ = os.environ if environ is None else environ

    config = IdentityConfig(
        client_id=resolve_value(CLIENT_ID_SOURCES, argv, environ),
        tenant_id=resolve_value(TENANT_ID_SOURCES, argv, environ),
    )

    related: List[str] = sorted(
        key for key in environ
        if "CLIENT" in key.upper() or "TENANT" in key.upper()
    )
    logger.debug("CLIENT_ID: %s", _mask(config.client_id))
    logger.debug("TENANT_ID: %s", _mask(config.tenant_id))
    logger.debug("Command line args: %s", argv)
    logger.debug("Env vars with CLIENT/TENANT: %s", related)

    return config
