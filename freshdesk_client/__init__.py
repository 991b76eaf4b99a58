"""Typed async client for the FreshDesk helpdesk REST API."""

from freshdesk_client.exceptions.freshdesk_exceptions import (
    FreshDeskAPIError,
    FreshDeskConfigurationError,
    FreshDeskDecodeError,
    FreshDeskError,
    FreshDeskNotFoundError,
    FreshDeskTransportError,
)
from freshdesk_client.sources.client.freshdesk.freshdesk import (
    FreshDeskApiKeyConfig,
    FreshDeskBasicAuthConfig,
    FreshDeskClient,
)
from freshdesk_client.sources.external.freshdesk.freshdesk import FreshdeskDataSource
from freshdesk_client.sources.external.freshdesk.freshdesk_sync import FreshDeskSync

__all__ = [
    "FreshDeskAPIError",
    "FreshDeskApiKeyConfig",
    "FreshDeskBasicAuthConfig",
    "FreshDeskClient",
    "FreshDeskConfigurationError",
    "FreshDeskDecodeError",
    "FreshDeskError",
    "FreshDeskNotFoundError",
    "FreshDeskSync",
    "FreshDeskTransportError",
    "FreshdeskDataSource",
]
