from freshdesk_client.exceptions.freshdesk_exceptions import (
    FreshDeskAPIError,
    FreshDeskConfigurationError,
    FreshDeskDecodeError,
    FreshDeskError,
    FreshDeskNotFoundError,
    FreshDeskTransportError,
)

__all__ = [
    "FreshDeskAPIError",
    "FreshDeskConfigurationError",
    "FreshDeskDecodeError",
    "FreshDeskError",
    "FreshDeskNotFoundError",
    "FreshDeskTransportError",
]
