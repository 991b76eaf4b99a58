"""FreshDesk external data source module."""

from freshdesk_client.sources.external.freshdesk.freshdesk import FreshdeskDataSource
from freshdesk_client.sources.external.freshdesk.freshdesk_sync import FreshDeskSync

__all__ = ["FreshdeskDataSource", "FreshDeskSync"]
