from freshdesk_client.models.freshdesk import (
    Attachment,
    Company,
    CompanyCreatePayload,
    CompanyName,
    CompanyUpdatePayload,
    Contact,
    ContactCreatePayload,
    ContactShort,
    ContactUpdatePayload,
    CustomObject,
    CustomObjectUpdatePayload,
    CustomObjectUpdateResult,
    Group,
    OtherCompany,
    OtherCompanyPayload,
    Ticket,
    TicketCreatePayload,
    TicketMessage,
    TicketMessageCreatePayload,
    TicketPriority,
    TicketSource,
    TicketStatus,
    TicketStatusUpdatePayload,
    TicketUpdatePayload,
)

__all__ = [
    "Attachment",
    "Company",
    "CompanyCreatePayload",
    "CompanyName",
    "CompanyUpdatePayload",
    "Contact",
    "ContactCreatePayload",
    "ContactShort",
    "ContactUpdatePayload",
    "CustomObject",
    "CustomObjectUpdatePayload",
    "CustomObjectUpdateResult",
    "Group",
    "OtherCompany",
    "OtherCompanyPayload",
    "Ticket",
    "TicketCreatePayload",
    "TicketMessage",
    "TicketMessageCreatePayload",
    "TicketPriority",
    "TicketSource",
    "TicketStatus",
    "TicketStatusUpdatePayload",
    "TicketUpdatePayload",
]
