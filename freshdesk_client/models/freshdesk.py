"""
FreshDesk records

Response entities are plain pydantic models decoded from the API's JSON.
Unknown keys are kept (tenants add their own fields) and open-ended values
such as custom fields or avatars are typed as `JsonValue`.

Request payloads are serialised with `exclude_none=True`, so a field left
as None is simply not sent.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, JsonValue  # type: ignore


class TicketStatus(IntEnum):
    OPEN = 2
    PENDING = 3
    RESOLVED = 4
    CLOSED = 5


class TicketPriority(IntEnum):
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    URGENT = 4


class TicketSource(IntEnum):
    EMAIL = 1
    PORTAL = 2
    PHONE = 3
    CHAT = 7
    FEEDBACK_WIDGET = 9
    OUTBOUND_EMAIL = 10


class FreshDeskEntity(BaseModel):
    """Base for records returned by the API"""
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class FreshDeskPayload(BaseModel):
    """Base for request bodies"""
    model_config = ConfigDict(populate_by_name=True)

    def to_request_body(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# Tickets

class TicketMessage(FreshDeskEntity):
    """A reply or note on a ticket"""
    id: Optional[int] = None
    body: Optional[str] = None
    body_text: Optional[str] = None
    incoming: bool = False
    private: bool = False
    user_id: Optional[int] = None
    support_email: Optional[str] = None
    source: Optional[int] = None
    category: Optional[int] = None
    to_emails: Optional[List[str]] = None
    from_email: Optional[str] = None
    cc_emails: Optional[List[str]] = None
    bcc_emails: Optional[List[str]] = None
    email_failure_count: Optional[int] = None
    outgoing_failures: Optional[int] = None
    thread_id: Optional[int] = None
    thread_message_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_edited_at: Optional[datetime] = None
    last_edited_user_id: Optional[int] = None
    attachments: JsonValue = None
    automation_id: Optional[int] = None
    automation_type_id: Optional[int] = None
    auto_response: bool = False
    ticket_id: Optional[int] = None
    source_additional_info: JsonValue = None


class Ticket(FreshDeskEntity):
    """A support request.

    `status` and `priority` are kept as plain ints because tenants can
    define statuses beyond TicketStatus; compare them against the enums.
    """
    id: int
    subject: Optional[str] = None
    description: Optional[str] = None
    description_text: Optional[str] = None
    status: Optional[int] = None
    priority: Optional[int] = None
    source: Optional[int] = None
    type: Optional[str] = None
    requester_id: Optional[int] = None
    responder_id: Optional[int] = None
    company_id: Optional[int] = None
    group_id: Optional[int] = None
    product_id: Optional[int] = None
    email_config_id: Optional[int] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    facebook_id: Optional[str] = None
    twitter_id: Optional[str] = None
    cc_emails: Optional[List[str]] = None
    fwd_emails: Optional[List[str]] = None
    reply_cc_emails: Optional[List[str]] = None
    to_emails: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    attachments: Optional[List[JsonValue]] = None
    custom_fields: JsonValue = None
    deleted: bool = False
    spam: bool = False
    is_escalated: bool = False
    fr_escalated: bool = False
    due_by: Optional[datetime] = None
    fr_due_by: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    conversations: Optional[List[TicketMessage]] = None


class TicketCreatePayload(FreshDeskPayload):
    name: Optional[str] = None
    requester_id: Optional[int] = None
    email: Optional[str] = None
    facebook_id: Optional[str] = None
    phone: Optional[str] = None
    twitter_id: Optional[str] = None
    unique_external_id: Optional[str] = None
    subject: Optional[str] = None
    type: Optional[str] = None
    status: Optional[int] = None
    priority: Optional[int] = None
    description: Optional[str] = None
    responder_id: Optional[int] = None
    attachments: Optional[List[JsonValue]] = None
    cc_emails: Optional[List[str]] = None
    custom_fields: Optional[Dict[str, JsonValue]] = None
    due_by: Optional[datetime] = None
    email_config_id: Optional[int] = None
    fr_due_by: Optional[datetime] = None
    group_id: Optional[int] = None
    product_id: Optional[int] = None
    source: Optional[int] = None
    tags: Optional[List[str]] = None
    company_id: Optional[int] = None
    internal_agent_id: Optional[int] = None
    internal_group_id: Optional[int] = None


class TicketUpdatePayload(TicketCreatePayload):
    """Same fields as creation; only the ones set are changed"""


class TicketStatusUpdatePayload(FreshDeskPayload):
    status: int


class TicketMessageCreatePayload(FreshDeskPayload):
    body: str
    attachments: Optional[List[JsonValue]] = None
    from_email: Optional[str] = None
    user_id: Optional[int] = None
    cc_emails: Optional[List[str]] = None
    bcc_emails: Optional[List[str]] = None


@dataclass
class Attachment:
    """A file to upload onto a ticket. A Path is read at upload time."""
    file_name: str
    content_type: str
    content: Union[bytes, Path]

    def read(self) -> bytes:
        if isinstance(self.content, Path):
            return self.content.read_bytes()
        return self.content


# Contacts

class OtherCompany(FreshDeskEntity):
    """A secondary company association as returned on a contact"""
    id: int
    view_all_tickets: bool = False
    name: Optional[str] = None
    avatar: JsonValue = None


class OtherCompanyPayload(FreshDeskPayload):
    """A secondary company association as sent on contact create/update"""
    company_id: int
    view_all_tickets: bool = False


class Contact(FreshDeskEntity):
    """A requester"""
    id: int
    active: bool = False
    name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    other_emails: Optional[List[str]] = None
    phone: Optional[str] = None
    mobile: Optional[str] = None
    other_phone_numbers: Optional[List[JsonValue]] = None
    twitter_id: Optional[str] = None
    facebook_id: JsonValue = None
    unique_external_id: Optional[str] = None
    visitor_id: Optional[str] = None
    company_id: Optional[int] = None
    view_all_tickets: Optional[bool] = None
    other_companies: List[OtherCompany] = Field(default_factory=list)
    address: Optional[str] = None
    avatar: JsonValue = None
    csat_rating: JsonValue = None
    custom_fields: JsonValue = None
    description: Optional[str] = None
    job_title: Optional[str] = None
    language: Optional[str] = None
    preferred_source: Optional[str] = None
    tags: Optional[List[str]] = None
    time_zone: Optional[str] = None
    org_contact_id: Optional[int] = None
    deleted: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ContactShort(FreshDeskEntity):
    """A contact as listed by GET /contacts; other companies are ids only"""
    id: int
    active: bool = False
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    mobile: Optional[str] = None
    twitter_id: Optional[str] = None
    facebook_id: JsonValue = None
    company_id: Optional[int] = None
    other_companies: Optional[List[int]] = None
    address: Optional[str] = None
    custom_fields: JsonValue = None
    description: Optional[str] = None
    job_title: Optional[str] = None
    language: Optional[str] = None
    tags: Optional[List[str]] = None
    deleted: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ContactCreatePayload(FreshDeskPayload):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    mobile: Optional[str] = None
    twitter_id: Optional[str] = None
    unique_external_id: Optional[str] = None
    other_emails: Optional[List[str]] = None
    company_id: Optional[int] = None
    view_all_tickets: Optional[bool] = None
    other_companies: Optional[List[OtherCompanyPayload]] = None
    address: Optional[str] = None
    avatar: JsonValue = None
    custom_fields: JsonValue = None
    description: Optional[str] = None
    job_title: Optional[str] = None
    language: Optional[str] = None
    tags: Optional[List[str]] = None
    time_zone: Optional[str] = None


class ContactUpdatePayload(ContactCreatePayload):
    """Same fields as creation.

    List fields left out of an update are cleared by FreshDesk, so updates
    built from an existing contact should copy them over.
    """


class SearchContactsResponse(FreshDeskEntity):
    total: int = 0
    results: List[Contact] = Field(default_factory=list)


# Companies

class Company(FreshDeskEntity):
    """An organization"""
    id: int
    name: Optional[str] = None
    description: Optional[str] = None
    note: Optional[str] = None
    domains: Optional[List[str]] = None
    custom_fields: JsonValue = None
    health_score: Optional[str] = None
    account_tier: Optional[str] = None
    renewal_date: Optional[datetime] = None
    industry: Optional[str] = None
    org_company_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CompanyName(FreshDeskEntity):
    id: int
    name: Optional[str] = None


class SearchCompaniesResponse(FreshDeskEntity):
    companies: List[CompanyName] = Field(default_factory=list)


class CompanyCreatePayload(FreshDeskPayload):
    name: Optional[str] = None
    description: Optional[str] = None
    note: Optional[str] = None
    domains: Optional[List[str]] = None
    custom_fields: Optional[Dict[str, JsonValue]] = None
    health_score: Optional[str] = None
    account_tier: Optional[str] = None
    renewal_date: Optional[str] = None
    industry: Optional[str] = None


class CompanyUpdatePayload(CompanyCreatePayload):
    pass


# Groups

class Group(FreshDeskEntity):
    """An agent group"""
    id: int
    name: Optional[str] = None
    description: Optional[str] = None
    escalate_to: Optional[int] = None
    unassigned_for: Optional[str] = None
    agent_ids: Optional[List[int]] = None
    business_calendar_id: Optional[int] = None
    allow_agents_to_change_availability: Optional[bool] = None
    type: Optional[str] = None
    automatic_agent_assignment: JsonValue = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Custom objects

class CustomObject(FreshDeskEntity):
    """A record of a tenant-defined schema.

    `version` is the optimistic concurrency token: send back the version
    last read when updating, or FreshDesk rejects the write.
    """
    display_id: str
    version: Optional[int] = None
    created_time: Optional[int] = None
    updated_time: Optional[int] = None
    data: Dict[str, JsonValue] = Field(default_factory=dict)
    metadata: Optional[Dict[str, JsonValue]] = None
    links: Optional[Dict[str, JsonValue]] = Field(default=None, alias="_links")


class CustomObjectSearchResponse(FreshDeskEntity):
    records: List[CustomObject] = Field(default_factory=list)
    links: Optional[Dict[str, JsonValue]] = Field(default=None, alias="_links")


class CustomObjectUpdatePayload(FreshDeskPayload):
    display_id: str
    version: int
    data: Dict[str, JsonValue]


class CustomObjectUpdateResult(FreshDeskEntity):
    display_id: str
    version: Optional[int] = None
    created_time: Optional[int] = None
    updated_time: Optional[int] = None
    data: Dict[str, JsonValue] = Field(default_factory=dict)


# Service desk accounts wrap created records in an envelope

class ServiceDeskTicketResponse(FreshDeskEntity):
    ticket: Ticket


class ServiceDeskTicketMessageResponse(FreshDeskEntity):
    conversation: TicketMessage
