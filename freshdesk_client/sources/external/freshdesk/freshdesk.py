"""
FreshDesk DataSource - typed API wrapper

Every operation goes through one executor: build the request, attach the
Basic auth header, send it, compare the status with the one the operation
expects, then decode the body into a pydantic record.

Failures are raised, never returned:
- FreshDeskTransportError: the request never reached or returned from FreshDesk
- FreshDeskAPIError: unexpected status, message is the raw response body
- FreshDeskDecodeError: expected status but an undecodable body
- FreshDeskNotFoundError: an email search with no match

Nothing is retried and nothing is cached.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar

import httpx  # type: ignore
from pydantic import TypeAdapter, ValidationError  # type: ignore

from freshdesk_client.config.constants.http_status_code import HttpStatusCode
from freshdesk_client.exceptions.freshdesk_exceptions import (
    FreshDeskAPIError,
    FreshDeskDecodeError,
    FreshDeskError,
    FreshDeskNotFoundError,
    FreshDeskTransportError,
)
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
    CustomObjectSearchResponse,
    CustomObjectUpdatePayload,
    CustomObjectUpdateResult,
    Group,
    OtherCompanyPayload,
    SearchCompaniesResponse,
    SearchContactsResponse,
    ServiceDeskTicketMessageResponse,
    ServiceDeskTicketResponse,
    Ticket,
    TicketCreatePayload,
    TicketMessage,
    TicketMessageCreatePayload,
    TicketStatusUpdatePayload,
    TicketUpdatePayload,
)
from freshdesk_client.sources.client.freshdesk.freshdesk import API_PREFIX, FreshDeskClient
from freshdesk_client.sources.client.http.http_request import HTTPRequest
from freshdesk_client.sources.client.http.http_response import HTTPResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")

CONTACT_NOT_FOUND = "Contact not found"
ATTACHMENT_FIELD = "attachments[]"
JSON_HEADERS = {"Content-Type": "application/json"}

OK = (HttpStatusCode.OK.value,)
CREATED = (HttpStatusCode.CREATED.value,)
NO_CONTENT = (HttpStatusCode.NO_CONTENT.value,)
# The reply endpoint answers 200 or 201 depending on the ticket type
REPLY_CREATED = (HttpStatusCode.OK.value, HttpStatusCode.CREATED.value)

_TICKET = TypeAdapter(Ticket)
_TICKETS = TypeAdapter(List[Ticket])
_TICKET_MESSAGE = TypeAdapter(TicketMessage)
_CONTACT = TypeAdapter(Contact)
_CONTACTS_SHORT = TypeAdapter(List[ContactShort])
_COMPANY = TypeAdapter(Company)
_COMPANIES = TypeAdapter(List[Company])
_GROUPS = TypeAdapter(List[Group])
_CUSTOM_OBJECT_RESULT = TypeAdapter(CustomObjectUpdateResult)
_SD_TICKET = TypeAdapter(ServiceDeskTicketResponse)
_SD_TICKET_MESSAGE = TypeAdapter(ServiceDeskTicketMessageResponse)
_SEARCH_CONTACTS = TypeAdapter(SearchContactsResponse)
_SEARCH_COMPANIES = TypeAdapter(SearchCompaniesResponse)
_SEARCH_CUSTOM_OBJECTS = TypeAdapter(CustomObjectSearchResponse)


def next_page_suffix(link_header: Optional[str], endpoint: str) -> Optional[str]:
    """Extract the next page query string from a Link header.

    `<https://host/api/v2/contacts?page=2>; rel="next"` gives `?page=2`.
    Returns None when there is no next page: the header is missing, does
    not point at `endpoint`, or has no query string.
    """
    if not link_header or endpoint not in link_header:
        return None
    _, sep, rest = link_header.partition("?")
    if not sep:
        return None
    query, sep, _ = rest.partition(">")
    if not sep:
        return None
    return f"?{query}"


class FreshdeskDataSource:
    """FreshDesk API DataSource

    Provides async methods for FreshDesk tickets, contacts, companies,
    groups and custom objects. Each method returns a decoded record and
    raises a FreshDeskError subclass on failure.
    """

    def __init__(self, freshdeskClient: FreshDeskClient) -> None:
        """Initialize FreshDesk DataSource

        Args:
            freshdeskClient: FreshDeskClient instance
        """
        self.http_client = freshdeskClient.get_client()
        self._freshdesk_client = freshdeskClient

    def get_client(self) -> FreshDeskClient:
        """Get the underlying FreshDeskClient"""
        return self._freshdesk_client

    async def close(self) -> None:
        await self.http_client.close()

    # Executor

    async def _execute(
        self,
        method: str,
        path: str,
        expected: Sequence[int],
        body: Any = None,
        query: Optional[Dict[str, str]] = None,
        files: Optional[List[Tuple[str, Tuple[str, bytes, str]]]] = None,
        headers: Optional[Dict[str, str]] = None,
        base_url: Optional[str] = None,
    ) -> HTTPResponse:
        """Send one request and check its status.

        Args:
            method: HTTP verb
            path: Path below the API base URL, may carry a query string
            expected: Status codes that mean success for this operation
            body: JSON-serialisable body, or a raw string
            query: Query parameters
            files: Multipart file parts
            headers: Extra headers, defaults to a JSON content type
            base_url: Overrides the API base URL
        Raises:
            FreshDeskTransportError: the request failed below HTTP
            FreshDeskAPIError: the status is not in `expected`
        """
        url = f"{base_url or self.http_client.get_base_url()}{path}"
        request = HTTPRequest(
            url=url,
            method=method,
            headers=JSON_HEADERS if headers is None else headers,
            body=body,
            query_params=query or {},
            files=files or [],
        )
        try:
            response: HTTPResponse = await self.http_client.execute(request)
        except httpx.RequestError as e:
            logger.debug(f"{method} {path}: transport error {type(e).__name__}: {e}")
            raise FreshDeskTransportError(e) from e

        if response.status not in expected:
            response_text = response.text()
            logger.debug(f"{method} {path}: Status={response.status}, Response={response_text[:200] if response_text else 'Empty'}")
            raise FreshDeskAPIError(response.status, response_text)
        return response

    def _decode(self, response: HTTPResponse, adapter: TypeAdapter[T]) -> T:
        try:
            return adapter.validate_json(response.bytes())
        except ValidationError as e:
            raise FreshDeskDecodeError(
                f"Could not decode FreshDesk response: {e}",
                {"status_code": response.status},
            ) from e

    async def _get_all_pages(self, resource: str, adapter: TypeAdapter[List[T]]) -> List[T]:
        """Follow `Link: <...>; rel="next"` headers and concatenate every page.

        Records keep the server order. Any failing page aborts the whole
        listing; records from earlier pages are dropped.
        """
        endpoint = f"{API_PREFIX}{resource}"
        records: List[T] = []
        page_suffix = ""
        pages = 0
        while True:
            response = await self._execute("GET", f"{resource}{page_suffix}", OK)
            records.extend(self._decode(response, adapter))
            pages += 1
            suffix = next_page_suffix(response.header("Link"), endpoint)
            if suffix is None:
                break
            page_suffix = suffix
        logger.debug(f"Fetched {len(records)} records from {resource} in {pages} pages")
        return records

    # Tickets

    async def get_ticket(self, id: int) -> Ticket:
        """Retrieve a ticket

        API Endpoint: GET /api/v2/tickets/[id]
        """
        response = await self._execute("GET", f"/tickets/{id}", OK)
        return self._decode(response, _TICKET)

    async def get_ticket_with_conversations(self, id: int) -> Ticket:
        """Retrieve a ticket with its conversations embedded

        API Endpoint: GET /api/v2/tickets/[id]?include=conversations
        """
        response = await self._execute("GET", f"/tickets/{id}", OK, query={"include": "conversations"})
        return self._decode(response, _TICKET)

    async def get_all_tickets(self) -> List[Ticket]:
        """List tickets (first page, FreshDesk default filter)

        API Endpoint: GET /api/v2/tickets
        """
        response = await self._execute("GET", "/tickets", OK)
        return self._decode(response, _TICKETS)

    async def get_tickets_by_company_id(self, company_id: int, page_size: int, page: int) -> Tuple[List[Ticket], bool]:
        """List one page of a company's tickets

        API Endpoint: GET /api/v2/tickets?company_id=..&per_page=..&page=..

        This is the only rate limited operation. The caller drives paging.

        Returns:
            The page's tickets, and whether FreshDesk announced another page
            (a Link header is present)
        """
        await self.http_client.throttle()
        response = await self._execute(
            "GET",
            "/tickets",
            OK,
            query={"company_id": str(company_id), "per_page": str(page_size), "page": str(page)},
        )
        tickets = self._decode(response, _TICKETS)
        return tickets, bool(response.header("Link"))

    async def create_ticket(self, payload: TicketCreatePayload) -> Ticket:
        """Create a ticket

        API Endpoint: POST /api/v2/tickets
        """
        response = await self._execute("POST", "/tickets", CREATED, body=payload.to_request_body())
        return self._decode(response, _TICKET)

    async def create_sd_ticket(self, payload: TicketCreatePayload) -> Ticket:
        """Create a ticket on a service desk account

        The service desk API wraps the ticket: {"ticket": {...}}.
        """
        response = await self._execute("POST", "/tickets", CREATED, body=payload.to_request_body())
        return self._decode(response, _SD_TICKET).ticket

    async def create_ticket_with_attachments(self, payload: TicketCreatePayload, files: Iterable[Attachment]) -> Ticket:
        """Create a ticket, upload its attachments, then return it fresh

        FreshDesk cannot take a JSON ticket and files in one request, so the
        ticket is created first and each file is uploaded with its own
        multipart PUT. A failed upload is logged and skipped. The returned
        ticket is re-read after the uploads; compare its attachments with
        `files` to find out which uploads made it.

        Raises:
            FreshDeskError: creating or re-reading the ticket failed
        """
        ticket = await self.create_ticket(payload)
        return await self._attach_and_refetch(ticket.id, files)

    async def create_sd_ticket_with_attachments(self, payload: TicketCreatePayload, files: Iterable[Attachment]) -> Ticket:
        """Service desk variant of create_ticket_with_attachments"""
        ticket = await self.create_sd_ticket(payload)
        return await self._attach_and_refetch(ticket.id, files)

    async def _attach_and_refetch(self, ticket_id: int, files: Iterable[Attachment]) -> Ticket:
        for attachment in files:
            try:
                await self.upload_ticket_attachment(ticket_id, attachment)
            except (FreshDeskError, OSError) as e:
                logger.warning(f"Attachment {attachment.file_name!r} was not added to ticket {ticket_id}: {e}")
        return await self.get_ticket(ticket_id)

    async def upload_ticket_attachment(self, ticket_id: int, attachment: Attachment) -> None:
        """Add one file to an existing ticket

        API Endpoint: PUT /api/v2/tickets/[id] (multipart, field attachments[])
        """
        part = (attachment.file_name, attachment.read(), attachment.content_type)
        await self._execute("PUT", f"/tickets/{ticket_id}", OK, headers={}, files=[(ATTACHMENT_FIELD, part)])

    async def update_ticket(self, id: int, payload: TicketUpdatePayload) -> Ticket:
        """Update a ticket

        API Endpoint: PUT /api/v2/tickets/[id]
        """
        response = await self._execute("PUT", f"/tickets/{id}", OK, body=payload.to_request_body())
        return self._decode(response, _TICKET)

    async def update_ticket_status(self, id: int, payload: TicketStatusUpdatePayload) -> Ticket:
        """Change only the status of a ticket

        API Endpoint: PUT /api/v2/tickets/[id]
        """
        response = await self._execute("PUT", f"/tickets/{id}", OK, body=payload.to_request_body())
        return self._decode(response, _TICKET)

    async def create_ticket_message(self, id: int, payload: TicketMessageCreatePayload) -> TicketMessage:
        """Reply to a ticket

        API Endpoint: POST /api/v2/tickets/[id]/reply
        """
        response = await self._execute("POST", f"/tickets/{id}/reply", REPLY_CREATED, body=payload.to_request_body())
        return self._decode(response, _TICKET_MESSAGE)

    async def create_sd_ticket_message(self, id: int, payload: TicketMessageCreatePayload) -> TicketMessage:
        """Reply to a service desk ticket; the reply comes back as {"conversation": {...}}"""
        response = await self._execute("POST", f"/tickets/{id}/reply", REPLY_CREATED, body=payload.to_request_body())
        return self._decode(response, _SD_TICKET_MESSAGE).conversation

    async def delete_ticket(self, id: int) -> None:
        """Delete a ticket

        API Endpoint: DELETE /api/v2/tickets/[id]
        """
        await self._execute("DELETE", f"/tickets/{id}", NO_CONTENT)

    # Contacts

    async def find_contact_by_email(self, email: str) -> Contact:
        """Find the contact owning an email address

        API Endpoint: GET /api/v2/search/contacts?query="email:'..'"

        Returns:
            The first match; further matches are ignored
        Raises:
            FreshDeskNotFoundError: no contact has this email
        """
        response = await self._execute("GET", "/search/contacts", OK, query={"query": f"\"email:'{email}'\""})
        found = self._decode(response, _SEARCH_CONTACTS)
        if found.total == 0 or not found.results:
            raise FreshDeskNotFoundError(CONTACT_NOT_FOUND, {"email": email})
        return found.results[0]

    async def get_contact(self, id: int) -> Contact:
        """Retrieve a contact

        API Endpoint: GET /api/v2/contacts/[id]
        """
        response = await self._execute("GET", f"/contacts/{id}", OK)
        return self._decode(response, _CONTACT)

    async def get_all_contacts(self) -> List[ContactShort]:
        """List every contact, following pagination

        API Endpoint: GET /api/v2/contacts
        """
        return await self._get_all_pages("/contacts", _CONTACTS_SHORT)

    async def create_contact(self, payload: ContactCreatePayload) -> Contact:
        """Create a contact

        API Endpoint: POST /api/v2/contacts
        """
        response = await self._execute("POST", "/contacts", CREATED, body=payload.to_request_body())
        return self._decode(response, _CONTACT)

    async def update_contact(self, id: int, payload: ContactUpdatePayload) -> Contact:
        """Update a contact

        API Endpoint: PUT /api/v2/contacts/[id]
        """
        response = await self._execute("PUT", f"/contacts/{id}", OK, body=payload.to_request_body())
        return self._decode(response, _CONTACT)

    async def soft_delete_contact(self, id: int) -> None:
        """API Endpoint: DELETE /api/v2/contacts/[id]"""
        await self._execute("DELETE", f"/contacts/{id}", NO_CONTENT)

    async def permanently_delete_contact(self, id: int) -> None:
        """API Endpoint: DELETE /api/v2/contacts/[id]/hard_delete?force=true"""
        await self._execute("DELETE", f"/contacts/{id}/hard_delete", NO_CONTENT, query={"force": "true"})

    async def add_other_company_for_contact(self, contact: Contact, company_id: int, view_all: bool) -> bool:
        """Associate a contact with one more company

        Existing associations and every other mutable field are sent back
        as read, plus `{company_id, view_all_tickets}`.
        """
        other_companies = _other_company_payloads(contact)
        other_companies.append(OtherCompanyPayload(company_id=company_id, view_all_tickets=view_all))
        await self.update_contact(contact.id, contact_update_from(contact, other_companies=other_companies))
        return True

    async def add_main_company_for_contact(self, contact: Contact, company_id: int) -> bool:
        """Make `company_id` the contact's primary company, keeping the others"""
        update = contact_update_from(contact, company_id=company_id, other_companies=_other_company_payloads(contact))
        await self.update_contact(contact.id, update)
        return True

    # Companies

    async def get_company(self, id: int) -> Company:
        """API Endpoint: GET /api/v2/companies/[id]"""
        response = await self._execute("GET", f"/companies/{id}", OK)
        return self._decode(response, _COMPANY)

    async def get_all_companies(self) -> List[Company]:
        """API Endpoint: GET /api/v2/companies"""
        response = await self._execute("GET", "/companies", OK)
        return self._decode(response, _COMPANIES)

    async def search_companies(self, name: str) -> List[CompanyName]:
        """Autocomplete companies by name prefix

        API Endpoint: GET /api/v2/companies/autocomplete?name=..
        """
        response = await self._execute("GET", "/companies/autocomplete", OK, query={"name": name})
        return self._decode(response, _SEARCH_COMPANIES).companies

    async def create_company(self, payload: CompanyCreatePayload) -> Company:
        """API Endpoint: POST /api/v2/companies"""
        response = await self._execute("POST", "/companies", CREATED, body=payload.to_request_body())
        return self._decode(response, _COMPANY)

    async def update_company(self, id: int, payload: CompanyUpdatePayload) -> Company:
        """API Endpoint: PUT /api/v2/companies/[id]"""
        response = await self._execute("PUT", f"/companies/{id}", OK, body=payload.to_request_body())
        return self._decode(response, _COMPANY)

    async def delete_company(self, id: int) -> None:
        """API Endpoint: DELETE /api/v2/companies/[id]"""
        await self._execute("DELETE", f"/companies/{id}", NO_CONTENT)

    # Groups

    async def get_all_groups(self) -> List[Group]:
        """API Endpoint: GET /api/v2/admin/groups"""
        response = await self._execute("GET", "/admin/groups", OK)
        return self._decode(response, _GROUPS)

    # Custom objects

    async def search_custom_objects(self, schema_id: int, filters: Optional[Dict[str, str]] = None) -> List[CustomObject]:
        """List records of a custom object schema, filtered by field values

        API Endpoint: GET /api/v2/custom_objects/schemas/[schema_id]/records
        """
        response = await self._execute("GET", f"/custom_objects/schemas/{schema_id}/records", OK, query=filters)
        return self._decode(response, _SEARCH_CUSTOM_OBJECTS).records

    async def create_custom_object(self, schema_id: int, data: Dict[str, Any]) -> CustomObjectUpdateResult:
        """Create a custom object record; `data` is sent as the body

        API Endpoint: POST /api/v2/custom_objects/schemas/[schema_id]/records
        """
        response = await self._execute("POST", f"/custom_objects/schemas/{schema_id}/records", CREATED, body=data)
        return self._decode(response, _CUSTOM_OBJECT_RESULT)

    async def update_custom_object(self, schema_id: int, payload: CustomObjectUpdatePayload) -> CustomObjectUpdateResult:
        """Update a custom object record

        `payload.version` must be the version last read; FreshDesk rejects
        the write otherwise.

        API Endpoint: PUT /api/v2/custom_objects/schemas/[schema_id]/records/[display_id]
        """
        response = await self._execute(
            "PUT",
            f"/custom_objects/schemas/{schema_id}/records/{payload.display_id}",
            OK,
            body=payload.to_request_body(),
        )
        return self._decode(response, _CUSTOM_OBJECT_RESULT)

    # Raw

    async def put_custom_data(self, path: str, body: str, headers: Optional[Dict[str, str]] = None) -> Tuple[str, int]:
        """PUT a raw body to any path of the helpdesk

        Args:
            path: Path below the helpdesk root, e.g. '/api/v2/tickets/1'
            body: Body sent as is
            headers: Extra headers, e.g. a content type
        Returns:
            The response text and status code
        """
        response = await self._execute(
            "PUT",
            path,
            OK,
            body=body,
            headers=headers or {},
            base_url=self.http_client.get_root_url(),
        )
        return response.text(), response.status


def _other_company_payloads(contact: Contact) -> List[OtherCompanyPayload]:
    return [
        OtherCompanyPayload(company_id=c.id, view_all_tickets=c.view_all_tickets)
        for c in contact.other_companies
    ]


def contact_update_from(contact: Contact, **changes: Any) -> ContactUpdatePayload:
    """Build a full update payload from a contact as read.

    FreshDesk clears list fields that an update leaves out, so every
    mutable field is copied before `changes` are applied.
    """
    fields: Dict[str, Any] = {
        "name": contact.name,
        "email": contact.email,
        "phone": contact.phone,
        "mobile": contact.mobile,
        "twitter_id": contact.twitter_id,
        "unique_external_id": contact.unique_external_id,
        "other_emails": contact.other_emails,
        "company_id": contact.company_id,
        "view_all_tickets": contact.view_all_tickets,
        "other_companies": _other_company_payloads(contact),
        "address": contact.address,
        "avatar": contact.avatar,
        "custom_fields": contact.custom_fields,
        "description": contact.description,
        "job_title": contact.job_title,
        "language": contact.language,
        "tags": contact.tags,
        "time_zone": contact.time_zone,
    }
    fields.update(changes)
    return ContactUpdatePayload(**fields)
