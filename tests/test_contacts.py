"""
Contact operation tests: email lookup and company associations.
"""
import pytest  # type: ignore

from freshdesk_client.exceptions.freshdesk_exceptions import FreshDeskAPIError, FreshDeskNotFoundError
from freshdesk_client.models.freshdesk import Contact, ContactCreatePayload
from freshdesk_client.sources.external.freshdesk.freshdesk import CONTACT_NOT_FOUND, contact_update_from
from tests.utils.data_factory import FreshDeskDataFactory


class TestFindContactByEmail:
    """Email search returns exactly one contact or raises."""

    @pytest.mark.asyncio
    async def test_query_is_quoted_email_filter(self, data_source, fake_freshdesk):
        contact = FreshDeskDataFactory.contact(id=11, email="jane@example.com")
        fake_freshdesk.add(
            "GET",
            "/api/v2/search/contacts",
            params={"query": "\"email:'jane@example.com'\""},
            json={"total": 1, "results": [contact]},
        )

        found = await data_source.find_contact_by_email("jane@example.com")

        assert found.id == 11
        assert found.email == "jane@example.com"

    @pytest.mark.asyncio
    async def test_no_match_raises_not_found(self, data_source, fake_freshdesk):
        fake_freshdesk.add("GET", "/api/v2/search/contacts", json={"total": 0, "results": []})

        with pytest.raises(FreshDeskNotFoundError) as exc_info:
            await data_source.find_contact_by_email("ghost@example.com")

        assert str(exc_info.value) == CONTACT_NOT_FOUND
        assert exc_info.value.details == {"email": "ghost@example.com"}

    @pytest.mark.asyncio
    async def test_total_without_results_raises_not_found(self, data_source, fake_freshdesk):
        fake_freshdesk.add("GET", "/api/v2/search/contacts", json={"total": 3, "results": []})

        with pytest.raises(FreshDeskNotFoundError):
            await data_source.find_contact_by_email("ghost@example.com")

    @pytest.mark.asyncio
    async def test_first_of_several_matches_wins(self, data_source, fake_freshdesk):
        results = [FreshDeskDataFactory.contact(id=i) for i in (5, 6, 7)]
        fake_freshdesk.add("GET", "/api/v2/search/contacts", json={"total": 3, "results": results})

        found = await data_source.find_contact_by_email("shared@example.com")

        assert found.id == 5

    @pytest.mark.asyncio
    async def test_search_error_is_not_a_not_found(self, data_source, fake_freshdesk):
        fake_freshdesk.add("GET", "/api/v2/search/contacts", status=400, text='{"description":"Invalid query"}')

        with pytest.raises(FreshDeskAPIError) as exc_info:
            await data_source.find_contact_by_email("bad'quote@example.com")

        assert not isinstance(exc_info.value, FreshDeskNotFoundError)


class TestContactCrud:
    """Reading, creating and deleting contacts."""

    @pytest.mark.asyncio
    async def test_get_contact_keeps_other_companies(self, data_source, fake_freshdesk):
        others = [FreshDeskDataFactory.other_company(7, view_all_tickets=True)]
        fake_freshdesk.add("GET", "/api/v2/contacts/11", json=FreshDeskDataFactory.contact(id=11, other_companies=others))

        contact = await data_source.get_contact(11)

        assert [(c.id, c.view_all_tickets) for c in contact.other_companies] == [(7, True)]

    @pytest.mark.asyncio
    async def test_create_contact(self, data_source, fake_freshdesk):
        fake_freshdesk.add("POST", "/api/v2/contacts", status=201, json=FreshDeskDataFactory.contact(id=12, name="Jane Roe"))

        contact = await data_source.create_contact(ContactCreatePayload(name="Jane Roe", email="jane@example.com", company_id=3))

        assert contact.name == "Jane Roe"
        assert fake_freshdesk.json_body(fake_freshdesk.last_request) == {"name": "Jane Roe", "email": "jane@example.com", "company_id": 3}

    @pytest.mark.asyncio
    async def test_soft_delete(self, data_source, fake_freshdesk):
        fake_freshdesk.add("DELETE", "/api/v2/contacts/12", status=204)

        await data_source.soft_delete_contact(12)

        assert "force" not in fake_freshdesk.last_request.url.params

    @pytest.mark.asyncio
    async def test_permanent_delete_forces_hard_delete(self, data_source, fake_freshdesk):
        fake_freshdesk.add("DELETE", "/api/v2/contacts/12/hard_delete", status=204, params={"force": "true"})

        await data_source.permanently_delete_contact(12)

        assert fake_freshdesk.last_request.url.params["force"] == "true"


class TestCompanyAssociations:
    """Adding companies to a contact keeps everything else intact."""

    @pytest.mark.asyncio
    async def test_add_other_company_appends_to_existing(self, data_source, fake_freshdesk):
        others = [FreshDeskDataFactory.other_company(7, view_all_tickets=False)]
        contact = Contact.model_validate(FreshDeskDataFactory.contact(id=11, other_companies=others, company_id=3))
        fake_freshdesk.add("PUT", "/api/v2/contacts/11", json=FreshDeskDataFactory.contact(id=11))

        assert await data_source.add_other_company_for_contact(contact, 42, True) is True

        sent = fake_freshdesk.json_body(fake_freshdesk.last_request)
        assert sent["other_companies"] == [
            {"company_id": 7, "view_all_tickets": False},
            {"company_id": 42, "view_all_tickets": True},
        ]
        assert sent["company_id"] == 3
        assert sent["name"] == contact.name
        assert sent["other_emails"] == contact.other_emails
        assert sent["tags"] == ["vip"]
        assert sent["custom_fields"] == {"cf_segment": "enterprise"}

    @pytest.mark.asyncio
    async def test_add_main_company_replaces_primary_only(self, data_source, fake_freshdesk):
        others = [FreshDeskDataFactory.other_company(7, view_all_tickets=True)]
        contact = Contact.model_validate(FreshDeskDataFactory.contact(id=11, other_companies=others, company_id=3))
        fake_freshdesk.add("PUT", "/api/v2/contacts/11", json=FreshDeskDataFactory.contact(id=11, company_id=99))

        assert await data_source.add_main_company_for_contact(contact, 99) is True

        sent = fake_freshdesk.json_body(fake_freshdesk.last_request)
        assert sent["company_id"] == 99
        assert sent["other_companies"] == [{"company_id": 7, "view_all_tickets": True}]

    @pytest.mark.asyncio
    async def test_failed_update_propagates(self, data_source, fake_freshdesk):
        contact = Contact.model_validate(FreshDeskDataFactory.contact(id=11))
        fake_freshdesk.add("PUT", "/api/v2/contacts/11", status=400, text='{"description":"Validation failed"}')

        with pytest.raises(FreshDeskAPIError) as exc_info:
            await data_source.add_other_company_for_contact(contact, 42, False)

        assert exc_info.value.status_code == 400

    def test_update_payload_copies_every_mutable_field(self):
        contact = Contact.model_validate(FreshDeskDataFactory.contact(id=11, job_title="CTO"))

        update = contact_update_from(contact, job_title="CEO")

        body = update.to_request_body()
        assert body["job_title"] == "CEO"
        assert body["email"] == contact.email
        assert body["time_zone"] == contact.time_zone
        assert body["avatar"] == contact.avatar
        assert "id" not in body
        assert "created_at" not in body
