"""
HTTPClient tests: header merging and body encoding.
"""
import httpx  # type: ignore
import pytest  # type: ignore

from freshdesk_client.sources.client.http.http_client import HTTPClient
from freshdesk_client.sources.client.http.http_request import HTTPRequest
from tests.utils.fake_freshdesk import FakeFreshDesk


@pytest.fixture
def fake() -> FakeFreshDesk:
    return FakeFreshDesk()


class TestHTTPClient:
    """One request per execute(), body encoded by type."""

    @pytest.mark.asyncio
    async def test_request_headers_override_client_headers(self, fake):
        fake.add("GET", "/ping")
        async with HTTPClient("tok", transport=fake.transport()) as client:
            await client.execute(HTTPRequest(url="https://h.test/ping", headers={"X-Trace": "1"}))
            await client.execute(HTTPRequest(url="https://h.test/ping", headers={"Authorization": "Other"}))

        assert fake.requests[0].headers["Authorization"] == "Bearer tok"
        assert fake.requests[0].headers["X-Trace"] == "1"
        assert fake.requests[1].headers["Authorization"] == "Other"
        assert client.client is None

    @pytest.mark.asyncio
    async def test_path_params_are_substituted(self, fake):
        fake.add("GET", "/tickets/7", json={"id": 7})
        client = HTTPClient("tok", transport=fake.transport())

        response = await client.execute(HTTPRequest(url="https://h.test/tickets/{id}", path_params={"id": "7"}))

        assert response.status == 200
        assert response.header("content-type") == "application/json"
        await client.close()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body, expected",
        [
            ({"a": 1}, b'{"a":1}'),
            ([1, 2], b"[1,2]"),
            ("café", "café".encode("utf-8")),
            (b"\x00\x01", b"\x00\x01"),
        ],
    )
    async def test_body_encoding(self, fake, body, expected):
        fake.add("POST", "/echo")
        client = HTTPClient("tok", transport=fake.transport())

        await client.execute(HTTPRequest(url="https://h.test/echo", method="POST", body=body))

        assert fake.last_request.content.replace(b" ", b"") == expected.replace(b" ", b"")
        await client.close()

    @pytest.mark.asyncio
    async def test_files_drop_json_content_type(self, fake):
        fake.add("PUT", "/upload")
        client = HTTPClient("tok", transport=fake.transport())
        request = HTTPRequest(
            url="https://h.test/upload",
            method="PUT",
            headers={"Content-Type": "application/json"},
            files=[("attachments[]", ("a.txt", b"hello", "text/plain"))],
        )

        await client.execute(request)

        assert fake.last_request.headers["Content-Type"].startswith("multipart/form-data; boundary=")
        await client.close()

    @pytest.mark.asyncio
    async def test_transport_errors_are_not_retried(self, fake):
        fake.add("GET", "/flaky", error=httpx.ConnectError)
        fake.add("GET", "/flaky")
        client = HTTPClient("tok", transport=fake.transport())

        with pytest.raises(httpx.ConnectError):
            await client.execute(HTTPRequest(url="https://h.test/flaky"))

        assert len(fake.requests) == 1
        await client.close()
