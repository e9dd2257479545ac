import httpx
import pytest

from src.core.exceptions import ApiConnectionError, ApiRequestError
from src.dashboard.client import ApiClient

BASE_URL = "http://studio.test/api/v1"


def _api(handler) -> ApiClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)
    return ApiClient(base_url=BASE_URL, http=http)


class TestApiClient:
    async def test_unwraps_envelope(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"success": True, "data": [{"id": 1}], "message": None})

        api = _api(handler)
        assert await api.get("/clients", params={"active": "true"}) == [{"id": 1}]
        assert requests[0].url.path == "/api/v1/clients"
        assert requests[0].url.params["active"] == "true"

    async def test_plain_json_and_empty_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/health"):
                return httpx.Response(200, json={"status": "healthy"})
            return httpx.Response(204)

        api = _api(handler)
        assert await api.get("/health") == {"status": "healthy"}
        assert await api.delete("/attachments/clients/1/2") is None

    @pytest.mark.parametrize(
        "response, expected",
        [
            (httpx.Response(409, json={"message": "File locked"}), "File locked"),
            (httpx.Response(404, json={"detail": "Not Found"}), "Not Found"),
            (httpx.Response(500, text="upstream exploded"), "upstream exploded"),
            (httpx.Response(502), "Bad Gateway"),
        ],
    )
    async def test_error_message_from_server(self, response, expected):
        api = _api(lambda request: response)
        with pytest.raises(ApiRequestError) as exc_info:
            await api.delete("/attachments/projects/7/42")
        assert exc_info.value.message == expected
        assert exc_info.value.status_code == response.status_code

    async def test_transport_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        api = _api(handler)
        with pytest.raises(ApiConnectionError) as exc_info:
            await api.get("/users")
        assert exc_info.value.status_code == 503
        assert exc_info.value.message == "connection refused"

    async def test_patch_sends_json(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["method"] = request.method
            captured["body"] = request.content
            return httpx.Response(200, json={"success": True, "data": {"id": 3, "completed": True}})

        api = _api(handler)
        assert await api.patch("/tasks/3", json={"completed": True}) == {"id": 3, "completed": True}
        assert captured["method"] == "PATCH"
        assert b'"completed"' in captured["body"]

    async def test_url_for(self):
        api = ApiClient(base_url=BASE_URL + "/")
        try:
            assert api.url_for("/attachments/tasks/1/download/2") == f"{BASE_URL}/attachments/tasks/1/download/2"
        finally:
            await api.aclose()
