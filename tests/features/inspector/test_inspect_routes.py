"""
Tests for POST /api/v1/inspect
"""
import base64
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from app.features.inspector.routes.inspect import get_inspection_service
from app.features.inspector.services.inspection import InspectionService
from app.features.inspector.services.summarizer import SAFETY_BLOCKED_SUMMARY
from app.platform.config import get_settings
from app.platform.exceptions import PageFetchError

PAGE = """
<html><head>
  <title>Example Domain</title>
  <meta property="og:image" content="https://example.com/og.png">
</head><body>
  <p>Hello</p>
  <a href="/ok">ok</a><a href="/missing">missing</a><a href="https://other.org">other</a>
</body></html>
"""


def site_handler(request: httpx.Request) -> httpx.Response:
    if request.method == "GET" and request.url.path == "/":
        return httpx.Response(200, text=PAGE, headers={"content-type": "text/html"})
    if request.method == "GET" and request.url.path == "/og.png":
        return httpx.Response(200, content=b"png", headers={"content-type": "image/png"})
    if request.url.path == "/missing":
        return httpx.Response(404)
    return httpx.Response(200)


class TestInspectEndpoint:

    @pytest.mark.asyncio
    async def test_success_shape(self, test_app, settings, mock_http, llm_stub):
        outbound = mock_http(site_handler)
        llm = llm_stub(content=None, finish_reason="content_filter")
        test_app.dependency_overrides[get_inspection_service] = lambda: InspectionService(
            settings, http_client=outbound, llm_client=llm
        )
        try:
            async with AsyncClient(
                transport=ASGITransport(app=test_app),
                base_url="http://testserver",
            ) as ac:
                res = await ac.post("/api/v1/inspect", json={"url": "example.com"})
        finally:
            test_app.dependency_overrides.clear()
            await outbound.aclose()

        assert res.status_code == 200
        assert res.json() == {
            "title": "Example Domain",
            "aiSummary": SAFETY_BLOCKED_SUMMARY,
            "image": {"mimeType": "image/png", "base64": base64.b64encode(b"png").decode()},
            "links": {
                "total": 3,
                "internal": 2,
                "external": 1,
                "broken": ["https://example.com/missing (Error: 404)"],
            },
        }

    @pytest.mark.parametrize("body", [{}, {"url": ""}, {"url": None}])
    def test_missing_url_is_client_fault(self, client, body):
        with patch("httpx.AsyncClient.send", new_callable=AsyncMock) as mock_send:
            res = client.post("/api/v1/inspect", json=body)

        assert res.status_code == 400
        assert res.json() == {"error": "URL is required"}
        mock_send.assert_not_awaited()

    def test_missing_api_key_is_server_fault(self, client, test_app, make_settings):
        test_app.dependency_overrides[get_settings] = lambda: make_settings(GEMINI_API_KEY=None)

        res = client.post("/api/v1/inspect", json={"url": "example.com"})

        assert res.status_code == 500
        assert res.json() == {"error": "Server is missing API key."}

    @patch(
        "app.features.inspector.routes.inspect.InspectionService.inspect",
        new_callable=AsyncMock,
    )
    def test_unreachable_target_is_server_fault(self, mock_inspect, client):
        mock_inspect.side_effect = PageFetchError("Failed to fetch URL: Not Found")

        res = client.post("/api/v1/inspect", json={"url": "example.com/nope"})

        assert res.status_code == 500
        assert res.json() == {"error": "Failed to fetch URL: Not Found"}
        mock_inspect.assert_awaited_once_with("example.com/nope")

    @patch(
        "app.features.inspector.routes.inspect.InspectionService.inspect",
        new_callable=AsyncMock,
    )
    def test_unexpected_error_hides_details(self, mock_inspect, test_app, settings):
        from fastapi.testclient import TestClient

        mock_inspect.side_effect = KeyError("secret internals")
        test_app.dependency_overrides[get_settings] = lambda: settings
        try:
            with TestClient(test_app, raise_server_exceptions=False) as tc:
                res = tc.post("/api/v1/inspect", json={"url": "example.com"})
        finally:
            test_app.dependency_overrides.clear()

        assert res.status_code == 500
        assert res.json() == {"error": "Internal server error"}

    def test_non_json_body_is_client_fault(self, client):
        res = client.post(
            "/api/v1/inspect", content="not json", headers={"content-type": "application/json"}
        )
        assert res.status_code == 400
        assert "error" in res.json()

    def test_control_character_url_is_client_fault(self, client):
        res = client.post("/api/v1/inspect", json={"url": "exa\tmple.com"})

        assert res.status_code == 400
        assert res.json() == {"error": "Invalid URL format: contains control characters"}
