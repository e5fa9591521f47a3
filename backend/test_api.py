"""
Tests for the HTTP layer: the analysis endpoint and the two proxy endpoints.
"""

import json
from unittest.mock import MagicMock, patch

import pytest
import requests
from fastapi.testclient import TestClient

from main import app
from truthlens.api import claim_api, proxy_api
from truthlens.models.claim import SearchBundle, Verdict
from truthlens.services.analysis_service import AnalysisService, ClientSessions
from truthlens.services.search_service import SearchService
from truthlens.services.verdict_service import VerdictService


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def analysis(monkeypatch):
    search = MagicMock(spec=SearchService)
    search.search.return_value = SearchBundle(context="TODAY'S DATE: x\nNo news found.")
    verdict = MagicMock(spec=VerdictService)
    verdict.judge.return_value = Verdict(label="True", reasons=["Confirmed."], score=90)
    sessions = ClientSessions(AnalysisService(search=search, verdict=verdict, cooldown_seconds=5, clock=lambda: 0.0))
    monkeypatch.setattr(claim_api, "sessions", sessions)
    return search, verdict


class TestAnalyzeEndpoint:

    def test_root(self, client):
        assert client.get("/").status_code == 200

    def test_completed(self, client, analysis):
        response = client.post("/api/claims/analyze", json={"claim_text": "The Eiffel Tower is in Paris"})

        assert response.status_code == 200
        body = response.json()
        assert body["score"] == 90
        assert body["tier"]["label"] == "Verified Fact"
        assert body["heuristics"]["score"] == 100
        assert body["sources"] == []

    def test_validation_error(self, client, analysis):
        response = client.post("/api/claims/analyze", json={"claim_text": "   "})

        assert response.status_code == 400
        assert response.json()["detail"] == "Please enter a claim to analyze."

    def test_cooldown(self, client, analysis):
        client.post("/api/claims/analyze", json={"claim_text": "The Eiffel Tower is in Paris"})
        response = client.post("/api/claims/analyze", json={"claim_text": "The Louvre is in Paris"})

        assert response.status_code == 429
        assert "wait 5 seconds" in response.json()["detail"]

    def test_search_failure(self, client, analysis):
        search, verdict = analysis
        search.search.return_value = None

        response = client.post("/api/claims/analyze", json={"claim_text": "The Eiffel Tower is in Paris"})

        assert response.status_code == 502
        assert response.json()["detail"] == "System Error. Please try again."
        verdict.judge.assert_not_called()


class TestSearchProxy:

    def test_rejects_non_post(self, client):
        response = client.get("/api/proxy/search")

        assert response.status_code == 405
        assert response.text == "Method Not Allowed"

    def test_missing_key(self, client, monkeypatch):
        monkeypatch.setattr(proxy_api.search_service, "api_key", None)

        response = client.post("/api/proxy/search", json={"query": "India is in Iceland"})

        assert response.status_code == 500
        assert response.json() == {"error": "Server API Key Missing"}

    def test_forwards_upstream_json(self, client, monkeypatch):
        monkeypatch.setattr(proxy_api.search_service, "api_key", "tvly-test")
        upstream = MagicMock(status_code=200, ok=True)
        upstream.json.return_value = {"results": [{"title": "t", "url": "https://bbc.com/x"}]}

        with patch("truthlens.services.search_service.requests.post", return_value=upstream) as mock_post:
            response = client.post("/api/proxy/search", json={"query": "India is in Iceland"})

        assert response.status_code == 200
        assert response.json() == upstream.json.return_value
        assert mock_post.call_args.kwargs["json"]["api_key"] == "tvly-test"

    def test_upstream_exception(self, client, monkeypatch):
        monkeypatch.setattr(proxy_api.search_service, "api_key", "tvly-test")

        with patch("truthlens.services.search_service.requests.post",
                   side_effect=requests.exceptions.ConnectionError("offline")):
            response = client.post("/api/proxy/search", json={"query": "India is in Iceland"})

        assert response.status_code == 500
        assert response.json()["error"].startswith("Search Failed: ")

    def test_invalid_body(self, client, monkeypatch):
        monkeypatch.setattr(proxy_api.search_service, "api_key", "tvly-test")

        response = client.post("/api/proxy/search", content=b"not json")

        assert response.status_code == 500
        assert "error" in response.json()


class TestAnalyzeProxy:

    def test_rejects_non_post(self, client):
        assert client.put("/api/proxy/analyze").status_code == 405

    def test_missing_key(self, client, monkeypatch):
        monkeypatch.setattr(proxy_api.verdict_service, "api_key", "")

        response = client.post("/api/proxy/analyze", json={"userText": "x", "webContext": ""})

        assert response.status_code == 500
        assert response.json() == {"error": "Server API Key Missing"}

    def test_returns_model_content_verbatim(self, client, monkeypatch):
        monkeypatch.setattr(proxy_api.verdict_service, "api_key", "gsk-test")
        content = json.dumps({"score": 0, "reasons": ["India is in South Asia."], "confidence": 95})
        upstream = MagicMock(status_code=200, ok=True)
        upstream.json.return_value = {"choices": [{"message": {"content": content}}]}

        with patch("truthlens.services.verdict_service.requests.post", return_value=upstream) as mock_post:
            response = client.post("/api/proxy/analyze",
                                   json={"userText": "India is in Iceland", "webContext": None})

        assert response.status_code == 200
        assert response.text == content
        payload = mock_post.call_args.kwargs["json"]
        assert payload["model"] == "llama-3.3-70b-versatile"
        assert payload["temperature"] == 0.3
        assert "No live news found." in payload["messages"][0]["content"]

    def test_malformed_upstream(self, client, monkeypatch):
        monkeypatch.setattr(proxy_api.verdict_service, "api_key", "gsk-test")
        upstream = MagicMock(status_code=401, ok=False)
        upstream.json.return_value = {"error": {"message": "Invalid API Key"}}

        with patch("truthlens.services.verdict_service.requests.post", return_value=upstream):
            response = client.post("/api/proxy/analyze", json={"userText": "x"})

        assert response.status_code == 500
        assert response.json()["error"].startswith("Backend Error: ")
