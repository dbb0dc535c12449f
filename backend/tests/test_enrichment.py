"""Contact enrichment: FullEnrich client helpers, job lifecycle, webhook."""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio
import json
import uuid
from unittest.mock import AsyncMock, patch
from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from product_validator.database import Base, get_db
from product_validator.main import app
from product_validator.schemas.enrichment_schema import FullEnrichWebhookPayload, Prospect
from product_validator.services import http_client
from product_validator.services.enrichment_service import apply_webhook
from product_validator.services.errors import EnrichmentError
from product_validator.services.fullenrich_client import (
    FullEnrichClient,
    build_contact_payload,
    map_provider_status,
    parse_enrichment_results,
)

# ---------------------------------------------------------------------------
# Test database setup (file-based SQLite for compatibility)
# ---------------------------------------------------------------------------
TEST_DATABASE_URL = "sqlite:///./test_enrichment.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


client = TestClient(app)

BASE = "/api/product_validator"
WEBHOOK = "/api/webhook/fullenrich"

PROSPECT = {"id": "p1", "name": "Jane Doe", "title": "CFO", "company": "Acme Corp", "relevanceScore": 8}

FINISHED_PAYLOAD = {
    "id": "fe-123",
    "name": "product-validator",
    "status": "FINISHED",
    "datas": [
        {
            "custom": {"prospect_id": "p1"},
            "domain": "acme.com",
            "contact": {
                "most_probable_email": "jane@acme.com",
                "most_probable_email_status": "DELIVERABLE",
                "most_probable_phone": "+1 415 555 0101",
                "profile": {"linkedin_url": "https://linkedin.com/in/janedoe"},
            },
        }
    ],
}


@pytest.fixture(autouse=True)
def setup_db():
    """Create tables before each test, drop after."""
    app.dependency_overrides[get_db] = override_get_db
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    app.dependency_overrides.pop(get_db, None)


def _start(prospects=None):
    resp = client.post(f"{BASE}/enrich-contacts", json={"prospects": prospects or [PROSPECT]})
    assert resp.status_code == 200
    return resp.json()


# ===================================================================== #
#  Unit tests: FullEnrich helpers                                         #
# ===================================================================== #

class TestStatusMapping:
    def test_known_statuses(self):
        assert map_provider_status("CREATED") == "pending"
        assert map_provider_status("IN_PROGRESS") == "in_progress"
        assert map_provider_status("FINISHED") == "completed"
        assert map_provider_status("CREDITS_INSUFFICIENT") == "failed"
        assert map_provider_status("canceled") == "failed"

    def test_unknown_status_keeps_running(self):
        assert map_provider_status(None) == "in_progress"
        assert map_provider_status("SOMETHING_NEW") == "in_progress"


class TestContactPayload:
    def test_full_prospect(self):
        prospect = Prospect(
            id="p9",
            name="Jean Claude Van Damme",
            company="Acme",
            email="jc@acme.io",
            linkedin="https://linkedin.com/in/jcvd",
        )
        assert build_contact_payload(prospect) == {
            "firstname": "Jean",
            "lastname": "Claude Van Damme",
            "enrich_fields": ["contact.emails", "contact.phones"],
            "custom": {"prospect_id": "p9"},
            "domain": "acme.io",
            "company_name": "Acme",
            "linkedin_url": "https://linkedin.com/in/jcvd",
        }

    def test_free_mail_domain_is_not_a_company(self):
        payload = build_contact_payload(Prospect(name="Jane", email="jane@gmail.com"))
        assert "domain" not in payload
        assert payload["lastname"] == ""
        # no id: the email is the matching key
        assert payload["custom"] == {"prospect_id": "jane@gmail.com"}


class TestParseResults:
    def test_most_probable_values(self):
        results = parse_enrichment_results(FINISHED_PAYLOAD)
        contact = results["p1"]
        assert contact.email == "jane@acme.com"
        assert contact.phone == "+1 415 555 0101"
        assert contact.company_website == "https://acme.com"
        assert contact.linkedin_url == "https://linkedin.com/in/janedoe"
        assert contact.confidence_score == 95

    def test_list_fallbacks_and_default_confidence(self):
        payload = {"datas": [{
            "custom": {"prospect_id": "p2"},
            "contact": {
                "emails": [{"email": ""}, {"email": "bob@corp.com"}],
                "phones": [{"number": "+44 20 7946 0958"}],
            },
        }]}
        contact = parse_enrichment_results(payload)["p2"]
        assert contact.email == "bob@corp.com"
        assert contact.phone == "+44 20 7946 0958"
        assert contact.confidence_score == 50

    def test_nothing_found(self):
        payload = {"datas": [{"custom": {"prospect_id": "p3"}, "contact": {}}]}
        contact = parse_enrichment_results(payload)["p3"]
        assert contact.email is None
        assert contact.confidence_score is None

    def test_rows_without_prospect_id_are_ignored(self):
        payload = {"datas": [{"contact": {"most_probable_email": "x@y.com"}}, "junk"]}
        assert parse_enrichment_results(payload) == {}


class TestFullEnrichClient:
    def _run(self, monkeypatch, handler, coro_factory):
        monkeypatch.setattr(http_client.RetryConfig, "INITIAL_BACKOFF", 0)

        async def run():
            transport_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
            monkeypatch.setattr(http_client, "_client", transport_client)
            try:
                return await coro_factory(FullEnrichClient(api_key="fe-key"))
            finally:
                await transport_client.aclose()

        return asyncio.run(run())

    def test_requires_api_key(self):
        with pytest.raises(EnrichmentError):
            FullEnrichClient()

    def test_start_bulk_enrichment(self, monkeypatch):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers["authorization"]
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"enrichment_id": "fe-9"})

        prospects = [Prospect(id="p1", name="Jane Doe")]
        enrichment_id = self._run(
            monkeypatch,
            handler,
            lambda fe: fe.start_bulk_enrichment(prospects, "https://validator.example/api/webhook/fullenrich"),
        )

        assert enrichment_id == "fe-9"
        assert seen["auth"] == "Bearer fe-key"
        assert seen["path"] == "/api/v1/contact/enrich/bulk"
        assert seen["body"]["webhook_url"] == "https://validator.example/api/webhook/fullenrich"
        assert seen["body"]["datas"][0]["custom"] == {"prospect_id": "p1"}

    def test_error_status_raises(self, monkeypatch):
        with pytest.raises(EnrichmentError) as exc_info:
            self._run(
                monkeypatch,
                lambda request: httpx.Response(402, json={"message": "no credits"}),
                lambda fe: fe.get_enrichment("fe-9"),
            )
        assert exc_info.value.status_code == 402


# ===================================================================== #
#  Integration tests: endpoints                                           #
# ===================================================================== #

class TestMockEnrichment:
    def test_missing_prospects(self):
        resp = client.post(f"{BASE}/enrich-contacts", json={"prospects": []})
        assert resp.status_code == 400
        assert resp.json() == {"error": "prospects is required"}

    def test_completed_immediately(self):
        data = _start([{"name": "Jane Doe", "company": "Acme Corp"}])

        assert data["status"] == "completed"
        assert data["provider"] == "mock"
        prospect = data["prospects"][0]
        assert len(prospect["id"]) == 12
        enriched = prospect["enriched"]
        assert enriched["email"] == "jane.doe@acmecorp.com"
        assert enriched["company_website"] == "https://acmecorp.com"
        assert enriched["phone"].startswith("+1-555-")
        assert 70 <= enriched["confidence_score"] <= 95

    def test_status_endpoint(self):
        started = _start()
        resp = client.get(f"{BASE}/enrichment-status/{started['enrichmentId']}")

        assert resp.status_code == 200
        data = resp.json()
        assert data == started
        assert data["prospects"][0]["relevanceScore"] == 8

    def test_unknown_id(self):
        resp = client.get(f"{BASE}/enrichment-status/{uuid.uuid4()}")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Enrichment not found"}

    def test_malformed_id(self):
        resp = client.get(f"{BASE}/enrichment-status/not-a-uuid")
        assert resp.status_code == 404


class TestFullEnrichFlow:
    def test_webhook_completes_job(self, monkeypatch):
        monkeypatch.setenv("FULLENRICH_API_KEY", "fe-key")
        with patch.object(FullEnrichClient, "start_bulk_enrichment", new=AsyncMock(return_value="fe-123")) as submit:
            started = _start()

        assert started["status"] == "in_progress"
        assert started["provider"] == "fullenrich"
        assert started["prospects"][0]["enriched"] is None
        assert submit.await_args.args[1] == (
            f"http://localhost:8000/api/webhook/fullenrich?job_id={started['enrichmentId']}"
        )

        resp = client.post(WEBHOOK, json=FINISHED_PAYLOAD)
        assert resp.status_code == 200
        assert resp.json() == {"received": True, "matched": True}

        with patch.object(FullEnrichClient, "get_enrichment", new=AsyncMock()) as poll:
            data = client.get(f"{BASE}/enrichment-status/{started['enrichmentId']}").json()

        poll.assert_not_awaited()
        assert data["status"] == "completed"
        enriched = data["prospects"][0]["enriched"]
        assert enriched["email"] == "jane@acme.com"
        assert enriched["confidence_score"] == 95

    def test_status_polls_while_running(self, monkeypatch):
        monkeypatch.setenv("FULLENRICH_API_KEY", "fe-key")
        with patch.object(FullEnrichClient, "start_bulk_enrichment", new=AsyncMock(return_value="fe-123")):
            started = _start()
        url = f"{BASE}/enrichment-status/{started['enrichmentId']}"

        with patch.object(FullEnrichClient, "get_enrichment", new=AsyncMock(return_value={"status": "IN_PROGRESS"})):
            assert client.get(url).json()["status"] == "in_progress"

        with patch.object(FullEnrichClient, "get_enrichment", new=AsyncMock(return_value=FINISHED_PAYLOAD)) as poll:
            data = client.get(url).json()

        poll.assert_awaited_once_with("fe-123")
        assert data["status"] == "completed"
        assert data["prospects"][0]["enriched"]["phone"] == "+1 415 555 0101"

    def test_polling_error_keeps_state(self, monkeypatch):
        monkeypatch.setenv("FULLENRICH_API_KEY", "fe-key")
        with patch.object(FullEnrichClient, "start_bulk_enrichment", new=AsyncMock(return_value="fe-123")):
            started = _start()

        failing = AsyncMock(side_effect=EnrichmentError("FullEnrich API error: 503", status_code=503))
        with patch.object(FullEnrichClient, "get_enrichment", new=failing):
            data = client.get(f"{BASE}/enrichment-status/{started['enrichmentId']}").json()

        assert data["status"] == "in_progress"

    def test_submission_failure(self, monkeypatch):
        monkeypatch.setenv("FULLENRICH_API_KEY", "fe-key")
        failing = AsyncMock(side_effect=EnrichmentError("FullEnrich API error: 402", status_code=402))
        with patch.object(FullEnrichClient, "start_bulk_enrichment", new=failing):
            data = _start()

        assert data["status"] == "failed"
        assert data["error"] == "FullEnrich API error: 402"

    def test_webhook_before_submission_returns(self, monkeypatch):
        monkeypatch.setenv("FULLENRICH_API_KEY", "fe-key")

        async def submit_and_deliver(prospects, url):
            # FullEnrich answers the webhook before the submit call has returned
            job_id = parse_qs(urlparse(url).query)["job_id"][0]
            db = TestingSessionLocal()
            try:
                job = apply_webhook(db, FullEnrichWebhookPayload.model_validate(FINISHED_PAYLOAD), job_id=job_id)
                assert job is not None
            finally:
                db.close()
            return "fe-123"

        with patch.object(FullEnrichClient, "start_bulk_enrichment", new=AsyncMock(side_effect=submit_and_deliver)):
            started = _start()

        assert started["status"] == "completed"
        assert started["prospects"][0]["enriched"]["email"] == "jane@acme.com"

        with patch.object(FullEnrichClient, "get_enrichment", new=AsyncMock()) as poll:
            data = client.get(f"{BASE}/enrichment-status/{started['enrichmentId']}").json()
        poll.assert_not_awaited()
        assert data["status"] == "completed"

    def test_webhook_matched_by_job_id(self, monkeypatch):
        monkeypatch.setenv("FULLENRICH_API_KEY", "fe-key")
        with patch.object(FullEnrichClient, "start_bulk_enrichment", new=AsyncMock(return_value="fe-123")):
            started = _start()

        resp = client.post(f"{WEBHOOK}?job_id={started['enrichmentId']}", json=FINISHED_PAYLOAD)
        assert resp.json() == {"received": True, "matched": True}

        other = dict(FINISHED_PAYLOAD, id="fe-999")
        resp = client.post(f"{WEBHOOK}?job_id={started['enrichmentId']}", json=other)
        assert resp.json() == {"received": True, "matched": False}

    def test_provider_failure_status(self, monkeypatch):
        monkeypatch.setenv("FULLENRICH_API_KEY", "fe-key")
        with patch.object(FullEnrichClient, "start_bulk_enrichment", new=AsyncMock(return_value="fe-123")):
            started = _start()

        client.post(WEBHOOK, json={"id": "fe-123", "status": "CREDITS_INSUFFICIENT"})
        data = client.get(f"{BASE}/enrichment-status/{started['enrichmentId']}").json()

        assert data["status"] == "failed"
        assert "CREDITS_INSUFFICIENT" in data["error"]


class TestWebhook:
    def test_unknown_enrichment(self):
        resp = client.post(WEBHOOK, json={"id": "nope", "status": "FINISHED"})
        assert resp.status_code == 200
        assert resp.json() == {"received": True, "matched": False}

    def test_missing_id(self):
        resp = client.post(WEBHOOK, json={"status": "FINISHED"})
        assert resp.json() == {"received": True, "matched": False}
