import httpx
import pytest

from conftest import AI_REPORT, FakeContactSyncService, make_answers
from risk_analyzer.api.dependencies import get_assessment_service, get_contact_sync_service
from risk_analyzer.domain.models import ContactSyncError
from risk_analyzer.services.assessment_service import AssessmentService
from risk_analyzer.services.contact_sync_service import ContactSyncService
from risk_analyzer.services.narrative_service import NarrativeService


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize("body", [{}, {"email": ""}, {"email": "jordan.example.com"}, {"email": 42}])
async def test_hubspot_sync_requires_email(client, fake_contact_sync, body):
    resp = await client.post("/api/hubspot-sync", json=body)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Email required"}
    assert fake_contact_sync.contacts == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_hubspot_sync_created(client, fake_contact_sync):
    resp = await client.post(
        "/api/hubspot-sync",
        json={
            "email": "jordan@example.com",
            "firstName": "Jordan",
            "lastName": "Lee",
            "investableAssets": "$1M-$5M",
        },
    )
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "mode": "created"}
    contact = fake_contact_sync.contacts[0]
    assert contact.first_name == "Jordan"
    assert contact.investable_assets == "$1M-$5M"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_hubspot_sync_upstream_failure(app, client):
    failing = FakeContactSyncService(
        error=ContactSyncError("HubSpot sync failed", status_code=409, details={"message": "conflict"})
    )
    app.dependency_overrides[get_contact_sync_service] = lambda: failing
    resp = await client.post("/api/hubspot-sync", json={"email": "jordan@example.com"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "HubSpot sync failed", "details": {"message": "conflict"}}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_complete_assessment(client, fake_contact_sync):
    body = dict(make_answers(assets=2), email="jordan@example.com", firstName="Jordan")
    resp = await client.post("/api/v1/assessment/complete", json=body)
    assert resp.status_code == 200
    data = resp.json()
    assert data["report"] == AI_REPORT
    assert data["reportSource"] == "ai"
    assert data["contactSync"] == {"success": True, "mode": "created"}
    assert fake_contact_sync.contacts[0].investable_assets == "$100k-$500k"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_complete_assessment_without_email(client):
    resp = await client.post("/api/v1/assessment/complete", json=make_answers())
    assert resp.status_code == 200
    assert resp.json()["contactSync"]["skipped"] is True


@pytest.mark.asyncio
@pytest.mark.integration
async def test_complete_assessment_missing_answer(client, fake_narrative):
    answers = make_answers()
    del answers["dependents"]
    resp = await client.post("/api/v1/assessment/complete", json=answers)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing field: dependents"}
    assert fake_narrative.calls == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_questions_catalog(client):
    resp = await client.get("/api/v1/assessment/questions")
    assert resp.status_code == 200
    data = resp.json()
    assert data["sections"] == ["capacity", "behavioral", "calibration", "guardrails"]
    assert len(data["questions"]) == 19


@pytest.mark.asyncio
@pytest.mark.integration
async def test_questions_by_section(client):
    resp = await client.get("/api/v1/assessment/questions", params={"section": "calibration"})
    assert resp.status_code == 200
    questions = resp.json()["questions"]
    assert len(questions) == 5
    assert all(q["section"] == "calibration" for q in questions)


@pytest.mark.asyncio
@pytest.mark.integration
async def test_questions_unknown_section(client):
    resp = await client.get("/api/v1/assessment/questions", params={"section": "income"})
    assert resp.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert set(data["services"]) == {"api", "narrative", "contact_sync"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_complete_assessment_survives_wrong_shaped_upstreams(app, client, engine, test_settings):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "llm.test":
            return httpx.Response(200, json={"choices": [{"message": "plain"}]})
        return httpx.Response(200, json={"total": 1, "results": ["x"]})

    transport = httpx.MockTransport(handler)
    app.dependency_overrides[get_assessment_service] = lambda: AssessmentService(
        engine=engine,
        narrative_service=NarrativeService(settings=test_settings, transport=transport),
        contact_sync_service=ContactSyncService(settings=test_settings, transport=transport),
    )

    body = dict(make_answers(), email="jordan@example.com")
    resp = await client.post("/api/v1/assessment/complete", json=body)
    assert resp.status_code == 200
    data = resp.json()
    assert data["reportSource"] == "fallback"
    assert data["report"] == {"summary": data["narrative"]["executiveSummary"]}
    assert data["contactSync"] == {"success": False, "error": "HubSpot sync failed"}
