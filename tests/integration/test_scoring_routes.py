import pytest

from conftest import AI_REPORT, make_answers
from risk_analyzer.api.dependencies import get_narrative_service, get_scoring_engine
from risk_analyzer.domain.strategy.questionnaire import REQUIRED_FIELDS


class BrokenEngine:
    def score(self, answers):
        raise RuntimeError("ceiling table corrupted")


@pytest.mark.asyncio
@pytest.mark.integration
async def test_analyze_risk_returns_four_sections(client, engine, answers):
    resp = await client.post("/api/analyze-risk", json=answers)
    assert resp.status_code == 200
    data = resp.json()
    assert set(data) == {"scores", "diagnostics", "profile", "narrative"}
    assert data == engine.score(answers).to_dict()
    assert data["profile"]["riskCategory"] == "Growth"
    assert data["profile"]["archetype"]["name"] == "Strategic Navigator"


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize("field", REQUIRED_FIELDS)
async def test_analyze_risk_missing_field(client, field):
    answers = make_answers()
    del answers[field]
    resp = await client.post("/api/analyze-risk", json=answers)
    assert resp.status_code == 400
    assert resp.json() == {"error": f"Missing field: {field}"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_analyze_risk_non_numeric_answer(client):
    resp = await client.post("/api/analyze-risk", json=make_answers(liquidityBuffer="plenty"))
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing field: liquidityBuffer"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_analyze_risk_numeric_strings_accepted(client):
    answers = {field: str(value) for field, value in make_answers().items()}
    resp = await client.post("/api/analyze-risk", json=answers)
    assert resp.status_code == 200


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize("body", [b"{not json", b"", b"[1, 2, 3]"])
async def test_analyze_risk_unusable_body(client, body):
    resp = await client.post(
        "/api/analyze-risk",
        content=body,
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing field: timeHorizon"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_analyze_risk_internal_error_is_opaque(app, client, answers):
    app.dependency_overrides[get_scoring_engine] = lambda: BrokenEngine()
    resp = await client.post("/api/analyze-risk", json=answers)
    assert resp.status_code == 500
    data = resp.json()
    assert data["error"] == "Internal Server Error"
    assert "corrupted" not in data["message"]
    assert "scores" not in data


@pytest.mark.asyncio
@pytest.mark.integration
async def test_generate_report_success(client, fake_narrative, engine, answers):
    payload = engine.score(answers).to_dict()
    resp = await client.post("/api/generate-report", json=payload)
    assert resp.status_code == 200
    assert resp.json() == AI_REPORT
    assert fake_narrative.calls[0]["profile"] == payload["profile"]


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize("drop", ["scores", "diagnostics", "profile"])
async def test_generate_report_missing_payload(client, fake_narrative, engine, answers, drop):
    payload = engine.score(answers).to_dict()
    del payload[drop]
    resp = await client.post("/api/generate-report", json=payload)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing structured diagnostics payload"}
    assert fake_narrative.calls == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_generate_report_model_failure(app, client, failing_narrative, engine, answers):
    app.dependency_overrides[get_narrative_service] = lambda: failing_narrative
    resp = await client.post("/api/generate-report", json=engine.score(answers).to_dict())
    assert resp.status_code == 500
    assert resp.json() == {"error": "AI returned invalid JSON", "raw": "not json"}


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize(
    "path, error",
    [
        ("/api/v1/assessment/complete", "Missing field: timeHorizon"),
        ("/api/generate-report", "Missing structured diagnostics payload"),
        ("/api/hubspot-sync", "Email required"),
    ],
)
@pytest.mark.parametrize("body", [b"{not json", b"", b"[1, 2, 3]"])
async def test_unusable_body_is_client_error(client, path, error, body):
    resp = await client.post(path, content=body, headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json() == {"error": error}
