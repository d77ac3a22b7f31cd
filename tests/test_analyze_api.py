import pytest
from fastapi.testclient import TestClient

from sizewise.config import settings
from sizewise.main import app
from sizewise.routers import analyze as analyze_router
from sizewise.services.analysis import AnalysisService
from sizewise.services.retry import RetryPolicy
from sizewise.services.text_providers.rule import RuleBasedTextProvider


client = TestClient(app)
HEADERS = {"x-api-key": settings.api_key}

PRODUCT = {
    "url": "https://shop.example/tee-9",
    "title": "Crew Tee",
    "category": "t-shirt",
    "availableSizes": ["S", "M", "L"],
    "sizeChart": "Size | Chest | Length\n--- | --- | ---\nS | 92 | 68\nM | 98 | 70\nL | 104 | 72",
    "materials": [{"material": "Cotton", "percentage": 95}, {"material": "Spandex", "percentage": 5}],
}


async def _no_sleep(seconds: float) -> None:
    return None


class ScriptedProvider:
    def __init__(self, *responses: str) -> None:
        self.responses = list(responses)

    async def generate(self, prompt: str) -> str:
        return self.responses.pop(0)


@pytest.fixture
def use_provider():
    def _install(provider):
        service = AnalysisService(provider=provider, store=analyze_router.store, policy=RetryPolicy(sleep=_no_sleep))
        app.dependency_overrides[analyze_router.get_analysis_service] = lambda: service
        return service

    yield _install
    app.dependency_overrides.clear()


def test_analyze_with_rule_provider(use_provider):
    use_provider(RuleBasedTextProvider())
    r = client.post("/v1/analyze", json={"product": PRODUCT, "profile": {"chest": "96", "waist": "80"}}, headers=HEADERS)
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["url"] == PRODUCT["url"]
    assert data["sizeRecommendation"]["size"] == "M"
    assert data["userMeasurements"] == {"chest": 96.0, "waist": 80.0}
    assert data["sizeChart"]["headers"] == ["chest", "length"]
    assert data["materialProperties"]["stretch"] == 1

    stored = client.get("/v1/analysis", params={"url": PRODUCT["url"]}, headers=HEADERS)
    assert stored.status_code == 200
    assert stored.json()["sizeRecommendation"]["size"] == "M"

    latest = client.get("/v1/analysis", headers=HEADERS)
    assert latest.json()["url"] == PRODUCT["url"]


def test_analyze_without_measurements(use_provider):
    use_provider(RuleBasedTextProvider())
    r = client.post("/v1/analyze", json={"product": PRODUCT, "profile": {}}, headers=HEADERS)
    assert r.status_code == 422
    assert "add your measurements" in r.json()["detail"]


def test_analyze_invalid_ai_response(use_provider):
    use_provider(ScriptedProvider("hello", "hello again", "BEST SIZE: M"))
    r = client.post("/v1/analyze", json={"product": PRODUCT, "profile": {"chest": 96}}, headers=HEADERS)
    assert r.status_code == 502


def test_clear_analysis(use_provider):
    use_provider(RuleBasedTextProvider())
    client.post("/v1/analyze", json={"product": PRODUCT, "profile": {"chest": 96}}, headers=HEADERS)
    r = client.delete("/v1/analysis", params={"url": PRODUCT["url"]}, headers=HEADERS)
    assert r.json() == {"success": True}
    assert client.get("/v1/analysis", params={"url": PRODUCT["url"]}, headers=HEADERS).status_code == 404
    assert client.get("/v1/analysis", headers=HEADERS).status_code == 404


def test_normalize_endpoint():
    r = client.post("/v1/size-chart/normalize", json={"raw": "Size | Chest (in)\n--- | ---\nS | 36"}, headers=HEADERS)
    assert r.status_code == 200
    body = r.json()
    assert body["chart"]["entries"] == {"S": {"chest": 91.4}}
    assert body["table"] == "Size | chest\n--- | ---\nS | 91.4"
    assert body["fallback"] is False


def test_normalize_endpoint_rows_and_fallback():
    r = client.post(
        "/v1/size-chart/normalize",
        json={"headers": ["Size", "Waist"], "rows": [["30", "76"]]},
        headers=HEADERS,
    )
    assert r.json()["chart"]["entries"] == {"30": {"waist": 76.0}}

    r = client.post("/v1/size-chart/normalize", json={"raw": "Size | Chest", "available_sizes": ["S", "M"]}, headers=HEADERS)
    body = r.json()
    assert body["fallback"] is True
    assert list(body["chart"]["entries"]) == ["S", "M"]

    r = client.post("/v1/size-chart/normalize", json={"raw": "Size | Chest"}, headers=HEADERS)
    assert r.json()["chart"] is None
    assert r.json()["table"] == "Size chart data not available"


def test_stretch_endpoint():
    r = client.post("/v1/materials/stretch", json={"materials": [{"material": "spandex", "percentage": 20}]}, headers=HEADERS)
    assert r.json()["stretch"] == 2

    r = client.post("/v1/materials/stretch", json={"text": "95% Cotton 5% Elastane"}, headers=HEADERS)
    body = r.json()
    assert body["stretch"] == 1
    assert [m["material"] for m in body["materials"]] == ["Cotton", "Elastane"]


def test_parse_endpoint():
    text = "BEST SIZE: L\nCONFIDENCE: low\nREASONING: long torso\nALTERNATIVE SIZES:\n- XL\n- M: if fitted"
    r = client.post("/v1/recommendation/parse", json={"text": text}, headers=HEADERS)
    assert r.status_code == 200
    body = r.json()
    assert body["size"] == "L"
    assert body["alternativeSizes"] == [
        {"kind": "bare", "size": "XL"},
        {"kind": "described", "size": "M", "description": "if fitted"},
    ]

    r = client.post("/v1/recommendation/parse", json={"text": "REASONING: nothing else"}, headers=HEADERS)
    assert r.status_code == 422
