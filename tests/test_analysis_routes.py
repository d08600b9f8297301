import json
import os
import unittest

os.environ.setdefault("GITHUB_AI_TOKEN", "test-token")

from fastapi.testclient import TestClient

from config.settings import AppSettings
from main import create_app
from services.ai.errors import InferenceTransportError, RemoteAPIError


class _FakeGateway:
    model = "fake-model"

    def __init__(self, reply: str = "", exc: Exception = None):
        self.reply = reply
        self.exc = exc
        self.calls = []

    async def complete(self, prompt, params):
        self.calls.append((prompt, params))
        if self.exc is not None:
            raise self.exc
        return self.reply


def _client(variant: str, gateway: _FakeGateway, **overrides) -> TestClient:
    settings = AppSettings(api_key="test-token", variant=variant, **overrides)
    return TestClient(create_app(settings=settings, gateway=gateway))


REPORT_BODY = {
    "events": [{"date": "2024-12-01", "text": "ETF inflows hit record"}],
    "priceData": {"btc": {"open": 100, "close": 110}, "eth": {"open": 3000}},
}


class TestReportVariant(unittest.TestCase):
    def test_empty_body_is_rejected_without_remote_call(self):
        gateway = _FakeGateway("unused")
        client = _client("report", gateway)

        for kwargs in ({}, {"json": {}}, {"json": {"events": []}}):
            r = client.post("/analyze", **kwargs)
            self.assertEqual(r.status_code, 400)
            self.assertEqual(r.json(), {"error": "Missing events or priceData"})
        self.assertEqual(gateway.calls, [])

    def test_returns_free_text_analysis(self):
        reply = "<think>draft</think>\n\n# Market Report\nBullish.  "
        gateway = _FakeGateway(reply)
        r = _client("report", gateway).post("/analyze", json=REPORT_BODY)

        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {"analysis": reply})
        prompt, params = gateway.calls[0]
        self.assertIn("Change 10.00%", prompt)
        self.assertEqual(params.max_tokens, 2048)
        self.assertIsNone(params.temperature)

    def test_empty_events_list_is_allowed(self):
        gateway = _FakeGateway("ok")
        r = _client("report", gateway).post("/analyze", json={"events": [], "priceData": {}})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(len(gateway.calls), 1)

    def test_remote_error_payload_is_passed_through(self):
        error = {"code": "RateLimitReached", "message": "Too many requests"}
        gateway = _FakeGateway(exc=RemoteAPIError(429, error))
        r = _client("report", gateway).post("/analyze", json=REPORT_BODY)

        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json(), {"error": error})

    def test_economic_route_not_mounted(self):
        r = _client("report", _FakeGateway()).post("/analyze-economic", json={"economicData": {}})
        self.assertEqual(r.status_code, 404)


class TestInsightsVariant(unittest.TestCase):
    def test_structured_analysis(self):
        payload = {"marketSentiment": {"overall": "Bullish", "score": 7.2}}
        gateway = _FakeGateway("<think>plan</think>\n```json\n" + json.dumps(payload) + "\n```")
        r = _client("insights", gateway).post(
            "/analyze",
            json={
                "events": [{"date": "2024-12-02", "text": "CPI cooler than expected"}],
                "economicData": {"cpi": {"value": 2.7, "change": -0.2}},
                "uploadedFiles": [{"name": "notes.pdf"}],
            },
        )

        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["analysis"], payload)
        self.assertTrue(body["timestamp"].endswith("Z"))
        prompt, params = gateway.calls[0]
        self.assertIn("UPLOADED FILES: 1 files", prompt)
        self.assertEqual((params.max_tokens, params.temperature), (2048, 0.7))

    def test_unparseable_reply_degrades_to_fallback(self):
        raw = "<think>hmm</think>I am not able to produce JSON today."
        r = _client("insights", _FakeGateway(raw)).post("/analyze", json={})

        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["analysis"], {"error": "Parsing failed", "raw": raw})

    def test_schema_validation_when_enabled(self):
        r = _client("insights", _FakeGateway('{"a": 1}'), validate_schema=True).post("/analyze")

        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["analysis"], {"error": "Schema validation failed", "raw": '{"a": 1}'})

    def test_transport_error_message(self):
        gateway = _FakeGateway(exc=InferenceTransportError("connection refused"))
        r = _client("insights", gateway).post("/analyze", json={})

        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json(), {"error": "connection refused"})

    def test_invalid_body_is_bad_request(self):
        gateway = _FakeGateway("{}")
        r = _client("insights", gateway).post("/analyze", json={"events": "not-a-list"})

        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["error"], "Invalid request body")
        self.assertEqual(gateway.calls, [])

    def test_economic_requires_data(self):
        gateway = _FakeGateway("unused")
        r = _client("insights", gateway).post("/analyze-economic", json={})

        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json(), {"error": "Missing economicData"})
        self.assertEqual(gateway.calls, [])

    def test_economic_returns_unparsed_text(self):
        reply = '{"economicAssessment": "Cooling", "riskLevel": "Medium"}'
        gateway = _FakeGateway(reply)
        r = _client("insights", gateway).post(
            "/analyze-economic", json={"economicData": {"fedRate": {"value": 4.5}}}
        )

        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {"analysis": reply})
        prompt, params = gateway.calls[0]
        self.assertIn('"fedRate"', prompt)
        self.assertEqual((params.max_tokens, params.temperature), (512, 0.6))

    def test_economic_text_is_verbatim(self):
        reply = "<think>x</think>\n  answer  "
        r = _client("insights", _FakeGateway(reply)).post(
            "/analyze-economic", json={"economicData": {"cpi": {"value": 3}}}
        )

        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {"analysis": reply})

    def test_non_finite_json_reply_degrades_to_fallback(self):
        raw = "```json\n{\"score\": NaN}\n```"
        r = _client("insights", _FakeGateway(raw)).post("/analyze", json={})

        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["analysis"], {"error": "Parsing failed", "raw": raw})


class TestHealthAndCors(unittest.TestCase):
    def test_health_makes_no_remote_call(self):
        gateway = _FakeGateway(exc=RuntimeError("should not be called"))
        for variant in ("insights", "report"):
            r = _client(variant, gateway, model="deepseek/DeepSeek-R1-0528").get("/health")
            self.assertEqual(r.status_code, 200)
            body = r.json()
            self.assertEqual(body["status"], "OK")
            self.assertEqual(body["model"], "deepseek/DeepSeek-R1-0528")
            self.assertTrue(body["timestamp"])
        self.assertEqual(gateway.calls, [])

    def test_cors_allow_list(self):
        client = _client(
            "insights", _FakeGateway(), allowed_origins=["https://aicryptoanalyzer.netlify.app"]
        )
        headers = {
            "Origin": "https://aicryptoanalyzer.netlify.app",
            "Access-Control-Request-Method": "POST",
        }
        r = client.options("/analyze", headers=headers)
        self.assertEqual(r.status_code, 200)
        self.assertEqual(
            r.headers.get("access-control-allow-origin"), "https://aicryptoanalyzer.netlify.app"
        )

        headers["Origin"] = "https://evil.example"
        r = client.options("/analyze", headers=headers)
        self.assertEqual(r.status_code, 400)


if __name__ == "__main__":
    unittest.main()
