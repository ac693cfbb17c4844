import json

import pytest
import requests

from agents.base import LLMConfigError, LLMQuotaError, LLMResponseError, OpenAIStyleClient
from agents.extractor import (
    ExtractionStructureError,
    ReportExtractorAgent,
    parse_extraction_reply,
)
from models import PARAMETER_KEYS

VALID_REPLY = {
    "parameters": {"pH": 7.9, "dissolvedOxygen": 5.2, "temperature": "29", "nitrite": None},
    "status": "Warning",
    "suggestions": ["Increase aeration."],
}


def make_response(status_code, body=None):
    resp = requests.Response()
    resp.status_code = status_code
    resp.url = "https://llm.test/v1/chat/completions"
    resp._content = json.dumps(body or {}).encode("utf-8")
    return resp


def chat_body(content):
    return {"choices": [{"message": {"content": content}}]}


@pytest.fixture
def agent():
    client = OpenAIStyleClient("https://llm.test", "vision-model", api_key="k")
    return ReportExtractorAgent(client=client, test_mode=False)


def test_parse_accepts_fenced_json():
    reply = "```json\n" + json.dumps(VALID_REPLY) + "\n```"
    result = parse_extraction_reply(reply)

    assert result["status"] == "Warning"
    assert result["parameters"]["pH"] == 7.9
    assert result["suggestions"] == ["Increase aeration."]


def test_parse_finds_object_inside_chatter():
    reply = "Here is the data you asked for: " + json.dumps(VALID_REPLY) + " Let me know!"
    assert parse_extraction_reply(reply)["status"] == "Warning"


def test_parse_always_returns_every_parameter():
    result = parse_extraction_reply(json.dumps(VALID_REPLY))

    assert set(result["parameters"]) == set(PARAMETER_KEYS)
    assert result["parameters"]["dissolvedOxygen"] == 5.2
    assert result["parameters"]["temperature"] is None
    assert result["parameters"]["nitrite"] is None
    assert result["parameters"]["iron"] is None


def test_parse_drops_unknown_and_non_numeric_parameters():
    reply = dict(VALID_REPLY, parameters={"pH": "high", "lead": 4, "salinity": True})
    params = parse_extraction_reply(json.dumps(reply))["parameters"]

    assert "lead" not in params
    assert params["pH"] is None
    assert params["salinity"] is None


@pytest.mark.parametrize("missing", ["parameters", "status", "suggestions"])
def test_parse_rejects_missing_fields(missing):
    reply = {k: v for k, v in VALID_REPLY.items() if k != missing}
    with pytest.raises(ExtractionStructureError, match="Invalid data structure"):
        parse_extraction_reply(json.dumps(reply))


def test_parse_rejects_non_json():
    with pytest.raises(LLMResponseError):
        parse_extraction_reply("I could not read the sheet.")


def test_parse_maps_unexpected_status_to_unknown():
    reply = dict(VALID_REPLY, status="Excellent")
    assert parse_extraction_reply(json.dumps(reply))["status"] == "Unknown"


def test_parse_wraps_single_suggestion_string():
    reply = dict(VALID_REPLY, suggestions="Do a partial water exchange.")
    assert parse_extraction_reply(json.dumps(reply))["suggestions"] == ["Do a partial water exchange."]


def test_test_mode_returns_canned_reading():
    result = ReportExtractorAgent(test_mode=True).analyze_report_image("AAAA", "image/png")

    assert result["status"] == "Safe"
    assert set(result["parameters"]) == set(PARAMETER_KEYS)


def test_missing_api_key_is_a_config_error(monkeypatch):
    calls = []
    monkeypatch.setattr(requests, "post", lambda *a, **kw: calls.append(a))
    client = OpenAIStyleClient("https://llm.test", "vision-model", api_key=None)
    agent = ReportExtractorAgent(client=client, test_mode=False)

    with pytest.raises(LLMConfigError):
        agent.analyze_report_image("AAAA", "image/png")
    assert calls == []


def test_request_carries_image_and_json_mode(monkeypatch, agent):
    reply = json.dumps(VALID_REPLY)
    sent = {}

    def fake_post(url, headers=None, json=None, timeout=None):
        sent.update(url=url, headers=headers, payload=json)
        return make_response(200, chat_body(reply))

    monkeypatch.setattr(requests, "post", fake_post)
    result = agent.analyze_report_image("AAAA", "image/png")

    assert result["status"] == "Warning"
    assert sent["url"] == "https://llm.test/v1/chat/completions"
    assert sent["headers"]["Authorization"] == "Bearer k"
    payload = sent["payload"]
    assert payload["model"] == "vision-model"
    assert payload["response_format"] == {"type": "json_object"}
    parts = payload["messages"][0]["content"]
    assert parts[0]["image_url"]["url"] == "data:image/png;base64,AAAA"
    assert "totalAmmoniaNitrogen" in parts[1]["text"]


def test_quota_rejection_gets_quota_message(monkeypatch, agent):
    monkeypatch.setattr(requests, "post", lambda *a, **kw: make_response(429, {"error": "rate"}))

    with pytest.raises(LLMQuotaError, match="quota limits"):
        agent.analyze_report_image("AAAA", "image/png")


def test_other_http_failure_is_wrapped(monkeypatch, agent):
    monkeypatch.setattr(requests, "post", lambda *a, **kw: make_response(500))

    with pytest.raises(LLMResponseError, match="Failed to analyze image. API error:") as info:
        agent.analyze_report_image("AAAA", "image/png")
    assert not isinstance(info.value, LLMQuotaError)


def test_structure_error_keeps_its_type_with_prefix(monkeypatch, agent):
    reply = json.dumps({"parameters": {}, "status": "Safe"})
    monkeypatch.setattr(requests, "post", lambda *a, **kw: make_response(200, chat_body(reply)))

    with pytest.raises(ExtractionStructureError, match="Failed to analyze image. API error: Invalid data"):
        agent.analyze_report_image("AAAA", "image/png")
