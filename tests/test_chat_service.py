"""
Tests for chat relay helpers and the session preference store
"""
import json

import pytest

from gateway.core.utils import sanitize, smart_parse
from gateway.data.chat_client import MockChat, extract_answer, webhook_params
from gateway.services.chat_service import gather_prefs, session_from, summarize_prefs
from gateway.services.prefs_store import PrefsStore


def test_sanitize_drops_blank_values():
    assert sanitize({"a": " x ", "b": "", "c": None, "d": 3}) == {"a": "x", "d": "3"}
    assert sanitize(None) == {}


def test_gather_prefs_from_bracket_params():
    query = {"question": "hi", "prefs[community]": "JVC", "prefs[budget]": "  "}
    assert gather_prefs(query) == {"community": "JVC"}


def test_gather_prefs_from_json_only_without_bracket_params():
    assert gather_prefs({"prefs_json": '{"style": "modern"}'}) == {"style": "modern"}
    assert gather_prefs({"prefs[ptype]": "villa", "prefs_json": '{"style": "modern"}'}) == {"ptype": "villa"}


@pytest.mark.parametrize("blob", ["not json", "[1, 2]", '"text"'])
def test_gather_prefs_ignores_bad_json(blob):
    assert gather_prefs({"prefs_json": blob}) == {}


def test_session_aliases():
    assert session_from({"sessionId": "a"}) == "a"
    assert session_from({"sessioniD": "b"}) == "b"
    assert session_from({}) == "default-session"


def test_summary():
    assert summarize_prefs({}) == "You currently have no saved preferences."
    prefs = {"budget": "flexible", "community": "JVC", "unknown": "x"}
    assert summarize_prefs(prefs) == "Your saved preferences are — community: JVC, budget mindset: flexible."


def test_prefs_store_merge_is_right_biased():
    store = PrefsStore(prefix="test-prefs")
    store.merge("s", {"community": "JVC", "style": "modern"})
    merged = store.merge("s", {"style": "classic"})

    assert merged == {"community": "JVC", "style": "classic"}
    assert store.get("s") == merged
    assert store.get("other") == {}


@pytest.mark.parametrize("payload, expected", [
    ('{"answer": " Hello "}', "Hello"),
    ('{"output": {"answer": "nested"}}', "nested"),
    ('{"output": {"state": "thinking"}}', "thinking"),
    ('{"output": "plain output"}', "plain output"),
    ('{"message": "msg"}', "msg"),
    (json.dumps(json.dumps({"answer": "double"})), "double"),
    ("just text", "just text"),
])
def test_extract_answer(payload, expected):
    assert extract_answer(payload) == expected


def test_extract_answer_falls_back_to_json():
    assert extract_answer('{"count": 2}') == '{"count": 2}'
    assert extract_answer('{"answer": "   "}') == '{"answer": "   "}'


def test_smart_parse_passthrough_and_empty():
    assert smart_parse({"a": 1}) == {"a": 1}
    assert smart_parse("  ") is None


def test_webhook_params_add_aliases():
    params = webhook_params("hi", "s1", {"community": "JVC", "ptype": "villa", "bedrooms": 2, "style": ""})

    assert params["question"] == "hi"
    assert params["sessionId"] == "s1"
    assert params["locations"] == "JVC"
    assert params["propertyType"] == "villa"
    assert params["bedroom"] == "2"
    assert "style" not in params
    assert json.loads(params["prefs_json"])["locations"] == "JVC"


@pytest.mark.asyncio
async def test_mock_chat_mentions_prefs():
    reply = await MockChat().ask("where?", "s", {"community": "JVC"})
    assert reply.ok
    assert "community=JVC" in reply.answer
