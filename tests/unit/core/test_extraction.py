"""
Tests for best-effort JSON extraction.
"""

import pytest

from socrate.core.extraction import extract_json_object, parse_reply, Parsed, Degraded
from socrate.core.models import ConversationReply, SocraticReply


def test_bare_json_object_parsed():
    result = extract_json_object('{"response": "hi", "identified_problems": []}')

    assert isinstance(result, Parsed)
    assert result.data["response"] == "hi"


def test_json_inside_code_fence_parsed():
    text = '```json\n{"response": "hi", "needs_more_exploration": true}\n```'

    result = extract_json_object(text)

    assert isinstance(result, Parsed)
    assert result.data["needs_more_exploration"] is True


def test_json_surrounded_by_prose_parsed():
    text = 'Sure! Here is my answer: {"response": "ok", "nested": {"a": 1}} Hope it helps.'

    result = extract_json_object(text)

    assert isinstance(result, Parsed)
    assert result.data["nested"] == {"a": 1}


@pytest.mark.parametrize("text", [
    "I think you should relax",
    "",
    "} backwards {",
    "{ not json at all }",
    '{"response": "unterminated"',
])
def test_unusable_text_degrades_without_raising(text):
    result = extract_json_object(text)

    assert isinstance(result, Degraded)
    assert result.raw_text == text
    assert result.reason


@pytest.mark.parametrize("text", [
    '{"response": "hi", "n": ' + "9" * 5000 + "}",
    '{"a": ' + "[" * 100000 + "]" * 100000 + "}",
])
def test_decoder_limits_degrade_without_raising(text):
    result = extract_json_object(text)

    assert isinstance(result, Degraded)
    assert result.raw_text == text


def test_parse_reply_survives_oversized_integer():
    text = '{"response": "hi", "dialogue_depth": ' + "9" * 5000 + "}"

    reply = parse_reply(text, SocraticReply, SocraticReply.degraded)

    assert reply.response == text


def test_parse_reply_validates_against_model():
    reply = parse_reply(
        '{"response": "Why?", "dialogue_depth": 3, "ask_for_insight": false}',
        SocraticReply,
        SocraticReply.degraded,
    )

    assert reply.response == "Why?"
    assert reply.dialogue_depth == 3
    assert reply.core_insight_reached is False


def test_parse_reply_degrades_on_missing_required_field():
    raw = '{"identified_problems": ["x"]}'

    reply = parse_reply(raw, ConversationReply, ConversationReply.degraded)

    assert reply.response == raw
    assert reply.identified_problems == []
    assert reply.needs_more_exploration is False


def test_null_problem_list_treated_as_empty():
    reply = parse_reply(
        '{"response": "hi", "identified_problems": null}',
        ConversationReply,
        ConversationReply.degraded,
    )

    assert reply.response == "hi"
    assert reply.identified_problems == []


def test_degraded_socratic_reply_defaults():
    reply = parse_reply("plain words", SocraticReply, SocraticReply.degraded)

    assert reply.response == "plain words"
    assert reply.dialogue_depth == 1
    assert reply.core_insight_reached is False
    assert reply.ask_for_insight is False
