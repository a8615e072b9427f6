import pytest

from chatrelay.adapters.chat.mapper import (
    MISSING_INPUT_ERROR,
    body_to_messages,
    missing_input_payload,
)
from chatrelay.core.errors import MissingChatInputError


def test_prompt_with_system_puts_system_first():
    messages = body_to_messages({"prompt": "Hello!", "system": "Be nice"})
    assert messages == [
        {"role": "system", "content": "Be nice"},
        {"role": "user", "content": "Hello!"},
    ]


def test_prompt_without_system_yields_single_user_message():
    assert body_to_messages({"prompt": "Hello!"}) == [{"role": "user", "content": "Hello!"}]


def test_empty_system_is_skipped():
    assert body_to_messages({"prompt": "Hello!", "system": ""}) == [{"role": "user", "content": "Hello!"}]


def test_messages_array_is_passed_through_untouched():
    original = [
        {"role": "assistant", "content": "earlier"},
        {"role": "system", "content": "late system"},
        {"role": "tool", "content": 42, "extra": True},
        "not-even-a-dict",
    ]
    messages = body_to_messages({"messages": original, "prompt": "ignored", "system": "ignored"})
    assert messages is original


def test_empty_messages_array_still_counts_as_present():
    assert body_to_messages({"messages": [], "prompt": "ignored"}) == []


def test_non_list_messages_falls_back_to_prompt():
    messages = body_to_messages({"messages": {"role": "user"}, "prompt": "hi"})
    assert messages == [{"role": "user", "content": "hi"}]


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"system": "only a system prompt"},
        {"prompt": ""},
        {"prompt": None},
        {"prompt": 0},
        {"prompt": False},
        {"prompt": float("nan")},
        {"messages": "nope"},
        ["not", "an", "object"],
        "plain string",
        None,
    ],
)
def test_missing_input_raises(body):
    with pytest.raises(MissingChatInputError) as exc_info:
        body_to_messages(body)
    assert str(exc_info.value) == MISSING_INPUT_ERROR


def test_missing_input_payload_documents_both_shapes():
    payload = missing_input_payload()
    assert payload["error"] == MISSING_INPUT_ERROR
    assert payload["example"]["messages"][0]["role"] == "system"
    assert payload["simpleExample"] == {
        "prompt": "Hello!",
        "system": "You are a helpful assistant",
    }


@pytest.mark.parametrize("prompt", [[], {}, "0", 1, -2.5, True])
def test_non_empty_json_values_count_as_a_prompt(prompt):
    assert body_to_messages({"prompt": prompt}) == [{"role": "user", "content": prompt}]


@pytest.mark.parametrize("system", [None, False, 0, ""])
def test_falsy_system_values_are_skipped(system):
    assert body_to_messages({"prompt": "hi", "system": system}) == [{"role": "user", "content": "hi"}]


def test_empty_object_system_is_kept():
    assert body_to_messages({"prompt": "hi", "system": {}}) == [
        {"role": "system", "content": {}},
        {"role": "user", "content": "hi"},
    ]
