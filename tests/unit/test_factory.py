from __future__ import annotations

import time

import pytest

from botharness import factory
from botharness.domain.templates import CHAT_TEMPLATE, USER_TEMPLATE, merge
from botharness.errors import EntityValidationError
from botharness.factory import (
    AUDIO_MIME_TYPES,
    build_chat,
    build_command_update,
    build_message,
    build_update,
    build_user,
    fake_audio_payload,
)

AUDIO_DRAWS = 100
MAX_FILE_SIZE = 99999
MAX_FILE_ID = 999
CLOCK_TOLERANCE_SECONDS = 5


@pytest.mark.parametrize(
    "partial",
    [
        {},
        {"id": 42},
        {"username": "override", "first_name": "Ada"},
        {"id": 3, "language_code": "pt"},
    ],
)
def test_merge_keeps_every_template_key_and_prefers_partial(partial):
    merged = merge(partial, USER_TEMPLATE)

    assert set(USER_TEMPLATE) <= set(merged)
    for key, value in partial.items():
        assert merged[key] == value
    for key in set(USER_TEMPLATE) - set(partial):
        assert merged[key] == USER_TEMPLATE[key]


def test_merge_leaves_template_untouched():
    before = dict(CHAT_TEMPLATE)
    merged = merge({"id": 99, "type": "group"}, CHAT_TEMPLATE)
    merged["title"] = "changed after merge"

    assert dict(CHAT_TEMPLATE) == before


def test_templates_are_read_only():
    with pytest.raises(TypeError):
        USER_TEMPLATE["id"] = 2  # type: ignore[index]


@pytest.mark.parametrize("partial", [None, {}])
def test_build_user_without_overrides_is_the_template(partial):
    assert build_user(partial).raw_data() == dict(USER_TEMPLATE)


def test_build_user_applies_overrides():
    user = build_user({"id": 42, "username": "ada"})

    assert user.id == 42
    assert user.username == "ada"
    assert user.first_name == USER_TEMPLATE["first_name"]


def test_build_chat_uses_chat_template():
    chat = build_chat({"id": -100})

    assert chat.id == -100
    assert chat.type == "private"
    assert chat.all_members_are_administrators is False
    assert chat.username == CHAT_TEMPLATE["username"]


def test_build_message_links_user_and_chat_overrides():
    message = build_message({}, {"id": 42}, {"id": 7})

    assert message.from_user.id == 42
    assert message.chat.id == 7
    assert message.text == "dummy"
    assert isinstance(message.message_id, int)
    assert message.message_id != 0
    assert abs(message.date - time.time()) < CLOCK_TOLERANCE_SECONDS


def test_build_message_partial_overrides_synthesized_fields():
    message = build_message({"message_id": 5, "text": "hello", "date": 1_700_000_000})

    assert message.message_id == 5
    assert message.text == "hello"
    assert message.date == 1_700_000_000
    assert message.from_user.raw_data() == dict(USER_TEMPLATE)
    assert message.chat.raw_data() == dict(CHAT_TEMPLATE)


def test_build_message_accepts_field_name_for_sender():
    sender = {"id": 9, "is_bot": False, "first_name": "Nine"}

    message = build_message({"from_user": sender})

    assert message.from_user.id == 9
    assert message.from_user.first_name == "Nine"
    assert message.raw_data()["from"]["id"] == 9
    assert "from_user" not in message.raw_data()


def test_build_message_binds_bot_username():
    message = build_message({"text": "/help@helperbot"}, bot_username="helperbot")

    assert message.bot_username == "helperbot"
    assert message.command == "help"


def test_build_message_defaults_to_configured_bot_username():
    assert build_message().bot_username == "testbot"


def test_build_update_synthesizes_minimal_update():
    update = build_update()

    assert update.update_id > 0
    assert update.update_type == "message"
    assert update.message.message_id > 0
    assert update.message.chat.id > 0
    assert update.message.from_user is None
    assert abs(update.message.date - time.time()) < CLOCK_TOLERANCE_SECONDS


def test_build_update_wraps_given_data_verbatim():
    data = {
        "update_id": 10,
        "message": {
            "message_id": 11,
            "chat": {"id": 12, "type": "group"},
            "date": 1_700_000_000,
            "text": "verbatim",
        },
    }

    update = build_update(data)

    assert update.raw_data() == data


def test_build_update_surfaces_missing_envelope_fields():
    with pytest.raises(EntityValidationError) as excinfo:
        build_update({"message": {"message_id": 1, "chat": {"id": 1}, "date": 1}})

    assert excinfo.value.entity == "Update"
    assert "update_id" in str(excinfo.value)


@pytest.mark.parametrize("text", ["/start", "", "  /help with args", "ünïcödé ✓", "/"])
def test_build_command_update_keeps_text_exactly(text):
    update = build_command_update(text)

    assert update.message.text == text


def test_build_command_update_uses_full_templates():
    update = build_command_update("/start")

    assert update.message.from_user.raw_data() == dict(USER_TEMPLATE)
    assert update.message.chat.raw_data() == dict(CHAT_TEMPLATE)
    assert update.update_id > 0
    assert update.message.message_id > 0


def test_command_addressed_to_another_bot_is_ignored():
    assert build_command_update("/start@testbot go", bot_username="testbot").message.command == "start"
    assert build_command_update("/start@otherbot", bot_username="testbot").message.command is None
    assert build_command_update("plain text").message.command is None


def test_fake_audio_payload_stays_in_range():
    for _ in range(AUDIO_DRAWS):
        audio = fake_audio_payload()

        assert audio["mime_type"] in AUDIO_MIME_TYPES
        assert 1 <= audio["file_size"] <= MAX_FILE_SIZE
        assert 1 <= audio["file_id"] <= MAX_FILE_ID
        minutes, seconds = audio["duration"].split(":")
        assert 1 <= int(minutes) <= 99
        assert 1 <= int(seconds) <= 60
        assert audio["performer"] == "pytest"
        assert audio["title"] == "track from pytest"


def test_audio_mime_type_set_is_fixed():
    assert len(AUDIO_MIME_TYPES) == 5
    assert len(set(AUDIO_MIME_TYPES)) == 5


def test_seed_random_makes_ids_reproducible():
    factory.seed_random(1234)
    first = [factory.random_id() for _ in range(5)]
    factory.seed_random(1234)
    second = [factory.random_id() for _ in range(5)]
    factory.seed_random(None)

    assert first == second
    assert all(1 <= value <= factory.MAX_RANDOM_ID for value in first)
