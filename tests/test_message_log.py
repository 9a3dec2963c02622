"""Tests for the ordered message log."""
from concurrent.futures import ThreadPoolExecutor

import pytest

from chat_lodge.chat_errors import EmptyMessageError, UnknownUserError
from chat_lodge.directory import Directory
from chat_lodge.message_log import MessageLog


@pytest.fixture
def log():
    directory = Directory()
    directory.sign_in("adam")
    directory.sign_in("frank")
    return MessageLog(directory)


def test_empty_log_lists_nothing(log):
    assert log.list() == []
    assert len(log) == 0


def test_append_assigns_sequential_indices(log):
    first = log.append("adam", "municipal waste")
    second = log.append("frank", "black sabbath")
    assert (first.index, first.user, first.text) == (0, "adam", "municipal waste")
    assert (second.index, second.user, second.text) == (1, "frank", "black sabbath")
    assert [m.index for m in log.list()] == [0, 1]


def test_unknown_user_rejected(log):
    with pytest.raises(UnknownUserError) as exc_info:
        log.append("ghost", "hi")
    assert exc_info.value.name == "ghost"
    assert len(log) == 0


def test_empty_text_rejected(log):
    with pytest.raises(EmptyMessageError):
        log.append("adam", "")
    assert len(log) == 0


def test_rejected_append_leaves_no_gap(log):
    log.append("adam", "one")
    with pytest.raises(UnknownUserError):
        log.append("ghost", "two")
    third = log.append("frank", "three")
    assert third.index == 1


def test_concurrent_appends_are_gapless(log):
    total = 200

    def send(i):
        return log.append("adam" if i % 2 else "frank", f"msg {i}").index

    with ThreadPoolExecutor(max_workers=16) as pool:
        indices = list(pool.map(send, range(total)))

    assert sorted(indices) == list(range(total))
    messages = log.list()
    assert [m.index for m in messages] == list(range(total))
    assert {m.text for m in messages} == {f"msg {i}" for i in range(total)}


def test_message_serializes_text_as_message(log):
    message = log.append("adam", "wewt")
    assert message.model_dump(by_alias=True) == {"index": 0, "user": "adam", "message": "wewt"}
