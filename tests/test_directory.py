"""Tests for the user directory."""
import threading

import pytest

from chat_lodge.chat_errors import DuplicateNameError, EmptyNameError
from chat_lodge.directory import Directory


def test_sign_in_returns_user():
    directory = Directory()
    user = directory.sign_in("bobo")
    assert user.user == "bobo"
    assert "bobo" in directory
    assert len(directory) == 1


def test_duplicate_name_rejected():
    directory = Directory()
    directory.sign_in("bobo")
    with pytest.raises(DuplicateNameError) as exc_info:
        directory.sign_in("bobo")
    assert exc_info.value.name == "bobo"
    assert directory.list() == ["bobo"]


def test_names_are_case_sensitive():
    directory = Directory()
    directory.sign_in("bobo")
    directory.sign_in("Bobo")
    assert directory.list() == ["Bobo", "bobo"]


def test_empty_name_rejected():
    directory = Directory()
    with pytest.raises(EmptyNameError):
        directory.sign_in("")
    assert directory.list() == []


def test_list_is_sorted_regardless_of_sign_in_order():
    directory = Directory()
    for name in ["frank", "adam", "zoe", "carla"]:
        directory.sign_in(name)
    assert directory.list() == ["adam", "carla", "frank", "zoe"]


def test_list_is_a_snapshot():
    directory = Directory()
    directory.sign_in("adam")
    snapshot = directory.list()
    directory.sign_in("frank")
    assert snapshot == ["adam"]


def test_concurrent_duplicate_sign_ins_admit_exactly_one():
    directory = Directory()
    results = []
    barrier = threading.Barrier(8)

    def worker():
        barrier.wait()
        try:
            directory.sign_in("bobo")
            results.append("ok")
        except DuplicateNameError:
            results.append("dup")

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count("ok") == 1
    assert results.count("dup") == 7
    assert directory.list() == ["bobo"]
