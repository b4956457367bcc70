import gc

import pytest

from serviceable.identity import IdentityTable


class Token:
    pass


class Equal:
    def __eq__(self, other):
        return True

    def __hash__(self):
        return 0


@pytest.fixture
def table() -> IdentityTable:
    return IdentityTable()


def test_set_and_get(table):
    token = Token()
    table[token] = "value"

    assert token in table
    assert table[token] == "value"
    assert table.get(token) == "value"
    assert len(table) == 1


def test_missing_key_raises(table):
    with pytest.raises(KeyError):
        table[Token()]


def test_equal_keys_are_distinct(table):
    first, second = Equal(), Equal()
    table[first] = 1

    assert second not in table
    assert table.get(second, "missing") == "missing"


def test_pop_and_delete(table):
    first, second = Token(), Token()
    table[first] = 1
    table[second] = 2

    assert table.pop(first) == 1
    assert table.pop(first, None) is None
    del table[second]

    assert len(table) == 0
    with pytest.raises(KeyError):
        del table[second]
    with pytest.raises(KeyError):
        table.pop(second)


def test_setdefault_returns_existing_value(table):
    token = Token()

    created = table.setdefault(token, [])
    created.append(1)

    assert table.setdefault(token, []) == [1]


def test_entries_are_reclaimed_with_their_key(table):
    token = Token()
    table[token] = "value"

    del token
    gc.collect()

    assert len(table) == 0
    assert list(table.keys()) == []


def test_keys_without_weak_reference_support_are_held(table):
    key = (1, 2)
    table[key] = "tuple"

    assert table[key] == "tuple"
    assert list(table) == [key]


def test_clear(table):
    tokens = [Token(), Token()]
    for token in tokens:
        table[token] = token

    table.clear()

    assert len(table) == 0
