import string

import pytest

from core import ids


def test_new_id_is_eight_uppercase_hex_chars():
    for _ in range(50):
        value = ids.new_id()
        assert len(value) == 8
        assert all(ch in string.digits + "ABCDEF" for ch in value)


def test_new_id_values_differ():
    values = {ids.new_id() for _ in range(200)}
    assert len(values) == 200


def test_new_id_propagates_entropy_failure(monkeypatch):
    def broken(_nbytes):
        raise OSError("entropy source unavailable")

    monkeypatch.setattr(ids.secrets, "token_hex", broken)
    with pytest.raises(OSError, match="entropy"):
        ids.new_id()
