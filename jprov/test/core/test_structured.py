from __future__ import annotations

from jprov.core.structured import (
    as_str_dict,
    blank_to_none,
    get_bool,
    get_float,
    get_int,
    get_list,
    get_str,
    get_table,
)


def test_get_str_blank_is_none() -> None:
    data: dict[str, object] = {"a": " x ", "b": "", "c": "   ", "d": 3}
    assert get_str(data, "a") == "x"
    assert get_str(data, "b") is None
    assert get_str(data, "c") is None
    assert get_str(data, "d") is None
    assert get_str(data, "missing") is None


def test_get_int_rejects_bool() -> None:
    data: dict[str, object] = {"n": 21, "flag": True, "s": "3"}
    assert get_int(data, "n") == 21
    assert get_int(data, "flag", -1) == -1
    assert get_int(data, "s") == 0


def test_get_float_and_bool() -> None:
    data: dict[str, object] = {"f": 1, "b": True, "s": "true"}
    assert get_float(data, "f") == 1.0
    assert get_float(data, "b") is None
    assert get_bool(data, "b") is True
    assert get_bool(data, "s") is False


def test_tables_and_lists() -> None:
    data: dict[str, object] = {"t": {"k": 1}, "l": [1, 2], "bad": {1: "x"}}
    assert get_table(data, "t") == {"k": 1}
    assert get_table(data, "bad") is None
    assert get_list(data, "l") == [1, 2]
    assert get_list(data, "t") is None
    assert as_str_dict([]) is None


def test_blank_to_none_recurses() -> None:
    data = {"a": "", "b": ["", "x"], "c": {"d": ""}, "e": 0}
    assert blank_to_none(data) == {"a": None, "b": [None, "x"], "c": {"d": None}, "e": 0}
