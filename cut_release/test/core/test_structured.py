from __future__ import annotations

from cut_release.core.structured import (
    as_obj_list,
    as_str_dict,
    get_bool,
    get_float,
    get_int,
    get_str,
    get_table,
    str_items,
)


def test_as_str_dict() -> None:
    assert as_str_dict({"a": 1}) == {"a": 1}
    assert as_str_dict({1: "a"}) is None
    assert as_str_dict([]) is None


def test_as_obj_list() -> None:
    assert as_obj_list([1, "a"]) == [1, "a"]
    assert as_obj_list("a") is None


def test_getters() -> None:
    table: dict[str, object] = {
        "s": "  value ",
        "blank": " ",
        "b": True,
        "i": 3,
        "f": 1.5,
        "t": {"k": "v"},
    }
    assert get_str(table, "s") == "value"
    assert get_str(table, "blank") is None
    assert get_str(table, "i") is None
    assert get_bool(table, "b") is True
    assert get_bool(table, "i") is None
    assert get_int(table, "i") == 3
    assert get_int(table, "b") is None
    assert get_float(table, "i") == 3.0
    assert get_float(table, "f") == 1.5
    assert get_float(table, "b") is None
    assert get_table(table, "t") == {"k": "v"}
    assert get_table(table, "s") is None


def test_str_items() -> None:
    assert str_items(["a", 1, None, "b"]) == ["a", "b"]
