import pytest
from werkzeug.datastructures import MultiDict

from storefront.app.common.query import get_list, parse_float, parse_positive_int


@pytest.mark.parametrize(
    "raw, expected",
    [("7", 7), (" 2 ", 2), ("0", 1), ("-3", 1), ("abc", 1), ("", 1), (None, 1), ("2.5", 1)],
)
def test_parse_positive_int_falls_back_to_default(raw, expected):
    assert parse_positive_int(raw, 1) == expected


@pytest.mark.parametrize("raw, expected", [("12.5", 12.5), ("nan", 3.0), ("inf", 3.0), ("x", 3.0), (None, 3.0)])
def test_parse_float(raw, expected):
    assert parse_float(raw, 3.0) == expected


def test_get_list_merges_repeats_and_keeps_commas():
    args = MultiDict([("size", " S "), ("size", "42,5"), ("size", "S"), ("size", ""), ("size", "L")])
    assert get_list(args, "size") == ["S", "42,5", "L"]
    assert get_list(args, "missing") == []
