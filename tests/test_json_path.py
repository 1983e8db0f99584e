import pytest

from jsongraph.json_path import (
    MISSING,
    get_value_at_path,
    is_index,
    is_key,
    last_segment,
    normalize_path,
    path_to_string,
)


def test_root_renders_as_marker():
    assert path_to_string(()) == "$"
    assert path_to_string(None) == "$"


def test_display_quotes_keys_and_not_indices():
    assert path_to_string(("customer", 0, "name")) == '$["customer"][0]["name"]'
    assert path_to_string([3]) == "$[3]"


def test_string_digit_segment_is_a_key():
    assert path_to_string(("0",)) == '$["0"]'
    assert normalize_path(["0"]) != normalize_path([0])


def test_segment_kinds():
    assert is_index(0)
    assert not is_index(True)
    assert not is_index("0")
    assert is_key("a")
    assert not is_key(1)


def test_normalize_path():
    assert normalize_path(None) == ()
    assert normalize_path(["a", 1]) == ("a", 1)
    with pytest.raises(TypeError):
        normalize_path(["a", 1.5])
    with pytest.raises(TypeError):
        normalize_path([False])


def test_last_segment():
    assert last_segment(("a", 0)) == 0
    assert last_segment(()) is None


class TestGetValueAtPath:
    doc = {"a": {"b": [10, {"c": None}]}}

    def test_resolves_nested(self):
        assert get_value_at_path(self.doc, ("a", "b", 1, "c")) is None
        assert get_value_at_path(self.doc, ("a", "b", 0)) == 10

    def test_root(self):
        assert get_value_at_path(self.doc, ()) is self.doc

    def test_missing_raises(self):
        with pytest.raises(KeyError):
            get_value_at_path(self.doc, ("a", "x"))
        with pytest.raises(KeyError):
            get_value_at_path(self.doc, ("a", "b", 5))

    def test_key_on_list_does_not_resolve(self):
        assert get_value_at_path(self.doc, ("a", "b", "0"), default="nope") == "nope"

    def test_default_none_is_a_real_default(self):
        assert get_value_at_path(self.doc, ("zzz",), default=None) is None

    def test_index_reads_object_key_of_same_digits(self):
        assert get_value_at_path({"m": {"0": "zero"}}, ("m", 0)) == "zero"


def test_missing_is_falsy_singleton():
    assert not MISSING
    assert repr(MISSING) == "MISSING"
    assert type(MISSING)() is MISSING
