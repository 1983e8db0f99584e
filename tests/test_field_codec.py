"""
Tests for projecting node rows into an editing buffer and back.
"""

import pytest

from jsongraph.field_codec import (
    EditingBuffer,
    Row,
    format_node_content,
    parse_literal,
    project_for_editing,
    reconstruct_from_editing,
    rows_from_value,
    value_to_text,
)
from jsongraph.json_path import MISSING


class TestProjectForEditing:

    def test_no_rows_is_empty_object_text(self):
        assert project_for_editing([]) == EditingBuffer(text="{}")
        assert project_for_editing(None) == EditingBuffer(text="{}")

    def test_single_unkeyed_row_is_free_text(self):
        buf = project_for_editing([Row(key=None, value=42, type='number')])
        assert not buf.uses_fields
        assert buf.text == "42"

    def test_unkeyed_string_is_not_quoted(self):
        buf = project_for_editing([Row(key=None, value="hello")])
        assert buf.text == "hello"

    def test_keyed_scalars_become_fields(self):
        rows = rows_from_value({"name": "Ada", "active": True, "notes": None, "tags": ["x"]})
        buf = project_for_editing(rows)
        assert buf.uses_fields
        assert buf.fields == {"name": "Ada", "active": "true", "notes": "null"}
        assert list(buf.fields) == ["name", "active", "notes"]

    def test_only_container_rows_is_empty_object_text(self):
        rows = rows_from_value({"a": {}, "b": [1, 2]})
        assert project_for_editing(rows) == EditingBuffer(text="{}")

    def test_missing_value_projects_to_empty_text(self):
        buf = project_for_editing([Row(key="k"), Row(key="n", value=1, type='number')])
        assert buf.fields == {"k": "", "n": "1"}


class TestReconstruct:

    def test_literals_are_typed(self):
        buf = EditingBuffer.from_fields({"a": "true", "b": "1.5", "c": "null", "d": "[1, 2]"})
        assert reconstruct_from_editing(buf) == {"a": True, "b": 1.5, "c": None, "d": [1, 2]}

    def test_unparseable_field_stays_a_string(self):
        buf = EditingBuffer.from_fields({"greeting": "hello", "n": "7"})
        assert reconstruct_from_editing(buf) == {"greeting": "hello", "n": 7}

    def test_free_text(self):
        assert reconstruct_from_editing(EditingBuffer.from_text('{"a": 1}')) == {"a": 1}
        assert reconstruct_from_editing(EditingBuffer.from_text("not json")) == "not json"

    def test_empty_text_becomes_empty_string(self):
        assert reconstruct_from_editing(EditingBuffer.from_text("")) == ""

    def test_numeric_looking_string_is_coerced(self):
        # Best-effort literal parsing: an unedited "123" comes back as a number.
        rows = rows_from_value({"zip": "123"})
        assert reconstruct_from_editing(project_for_editing(rows)) == {"zip": 123}

    def test_round_trip_of_scalar_object(self):
        value = {"name": "Ada", "active": False, "credit": 12.5, "notes": None}
        assert reconstruct_from_editing(project_for_editing(rows_from_value(value))) == value


@pytest.mark.parametrize("text", ["NaN", "Infinity", "-Infinity", "[NaN]"])
def test_non_standard_constants_stay_strings(text):
    assert parse_literal(text) == text


def test_value_to_text():
    assert value_to_text(MISSING) == ""
    assert value_to_text(None) == "null"
    assert value_to_text(False) == "false"
    assert value_to_text("plain") == "plain"
    assert value_to_text({"a": "é"}) == '{"a": "é"}'


def test_buffer_set_field():
    buf = EditingBuffer.from_fields({"a": "1"})
    buf.set_field("a", "2")
    assert buf.fields == {"a": "2"}
    with pytest.raises(KeyError):
        buf.set_field("missing", "x")
    with pytest.raises(ValueError):
        EditingBuffer.from_text("x").set_field("a", "1")


def test_buffer_copy_is_independent():
    buf = EditingBuffer.from_fields({"a": "1"})
    clone = buf.copy()
    clone.set_field("a", "2")
    assert buf.fields == {"a": "1"}


def test_rows_from_value():
    rows = rows_from_value({"s": "x", "o": {"k": 1, "j": 2}, "l": [1, 2, 3]})
    assert [(r.key, r.type, r.child_count) for r in rows] == [
        ("s", "string", None),
        ("o", "object", 2),
        ("l", "array", 3),
    ]
    assert rows_from_value([1, 2]) == []
    assert rows_from_value(True) == [Row(key=None, value=True, type='boolean')]


def test_format_node_content():
    assert format_node_content([]) == "{}"
    assert format_node_content([Row(key=None, value="hi")]) == "hi"
    rows = rows_from_value({"a": 1, "child": {"x": 1}})
    assert format_node_content(rows, indent=2) == '{\n  "a": 1\n}'
