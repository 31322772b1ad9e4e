"""Tests for CSV/JSON conversion."""

import json

import pytest

from lending_admin.services.codec import (
    escape_csv_field,
    parse_csv,
    parse_json,
    to_csv,
    to_json,
)


class TestEscapeCsvField:
    @pytest.mark.parametrize("value, expected", [
        ("plain", "plain"),
        ("a,b", '"a,b"'),
        ('say "hi"', '"say ""hi"""'),
        ("two\nlines", '"two\nlines"'),
        ("cr\rhere", '"cr\rhere"'),
        (None, ""),
        (True, "true"),
        (12, "12"),
    ])
    def test_escaping(self, value, expected):
        assert escape_csv_field(value) == expected

    def test_objects_are_json_then_escaped(self):
        assert escape_csv_field({"a": 1, "b": 2}) == '"{""a"":1,""b"":2}"'


class TestToCsv:
    def test_header_and_rows(self):
        records = [{"id": "1", "name": "Tripod"}, {"id": "2", "name": "Lens, 50mm"}]
        assert to_csv(records, ["id", "name"]) == 'id,name\n1,Tripod\n2,"Lens, 50mm"'

    def test_missing_fields_are_empty(self):
        assert to_csv([{"id": "1"}], ["id", "name"]) == "id,name\n1,"

    def test_empty_list_gives_header_only(self):
        assert to_csv([], ["id", "name"]) == "id,name"

    def test_empty_list_without_fields(self):
        assert to_csv([], None) == ""

    def test_fields_default_to_first_record(self):
        assert to_csv([{"x": 1, "y": 2}]) == "x,y\n1,2"


class TestParseCsv:
    def test_basic(self):
        assert parse_csv("id,name\n1,Tripod\n") == [{"id": "1", "name": "Tripod"}]

    def test_blank_lines_skipped(self):
        text = "\n\nid,name\n\n1,Tripod\n   \n2,Lens\n"
        assert parse_csv(text) == [{"id": "1", "name": "Tripod"}, {"id": "2", "name": "Lens"}]

    def test_quoted_empty_line_is_a_row(self):
        assert parse_csv('id\n1\n""\n\n2\n') == [{"id": "1"}, {"id": ""}, {"id": "2"}]

    def test_quoted_fields(self):
        text = 'id,notes\n1,"a, b ""quoted"" c"\n'
        assert parse_csv(text) == [{"id": "1", "notes": 'a, b "quoted" c'}]

    def test_missing_trailing_fields_default_to_empty(self):
        assert parse_csv("a,b,c\n1\n") == [{"a": "1", "b": "", "c": ""}]

    @pytest.mark.parametrize("text", ["", None, "id,name", 42])
    def test_nothing_to_parse(self, text):
        assert parse_csv(text) == []


class TestParseJson:
    def test_array(self):
        assert parse_json('[{"a": 1}, {"a": 2}]') == [{"a": 1}, {"a": 2}]

    def test_bare_object_is_wrapped(self):
        assert parse_json('{"a": 1}') == [{"a": 1}]

    @pytest.mark.parametrize("text", ["{not json", "", None])
    def test_malformed_gives_empty_list(self, text):
        assert parse_json(text) == []


class TestRoundTrip:
    def test_csv_round_trip_keeps_values_as_strings(self):
        fields = ["id", "name", "notes", "count", "active"]
        records = [
            {"id": "a1", "name": "Camera", "notes": 'has "quotes", commas', "count": 3, "active": True},
            {"id": "a2", "name": "Multi\nline", "notes": None, "count": 0, "active": False},
        ]
        parsed = parse_csv(to_csv(records, fields))
        assert parsed == [
            {"id": "a1", "name": "Camera", "notes": 'has "quotes", commas', "count": "3", "active": "true"},
            {"id": "a2", "name": "Multi\nline", "notes": "", "count": "0", "active": "false"},
        ]

    def test_single_column_keeps_empty_values(self):
        records = [{"notes": "x"}, {"notes": ""}, {"notes": None}, {"notes": "y"}]
        text = to_csv(records, ["notes"])
        assert text == 'notes\nx\n""\n""\ny'
        assert parse_csv(text) == [{"notes": "x"}, {"notes": ""}, {"notes": ""}, {"notes": "y"}]

    def test_json_round_trip_is_exact(self):
        records = [
            {"id": "1", "nested": {"list": [1, 2, None]}, "flag": False, "text": "ไทย"},
            {"id": "2", "value": 1.5},
        ]
        assert parse_json(to_json(records)) == records

    def test_json_is_indented_two_spaces(self):
        assert to_json([{"a": 1}]) == json.dumps([{"a": 1}], indent=2)
