import copy
from typing import Optional

from pydantic import StrictInt, StrictStr

from core.coercion import coerce, coerce_field, dig
from core.models import MISSING, ProjectedRecord
from core.schema import validate


class Row(ProjectedRecord):
    n: Optional[StrictInt] = None


class Table(ProjectedRecord):
    rows: list[Row]


class Label(ProjectedRecord):
    a: StrictStr


def test_dig_walks_keys_and_indices():
    data = {"optionsByFare": [{"options": [{"displayPrice": "$120"}]}]}
    assert dig(data, "optionsByFare", 0, "options", 0, "displayPrice") == "$120"


def test_dig_returns_none_on_any_miss():
    data = {"a": [{"b": 1}]}
    assert dig(data, "a", 5, "b") is None
    assert dig(data, "a", "b") is None
    assert dig(data, "x") is None
    assert dig(None, "a") is None
    assert dig({"a": "str"}, "a", 0) is None


def test_valid_values_are_copied_verbatim(place_schema):
    geo = {"lat": 1, "lon": 2}
    out = coerce({"id": "p1", "score": 3, "geo": geo}, place_schema)
    assert out["id"] == "p1"
    assert out["score"] == 3
    assert out["geo"] is geo


def test_wrong_type_falls_back(place_schema, place_rules):
    out = coerce({"id": "p1", "score": "3", "open": "yes"}, place_schema, place_rules)
    assert out["score"] is None          # nullable fallback
    assert "open" not in out             # no fallback: key omitted


def test_without_rules_bad_fields_are_omitted(place_schema):
    out = coerce({"id": "p1", "score": "3"}, place_schema)
    assert out == {"id": "p1"}


def test_extractor_used_when_own_key_unusable(place_schema, place_rules):
    out = coerce({"id": "p1", "score": "n/a", "stats": {"score": 4.2}}, place_schema, place_rules)
    assert out["score"] == 4.2


def test_extractor_result_must_match_the_field_type(place_schema, place_rules):
    out = coerce({"id": "p1", "stats": {"score": "high"}}, place_schema, place_rules)
    assert out["score"] is None


def test_extractor_that_raises_is_treated_as_no_value(place_schema, place_rules):
    out = coerce({"id": "p1", "stats": "oops"}, place_schema, place_rules)
    assert out["score"] is None


def test_broken_nested_object_is_repaired(place_schema):
    out = coerce({"id": "p1", "geo": {"lat": 10, "lon": 2, "label": 5, "alt": 3}}, place_schema)
    assert out["geo"] == {"lat": 10, "lon": 2}


def test_nested_object_missing_a_required_field_is_dropped(place_schema):
    out = coerce({"id": "p1", "geo": {"lat": 10, "lon": "east"}}, place_schema)
    assert "geo" not in out


def test_broken_scalar_array_falls_back(place_schema):
    out = coerce({"id": "p1", "tags": ["a", 2]}, place_schema)
    assert "tags" not in out


def test_array_of_objects_is_repaired_element_wise():
    out = coerce({"rows": [{"n": 1}, {"n": "two"}]}, Table)
    assert out == {"rows": [{"n": 1}, {}]}
    assert validate(out, Table).ok

    out = coerce({"rows": [{"n": 1}, "junk"]}, Table)
    assert "rows" not in out


def test_passthrough_keeps_unknown_keys_but_not_bad_declared_ones(place_schema):
    out = coerce({"id": "p1", "open": "maybe", "vendor": {"x": 1}}, place_schema)
    assert out["vendor"] == {"x": 1}
    assert "open" not in out


def test_strip_policy_drops_unknown_keys():
    assert coerce({"a": "x", "b": 1}, Label) == {"a": "x"}


def test_non_mapping_input_yields_fallbacks(place_schema, place_rules):
    out = coerce(None, place_schema, place_rules)
    assert out == {"id": "", "score": None}
    assert coerce("garbage", place_schema, place_rules) == out


def test_input_is_not_mutated(place_schema, place_rules):
    raw = {"id": "p1", "score": "bad", "geo": {"lat": "x"}, "stats": {"score": 2}}
    before = copy.deepcopy(raw)
    coerce(raw, place_schema, place_rules)
    assert raw == before


def test_fallback_defaults_are_not_shared_between_records(place_schema):
    first = coerce_field({}, place_schema, "tags", fallback=[])
    first.append("mutated")
    assert coerce_field({}, place_schema, "tags", fallback=[]) == []


def test_coerce_field_missing_sentinel(place_schema):
    assert coerce_field({"score": "12"}, place_schema, "score") is MISSING


def test_coerced_output_validates_when_fallbacks_are_valid(place_schema, place_rules):
    raw = {"id": "p1", "score": [], "open": 1, "geo": "here", "tags": "x"}
    out = coerce(raw, place_schema, place_rules)
    assert out == {"id": "p1", "score": None}
    assert validate(out, place_schema).ok
