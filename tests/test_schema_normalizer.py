#!/usr/bin/env python3

import copy

import pytest

from schema_normalizer import PayloadShape, classify_payload, extract_schema_string

SCHEMA = '{"type": "record", "name": "User", "fields": [{"name": "id", "type": "int"}]}'


@pytest.mark.parametrize("payload, shape", [
    (SCHEMA, PayloadShape.DIRECT_STRING),
    ({"schema": SCHEMA, "id": 7, "version": 1}, PayloadShape.SCHEMA_FIELD),
    ({"schemaString": SCHEMA}, PayloadShape.SCHEMA_STRING_FIELD),
    ({"schema": {"schema": SCHEMA, "schemaType": "AVRO"}}, PayloadShape.NESTED_SCHEMA_FIELD),
    ({"definition": SCHEMA}, PayloadShape.ALT_KEY_FIELD),
    ({"value": SCHEMA}, PayloadShape.ALT_KEY_FIELD),
    ({"metadata": {"owner": "team"}, "data": {"schemaString": SCHEMA}}, PayloadShape.NESTED_OBJECT),
])
def test_known_shapes(payload, shape):
    assert classify_payload(payload) == (shape, SCHEMA)
    assert extract_schema_string(payload) == SCHEMA


@pytest.mark.parametrize("payload", [
    None,
    42,
    [SCHEMA],
    "",
    {},
    {"schema": ""},
    {"schema": {"type": "record"}},
    {"unexpected": 42},
    {"outer": {"inner": {"schema": SCHEMA}}},
])
def test_unrecognized_payloads_return_none(payload):
    assert classify_payload(payload) == (PayloadShape.UNRECOGNIZED, None)
    assert extract_schema_string(payload) is None


def test_schema_field_wins_over_other_keys():
    payload = {"schema": "a", "schemaString": "b", "definition": "c"}
    assert extract_schema_string(payload) == "a"


def test_schema_string_beats_nested_and_alt_keys():
    payload = {"schemaString": "b", "schema": {"schema": "nested"}, "value": "c"}
    assert extract_schema_string(payload) == "b"


def test_nested_schema_beats_alt_keys():
    payload = {"schema": {"schema": "nested"}, "definition": "d"}
    assert classify_payload(payload) == (PayloadShape.NESTED_SCHEMA_FIELD, "nested")


def test_definition_checked_before_value():
    assert extract_schema_string({"value": "v", "definition": "d"}) == "d"


def test_empty_schema_field_falls_through():
    assert extract_schema_string({"schema": "", "definition": "d"}) == "d"


def test_cyclic_payload_terminates():
    payload = {"name": "loop"}
    payload["self"] = payload
    assert extract_schema_string(payload) is None


def test_nested_cycle_with_schema_one_level_down():
    inner = {"schema": SCHEMA}
    inner["parent"] = inner
    assert extract_schema_string({"wrapper": inner}) == SCHEMA


def test_extraction_is_idempotent_and_does_not_mutate():
    payloads = [
        SCHEMA,
        {"schema": SCHEMA},
        {"schemaString": SCHEMA},
        {"schema": {"schema": SCHEMA}},
        {"definition": SCHEMA},
        {"wrapper": {"value": SCHEMA}},
    ]
    for payload in payloads:
        before = copy.deepcopy(payload)
        first = extract_schema_string(payload)
        second = extract_schema_string(payload)
        assert first == second == SCHEMA
        assert payload == before
