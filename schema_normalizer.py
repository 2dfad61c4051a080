#!/usr/bin/env python3
"""
Canonical schema extraction for registry payloads.

Different registry implementations (and different endpoints of the same
registry) hand back schema documents in different shapes. This module
classifies a payload into one of a small, closed set of shapes and pulls the
schema string out of it without ever touching the payload itself.
"""

import logging
from enum import Enum
from typing import Any, Optional, Tuple

logger = logging.getLogger(__name__)

ALT_SCHEMA_KEYS = ('definition', 'value')


class PayloadShape(Enum):
    DIRECT_STRING = 'direct-string'
    SCHEMA_FIELD = 'schema-field'
    SCHEMA_STRING_FIELD = 'schema-string-field'
    NESTED_SCHEMA_FIELD = 'nested-schema-field'
    ALT_KEY_FIELD = 'alt-key-field'
    NESTED_OBJECT = 'nested-object'
    UNRECOGNIZED = 'unrecognized'


def _is_schema_string(value: Any) -> bool:
    return isinstance(value, str) and value != ''


def _match_object(payload: dict) -> Tuple[PayloadShape, Optional[str]]:
    """Match the non-recursive object shapes, in priority order."""
    if _is_schema_string(payload.get('schema')):
        return PayloadShape.SCHEMA_FIELD, payload['schema']

    if _is_schema_string(payload.get('schemaString')):
        return PayloadShape.SCHEMA_STRING_FIELD, payload['schemaString']

    inner = payload.get('schema')
    if isinstance(inner, dict) and _is_schema_string(inner.get('schema')):
        return PayloadShape.NESTED_SCHEMA_FIELD, inner['schema']

    for key in ALT_SCHEMA_KEYS:
        if _is_schema_string(payload.get(key)):
            return PayloadShape.ALT_KEY_FIELD, payload[key]

    return PayloadShape.UNRECOGNIZED, None


def classify_payload(payload: Any) -> Tuple[PayloadShape, Optional[str]]:
    """Classify a registry payload and return its shape with the schema string.

    The recursive search descends exactly one level into object-valued
    properties, so cyclic structures cannot loop.
    """
    if isinstance(payload, str):
        if payload == '':
            return PayloadShape.UNRECOGNIZED, None
        return PayloadShape.DIRECT_STRING, payload

    if not isinstance(payload, dict):
        return PayloadShape.UNRECOGNIZED, None

    shape, schema = _match_object(payload)
    if schema is not None:
        return shape, schema

    for key, value in payload.items():
        if not isinstance(value, dict):
            continue
        _, schema = _match_object(value)
        if schema is not None:
            logger.debug(f"Found schema string under nested property '{key}'")
            return PayloadShape.NESTED_OBJECT, schema

    return PayloadShape.UNRECOGNIZED, None


def extract_schema_string(payload: Any) -> Optional[str]:
    """Return the canonical schema string of a payload, or None when no known shape matches."""
    _, schema = classify_payload(payload)
    return schema
