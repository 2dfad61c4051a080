#!/usr/bin/env python3
"""
End-to-end replication against two live schema registries.

Start registries on localhost:38081 (source) and localhost:38082 (target)
and run with INTEGRATION=1.
"""

import os
import json

import pytest

from populate_source import USER_SCHEMAS, create_session_with_retries, delete_subject, populate
from replication_events import ReplicationEventLog
from schema_registry_client import SchemaRegistryClient
from schema_replicator import (
    ReplicationPolicy,
    copy_subject,
    paste_schema_version,
    paste_subject,
    verify_subject_registered,
)

SOURCE_URL = os.getenv('INTEGRATION_SOURCE_URL', 'http://localhost:38081')
DEST_URL = os.getenv('INTEGRATION_DEST_URL', 'http://localhost:38082')

pytestmark = pytest.mark.skipif(os.getenv('INTEGRATION') != '1',
                                reason="set INTEGRATION=1 to run against live registries")


@pytest.fixture(scope="module")
def source_client():
    populate(SOURCE_URL, "user-v1")
    return SchemaRegistryClient(url=SOURCE_URL)


@pytest.fixture
def dest_client():
    session = create_session_with_retries()
    for subject in ("user-v1", "user-v1-copy", "user-v1-latest"):
        delete_subject(session, DEST_URL, subject)
    return SchemaRegistryClient(url=DEST_URL)


def test_copy_reads_all_versions(source_client):
    entry = copy_subject(source_client, "user-v1")
    assert entry.version_numbers == [1, 2, 3]


def test_paste_under_new_name(source_client, dest_client):
    events = ReplicationEventLog()
    entry = copy_subject(source_client, "user-v1", events=events)

    result = paste_subject(dest_client, entry, "user-v1-copy", events=events)

    assert result.status == 'verified'
    assert [o.registered for o in result.outcomes] == [True, True, True]
    assert dest_client.get_versions("user-v1-copy") == [1, 2, 3]
    for version, schema in zip((1, 2, 3), USER_SCHEMAS):
        pasted = json.loads(dest_client.get_schema("user-v1-copy", version)["schema"])
        assert pasted == schema
    assert not [e for e in events.failures() if e.step == 'register']


def test_paste_twice_is_idempotent(source_client, dest_client):
    entry = copy_subject(source_client, "user-v1")

    first = paste_subject(dest_client, entry, "user-v1")
    second = paste_subject(dest_client, entry, "user-v1")

    assert first.status == second.status == 'verified'
    assert [o.registry_assigned_id for o in first.outcomes] == \
        [o.registry_assigned_id for o in second.outcomes]
    assert dest_client.get_versions("user-v1") == [1, 2, 3]


def test_paste_latest_version(source_client, dest_client):
    entry = copy_subject(source_client, "user-v1", version="latest")
    _, document = entry.versions[0]

    result = paste_schema_version(dest_client, document, "user-v1-latest",
                                  policy=ReplicationPolicy(single_verify_attempts=5))

    assert result.final_verified is True
    check = verify_subject_registered(dest_client, "user-v1-latest", max_attempts=1)
    assert check.ok is True
