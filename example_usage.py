#!/usr/bin/env python3
"""
Example usage of the schema replicator and the connector checkpoint client.

This script demonstrates how to:
1. Copy every version of a subject and paste it under a new name
2. Paste a single version and inspect the verification result
3. Set connector offsets across Connect versions
"""

from connect_client import ConnectClient, ConnectorNotStoppedError
from replication_events import ReplicationEventLog
from schema_registry_client import SchemaRegistryClient
from schema_replicator import (
    ReplicationPolicy,
    SchemaClipboard,
    copy_subject,
    display_batch_result,
    paste_schema_version,
    paste_subject,
)

def example_copy_paste_subject():
    """Example of copying a subject's full history into another registry."""

    # Initialize clients
    source_client = SchemaRegistryClient(
        url="http://source-registry:8081",
        username="source_user",
        password="source_password"
    )

    dest_client = SchemaRegistryClient(
        url="http://dest-registry:8082",
        username="dest_user",
        password="dest_password"
    )

    # Collect every step for troubleshooting
    events = ReplicationEventLog(sink=lambda event: print(event.describe()))
    clipboard = SchemaClipboard()

    print("Copying subject user-v1...")
    clipboard.hold(copy_subject(source_client, "user-v1", events=events))

    result = paste_subject(dest_client, clipboard.entry, "user-v1-copy", events=events)
    display_batch_result(result)

    if result.status != 'verified':
        print(f"\n{len(events.failures())} steps need attention:")
        for event in events.failures():
            print(f"  {event.describe()}")

    return result

def example_paste_latest_version():
    """Example of pasting only the latest version with a custom policy."""

    source_client = SchemaRegistryClient(url="http://source-registry:8081")
    dest_client = SchemaRegistryClient(url="http://dest-registry:8082")

    entry = copy_subject(source_client, "orders-value", version="latest")
    _, document = entry.versions[0]

    policy = ReplicationPolicy(single_verify_attempts=5, run_diagnostics=False)
    result = paste_schema_version(dest_client, document, "orders-value", policy=policy)
    print(f"Verified: {result.final_verified} via {result.verification.method}")
    return result

def example_set_connector_offsets():
    """Example of resetting a source connector's offsets."""

    client = ConnectClient(url="http://connect:8083")
    offsets = {
        "offsets": [
            {
                "partition": {"filename": "/data/input.txt"},
                "offset": {"position": 0}
            }
        ]
    }

    try:
        result = client.set_checkpoint("file-source", offsets)
    except ConnectorNotStoppedError:
        client.stop_connector("file-source")
        result = client.set_checkpoint("file-source", offsets)

    print(f"Offsets applied with {result.method} after {len(result.attempts)} attempts")
    return result

if __name__ == "__main__":
    # Example 1: Copy a whole subject under a new name
    print("Example 1: Copy and paste a subject")
    print("-" * 50)
    example_copy_paste_subject()

    # Example 2: Paste a single version
    print("\n\nExample 2: Paste the latest version only")
    print("-" * 50)
    example_paste_latest_version()

    # Example 3: Connector offsets
    print("\n\nExample 3: Set connector offsets")
    print("-" * 50)
    example_set_connector_offsets()
