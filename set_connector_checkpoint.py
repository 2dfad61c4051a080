#!/usr/bin/env python3
"""
Utility script to set a connector's offsets (checkpoint) in Kafka Connect.

This script can be used to:
1. Show a connector's current offsets
2. Stop a connector before changing its offsets
3. Apply new offsets from a JSON file, whichever HTTP method the server accepts
"""

import os
import sys
import json
import argparse
from dotenv import load_dotenv
from connect_client import ConnectClient, CheckpointMutationError, ConnectorNotStoppedError

# Load environment variables
load_dotenv()

def show_offsets(client: ConnectClient, connector: str):
    """Print the connector's current offsets."""
    offsets = client.get_offsets(connector)
    print(json.dumps(offsets, indent=2))

def apply_checkpoint(client: ConnectClient, connector: str, body, stop_first: bool = False) -> bool:
    """Apply offsets to a connector, printing every attempt."""
    if stop_first:
        print(f"Stopping connector {connector}...")
        client.stop_connector(connector)

    try:
        result = client.set_checkpoint(connector, body)
    except ConnectorNotStoppedError as e:
        print(f"✗ {e}")
        print("Re-run with --stop-first to stop the connector before applying offsets")
        return False
    except CheckpointMutationError as e:
        print(f"✗ {e}")
        for attempt in e.attempts:
            print(f"  {attempt.method} {attempt.url} -> {attempt.status}: {attempt.body[:200]}")
        return False

    for attempt in result.attempts:
        print(f"  {attempt.method} {attempt.url} -> {attempt.status}")
    if result.task_results:
        for task_id, ok in result.task_results.items():
            print(f"  task {task_id}: {'✓' if ok else '✗'}")
    print(f"✓ Offsets applied to {connector} using {result.method}")
    return True

def main():
    parser = argparse.ArgumentParser(description="Set connector offsets in Kafka Connect")
    parser.add_argument("--connector", required=True, help="Connector name")
    parser.add_argument("--file", metavar="PATH", help="JSON file with the offsets to apply")
    parser.add_argument("--show", action="store_true", help="Show the connector's current offsets")
    parser.add_argument("--stop-first", action="store_true", help="Stop the connector before applying offsets")
    parser.add_argument("--url", help="Kafka Connect URL (overrides CONNECT_URL)")
    parser.add_argument("--username", help="Username for authentication")
    parser.add_argument("--password", help="Password for authentication")

    args = parser.parse_args()

    # Initialize client
    url = args.url or os.getenv('CONNECT_URL', 'http://localhost:8083')
    client = ConnectClient(
        url=url,
        username=args.username or os.getenv('CONNECT_USERNAME'),
        password=args.password or os.getenv('CONNECT_PASSWORD')
    )

    print(f"Connected to Kafka Connect: {url}")

    if args.file:
        with open(args.file) as f:
            body = json.load(f)
        return 0 if apply_checkpoint(client, args.connector, body, args.stop_first) else 1

    show_offsets(client, args.connector)
    if not args.show:
        print("\nUse --file to apply new offsets, --help to see available options")
    return 0

if __name__ == "__main__":
    sys.exit(main())
