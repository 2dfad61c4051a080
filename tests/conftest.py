#!/usr/bin/env python3
"""
Shared fixtures: in-memory registries and a scripted HTTP session.
"""

import os
import sys
import json
from typing import Any, Dict, List, Optional

import pytest
import requests

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from schema_registry_client import SubjectNotFoundError, VersionNotFoundError


def avro_schema(name: str, fields: List[str]) -> str:
    """Build a record schema string with string-typed fields."""
    return json.dumps({
        "type": "record",
        "name": name,
        "fields": [{"name": f, "type": "string"} for f in fields]
    })


class InMemoryRegistry:
    """A registry port backed by dicts, recording every call made against it.

    Read lag, unreachability and failures can be scripted per test.
    """

    def __init__(self, name: str = "registry", id_base: int = 1):
        self.name = name
        self.subjects: Dict[str, List[Dict]] = {}
        self.schemas_by_id: Dict[int, Dict] = {}
        self._next_id = id_base
        self.calls: List[tuple] = []

        self.version_read_lag = 0
        self.subject_list_lag = 0
        self.unreachable_reads = False
        self.register_failures: List[Optional[Exception]] = []
        self.read_back_failures = 0
        self.return_ids = True
        self.subject_aliases: Dict[str, str] = {}
        self.payload_overrides: Dict[tuple, Any] = {}
        self.unreadable = set()
        self.confirmed_ids = set()

    # Seeding helpers (not recorded as calls)

    def add_schema(self, subject: str, schema: str, schema_type: Optional[str] = None) -> int:
        versions = self.subjects.setdefault(subject, [])
        schema_id = self._id_for(schema, schema_type)
        entry = {
            "subject": subject,
            "version": versions[-1]["version"] + 1 if versions else 1,
            "id": schema_id,
            "schema": schema,
        }
        if schema_type:
            entry["schemaType"] = schema_type
        versions.append(entry)
        return schema_id

    def _id_for(self, schema: str, schema_type: Optional[str]) -> int:
        for schema_id, info in self.schemas_by_id.items():
            if info["schema"] == schema:
                return schema_id
        schema_id = self._next_id
        self._next_id += 1
        info = {"schema": schema}
        if schema_type:
            info["schemaType"] = schema_type
        self.schemas_by_id[schema_id] = info
        return schema_id

    def _check_reachable(self):
        if self.unreachable_reads:
            raise requests.exceptions.ConnectionError(f"{self.name} is unreachable")

    def calls_named(self, name: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == name]

    # Port operations

    def get_subjects(self) -> List[str]:
        self.calls.append(("get_subjects",))
        self._check_reachable()
        if self.subject_list_lag > 0:
            self.subject_list_lag -= 1
            return []
        return list(self.subjects)

    def get_versions(self, subject: str) -> List[int]:
        self.calls.append(("get_versions", subject))
        self._check_reachable()
        if self.version_read_lag > 0:
            self.version_read_lag -= 1
            raise SubjectNotFoundError(subject, self.name)
        if subject not in self.subjects:
            raise SubjectNotFoundError(subject, self.name)
        return [entry["version"] for entry in self.subjects[subject]]

    def get_schema(self, subject: str, version="latest") -> Any:
        self.calls.append(("get_schema", subject, version))
        self._check_reachable()
        if subject not in self.subjects:
            raise SubjectNotFoundError(subject, self.name)
        if (subject, version) in self.unreadable:
            raise requests.exceptions.HTTPError(f"500 Server Error for {subject} v{version}")
        versions = self.subjects[subject]
        if version == "latest":
            entry = versions[-1]
        else:
            matches = [e for e in versions if e["version"] == version]
            if not matches:
                raise VersionNotFoundError(subject, version, self.name)
            entry = matches[0]
        if (subject, entry["version"]) in self.payload_overrides:
            return self.payload_overrides[(subject, entry["version"])]
        return dict(entry)

    def get_schema_by_id(self, schema_id: int) -> Dict:
        self.calls.append(("get_schema_by_id", schema_id))
        self._check_reachable()
        if self.read_back_failures > 0:
            self.read_back_failures -= 1
            raise requests.exceptions.HTTPError(f"404 Schema {schema_id} not found")
        if schema_id not in self.schemas_by_id:
            raise requests.exceptions.HTTPError(f"404 Schema {schema_id} not found")
        self.confirmed_ids.add(schema_id)
        return dict(self.schemas_by_id[schema_id])

    def register_schema(self, subject: str, schema: str, schema_type: Optional[str] = None) -> Dict:
        self.calls.append(("register_schema", subject, schema, schema_type))
        if self.register_failures:
            failure = self.register_failures.pop(0)
            if failure is not None:
                raise failure
        subject = self.subject_aliases.get(subject, subject)
        for entry in self.subjects.get(subject, []):
            if entry["schema"] == schema:
                return {"id": entry["id"]} if self.return_ids else {}
        schema_id = self.add_schema(subject, schema, schema_type)
        return {"id": schema_id} if self.return_ids else {}


class RecordingSleep:
    """Stands in for time.sleep and remembers every requested delay."""

    def __init__(self):
        self.delays: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)

    @property
    def total(self) -> float:
        return sum(self.delays)


def make_response(status: int, body: Any = None, url: str = "http://test") -> requests.Response:
    """Build a real requests.Response with a JSON (or plain text) body."""
    response = requests.Response()
    response.status_code = status
    response.url = url
    response.encoding = "utf-8"
    if body is None:
        response._content = b""
    elif isinstance(body, str):
        response._content = body.encode("utf-8")
    else:
        response._content = json.dumps(body).encode("utf-8")
    return response


class FakeSession:
    """Scripted replacement for requests.Session.

    ``routes`` maps (METHOD, url) to a response, an exception, or a list of
    those consumed in order (the last one repeats).
    """

    def __init__(self, routes: Optional[Dict[tuple, Any]] = None):
        self.routes = routes or {}
        self.calls: List[tuple] = []
        self.headers: Dict[str, str] = {}
        self.auth = None

    def request(self, method: str, url: str, **kwargs) -> requests.Response:
        method = method.upper()
        self.calls.append((method, url, kwargs))
        route = self.routes.get((method, url))
        if route is None:
            return make_response(404, {"error_code": 404, "message": "Not found"}, url)
        if isinstance(route, list):
            route = route.pop(0) if len(route) > 1 else route[0]
        if isinstance(route, Exception):
            raise route
        return route

    def get(self, url, **kwargs):
        return self.request("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self.request("POST", url, **kwargs)

    def put(self, url, **kwargs):
        return self.request("PUT", url, **kwargs)

    def methods_called(self) -> List[str]:
        return [f"{method} {url}" for method, url, _ in self.calls]


@pytest.fixture
def source_registry():
    return InMemoryRegistry(name="registry-a", id_base=1)


@pytest.fixture
def target_registry():
    return InMemoryRegistry(name="registry-b", id_base=100)


@pytest.fixture
def no_sleep():
    return RecordingSleep()


@pytest.fixture
def user_schemas():
    """Three backward-compatible versions of a user record."""
    return [
        avro_schema("User", ["id"]),
        avro_schema("User", ["id", "name"]),
        avro_schema("User", ["id", "name", "email"]),
    ]
