#!/usr/bin/env python3

import logging
from typing import Dict, List, Optional, Union
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)

SCHEMA_REGISTRY_CONTENT_TYPE = "application/vnd.schemaregistry.v1+json"
SCHEMA_REGISTRY_ACCEPT = "application/vnd.schemaregistry.v1+json, application/json"


class SchemaRegistryError(Exception):
    """Base error for schema registry operations."""


class SubjectNotFoundError(SchemaRegistryError):
    def __init__(self, subject: str, registry: str):
        super().__init__(f"Subject {subject} not found in {registry}")
        self.subject = subject
        self.registry = registry


class VersionNotFoundError(SchemaRegistryError):
    def __init__(self, subject: str, version, registry: str):
        super().__init__(f"Version {version} of subject {subject} not found in {registry}")
        self.subject = subject
        self.version = version
        self.registry = registry


# Registry error codes carried in 404 bodies
SUBJECT_NOT_FOUND = 40401
VERSION_NOT_FOUND = 40402


def _error_code(response: requests.Response) -> Optional[int]:
    try:
        body = response.json()
    except ValueError:
        return None
    return body.get('error_code') if isinstance(body, dict) else None


class SchemaRegistryClient:
    def __init__(
        self,
        url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        context: Optional[str] = None,
        timeout: float = 30
    ):
        # Validate username and password
        if (username is None) != (password is None):
            raise ValueError("Both username and password must be provided, or neither")

        self.url = url.rstrip('/')
        self.auth = (username, password) if username and password else None
        self.context = context
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"Accept": SCHEMA_REGISTRY_ACCEPT})
        if self.auth:
            self.session.auth = self.auth
        logger.info(f"Initialized SchemaRegistryClient for {url}")

    def __repr__(self) -> str:
        if self.context:
            return f"SchemaRegistryClient({self.url}, context={self.context})"
        return f"SchemaRegistryClient({self.url})"

    def _get_url(self, path: str) -> str:
        """Construct URL with optional context."""
        if self.context:
            return f"{self.url}/contexts/{self.context}{path}"
        return f"{self.url}{path}"

    def _subject_path(self, subject: str) -> str:
        return f"/subjects/{quote(subject, safe='')}"

    def get_subjects(self) -> List[str]:
        """Get list of all subjects."""
        response = self.session.get(self._get_url("/subjects"), timeout=self.timeout)
        response.raise_for_status()
        subjects = response.json()
        logger.info(f"Retrieved {len(subjects)} subjects from {self.url}")
        return subjects

    def get_versions(self, subject: str) -> List[int]:
        """Get all versions for a subject."""
        response = self.session.get(
            self._get_url(f"{self._subject_path(subject)}/versions"),
            timeout=self.timeout
        )
        if response.status_code == 404:
            raise SubjectNotFoundError(subject, self.url)
        response.raise_for_status()
        versions = response.json()
        logger.debug(f"Retrieved {len(versions)} versions for subject {subject}")
        return versions

    def get_schema(self, subject: str, version: Union[int, str] = "latest") -> Dict:
        """Get schema for a specific subject and version (or 'latest')."""
        response = self.session.get(
            self._get_url(f"{self._subject_path(subject)}/versions/{version}"),
            timeout=self.timeout
        )
        if response.status_code == 404:
            if _error_code(response) == VERSION_NOT_FOUND:
                raise VersionNotFoundError(subject, version, self.url)
            raise SubjectNotFoundError(subject, self.url)
        response.raise_for_status()
        schema_info = response.json()
        logger.debug(f"Retrieved schema for subject {subject} version {version}")
        return schema_info

    def get_schema_by_id(self, schema_id: int) -> Dict:
        """Get a schema by its registry-wide id."""
        response = self.session.get(
            self._get_url(f"/schemas/ids/{schema_id}"),
            timeout=self.timeout
        )
        response.raise_for_status()
        logger.debug(f"Retrieved schema with ID {schema_id}")
        return response.json()

    def register_schema(self, subject: str, schema: str, schema_type: Optional[str] = None) -> Dict:
        """Register a new schema version for a subject."""
        payload = {"schema": schema}
        if schema_type:
            payload["schemaType"] = schema_type

        response = self.session.post(
            self._get_url(f"{self._subject_path(subject)}/versions"),
            json=payload,
            headers={"Content-Type": SCHEMA_REGISTRY_CONTENT_TYPE},
            timeout=self.timeout
        )
        logger.debug(f"Register response for {subject}: {response.status_code} {response.text[:2000]}")
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError:
            if response.status_code == 409:
                # Conflict - check if the schema already exists
                logger.debug(f"Got 409 conflict for {subject}, checking if schema already exists...")
                existing = self.check_schema_exists(subject, schema, schema_type)
                if existing:
                    logger.info(f"Schema already exists for subject {subject} with ID {existing.get('id')}")
                    return existing
            raise

        try:
            result = response.json()
        except ValueError:
            # Some registries answer with plain text
            result = {"raw": response.text}
        logger.info(f"Registered new schema version for subject {subject}")
        return result

    def check_schema_exists(self, subject: str, schema: str, schema_type: Optional[str] = None) -> Optional[Dict]:
        """Check if a schema already exists for a subject and return its info."""
        payload = {"schema": schema}
        if schema_type:
            payload["schemaType"] = schema_type
        try:
            response = self.session.post(
                self._get_url(self._subject_path(subject)),
                json=payload,
                headers={"Content-Type": SCHEMA_REGISTRY_CONTENT_TYPE},
                timeout=self.timeout
            )
            if response.status_code == 200:
                return response.json()
            return None
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.debug(f"Schema lookup for {subject} failed: {e}")
            return None
