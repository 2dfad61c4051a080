#!/usr/bin/env python3

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)

JOB_LEVEL_METHODS = ('PATCH', 'PUT', 'POST')


class ConnectClientError(Exception):
    """Base error for connector operations."""


@dataclass
class CheckpointAttempt:
    method: str
    url: str
    status: Optional[int]
    body: str


@dataclass
class CheckpointResult:
    success: bool
    method: Optional[str] = None
    response: Any = None
    attempts: List[CheckpointAttempt] = field(default_factory=list)
    task_results: Dict[Any, bool] = field(default_factory=dict)


class CheckpointMutationError(ConnectClientError):
    def __init__(self, connector: str, attempts: List[CheckpointAttempt]):
        summary = ", ".join(f"{a.method} {a.status}" for a in attempts)
        super().__init__(f"Could not set offsets for connector {connector} ({summary})")
        self.connector = connector
        self.attempts = attempts


class ConnectorNotStoppedError(CheckpointMutationError):
    """The connector must be stopped before its offsets can be changed."""

    def __init__(self, connector: str, attempts: List[CheckpointAttempt]):
        super().__init__(connector, attempts)
        self.args = (f"Connector {connector} must be stopped before its offsets can be modified",)


def _parse_body(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def _is_not_stopped(response: requests.Response) -> bool:
    if response.status_code == 409:
        return True
    # Kafka Connect answers 400 "... must be in the STOPPED state ..."
    return response.status_code == 400 and 'stopped state' in response.text.lower()


class ConnectClient:
    def __init__(
        self,
        url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 30
    ):
        if (username is None) != (password is None):
            raise ValueError("Both username and password must be provided, or neither")

        self.url = url.rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()
        if username and password:
            self.session.auth = (username, password)
        logger.info(f"Initialized ConnectClient for {url}")

    def _connector_url(self, name: str, path: str = "") -> str:
        return f"{self.url}/connectors/{quote(name, safe='')}{path}"

    def list_connectors(self) -> List[str]:
        response = self.session.get(f"{self.url}/connectors", timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def get_status(self, name: str) -> Dict:
        response = self.session.get(self._connector_url(name, "/status"), timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def get_tasks(self, name: str) -> List[Dict]:
        response = self.session.get(self._connector_url(name, "/tasks"), timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def pause_connector(self, name: str) -> None:
        response = self.session.put(self._connector_url(name, "/pause"), timeout=self.timeout)
        response.raise_for_status()
        logger.info(f"Paused connector {name}")

    def resume_connector(self, name: str) -> None:
        response = self.session.put(self._connector_url(name, "/resume"), timeout=self.timeout)
        response.raise_for_status()
        logger.info(f"Resumed connector {name}")

    def stop_connector(self, name: str) -> None:
        response = self.session.put(self._connector_url(name, "/stop"), timeout=self.timeout)
        response.raise_for_status()
        logger.info(f"Stopped connector {name}")

    def get_offsets(self, name: str) -> Any:
        response = self.session.get(self._connector_url(name, "/offsets"), timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def set_offsets_method(self, name: str, body: Any, method: str) -> Any:
        """Send offsets with one explicit HTTP method, without any fallback."""
        response = self.session.request(
            method.upper(),
            self._connector_url(name, "/offsets"),
            json=body,
            timeout=self.timeout
        )
        response.raise_for_status()
        return _parse_body(response)

    def _attempt(self, method: str, url: str, body: Any,
                 attempts: List[CheckpointAttempt]) -> Optional[requests.Response]:
        try:
            response = self.session.request(method, url, json=body, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            attempts.append(CheckpointAttempt(method=method, url=url, status=None, body=str(e)))
            logger.warning(f"{method} {url} failed: {e}")
            return None
        attempts.append(CheckpointAttempt(method=method, url=url,
                                          status=response.status_code, body=response.text))
        logger.debug(f"{method} {url} -> {response.status_code} {response.text[:2000]}")
        return response

    def set_checkpoint(self, name: str, body: Any) -> CheckpointResult:
        """Set a connector's offsets, probing the verbs different Connect versions accept.

        Tries PATCH, then PUT, then POST on the connector's offsets endpoint,
        moving on only when the server answers 405. A 409, or a 400 whose
        message asks for the STOPPED state, means the connector is not stopped
        and is raised straight away. If no connector-level call
        succeeds, every task's offsets endpoint is tried with PUT; one task
        success is enough.

        Raises:
            ConnectorNotStoppedError: the connector is not in a stoppable state
            CheckpointMutationError: no verb or endpoint accepted the offsets
        """
        attempts: List[CheckpointAttempt] = []
        url = self._connector_url(name, "/offsets")

        for method in JOB_LEVEL_METHODS:
            response = self._attempt(method, url, body, attempts)
            if response is None:
                break
            if response.ok:
                logger.info(f"Set offsets for connector {name} with {method}")
                return CheckpointResult(success=True, method=method,
                                        response=_parse_body(response), attempts=attempts)
            if _is_not_stopped(response):
                raise ConnectorNotStoppedError(name, attempts)
            if response.status_code != 405:
                break
            logger.info(f"{method} not allowed for offsets of {name}, trying next method")

        task_results = self._set_task_checkpoints(name, body, attempts)
        if any(task_results.values()):
            logger.info(f"Set offsets for {sum(task_results.values())} of "
                        f"{len(task_results)} tasks of connector {name}")
            return CheckpointResult(success=True, method='PUT', attempts=attempts,
                                    task_results=task_results)

        logger.error(f"Failed to set offsets for connector {name} after {len(attempts)} attempts")
        raise CheckpointMutationError(name, attempts)

    def _set_task_checkpoints(self, name: str, body: Any,
                              attempts: List[CheckpointAttempt]) -> Dict[Any, bool]:
        try:
            tasks = self.get_tasks(name)
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.debug(f"Connector {name} does not expose tasks: {e}")
            return {}

        results = {}
        for task in tasks:
            task_id = task.get('id') if isinstance(task, dict) else task
            if isinstance(task_id, dict):
                task_id = task_id.get('task')
            if task_id is None:
                continue
            response = self._attempt('PUT', self._connector_url(name, f"/tasks/{task_id}/offsets"),
                                     body, attempts)
            results[task_id] = response is not None and response.ok
        return results
