#!/usr/bin/env python3
"""
Append-only trail of everything the replication engine does.

Every fetch, registration attempt, read-back, verification probe and
diagnostic finding becomes a ``ReplicationEvent``. Events are kept in order,
forwarded to an optional sink (an observability collaborator) and written to
the log.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

NON_FAILURE_OUTCOMES = ('ok', 'confirmed', 'found', 'skipped-by-policy')


@dataclass(frozen=True)
class ReplicationEvent:
    step: str
    subject: str
    version: Optional[int] = None
    outcome: str = 'ok'
    detail: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)

    def describe(self) -> str:
        where = self.subject if self.version is None else f"{self.subject} v{self.version}"
        text = f"[{self.step}] {where}: {self.outcome}"
        if self.detail:
            details = ", ".join(f"{k}={v}" for k, v in self.detail.items())
            text += f" ({details})"
        return text


class ReplicationEventLog:
    def __init__(self, sink: Optional[Callable[[ReplicationEvent], None]] = None):
        self._events: List[ReplicationEvent] = []
        self.sink = sink

    def __len__(self) -> int:
        return len(self._events)

    @property
    def events(self) -> List[ReplicationEvent]:
        return list(self._events)

    def record(self, step: str, subject: str, version: Optional[int] = None,
               outcome: str = 'ok', level: int = logging.INFO, **detail) -> ReplicationEvent:
        event = ReplicationEvent(step=step, subject=subject, version=version,
                                 outcome=outcome, detail=detail)
        self._events.append(event)
        logger.log(level, event.describe())
        if self.sink is not None:
            try:
                self.sink(event)
            except Exception as e:
                logger.warning(f"Event sink failed for {step} on {subject}: {e}")
        return event

    def for_subject(self, subject: str) -> List[ReplicationEvent]:
        return [e for e in self._events if e.subject == subject]

    def failures(self) -> List[ReplicationEvent]:
        return [e for e in self._events if e.outcome not in NON_FAILURE_OUTCOMES]
