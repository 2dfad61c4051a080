#!/usr/bin/env python3

import os
import time
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import requests
from dotenv import load_dotenv

from replication_events import ReplicationEvent, ReplicationEventLog
from schema_normalizer import extract_schema_string
from schema_registry_client import SchemaRegistryClient, SubjectNotFoundError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()

CONNECTION_ERRORS = (requests.exceptions.ConnectionError, requests.exceptions.Timeout)

VersionSelector = Union[None, int, str]


class ReplicationError(Exception):
    """Base error for copy/paste between registries."""


class EmptySubjectError(ReplicationError):
    def __init__(self, subject: str):
        super().__init__(f"Subject {subject} has no versions to copy")
        self.subject = subject


class CopyFailedError(ReplicationError):
    def __init__(self, subject: str, errors: Dict[Any, str]):
        details = "; ".join(f"v{version}: {error}" for version, error in errors.items())
        super().__init__(f"Could not read any version of subject {subject}: {details}")
        self.subject = subject
        self.errors = errors


class TargetUnreachableError(ReplicationError):
    """The target registry could not be reached for the final verification.

    ``result`` still carries every per-version outcome of the paste.
    """

    def __init__(self, result: 'BatchResult'):
        super().__init__(f"Target registry unreachable while verifying {result.target_subject_name}")
        self.result = result


class ReplayState(Enum):
    PENDING = 'pending'
    NORMALIZING = 'normalizing'
    SKIPPED = 'skipped'
    REGISTERING = 'registering'
    REGISTERED_CONFIRMED = 'registered-confirmed'
    REGISTERED_UNCONFIRMED = 'registered-unconfirmed'
    FAILED = 'failed'


@dataclass(frozen=True)
class SchemaDocument:
    subject_name: str
    version_number: int
    raw_payload: Any
    global_id: Optional[int] = None
    schema_type_hint: Optional[str] = None

    @classmethod
    def from_registry_response(cls, subject: str, version: int, payload: Any) -> 'SchemaDocument':
        global_id = None
        schema_type = None
        if isinstance(payload, dict):
            global_id = payload.get('id')
            schema_type = payload.get('schemaType')
        return cls(
            subject_name=subject,
            version_number=version,
            raw_payload=payload,
            global_id=global_id,
            schema_type_hint=schema_type
        )


@dataclass
class ClipboardEntry:
    source_subject_name: str
    versions: List[Tuple[int, SchemaDocument]] = field(default_factory=list)

    def __post_init__(self):
        self.versions = sorted(self.versions, key=lambda item: item[0])

    def __len__(self) -> int:
        return len(self.versions)

    @property
    def version_numbers(self) -> List[int]:
        return [version for version, _ in self.versions]


class SchemaClipboard:
    """Holds the last copied subject for whoever owns this instance."""

    def __init__(self):
        self._entry: Optional[ClipboardEntry] = None

    def hold(self, entry: ClipboardEntry) -> ClipboardEntry:
        self._entry = entry
        return entry

    @property
    def entry(self) -> ClipboardEntry:
        if self._entry is None:
            raise ReplicationError("Clipboard is empty, copy a subject first")
        return self._entry

    def is_empty(self) -> bool:
        return self._entry is None

    def clear(self) -> None:
        self._entry = None


@dataclass
class ReplayOutcome:
    version_number: int
    attempted: bool = False
    registered: bool = False
    registry_assigned_id: Optional[int] = None
    error: Optional[str] = None
    state: ReplayState = ReplayState.PENDING
    attempts: int = 0


@dataclass(frozen=True)
class DiagnosticMatch:
    subject: str
    version: int


@dataclass
class VerificationResult:
    ok: bool
    method: Optional[str] = None
    evidence: Dict[str, Any] = field(default_factory=dict)
    attempts: int = 0
    reachable: bool = True


@dataclass
class BatchResult:
    target_subject_name: str
    outcomes: List[ReplayOutcome] = field(default_factory=list)
    final_verified: bool = False
    diagnostic_match: Optional[DiagnosticMatch] = None
    verification: Optional[VerificationResult] = None
    events: List[ReplicationEvent] = field(default_factory=list)

    @property
    def registered_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.registered)

    @property
    def failed_versions(self) -> List[int]:
        return [outcome.version_number for outcome in self.outcomes if not outcome.registered]

    @property
    def status(self) -> str:
        """One of 'verified', 'unverified', 'partial' or 'failed'."""
        registered = self.registered_count
        if registered == 0:
            return 'failed'
        if registered < len(self.outcomes):
            return 'partial'
        return 'verified' if self.final_verified else 'unverified'


@dataclass
class ReplicationPolicy:
    register_attempts: int = 3
    verify_attempts: int = 6
    verify_initial_delay: float = 0.2
    verify_max_delay: float = 2.0
    single_verify_attempts: int = 3
    single_verify_delay_step: float = 0.4
    max_subjects_scanned: int = 100
    run_diagnostics: bool = True

    def __post_init__(self):
        for name in ('register_attempts', 'verify_attempts', 'single_verify_attempts'):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1")

    @classmethod
    def from_env(cls) -> 'ReplicationPolicy':
        """Build a policy from environment variables, falling back to the defaults."""
        return cls(
            register_attempts=int(os.getenv('REGISTER_ATTEMPTS', '3')),
            verify_attempts=int(os.getenv('VERIFY_ATTEMPTS', '6')),
            verify_initial_delay=int(os.getenv('VERIFY_INITIAL_DELAY_MS', '200')) / 1000,
            verify_max_delay=int(os.getenv('VERIFY_MAX_DELAY_MS', '2000')) / 1000,
            single_verify_attempts=int(os.getenv('SINGLE_VERIFY_ATTEMPTS', '3')),
            single_verify_delay_step=int(os.getenv('SINGLE_VERIFY_DELAY_MS', '400')) / 1000,
            max_subjects_scanned=int(os.getenv('DIAGNOSTIC_MAX_SUBJECTS', '100')),
            run_diagnostics=os.getenv('RUN_DIAGNOSTICS', 'true').lower() == 'true'
        )


def _event_log(events: Optional[ReplicationEventLog]) -> ReplicationEventLog:
    return events if events is not None else ReplicationEventLog()


def copy_subject(source_client: SchemaRegistryClient, subject: str,
                 version: VersionSelector = None,
                 events: Optional[ReplicationEventLog] = None) -> ClipboardEntry:
    """Copy all versions of a subject (or a single one) into a clipboard entry.

    Args:
        source_client: Registry to read from
        subject: Subject to copy
        version: None or 'all' for every version, 'latest', or an explicit version number
        events: Optional event log receiving the copy trail

    Raises:
        SubjectNotFoundError: the subject does not exist in the source registry
        EmptySubjectError: the subject has no versions
        CopyFailedError: none of the versions could be read
    """
    events = _event_log(events)

    if version is not None and version != 'all':
        return _copy_single_version(source_client, subject, version, events)

    versions = sorted(source_client.get_versions(subject))
    events.record('list-versions', subject, versions=versions)
    if not versions:
        events.record('copy', subject, outcome='empty', level=logging.WARNING)
        raise EmptySubjectError(subject)

    copied = []
    errors = {}
    for version_number in versions:
        try:
            payload = source_client.get_schema(subject, version_number)
        except Exception as e:
            # Best-effort copy: an unreadable version is left out
            errors[version_number] = str(e)
            events.record('fetch-version', subject, version_number, outcome='failed',
                          level=logging.WARNING, error=str(e))
            continue
        document = SchemaDocument.from_registry_response(subject, version_number, payload)
        copied.append((version_number, document))
        events.record('fetch-version', subject, version_number, level=logging.DEBUG,
                      global_id=document.global_id)

    if not copied:
        events.record('copy', subject, outcome='failed', level=logging.ERROR)
        raise CopyFailedError(subject, errors)

    entry = ClipboardEntry(source_subject_name=subject, versions=copied)
    events.record('copy', subject, copied=entry.version_numbers, skipped=sorted(errors))
    logger.info(f"Copied {len(entry)} of {len(versions)} versions of subject {subject}")
    return entry


def _copy_single_version(source_client: SchemaRegistryClient, subject: str,
                         version: Union[int, str], events: ReplicationEventLog) -> ClipboardEntry:
    try:
        payload = source_client.get_schema(subject, version)
    except SubjectNotFoundError:
        raise
    except Exception as e:
        events.record('fetch-version', subject, outcome='failed', level=logging.ERROR,
                      requested=version, error=str(e))
        raise CopyFailedError(subject, {version: str(e)}) from e

    version_number = version
    if not isinstance(version_number, int):
        version_number = payload.get('version') if isinstance(payload, dict) else None
    if not isinstance(version_number, int):
        versions = source_client.get_versions(subject)
        if not versions:
            raise EmptySubjectError(subject)
        version_number = max(versions)

    document = SchemaDocument.from_registry_response(subject, version_number, payload)
    events.record('copy', subject, version_number, requested=version, global_id=document.global_id)
    logger.info(f"Copied subject {subject} version {version_number}")
    return ClipboardEntry(source_subject_name=subject, versions=[(version_number, document)])


def _replay_version(target_client: SchemaRegistryClient, document: SchemaDocument,
                    version_number: int, target_subject: str, register_attempts: int,
                    events: ReplicationEventLog) -> Tuple[ReplayOutcome, Optional[str]]:
    """Normalize and register one version, confirming it by reading its ID back."""
    outcome = ReplayOutcome(version_number=version_number, state=ReplayState.NORMALIZING)

    canonical = extract_schema_string(document.raw_payload)
    if canonical is None:
        outcome.state = ReplayState.SKIPPED
        outcome.error = "Unrecognized schema payload shape"
        events.record('normalize', target_subject, version_number, outcome='skipped',
                      level=logging.WARNING, source_subject=document.subject_name)
        return outcome, None

    outcome.attempted = True
    outcome.state = ReplayState.REGISTERING
    for attempt in range(1, register_attempts + 1):
        outcome.attempts = attempt
        try:
            response = target_client.register_schema(target_subject, canonical,
                                                     document.schema_type_hint)
        except Exception as e:
            events.record('register', target_subject, version_number, outcome='failed',
                          level=logging.WARNING, attempt=attempt, error=str(e))
            if outcome.state is ReplayState.REGISTERED_UNCONFIRMED:
                # An earlier attempt was accepted; it stays unconfirmed, not failed
                outcome.error = (f"Registered with ID {outcome.registry_assigned_id} but never "
                                 f"read back; retry failed: {e}")
            else:
                outcome.state = ReplayState.FAILED
                outcome.error = f"Registration failed: {e}"
            continue

        schema_id = response.get('id') if isinstance(response, dict) else None
        events.record('register', target_subject, version_number, attempt=attempt,
                      id=schema_id, response=response)
        if schema_id is None:
            # Nothing to read back; the subject-level verification has the final say
            outcome.state = ReplayState.REGISTERED_CONFIRMED
            outcome.registered = True
            outcome.error = None
            return outcome, canonical

        outcome.registry_assigned_id = schema_id
        try:
            read_back = target_client.get_schema_by_id(schema_id)
        except Exception as e:
            outcome.state = ReplayState.REGISTERED_UNCONFIRMED
            outcome.error = f"Registered with ID {schema_id} but read-back failed: {e}"
            events.record('read-back', target_subject, version_number, outcome='unconfirmed',
                          level=logging.WARNING, attempt=attempt, id=schema_id, error=str(e))
            continue

        events.record('read-back', target_subject, version_number, outcome='confirmed',
                      id=schema_id,
                      content_matches=extract_schema_string(read_back) == canonical)
        outcome.state = ReplayState.REGISTERED_CONFIRMED
        outcome.registered = True
        outcome.error = None
        return outcome, canonical

    logger.error(f"Giving up on {target_subject} version {version_number} after "
                 f"{register_attempts} attempts: {outcome.error}")
    return outcome, canonical


def _probe_subject(client: SchemaRegistryClient, subject: str, min_expected_versions: int,
                   attempt: int, events: ReplicationEventLog) -> Tuple[bool, Optional[str], Dict[str, Any], bool]:
    """Check once whether a subject is visible. Returns (ok, method, evidence, responded)."""
    evidence: Dict[str, Any] = {}
    responded = False

    try:
        versions = list(client.get_versions(subject))
        responded = True
        evidence['versions'] = versions
        if len(versions) >= min_expected_versions:
            events.record('verify', subject, outcome='confirmed', attempt=attempt,
                          method='versions', versions=versions)
            return True, 'versions', {'versions': versions}, True
    except Exception as e:
        responded = responded or not isinstance(e, CONNECTION_ERRORS)
        evidence['versions_error'] = str(e)

    try:
        subjects = client.get_subjects()
        responded = True
        if subject in subjects:
            events.record('verify', subject, outcome='confirmed', attempt=attempt,
                          method='subjectList', subject_count=len(subjects))
            return True, 'subjectList', {'subject_count': len(subjects)}, True
        evidence['subject_count'] = len(subjects)
    except Exception as e:
        responded = responded or not isinstance(e, CONNECTION_ERRORS)
        evidence['subjects_error'] = str(e)

    events.record('verify', subject, outcome='not-visible', level=logging.DEBUG,
                  attempt=attempt, **evidence)
    return False, None, evidence, responded


def verify_subject_registered(client: SchemaRegistryClient, subject: str,
                              min_expected_versions: int = 1, max_attempts: int = 6,
                              initial_delay: float = 0.2, max_delay: float = 2.0,
                              sleep: Callable[[float], None] = time.sleep,
                              events: Optional[ReplicationEventLog] = None) -> VerificationResult:
    """Confirm that a subject is visible in a registry, allowing for eventual consistency.

    Each attempt asks for the subject's versions and then for the subject list;
    either signal is sufficient. Between attempts the delay doubles up to
    ``max_delay``.
    """
    events = _event_log(events)
    delay = initial_delay
    reachable = False
    evidence: Dict[str, Any] = {}

    for attempt in range(1, max_attempts + 1):
        ok, method, evidence, responded = _probe_subject(client, subject, min_expected_versions,
                                                         attempt, events)
        reachable = reachable or responded
        if ok:
            return VerificationResult(ok=True, method=method, evidence=evidence,
                                      attempts=attempt, reachable=True)
        logger.debug(f"Subject {subject} not visible yet, retrying in {delay:.1f}s ({attempt}/{max_attempts})")
        sleep(delay)
        delay = min(delay * 2, max_delay)

    events.record('verify', subject, outcome='timeout', level=logging.WARNING,
                  attempts=max_attempts, reachable=reachable)
    return VerificationResult(ok=False, evidence=evidence, attempts=max_attempts,
                              reachable=reachable)


def find_subject_by_schema(client: SchemaRegistryClient, canonical_schema: str,
                           max_subjects_scanned: int = 100,
                           events: Optional[ReplicationEventLog] = None) -> Optional[DiagnosticMatch]:
    """Scan a registry for a schema by content.

    Only meant for failure paths: this fetches every version of up to
    ``max_subjects_scanned`` subjects. Read errors on individual subjects or
    versions count as no match.
    """
    events = _event_log(events)
    try:
        subjects = client.get_subjects()
    except Exception as e:
        events.record('diagnose', '*', outcome='failed', level=logging.WARNING, error=str(e))
        return None

    scanned = subjects[:max_subjects_scanned]
    if len(subjects) > len(scanned):
        logger.info(f"Diagnostic scan limited to {len(scanned)} of {len(subjects)} subjects")

    for subject in scanned:
        try:
            versions = sorted(client.get_versions(subject))
        except Exception as e:
            logger.debug(f"Diagnostic scan could not list versions of {subject}: {e}")
            continue
        for version in versions:
            try:
                payload = client.get_schema(subject, version)
            except Exception as e:
                logger.debug(f"Diagnostic scan could not read {subject} v{version}: {e}")
                continue
            if extract_schema_string(payload) == canonical_schema:
                events.record('diagnose', subject, version, outcome='found')
                return DiagnosticMatch(subject=subject, version=version)

    events.record('diagnose', '*', outcome='not-found', scanned=len(scanned))
    return None


def _diagnose_unconfirmed(target_client: SchemaRegistryClient, outcome: ReplayOutcome,
                          canonical: str, target_subject: str, policy: ReplicationPolicy,
                          events: ReplicationEventLog) -> None:
    match = find_subject_by_schema(target_client, canonical, policy.max_subjects_scanned, events)
    if match:
        events.record('diagnose-unconfirmed', target_subject, outcome.version_number,
                      outcome='found', level=logging.WARNING,
                      found_subject=match.subject, found_version=match.version)
    else:
        events.record('diagnose-unconfirmed', target_subject, outcome.version_number,
                      outcome='not-found', level=logging.WARNING)


def _finish_with_verification(target_client: SchemaRegistryClient, result: BatchResult,
                              verification: VerificationResult, canonical: Optional[str],
                              policy: ReplicationPolicy, events: ReplicationEventLog) -> BatchResult:
    result.verification = verification
    result.final_verified = verification.ok

    if not verification.ok:
        if not verification.reachable:
            result.events = events.events
            raise TargetUnreachableError(result)
        logger.warning(f"Could not confirm subject {result.target_subject_name} in the target "
                       f"registry; writes may still become visible later")
        if policy.run_diagnostics and canonical is not None:
            result.diagnostic_match = find_subject_by_schema(
                target_client, canonical, policy.max_subjects_scanned, events)
            if result.diagnostic_match:
                logger.warning(f"Schema found under subject {result.diagnostic_match.subject} "
                               f"version {result.diagnostic_match.version} instead")
    result.events = events.events
    return result


def paste_subject(target_client: SchemaRegistryClient, clipboard: ClipboardEntry,
                  target_subject: str, policy: Optional[ReplicationPolicy] = None,
                  events: Optional[ReplicationEventLog] = None,
                  sleep: Callable[[float], None] = time.sleep) -> BatchResult:
    """Replay every clipboard version, oldest first, into ``target_subject``.

    Per-version failures never abort the batch; every version gets an outcome.

    Raises:
        TargetUnreachableError: the target could not be reached at all for the
            final verification; ``error.result`` still holds the outcomes.
    """
    policy = policy or ReplicationPolicy()
    events = _event_log(events)
    result = BatchResult(target_subject_name=target_subject)
    last_canonical = None
    last_accepted_canonical = None

    logger.info(f"Pasting {len(clipboard)} versions of {clipboard.source_subject_name} "
                f"into {target_subject}")
    for version_number, document in sorted(clipboard.versions, key=lambda item: item[0]):
        outcome, canonical = _replay_version(target_client, document, version_number,
                                             target_subject, policy.register_attempts, events)
        result.outcomes.append(outcome)
        if canonical is not None:
            last_canonical = canonical
        if outcome.state in (ReplayState.REGISTERED_CONFIRMED, ReplayState.REGISTERED_UNCONFIRMED):
            last_accepted_canonical = canonical
        if outcome.state is ReplayState.REGISTERED_UNCONFIRMED and policy.run_diagnostics:
            _diagnose_unconfirmed(target_client, outcome, canonical, target_subject, policy, events)

    verification = verify_subject_registered(
        target_client, target_subject,
        max_attempts=policy.verify_attempts,
        initial_delay=policy.verify_initial_delay,
        max_delay=policy.verify_max_delay,
        sleep=sleep,
        events=events
    )
    # Look for what the target accepted; a rejected schema cannot be found there
    return _finish_with_verification(target_client, result, verification,
                                     last_accepted_canonical or last_canonical, policy, events)


def paste_schema_version(target_client: SchemaRegistryClient, document: SchemaDocument,
                         target_subject: str, policy: Optional[ReplicationPolicy] = None,
                         events: Optional[ReplicationEventLog] = None,
                         sleep: Callable[[float], None] = time.sleep) -> BatchResult:
    """Register a single schema version and verify it with a short linear backoff."""
    policy = policy or ReplicationPolicy()
    events = _event_log(events)
    result = BatchResult(target_subject_name=target_subject)

    outcome, canonical = _replay_version(target_client, document, document.version_number,
                                         target_subject, 1, events)
    result.outcomes.append(outcome)
    if outcome.state is ReplayState.REGISTERED_UNCONFIRMED and policy.run_diagnostics:
        _diagnose_unconfirmed(target_client, outcome, canonical, target_subject, policy, events)

    verification = VerificationResult(ok=False, reachable=False)
    reachable = False
    for attempt in range(1, policy.single_verify_attempts + 1):
        ok, method, evidence, responded = _probe_subject(target_client, target_subject, 1,
                                                         attempt, events)
        reachable = reachable or responded
        verification = VerificationResult(ok=ok, method=method, evidence=evidence,
                                          attempts=attempt, reachable=reachable)
        if ok:
            break
        if attempt < policy.single_verify_attempts:
            sleep(policy.single_verify_delay_step * attempt)
    else:
        events.record('verify', target_subject, outcome='timeout', level=logging.WARNING,
                      attempts=policy.single_verify_attempts, reachable=reachable)

    return _finish_with_verification(target_client, result, verification, canonical,
                                     policy, events)


def display_batch_result(result: BatchResult):
    """Display paste results using logging."""
    logger.info(f"\nPaste Results for {result.target_subject_name}:")

    for outcome in result.outcomes:
        if outcome.registered:
            logger.info(
                f"Version: {outcome.version_number}, Registered"
                + (f", ID: {outcome.registry_assigned_id}" if outcome.registry_assigned_id is not None else "")
            )
        elif not outcome.attempted:
            logger.warning(f"Version: {outcome.version_number}, Skipped, Reason: {outcome.error}")
        else:
            logger.warning(
                f"Version: {outcome.version_number}, Failed ({outcome.state.value}), "
                f"Reason: {outcome.error}"
            )

    status = result.status
    registered = result.registered_count
    total = len(result.outcomes)
    if status == 'verified':
        logger.info(f"Registered and verified all {total} versions")
    elif status == 'unverified':
        logger.warning(f"Registered all {total} versions but the target registry does not show "
                       f"the subject yet (registered but unverified)")
    elif status == 'partial':
        logger.warning(f"Partial success: registered {registered} of {total} versions, "
                       f"failed versions: {', '.join(str(v) for v in result.failed_versions)}"
                       + ("" if result.final_verified else " (subject not verified)"))
    else:
        logger.error(f"Failed to register any of the {total} versions")

    if result.diagnostic_match:
        logger.warning(f"Diagnostic: schema found under subject {result.diagnostic_match.subject} "
                       f"version {result.diagnostic_match.version}")


def _parse_version_selector(value: Optional[str]) -> VersionSelector:
    if value is None or value.strip().lower() in ('', 'all'):
        return None
    value = value.strip().lower()
    if value == 'latest':
        return 'latest'
    return int(value)


def main():
    subject = os.getenv('COPY_SUBJECT')
    if not subject:
        logger.error("COPY_SUBJECT must be set to the subject to copy")
        return 1

    try:
        version = _parse_version_selector(os.getenv('COPY_VERSION', 'all'))
        policy = ReplicationPolicy.from_env()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    # Initialize source client
    source_client = SchemaRegistryClient(
        url=os.getenv('SOURCE_SCHEMA_REGISTRY_URL', 'http://localhost:8081'),
        username=os.getenv('SOURCE_USERNAME'),
        password=os.getenv('SOURCE_PASSWORD'),
        context=os.getenv('SOURCE_CONTEXT')
    )

    # Initialize destination client
    dest_client = SchemaRegistryClient(
        url=os.getenv('DEST_SCHEMA_REGISTRY_URL', 'http://localhost:8082'),
        username=os.getenv('DEST_USERNAME'),
        password=os.getenv('DEST_PASSWORD'),
        context=os.getenv('DEST_CONTEXT')
    )

    target_subject = os.getenv('PASTE_SUBJECT') or subject
    events = ReplicationEventLog()
    clipboard = SchemaClipboard()

    try:
        clipboard.hold(copy_subject(source_client, subject, version, events))
        result = paste_subject(dest_client, clipboard.entry, target_subject, policy, events)
    except TargetUnreachableError as e:
        display_batch_result(e.result)
        logger.error(str(e))
        return 1
    except (SubjectNotFoundError, ReplicationError) as e:
        logger.error(str(e))
        return 1
    except requests.exceptions.RequestException as e:
        logger.error(f"Error connecting to Schema Registry: {e}")
        return 1

    display_batch_result(result)
    if result.status == 'verified':
        return 0
    if result.status in ('unverified', 'partial'):
        return 2
    return 1


if __name__ == "__main__":
    exit(main())
