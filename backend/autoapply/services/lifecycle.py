"""
Application Lifecycle Manager - job application board state machine

Owns the signed-in user's JobApplication records for one session and is
the only component that mutates them.

Transition policy:
    Any status may move to any other status. The one side effect lives in
    move_status(): entering Applied stamps date_applied, unless the record
    is already in a submitted column (Applied / Interview / Offer) or
    already carries a date. Once set, date_applied is never cleared or
    rewritten.

    update() is a plain field merge. A status change made through it does
    NOT stamp date_applied; only move_status() does. Kanban drops go
    through move_status() like any other programmatic move.

Failure semantics:
    Every store call is bounded by persistence_timeout_seconds. A failed or
    timed-out write leaves the in-memory records untouched and raises;
    a failed load keeps the last-known-good records and sets load_error.

    The timeout covers the whole store call. If it fires after the adapter
    has already committed, the write is stored but the caller still sees
    PersistenceError and the in-memory record is unchanged; the next
    load() picks up the stored row.

Concurrency:
    Single logical thread per session. Mutations of one record id are
    serialized on a per-record asyncio.Lock, so two near-simultaneous
    moves into Applied stamp the date exactly once.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError as SchemaValidationError

from autoapply.config import get_settings
from autoapply.errors import (
    AutoApplyError,
    AuthRequiredError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from autoapply.schemas import (
    BOARD_COLUMNS,
    SUBMITTED_STATUSES,
    ApplicationStats,
    CurrentUser,
    JobApplication,
    JobApplicationCreate,
    JobApplicationUpdate,
    JobStatus,
)
from autoapply.services.fit_score import compute_fit_score
from autoapply.services.persistence import JobApplicationStore

logger = logging.getLogger(__name__)

# Record fields that may be edited but never set to null
NON_NULLABLE_FIELDS = frozenset(
    {"title", "company", "location", "description", "url", "notes", "status"}
)


@dataclass
class LifecycleEvent:
    """Outcome notification for a mutation, used for UI feedback."""

    kind: str  # create | update | delete | move | score
    record_id: Optional[str]
    ok: bool
    error: Optional[AutoApplyError] = None


Listener = Callable[[LifecycleEvent], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ApplicationLifecycleManager:
    """
    Session-scoped owner of a user's job applications.

    Attributes:
        store: Persistence capability (list/insert/update/delete by owner)
        owner: Signed-in user, or None for local-only mode (writes refused)
        load_error: Last load failure, None after a successful load
    """

    def __init__(
        self,
        store: JobApplicationStore,
        owner: Optional[CurrentUser],
        timeout: Optional[float] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.owner = owner
        self.timeout = timeout if timeout is not None else get_settings().persistence_timeout_seconds
        self._clock = clock
        self._records: List[JobApplication] = []
        self._locks: Dict[str, asyncio.Lock] = {}
        self._listeners: List[Listener] = []
        self.load_error: Optional[PersistenceError] = None

    # ==================== Events ====================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register an event listener. Returns a function that removes it."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _emit(self, kind: str, record_id: Optional[str], error: Optional[AutoApplyError] = None) -> None:
        event = LifecycleEvent(kind=kind, record_id=record_id, ok=error is None, error=error)
        for listener in list(self._listeners):
            listener(event)

    # ==================== Internals ====================

    def _require_owner(self) -> CurrentUser:
        if self.owner is None:
            raise AuthRequiredError("Sign in to change job applications")
        return self.owner

    def _lock_for(self, record_id: str) -> asyncio.Lock:
        lock = self._locks.get(record_id)
        if lock is None:
            lock = self._locks[record_id] = asyncio.Lock()
        return lock

    async def _call(self, operation: Awaitable[Any]) -> Any:
        try:
            return await asyncio.wait_for(operation, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise PersistenceError(f"Storage did not respond within {self.timeout}s") from e

    def _replace(self, record: JobApplication) -> None:
        self._records = [record if r.id == record.id else r for r in self._records]

    # ==================== Reads ====================

    @property
    def records(self) -> Tuple[JobApplication, ...]:
        return tuple(self._records)

    async def load(self) -> List[JobApplication]:
        """
        Fetch the owner's records from storage.

        On failure the previously loaded records are kept, load_error is set
        and the PersistenceError is re-raised so callers can tell a failed
        load from an empty board.
        """
        if self.owner is None:
            return []

        try:
            records = await self._call(self.store.list(self.owner.id))
        except PersistenceError as e:
            self.load_error = e
            logger.error(f"Loading applications for {self.owner.id} failed: {e.message}")
            raise

        self._records = list(records)
        self.load_error = None
        return list(self._records)

    def find_by_id(self, record_id: str) -> Optional[JobApplication]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def list_by_status(self, status: Union[JobStatus, str]) -> List[JobApplication]:
        """Records in the given column, in the order they are held."""
        return [record for record in self._records if record.status == status]

    def board(self) -> Dict[JobStatus, List[JobApplication]]:
        """Every board column in display order, empty columns included."""
        return {status: self.list_by_status(status) for status in BOARD_COLUMNS}

    def stats(self) -> ApplicationStats:
        by_status = {status.value: len(self.list_by_status(status)) for status in BOARD_COLUMNS}
        scores = [r.fit_score for r in self._records if r.fit_score is not None]

        return ApplicationStats(
            total=len(self._records),
            applied=sum(by_status[s.value] for s in SUBMITTED_STATUSES),
            interviewing=by_status[JobStatus.INTERVIEW.value] + by_status[JobStatus.OFFER.value],
            by_status=by_status,
            avg_fit_score=round(sum(scores) / len(scores), 1) if scores else None,
        )

    # ==================== Mutations ====================

    async def create(self, fields: Union[JobApplicationCreate, Dict[str, Any]]) -> JobApplication:
        """
        Create a record in the To Apply column.

        Raises:
            AuthRequiredError: No signed-in owner
            ValidationError: Title or company missing / blank
            PersistenceError: Storage failed or timed out
        """
        try:
            owner = self._require_owner()
            if isinstance(fields, dict):
                try:
                    fields = JobApplicationCreate.model_validate(fields)
                except SchemaValidationError as e:
                    raise ValidationError("Title and company are required") from e
            if not fields.title.strip() or not fields.company.strip():
                raise ValidationError("Title and company are required")

            draft = JobApplication(
                id=str(uuid.uuid4()),
                status=JobStatus.TO_APPLY,
                date_added=self._clock(),
                **fields.model_dump(),
            )
            stored = await self._call(self.store.insert(owner.id, draft))
        except AutoApplyError as e:
            self._emit("create", None, e)
            raise

        self._records.append(stored)
        logger.info(f"Created application {stored.id} ({stored.title} at {stored.company})")
        self._emit("create", stored.id)
        return stored

    async def update(
        self, record_id: str, changes: Union[JobApplicationUpdate, Dict[str, Any]]
    ) -> JobApplication:
        """
        Merge a partial edit into an owned record.

        Status changes made here bypass the date_applied stamp; use
        move_status() for board moves.

        Raises:
            AuthRequiredError, NotFoundError, ValidationError, PersistenceError
        """
        try:
            owner = self._require_owner()
            if isinstance(changes, dict):
                try:
                    changes = JobApplicationUpdate.model_validate(changes)
                except SchemaValidationError as e:
                    raise ValidationError(f"Invalid update: {e.errors()[0]['msg']}") from e

            fields = {
                key: value
                for key, value in changes.model_dump(exclude_unset=True).items()
                if value is not None or key not in NON_NULLABLE_FIELDS
            }
            for required in ("title", "company"):
                if required in fields and not fields[required].strip():
                    raise ValidationError(f"{required.capitalize()} cannot be blank")

            async with self._lock_for(record_id):
                current = self.find_by_id(record_id)
                if current is None:
                    raise NotFoundError(f"Job application {record_id} not found")
                if not fields:
                    return current

                if not await self._call(self.store.update(owner.id, record_id, fields)):
                    raise NotFoundError(f"Job application {record_id} not found")

                updated = current.model_copy(update=fields)
                self._replace(updated)
        except AutoApplyError as e:
            self._emit("update", record_id, e)
            raise

        self._emit("update", record_id)
        return updated

    async def delete(self, record_id: str) -> None:
        """
        Remove an owned record. Deleting an id that no longer exists is a
        no-op; an id held by another account raises NotFoundError.
        """
        try:
            owner = self._require_owner()
            async with self._lock_for(record_id):
                removed = await self._call(self.store.delete(owner.id, record_id))
                if not removed and await self._call(self.store.exists(record_id)):
                    raise NotFoundError(f"Job application {record_id} not found")

                self._records = [r for r in self._records if r.id != record_id]
        except AutoApplyError as e:
            self._emit("delete", record_id, e)
            raise

        self._locks.pop(record_id, None)
        if removed:
            logger.info(f"Deleted application {record_id}")
        self._emit("delete", record_id)

    async def move_status(self, record_id: str, new_status: Union[JobStatus, str]) -> JobApplication:
        """
        Move a record to another board column.

        The sole path that stamps date_applied: set to now when moving into
        Applied from a non-submitted column with no date recorded yet.

        Raises:
            AuthRequiredError, NotFoundError, ValidationError, PersistenceError
        """
        try:
            owner = self._require_owner()
            try:
                new_status = JobStatus(new_status)
            except ValueError as e:
                raise ValidationError(f"Unknown status: {new_status}") from e

            async with self._lock_for(record_id):
                current = self.find_by_id(record_id)
                if current is None:
                    raise NotFoundError(f"Job application {record_id} not found")

                changes: Dict[str, Any] = {"status": new_status}
                if (
                    new_status == JobStatus.APPLIED
                    and current.status not in SUBMITTED_STATUSES
                    and current.date_applied is None
                ):
                    changes["date_applied"] = self._clock()

                if not await self._call(self.store.update(owner.id, record_id, changes)):
                    raise NotFoundError(f"Job application {record_id} not found")

                moved = current.model_copy(update=changes)
                self._replace(moved)
        except AutoApplyError as e:
            self._emit("move", record_id, e)
            raise

        logger.info(f"Moved application {record_id}: {current.status.value} -> {new_status.value}")
        self._emit("move", record_id)
        return moved

    async def score(self, record_id: str, candidate_text: str) -> JobApplication:
        """Compute the fit score against the record's description and store it."""
        try:
            owner = self._require_owner()
            async with self._lock_for(record_id):
                current = self.find_by_id(record_id)
                if current is None:
                    raise NotFoundError(f"Job application {record_id} not found")

                fields = {"fit_score": compute_fit_score(current.description, candidate_text)}
                if not await self._call(self.store.update(owner.id, record_id, fields)):
                    raise NotFoundError(f"Job application {record_id} not found")

                scored = current.model_copy(update=fields)
                self._replace(scored)
        except AutoApplyError as e:
            self._emit("score", record_id, e)
            raise

        self._emit("score", record_id)
        return scored
