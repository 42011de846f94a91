"""Approval state machine for work hours entries.

An entry is UNAPPROVED when created and after every edit; an administrator
moves it to APPROVED, which marks it ready for payroll. Approving twice is a
no-op. Deletion is allowed from either state.

The functions here validate input and permissions, then delegate the write to
``work_hours_store``. They never commit: the caller owns the session.
"""

import logging
from dataclasses import dataclass
from datetime import date, time
from enum import Enum
from typing import Optional

from sqlalchemy.orm import Session

from workhours.core.errors import NotFound, PermissionDenied, ValidationFailure, VersionConflict
from workhours.models.employee import Employee
from workhours.models.project import Project
from workhours.models.work_hours import WorkHours
from workhours.models.work_type import WorkType
from workhours.services import work_hours_store

logger = logging.getLogger(__name__)

MAX_COMMENT_LENGTH = 500


class EntryState(Enum):
    UNAPPROVED = "unapproved"
    APPROVED = "approved"


class EntryAction(Enum):
    CREATE = "create"
    EDIT = "edit"
    APPROVE = "approve"
    DELETE = "delete"


# DELETE maps to None: the entry ceases to exist.
_TRANSITIONS = {
    (None, EntryAction.CREATE): EntryState.UNAPPROVED,
    (EntryState.UNAPPROVED, EntryAction.EDIT): EntryState.UNAPPROVED,
    (EntryState.APPROVED, EntryAction.EDIT): EntryState.UNAPPROVED,
    (EntryState.UNAPPROVED, EntryAction.APPROVE): EntryState.APPROVED,
    (EntryState.APPROVED, EntryAction.APPROVE): EntryState.APPROVED,
    (EntryState.UNAPPROVED, EntryAction.DELETE): None,
    (EntryState.APPROVED, EntryAction.DELETE): None,
}


def transition(state: Optional[EntryState], action: EntryAction) -> Optional[EntryState]:
    try:
        return _TRANSITIONS[(state, action)]
    except KeyError:
        raise ValidationFailure(f"Cannot {action.value} an entry in state {state}") from None


def state_of(entry: WorkHours) -> EntryState:
    return EntryState.APPROVED if entry.approved else EntryState.UNAPPROVED


@dataclass(frozen=True)
class Actor:
    employee_id: int
    is_admin: bool = False


@dataclass(frozen=True)
class EntryInput:
    work_date: date
    work_type_id: int
    project_id: Optional[int] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    comment: Optional[str] = None


def validate_entry_input(data: EntryInput) -> None:
    if data.work_date is None:
        raise ValidationFailure("work_date is required")
    if data.work_type_id is None:
        raise ValidationFailure("work_type_id is required")

    # Times are wall-clock times on work_date; offsets cannot be stored.
    for field_name in ("start_time", "end_time"):
        value = getattr(data, field_name)
        if value is not None and value.tzinfo is not None:
            raise ValidationFailure(f"{field_name} must not carry a timezone offset")

    # Missing times are allowed; they simply contribute no duration.
    if data.start_time is not None and data.end_time is not None:
        if data.end_time <= data.start_time:
            raise ValidationFailure("end_time must be after start_time")

    if data.comment is not None and len(data.comment) > MAX_COMMENT_LENGTH:
        raise ValidationFailure(f"comment must be at most {MAX_COMMENT_LENGTH} characters")


def _require_references(db: Session, employee_id: int, data: EntryInput) -> None:
    if db.get(Employee, int(employee_id)) is None:
        raise NotFound(f"Employee {employee_id} not found")
    if db.get(WorkType, int(data.work_type_id)) is None:
        raise NotFound(f"Work type {data.work_type_id} not found")
    if data.project_id is not None and db.get(Project, int(data.project_id)) is None:
        raise NotFound(f"Project {data.project_id} not found")


def _require_entry(db: Session, entry_id: int) -> WorkHours:
    entry = work_hours_store.find_by_id(entry_id, db=db)
    if entry is None:
        raise NotFound(f"Work hours entry {entry_id} not found")
    return entry


def _require_owner_or_admin(entry: WorkHours, actor: Actor) -> None:
    if actor.is_admin:
        return
    if int(entry.employee_id) != int(actor.employee_id):
        raise PermissionDenied("Only the owner or an administrator may modify this entry")


def _check_version(entry: WorkHours, expected_version: Optional[int]) -> None:
    if expected_version is None:
        return
    if int(entry.version) != int(expected_version):
        raise VersionConflict(int(entry.id), int(expected_version), int(entry.version))


def submit_entry(db: Session, actor: Actor, data: EntryInput) -> WorkHours:
    """Record work for the actor. Entries are always created for oneself."""
    validate_entry_input(data)
    _require_references(db, actor.employee_id, data)
    transition(None, EntryAction.CREATE)

    entry = work_hours_store.create_entry(
        employee_id=actor.employee_id,
        work_date=data.work_date,
        work_type_id=data.work_type_id,
        project_id=data.project_id,
        start_time=data.start_time,
        end_time=data.end_time,
        comment=data.comment,
        db=db,
    )
    logger.info(
        "Work hours entry created",
        extra={"entry_id": entry.id, "employee_id": entry.employee_id, "work_date": entry.work_date},
    )
    return entry


def revise_entry(
    db: Session,
    actor: Actor,
    entry_id: int,
    data: EntryInput,
    *,
    expected_version: Optional[int] = None,
) -> WorkHours:
    entry = _require_entry(db, entry_id)
    _require_owner_or_admin(entry, actor)
    validate_entry_input(data)
    _require_references(db, entry.employee_id, data)
    _check_version(entry, expected_version)

    was_approved = bool(entry.approved)
    transition(state_of(entry), EntryAction.EDIT)

    entry = work_hours_store.edit_entry(
        entry_id,
        work_date=data.work_date,
        work_type_id=data.work_type_id,
        start_time=data.start_time,
        end_time=data.end_time,
        comment=data.comment,
        project_id=data.project_id,
        db=db,
    )
    logger.info(
        "Work hours entry edited",
        extra={
            "entry_id": entry.id,
            "edited_by": actor.employee_id,
            "approval_reset": was_approved,
            "version": entry.version,
        },
    )
    return entry


def approve(
    db: Session,
    actor: Actor,
    entry_id: int,
    *,
    expected_version: Optional[int] = None,
) -> WorkHours:
    if not actor.is_admin:
        raise PermissionDenied("Only administrators may approve work hours")

    entry = _require_entry(db, entry_id)
    _check_version(entry, expected_version)

    previous = state_of(entry)
    transition(previous, EntryAction.APPROVE)

    entry = work_hours_store.approve_entry(entry_id, db=db)
    if previous is EntryState.UNAPPROVED:
        logger.info("Work hours entry approved", extra={"entry_id": entry.id, "approved_by": actor.employee_id})
    return entry


def remove(db: Session, actor: Actor, entry_id: int) -> None:
    entry = _require_entry(db, entry_id)
    _require_owner_or_admin(entry, actor)
    was_approved = bool(entry.approved)
    transition(state_of(entry), EntryAction.DELETE)

    work_hours_store.delete_entry(entry_id, db=db)
    logger.info(
        "Work hours entry deleted",
        extra={"entry_id": int(entry_id), "deleted_by": actor.employee_id, "was_approved": was_approved},
    )
