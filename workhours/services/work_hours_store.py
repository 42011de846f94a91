from datetime import date, time
from typing import List, Optional

from sqlalchemy.orm import Session

from workhours.core.errors import NotFound
from workhours.database import SessionLocal
from workhours.models.work_hours import WorkHours

# Every function below follows the same session convention:
# if db is provided, the function will NOT commit/close and the caller owns the transaction;
# if db is None, the function manages its own session + commit.


def _get_entry(db: Session, entry_id: int) -> WorkHours:
    entry = db.get(WorkHours, int(entry_id))
    if entry is None:
        raise NotFound(f"Work hours entry {entry_id} not found")
    return entry


def create_entry(
    employee_id: int,
    work_date: date,
    work_type_id: int,
    project_id: Optional[int],
    start_time: Optional[time],
    end_time: Optional[time],
    comment: Optional[str],
    *,
    db: Optional[Session] = None,
) -> WorkHours:
    owns_db = db is None
    if owns_db:
        db = SessionLocal()

    try:
        entry = WorkHours(
            employee_id=int(employee_id),
            work_date=work_date,
            work_type_id=int(work_type_id),
            project_id=None if project_id is None else int(project_id),
            start_time=start_time,
            end_time=end_time,
            comment=comment,
            approved=False,
            version=1,
        )

        db.add(entry)
        db.flush()
        db.refresh(entry)

        if owns_db:
            db.commit()

        return entry
    except Exception:
        if owns_db:
            db.rollback()
        raise
    finally:
        if owns_db:
            db.close()


def find_by_id(entry_id: int, *, db: Optional[Session] = None) -> Optional[WorkHours]:
    owns_db = db is None
    if owns_db:
        db = SessionLocal()

    try:
        return db.get(WorkHours, int(entry_id))
    finally:
        if owns_db:
            db.close()


def find_by_employee(employee_id: int, *, db: Optional[Session] = None) -> List[WorkHours]:
    owns_db = db is None
    if owns_db:
        db = SessionLocal()

    try:
        return (
            db.query(WorkHours)
            .filter(WorkHours.employee_id == int(employee_id))
            .order_by(WorkHours.work_date.desc(), WorkHours.id.desc())
            .all()
        )
    finally:
        if owns_db:
            db.close()


def find_all(*, db: Optional[Session] = None) -> List[WorkHours]:
    owns_db = db is None
    if owns_db:
        db = SessionLocal()

    try:
        return db.query(WorkHours).order_by(WorkHours.work_date.desc(), WorkHours.id.desc()).all()
    finally:
        if owns_db:
            db.close()


def find_by_employee_and_date_range(
    employee_id: int,
    start: date,
    end: date,
    *,
    db: Optional[Session] = None,
) -> List[WorkHours]:
    owns_db = db is None
    if owns_db:
        db = SessionLocal()

    try:
        return (
            db.query(WorkHours)
            .filter(
                WorkHours.employee_id == int(employee_id),
                WorkHours.work_date >= start,
                WorkHours.work_date <= end,
            )
            .order_by(WorkHours.work_date.asc(), WorkHours.id.asc())
            .all()
        )
    finally:
        if owns_db:
            db.close()


def find_by_date_range(start: date, end: date, *, db: Optional[Session] = None) -> List[WorkHours]:
    owns_db = db is None
    if owns_db:
        db = SessionLocal()

    try:
        return (
            db.query(WorkHours)
            .filter(WorkHours.work_date >= start, WorkHours.work_date <= end)
            .order_by(WorkHours.work_date.asc(), WorkHours.employee_id.asc(), WorkHours.id.asc())
            .all()
        )
    finally:
        if owns_db:
            db.close()


def edit_entry(
    entry_id: int,
    work_date: date,
    work_type_id: int,
    start_time: Optional[time],
    end_time: Optional[time],
    comment: Optional[str],
    *,
    project_id: Optional[int] = None,
    db: Optional[Session] = None,
) -> WorkHours:
    """Overwrite the mutable fields. Approval is always reset."""
    owns_db = db is None
    if owns_db:
        db = SessionLocal()

    try:
        entry = _get_entry(db, entry_id)

        entry.work_date = work_date
        entry.work_type_id = int(work_type_id)
        entry.project_id = None if project_id is None else int(project_id)
        entry.start_time = start_time
        entry.end_time = end_time
        entry.comment = comment
        entry.approved = False
        entry.version = int(entry.version or 0) + 1

        db.flush()
        db.refresh(entry)

        if owns_db:
            db.commit()

        return entry
    except Exception:
        if owns_db:
            db.rollback()
        raise
    finally:
        if owns_db:
            db.close()


def delete_entry(entry_id: int, *, db: Optional[Session] = None) -> None:
    owns_db = db is None
    if owns_db:
        db = SessionLocal()

    try:
        entry = _get_entry(db, entry_id)
        db.delete(entry)
        db.flush()

        if owns_db:
            db.commit()
    except Exception:
        if owns_db:
            db.rollback()
        raise
    finally:
        if owns_db:
            db.close()


def approve_entry(entry_id: int, *, db: Optional[Session] = None) -> WorkHours:
    owns_db = db is None
    if owns_db:
        db = SessionLocal()

    try:
        entry = _get_entry(db, entry_id)

        if not entry.approved:
            entry.approved = True
            entry.version = int(entry.version or 0) + 1
            db.flush()
            db.refresh(entry)

        if owns_db:
            db.commit()

        return entry
    except Exception:
        if owns_db:
            db.rollback()
        raise
    finally:
        if owns_db:
            db.close()
