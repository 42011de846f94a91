from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from workhours.core.authorization import Role, require_role
from workhours.core.errors import WorkHoursError, to_http_exception
from workhours.database import SessionLocal
from workhours.deps.auth import Principal, require_auth
from workhours.models.work_hours import WorkHours
from workhours.schemas.work_hours import (
    ApproveRequest,
    WorkHoursCreate,
    WorkHoursResponse,
    WorkHoursUpdate,
)
from workhours.services import approval_workflow, work_hours_store
from workhours.services.approval_workflow import Actor, EntryInput

router = APIRouter(
    prefix="/work_hours",
    tags=["Work Hours"],
)


def _actor(principal: Principal) -> Actor:
    return Actor(employee_id=principal.employee_id, is_admin=principal.is_admin)


def _entry_input(payload: WorkHoursCreate) -> EntryInput:
    return EntryInput(
        work_date=payload.work_date,
        work_type_id=payload.work_type_id,
        project_id=payload.project_id,
        start_time=payload.start_time,
        end_time=payload.end_time,
        comment=payload.comment,
    )


def _to_response(entry: WorkHours) -> WorkHoursResponse:
    duration = entry.duration
    week = entry.week_range
    return WorkHoursResponse(
        id=entry.id,
        employee_id=entry.employee_id,
        employee_name=None if entry.employee is None else entry.employee.name,
        work_date=entry.work_date,
        day_of_week=entry.day_of_week,
        week_start=week.start,
        week_end=week.end,
        project_id=entry.project_id,
        project_name=None if entry.project is None else entry.project.name,
        work_type_id=entry.work_type_id,
        work_type_name=None if entry.work_type is None else entry.work_type.name,
        start_time=entry.start_time,
        end_time=entry.end_time,
        duration_minutes=None if duration is None else int(duration.total_seconds() // 60),
        worked_time=entry.worked_time,
        comment=entry.comment,
        approved=bool(entry.approved),
        version=int(entry.version),
    )


@router.get("", response_model=list[WorkHoursResponse])
def list_work_hours(
    employee_id: Optional[int] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    principal: Principal = Depends(require_auth),
):
    target = principal.employee_id if employee_id is None else int(employee_id)
    if target != principal.employee_id and principal.role is Role.EMPLOYEE:
        raise HTTPException(status_code=403, detail="Insufficient role")

    if (start is None) != (end is None):
        raise HTTPException(status_code=422, detail="start and end must be given together")

    db = SessionLocal()
    try:
        if start is not None:
            rows = work_hours_store.find_by_employee_and_date_range(target, start, end, db=db)
        else:
            rows = work_hours_store.find_by_employee(target, db=db)
        return [_to_response(r) for r in rows]
    finally:
        db.close()


@router.get("/all", response_model=list[WorkHoursResponse])
def list_all_work_hours(
    _principal: Principal = Depends(require_role(Role.ACCOUNTANT)),
):
    db = SessionLocal()
    try:
        return [_to_response(r) for r in work_hours_store.find_all(db=db)]
    finally:
        db.close()


@router.get("/report", response_model=list[WorkHoursResponse])
def work_hours_report(
    start: date = Query(...),
    end: date = Query(...),
    _principal: Principal = Depends(require_role(Role.ACCOUNTANT)),
):
    if end < start:
        raise HTTPException(status_code=422, detail="end must not be before start")

    db = SessionLocal()
    try:
        return [_to_response(r) for r in work_hours_store.find_by_date_range(start, end, db=db)]
    finally:
        db.close()


@router.get("/{entry_id}", response_model=WorkHoursResponse)
def get_work_hours(
    entry_id: int,
    principal: Principal = Depends(require_auth),
):
    db = SessionLocal()
    try:
        entry = work_hours_store.find_by_id(entry_id, db=db)
        if entry is None:
            raise HTTPException(status_code=404, detail="Work hours entry not found")
        if entry.employee_id != principal.employee_id and principal.role is Role.EMPLOYEE:
            raise HTTPException(status_code=403, detail="Insufficient role")
        return _to_response(entry)
    finally:
        db.close()


@router.post("", response_model=WorkHoursResponse, status_code=201)
def create_work_hours(
    payload: WorkHoursCreate,
    principal: Principal = Depends(require_auth),
):
    db = SessionLocal()
    try:
        entry = approval_workflow.submit_entry(db, _actor(principal), _entry_input(payload))
        db.commit()
        db.refresh(entry)
        return _to_response(entry)
    except WorkHoursError as exc:
        db.rollback()
        raise to_http_exception(exc) from exc
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@router.put("/{entry_id}", response_model=WorkHoursResponse)
def edit_work_hours(
    entry_id: int,
    payload: WorkHoursUpdate,
    principal: Principal = Depends(require_auth),
):
    db = SessionLocal()
    try:
        entry = approval_workflow.revise_entry(
            db,
            _actor(principal),
            entry_id,
            _entry_input(payload),
            expected_version=payload.expected_version,
        )
        db.commit()
        db.refresh(entry)
        return _to_response(entry)
    except WorkHoursError as exc:
        db.rollback()
        raise to_http_exception(exc) from exc
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@router.delete("/{entry_id}", status_code=204)
def delete_work_hours(
    entry_id: int,
    principal: Principal = Depends(require_auth),
):
    db = SessionLocal()
    try:
        approval_workflow.remove(db, _actor(principal), entry_id)
        db.commit()
    except WorkHoursError as exc:
        db.rollback()
        raise to_http_exception(exc) from exc
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@router.post("/{entry_id}/approve", response_model=WorkHoursResponse)
def approve_work_hours(
    entry_id: int,
    payload: Optional[ApproveRequest] = None,
    principal: Principal = Depends(require_role(Role.ADMIN)),
):
    db = SessionLocal()
    try:
        entry = approval_workflow.approve(
            db,
            _actor(principal),
            entry_id,
            expected_version=None if payload is None else payload.expected_version,
        )
        db.commit()
        db.refresh(entry)
        return _to_response(entry)
    except WorkHoursError as exc:
        db.rollback()
        raise to_http_exception(exc) from exc
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
