from fastapi import APIRouter, Depends, HTTPException, Query

from workhours.core.authorization import Role
from workhours.core.clock import get_clock
from workhours.database import SessionLocal
from workhours.deps.auth import Principal, require_auth
from workhours.schemas.statistics import EmployeeStatisticsResponse, WeeklyStatisticsResponse
from workhours.services import statistics

router = APIRouter(prefix="/statistics", tags=["Statistics"])


def _require_self_or_elevated(principal: Principal, employee_id: int) -> None:
    if int(employee_id) != principal.employee_id and principal.role is Role.EMPLOYEE:
        raise HTTPException(status_code=403, detail="Insufficient role")


@router.get("/weekly", response_model=WeeklyStatisticsResponse)
def weekly_statistics(
    week_offset: int = Query(default=0, ge=-520, le=520),
    employee_id: int | None = None,
    principal: Principal = Depends(require_auth),
):
    target = principal.employee_id if employee_id is None else int(employee_id)
    _require_self_or_elevated(principal, target)

    db = SessionLocal()
    try:
        stats = statistics.get_weekly_statistics(target, week_offset, clock=get_clock(), db=db)
        return WeeklyStatisticsResponse(
            employee_id=target,
            week_offset=stats.week_offset,
            week_start=stats.window.start,
            week_end=stats.window.end,
            total_hours=stats.total_hours,
            days_worked=stats.days_worked,
            average_daily_hours=stats.average_daily_hours,
        )
    finally:
        db.close()


@router.get("/me", response_model=EmployeeStatisticsResponse)
def my_statistics(principal: Principal = Depends(require_auth)):
    db = SessionLocal()
    try:
        return statistics.get_employee_statistics(principal.employee_id, db=db)
    finally:
        db.close()


@router.get("/employees/{employee_id}", response_model=EmployeeStatisticsResponse)
def employee_statistics(
    employee_id: int,
    principal: Principal = Depends(require_auth),
):
    _require_self_or_elevated(principal, employee_id)

    db = SessionLocal()
    try:
        return statistics.get_employee_statistics(employee_id, db=db)
    finally:
        db.close()
