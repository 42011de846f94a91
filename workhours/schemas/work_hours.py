from datetime import date, time
from typing import Optional

from pydantic import BaseModel, Field


class WorkHoursCreate(BaseModel):
    work_date: date
    work_type_id: int
    project_id: Optional[int] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    comment: Optional[str] = None


class WorkHoursUpdate(WorkHoursCreate):
    expected_version: Optional[int] = Field(
        default=None,
        description="If set, the edit fails with 409 when the entry changed since it was read.",
    )


class ApproveRequest(BaseModel):
    expected_version: Optional[int] = None


class WorkHoursResponse(BaseModel):
    id: int
    employee_id: int
    employee_name: Optional[str]
    work_date: date
    day_of_week: str
    week_start: date
    week_end: date
    project_id: Optional[int]
    project_name: Optional[str]
    work_type_id: int
    work_type_name: Optional[str]
    start_time: Optional[time]
    end_time: Optional[time]
    duration_minutes: Optional[int]
    worked_time: Optional[str]
    comment: Optional[str]
    approved: bool
    version: int
