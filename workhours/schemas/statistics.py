from datetime import date

from pydantic import BaseModel, ConfigDict


class WeeklyStatisticsResponse(BaseModel):
    employee_id: int
    week_offset: int
    week_start: date
    week_end: date
    total_hours: float
    days_worked: int
    average_daily_hours: float


class EmployeeStatisticsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    employee_id: int
    total_hours: float
    weeks_count: int
    average_weekly_hours: float
