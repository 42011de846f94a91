from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Time
from sqlalchemy.orm import relationship

from workhours.database import Base


class WorkHours(Base):
    __tablename__ = "work_hours"

    id = Column(Integer, primary_key=True, index=True)

    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    work_date = Column(Date, nullable=False, index=True)

    project_id = Column(Integer, ForeignKey("projects.id"), nullable=True)
    work_type_id = Column(Integer, ForeignKey("work_types.id"), nullable=False)

    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)
    comment = Column(String, nullable=True)

    approved = Column(Boolean, nullable=False, default=False)
    version = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    employee = relationship("Employee", lazy="joined")
    work_type = relationship("WorkType", lazy="joined")
    project = relationship("Project", lazy="joined")

    @property
    def duration(self):
        from workhours.services.statistics import entry_duration

        return entry_duration(self)

    @property
    def worked_time(self):
        from workhours.services.statistics import format_duration

        return format_duration(self.duration)

    @property
    def day_of_week(self) -> str:
        from workhours.services.statistics import day_of_week

        return day_of_week(self.work_date)

    @property
    def week_range(self):
        from workhours.services.statistics import weekly_window

        return weekly_window(self.work_date)
