from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from workhours.database import Base


class Employee(Base):
    """Dictionary row for a person who logs hours.

    Employees are maintained outside this service; work hours only reference
    them by id and read the name for reports.
    """

    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
