from workhours.models.employee import Employee
from workhours.models.project import Project
from workhours.models.work_hours import WorkHours
from workhours.models.work_type import WorkType

__all__ = [
    "Employee",
    "Project",
    "WorkHours",
    "WorkType",
]
