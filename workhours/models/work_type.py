from sqlalchemy import Column, Integer, String

from workhours.database import Base


class WorkType(Base):
    """Category of work (office, remote, business trip). Maintained elsewhere."""

    __tablename__ = "work_types"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)
    description = Column(String, nullable=True)
