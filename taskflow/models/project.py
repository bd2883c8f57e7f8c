# taskflow/models/project.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from taskflow.database import Base
import enum
from datetime import datetime

class StepStatus(str, enum.Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    DONE = "Done"
    NOT_STARTED = "Not Started"

class Project(Base):
    """A running instance of an FMS workflow"""
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    project_name = Column(String, nullable=False, index=True)
    fms_name = Column(String, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    # Step order is the order the steps were stored in
    steps = relationship(
        "ProjectStep",
        back_populates="project",
        order_by="ProjectStep.position",
        cascade="all, delete-orphan",
    )

class ProjectStep(Base):
    __tablename__ = "project_steps"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    step_no = Column(Integer, nullable=True)
    what = Column(String, nullable=True)
    status = Column(String, nullable=False, default=StepStatus.NOT_STARTED.value)
    who_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    project = relationship("Project", back_populates="steps")
    who = relationship("User", foreign_keys=[who_id])
