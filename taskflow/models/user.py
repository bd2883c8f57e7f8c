# taskflow/models/user.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from taskflow.database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, nullable=False, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String, nullable=False, default="user")  # superadmin, admin, user
    designation = Column(String, nullable=False, default="")
    department = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, server_default=func.now())

    assigned_tasks = relationship("Task", back_populates="assignee", foreign_keys="Task.assigned_to")
    assigned_checklists = relationship("Checklist", back_populates="assignee", foreign_keys="Checklist.assigned_to")
