# taskflow/models/checklist.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from taskflow.database import Base
from datetime import datetime

class Checklist(Base):
    __tablename__ = "checklists"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    status = Column(String, nullable=False, default="Pending")  # Submitted once filled in
    assigned_to = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    assignee = relationship("User", foreign_keys=[assigned_to], back_populates="assigned_checklists")

class ChecklistTemplate(Base):
    __tablename__ = "checklist_templates"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=True)
    frequency = Column(String, nullable=False, default="daily")
    items = Column(JSON, nullable=False, default=list)
    status = Column(String, nullable=False, default="active")  # active or inactive
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)
    weekly_days = Column(JSON, nullable=False, default=list)
    monthly_dates = Column(JSON, nullable=False, default=list)
    exclude_sunday = Column(Boolean, nullable=False, default=False)
    assigned_to = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    assignee = relationship("User", foreign_keys=[assigned_to])
    creator = relationship("User", foreign_keys=[created_by])
    occurrences = relationship("ChecklistOccurrence", back_populates="template", cascade="all, delete-orphan")

class ChecklistOccurrence(Base):
    __tablename__ = "checklist_occurrences"

    id = Column(Integer, primary_key=True, index=True)
    template_id = Column(Integer, ForeignKey("checklist_templates.id"), nullable=True, index=True)
    assigned_to = Column(Integer, ForeignKey("users.id"), nullable=True)
    status = Column(String, nullable=False, default="pending")  # pending, completed
    due_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    template = relationship("ChecklistTemplate", back_populates="occurrences")
    assignee = relationship("User", foreign_keys=[assigned_to])
