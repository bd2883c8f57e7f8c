# taskflow/models/help_ticket.py
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from taskflow.database import Base
import enum
from datetime import datetime

class HelpTicketStatus(str, enum.Enum):
    """Recognized ticket states, compared lower-cased"""
    OPEN = "open"
    IN_PROGRESS = "in progress"
    CLOSED = "closed"
    VERIFIED_CLOSED = "verified & closed"

class HelpTicket(Base):
    __tablename__ = "help_tickets"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String, nullable=True)  # free text: Open, In Progress, Closed, Verified & Closed
    assigned_to = Column(Integer, ForeignKey("users.id"), nullable=True)
    raised_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    assignee = relationship("User", foreign_keys=[assigned_to])
    raiser = relationship("User", foreign_keys=[raised_by])
