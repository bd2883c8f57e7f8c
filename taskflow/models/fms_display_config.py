# taskflow/models/fms_display_config.py
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from taskflow.database import Base
import enum

class DisplayMode(str, enum.Enum):
    NAME = "name"
    DESIGNATION = "designation"
    BOTH = "both"

class FMSDisplayConfig(Base):
    """Single-row table holding how FMS step owners are shown"""
    __tablename__ = "fms_display_config"

    id = Column(Integer, primary_key=True, index=True)
    display_mode = Column(String, nullable=False, default=DisplayMode.NAME.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
