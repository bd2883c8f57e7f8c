# taskflow/services/designations.py
from typing import List, Optional

from sqlalchemy.orm import Session

from taskflow.models import User, FMSDisplayConfig, DisplayMode


class DesignationService:
    @staticmethod
    def list_designations(db: Session) -> List[str]:
        """Distinct non-empty designations, sorted"""
        rows = db.query(User.designation).filter(
            User.designation.isnot(None),
            User.designation != "",
        ).distinct().all()
        return sorted(row[0] for row in rows if row[0])

    @staticmethod
    def list_users(db: Session) -> List[User]:
        return db.query(User).order_by(User.username).all()

    @staticmethod
    def set_designation(db: Session, user_id: int, designation: Optional[str]) -> Optional[User]:
        user = db.query(User).filter(User.id == user_id).first()
        if user is None:
            return None
        user.designation = designation or ""
        db.commit()
        db.refresh(user)
        return user


class DisplayConfigService:
    """Keeps the single FMS display configuration row"""

    @staticmethod
    def get_config(db: Session) -> FMSDisplayConfig:
        config = db.query(FMSDisplayConfig).order_by(FMSDisplayConfig.id).first()
        if config is None:
            config = FMSDisplayConfig(display_mode=DisplayMode.NAME.value)
            db.add(config)
            db.commit()
            db.refresh(config)
        return config

    @staticmethod
    def update_config(db: Session, display_mode: DisplayMode) -> FMSDisplayConfig:
        config = db.query(FMSDisplayConfig).order_by(FMSDisplayConfig.id).first()
        if config is None:
            config = FMSDisplayConfig(display_mode=display_mode.value)
            db.add(config)
        else:
            config.display_mode = display_mode.value
        db.commit()
        db.refresh(config)
        return config
