# taskflow/routers/designations.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from taskflow.database import get_db
from taskflow.models.user import User
from taskflow.models.fms_display_config import DisplayMode
from taskflow.schemas.designation import (
    DesignationList,
    DesignationUsers,
    DesignationUpdate,
    DesignationUpdated,
    DisplayConfigUpdate,
    DisplayConfigResponse,
)
from taskflow.services.designations import DesignationService, DisplayConfigService
from taskflow.utils.auth import get_current_user, require_superadmin

router = APIRouter(prefix="/designations", tags=["Designations"])

@router.get("/", response_model=DesignationList)
def get_designations(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get all unique designations"""
    return {"designations": DesignationService.list_designations(db)}

@router.get("/users", response_model=DesignationUsers)
def get_users_with_designations(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_superadmin),
):
    """Get all users with their designations"""
    return {"users": DesignationService.list_users(db)}

@router.put("/users/{user_id}", response_model=DesignationUpdated)
def update_user_designation(
    user_id: int,
    payload: DesignationUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_superadmin),
):
    """Update a user's designation; an empty or missing value clears it"""
    user = DesignationService.set_designation(db, user_id, payload.designation)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return {"message": "Designation updated successfully", "user": user}

@router.get("/fms-display-config", response_model=DisplayConfigResponse)
def get_fms_display_config(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get how FMS step owners are displayed"""
    config = DisplayConfigService.get_config(db)
    return {"config": {"displayMode": config.display_mode}}

@router.put("/fms-display-config", response_model=DisplayConfigResponse)
def update_fms_display_config(
    payload: DisplayConfigUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_superadmin),
):
    """Update the FMS display mode"""
    try:
        display_mode = DisplayMode(payload.displayMode)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid display mode. Must be: name, designation, or both",
        )

    config = DisplayConfigService.update_config(db, display_mode)
    return {
        "message": "Display configuration updated successfully",
        "config": {"displayMode": config.display_mode},
    }
