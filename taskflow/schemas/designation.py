# taskflow/schemas/designation.py
from pydantic import BaseModel
from typing import List, Optional

from taskflow.models.fms_display_config import DisplayMode
from taskflow.schemas.user import UserDesignationOut

class DesignationList(BaseModel):
    success: bool = True
    designations: List[str]

class DesignationUsers(BaseModel):
    success: bool = True
    users: List[UserDesignationOut]

class DesignationUpdate(BaseModel):
    designation: Optional[str] = None

class DesignationUpdated(BaseModel):
    success: bool = True
    message: str
    user: UserDesignationOut

class DisplayConfigOut(BaseModel):
    displayMode: DisplayMode

class DisplayConfigUpdate(BaseModel):
    displayMode: Optional[str] = None

class DisplayConfigResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    config: DisplayConfigOut
