from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime

class UserLogin(BaseModel):
    email: EmailStr
    password: str

class UserOut(BaseModel):
    id: int
    username: str
    email: str
    role: str
    designation: str = ""
    department: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }

class UserDesignationOut(BaseModel):
    id: int
    username: str
    email: str
    designation: str = ""
    role: str
    is_active: bool

    model_config = {
        "from_attributes": True
    }
