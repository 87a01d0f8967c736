from pydantic import BaseModel, EmailStr, Field, ConfigDict
from datetime import datetime
from typing import Optional

from celltech.schemas.common import CamelModel


class UserRegister(BaseModel):
    """Schema for registering a new account."""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)


class UserLogin(BaseModel):
    """Credentials for the login endpoint."""
    email: EmailStr
    password: str


class UserUpdate(BaseModel):
    """Partial update of a user account."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6, max_length=72)
    role: Optional[str] = Field(None, min_length=1, max_length=50)
    status: Optional[str] = Field(None, min_length=1, max_length=50)


class UserResponse(CamelModel):
    """Public view of a user. The password hash is never included."""
    id: int
    name: str
    email: str
    role: str
    status: str
    created_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class LoginResponse(CamelModel):
    """Authenticated user details plus the bearer token."""
    user_id: int
    name: str
    email: str
    role: str
    token: str
