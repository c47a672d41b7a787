from typing import Literal

from pydantic import BaseModel, EmailStr, Field

MIN_PASSWORD_LENGTH = 6

AssignableRole = Literal["ADMIN", "EDITOR", "VIEWER"]


class UserCreate(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1)
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    role: AssignableRole
    tenant_id: str = Field(..., min_length=1)


class UserUpdate(BaseModel):
    email: EmailStr = None
    name: str = Field(None, min_length=1)
    password: str = Field(None, min_length=MIN_PASSWORD_LENGTH)
    role: AssignableRole = None
    is_active: bool = None
