"""
User Domain Models

Author: Dicompel
Date: 2026-09-02
"""
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional

from orderdesk.domain.origin import RecordOrigin


class UserRole(str, Enum):
    """
    Closed set of roles. The backend enforces its own allow-list on
    `profiles.role`; the two are not guaranteed to be updated together.
    """
    ADMIN = "ADMIN"
    SUPERVISOR = "SUPERVISOR"
    REPRESENTATIVE = "REPRESENTATIVE"


class User(BaseModel):
    """
    User domain model

    `password` is only populated in the local seed credential table and is
    never serialized or written to the remote profile row.
    """

    id: str = Field(..., description="User identifier")
    email: str = Field(..., description="Login email")
    name: str = Field(..., description="Display name")
    role: UserRole = Field(..., description="Access role")
    password: Optional[str] = Field(None, exclude=True, repr=False)
    origin: Optional[RecordOrigin] = Field(None, description="Record provenance")

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_manager(self) -> bool:
        """Admins and supervisors see every order"""
        return self.role in (UserRole.ADMIN, UserRole.SUPERVISOR)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")


class UserCreate(BaseModel):
    """Schema for registering a new user"""
    email: str
    name: str
    role: UserRole = UserRole.REPRESENTATIVE
    password: str


class Identity(BaseModel):
    """Result of a successful credential check"""
    id: str
    email: str
