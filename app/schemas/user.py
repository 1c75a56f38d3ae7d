"""User administration schemas."""
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_serializer


class UserCreate(BaseModel):
    """Schema for creating a new user (admin only)."""
    username: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=1)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role_id: UUID
    department: Optional[str] = Field(None, max_length=100)
    is_active: bool = True

    class Config:
        json_schema_extra = {
            "example": {
                "username": "bob",
                "email": "bob@example.com",
                "password": "Bob12345",
                "first_name": "Bob",
                "last_name": "Builder",
                "role_id": "6f1c2a4e-8a53-4d4c-9a1e-3b1f0c2d7e55",
                "department": "Sales",
                "is_active": True
            }
        }


class UserSelfUpdate(BaseModel):
    """Fields a user may change on their own profile."""
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    department: Optional[str] = Field(None, max_length=100)


class UserUpdate(UserSelfUpdate):
    """Admin update; may additionally change role and active flag."""
    role_id: Optional[UUID] = None
    is_active: Optional[bool] = None


class DeleteUsersRequest(BaseModel):
    """Bulk delete by id."""
    ids: List[UUID]


class UserResponse(BaseModel):
    """Schema for user response. Never includes the password hash."""
    id: str
    username: str
    email: str
    first_name: str
    last_name: str
    role_id: str
    department: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @field_serializer("created_at", "updated_at")
    def serialize_timestamp(self, value: datetime) -> str:
        # Some backends hand back naive UTC values
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
