"""
User Service Data Models

Pydantic models for users and user requests.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from enum import Enum
import re

EMAIL_PATTERN = re.compile(r'^[^@]+@[^@]+\.[^@]+$')


class UserStatus(str, Enum):
    """User status enumeration"""
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class User(BaseModel):
    """Core user model"""
    user_id: str
    name: str
    email: str
    status: UserStatus = UserStatus.ACTIVE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserRequest(BaseModel):
    """Create / update user request"""
    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    email: str = Field(..., min_length=1, max_length=255, description="Unique email address")
    status: Optional[UserStatus] = Field(None, description="Account status")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('name must not be blank')
        return v

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        if not EMAIL_PATTERN.match(v):
            raise ValueError('Invalid email format')
        return v


class ErrorResponse(BaseModel):
    """Uniform error body"""
    detail: str
    error_code: str


class UserServiceStatus(BaseModel):
    """User service status response"""
    service: str = "user_service"
    status: str = "operational"
    port: int = 8081
    version: str = "1.0.0"
    database_connected: bool
    order_service_connected: bool = False
    timestamp: Optional[datetime] = None
