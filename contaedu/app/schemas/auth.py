"""
Authentication Pydantic schemas.

Credentials are handled by the identity provider; these schemas only
describe the authenticated caller.
"""

from pydantic import BaseModel
from datetime import datetime
from typing import Optional
from contaedu.app.models.enums import UserRole


class UserResponse(BaseModel):
    """
    Schema for user information response.

    Used by GET /auth/me and the user management endpoints.
    """
    id: int
    username: str
    full_name: str
    email: Optional[str] = None
    role: UserRole
    course_id: Optional[int] = None
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class LogoutResponse(BaseModel):
    message: str
    revoked: bool
