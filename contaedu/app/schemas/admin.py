"""
Admin API Schema Definitions.

Pydantic schemas for teacher management, school years, system
configuration and the audit trail.
"""

from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional, List
from contaedu.app.models.enums import TaxRegime


class TeacherCreate(BaseModel):
    """Schema for registering a teacher (the identity provider holds the credentials)."""
    username: str = Field(..., min_length=3, max_length=100)
    full_name: str = Field(..., min_length=1, max_length=200)
    email: Optional[EmailStr] = None


class SchoolYearCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50, description="e.g. 2024-2025")


class SchoolYearResponse(BaseModel):
    id: int
    name: str
    active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class SystemConfigResponse(BaseModel):
    tax_regime: TaxRegime
    updated_at: datetime

    class Config:
        from_attributes = True


class SystemConfigUpdate(BaseModel):
    tax_regime: TaxRegime


class AuditLogResponse(BaseModel):
    """Schema for audit log entry."""
    id: int
    actor_id: Optional[int]
    actor_username: Optional[str]
    action: str
    target_user_id: Optional[int]
    target_username: Optional[str]
    meta_data: Optional[dict]
    timestamp: datetime

    class Config:
        from_attributes = True


class AuditTrailResponse(BaseModel):
    """Schema for audit trail list."""
    logs: List[AuditLogResponse]
    total: int
