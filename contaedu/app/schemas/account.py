"""
Chart of accounts schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from contaedu.app.models.enums import AccountType


class AccountCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=20, pattern=r"^\d+$")
    name: str = Field(..., min_length=1, max_length=255)
    account_type: AccountType


class AccountResponse(BaseModel):
    id: int
    code: str
    name: str
    account_type: AccountType
    parent_code: Optional[str] = None
    is_system: bool
    user_id: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True
