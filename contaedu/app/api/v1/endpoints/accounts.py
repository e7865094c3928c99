"""
Chart of Accounts API Endpoints.

System accounts (Plan General Contable) are shared; students may add
their own accounts on top of them.
"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from contaedu.app.db.session import get_db
from contaedu.app.models.user import User
from contaedu.app.models.account import Account
from contaedu.app.models.enums import UserRole
from contaedu.app.schemas.account import AccountCreate, AccountResponse
from contaedu.app.core.dependencies import get_current_user_record
from contaedu.app.core.guards import require_role
from contaedu.app.domain.coursework.chart_export import EXPORT_FILENAME, natural_key, render_accounts_csv

router = APIRouter(prefix="/accounts", tags=["Accounts"])


async def visible_accounts(db: AsyncSession, user: User) -> List[Account]:
    """System accounts plus, for students, their own."""
    query = select(Account)
    if user.role == UserRole.STUDENT:
        query = query.where(or_(Account.is_system.is_(True), Account.user_id == user.id))
    else:
        query = query.where(Account.is_system.is_(True))

    result = await db.execute(query)
    return sorted(result.scalars().all(), key=lambda a: natural_key(a.code))


@router.get("", response_model=List[AccountResponse])
async def list_accounts(
    user: User = Depends(get_current_user_record),
    db: AsyncSession = Depends(get_db)
):
    return await visible_accounts(db, user)


@router.get("/download")
async def download_accounts(
    user: User = Depends(get_current_user_record),
    db: AsyncSession = Depends(get_db)
):
    """Download the visible chart of accounts as CSV."""
    accounts = await visible_accounts(db, user)
    return Response(
        content=render_accounts_csv(accounts).encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def create_account(
    account_data: AccountCreate,
    current_user: dict = Depends(require_role([UserRole.STUDENT])),
    db: AsyncSession = Depends(get_db)
):
    """Add a personal account; the code must not clash with any visible account."""
    student_id = current_user["user_id"]
    existing = await db.execute(
        select(Account.id).where(
            Account.code == account_data.code,
            or_(Account.is_system.is_(True), Account.user_id == student_id),
        )
    )
    if existing.first() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"An account with code {account_data.code} already exists"
        )

    account = Account(
        code=account_data.code,
        name=account_data.name,
        account_type=account_data.account_type,
        parent_code=account_data.code[:3] if len(account_data.code) > 3 else None,
        is_system=False,
        user_id=student_id,
    )
    db.add(account)
    await db.commit()
    await db.refresh(account)
    return account


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(
    account_id: int,
    current_user: dict = Depends(require_role([UserRole.STUDENT])),
    db: AsyncSession = Depends(get_db)
):
    """Delete one of the caller's own accounts (system accounts are read-only)."""
    result = await db.execute(
        select(Account).where(
            Account.id == account_id,
            Account.user_id == current_user["user_id"],
            Account.is_system.is_(False),
        )
    )
    account = result.scalar_one_or_none()
    if not account:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Account not found"
        )

    await db.delete(account)
    await db.commit()
