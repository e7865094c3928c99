"""
Authentication API endpoints.

Tokens are issued by the identity provider; this service exposes the
caller's profile and token revocation (logout).
"""

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from contaedu.app.db.session import get_db
from contaedu.app.models.user import User
from contaedu.app.schemas.auth import UserResponse, LogoutResponse
from contaedu.app.core.dependencies import get_current_user, get_current_user_record, security
from contaedu.app.core.token_revocation import revoke_token
from contaedu.app.services.audit import log_user_action, AuditAction

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(get_current_user_record)):
    """Get the authenticated user's profile."""
    return user


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Revoke the presented token.

    Subsequent requests with the same token are rejected with 401.
    """
    revoked = await revoke_token(credentials.credentials, current_user["user_id"])

    await log_user_action(
        db,
        current_user,
        AuditAction.TOKEN_REVOKED,
        target_user_id=current_user["user_id"],
        target_username=current_user.get("sub"),
        metadata={"reason": "logout", "revoked": revoked},
    )

    return LogoutResponse(
        message="Logged out" if revoked else "Token could not be revoked",
        revoked=revoked,
    )
