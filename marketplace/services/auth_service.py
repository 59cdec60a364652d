"""
Authentication service.
Decodes Supabase JWTs and resolves the current user, their admin flag
and, for worker endpoints, their worker profile.
"""

from typing import Any

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from marketplace.config import settings
from marketplace.dependencies import get_db
from marketplace.ports.database_port import DatabasePort

_bearer_scheme = HTTPBearer()


def _verify_token_locally(token: str) -> str:
    """Decode the Supabase JWT and return the user_id (sub claim)."""
    try:
        payload = jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=["HS256"],
            audience="authenticated",
            options={
                "verify_exp": True,
                "verify_iat": False,        # disabled — clock skew causes false rejections
            },
            leeway=30,  # 30-second tolerance for clock drift
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
        )
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {e}",
        )

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing user ID (sub claim)",
        )
    return user_id


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),
    db: DatabasePort = Depends(get_db),
) -> dict[str, Any]:
    """
    FastAPI dependency that decodes the JWT locally (zero-latency),
    then fetches the caller's profile row and admin flag.
    """
    user_id = _verify_token_locally(credentials.credentials)

    profile = await db.get_profile_by_user(user_id)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found for this user",
        )

    return {**profile, "user_id": user_id, "is_admin": await db.is_admin(user_id)}


async def require_admin(
    current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
    """Dependency for admin-only routes."""
    if not current_user.get("is_admin"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admins only",
        )
    return current_user


async def get_current_worker(
    current_user: dict[str, Any] = Depends(get_current_user),
    db: DatabasePort = Depends(get_db),
) -> dict[str, Any]:
    """Resolve the caller's worker profile (404 for business accounts)."""
    worker = await db.get_worker_by_profile(str(current_user["id"]))
    if not worker:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No worker profile for this account",
        )
    return worker
