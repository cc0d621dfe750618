"""Auth API — the current user, as seen by the backend.

Learn: There's no register/login here; Clerk owns sign-in. The frontend
calls /auth/me after sign-in, which is also what creates the local User
row on a user's first visit (via the resolver in get_current_user).

- GET /auth/me → current user (401 if anonymous)
- GET /auth/admin-check → 200 if admin (promotes allow-listed users), else 403
- GET /auth/users → all users (admin)
"""

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobhub.auth.dependencies import get_current_user, require_admin
from jobhub.db.engine import get_db
from jobhub.db.models import User
from jobhub.schemas.user import AdminCheck, UserRead

router = APIRouter(prefix="/auth")


@router.get("/me", response_model=UserRead)
async def get_me(user: User = Depends(get_current_user)):
    """Get the current authenticated user's info."""
    return user


@router.get("/admin-check", response_model=AdminCheck)
async def admin_check(user: User = Depends(require_admin)):
    """Confirm admin access (the frontend uses this to show admin pages)."""
    return AdminCheck(is_admin=True, user=UserRead.model_validate(user))


@router.get("/users", response_model=list[UserRead])
async def list_users(
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(User).order_by(User.created_at.desc()))
    return list(result.scalars().all())
