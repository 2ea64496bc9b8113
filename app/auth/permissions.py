"""Role checks for protected routes."""

from typing import Annotated

from fastapi import Depends

from app.dependencies.dependencies import get_current_user
from app.errors.auth import ForbiddenError
from app.models import UserDB


async def require_admin(
    user: Annotated[UserDB, Depends(get_current_user)],
) -> UserDB:
    """
    Dependency that requires admin role.

    Parameters
    ----------
    user : UserDB
        Current authenticated user.

    Returns
    -------
    UserDB
        The user if they have admin role.

    Raises
    ------
    ForbiddenError
        If user is not an admin.
    """
    if not user.is_admin:
        raise ForbiddenError
    return user


AdminDep = Annotated[UserDB, Depends(require_admin)]
