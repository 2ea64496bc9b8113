"""
User Routes.

Summary
-------
Self-service profile endpoints for any authenticated user, and admin
endpoints to list, inspect and delete accounts.

Dependencies
------------
  - `UserDBDep`: The authenticated user.
  - `AdminDep`: The authenticated user, required to be an admin.
  - `UserRepoDep`: User repository bound to the request session.
"""

from uuid import UUID

from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse
from starlette.responses import Response

from app.auth.permissions import AdminDep
from app.decorators import timed
from app.dependencies import UserDBDep, UserRepoDep
from app.errors import SelfDeletionError
from app.managers import hash_password, limiter, read_limit, write_limit
from app.monitoring import get_logger
from app.schemas import (
    MessageResponse,
    ProfileUpdate,
    UserEnvelope,
    UserListEnvelope,
    UserResponse,
    error_example,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api/users", tags=["👤 Users"])

UNAUTHORIZED = {401: error_example("Not authorized, no token", "NotAuthenticatedError")}
ADMIN_ONLY = {
    **UNAUTHORIZED,
    403: error_example("Not authorized as an admin", "ForbiddenError"),
}


@router.get(
    "/profile",
    response_class=ORJSONResponse,
    response_model=UserEnvelope,
    summary="Get own profile",
    responses=UNAUTHORIZED,
    operation_id="users_get_profile",
)
@timed("/api/users/profile")
@limiter.limit(read_limit)
async def get_profile(
    request: Request,
    response: Response,
    user: UserDBDep,
) -> UserEnvelope:
    """
    Get the authenticated user's profile.

    Parameters
    ----------
    user : UserDB
        Authenticated user.

    Returns
    -------
    UserEnvelope
        The user without the password hash.
    """
    return UserEnvelope(success=True, user=UserResponse.model_validate(user))


@router.put(
    "/profile",
    response_class=ORJSONResponse,
    response_model=UserEnvelope,
    summary="Update own profile",
    description="Change name, email or password. A new password is re-hashed.",
    responses={
        400: error_example("Email already in use", "DuplicateEntryError"),
        **UNAUTHORIZED,
    },
    operation_id="users_update_profile",
)
@timed("/api/users/profile/update")
@limiter.limit(write_limit)
async def update_profile(
    request: Request,
    response: Response,
    data: ProfileUpdate,
    user: UserDBDep,
    repo: UserRepoDep,
) -> UserEnvelope:
    """
    Update the authenticated user's profile.

    Parameters
    ----------
    data : ProfileUpdate
        Fields to change.
    user : UserDB
        Authenticated user.
    repo : UserRepository
        User repository.

    Returns
    -------
    UserEnvelope
        The updated user.

    Raises
    ------
    DuplicateEntryError
        If the new email belongs to another user.
    """
    password_hash = None
    if data.password is not None:
        password_hash = await hash_password(data.password.get_secret_value())
    updated = await repo.update_profile(
        user,
        name=data.name,
        email=data.email,
        password_hash=password_hash,
    )
    return UserEnvelope(success=True, user=UserResponse.model_validate(updated))


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=UserListEnvelope,
    summary="List users",
    description="All users, newest first. Admin only.",
    responses=ADMIN_ONLY,
    operation_id="users_list",
)
@timed("/api/users")
@limiter.limit(read_limit)
async def list_users(
    request: Request,
    response: Response,
    repo: UserRepoDep,
    admin: AdminDep,
) -> UserListEnvelope:
    users = await repo.list_users()
    return UserListEnvelope(
        success=True,
        users=[UserResponse.model_validate(u) for u in users],
    )


@router.get(
    "/{user_id}",
    response_class=ORJSONResponse,
    response_model=UserEnvelope,
    summary="Get user by ID",
    responses={
        404: error_example("User not found", "RecordNotFoundError"),
        **ADMIN_ONLY,
    },
    operation_id="users_get",
)
@timed("/api/users/{user_id}")
@limiter.limit(read_limit)
async def get_user(
    request: Request,
    response: Response,
    user_id: UUID,
    repo: UserRepoDep,
    admin: AdminDep,
) -> UserEnvelope:
    user = await repo.get_or_raise(user_id)
    return UserEnvelope(success=True, user=UserResponse.model_validate(user))


@router.delete(
    "/{user_id}",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Delete a user",
    description="Blogs the user created keep their content; their creator becomes empty.",
    responses={
        400: error_example("Cannot delete your own account", "SelfDeletionError"),
        404: error_example("User not found", "RecordNotFoundError"),
        **ADMIN_ONLY,
    },
    operation_id="users_delete",
)
@timed("/api/users/delete")
@limiter.limit(write_limit)
async def delete_user(
    request: Request,
    response: Response,
    user_id: UUID,
    repo: UserRepoDep,
    admin: AdminDep,
) -> MessageResponse:
    """
    Delete a user account.

    Parameters
    ----------
    user_id : UUID
        Account to delete.
    admin : UserDB
        Authenticated admin.

    Returns
    -------
    MessageResponse
        Confirmation message.

    Raises
    ------
    SelfDeletionError
        If the admin targets their own account.
    """
    if user_id == admin.id:
        raise SelfDeletionError
    user = await repo.get_or_raise(user_id)
    await repo.delete(user)
    logger.info(f"User {user_id} deleted by admin {admin.id}")
    return MessageResponse(success=True, message="User removed")
