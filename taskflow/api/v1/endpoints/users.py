"""
User directory endpoints.

Listing and role management for privileged roles.
"""

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from taskflow.api.dependencies import get_current_user, require_roles
from taskflow.db.session import get_db
from taskflow.models.user import User, UserRole
from taskflow.schemas.user import ProfileResponse, RoleUpdate, UserEnvelope, UserListResponse
from taskflow.services.user_service import UserService

router = APIRouter()


@router.get("", summary="List users (admins and managers).", response_model=UserListResponse)
def list_users(skip: int = Query(0, ge=0, description="Records to skip"),
               limit: int = Query(100, ge=1, le=500, description="Max records to return"),
               db: Session = Depends(get_db),
               _: User = Depends(require_roles(UserRole.ADMIN, UserRole.MANAGER)), ):
    users = UserService(db).list_users(skip, limit)
    return UserListResponse(users=users, count=len(users))


@router.get("/{user_id}", summary="Get a user by id.", response_model=UserEnvelope)
def get_user(user_id: int, db: Session = Depends(get_db), _: User = Depends(get_current_user), ):
    return UserEnvelope(user=UserService(db).get_user(user_id))


@router.put("/{user_id}/role", summary="Change a user's role (admins only).", response_model=ProfileResponse)
def change_role(user_id: int, data: RoleUpdate, db: Session = Depends(get_db),
                admin: User = Depends(require_roles(UserRole.ADMIN)), ):
    user = UserService(db).change_role(user_id, data.role, changed_by=admin.id)
    return ProfileResponse(message="Role updated successfully", user=user)
