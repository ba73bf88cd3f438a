"""Users API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from langschool.core.enums import RoleEnum, UserStatusEnum
from langschool.modules.users.schemas import UserCreate, UserRead, UserUpdate
from langschool.modules.users.service import UsersService, get_users_service
from langschool.shared.pagination import Page, build_page, get_pagination_params

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=Page[UserRead])
async def list_users(
    q: str | None = Query(default=None, max_length=255),
    role: RoleEnum | None = Query(default=None),
    user_status: UserStatusEnum | None = Query(default=None, alias="status"),
    pagination=Depends(get_pagination_params),
    service: UsersService = Depends(get_users_service),
) -> Page[UserRead]:
    """Search users by email or name."""
    items, total = await service.list_users(q, role, user_status, pagination.limit, pagination.offset)
    serialized = [UserRead.model_validate(item) for item in items]
    return build_page(serialized, total, pagination)


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    service: UsersService = Depends(get_users_service),
) -> UserRead:
    user = await service.create_user(payload)
    return UserRead.model_validate(user)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: int,
    service: UsersService = Depends(get_users_service),
) -> UserRead:
    user = await service.get_user(user_id)
    return UserRead.model_validate(user)


@router.put("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: int,
    payload: UserUpdate,
    service: UsersService = Depends(get_users_service),
) -> UserRead:
    """Update name, role or status."""
    user = await service.update_user(user_id, payload)
    return UserRead.model_validate(user)
