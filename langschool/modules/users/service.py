"""User business logic layer."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from langschool.core.database import get_db_session
from langschool.core.enums import RoleEnum, UserStatusEnum
from langschool.modules.audit.repository import AuditRepository
from langschool.modules.users.models import User
from langschool.modules.users.repository import UsersRepository
from langschool.modules.users.schemas import UserCreate, UserUpdate
from langschool.shared.exceptions import ConflictException, NotFoundException
from langschool.shared.utils import normalize_email


class UsersService:
    """User administration service."""

    def __init__(self, repository: UsersRepository, audit_repository: AuditRepository) -> None:
        self.repository = repository
        self.audit_repository = audit_repository

    async def create_user(self, payload: UserCreate) -> User:
        """Create user with unique email."""
        email = normalize_email(payload.email)
        if await self.repository.get_user_by_email(email) is not None:
            raise ConflictException("User with this email already exists")

        user = await self.repository.create_user(
            email=email,
            name=payload.name.strip(),
            role=payload.role,
            status=payload.status,
        )
        await self.audit_repository.create_audit_log(
            action="user.created",
            entity_type="user",
            entity_id=str(user.id),
            payload={"email": user.email, "role": str(user.role)},
        )
        return user

    async def get_user(self, user_id: int) -> User:
        user = await self.repository.get_user_by_id(user_id)
        if user is None:
            raise NotFoundException("User not found")
        return user

    async def update_user(self, user_id: int, payload: UserUpdate) -> User:
        user = await self.get_user(user_id)
        changes = payload.model_dump(exclude_none=True)
        if "name" in changes:
            changes["name"] = changes["name"].strip()
        user = await self.repository.update_user(user, **changes)
        await self.audit_repository.create_audit_log(
            action="user.updated",
            entity_type="user",
            entity_id=str(user.id),
            payload={key: str(value) for key, value in changes.items()},
        )
        return user

    async def list_users(
        self,
        q: str | None,
        role: RoleEnum | None,
        status: UserStatusEnum | None,
        limit: int,
        offset: int,
    ) -> tuple[list[User], int]:
        """List users with optional search and filters."""
        return await self.repository.list_users(
            q=q,
            role=role,
            status=status,
            limit=limit,
            offset=offset,
        )


async def get_users_service(session: AsyncSession = Depends(get_db_session)) -> UsersService:
    """Dependency provider for users service."""
    return UsersService(UsersRepository(session), AuditRepository(session))
