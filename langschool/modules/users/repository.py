"""User repository layer."""

from __future__ import annotations

from sqlalchemy import Select, func, or_, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from langschool.core.enums import RoleEnum, UserStatusEnum
from langschool.modules.users.models import User
from langschool.shared.exceptions import ConflictException


class UsersRepository:
    """DB operations for users."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_user_by_id(self, user_id: int) -> User | None:
        stmt = select(User).where(User.id == user_id)
        return await self.session.scalar(stmt)

    async def get_user_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == email)
        return await self.session.scalar(stmt)

    async def create_user(
        self,
        email: str,
        name: str,
        role: RoleEnum,
        status: UserStatusEnum,
    ) -> User:
        """Insert a user; a concurrent insert of the same email surfaces as a conflict."""
        user = User(email=email, name=name, role=role, status=status)
        try:
            async with self.session.begin_nested():
                self.session.add(user)
        except IntegrityError as exc:
            raise ConflictException("User with this email already exists") from exc
        return user

    async def get_or_create_by_email(self, email: str, name: str) -> tuple[User, bool]:
        """Upsert a student keyed on the unique email.

        Concurrent callers racing on the same new email all end up with the
        single row that won the insert.
        """
        stmt = (
            pg_insert(User)
            .values(
                email=email,
                name=name,
                role=RoleEnum.STUDENT,
                status=UserStatusEnum.ACTIVE,
            )
            .on_conflict_do_nothing(index_elements=[User.email])
            .returning(User.id)
        )
        inserted_id = await self.session.scalar(stmt)
        user = (await self.session.scalars(select(User).where(User.email == email))).one()
        return user, inserted_id is not None

    async def list_users(
        self,
        q: str | None,
        role: RoleEnum | None,
        status: UserStatusEnum | None,
        limit: int,
        offset: int,
    ) -> tuple[list[User], int]:
        base_stmt: Select[tuple[User]] = select(User)
        if q:
            pattern = f"%{q.strip()}%"
            base_stmt = base_stmt.where(or_(User.email.ilike(pattern), User.name.ilike(pattern)))
        if role is not None:
            base_stmt = base_stmt.where(User.role == role)
        if status is not None:
            base_stmt = base_stmt.where(User.status == status)

        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = int((await self.session.scalar(count_stmt)) or 0)

        stmt = base_stmt.order_by(User.created_at.desc(), User.id.desc()).limit(limit).offset(offset)
        items = (await self.session.scalars(stmt)).all()
        return items, total

    async def update_user(self, user: User, **changes) -> User:
        for key, value in changes.items():
            if value is not None:
                setattr(user, key, value)
        await self.session.flush()
        return user
