from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.application.interfaces.user_repo import UserRepo
from marketplace.domain.entities.principal import UserProfile
from marketplace.infrastructure.db.tables import users


class UserRepoSQL(UserRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: str) -> UserProfile | None:
        result = await self._session.execute(select(users).where(users.c.id == user_id).limit(1))
        row = result.mappings().first()
        if not row:
            return None
        return UserProfile(id=row["id"], full_name=row["full_name"], email=row["email"], phone=row["phone"])

    async def save(self, profile: UserProfile) -> None:
        await self._session.execute(delete(users).where(users.c.id == profile.id))
        await self._session.execute(
            insert(users).values(
                id=profile.id,
                full_name=profile.full_name,
                email=profile.email,
                phone=profile.phone,
            )
        )
