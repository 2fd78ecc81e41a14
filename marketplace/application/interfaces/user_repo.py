from marketplace.domain.entities.principal import UserProfile


class UserRepo:
    async def get(self, user_id: str) -> UserProfile | None:
        raise NotImplementedError

    async def save(self, profile: UserProfile) -> None:
        raise NotImplementedError
