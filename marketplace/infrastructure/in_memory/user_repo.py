from copy import deepcopy

from marketplace.application.interfaces.user_repo import UserRepo
from marketplace.domain.entities.principal import UserProfile


class InMemoryUserRepo(UserRepo):
    def __init__(self) -> None:
        self._users: dict[str, UserProfile] = {}

    async def get(self, user_id: str) -> UserProfile | None:
        profile = self._users.get(user_id)
        return deepcopy(profile) if profile else None

    async def save(self, profile: UserProfile) -> None:
        self._users[profile.id] = deepcopy(profile)
