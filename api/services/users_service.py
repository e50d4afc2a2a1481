"""User lookups used by the compilation workflow."""

from models import User
from repositories.user_repository import UserRepository
from schemas import UserResponse


def _to_user_response(user: User) -> UserResponse:
    return UserResponse(id=user.id, name=user.name, email=user.email)


class UserService:
    """Read-side user contract: resolve user ids to user records."""

    def __init__(self, users: UserRepository):
        self.users = users

    async def get_all_users(self, user_ids: list[int]) -> list[UserResponse]:
        """Get users for the given ids, ordered by id.

        Ids with no matching user are skipped; callers that require every id
        to resolve must check the result themselves.
        """
        users = await self.users.get_many_by_ids(user_ids)
        return [_to_user_response(user) for user in users]
