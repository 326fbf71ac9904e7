"""Query Service — read-only listing of users, newest first."""

from app.infrastructure.user_store import UserStore
from app.models.user import User


class UserQueryService:

    def __init__(self, records: UserStore):
        self.records = records

    async def list_users(self) -> list[User]:
        return await self.records.list_all()
