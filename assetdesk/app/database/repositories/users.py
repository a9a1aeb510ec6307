# app/database/repositories/users.py
"""Repository for user-related database operations."""

import re
from typing import List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from app.database.specification import EntityField
from app.models.database.user import User
from .base import BaseRepository

class UserFields:
    """Filterable and sortable user fields."""
    id = EntityField("id", User.id)
    staff_code = EntityField("staff_code", User.staff_code, case_insensitive=True)
    first_name = EntityField("first_name", User.first_name, case_insensitive=True)
    last_name = EntityField("last_name", User.last_name, case_insensitive=True)
    full_name = EntityField(
        "full_name", User.first_name + " " + User.last_name, case_insensitive=True
    )
    username = EntityField("username", User.username, case_insensitive=True)
    date_of_birth = EntityField("date_of_birth", User.date_of_birth)
    joined_date = EntityField("joined_date", User.joined_date)
    gender = EntityField("gender", User.gender)
    role = EntityField("role", User.role)
    location = EntityField("location", User.location)

class UserRepository(BaseRepository[User]):
    """Repository for managing user data."""

    def __init__(self, session: AsyncSession):
        super().__init__(User, session)

    async def usernames_like(self, prefix: str) -> List[str]:
        """Usernames starting with ``prefix``, including soft-deleted users."""
        query = select(User.username).where(User.username.startswith(prefix, autoescape=True))
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def generate_username(self, first_name: str, last_name: str) -> str:
        """Build a unique username: first name plus last-name initials.

        ``Binh`` / ``Nguyen Van`` gives ``binhnv``; if taken, ``binhnv1``,
        ``binhnv2`` and so on.
        """
        base = "".join(first_name.split()).lower()
        base += "".join(part[0] for part in last_name.split()).lower()

        suffix_pattern = re.compile(rf"^{re.escape(base)}(\d*)$")
        taken = [
            match.group(1)
            for match in map(suffix_pattern.match, await self.usernames_like(base))
            if match
        ]
        if not taken:
            return base
        highest = max(int(suffix) if suffix else 0 for suffix in taken)
        return f"{base}{highest + 1}"
