"""Motor-backed access to Valentines participants."""

from motor.motor_asyncio import AsyncIOMotorDatabase

from chronicles.schemas import VALENTINE_USERS_COLLECTION, ValentineUserRecord
from chronicles.services.app_db import get_chronicles_db


class ValentineUserRepository:
    def __init__(self, db: AsyncIOMotorDatabase | None = None):
        self._db = db

    @property
    def users(self):
        if self._db is None:
            self._db = get_chronicles_db()
        return self._db[VALENTINE_USERS_COLLECTION]

    async def get_by_enrollment_number(self, enrollment_number: str) -> ValentineUserRecord | None:
        """Participants are keyed by enrollment number (`_id`)."""
        doc = await self.users.find_one({"_id": enrollment_number})
        return ValentineUserRecord.model_validate(doc) if doc else None
