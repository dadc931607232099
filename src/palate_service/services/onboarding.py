"""Onboarding data sources."""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy import select

from ..db.models import Account, OnboardingData
from ..db.postgres import PostgresDatabase
from ..models.onboarding import OnboardingRecord

logger = logging.getLogger("onboarding_source")


class OnboardingSource(ABC):
    """Lookup of a user's onboarding answers by e-mail."""

    @abstractmethod
    async def get_user_onboarding_data(self, email: str) -> Optional[OnboardingRecord]:
        """The stored record, or ``None`` when the user or record is missing."""

    async def close(self) -> None:
        """Release backend resources."""


class SqlOnboardingSource(OnboardingSource):
    """Reads ``onboarding_data.data`` joined to ``users`` by e-mail."""

    def __init__(self, db: PostgresDatabase):
        self.db = db

    async def get_user_onboarding_data(self, email: str) -> Optional[OnboardingRecord]:
        async with self.db.session() as session:
            result = await session.execute(
                select(OnboardingData.data)
                .join(Account, Account.id == OnboardingData.user_id)
                .where(Account.email == email)
            )
            data = result.scalar_one_or_none()

        if data is None:
            logger.info(f"No onboarding data found for {email}")
            return None
        return OnboardingRecord.from_stored(data)

    async def close(self) -> None:
        await self.db.close()


class InMemoryOnboardingSource(OnboardingSource):
    """Records held in a dict, keyed by e-mail."""

    def __init__(self, records: Optional[dict[str, OnboardingRecord]] = None):
        self.records: dict[str, OnboardingRecord] = dict(records or {})

    def put(self, email: str, record: OnboardingRecord) -> None:
        self.records[email] = record

    async def get_user_onboarding_data(self, email: str) -> Optional[OnboardingRecord]:
        return self.records.get(email)
