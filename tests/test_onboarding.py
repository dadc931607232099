"""Tests for onboarding sources."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest

from palate_service.services.onboarding import SqlOnboardingSource
from conftest import onboarding_payload


class FakePostgresDatabase:
    def __init__(self, data):
        self.session_mock = AsyncMock()
        result = MagicMock()
        result.scalar_one_or_none.return_value = data
        self.session_mock.execute.return_value = result
        self.closed = False

    @asynccontextmanager
    async def session(self):
        yield self.session_mock

    async def close(self):
        self.closed = True


@pytest.mark.asyncio
async def test_sql_source_parses_stored_document():
    db = FakePostgresDatabase(onboarding_payload())
    source = SqlOnboardingSource(db)

    record = await source.get_user_onboarding_data("maya@example.com")

    assert record.profile.name == "Maya Chen"
    assert record.dietary.type == "vegetarian"
    assert record.preferences.foods["sushi"].weight == 5
    assert record.preferences.custom_likes[0].food == "Ramen"

    statement = str(db.session_mock.execute.call_args.args[0])
    assert "onboarding_data" in statement
    assert "users.email" in statement


@pytest.mark.asyncio
async def test_sql_source_missing_record():
    source = SqlOnboardingSource(FakePostgresDatabase(None))
    assert await source.get_user_onboarding_data("ghost@example.com") is None


@pytest.mark.asyncio
async def test_sql_source_close():
    db = FakePostgresDatabase(None)
    await SqlOnboardingSource(db).close()
    assert db.closed is True


@pytest.mark.asyncio
async def test_in_memory_source(onboarding):
    assert (await onboarding.get_user_onboarding_data("maya@example.com")).profile.age == 29
    assert await onboarding.get_user_onboarding_data("ghost@example.com") is None
