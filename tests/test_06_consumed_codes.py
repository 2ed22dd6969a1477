# tests/test_06_consumed_codes.py
import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from app.services.pending_authorization import ConsumedCodeRegistry

pytestmark = pytest.mark.asyncio


def in_seconds(seconds: int) -> datetime:
    return datetime.now(timezone.utc) + timedelta(seconds=seconds)


async def test_consume_once():
    registry = ConsumedCodeRegistry()
    assert await registry.consume("code-1", in_seconds(60)) is True
    assert await registry.consume("code-1", in_seconds(60)) is False
    assert await registry.is_consumed("code-1")
    assert not await registry.is_consumed("code-2")


async def test_concurrent_consumption_only_one_wins():
    """Vários /confirm_auth simultâneos com o mesmo cookie: só um passa."""
    registry = ConsumedCodeRegistry()
    results = await asyncio.gather(*[registry.consume("same-code", in_seconds(60)) for _ in range(10)])
    assert results.count(True) == 1


async def test_expired_entries_are_pruned():
    registry = ConsumedCodeRegistry()
    await registry.consume("old", in_seconds(-1))
    await registry.consume("fresh", in_seconds(60))
    assert len(registry) == 1
    assert not await registry.is_consumed("old")
