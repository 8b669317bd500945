import itertools
import os
import tempfile

from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest


DB_PATH = Path(tempfile.gettempdir()) / f'bvilove-test-{os.getpid()}.sqlite3'
os.environ['DATABASE_URL'] = f'sqlite+aiosqlite:///{DB_PATH}'

from aiogram.fsm.context import FSMContext  # noqa: E402
from aiogram.fsm.storage.base import StorageKey  # noqa: E402
from aiogram.fsm.storage.memory import MemoryStorage  # noqa: E402

import src.bvilove.db.models  # noqa: E402, F401

from src.bvilove.db.connection import Base, engine  # noqa: E402


@pytest.fixture
async def db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def bot() -> AsyncMock:
    """Bot, который ничего не отправляет, но запоминает вызовы"""
    message_ids = itertools.count(1000)

    bot = AsyncMock()
    bot.send_message.side_effect = lambda **kwargs: SimpleNamespace(message_id=next(message_ids))
    bot.get_chat.return_value = SimpleNamespace(username='someone', has_private_forwards=None)
    return bot


@pytest.fixture
def fsm() -> FSMContext:
    return FSMContext(storage=MemoryStorage(), key=StorageKey(bot_id=1, chat_id=1, user_id=1))
