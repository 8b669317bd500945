import asyncio
import logging
import weakref

from collections.abc import Awaitable
from typing import Any, Callable

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject


logger = logging.getLogger(__name__)


class ChatLockMiddleware(BaseMiddleware):
    """Апдейты одного чата обрабатываются строго по очереди"""

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[int, asyncio.Lock] = weakref.WeakValueDictionary()

    def get_lock(self, chat_id: int) -> asyncio.Lock:
        lock = self._locks.get(chat_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[chat_id] = lock
        return lock

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        chat = data.get('event_chat')
        if chat is None:
            return await handler(event, data)

        async with self.get_lock(chat.id):
            # Состояние могло измениться, пока ждали предыдущий апдейт
            state = data.get('state')
            if state is not None:
                data['raw_state'] = await state.get_state()
            return await handler(event, data)
