from collections.abc import Awaitable
from typing import Any, Callable

from src.bvilove.db.connection import async_session


def connect_db(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
    """Открывает сессию БД и передаёт её первым аргументом"""

    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        async with async_session() as session:
            return await func(session, *args, **kwargs)

    return wrapper
