import logging

from datetime import datetime

import pytz

from sqlalchemy import exists, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.bvilove.db.models import User
from src.bvilove.profile.draft import DraftProfile
from src.bvilove.utils.decorators import connect_db


logger = logging.getLogger(__name__)


@connect_db
async def get_user(session: AsyncSession, tg_id: int) -> User | None:
    return await session.scalar(select(User).where(User.id == tg_id))


@connect_db
async def user_exists(session: AsyncSession, tg_id: int) -> bool:
    return bool(await session.scalar(select(exists().where(User.id == tg_id))))


@connect_db
async def create_or_update_user(session: AsyncSession, draft: DraftProfile) -> None:
    """Создаёт анкету или обновляет только заданные в черновике поля"""
    now = datetime.now(pytz.utc)
    user = await session.scalar(select(User).where(User.id == draft.id))

    try:
        if user is None:
            profile = draft.finalize()
            session.add(User(**profile.as_columns(), last_activity=now))
            logger.info(f'User {draft.id} created')
        else:
            columns = draft.changed_columns()
            await session.execute(update(User).where(User.id == draft.id).values(**columns, last_activity=now))
            logger.info(f'User {draft.id} updated: {sorted(columns)}')

        await session.commit()
    except Exception as e:
        await session.rollback()
        logger.error(f'Failed to save user {draft.id}: {e}', exc_info=True)
        raise


@connect_db
async def set_user_active(session: AsyncSession, tg_id: int, active: bool) -> bool:
    result = await session.execute(
        update(User).where(User.id == tg_id).values(active=active, last_activity=datetime.now(pytz.utc))
    )
    await session.commit()
    logger.info(f'User {tg_id} active={active}, updated rows: {result.rowcount}')
    return result.rowcount > 0
