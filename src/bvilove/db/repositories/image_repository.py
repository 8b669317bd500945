import logging

from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.bvilove.db.models import Image
from src.bvilove.profile.draft import MAX_PHOTOS
from src.bvilove.profile.values import ImageKind
from src.bvilove.utils.decorators import connect_db


logger = logging.getLogger(__name__)


@connect_db
async def create_image(session: AsyncSession, tg_id: int, file_id: str, kind: ImageKind) -> None:
    session.add(Image(user_id=tg_id, file_id=file_id, kind=kind))
    await session.commit()
    logger.info(f'User {tg_id} added {kind.value} {file_id}')


@connect_db
async def clean_images(session: AsyncSession, tg_id: int) -> None:
    result = await session.execute(delete(Image).where(Image.user_id == tg_id))
    await session.commit()
    logger.info(f'User {tg_id} images cleaned: {result.rowcount}')


@connect_db
async def get_images(session: AsyncSession, tg_id: int) -> Sequence[Image]:
    """Фото и видео анкеты в порядке загрузки"""
    images = await session.scalars(select(Image).where(Image.user_id == tg_id).order_by(Image.id).limit(MAX_PHOTOS))
    return images.all()
