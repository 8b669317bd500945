import asyncio
import logging
import os

from pathlib import Path

from aiogram import Bot, Dispatcher
from dotenv import load_dotenv

from src.bvilove.db.models import create_db_and_tables
from src.bvilove.handlers.errors import router_errors
from src.bvilove.handlers.user import router_user
from src.bvilove.profile.cities import get_gazetteer
from src.bvilove.utils.middlewares import ChatLockMiddleware


logger = logging.getLogger(__name__)


async def main() -> None:
    project_root = Path(__file__).parent.parent.parent
    env_path = project_root / '.env.local'

    if env_path.exists():
        load_dotenv(env_path)
    else:
        load_dotenv()

    logging.basicConfig(
        level=os.environ.get('LOG_LEVEL', 'INFO').upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    logger.info(f'Load bot: {env_path.name if env_path.exists() else ".env"}')

    TOKEN = os.environ.get('BOT_TOKEN')

    if TOKEN is None:
        raise ValueError('BOT_TOKEN is not set')

    logger.info('Connecting to database...')
    await create_db_and_tables()
    logger.info(f'Gazetteer ready: {len(get_gazetteer())} cities')

    bot = Bot(token=TOKEN)
    dp = Dispatcher()
    dp.update.outer_middleware(ChatLockMiddleware())
    dp.include_router(router_errors)
    dp.include_router(router_user)
    logger.info('Application startup complete')
    await dp.start_polling(bot)


if __name__ == '__main__':
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info('Application shutdown complete')
