import logging

from aiogram import Router
from aiogram.exceptions import TelegramAPIError
from aiogram.filters import ExceptionTypeFilter
from aiogram.types import ErrorEvent

from src.bvilove.utils import texts
from src.bvilove.utils.exceptions import AbuseError, MissingContextError


logger = logging.getLogger(__name__)

router_errors = Router()


async def notify_user(event: ErrorEvent, text: str | None = None) -> None:
    """Гасим часики на кнопке и, если есть текст, сообщаем об ошибке"""
    try:
        if event.update.callback_query:
            await event.update.callback_query.answer(text)
        elif event.update.message and text:
            await event.update.message.answer(text)
    except TelegramAPIError as e:
        logger.info(f'Failed to notify user about error: {e}')


@router_errors.errors(ExceptionTypeFilter(AbuseError, MissingContextError))
async def handle_bot_error(event: ErrorEvent) -> bool:
    logger.warning(f'Update {event.update.update_id}: {type(event.exception).__name__}: {event.exception}')
    await notify_user(event)
    return True


@router_errors.errors()
async def handle_unexpected_error(event: ErrorEvent) -> bool:
    logger.error(f'Update {event.update.update_id} failed: {event.exception}', exc_info=event.exception)
    await notify_user(event, texts.ERROR)
    return True
