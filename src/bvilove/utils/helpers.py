import logging

from collections.abc import Sequence
from typing import Optional, Union

from aiogram import Bot
from aiogram.exceptions import TelegramBadRequest
from aiogram.types import (
    InlineKeyboardMarkup,
    InputMediaPhoto,
    InputMediaVideo,
    ReplyKeyboardMarkup,
    ReplyKeyboardRemove,
)

import src.bvilove.db.repositories.image_repository as req_image
import src.bvilove.db.repositories.user_repository as req_user

from src.bvilove.db.models import Image, User
from src.bvilove.profile.cities import get_gazetteer
from src.bvilove.profile.values import (
    DatingPurpose,
    ImageKind,
    Subjects,
    format_dating_purpose,
    format_grade,
    format_subjects,
    grade_from_graduation_year,
)
from src.bvilove.utils import texts
from src.bvilove.utils.exceptions import MissingContextError


InputMediaType = Union[InputMediaPhoto, InputMediaVideo]
Markup = Union[InlineKeyboardMarkup, ReplyKeyboardMarkup, ReplyKeyboardRemove]

# Ошибки правки сообщения, которые можно не считать ошибками
IGNORED_EDIT_ERRORS = ('message to edit not found', 'message is not modified')


logger = logging.getLogger(__name__)


# Убрать кнопки у старого сообщения
async def clear_reply_markup(bot: Bot, chat_id: int, message_id: int) -> bool:
    try:
        await bot.edit_message_reply_markup(chat_id=chat_id, message_id=message_id, reply_markup=None)
        return True
    except TelegramBadRequest as e:
        error_message = str(e).lower()

        if any(error in error_message for error in IGNORED_EDIT_ERRORS):
            logger.info(f'Message {message_id} in chat {chat_id} already cleaned: {error_message}')
            return False
        raise


async def edit_message(
    bot: Bot,
    chat_id: int,
    message_id: int,
    text: Optional[str],
    reply_markup: Optional[InlineKeyboardMarkup],
) -> None:
    try:
        if text is None:
            await bot.edit_message_reply_markup(chat_id=chat_id, message_id=message_id, reply_markup=reply_markup)
        else:
            await bot.edit_message_text(text=text, chat_id=chat_id, message_id=message_id, reply_markup=reply_markup)
    except TelegramBadRequest as e:
        error_message = str(e).lower()

        if any(error in error_message for error in IGNORED_EDIT_ERRORS):
            logger.info(f'Message {message_id} in chat {chat_id} not edited: {error_message}')
            return
        raise


# Ссылка для связи с пользователем
async def user_url(bot: Bot, user_id: int) -> str:
    chat = await bot.get_chat(user_id)
    if chat.username:
        return f'https://t.me/{chat.username}'
    return f'tg://user?id={user_id}'


async def can_be_linked(bot: Bot, user_id: int) -> bool:
    """Есть имя пользователя или не запрещена пересылка сообщений"""
    chat = await bot.get_chat(user_id)
    return bool(chat.username) or not chat.has_private_forwards


def format_user(user: User) -> str:
    grade = grade_from_graduation_year(user.graduation_year)
    purpose = format_dating_purpose(DatingPurpose.from_bits(user.dating_purpose))

    subjects = Subjects.from_bits(user.subjects)
    subjects_text = 'Ничего не ботает' if subjects.is_empty() else f'Ботает: {format_subjects(subjects)}'

    return (
        f'{user.gender.emoji} {user.name}, {format_grade(grade)}.\n'
        f'🔎 Интересует: {purpose}.\n'
        f'📚 {subjects_text}.\n'
        f'🧭 {get_gazetteer().format_city(user.city)}.\n\n'
        f'{user.about}'
    )


def build_media_group(images: Sequence[Image]) -> list[InputMediaType]:
    media_group: list[InputMediaType] = []
    for image in images:
        if image.kind == ImageKind.VIDEO:
            media_group.append(InputMediaVideo(media=image.file_id))
        else:
            media_group.append(InputMediaPhoto(media=image.file_id))
    return media_group


# Фото и видео анкеты одним альбомом
async def send_user_photos(bot: Bot, chat_id: int, images: Sequence[Image]) -> None:
    if not images:
        return

    if len(images) == 1:
        image = images[0]
        if image.kind == ImageKind.VIDEO:
            await bot.send_video(chat_id=chat_id, video=image.file_id)
        else:
            await bot.send_photo(chat_id=chat_id, photo=image.file_id)
        return

    await bot.send_media_group(chat_id=chat_id, media=build_media_group(images))


async def send_profile(bot: Bot, user_id: int, reply_markup: Optional[Markup] = None) -> None:
    """Отправляет пользователю его собственную анкету"""
    user = await req_user.get_user(user_id)
    if user is None:
        raise MissingContextError(f'user {user_id} not found')

    await send_user_photos(bot, user_id, await req_image.get_images(user_id))
    await bot.send_message(
        chat_id=user_id,
        text=texts.PROFILE_PREVIEW.format(profile=format_user(user)),
        reply_markup=reply_markup,
    )
