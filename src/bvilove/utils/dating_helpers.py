"""Лайки и взаимные лайки.

Знакомство (Dating) создаётся, когда пользователю показывают анкету.
Инициатор реагирует один раз, партнёр отвечает один раз только на лайк.
Повторная реакция со старой клавиатуры - AbuseError.
"""

import logging

from typing import Optional

from aiogram import Bot
from aiogram.exceptions import TelegramForbiddenError
from aiogram.fsm.context import FSMContext

import src.bvilove.db.repositories.dating_repository as req_dating
import src.bvilove.db.repositories.image_repository as req_image
import src.bvilove.db.repositories.user_repository as req_user
import src.bvilove.keyboards.builders as kb

from src.bvilove.db.models import Dating, User
from src.bvilove.fsm.user_states import ProfileDialogue
from src.bvilove.utils import texts
from src.bvilove.utils.exceptions import AbuseError, MissingContextError
from src.bvilove.utils.helpers import clear_reply_markup, format_user, send_user_photos, user_url


logger = logging.getLogger(__name__)


def reaction_name(like: bool, with_message: bool = False) -> str:
    if with_message:
        return 'msglikes'
    return 'likes' if like else 'dislikes'


async def get_user_or_fail(user_id: int) -> User:
    user = await req_user.get_user(user_id)
    if user is None:
        raise MissingContextError(f'user {user_id} not found')
    return user


async def deactivate_blocked(user_id: int) -> None:
    logger.info(f'User {user_id} blocked the bot, profile disabled')
    await req_user.set_user_active(user_id, False)


# Следующая анкета
async def send_recommendation(bot: Bot, user_id: int) -> Optional[Dating]:
    # Старые анкеты без ответа больше не принимают реакции
    for dating in await req_dating.get_unanswered_datings(user_id):
        if dating.initiator_msg_id is not None:
            await clear_reply_markup(bot, user_id, dating.initiator_msg_id)
        await req_dating.set_initiator_msg(dating.id, None)

    found = await req_dating.get_partner(user_id)

    try:
        if found is None:
            await bot.send_message(chat_id=user_id, text=texts.PARTNER_NOT_FOUND)
            return None

        dating, partner = found
        await send_user_photos(bot, user_id, await req_image.get_images(partner.id))
        message = await bot.send_message(
            chat_id=user_id,
            text=format_user(partner),
            reply_markup=kb.dating_kb(dating.id),
        )
    except TelegramForbiddenError:
        await deactivate_blocked(user_id)
        return None

    await req_dating.set_initiator_msg(dating.id, message.message_id)

    return dating


async def get_own_dating(dating_id: int, user_id: int, initiator: bool) -> Dating:
    dating = await req_dating.get_dating(dating_id)
    owner_id = dating.initiator_id if initiator else dating.partner_id
    if owner_id != user_id:
        raise MissingContextError(f'dating {dating_id} does not belong to user {user_id}')
    return dating


async def drop_like_message_request(state: FSMContext, dating_id: int) -> None:
    """Ответ кнопкой отменяет ожидание сообщения к лайку этой же анкеты"""
    if await state.get_state() != ProfileDialogue.like_with_message.state:
        return
    if (await state.get_data()).get('dating_id') == dating_id:
        await state.clear()


async def handle_initiator_reaction(
    bot: Bot,
    user_id: int,
    dating_id: int,
    like: bool,
    message: Optional[str] = None,
    state: Optional[FSMContext] = None,
) -> None:
    """Лайк, лайк с сообщением или дизлайк показанной анкете"""
    dating = await get_own_dating(dating_id, user_id, initiator=True)
    if state is not None:
        await drop_like_message_request(state, dating_id)

    if not await req_dating.set_initiator_reaction(dating_id, like):
        raise AbuseError(f'user abuses {reaction_name(like, message is not None)}')
    logger.info(f'User {user_id} reacted {like} to dating {dating_id}')

    if dating.initiator_msg_id is not None:
        await clear_reply_markup(bot, user_id, dating.initiator_msg_id)

    if like:
        await send_like(bot, dating, message)
        await bot.send_message(chat_id=user_id, text=texts.LIKE_SENT)

    await send_recommendation(bot, user_id)


async def request_like_message(bot: Bot, state: FSMContext, user_id: int, dating_id: int) -> None:
    dating = await get_own_dating(dating_id, user_id, initiator=True)
    if dating.initiator_reaction is not None:
        raise AbuseError(f'user abuses {reaction_name(True, with_message=True)}')

    await bot.send_message(chat_id=user_id, text=texts.SEND_LIKE)
    await state.set_state(ProfileDialogue.like_with_message)
    await state.set_data({'dating_id': dating_id})


async def send_like_with_message(bot: Bot, state: FSMContext, user_id: int, text: Optional[str]) -> None:
    dating_id = (await state.get_data()).get('dating_id')
    if dating_id is None:
        await state.clear()
        raise MissingContextError('like message without dating')
    if text is None:
        # Ждём текст дальше
        raise MissingContextError('like message without text')

    # Ожидание заканчивается при любом исходе реакции
    await state.clear()
    await handle_initiator_reaction(bot, user_id, dating_id, True, message=text)


async def send_like(bot: Bot, dating: Dating, message: Optional[str] = None) -> None:
    """Уведомление партнёру о лайке с кнопками ответа"""
    initiator = await get_user_or_fail(dating.initiator_id)

    if message is None:
        text = texts.GOT_LIKE.format(profile=format_user(initiator))
    else:
        text = texts.GOT_LIKE_WITH_MESSAGE.format(profile=format_user(initiator), message=message)

    try:
        await send_user_photos(bot, dating.partner_id, await req_image.get_images(initiator.id))
        await bot.send_message(chat_id=dating.partner_id, text=text, reply_markup=kb.dating_response_kb(dating.id))
    except TelegramForbiddenError:
        await deactivate_blocked(dating.partner_id)


async def handle_partner_reaction(
    bot: Bot, user_id: int, dating_id: int, like: bool, message_id: Optional[int]
) -> None:
    dating = await get_own_dating(dating_id, user_id, initiator=False)

    if not await req_dating.set_partner_reaction(dating_id, like):
        raise AbuseError(f'partner abuses {reaction_name(like)}')
    logger.info(f'User {user_id} responded {like} to dating {dating_id}')

    if message_id is not None:
        await clear_reply_markup(bot, user_id, message_id)

    if like:
        await mutual_like(bot, dating)


async def mutual_like(bot: Bot, dating: Dating) -> None:
    """Обоим отправляем анкету и ссылку на чат друг с другом"""
    initiator = await get_user_or_fail(dating.initiator_id)
    partner = await get_user_or_fail(dating.partner_id)
    logger.info(f'Mutual like in dating {dating.id}')

    # Forbidden ниже относится только к получателю
    urls = {user.id: await user_url(bot, user.id) for user in (initiator, partner)}

    for receiver, other in ((initiator, partner), (partner, initiator)):
        try:
            await send_user_photos(bot, receiver.id, await req_image.get_images(other.id))
            await bot.send_message(
                chat_id=receiver.id,
                text=texts.MUTUAL_LIKE.format(profile=format_user(other)),
                reply_markup=kb.open_chat_kb(urls[other.id]),
            )
        except TelegramForbiddenError:
            await deactivate_blocked(receiver.id)
