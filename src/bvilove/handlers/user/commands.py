import logging

from aiogram import Bot, Router
from aiogram.filters import Command, CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.types import Message

import src.bvilove.db.repositories.user_repository as req_user
import src.bvilove.keyboards.builders as kb

from src.bvilove.fsm.dialogue import start_creation, start_edit_menu
from src.bvilove.profile.draft import DraftProfile
from src.bvilove.utils import texts
from src.bvilove.utils.dating_helpers import send_recommendation
from src.bvilove.utils.dialogue_helpers import apply_transition
from src.bvilove.utils.helpers import can_be_linked, send_profile


logger = logging.getLogger(__name__)

router_user = Router()


async def start_profile_creation(bot: Bot, state: FSMContext, user_id: int) -> None:
    """Общая логика для /create и кнопки «Заполнить анкету»"""
    if not await can_be_linked(bot, user_id):
        logger.info(f'User {user_id} can not be linked, creation postponed')
        await bot.send_message(
            chat_id=user_id,
            text=texts.PLEASE_ALLOW_FORWARDING,
            reply_markup=kb.allow_forwarding_kb(),
        )
        return

    await apply_transition(bot, state, user_id, start_creation(user_id))


async def profile_exists_or_ask(message: Message, user_id: int) -> bool:
    if await req_user.user_exists(user_id):
        return True
    await message.answer(texts.PLEASE_CREATE_PROFILE)
    return False


@router_user.message(CommandStart())
async def cmd_start(message: Message, state: FSMContext) -> None:
    logger.info(f'Current state: {await state.get_state()}, Data: {await state.get_data()}')
    await state.clear()
    await message.answer(texts.START, reply_markup=kb.start_kb())


@router_user.message(Command('help'))
async def cmd_help(message: Message) -> None:
    await message.answer(texts.HELP)


@router_user.message(Command('create'))
async def cmd_create(message: Message, state: FSMContext, bot: Bot) -> None:
    if not message.from_user:
        return

    logger.info(f'Current state: {await state.get_state()}, Data: {await state.get_data()}')
    await start_profile_creation(bot, state, message.from_user.id)


@router_user.message(Command('edit'))
async def cmd_edit(message: Message, state: FSMContext, bot: Bot) -> None:
    if not message.from_user:
        return

    logger.info(f'Current state: {await state.get_state()}, Data: {await state.get_data()}')
    user = await req_user.get_user(message.from_user.id)
    if user is None:
        await message.answer(texts.PLEASE_CREATE_PROFILE)
        return

    await apply_transition(bot, state, message.chat.id, start_edit_menu(DraftProfile.from_user(user)))


@router_user.message(Command('date'))
async def cmd_date(message: Message, state: FSMContext, bot: Bot) -> None:
    if not message.from_user or not await profile_exists_or_ask(message, message.from_user.id):
        return

    await state.clear()
    await send_recommendation(bot, message.from_user.id)


@router_user.message(Command('profile'))
async def cmd_profile(message: Message, bot: Bot) -> None:
    if not message.from_user or not await profile_exists_or_ask(message, message.from_user.id):
        return

    await send_profile(bot, message.from_user.id)


@router_user.message(Command('enable'))
async def cmd_enable(message: Message) -> None:
    if not message.from_user or not await profile_exists_or_ask(message, message.from_user.id):
        return

    await req_user.set_user_active(message.from_user.id, True)
    await message.answer(texts.PROFILE_ENABLED)


@router_user.message(Command('disable'))
async def cmd_disable(message: Message) -> None:
    if not message.from_user or not await profile_exists_or_ask(message, message.from_user.id):
        return

    await req_user.set_user_active(message.from_user.id, False)
    await message.answer(texts.PROFILE_DISABLED)
