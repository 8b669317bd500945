import logging

from aiogram import Bot, F, Router
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

import src.bvilove.db.repositories.user_repository as req_user
import src.bvilove.keyboards.builders as kb

from src.bvilove.fsm.dialogue import handle_bitset, handle_edit
from src.bvilove.handlers.user.commands import start_profile_creation
from src.bvilove.utils import texts
from src.bvilove.utils.dating_helpers import (
    handle_initiator_reaction,
    handle_partner_reaction,
    request_like_message,
    send_recommendation,
)
from src.bvilove.utils.dialogue_helpers import apply_transition, load_dialogue
from src.bvilove.utils.exceptions import MissingContextError


logger = logging.getLogger(__name__)

router_user = Router()

BITSET_PREFIXES = (f'{kb.SUBJECTS_PREFIX}_', f'{kb.SUBJECTS_FILTER_PREFIX}_', f'{kb.PURPOSE_PREFIX}_')


def callback_message(callback: CallbackQuery) -> Message:
    if not callback.message or not isinstance(callback.message, Message):
        raise MissingContextError('callback without message')
    return callback.message


def callback_id(callback: CallbackQuery) -> int:
    """id знакомства из данных кнопки вида like_42"""
    if callback.data is None:
        raise MissingContextError('callback without data')
    try:
        return int(callback.data.split('_')[1])
    except (IndexError, ValueError):
        raise MissingContextError(f'bad callback data {callback.data!r}') from None


# --- Анкета ---
@router_user.callback_query(F.data == 'create_profile')
async def create_profile(callback: CallbackQuery, state: FSMContext, bot: Bot) -> None:
    logger.info(f'Current state: {await state.get_state()}, Data: {await state.get_data()}')
    await start_profile_creation(bot, state, callback.from_user.id)
    await callback.answer()


@router_user.callback_query(F.data.startswith(BITSET_PREFIXES))
async def toggle_bitset(callback: CallbackQuery, state: FSMContext, bot: Bot) -> None:
    """Выбор предметов и целей знакомства"""
    message = callback_message(callback)
    logger.info(f'Current state: {await state.get_state()}, Data: {await state.get_data()}')

    dialogue_state, data = await load_dialogue(state)
    transition = handle_bitset(dialogue_state, data, callback.data or '')

    await apply_transition(bot, state, message.chat.id, transition, message_id=message.message_id)
    await callback.answer()


@router_user.callback_query(F.data.startswith('edit_'))
async def edit_profile_field(callback: CallbackQuery, state: FSMContext, bot: Bot) -> None:
    message = callback_message(callback)
    logger.info(f'Current state: {await state.get_state()}, Data: {await state.get_data()}')

    dialogue_state, data = await load_dialogue(state)
    field_name = (callback.data or '').removeprefix('edit_')
    transition = handle_edit(dialogue_state, data, field_name)

    await apply_transition(bot, state, message.chat.id, transition, message_id=message.message_id)
    await callback.answer()


# --- Знакомства ---
@router_user.callback_query(F.data == 'find_partner')
async def find_partner(callback: CallbackQuery, state: FSMContext, bot: Bot) -> None:
    if not await req_user.user_exists(callback.from_user.id):
        await callback.answer(texts.PLEASE_CREATE_PROFILE, show_alert=True)
        return

    await state.clear()
    await send_recommendation(bot, callback.from_user.id)
    await callback.answer()


@router_user.callback_query(F.data.startswith(('like_', 'dislike_')))
async def initiator_reaction(callback: CallbackQuery, state: FSMContext, bot: Bot) -> None:
    like = bool(callback.data and callback.data.startswith('like_'))
    await handle_initiator_reaction(bot, callback.from_user.id, callback_id(callback), like, state=state)
    await callback.answer()


@router_user.callback_query(F.data.startswith('msglike_'))
async def initiator_like_with_message(callback: CallbackQuery, state: FSMContext, bot: Bot) -> None:
    await request_like_message(bot, state, callback.from_user.id, callback_id(callback))
    await callback.answer()


@router_user.callback_query(F.data.startswith(('resplike_', 'respdislike_')))
async def partner_reaction(callback: CallbackQuery, bot: Bot) -> None:
    message = callback_message(callback)
    like = bool(callback.data and callback.data.startswith('resplike_'))

    await handle_partner_reaction(bot, callback.from_user.id, callback_id(callback), like, message.message_id)
    await callback.answer()
