import logging

from typing import Optional

from aiogram import Bot
from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import State
from aiogram.types import ReplyKeyboardRemove

import src.bvilove.db.repositories.image_repository as req_image
import src.bvilove.db.repositories.user_repository as req_user

from src.bvilove.fsm.dialogue import (
    CleanImages,
    EditMessage,
    Effect,
    Reply,
    SaveImage,
    SaveProfile,
    SendProfile,
    Transition,
    get_dialogue_state,
)
from src.bvilove.profile.draft import DialogueData
from src.bvilove.utils.exceptions import MissingContextError
from src.bvilove.utils.helpers import edit_message, send_profile


logger = logging.getLogger(__name__)


async def load_dialogue(state: FSMContext) -> tuple[Optional[State], Optional[DialogueData]]:
    """Текущее состояние диалога анкеты и его данные"""
    dialogue_state = get_dialogue_state(await state.get_state())
    data = await state.get_data()
    if dialogue_state is None or 'draft' not in data:
        return dialogue_state, None
    return dialogue_state, DialogueData.from_fsm(data)


async def run_effect(bot: Bot, chat_id: int, effect: Effect, message_id: Optional[int]) -> None:
    if isinstance(effect, Reply):
        await bot.send_message(chat_id=chat_id, text=effect.text, reply_markup=effect.reply_markup)
    elif isinstance(effect, EditMessage):
        if message_id is None:
            raise MissingContextError('nothing to edit')
        await edit_message(bot, chat_id, message_id, effect.text, effect.reply_markup)
    elif isinstance(effect, SaveProfile):
        await req_user.create_or_update_user(effect.draft)
    elif isinstance(effect, SendProfile):
        await send_profile(bot, effect.user_id, reply_markup=ReplyKeyboardRemove())
    elif isinstance(effect, CleanImages):
        await req_image.clean_images(effect.user_id)
    elif isinstance(effect, SaveImage):
        await req_image.create_image(effect.user_id, effect.file_id, effect.kind)


async def apply_transition(
    bot: Bot,
    state: FSMContext,
    chat_id: int,
    transition: Transition,
    message_id: Optional[int] = None,
) -> None:
    """Выполняет эффекты по порядку, затем сохраняет новое состояние.

    Если эффект упал, состояние FSM остаётся прежним.
    """
    for effect in transition.effects:
        await run_effect(bot, chat_id, effect, message_id)

    if transition.state is None or transition.data is None:
        await state.clear()
        logger.info(f'Chat {chat_id} left profile dialogue')
        return

    await state.set_state(transition.state)
    await state.set_data(transition.data.to_fsm())
    logger.info(f'Chat {chat_id} dialogue state: {transition.state.state}')
