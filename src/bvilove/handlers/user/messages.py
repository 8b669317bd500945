import logging

from aiogram import Bot, Router
from aiogram.filters import StateFilter
from aiogram.fsm.context import FSMContext
from aiogram.types import Message

from src.bvilove.fsm.dialogue import handle_media, handle_text
from src.bvilove.fsm.user_states import ProfileDialogue
from src.bvilove.profile.values import ImageKind
from src.bvilove.utils import texts
from src.bvilove.utils.dating_helpers import send_like_with_message
from src.bvilove.utils.dialogue_helpers import apply_transition, load_dialogue
from src.bvilove.utils.exceptions import MissingContextError


logger = logging.getLogger(__name__)

router_user = Router()

PROFILE_STATES = [state for state in ProfileDialogue.__all_states__ if state != ProfileDialogue.like_with_message]


@router_user.message(ProfileDialogue.like_with_message)
async def get_like_message(message: Message, state: FSMContext, bot: Bot) -> None:
    if not message.from_user:
        return

    logger.info(f'Current state: {await state.get_state()}, Data: {await state.get_data()}')
    await send_like_with_message(bot, state, message.from_user.id, message.text)


@router_user.message(StateFilter(*PROFILE_STATES))
async def get_profile_answer(message: Message, state: FSMContext, bot: Bot) -> None:
    """Ответ на вопрос анкеты: текст, фото или видео"""
    logger.info(f'Current state: {await state.get_state()}, Data: {await state.get_data()}')

    dialogue_state, data = await load_dialogue(state)
    if dialogue_state is None or data is None:
        raise MissingContextError(f'no dialogue data in chat {message.chat.id}')

    if message.photo:
        transition = handle_media(dialogue_state, data, message.photo[-1].file_id, ImageKind.IMAGE)
    elif message.video:
        transition = handle_media(dialogue_state, data, message.video.file_id, ImageKind.VIDEO)
    else:
        transition = handle_text(dialogue_state, data, message.text)

    await apply_transition(bot, state, message.chat.id, transition)


@router_user.message(StateFilter(None))
async def unknown_message(message: Message) -> None:
    await message.answer(texts.HELP)
