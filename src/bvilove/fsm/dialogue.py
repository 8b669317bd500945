"""Диалог заполнения анкеты.

Обработчики здесь ничего не отправляют и не пишут в БД: по состоянию,
данным диалога и вводу пользователя они возвращают Transition - новое
состояние, новые данные и список эффектов. Эффекты выполняет
utils/dialogue_helpers.py, состояние FSM меняется только после них.
"""

import logging

from dataclasses import dataclass, field, replace
from typing import Callable, Optional, Union

from aiogram.fsm.state import State
from aiogram.types import InlineKeyboardMarkup, ReplyKeyboardMarkup, ReplyKeyboardRemove

from src.bvilove.fsm.user_states import ProfileDialogue
from src.bvilove.keyboards import builders
from src.bvilove.profile.cities import get_gazetteer, resolve_city
from src.bvilove.profile.draft import (
    ABOUT_MAX_LENGTH,
    ABOUT_MIN_LENGTH,
    MAX_PHOTOS,
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    DialogueData,
    DraftProfile,
    UserCity,
)
from src.bvilove.profile.values import (
    DatingPurpose,
    ImageKind,
    ProfileFlag,
    Subjects,
    format_dating_purpose,
    format_subjects,
    graduation_year_from_grade,
    parse_gender,
    parse_gender_filter,
    parse_grade,
    parse_location_filter,
)
from src.bvilove.utils import texts
from src.bvilove.utils.exceptions import AbuseError, MissingContextError


logger = logging.getLogger(__name__)

Markup = Union[InlineKeyboardMarkup, ReplyKeyboardMarkup, ReplyKeyboardRemove]


# Эффекты
@dataclass(frozen=True)
class Reply:
    text: str
    reply_markup: Optional[Markup] = None


@dataclass(frozen=True)
class EditMessage:
    """Правка сообщения, на кнопку которого нажали"""

    text: Optional[str] = None
    reply_markup: Optional[InlineKeyboardMarkup] = None


@dataclass(frozen=True)
class SaveProfile:
    draft: DraftProfile


@dataclass(frozen=True)
class SendProfile:
    user_id: int


@dataclass(frozen=True)
class CleanImages:
    user_id: int


@dataclass(frozen=True)
class SaveImage:
    user_id: int
    file_id: str
    kind: ImageKind


Effect = Union[Reply, EditMessage, SaveProfile, SendProfile, CleanImages, SaveImage]


@dataclass
class Transition:
    # None - выход из диалога
    state: Optional[State]
    data: Optional[DialogueData]
    effects: list[Effect] = field(default_factory=list)


CREATION_ORDER = [
    ProfileDialogue.set_name,
    ProfileDialogue.set_gender,
    ProfileDialogue.set_gender_filter,
    ProfileDialogue.set_graduation_year,
    ProfileDialogue.set_subjects,
    ProfileDialogue.set_subjects_filter,
    ProfileDialogue.set_dating_purpose,
    ProfileDialogue.set_city,
    ProfileDialogue.set_location_filter,
    ProfileDialogue.set_about,
    ProfileDialogue.set_photos,
]

EDIT_STATES = {
    'name': ProfileDialogue.set_name,
    'grade': ProfileDialogue.set_graduation_year,
    'subjects': ProfileDialogue.set_subjects,
    'purpose': ProfileDialogue.set_dating_purpose,
    'city': ProfileDialogue.set_city,
    'about': ProfileDialogue.set_about,
    'photos': ProfileDialogue.set_photos,
}


def get_dialogue_state(raw_state: Optional[str]) -> Optional[State]:
    for state in ProfileDialogue.__all_states__:
        if state.state == raw_state:
            return state
    return None


def render_prompt(state: State, data: DialogueData) -> Reply:
    """Вопрос для состояния. Повторный вызов с теми же данными даёт то же самое"""
    draft = data.draft

    if state == ProfileDialogue.set_name:
        return Reply(texts.REQUEST_NAME, ReplyKeyboardRemove())
    if state == ProfileDialogue.set_gender:
        return Reply(texts.REQUEST_GENDER, builders.gender_kb())
    if state == ProfileDialogue.set_gender_filter:
        return Reply(texts.REQUEST_GENDER_FILTER, builders.gender_filter_kb())
    if state == ProfileDialogue.set_graduation_year:
        return Reply(texts.REQUEST_GRADE, ReplyKeyboardRemove())
    if state == ProfileDialogue.set_subjects:
        return Reply(texts.EDIT_SUBJECTS, builders.subjects_kb(draft.subjects or Subjects(0), partner=False))
    if state == ProfileDialogue.set_subjects_filter:
        return Reply(
            texts.EDIT_PARTNER_SUBJECTS,
            builders.subjects_kb(draft.subjects_filter or Subjects(0), partner=True),
        )
    if state == ProfileDialogue.set_dating_purpose:
        return Reply(
            texts.REQUEST_SET_DATING_PURPOSE,
            builders.dating_purpose_kb(draft.dating_purpose or DatingPurpose(0)),
        )
    if state == ProfileDialogue.set_city:
        return Reply(texts.REQUEST_CITY, builders.city_unspecified_kb())
    if state == ProfileDialogue.set_location_filter:
        if draft.city is None or draft.city.city_id is None:
            raise MissingContextError('location filter requested without a city')
        city = get_gazetteer().get(draft.city.city_id)
        return Reply(texts.EDIT_LOCATION_FILTER, builders.location_filter_kb(city))
    if state == ProfileDialogue.set_about:
        return Reply(texts.EDIT_ABOUT, ReplyKeyboardRemove())
    if state == ProfileDialogue.set_photos:
        return Reply(texts.REQUEST_SET_PHOTOS, builders.photos_kb(data.photos_count > 0))
    if state == ProfileDialogue.edit:
        return Reply(texts.REQUEST_EDIT, builders.edit_profile_kb())

    raise MissingContextError(f'no prompt for state {state}')


def retry(state: State, data: DialogueData, hint: Optional[str] = None) -> Transition:
    effects: list[Effect] = []
    if hint:
        effects.append(Reply(hint))
    effects.append(render_prompt(state, data))
    return Transition(state, data, effects)


def go_to(state: State, data: DialogueData, effects: list[Effect]) -> Transition:
    return Transition(state, data, [*effects, render_prompt(state, data)])


def finish(data: DialogueData, effects: list[Effect]) -> Transition:
    draft = data.draft

    if data.create_new:
        # Анкета уже сохранена на шаге «о себе»
        effects = [
            *effects,
            SendProfile(draft.id),
            Reply(texts.READY_FOR_DATINGS, builders.find_partner_kb()),
        ]
    else:
        effects = [*effects, SaveProfile(draft), SendProfile(draft.id)]

    return Transition(None, None, effects)


def advance(state: State, data: DialogueData, effects: Optional[list[Effect]] = None) -> Transition:
    """Переход после того, как значение состояния записано в черновик"""
    effects = list(effects or [])
    city_given = data.draft.city is not None and data.draft.city.is_specified

    if state == ProfileDialogue.set_city and not city_given:
        effects.append(Reply(texts.NO_CITY))

    if not data.create_new:
        # Некоторые поля тянут за собой следующее
        if state == ProfileDialogue.set_subjects:
            return go_to(ProfileDialogue.set_subjects_filter, data, effects)
        if state == ProfileDialogue.set_city and city_given:
            return go_to(ProfileDialogue.set_location_filter, data, effects)
        return finish(data, effects)

    if state == ProfileDialogue.set_photos:
        return finish(data, effects)

    if state == ProfileDialogue.set_about:
        # Фото привязываются к уже существующей анкете
        effects.append(SaveProfile(data.draft))

    next_state = CREATION_ORDER[CREATION_ORDER.index(state) + 1]
    if next_state == ProfileDialogue.set_location_filter and not city_given:
        next_state = ProfileDialogue.set_about

    return go_to(next_state, data, effects)


def with_draft(data: DialogueData, draft: DraftProfile) -> DialogueData:
    return replace(data, draft=draft)


def require_text(text: Optional[str]) -> str:
    if text is None:
        raise MissingContextError('message has no text')
    return text


# Обработчики текста
def set_name(state: State, data: DialogueData, text: Optional[str]) -> Transition:
    if text is None or not NAME_MIN_LENGTH <= len(text) <= NAME_MAX_LENGTH:
        return retry(state, data, texts.BAD_NAME)
    return advance(state, with_draft(data, data.draft.set_field('name', text)))


def set_gender(state: State, data: DialogueData, text: Optional[str]) -> Transition:
    try:
        gender = parse_gender(require_text(text))
    except ValueError:
        return retry(state, data)
    return advance(state, with_draft(data, data.draft.set_field('gender', gender)))


def set_gender_filter(state: State, data: DialogueData, text: Optional[str]) -> Transition:
    try:
        gender_filter = parse_gender_filter(require_text(text))
    except ValueError:
        return retry(state, data)
    return advance(state, with_draft(data, data.draft.set_field('gender_filter', gender_filter)))


def set_graduation_year(state: State, data: DialogueData, text: Optional[str]) -> Transition:
    try:
        grade = parse_grade(require_text(text))
    except ValueError:
        return retry(state, data)
    graduation_year = graduation_year_from_grade(grade)
    return advance(state, with_draft(data, data.draft.set_field('graduation_year', graduation_year)))


def set_city(state: State, data: DialogueData, text: Optional[str]) -> Transition:
    """Город выбирается в два шага: поиск по тексту, затем подтверждение"""
    text = require_text(text)

    if text == texts.CITY_CORRECT:
        if data.staged_city is None:
            raise MissingContextError('city confirmed before it was found')
        draft = data.draft.set_city(UserCity(data.staged_city))
        return advance(state, replace(data, draft=draft, staged_city=None))

    if text == texts.CITY_UNSPECIFIED:
        draft = data.draft.set_city(UserCity())
        return advance(state, replace(data, draft=draft, staged_city=None))

    city = resolve_city(text)
    if city is None:
        return Transition(state, data, [Reply(texts.CANT_FIND_CITY, builders.city_unspecified_kb())])

    logger.info(f'User {data.draft.id} city staged: {city.id}')
    return Transition(
        state,
        replace(data, staged_city=city.id),
        [Reply(texts.CONFIRM_CITY.format(city=city), builders.city_confirm_kb())],
    )


def set_location_filter(state: State, data: DialogueData, text: Optional[str]) -> Transition:
    try:
        location_filter = parse_location_filter(require_text(text))
    except ValueError:
        return retry(state, data)
    return advance(state, with_draft(data, data.draft.set_field('location_filter', location_filter)))


def set_about(state: State, data: DialogueData, text: Optional[str]) -> Transition:
    if text is None or not ABOUT_MIN_LENGTH <= len(text) <= ABOUT_MAX_LENGTH:
        return retry(state, data, texts.BAD_ABOUT)
    return advance(state, with_draft(data, data.draft.set_field('about', text)))


def set_photos(state: State, data: DialogueData, text: Optional[str]) -> Transition:
    text = require_text(text)

    if text == texts.PHOTOS_SKIP:
        return advance(state, replace(data, photos_count=0), [CleanImages(data.draft.id)])
    if text == texts.PHOTOS_SAVE:
        return advance(state, data)

    return retry(state, data)


def callback_only(state: State, data: DialogueData, text: Optional[str]) -> Transition:
    # Ждём нажатия кнопки, показываем клавиатуру ещё раз
    return retry(state, data)


TEXT_HANDLERS: dict[str, Callable[[State, DialogueData, Optional[str]], Transition]] = {
    ProfileDialogue.set_name.state: set_name,
    ProfileDialogue.set_gender.state: set_gender,
    ProfileDialogue.set_gender_filter.state: set_gender_filter,
    ProfileDialogue.set_graduation_year.state: set_graduation_year,
    ProfileDialogue.set_subjects.state: callback_only,
    ProfileDialogue.set_subjects_filter.state: callback_only,
    ProfileDialogue.set_dating_purpose.state: callback_only,
    ProfileDialogue.set_city.state: set_city,
    ProfileDialogue.set_location_filter.state: set_location_filter,
    ProfileDialogue.set_about.state: set_about,
    ProfileDialogue.set_photos.state: set_photos,
    ProfileDialogue.edit.state: callback_only,
}


def handle_text(state: State, data: DialogueData, text: Optional[str]) -> Transition:
    handler = TEXT_HANDLERS.get(state.state)
    if handler is None:
        raise MissingContextError(f'text is not expected in state {state}')
    return handler(state, data, text)


def handle_media(state: State, data: DialogueData, file_id: str, kind: ImageKind) -> Transition:
    """Фото или видео в анкету"""
    if state != ProfileDialogue.set_photos:
        return handle_text(state, data, None)

    if data.photos_count >= MAX_PHOTOS:
        return Transition(state, data, [Reply(texts.PHOTOS_LIMIT)])

    effects: list[Effect] = []
    if data.photos_count == 0:
        # Новая серия фото заменяет старые
        effects.append(CleanImages(data.draft.id))

    photos_count = data.photos_count + 1
    effects.append(SaveImage(data.draft.id, file_id, kind))
    effects.append(Reply(texts.PHOTOS_ADDED.format(count=photos_count), builders.photos_kb(True)))

    return Transition(state, replace(data, photos_count=photos_count), effects)


# Обработчики кнопок с множественным выбором
BITSET_CALLBACKS: dict[str, tuple[State, str, type[ProfileFlag]]] = {
    builders.SUBJECTS_PREFIX: (ProfileDialogue.set_subjects, 'subjects', Subjects),
    builders.SUBJECTS_FILTER_PREFIX: (ProfileDialogue.set_subjects_filter, 'subjects_filter', Subjects),
    builders.PURPOSE_PREFIX: (ProfileDialogue.set_dating_purpose, 'dating_purpose', DatingPurpose),
}


def bitset_markup(field_name: str, value: ProfileFlag) -> InlineKeyboardMarkup:
    if field_name == 'dating_purpose':
        return builders.dating_purpose_kb(DatingPurpose(value))
    return builders.subjects_kb(Subjects(value), partner=field_name == 'subjects_filter')


def bitset_summary(field_name: str, value: ProfileFlag) -> str:
    if field_name == 'subjects':
        if value.is_empty():
            return texts.USER_SUBJECTS_EMPTY
        return texts.USER_SUBJECTS.format(subjects=format_subjects(Subjects(value)))
    if field_name == 'subjects_filter':
        if value.is_empty():
            return texts.PARTNER_SUBJECTS_EMPTY
        return texts.PARTNER_SUBJECTS.format(subjects=format_subjects(Subjects(value)))
    return texts.DATING_PURPOSE_CHOSEN.format(purpose=format_dating_purpose(DatingPurpose(value)))


def handle_bitset(state: Optional[State], data: Optional[DialogueData], callback_data: str) -> Transition:
    """Нажатие на предмет или цель знакомства, либо «Продолжить»"""
    prefix, _, action = callback_data.rpartition('_')
    if prefix not in BITSET_CALLBACKS:
        raise MissingContextError(f'unknown callback {callback_data!r}')

    expected_state, field_name, flag_type = BITSET_CALLBACKS[prefix]
    if state != expected_state or data is None:
        raise MissingContextError(f'callback {callback_data!r} in state {state}')

    current = getattr(data.draft, field_name) or flag_type(0)

    if action == builders.CONTINUE:
        if field_name == 'dating_purpose' and current.is_empty():
            raise AbuseError('there must be at least 1 purpose')
        data = with_draft(data, data.draft.set_field(field_name, current))
        return advance(expected_state, data, [EditMessage(text=bitset_summary(field_name, current))])

    try:
        bit = flag_type.single(int(action))
    except ValueError:
        raise MissingContextError(f'bad bit in callback {callback_data!r}') from None

    toggled = current.toggle(bit.value)
    data = with_draft(data, data.draft.set_field(field_name, toggled))
    return Transition(expected_state, data, [EditMessage(reply_markup=bitset_markup(field_name, toggled))])


# Входы в диалог
def start_creation(user_id: int) -> Transition:
    data = DialogueData(draft=DraftProfile(id=user_id), create_new=True)
    return go_to(ProfileDialogue.set_name, data, [Reply(texts.PROFILE_CREATION_STARTED)])


def start_edit_menu(draft: DraftProfile) -> Transition:
    return go_to(ProfileDialogue.edit, DialogueData(draft=draft), [])


def handle_edit(state: Optional[State], data: Optional[DialogueData], field_name: str) -> Transition:
    """Выбор поля в меню изменения анкеты"""
    if state != ProfileDialogue.edit or data is None:
        raise MissingContextError(f'edit menu callback in state {state}')

    if field_name == 'cancel':
        return Transition(None, None, [EditMessage(text=texts.EDIT_CANCELLED)])

    next_state = EDIT_STATES.get(field_name)
    if next_state is None:
        raise MissingContextError(f'unknown profile field {field_name!r}')

    data = replace(data, create_new=False, photos_count=0, staged_city=None)
    return go_to(next_state, data, [EditMessage(text=texts.REQUEST_EDIT)])
