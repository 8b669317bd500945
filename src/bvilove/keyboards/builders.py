import logging

from aiogram.types import (
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    KeyboardButton,
    ReplyKeyboardMarkup,
)
from aiogram.utils.keyboard import InlineKeyboardBuilder, ReplyKeyboardBuilder

from src.bvilove.profile.cities import City
from src.bvilove.profile.values import (
    COUNTY_SUFFIX,
    DATING_PURPOSE_LABELS,
    GENDER_BUTTONS,
    GENDER_FILTER_BUTTONS,
    SUBJECT_LABELS,
    WHOLE_COUNTRY,
    DatingPurpose,
    Subjects,
)
from src.bvilove.utils import texts


logger = logging.getLogger(__name__)

SUBJECTS_PREFIX = 'subj'
SUBJECTS_FILTER_PREFIX = 'subjf'
PURPOSE_PREFIX = 'purpose'
CONTINUE = 'continue'

EDIT_FIELDS = {
    'name': 'Имя',
    'grade': 'Класс',
    'subjects': 'Предметы',
    'purpose': 'Цели',
    'city': 'Город',
    'about': 'О себе',
    'photos': 'Фото',
    'cancel': 'Отмена',
}


def _reply_kb(*labels: str, width: int = 2) -> ReplyKeyboardMarkup:
    keyboard = ReplyKeyboardBuilder()
    for label in labels:
        keyboard.add(KeyboardButton(text=label))

    keyboard.adjust(width)
    return keyboard.as_markup(resize_keyboard=True, one_time_keyboard=True)


# Кнопки анкеты
def gender_kb() -> ReplyKeyboardMarkup:
    return _reply_kb(*GENDER_BUTTONS)


def gender_filter_kb() -> ReplyKeyboardMarkup:
    return _reply_kb(*GENDER_FILTER_BUTTONS, width=3)


def city_unspecified_kb() -> ReplyKeyboardMarkup:
    return _reply_kb(texts.CITY_UNSPECIFIED, width=1)


def city_confirm_kb() -> ReplyKeyboardMarkup:
    return _reply_kb(texts.CITY_CORRECT, texts.CITY_UNSPECIFIED)


def location_filter_kb(city: City) -> ReplyKeyboardMarkup:
    labels = [WHOLE_COUNTRY, f'{city.county}{COUNTY_SUFFIX}', city.subject]
    # Москва и Санкт-Петербург - одновременно город и субъект
    if city.name != city.subject:
        labels.append(city.name)

    return _reply_kb(*labels, width=1)


def photos_kb(has_photos: bool) -> ReplyKeyboardMarkup:
    return _reply_kb(texts.PHOTOS_SAVE if has_photos else texts.PHOTOS_SKIP, width=1)


def subjects_kb(subjects: Subjects, partner: bool) -> InlineKeyboardMarkup:
    prefix = SUBJECTS_FILTER_PREFIX if partner else SUBJECTS_PREFIX

    keyboard = InlineKeyboardBuilder()
    for subject, label in SUBJECT_LABELS.items():
        emoji = '✅ ' if subjects.contains_any(subject) else ''
        keyboard.add(InlineKeyboardButton(text=f'{emoji}{label}', callback_data=f'{prefix}_{subject.value}'))

    if not subjects.is_empty():
        continue_text = texts.SUBJECTS_CONTINUE
    elif partner:
        continue_text = texts.SUBJECTS_PARTNER_EMPTY
    else:
        continue_text = texts.SUBJECTS_USER_EMPTY

    keyboard.adjust(2)
    keyboard.row(InlineKeyboardButton(text=continue_text, callback_data=f'{prefix}_{CONTINUE}'))
    return keyboard.as_markup()


def dating_purpose_kb(purpose: DatingPurpose) -> InlineKeyboardMarkup:
    keyboard = InlineKeyboardBuilder()
    for item, label in DATING_PURPOSE_LABELS.items():
        emoji = '✅ ' if purpose.contains_any(item) else ''
        keyboard.add(InlineKeyboardButton(text=f'{emoji}{label}', callback_data=f'{PURPOSE_PREFIX}_{item.value}'))

    keyboard.adjust(1)
    keyboard.row(InlineKeyboardButton(text=texts.SUBJECTS_CONTINUE, callback_data=f'{PURPOSE_PREFIX}_{CONTINUE}'))
    return keyboard.as_markup()


def edit_profile_kb() -> InlineKeyboardMarkup:
    keyboard = InlineKeyboardBuilder()
    for field, label in EDIT_FIELDS.items():
        keyboard.add(InlineKeyboardButton(text=label, callback_data=f'edit_{field}'))

    keyboard.adjust(2)
    return keyboard.as_markup()


# Кнопки знакомств
def start_kb() -> InlineKeyboardMarkup:
    keyboard = InlineKeyboardBuilder()
    keyboard.add(InlineKeyboardButton(text=texts.CREATE_PROFILE, callback_data='create_profile'))
    return keyboard.as_markup()


def allow_forwarding_kb() -> InlineKeyboardMarkup:
    keyboard = InlineKeyboardBuilder()
    keyboard.add(InlineKeyboardButton(text=texts.ALLOW_FORWARDING_RETRY, callback_data='create_profile'))
    return keyboard.as_markup()


def find_partner_kb() -> InlineKeyboardMarkup:
    keyboard = InlineKeyboardBuilder()
    keyboard.add(InlineKeyboardButton(text=texts.FIND_PARTNER, callback_data='find_partner'))
    return keyboard.as_markup()


def dating_kb(dating_id: int) -> InlineKeyboardMarkup:
    keyboard = InlineKeyboardBuilder()
    keyboard.add(
        InlineKeyboardButton(text='👎', callback_data=f'dislike_{dating_id}'),
        InlineKeyboardButton(text='💌', callback_data=f'msglike_{dating_id}'),
        InlineKeyboardButton(text='👍', callback_data=f'like_{dating_id}'),
    )

    keyboard.adjust(3)
    return keyboard.as_markup()


def dating_response_kb(dating_id: int) -> InlineKeyboardMarkup:
    keyboard = InlineKeyboardBuilder()
    keyboard.add(
        InlineKeyboardButton(text='💔', callback_data=f'respdislike_{dating_id}'),
        InlineKeyboardButton(text='❤', callback_data=f'resplike_{dating_id}'),
    )

    keyboard.adjust(2)
    return keyboard.as_markup()


def open_chat_kb(url: str) -> InlineKeyboardMarkup:
    keyboard = InlineKeyboardBuilder()
    keyboard.add(InlineKeyboardButton(text=texts.OPEN_CHAT, url=url))
    return keyboard.as_markup()
