import enum
import logging

from datetime import datetime
from typing import Optional

import pytz

from src.bvilove.profile.cities import get_gazetteer


logger = logging.getLogger(__name__)

LOCAL_TIMEZONE = pytz.timezone('Europe/Moscow')

MIN_GRADE = 1
MAX_GRADE = 11
# С сентября начинается новый учебный год
SCHOOL_YEAR_START_MONTH = 9


class Gender(str, enum.Enum):
    FEMALE = 'female'
    MALE = 'male'

    @property
    def emoji(self) -> str:
        return '♀️' if self is Gender.FEMALE else '♂️'


class GenderFilter(str, enum.Enum):
    FEMALE = 'female'
    MALE = 'male'
    ANY = 'any'


class LocationFilter(str, enum.Enum):
    CITY = 'city'
    SUBJECT = 'subject'
    COUNTY = 'county'
    COUNTRY = 'country'


class ImageKind(str, enum.Enum):
    IMAGE = 'image'
    VIDEO = 'video'


GENDER_BUTTONS = {
    'Я парень': Gender.MALE,
    'Я девушка': Gender.FEMALE,
}

GENDER_FILTER_BUTTONS = {
    'Парня': GenderFilter.MALE,
    'Девушку': GenderFilter.FEMALE,
    'Не важно': GenderFilter.ANY,
}

WHOLE_COUNTRY = 'Вся Россия'
COUNTY_SUFFIX = ' ФО'


def parse_gender(text: str) -> Gender:
    try:
        return GENDER_BUTTONS[text]
    except KeyError:
        raise ValueError(f"can't parse gender: {text!r}") from None


def parse_gender_filter(text: str) -> GenderFilter:
    try:
        return GENDER_FILTER_BUTTONS[text]
    except KeyError:
        raise ValueError(f"can't parse gender filter: {text!r}") from None


def parse_location_filter(text: str) -> LocationFilter:
    """Текст кнопки -> фильтр местоположения.

    Порядок проверки: вся страна, федеральный округ (с суффиксом «ФО»),
    субъект, город. Побеждает первое совпадение.
    """
    gazetteer = get_gazetteer()

    if text == WHOLE_COUNTRY:
        return LocationFilter.COUNTRY
    if text.endswith(COUNTY_SUFFIX) and gazetteer.county_exists(text[: -len(COUNTY_SUFFIX)]):
        return LocationFilter.COUNTY
    if gazetteer.subject_exists(text):
        return LocationFilter.SUBJECT
    if gazetteer.city_exists(text):
        return LocationFilter.CITY

    raise ValueError(f"can't parse location filter: {text!r}")


def local_now() -> datetime:
    return datetime.now(LOCAL_TIMEZONE)


def grade_from_int(value: int) -> int:
    if not MIN_GRADE <= value <= MAX_GRADE:
        raise ValueError(f'grade must be in [{MIN_GRADE}, {MAX_GRADE}], got {value}')
    return value


def parse_grade(text: str) -> int:
    return grade_from_int(int(text.strip()))


def graduation_year_from_grade(grade: int, now: Optional[datetime] = None) -> int:
    now = now or local_now()
    year = now.year + (MAX_GRADE - grade)
    if now.month >= SCHOOL_YEAR_START_MONTH:
        year += 1
    return year


def grade_from_graduation_year(graduation_year: int, now: Optional[datetime] = None) -> int:
    """Класс, вычисленный относительно текущей даты.

    Со временем значение растёт само: выпускной год хранится, класс нет.
    """
    now = now or local_now()
    grade = MAX_GRADE - (graduation_year - now.year)
    if now.month >= SCHOOL_YEAR_START_MONTH:
        grade += 1
    return grade


class ProfileFlag(enum.IntFlag):
    """Набор битов, который хранится в БД целым числом.

    Позиции битов нельзя менять: значения уже лежат в базе.
    """

    @classmethod
    def all_bits(cls) -> int:
        bits = 0
        for member in cls:
            bits |= member.value
        return bits

    @classmethod
    def from_bits(cls, bits: int) -> 'ProfileFlag':
        if bits & ~cls.all_bits():
            raise ValueError(f"can't construct {cls.__name__.lower()} from bits {bits}")
        return cls(bits)

    @classmethod
    def single(cls, bit: int) -> 'ProfileFlag':
        """Ровно один определённый бит (данные кнопки)"""
        flag = cls.from_bits(bit)
        if bin(flag.value).count('1') != 1:
            raise ValueError(f'{bit} is not a single {cls.__name__.lower()} bit')
        return flag

    def toggle(self, bit: int) -> 'ProfileFlag':
        return type(self).from_bits(self.value ^ bit)

    def is_empty(self) -> bool:
        return self.value == 0

    def contains_any(self, other: int) -> bool:
        return bool(self.value & other)

    def members(self) -> list['ProfileFlag']:
        return [member for member in type(self) if member.value & self.value]


class Subjects(ProfileFlag):
    ART = 1 << 0
    ASTRONOMY = 1 << 1
    BIOLOGY = 1 << 2
    CHEMISTRY = 1 << 3
    CHINESE = 1 << 4
    ECOLOGY = 1 << 5
    ECONOMICS = 1 << 6
    ENGLISH = 1 << 7
    FRENCH = 1 << 8
    GEOGRAPHY = 1 << 9
    GERMAN = 1 << 10
    HISTORY = 1 << 11
    INFORMATICS = 1 << 12
    ITALIAN = 1 << 13
    LAW = 1 << 14
    LITERATURE = 1 << 15
    MATH = 1 << 16
    PHYSICS = 1 << 17
    RUSSIAN = 1 << 18
    SAFETY = 1 << 19
    SOCIAL = 1 << 20
    SPANISH = 1 << 21
    SPORT = 1 << 22
    TECHNOLOGY = 1 << 23


class DatingPurpose(ProfileFlag):
    FRIENDSHIP = 1 << 0
    STUDIES = 1 << 1
    RELATIONSHIP = 1 << 2


SUBJECT_LABELS = {
    Subjects.ART: 'Искусство 🎨',
    Subjects.ASTRONOMY: 'Астрономия 🌌',
    Subjects.BIOLOGY: 'Биология 🔬',
    Subjects.CHEMISTRY: 'Химия 🧪',
    Subjects.CHINESE: 'Китайский 🇨🇳',
    Subjects.ECOLOGY: 'Экология ♻️',
    Subjects.ECONOMICS: 'Экономика 💶',
    Subjects.ENGLISH: 'Английский 🇬🇧',
    Subjects.FRENCH: 'Французский 🇫🇷',
    Subjects.GEOGRAPHY: 'География 🌎',
    Subjects.GERMAN: 'Немецкий 🇩🇪',
    Subjects.HISTORY: 'История 📰',
    Subjects.INFORMATICS: 'Информатика 💻',
    Subjects.ITALIAN: 'Итальянский 🇮🇹',
    Subjects.LAW: 'Право 👨‍⚖️',
    Subjects.LITERATURE: 'Литература 📖',
    Subjects.MATH: 'Математика 📐',
    Subjects.PHYSICS: 'Физика ☢️',
    Subjects.RUSSIAN: 'Русский 🇷🇺',
    Subjects.SAFETY: 'ОБЖ 🪖',
    Subjects.SOCIAL: 'Обществознание 👫',
    Subjects.SPANISH: 'Испанский 🇪🇸',
    Subjects.SPORT: 'Физкультура 🏐',
    Subjects.TECHNOLOGY: 'Технология 🚜',
}

DATING_PURPOSE_LABELS = {
    DatingPurpose.FRIENDSHIP: 'Дружба 🧑‍🤝‍🧑',
    DatingPurpose.STUDIES: 'Учёба 📚',
    DatingPurpose.RELATIONSHIP: 'Отношения 💕',
}


def format_subjects(subjects: Subjects) -> str:
    labels = [SUBJECT_LABELS[subject] for subject in subjects.members()]
    return ', '.join(sorted(labels, key=str.lower))


def format_dating_purpose(purpose: DatingPurpose) -> str:
    # Порядок каталога, без сортировки
    return ', '.join(DATING_PURPOSE_LABELS[item] for item in purpose.members())


def format_grade(grade: int) -> str:
    return f'{grade} класс'
