import logging

from dataclasses import dataclass, fields, replace
from typing import Any, Optional

from src.bvilove.profile.values import (
    DatingPurpose,
    Gender,
    GenderFilter,
    LocationFilter,
    Subjects,
)
from src.bvilove.utils.exceptions import MissingFieldError


logger = logging.getLogger(__name__)

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 16
ABOUT_MIN_LENGTH = 1
ABOUT_MAX_LENGTH = 1024
MAX_PHOTOS = 10

DEFAULT_GRADE_UP_FILTER = 1
DEFAULT_GRADE_DOWN_FILTER = 1


@dataclass(frozen=True)
class UserCity:
    """Город анкеты, city_id=None значит «не указан»"""

    city_id: Optional[int] = None

    @property
    def is_specified(self) -> bool:
        return self.city_id is not None


@dataclass(frozen=True)
class UserProfile:
    id: int
    name: str
    gender: Gender
    gender_filter: GenderFilter
    about: str
    graduation_year: int
    subjects: Subjects
    subjects_filter: Subjects
    dating_purpose: DatingPurpose
    city: Optional[int]
    location_filter: LocationFilter
    active: bool = True
    grade_up_filter: int = DEFAULT_GRADE_UP_FILTER
    grade_down_filter: int = DEFAULT_GRADE_DOWN_FILTER

    def as_columns(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class DraftProfile:
    """Анкета в процессе заполнения: любое поле может быть ещё не задано"""

    id: int
    name: Optional[str] = None
    gender: Optional[Gender] = None
    gender_filter: Optional[GenderFilter] = None
    about: Optional[str] = None
    active: Optional[bool] = None
    graduation_year: Optional[int] = None
    grade_up_filter: Optional[int] = None
    grade_down_filter: Optional[int] = None
    subjects: Optional[Subjects] = None
    subjects_filter: Optional[Subjects] = None
    dating_purpose: Optional[DatingPurpose] = None
    city: Optional[UserCity] = None
    location_filter: Optional[LocationFilter] = None

    def set_field(self, name: str, value: Any) -> 'DraftProfile':
        return replace(self, **{name: value})

    def set_city(self, city: UserCity) -> 'DraftProfile':
        draft = replace(self, city=city)
        if not city.is_specified:
            draft.location_filter = LocationFilter.COUNTRY
        return draft

    def changed_columns(self) -> dict[str, Any]:
        """Заданные поля в виде колонок таблицы users (без id)"""
        columns = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == 'id' or value is None:
                continue
            columns[f.name] = value.city_id if isinstance(value, UserCity) else value
        return columns

    def finalize(self) -> UserProfile:
        """Собирает сохраняемую анкету или падает с MissingFieldError"""
        for name in (
            'name',
            'gender',
            'gender_filter',
            'about',
            'graduation_year',
            'subjects',
            'subjects_filter',
            'dating_purpose',
            'city',
        ):
            if getattr(self, name) is None:
                raise MissingFieldError(name)

        if self.dating_purpose is not None and self.dating_purpose.is_empty():
            raise MissingFieldError('dating_purpose')

        city = self.city or UserCity()
        location_filter = self.location_filter
        if not city.is_specified:
            location_filter = LocationFilter.COUNTRY
        if location_filter is None:
            raise MissingFieldError('location_filter')

        return UserProfile(
            id=self.id,
            name=self.name,
            gender=self.gender,
            gender_filter=self.gender_filter,
            about=self.about,
            graduation_year=self.graduation_year,
            subjects=self.subjects,
            subjects_filter=self.subjects_filter,
            dating_purpose=self.dating_purpose,
            city=city.city_id,
            location_filter=location_filter,
            active=True if self.active is None else self.active,
            grade_up_filter=DEFAULT_GRADE_UP_FILTER if self.grade_up_filter is None else self.grade_up_filter,
            grade_down_filter=DEFAULT_GRADE_DOWN_FILTER if self.grade_down_filter is None else self.grade_down_filter,
        )

    @classmethod
    def from_user(cls, user: Any) -> 'DraftProfile':
        """Черновик, заполненный из сохранённой анкеты (режим редактирования)"""
        return cls(
            id=user.id,
            name=user.name,
            gender=Gender(user.gender),
            gender_filter=GenderFilter(user.gender_filter),
            about=user.about,
            active=user.active,
            graduation_year=user.graduation_year,
            grade_up_filter=user.grade_up_filter,
            grade_down_filter=user.grade_down_filter,
            subjects=Subjects.from_bits(user.subjects),
            subjects_filter=Subjects.from_bits(user.subjects_filter),
            dating_purpose=DatingPurpose.from_bits(user.dating_purpose),
            city=UserCity(user.city),
            location_filter=LocationFilter(user.location_filter),
        )

    def to_dict(self) -> dict[str, Any]:
        """Сериализация для данных FSM"""
        return {
            'id': self.id,
            'name': self.name,
            'gender': self.gender.value if self.gender else None,
            'gender_filter': self.gender_filter.value if self.gender_filter else None,
            'about': self.about,
            'active': self.active,
            'graduation_year': self.graduation_year,
            'grade_up_filter': self.grade_up_filter,
            'grade_down_filter': self.grade_down_filter,
            'subjects': None if self.subjects is None else self.subjects.value,
            'subjects_filter': None if self.subjects_filter is None else self.subjects_filter.value,
            'dating_purpose': None if self.dating_purpose is None else self.dating_purpose.value,
            'city_given': self.city is not None,
            'city': self.city.city_id if self.city else None,
            'location_filter': self.location_filter.value if self.location_filter else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'DraftProfile':
        def optional(converter: Any, key: str) -> Any:
            value = data.get(key)
            return None if value is None else converter(value)

        return cls(
            id=data['id'],
            name=data.get('name'),
            gender=optional(Gender, 'gender'),
            gender_filter=optional(GenderFilter, 'gender_filter'),
            about=data.get('about'),
            active=data.get('active'),
            graduation_year=data.get('graduation_year'),
            grade_up_filter=data.get('grade_up_filter'),
            grade_down_filter=data.get('grade_down_filter'),
            subjects=optional(Subjects.from_bits, 'subjects'),
            subjects_filter=optional(Subjects.from_bits, 'subjects_filter'),
            dating_purpose=optional(DatingPurpose.from_bits, 'dating_purpose'),
            city=UserCity(data.get('city')) if data.get('city_given') else None,
            location_filter=optional(LocationFilter, 'location_filter'),
        )


@dataclass
class DialogueData:
    """Полезная нагрузка состояния диалога анкеты"""

    draft: DraftProfile
    create_new: bool = False
    photos_count: int = 0
    # Найденный по тексту город, ждёт подтверждения
    staged_city: Optional[int] = None

    def to_fsm(self) -> dict[str, Any]:
        return {
            'draft': self.draft.to_dict(),
            'create_new': self.create_new,
            'photos_count': self.photos_count,
            'staged_city': self.staged_city,
        }

    @classmethod
    def from_fsm(cls, data: dict[str, Any]) -> 'DialogueData':
        return cls(
            draft=DraftProfile.from_dict(data['draft']),
            create_new=data.get('create_new', False),
            photos_count=data.get('photos_count', 0),
            staged_city=data.get('staged_city'),
        )

    def is_creating_new_profile(self) -> bool:
        return self.create_new
