from unittest.mock import AsyncMock

import src.bvilove.db.repositories.user_repository as req_user

from src.bvilove.db.models import User
from src.bvilove.profile.draft import DraftProfile, UserCity
from src.bvilove.profile.values import DatingPurpose, Gender, GenderFilter, LocationFilter, Subjects


def make_draft(user_id: int, **overrides) -> DraftProfile:
    fields = {
        'name': f'User{user_id}',
        'gender': Gender.MALE,
        'gender_filter': GenderFilter.FEMALE,
        'about': 'Ботаю к олимпиадам',
        'graduation_year': 2025,
        'grade_up_filter': 0,
        'grade_down_filter': 0,
        'subjects': Subjects.MATH,
        'subjects_filter': Subjects(0),
        'dating_purpose': DatingPurpose.FRIENDSHIP,
        'city': UserCity(),
        'location_filter': LocationFilter.COUNTRY,
    }
    fields.update(overrides)
    return DraftProfile(id=user_id, **fields)


async def create_user(user_id: int, **overrides) -> User:
    await req_user.create_or_update_user(make_draft(user_id, **overrides))
    user = await req_user.get_user(user_id)
    assert user is not None
    return user


def sent_to(bot: AsyncMock, chat_id: int) -> list[dict]:
    """Параметры всех send_message в указанный чат"""
    return [call.kwargs for call in bot.send_message.call_args_list if call.kwargs.get('chat_id') == chat_id]
