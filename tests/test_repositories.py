import pytest

import src.bvilove.db.repositories.dating_repository as req_dating
import src.bvilove.db.repositories.image_repository as req_image
import src.bvilove.db.repositories.user_repository as req_user

from src.bvilove.profile.draft import DraftProfile
from src.bvilove.profile.values import DatingPurpose, Gender, GenderFilter, ImageKind, Subjects
from src.bvilove.utils.exceptions import MissingContextError, MissingFieldError
from tests.factories import create_user


pytestmark = pytest.mark.usefixtures('db')


async def test_create_user():
    user = await create_user(1, subjects=Subjects.MATH | Subjects.ART)

    assert user.name == 'User1'
    assert user.gender is Gender.MALE
    assert user.active is True
    assert user.subjects == Subjects.MATH | Subjects.ART
    assert user.city is None
    assert user.last_activity is not None
    assert await req_user.user_exists(1)
    assert not await req_user.user_exists(2)


async def test_incomplete_profile_not_created():
    with pytest.raises(MissingFieldError):
        await req_user.create_or_update_user(DraftProfile(id=1, name='Аня'))
    assert await req_user.get_user(1) is None


async def test_update_keeps_unset_fields():
    await create_user(1)
    await req_user.create_or_update_user(DraftProfile(id=1, name='Борис', dating_purpose=DatingPurpose.STUDIES))

    user = await req_user.get_user(1)
    assert user.name == 'Борис'
    assert user.dating_purpose == DatingPurpose.STUDIES
    assert user.about == 'Ботаю к олимпиадам'
    assert user.graduation_year == 2025


async def test_set_user_active():
    await create_user(1)

    assert await req_user.set_user_active(1, False)
    assert (await req_user.get_user(1)).active is False
    assert not await req_user.set_user_active(2, False)


async def test_images():
    await create_user(1)
    await req_image.create_image(1, 'photo1', ImageKind.IMAGE)
    await req_image.create_image(1, 'video1', ImageKind.VIDEO)

    images = await req_image.get_images(1)
    assert [(image.file_id, image.kind) for image in images] == [
        ('photo1', ImageKind.IMAGE),
        ('video1', ImageKind.VIDEO),
    ]

    await req_image.clean_images(1)
    assert list(await req_image.get_images(1)) == []


async def test_initiator_reaction_set_once():
    await create_user(1)
    await create_user(2, gender=Gender.FEMALE, gender_filter=GenderFilter.MALE)
    dating, _ = await req_dating.get_partner(1)

    assert await req_dating.set_initiator_reaction(dating.id, True)
    assert not await req_dating.set_initiator_reaction(dating.id, False)
    assert (await req_dating.get_dating(dating.id)).initiator_reaction is True


async def test_partner_reaction_needs_like():
    await create_user(1)
    await create_user(2, gender=Gender.FEMALE, gender_filter=GenderFilter.MALE)
    dating, _ = await req_dating.get_partner(1)

    assert not await req_dating.set_partner_reaction(dating.id, True)

    await req_dating.set_initiator_reaction(dating.id, True)
    assert await req_dating.set_partner_reaction(dating.id, True)
    assert not await req_dating.set_partner_reaction(dating.id, False)

    dating = await req_dating.get_dating(dating.id)
    assert dating.is_mutual


async def test_unknown_dating():
    with pytest.raises(MissingContextError):
        await req_dating.get_dating(404)


async def test_unanswered_datings():
    await create_user(1)
    await create_user(2, gender=Gender.FEMALE, gender_filter=GenderFilter.MALE)
    dating, _ = await req_dating.get_partner(1)

    assert list(await req_dating.get_unanswered_datings(1)) == []

    await req_dating.set_initiator_msg(dating.id, 77)
    assert [d.id for d in await req_dating.get_unanswered_datings(1)] == [dating.id]

    await req_dating.set_initiator_reaction(dating.id, False)
    assert list(await req_dating.get_unanswered_datings(1)) == []
