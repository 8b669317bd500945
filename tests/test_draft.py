import pytest

from src.bvilove.profile.draft import DialogueData, DraftProfile, UserCity
from src.bvilove.profile.values import DatingPurpose, LocationFilter, Subjects
from src.bvilove.utils.exceptions import MissingFieldError
from tests.factories import make_draft


def test_finalize_requires_fields():
    with pytest.raises(MissingFieldError) as exc_info:
        DraftProfile(id=1).finalize()
    assert exc_info.value.field == 'name'


def test_finalize_rejects_empty_purpose():
    with pytest.raises(MissingFieldError) as exc_info:
        make_draft(1, dating_purpose=DatingPurpose(0)).finalize()
    assert exc_info.value.field == 'dating_purpose'


def test_finalize_defaults():
    draft = make_draft(1, grade_up_filter=None, grade_down_filter=None, city=UserCity(), location_filter=None)
    profile = draft.finalize()

    assert profile.active is True
    assert profile.grade_up_filter == 1
    assert profile.grade_down_filter == 1
    assert profile.city is None
    assert profile.location_filter is LocationFilter.COUNTRY


def test_finalize_keeps_selected_purpose():
    purpose = DatingPurpose.STUDIES | DatingPurpose.RELATIONSHIP
    assert make_draft(1, dating_purpose=purpose).finalize().dating_purpose == purpose


def test_set_unspecified_city_forces_country():
    draft = make_draft(1, city=UserCity(42), location_filter=LocationFilter.CITY)
    draft = draft.set_city(UserCity())

    assert draft.city == UserCity()
    assert draft.location_filter is LocationFilter.COUNTRY


def test_changed_columns_skip_unset_fields():
    draft = DraftProfile(id=5, name='Маша', city=UserCity(65793))
    assert draft.changed_columns() == {'name': 'Маша', 'city': 65793}


def test_dialogue_data_through_fsm_storage():
    data = DialogueData(
        draft=DraftProfile(id=3, subjects=Subjects.ART, city=UserCity()),
        create_new=True,
        photos_count=2,
        staged_city=65793,
    )
    restored = DialogueData.from_fsm(data.to_fsm())

    assert restored == data
    # «город не указан» и «город ещё не спрашивали» различаются
    assert DialogueData.from_fsm(DialogueData(DraftProfile(id=3)).to_fsm()).draft.city is None
