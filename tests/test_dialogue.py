import pytest

from src.bvilove.fsm.dialogue import (
    CleanImages,
    EditMessage,
    Reply,
    SaveImage,
    SaveProfile,
    SendProfile,
    Transition,
    handle_bitset,
    handle_edit,
    handle_media,
    handle_text,
    render_prompt,
    start_creation,
    start_edit_menu,
)
from src.bvilove.fsm.user_states import ProfileDialogue
from src.bvilove.profile.cities import make_city_id
from src.bvilove.profile.draft import DialogueData, UserCity
from src.bvilove.profile.values import (
    DatingPurpose,
    ImageKind,
    LocationFilter,
    Subjects,
    graduation_year_from_grade,
)
from src.bvilove.utils import texts
from src.bvilove.utils.exceptions import AbuseError, MissingContextError
from tests.factories import make_draft


MOSCOW = make_city_id(1, 1, 1)


def texts_of(transition: Transition) -> list[str]:
    return [effect.text for effect in transition.effects if isinstance(effect, Reply)]


def send(transition: Transition, text: str) -> Transition:
    assert transition.state is not None and transition.data is not None
    return handle_text(transition.state, transition.data, text)


def press(transition: Transition, callback_data: str) -> Transition:
    return handle_bitset(transition.state, transition.data, callback_data)


def creation_until(state) -> Transition:
    transition = start_creation(1)
    answers = {
        ProfileDialogue.set_name.state: 'Аня',
        ProfileDialogue.set_gender.state: 'Я девушка',
        ProfileDialogue.set_gender_filter.state: 'Парня',
        ProfileDialogue.set_graduation_year.state: '10',
    }
    while transition.state != state:
        if transition.state.state in answers:
            transition = send(transition, answers[transition.state.state])
        elif transition.state == ProfileDialogue.set_subjects:
            transition = press(transition, f'subj_{Subjects.MATH.value}')
            transition = press(transition, 'subj_continue')
        elif transition.state == ProfileDialogue.set_subjects_filter:
            transition = press(transition, 'subjf_continue')
        elif transition.state == ProfileDialogue.set_dating_purpose:
            transition = press(transition, f'purpose_{DatingPurpose.STUDIES.value}')
            transition = press(transition, 'purpose_continue')
        elif transition.state == ProfileDialogue.set_city:
            transition = send(send(transition, 'Москва'), texts.CITY_CORRECT)
        elif transition.state == ProfileDialogue.set_location_filter:
            transition = send(transition, 'Вся Россия')
        elif transition.state == ProfileDialogue.set_about:
            transition = send(transition, 'Люблю физику')
        else:
            raise AssertionError(f'unexpected state {transition.state}')
    return transition


def test_start_creation_asks_name():
    transition = start_creation(1)

    assert transition.state == ProfileDialogue.set_name
    assert transition.data.is_creating_new_profile()
    assert texts_of(transition) == [texts.PROFILE_CREATION_STARTED, texts.REQUEST_NAME]


@pytest.mark.parametrize(
    'name, accepted',
    [
        ('Ян', False),
        ('Аня', True),
        ('Ж' * 16, True),
        ('Ж' * 17, False),
        ('🙂🙂🙂', True),
    ],
)
def test_name_length_in_code_points(name, accepted):
    transition = send(start_creation(1), name)

    if accepted:
        assert transition.state == ProfileDialogue.set_gender
        assert transition.data.draft.name == name
    else:
        assert transition.state == ProfileDialogue.set_name
        assert transition.data.draft.name is None
        assert texts_of(transition) == [texts.BAD_NAME, texts.REQUEST_NAME]


def test_unknown_gender_retries():
    transition = creation_until(ProfileDialogue.set_gender)
    retried = send(transition, 'Кот')

    assert retried.state == ProfileDialogue.set_gender
    assert retried.data == transition.data


def test_missing_text_is_an_error():
    transition = creation_until(ProfileDialogue.set_gender)
    with pytest.raises(MissingContextError):
        handle_text(transition.state, transition.data, None)


def test_grade_stored_as_graduation_year():
    transition = send(creation_until(ProfileDialogue.set_graduation_year), '10')

    assert transition.state == ProfileDialogue.set_subjects
    assert transition.data.draft.graduation_year == graduation_year_from_grade(10)


def test_bad_grade_retries():
    transition = send(creation_until(ProfileDialogue.set_graduation_year), '12')
    assert transition.state == ProfileDialogue.set_graduation_year
    assert transition.data.draft.graduation_year is None


def test_subject_toggle_redraws_keyboard():
    transition = creation_until(ProfileDialogue.set_subjects)
    toggled = press(transition, f'subj_{Subjects.ART.value}')

    assert toggled.state == ProfileDialogue.set_subjects
    assert toggled.data.draft.subjects == Subjects.ART
    assert len(toggled.effects) == 1
    assert isinstance(toggled.effects[0], EditMessage)
    assert toggled.effects[0].text is None

    untoggled = press(toggled, f'subj_{Subjects.ART.value}')
    assert untoggled.data.draft.subjects == Subjects(0)


def test_subjects_continue_moves_to_filter():
    transition = creation_until(ProfileDialogue.set_subjects)
    transition = press(transition, 'subj_continue')

    assert transition.state == ProfileDialogue.set_subjects_filter
    assert transition.data.draft.subjects == Subjects(0)
    assert transition.effects[0] == EditMessage(text=texts.USER_SUBJECTS_EMPTY)


def test_empty_purpose_rejected():
    transition = creation_until(ProfileDialogue.set_dating_purpose)
    with pytest.raises(AbuseError, match='at least 1 purpose'):
        press(transition, 'purpose_continue')


def test_purpose_saved():
    transition = creation_until(ProfileDialogue.set_dating_purpose)
    transition = press(transition, f'purpose_{DatingPurpose.FRIENDSHIP.value}')
    transition = press(transition, f'purpose_{DatingPurpose.RELATIONSHIP.value}')
    transition = press(transition, 'purpose_continue')

    assert transition.state == ProfileDialogue.set_city
    assert transition.data.draft.dating_purpose == DatingPurpose.FRIENDSHIP | DatingPurpose.RELATIONSHIP


@pytest.mark.parametrize('callback_data', ['purpose_8', 'purpose_3', 'purpose_x'])
def test_bad_bit_is_an_error(callback_data):
    transition = creation_until(ProfileDialogue.set_dating_purpose)
    with pytest.raises(MissingContextError):
        press(transition, callback_data)


def test_callback_for_other_state_is_an_error():
    transition = creation_until(ProfileDialogue.set_city)
    with pytest.raises(MissingContextError):
        press(transition, 'subj_continue')


def test_city_typo_then_unspecified():
    transition = creation_until(ProfileDialogue.set_city)

    staged = send(transition, 'Масква')
    assert staged.state == ProfileDialogue.set_city
    assert staged.data.staged_city == MOSCOW
    assert 'Москва' in texts_of(staged)[0]

    transition = send(staged, texts.CITY_UNSPECIFIED)
    assert transition.state == ProfileDialogue.set_about
    assert transition.data.draft.city == UserCity()
    assert transition.data.draft.location_filter is LocationFilter.COUNTRY
    assert transition.data.staged_city is None
    assert texts.NO_CITY in texts_of(transition)


def test_city_confirmed_asks_location_filter():
    transition = send(send(creation_until(ProfileDialogue.set_city), 'Казань'), texts.CITY_CORRECT)

    assert transition.state == ProfileDialogue.set_location_filter
    assert transition.data.draft.city.city_id == make_city_id(5, 37, 1)


def test_city_confirmed_before_search_is_an_error():
    with pytest.raises(MissingContextError):
        send(creation_until(ProfileDialogue.set_city), texts.CITY_CORRECT)


def test_city_not_found():
    transition = send(creation_until(ProfileDialogue.set_city), 'qwerty')
    assert transition.state == ProfileDialogue.set_city
    assert texts_of(transition) == [texts.CANT_FIND_CITY]


def test_about_saves_profile_before_photos():
    transition = send(creation_until(ProfileDialogue.set_about), 'Люблю физику')

    assert transition.state == ProfileDialogue.set_photos
    saves = [effect for effect in transition.effects if isinstance(effect, SaveProfile)]
    assert len(saves) == 1
    profile = saves[0].draft.finalize()
    assert profile.about == 'Люблю физику'
    assert profile.location_filter is LocationFilter.COUNTRY


def test_about_too_long_retries():
    transition = send(creation_until(ProfileDialogue.set_about), 'а' * 1025)
    assert transition.state == ProfileDialogue.set_about
    assert texts.BAD_ABOUT in texts_of(transition)


def test_photo_loop_limit():
    transition = creation_until(ProfileDialogue.set_photos)

    for number in range(1, 11):
        transition = handle_media(transition.state, transition.data, f'file{number}', ImageKind.IMAGE)
        assert transition.data.photos_count == number

    assert isinstance(transition.effects[0], SaveImage)
    rejected = handle_media(transition.state, transition.data, 'file11', ImageKind.VIDEO)
    assert rejected.data.photos_count == 10
    assert rejected.effects == [Reply(texts.PHOTOS_LIMIT)]

    finished = send(rejected, texts.PHOTOS_SAVE)
    assert finished.state is None
    assert SendProfile(1) in finished.effects
    assert texts.READY_FOR_DATINGS in texts_of(finished)


def test_first_photo_cleans_old_ones():
    transition = creation_until(ProfileDialogue.set_photos)
    transition = handle_media(transition.state, transition.data, 'file1', ImageKind.VIDEO)

    assert transition.effects[:2] == [CleanImages(1), SaveImage(1, 'file1', ImageKind.VIDEO)]


def test_no_photos_cleans_and_finishes():
    transition = send(creation_until(ProfileDialogue.set_photos), texts.PHOTOS_SKIP)

    assert transition.state is None
    assert transition.effects[0] == CleanImages(1)
    assert SendProfile(1) in transition.effects


def test_prompt_rendering_is_repeatable():
    data = DialogueData(draft=make_draft(1, city=UserCity(MOSCOW)), photos_count=3)
    for state in ProfileDialogue.__all_states__:
        if state == ProfileDialogue.like_with_message:
            continue
        assert render_prompt(state, data) == render_prompt(state, data)


def test_edit_subjects_chains_into_filter():
    menu = start_edit_menu(make_draft(1))
    assert menu.state == ProfileDialogue.edit

    transition = handle_edit(menu.state, menu.data, 'subjects')
    assert transition.state == ProfileDialogue.set_subjects
    assert not transition.data.is_creating_new_profile()

    transition = press(transition, f'subj_{Subjects.ART.value}')
    transition = press(transition, 'subj_continue')
    assert transition.state == ProfileDialogue.set_subjects_filter

    transition = press(transition, 'subjf_continue')
    assert transition.state is None
    saved = [effect for effect in transition.effects if isinstance(effect, SaveProfile)][0]
    assert saved.draft.subjects == Subjects.MATH | Subjects.ART
    assert SendProfile(1) in transition.effects


def test_edit_name_saves_immediately():
    menu = start_edit_menu(make_draft(1))
    transition = send(handle_edit(menu.state, menu.data, 'name'), 'Борис')

    assert transition.state is None
    assert transition.effects[0].draft.name == 'Борис'


def test_edit_city_unspecified_forces_country():
    menu = start_edit_menu(make_draft(1, city=UserCity(MOSCOW), location_filter=LocationFilter.CITY))
    transition = send(handle_edit(menu.state, menu.data, 'city'), texts.CITY_UNSPECIFIED)

    assert transition.state is None
    saved = [effect for effect in transition.effects if isinstance(effect, SaveProfile)][0]
    assert saved.draft.city == UserCity()
    assert saved.draft.location_filter is LocationFilter.COUNTRY


def test_edit_cancel():
    menu = start_edit_menu(make_draft(1))
    transition = handle_edit(menu.state, menu.data, 'cancel')

    assert transition.state is None
    assert transition.effects == [EditMessage(text=texts.EDIT_CANCELLED)]


def test_edit_menu_outside_edit_state():
    with pytest.raises(MissingContextError):
        handle_edit(None, None, 'name')
