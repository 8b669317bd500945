from aiogram.fsm.state import State, StatesGroup


class ProfileDialogue(StatesGroup):
    # Состояние None - Start, ничего не ждём
    set_name = State()  # str
    set_gender = State()  # Gender
    set_gender_filter = State()  # GenderFilter
    set_graduation_year = State()  # int, вводится классом
    set_subjects = State()  # Subjects, только callback
    set_subjects_filter = State()  # Subjects, только callback
    set_dating_purpose = State()  # DatingPurpose, только callback
    set_city = State()  # UserCity, с подтверждением
    set_location_filter = State()  # LocationFilter
    set_about = State()  # str
    set_photos = State()  # фото и видео, до 10 штук
    like_with_message = State()  # id знакомства в данных
    edit = State()  # меню изменения анкеты
