START = (
    'Привет! Это бот знакомств для школьников, которые ботают.\n'
    'Здесь можно найти друзей, напарника для учёбы или вторую половинку.\n\n'
    'Чтобы начать, заполните анкету командой /create или кнопкой ниже.'
)
HELP = (
    '/start - начало работы\n'
    '/create - создать анкету заново\n'
    '/edit - изменить анкету\n'
    '/date - смотреть анкеты\n'
    '/profile - посмотреть свою анкету\n'
    '/enable - включить анкету\n'
    '/disable - выключить анкету\n'
    '/help - список команд'
)

PROFILE_CREATION_STARTED = (
    'Начинаем создавать анкету, это не займёт у вас много времени.\n'
    'Не волнуйтесь, если где то ошибётесь: вы можете изменить её после регистрации командой /edit.'
)
PLEASE_ALLOW_FORWARDING = (
    'Пожалуйста, создайте имя пользователя или разрешите пересылку своих сообщений в настройках '
    'конфиденциальности Telegram. Без этого бот не сможет отправить ссылку на вас другому человеку!'
)
PLEASE_CREATE_PROFILE = (
    'Чтобы начать смотреть анкеты, сначала необходимо заполнить свою. Воспользуйтесь командой /create'
)

REQUEST_NAME = 'Как вас называть?'
BAD_NAME = 'Имя должно быть от 3 до 16 символов. Попробуйте ещё раз!'
REQUEST_GENDER = 'Теперь выберите ваш пол'
REQUEST_GENDER_FILTER = 'Кого вы хотите заботать?'
REQUEST_GRADE = (
    'В каком вы сейчас классе?\n'
    ' Примечание: если вы, например, окончили 9-ый класс, но ещё не поступили в 10-ый - вы в 9-ом.'
)
EDIT_SUBJECTS = 'Какие предметы вы ботаете? Нажмите на предмет, чтобы добавить или убрать его.'
EDIT_PARTNER_SUBJECTS = (
    'Выберите предметы, хотя бы один из которых должен ботать тот, кого вы ищете. '
    'Нажмите на предмет, чтобы добавить или убрать его.'
)
SUBJECTS_CONTINUE = 'Продолжить'
SUBJECTS_PARTNER_EMPTY = 'Не важно'
SUBJECTS_USER_EMPTY = 'Никакие'
USER_SUBJECTS_EMPTY = 'Вы ничего не ботаете.'
USER_SUBJECTS = 'Предметы, которые вы ботаете: {subjects}.'
PARTNER_SUBJECTS_EMPTY = 'Не важно, что ботает другой человек.'
PARTNER_SUBJECTS = 'Предметы, хотя бы один из которых должен ботать тот, кого вы ищете: {subjects}.'
REQUEST_SET_DATING_PURPOSE = 'Ради чего вы хотите познакомиться? Можно выбрать несколько вариантов.'
DATING_PURPOSE_CHOSEN = 'Вас интересует: {purpose}.'

REQUEST_CITY = (
    'Из какого вы города?\n'
    'Введите название города, а мы попробуем его найти. '
    'Если не хотите указывать город, нажмите кнопку ниже.'
)
CANT_FIND_CITY = (
    'Не удалось найти город! Попробуйте ввести его имя более точно.\n'
    'Совет: посмотрите список городов https://ru.wikipedia.org/wiki/Список_городов_России.'
)
CONFIRM_CITY = 'Ваш город - {city}?'
CITY_CORRECT = 'Верно'
CITY_UNSPECIFIED = 'Не указывать'
EDIT_LOCATION_FILTER = (
    'Где вы хотите искать людей?\n'
    'По всей стране, в своём федеральном округе, в своём субъекте федерации или только в своём городе?'
)
NO_CITY = 'Так как вы не указали свой город, мы будем искать людей по всей России'

EDIT_ABOUT = 'Расскажите о себе: чем занимаетесь, кого хотите найти'
BAD_ABOUT = 'Текст должен быть от 1 до 1024 символов. Попробуйте ещё раз!'
REQUEST_SET_PHOTOS = 'Отправьте парочку своих фото или видео'
PHOTOS_SKIP = 'Без фото'
PHOTOS_SAVE = 'Сохранить'
PHOTOS_LIMIT = 'Невозможно добавить более 10 фото/видео'
PHOTOS_ADDED = 'Добавлено {count}/10 фото/видео. Добавить ещё?'

REQUEST_EDIT = 'Что вы хотите изменить?'
EDIT_CANCELLED = 'Изменение анкеты отменено'
PROFILE_PREVIEW = 'Так выглядит ваша анкета:\n\n{profile}'
READY_FOR_DATINGS = 'Готовы начать путешествие? Жмите кнопку ниже или используйте команду /date!'
FIND_PARTNER = 'Искать 🚀'
CREATE_PROFILE = 'Заполнить анкету 📝'
ALLOW_FORWARDING_RETRY = 'Готово, попробовать снова'

PROFILE_ENABLED = 'Ваша анкета включена ✅'
PROFILE_DISABLED = 'Ваша анкета выключена ❌'

PARTNER_NOT_FOUND = (
    'К сожалению, не удалось никого найти.\n'
    'Совет: попробуйте ослабить фильтры или просто немного подождать, так как наш бот не '
    'отправляет анкеты одних и тех же людей чаще одного раза в 4 часа.'
)
SEND_LIKE = 'Введите сообщение, которое вы хотите отправить вместе с лайком'
LIKE_SENT = 'Лайк отправлен!'
GOT_LIKE = 'Кому то понравилась твоя анкета:\n\n{profile}'
GOT_LIKE_WITH_MESSAGE = 'Кому то понравилась твоя анкета:\n\n{profile}\n\n💌 Сообщение: {message}'
MUTUAL_LIKE = 'Взаимный лайк!\n\n{profile}'
OPEN_CHAT = 'Открыть чат'

ERROR = '❌ При обработке данных произошла ошибка. Попробуйте ещё раз!'
