class BotError(Exception):
    """Ошибка приложения, которую обрабатывает роутер ошибок"""


class AbuseError(BotError):
    """Повторная реакция со старой клавиатуры или пустой выбор целей"""


class MissingContextError(BotError):
    """В апдейте нет нужных данных, либо анкета или знакомство не найдены"""


class MissingFieldError(BotError):
    def __init__(self, field: str) -> None:
        super().__init__(f'profile field {field!r} is not set')
        self.field = field
