"""
Исключения для домена Parsing.

Отсутствие поля - НЕ ошибка (поле просто None).
Ошибкой считается только недоступность распознавания.
"""

from typing import Optional


class ParsingError(Exception):
    """Базовое исключение для ошибок домена Parsing."""

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        self.message = message
        self.component = component
        self.original_error = original_error
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"Parsing Error: {self.message}"
        if self.component:
            msg += f" (Component: {self.component})"
        if self.original_error:
            msg += f" [Original: {type(self.original_error).__name__}: {str(self.original_error)}]"
        return msg


class RecognitionUnavailable(ParsingError):
    """Вызов OCR упал или не ответил вовремя."""
    pass


class FieldProfileError(ParsingError):
    """Профиль полей не найден или невалиден."""
    pass
