"""
Domain слой домена Parsing.

Содержит интерфейсы (абстрактные классы) и исключения для Parsing домена.
"""

from .interfaces import (
    ITextRecognizer,
    IFragmentMatchStrategy,
)

from .exceptions import (
    ParsingError,
    RecognitionUnavailable,
    FieldProfileError,
)

__all__ = [
    # Интерфейсы
    "ITextRecognizer",
    "IFragmentMatchStrategy",

    # Исключения
    "ParsingError",
    "RecognitionUnavailable",
    "FieldProfileError",
]
