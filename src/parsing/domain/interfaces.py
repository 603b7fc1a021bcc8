"""
Интерфейсы (абстрактные классы) для домена Parsing.

Домен Parsing отвечает за:
1. Распознавание текста на CroppedImage
2. Извлечение полей (даты, номер) из фрагментов
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence

from contracts.d1_capture_dto import TextFragment


class ITextRecognizer(ABC):
    """Интерфейс распознавателя текста."""

    @abstractmethod
    async def recognize(self, image_path: Path) -> List[TextFragment]:
        """
        Распознаёт текст на изображении.

        Args:
            image_path: Путь к изображению

        Returns:
            Фрагменты текста в порядке, в котором их вернул OCR
        """
        pass


class IFragmentMatchStrategy(ABC):
    """Стратегия выбора фрагмента по ключевому слову."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Имя стратегии (для логирования)."""
        pass

    @abstractmethod
    def select(
        self,
        fragments: Sequence[TextFragment],
        keyword: str
    ) -> Optional[TextFragment]:
        """
        Выбирает фрагмент, в котором искать значение поля.

        Args:
            fragments: Фрагменты OCR
            keyword: Ключевое слово в нижнем регистре

        Returns:
            Фрагмент или None, если ключевое слово не найдено
        """
        pass
