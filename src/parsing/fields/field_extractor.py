"""
FieldExtractor: дата выдачи, срок действия и номер из фрагментов OCR.

Для каждого поля независимо:
1. Стратегия выбирает фрагмент с ключевым словом ("issuing date", ...)
2. Regex применяется к тексту ЭТОГО ЖЕ фрагмента
3. Нет совпадения -> поле None (соседние фрагменты не просматриваются)

extract() никогда не бросает исключений из-за отсутствия полей.
extract_from_image() бросает RecognitionUnavailable, если упал сам OCR.
"""

import asyncio
from pathlib import Path
from typing import Dict, Optional, Sequence, Union

from loguru import logger

from config.settings import RECOGNITION_TIMEOUT_S
from contracts.d1_capture_dto import CroppedImage, TextFragment
from contracts.d2_parsing_dto import ExtractedFields
from ..domain.interfaces import ITextRecognizer, IFragmentMatchStrategy
from ..domain.exceptions import RecognitionUnavailable
from .field_profile import FieldProfile
from .strategies import FirstMatchStrategy

_STANDARD_FIELDS = ("issuing_date", "expiry_date", "id_number")


class FieldExtractor:
    """
    Извлечение структурированных полей.

    Пример:
        extractor = FieldExtractor()
        fields = extractor.extract(fragments)
    """

    def __init__(
        self,
        profile: Optional[FieldProfile] = None,
        strategy: Optional[IFragmentMatchStrategy] = None,
        recognizer: Optional[ITextRecognizer] = None,
        recognition_timeout_s: Optional[float] = RECOGNITION_TIMEOUT_S
    ):
        self.profile = profile or FieldProfile.default()
        self.strategy = strategy or FirstMatchStrategy()
        self.recognizer = recognizer
        self.recognition_timeout_s = recognition_timeout_s

        logger.debug(
            f"[FieldExtractor] profile={self.profile.name}, strategy={self.strategy.name}, "
            f"fields={[f.name for f in self.profile.fields]}"
        )

    def extract(self, fragments: Sequence[TextFragment]) -> ExtractedFields:
        """
        Извлекает поля профиля из фрагментов.

        Args:
            fragments: Фрагменты OCR в порядке ответа распознавателя

        Returns:
            ExtractedFields (отсутствующие поля = None)
        """
        values: Dict[str, str] = {}

        for spec in self.profile.fields:
            fragment = self.strategy.select(fragments, spec.keyword)
            if fragment is None:
                logger.debug(f"[FieldExtractor] {spec.name}: ключевое слово '{spec.keyword}' не найдено")
                continue

            match = spec.regex.search(fragment.text)
            if match is None:
                logger.debug(f"[FieldExtractor] {spec.name}: формат не совпал в '{fragment.text}'")
                continue

            values[spec.name] = match.group(0)
            logger.debug(f"[FieldExtractor] {spec.name} = {values[spec.name]}")

        standard = {k: values.pop(k) for k in _STANDARD_FIELDS if k in values}
        result = ExtractedFields(**standard, extra=values)

        logger.info(
            f"[FieldExtractor] Найдено полей: {len(standard) + len(values)}/{len(self.profile.fields)}"
        )
        return result

    async def recognize(self, image: Union[CroppedImage, Path]) -> Sequence[TextFragment]:
        """
        Распознаёт текст на изображении.

        Raises:
            RecognitionUnavailable: нет распознавателя, ошибка или таймаут OCR
        """
        if self.recognizer is None:
            raise RecognitionUnavailable(
                message="Распознаватель текста не настроен",
                component="FieldExtractor"
            )

        path = image.path if isinstance(image, CroppedImage) else Path(image)
        try:
            call = self.recognizer.recognize(path)
            if self.recognition_timeout_s is None:
                return await call
            return await asyncio.wait_for(call, timeout=self.recognition_timeout_s)
        except asyncio.TimeoutError as e:
            raise RecognitionUnavailable(
                message=f"OCR не ответил за {self.recognition_timeout_s} с",
                component="FieldExtractor",
                original_error=e
            )
        except RecognitionUnavailable:
            raise
        except Exception as e:
            raise RecognitionUnavailable(
                message=f"Ошибка OCR: {path.name}",
                component="FieldExtractor",
                original_error=e
            )

    async def extract_from_image(self, image: Union[CroppedImage, Path]) -> ExtractedFields:
        """Распознавание + извлечение полей."""
        fragments = await self.recognize(image)
        logger.debug(f"[FieldExtractor] Фрагментов OCR: {len(fragments)}")
        return self.extract(fragments)
