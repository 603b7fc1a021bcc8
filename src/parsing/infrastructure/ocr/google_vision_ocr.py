"""
OCR: Google Vision API интеграция.

- Отправка CroppedImage в Google Vision (DOCUMENT_TEXT_DETECTION)
- Сборка фрагментов: одна строка текста = один TextFragment

Строки собираются по detected_break символов, а не по абзацам:
в одном абзаце могут стоять "Issuing Date" и "Expiry Date",
и тогда regex нашёл бы не ту дату.
"""

import asyncio
import os
from pathlib import Path
from typing import List, Optional, Sequence

from google.cloud import vision
from loguru import logger

from config.settings import GOOGLE_APPLICATION_CREDENTIALS, OCR_LANGUAGE_HINTS
from contracts.d1_capture_dto import BoundingBox, TextFragment
from ...domain.interfaces import ITextRecognizer

_BreakType = vision.TextAnnotation.DetectedBreak.BreakType
_SPACE_BREAKS = {_BreakType.SPACE, _BreakType.SURE_SPACE}
_LINE_BREAKS = {_BreakType.EOL_SURE_SPACE, _BreakType.LINE_BREAK}


class GoogleVisionRecognizer(ITextRecognizer):
    """
    Обёртка над Google Cloud Vision API.

    Возвращает фрагменты в порядке блоков ответа Vision.
    """

    def __init__(
        self,
        credentials_path: Optional[str] = None,
        client: Optional[vision.ImageAnnotatorClient] = None,
        language_hints: Optional[Sequence[str]] = None
    ):
        """
        Инициализация OCR клиента.

        Args:
            credentials_path: Путь к JSON-файлу credentials.
                            Если не указан, берётся из settings.
            client: Готовый клиент (тесты, общий клиент приложения)
            language_hints: Подсказки языка для OCR
        """
        self.language_hints = list(language_hints or OCR_LANGUAGE_HINTS)

        if client is not None:
            self.client = client
        else:
            creds_path = credentials_path or GOOGLE_APPLICATION_CREDENTIALS

            if not creds_path:
                raise ValueError(
                    "Google credentials не указаны!\n"
                    "Укажите путь в config/settings.py или передайте в конструктор."
                )

            if not Path(creds_path).exists():
                raise FileNotFoundError(f"Credentials файл не найден: {creds_path}")

            # Устанавливаем credentials через переменную окружения
            os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = str(creds_path)
            self.client = vision.ImageAnnotatorClient()

        logger.info("[GoogleVisionRecognizer] Клиент инициализирован")

    async def recognize(self, image_path: Path) -> List[TextFragment]:
        return await asyncio.to_thread(self.recognize_sync, Path(image_path))

    def recognize_sync(self, image_path: Path) -> List[TextFragment]:
        """
        Распознаёт текст из файла изображения.

        Raises:
            RuntimeError: если Vision вернул ошибку
        """
        logger.debug(f"[GoogleVisionRecognizer] Распознавание: {image_path.name}")

        image = vision.Image(content=image_path.read_bytes())
        image_context = vision.ImageContext(language_hints=self.language_hints)

        response = self.client.document_text_detection(
            image=image,
            image_context=image_context
        )

        if response.error.message:
            raise RuntimeError(f"Google Vision API error: {response.error.message}")

        fragments = self._parse_response(response)
        logger.debug(f"[GoogleVisionRecognizer] Извлечено фрагментов: {len(fragments)}")
        return fragments

    def _parse_response(self, response) -> List[TextFragment]:
        fragments: List[TextFragment] = []
        annotation = response.full_text_annotation
        if not annotation:
            return fragments

        for page in annotation.pages:
            for block in page.blocks:
                for paragraph in block.paragraphs:
                    fragments.extend(self._paragraph_lines(paragraph))

        return fragments

    def _paragraph_lines(self, paragraph) -> List[TextFragment]:
        lines: List[TextFragment] = []
        text = ""
        words = []

        for word in paragraph.words:
            words.append(word)
            for symbol in word.symbols:
                text += symbol.text
                brk = symbol.property.detected_break.type_
                if brk in _SPACE_BREAKS:
                    text += " "
                elif brk in _LINE_BREAKS:
                    lines.append(self._make_fragment(text, words))
                    text, words = "", []

        if text.strip():
            lines.append(self._make_fragment(text, words))

        return lines

    def _make_fragment(self, text: str, words) -> TextFragment:
        xs: List[int] = []
        ys: List[int] = []
        confidences: List[float] = []
        for word in words:
            xs.extend(v.x for v in word.bounding_box.vertices)
            ys.extend(v.y for v in word.bounding_box.vertices)
            confidences.append(word.confidence)

        bbox = None
        if xs and ys:
            bbox = BoundingBox(
                x=max(0, min(xs)),
                y=max(0, min(ys)),
                width=max(1, max(xs) - min(xs)),
                height=max(1, max(ys) - min(ys))
            )

        confidence = sum(confidences) / len(confidences) if confidences else 1.0
        return TextFragment(
            text=text.strip(),
            bounding_box=bbox,
            confidence=min(1.0, max(0.0, confidence))
        )
