"""
DTO контракт: Controller -> UI / CLI

Итог одного нажатия "Take a Photo".
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .d1_capture_dto import CroppedImage
from .d2_parsing_dto import ExtractedFields


class CaptureStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"        # Ошибка пайплайна захвата, можно повторить
    REJECTED = "rejected"    # Захват уже выполняется
    DISCARDED = "discarded"  # Сессия UI закрыта до завершения захвата


class CaptureOutcome(BaseModel):
    """Результат CaptureController.capture()."""

    model_config = ConfigDict(frozen=True)

    status: CaptureStatus
    side: Optional[str] = Field(None, description="Снятая сторона: front/back")
    image_label: Optional[str] = Field(None, description="Подпись снятого изображения")
    next_prompt: Optional[str] = Field(None, description="Подпись для следующего захвата")
    image: Optional[CroppedImage] = None
    fields: ExtractedFields = Field(default_factory=ExtractedFields)
    error_type: Optional[str] = None
    error: Optional[str] = None
    recognition_error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == CaptureStatus.SUCCESS
