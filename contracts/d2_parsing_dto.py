"""
DTO контракт: D2 (Parsing) -> Controller

Структурированные поля, извлечённые из распознанного текста карты.
Каждое поле опционально: отсутствие поля - НЕ ошибка.
"""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ExtractedFields(BaseModel):
    """Результат FieldExtractor."""

    model_config = ConfigDict(frozen=True)

    issuing_date: Optional[str] = Field(None, description="Дата выдачи (DD/MM/YYYY)")
    expiry_date: Optional[str] = Field(None, description="Срок действия (DD/MM/YYYY)")
    id_number: Optional[str] = Field(None, description="Номер (NNN-NNNN-NNNNNNN-N)")
    extra: Dict[str, str] = Field(
        default_factory=dict, description="Поля из профиля сверх трёх стандартных"
    )

    def is_empty(self) -> bool:
        return (
            self.issuing_date is None
            and self.expiry_date is None
            and self.id_number is None
            and not self.extra
        )
