"""
Профиль полей: ключевое слово + регулярное выражение для каждого поля.

Структура:
config/fields/
  ├── id_card.yaml
  └── ...

Использует Pydantic для валидации структуры конфигурации.
"""

import re
from pathlib import Path
from typing import List, Optional, Pattern

import yaml
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from config.settings import FIELD_PROFILES_DIR
from ..domain.exceptions import FieldProfileError

DATE_PATTERN = r"\b\d{2}/\d{2}/\d{4}\b"            # DD/MM/YYYY
ID_NUMBER_PATTERN = r"\b\d{3}-\d{4}-\d{7}-\d\b"    # NNN-NNNN-NNNNNNN-N


class FieldSpec(BaseModel):
    """Описание одного поля."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    keyword: str = Field(..., min_length=1, description="Ищется в lower-case тексте фрагмента")
    pattern: str = Field(..., min_length=1, description="Regex значения внутри того же фрагмента")

    @field_validator("keyword")
    @classmethod
    def keyword_lower(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("pattern")
    @classmethod
    def pattern_compiles(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Невалидный regex '{v}': {e}")
        return v

    @property
    def regex(self) -> Pattern[str]:
        return re.compile(self.pattern)


class FieldProfile(BaseModel):
    """Набор полей для типа документа."""

    model_config = ConfigDict(frozen=True)

    name: str
    fields: List[FieldSpec] = Field(..., min_length=1)

    @field_validator("fields")
    @classmethod
    def unique_names(cls, v: List[FieldSpec]) -> List[FieldSpec]:
        names = [f.name for f in v]
        if len(names) != len(set(names)):
            raise ValueError(f"Имена полей повторяются: {names}")
        return v

    @classmethod
    def default(cls) -> "FieldProfile":
        """Встроенный профиль ID-карты (без чтения YAML)."""
        return cls(
            name="id_card",
            fields=[
                FieldSpec(name="issuing_date", keyword="issuing date", pattern=DATE_PATTERN),
                FieldSpec(name="expiry_date", keyword="expiry date", pattern=DATE_PATTERN),
                FieldSpec(name="id_number", keyword="id number", pattern=ID_NUMBER_PATTERN),
            ]
        )


class FieldProfileLoader:
    """Загружает профиль полей из YAML с валидацией через Pydantic."""

    def __init__(self, profiles_dir: Optional[Path] = None):
        self.profiles_dir = Path(profiles_dir) if profiles_dir is not None else FIELD_PROFILES_DIR

    def load(self, profile_name: str) -> FieldProfile:
        """
        Загружает профиль.

        Raises:
            FieldProfileError: файл не найден, не парсится или невалиден
        """
        path = self.profiles_dir / f"{profile_name}.yaml"

        if not path.exists():
            raise FieldProfileError(
                message=f"Профиль '{profile_name}' не найден: {path}. "
                        f"Доступные: {self.available()}",
                component="FieldProfileLoader"
            )

        logger.debug(f"[FieldProfileLoader] Загрузка профиля {profile_name}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
            return FieldProfile.model_validate(data)
        except (yaml.YAMLError, ValidationError) as e:
            logger.error(f"[FieldProfileLoader] Профиль {profile_name} невалиден:\n{e}")
            raise FieldProfileError(
                message=f"Профиль '{profile_name}' невалиден, исправьте {path}",
                component="FieldProfileLoader",
                original_error=e
            ) from e

    def available(self) -> List[str]:
        if not self.profiles_dir.exists():
            return []
        return sorted(p.stem for p in self.profiles_dir.glob("*.yaml"))
