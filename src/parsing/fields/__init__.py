"""Извлечение полей документа из фрагментов OCR."""

from .field_profile import FieldSpec, FieldProfile, FieldProfileLoader
from .field_extractor import FieldExtractor
from .strategies import FirstMatchStrategy, StrategyFactory

__all__ = [
    "FieldSpec",
    "FieldProfile",
    "FieldProfileLoader",
    "FieldExtractor",
    "FirstMatchStrategy",
    "StrategyFactory",
]
