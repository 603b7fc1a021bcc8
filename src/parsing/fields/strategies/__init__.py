"""
Strategies sub-package для FieldExtractor.

Strategy Pattern: как выбрать фрагмент, в котором искать значение поля.
"""

from .first_match import FirstMatchStrategy
from .factory import StrategyFactory

__all__ = [
    "FirstMatchStrategy",
    "StrategyFactory",
]
