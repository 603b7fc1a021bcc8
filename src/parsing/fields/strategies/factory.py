"""
Strategy Factory - выбор стратегии поиска фрагмента по имени.

Новые стратегии регистрируются без изменения FieldExtractor.
"""

from typing import Dict, Optional

from loguru import logger

from ...domain.interfaces import IFragmentMatchStrategy
from .first_match import FirstMatchStrategy


class StrategyFactory:
    """
    Фабрика стратегий.

    Пример:
        strategy = StrategyFactory().get("first_match")
        fragment = strategy.select(fragments, "issuing date")
    """

    DEFAULT = "first_match"

    def __init__(self) -> None:
        self._strategies: Dict[str, IFragmentMatchStrategy] = {
            "first_match": FirstMatchStrategy(),
        }

    def get(self, name: Optional[str] = None) -> IFragmentMatchStrategy:
        """
        Получить стратегию по имени.

        Raises:
            ValueError: если стратегия не зарегистрирована
        """
        key = (name or self.DEFAULT).strip().lower()
        if key not in self._strategies:
            raise ValueError(
                f"Неизвестная стратегия '{name}'. Доступные: {sorted(self._strategies)}"
            )
        logger.debug(f"[StrategyFactory] Выбрана стратегия: {key}")
        return self._strategies[key]

    def register(self, name: str, strategy: IFragmentMatchStrategy) -> None:
        """Зарегистрировать новую стратегию."""
        self._strategies[name.lower()] = strategy
        logger.info(f"[StrategyFactory] Зарегистрирована новая стратегия: {name}")
