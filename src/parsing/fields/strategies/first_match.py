"""
FirstMatchStrategy: первый фрагмент, содержащий ключевое слово.

Порядок - тот, в котором фрагменты вернул OCR; геометрия не учитывается.
При дублировании ключевого слова используется только первый фрагмент.
"""

from typing import Optional, Sequence

from loguru import logger

from contracts.d1_capture_dto import TextFragment
from ...domain.interfaces import IFragmentMatchStrategy


class FirstMatchStrategy(IFragmentMatchStrategy):
    """Стратегия по умолчанию."""

    @property
    def name(self) -> str:
        return "first_match"

    def select(
        self,
        fragments: Sequence[TextFragment],
        keyword: str
    ) -> Optional[TextFragment]:
        needle = keyword.lower()
        for fragment in fragments:
            if needle in fragment.text.lower():
                logger.trace(f"[{self.name}] '{keyword}' -> '{fragment.text}'")
                return fragment
        return None
