"""
CropPolicy: растяжение высоты кропа по платформе.

Грубая эвристика, а не аффинная коррекция: пропорции рамки на экране
отличаются от пропорций карты, а обрезка сенсора различается у камер
iOS и Android. Коэффициенты подобраны ЭМПИРИЧЕСКИ и хранятся в
конфигурации (CROP_HEIGHT_INFLATION), а не вычисляются.
"""

from typing import Dict, Optional

from loguru import logger

from config.settings import CROP_HEIGHT_INFLATION
from contracts.d1_capture_dto import CropRect
from .geometry_mapper import round_half_up


class CropPolicy:
    """
    Таблица калибровки platform -> factor.

    Пример:
        policy = CropPolicy()
        rect = policy.apply_inflation(rect, "android")
    """

    def __init__(self, factors: Optional[Dict[str, float]] = None):
        self.factors = dict(factors if factors is not None else CROP_HEIGHT_INFLATION)

    def factor(self, platform: str) -> float:
        """
        Коэффициент для платформы.

        Raises:
            ValueError: если платформа не откалибрована
        """
        key = platform.strip().lower()
        if key not in self.factors:
            raise ValueError(
                f"Нет коэффициента для платформы '{platform}'. "
                f"Доступные: {sorted(self.factors)}"
            )
        return self.factors[key]

    def apply_inflation(self, rect: CropRect, platform: str) -> CropRect:
        """Умножает высоту на коэффициент платформы; смещение и ширина без изменений."""
        factor = self.factor(platform)
        height = round_half_up(rect.height * factor)

        logger.debug(
            f"[CropPolicy] {platform}: height {rect.height} x{factor} -> {height}"
        )

        return CropRect(
            offset_x=rect.offset_x,
            offset_y=rect.offset_y,
            width=rect.width,
            height=height
        )
