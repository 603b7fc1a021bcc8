"""
GeometryMapper: рамка на экране -> прямоугольник в пикселях снимка.

Масштабы по осям независимые:
    scale_x = image.width / screen.width
    scale_y = image.height / screen.height

Коррекция пропорций здесь НЕ делается - это задача CropPolicy.
"""

import math
from typing import Union, Tuple

from loguru import logger

from contracts.d1_capture_dto import GuideRect, Size, CropRect
from ..domain.exceptions import InvalidGeometry

SizeLike = Union[Size, Tuple[float, float]]


def round_half_up(value: float) -> int:
    """Округление к ближайшему целому, .5 вверх (а не банковское)."""
    return int(math.floor(value + 0.5))


def _as_size(size: SizeLike) -> Size:
    if isinstance(size, Size):
        return size
    width, height = size
    return Size(width=width, height=height)


class GeometryMapper:
    """Отображает GuideRect (screen space) в CropRect (пиксели снимка)."""

    COMPONENT = "GeometryMapper"

    def validate(self, guide: GuideRect, screen_size: SizeLike) -> None:
        """
        Проверка геометрии без нативных вызовов (fail fast).

        Raises:
            InvalidGeometry: нулевой/отрицательный экран или рамка
        """
        screen = _as_size(screen_size)
        self._check_positive("screen", screen.width, screen.height)
        self._check_positive("guide", guide.width, guide.height)

        if guide.x < 0 or guide.y < 0:
            raise InvalidGeometry(
                message=f"Отрицательное смещение рамки: ({guide.x}, {guide.y})",
                component=self.COMPONENT
            )

    def map_to_pixel_rect(
        self,
        guide: GuideRect,
        screen_size: SizeLike,
        image_size: SizeLike
    ) -> CropRect:
        """
        Переводит рамку в пиксельный прямоугольник снимка.

        Args:
            guide: Рамка в логических координатах экрана
            screen_size: Текущие размеры экрана
            image_size: Фактические размеры (resized) снимка

        Returns:
            CropRect без растяжения высоты

        Raises:
            InvalidGeometry: если размеры нулевые/отрицательные
                или прямоугольник после округления пустой
        """
        screen = _as_size(screen_size)
        image = _as_size(image_size)

        self.validate(guide, screen)
        self._check_positive("image", image.width, image.height)

        scale_x = image.width / screen.width
        scale_y = image.height / screen.height

        offset_x = round_half_up(guide.x * scale_x)
        offset_y = round_half_up(guide.y * scale_y)
        width = round_half_up(guide.width * scale_x)
        height = round_half_up(guide.height * scale_y)

        if width <= 0 or height <= 0:
            raise InvalidGeometry(
                message=f"Прямоугольник пуст после округления: {width}x{height}",
                component=self.COMPONENT
            )

        logger.debug(
            f"[GeometryMapper] scale=({scale_x:.4f}, {scale_y:.4f}) -> "
            f"offset=({offset_x}, {offset_y}) size={width}x{height}"
        )

        return CropRect(offset_x=offset_x, offset_y=offset_y, width=width, height=height)

    def _check_positive(self, what: str, width: float, height: float) -> None:
        # NaN тоже не проходит: сравнения с NaN всегда False
        if not (width > 0 and height > 0) or math.isinf(width) or math.isinf(height):
            raise InvalidGeometry(
                message=f"Некорректные размеры {what}: {width}x{height}",
                component=self.COMPONENT
            )
