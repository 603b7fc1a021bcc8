"""Поставщик размеров экрана, реализующий IScreenSizeProvider."""

from loguru import logger

from contracts.d1_capture_dto import Size
from ...domain.interfaces import IScreenSizeProvider


class StaticScreenSizeProvider(IScreenSizeProvider):
    """
    Хранит текущие логические размеры экрана.

    update() вызывается при повороте устройства или изменении окна;
    сессия читает размеры в момент кропа.
    """

    def __init__(self, width: float, height: float):
        self._size = Size(width=width, height=height)

    def get_screen_size(self) -> Size:
        return self._size

    def update(self, width: float, height: float) -> None:
        self._size = Size(width=width, height=height)
        logger.debug(f"[ScreenSize] Обновлено: {width}x{height}")
