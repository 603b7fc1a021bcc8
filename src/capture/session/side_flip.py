"""
SideFlipStateMachine: какая сторона карты ожидается следующей.

front -> back -> front ... Переход только после УСПЕШНОГО кропа.
Одно и то же состояние управляет подписями и анимацией переворота.
"""

from enum import Enum
from typing import Callable, List, Optional

from loguru import logger

from config.settings import SIDE_PROMPT_LABELS, SIDE_IMAGE_LABELS


class CaptureSide(str, Enum):
    FRONT = "front"
    BACK = "back"

    @property
    def opposite(self) -> "CaptureSide":
        return CaptureSide.BACK if self is CaptureSide.FRONT else CaptureSide.FRONT

    @property
    def rotation_deg(self) -> int:
        """Целевой угол анимации переворота (rotateY)."""
        return 0 if self is CaptureSide.FRONT else 180


FlipListener = Callable[[CaptureSide], None]


class SideFlipStateMachine:
    """
    Состояние сессии front/back.

    current - сторона, которую нужно снять следующей.
    last_captured - сторона, снятая последним успешным захватом.
    """

    def __init__(self) -> None:
        self._current = CaptureSide.FRONT
        self._captures = 0
        self._listeners: List[FlipListener] = []

    @property
    def current(self) -> CaptureSide:
        return self._current

    @property
    def capture_count(self) -> int:
        return self._captures

    @property
    def last_captured(self) -> Optional[CaptureSide]:
        if self._captures == 0:
            return None
        return self._current.opposite

    @property
    def prompt_label(self) -> str:
        """Подпись перед захватом: 'Capture Card Front' / 'Capture Card Back'."""
        return SIDE_PROMPT_LABELS[self._current.value]

    @property
    def image_label(self) -> Optional[str]:
        """
        Подпись только что снятого изображения.

        Выбирается по состоянию ПОСЛЕ переключения: после первого захвата
        current == back, значит снята лицевая сторона -> 'Card Front Image'.
        """
        side = self.last_captured
        if side is None:
            return None
        return SIDE_IMAGE_LABELS[side.value]

    def subscribe(self, listener: FlipListener) -> None:
        """Подписка на переключение (например, запуск анимации)."""
        self._listeners.append(listener)

    def on_capture_succeeded(self) -> CaptureSide:
        """
        Переключает сторону после успешного кропа.

        Returns:
            Снятая сторона
        """
        captured = self._current
        self._current = captured.opposite
        self._captures += 1

        logger.info(
            f"[SideFlip] Снята сторона {captured.value} -> следующая {self._current.value}"
        )

        for listener in self._listeners:
            # Сбой подписчика (анимации) не должен откатывать переключение
            try:
                listener(self._current)
            except Exception:
                logger.exception(f"[SideFlip] Ошибка подписчика {listener!r}")

        return captured

    def reset(self) -> None:
        self._current = CaptureSide.FRONT
        self._captures = 0
