"""
CaptureController: верхнеуровневая последовательность одного нажатия.

CaptureSession -> (переключение стороны + показ) -> FieldExtractor

Асимметрия ошибок:
- ошибка захвата блокирует результат (ничего не меняется, можно повторить)
- ошибка распознавания НЕ блокирует: захват уже успешен, поля пустые
"""

from typing import Optional, Union

from loguru import logger

from config.settings import DISCARD_REPLACED_CROPS
from contracts.d1_capture_dto import GuideRect, CroppedImage
from contracts.d2_parsing_dto import ExtractedFields
from contracts.d3_outcome_dto import CaptureOutcome, CaptureStatus
from src.capture.domain.exceptions import CaptureError, CaptureBusy, PermissionDenied
from src.capture.session import CaptureSession, SideFlipStateMachine
from src.parsing.domain.exceptions import RecognitionUnavailable
from src.parsing.fields import FieldExtractor


class CaptureController:
    """
    Владелец состояния UI-сессии: рамка, сторона карты, показанное изображение.

    Состояние меняется только из продолжения успешного захвата.
    """

    def __init__(
        self,
        session: CaptureSession,
        extractor: Optional[FieldExtractor] = None,
        sides: Optional[SideFlipStateMachine] = None,
        discard_replaced: bool = DISCARD_REPLACED_CROPS
    ):
        """
        Args:
            discard_replaced: Удалять файл предыдущего кропа при замене
                (не действует, если сессия хранит промежуточные файлы)
        """
        self.session = session
        self.extractor = extractor
        self.sides = sides or SideFlipStateMachine()
        self.discard_replaced = discard_replaced

        self._guide: Optional[GuideRect] = None
        self._displayed_image: Optional[CroppedImage] = None
        self._last_fields = ExtractedFields()
        self._closed = False

    # ------------------------------------------------------------------
    # Состояние
    # ------------------------------------------------------------------
    @property
    def guide(self) -> Optional[GuideRect]:
        return self._guide

    @property
    def capture_enabled(self) -> bool:
        """Кнопка захвата активна только после измерения рамки."""
        return self._guide is not None and not self._closed

    @property
    def displayed_image(self) -> Optional[CroppedImage]:
        return self._displayed_image

    @property
    def last_fields(self) -> ExtractedFields:
        return self._last_fields

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # События UI
    # ------------------------------------------------------------------
    def on_guide_layout(self, guide: Union[GuideRect, dict]) -> bool:
        """
        Новое измерение рамки. Последнее значение вытесняет предыдущее.

        Returns:
            False если layout пустой (ширина или высота <= 0) и проигнорирован
        """
        if isinstance(guide, dict):
            guide = GuideRect(**guide)

        if not (guide.width > 0 and guide.height > 0):
            logger.warning(f"[CaptureController] Пустой layout проигнорирован: {guide.model_dump()}")
            return False

        self._guide = guide
        logger.debug(f"[CaptureController] Рамка: {guide.model_dump()}")
        return True

    async def start(self) -> bool:
        """
        Запрос разрешения камеры при открытии экрана.

        Returns:
            True если камера доступна
        """
        try:
            await self.session.ensure_permission()
            return True
        except PermissionDenied as e:
            logger.warning(f"[CaptureController] {e}")
            return False

    def close(self) -> None:
        """UI-сессия закрыта: результат захвата в полёте будет отброшен."""
        self._closed = True
        logger.info("[CaptureController] Сессия закрыта")

    async def capture(self) -> CaptureOutcome:
        """
        Один захват: кроп -> переключение стороны -> распознавание полей.

        Никогда не бросает доменных исключений: любая ошибка
        превращается в CaptureOutcome со статусом FAILED/REJECTED/DISCARDED.
        """
        if self._closed:
            logger.info("[CaptureController] Сессия закрыта, захват не выполняется")
            return self._outcome(CaptureStatus.DISCARDED)

        try:
            cropped = await self.session.capture(self._guide)
        except CaptureBusy as e:
            return self._outcome(CaptureStatus.REJECTED, error=e)
        except CaptureError as e:
            logger.error(f"[CaptureController] Захват не удался: {e}")
            return self._outcome(CaptureStatus.FAILED, error=e)

        if self._closed:
            logger.info(f"[CaptureController] Сессия закрыта, результат отброшен: {cropped.path.name}")
            return self._outcome(CaptureStatus.DISCARDED)

        # Сначала показ, потом переключение: подписчики видят согласованное состояние
        self._replace_displayed(cropped)
        captured_side = self.sides.on_capture_succeeded()

        fields = ExtractedFields()
        recognition_error: Optional[str] = None
        if self.extractor is not None:
            try:
                fields = await self.extractor.extract_from_image(cropped)
            except RecognitionUnavailable as e:
                logger.warning(f"[CaptureController] Распознавание недоступно: {e}")
                recognition_error = str(e)
        self._last_fields = fields

        return CaptureOutcome(
            status=CaptureStatus.SUCCESS,
            side=captured_side.value,
            image_label=self.sides.image_label,
            next_prompt=self.sides.prompt_label,
            image=cropped,
            fields=fields,
            recognition_error=recognition_error,
        )

    def _replace_displayed(self, cropped: CroppedImage) -> None:
        previous = self._displayed_image
        self._displayed_image = cropped

        if previous is None or previous.path == cropped.path:
            return
        if self.discard_replaced and not self.session.keep_intermediate:
            self.session.file_manager.remove([previous.path])
            logger.debug(f"[CaptureController] Предыдущий кроп удалён: {previous.path.name}")

    def _outcome(self, status: CaptureStatus, error: Optional[Exception] = None) -> CaptureOutcome:
        return CaptureOutcome(
            status=status,
            image_label=self.sides.image_label,
            next_prompt=self.sides.prompt_label,
            error_type=type(error).__name__ if error else None,
            error=str(error) if error else None,
        )
