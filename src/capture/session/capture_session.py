"""
CaptureSession: один захват документа.

Состояния:
    IDLE -> CAPTURING -> CROPPING -> IDLE   (успех)
    IDLE -> CAPTURING -> FAILED   -> IDLE   (ошибка, не фатальна)

Шаги:
1. Проверка рамки (NoGuideMeasured) и геометрии экрана (InvalidGeometry)
2. Разрешение камеры (PermissionDenied)
3. Снимок -> resize (contain, <= 1280x960) -> GeometryMapper -> CropPolicy
4. Кроп (cover) в размер рамки на экране

В каждый момент выполняется не больше одного захвата (CaptureBusy).
Каждый нативный вызов ограничен таймаутом (CaptureTimeout).
"""

import asyncio
import math
from enum import Enum
from pathlib import Path
from typing import Awaitable, List, Optional, TypeVar

from loguru import logger

from config.settings import (
    CAPTURE_PLATFORM,
    RESIZE_MAX_WIDTH, RESIZE_MAX_HEIGHT, RESIZE_FORMAT, RESIZE_QUALITY,
    NATIVE_CALL_TIMEOUT_S, KEEP_INTERMEDIATE_FILES,
)
from contracts.d1_capture_dto import GuideRect, CropRequest, CroppedImage
from ..domain.interfaces import ICamera, IImageResizer, IImageCropper, IScreenSizeProvider
from ..domain.exceptions import (
    CaptureError, CaptureBusy, CaptureFailed, CaptureTimeout,
    NoGuideMeasured, PermissionDenied,
)
from ..geometry import GeometryMapper, CropPolicy
from ..infrastructure.file_manager import CaptureFileManager

T = TypeVar("T")


class CaptureState(str, Enum):
    IDLE = "idle"
    CAPTURING = "capturing"
    CROPPING = "cropping"
    FAILED = "failed"


class CaptureSession:
    """
    Оркестратор одного захвата.

    Не меняет ни сторону карты, ни отображаемое изображение:
    этим владеет CaptureController. Ошибка захвата для вызывающего
    полностью инертна - после неё сессия снова в IDLE.
    """

    COMPONENT = "CaptureSession"

    def __init__(
        self,
        camera: ICamera,
        resizer: IImageResizer,
        cropper: IImageCropper,
        screen_size_provider: IScreenSizeProvider,
        geometry_mapper: Optional[GeometryMapper] = None,
        crop_policy: Optional[CropPolicy] = None,
        platform: str = CAPTURE_PLATFORM,
        max_width: int = RESIZE_MAX_WIDTH,
        max_height: int = RESIZE_MAX_HEIGHT,
        image_format: str = RESIZE_FORMAT,
        quality: int = RESIZE_QUALITY,
        timeout_s: Optional[float] = NATIVE_CALL_TIMEOUT_S,
        file_manager: Optional[CaptureFileManager] = None,
        keep_intermediate: bool = KEEP_INTERMEDIATE_FILES,
    ):
        """
        Args:
            camera: Камера (снимок + разрешение)
            resizer: Resize с семантикой contain
            cropper: Кроп с семантикой cover
            screen_size_provider: Размеры экрана НА МОМЕНТ кропа
            platform: "android" | "ios" - ключ коэффициента CropPolicy
            timeout_s: Таймаут на каждый нативный вызов (None - без таймаута)
            keep_intermediate: Не удалять raw/resized файлы после захвата
        """
        self.camera = camera
        self.resizer = resizer
        self.cropper = cropper
        self.screen_size_provider = screen_size_provider
        self.geometry_mapper = geometry_mapper or GeometryMapper()
        self.crop_policy = crop_policy or CropPolicy()
        self.platform = platform
        self.max_width = max_width
        self.max_height = max_height
        self.image_format = image_format
        self.quality = quality
        self.timeout_s = timeout_s
        self.file_manager = file_manager or CaptureFileManager()
        self.keep_intermediate = keep_intermediate

        # Проверяем платформу сразу, а не на первом захвате
        self.crop_policy.factor(platform)

        self._state = CaptureState.IDLE
        self._in_flight = False
        # Нативный вызов, брошенный по таймауту, но ещё не завершившийся
        self._orphaned: Optional[asyncio.Future] = None
        self._permission_granted = False
        self.last_error: Optional[CaptureError] = None

        logger.debug(
            f"[CaptureSession] Инициализирована (platform={platform}, "
            f"bound={max_width}x{max_height}, timeout={timeout_s})"
        )

    @property
    def state(self) -> CaptureState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._in_flight or self._native_pending()

    @property
    def permission_granted(self) -> bool:
        return self._permission_granted

    async def ensure_permission(self) -> None:
        """
        Запрашивает разрешение камеры (один раз, результат кешируется).

        Raises:
            PermissionDenied: если доступ не выдан или запрос упал
        """
        if self._permission_granted:
            return

        try:
            granted = await self._native("request_permission", self.camera.request_permission())
        except CaptureFailed as e:
            raise PermissionDenied(
                message="Не удалось запросить разрешение камеры",
                component=self.COMPONENT,
                original_error=e.original_error or e
            )

        if not granted:
            raise PermissionDenied(
                message="Доступ к камере запрещён",
                component=self.COMPONENT
            )

        self._permission_granted = True
        logger.info("[CaptureSession] Разрешение камеры получено")

    async def capture(self, guide: Optional[GuideRect]) -> CroppedImage:
        """
        Выполняет один захват.

        Args:
            guide: Последняя измеренная рамка (None - ещё не измерена)

        Returns:
            CroppedImage

        Raises:
            NoGuideMeasured: рамка не измерена
            CaptureBusy: уже выполняется другой захват
            InvalidGeometry: некорректные размеры экрана/рамки/снимка
            PermissionDenied: нет доступа к камере
            CaptureFailed: ошибка камеры, resize или crop (CaptureTimeout - по таймауту)
        """
        if guide is None:
            raise NoGuideMeasured(
                message="Рамка ещё не измерена",
                component=self.COMPONENT
            )

        if self._in_flight or self._native_pending():
            logger.warning("[CaptureSession] Захват уже выполняется, запрос отклонён")
            raise CaptureBusy(
                message="Захват уже выполняется",
                component=self.COMPONENT
            )

        self._in_flight = True
        try:
            # Дешёвые проверки до любых нативных вызовов
            self.geometry_mapper.validate(guide, self.screen_size_provider.get_screen_size())
            await self.ensure_permission()

            self._state = CaptureState.CAPTURING
            try:
                cropped = await self._run_pipeline(guide)
            except CaptureError as e:
                self._fail(e)
                raise
            except Exception as e:
                wrapped = CaptureFailed(
                    message="Непредвиденная ошибка захвата",
                    component=self.COMPONENT,
                    original_error=e
                )
                self._fail(wrapped)
                raise wrapped from e

            self.last_error = None
            logger.info(f"[CaptureSession] Готово: {cropped.path.name} ({cropped.width}x{cropped.height})")
            return cropped
        finally:
            self._state = CaptureState.IDLE
            self._in_flight = False

    async def _run_pipeline(self, guide: GuideRect) -> CroppedImage:
        intermediates: List[Path] = []
        try:
            # 1. Снимок
            raw = await self._native("take_photo", self.camera.take_photo())
            intermediates.append(raw.path)
            logger.debug(f"[CaptureSession] Original size: {raw.width}x{raw.height}")

            # 2. Resize (contain)
            resized = await self._native(
                "resize",
                self.resizer.resize(
                    raw.path, self.max_width, self.max_height, self.image_format, self.quality
                )
            )
            intermediates.append(resized.path)
            logger.debug(f"[CaptureSession] Resized size: {resized.width}x{resized.height}")

            # 3. Геометрия по ФАКТИЧЕСКИМ размерам resized и ТЕКУЩЕМУ экрану
            screen = self.screen_size_provider.get_screen_size()
            rect = self.geometry_mapper.map_to_pixel_rect(guide, screen, resized.size)
            rect = self.crop_policy.apply_inflation(rect, self.platform)

            request = CropRequest(
                rect=rect,
                display_width=max(1, math.floor(guide.width)),
                display_height=max(1, math.floor(guide.height)),
                resize_mode="cover"
            )
            logger.debug(f"[CaptureSession] Final CropData: {request.model_dump()}")

            # 4. Кроп
            self._state = CaptureState.CROPPING
            return await self._native("crop", self.cropper.crop(resized.path, request))
        finally:
            if not self.keep_intermediate and intermediates:
                self.file_manager.remove(intermediates)

    async def _native(self, step: str, call: Awaitable[T]) -> T:
        """
        Ожидает нативный вызов с таймаутом и переводит ошибки в CaptureFailed.

        Таймаут отменяет только ожидание: поток адаптера продолжает работать.
        Пока он не завершится, сессия остаётся занятой (CaptureBusy).
        """
        task = asyncio.ensure_future(call)
        try:
            if self.timeout_s is None:
                return await task
            return await asyncio.wait_for(asyncio.shield(task), timeout=self.timeout_s)
        except asyncio.CancelledError:
            # Отмена вызывающего не останавливает поток адаптера
            if not task.done():
                self._orphaned = task
            raise
        except asyncio.TimeoutError as e:
            self._orphaned = task
            task.add_done_callback(self._on_orphan_done)
            raise CaptureTimeout(
                message=f"Шаг '{step}' не завершился за {self.timeout_s} с",
                component=self.COMPONENT,
                original_error=e
            )
        except CaptureFailed:
            raise
        except Exception as e:
            raise CaptureFailed(
                message=f"Ошибка на шаге '{step}'",
                component=self.COMPONENT,
                original_error=e
            )

    def _native_pending(self) -> bool:
        return self._orphaned is not None and not self._orphaned.done()

    def _on_orphan_done(self, task: asyncio.Future) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning(f"[CaptureSession] Брошенный по таймауту вызов завершился ошибкой: {error}")
        else:
            logger.debug("[CaptureSession] Брошенный по таймауту вызов завершён")
            # Результат никому не нужен: снимок или кроп удаляем сразу
            path = getattr(task.result(), "path", None)
            if path is not None and not self.keep_intermediate:
                self.file_manager.remove([path])

    def _fail(self, error: CaptureError) -> None:
        self._state = CaptureState.FAILED
        self.last_error = error
        logger.error(f"[CaptureSession] Error capturing or cropping image: {error}")
