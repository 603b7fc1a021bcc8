"""
Адаптер камеры на cv2.VideoCapture, реализующий интерфейс ICamera.

Разрешение = устройство открывается. Снимок = кадр после прогрева,
сохранённый в JPEG максимального качества.
"""

import asyncio
from typing import Optional

import cv2
from loguru import logger

from config.settings import CAMERA_DEVICE_INDEX, CAMERA_WARMUP_FRAMES
from contracts.d1_capture_dto import RawPhoto
from ...domain.interfaces import ICamera
from ...domain.exceptions import CaptureFailed
from ..file_manager import CaptureFileManager


class OpenCVCameraAdapter(ICamera):
    """Камера устройства через OpenCV."""

    def __init__(
        self,
        device_index: int = CAMERA_DEVICE_INDEX,
        warmup_frames: int = CAMERA_WARMUP_FRAMES,
        file_manager: Optional[CaptureFileManager] = None
    ):
        self.device_index = device_index
        self.warmup_frames = warmup_frames
        self.file_manager = file_manager or CaptureFileManager()

    async def request_permission(self) -> bool:
        return await asyncio.to_thread(self._probe)

    async def take_photo(self) -> RawPhoto:
        return await asyncio.to_thread(self._grab)

    def _probe(self) -> bool:
        cap = cv2.VideoCapture(self.device_index)
        try:
            opened = cap.isOpened()
        finally:
            cap.release()

        if not opened:
            logger.warning(f"[OpenCVCamera] Устройство {self.device_index} недоступно")
        return opened

    def _grab(self) -> RawPhoto:
        cap = cv2.VideoCapture(self.device_index)
        try:
            if not cap.isOpened():
                raise CaptureFailed(
                    message=f"Could not open camera: {self.device_index}",
                    component="OpenCVCameraAdapter"
                )

            # Первые кадры часто тёмные, пока работает автоэкспозиция
            for _ in range(self.warmup_frames):
                cap.read()

            ok, frame = cap.read()
            if not ok or frame is None:
                raise CaptureFailed(
                    message="Камера не вернула кадр",
                    component="OpenCVCameraAdapter"
                )
        finally:
            cap.release()

        path = self.file_manager.allocate("raw")
        width, height = self.file_manager.write_image(frame, path, "JPEG", 100)
        logger.debug(f"[OpenCVCamera] Снимок: {path.name} ({width}x{height})")

        return RawPhoto(path=path, width=width, height=height)
