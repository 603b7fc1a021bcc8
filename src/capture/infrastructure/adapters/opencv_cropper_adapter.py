"""
Crop адаптер на OpenCV, реализующий интерфейс IImageCropper.

1. Прямоугольник обрезается до границ изображения (после растяжения
   высоты он почти всегда выходит за нижний край).
2. Вырезанная область вписывается в display-размер:
   cover - заполняет целиком, излишки обрезаются по центру;
   contain - вписывается целиком; stretch - без сохранения пропорций.
"""

import asyncio
from pathlib import Path
from typing import Optional

import cv2
import numpy as np
from loguru import logger

from config.settings import CROP_JPEG_QUALITY
from contracts.d1_capture_dto import CropRequest, CroppedImage
from ...domain.interfaces import IImageCropper
from ..file_manager import CaptureFileManager


class OpenCVCropperAdapter(IImageCropper):
    """Кроп + fit в размер рамки на экране."""

    def __init__(
        self,
        file_manager: Optional[CaptureFileManager] = None,
        quality: int = CROP_JPEG_QUALITY
    ):
        self.file_manager = file_manager or CaptureFileManager()
        self.quality = quality

    async def crop(self, path: Path, request: CropRequest) -> CroppedImage:
        return await asyncio.to_thread(self._crop, Path(path), request)

    def _crop(self, path: Path, request: CropRequest) -> CroppedImage:
        image = self.file_manager.read_image(path)
        h, w = image.shape[:2]

        rect = request.rect
        if not rect.fits(w, h):
            clamped = rect.clamp(w, h)
            logger.warning(
                f"[OpenCVCropper] CropRect выходит за границы {w}x{h}: "
                f"{rect.model_dump()} -> {clamped.model_dump()}"
            )
            rect = clamped

        region = image[
            rect.offset_y:rect.offset_y + rect.height,
            rect.offset_x:rect.offset_x + rect.width
        ]

        size = (request.display_width, request.display_height)
        if request.resize_mode == "cover":
            result = self.cover_fit(region, *size)
        elif request.resize_mode == "contain":
            result = self.contain_fit(region, *size)
        else:
            result = cv2.resize(region, size, interpolation=cv2.INTER_AREA)

        out_path = self.file_manager.allocate("cropped")
        width, height = self.file_manager.write_image(result, out_path, "JPEG", self.quality)

        return CroppedImage(path=out_path, width=width, height=height)

    @staticmethod
    def cover_fit(image: np.ndarray, target_w: int, target_h: int) -> np.ndarray:
        """Масштаб по большей стороне + центральная обрезка до target."""
        h, w = image.shape[:2]
        scale = max(target_w / w, target_h / h)
        new_w = max(target_w, round(w * scale))
        new_h = max(target_h, round(h * scale))
        interpolation = cv2.INTER_AREA if scale < 1.0 else cv2.INTER_CUBIC
        scaled = cv2.resize(image, (new_w, new_h), interpolation=interpolation)

        x0 = (new_w - target_w) // 2
        y0 = (new_h - target_h) // 2
        return scaled[y0:y0 + target_h, x0:x0 + target_w]

    @staticmethod
    def contain_fit(image: np.ndarray, target_w: int, target_h: int) -> np.ndarray:
        """Вписывание целиком, поля заполняются чёрным (letterbox)."""
        h, w = image.shape[:2]
        scale = min(target_w / w, target_h / h)
        new_w = max(1, round(w * scale))
        new_h = max(1, round(h * scale))
        interpolation = cv2.INTER_AREA if scale < 1.0 else cv2.INTER_CUBIC
        scaled = cv2.resize(image, (new_w, new_h), interpolation=interpolation)

        canvas = np.zeros((target_h, target_w) + image.shape[2:], dtype=image.dtype)
        x0 = (target_w - new_w) // 2
        y0 = (target_h - new_h) // 2
        canvas[y0:y0 + new_h, x0:x0 + new_w] = scaled
        return canvas
