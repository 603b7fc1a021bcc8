"""
Resize адаптер на OpenCV, реализующий интерфейс IImageResizer.

Семантика "contain": изображение целиком вписывается в max_width x max_height
с сохранением пропорций. Фактический размер может отличаться от
запрошенного из-за округления - его и возвращаем.
"""

import asyncio
from pathlib import Path
from typing import Optional, Tuple

import cv2
from loguru import logger

from config.settings import RESIZE_ONLY_SCALE_DOWN
from contracts.d1_capture_dto import ResizedPhoto
from ...domain.interfaces import IImageResizer
from ..file_manager import CaptureFileManager


class OpenCVResizerAdapter(IImageResizer):
    """Resize (contain) + перекодирование в заданный формат."""

    def __init__(
        self,
        file_manager: Optional[CaptureFileManager] = None,
        only_scale_down: bool = RESIZE_ONLY_SCALE_DOWN
    ):
        self.file_manager = file_manager or CaptureFileManager()
        self.only_scale_down = only_scale_down

    @staticmethod
    def compute_contain_size(
        width: int,
        height: int,
        max_width: int,
        max_height: int,
        only_scale_down: bool = False
    ) -> Tuple[int, int]:
        """
        Размер, вписанный в границы с сохранением пропорций.

        Пример: 4000x3000 в 1280x960 -> 1280x960; 3000x4000 -> 720x960.
        """
        scale = min(max_width / width, max_height / height)
        if only_scale_down:
            scale = min(scale, 1.0)
        return max(1, round(width * scale)), max(1, round(height * scale))

    async def resize(
        self,
        path: Path,
        max_width: int,
        max_height: int,
        image_format: str,
        quality: int
    ) -> ResizedPhoto:
        return await asyncio.to_thread(
            self._resize, Path(path), max_width, max_height, image_format, quality
        )

    def _resize(
        self,
        path: Path,
        max_width: int,
        max_height: int,
        image_format: str,
        quality: int
    ) -> ResizedPhoto:
        image = self.file_manager.read_image(path)
        h, w = image.shape[:2]
        target = self.compute_contain_size(w, h, max_width, max_height, self.only_scale_down)

        if target != (w, h):
            # INTER_AREA для уменьшения, INTER_CUBIC для увеличения
            interpolation = cv2.INTER_AREA if target[0] < w else cv2.INTER_CUBIC
            image = cv2.resize(image, target, interpolation=interpolation)
            logger.debug(f"[OpenCVResizer] contain resize: {w}x{h} -> {target[0]}x{target[1]}")

        out_path = self.file_manager.allocate("resized", image_format)
        width, height = self.file_manager.write_image(image, out_path, image_format, quality)

        return ResizedPhoto(path=out_path, width=width, height=height)
