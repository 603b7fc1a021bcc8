"""
"Камера" из готовых файлов, реализующая интерфейс ICamera.

Каждый вызов take_photo() отдаёт следующий файл из очереди.
Файл копируется в output_dir: сессия удаляет промежуточные файлы,
и исходник при этом не должен пострадать.
"""

import asyncio
import shutil
from collections import deque
from pathlib import Path
from typing import Iterable, Optional

from PIL import Image
from loguru import logger

from contracts.d1_capture_dto import RawPhoto
from ...domain.interfaces import ICamera
from ...domain.exceptions import CaptureFailed
from ..file_manager import CaptureFileManager


class FileCameraAdapter(ICamera):
    """Очередь снимков из файлов (CLI, тесты, отладка)."""

    def __init__(
        self,
        photo_paths: Iterable[Path],
        file_manager: Optional[CaptureFileManager] = None
    ):
        self._queue = deque(Path(p) for p in photo_paths)
        self.file_manager = file_manager or CaptureFileManager()

    @property
    def remaining(self) -> int:
        return len(self._queue)

    def enqueue(self, path: Path) -> None:
        self._queue.append(Path(path))

    async def request_permission(self) -> bool:
        missing = [p for p in self._queue if not p.exists()]
        for p in missing:
            logger.warning(f"[FileCamera] Файл не найден: {p}")
        return not missing

    async def take_photo(self) -> RawPhoto:
        if not self._queue:
            raise CaptureFailed(
                message="Очередь снимков пуста",
                component="FileCameraAdapter"
            )
        source = self._queue.popleft()
        return await asyncio.to_thread(self._copy, source)

    def _copy(self, source: Path) -> RawPhoto:
        # Размеры без полного декодирования
        with Image.open(source) as img:
            width, height = img.size
            image_format = "PNG" if img.format == "PNG" else "JPEG"

        target = self.file_manager.allocate("raw", image_format)
        shutil.copyfile(source, target)
        logger.debug(f"[FileCamera] Снимок из файла: {source.name} ({width}x{height})")

        return RawPhoto(path=target, width=width, height=height)
