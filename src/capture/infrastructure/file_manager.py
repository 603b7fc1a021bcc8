"""
Менеджер файлов для домена Capture.

Выделяет пути для снимков, читает/пишет изображения и удаляет
промежуточные файлы (raw + resized) после захвата.
"""

import uuid
from pathlib import Path
from typing import Iterable, Optional, Tuple

import cv2
import numpy as np
from loguru import logger

from config.settings import CAPTURE_OUTPUT_DIR
from ..domain.exceptions import CaptureFileSystemError

# Расширения и флаги кодирования cv2 по формату
_FORMATS = {
    "JPEG": (".jpg", cv2.IMWRITE_JPEG_QUALITY),
    "PNG": (".png", cv2.IMWRITE_PNG_COMPRESSION),
    "WEBP": (".webp", cv2.IMWRITE_WEBP_QUALITY),
}


class CaptureFileManager:
    """Менеджер файлов для домена Capture."""

    def __init__(self, output_dir: Optional[Path] = None):
        self.output_dir = Path(output_dir) if output_dir is not None else CAPTURE_OUTPUT_DIR

    @staticmethod
    def extension_for(image_format: str) -> str:
        key = image_format.upper()
        if key == "JPG":
            key = "JPEG"
        if key not in _FORMATS:
            raise ValueError(f"Неподдерживаемый формат: {image_format}")
        return _FORMATS[key][0]

    def allocate(self, prefix: str, image_format: str = "JPEG") -> Path:
        """Уникальный путь в output_dir: {prefix}_{uuid}.{ext}."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir / f"{prefix}_{uuid.uuid4().hex[:12]}{self.extension_for(image_format)}"

    def read_image(self, path: Path) -> np.ndarray:
        """
        Читает и декодирует изображение (BGR).

        Raises:
            CaptureFileSystemError: файл не найден или не декодируется
        """
        path = Path(path)
        if not path.exists():
            raise CaptureFileSystemError(
                message=f"Файл не найден: {path}",
                component="CaptureFileManager"
            )

        # Загрузка через numpy для поддержки путей с Unicode (cv2.imread не умеет)
        image = cv2.imdecode(np.fromfile(str(path), np.uint8), cv2.IMREAD_COLOR)
        if image is None:
            raise CaptureFileSystemError(
                message=f"Не удалось декодировать изображение: {path}",
                component="CaptureFileManager"
            )
        return image

    def write_image(
        self,
        image: np.ndarray,
        path: Path,
        image_format: str = "JPEG",
        quality: int = 100
    ) -> Tuple[int, int]:
        """
        Кодирует и сохраняет изображение.

        Returns:
            (width, height) сохранённого изображения
        """
        key = "JPEG" if image_format.upper() == "JPG" else image_format.upper()
        ext, flag = _FORMATS[key]
        # Для PNG качество означает степень сжатия 0-9 (без потерь)
        value = max(0, min(9, (100 - quality) // 10)) if key == "PNG" else quality

        success, buffer = cv2.imencode(ext, image, [flag, value])
        if not success:
            raise CaptureFileSystemError(
                message=f"Не удалось закодировать изображение в {key}",
                component="CaptureFileManager"
            )

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(buffer.tobytes())
        except OSError as e:
            raise CaptureFileSystemError(
                message=f"Не удалось сохранить файл: {path}",
                component="CaptureFileManager",
                original_error=e
            )

        h, w = image.shape[:2]
        logger.debug(f"[CaptureFileManager] Сохранено: {path.name} ({w}x{h}, {len(buffer)} байт)")
        return w, h

    def remove(self, paths: Iterable[Path]) -> None:
        """Удаляет промежуточные файлы. Отсутствующие файлы пропускаются."""
        for path in paths:
            try:
                Path(path).unlink(missing_ok=True)
                logger.trace(f"[CaptureFileManager] Удалён: {path}")
            except OSError as e:
                logger.warning(f"[CaptureFileManager] Не удалось удалить {path}: {e}")
