"""
Интерфейсы (абстрактные классы) для домена Capture.

Домен Capture отвечает за:
1. Снимок камеры (RawPhoto)
2. Resize в ограниченное разрешение (ResizedPhoto)
3. Кроп по рамке-подсказке (CroppedImage)

Нативные операции асинхронные: сессия приостанавливается на каждой из них.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from contracts.d1_capture_dto import (
    Size, RawPhoto, ResizedPhoto, CropRequest, CroppedImage
)


class ICamera(ABC):
    """Интерфейс камеры (домен Capture)."""

    @abstractmethod
    async def request_permission(self) -> bool:
        """
        Запрашивает разрешение на использование камеры.

        Returns:
            True если доступ разрешён
        """
        pass

    @abstractmethod
    async def take_photo(self) -> RawPhoto:
        """
        Делает снимок и сохраняет его в файл.

        Returns:
            RawPhoto с путём и размерами в пикселях
        """
        pass


class IImageResizer(ABC):
    """Интерфейс resize с семантикой "contain" (домен Capture)."""

    @abstractmethod
    async def resize(
        self,
        path: Path,
        max_width: int,
        max_height: int,
        image_format: str,
        quality: int
    ) -> ResizedPhoto:
        """
        Вписывает изображение в max_width x max_height с сохранением пропорций.

        Returns:
            ResizedPhoto с ФАКТИЧЕСКИМИ размерами результата
        """
        pass


class IImageCropper(ABC):
    """Интерфейс кропа (домен Capture)."""

    @abstractmethod
    async def crop(self, path: Path, request: CropRequest) -> CroppedImage:
        """
        Вырезает request.rect и вписывает результат в display-размер.

        Returns:
            CroppedImage
        """
        pass


class IScreenSizeProvider(ABC):
    """Текущие логические размеры экрана."""

    @abstractmethod
    def get_screen_size(self) -> Size:
        pass
