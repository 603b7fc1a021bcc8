"""
DTO контракт: D1 (Capture) -> D2 (Parsing)

Геометрия захвата и артефакты одного снимка:
GuideRect (экран) -> RawPhoto -> ResizedPhoto -> CropRect -> CroppedImage.

ВАЖНО: Размеры экрана и рамки НЕ валидируются здесь.
Их проверяет GeometryMapper и выбрасывает InvalidGeometry,
чтобы ошибка геометрии имела собственный тип, а не ValidationError.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Literal, Optional
from urllib.parse import urlparse
from urllib.request import url2pathname

from pydantic import BaseModel, ConfigDict, Field, field_validator


def to_local_path(value: Any) -> Any:
    """'file:///tmp/a.jpg' -> Path('/tmp/a.jpg'). Обычные пути без изменений."""
    if isinstance(value, str) and value.startswith("file://"):
        return Path(url2pathname(urlparse(value).path))
    return value


class Size(BaseModel):
    """Ширина и высота (логические точки экрана или пиксели)."""

    model_config = ConfigDict(frozen=True)

    width: float
    height: float


class GuideRect(BaseModel):
    """
    Рамка-подсказка на экране, в логических координатах.

    Измеряется на каждом layout-проходе; последняя версия вытесняет предыдущую.
    """

    model_config = ConfigDict(frozen=True)

    x: float = Field(..., description="Левый верхний угол X (screen space)")
    y: float = Field(..., description="Левый верхний угол Y (screen space)")
    width: float = Field(..., description="Ширина рамки (screen space)")
    height: float = Field(..., description="Высота рамки (screen space)")

    @property
    def size(self) -> Size:
        return Size(width=self.width, height=self.height)


class RawPhoto(BaseModel):
    """Необработанный снимок камеры."""

    model_config = ConfigDict(frozen=True)

    path: Path
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)

    @field_validator("path", mode="before")
    @classmethod
    def normalize_file_uri(cls, v: Any) -> Any:
        """Камеры отдают путь и как 'file://' URI, и как обычный путь."""
        return to_local_path(v)


class ResizedPhoto(BaseModel):
    """Снимок, вписанный (contain) в ограниченное разрешение."""

    model_config = ConfigDict(frozen=True)

    path: Path
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)

    @field_validator("path", mode="before")
    @classmethod
    def normalize_file_uri(cls, v: Any) -> Any:
        """Камеры отдают путь и как 'file://' URI, и как обычный путь."""
        return to_local_path(v)

    @property
    def size(self) -> Size:
        return Size(width=self.width, height=self.height)


class CropRect(BaseModel):
    """
    Прямоугольник кропа в пикселях ResizedPhoto.

    offset_x + width <= ширины снимка НЕ гарантируется: после растяжения
    высоты CropPolicy прямоугольник может выходить за границы.
    Обрезку до границ выполняет кроппер через clamp().
    """

    model_config = ConfigDict(frozen=True)

    offset_x: int = Field(..., ge=0)
    offset_y: int = Field(..., ge=0)
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)

    def clamp(self, image_width: int, image_height: int) -> "CropRect":
        """Обрезает прямоугольник до границ изображения (минимум 1x1 пиксель)."""
        x = min(self.offset_x, image_width - 1)
        y = min(self.offset_y, image_height - 1)
        w = max(1, min(self.width, image_width - x))
        h = max(1, min(self.height, image_height - y))
        return CropRect(offset_x=x, offset_y=y, width=w, height=h)

    def fits(self, image_width: int, image_height: int) -> bool:
        return (
            self.offset_x + self.width <= image_width
            and self.offset_y + self.height <= image_height
        )


class CropRequest(BaseModel):
    """Параметры нативного кропа: прямоугольник + целевой размер отображения."""

    model_config = ConfigDict(frozen=True)

    rect: CropRect
    display_width: int = Field(..., gt=0)
    display_height: int = Field(..., gt=0)
    resize_mode: Literal["cover", "contain", "stretch"] = "cover"


class CroppedImage(BaseModel):
    """Итоговое нормализованное изображение документа. Неизменяемо."""

    model_config = ConfigDict(frozen=True)

    path: Path
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    created_at: str = Field(default_factory=lambda: datetime.now().isoformat())

    @field_validator("path", mode="before")
    @classmethod
    def normalize_file_uri(cls, v: Any) -> Any:
        return to_local_path(v)

    @property
    def uri(self) -> str:
        return self.path.resolve().as_uri()


class BoundingBox(BaseModel):
    """Координаты фрагмента текста на изображении."""

    model_config = ConfigDict(frozen=True)

    x: int
    y: int
    width: int
    height: int


class TextFragment(BaseModel):
    """
    Один фрагмент текста, распознанный OCR.

    Порядок фрагментов в ответе распознавателя не гарантирован.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    bounding_box: Optional[BoundingBox] = None
    confidence: float = Field(1.0, ge=0.0, le=1.0)
