"""
Domain слой домена Capture.

Содержит интерфейсы (абстрактные классы) и исключения для Capture домена.
"""

from .interfaces import (
    ICamera,
    IImageResizer,
    IImageCropper,
    IScreenSizeProvider,
)

from .exceptions import (
    CaptureError,
    InvalidGeometry,
    NoGuideMeasured,
    PermissionDenied,
    CaptureBusy,
    CaptureFailed,
    CaptureTimeout,
    CaptureFileSystemError,
)

__all__ = [
    # Интерфейсы
    "ICamera",
    "IImageResizer",
    "IImageCropper",
    "IScreenSizeProvider",

    # Исключения
    "CaptureError",
    "InvalidGeometry",
    "NoGuideMeasured",
    "PermissionDenied",
    "CaptureBusy",
    "CaptureFailed",
    "CaptureTimeout",
    "CaptureFileSystemError",
]
