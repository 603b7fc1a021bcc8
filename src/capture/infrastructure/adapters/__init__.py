"""
Adapters слой домена Capture.

Реализации интерфейсов камеры, resize и crop на OpenCV.
"""

from .opencv_camera_adapter import OpenCVCameraAdapter
from .file_camera_adapter import FileCameraAdapter
from .opencv_resizer_adapter import OpenCVResizerAdapter
from .opencv_cropper_adapter import OpenCVCropperAdapter
from .screen_size_provider import StaticScreenSizeProvider

__all__ = [
    "OpenCVCameraAdapter",
    "FileCameraAdapter",
    "OpenCVResizerAdapter",
    "OpenCVCropperAdapter",
    "StaticScreenSizeProvider",
]
