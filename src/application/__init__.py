"""
Application слой: оркестрация захвата и извлечения полей.
"""

from .capture_controller import CaptureController
from .factory import CaptureComponentFactory

__all__ = [
    "CaptureController",
    "CaptureComponentFactory",
]
