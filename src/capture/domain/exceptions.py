"""
Исключения для домена Capture.

Таксономия:
- InvalidGeometry: локальная проверка, до нативных вызовов
- NoGuideMeasured / PermissionDenied / CaptureBusy: захват не начинался
- CaptureFailed (и CaptureTimeout): ошибка камеры, resize или crop
"""

from typing import Optional


class CaptureError(Exception):
    """Базовое исключение для ошибок домена Capture."""

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        self.message = message
        self.component = component
        self.original_error = original_error
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"Capture Error: {self.message}"
        if self.component:
            msg += f" (Component: {self.component})"
        if self.original_error:
            msg += f" [Original: {type(self.original_error).__name__}: {str(self.original_error)}]"
        return msg


class InvalidGeometry(CaptureError):
    """Нулевые/отрицательные размеры экрана, снимка или рамки."""
    pass


class NoGuideMeasured(CaptureError):
    """Рамка ещё не измерена - захват невозможен."""
    pass


class PermissionDenied(CaptureError):
    """Нет разрешения на камеру."""
    pass


class CaptureBusy(CaptureError):
    """Захват уже выполняется в этой сессии."""
    pass


class CaptureFailed(CaptureError):
    """Ошибка нативного вызова: камера, resize или crop."""
    pass


class CaptureTimeout(CaptureFailed):
    """Нативный вызов не завершился за отведённое время."""
    pass


class CaptureFileSystemError(CaptureError):
    """Ошибка файловой системы в домене Capture."""
    pass
