"""
Infrastructure слой домена Capture.
"""

from .file_manager import CaptureFileManager

__all__ = [
    "CaptureFileManager",
]
