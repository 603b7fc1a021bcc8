"""
Общие фикстуры для CaptureSession и адаптеров.
"""

from pathlib import Path

import cv2
import numpy as np
import pytest

from src.capture.infrastructure.adapters import StaticScreenSizeProvider
from src.capture.infrastructure.file_manager import CaptureFileManager
from src.capture.session import CaptureSession
from tests.fakes import FakeCamera, FakeResizer, FakeCropper


@pytest.fixture
def screen():
    return StaticScreenSizeProvider(400, 800)


@pytest.fixture
def camera(tmp_path):
    return FakeCamera(tmp_path / "raw.jpg")


@pytest.fixture
def resizer(tmp_path):
    return FakeResizer(tmp_path / "resized.jpg")


@pytest.fixture
def cropper(tmp_path):
    return FakeCropper(tmp_path / "cropped.jpg")


@pytest.fixture
def make_session(tmp_path, camera, resizer, cropper, screen):
    """Фабрика CaptureSession с фейками (можно подменить любой компонент)."""
    def _make(**overrides) -> CaptureSession:
        params = dict(
            camera=camera,
            resizer=resizer,
            cropper=cropper,
            screen_size_provider=screen,
            platform="android",
            timeout_s=1.0,
            file_manager=CaptureFileManager(tmp_path / "out"),
            keep_intermediate=True,
        )
        params.update(overrides)
        return CaptureSession(**params)
    return _make


@pytest.fixture
def card_photo(tmp_path) -> Path:
    """Синтетическое фото 1600x1200: белая карта на сером фоне."""
    image = np.full((1200, 1600, 3), 90, dtype=np.uint8)
    cv2.rectangle(image, (100, 100), (1500, 500), (255, 255, 255), thickness=-1)
    path = tmp_path / "card_front.jpg"
    ok, buffer = cv2.imencode(".jpg", image)
    assert ok
    path.write_bytes(buffer.tobytes())
    return path
