"""
Фабрика для создания компонентов Card Capture.

Собирает CaptureSession, FieldExtractor и CaptureController
из адаптеров по умолчанию (OpenCV + Google Vision).
"""

from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

from config.settings import (
    CAPTURE_PLATFORM, DISCARD_REPLACED_CROPS, FIELD_PROFILE, FIELD_MATCH_STRATEGY,
    NATIVE_CALL_TIMEOUT_S,
)
from src.capture.domain.interfaces import ICamera, IScreenSizeProvider
from src.capture.infrastructure.file_manager import CaptureFileManager
from src.capture.infrastructure.adapters import (
    OpenCVCameraAdapter,
    OpenCVResizerAdapter,
    OpenCVCropperAdapter,
    StaticScreenSizeProvider,
)
from src.capture.session import CaptureSession
from src.parsing.domain.interfaces import ITextRecognizer
from src.parsing.fields import FieldExtractor, FieldProfileLoader, StrategyFactory
from .capture_controller import CaptureController


class CaptureComponentFactory:
    """Фабрика компонентов захвата и извлечения полей."""

    @staticmethod
    def create_session(
        screen_size_provider: IScreenSizeProvider,
        camera: Optional[ICamera] = None,
        output_dir: Optional[Path] = None,
        platform: str = CAPTURE_PLATFORM,
        timeout_s: Optional[float] = NATIVE_CALL_TIMEOUT_S,
        **session_kwargs: Any
    ) -> CaptureSession:
        """
        Создает CaptureSession с OpenCV адаптерами.

        Args:
            screen_size_provider: Текущие размеры экрана
            camera: Камера (по умолчанию OpenCVCameraAdapter)
            output_dir: Куда писать снимки
            platform: "android" | "ios"
        """
        logger.debug(f"[Factory] Создание CaptureSession (platform={platform})")
        file_manager = CaptureFileManager(output_dir)

        return CaptureSession(
            camera=camera or OpenCVCameraAdapter(file_manager=file_manager),
            resizer=OpenCVResizerAdapter(file_manager=file_manager),
            cropper=OpenCVCropperAdapter(file_manager=file_manager),
            screen_size_provider=screen_size_provider,
            platform=platform,
            timeout_s=timeout_s,
            file_manager=file_manager,
            **session_kwargs
        )

    @staticmethod
    def create_recognizer(credentials_path: Optional[str] = None) -> ITextRecognizer:
        """Создает распознаватель Google Vision."""
        # Импорт здесь: google-cloud-vision нужен только при распознавании
        from src.parsing.infrastructure.ocr import GoogleVisionRecognizer

        logger.debug("[Factory] Создание GoogleVisionRecognizer")
        return GoogleVisionRecognizer(credentials_path)

    @staticmethod
    def create_field_extractor(
        recognizer: Optional[ITextRecognizer] = None,
        profile_name: str = FIELD_PROFILE,
        strategy_name: str = FIELD_MATCH_STRATEGY,
        profiles_dir: Optional[Path] = None
    ) -> FieldExtractor:
        """Создает FieldExtractor с профилем из YAML."""
        logger.debug(f"[Factory] Создание FieldExtractor (profile={profile_name})")
        profile = FieldProfileLoader(profiles_dir).load(profile_name)
        strategy = StrategyFactory().get(strategy_name)
        return FieldExtractor(profile=profile, strategy=strategy, recognizer=recognizer)

    @staticmethod
    def create_controller(
        screen_width: float,
        screen_height: float,
        camera: Optional[ICamera] = None,
        recognizer: Optional[ITextRecognizer] = None,
        output_dir: Optional[Path] = None,
        platform: str = CAPTURE_PLATFORM,
        profile_name: str = FIELD_PROFILE,
        discard_replaced: bool = DISCARD_REPLACED_CROPS
    ) -> CaptureController:
        """
        Создает CaptureController.

        Без recognizer поля не распознаются (захват работает как обычно).
        """
        logger.info(f"[Factory] Создание CaptureController ({screen_width}x{screen_height}, {platform})")

        session = CaptureComponentFactory.create_session(
            StaticScreenSizeProvider(screen_width, screen_height),
            camera=camera,
            output_dir=output_dir,
            platform=platform,
        )
        extractor = None
        if recognizer is not None:
            extractor = CaptureComponentFactory.create_field_extractor(recognizer, profile_name)

        return CaptureController(
            session=session, extractor=extractor, discard_replaced=discard_replaced
        )

    @staticmethod
    def get_info() -> Dict[str, Any]:
        """Информация о доступных компонентах."""
        return {
            "domains": {
                "capture": "Снимок + resize (contain) + кроп по рамке (cover)",
                "parsing": "OCR + извлечение issuing_date / expiry_date / id_number",
            },
            "components": {
                "camera": ["OpenCVCameraAdapter", "FileCameraAdapter"],
                "resizer": "OpenCVResizerAdapter",
                "cropper": "OpenCVCropperAdapter",
                "recognizer": "GoogleVisionRecognizer",
                "controller": "CaptureController",
            },
            "profiles": FieldProfileLoader().available(),
            "dependencies": ["OpenCV", "Pillow", "Google Cloud Vision API"],
        }
