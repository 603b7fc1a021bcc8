"""
Контракты DTO между доменами проекта Card Capture.

Все контракты используют Pydantic v2 (frozen модели).

Контракты:
- D1 -> D2: CroppedImage, TextFragment (d1_capture_dto.py)
- D2 -> Controller: ExtractedFields (d2_parsing_dto.py)
- Controller -> UI: CaptureOutcome (d3_outcome_dto.py)
"""

# D1 -> D2 (Capture -> Parsing)
from .d1_capture_dto import (
    Size,
    GuideRect,
    RawPhoto,
    ResizedPhoto,
    CropRect,
    CropRequest,
    CroppedImage,
    BoundingBox,
    TextFragment,
)

# D2 -> Controller
from .d2_parsing_dto import ExtractedFields

# Controller -> UI
from .d3_outcome_dto import CaptureOutcome, CaptureStatus

__all__ = [
    # D1 -> D2
    "Size",
    "GuideRect",
    "RawPhoto",
    "ResizedPhoto",
    "CropRect",
    "CropRequest",
    "CroppedImage",
    "BoundingBox",
    "TextFragment",
    # D2 -> Controller
    "ExtractedFields",
    # Controller -> UI
    "CaptureOutcome",
    "CaptureStatus",
]
