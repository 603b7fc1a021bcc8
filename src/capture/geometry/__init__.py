"""Геометрия кропа: отображение рамки и платформенная эвристика."""

from .geometry_mapper import GeometryMapper, round_half_up
from .crop_policy import CropPolicy

__all__ = [
    "GeometryMapper",
    "CropPolicy",
    "round_half_up",
]
