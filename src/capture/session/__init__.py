"""Сессия захвата и состояние стороны карты."""

from .capture_session import CaptureSession, CaptureState
from .side_flip import SideFlipStateMachine, CaptureSide

__all__ = [
    "CaptureSession",
    "CaptureState",
    "SideFlipStateMachine",
    "CaptureSide",
]
