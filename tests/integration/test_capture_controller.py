"""
Интеграционные тесты CaptureController.

Реальные OpenCV адаптеры + FileCameraAdapter вместо камеры,
фейковый OCR вместо Google Vision.
"""

import asyncio

import cv2
import pytest

from contracts.d3_outcome_dto import CaptureStatus
from src.application import CaptureComponentFactory, CaptureController
from src.capture.infrastructure.adapters import FileCameraAdapter
from src.capture.infrastructure.file_manager import CaptureFileManager
from src.capture.session import CaptureSide
from src.parsing.fields import FieldExtractor
from tests.fakes import FakeCamera, FakeCropper, FakeRecognizer


GUIDE = {"x": 10, "y": 20, "width": 380, "height": 250}
FRONT_TEXT = ["Issuing Date 01/02/2020", "Expiry Date 01/02/2030", "ID Number 784-1990-1234567-1"]


@pytest.fixture
def out_dir(tmp_path):
    return tmp_path / "captures"


@pytest.fixture
def make_controller(out_dir):
    def _make(photos, recognizer=None, **kwargs):
        camera = FileCameraAdapter(photos, file_manager=CaptureFileManager(out_dir))
        controller = CaptureComponentFactory.create_controller(
            screen_width=400,
            screen_height=800,
            camera=camera,
            recognizer=recognizer,
            output_dir=out_dir,
            platform="android",
            **kwargs
        )
        controller.on_guide_layout(GUIDE)
        return controller
    return _make


def test_front_then_back(make_controller, card_photo, out_dir):
    controller = make_controller([card_photo, card_photo], FakeRecognizer(FRONT_TEXT))
    assert controller.sides.prompt_label == "Capture Card Front"

    front = asyncio.run(controller.capture())

    assert front.status == CaptureStatus.SUCCESS
    assert front.side == "front"
    assert front.image_label == "Card Front Image"
    assert front.next_prompt == "Capture Card Back"
    assert (front.image.width, front.image.height) == (380, 250)
    assert cv2.imread(str(front.image.path)).shape[:2] == (250, 380)
    assert front.fields.issuing_date == "01/02/2020"
    assert front.fields.id_number == "784-1990-1234567-1"
    assert controller.displayed_image == front.image

    back = asyncio.run(controller.capture())

    assert back.side == "back"
    assert back.image_label == "Card Back Image"
    assert back.next_prompt == "Capture Card Front"
    assert controller.displayed_image == back.image
    # raw + resized удалены, кроп лицевой стороны заменён кропом обратной
    assert [p.name for p in out_dir.iterdir()] == [back.image.path.name]
    assert not front.image.path.exists()


def test_capture_without_recognizer(make_controller, card_photo):
    outcome = asyncio.run(make_controller([card_photo]).capture())

    assert outcome.succeeded
    assert outcome.fields.is_empty()
    assert outcome.recognition_error is None


def test_recognition_failure_does_not_block_flip(make_controller, card_photo):
    controller = make_controller([card_photo], FakeRecognizer(error=RuntimeError("offline")))
    outcome = asyncio.run(controller.capture())

    assert outcome.succeeded
    assert outcome.fields.is_empty()
    assert "offline" in outcome.recognition_error
    assert controller.sides.current == CaptureSide.BACK


def test_failed_capture_changes_nothing(make_controller, card_photo):
    # Вторая попытка: очередь пуста -> CaptureFailed
    controller = make_controller([card_photo])
    first = asyncio.run(controller.capture())
    failed = asyncio.run(controller.capture())

    assert failed.status == CaptureStatus.FAILED
    assert failed.error_type == "CaptureFailed"
    assert failed.image is None
    assert controller.sides.current == CaptureSide.BACK
    assert controller.sides.capture_count == 1
    assert controller.displayed_image == first.image


def test_capture_without_guide(card_photo, out_dir):
    camera = FileCameraAdapter([card_photo], file_manager=CaptureFileManager(out_dir))
    controller = CaptureComponentFactory.create_controller(400, 800, camera=camera, output_dir=out_dir)

    assert not controller.capture_enabled
    outcome = asyncio.run(controller.capture())

    assert outcome.status == CaptureStatus.FAILED
    assert outcome.error_type == "NoGuideMeasured"
    assert camera.remaining == 1


def test_empty_layout_is_ignored(make_controller, card_photo):
    controller = make_controller([card_photo])
    assert not controller.on_guide_layout({"x": 0, "y": 0, "width": 0, "height": 250})
    assert controller.guide.width == 380


def test_flip_listener_receives_rotation(make_controller, card_photo):
    controller = make_controller([card_photo, card_photo])
    rotations = []
    controller.sides.subscribe(lambda side: rotations.append(side.rotation_deg))

    asyncio.run(controller.capture())
    asyncio.run(controller.capture())

    assert rotations == [180, 0]


def test_replaced_crops_kept_when_requested(make_controller, card_photo, out_dir):
    controller = make_controller([card_photo, card_photo], discard_replaced=False)
    front = asyncio.run(controller.capture())
    back = asyncio.run(controller.capture())

    assert front.image.path.exists()
    assert back.image.path.exists()


def test_failing_flip_listener_does_not_break_capture(make_controller, card_photo):
    controller = make_controller([card_photo], FakeRecognizer(FRONT_TEXT))

    def broken_animation(side):
        raise RuntimeError("animation crashed")

    controller.sides.subscribe(broken_animation)
    outcome = asyncio.run(controller.capture())

    assert outcome.succeeded
    assert outcome.fields.expiry_date == "01/02/2030"
    assert controller.sides.current == CaptureSide.BACK
    assert controller.displayed_image == outcome.image


def test_listener_sees_new_image(make_controller, card_photo):
    controller = make_controller([card_photo])
    seen = []
    controller.sides.subscribe(lambda side: seen.append(controller.displayed_image))

    outcome = asyncio.run(controller.capture())

    assert seen == [outcome.image]


def test_closed_controller_does_not_fire_camera(make_controller, card_photo):
    controller = make_controller([card_photo])
    camera = controller.session.camera
    controller.close()

    outcome = asyncio.run(controller.capture())

    assert outcome.status == CaptureStatus.DISCARDED
    assert camera.remaining == 1


class TestWithFakes:
    """Сценарии конкурентности на фейковых нативных компонентах."""

    def test_second_press_is_rejected(self, make_session, tmp_path):
        camera = FakeCamera(tmp_path / "raw.jpg", delay=0.05)
        controller = CaptureController(make_session(camera=camera))
        controller.on_guide_layout(GUIDE)

        async def double_press():
            return await asyncio.gather(controller.capture(), controller.capture())

        first, second = asyncio.run(double_press())

        assert first.status == CaptureStatus.SUCCESS
        assert second.status == CaptureStatus.REJECTED
        assert second.error_type == "CaptureBusy"
        assert camera.photo_calls == 1
        assert controller.sides.capture_count == 1

    def test_close_discards_result(self, make_session, tmp_path):
        cropper = FakeCropper(tmp_path / "cropped.jpg", delay=0.05)
        recognizer = FakeRecognizer(FRONT_TEXT)
        controller = CaptureController(
            make_session(cropper=cropper),
            extractor=FieldExtractor(recognizer=recognizer)
        )
        controller.on_guide_layout(GUIDE)

        async def close_midway():
            task = asyncio.create_task(controller.capture())
            await asyncio.sleep(0.01)
            controller.close()
            return await task

        outcome = asyncio.run(close_midway())

        assert outcome.status == CaptureStatus.DISCARDED
        assert controller.displayed_image is None
        assert controller.sides.current == CaptureSide.FRONT
        assert recognizer.calls == []
        assert not controller.capture_enabled

    def test_crop_error_keeps_side(self, make_session, tmp_path):
        cropper = FakeCropper(tmp_path / "cropped.jpg", error=RuntimeError("native crop"))
        controller = CaptureController(make_session(cropper=cropper))
        controller.on_guide_layout(GUIDE)

        outcome = asyncio.run(controller.capture())

        assert outcome.status == CaptureStatus.FAILED
        assert outcome.error_type == "CaptureFailed"
        assert outcome.next_prompt == "Capture Card Front"
        assert controller.displayed_image is None

    def test_start_permission_denied(self, make_session, tmp_path):
        camera = FakeCamera(tmp_path / "raw.jpg", granted=False)
        controller = CaptureController(make_session(camera=camera))

        assert asyncio.run(controller.start()) is False

    def test_start_permission_granted_once(self, make_session, camera):
        controller = CaptureController(make_session())
        controller.on_guide_layout(GUIDE)

        assert asyncio.run(controller.start()) is True
        asyncio.run(controller.capture())
        assert camera.permission_calls == 1
