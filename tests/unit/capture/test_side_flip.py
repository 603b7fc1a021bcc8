import pytest

from src.capture.session import SideFlipStateMachine, CaptureSide


@pytest.fixture
def sides():
    return SideFlipStateMachine()


def test_starts_at_front(sides):
    assert sides.current == CaptureSide.FRONT
    assert sides.prompt_label == "Capture Card Front"
    assert sides.image_label is None
    assert sides.last_captured is None


@pytest.mark.parametrize("n", [0, 1, 2, 3, 4, 7])
def test_parity_after_n_captures(sides, n):
    for _ in range(n):
        sides.on_capture_succeeded()
    expected = CaptureSide.FRONT if n % 2 == 0 else CaptureSide.BACK
    assert sides.current == expected
    assert sides.capture_count == n


def test_labels_name_the_side_just_captured(sides):
    captured = sides.on_capture_succeeded()

    assert captured == CaptureSide.FRONT
    assert sides.image_label == "Card Front Image"
    assert sides.prompt_label == "Capture Card Back"

    captured = sides.on_capture_succeeded()
    assert captured == CaptureSide.BACK
    assert sides.image_label == "Card Back Image"
    assert sides.prompt_label == "Capture Card Front"


def test_listeners_receive_new_side(sides):
    seen = []
    sides.subscribe(lambda side: seen.append((side, side.rotation_deg)))

    sides.on_capture_succeeded()
    sides.on_capture_succeeded()

    assert seen == [(CaptureSide.BACK, 180), (CaptureSide.FRONT, 0)]


def test_reset(sides):
    sides.on_capture_succeeded()
    sides.reset()
    assert sides.current == CaptureSide.FRONT
    assert sides.capture_count == 0


def test_failing_listener_does_not_stop_flip(sides):
    seen = []

    def broken(side):
        raise RuntimeError("animation crashed")

    sides.subscribe(broken)
    sides.subscribe(seen.append)

    captured = sides.on_capture_succeeded()

    assert captured == CaptureSide.FRONT
    assert sides.current == CaptureSide.BACK
    assert seen == [CaptureSide.BACK]
