import pytest

from contracts.d1_capture_dto import CropRect
from src.capture.geometry import CropPolicy, round_half_up


@pytest.fixture
def rect():
    return CropRect(offset_x=32, offset_y=24, width=1216, height=300)


def test_default_factors_are_empirical_constants():
    policy = CropPolicy()
    assert policy.factor("android") == 3.1
    assert policy.factor("ios") == 2.8


@pytest.mark.parametrize("platform", ["android", "ios"])
def test_inflation_multiplies_height_only(rect, platform):
    policy = CropPolicy()
    inflated = policy.apply_inflation(rect, platform)

    assert inflated.height == round_half_up(rect.height * policy.factor(platform))
    assert inflated.offset_x == rect.offset_x
    assert inflated.offset_y == rect.offset_y
    assert inflated.width == rect.width


def test_android_and_ios_values(rect):
    policy = CropPolicy()
    assert policy.apply_inflation(rect, "android").height == 930
    assert policy.apply_inflation(rect, "ios").height == 840


def test_platform_key_is_case_insensitive(rect):
    assert CropPolicy().apply_inflation(rect, "Android").height == 930


def test_injected_factors(rect):
    policy = CropPolicy({"android": 1.0, "web": 2.0})
    assert policy.apply_inflation(rect, "android") == rect
    assert policy.apply_inflation(rect, "web").height == 600


def test_unknown_platform_raises(rect):
    with pytest.raises(ValueError):
        CropPolicy().apply_inflation(rect, "windows")
