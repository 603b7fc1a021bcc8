import math

import pytest

from contracts.d1_capture_dto import GuideRect, Size
from src.capture.domain.exceptions import InvalidGeometry
from src.capture.geometry import GeometryMapper, round_half_up


@pytest.fixture
def mapper():
    return GeometryMapper()


@pytest.fixture
def guide():
    return GuideRect(x=10, y=20, width=380, height=250)


def test_maps_each_axis_independently(mapper, guide):
    # scale_x = 1280/400 = 3.2, scale_y = 960/800 = 1.2
    rect = mapper.map_to_pixel_rect(guide, Size(width=400, height=800), Size(width=1280, height=960))
    assert rect.offset_x == 32
    assert rect.offset_y == 24
    assert rect.width == 1216
    assert rect.height == 300


def test_accepts_tuples(mapper, guide):
    rect = mapper.map_to_pixel_rect(guide, (400, 800), (1280, 960))
    assert (rect.offset_x, rect.offset_y, rect.width, rect.height) == (32, 24, 1216, 300)


def test_doubling_image_width_doubles_x_only(mapper, guide):
    base = mapper.map_to_pixel_rect(guide, (400, 800), (800, 960))
    doubled = mapper.map_to_pixel_rect(guide, (400, 800), (1600, 960))

    assert doubled.offset_x == 2 * base.offset_x
    assert doubled.width == 2 * base.width
    assert doubled.offset_y == base.offset_y
    assert doubled.height == base.height


def test_doubling_image_height_doubles_y_only(mapper, guide):
    base = mapper.map_to_pixel_rect(guide, (400, 800), (1280, 400))
    doubled = mapper.map_to_pixel_rect(guide, (400, 800), (1280, 800))

    assert doubled.offset_y == 2 * base.offset_y
    assert doubled.height == 2 * base.height
    assert doubled.offset_x == base.offset_x
    assert doubled.width == base.width


def test_rounds_half_up(mapper):
    # 5 * 0.5 = 2.5 -> 3 (банковское округление дало бы 2)
    rect = mapper.map_to_pixel_rect(GuideRect(x=5, y=5, width=5, height=5), (10, 10), (5, 5))
    assert rect.offset_x == 3
    assert rect.width == 3


@pytest.mark.parametrize("screen", [(0, 800), (400, 0), (0, 0), (-400, 800)])
def test_zero_screen_raises_invalid_geometry(mapper, guide, screen):
    with pytest.raises(InvalidGeometry):
        mapper.map_to_pixel_rect(guide, screen, (1280, 960))


def test_nan_screen_raises_invalid_geometry(mapper, guide):
    with pytest.raises(InvalidGeometry):
        mapper.map_to_pixel_rect(guide, (math.nan, 800), (1280, 960))


@pytest.mark.parametrize("width,height", [(0, 250), (380, 0), (-1, 250)])
def test_empty_guide_raises_invalid_geometry(mapper, width, height):
    with pytest.raises(InvalidGeometry):
        mapper.map_to_pixel_rect(GuideRect(x=0, y=0, width=width, height=height), (400, 800), (1280, 960))


def test_negative_guide_offset_raises(mapper):
    with pytest.raises(InvalidGeometry):
        mapper.validate(GuideRect(x=-5, y=0, width=100, height=100), (400, 800))


def test_zero_image_raises_invalid_geometry(mapper, guide):
    with pytest.raises(InvalidGeometry):
        mapper.map_to_pixel_rect(guide, (400, 800), (0, 960))


def test_rect_rounding_to_zero_raises(mapper):
    # 0.4 * (10/400) ~ 0.01 -> 0 пикселей
    with pytest.raises(InvalidGeometry):
        mapper.map_to_pixel_rect(GuideRect(x=0, y=0, width=0.4, height=100), (400, 800), (10, 960))


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.49) == 2
    assert round_half_up(0.0) == 0
