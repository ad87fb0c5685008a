import numpy as np
import pytest
from subocr.contracts.bitmap import I32_MAX, I32_MIN, RgbaBitmap, to_i32
from subocr.contracts.core import CoordinateOverflowError, Rgba
from tests.factories import make_bitmap, rgba_hex

def test_bitmap_immutable_buffer():
    bm = make_bitmap(4, 3)
    with pytest.raises((ValueError, RuntimeError)):
        bm.data[...] = 1

def test_bitmap_shape_and_dtype_guard():
    with pytest.raises(ValueError):
        RgbaBitmap(np.zeros((3, 4, 3), dtype=np.uint8))
    with pytest.raises(ValueError):
        RgbaBitmap(np.zeros((3, 4, 4), dtype=np.uint16))

def test_get_opt_in_and_out_of_bounds():
    bm = RgbaBitmap.from_hex_rows([
        [0x000000FF, 0x111111FF, 0x222222FF],
        [0x333333FF, 0x444444FF, 0x555555FF],
    ])
    assert (bm.width, bm.height) == (3, 2)
    assert bm.get_opt(0, 0) == rgba_hex(0x000000FF)
    assert bm.get_opt(2, 1) == rgba_hex(0x555555FF)
    # x es columna, y es fila
    assert bm.get_opt(1, 0) == bm.get_pixel(1, 0) == rgba_hex(0x111111FF)
    for x, y in [(-1, 0), (0, -1), (3, 0), (0, 2), (-1, -1), (3, 2)]:
        assert bm.get_opt(x, y) is None

def test_enumerate_pixels_row_major():
    bm = RgbaBitmap.from_rows([[Rgba(1, 0, 0, 255), Rgba(2, 0, 0, 255)]])
    assert list(bm.enumerate_pixels()) == [(0, 0, Rgba(1, 0, 0, 255)), (1, 0, Rgba(2, 0, 0, 255))]
    assert list(bm.pixels()) == [Rgba(1, 0, 0, 255), Rgba(2, 0, 0, 255)]

def test_to_i32_limits():
    assert to_i32(I32_MAX) == I32_MAX
    assert to_i32(I32_MIN) == I32_MIN
    with pytest.raises(CoordinateOverflowError):
        to_i32(I32_MAX + 1)
    with pytest.raises(OverflowError):
        to_i32(I32_MIN - 1)
