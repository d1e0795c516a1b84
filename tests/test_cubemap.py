import math

import numpy as np
import pytest

from hdrkit.cubemap import (
    Image,
    cubemap_to_longlat,
    file_extension,
    float_to_byte,
    linear_to_rgbm,
    rgbm_to_linear,
    sample_cubemap,
    sample_texture,
    xyz_to_cube_uv,
)


def _constant(value, width=4, height=4):
    return Image(width, height, np.full((height, width, 3), value, dtype=np.float32))


def _faces():
    return [_constant(float(i)) for i in range(6)]


@pytest.mark.parametrize(
    "name, ext",
    [("a.exr", "exr"), ("dir/x.y.RGBM", "RGBM"), ("noext", ""), ("trailing.", "")],
)
def test_file_extension(name, ext):
    assert file_extension(name) == ext


def test_float_to_byte_clamps():
    assert float_to_byte(0.0) == 0
    assert float_to_byte(1.0) == 255
    assert float_to_byte(-3.0) == 0
    assert float_to_byte(7.0) == 255


@pytest.mark.parametrize(
    "direction, face",
    [
        ((1.0, 0.0, 0.0), 0),
        ((-1.0, 0.0, 0.0), 1),
        ((0.0, 1.0, 0.0), 2),
        ((0.0, -1.0, 0.0), 3),
        ((0.0, 0.0, 1.0), 4),
        ((0.0, 0.0, -1.0), 5),
    ],
)
def test_axis_directions_hit_face_centres(direction, face):
    index, u, v = xyz_to_cube_uv(*direction)
    assert index == face
    assert u == pytest.approx(0.5)
    assert v == pytest.approx(0.5)


@pytest.mark.parametrize(
    "direction", [(0.3, -0.7, 0.2), (-0.9, 0.1, 0.5), (0.2, 0.2, -0.95), (1.0, 1.0, 1.0)]
)
def test_uv_in_unit_range(direction):
    index, u, v = xyz_to_cube_uv(*direction)
    assert 0 <= index <= 5
    assert 0.0 <= u <= 1.0
    assert 0.0 <= v <= 1.0


def test_tie_picks_later_face():
    index, _, _ = xyz_to_cube_uv(1.0, 1.0, 1.0)
    assert index == 4


def test_zero_direction_raises():
    with pytest.raises(ValueError):
        xyz_to_cube_uv(0.0, 0.0, 0.0)


def test_sample_texture_corner_and_constant():
    data = np.arange(2 * 2 * 3, dtype=np.float32).reshape(2, 2, 3)
    image = Image(2, 2, data)
    assert sample_texture(0.0, 0.0, image) == pytest.approx(tuple(data[0, 0]))
    flat = _constant(0.25)
    assert sample_texture(0.37, 0.81, flat) == pytest.approx((0.25, 0.25, 0.25))


def test_sample_texture_wraps():
    data = np.random.default_rng(1).random((5, 6, 3)).astype(np.float32)
    image = Image(6, 5, data)
    assert sample_texture(0.3, 0.4, image) == pytest.approx(
        sample_texture(2.3, -0.6, image)
    )


def test_sample_cubemap_selects_face():
    faces = _faces()
    assert sample_cubemap(faces, (0.0, 0.0, -1.0)) == pytest.approx((5.0, 5.0, 5.0))
    assert sample_cubemap(faces, (-1.0, 0.1, 0.0)) == pytest.approx((1.0, 1.0, 1.0))


def test_sample_cubemap_needs_six_faces():
    with pytest.raises(ValueError):
        sample_cubemap(_faces()[:5], (1.0, 0.0, 0.0))


def test_longlat_shape_and_constant():
    faces = [_constant(0.5) for _ in range(6)]
    out = cubemap_to_longlat(faces, 16)
    assert (out.width, out.height) == (16, 8)
    assert out.data.shape == (8, 16, 3)
    assert np.allclose(out.data, 0.5)


def test_longlat_poles_use_y_faces():
    out = cubemap_to_longlat(_faces(), 16, 30.0)
    assert np.allclose(out.data[0], 2.0)
    assert np.allclose(out.data[-1], 3.0)


def test_longlat_rejects_tiny_width():
    with pytest.raises(ValueError):
        cubemap_to_longlat(_faces(), 1)


@pytest.mark.parametrize("linear", [(0.0, 0.0, 0.0), (0.5, 1.0, 2.0), (10.0, 3.0, 0.1)])
def test_linear_to_rgbm_ranges(linear):
    r, g, b, m = linear_to_rgbm(linear)
    assert all(0.0 <= c <= 1.0 for c in (r, g, b))
    assert 1.0 / 16.0 <= m <= 1.0
    assert math.isclose(m * 255.0, round(m * 255.0), abs_tol=1e-9)


def test_rgbm_to_linear_zero_multiplier():
    assert rgbm_to_linear((1.0, 0.5, 0.2, 0.0)) == (0.0, 0.0, 0.0)


def test_rgbm_to_linear_is_monotonic():
    low = rgbm_to_linear((0.2, 0.2, 0.2, 0.5))
    high = rgbm_to_linear((0.4, 0.4, 0.4, 0.5))
    assert all(h > l for h, l in zip(high, low))


def test_image_rejects_mismatched_data():
    with pytest.raises(ValueError):
        Image(3, 3, np.zeros((2, 3, 3)))


def test_image_accepts_flat_data():
    image = Image(2, 1, [1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
    assert image.channels == 3
    assert image.data[0, 1].tolist() == [4.0, 5.0, 6.0]