# hdrkit

Small building blocks for working with high dynamic range pixel data in
Python. Pixels are passed in as flat sequences or NumPy arrays of floats with
interleaved channels.

## What is inside

- `hdrkit.tiffutil` — the `Tag` and `DataType` enumerations, TIFF constants
  (photometric, compression, sample format and so on), `type_size`,
  `double_to_rational` and `tiff_header`.
- `hdrkit.dngimage` — `DNGImage` collects the IFD entries (`IFDEntry`) and the
  pixel strip of one image. Its `set_*` methods raise `ValueError` for values
  the writer does not accept; `write_data` and `write_ifd` emit the image's
  data block and its IFD.
- `hdrkit.dngwriter` — `DNGWriter` lays one or more `DNGImage` objects out in
  a TIFF/DNG file, big- or little-endian, with `write(stream)` or
  `write_to_file(filename)`.
- `hdrkit.fptiff` — `create_float_tiff` and `write_float_tiff` turn
  interleaved float pixels into an uncompressed 32-bit IEEE floating point
  TIFF with 1 to 4 channels. Output channel `c` takes input channel
  `min(c, in_channels - 1)`.
- `hdrkit.tonemap` — `gamma_to_byte` and `to_ldr` scale and gamma-encode
  float RGBA into an 8-bit array of shape `(height, width, 4)`, optionally
  forcing alpha to 255.
- `hdrkit.clip` — `resolve_limits` combines shared and per-channel limits;
  `clip_rgb` drops alpha, clamps each RGB channel and returns a `ClipResult`
  with the clipped pixels and their per-channel minimum and maximum.
- `hdrkit.cubemap` — RGBM encoding (`rgbm_to_linear`, `linear_to_rgbm`),
  cube face lookup (`xyz_to_cube_uv`), bilinear sampling (`sample_texture`,
  `sample_cubemap`), `cubemap_to_longlat` for resampling six faces into a
  longitude/latitude map, `file_extension` and `float_to_byte`.
- `hdrkit.trackball` — `trackball` turns a mouse drag into a rotation
  quaternion; `axis_to_quat`, `add_quats`, `normalize_quat`,
  `build_rotmatrix`, and `RotationAccumulator`, which composes rotations and
  renormalizes the result every 98th call.

## Installation

```
pip install .
```

Tests need the `test` extra:

```
pip install .[test]
pytest
```

## Example: write a floating point TIFF

```python
from hdrkit.fptiff import write_float_tiff

width, height = 2, 1
rgba = [0.0, 0.5, 1.0, 1.0,
        2.0, 4.0, 8.0, 1.0]

write_float_tiff("out.tiff", rgba, width, height,
                 in_channels=4, channels=3, big_endian=False)
```

## Example: cube map to longitude/latitude

```python
from hdrkit.cubemap import Image, cubemap_to_longlat

faces = [Image(width=1, height=1, data=[1.0, 1.0, 1.0]) for _ in range(6)]
longlat = cubemap_to_longlat(faces, width=64, phi_offset=0.0)
print(longlat.width, longlat.height)  # 64 32
```

## Example: trackball rotation

```python
from hdrkit.trackball import RotationAccumulator, build_rotmatrix, trackball

total = trackball(0.0, 0.0, 0.0, 0.0)  # identity
step = trackball(0.0, 0.0, 0.1, 0.0)
acc = RotationAccumulator()
total = acc.add(step, total)
matrix = build_rotmatrix(total)
```

Errors are reported with exceptions: `ValueError` for invalid arguments and
`OSError` from the file system when writing files.

## What this package does not do

- It does not read or write OpenEXR files; pixel data has to come from
  elsewhere as float arrays.
- Apart from float TIFF/DNG, it writes no image files: `to_ldr`,
  `linear_to_rgbm`, `clip_rgb` and `cubemap_to_longlat` return pixel data in
  memory, and saving it as PNG, Radiance HDR or anything else is left to the
  caller.
- It has no command-line tools and no viewer window; the trackball functions
  only compute quaternions and matrices.