"""HDR pixel tools: float TIFF/DNG writing, tone mapping, clipping, cube maps, trackball."""

__version__ = "0.1.0"
__all__ = [
    "clip",
    "cubemap",
    "dngimage",
    "dngwriter",
    "fptiff",
    "tiffutil",
    "tonemap",
    "trackball",
]