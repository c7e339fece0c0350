"""
Raster buffers and the image file adapters around them.

A RasterBuffer is a flat RGBA byte buffer with explicit dimensions. Every
stage of the pipeline takes one by reference and hands back a new one; none
of them write into their input.
"""

from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image


class PixelFixelError(ValueError):
    """Base class for precondition failures reported to the caller."""


class InvalidDimensionsError(PixelFixelError):
    """Width/height not positive, or buffer length not width * height * 4."""


class EmptyPaletteError(PixelFixelError):
    """A palette with no entries was passed where at least one is required."""


class UnknownPaletteError(PixelFixelError):
    """No preset palette is registered under the requested name."""


@dataclass(frozen=True, eq=False)
class RasterBuffer:
    width: int
    height: int
    data: np.ndarray

    def __post_init__(self) -> None:
        if not isinstance(self.width, (int, np.integer)) or not isinstance(self.height, (int, np.integer)):
            raise InvalidDimensionsError(f"dimensions must be integers, got {self.width!r}x{self.height!r}")
        if self.width <= 0 or self.height <= 0:
            raise InvalidDimensionsError(f"invalid dimensions {self.width}x{self.height}")
        data = np.asarray(self.data).reshape(-1)
        if data.size != self.width * self.height * 4:
            raise InvalidDimensionsError(
                f"buffer has {data.size} values, expected {self.width * self.height * 4} "
                f"for {self.width}x{self.height} RGBA"
            )
        if data.dtype != np.uint8 and (data.min() < 0 or data.max() > 255):
            raise InvalidDimensionsError("channel values must lie in [0, 255]")
        # Always take a private copy so no caller array aliases the buffer
        data = np.array(data, dtype=np.uint8)
        data.flags.writeable = False
        object.__setattr__(self, "data", data)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "RasterBuffer":
        """Build from an (H, W, 4) or (H, W, 3) array. RGB input gets alpha 255."""
        arr = np.asarray(array)
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise InvalidDimensionsError(f"expected (H, W, 3|4) array, got shape {arr.shape}")
        height, width = arr.shape[:2]
        if arr.shape[2] == 3:
            alpha = np.full((height, width, 1), 255, dtype=arr.dtype)
            arr = np.concatenate([arr, alpha], axis=2)
        return cls(int(width), int(height), arr.reshape(-1))

    @classmethod
    def blank(cls, width: int, height: int) -> "RasterBuffer":
        """Transparent black buffer of the given size."""
        return cls(width, height, np.zeros(width * height * 4, dtype=np.uint8))

    @property
    def pixels(self) -> np.ndarray:
        """Read-only (H, W, 4) view."""
        return self.data.reshape(self.height, self.width, 4)

    def rgb(self) -> np.ndarray:
        """(N, 3) int64 colors in scan order."""
        return self.data.reshape(-1, 4)[:, :3].astype(np.int64)

    def alpha(self) -> np.ndarray:
        return self.data.reshape(-1, 4)[:, 3].copy()

    def unique_colors(self) -> list[tuple[int, int, int]]:
        """Distinct RGB colors present in the buffer, sorted."""
        uniques = np.unique(self.rgb(), axis=0)
        return [(int(r), int(g), int(b)) for r, g, b in uniques]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RasterBuffer):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and np.array_equal(self.data, other.data)
        )

    __hash__ = None  # type: ignore[assignment]


def with_rgb(source: RasterBuffer, rgb: np.ndarray) -> RasterBuffer:
    """New buffer with the given (N, 3) colors and the alpha channel of `source`."""
    out = np.empty((source.width * source.height, 4), dtype=np.uint8)
    out[:, :3] = rgb
    out[:, 3] = source.data.reshape(-1, 4)[:, 3]
    return RasterBuffer(source.width, source.height, out.reshape(-1))


def from_image(img: Image.Image) -> RasterBuffer:
    """Convert a PIL image of any mode to an RGBA RasterBuffer."""
    if img.mode != "RGBA":
        img = img.convert("RGBA")
    return RasterBuffer.from_array(np.array(img, dtype=np.uint8))


def load_image(path: str | Path) -> RasterBuffer:
    with Image.open(path) as img:
        return from_image(img)


def to_image(buffer: RasterBuffer) -> Image.Image:
    return Image.fromarray(np.array(buffer.pixels, dtype=np.uint8))


def save_image(buffer: RasterBuffer, path: str | Path, scale: int = 1) -> Image.Image:
    """
    Save a buffer as an image file, optionally upscaled by an integer factor.

    Upscaling uses nearest-neighbour so every logical pixel becomes a crisp
    scale x scale block.
    """
    if scale < 1:
        raise ValueError(f"scale must be >= 1, got {scale}")
    img = to_image(buffer)
    if scale > 1:
        img = img.resize((buffer.width * scale, buffer.height * scale), Image.Resampling.NEAREST)
    img.save(path)
    return img
