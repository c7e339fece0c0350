"""
Recover clean pixel art from AI-generated or upscaled pixel art images.

The input is expected to be pixel art where each "logical pixel" has been
rendered as a larger block, possibly with soft edges. The pipeline detects
the block size from edge peaks, collapses every block to its dominant color,
and then reduces the result to a small palette: picked automatically, of an
explicit size, or a fixed preset.
"""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from PIL import Image, ImageDraw

from .color import Color, apply_palette
from .grid import detect_grid
from .palette import MAX_AUTO_COLORS, build_palette, select_best_k
from .presets import get_palette
from .raster import RasterBuffer, from_image, load_image, save_image, to_image

# Largest automatic preview magnification
MAX_PREVIEW_SCALE = 8


@dataclass(frozen=True)
class FixResult:
    image: RasterBuffer
    h_factor: float
    v_factor: float
    palette: tuple[Color, ...] | None
    detect_ms: float
    palette_ms: float

    @property
    def num_colors(self) -> int:
        if self.palette is not None:
            return len(set(self.palette))
        return len(self.image.unique_colors())


def preview_scale(width: int, height: int, source_width: int, source_height: int,
                  max_scale: int = MAX_PREVIEW_SCALE) -> int:
    """Integer magnification that brings the output back near the source size."""
    return max(1, min(source_width // width, source_height // height, max_scale))


def save_debug_grid(
    img: Image.Image,
    h_peaks: Sequence[int],
    v_peaks: Sequence[int],
    output_path: str | Path,
) -> None:
    """Save a copy of the source with the detected cell edges drawn in."""
    # Scale up small sources so single-pixel lines stay readable
    debug_scale = max(1, 512 // max(img.size))
    img_w, img_h = img.size
    scaled = img.convert("RGBA").resize((img_w * debug_scale, img_h * debug_scale), Image.Resampling.NEAREST)
    draw = ImageDraw.Draw(scaled)
    line_color = (255, 255, 0, 200)  # Yellow

    # Peak i is the boundary between pixel i and pixel i + 1
    for peak in h_peaks:
        x = (peak + 1) * debug_scale
        draw.line([(x, 0), (x, img_h * debug_scale - 1)], fill=line_color, width=1)
    for peak in v_peaks:
        y = (peak + 1) * debug_scale
        draw.line([(0, y), (img_w * debug_scale - 1, y)], fill=line_color, width=1)

    scaled.save(output_path)


def _as_buffer(source: str | Path | Image.Image | RasterBuffer) -> RasterBuffer:
    if isinstance(source, RasterBuffer):
        return source
    if isinstance(source, Image.Image):
        return from_image(source)
    return load_image(source)


def fix_pixel_art(
    source: str | Path | Image.Image | RasterBuffer,
    output_path: str | Path | None = None,
    colors: int | None = None,
    palette: str | Sequence[Sequence[int]] | None = None,
    max_colors: int = MAX_AUTO_COLORS,
    quantize: bool = True,
    scale: int | str = 1,
    debug: bool = False,
    verbose: bool = True,
) -> FixResult:
    """
    Restore the logical resolution of an upscaled pixel art image.

    Args:
        source: Image path, PIL image or RasterBuffer
        output_path: Where to save the result (optional)
        colors: Explicit palette size for median cut
        palette: Preset name or list of RGB colors to map onto
        max_colors: Upper bound for automatic palette size selection
        quantize: Set False to stop after downscaling
        scale: Integer upscale factor for the saved file, or "auto"
        debug: Save the detected grid drawn over the source image
        verbose: Print detection info

    Returns:
        FixResult with the restored buffer, the detected factors and the
        palette used (None when quantization was skipped)
    """
    if colors is not None and palette is not None:
        raise ValueError("colors and palette are mutually exclusive")

    buffer = _as_buffer(source)

    if verbose:
        print(f"Input image: {buffer.width}x{buffer.height}")

    start = time.perf_counter()
    detection = detect_grid(buffer)
    detect_ms = (time.perf_counter() - start) * 1000.0
    downscaled = detection.downscaled

    if verbose:
        print(f"Cell size ~{detection.h_factor:.1f}x{detection.v_factor:.1f}px "
              f"({len(detection.h_peaks)} column edges, {len(detection.v_peaks)} row edges)")
        print(f"Output size: {downscaled.width}x{downscaled.height}")

    if debug and output_path:
        grid_path = Path(output_path).parent / f"{Path(output_path).stem}_grid.png"
        save_debug_grid(to_image(buffer), detection.h_peaks, detection.v_peaks, grid_path)
        if verbose:
            print(f"Detected grid saved to: {grid_path}")

    start = time.perf_counter()
    used_palette: tuple[Color, ...] | None = None
    result = downscaled

    if not quantize:
        if verbose:
            print("Skipping palette reduction")
    elif palette is not None:
        if isinstance(palette, str):
            if verbose:
                print(f"Applying preset palette '{palette}'")
            palette = get_palette(palette)
        used_palette = tuple(tuple(int(v) for v in c[:3]) for c in palette)
        result = apply_palette(downscaled, used_palette)
    else:
        if colors is None:
            colors = select_best_k(downscaled, max_colors)
            if verbose:
                print(f"Auto-detected {colors} colors")
        used_palette = tuple(build_palette(downscaled.rgb(), colors))
        result = apply_palette(downscaled, used_palette)

    palette_ms = (time.perf_counter() - start) * 1000.0

    if verbose and used_palette is not None:
        hex_colors = ['#' + ''.join(f'{c:02x}' for c in p) for p in used_palette]
        print(f"Palette: {len(used_palette)} colors: {', '.join(hex_colors)}")

    fixed = FixResult(result, detection.h_factor, detection.v_factor, used_palette, detect_ms, palette_ms)

    if verbose:
        print(f"Detected {detection.scale:.1f}x upscaling | "
              f"Pixel detection: {round(detect_ms)}ms | "
              f"Palette: {round(palette_ms)}ms")

    if output_path:
        if scale == "auto":
            scale = preview_scale(result.width, result.height, buffer.width, buffer.height)
        save_image(result, output_path, int(scale))
        if verbose:
            suffix = f" (x{scale})" if int(scale) > 1 else ""
            print(f"Saved to: {output_path}{suffix}")

    return fixed
