"""Named retro palettes that can be applied instead of an extracted one."""

from .color import Color
from .raster import UnknownPaletteError

PALETTES: dict[str, tuple[str, tuple[Color, ...]]] = {
    "pico8": ("PICO-8", (
        (0, 0, 0), (29, 43, 83), (126, 37, 83), (0, 135, 81),
        (171, 82, 54), (95, 87, 79), (194, 195, 199), (255, 241, 232),
        (255, 0, 77), (255, 163, 0), (255, 236, 39), (0, 228, 54),
        (41, 173, 255), (131, 118, 156), (255, 119, 168), (255, 204, 170),
    )),
    "gameboy": ("Game Boy", (
        (15, 56, 15), (48, 98, 48), (139, 172, 15), (155, 188, 15),
    )),
    "nes": ("NES NTSC", (
        (101, 101, 101), (0, 45, 105), (19, 31, 127), (60, 19, 124),
        (96, 11, 98), (115, 10, 55), (113, 15, 7), (90, 26, 0),
        (52, 40, 0), (11, 52, 0), (0, 60, 0), (0, 61, 16),
        (0, 56, 64), (0, 0, 0), (0, 0, 0), (0, 0, 0),
        (174, 174, 174), (15, 99, 179), (64, 81, 208), (120, 65, 204),
        (167, 54, 169), (192, 52, 112), (189, 60, 48), (159, 74, 0),
        (109, 92, 0), (54, 109, 0), (7, 119, 4), (0, 121, 61),
        (0, 114, 125), (0, 0, 0), (0, 0, 0), (0, 0, 0),
        (254, 254, 255), (93, 179, 255), (143, 161, 255), (200, 144, 255),
        (247, 133, 250), (255, 131, 192), (255, 139, 127), (239, 154, 73),
        (189, 172, 44), (133, 188, 47), (85, 199, 83), (60, 201, 140),
        (62, 194, 205), (78, 78, 78), (0, 0, 0), (0, 0, 0),
        (254, 254, 255), (188, 223, 255), (209, 216, 255), (232, 209, 255),
        (251, 205, 253), (255, 204, 229), (255, 207, 202), (248, 213, 180),
        (228, 220, 168), (204, 227, 169), (185, 232, 184), (174, 232, 208),
        (175, 229, 234), (182, 182, 182), (0, 0, 0), (0, 0, 0),
    )),
    "commodore64": ("Commodore 64", (
        (0, 0, 0), (255, 255, 255), (136, 0, 0), (170, 255, 238),
        (204, 68, 204), (0, 204, 85), (0, 0, 170), (238, 238, 119),
        (221, 136, 85), (102, 68, 0), (255, 119, 119), (51, 51, 51),
        (119, 119, 119), (170, 255, 102), (0, 136, 255), (187, 187, 187),
    )),
    "cga": ("CGA", (
        (0, 0, 0), (0, 0, 170), (0, 170, 0), (0, 170, 170),
        (170, 0, 0), (170, 0, 170), (170, 85, 0), (170, 170, 170),
        (85, 85, 85), (85, 85, 255), (85, 255, 85), (85, 255, 255),
        (255, 85, 85), (255, 85, 255), (255, 255, 85), (255, 255, 255),
    )),
    "ega": ("EGA", (
        (0, 0, 0), (0, 0, 170), (0, 170, 0), (0, 170, 170),
        (170, 0, 0), (170, 0, 170), (170, 85, 0), (170, 170, 170),
        (85, 85, 85), (85, 85, 255), (85, 255, 85), (85, 255, 255),
        (255, 85, 85), (255, 85, 255), (255, 255, 85), (255, 255, 255),
    )),
    "grayscale4": ("Grayscale 4", (
        (0, 0, 0), (85, 85, 85), (170, 170, 170), (255, 255, 255),
    )),
    "arcade": ("Arcade", (
        (0, 0, 0), (255, 255, 255), (255, 0, 0), (0, 255, 0),
        (0, 0, 255), (255, 255, 0), (255, 0, 255), (0, 255, 255),
        (128, 0, 0), (0, 128, 0), (0, 0, 128), (128, 128, 0),
        (128, 0, 128), (0, 128, 128), (128, 128, 128), (192, 192, 192),
    )),
    "gameboy_green": ("Game Boy (Original)", (
        (8, 24, 32), (52, 104, 86), (136, 192, 112), (224, 248, 208),
    )),
    "sweetie16": ("Sweetie 16", (
        (26, 28, 44), (93, 39, 93), (177, 62, 83), (239, 125, 87),
        (255, 205, 117), (167, 240, 112), (56, 183, 100), (37, 113, 121),
        (41, 54, 111), (59, 93, 201), (65, 166, 246), (115, 239, 247),
        (244, 244, 244), (148, 176, 194), (86, 108, 134), (51, 60, 87),
    )),
}


def get_palette(name: str) -> tuple[Color, ...]:
    try:
        return PALETTES[name][1]
    except KeyError:
        known = ", ".join(PALETTES)
        raise UnknownPaletteError(f"unknown palette {name!r} (known: {known})") from None


def palette_info() -> list[tuple[str, str, int]]:
    """(key, display name, color count) for every preset."""
    return [(key, label, len(colors)) for key, (label, colors) in PALETTES.items()]
