"""Palette filters: predicates that decide whether a candidate colour is kept.

A filter takes a Color and returns True to keep it. Filters run twice during
median-cut extraction: on histogram buckets before cutting, and on the final
averaged swatches.

Available filters:
  avoid-red-black-white   drop near-black (L <= 5%), near-white (L >= 95%)
                          and the skin-tone band (hue 10-37, S <= 0.82)
"""

from collections.abc import Callable, Iterable

from palette_picker.core.colour import to_hsl
from palette_picker.core.types import Color

BLACK_MAX_LIGHTNESS = 0.05
WHITE_MIN_LIGHTNESS = 0.95
RED_I_LINE_HUE = (10.0, 37.0)
RED_I_LINE_MAX_SATURATION = 0.82


def _is_black(hsl: tuple[float, float, float]) -> bool:
    return hsl[2] <= BLACK_MAX_LIGHTNESS


def _is_white(hsl: tuple[float, float, float]) -> bool:
    return hsl[2] >= WHITE_MIN_LIGHTNESS


def _is_near_red_i_line(hsl: tuple[float, float, float]) -> bool:
    lo, hi = RED_I_LINE_HUE
    return lo <= hsl[0] <= hi and hsl[1] <= RED_I_LINE_MAX_SATURATION


def avoid_red_black_white(color: Color) -> bool:
    hsl = to_hsl(color)
    return not (_is_black(hsl) or _is_white(hsl) or _is_near_red_i_line(hsl))


FILTERS: dict[str, Callable[[Color], bool]] = {
    'avoid-red-black-white': avoid_red_black_white,
}


def resolve(names: Iterable[str]) -> list[Callable[[Color], bool]]:
    """Map filter names to predicates. Unknown names raise KeyError."""
    result = []
    for name in names:
        if name not in FILTERS:
            raise KeyError(f'Unknown filter: {name}. Available: {", ".join(sorted(FILTERS))}')
        result.append(FILTERS[name])
    return result


def keep(color: Color, filters: Iterable[Callable[[Color], bool]]) -> bool:
    """True if every filter accepts the colour."""
    return all(f(color) for f in filters)
