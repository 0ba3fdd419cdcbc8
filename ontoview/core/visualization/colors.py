"""Color scales used to shade circles by depth and by path position.

A color scale is any callable mapping a position in ``[0, 1]`` to a CSS color
string. Renderers may pass their own; the defaults here are built on
plotly's color utilities.
"""

from __future__ import annotations

from collections.abc import Callable

from plotly import colors as plotly_colors

from ontoview.core.config import Settings, get_settings

ColorScale = Callable[[float], str]


def _clamp_unit(position: float) -> float:
    return max(0.0, min(1.0, float(position)))


def named_color_scale(name: str) -> ColorScale:
    """Sample a named plotly colorscale (e.g. ``"Viridis"``)."""
    colorscale = plotly_colors.get_colorscale(name)

    def scale(position: float) -> str:
        return plotly_colors.sample_colorscale(colorscale, [_clamp_unit(position)], colortype="rgb")[0]

    return scale


def linear_color_scale(low: str, high: str) -> ColorScale:
    """Interpolate linearly in RGB between two hex colors."""
    low_rgb = plotly_colors.hex_to_rgb(low)
    high_rgb = plotly_colors.hex_to_rgb(high)

    def scale(position: float) -> str:
        rgb = plotly_colors.find_intermediate_color(low_rgb, high_rgb, _clamp_unit(position))
        return plotly_colors.label_rgb(tuple(int(round(channel)) for channel in rgb))

    return scale


def depth_color_scale(settings: Settings | None = None) -> ColorScale:
    """Default scale keyed by normalized depth."""
    settings = settings or get_settings()
    return named_color_scale(settings.depth_colorscale)


def path_color_scales(settings: Settings | None = None) -> tuple[ColorScale, ColorScale]:
    """Default (up, down) scales for the two path segments."""
    settings = settings or get_settings()
    return (
        linear_color_scale(*settings.path_up_colors),
        linear_color_scale(*settings.path_down_colors),
    )


def normalized_depth(depth: int, max_depth: int) -> float:
    """``depth / max_depth``, 0 for a single-level view."""
    if max_depth <= 0:
        return 0.0
    return _clamp_unit(depth / max_depth)
