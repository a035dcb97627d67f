"""Dashboard geometry.

Everything here is a pure function of the interface count, the drawing
area and the rate peaks; nothing is cached between renders.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from myipmon.units import AXIS_UNITS, pick_unit

HEADER_HEIGHT = 3
PUBLIC_IP_HEIGHT = 3
DEBUG_HEIGHT = 7
FOOTER_HEIGHT = 3
CHART_HEIGHT = 7

SINGLE_COLUMN_MAX = 2
GRID_COLUMNS = 2

AXIS_HEADROOM = 1.2
TICK_FRACTIONS = (0.0, 0.25, 0.5, 0.75, 1.0)


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height


def split_even(total: int, parts: int) -> list[int]:
    """Split ``total`` into ``parts`` near-equal sizes; earlier parts get the remainder."""
    if parts <= 0:
        return []
    base, extra = divmod(max(0, total), parts)
    return [base + (1 if i < extra else 0) for i in range(parts)]


def stack(area: Rect, heights: list[int]) -> list[Rect]:
    """Lay rectangles top to bottom; heights are clipped to what is left."""
    rects = []
    y = area.y
    bottom = area.y + area.height
    for h in heights:
        h = max(0, min(h, bottom - y))
        rects.append(Rect(area.x, y, area.width, h))
        y += h
    return rects


# ---- screen regions ----


@dataclass(frozen=True)
class ScreenRegions:
    header: Rect
    public_ip: Rect
    interfaces: Rect
    debug: Rect | None
    footer: Rect


def screen_regions(area: Rect, show_debug: bool = True) -> ScreenRegions:
    """Fixed-height bars around a flexible interface region."""
    fixed = HEADER_HEIGHT + PUBLIC_IP_HEIGHT + FOOTER_HEIGHT + (DEBUG_HEIGHT if show_debug else 0)
    middle = max(0, area.height - fixed)
    heights = [HEADER_HEIGHT, PUBLIC_IP_HEIGHT, middle]
    if show_debug:
        heights.append(DEBUG_HEIGHT)
    heights.append(FOOTER_HEIGHT)
    rects = stack(area, heights)
    return ScreenRegions(
        header=rects[0],
        public_ip=rects[1],
        interfaces=rects[2],
        debug=rects[3] if show_debug else None,
        footer=rects[-1],
    )


# ---- interface grid ----


@dataclass(frozen=True)
class Cell:
    """One grid slot. ``index`` is the interface position, None for an unused slot."""

    row: int
    column: int
    rect: Rect
    index: int | None


@dataclass(frozen=True)
class GridLayout:
    columns: int
    rows: tuple[tuple[Cell, ...], ...]

    @property
    def cells(self) -> list[Cell]:
        return [cell for row in self.rows for cell in row]

    @property
    def populated(self) -> list[Cell]:
        return [cell for cell in self.cells if cell.index is not None]


def grid_shape(count: int) -> tuple[int, int]:
    """Return (rows, columns) for ``count`` interfaces."""
    if count <= 0:
        return 0, 0
    if count <= SINGLE_COLUMN_MAX:
        return count, 1
    return math.ceil(count / GRID_COLUMNS), GRID_COLUMNS


def compute_layout(count: int, area: Rect) -> GridLayout:
    """Partition ``area`` for ``count`` interfaces.

    Up to two interfaces stack in one column with equal heights. More
    than two fill a two-column grid row-major; with an odd count the last
    slot stays empty.
    """
    n_rows, n_cols = grid_shape(count)
    heights = split_even(area.height, n_rows)
    widths = split_even(area.width, n_cols)
    rows = []
    index = 0
    y = area.y
    for r, h in enumerate(heights):
        x = area.x
        row = []
        for c, w in enumerate(widths):
            row.append(Cell(r, c, Rect(x, y, w, h), index if index < count else None))
            index += 1
            x += w
        rows.append(tuple(row))
        y += h
    return GridLayout(columns=n_cols, rows=tuple(rows))


def split_cell(rect: Rect) -> tuple[Rect, Rect]:
    """Split a cell into (info table, chart strip); the strip sits at the bottom."""
    chart_h = min(CHART_HEIGHT, rect.height)
    table, chart = stack(rect, [rect.height - chart_h, chart_h])
    return table, chart


# ---- chart axis ----


@dataclass(frozen=True)
class ChartAxis:
    """Y axis for one interface chart, in display units.

    ``upper_bound`` is in bytes per second; ``scaled_max`` and ``ticks``
    are already divided by ``divisor``.
    """

    upper_bound: float
    unit: str
    divisor: int
    scaled_max: float
    ticks: tuple[float, ...]
    labels: tuple[str, ...]

    def scale(self, values, rate_scale: float = 1.0) -> list[float]:
        return [v * rate_scale / self.divisor for v in values]


def chart_axis(peak_rx: float, peak_tx: float, rate_scale: float = 1.0) -> ChartAxis:
    """Axis with 20% headroom over the larger peak; unit re-picked on every call.

    ``rate_scale`` converts per-tick samples into per-second values.
    """
    upper = max(peak_rx, peak_tx) * AXIS_HEADROOM * rate_scale
    unit, divisor = pick_unit(upper, AXIS_UNITS)
    scaled = upper / divisor
    ticks = tuple(scaled * f for f in TICK_FRACTIONS)
    labels = tuple("0" if f == 0 else f"{t:.1f}" for f, t in zip(TICK_FRACTIONS, ticks))
    return ChartAxis(
        upper_bound=upper,
        unit=unit,
        divisor=divisor,
        scaled_max=scaled,
        ticks=ticks,
        labels=labels,
    )


def x_bounds(history_size: int) -> tuple[float, float]:
    """The X domain is the full window, zero-fill included."""
    return 0.0, float(history_size - 1)
