# invoicegen/pdf/table_layout.py
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from invoicegen.core.currency import fmt_money, fmt_qty
from invoicegen.data.models import RowValues, RunningTotals
from invoicegen.pdf.surface import PAGE_WIDTH, SHADE_COLOR, PdfSurface

MARGIN = 15.0
CONTENT_LEFT = MARGIN
CONTENT_WIDTH = PAGE_WIDTH - 2 * MARGIN

ROW_HEIGHT = 20.0
TEXT_OFFSET = 6.0   # text top inside a row
CELL_PAD = 2.0      # horizontal inset of cell text

HEADER_FONT_SIZE = 10
BODY_FONT_SIZE = 9
TOTALS_FONT_SIZE = 10

# (key, label, width, align); Product Name absorbs the remainder of the content width
BASE_COLUMNS: Tuple[Tuple[str, str, float, str], ...] = (
    ("sno", "S.No", 35, "center"),
    ("code", "Code", 50, "center"),
    ("name", "Product Name", 120, "left"),
    ("quantity", "Quantity", 50, "center"),
    ("rate", "Rate", 50, "right"),
    ("actual", "Actual", 60, "right"),
    ("discount_pct", "Disc %", 40, "center"),
    ("discount_value", "Discount", 60, "right"),
    ("total", "Total", 60, "right"),
)
FLEX_COLUMN = "name"
# Header, table and footer halves all split on the left edge of this column
SPLIT_COLUMN = "discount_pct"


class ColumnSpec(NamedTuple):
    key: str
    label: str
    width: float
    align: str


class Cell(NamedTuple):
    text: str = ""
    align: Optional[str] = None  # None: column default


@dataclass(frozen=True)
class ColumnGeometry:
    left: float
    columns: Tuple[ColumnSpec, ...]

    @classmethod
    def compute(cls, left: float = CONTENT_LEFT, content_width: float = CONTENT_WIDTH) -> "ColumnGeometry":
        fixed = sum(w for key, _label, w, _align in BASE_COLUMNS if key != FLEX_COLUMN)
        base_flex = next(w for key, _label, w, _align in BASE_COLUMNS if key == FLEX_COLUMN)
        flex = max(base_flex, content_width - fixed)
        columns = tuple(
            ColumnSpec(key, label, flex if key == FLEX_COLUMN else float(w), align)
            for key, label, w, align in BASE_COLUMNS
        )
        return cls(left=float(left), columns=columns)

    @property
    def width(self) -> float:
        return sum(c.width for c in self.columns)

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def offsets(self) -> Tuple[float, ...]:
        """Left x of every column."""
        xs: List[float] = []
        x = self.left
        for col in self.columns:
            xs.append(x)
            x += col.width
        return tuple(xs)

    @property
    def dividers(self) -> Tuple[float, ...]:
        """x of the vertical rule after each column except the last."""
        return self.offsets[1:]

    @property
    def split_x(self) -> float:
        return self.x_of(SPLIT_COLUMN)

    def x_of(self, key: str) -> float:
        for col, x in zip(self.columns, self.offsets):
            if col.key == key:
                return x
        raise KeyError(key)

    def widths(self) -> Dict[str, float]:
        return {c.key: c.width for c in self.columns}


@dataclass(frozen=True)
class LayoutContext:
    """Where the next draw call goes: vertical cursor, page position and column geometry."""

    y: float
    page: int
    total_pages: int
    geometry: ColumnGeometry

    def at(self, y: float) -> "LayoutContext":
        return replace(self, y=y)

    def next_page(self, y: float) -> "LayoutContext":
        return replace(self, page=self.page + 1, y=y)


def fit_text(surface: PdfSurface, text: str, max_width: float, font: Optional[str], size: float) -> str:
    """Trim text with an ellipsis so it fits max_width on one line."""
    text = " ".join(str(text or "").split())
    width = surface.measure_text_width
    if width(text, font, size) <= max_width:
        return text
    s = text
    while s and width(s + "…", font, size) > max_width:
        s = s[:-1]
    return (s.rstrip() + "…") if s else ""


def draw_row(
    surface: PdfSurface,
    geometry: ColumnGeometry,
    y: float,
    cells: Sequence[Cell],
    font: Optional[str] = None,
    size: float = BODY_FONT_SIZE,
    fill=None,
    height: float = ROW_HEIGHT,
) -> float:
    """
    Draw one table row at y and return the y below it.

    Borders compose from per-row strokes: an optional shaded rectangle, the
    vertical rule after every column but the last, and the bottom rule. The
    table's outer left/right edges are the page border.
    """
    if fill is not None:
        surface.fill_and_stroke_rect(geometry.left, y, geometry.width, height, fill=fill)
    for col, x, cell in zip(geometry.columns, geometry.offsets, cells):
        if not cell.text:
            continue
        inner = col.width - 2 * CELL_PAD
        surface.draw_text(
            fit_text(surface, cell.text, inner, font, size),
            x + CELL_PAD,
            y + TEXT_OFFSET,
            width=inner,
            align=cell.align or col.align,
            font=font,
            size=size,
        )
    for x in geometry.dividers:
        surface.draw_line(x, y, x, y + height)
    surface.draw_line(geometry.left, y + height, geometry.right, y + height)
    return y + height


def draw_table_header(surface: PdfSurface, ctx: LayoutContext) -> Tuple[LayoutContext, Dict[str, float]]:
    """Shaded label row; returns the advanced context and the column-width map."""
    geometry = ctx.geometry
    cells = [Cell(col.label, "center") for col in geometry.columns]
    y = draw_row(surface, geometry, ctx.y, cells, font=surface.bold_font, size=HEADER_FONT_SIZE, fill=SHADE_COLOR)
    return ctx.at(y), geometry.widths()


def item_cells(row: RowValues) -> List[Cell]:
    return [
        Cell(str(row.sno)),
        Cell(row.code),
        Cell(row.name),
        Cell(fmt_qty(row.quantity)),
        Cell(fmt_money(row.rate)),
        Cell(fmt_money(row.actual)),
        Cell(f"{fmt_qty(row.discount_pct)}%"),
        Cell(fmt_money(row.discount_value)),
        Cell(fmt_money(row.total)),
    ]


def draw_item_row(surface: PdfSurface, ctx: LayoutContext, row: RowValues) -> LayoutContext:
    y = draw_row(surface, ctx.geometry, ctx.y, item_cells(row), font=surface.font, size=BODY_FONT_SIZE)
    return ctx.at(y)


def draw_padding_rows(surface: PdfSurface, ctx: LayoutContext, count: int) -> LayoutContext:
    """Blank rows with full dividers so the table keeps its height."""
    y = ctx.y
    blank = [Cell()] * len(ctx.geometry.columns)
    for _ in range(max(0, count)):
        y = draw_row(surface, ctx.geometry, y, blank)
    return ctx.at(y)


def totals_cells(totals: RunningTotals) -> List[Cell]:
    return [
        Cell(),
        Cell(),
        Cell("TOTAL:", "right"),
        Cell(fmt_qty(totals.quantity)),
        Cell(),
        Cell(fmt_money(totals.actual)),
        Cell(),
        Cell(fmt_money(totals.discount)),
        Cell(fmt_money(totals.total)),
    ]


def draw_totals_row(surface: PdfSurface, ctx: LayoutContext, totals: RunningTotals) -> LayoutContext:
    y = draw_row(
        surface,
        ctx.geometry,
        ctx.y,
        totals_cells(totals),
        font=surface.bold_font,
        size=TOTALS_FONT_SIZE,
        fill=SHADE_COLOR,
    )
    return ctx.at(y)
