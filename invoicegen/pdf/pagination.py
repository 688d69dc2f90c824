from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from invoicegen.data.models import RowValues, RunningTotals
from invoicegen.pdf.surface import PdfSurface
from invoicegen.pdf.table_layout import (
    ColumnGeometry,
    LayoutContext,
    draw_item_row,
    draw_padding_rows,
    draw_table_header,
)

logger = logging.getLogger(__name__)

ITEMS_PER_PAGE = 25

HeaderRenderer = Callable[[PdfSurface, LayoutContext], Tuple[LayoutContext, float]]
FooterRenderer = Callable[[PdfSurface, LayoutContext, RunningTotals], LayoutContext]


def page_count(item_count: int, capacity: int = ITEMS_PER_PAGE) -> int:
    """1 page up to capacity items, otherwise ceil(items / capacity)."""
    if capacity < 1:
        raise ValueError("page capacity must be at least 1")
    if item_count <= capacity:
        return 1
    return math.ceil(item_count / capacity)


def needs_page_break(on_page: int, remaining: int, capacity: int = ITEMS_PER_PAGE) -> bool:
    """Break when the current page is full and at least one item is still waiting."""
    return on_page >= capacity and remaining > 0


@dataclass(frozen=True)
class PageSlice:
    index: int          # 1-based
    total: int
    start: int
    stop: int
    padding_rows: int

    @property
    def is_first(self) -> bool:
        return self.index == 1

    @property
    def is_last(self) -> bool:
        return self.index == self.total

    @property
    def item_count(self) -> int:
        return self.stop - self.start


def plan_pages(item_count: int, capacity: int = ITEMS_PER_PAGE) -> List[PageSlice]:
    """Split item positions into pages; every page is padded up to capacity rows."""
    total = page_count(item_count, capacity)
    bounds: List[Tuple[int, int]] = []
    start = on_page = 0
    for i in range(item_count):
        if needs_page_break(on_page, item_count - i, capacity):
            bounds.append((start, i))
            start, on_page = i, 0
        on_page += 1
    bounds.append((start, item_count))
    return [
        PageSlice(index=n, total=total, start=a, stop=b, padding_rows=capacity - (b - a))
        for n, (a, b) in enumerate(bounds, 1)
    ]


class PageState(enum.Enum):
    START = "start"
    PAGE_BREAK = "page_break"
    PAGE_HEADER = "page_header"
    ROWS = "rows"
    PADDING = "padding"
    FOOTER = "footer"
    DONE = "done"


class PaginationController:
    """
    Drives one document through its pages:

    START -> PAGE_HEADER -> ROWS -> PADDING -> (PAGE_BREAK -> PAGE_HEADER ...) -> FOOTER -> DONE

    Running totals cover every item across all pages; the footer renderer
    only runs on the last page.
    """

    def __init__(
        self,
        surface: PdfSurface,
        rows: Sequence[RowValues],
        draw_header: HeaderRenderer,
        draw_footer: FooterRenderer,
        capacity: int = ITEMS_PER_PAGE,
        geometry: Optional[ColumnGeometry] = None,
    ) -> None:
        self.surface = surface
        self.rows = list(rows)
        self.draw_header = draw_header
        self.draw_footer = draw_footer
        self.capacity = capacity
        self.geometry = geometry or ColumnGeometry.compute()
        self.pages = plan_pages(len(self.rows), capacity)
        self.state = PageState.START
        self.totals = RunningTotals()

    @property
    def total_pages(self) -> int:
        return len(self.pages)

    def _enter(self, state: PageState, page: int) -> None:
        logger.debug("page %d/%d: %s -> %s", page, self.total_pages, self.state.value, state.value)
        self.state = state

    def run(self) -> RunningTotals:
        if self.state is not PageState.START:
            raise RuntimeError("pagination already ran")
        ctx = LayoutContext(y=0.0, page=1, total_pages=self.total_pages, geometry=self.geometry)
        for page in self.pages:
            if not page.is_first:
                self._enter(PageState.PAGE_BREAK, page.index)
                self.surface.add_page()
                ctx = ctx.next_page(0.0)
            self._enter(PageState.PAGE_HEADER, page.index)
            ctx, _info_top = self.draw_header(self.surface, ctx)
            ctx, _widths = draw_table_header(self.surface, ctx)

            self._enter(PageState.ROWS, page.index)
            for row in self.rows[page.start:page.stop]:
                ctx = draw_item_row(self.surface, ctx, row)
                self.totals.add(row)

            self._enter(PageState.PADDING, page.index)
            ctx = draw_padding_rows(self.surface, ctx, page.padding_rows)

            if page.is_last:
                self._enter(PageState.FOOTER, page.index)
                ctx = self.draw_footer(self.surface, ctx, self.totals)
        self._enter(PageState.DONE, self.total_pages)
        return self.totals
