from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, List, Optional, Tuple

from invoicegen.core.currency import fmt_date, fmt_money
from invoicegen.core.numbering import amount_in_words
from invoicegen.core.settings import Settings
from invoicegen.data.models import InvoiceDocument, RunningTotals, SummaryFigures
from invoicegen.errors import InvoiceRenderError, RenderError
from invoicegen.pdf.pagination import ITEMS_PER_PAGE, PaginationController
from invoicegen.pdf.surface import PdfSurface, register_fonts
from invoicegen.pdf.table_layout import (
    CONTENT_LEFT,
    CONTENT_WIDTH,
    LayoutContext,
    draw_totals_row,
    fit_text,
)

logger = logging.getLogger(__name__)


# ===== Layout constants (tweak here) =====
# Outer border: same rectangle on every page so the footer never drifts
BORDER_TOP = 15.0
BORDER_HEIGHT = 780.0
BORDER_BOTTOM = BORDER_TOP + BORDER_HEIGHT
BORDER_LEFT = CONTENT_LEFT
BORDER_RIGHT = CONTENT_LEFT + CONTENT_WIDTH

# Brand header
TITLE_Y = 25.0
TITLE_FONT_SIZE = 18
TAGLINE_Y = 50.0
TAGLINE_FONT_SIZE = 12
CONTACT_RULE_Y = 70.0
CONTACT_Y = 78.0
CONTACT_FONT_SIZE = 11
INFO_TOP_Y = 98.0

# Customer / invoice info block (fixed height: two address lines are always reserved)
INFO_PAD_TOP = 5.0
INFO_LINE_GAP = 15.0
ADDRESS_LINE_GAP = 12.0
INFO_BLOCK_HEIGHT = 67.0
LABEL_FONT_SIZE = 11
VALUE_FONT_SIZE = 10
CUSTOMER_LABEL_W = 50.0
SPLIT_GAP = 20.0         # customer text stops this far before the split line
INVOICE_LABEL_W = 60.0
INVOICE_INSET = 8.0

# Footer summary
SUMMARY_PAD_TOP = 5.0
SUMMARY_ROW_H = 15.0
SUMMARY_LABEL_W = 75.0
SUMMARY_FONT_SIZE = 9
AMOUNT_FONT_SIZE = 10
WORDS_TITLE_SIZE = 10
WORDS_FONT_SIZE = 9
WORDS_LINE_GAP = 11.0
WORDS_INSET = 8.0
CLOSING_GAP = 8.0
THANK_YOU_SIZE = 9
STORE_ADDRESS_SIZE = 8


# ===== Helpers =====
def wrap_text(surface: PdfSurface, text: str, max_width: float, font: Optional[str], font_size: float) -> List[str]:
    """Wrap text into at most two lines within max_width, truncating with ellipsis.

    - Prefer 1 line; allow 2 lines max.
    - If content overflows the second line, it is cut and ends with an ellipsis.
    """
    s = " ".join(str(text or "").split())
    if not s:
        return [""]
    width = surface.measure_text_width

    def fit_line(words: List[str]) -> Tuple[str, List[str]]:
        line_words: List[str] = []
        for i, w in enumerate(words):
            trial = " ".join(line_words + [w])
            if width(trial, font, font_size) <= max_width or not line_words:
                line_words.append(w)
            else:
                return " ".join(line_words), words[i:]
        return " ".join(line_words), []

    line1, rem = fit_line(s.split(" "))
    if not rem:
        return [fit_text(surface, line1, max_width, font, font_size)]
    line2, rem2 = fit_line(rem)
    if rem2:
        line2 = line2 + " " + " ".join(rem2)
    return [
        fit_text(surface, line1, max_width, font, font_size),
        fit_text(surface, line2, max_width, font, font_size),
    ]


def fold_address(
    line1: str,
    line2: str,
    max_width: float,
    measure: Callable[[str], float],
) -> Tuple[str, str]:
    """Keep the address on two lines: words of line 1 that do not fit move to the front of line 2."""
    if not line1 or measure(line1) <= max_width:
        return line1, line2
    words = line1.split(" ")
    fitting = ""
    remaining = ""
    for i, w in enumerate(words):
        trial = f"{fitting} {w}" if fitting else w
        if measure(trial) <= max_width:
            fitting = trial
        else:
            remaining = " ".join(words[i:])
            break
    return fitting, ", ".join(p for p in (remaining, line2) if p)


def _customer_value_width(split_x: float) -> float:
    section = split_x - BORDER_LEFT - SPLIT_GAP
    return section - CUSTOMER_LABEL_W - 10


# ===== Page header (every page) =====
def draw_page_header(
    surface: PdfSurface,
    ctx: LayoutContext,
    doc: InvoiceDocument,
    settings: Settings,
) -> Tuple[LayoutContext, float]:
    """
    Draw the repeating header: border, brand, contact row, customer block,
    invoice block and the rules framing them.

    Returns the context positioned at the table header and the y of the rule
    above the customer/invoice blocks.
    """
    font, bold = surface.font, surface.bold_font
    left, right = BORDER_LEFT, BORDER_RIGHT
    width = right - left
    split_x = ctx.geometry.split_x

    surface.stroke_rect(left, BORDER_TOP, width, BORDER_HEIGHT)

    surface.draw_text(settings.store_name, left + 10, TITLE_Y, width=width - 20, align="center", font=bold, size=TITLE_FONT_SIZE)
    surface.draw_text(settings.tagline, left + 10, TAGLINE_Y, width=width - 20, align="center", font=font, size=TAGLINE_FONT_SIZE)

    surface.draw_line(left, CONTACT_RULE_Y, right, CONTACT_RULE_Y)
    if settings.whatsapp:
        surface.draw_text(f"WhatsApp: {settings.whatsapp}", left + 15, CONTACT_Y, font=bold, size=CONTACT_FONT_SIZE)
    if settings.email:
        surface.draw_text(f"Email: {settings.email}", left + 15, CONTACT_Y, width=width - 30, align="right", font=bold, size=CONTACT_FONT_SIZE)
    surface.draw_line(left, INFO_TOP_Y, right, INFO_TOP_Y)

    # Left: customer
    customer = doc.customer
    label_x = left + 10
    value_x = label_x + CUSTOMER_LABEL_W
    value_w = _customer_value_width(split_x)
    y = INFO_TOP_Y + INFO_PAD_TOP

    surface.draw_text("Name:", label_x, y, font=font, size=LABEL_FONT_SIZE)
    surface.draw_text(fit_text(surface, customer.display_name, value_w, bold, LABEL_FONT_SIZE), value_x, y, font=bold, size=LABEL_FONT_SIZE)
    y += INFO_LINE_GAP

    surface.draw_text("Address:", label_x, y, font=font, size=LABEL_FONT_SIZE)
    street, admin = customer.address_lines()
    line1, line2 = fold_address(street, admin, value_w, lambda s: surface.measure_text_width(s, font, VALUE_FONT_SIZE))
    surface.draw_text(fit_text(surface, line1, value_w, font, VALUE_FONT_SIZE), value_x, y, font=font, size=VALUE_FONT_SIZE)
    surface.draw_text(fit_text(surface, line2, value_w, font, VALUE_FONT_SIZE), value_x, y + ADDRESS_LINE_GAP, font=font, size=VALUE_FONT_SIZE)
    y += ADDRESS_LINE_GAP + INFO_LINE_GAP

    surface.draw_text("Contact:", label_x, y, font=font, size=LABEL_FONT_SIZE)
    surface.draw_text(fit_text(surface, customer.contact_line, value_w, font, VALUE_FONT_SIZE), value_x, y, font=font, size=VALUE_FONT_SIZE)

    # Right: document number, date, page position
    inv_x = split_x + INVOICE_INSET
    inv_value_x = inv_x + INVOICE_LABEL_W
    y = INFO_TOP_Y + INFO_PAD_TOP
    surface.draw_text(f"{doc.title} No :", inv_x, y, font=font, size=LABEL_FONT_SIZE)
    if not doc.is_estimate:
        surface.draw_text(doc.invoice_number, inv_value_x, y, font=bold, size=LABEL_FONT_SIZE)
    y += INFO_LINE_GAP
    surface.draw_text("Date :", inv_x, y, font=font, size=LABEL_FONT_SIZE)
    surface.draw_text(fmt_date(doc.generated_at), inv_value_x, y, font=bold, size=LABEL_FONT_SIZE)
    y += INFO_LINE_GAP
    surface.draw_text(f"Page {ctx.page} of {ctx.total_pages}", inv_x, y, font=font, size=VALUE_FONT_SIZE)

    info_bottom = INFO_TOP_Y + INFO_BLOCK_HEIGHT
    surface.draw_line(split_x, INFO_TOP_Y, split_x, info_bottom)
    surface.draw_line(left, info_bottom, right, info_bottom)
    return ctx.at(info_bottom), INFO_TOP_Y


# ===== Footer (last page only) =====
def draw_footer_summary(
    surface: PdfSurface,
    ctx: LayoutContext,
    totals: RunningTotals,
    doc: InvoiceDocument,
    settings: Settings,
) -> LayoutContext:
    """Totals row, amount in words, summary figures and the closing lines."""
    font, bold = surface.font, surface.bold_font
    ctx = draw_totals_row(surface, ctx, totals)
    top = ctx.y
    split_x = ctx.geometry.split_x
    figures = SummaryFigures.resolve(doc.order_summary, totals)

    # One continuous vertical rule: header divider, table column line, footer divider
    surface.draw_line(split_x, top, split_x, BORDER_BOTTOM)

    # Left half: amount in words
    words_x = BORDER_LEFT + WORDS_INSET
    words_w = split_x - BORDER_LEFT - 2 * WORDS_INSET
    surface.draw_text("Amount in Words:", words_x, top + SUMMARY_PAD_TOP, font=bold, size=WORDS_TITLE_SIZE)
    y = top + SUMMARY_PAD_TOP + SUMMARY_ROW_H
    for line in wrap_text(surface, amount_in_words(figures.final_amount), words_w, font, WORDS_FONT_SIZE):
        surface.draw_text(line, words_x, y, width=words_w, align="left", font=font, size=WORDS_FONT_SIZE)
        y += WORDS_LINE_GAP

    # Right half: breakdown
    label_x = split_x + INVOICE_INSET
    value_x = label_x + SUMMARY_LABEL_W
    value_w = BORDER_RIGHT - INVOICE_INSET - value_x
    y = top + SUMMARY_PAD_TOP
    for label, value in (
        ("Actual Total :", figures.actual_total),
        ("Discount Total:", figures.discount_total),
        ("Sub Total :", figures.sub_total),
        ("Packaging :", figures.packaging),
    ):
        surface.draw_text(label, label_x, y, font=font, size=SUMMARY_FONT_SIZE)
        surface.draw_text(f"Rs. {fmt_money(value)}", value_x, y, width=value_w, align="right", font=font, size=SUMMARY_FONT_SIZE)
        y += SUMMARY_ROW_H
    y += 5
    surface.draw_text("AMOUNT :", label_x, y, font=bold, size=AMOUNT_FONT_SIZE)
    surface.draw_text(f"Rs. {fmt_money(figures.final_amount)}", value_x, y, width=value_w, align="right", font=bold, size=AMOUNT_FONT_SIZE)

    # Closing lines sit under the bordered box
    width = BORDER_RIGHT - BORDER_LEFT
    y = BORDER_BOTTOM + CLOSING_GAP
    surface.draw_text(settings.thank_you, BORDER_LEFT, y, width=width, align="center", font=bold, size=THANK_YOU_SIZE)
    y += 12
    surface.draw_text(settings.store_address, BORDER_LEFT, y, width=width, align="center", font=font, size=STORE_ADDRESS_SIZE)
    return ctx.at(y + 12)


# ===== Public API =====
@dataclass(frozen=True)
class RenderResult:
    ok: bool
    pdf: Optional[bytes] = None
    page_count: int = 0
    error: Optional[str] = None

    @classmethod
    def success(cls, pdf: bytes, page_count: int) -> "RenderResult":
        return cls(ok=True, pdf=pdf, page_count=page_count)

    @classmethod
    def failure(cls, message: str) -> "RenderResult":
        return cls(ok=False, error=message)


def new_surface(doc: InvoiceDocument, settings: Settings) -> PdfSurface:
    font, bold = register_fonts(settings.font_path, settings.bold_font_path)
    kind = "estimate, quotation" if doc.is_estimate else "invoice"
    keywords = ", ".join(k for k in (kind, settings.keywords) if k)
    return PdfSurface(
        title=f"{doc.title} {doc.invoice_number}",
        author=settings.author,
        subject=doc.title,
        keywords=keywords,
        font=font,
        bold_font=bold,
    )


def _render(doc: InvoiceDocument, settings: Settings, surface: PdfSurface) -> bytes:
    logger.info("Rendering %s %s (%d items)", doc.doc_type, doc.invoice_number, len(doc.items))
    try:
        controller = PaginationController(
            surface,
            doc.rows(),
            draw_header=partial(draw_page_header, doc=doc, settings=settings),
            draw_footer=partial(draw_footer_summary, doc=doc, settings=settings),
            capacity=ITEMS_PER_PAGE,
        )
        controller.run()
    except InvoiceRenderError:
        raise
    except Exception as e:
        raise RenderError(f"PDF generation failed: {e}") from e
    pdf = surface.finalize()
    logger.info("%s PDF generated: %d page(s), %d bytes", doc.title, controller.total_pages, len(pdf))
    return pdf


def build_invoice_pdf_bytes(data: Any, settings: Optional[Settings] = None) -> bytes:
    """Render an invoice/estimate and return the PDF bytes.

    data is an InvoiceDocument or an order payload dict:
    {
      "docType"?: "invoice" | "estimate",
      "invoiceNumber": str, "orderId": str, "generatedAt": datetime|str,
      "customerDetails": {"name", "mobile", "deliveryContact"?, "address"?: {...}},
      "items": [{"productName"|"productSnapshot"|"productId", "quantity", "price", "discountPercentage"}, ...],
      "orderSummary": {"totalPrice", "totalSavings", "totalOfferPrice", "packagingPrice", "totalWithPackaging"}
    }

    Raises RenderError or FinalizationError.
    """
    doc = InvoiceDocument.coerce(data)
    settings = settings or Settings()
    return _render(doc, settings, new_surface(doc, settings))


def render_invoice(
    data: Any,
    settings: Optional[Settings] = None,
    surface: Optional[PdfSurface] = None,
) -> RenderResult:
    """Render and report the outcome instead of raising."""
    try:
        doc = InvoiceDocument.coerce(data)
    except (TypeError, ValueError, AttributeError) as e:
        logger.exception("Invoice data could not be read")
        return RenderResult.failure(f"Invalid invoice data: {e}")
    settings = settings or Settings()
    surface = surface or new_surface(doc, settings)
    try:
        pdf = _render(doc, settings, surface)
    except InvoiceRenderError as e:
        logger.exception("Invoice PDF generation failed for %s", doc.invoice_number)
        return RenderResult.failure(str(e))
    return RenderResult.success(pdf, surface.page_number)


async def render_invoice_async(data: Any, settings: Optional[Settings] = None) -> RenderResult:
    """Async entry point: runs the synchronous render in a worker thread."""
    return await asyncio.to_thread(render_invoice, data, settings)
