from __future__ import annotations

import logging
from io import BytesIO
from typing import Optional, Tuple

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.pdfgen.canvas import Canvas

from invoicegen.core.paths import resource_path
from invoicegen.errors import FinalizationError

logger = logging.getLogger(__name__)


PAGE_SIZE = A4
PAGE_WIDTH, PAGE_HEIGHT = PAGE_SIZE

FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

# Approximate ascent fraction of font size above baseline (Helvetica/NotoSans)
TEXT_ASCENT_RATIO = 0.72
LINE_WIDTH = 0.75

TEXT_COLOR = colors.black
RULE_COLOR = colors.black
SHADE_COLOR = colors.HexColor("#E8E8E8")


def register_fonts(font_path: Optional[str] = None, bold_font_path: Optional[str] = None) -> Tuple[str, str]:
    """Return (regular_font_name, bold_font_name), registering TTF files when they exist."""
    regular, bold = FONT_REGULAR, FONT_BOLD
    for face, rel in (("InvoiceSans", font_path), ("InvoiceSans-Bold", bold_font_path)):
        if not rel:
            continue
        path = resource_path(rel)
        if not path.exists():
            logger.warning("Font file not found, using %s: %s", FONT_REGULAR, path)
            continue
        try:
            pdfmetrics.registerFont(TTFont(face, str(path)))
        except (TTFError, OSError):
            logger.warning("Could not load font %s, falling back to Helvetica", path, exc_info=True)
            continue
        if face.endswith("-Bold"):
            bold = face
        else:
            regular = face
    return regular, bold


class PdfSurface:
    """
    Drawing surface for one document, backed by a reportlab Canvas writing to memory.

    Coordinates are top-left based (y grows downwards) and converted to
    reportlab's bottom-left origin internally. Text y is the top of the line.
    """

    def __init__(
        self,
        title: str = "",
        author: str = "",
        subject: str = "",
        keywords: str = "",
        font: str = FONT_REGULAR,
        bold_font: str = FONT_BOLD,
    ) -> None:
        self._buffer = BytesIO()
        self.canvas = Canvas(self._buffer, pagesize=PAGE_SIZE)
        self.width, self.height = PAGE_SIZE
        self.font = font
        self.bold_font = bold_font
        self.page_number = 1
        self._finalized = False
        c = self.canvas
        c.setTitle(title)
        c.setAuthor(author)
        c.setSubject(subject)
        c.setKeywords(keywords)
        c.setLineWidth(LINE_WIDTH)
        c.setFillColor(TEXT_COLOR)
        c.setStrokeColor(RULE_COLOR)

    def _flip(self, y: float) -> float:
        return self.height - y

    def add_page(self) -> None:
        self.canvas.showPage()
        # showPage resets graphics state
        self.canvas.setLineWidth(LINE_WIDTH)
        self.page_number += 1

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        width: Optional[float] = None,
        align: str = "left",
        font: Optional[str] = None,
        size: float = 10,
        color=TEXT_COLOR,
    ) -> None:
        """Draw a single line of text; width/align position it inside a box starting at x."""
        text = str(text or "")
        if not text:
            return
        c = self.canvas
        c.setFont(font or self.font, size)
        c.setFillColor(color)
        baseline = self._flip(y + size * TEXT_ASCENT_RATIO)
        if width is None or align == "left":
            c.drawString(x, baseline, text)
        elif align == "center":
            c.drawCentredString(x + width / 2, baseline, text)
        elif align == "right":
            c.drawRightString(x + width, baseline, text)
        else:
            raise ValueError(f"unknown text alignment: {align!r}")

    def draw_line(self, x1: float, y1: float, x2: float, y2: float, color=RULE_COLOR) -> None:
        self.canvas.setStrokeColor(color)
        self.canvas.line(x1, self._flip(y1), x2, self._flip(y2))

    def stroke_rect(self, x: float, y: float, w: float, h: float, color=RULE_COLOR) -> None:
        self.canvas.setStrokeColor(color)
        self.canvas.rect(x, self._flip(y + h), w, h, stroke=1, fill=0)

    def fill_and_stroke_rect(self, x: float, y: float, w: float, h: float, fill=SHADE_COLOR, stroke=RULE_COLOR) -> None:
        c = self.canvas
        c.setFillColor(fill)
        c.setStrokeColor(stroke)
        c.rect(x, self._flip(y + h), w, h, stroke=1, fill=1)
        c.setFillColor(TEXT_COLOR)

    def measure_text_width(self, text: str, font: Optional[str] = None, size: float = 10) -> float:
        return pdfmetrics.stringWidth(str(text or ""), font or self.font, size)

    def finalize(self) -> bytes:
        """Close the document and return the PDF bytes. Only valid once."""
        if self._finalized:
            raise FinalizationError("surface already finalized")
        self._finalized = True
        try:
            self.canvas.save()
            return self._buffer.getvalue()
        except Exception as e:
            raise FinalizationError(f"PDF finalization failed: {e}") from e
