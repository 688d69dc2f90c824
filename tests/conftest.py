from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Any, Dict, List

import pytest
from pypdf import PdfReader

from invoicegen.pdf.surface import RULE_COLOR, TEXT_COLOR, PdfSurface


@dataclass(frozen=True)
class DrawnText:
    page: int
    text: str
    x: float
    y: float
    font: str
    size: float


@dataclass(frozen=True)
class DrawnLine:
    page: int
    x1: float
    y1: float
    x2: float
    y2: float


class RecordingSurface(PdfSurface):
    """PdfSurface that also keeps every text and line it draws."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.texts: List[DrawnText] = []
        self.lines: List[DrawnLine] = []

    def draw_text(self, text, x, y, width=None, align="left", font=None, size=10, color=TEXT_COLOR):
        if text:
            self.texts.append(DrawnText(self.page_number, str(text), x, y, font or self.font, size))
        super().draw_text(text, x, y, width=width, align=align, font=font, size=size, color=color)

    def draw_line(self, x1, y1, x2, y2, color=RULE_COLOR):
        self.lines.append(DrawnLine(self.page_number, x1, y1, x2, y2))
        super().draw_line(x1, y1, x2, y2, color=color)

    def texts_on(self, page: int) -> List[str]:
        return [t.text for t in self.texts if t.page == page]


def pdf_pages_text(pdf: bytes) -> List[str]:
    reader = PdfReader(io.BytesIO(pdf))
    return [" ".join((p.extract_text() or "").split()) for p in reader.pages]


def make_items(count: int) -> List[Dict[str, Any]]:
    """Order lines shaped like the order service's 100-item test invoice."""
    return [
        {
            "productSnapshot": {
                "name": f"Test Product {i + 1}",
                "productCode": str(1000 + i),
                "price": 50 + (i % 10),
                "discountPercentage": 80,
            },
            "quantity": 1 + (i % 3),
            "price": 50 + (i % 10),
            "discountPercentage": 80,
        }
        for i in range(count)
    ]


@pytest.fixture
def recording_surface() -> RecordingSurface:
    return RecordingSurface(title="Invoice TEST")


@pytest.fixture
def five_item_order() -> Dict[str, Any]:
    items = [
        {"productName": "Flower Pots Big", "productCode": "FP01", "quantity": 2, "price": 100, "discountPercentage": 80},
        {"productName": "Sparklers 15cm", "productCode": "SP15", "quantity": 1, "price": 250, "discountPercentage": 50},
        {"productName": "Bijili Red", "productCode": "BR10", "quantity": 3, "price": 40, "discountPercentage": 25},
        {"productName": "Ground Chakkar", "productCode": "GC02", "quantity": 4, "price": 75.5, "discountPercentage": 10},
        {"productName": "Rockets", "productCode": "RK07", "quantity": 10, "price": 12, "discountPercentage": 80},
    ]
    return {
        "docType": "invoice",
        "invoiceNumber": "INV-1001",
        "orderId": "ORD-1001",
        "generatedAt": "2025-03-12T10:15:00Z",
        "customerDetails": {
            "name": "Test Customer",
            "mobile": "9000000000",
            "address": {
                "street": "12 Gandhi Road",
                "landmark": "Near Bus Stand",
                "nearestTown": "Sivakasi",
                "district": "Virudhunagar",
                "state": "Tamil Nadu",
                "pincode": "626123",
                "country": "India",
            },
        },
        "items": items,
        # actual 992.00, discount 441.20, total 550.80, + packaging 50
        "orderSummary": {
            "totalPrice": 992,
            "totalSavings": 441.2,
            "totalOfferPrice": 550.8,
            "packagingPrice": 50,
            "totalWithPackaging": 600.8,
        },
        "paymentStatus": "paid",
        "storeDetails": {},
    }
