from __future__ import annotations

from datetime import datetime
from pathlib import Path
import sys

# Ensure we can import the invoicegen package when running this script directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from invoicegen.core.settings import load_settings
from invoicegen.pdf.pdf_draw import build_invoice_pdf_bytes


def _items(count: int = 100) -> list[dict]:
    # Same shape as the order service's 100-item load-test invoice
    return [
        {
            "productSnapshot": {"name": f"Test Product {i + 1}", "productCode": str(1000 + i)},
            "quantity": 1 + (i % 3),
            "price": 50 + (i % 10),
            "discountPercentage": 80,
        }
        for i in range(count)
    ]


def main() -> None:
    settings = load_settings()
    data = {
        "docType": "invoice",
        "invoiceNumber": "SAMPLE-100",
        "orderId": "ORD-SAMPLE",
        "generatedAt": datetime.now(),
        "customerDetails": {
            "name": "Sample Customer",
            "mobile": "9000000000",
            "deliveryContact": "9111111111",
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
        "items": _items(),
        "orderSummary": {"packagingPrice": 150},
    }

    # Write under repository assets/samples to avoid permission or file-lock issues
    out_dir = ROOT / "assets" / "samples"
    out_dir.mkdir(parents=True, exist_ok=True)
    out_pdf = out_dir / "SAMPLE_100_ITEMS.pdf"

    pdf = build_invoice_pdf_bytes(data, settings)
    try:
        out_pdf.write_bytes(pdf)
    except PermissionError:
        # If the file is open/locked, write to a timestamped file instead
        ts = datetime.now().strftime("%Y%m%d-%H%M%S")
        out_pdf = out_dir / f"SAMPLE_100_ITEMS-{ts}.pdf"
        out_pdf.write_bytes(pdf)
    print(f"Wrote sample to: {out_pdf}")


if __name__ == "__main__":
    main()
