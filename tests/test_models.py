from __future__ import annotations

import datetime as dt
from decimal import Decimal

from invoicegen.data.models import (
    DEFAULT_DISCOUNT_PCT,
    DEFAULT_RATE,
    Customer,
    InvoiceDocument,
    LineItem,
    OrderSummary,
    RunningTotals,
    SummaryFigures,
)


def test_row_values_are_derived_from_quantity_rate_and_discount() -> None:
    row = LineItem(product_name="Rockets", product_code="RK", quantity=4, price=75.5, discount_percentage=10).priced(0)
    assert row.sno == 1
    assert row.actual == Decimal("302.0")
    assert row.discount_value == Decimal("30.2")
    assert row.total == Decimal("271.8")


def test_missing_pricing_uses_named_defaults() -> None:
    row = LineItem().priced(4)
    assert row.rate == DEFAULT_RATE
    assert row.discount_pct == DEFAULT_DISCOUNT_PCT
    assert row.quantity == 1
    assert row.name == "Product 5"
    assert row.code == "104"


def test_zero_discount_counts_as_missing() -> None:
    row = LineItem.from_dict({"quantity": 1, "price": 100, "discountPercentage": 0}).priced(0)
    assert row.discount_pct == DEFAULT_DISCOUNT_PCT
    assert row.total == Decimal("20")


def test_zero_price_falls_through_to_snapshot() -> None:
    item = LineItem.from_dict({"price": 0, "productSnapshot": {"price": 45}, "productId": {"price": 30}})
    assert item.price == Decimal("45")
    assert LineItem(price=0).priced(0).rate == DEFAULT_RATE


def test_item_fields_fall_back_to_snapshot_and_product() -> None:
    item = LineItem.from_dict(
        {
            "quantity": 2,
            "productId": {"name": "Catalog Name", "productCode": "C-9", "price": 30, "discountPercentage": 20},
            "productSnapshot": {"name": "Snapshot Name", "productCode": "S-1", "price": 25},
        }
    )
    assert item.product_name == "Catalog Name"
    assert item.product_code == "C-9"
    assert item.price == Decimal("25")
    assert item.discount_percentage == Decimal("20")


def test_non_numeric_price_counts_as_missing() -> None:
    assert LineItem.from_dict({"price": "n/a"}).price is None


def test_address_lines_fold_street_and_admin_parts() -> None:
    customer = Customer.from_dict(
        {
            "name": "Asha",
            "address": {
                "street": "4 Car Street",
                "nearestTown": "Sattur",
                "district": "Virudhunagar",
                "state": "Tamil Nadu",
                "pincode": "626203",
                "country": "India",
            },
        }
    )
    assert customer.address_lines() == ("4 Car Street, Sattur", "Virudhunagar, Tamil Nadu, 626203")


def test_foreign_country_is_printed() -> None:
    customer = Customer.from_dict({"address": {"district": "Colombo", "country": "Sri Lanka"}})
    assert customer.address_lines() == ("", "Colombo, Sri Lanka")


def test_customer_placeholders() -> None:
    customer = Customer.from_dict({})
    assert customer.display_name == "Customer Name"
    assert customer.address_lines() == ("Customer Address", "")
    assert customer.contact_line == "Contact Number"


def test_contact_line_merges_distinct_numbers() -> None:
    assert Customer(mobile="9000000000", delivery_contact="9111111111").contact_line == "9000000000, 9111111111"
    assert Customer(mobile="9000000000", delivery_contact="9000000000").contact_line == "9000000000"
    assert Customer(delivery_contact="9111111111").contact_line == "9111111111"


def test_summary_prefers_caller_figures() -> None:
    totals = RunningTotals.of([LineItem(quantity=1, price=100, discount_percentage=50).priced(0)])
    figures = SummaryFigures.resolve(OrderSummary(total_with_packaging=999.99), totals)
    assert figures.actual_total == Decimal("100")
    assert figures.discount_total == Decimal("50")
    assert figures.sub_total == Decimal("50")
    assert figures.final_amount == Decimal("999.99")


def test_summary_falls_back_to_local_sums() -> None:
    totals = RunningTotals.of([LineItem(quantity=2, price=10, discount_percentage=10).priced(0)])
    figures = SummaryFigures.resolve(OrderSummary.from_dict({"packagingCost": 5}), totals)
    assert figures.sub_total == Decimal("18")
    assert figures.packaging == Decimal("5")
    assert figures.final_amount == Decimal("23")


def test_zero_summary_figures_use_local_sums() -> None:
    totals = RunningTotals.of([LineItem(quantity=1, price=100, discount_percentage=50).priced(0)])
    summary = OrderSummary.from_dict(
        {"totalPrice": 0, "totalSavings": 0, "totalOfferPrice": 0, "packagingPrice": 0, "totalWithPackaging": 0}
    )
    figures = SummaryFigures.resolve(summary, totals)
    assert figures.actual_total == Decimal("100")
    assert figures.discount_total == Decimal("50")
    assert figures.sub_total == Decimal("50")
    assert figures.packaging == Decimal("0")
    assert figures.final_amount == Decimal("50")


def test_zero_packaging_price_falls_back_to_legacy_key() -> None:
    summary = OrderSummary.from_dict({"packagingPrice": 0, "packagingCost": 12})
    assert summary.packaging_price == Decimal("12")


def test_items_that_are_not_a_list_are_ignored() -> None:
    assert InvoiceDocument.from_dict({"items": 5}).items == ()
    assert InvoiceDocument.from_dict({"items": "abc"}).items == ()


def test_document_defaults() -> None:
    doc = InvoiceDocument.from_dict({"docType": "Quotation"})
    assert doc.doc_type == "invoice"
    assert doc.invoice_number == "001"
    assert doc.items == ()
    assert isinstance(doc.generated_at, dt.datetime)
    assert InvoiceDocument.coerce(None).title == "Invoice"


def test_document_accepts_snake_case_keys() -> None:
    doc = InvoiceDocument.from_dict(
        {"doc_type": "estimate", "invoice_number": "E-7", "customer": {"name": "Ravi"}, "items": [{"price": 5}]}
    )
    assert doc.is_estimate
    assert doc.title == "Estimate"
    assert doc.customer.display_name == "Ravi"
    assert len(doc.rows()) == 1
