from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple


DOC_TYPES = ("invoice", "estimate")

# Pricing fallbacks for items that arrive without price/discount data.
# Kept as-is from the order service; they can hide upstream data problems.
# A zero price, discount or order-summary figure counts as not supplied (see _given_or).
DEFAULT_RATE = Decimal("60.78947368421055")
DEFAULT_DISCOUNT_PCT = Decimal("80")
DEFAULT_QUANTITY = Decimal("1")
DEFAULT_CODE_BASE = 100

DEFAULT_COUNTRY = "India"
PLACEHOLDER_NAME = "Customer Name"
PLACEHOLDER_ADDRESS = "Customer Address"
PLACEHOLDER_CONTACT = "Contact Number"


def _pick(d: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
	"""Return the first key of d holding a non-empty value."""
	for k in keys:
		v = d.get(k)
		if v is not None and v != "":
			return v
	return default


def _text(v: Any) -> Optional[str]:
	if v is None:
		return None
	s = str(v).strip()
	return s or None


def _number(v: Any) -> Optional[Decimal]:
	"""Decimal for numeric input, None when the value is absent or not a number."""
	if v is None or isinstance(v, bool):
		return None
	try:
		d = v if isinstance(v, Decimal) else Decimal(str(v).strip())
	except (InvalidOperation, ValueError):
		return None
	return d if d.is_finite() else None


def _given_or(value: Optional[Decimal], fallback: Any) -> Any:
	"""value when it is a non-zero number, otherwise fallback."""
	return value if value else fallback


def _as_mapping(v: Any) -> Mapping[str, Any]:
	return v if isinstance(v, Mapping) else {}


@dataclass(frozen=True)
class Address:
	street: Optional[str] = None
	landmark: Optional[str] = None
	nearest_town: Optional[str] = None
	district: Optional[str] = None
	state: Optional[str] = None
	pincode: Optional[str] = None
	country: Optional[str] = None

	@classmethod
	def from_dict(cls, raw: Any) -> Optional["Address"]:
		if isinstance(raw, str):
			return cls(street=_text(raw))
		if not isinstance(raw, Mapping):
			return None
		return cls(
			street=_text(raw.get("street")),
			landmark=_text(raw.get("landmark")),
			nearest_town=_text(_pick(raw, "nearestTown", "nearest_town")),
			district=_text(raw.get("district")),
			state=_text(raw.get("state")),
			pincode=_text(raw.get("pincode")),
			country=_text(raw.get("country")),
		)

	def street_line(self) -> str:
		parts = [self.street, self.landmark, self.nearest_town]
		return ", ".join(p for p in parts if p)

	def admin_line(self) -> str:
		parts = [self.district, self.state, self.pincode]
		if self.country and self.country != DEFAULT_COUNTRY:
			parts.append(self.country)
		return ", ".join(p for p in parts if p)


@dataclass(frozen=True)
class Customer:
	name: Optional[str] = None
	mobile: Optional[str] = None
	delivery_contact: Optional[str] = None
	address: Optional[Address] = None

	@classmethod
	def from_dict(cls, raw: Any) -> "Customer":
		raw = _as_mapping(raw)
		return cls(
			name=_text(raw.get("name")),
			mobile=_text(_pick(raw, "mobile", "phone")),
			delivery_contact=_text(_pick(raw, "deliveryContact", "delivery_contact")),
			address=Address.from_dict(raw.get("address")),
		)

	@property
	def display_name(self) -> str:
		return self.name or PLACEHOLDER_NAME

	@property
	def contact_line(self) -> str:
		if self.mobile and self.delivery_contact and self.mobile != self.delivery_contact:
			return f"{self.mobile}, {self.delivery_contact}"
		return self.mobile or self.delivery_contact or PLACEHOLDER_CONTACT

	def address_lines(self) -> Tuple[str, str]:
		"""(street line, administrative line); placeholder when both are empty."""
		if self.address is None:
			return PLACEHOLDER_ADDRESS, ""
		line1, line2 = self.address.street_line(), self.address.admin_line()
		if not line1 and not line2:
			return PLACEHOLDER_ADDRESS, ""
		return line1, line2


@dataclass(frozen=True)
class RowValues:
	"""Display-ready values of one table row, money kept as Decimal."""

	sno: int
	code: str
	name: str
	quantity: Decimal
	rate: Decimal
	actual: Decimal
	discount_pct: Decimal
	discount_value: Decimal
	total: Decimal


@dataclass(frozen=True)
class LineItem:
	product_name: Optional[str] = None
	product_code: Optional[str] = None
	quantity: Optional[Decimal] = None
	price: Optional[Decimal] = None
	discount_percentage: Optional[Decimal] = None

	def __post_init__(self) -> None:
		for name in ("quantity", "price", "discount_percentage"):
			object.__setattr__(self, name, _number(getattr(self, name)))

	@classmethod
	def from_dict(cls, raw: Any) -> "LineItem":
		"""Read an order line, looking through productSnapshot / populated productId."""
		raw = _as_mapping(raw)
		product = _as_mapping(raw.get("productId"))
		snapshot = _as_mapping(raw.get("productSnapshot"))
		name = _pick(raw, "productName", "product_name", "name")
		if name is None:
			name = _pick(product, "name") or _pick(snapshot, "name")
		code = _pick(raw, "productCode", "product_code", "code")
		if code is None:
			code = _pick(product, "productCode") or _pick(snapshot, "productCode")
		price = _given_or(
			_number(_pick(raw, "price", "rate")),
			_given_or(_number(_pick(snapshot, "price")), _number(_pick(product, "price"))),
		)
		discount = _given_or(
			_number(_pick(raw, "discountPercentage", "discount_percentage")),
			_given_or(_number(_pick(snapshot, "discountPercentage")), _number(_pick(product, "discountPercentage"))),
		)
		return cls(
			product_name=_text(name),
			product_code=_text(code),
			quantity=_number(_pick(raw, "quantity", "qty")),
			price=price,
			discount_percentage=discount,
		)

	def priced(self, position: int) -> RowValues:
		"""Compute the row at 0-based position, applying the fallback policy."""
		qty = _given_or(self.quantity, DEFAULT_QUANTITY)
		rate = _given_or(self.price, DEFAULT_RATE)
		pct = _given_or(self.discount_percentage, DEFAULT_DISCOUNT_PCT)
		actual = qty * rate
		discount_value = actual * pct / Decimal(100)
		return RowValues(
			sno=position + 1,
			code=self.product_code or str(DEFAULT_CODE_BASE + position),
			name=self.product_name or f"Product {position + 1}",
			quantity=qty,
			rate=rate,
			actual=actual,
			discount_pct=pct,
			discount_value=discount_value,
			total=actual - discount_value,
		)


@dataclass
class RunningTotals:
	quantity: Decimal = Decimal("0")
	actual: Decimal = Decimal("0")
	discount: Decimal = Decimal("0")
	total: Decimal = Decimal("0")

	def add(self, row: RowValues) -> None:
		self.quantity += row.quantity
		self.actual += row.actual
		self.discount += row.discount_value
		self.total += row.total

	@classmethod
	def of(cls, rows: Iterable[RowValues]) -> "RunningTotals":
		totals = cls()
		for row in rows:
			totals.add(row)
		return totals


@dataclass(frozen=True)
class OrderSummary:
	total_price: Optional[Decimal] = None
	total_savings: Optional[Decimal] = None
	total_offer_price: Optional[Decimal] = None
	packaging_price: Optional[Decimal] = None
	total_with_packaging: Optional[Decimal] = None

	def __post_init__(self) -> None:
		for name in ("total_price", "total_savings", "total_offer_price", "packaging_price", "total_with_packaging"):
			object.__setattr__(self, name, _number(getattr(self, name)))

	@classmethod
	def from_dict(cls, raw: Any) -> "OrderSummary":
		raw = _as_mapping(raw)
		return cls(
			total_price=_number(_pick(raw, "totalPrice", "total_price")),
			total_savings=_number(_pick(raw, "totalSavings", "total_savings")),
			total_offer_price=_number(_pick(raw, "totalOfferPrice", "total_offer_price")),
			# packagingCost is the older name of the same figure
			packaging_price=_given_or(
				_number(_pick(raw, "packagingPrice", "packaging_price")),
				_number(raw.get("packagingCost")),
			),
			total_with_packaging=_number(_pick(raw, "totalWithPackaging", "total_with_packaging")),
		)


@dataclass(frozen=True)
class SummaryFigures:
	actual_total: Decimal
	discount_total: Decimal
	sub_total: Decimal
	packaging: Decimal
	final_amount: Decimal

	@classmethod
	def resolve(cls, summary: OrderSummary, totals: RunningTotals) -> "SummaryFigures":
		"""Caller-supplied order figures win over locally accumulated sums; zeros do not count."""
		actual = _given_or(summary.total_price, totals.actual)
		discount = _given_or(summary.total_savings, totals.discount)
		sub = _given_or(summary.total_offer_price, actual - discount)
		packaging = _given_or(summary.packaging_price, Decimal("0"))
		final = _given_or(summary.total_with_packaging, sub + packaging)
		return cls(actual, discount, sub, packaging, final)


@dataclass(frozen=True)
class InvoiceDocument:
	doc_type: str = "invoice"
	invoice_number: str = "001"
	order_id: str = "ORD-001"
	generated_at: Any = field(default_factory=_dt.datetime.now)
	customer: Customer = field(default_factory=Customer)
	items: Tuple[LineItem, ...] = ()
	order_summary: OrderSummary = field(default_factory=OrderSummary)
	payment_status: str = "pending"
	store_details: Dict[str, Any] = field(default_factory=dict)

	def __post_init__(self) -> None:
		doc_type = str(self.doc_type or "invoice").strip().lower()
		object.__setattr__(self, "doc_type", doc_type if doc_type in DOC_TYPES else "invoice")
		object.__setattr__(self, "items", tuple(self.items or ()))

	@property
	def is_estimate(self) -> bool:
		return self.doc_type == "estimate"

	@property
	def title(self) -> str:
		return "Estimate" if self.is_estimate else "Invoice"

	def rows(self) -> Tuple[RowValues, ...]:
		return tuple(item.priced(i) for i, item in enumerate(self.items))

	@classmethod
	def from_dict(cls, data: Mapping[str, Any]) -> "InvoiceDocument":
		"""Build from an order-service payload (camelCase) or snake_case keys."""
		data = _as_mapping(data)
		customer = _pick(data, "customerDetails", "customer_details", "customer", default={})
		generated_at = _pick(data, "generatedAt", "generated_at")
		raw_items = data.get("items")
		if not isinstance(raw_items, (list, tuple)):
			raw_items = []
		return cls(
			doc_type=_pick(data, "docType", "doc_type", default="invoice"),
			invoice_number=str(_pick(data, "invoiceNumber", "invoice_number", default="001")),
			order_id=str(_pick(data, "orderId", "order_id", default="ORD-001")),
			generated_at=generated_at if generated_at is not None else _dt.datetime.now(),
			customer=customer if isinstance(customer, Customer) else Customer.from_dict(customer),
			items=tuple(
				it if isinstance(it, LineItem) else LineItem.from_dict(it)
				for it in raw_items
			),
			order_summary=OrderSummary.from_dict(_pick(data, "orderSummary", "order_summary", default={})),
			payment_status=str(_pick(data, "paymentStatus", "payment_status", default="pending")),
			store_details=dict(_as_mapping(_pick(data, "storeDetails", "store_details", default={}))),
		)

	@classmethod
	def coerce(cls, data: Any) -> "InvoiceDocument":
		if isinstance(data, cls):
			return data
		if data is None:
			return cls()
		return cls.from_dict(data)
