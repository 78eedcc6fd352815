# domain/models.py

from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional, Sequence

# Canonical size order. Must match the check constraint on order_items.size.
SIZES = ("4S", "SSS", "SS", "S", "M", "L", "XL", "2XL", "3XL", "4XL", "5XL", "6XL")
ALL_SIZES: Sequence[str] = SIZES

UNKNOWN_DESIGN_NAME = "ไม่ระบุ"


@dataclass(frozen=True)
class DesignInfo:
    """Minimal catalog entry needed by the size summary."""
    id: str
    name: str


@dataclass
class ShirtDesign:
    id: str
    name: str
    price: float
    description: str = ""
    front_image: Optional[str] = None
    back_image: Optional[str] = None
    is_active: bool = True
    display_order: int = 0
    is_combo: bool = False  # cached: True iff the design owns combo components

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ShirtDesign":
        return cls(
            id=str(row["id"]),
            name=row.get("name") or UNKNOWN_DESIGN_NAME,
            price=row.get("price") or 0,
            description=row.get("description") or "",
            front_image=row.get("front_image"),
            back_image=row.get("back_image"),
            is_active=bool(row.get("is_active", True)),
            display_order=int(row.get("display_order") or 0),
            is_combo=bool(row.get("is_combo", False)),
        )


@dataclass(frozen=True)
class ComboComponentEdge:
    """
    One row of shirt_combo_components: combo -> component with a multiplier.
    """
    combo_design_id: str
    component_design_id: str
    quantity_multiplier: int

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ComboComponentEdge":
        return cls(
            combo_design_id=str(row["combo_design_id"]),
            component_design_id=str(row["component_design_id"]),
            quantity_multiplier=int(row["quantity_multiplier"]),
        )


class ComboComponent(NamedTuple):
    component_id: str
    multiplier: int


@dataclass(frozen=True)
class OrderLineItem:
    design: str
    size: str
    quantity: int
    price_per_unit: float = 0
    order_id: Optional[int] = None

    @property
    def line_total(self) -> float:
        return self.quantity * self.price_per_unit

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "OrderLineItem":
        return cls(
            design=str(row["design"]),
            size=row.get("size") or "",
            quantity=int(row.get("quantity") or 0),
            price_per_unit=row.get("price_per_unit") or 0,
            order_id=row.get("order_id"),
        )

    def to_row(self) -> Dict[str, Any]:
        return {
            "order_id": self.order_id,
            "design": self.design,
            "size": self.size,
            "quantity": self.quantity,
            "price_per_unit": self.price_per_unit,
        }


@dataclass
class Order:
    id: int
    name: str
    phone: str = ""
    address: str = ""
    is_pickup: bool = False
    total_price: float = 0
    shipping_cost: float = 0
    slip_image: Optional[str] = None
    status: str = "pending"
    created_at: Optional[str] = None
    items: List[OrderLineItem] = field(default_factory=list)

    @property
    def grand_total(self) -> float:
        return self.total_price + self.shipping_cost

    @classmethod
    def from_row(cls, row: Dict[str, Any], items: Optional[List[OrderLineItem]] = None) -> "Order":
        return cls(
            id=row["id"],
            name=row.get("name") or "",
            phone=row.get("phone") or "",
            address=row.get("address") or "",
            is_pickup=bool(row.get("is_pickup", False)),
            total_price=row.get("total_price") or 0,
            shipping_cost=row.get("shipping_cost") or 0,
            slip_image=row.get("slip_image"),
            status=row.get("status") or "pending",
            created_at=row.get("created_at"),
            items=list(items or []),
        )


@dataclass
class SizeSummaryRow:
    """
    One reporting row of the size summary: a design and its quantity per size.

    `counts` always holds every recognised size, in canonical order.
    """
    design_id: str
    design_name: str
    counts: Dict[str, int]


@dataclass(frozen=True)
class UploadedImage:
    filename: str
    mimetype: str
    data: bytes


ORDER_STATUSES = ("pending", "confirmed", "processing", "completed", "cancelled")

STATUS_LABELS = {
    "pending": "รอตรวจสอบ",
    "confirmed": "ยืนยันการชำระเงิน",
    "processing": "กำลังจัดส่ง",
    "completed": "จัดส่งแล้ว",
    "cancelled": "ยกเลิก",
}

STATUS_EMOJIS = {
    "pending": "⏳",
    "confirmed": "✅",
    "processing": "📦",
    "completed": "🎉",
    "cancelled": "❌",
}


def status_label(status: str) -> str:
    return STATUS_LABELS.get(status, status)
