# services/order_service.py

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from data_integrator import fetch_one, fetch_rows, insert_rows, update_rows, upsert_row
from domain.errors import OrderValidationError, StorageError
from domain.models import (
    ALL_SIZES,
    ORDER_STATUSES,
    Order,
    OrderLineItem,
    ShirtDesign,
    UploadedImage,
)
from services.design_service import get_price_map
from services.drive_service import ImageUploader
from services.notification_service import TelegramNotifier

logger = logging.getLogger(__name__)

ORDER_TABLE = "orders"
ORDER_ITEM_TABLE = "order_items"
SETTINGS_TABLE = "app_settings"
ORDERS_CLOSED_KEY = "orders_closed"


# ---------------------------------------------------------------------------
# Pricing & validation
# ---------------------------------------------------------------------------

def validate_order_items(
        items: Sequence[OrderLineItem],
        price_map: Mapping[str, float],
        sizes: Sequence[str] = ALL_SIZES,
) -> None:
    if not items:
        raise OrderValidationError("กรุณาเลือกสินค้าอย่างน้อย 1 รายการ")

    for item in items:
        if item.design not in price_map:
            raise OrderValidationError(f"ไม่พบแบบเสื้อรหัส {item.design}")
        if item.size not in sizes:
            raise OrderValidationError(f"ขนาด {item.size} ไม่ถูกต้อง")
        if item.quantity < 1:
            raise OrderValidationError("จำนวนต้องมากกว่า 0")


def price_items(items: Iterable[OrderLineItem], price_map: Mapping[str, float]) -> List[OrderLineItem]:
    """Attach the catalog price; whatever price the client sent is ignored."""
    return [
        OrderLineItem(
            design=item.design,
            size=item.size,
            quantity=item.quantity,
            price_per_unit=price_map[item.design],
            order_id=item.order_id,
        )
        for item in items
    ]


def calculate_order_total(items: Iterable[OrderLineItem], price_map: Mapping[str, float]) -> float:
    return sum(price_map[item.design] * item.quantity for item in items)


def shipping_cost_for(is_pickup: bool, shipping_cost: float) -> float:
    return 0 if is_pickup else shipping_cost


# ---------------------------------------------------------------------------
# Ordering open / closed
# ---------------------------------------------------------------------------

def is_ordering_closed(db) -> bool:
    """
    Read the orders_closed flag. A missing row or a failed read counts as
    open so a settings outage never blocks the public form.
    """
    ok, msg, row = fetch_one(db, SETTINGS_TABLE, "key", ORDERS_CLOSED_KEY)
    if not ok:
        logger.warning("Could not read ordering status, assuming open: %s", msg)
        return False
    return bool(row) and str(row.get("value")).lower() == "true"


def toggle_ordering_closed(db) -> Tuple[bool, str, bool]:
    """
    Flip the flag. Returns (ok, message, orders_closed_after)
    """
    closed = not is_ordering_closed(db)
    ok, msg, _ = upsert_row(
        db,
        SETTINGS_TABLE,
        {"key": ORDERS_CLOSED_KEY, "value": "true" if closed else "false"},
        ["key"],
    )
    if not ok:
        return False, msg, not closed

    logger.info("Ordering is now %s", "closed" if closed else "open")
    return True, "Updated", closed


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------

def create_order(
        db,
        *,
        name: str,
        phone: str,
        address: str,
        is_pickup: bool,
        items: Sequence[OrderLineItem],
        slip: Optional[UploadedImage],
        designs: Sequence[ShirtDesign],
        uploader: ImageUploader,
        notifier: Optional[TelegramNotifier] = None,
        shipping_cost: float = 0,
        sizes: Sequence[str] = ALL_SIZES,
) -> Order:
    """
    Validate, upload the payment slip, store the order and its items, then
    notify the admin chat.

    Prices come from the catalog (`designs`), never from the form.
    Raises OrderValidationError for bad input and StorageError when the
    upload or a write fails.
    """
    if is_ordering_closed(db):
        raise OrderValidationError("ขณะนี้ปิดรับออเดอร์แล้ว")

    if not name or not name.strip():
        raise OrderValidationError("กรุณากรอกชื่อผู้สั่ง")
    if not phone or not phone.strip():
        raise OrderValidationError("กรุณากรอกเบอร์โทรศัพท์")
    if not is_pickup and not (address and address.strip()):
        raise OrderValidationError("กรุณากรอกที่อยู่สำหรับจัดส่ง")
    if slip is None or not slip.data:
        raise OrderValidationError("กรุณาแนบสลิปการโอนเงิน")

    price_map = get_price_map(designs)
    validate_order_items(items, price_map, sizes)

    priced = price_items(items, price_map)
    total_price = calculate_order_total(priced, price_map)
    shipping = shipping_cost_for(is_pickup, shipping_cost)

    try:
        slip_url = uploader(f"slip-{phone.strip()}-{slip.filename}", slip.mimetype, slip.data)
    except Exception as e:
        logger.error("Slip upload failed: %s", e)
        raise StorageError(f"อัปโหลดสลิปไม่สำเร็จ: {e}") from e

    ok, msg, rows = insert_rows(
        db,
        ORDER_TABLE,
        {
            "name": name.strip(),
            "phone": phone.strip(),
            "address": "" if is_pickup else address.strip(),
            "is_pickup": is_pickup,
            "total_price": total_price,
            "shipping_cost": shipping,
            "slip_image": slip_url,
            "status": "pending",
        },
    )
    if not ok or not rows:
        logger.error("Order insert failed: %s", msg)
        raise StorageError(msg if not ok else "Insert orders failed: no data returned")

    order_row = rows[0]
    order_id = order_row["id"]

    order_items = [
        OrderLineItem(i.design, i.size, i.quantity, i.price_per_unit, order_id)
        for i in priced
    ]
    ok, msg, _ = insert_rows(db, ORDER_ITEM_TABLE, [i.to_row() for i in order_items])
    if not ok:
        logger.error("Order %s stored without items: %s", order_id, msg)
        raise StorageError(msg)

    order = Order.from_row(order_row, order_items)
    logger.info("Created order %s (%d items, total %s)", order_id, len(order_items), total_price)

    if notifier is not None:
        notifier.notify_new_order(
            order_id=order.id,
            name=order.name,
            phone=order.phone,
            items=order_items,
            design_names={d.id: d.name for d in designs},
            total_amount=order.total_price,
            shipping_cost=order.shipping_cost,
            is_pickup=order.is_pickup,
            address=order.address,
            slip_image_url=order.slip_image,
        )

    return order


# ---------------------------------------------------------------------------
# Read
# ---------------------------------------------------------------------------

def fetch_order_items(db) -> List[OrderLineItem]:
    ok, msg, rows = fetch_rows(db, ORDER_ITEM_TABLE)
    if not ok:
        raise StorageError(msg)
    return [OrderLineItem.from_row(row) for row in rows]


def fetch_orders(db) -> List[Order]:
    """Orders without items, newest first."""
    ok, msg, rows = fetch_rows(db, ORDER_TABLE, order_by=[("created_at", True)])
    if not ok:
        raise StorageError(msg)
    return [Order.from_row(row) for row in rows]


def list_orders_with_items(db) -> List[Order]:
    orders = fetch_orders(db)

    items_by_order: Dict[int, List[OrderLineItem]] = {}
    for item in fetch_order_items(db):
        items_by_order.setdefault(item.order_id, []).append(item)

    for order in orders:
        order.items = items_by_order.get(order.id, [])
    return orders


def filter_items_by_status(
        items: Iterable[OrderLineItem],
        orders: Iterable[Order],
        statuses: Optional[Iterable[str]],
) -> List[OrderLineItem]:
    """
    Keep items whose order has one of `statuses`. No statuses means no
    filtering. Items whose order is unknown are dropped when filtering.
    """
    wanted = set(statuses or ())
    if not wanted:
        return list(items)

    status_by_order = {order.id: order.status for order in orders}
    return [item for item in items if status_by_order.get(item.order_id) in wanted]


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------

def update_order_status(
        db,
        order_id: int,
        status: str,
        notifier: Optional[TelegramNotifier] = None,
) -> Tuple[bool, str, Optional[Order]]:
    if not order_id or status not in ORDER_STATUSES:
        return False, "Invalid order ID or status", None

    ok, msg, rows = update_rows(db, ORDER_TABLE, {"status": status}, "id", order_id)
    if not ok:
        logger.error("Error updating order %s: %s", order_id, msg)
        return False, msg, None
    if not rows:
        return False, "Order not found", None

    order = Order.from_row(rows[0])
    logger.info("Order %s status -> %s", order_id, status)

    if notifier is not None:
        notifier.notify_status_update(order.id, order.name, order.status)

    return True, "Order status updated successfully", order
