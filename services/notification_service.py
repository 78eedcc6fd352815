# services/notification_service.py
import logging
from typing import Any, Dict, Mapping, Optional, Sequence

import requests

from config import Settings
from domain.models import STATUS_EMOJIS, UNKNOWN_DESIGN_NAME, OrderLineItem, status_label

logger = logging.getLogger(__name__)

TELEGRAM_API = "https://api.telegram.org"
TEST_PREFIX = "🧪 [ทดสอบ] "


def _baht(amount: float) -> str:
    return f"{amount:,.0f}"


def build_order_message(
        *,
        order_id: int,
        name: str,
        phone: str,
        items: Sequence[OrderLineItem],
        design_names: Mapping[str, str],
        total_amount: float,
        shipping_cost: float,
        is_pickup: bool,
        address: Optional[str] = None,
        is_test: bool = False,
) -> str:
    items_list = "\n".join(
        f"  • {design_names.get(item.design, UNKNOWN_DESIGN_NAME)} ขนาด {item.size} จำนวน {item.quantity} ชิ้น"
        for item in items
    )
    prefix = TEST_PREFIX if is_test else ""
    grand_total = total_amount + shipping_cost
    delivery = "รับหน้างาน" if is_pickup else "จัดส่ง"
    address_line = f"\n📍 <b>ที่อยู่:</b> {address}" if not is_pickup and address else ""

    return (
        f"{prefix}🛍 <b>มีการสั่งซื้อใหม่!</b>\n"
        f"\n"
        f"📋 <b>รหัสสั่งซื้อ:</b> {order_id}\n"
        f"👤 <b>ชื่อผู้สั่ง:</b> {name}\n"
        f"📞 <b>เบอร์โทรศัพท์:</b> {phone}\n"
        f"\n"
        f"📦 <b>รายการสินค้า:</b>\n"
        f"{items_list}\n"
        f"\n"
        f"💰 <b>ยอดเงิน:</b>\n"
        f"  • ยอดสินค้า: {_baht(total_amount)} บาท\n"
        f"  • ค่าจัดส่ง: {_baht(shipping_cost)} บาท\n"
        f"  • <b>ยอดรวมทั้งสิ้น: {_baht(grand_total)} บาท</b>\n"
        f"\n"
        f"🚚 <b>วิธีรับสินค้า:</b> {delivery}{address_line}"
    )


def build_status_message(order_id: int, name: str, status: str, is_test: bool = False) -> str:
    prefix = TEST_PREFIX if is_test else ""
    return (
        f"{prefix}{STATUS_EMOJIS.get(status, '📋')} <b>อัพเดทสถานะคำสั่งซื้อ</b>\n"
        f"\n"
        f"📋 <b>รหัสสั่งซื้อ:</b> {order_id}\n"
        f"👤 <b>ชื่อผู้สั่ง:</b> {name}\n"
        f"📊 <b>สถานะ:</b> {status_label(status)}"
    )


class TelegramNotifier:
    """
    Posts order events to a Telegram chat.

    Delivery is fire-and-forget: failures are logged and reported as False,
    never raised into the order flow.
    """

    def __init__(
            self,
            bot_token: Optional[str],
            chat_id: Optional[str],
            is_test: bool = False,
            timeout_seconds: int = 10,
    ):
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.is_test = is_test
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "TelegramNotifier":
        return cls(settings.telegram_bot_token, settings.telegram_chat_id, settings.is_test_environment)

    def _post(self, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not self.bot_token:
            raise RuntimeError("TELEGRAM_BOT_TOKEN is not set")

        resp = requests.post(
            f"{TELEGRAM_API}/bot{self.bot_token}/{method}",
            json=payload,
            timeout=self.timeout_seconds,
        )
        if not resp.ok:
            raise RuntimeError(f"Telegram {method} failed: {resp.text}")
        return resp.json()

    def send_message(self, text: str) -> Dict[str, Any]:
        return self._post("sendMessage", {"chat_id": self.chat_id, "text": text, "parse_mode": "HTML"})

    def send_photo(self, photo_url: str, caption: str) -> Dict[str, Any]:
        return self._post(
            "sendPhoto",
            {"chat_id": self.chat_id, "photo": photo_url, "caption": caption, "parse_mode": "HTML"},
        )

    def _chat_configured(self) -> bool:
        if self.chat_id:
            return True
        logger.error(
            "TELEGRAM_CHAT_ID is not set for %s environment",
            "test" if self.is_test else "production",
        )
        return False

    def notify_new_order(
            self,
            *,
            order_id: int,
            name: str,
            phone: str,
            items: Sequence[OrderLineItem],
            design_names: Mapping[str, str],
            total_amount: float,
            shipping_cost: float,
            is_pickup: bool,
            address: Optional[str] = None,
            slip_image_url: Optional[str] = None,
    ) -> bool:
        # an unconfigured chat must not block ordering
        if not self._chat_configured():
            return True

        message = build_order_message(
            order_id=order_id,
            name=name,
            phone=phone,
            items=items,
            design_names=design_names,
            total_amount=total_amount,
            shipping_cost=shipping_cost,
            is_pickup=is_pickup,
            address=address,
            is_test=self.is_test,
        )

        try:
            self.send_message(message)
            if slip_image_url:
                prefix = TEST_PREFIX if self.is_test else ""
                self.send_photo(
                    slip_image_url,
                    f"{prefix}💳 <b>สลิปการโอนเงิน</b>\n📋 รหัสสั่งซื้อ: {order_id}",
                )
            return True
        except (requests.RequestException, RuntimeError) as e:
            logger.warning("Telegram order notification failed for order %s: %s", order_id, e)
            return False

    def notify_status_update(self, order_id: int, name: str, status: str) -> bool:
        if not self._chat_configured():
            return True

        try:
            self.send_message(build_status_message(order_id, name, status, self.is_test))
            return True
        except (requests.RequestException, RuntimeError) as e:
            logger.warning("Telegram status notification failed for order %s: %s", order_id, e)
            return False
