import pytest
import requests

from domain.models import OrderLineItem
from services import notification_service
from services.notification_service import (
    TEST_PREFIX,
    TelegramNotifier,
    build_order_message,
    build_status_message,
)


class FakeResponse:
    def __init__(self, ok=True, text="ok"):
        self.ok = ok
        self.text = text

    def json(self):
        return {"ok": self.ok}


@pytest.fixture
def posts(monkeypatch):
    sent = []

    def fake_post(url, json=None, timeout=None):
        sent.append((url, json))
        return FakeResponse()

    monkeypatch.setattr(notification_service.requests, "post", fake_post)
    return sent


def order_kwargs(**overrides):
    kwargs = dict(
        order_id=12,
        name="Somchai",
        phone="0812345678",
        items=[OrderLineItem("1", "M", 2), OrderLineItem("9", "L", 1)],
        design_names={"1": "Tiger Classic"},
        total_amount=1050,
        shipping_cost=50,
        is_pickup=False,
        address="Bangkok",
    )
    kwargs.update(overrides)
    return kwargs


def test_order_message_lists_items_and_totals():
    message = build_order_message(**order_kwargs())

    assert "Tiger Classic ขนาด M จำนวน 2 ชิ้น" in message
    assert "ไม่ระบุ ขนาด L จำนวน 1 ชิ้น" in message
    assert "ยอดรวมทั้งสิ้น: 1,100 บาท" in message
    assert "Bangkok" in message
    assert not message.startswith(TEST_PREFIX)


def test_pickup_message_has_no_address():
    message = build_order_message(**order_kwargs(is_pickup=True))

    assert "รับหน้างาน" in message
    assert "Bangkok" not in message


def test_test_environment_prefix():
    assert build_order_message(**order_kwargs(is_test=True)).startswith(TEST_PREFIX)
    assert build_status_message(12, "Somchai", "confirmed", is_test=True).startswith(TEST_PREFIX)


def test_status_message_uses_thai_label():
    assert "ยืนยันการชำระเงิน" in build_status_message(12, "Somchai", "confirmed")


def test_notify_new_order_sends_message_and_slip(posts):
    notifier = TelegramNotifier("token", "chat")

    assert notifier.notify_new_order(**order_kwargs(), slip_image_url="https://files.example/slip.png")

    assert [url.rsplit("/", 1)[-1] for url, _ in posts] == ["sendMessage", "sendPhoto"]
    assert posts[0][0] == "https://api.telegram.org/bottoken/sendMessage"
    assert posts[0][1]["chat_id"] == "chat"
    assert posts[1][1]["photo"] == "https://files.example/slip.png"


def test_missing_chat_id_skips_sending(posts):
    notifier = TelegramNotifier("token", None)

    assert notifier.notify_new_order(**order_kwargs()) is True
    assert notifier.notify_status_update(12, "Somchai", "completed") is True
    assert posts == []


def test_delivery_failure_is_reported_not_raised(monkeypatch):
    def broken_post(url, json=None, timeout=None):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(notification_service.requests, "post", broken_post)
    notifier = TelegramNotifier("token", "chat")

    assert notifier.notify_new_order(**order_kwargs()) is False
    assert notifier.notify_status_update(12, "Somchai", "completed") is False


def test_rejected_request_is_reported(monkeypatch):
    monkeypatch.setattr(
        notification_service.requests, "post", lambda url, json=None, timeout=None: FakeResponse(False, "bad")
    )

    assert TelegramNotifier("token", "chat").notify_status_update(12, "Somchai", "pending") is False


def test_missing_token_is_reported(posts):
    assert TelegramNotifier(None, "chat").notify_status_update(12, "Somchai", "pending") is False
    assert posts == []
