# config.py

import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv

from domain.models import ALL_SIZES

DEFAULT_SHIPPING_COST = 50


@dataclass(frozen=True)
class Settings:
    supabase_url: Optional[str]
    supabase_key: Optional[str]
    supabase_service_key: Optional[str]
    schema: str
    admin_password: Optional[str]
    telegram_bot_token: Optional[str]
    telegram_chat_id: Optional[str]
    is_test_environment: bool
    drive_slip_folder_id: Optional[str]
    drive_design_folder_id: Optional[str]
    google_credentials_json: Optional[str]
    sizes: Tuple[str, ...]
    shipping_cost: float


def parse_sizes(raw: Optional[str]) -> Tuple[str, ...]:
    """
    Parse SHIRT_SIZES ("S,M,L") into the active size set.

    Unknown codes are ignored and the canonical order is kept whatever order
    the variable lists them in. Empty or unset means every size.
    """
    if not raw:
        return tuple(ALL_SIZES)
    wanted = {s.strip().upper() for s in raw.split(",") if s.strip()}
    sizes = tuple(size for size in ALL_SIZES if size in wanted)
    return sizes or tuple(ALL_SIZES)


def load_settings() -> Settings:
    load_dotenv()

    is_test = os.getenv("APP_ENV", "production").lower() == "development"
    # test deployments post to a separate Telegram bot/chat
    prefix = "TEST_" if is_test else ""

    shipping_raw = os.getenv("SHIPPING_COST")
    try:
        shipping_cost = float(shipping_raw) if shipping_raw else DEFAULT_SHIPPING_COST
    except ValueError:
        shipping_cost = DEFAULT_SHIPPING_COST

    return Settings(
        supabase_url=os.getenv("SUPABASE_URL"),
        supabase_key=os.getenv("SUPABASE_KEY"),
        supabase_service_key=os.getenv("SUPABASE_SERVICE_KEY"),
        schema=os.getenv("SCHEMA") or "public",
        admin_password=os.getenv("ADMIN_PASSWORD"),
        telegram_bot_token=os.getenv(f"{prefix}TELEGRAM_BOT_TOKEN"),
        telegram_chat_id=os.getenv(f"{prefix}TELEGRAM_CHAT_ID"),
        is_test_environment=is_test,
        drive_slip_folder_id=os.getenv("DRIVE_SLIP_FOLDER_ID"),
        drive_design_folder_id=os.getenv("DRIVE_DESIGN_FOLDER_ID"),
        google_credentials_json=os.getenv("GOOGLE_CREDENTIALS_JSON"),
        sizes=parse_sizes(os.getenv("SHIRT_SIZES")),
        shipping_cost=shipping_cost,
    )


def configure_logging(level: Optional[str] = None) -> None:
    level_name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
