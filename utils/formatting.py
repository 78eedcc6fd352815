# utils/formatting.py
from datetime import datetime
from typing import Optional


def format_baht(n: float) -> str:
    """
    Format an amount with ',' as thousands separator and the baht suffix.
    Example: 1234567 -> "1,234,567 บาท"
    """
    return f"{n:,.0f} บาท"


def format_order_date(created_at: Optional[str]) -> str:
    """
    Supabase timestamps ("2025-01-31T09:15:00.123+00:00") -> "31/01/2025 09:15".
    Anything unparseable is returned as-is.
    """
    if not created_at:
        return "-"
    try:
        return datetime.fromisoformat(created_at.replace("Z", "+00:00")).strftime("%d/%m/%Y %H:%M")
    except ValueError:
        return created_at
