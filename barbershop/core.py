# barbershop/core.py

import math
import re
from datetime import datetime, date
from decimal import Decimal
from typing import List, Optional
from zoneinfo import ZoneInfo

from barbershop.config import SHOP_TIMEZONE
from barbershop.data import DAILY_SLOTS, TIER_THRESHOLDS, TIER_ORDER

_PHONE_NOISE = re.compile(r"[\s\-\.\(\)]")


def shop_now() -> datetime:
    """Current wall-clock time in the shop's timezone, as a naive datetime."""
    return datetime.now(ZoneInfo(SHOP_TIMEZONE)).replace(tzinfo=None)


def to_shop_time(value: datetime) -> datetime:
    """Naive shop-local datetime truncated to the minute.

    Aware values are converted to the shop timezone first; naive values are
    taken to already be shop-local.
    """
    if value.tzinfo is not None:
        value = value.astimezone(ZoneInfo(SHOP_TIMEZONE)).replace(tzinfo=None)
    return value.replace(second=0, microsecond=0)


def slot_label(value: datetime) -> str:
    return value.strftime("%H:%M")


def open_slots(on_date: date, now: datetime, taken: List[str]) -> List[str]:
    slots = list(DAILY_SLOTS)
    if on_date == now.date():
        # the current hour is already too late to book
        slots = [s for s in slots if int(s[:2]) > now.hour]
    return [s for s in slots if s not in taken]


def tier_for_points(total_points: int) -> str:
    for tier, minimum in TIER_THRESHOLDS:
        if total_points >= minimum:
            return tier
    return "Bronze"


def tier_rank(tier: Optional[str]) -> int:
    if tier not in TIER_ORDER:
        return 0
    return TIER_ORDER.index(tier)


def points_for_price(price) -> int:
    return math.floor(Decimal(str(price)))


def normalize_phone(phone: str) -> str:
    return _PHONE_NOISE.sub("", phone or "")
