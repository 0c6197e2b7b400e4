# shop_admin/utils/formatters.py
from datetime import datetime
from typing import Optional
import pytz
from decimal import Decimal
from ..config import Config

def format_price(amount: Decimal) -> str:
    """Format a money amount with the shop currency"""
    return f"{Config.CURRENCY}{Decimal(amount):,.2f}"

def format_datetime(dt: Optional[datetime]) -> str:
    """Format a timestamp in the console timezone"""
    if dt is None:
        return "-"
    local_tz = pytz.timezone(Config.TIMEZONE)
    if dt.tzinfo is None:
        dt = pytz.utc.localize(dt)
    local_time = dt.astimezone(local_tz)
    return local_time.strftime("%Y-%m-%d %H:%M")

def format_percent(rate: Decimal) -> str:
    return f"{Decimal(rate):.2f}%".replace(".00%", "%")
