from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional

from agroconnect.constants.nigeria import CURRENCY, PRICE_RANGES

STATUS_DISPLAY_TEXT = {
    "active": "Active",
    "inactive": "Inactive",
    "pending": "Pending",
    "expired": "Expired",
    "out_of_stock": "Out of Stock",
    "draft": "Draft",
}


def _field(product: Any, name: str) -> Any:
    if isinstance(product, dict):
        return product.get(name)
    return getattr(product, name, None)


def _as_date(value) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def generate_product_title(crop_type: str, variety: Optional[str] = None) -> str:
    crop = crop_type.strip()
    variety_text = variety.strip() if variety else ""
    if variety_text:
        return f"{crop} - {variety_text}"
    return crop


def format_price(price: float) -> str:
    """Format an amount as whole Naira, e.g. ``5000000`` -> ``₦5,000,000``."""
    amount = Decimal(str(price)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    return f"{sign}{CURRENCY}{abs(int(amount)):,}"


def calculate_total_value(quantity: float, price_per_unit: float) -> float:
    return quantity * price_per_unit


def format_total_value(quantity: float, price_per_unit: float) -> str:
    return format_price(calculate_total_value(quantity, price_per_unit))


def get_product_status(product: Any, today: Optional[date] = None) -> str:
    """Derive the listing status a buyer or farmer actually sees.

    Expiry wins over everything, then a not-yet-open availability window,
    then stock. Otherwise the stored status stands.
    """
    today = today or date.today()

    available_until = _as_date(_field(product, "available_until"))
    if available_until and available_until < today:
        return "expired"

    available_from = _as_date(_field(product, "available_from"))
    if available_from and available_from > today:
        return "pending"

    quantity = _field(product, "quantity_available") or 0
    if quantity <= 0:
        return "out_of_stock"

    return _field(product, "status") or "inactive"


def get_status_display_text(status: str) -> str:
    return STATUS_DISPLAY_TEXT.get(status, "Unknown")


def calculate_bulk_discount(quantity: float, base_price: float, discount_percentage: float) -> float:
    total_price = quantity * base_price
    discount = total_price * (discount_percentage / 100)
    return total_price - discount


def validate_price_range(price: float, crop_type: str) -> Dict[str, Any]:
    price_range = PRICE_RANGES.get(crop_type)
    if not price_range:
        return {"is_valid": True}

    typical = f"{format_price(price_range['min'])} - {format_price(price_range['max'])}"
    if price < price_range["min"]:
        return {"is_valid": False, "message": f"Price seems too low for {crop_type}. Typical range: {typical}"}
    if price > price_range["max"]:
        return {"is_valid": False, "message": f"Price seems too high for {crop_type}. Typical range: {typical}"}
    return {"is_valid": True}


def _format_quantity(quantity) -> str:
    quantity = float(quantity or 0)
    return str(int(quantity)) if quantity.is_integer() else str(quantity)


def get_product_summary(product: Any) -> Dict[str, str]:
    status = get_product_status(product)
    return {
        "title": _field(product, "title"),
        "price": format_price(_field(product, "price_per_unit") or 0),
        "quantity": f"{_format_quantity(_field(product, 'quantity_available'))} {_field(product, 'unit')}",
        "status": get_status_display_text(status),
    }
