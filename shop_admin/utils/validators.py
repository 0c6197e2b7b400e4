# shop_admin/utils/validators.py
import re
from decimal import Decimal, InvalidOperation
from datetime import datetime
from typing import Any, Dict, List, Optional

EMAIL_PATTERN = re.compile(r'\S+@\S+\.\S+')

class ValidationError(ValueError):
    """Form input rejected before reaching the backend"""

    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(errors.values()))

def _blank(value: Any) -> bool:
    return value is None or not str(value).strip()

def _decimal(value: Any) -> Optional[Decimal]:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None

def whole_number(value: Any) -> Optional[int]:
    """Integer value of ``value``; fractions and non-numbers give None"""
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except ValueError:
        return None

def is_valid_email(email: Optional[str]) -> bool:
    return bool(email) and EMAIL_PATTERN.search(email) is not None

def validate_customer(data: Dict[str, Any]):
    """Check the customer edit form"""
    errors = {}
    if _blank(data.get('username')):
        errors['username'] = 'Username is required'
    if _blank(data.get('email')):
        errors['email'] = 'Email is required'
    elif not is_valid_email(data['email']):
        errors['email'] = 'Email is invalid'
    if data.get('status') not in (None, 'active') and _blank(data.get('status_reason')):
        errors['status_reason'] = 'Reason is required when status is not active'
    if errors:
        raise ValidationError(errors)

def validate_status_reason(status: str, reason: Optional[str]):
    """Suspending or banning an account needs a reason"""
    if status != 'active' and _blank(reason):
        raise ValidationError({'reason': 'Reason is required when status is not active'})

def validate_rejection_reason(reason: Optional[str]):
    if _blank(reason):
        raise ValidationError({'reason': 'Rejection reason is required'})

def validate_tier(data: Dict[str, Any]):
    """Check the KOL tier form"""
    errors = {}
    if _blank(data.get('tier_name')):
        errors['tier_name'] = 'Tier name is required'

    commission = _decimal(data.get('commission_rate'))
    if commission is None or not commission.is_finite() or commission < 0 or commission > 100:
        errors['commission_rate'] = 'Commission rate must be between 0 and 100'

    purchases = whole_number(data.get('min_successful_purchases'))
    if purchases is None or purchases < 0:
        errors['min_successful_purchases'] = 'Minimum purchases must be a non-negative whole number'

    if errors:
        raise ValidationError(errors)

def validate_product(data: Dict[str, Any]):
    """Check the product form (images are handled elsewhere)"""
    errors = {}
    if _blank(data.get('name')):
        errors['name'] = 'Product name is required'
    if _blank(data.get('description')):
        errors['description'] = 'Product description is required'
    if _blank(data.get('category_id')):
        errors['category_id'] = 'Category is required'

    discount = _decimal(data.get('discount', 0))
    if discount is None or not discount.is_finite() or discount < 0 or discount > 100:
        errors['discount'] = 'Discount must be between 0 and 100'

    inventory = data.get('inventory') or []
    if not inventory:
        errors['inventory'] = 'At least one size must be selected'
    else:
        for item in inventory:
            price = _decimal(item.get('price'))
            if price is None or not price.is_finite() or price <= 0:
                errors['inventory'] = 'All selected sizes must have valid prices'
                break

    if errors:
        raise ValidationError(errors)

def parse_date(text: str) -> str:
    """YYYY-MM-DD date typed by an admin"""
    try:
        return datetime.strptime(text.strip(), '%Y-%m-%d').date().isoformat()
    except ValueError:
        raise ValidationError({'date': 'Dates use the YYYY-MM-DD format'}) from None

def parse_inventory(text: str) -> List[Dict[str, Any]]:
    """One ``size price quantity`` line per size, e.g. ``M 19.90 5``"""
    inventory = []
    for line in text.strip().splitlines():
        parts = line.split()
        if not parts:
            continue
        price = _decimal(parts[1]) if len(parts) > 1 else None
        quantity = whole_number(parts[2]) if len(parts) > 2 else 0
        if len(parts) > 3 or price is None or not price.is_finite() or quantity is None or quantity < 0:
            raise ValidationError({'inventory': f'Could not read "{line.strip()}", use "size price quantity"'})
        inventory.append({'size': parts[0], 'price': float(price), 'quantity': quantity})
    return inventory
