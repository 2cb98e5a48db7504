"""Amount and claim line parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

from claimflow.domain.entities import ClaimLine


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "1,234.56"

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    # Remove currency symbols and thousands separators
    amount_str = re.sub(r"[$€£¥]", "", amount_str.strip())
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")

    if not amount.is_finite():
        raise ValueError(f"Amount must be a finite number, got '{amount_str}'")
    return amount


def parse_line(line_str: str) -> ClaimLine:
    """Parse a claim line given as NAME:QUANTITY:UNIT_PRICE.

    The item name may itself contain colons; quantity and price are taken
    from the last two fields.

    Raises:
        ValueError: If the line cannot be parsed
    """
    parts = line_str.rsplit(":", 2)
    if len(parts) != 3 or not parts[0].strip():
        raise ValueError(f"Expected NAME:QUANTITY:UNIT_PRICE, got '{line_str}'")

    name, quantity_str, price_str = parts
    try:
        quantity = int(quantity_str.strip())
    except ValueError:
        raise ValueError(f"Invalid quantity '{quantity_str}' in '{line_str}'")

    return ClaimLine(name=name.strip(), quantity=quantity, unit_price=parse_amount(price_str))
