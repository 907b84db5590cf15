from decimal import Decimal, InvalidOperation


def format_currency(amount: Decimal, symbol: str = "$") -> str:
    """Format an amount as currency string, e.g. '$1,234.56'."""
    return f"{symbol}{amount:,.2f}"


def format_signed(amount: Decimal, symbol: str = "$") -> str:
    """Format with +/- sign."""
    sign = "+" if amount >= 0 else "-"
    return f"{sign}{symbol}{abs(amount):,.2f}"


def parse_amount(text: str) -> Decimal:
    """Parse user input like '1,234.50' or '$12' into a Decimal.

    Raises ValueError on anything that is not a finite number.
    """
    cleaned = (text or "").strip().replace("$", "").replace(",", "")
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {text!r}") from None
    if not value.is_finite():
        raise ValueError(f"Invalid amount: {text!r}")
    return value.quantize(Decimal("0.01"))
