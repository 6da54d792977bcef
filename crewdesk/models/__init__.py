def format_amount(minor: int, currency: str = "") -> str:
    """Format minor units as a grouped decimal string: 140000 -> '1,400.00 AED'"""
    formatted = f"{minor / 100:,.2f}"
    if currency:
        return f"{formatted} {currency}"
    return formatted


def parse_amount(text: str) -> int | None:
    """Parse an amount string into minor units. Returns None on invalid input.

    Accepts formats like '1400', '1400.50', '1,400.50'.
    """
    text = text.strip()
    if not text:
        return None
    text = text.replace(",", "")
    try:
        return int(round(float(text) * 100))
    except ValueError:
        return None
