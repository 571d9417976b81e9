from utils.constants import DEFAULT_CURRENCY_SYMBOL


def format_currency(amount: float, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Format a float as currency string, e.g. '₹1234.56'."""
    return f"{symbol}{amount:.2f}"


def format_signed(amount: float, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Format with +/- sign."""
    sign = "+" if amount >= 0 else "-"
    return f"{sign}{symbol}{abs(amount):.2f}"


def parse_amount(raw: str) -> float:
    """Parse user input into a float; raises ValueError on blank or garbage."""
    text = (raw or "").strip().replace(",", "")
    if not text:
        raise ValueError("Please enter an amount.")
    try:
        return float(text)
    except ValueError:
        raise ValueError("Invalid amount.") from None
