from decimal import Decimal

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "THB": "฿",
    # Add other currencies as needed
}

def get_currency_symbol(currency_code: str) -> str:
    """Returns the currency symbol for a given currency code."""
    return CURRENCY_SYMBOLS.get(currency_code.upper(), "")

def format_money(amount: Decimal | float | int | None, currency_code: str) -> str:
    """Format an amount with two decimals and its currency symbol, e.g. ``$120.00``."""
    value = Decimal(str(amount or 0))
    symbol = get_currency_symbol(currency_code)
    if symbol:
        return f"{symbol}{value:,.2f}"
    return f"{value:,.2f} {currency_code.upper()}"
