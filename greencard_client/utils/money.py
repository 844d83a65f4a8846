"""Cent amount rendering"""


def cents_to_dollars(cents: int) -> str:
    """1234 -> "$12.34" """
    return f"${cents / 100:.2f}"


def signed_cents_to_dollars(cents: int) -> str:
    """Balance change with explicit sign: 500 -> "+$5.00", -250 -> "-$2.50" """
    amount = cents / 100
    if amount >= 0:
        return f"+${amount:.2f}"
    return f"-${abs(amount):.2f}"
