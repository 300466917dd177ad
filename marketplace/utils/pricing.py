from decimal import Decimal, ROUND_HALF_UP

DEFAULT_MARKUP_RATE = 0.10
DEFAULT_FLAT_FEE = 20


def market_price(seller_price, markup_rate=DEFAULT_MARKUP_RATE, flat_fee=DEFAULT_FLAT_FEE) -> int:
    """Buyer-facing price: seller price plus markup and flat fee, rounded half up to a whole unit."""
    raw = Decimal(str(seller_price)) * (1 + Decimal(str(markup_rate))) + Decimal(str(flat_fee))
    return int(raw.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def platform_profit(seller_price, markup_rate=DEFAULT_MARKUP_RATE, flat_fee=DEFAULT_FLAT_FEE):
    return market_price(seller_price, markup_rate, flat_fee) - seller_price
