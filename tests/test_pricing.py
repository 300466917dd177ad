import pytest

from marketplace.utils.pricing import market_price, platform_profit


class TestMarketPrice:
    """Buyer-facing price = round(seller price * 1.10 + 20)"""

    @pytest.mark.parametrize("seller_price, expected", [
        (100, 130),
        (0, 20),
        (1000, 1120),
        (15, 37),        # 36.5 rounds half up
        (99.99, 130),    # 129.989
        (2500.5, 2771),  # 2770.55
    ])
    def test_market_price(self, seller_price, expected):
        assert market_price(seller_price) == expected

    def test_profit_is_market_minus_seller_price(self):
        assert platform_profit(100) == 30
        assert platform_profit(15) == 22

    def test_custom_markup_and_fee(self):
        assert market_price(200, markup_rate=0.25, flat_fee=0) == 250
