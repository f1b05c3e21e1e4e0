import logging
from decimal import Decimal

import pytest

from campus_fees.models.domain import MerchantTier, Order, OrderCategory
from campus_fees.rates import RateConfiguration
from campus_fees.schemas.rates import DistributionTable, default_rate_document
from campus_fees.services.calculators.distribution import DistributionCalculator


def _order(category=OrderCategory.MAIL, has_merchant=False, merchant_tier=None) -> Order:
    return Order(
        order_id="X-1",
        category=category,
        weight=1.0,
        has_merchant=has_merchant,
        merchant_tier=merchant_tier,
    )


def _rates_with(calendar, distribution: DistributionTable) -> RateConfiguration:
    document = default_rate_document().model_copy(update={"distribution": distribution})
    return RateConfiguration(document, calendar)


def test_forfeited_merchant_share_is_reported_as_unallocated(calendar):
    rates = _rates_with(
        calendar,
        DistributionTable(
            platform_rates={OrderCategory.MAIL: Decimal("0.10")},
            delivery_rates={OrderCategory.MAIL: Decimal("0.80")},
            merchant_rates={OrderCategory.MAIL: Decimal("0.10")},
        ),
    )

    distribution = DistributionCalculator(rates).calculate(_order(), Decimal("20.00"))

    assert distribution.delivery_income == Decimal("16.00")
    assert distribution.platform_income == Decimal("2.00")
    assert distribution.merchant_income == Decimal("0.00")
    assert distribution.unallocated_income == Decimal("2.00")
    assert distribution.total_distributed() == Decimal("18.00")
    assert distribution.reconciles_with(Decimal("20.00"))


def test_shopping_split_with_merchant(rates):
    distribution = DistributionCalculator(rates).calculate(
        _order(category=OrderCategory.SHOPPING, has_merchant=True), Decimal("20.00")
    )
    assert (distribution.platform_income, distribution.delivery_income, distribution.merchant_income) == (
        Decimal("2.00"),
        Decimal("4.00"),
        Decimal("14.00"),
    )


@pytest.mark.parametrize("category", list(OrderCategory))
@pytest.mark.parametrize("total", ["0.01", "0.05", "0.99", "13.33", "54.10", "99.99", "1234.57"])
def test_distribution_conserves_total(rates, category, total):
    total_fee = Decimal(total)
    distribution = DistributionCalculator(rates).calculate(_order(category=category, has_merchant=True), total_fee)

    assert abs(distribution.total_distributed() - total_fee) <= Decimal("0.01")
    assert distribution.is_valid()


def test_missing_rates_use_defaults(calendar, caplog):
    rates = _rates_with(calendar, DistributionTable())

    with caplog.at_level(logging.WARNING):
        distribution = DistributionCalculator(rates).calculate(_order(has_merchant=True), Decimal("10.00"))

    assert distribution.platform_income == Decimal("1.00")
    assert distribution.delivery_income == Decimal("8.00")
    assert distribution.merchant_income == Decimal("1.00")
    assert "rate is not configured" in caplog.text


def test_merchant_tier_rate(calendar):
    document = default_rate_document()
    distribution_table = document.distribution.model_copy(
        update={"merchant_tier_rates": {MerchantTier.DIAMOND: Decimal("0.75")}}
    )
    rates = _rates_with(calendar, distribution_table)

    distribution = DistributionCalculator(rates).calculate(
        _order(category=OrderCategory.SHOPPING, has_merchant=True, merchant_tier=MerchantTier.DIAMOND),
        Decimal("100.00"),
    )

    assert distribution.merchant_income == Decimal("75.00")
