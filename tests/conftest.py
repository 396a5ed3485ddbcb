"""Shared fixtures for the lot analysis tests."""

import pytest

from zoning.property import AnalysisConfig, LotDimensions, Property


@pytest.fixture
def config():
    """Investor criteria from the reference scenario."""
    return AnalysisConfig(
        max_price=900_000,
        min_lot_area=11_500,
        target_profit_margin=20,
        renovation_budget=100_000,
    )


@pytest.fixture
def splittable_property():
    """SF-3 lot, 14,500 SF, 140 ft wide, in a zip with no market or utility overrides."""
    return Property(
        address="4512 Oak Hollow Dr, Austin, TX 78759",
        price=450_000,
        lot_area=14_500,
        zoning_code="SF-3",
        lot_dimensions=LotDimensions(width=140, depth=14_500 / 140),
        data_source="csv",
    )


@pytest.fixture
def small_property():
    """SF-2 lot too small to split."""
    return Property(
        address="901 Small Ln, Austin, TX 78745",
        price=300_000,
        lot_area=5_000,
        zoning_code="SF-2",
    )
