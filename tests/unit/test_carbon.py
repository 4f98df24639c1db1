"""
Unit tests for carbon calculations.

WHAT: Test industry averages, savings, mile conversion and display helpers
WHY: The result card frames the winner's footprint with these numbers
HOW: Direct function calls with known values
"""

import pytest

from cartai.services.carbon import (
    calculate_carbon_reduction,
    calculate_carbon_savings,
    carbon_to_miles,
    compute_order_savings,
    format_carbon_with_context,
    get_carbon_comparison,
    get_industry_average,
)


@pytest.mark.unit
class TestIndustryAverage:

    @pytest.mark.parametrize("product,expected", [
        ("Bamboo Toothbrushes", 25.0),
        ("running shoes", 35.0),
        ("trail sneakers", 35.0),
        ("laptop stand", 50.0),
        ("cotton shirts", 20.0),
        ("office chair", 60.0),
        ("widgets", 30.0),
    ])
    def test_keyword_lookup(self, product, expected):
        assert get_industry_average(product) == expected


@pytest.mark.unit
class TestSavings:

    def test_order_savings(self):
        # 12kg per unit against a 25kg average, 10 units
        saved, miles = compute_order_savings("bamboo toothbrushes", 120.0, 10)

        assert saved == 130.0
        assert miles == 325

    def test_savings_never_negative(self):
        # 40kg per unit is worse than the 25kg average
        saved, miles = compute_order_savings("toothbrushes", 400.0, 10)

        assert saved == 0.0
        assert miles == 0

    def test_savings_at_average_is_zero(self):
        assert calculate_carbon_savings(30.0, 30.0) == 0.0

    def test_miles(self):
        assert carbon_to_miles(40.0) == 100
        assert carbon_to_miles(0.0) == 0


@pytest.mark.unit
class TestDisplayHelpers:

    def test_reduction(self):
        assert calculate_carbon_reduction(15.0, 30.0) == 50
        assert calculate_carbon_reduction(45.0, 30.0) == -50
        assert calculate_carbon_reduction(10.0, 0.0) == 0

    def test_context_strings(self):
        assert format_carbon_with_context(15.0, 30.0) == "15kg CO2 (50% less than average)"
        assert format_carbon_with_context(45.0, 30.0) == "45kg CO2 (50% more than average)"
        assert format_carbon_with_context(30.0, 30.0) == "30kg CO2 (industry average)"

    def test_comparison_tiers(self):
        assert "road trip" in get_carbon_comparison(250.0)
        assert "weekend getaway" in get_carbon_comparison(50.0)
        assert "daily commute" in get_carbon_comparison(30.0)
        assert get_carbon_comparison(10.0) == "Not driving 25 miles"
        assert get_carbon_comparison(2.0) == "Saving 2kg CO2"
