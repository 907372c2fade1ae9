"""Tests for cost calculation."""

import pytest

from baton.usage.pricing import PROVIDER_PRICES, calculate_cost


class TestCalculateCost:
    """Test calculate_cost."""

    def test_known_model(self) -> None:
        cost = calculate_cost(1_000_000, 1_000_000, "claude-sonnet-4-5")
        assert cost == pytest.approx(3.00 + 15.00)

    def test_input_only(self) -> None:
        cost = calculate_cost(500_000, 0, "gpt-4o-mini")
        assert cost == pytest.approx(0.075)

    def test_unknown_model_is_free(self) -> None:
        assert calculate_cost(1_000, 1_000, "test") == 0.0

    def test_zero_tokens(self) -> None:
        assert calculate_cost(0, 0, "claude-opus-4-1") == 0.0

    def test_every_model_has_input_and_output_price(self) -> None:
        for model, prices in PROVIDER_PRICES.items():
            assert set(prices) == {"input", "output"}, model
