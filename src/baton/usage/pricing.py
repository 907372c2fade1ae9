"""Cost calculation for token usage.

Prices are per 1M tokens. Unknown models cost 0.0 so that test and local models
can be charged units without a price entry.
"""

# Prices per 1M tokens (USD)
PROVIDER_PRICES: dict[str, dict[str, float]] = {
    "claude-opus-4-1": {"input": 15.00, "output": 75.00},
    "claude-sonnet-4-5": {"input": 3.00, "output": 15.00},
    "claude-haiku-4-5": {"input": 1.00, "output": 5.00},
    "gpt-4o": {"input": 2.50, "output": 10.00},
    "gpt-4o-mini": {"input": 0.15, "output": 0.60},
}


def calculate_cost(input_tokens: int, output_tokens: int, model: str) -> float:
    """Calculate cost in USD for the given token counts and model.

    Args:
        input_tokens: Prompt tokens sent to the model
        output_tokens: Tokens generated by the model
        model: Model name without provider prefix (e.g., "claude-sonnet-4-5")

    Returns:
        Total cost in USD. Returns 0.0 for unknown models or zero tokens.
    """
    prices = PROVIDER_PRICES.get(model)
    if prices is None:
        return 0.0

    input_cost = (input_tokens / 1_000_000) * prices["input"]
    output_cost = (output_tokens / 1_000_000) * prices["output"]
    return input_cost + output_cost
