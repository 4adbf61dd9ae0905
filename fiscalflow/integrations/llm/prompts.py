from __future__ import annotations

import json
from typing import Any

FORECAST_SYSTEM = (
    "You are a financial analyst. Return ONLY a compact JSON object (no "
    'markdown) of the form {"forecastedBudget": "<text>"}.'
)

COMPARISON_SYSTEM = (
    "You are an expert budget manager specializing in comparing CAPEX quotes. "
    "Return ONLY a compact JSON object (no markdown) of the form "
    '{"summary": "<text>", "recommendation": "<text>"}.'
)


def build_forecast_prompt(historical_spending_data: str, contract_obligations: str) -> str:
    """Ask for a next-period budget forecast with its reasoning."""
    return (
        "Analyze the historical spending data and contract obligations to "
        "forecast the budget for the next period.\n\n"
        f"Historical Spending Data (CSV):\n{historical_spending_data}\n\n"
        f"Contract Obligations:\n{contract_obligations}\n\n"
        "Provide a detailed explanation of how you arrived at the forecasted "
        "budget in the forecastedBudget field.\n\n"
        "Return JSON now:"
    )


def build_quote_comparison_prompt(quotes: list[dict[str, Any]], criteria: str) -> str:
    lines = []
    for quote in quotes:
        lines.extend(
            [
                f"Vendor: {quote.get('vendor', '')}",
                f"Description: {quote.get('description', '')}",
                f"Price: {quote.get('price', '')}",
                f"Terms: {quote.get('terms', '')}",
                "",
            ]
        )
    return (
        "Use the following information to compare the quotes, and recommend "
        "which quote to choose, and why.\n\n"
        "Quotes:\n"
        + "\n".join(lines)
        + f"\nComparison Criteria: {criteria}\n\n"
        + "Raw quotes as JSON: "
        + json.dumps(quotes, ensure_ascii=False, default=str)
        + "\n\nReturn JSON now:"
    )
