"""Budget forecasting and CAPEX quote comparison backed by an external model.

Only the request/response contract matters here; whatever the model says is
passed through as text.
"""

from __future__ import annotations

import logging
from typing import Any

from fiscalflow.integrations.llm.client import LLMClient
from fiscalflow.integrations.llm.client import LLMRequestError
from fiscalflow.integrations.llm.client import get_llm_client_from_settings
from fiscalflow.integrations.llm.prompts import COMPARISON_SYSTEM
from fiscalflow.integrations.llm.prompts import FORECAST_SYSTEM
from fiscalflow.integrations.llm.prompts import build_forecast_prompt
from fiscalflow.integrations.llm.prompts import build_quote_comparison_prompt

logger = logging.getLogger(__name__)


class InsightUnavailableError(Exception):
    """The model could not produce an answer (disabled, unreachable, garbled)."""


def _ask(client: LLMClient | None, prompt: str, system: str, keys: tuple[str, ...]):
    client = client or get_llm_client_from_settings()
    if client is None:
        msg = "No language model is configured."
        raise InsightUnavailableError(msg)
    try:
        result = client.generate_json(prompt, system=system)
    except LLMRequestError as exc:
        logger.warning("Insight request failed: %s", exc)
        raise InsightUnavailableError(str(exc)) from exc
    if not isinstance(result, dict) or any(
        not isinstance(result.get(key), str) for key in keys
    ):
        logger.warning("Insight response missing %s", ", ".join(keys))
        msg = "The language model returned an unexpected answer."
        raise InsightUnavailableError(msg)
    return {key: result[key] for key in keys}


def forecast_budget(
    historical_spending_data: str,
    contract_obligations: str,
    *,
    client: LLMClient | None = None,
) -> dict[str, str]:
    prompt = build_forecast_prompt(historical_spending_data, contract_obligations)
    return _ask(client, prompt, FORECAST_SYSTEM, ("forecastedBudget",))


def compare_capex_quotes(
    quotes: list[dict[str, Any]],
    criteria: str,
    *,
    client: LLMClient | None = None,
) -> dict[str, str]:
    prompt = build_quote_comparison_prompt(quotes, criteria)
    return _ask(client, prompt, COMPARISON_SYSTEM, ("summary", "recommendation"))
