from unittest import mock

import pytest
from django.test import override_settings

from fiscalflow.insights.services import InsightUnavailableError
from fiscalflow.insights.services import compare_capex_quotes
from fiscalflow.insights.services import forecast_budget
from fiscalflow.integrations.llm.client import GeminiClient
from fiscalflow.integrations.llm.client import LLMRequestError
from fiscalflow.integrations.llm.client import get_llm_client_from_settings

QUOTES = [
    {"vendor": "Globex", "description": "10 laptops", "price": 12000, "terms": "NET30"},
    {"vendor": "Initech", "description": "10 laptops", "price": 11500, "terms": ""},
]


def fake_client(answer=None, error=None):
    client = mock.Mock()
    if error is not None:
        client.generate_json.side_effect = error
    else:
        client.generate_json.return_value = answer
    return client


def test_forecast_passes_model_text_through():
    client = fake_client({"forecastedBudget": "About 1.2M", "extra": 1})
    result = forecast_budget("2023: 1M", "Lease 100k", client=client)
    assert result == {"forecastedBudget": "About 1.2M"}
    prompt = client.generate_json.call_args.args[0]
    assert "2023: 1M" in prompt
    assert "Lease 100k" in prompt


def test_comparison_requires_both_keys():
    client = fake_client({"summary": "Initech is cheaper"})
    with pytest.raises(InsightUnavailableError):
        compare_capex_quotes(QUOTES, "price", client=client)

    client = fake_client({"summary": "s", "recommendation": "Initech"})
    assert compare_capex_quotes(QUOTES, "price", client=client) == {
        "summary": "s",
        "recommendation": "Initech",
    }


def test_provider_errors_become_unavailable():
    client = fake_client(error=LLMRequestError("Gemini request failed"))
    with pytest.raises(InsightUnavailableError):
        forecast_budget("x", "y", client=client)


@override_settings(LLM_ENABLED=False)
def test_disabled_llm_is_unavailable():
    assert get_llm_client_from_settings() is None
    with pytest.raises(InsightUnavailableError):
        forecast_budget("x", "y")


@override_settings(LLM_ENABLED=True, LLM_PROVIDER="gemini", GEMINI_API_KEY="k")
def test_gemini_client_from_settings():
    assert isinstance(get_llm_client_from_settings(), GeminiClient)


def test_gemini_parse():
    obj = {"candidates": [{"content": {"parts": [{"text": '{"summary": "ok"}'}]}}]}
    assert GeminiClient._parse(obj) == {"summary": "ok"}  # noqa: SLF001
    with pytest.raises(LLMRequestError):
        GeminiClient._parse({"candidates": []})  # noqa: SLF001
    bad = {"candidates": [{"content": {"parts": [{"text": "not json"}]}}]}
    with pytest.raises(LLMRequestError):
        GeminiClient._parse(bad)  # noqa: SLF001
