# =============================================================================
# tests/unit/test_assistant.py
# Unit Tests for FabLabAssistant
# =============================================================================

import json
from unittest.mock import MagicMock

import pytest


def _client(content):
    client = MagicMock()
    client.chat.completions.create.return_value.choices = [
        MagicMock(message=MagicMock(content=content))
    ]
    return client


class TestAnalyzeItemText:

    def test_parses_structured_suggestion(self):
        from fabstock_core.ai import FabLabAssistant
        from fabstock_core.models import Category

        client = _client(json.dumps({
            "name": "Arduino Nano",
            "description": "Carte compacte ATmega328P",
            "category": "Électronique",
            "suggestedQuantity": 10,
            "suggestedMinQuantity": 3,
            "locationSuggestion": "Armoire A",
            "estimatedPrice": 6.5,
        }))

        suggestion = FabLabAssistant(api_key="sk-test", model="gpt-test", client=client) \
            .analyze_item_text("10 cartes Arduino Nano")

        assert suggestion.name == "Arduino Nano"
        assert suggestion.category is Category.ELECTRONICS
        assert suggestion.suggested_quantity == 10
        assert suggestion.estimated_price == 6.5
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-test"
        assert kwargs["response_format"] == {"type": "json_object"}

    def test_unknown_category_maps_to_other(self):
        from fabstock_core.ai import FabLabAssistant
        from fabstock_core.models import Category

        client = _client(json.dumps({"name": "Chaise", "category": "Sièges"}))

        suggestion = FabLabAssistant(api_key="sk", client=client).analyze_item_text("une chaise")

        assert suggestion.category is Category.OTHER
        assert suggestion.suggested_quantity == 1

    def test_missing_key_raises_configuration_error(self):
        from fabstock_core.ai import FabLabAssistant
        from fabstock_core.errors import ConfigurationError

        with pytest.raises(ConfigurationError):
            FabLabAssistant(api_key="").analyze_item_text("vis")

    def test_invalid_json_raises_assistant_error(self):
        from fabstock_core.ai import FabLabAssistant
        from fabstock_core.errors import AssistantError

        with pytest.raises(AssistantError):
            FabLabAssistant(api_key="sk", client=_client("not json")).analyze_item_text("vis")

    def test_api_failure_raises_assistant_error(self):
        import openai

        from fabstock_core.ai import FabLabAssistant
        from fabstock_core.errors import AssistantError

        client = MagicMock()
        client.chat.completions.create.side_effect = openai.OpenAIError("rate limited")

        with pytest.raises(AssistantError):
            FabLabAssistant(api_key="sk", client=client).analyze_item_text("vis")

    def test_nameless_result_raises_assistant_error(self):
        from fabstock_core.ai import FabLabAssistant
        from fabstock_core.errors import AssistantError

        with pytest.raises(AssistantError):
            FabLabAssistant(api_key="sk", client=_client("{}")).analyze_item_text("???")


class TestGetAdvice:

    def test_missing_key_returns_hint(self, provider):
        from fabstock_core.ai import MISSING_KEY_HINT, FabLabAssistant

        assert FabLabAssistant(api_key="").get_advice("Quoi ?", provider.items) == MISSING_KEY_HINT

    def test_inventory_is_sent_as_context(self, provider):
        from fabstock_core.ai import FabLabAssistant

        client = _client("Oui, vous avez tout le nécessaire.")

        answer = FabLabAssistant(api_key="sk", client=client).get_advice(
            "Peut-on faire une station météo ?", provider.items
        )

        assert answer == "Oui, vous avez tout le nécessaire."
        system = client.chat.completions.create.call_args.kwargs["messages"][0]["content"]
        assert "- Arduino Uno R3 (12 in stock, Loc: Armoire A, Étagère 2)" in system

    def test_failure_returns_apology(self, provider):
        from fabstock_core.ai import ADVICE_FAILURE, FabLabAssistant

        client = MagicMock()
        client.chat.completions.create.side_effect = RuntimeError("network down")

        assert FabLabAssistant(api_key="sk", client=client).get_advice("?", []) == ADVICE_FAILURE

    def test_empty_answer_fallback(self):
        from fabstock_core.ai import EMPTY_ANSWER, FabLabAssistant

        assert FabLabAssistant(api_key="sk", client=_client(None)).get_advice("?", []) == EMPTY_ANSWER
