# =============================================================================
# fabstock_core/ai/assistant.py
# OpenAI-backed FabLab assistant: item extraction and inventory advice
# =============================================================================
"""
FabLabAssistant - two LLM features for the inventory:

    analyze_item_text  free text -> ItemSuggestion (structured JSON output)
    get_advice         question + inventory snapshot -> plain-text answer

Extraction errors propagate (the add-item form shows them). Advice never
raises: a missing key or a failed call yields a readable message for the chat.
"""

from __future__ import annotations
import json
from typing import Any, List, Optional

import openai

from fabstock_core.config import get_ai_model, get_openai_api_key
from fabstock_core.errors import AssistantError, ConfigurationError
from fabstock_core.logging import get_logger
from fabstock_core.models import Category, InventoryItem, ItemSuggestion

logger = get_logger(__name__)

MISSING_KEY_HINT = "Please configure your OpenAI API key to use the assistant."
ADVICE_FAILURE = "Sorry, an error occurred while consulting the assistant."
EMPTY_ANSWER = "Sorry, I could not generate an answer."

EXTRACTION_PROMPT = """You catalogue objects for a FabLab inventory.
Extract structured information from the user's description and answer with a
single JSON object with these keys:
- "name": short, precise name of the object
- "description": technical description
- "category": one of {categories}
- "suggestedQuantity": quantity mentioned in the text, 1 if none
- "suggestedMinQuantity": a sensible minimum stock level
- "locationSuggestion": a typical storage place in a FabLab
- "estimatedPrice": estimated unit price in euros (number)"""

ADVICE_PROMPT = """You are an expert assistant for a FabLab manager.
Current FabLab inventory:
{inventory}

Answer the user's question in a useful, concise and professional way, in French.
If the question is about the feasibility of a project, check whether the
materials are in stock. If it is about organisation, give expert advice."""


def inventory_context(inventory: List[InventoryItem]) -> str:
    """One line per item: ``- name (qty in stock, Loc: location)``."""
    return "\n".join(
        f"- {item.name} ({item.quantity} in stock, Loc: {item.location})"
        for item in inventory
    )


class FabLabAssistant:
    """
    Usage:
        assistant = FabLabAssistant()
        suggestion = assistant.analyze_item_text("10 Arduino Nano boards")
        answer = assistant.get_advice("Can we build a weather station?", items)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[Any] = None,
    ):
        """
        Args:
            api_key: OpenAI key (defaults to OPENAI_API_KEY / Streamlit secrets)
            model: chat model (defaults to FABSTOCK_AI_MODEL)
            client: pre-built OpenAI client, mainly for tests
        """
        self.api_key = api_key if api_key is not None else get_openai_api_key()
        self.model = model or get_ai_model()
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) or self._client is not None

    @property
    def client(self):
        if self._client is None:
            self._client = openai.OpenAI(api_key=self.api_key)
        return self._client

    def analyze_item_text(self, text: str) -> ItemSuggestion:
        """
        Raises:
            ConfigurationError: no API key
            AssistantError: the model call failed or returned unusable JSON
        """
        if not self.is_configured:
            raise ConfigurationError("OpenAI API key is missing", config_key="OPENAI_API_KEY")

        categories = ", ".join(c.value for c in Category)
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": EXTRACTION_PROMPT.format(categories=categories)},
                    {"role": "user", "content": text},
                ],
                response_format={"type": "json_object"},
                temperature=0.2,
            )
            data = json.loads(response.choices[0].message.content or "{}")
            suggestion = ItemSuggestion.from_dict(data)
        except (openai.OpenAIError, json.JSONDecodeError, ValueError, TypeError, AttributeError) as e:
            logger.error(f"Item extraction failed: {e}")
            raise AssistantError(f"Could not analyse the description: {e}", model=self.model) from e

        if not suggestion.name:
            raise AssistantError("The assistant returned no item name", model=self.model)
        return suggestion

    def get_advice(self, question: str, inventory: List[InventoryItem]) -> str:
        if not self.is_configured:
            return MISSING_KEY_HINT

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": ADVICE_PROMPT.format(inventory=inventory_context(inventory))},
                    {"role": "user", "content": question},
                ],
                max_tokens=700,
                temperature=0.3,
            )
            return response.choices[0].message.content or EMPTY_ANSWER
        except Exception as e:
            logger.error(f"Assistant chat failed: {e}")
            return ADVICE_FAILURE
