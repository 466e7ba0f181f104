"""
AI assistant for FabStock Manager (OpenAI chat completions).
"""

from .assistant import (
    ADVICE_FAILURE,
    EMPTY_ANSWER,
    MISSING_KEY_HINT,
    FabLabAssistant,
    inventory_context,
)

__all__ = [
    "FabLabAssistant",
    "inventory_context",
    "MISSING_KEY_HINT",
    "ADVICE_FAILURE",
    "EMPTY_ANSWER",
]
