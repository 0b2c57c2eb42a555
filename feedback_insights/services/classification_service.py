"""Text-in, text-out access to the external classification model.

Callers get back ``{"response": <raw model text>}`` and must not assume the
text is valid JSON.
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Any

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from ..config import MODEL_CONFIG

logger = logging.getLogger(__name__)

_MESSAGE_TYPES: dict[str, type[BaseMessage]] = {
    "system": SystemMessage,
    "user": HumanMessage,
    "assistant": AIMessage,
}


class ClassificationService(ABC):
    """Runs a prompt (or chat messages) against a named model."""

    @abstractmethod
    def run(
        self,
        model: str,
        input: str | None = None,
        messages: list[dict[str, str]] | None = None,
    ) -> dict[str, Any]:
        """Return a mapping with the raw model text under ``response``."""


class OpenAIClassificationService(ClassificationService):
    """Classification service backed by OpenAI chat models via LangChain."""

    def __init__(
        self,
        temperature: float | None = None,
        max_tokens: int | None = None,
        timeout: float | None = None,
    ) -> None:
        self.temperature = float(
            MODEL_CONFIG["temperature"] if temperature is None else temperature
        )
        self.max_tokens = int(
            MODEL_CONFIG["max_tokens"] if max_tokens is None else max_tokens
        )
        self.timeout = float(
            MODEL_CONFIG["request_timeout"] if timeout is None else timeout
        )
        self._models: dict[str, ChatOpenAI] = {}

    def _get_llm(self, model: str) -> ChatOpenAI:
        if model not in self._models:
            if not os.getenv("OPENAI_API_KEY"):
                raise RuntimeError("OPENAI_API_KEY environment variable not set")
            self._models[model] = ChatOpenAI(
                model=model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                timeout=self.timeout,
                max_retries=1,
            )
        return self._models[model]

    def run(
        self,
        model: str,
        input: str | None = None,
        messages: list[dict[str, str]] | None = None,
    ) -> dict[str, Any]:
        llm = self._get_llm(model)

        if messages:
            prompt: Any = [
                _MESSAGE_TYPES.get(m["role"], HumanMessage)(content=m["content"])
                for m in messages
            ]
        elif input is not None:
            prompt = input
        else:
            raise ValueError("Either input or messages must be provided")

        logger.debug(f"Calling {model} ({'messages' if messages else 'input'})")
        result = llm.invoke(prompt)
        content = result.content if isinstance(result.content, str) else str(result.content)
        return {"response": content}


class MockClassificationService(ClassificationService):
    """Keyword-based stand-in for running without an OpenAI API key.

    Mimics a chatty model by wrapping its JSON in a sentence of prose.
    """

    CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
        "billing": ("bill", "charge", "invoice", "refund", "price", "checkout"),
        "performance": ("slow", "lag", "crash", "freeze", "timeout"),
        "user interface": ("button", "layout", "menu", "design", "font"),
        "support": ("support", "agent", "help", "response time"),
    }
    POSITIVE_WORDS = ("love", "great", "excellent", "thanks", "awesome", "good")
    NEGATIVE_WORDS = ("hate", "bad", "broken", "slow", "terrible", "annoying", "crash")

    def run(
        self,
        model: str,
        input: str | None = None,
        messages: list[dict[str, str]] | None = None,
    ) -> dict[str, Any]:
        if messages:
            return {"response": self._merge(messages[-1]["content"])}
        return {"response": self._classify(input or "")}

    def _classify(self, prompt: str) -> str:
        text = prompt.rsplit("Feedback:", 1)[-1].strip()
        lowered = text.lower()

        category = "general"
        for name, keywords in self.CATEGORY_KEYWORDS.items():
            if any(k in lowered for k in keywords):
                category = name
                break

        if any(w in lowered for w in self.NEGATIVE_WORDS):
            sentiment = "negative"
        elif any(w in lowered for w in self.POSITIVE_WORDS):
            sentiment = "positive"
        else:
            sentiment = "neutral"

        snippet = text if len(text) <= 80 else text[:77] + "..."
        payload = {
            "sentiment": sentiment,
            "category": category,
            "summary": f"User reports: {snippet}",
        }
        return f"Here is the analysis: {json.dumps(payload)}"

    @staticmethod
    def _merge(prompt: str) -> str:
        existing, _, incoming = prompt.partition("New summary:")
        existing = existing.rsplit("Existing summary:", 1)[-1].strip()
        incoming = incoming.strip()
        merged = f"{existing.rstrip('.')}; also {incoming[:1].lower()}{incoming[1:]}"
        return json.dumps({"merged_summary": merged})
