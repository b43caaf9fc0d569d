# petrosys/services/reasoning/client.py
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Literal, Optional, Sequence

import openai
from pydantic import BaseModel

from petrosys.core.config import settings
from petrosys.utils.error_handling import CollaboratorError

logger = logging.getLogger(__name__)


class ChatMessage(BaseModel):
    role: Literal["system", "user"]
    content: str


class ReasoningClient(ABC):
    """
    Contract for the external reasoning service.

    Implementations take a role-tagged conversation and return the completion
    text. Any failure, including an empty completion, must be raised as
    CollaboratorError.
    """

    @abstractmethod
    def complete(self, messages: Sequence[ChatMessage]) -> str:
        """
        Args:
            messages: System and user messages, in order

        Returns:
            Free-form narrative text

        Raises:
            CollaboratorError: If the service fails or returns no text
        """


def _json(payload: Dict[str, Any]) -> str:
    def default(value: Any) -> Any:
        if isinstance(value, BaseModel):
            return value.model_dump(mode="json")
        return str(value)
    return json.dumps(payload, indent=2, default=default, ensure_ascii=False)


def build_messages(
    system: str,
    title: str,
    payload: Dict[str, Any],
    instructions: Sequence[str] = (),
) -> List[ChatMessage]:
    """Build a system + user request; the user turn embeds the typed inputs as JSON."""
    parts = [f"{title}:", ""]
    for name, value in payload.items():
        parts.append(f"{name.replace('_', ' ').title()}:")
        parts.append(_json(value) if isinstance(value, (dict, list, BaseModel)) else str(value))
        parts.append("")
    if instructions:
        parts.append("Provide:")
        parts.extend(f"{i}. {line}" for i, line in enumerate(instructions, start=1))
    return [
        ChatMessage(role="system", content=system),
        ChatMessage(role="user", content="\n".join(parts).strip()),
    ]


class OpenAIReasoningClient(ReasoningClient):
    """ReasoningClient over any OpenAI-compatible chat-completions endpoint."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        temperature: Optional[float] = None,
    ):
        self.model = model or settings.REASONING_MODEL
        self.temperature = settings.REASONING_TEMPERATURE if temperature is None else temperature
        self._client = openai.OpenAI(
            base_url=base_url or settings.REASONING_BASE_URL,
            api_key=api_key or settings.REASONING_API_KEY or "not-set",
            timeout=settings.REASONING_TIMEOUT if timeout is None else timeout,
            max_retries=settings.REASONING_MAX_RETRIES if max_retries is None else max_retries,
        )

    def complete(self, messages: Sequence[ChatMessage]) -> str:
        logger.info(f"Requesting completion from {self.model} ({len(messages)} messages)")
        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=[m.model_dump() for m in messages],
                temperature=self.temperature,
            )
        except openai.OpenAIError as e:
            logger.error(f"Reasoning service call failed: {str(e)}")
            raise CollaboratorError(
                "Reasoning service call failed",
                details={"error_type": type(e).__name__, "error": str(e)},
            ) from e

        text = response.choices[0].message.content if response.choices else None
        if not text or not text.strip():
            logger.error("Reasoning service returned an empty completion")
            raise CollaboratorError("Reasoning service returned an empty completion", details={"model": self.model})
        return text
