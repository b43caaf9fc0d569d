from petrosys.services.reasoning.client import (
    ChatMessage,
    OpenAIReasoningClient,
    ReasoningClient,
    build_messages,
)

__all__ = ["ChatMessage", "OpenAIReasoningClient", "ReasoningClient", "build_messages"]
