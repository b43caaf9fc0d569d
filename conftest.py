"""
Shared fixtures: a scripted reasoning client so analyzers and the pipeline
run without a network call.
"""
from typing import Dict, List, Optional, Sequence, Union

import pytest

from petrosys.services.analysis import ChancePolicy
from petrosys.services.reasoning import ChatMessage, ReasoningClient
from petrosys.utils.error_handling import CollaboratorError


class FakeReasoningClient(ReasoningClient):
    """
    Returns canned narratives keyed by a phrase of the request title (the
    first line of the user message).

    A reply of None raises CollaboratorError, as a failed service call would.
    Unmatched requests get the default reply.
    """

    def __init__(self, replies: Optional[Dict[str, Optional[str]]] = None, default: Union[str, None] = ""):
        self.replies = replies or {}
        self.default = default
        self.requests: List[Sequence[ChatMessage]] = []

    def complete(self, messages: Sequence[ChatMessage]) -> str:
        self.requests.append(messages)
        title = messages[-1].content.splitlines()[0].lower()
        for key, reply in self.replies.items():
            if key.lower() in title:
                return self._reply(reply)
        return self._reply(self.default)

    @staticmethod
    def _reply(reply: Optional[str]) -> str:
        if reply is None:
            raise CollaboratorError("Reasoning service unavailable", details={"error_type": "APIConnectionError"})
        return reply


@pytest.fixture
def make_client():
    return FakeReasoningClient


@pytest.fixture
def weighted_policy():
    return ChancePolicy(combination="weighted", geological_weight=0.5, commercial_weight=0.5, missing_risk=50.0)
