# petrosys/services/analysis/base.py
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, TypeVar, Union

from pydantic import BaseModel

from petrosys.schemas.common import AnalysisError, AnalysisRecord, Invalid, IssueKind
from petrosys.services.reasoning.client import ChatMessage, ReasoningClient, build_messages
from petrosys.services.reasoning.prompts import PROMPTS
from petrosys.utils.error_handling import CollaboratorError

logger = logging.getLogger(__name__)

I = TypeVar("I", bound=BaseModel)
R = TypeVar("R")


def log_record_summary(name: str, record: Any) -> None:
    """Warning-level summary of gaps and violations on a parsed record."""
    if isinstance(record, Invalid):
        logger.warning(f"{name}: record invalid ({len(record.errors)} field error(s))")
        return
    if not isinstance(record, AnalysisRecord):
        return
    gaps = len(record.issues_of(IssueKind.EXTRACTION_GAP))
    violations = len(record.issues_of(IssueKind.INVARIANT_VIOLATION))
    if gaps or violations:
        logger.warning(f"{name}: status={record.status.value}, {gaps} gap(s), {violations} violation(s)")
    else:
        logger.info(f"{name}: status={record.status.value}")


class BaseAnalyzer(ABC, Generic[I, R]):
    """
    Base class for every analyzer backed by the reasoning service.

    An analyzer turns its typed inputs into a role-tagged request, sends it to
    the injected client and parses the returned narrative into a record.
    Subclasses must implement `parse`, which is pure and can be called
    directly with stored narratives.
    """
    name: str = "analyzer"
    prompt_key: str = ""

    def __init__(self, client: ReasoningClient):
        """
        Args:
            client: Reasoning service used for every request made by this analyzer
        """
        self.client = client

    def build_payload(self, inputs: I) -> Dict[str, Any]:
        return inputs.model_dump(mode="json")

    def request(self, inputs: I) -> List[ChatMessage]:
        prompt = PROMPTS[self.prompt_key]
        return build_messages(prompt.system, prompt.title, self.build_payload(inputs), prompt.instructions)

    @abstractmethod
    def parse(self, text: str, inputs: I) -> Union[R, Invalid]:
        """Turn a narrative into a record; never raises for missing data."""

    def analyze(self, inputs: I) -> Union[R, Invalid, AnalysisError]:
        """
        Run one analysis.

        Returns:
            The parsed record, an Invalid when the record could not be built,
            or an AnalysisError when the reasoning service failed
        """
        logger.info(f"Running {self.name} analysis")
        try:
            text = self.client.complete(self.request(inputs))
        except CollaboratorError as e:
            logger.error(f"{self.name} analysis failed: {e.message}")
            return AnalysisError(analyzer=self.name, message=e.message, details=e.details)

        if not text or not text.strip():
            logger.error(f"{self.name} analysis failed: empty narrative")
            return AnalysisError(analyzer=self.name, message="Reasoning service returned an empty narrative")

        record = self.parse(text, inputs)
        log_record_summary(self.name, record)
        return record
