# petrosys/schemas/common.py
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field


class IssueKind(str, Enum):
    EXTRACTION_GAP = "extraction_gap"
    INVARIANT_VIOLATION = "invariant_violation"
    DATA_QUALITY = "data_quality"


class RecordStatus(str, Enum):
    COMPLETE = "complete"
    PARTIAL = "partial"
    EMPTY = "empty"


class ExtractionIssue(BaseModel):
    """A per-field note left by extraction or validation. Never fatal."""
    model_config = ConfigDict(frozen=True)

    kind: IssueKind
    field: str = Field(..., description="Dotted path of the affected field")
    message: str
    observed: Optional[Any] = Field(None, description="Raw value before it was defaulted or clamped")


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class AnalysisRecord(FrozenModel):
    """
    Base for every record produced from a narrative.

    Attributes:
        status: Share of the record's fields that were actually found in the text
        issues: Gaps, invariant violations and data-quality warnings
    """
    status: RecordStatus = RecordStatus.COMPLETE
    issues: Tuple[ExtractionIssue, ...] = ()

    @computed_field
    @property
    def valid(self) -> bool:
        return not any(i.kind == IssueKind.INVARIANT_VIOLATION for i in self.issues)

    def issues_of(self, kind: IssueKind) -> Tuple[ExtractionIssue, ...]:
        return tuple(i for i in self.issues if i.kind == kind)


class RangeEstimate(FrozenModel):
    low: float = Field(0.0, ge=0, description="Low case")
    best: float = Field(0.0, ge=0, description="Best case")
    high: float = Field(0.0, ge=0, description="High case")
    confidence: float = Field(50.0, ge=0, le=100, description="Confidence, %")
    valid: bool = Field(False, description="False when the range was not found or was not monotonic")


class RecoverableEstimate(FrozenModel):
    best: float = Field(0.0, ge=0, description="Best estimate of recoverable volume")
    recovery_factor: float = Field(0.0, ge=0, le=100, description="Recovery factor, %")
    uncertainty: float = Field(0.0, ge=0, description="Uncertainty, ± %")


class MeasuredValue(FrozenModel):
    value: float = Field(0.0, description="Estimated value in the field's unit")
    uncertainty: float = Field(0.0, ge=0, description="Uncertainty, ± as stated in the narrative")
    confidence: float = Field(50.0, ge=0, le=100, description="Confidence, %")


class DistributionType(str, Enum):
    NORMAL = "normal"
    LOGNORMAL = "lognormal"
    UNIFORM = "uniform"
    TRIANGULAR = "triangular"
    UNKNOWN = "unknown"


class Distribution(FrozenModel):
    mean: float = 0.0
    std: float = Field(0.0, ge=0)
    confidence: float = Field(50.0, ge=0, le=100, description="Confidence, %")
    distribution: DistributionType = DistributionType.UNKNOWN


class Invalid(FrozenModel):
    """Tagged result returned instead of a record that could not be constructed."""
    record_type: str
    errors: Tuple[Dict[str, Any], ...] = ()

    @computed_field
    @property
    def valid(self) -> bool:
        return False


class AnalysisError(FrozenModel):
    """Returned by an analyzer when the reasoning service produced no text to parse."""
    analyzer: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)
