# petrosys/schemas/pipeline.py
from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from petrosys.schemas.charge import ChargeHistory
from petrosys.schemas.common import AnalysisError, ExtractionIssue, Invalid
from petrosys.schemas.inputs import PipelineInput
from petrosys.schemas.petroleum_system import PetroleumSystem
from petrosys.schemas.reserves import RecoveryPrediction, ReserveEstimation
from petrosys.schemas.risk import ChanceFactors, RiskAssessment


class StageName(str, Enum):
    INTEGRATION = "integration"
    CHARGE_HISTORY = "charge_history"
    RESERVE_ESTIMATION = "reserve_estimation"
    RECOVERY_PREDICTION = "recovery_prediction"
    RISK_ASSESSMENT = "risk_assessment"
    CHANCE_CALCULATION = "chance_calculation"


class StageState(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    BLOCKED = "blocked"


class PipelineStatus(str, Enum):
    COMPLETE = "complete"
    BLOCKED = "blocked"


StageRecord = Union[
    PetroleumSystem,
    ChargeHistory,
    ReserveEstimation,
    RecoveryPrediction,
    RiskAssessment,
    ChanceFactors,
]


class StageOutcome(BaseModel):
    stage: StageName
    state: StageState
    used_fallback: bool = False
    error: Optional[AnalysisError] = None
    invalid: Optional[Invalid] = None
    reason: Optional[str] = None


class PipelineWarning(BaseModel):
    stage: StageName
    issue: ExtractionIssue


class PipelineResult(BaseModel):
    name: Optional[str] = None
    status: PipelineStatus
    blocked_at: Optional[StageName] = None
    stages: List[StageOutcome] = Field(default_factory=list)
    petroleum_system: Optional[PetroleumSystem] = None
    charge_history: Optional[ChargeHistory] = None
    reserve_estimation: Optional[ReserveEstimation] = None
    recovery_prediction: Optional[RecoveryPrediction] = None
    risk_assessment: Optional[RiskAssessment] = None
    chance_factors: Optional[ChanceFactors] = None
    warnings: List[PipelineWarning] = Field(default_factory=list)

    def record_for(self, stage: StageName) -> Optional[StageRecord]:
        return getattr(self, _RECORD_FIELDS[stage])

    def outcome_for(self, stage: StageName) -> Optional[StageOutcome]:
        return next((o for o in self.stages if o.stage == stage), None)


_RECORD_FIELDS: Dict[StageName, str] = {
    StageName.INTEGRATION: "petroleum_system",
    StageName.CHARGE_HISTORY: "charge_history",
    StageName.RESERVE_ESTIMATION: "reserve_estimation",
    StageName.RECOVERY_PREDICTION: "recovery_prediction",
    StageName.RISK_ASSESSMENT: "risk_assessment",
    StageName.CHANCE_CALCULATION: "chance_factors",
}


class BatchPipelineInput(BaseModel):
    runs: List[PipelineInput] = Field(..., min_length=1)
