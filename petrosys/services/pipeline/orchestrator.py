# petrosys/services/pipeline/orchestrator.py
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from pydantic import BaseModel

from petrosys.core.config import settings
from petrosys.schemas.common import AnalysisError, AnalysisRecord, Invalid, RecordStatus
from petrosys.schemas.inputs import (
    ChanceCalculationInput,
    ChargeHistoryInput,
    PipelineInput,
    RecoveryPredictionInput,
    ReserveEstimationInput,
    RiskAssessmentInput,
    SystemIntegrationInput,
)
from petrosys.schemas.pipeline import (
    _RECORD_FIELDS,
    PipelineResult,
    PipelineStatus,
    PipelineWarning,
    StageName,
    StageOutcome,
    StageState,
)
from petrosys.services.analysis import (
    ChanceCalculationAnalyzer,
    ChancePolicy,
    ChargeHistoryAnalyzer,
    RecoveryPredictionAnalyzer,
    ReserveEstimationAnalyzer,
    RiskAssessmentAnalyzer,
    SystemIntegrationAnalyzer,
)
from petrosys.services.analysis.base import BaseAnalyzer
from petrosys.services.reasoning.client import ReasoningClient

logger = logging.getLogger(__name__)

STAGES: Tuple[StageName, ...] = (
    StageName.INTEGRATION,
    StageName.CHARGE_HISTORY,
    StageName.RESERVE_ESTIMATION,
    StageName.RECOVERY_PREDICTION,
    StageName.RISK_ASSESSMENT,
    StageName.CHANCE_CALCULATION,
)

REQUIREMENTS: Dict[StageName, Tuple[StageName, ...]] = {
    StageName.INTEGRATION: (),
    StageName.CHARGE_HISTORY: (StageName.INTEGRATION,),
    StageName.RESERVE_ESTIMATION: (StageName.INTEGRATION,),
    StageName.RECOVERY_PREDICTION: (StageName.INTEGRATION,),
    StageName.RISK_ASSESSMENT: (StageName.INTEGRATION, StageName.RESERVE_ESTIMATION),
    StageName.CHANCE_CALCULATION: (StageName.RISK_ASSESSMENT,),
}


def _present(record: Optional[BaseModel]) -> bool:
    return isinstance(record, AnalysisRecord) and record.status != RecordStatus.EMPTY


class PipelineOrchestrator:
    """
    Runs the six analysis stages in dependency order.

    A stage runs only when every record it requires is present, either
    produced upstream with at least partial content or supplied by the
    caller as a fallback. Stages that cannot run are marked blocked; stages
    that do not depend on them still run, and every record produced is
    returned.
    """

    def __init__(
        self,
        client: ReasoningClient,
        policy: Optional[ChancePolicy] = None,
        max_workers: Optional[int] = None,
    ):
        """
        Args:
            client: Reasoning service shared by all stage analyzers
            policy: Chance policy for the risk stage; built from settings when omitted
            max_workers: Thread pool size for batch runs
        """
        self.max_workers = max_workers or settings.PIPELINE_MAX_WORKERS
        self.analyzers: Dict[StageName, BaseAnalyzer] = {
            StageName.INTEGRATION: SystemIntegrationAnalyzer(client),
            StageName.CHARGE_HISTORY: ChargeHistoryAnalyzer(client),
            StageName.RESERVE_ESTIMATION: ReserveEstimationAnalyzer(client),
            StageName.RECOVERY_PREDICTION: RecoveryPredictionAnalyzer(client),
            StageName.RISK_ASSESSMENT: RiskAssessmentAnalyzer(client, policy),
            StageName.CHANCE_CALCULATION: ChanceCalculationAnalyzer(client),
        }

    @staticmethod
    def stage_input(stage: StageName, inputs: PipelineInput, available: Dict[StageName, BaseModel]) -> BaseModel:
        """Typed input for one stage from the raw pipeline input and upstream records."""
        if stage == StageName.INTEGRATION:
            return SystemIntegrationInput(
                geological_data=inputs.geological_data,
                geochemical_data=inputs.geochemical_data,
                geophysical_data=inputs.geophysical_data,
                basin_history=inputs.basin_history,
            )
        if stage == StageName.CHARGE_HISTORY:
            return ChargeHistoryInput(
                petroleum_system=available[StageName.INTEGRATION],
                thermal_history=inputs.thermal_history,
                burial_history=inputs.burial_history,
            )
        if stage == StageName.RESERVE_ESTIMATION:
            return ReserveEstimationInput(
                reservoir_parameters=inputs.reservoir_parameters,
                fluid_properties=inputs.fluid_properties,
                uncertainty_factors=inputs.uncertainty_factors,
                petroleum_system=available[StageName.INTEGRATION],
            )
        if stage == StageName.RECOVERY_PREDICTION:
            return RecoveryPredictionInput(
                rock_properties=inputs.rock_properties,
                fluid_properties=inputs.fluid_properties,
                recovery_method=inputs.recovery_method,
            )
        if stage == StageName.RISK_ASSESSMENT:
            return RiskAssessmentInput(
                petroleum_system=available[StageName.INTEGRATION],
                reserve_estimation=available[StageName.RESERVE_ESTIMATION],
                economic_parameters=inputs.economic_parameters,
            )
        return ChanceCalculationInput(
            risk_assessment=available[StageName.RISK_ASSESSMENT],
            analog_data=inputs.analog_data,
        )

    @staticmethod
    def fallback(stage: StageName, inputs: PipelineInput) -> Optional[AnalysisRecord]:
        if stage == StageName.INTEGRATION:
            return inputs.petroleum_system
        if stage == StageName.RESERVE_ESTIMATION:
            return inputs.reserve_estimation
        return None

    def run(self, inputs: PipelineInput) -> PipelineResult:
        """
        Run every stage once.

        Returns:
            PipelineResult with all records produced, one outcome per stage and
            the issues of every produced record as warnings
        """
        label = inputs.name or "unnamed"
        logger.info(f"Starting pipeline run '{label}'")
        available: Dict[StageName, AnalysisRecord] = {}
        records: Dict[str, AnalysisRecord] = {}
        outcomes: List[StageOutcome] = []
        warnings: List[PipelineWarning] = []

        for stage in STAGES:
            missing = [r for r in REQUIREMENTS[stage] if r not in available]
            if missing:
                reason = f"Missing upstream record(s): {', '.join(m.value for m in missing)}"
                logger.warning(f"Pipeline '{label}': {stage.value} blocked. {reason}")
                outcomes.append(StageOutcome(stage=stage, state=StageState.BLOCKED, reason=reason))
                continue

            result = self.analyzers[stage].analyze(self.stage_input(stage, inputs, available))
            fallback = self.fallback(stage, inputs)

            if isinstance(result, (AnalysisError, Invalid)):
                outcome = StageOutcome(
                    stage=stage,
                    state=StageState.FAILED,
                    error=result if isinstance(result, AnalysisError) else None,
                    invalid=result if isinstance(result, Invalid) else None,
                )
                if fallback is not None:
                    available[stage] = records[_RECORD_FIELDS[stage]] = fallback
                    outcome = outcome.model_copy(update={"used_fallback": True, "reason": "Caller-supplied record used"})
                outcomes.append(outcome)
                continue

            warnings.extend(PipelineWarning(stage=stage, issue=issue) for issue in result.issues)
            records[_RECORD_FIELDS[stage]] = result
            outcome = StageOutcome(stage=stage, state=StageState.COMPLETED)
            if _present(result):
                available[stage] = result
            elif fallback is not None:
                available[stage] = records[_RECORD_FIELDS[stage]] = fallback
                outcome = StageOutcome(
                    stage=stage,
                    state=StageState.COMPLETED,
                    used_fallback=True,
                    reason="Nothing extracted; caller-supplied record used",
                )
            else:
                outcome = StageOutcome(stage=stage, state=StageState.COMPLETED, reason="Nothing extracted")
            outcomes.append(outcome)

        blocked_at = next((stage for stage in STAGES if stage not in available), None)
        status = PipelineStatus.COMPLETE if blocked_at is None else PipelineStatus.BLOCKED
        logger.info(
            f"Pipeline run '{label}' finished: {status.value}"
            + (f" at {blocked_at.value}" if blocked_at else "")
            + f", {len(warnings)} warning(s)"
        )
        return PipelineResult(
            name=inputs.name,
            status=status,
            blocked_at=blocked_at,
            stages=outcomes,
            warnings=warnings,
            **records,
        )

    def run_batch(self, runs: Sequence[PipelineInput]) -> List[PipelineResult]:
        """Run independent pipelines concurrently; results keep the input order."""
        logger.info(f"Starting batch of {len(runs)} pipeline run(s) with {self.max_workers} worker(s)")
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(executor.map(self.run, runs))


def run_pipeline(
    raw_inputs: Union[PipelineInput, Dict[str, Any]],
    client: ReasoningClient,
    policy: Optional[ChancePolicy] = None,
) -> PipelineResult:
    """
    Run the pipeline once from raw inputs.

    Raises:
        pydantic.ValidationError: If a raw dict does not fit PipelineInput
    """
    inputs = raw_inputs if isinstance(raw_inputs, PipelineInput) else PipelineInput.model_validate(raw_inputs)
    return PipelineOrchestrator(client, policy=policy).run(inputs)
