"""
Tests for the stage pipeline: dependency order, blocking, fallbacks and batches.
"""
import pytest
from pydantic import ValidationError

from petrosys.schemas.inputs import PipelineInput
from petrosys.schemas.petroleum_system import PetroleumSystem, Reservoir, Source
from petrosys.schemas.pipeline import PipelineStatus, StageName, StageState
from petrosys.schemas.reserves import RecoveryMethod
from petrosys.services.pipeline import PipelineOrchestrator, PipelineService, run_pipeline

REPLIES = {
    "petroleum system analysis": "Source rock quality: 82%. Thermal maturity 0.9. Reservoir porosity 12%.",
    "charge history": "Peak generation at 40 Ma. Trap formation at 70 Ma.",
    "volumetric": "Oil in place: low 25, best 45, high 70 MMBO, confidence 75%.",
    "recovery factors": "Primary recovery 12%. Ultimate recovery 40%.",
    "risks of this": "Source risk 20%. Seal risk 30%.",
    "chance factors": "Source probability 90%. Seal probability 60%.",
}

FALLBACK_SYSTEM = PetroleumSystem(
    source=Source(extracted=True, quality=70.0),
    reservoir=Reservoir(extracted=True, porosity=20.0),
    status="partial",
)


@pytest.fixture
def orchestrator(make_client, weighted_policy):
    def build(**overrides):
        client = make_client(replies={**REPLIES, **overrides})
        return PipelineOrchestrator(client, policy=weighted_policy, max_workers=2)
    return build


def states(result):
    return {outcome.stage: outcome.state for outcome in result.stages}


def test_complete_run(orchestrator):
    result = orchestrator().run(PipelineInput(name="Prospect A"))
    assert result.status == PipelineStatus.COMPLETE
    assert result.blocked_at is None
    assert set(states(result).values()) == {StageState.COMPLETED}
    assert [o.stage for o in result.stages] == list(StageName)
    assert result.petroleum_system.source.quality == 82.0
    assert result.reserve_estimation.oil_in_place.best == 45.0
    assert result.chance_factors.geological_chance == pytest.approx(54.0)


def test_risk_stage_uses_the_configured_policy(orchestrator):
    result = orchestrator().run(PipelineInput())
    # source 20, seal 30, three missing at 50
    assert result.risk_assessment.overall_chance.geological == pytest.approx(7.0)
    assert result.risk_assessment.overall_chance.policy == "weighted"


def test_warnings_carry_the_stage_of_every_issue(orchestrator):
    result = orchestrator().run(PipelineInput())
    records = [result.record_for(stage) for stage in StageName]
    assert len(result.warnings) == sum(len(r.issues) for r in records)
    integration = [w.issue for w in result.warnings if w.stage == StageName.INTEGRATION]
    assert list(result.petroleum_system.issues) == integration


def test_failed_stage_blocks_dependents_and_keeps_prior_work(orchestrator):
    result = orchestrator(volumetric=None).run(PipelineInput(name="Prospect B"))
    assert result.status == PipelineStatus.BLOCKED
    assert result.blocked_at == StageName.RESERVE_ESTIMATION
    assert states(result) == {
        StageName.INTEGRATION: StageState.COMPLETED,
        StageName.CHARGE_HISTORY: StageState.COMPLETED,
        StageName.RESERVE_ESTIMATION: StageState.FAILED,
        StageName.RECOVERY_PREDICTION: StageState.COMPLETED,
        StageName.RISK_ASSESSMENT: StageState.BLOCKED,
        StageName.CHANCE_CALCULATION: StageState.BLOCKED,
    }
    assert result.petroleum_system is not None
    assert result.charge_history is not None
    assert result.recovery_prediction is not None
    assert result.reserve_estimation is None
    assert result.risk_assessment is None

    failed = result.outcome_for(StageName.RESERVE_ESTIMATION)
    assert failed.error.analyzer == "reserve_estimation"
    blocked = result.outcome_for(StageName.RISK_ASSESSMENT)
    assert "reserve_estimation" in blocked.reason


def test_failed_integration_uses_the_fallback(orchestrator):
    inputs = PipelineInput(petroleum_system=FALLBACK_SYSTEM)
    result = orchestrator(**{"petroleum system analysis": None}).run(inputs)
    outcome = result.outcome_for(StageName.INTEGRATION)
    assert outcome.state == StageState.FAILED
    assert outcome.used_fallback
    assert result.petroleum_system == FALLBACK_SYSTEM
    assert result.status == PipelineStatus.COMPLETE


def test_empty_integration_uses_the_fallback(orchestrator):
    inputs = PipelineInput(petroleum_system=FALLBACK_SYSTEM)
    result = orchestrator(**{"petroleum system analysis": "No usable observations."}).run(inputs)
    outcome = result.outcome_for(StageName.INTEGRATION)
    assert outcome.state == StageState.COMPLETED
    assert outcome.used_fallback
    assert result.petroleum_system == FALLBACK_SYSTEM
    assert result.status == PipelineStatus.COMPLETE


def test_empty_integration_without_fallback_blocks_everything(orchestrator):
    result = orchestrator(**{"petroleum system analysis": "No usable observations."}).run(PipelineInput())
    assert result.blocked_at == StageName.INTEGRATION
    assert result.outcome_for(StageName.INTEGRATION).state == StageState.COMPLETED
    assert result.outcome_for(StageName.INTEGRATION).reason == "Nothing extracted"
    assert result.petroleum_system is not None
    downstream = [states(result)[stage] for stage in list(StageName)[1:]]
    assert set(downstream) == {StageState.BLOCKED}


def test_reserve_fallback_unblocks_risk(orchestrator):
    fallback = PipelineInput.model_validate({
        "reserve_estimation": {"oil_in_place": {"low": 10, "best": 20, "high": 30, "valid": True}},
    })
    result = orchestrator(volumetric=None).run(fallback)
    assert result.status == PipelineStatus.COMPLETE
    assert result.reserve_estimation.oil_in_place.best == 20.0
    assert result.outcome_for(StageName.RESERVE_ESTIMATION).used_fallback


def test_batch_keeps_input_order(orchestrator):
    runs = [PipelineInput(name=f"Prospect {i}") for i in range(5)]
    results = orchestrator().run_batch(runs)
    assert [r.name for r in results] == [f"Prospect {i}" for i in range(5)]
    assert all(r.status == PipelineStatus.COMPLETE for r in results)


def test_run_pipeline_from_raw_dict(make_client, weighted_policy):
    client = make_client(replies=REPLIES)
    result = run_pipeline({"name": "Prospect C", "recovery_method": "waterflood"}, client, weighted_policy)
    assert result.name == "Prospect C"
    assert result.recovery_prediction.method == RecoveryMethod.WATERFLOOD


def test_run_pipeline_rejects_malformed_input(make_client, weighted_policy):
    with pytest.raises(ValidationError):
        run_pipeline({"recovery_method": "magic"}, make_client(replies=REPLIES), weighted_policy)


def test_stage_graph(make_client, weighted_policy):
    graph = PipelineService(make_client(), policy=weighted_policy).get_stage_graph()
    assert graph[0] == {"stage": "integration", "requires": []}
    assert graph[4] == {"stage": "risk_assessment", "requires": ["integration", "reserve_estimation"]}
    assert [g["stage"] for g in graph] == [s.value for s in StageName]
