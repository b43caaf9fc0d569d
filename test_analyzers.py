"""
Tests for the six stage analyzers, the chance policy and the narrative parsers.
"""
from types import SimpleNamespace

import pytest

from petrosys.schemas.charge import TimelinePosition
from petrosys.schemas.common import AnalysisError, IssueKind, RecordStatus
from petrosys.schemas.inputs import RecoveryPredictionInput, SystemIntegrationInput
from petrosys.schemas.petroleum_system import PetroleumSystem, Source, TrapType
from petrosys.schemas.reserves import RecoveryMethod
from petrosys.schemas.risk import EconomicRisk, GeologicalRisk, OverallChance, RiskAssessment, TechnicalRisk
from petrosys.services.analysis import (
    ChancePolicy,
    RecoveryPredictionAnalyzer,
    SystemIntegrationAnalyzer,
    parse_chance_factors,
    parse_charge_history,
    parse_petroleum_system,
    parse_recovery_prediction,
    parse_reserve_estimation,
    parse_risk_assessment,
)
from petrosys.services.analysis.charge_history import timeline_position
from petrosys.services.analysis.system_integration import trap_type
from petrosys.services.parsers import parse_narrative
from petrosys.services.reasoning import build_messages
from petrosys.utils.error_handling import NotFoundError, ValidationError

NARRATIVE = (
    "Source rock quality: 82%. Thermal maturity 0.9. Reservoir porosity 12%. "
    "Oil in place: low 25, best 45, high 70 MMBO, confidence 75%."
)

RISK_NARRATIVE = (
    "Source risk 20%. Reservoir risk 30%. Seal risk 10%. Trap risk 25%. Timing risk 15%. "
    "Oil price risk 40%. Cost risk 30%. Market risk 20%. Regulatory risk 10%. "
    "Drilling risk 20%. Completion risk 10%. Production risk 15%. Infrastructure risk 5%. "
    "Overall chance of success 90%."
)

CHANCE_NARRATIVE = (
    "Source probability 90%. Migration probability 80%. Reservoir probability 70%. "
    "Seal probability 60%. Trap probability 80%. Timing probability 90%. "
    "Geological chance 50%. Commercial chance 40%. EMV 125 $MM. P(seal | trap) = 70%."
)


def fields_with(record, kind):
    return {issue.field for issue in record.issues_of(kind)}


# --- Petroleum system ---

def test_end_to_end_narrative_petroleum_system():
    system = parse_petroleum_system(NARRATIVE)
    assert system.source.quality == 82.0
    assert system.source.maturity == 0.9
    assert system.reservoir.porosity == 12.0
    assert system.status == RecordStatus.PARTIAL
    assert system.valid


def test_missing_elements_are_flagged_and_others_kept():
    system = parse_petroleum_system(NARRATIVE)
    assert system.source.extracted and system.reservoir.extracted
    assert not system.migration.extracted
    assert not system.seal.extracted
    assert not system.trap.extracted
    gaps = fields_with(system, IssueKind.EXTRACTION_GAP)
    assert {"migration.efficiency", "migration.pathways", "seal.integrity", "trap.closure"} <= gaps
    assert system.partial


def test_full_petroleum_system():
    text = (
        "Source rock quality 85% with thermal maturity 70%; optimal generation timing. "
        "Migration efficiency 60% over a migration distance of 15 km through a sandstone carrier bed. "
        "Reservoir quality 75%, average porosity 22%, permeability 350 mD, net pay 40 m. "
        "Seal integrity 90%, seal thickness 120 m, lateral continuity 80%. "
        "A four-way anticlinal trap with vertical closure 150 m over a closure area of 25 km2, trap integrity 85%."
    )
    system = parse_petroleum_system(text)
    assert system.source.timing.value == "optimal"
    assert system.migration.distance == 15.0
    assert system.migration.pathways
    assert system.reservoir.permeability == 350.0
    assert system.reservoir.thickness == 40.0
    assert system.seal.thickness == 120.0
    assert system.trap.type == TrapType.STRUCTURAL
    assert system.trap.closure == 150.0
    assert system.trap.area == 25.0
    assert system.status == RecordStatus.COMPLETE


def test_out_of_range_percentage_is_clamped_and_record_invalid():
    system = parse_petroleum_system("Seal integrity 140%. Reservoir porosity 12%.")
    assert system.seal.integrity == 100.0
    assert "seal.integrity" in fields_with(system, IssueKind.INVARIANT_VIOLATION)
    assert not system.valid


@pytest.mark.parametrize("text, expected", [
    ("A combination trap of fault and pinch-out.", TrapType.COMBINATION),
    ("Stratigraphic pinch-out against the high.", TrapType.STRATIGRAPHIC),
    ("A four-way dip closure.", TrapType.STRUCTURAL),
    ("Closure is mapped at top reservoir.", TrapType.STRUCTURAL),
    ("Nothing is known about the geometry.", TrapType.UNKNOWN),
    ("A combination of poor data limits confidence. Anticline with vertical closure 50 m.", TrapType.STRUCTURAL),
    ("Stratigraphic data are sparse. A four-way closure is mapped.", TrapType.STRUCTURAL),
])
def test_trap_type(text, expected):
    assert trap_type(text) == expected


def test_parsing_is_idempotent():
    assert parse_petroleum_system(NARRATIVE) == parse_petroleum_system(NARRATIVE)
    assert parse_reserve_estimation(NARRATIVE) == parse_reserve_estimation(NARRATIVE)


# --- Reserves ---

def test_end_to_end_narrative_reserves():
    reserves = parse_reserve_estimation(NARRATIVE)
    oil = reserves.oil_in_place
    assert (oil.low, oil.best, oil.high, oil.confidence) == (25.0, 45.0, 70.0, 75.0)
    assert oil.valid
    assert reserves.valid
    assert reserves.status == RecordStatus.PARTIAL


def test_reversed_range_is_flagged_not_reordered():
    reserves = parse_reserve_estimation("Oil in place: low 70, best 45, high 25 MMBO, confidence 75%.")
    assert not reserves.oil_in_place.valid
    assert reserves.oil_in_place.high == 0.0
    assert "oil_in_place" in fields_with(reserves, IssueKind.INVARIANT_VIOLATION)
    assert not reserves.valid


def test_malformed_gas_range_leaves_oil_intact():
    text = "Oil in place: low 25, best 45, high 70 MMBO. Gas in place: low 300, best 200, high 100 Bcf."
    reserves = parse_reserve_estimation(text)
    assert reserves.oil_in_place.valid
    assert reserves.oil_in_place.best == 45.0
    assert not reserves.gas_in_place.valid


def test_recoverable_volume_with_recovery_factor():
    text = (
        "Oil in place: low 25, best 45, high 70 MMbbl. "
        "Recoverable oil 20 MMbbl with a recovery factor of 35% ±5%."
    )
    reserves = parse_reserve_estimation(text)
    assert reserves.recoverable_oil.best == 20.0
    assert reserves.recoverable_oil.recovery_factor == 35.0
    assert reserves.recoverable_oil.uncertainty == 5.0


def test_gas_in_tcf_is_stored_in_bcf():
    reserves = parse_reserve_estimation(
        "Gas in place: low 1.2, best 2.5, high 4 Tcf. Recoverable gas 1.5 Tcf with recovery factor 60%."
    )
    gas = reserves.gas_in_place
    assert (gas.low, gas.best, gas.high) == (pytest.approx(1200.0), pytest.approx(2500.0), pytest.approx(4000.0))
    assert gas.valid
    assert reserves.recoverable_gas.best == pytest.approx(1500.0)
    assert reserves.recoverable_gas.recovery_factor == 60.0


def test_recoverable_above_in_place_is_a_data_quality_warning():
    text = "Oil in place: low 25, best 45, high 70 MMbbl. Recoverable oil 90 MMbbl, recovery factor 40%."
    reserves = parse_reserve_estimation(text)
    assert "recoverable_oil.best" in fields_with(reserves, IssueKind.DATA_QUALITY)
    assert reserves.valid


def test_reserves_without_reservoir_element_warns():
    system = PetroleumSystem(source=Source(extracted=True, quality=80.0))
    reserves = parse_reserve_estimation(NARRATIVE, system)
    assert "petroleum_system.reservoir" in fields_with(reserves, IssueKind.DATA_QUALITY)


# --- Charge history ---

def test_trap_after_generation_is_flagged():
    charge = parse_charge_history("Peak generation at 85 Ma. Trap formation at 60 Ma. Critical moment 55 Ma.")
    assert charge.generation.age_ma == 85.0
    assert charge.critical_moment.trap_formation_ma == 60.0
    assert charge.critical_moment.age_ma == 55.0
    assert charge.critical_moment.position == TimelinePosition.TRAP_POSTDATES_GENERATION
    assert "critical_moment.position" in fields_with(charge, IssueKind.DATA_QUALITY)
    assert charge.migration.age_ma is None


def test_ages_in_million_years_ago():
    charge = parse_charge_history("Peak generation at 85 Mya. Trap formation at 60 Myr.")
    assert charge.generation.age_ma == 85.0
    assert charge.critical_moment.trap_formation_ma == 60.0


def test_timeline_position():
    assert timeline_position(70.0, 40.0) == TimelinePosition.TRAP_PREDATES_GENERATION
    assert timeline_position(60.5, 60.0) == TimelinePosition.COEVAL
    assert timeline_position(30.0, 60.0) == TimelinePosition.TRAP_POSTDATES_GENERATION
    assert timeline_position(None, 60.0, "The trap predates peak generation.") == \
        TimelinePosition.TRAP_PREDATES_GENERATION
    assert timeline_position(None, None, "") == TimelinePosition.UNKNOWN


def test_charge_without_source_element_warns():
    charge = parse_charge_history("Peak generation at 40 Ma. Trap formation at 70 Ma.", PetroleumSystem())
    assert charge.critical_moment.position == TimelinePosition.TRAP_PREDATES_GENERATION
    assert fields_with(charge, IssueKind.DATA_QUALITY) == {"petroleum_system.source"}


# --- Recovery ---

def test_recovery_factors_keep_unstated_stages_empty():
    text = (
        "Primary recovery factor 15%. Secondary recovery 30%. Tertiary recovery 8%. "
        "Reservoir heterogeneity reduces sweep efficiency."
    )
    prediction = parse_recovery_prediction(text, RecoveryMethod.WATERFLOOD)
    assert (prediction.primary, prediction.secondary, prediction.tertiary) == (15.0, 30.0, 8.0)
    assert prediction.ultimate is None
    assert prediction.method == RecoveryMethod.WATERFLOOD
    assert "tertiary" in fields_with(prediction, IssueKind.DATA_QUALITY)
    assert prediction.limiting_factors == ("Reservoir heterogeneity reduces sweep efficiency.",)
    assert prediction.status == RecordStatus.PARTIAL


def test_recovery_analyzer_passes_method_through(make_client):
    client = make_client(default="Primary recovery 12%. Ultimate recovery 40%.")
    prediction = RecoveryPredictionAnalyzer(client).analyze(
        RecoveryPredictionInput(recovery_method=RecoveryMethod.THERMAL)
    )
    assert prediction.method == RecoveryMethod.THERMAL
    assert prediction.ultimate == 40.0


# --- Risk and chance ---

def test_overall_chance_is_derived_not_extracted(weighted_policy):
    risk = parse_risk_assessment(RISK_NARRATIVE, weighted_policy)
    assert risk.status == RecordStatus.COMPLETE
    assert risk.overall_chance.geological == pytest.approx(32.13, abs=0.01)
    assert risk.overall_chance.commercial == pytest.approx(65.625, abs=0.01)
    assert risk.overall_chance.combined == pytest.approx(48.88, abs=0.01)
    assert risk.overall_chance.combined != 90.0


def test_product_policy():
    policy = ChancePolicy(combination="product")
    risk = parse_risk_assessment(RISK_NARRATIVE, policy)
    assert risk.overall_chance.policy == "product"
    assert risk.overall_chance.combined == pytest.approx(32.13 * 65.625 / 100.0, abs=0.01)


def test_missing_risk_scores_use_the_substitute(weighted_policy):
    risk = parse_risk_assessment("Source risk 20%.", weighted_policy)
    assert risk.geological_risk.missing == ("reservoir", "seal", "trap", "timing")
    assert risk.overall_chance.geological == pytest.approx(5.0)
    assert risk.overall_chance.commercial == pytest.approx(25.0)
    assert risk.status == RecordStatus.PARTIAL


def test_combined_chance_is_a_pure_function_of_scores(weighted_policy):
    geological = GeologicalRisk(source=10, reservoir=10, seal=10, trap=10, timing=10)
    economic = EconomicRisk(oil_price=20, cost=20, market=20, regulatory=20)
    technical = TechnicalRisk(drilling=0, completion=0, production=0, infrastructure=0)
    first = weighted_policy.derive(geological, economic, technical)
    second = weighted_policy.derive(geological, economic, technical)
    assert first == second
    assert first.geological == pytest.approx(59.05, abs=0.01)
    assert first.commercial == pytest.approx(80.0)


def test_chance_policy_rejects_bad_configuration():
    with pytest.raises(ValueError):
        ChancePolicy(combination="maximum")
    with pytest.raises(ValueError):
        ChancePolicy(geological_weight=0.0, commercial_weight=0.0)
    with pytest.raises(ValueError):
        ChancePolicy(missing_risk=150.0)


def test_chance_policy_from_settings():
    config = SimpleNamespace(
        CHANCE_COMBINATION="Product",
        CHANCE_GEOLOGICAL_WEIGHT=0.7,
        CHANCE_COMMERCIAL_WEIGHT=0.3,
        CHANCE_MISSING_RISK=40.0,
    )
    policy = ChancePolicy.from_settings(config)
    assert policy.combination == "product"
    assert (policy.geological_weight, policy.missing_risk) == (0.7, 40.0)


def test_chance_factors():
    chance = parse_chance_factors(CHANCE_NARRATIVE)
    assert chance.element_probabilities.seal == 60.0
    assert chance.geological_chance == pytest.approx(21.77, abs=0.01)
    assert chance.commercial_chance == 40.0
    assert chance.expected_value == 125.0
    assert [(c.event, c.given, c.probability) for c in chance.conditional_probabilities] == [("seal", "trap", 70.0)]
    assert "geological_chance" in fields_with(chance, IssueKind.DATA_QUALITY)


def test_conditional_expressions_do_not_set_element_probabilities():
    chance = parse_chance_factors("Source probability 80%. Reservoir probability 90%. P(seal | trap) = 70%.")
    assert chance.element_probabilities.seal is None
    assert chance.element_probabilities.trap is None
    assert chance.geological_chance == pytest.approx(72.0)
    assert [(c.event, c.given, c.probability) for c in chance.conditional_probabilities] == [("seal", "trap", 70.0)]


def test_out_of_range_conditional_probability_is_flagged():
    chance = parse_chance_factors("Source probability 80%. P(seal | trap) = 120%.")
    assert chance.conditional_probabilities[0].probability == 100.0
    assert "conditional_probabilities[0].probability" in fields_with(chance, IssueKind.INVARIANT_VIOLATION)
    assert not chance.valid


def test_commercial_chance_falls_back_to_risk_assessment():
    risk = RiskAssessment(overall_chance=OverallChance(geological=30.0, commercial=65.0, combined=47.5))
    chance = parse_chance_factors("Source probability 90%. Seal probability 60%.", risk)
    assert chance.commercial_chance == 65.0
    assert "commercial_chance" in fields_with(chance, IssueKind.DATA_QUALITY)
    assert chance.element_probabilities.trap is None
    assert chance.geological_chance == pytest.approx(54.0)


# --- Analyzer contract ---

def test_collaborator_failure_becomes_analysis_error(make_client):
    result = SystemIntegrationAnalyzer(make_client(default=None)).analyze(SystemIntegrationInput())
    assert isinstance(result, AnalysisError)
    assert result.analyzer == "system_integration"
    assert result.details["error_type"] == "APIConnectionError"


def test_empty_narrative_becomes_analysis_error(make_client):
    result = SystemIntegrationAnalyzer(make_client(default="   ")).analyze(SystemIntegrationInput())
    assert isinstance(result, AnalysisError)


def test_request_carries_role_tagged_messages_with_inputs(make_client):
    client = make_client(default=NARRATIVE)
    result = SystemIntegrationAnalyzer(client).analyze(SystemIntegrationInput(geochemical_data={"toc": 3.2}))
    assert result == parse_petroleum_system(NARRATIVE)
    messages = client.requests[0]
    assert [m.role for m in messages] == ["system", "user"]
    assert '"toc": 3.2' in messages[1].content


def test_build_messages_lists_inputs_and_instructions():
    system, user = build_messages(
        "You are a petroleum geologist.",
        "Assess this prospect",
        {"basin_data": {"toc": 3.2}, "notes": "none"},
        ["Source quality"],
    )
    assert (system.role, user.role) == ("system", "user")
    assert user.content.startswith("Assess this prospect:")
    assert "Basin Data:" in user.content
    assert '"toc": 3.2' in user.content
    assert user.content.endswith("1. Source quality")


# --- Narrative parsers ---

def test_parse_narrative_by_record_type():
    system = parse_narrative("petroleum_system", NARRATIVE)
    assert system.source.quality == 82.0


def test_parse_narrative_unknown_type():
    with pytest.raises(NotFoundError):
        parse_narrative("volcanic_system", NARRATIVE)


def test_parse_narrative_bad_recovery_method():
    with pytest.raises(ValidationError):
        parse_narrative("recovery_prediction", "Primary recovery 12%.", {"recovery_method": "magic"})


def test_parse_narrative_with_upstream_context():
    context = {"petroleum_system": PetroleumSystem().model_dump(mode="json")}
    reserves = parse_narrative("reserve_estimation", NARRATIVE, context)
    assert "petroleum_system.reservoir" in fields_with(reserves, IssueKind.DATA_QUALITY)
