"""
Tests for the multiphysics analyzers: potential-field inversion, basin
analogues, Bayesian uncertainty and surface-subsurface correlation.
"""
import pytest

from petrosys.schemas.common import AnalysisError, DistributionType, IssueKind, RecordStatus
from petrosys.schemas.inputs import GeologicalAnalogyInput, SurfaceCorrelationInput
from petrosys.schemas.multiphysics import (
    BasinType,
    Complexity,
    ExpectedReserves,
    MaturityLevel,
    SpatialPattern,
    StressRegime,
)
from petrosys.services.multiphysics import (
    GeologicalAnalogyAnalyzer,
    SurfaceSubsurfaceAnalyzer,
    parse_analogies,
    parse_bayesian_uncertainty,
    parse_geomechanical_expressions,
    parse_gravity_magnetic,
    parse_thermal_anomalies,
)
from petrosys.services.multiphysics.surface_correlation import maturity_from_vitrinite

GRAVITY_NARRATIVE = (
    "Basement depth 5,200 m ± 400 m, confidence 80%. "
    "The rift basin is highly complex, with a graben and a horst. "
    "A major fault at 3,500 m trends NE-SW with 600 m throw. "
    "An anticline with 150 m amplitude and 4 km wavelength sits at depth 2,800 m. "
    "Sedimentary thickness 4 km."
)

ANALOGY_NARRATIVE = (
    "The Taranaki Basin target resembles two analogues. "
    "The Gippsland Basin has a similarity score of 78% with structural style 80% and porosity 22%. "
    "Confidence 70%. "
    "The Sirte Basin scores similarity 55%, permeability 300 mD; seal breach risk is a concern."
)

BAYESIAN_NARRATIVE = (
    "Shallow depth: mean 1,200 m, standard deviation 50 m, normal distribution. "
    "Intermediate depth mean 2,400 m, std 120 m. "
    "Deep horizon mean 3,600 m with sigma 300 m, lognormal. "
    "Porosity mean 18%, standard deviation 3%, normal. "
    "Permeability mean 150 mD, std 40 mD, lognormal. "
    "Thickness mean 45 m, std 10 m. "
    "Scenario base: 60% probability. Upside scenario 25%. Downside scenario 15%. "
    "Target depth 3,650 m ± 50 m, confidence 75%. "
    "Expected reserves mean 120, P10 200, P90 60 MMbbl. "
    "Drilling location at x = 1500, y = 2300, confidence 65%."
)

GEOMECHANICAL_NARRATIVE = (
    "SHmax orientation 045 with a strike-slip regime and stress magnitude 35 MPa. "
    "Surface fracture density 2.5 and predicted subsurface fracture density 3.1, confidence 60%. "
    "Differential compaction of 12 m forms an areal pattern."
)

THERMAL_NARRATIVE = (
    "Vitrinite reflectance 0.9 %Ro indicates the gas window. "
    "Geothermal gradient 32 °C/km and heat flow 65 mW/m2. "
    "Microseepage temperature anomaly 1.5 °C over a spatial extent of 800 m."
)


# --- Gravity-magnetic inversion ---

def test_gravity_magnetic_inversion():
    record = parse_gravity_magnetic(GRAVITY_NARRATIVE)
    assert record.basement_depth.value == 5200.0
    assert record.basement_depth.uncertainty == 400.0
    assert record.basement_depth.confidence == 80.0
    assert record.sedimentary_thickness.value == pytest.approx(4000.0)
    assert record.basin_architecture.type == BasinType.RIFT
    assert record.basin_architecture.complexity == Complexity.COMPLEX
    assert set(record.basin_architecture.structural_elements) == {"graben", "horst", "fault", "anticline"}
    assert record.status == RecordStatus.COMPLETE


def test_deep_structures_are_read_per_sentence():
    record = parse_gravity_magnetic(GRAVITY_NARRATIVE)
    (fault,) = record.deep_structures.faults
    assert fault.depth == 3500.0
    assert fault.displacement == 600.0
    assert fault.orientation == "NE-SW"
    assert fault.confidence == 50.0
    (anticline,) = record.deep_structures.anticlines
    assert anticline.amplitude == 150.0
    assert anticline.wavelength == 4.0
    assert anticline.depth == 2800.0


def test_out_of_range_structure_confidence_is_flagged():
    record = parse_gravity_magnetic("A major fault at 3,500 m trends NE-SW with 600 m throw, confidence 150%.")
    (fault,) = record.deep_structures.faults
    assert fault.confidence == 100.0
    fields = {i.field for i in record.issues_of(IssueKind.INVARIANT_VIOLATION)}
    assert "deep_structures.faults[0].confidence" in fields
    assert not record.valid


def test_gravity_magnetic_with_nothing_stated():
    record = parse_gravity_magnetic("The data were inconclusive.")
    assert record.status == RecordStatus.EMPTY
    fields = {i.field for i in record.issues_of(IssueKind.EXTRACTION_GAP)}
    assert {"basement_depth", "basin_architecture.type", "deep_structures"} <= fields


# --- Geological analogy ---

def test_analogies_exclude_the_target_and_keep_figures_per_basin():
    analogies = parse_analogies(ANALOGY_NARRATIVE, "Taranaki Basin")
    assert [a.source_basin for a in analogies] == ["Gippsland Basin", "Sirte Basin"]

    gippsland, sirte = analogies
    assert gippsland.target_basin == "Taranaki Basin"
    assert gippsland.similarity_score == 78.0
    assert gippsland.analogous_elements.structural_style == 80.0
    assert gippsland.transferred_knowledge.porosity == 22.0
    assert gippsland.transferred_knowledge.permeability is None
    assert gippsland.confidence_level == 70.0

    assert sirte.similarity_score == 55.0
    assert sirte.transferred_knowledge.permeability == 300.0
    assert sirte.transferred_knowledge.porosity is None
    assert sirte.transferred_knowledge.risk_factors
    assert sirte.confidence_level == 50.0


def test_analogy_analyzer_returns_one_record_per_basin(make_client):
    client = make_client(replies={"analogues": ANALOGY_NARRATIVE})
    result = GeologicalAnalogyAnalyzer(client).analyze(
        GeologicalAnalogyInput(target_basin={"name": "Taranaki Basin"}, candidate_basins=[{"name": "Sirte"}])
    )
    assert isinstance(result, tuple)
    assert len(result) == 2


def test_analogy_analyzer_failure(make_client):
    result = GeologicalAnalogyAnalyzer(make_client(default=None)).analyze(
        GeologicalAnalogyInput(target_basin={"name": "Taranaki Basin"})
    )
    assert isinstance(result, AnalysisError)


def test_no_analogue_named():
    assert parse_analogies("The Taranaki Basin has no clear analogue.", "Taranaki Basin") == ()


# --- Bayesian uncertainty ---

def test_depth_and_property_distributions():
    record = parse_bayesian_uncertainty(BAYESIAN_NARRATIVE)
    shallow = record.depth_uncertainty.shallow
    assert (shallow.mean, shallow.std, shallow.distribution) == (1200.0, 50.0, DistributionType.NORMAL)
    assert record.depth_uncertainty.intermediate.std == 120.0
    assert record.depth_uncertainty.deep.distribution == DistributionType.LOGNORMAL
    assert record.depth_uncertainty.deep.std == 300.0
    assert record.property_uncertainty.porosity.mean == 18.0
    assert record.property_uncertainty.permeability.std == 40.0
    assert record.property_uncertainty.thickness.mean == 45.0


def test_scenarios_and_decisions():
    record = parse_bayesian_uncertainty(BAYESIAN_NARRATIVE)
    assert [(s.name, s.probability) for s in record.scenarios] == [
        ("base", 60.0), ("upside", 25.0), ("downside", 15.0),
    ]
    decisions = record.risk_weighted_decisions
    assert decisions.target_depth.value == 3650.0
    assert decisions.target_depth.confidence == 75.0
    assert decisions.expected_reserves == ExpectedReserves(mean=120.0, p10=200.0, p90=60.0)
    assert (decisions.drilling_location.x, decisions.drilling_location.y) == (1500.0, 2300.0)
    assert decisions.drilling_location.confidence == 65.0
    assert record.status == RecordStatus.COMPLETE
    assert record.valid


def test_scenario_probabilities_above_100_warn():
    record = parse_bayesian_uncertainty("Scenario base: 70% probability. Upside scenario 50%.")
    assert "scenarios" in {i.field for i in record.issues_of(IssueKind.DATA_QUALITY)}


def test_out_of_range_location_confidence_is_flagged():
    record = parse_bayesian_uncertainty("Drilling location at x = 1500, y = 2300, confidence 180%.")
    location = record.risk_weighted_decisions.drilling_location
    assert (location.x, location.y, location.confidence) == (1500.0, 2300.0, 100.0)
    fields = {i.field for i in record.issues_of(IssueKind.INVARIANT_VIOLATION)}
    assert "risk_weighted_decisions.drilling_location.confidence" in fields
    assert not record.valid


def test_reserves_out_of_exceedance_order_are_discarded():
    record = parse_bayesian_uncertainty("Expected reserves mean 120, P10 60, P90 200 MMbbl.")
    assert record.risk_weighted_decisions.expected_reserves == ExpectedReserves()
    assert not record.valid


# --- Surface-subsurface correlation ---

def test_geomechanical_expressions():
    record = parse_geomechanical_expressions(GEOMECHANICAL_NARRATIVE)
    assert record.stress_field.orientation == 45.0
    assert record.stress_field.magnitude == 35.0
    assert record.stress_field.regime == StressRegime.STRIKE_SLIP
    assert record.fracture_density.surface == 2.5
    assert record.fracture_density.predicted_subsurface == 3.1
    assert record.fracture_density.confidence == 60.0
    assert record.differential_compaction.magnitude == 12.0
    assert record.differential_compaction.pattern == SpatialPattern.AREAL
    assert record.status == RecordStatus.COMPLETE


def test_thermal_anomalies_prefer_reflectance_over_stated_window():
    record = parse_thermal_anomalies(THERMAL_NARRATIVE)
    assert record.maturation_indicators.vitrinite_equivalent == 0.9
    assert record.maturation_indicators.maturity_level == MaturityLevel.OIL_WINDOW
    fields = {i.field for i in record.issues_of(IssueKind.DATA_QUALITY)}
    assert "maturation_indicators.maturity_level" in fields
    assert record.geothermal_gradient.surface_gradient == 32.0
    assert record.geothermal_gradient.heat_flow == 65.0
    assert record.microseepage.temperature_anomaly == 1.5
    assert record.microseepage.spatial_extent == 800.0
    assert record.status == RecordStatus.PARTIAL


@pytest.mark.parametrize("ro, level", [
    (0.5, MaturityLevel.IMMATURE),
    (0.6, MaturityLevel.OIL_WINDOW),
    (1.3, MaturityLevel.GAS_WINDOW),
    (2.0, MaturityLevel.GAS_WINDOW),
    (2.1, MaturityLevel.OVERMATURE),
])
def test_maturity_from_vitrinite(ro, level):
    assert maturity_from_vitrinite(ro) == level


def test_failed_section_leaves_the_others(make_client):
    client = make_client(replies={
        "geochemical": None,
        "geomechanical": GEOMECHANICAL_NARRATIVE,
        "thermal anomalies": THERMAL_NARRATIVE,
    })
    record = SurfaceSubsurfaceAnalyzer(client).analyze(SurfaceCorrelationInput())
    assert record.status == RecordStatus.PARTIAL
    assert record.geochemical_proxies.status == RecordStatus.EMPTY
    assert record.geomechanical_expressions.stress_field.magnitude == 35.0
    assert record.thermal_anomalies.maturation_indicators.vitrinite_equivalent == 0.9
    assert "geochemical_proxies" in {i.field for i in record.issues_of(IssueKind.EXTRACTION_GAP)}


def test_every_section_failing_is_an_error(make_client):
    result = SurfaceSubsurfaceAnalyzer(make_client(default=None)).analyze(SurfaceCorrelationInput())
    assert isinstance(result, AnalysisError)
    assert set(result.details) == {"geochemical_proxies", "geomechanical_expressions", "thermal_anomalies"}
