# petrosys/services/multiphysics/surface_correlation.py
import logging
from typing import List, Optional, Union

from petrosys.schemas.common import AnalysisError, ExtractionIssue, Invalid, RecordStatus
from petrosys.schemas.inputs import (
    GeochemicalProxyInput,
    GeomechanicalInput,
    SurfaceCorrelationInput,
    ThermalAnomalyInput,
)
from petrosys.schemas.multiphysics import (
    DifferentialCompaction,
    FractureDensity,
    GeochemicalProxies,
    GeomechanicalExpressions,
    GeothermalGradient,
    MaturationIndicators,
    MaturityLevel,
    MicrobialAnomalies,
    Microseepage,
    MineralAlteration,
    SoilGas,
    SpatialPattern,
    StressField,
    StressRegime,
    SurfaceSubsurfaceCorrelation,
    ThermalAnomalies,
)
from petrosys.services.analysis.base import BaseAnalyzer, log_record_summary
from petrosys.services.extraction import (
    anchored_segment,
    apply_rule,
    extract_choice,
    extract_fields,
    extract_sentences,
    search_confidence,
)
from petrosys.services.extraction.rules import (
    COMPACTION_RULE,
    FRACTURE_RULES,
    GRADIENT_RULES,
    MATURITY_LEVEL_CHOICES,
    MICROBIAL_RULES,
    MICROSEEPAGE_RULES,
    MINERAL_RULES,
    SOIL_GAS_RULES,
    SPATIAL_PATTERN_CHOICES,
    STRESS_REGIME_CHOICES,
    STRESS_RULES,
    VITRINITE_RULE,
)
from petrosys.services.reasoning.client import ReasoningClient
from petrosys.services.validation import build_record, clamp_percentage, data_quality, gap, status_from_counts

logger = logging.getLogger(__name__)

SECTIONS = ("geochemical_proxies", "geomechanical_expressions", "thermal_anomalies")


def _scoped(text: str, keywords) -> str:
    return " ".join(extract_sentences(text, keywords, limit=10))


def _confidence(text: str, field: str, issues: List[ExtractionIssue]) -> float:
    stated = search_confidence(text)
    value, issue = clamp_percentage(50.0 if stated is None else stated, field)
    if issue:
        issues.append(issue)
    return value


def maturity_from_vitrinite(ro: float) -> MaturityLevel:
    """Maturity window for a vitrinite reflectance (%Ro)."""
    if ro < 0.6:
        return MaturityLevel.IMMATURE
    if ro < 1.3:
        return MaturityLevel.OIL_WINDOW
    if ro <= 2.0:
        return MaturityLevel.GAS_WINDOW
    return MaturityLevel.OVERMATURE


def parse_geochemical_proxies(text: str) -> Union[GeochemicalProxies, Invalid]:
    soil = extract_fields(text, SOIL_GAS_RULES, "soil_gas")
    microbial_text = _scoped(text, ("microbial", "bacteria", "degraders"))
    microbial = extract_fields(microbial_text, MICROBIAL_RULES, "microbial_anomalies")
    minerals = extract_fields(text, MINERAL_RULES, "mineral_alteration")
    issues = soil.issues + microbial.issues + minerals.issues

    soil_gas = SoilGas(
        **soil.values,
        confidence=_confidence(_scoped(text, ("soil gas", "methane")), "soil_gas.confidence", issues),
    )
    microbial_anomalies = MicrobialAnomalies(
        **microbial.values,
        spatial_pattern=extract_choice(microbial_text, SPATIAL_PATTERN_CHOICES, SpatialPattern.UNKNOWN),
    )
    found = len(soil.found) + len(microbial.found) + len(minerals.found)
    return build_record(
        GeochemicalProxies,
        soil_gas=soil_gas,
        microbial_anomalies=microbial_anomalies,
        mineral_alteration=MineralAlteration(**minerals.values),
        status=status_from_counts(found, soil.total + microbial.total + minerals.total),
        issues=tuple(issues),
    )


def parse_geomechanical_expressions(text: str) -> Union[GeomechanicalExpressions, Invalid]:
    stress_text = _scoped(text, ("stress", "shmax"))
    stress = extract_fields(stress_text, STRESS_RULES, "stress_field")
    fracture_text = _scoped(text, ("fracture", "fractures"))
    fractures = extract_fields(fracture_text, FRACTURE_RULES, "fracture_density")
    compaction_text = _scoped(text, ("compaction",))
    compaction, compaction_issues = apply_rule(compaction_text, COMPACTION_RULE, "differential_compaction")
    issues = stress.issues + fractures.issues + compaction_issues

    regime = extract_choice(stress_text or text, STRESS_REGIME_CHOICES, StressRegime.UNKNOWN)
    interpretation = extract_sentences(compaction_text, ("compaction",), limit=1)
    found = len(stress.found) + len(fractures.found) + int(compaction is not None) + int(regime != StressRegime.UNKNOWN)
    return build_record(
        GeomechanicalExpressions,
        stress_field=StressField(**stress.values, regime=regime),
        fracture_density=FractureDensity(
            **fractures.values,
            confidence=_confidence(fracture_text, "fracture_density.confidence", issues),
        ),
        differential_compaction=DifferentialCompaction(
            magnitude=compaction or 0.0,
            pattern=extract_choice(compaction_text, SPATIAL_PATTERN_CHOICES, SpatialPattern.UNKNOWN),
            interpretation=interpretation[0] if interpretation else "",
        ),
        status=status_from_counts(found, stress.total + fractures.total + 2),
        issues=tuple(issues),
    )


def parse_thermal_anomalies(text: str) -> Union[ThermalAnomalies, Invalid]:
    seep_text = _scoped(text, ("microseepage", "temperature anomaly", "thermal anomaly"))
    seepage = extract_fields(seep_text, MICROSEEPAGE_RULES, "microseepage")
    gradient = extract_fields(text, GRADIENT_RULES, "geothermal_gradient")
    vitrinite, vitrinite_issues = apply_rule(text, VITRINITE_RULE, "maturation_indicators")
    issues = seepage.issues + gradient.issues + vitrinite_issues

    stated_level = extract_choice(text, MATURITY_LEVEL_CHOICES, MaturityLevel.UNKNOWN)
    level = stated_level
    if vitrinite is not None:
        level = maturity_from_vitrinite(vitrinite)
        if stated_level not in (MaturityLevel.UNKNOWN, level):
            issues.append(data_quality(
                "maturation_indicators.maturity_level",
                f"Stated {stated_level.value} conflicts with {vitrinite}%Ro ({level.value}); using the reflectance",
                observed=stated_level.value,
            ))

    maturity_text = anchored_segment(text, "vitrinite") or anchored_segment(text, "maturity")
    found = len(seepage.found) + len(gradient.found) + int(vitrinite is not None)
    return build_record(
        ThermalAnomalies,
        microseepage=Microseepage(
            **seepage.values,
            confidence=_confidence(seep_text, "microseepage.confidence", issues),
        ),
        geothermal_gradient=GeothermalGradient(**gradient.values),
        maturation_indicators=MaturationIndicators(
            vitrinite_equivalent=vitrinite or 0.0,
            maturity_level=level,
            confidence=_confidence(maturity_text, "maturation_indicators.confidence", issues),
        ),
        status=status_from_counts(found, seepage.total + gradient.total + 1),
        issues=tuple(issues),
    )


class GeochemicalProxyAnalyzer(BaseAnalyzer[GeochemicalProxyInput, GeochemicalProxies]):
    name = "geochemical_proxies"
    prompt_key = "geochemical_proxies"

    def parse(self, text: str, inputs: Optional[GeochemicalProxyInput] = None) -> Union[GeochemicalProxies, Invalid]:
        return parse_geochemical_proxies(text)


class GeomechanicalAnalyzer(BaseAnalyzer[GeomechanicalInput, GeomechanicalExpressions]):
    name = "geomechanical_expressions"
    prompt_key = "geomechanical_expressions"

    def parse(
        self, text: str, inputs: Optional[GeomechanicalInput] = None
    ) -> Union[GeomechanicalExpressions, Invalid]:
        return parse_geomechanical_expressions(text)


class ThermalAnomalyAnalyzer(BaseAnalyzer[ThermalAnomalyInput, ThermalAnomalies]):
    name = "thermal_anomalies"
    prompt_key = "thermal_anomalies"

    def parse(self, text: str, inputs: Optional[ThermalAnomalyInput] = None) -> Union[ThermalAnomalies, Invalid]:
        return parse_thermal_anomalies(text)


class SurfaceSubsurfaceAnalyzer:
    """
    Correlates surface geochemical, geomechanical and thermal evidence with the
    subsurface.

    The three sub-analyses run independently. One that fails leaves its
    section empty and flagged on the composite record; the composite is an
    AnalysisError only when all three fail.
    """
    name = "surface_subsurface_correlation"

    def __init__(self, client: ReasoningClient):
        self.client = client
        self.geochemical = GeochemicalProxyAnalyzer(client)
        self.geomechanical = GeomechanicalAnalyzer(client)
        self.thermal = ThermalAnomalyAnalyzer(client)

    def analyze_geochemical_proxies(self, inputs: GeochemicalProxyInput):
        return self.geochemical.analyze(inputs)

    def analyze_geomechanical_expressions(self, inputs: GeomechanicalInput):
        return self.geomechanical.analyze(inputs)

    def map_thermal_anomalies(self, inputs: ThermalAnomalyInput):
        return self.thermal.analyze(inputs)

    def analyze(self, inputs: SurfaceCorrelationInput) -> Union[SurfaceSubsurfaceCorrelation, AnalysisError]:
        results = {
            "geochemical_proxies": self.analyze_geochemical_proxies(inputs.geochemical),
            "geomechanical_expressions": self.analyze_geomechanical_expressions(inputs.geomechanical),
            "thermal_anomalies": self.map_thermal_anomalies(inputs.thermal),
        }
        return compose_correlation(results)


def compose_correlation(results: dict) -> Union[SurfaceSubsurfaceCorrelation, AnalysisError]:
    """Combine per-section results; failed sections are left empty and flagged."""
    sections = {}
    issues: List[ExtractionIssue] = []
    failures = {}
    for section in SECTIONS:
        result = results.get(section)
        if isinstance(result, (AnalysisError, Invalid)) or result is None:
            reason = getattr(result, "message", None) or "record could not be built"
            failures[section] = reason
            issues.append(gap(section, f"Section unavailable: {reason}"))
            continue
        sections[section] = result

    if len(failures) == len(SECTIONS):
        logger.error("Surface-subsurface correlation failed for every section")
        return AnalysisError(
            analyzer=SurfaceSubsurfaceAnalyzer.name,
            message="Every surface-subsurface sub-analysis failed",
            details=failures,
        )

    present = sum(1 for s in sections.values() if s.status != RecordStatus.EMPTY)
    record = SurfaceSubsurfaceCorrelation(
        **sections,
        status=status_from_counts(present, len(SECTIONS)),
        issues=tuple(issues),
    )
    log_record_summary(SurfaceSubsurfaceAnalyzer.name, record)
    return record
