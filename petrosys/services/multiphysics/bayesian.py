# petrosys/services/multiphysics/bayesian.py
"""
Bayesian uncertainty narratives: depth and property distributions, weighted
scenarios and the decisions derived from them.

Expected reserves follow the petroleum exceedance convention: P90 is the low
case and P10 the high case, so a valid triple has p90 <= mean <= p10.
"""
import logging
from typing import List, Optional, Tuple, Union

from petrosys.schemas.common import Distribution, DistributionType, ExtractionIssue, Invalid, MeasuredValue
from petrosys.schemas.inputs import BayesianUncertaintyInput
from petrosys.schemas.multiphysics import (
    BayesianUncertainty,
    DepthUncertainty,
    DrillingLocation,
    ExpectedReserves,
    PropertyUncertainty,
    RiskWeightedDecisions,
    Scenario,
)
from petrosys.services.analysis.base import BaseAnalyzer
from petrosys.services.extraction import (
    FieldKind,
    FieldRule,
    anchored_segment,
    apply_rule,
    extract_choice,
    extract_coordinates,
    extract_scenarios,
    measure,
    search_confidence,
)
from petrosys.services.extraction.engine import ANY_LENGTH, PERCENT_UNITS
from petrosys.services.extraction.rules import (
    DEPTH_LEVELS,
    DISTRIBUTION_CHOICES,
    MEAN_KEYWORDS,
    RESERVES_MEAN_RULE,
    RESERVES_P10_RULE,
    RESERVES_P90_RULE,
    STD_KEYWORDS,
    TARGET_DEPTH_RULE,
)
from petrosys.services.validation import (
    build_record,
    clamp_percentage,
    data_quality,
    gap,
    status_from_counts,
    violation,
)

logger = logging.getLogger(__name__)

# property -> (kind, accepted units, stored unit)
PROPERTY_UNITS = {
    "porosity": (FieldKind.PERCENT, PERCENT_UNITS, None),
    "permeability": (FieldKind.NON_NEGATIVE, (None, "md"), None),
    "thickness": (FieldKind.NON_NEGATIVE, ANY_LENGTH, "m"),
}
DEPTH_UNITS = (FieldKind.NON_NEGATIVE, ANY_LENGTH, "m")


def parse_distribution(
    text: str,
    anchor: str,
    kind: FieldKind,
    units,
    target_unit: Optional[str],
    field: str,
) -> Tuple[Optional[Distribution], List[ExtractionIssue]]:
    """Mean, standard deviation and distribution type from the sentence introducing ``anchor``."""
    segment = anchored_segment(text, anchor)
    if not segment:
        return None, [gap(field, f"No distribution stated for {anchor}")]

    mean, mean_issues = apply_rule(segment, FieldRule("mean", MEAN_KEYWORDS, kind, units, target_unit), field)
    std, std_issues = apply_rule(
        segment, FieldRule("std", STD_KEYWORDS, FieldKind.NON_NEGATIVE, units, target_unit), field
    )
    issues = mean_issues + std_issues
    if mean is None and std is None:
        return None, issues

    stated = search_confidence(segment)
    confidence, issue = clamp_percentage(50.0 if stated is None else stated, f"{field}.confidence")
    if issue:
        issues.append(issue)
    return Distribution(
        mean=mean or 0.0,
        std=std or 0.0,
        confidence=confidence,
        distribution=extract_choice(segment, DISTRIBUTION_CHOICES, DistributionType.UNKNOWN),
    ), issues


def parse_scenarios(text: str) -> Tuple[Tuple[Scenario, ...], List[ExtractionIssue]]:
    scenarios = []
    issues: List[ExtractionIssue] = []
    for name, probability, sentence in extract_scenarios(text):
        probability, issue = clamp_percentage(probability, f"scenarios.{name}.probability")
        if issue:
            issues.append(issue)
        scenarios.append(Scenario(name=name, probability=probability, description=sentence))

    if not scenarios:
        issues.append(gap("scenarios", "No weighted scenarios stated"))
    total = sum(s.probability for s in scenarios)
    if total > 100.0:
        issues.append(data_quality(
            "scenarios",
            f"Scenario probabilities sum to {total:g}%, above 100%",
            observed=total,
        ))
    return tuple(scenarios), issues


def parse_expected_reserves(text: str) -> Tuple[Optional[ExpectedReserves], List[ExtractionIssue]]:
    """
    Mean, P10 and P90 reserves. The mean is read only from the sentence about
    reserves; a triple out of exceedance order is discarded and flagged.
    """
    segment = anchored_segment(text, "expected reserves") or anchored_segment(text, "reserves")
    field = "risk_weighted_decisions.expected_reserves"
    mean, issues = apply_rule(segment, RESERVES_MEAN_RULE, field)
    values = {"mean": mean}
    for rule in (RESERVES_P10_RULE, RESERVES_P90_RULE):
        value, _ = apply_rule(segment, rule, field)
        if value is None:
            value, rule_issues = apply_rule(text, rule, field)
            issues.extend(rule_issues)
        values[rule.name] = value

    if all(v is None for v in values.values()):
        return None, issues
    if all(v is not None for v in values.values()) and not (values["p90"] <= values["mean"] <= values["p10"]):
        issues.append(violation(
            field,
            "Expected reserves are not ordered p90 <= mean <= p10; discarded",
            observed=dict(values),
        ))
        return ExpectedReserves(), issues
    return ExpectedReserves(**{k: v or 0.0 for k, v in values.items()}), issues


def parse_bayesian_uncertainty(text: str) -> Union[BayesianUncertainty, Invalid]:
    issues: List[ExtractionIssue] = []
    found = 0

    depths = {}
    for level in DEPTH_LEVELS:
        kind, units, target = DEPTH_UNITS
        distribution, level_issues = parse_distribution(
            text, level, kind, units, target, f"depth_uncertainty.{level}"
        )
        issues.extend(level_issues)
        found += distribution is not None
        depths[level] = distribution or Distribution()

    properties = {}
    for name, (kind, units, target) in PROPERTY_UNITS.items():
        distribution, property_issues = parse_distribution(
            text, name, kind, units, target, f"property_uncertainty.{name}"
        )
        issues.extend(property_issues)
        found += distribution is not None
        properties[name] = distribution or Distribution()

    scenarios, scenario_issues = parse_scenarios(text)
    issues.extend(scenario_issues)
    found += bool(scenarios)

    target_depth, depth_issues = measure(text, TARGET_DEPTH_RULE, "risk_weighted_decisions")
    issues.extend(depth_issues)
    found += target_depth is not None

    reserves, reserve_issues = parse_expected_reserves(text)
    issues.extend(reserve_issues)
    found += reserves is not None

    location_text = anchored_segment(text, "drilling location") or anchored_segment(text, "well location")
    coordinates = extract_coordinates(location_text)
    stated = search_confidence(location_text)
    location_confidence, confidence_issue = clamp_percentage(
        50.0 if stated is None else stated,
        "risk_weighted_decisions.drilling_location.confidence",
    )
    if confidence_issue:
        issues.append(confidence_issue)
    location = DrillingLocation(
        x=coordinates[0] if coordinates else None,
        y=coordinates[1] if coordinates else None,
        confidence=location_confidence,
    )

    return build_record(
        BayesianUncertainty,
        depth_uncertainty=DepthUncertainty(**depths),
        property_uncertainty=PropertyUncertainty(**properties),
        scenarios=scenarios,
        risk_weighted_decisions=RiskWeightedDecisions(
            drilling_location=location,
            target_depth=target_depth or MeasuredValue(),
            expected_reserves=reserves or ExpectedReserves(),
        ),
        status=status_from_counts(found, len(DEPTH_LEVELS) + len(PROPERTY_UNITS) + 3),
        issues=tuple(issues),
    )


class BayesianUncertaintyAnalyzer(BaseAnalyzer[BayesianUncertaintyInput, BayesianUncertainty]):
    """Quantifies depth and property uncertainty and risk-weighted drilling decisions."""
    name = "bayesian_uncertainty"
    prompt_key = "bayesian_uncertainty"

    def parse(
        self, text: str, inputs: Optional[BayesianUncertaintyInput] = None
    ) -> Union[BayesianUncertainty, Invalid]:
        return parse_bayesian_uncertainty(text)
