# petrosys/services/analysis/chance_calculation.py
import logging
from typing import List, Optional, Tuple, Union

import numpy as np

from petrosys.schemas.common import ExtractionIssue, Invalid
from petrosys.schemas.inputs import ChanceCalculationInput
from petrosys.schemas.risk import (
    ChanceFactors,
    ConditionalProbability,
    ElementProbabilities,
    RiskAssessment,
)
from petrosys.services.analysis.base import BaseAnalyzer
from petrosys.services.extraction import (
    apply_rule,
    extract_conditional_probabilities,
    extract_fields,
    mask_conditional_probabilities,
    search_numerical_value,
)
from petrosys.services.extraction.engine import PERCENT_UNITS
from petrosys.services.extraction.rules import (
    COMMERCIAL_CHANCE_RULE,
    ELEMENT_PROBABILITY_RULES,
    EXPECTED_VALUE_RULE,
)
from petrosys.services.validation import build_record, clamp_percentage, data_quality, gap, status_from_counts

logger = logging.getLogger(__name__)

STATED_GEOLOGICAL_KEYWORDS = ("geological chance of success", "geological chance", "pg")
# Stated and derived geological chance may differ by rounding
GEOLOGICAL_TOLERANCE = 1.0


def geological_chance(probabilities: ElementProbabilities) -> float:
    """Product of the extracted element probabilities, %; 0 when none were extracted."""
    values = [v for v in probabilities.model_dump().values() if v is not None]
    if not values:
        return 0.0
    return round(float(np.prod(np.array(values) / 100.0) * 100.0), 2)


def _conditionals(text: str) -> Tuple[Tuple[ConditionalProbability, ...], List[ExtractionIssue]]:
    found = []
    issues: List[ExtractionIssue] = []
    for event, given, probability in extract_conditional_probabilities(text):
        probability, issue = clamp_percentage(probability, f"conditional_probabilities[{len(found)}].probability")
        if issue:
            issues.append(issue)
        found.append(ConditionalProbability(event=event, given=given, probability=probability))
    return tuple(found), issues


def parse_chance_factors(
    text: str,
    risk_assessment: Optional[RiskAssessment] = None,
) -> Union[ChanceFactors, Invalid]:
    """
    Element probabilities, conditionals, commercial chance and EMV.

    The geological chance is computed from the element probabilities. When
    the narrative gives no commercial chance, the one derived for the risk
    assessment is used instead and flagged.
    """
    # "P(seal | trap)" names elements without stating their own probabilities
    unconditional = mask_conditional_probabilities(text)
    elements = extract_fields(unconditional, ELEMENT_PROBABILITY_RULES, "element_probabilities")
    probabilities = ElementProbabilities(**{name: elements.optional(name) for name in elements.values})
    issues: List[ExtractionIssue] = list(elements.issues)

    derived = geological_chance(probabilities)
    stated = search_numerical_value(unconditional, STATED_GEOLOGICAL_KEYWORDS, PERCENT_UNITS)
    if stated is not None and abs(stated - derived) > GEOLOGICAL_TOLERANCE:
        issues.append(data_quality(
            "geological_chance",
            f"Stated geological chance {stated}% differs from the element product {derived}%",
            observed=stated,
        ))

    commercial, commercial_issues = apply_rule(unconditional, COMMERCIAL_CHANCE_RULE)
    issues.extend(commercial_issues)
    if commercial is None and risk_assessment is not None:
        commercial = risk_assessment.overall_chance.commercial
        issues.append(data_quality("commercial_chance", "Commercial chance taken from the risk assessment"))

    expected_value, emv_issues = apply_rule(unconditional, EXPECTED_VALUE_RULE)
    issues.extend(emv_issues)

    conditionals, conditional_issues = _conditionals(text)
    issues.extend(conditional_issues)
    if not conditionals:
        issues.append(gap("conditional_probabilities", "No conditional probabilities stated"))

    found = len(elements.found) + int(commercial is not None) + int(expected_value is not None)
    return build_record(
        ChanceFactors,
        element_probabilities=probabilities,
        conditional_probabilities=conditionals,
        geological_chance=derived,
        commercial_chance=commercial or 0.0,
        expected_value=expected_value,
        status=status_from_counts(found, elements.total + 2),
        issues=tuple(issues),
    )


class ChanceCalculationAnalyzer(BaseAnalyzer[ChanceCalculationInput, ChanceFactors]):
    """Chance factors for a play, from its risk assessment and analog data."""
    name = "chance_calculation"
    prompt_key = "chance_calculation"

    def parse(self, text: str, inputs: Optional[ChanceCalculationInput] = None) -> Union[ChanceFactors, Invalid]:
        return parse_chance_factors(text, inputs.risk_assessment if inputs else None)
