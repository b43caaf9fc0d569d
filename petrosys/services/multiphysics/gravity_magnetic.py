# petrosys/services/multiphysics/gravity_magnetic.py
import logging
from typing import List, Optional, Tuple, Union

from petrosys.schemas.common import ExtractionIssue, Invalid, MeasuredValue
from petrosys.schemas.inputs import GravityMagneticInput
from petrosys.schemas.multiphysics import (
    Anticline,
    BasinArchitecture,
    BasinType,
    Complexity,
    DeepStructures,
    Fault,
    GravityMagneticInversion,
)
from petrosys.services.analysis.base import BaseAnalyzer
from petrosys.services.extraction import (
    extract_choice,
    extract_fields,
    extract_orientation,
    extract_sentences,
    extract_terms,
    measure,
    search_confidence,
)
from petrosys.services.extraction.rules import (
    ANTICLINE_RULES,
    BASEMENT_DEPTH_RULE,
    BASIN_TYPE_CHOICES,
    COMPLEXITY_CHOICES,
    FAULT_RULES,
    SEDIMENTARY_THICKNESS_RULE,
    STRUCTURAL_TERMS,
)
from petrosys.services.validation import build_record, clamp_percentage, gap, status_from_counts

logger = logging.getLogger(__name__)

MAX_STRUCTURES = 10


def _confidence(sentence: str, field: str, issues: List[ExtractionIssue]) -> float:
    stated = search_confidence(sentence)
    value, issue = clamp_percentage(50.0 if stated is None else stated, field)
    if issue:
        issues.append(issue)
    return value


def parse_faults(text: str) -> Tuple[Tuple[Fault, ...], List[ExtractionIssue]]:
    """One fault per sentence that mentions a fault and gives a depth, throw or trend."""
    faults = []
    issues: List[ExtractionIssue] = []
    for sentence in extract_sentences(text, ("fault", "faults", "faulting"), limit=MAX_STRUCTURES):
        fields = extract_fields(sentence, FAULT_RULES)
        orientation = extract_orientation(sentence)
        if not fields.extracted and orientation is None:
            continue
        confidence = _confidence(sentence, f"deep_structures.faults[{len(faults)}].confidence", issues)
        faults.append(Fault(orientation=orientation, confidence=confidence, **fields.values))
    return tuple(faults), issues


def parse_anticlines(text: str) -> Tuple[Tuple[Anticline, ...], List[ExtractionIssue]]:
    anticlines = []
    issues: List[ExtractionIssue] = []
    for sentence in extract_sentences(text, ("anticline", "anticlines", "anticlinal"), limit=MAX_STRUCTURES):
        fields = extract_fields(sentence, ANTICLINE_RULES)
        if fields.extracted:
            confidence = _confidence(sentence, f"deep_structures.anticlines[{len(anticlines)}].confidence", issues)
            anticlines.append(Anticline(confidence=confidence, **fields.values))
    return tuple(anticlines), issues


def parse_gravity_magnetic(text: str) -> Union[GravityMagneticInversion, Invalid]:
    issues: List[ExtractionIssue] = []
    basement, basement_issues = measure(text, BASEMENT_DEPTH_RULE)
    thickness, thickness_issues = measure(text, SEDIMENTARY_THICKNESS_RULE)
    issues.extend(basement_issues + thickness_issues)

    architecture = BasinArchitecture(
        type=extract_choice(text, BASIN_TYPE_CHOICES, BasinType.UNKNOWN),
        complexity=extract_choice(text, COMPLEXITY_CHOICES, Complexity.UNKNOWN),
        structural_elements=tuple(extract_terms(text, STRUCTURAL_TERMS)),
    )
    if architecture.type == BasinType.UNKNOWN:
        issues.append(gap("basin_architecture.type", "Basin type not stated"))

    faults, fault_issues = parse_faults(text)
    anticlines, anticline_issues = parse_anticlines(text)
    issues.extend(fault_issues + anticline_issues)
    structures = DeepStructures(faults=faults, anticlines=anticlines)
    if not structures.faults and not structures.anticlines:
        issues.append(gap("deep_structures", "No fault or anticline described with measurements"))

    found = sum((
        basement is not None,
        thickness is not None,
        architecture.type != BasinType.UNKNOWN,
        architecture.complexity != Complexity.UNKNOWN,
        bool(structures.faults or structures.anticlines),
    ))
    return build_record(
        GravityMagneticInversion,
        basement_depth=basement or MeasuredValue(),
        sedimentary_thickness=thickness or MeasuredValue(),
        basin_architecture=architecture,
        deep_structures=structures,
        status=status_from_counts(found, 5),
        issues=tuple(issues),
    )


class GravityMagneticInversionAnalyzer(BaseAnalyzer[GravityMagneticInput, GravityMagneticInversion]):
    """Basement depth, sediment thickness and deep structure from potential-field data."""
    name = "gravity_magnetic_inversion"
    prompt_key = "gravity_magnetic"

    def parse(
        self, text: str, inputs: Optional[GravityMagneticInput] = None
    ) -> Union[GravityMagneticInversion, Invalid]:
        return parse_gravity_magnetic(text)
