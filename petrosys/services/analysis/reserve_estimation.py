# petrosys/services/analysis/reserve_estimation.py
import logging
from typing import List, Optional, Sequence, Tuple, Union

from petrosys.schemas.common import ExtractionIssue, Invalid, IssueKind, RangeEstimate, RecoverableEstimate
from petrosys.schemas.inputs import ReserveEstimationInput
from petrosys.schemas.petroleum_system import PetroleumSystem
from petrosys.schemas.reserves import ReserveEstimation
from petrosys.services.analysis.base import BaseAnalyzer
from petrosys.services.extraction import (
    extract_confidence,
    find_range,
    find_value,
    search_numerical_value,
    search_uncertainty,
    sentence_from,
)
from petrosys.services.extraction.engine import PERCENT_UNITS, convert
from petrosys.services.extraction.rules import (
    GAS_IN_PLACE_KEYWORDS,
    OIL_IN_PLACE_KEYWORDS,
    RECOVERABLE_GAS_KEYWORDS,
    RECOVERABLE_OIL_KEYWORDS,
    RECOVERY_FACTOR_KEYWORDS,
)
from petrosys.services.validation import (
    build_record,
    clamp_non_negative,
    clamp_percentage,
    data_quality,
    gap,
    status_from_counts,
    validate_range,
)

logger = logging.getLogger(__name__)

OIL_UNITS = (None, "mmbbl", "mmbo", "mmboe", "mmstb", "millionbarrels")
GAS_UNITS = (None, "bcf", "tcf", "billioncubicfeet")
OIL_UNIT = "mmbbl"
GAS_UNIT = "bcf"


def parse_in_place(
    text: str,
    keywords: Sequence[str],
    field: str,
    target_unit: Optional[str] = None,
) -> Tuple[RangeEstimate, List[ExtractionIssue]]:
    """
    First low/best/high triple following any of the keywords, with the
    confidence stated in the same sentence. A unit after the triple is
    converted to ``target_unit``.
    """
    for keyword in keywords:
        match = find_range(text, keyword)
        if match is not None:
            triple = tuple(convert(v, match.unit, target_unit) for v in match.values)
            confidence = extract_confidence(text, anchor=keyword)
            return validate_range(triple, confidence, field)
    return validate_range(None, 50.0, field)


def parse_recoverable(
    text: str,
    keywords: Sequence[str],
    units: Sequence[Optional[str]],
    field: str,
    target_unit: Optional[str] = None,
) -> Tuple[Optional[RecoverableEstimate], List[ExtractionIssue]]:
    """
    Recoverable volume plus the recovery factor and uncertainty stated alongside
    it. The volume is converted from the stated unit to ``target_unit``.
    """
    match = find_value(text, keywords, units)
    if match is None:
        return None, [gap(field, f"No value found for: {', '.join(keywords)}")]

    issues = []
    segment = sentence_from(text, match.start)
    best, issue = clamp_non_negative(convert(match.value, match.unit, target_unit), f"{field}.best")
    if issue:
        issues.append(issue)

    recovery_factor = search_numerical_value(segment, RECOVERY_FACTOR_KEYWORDS, PERCENT_UNITS)
    if recovery_factor is None:
        issues.append(gap(f"{field}.recovery_factor", "No recovery factor stated"))
        recovery_factor = 0.0
    recovery_factor, issue = clamp_percentage(recovery_factor, f"{field}.recovery_factor")
    if issue:
        issues.append(issue)

    uncertainty = search_uncertainty(segment) or 0.0
    return RecoverableEstimate(best=best, recovery_factor=recovery_factor, uncertainty=uncertainty), issues


def parse_reserve_estimation(
    text: str,
    petroleum_system: Optional[PetroleumSystem] = None,
) -> Union[ReserveEstimation, Invalid]:
    """
    Oil and gas are validated independently: a malformed gas range is
    discarded and flagged while a well-formed oil range is kept.
    """
    oil_in_place, oil_issues = parse_in_place(text, OIL_IN_PLACE_KEYWORDS, "oil_in_place", OIL_UNIT)
    gas_in_place, gas_issues = parse_in_place(text, GAS_IN_PLACE_KEYWORDS, "gas_in_place", GAS_UNIT)
    recoverable_oil, rec_oil_issues = parse_recoverable(
        text, RECOVERABLE_OIL_KEYWORDS, OIL_UNITS, "recoverable_oil", OIL_UNIT
    )
    recoverable_gas, rec_gas_issues = parse_recoverable(
        text, RECOVERABLE_GAS_KEYWORDS, GAS_UNITS, "recoverable_gas", GAS_UNIT
    )
    issues = oil_issues + gas_issues + rec_oil_issues + rec_gas_issues

    if recoverable_oil and oil_in_place.valid and recoverable_oil.best > oil_in_place.high:
        issues.append(data_quality(
            "recoverable_oil.best",
            "Recoverable oil exceeds the high in-place estimate",
            observed={"recoverable": recoverable_oil.best, "in_place_high": oil_in_place.high},
        ))
    if petroleum_system is not None and not petroleum_system.reservoir.extracted:
        issues.append(data_quality("petroleum_system.reservoir", "Volumes estimated without an extracted reservoir element"))

    found = sum(1 for present in (
        _stated(oil_issues, "oil_in_place"),
        _stated(gas_issues, "gas_in_place"),
        recoverable_oil is not None,
        recoverable_gas is not None,
    ) if present)

    return build_record(
        ReserveEstimation,
        oil_in_place=oil_in_place,
        gas_in_place=gas_in_place,
        recoverable_oil=recoverable_oil or RecoverableEstimate(),
        recoverable_gas=recoverable_gas or RecoverableEstimate(),
        status=status_from_counts(found, 4),
        issues=tuple(issues),
    )


def _stated(issues: List[ExtractionIssue], field: str) -> bool:
    """A range counts as stated unless it produced a gap, even if it was discarded."""
    return not any(i.field == field and i.kind == IssueKind.EXTRACTION_GAP for i in issues)


class ReserveEstimationAnalyzer(BaseAnalyzer[ReserveEstimationInput, ReserveEstimation]):
    """Volumetric in-place and recoverable estimates for oil and gas."""
    name = "reserve_estimation"
    prompt_key = "reserve_estimation"

    def parse(self, text: str, inputs: Optional[ReserveEstimationInput] = None) -> Union[ReserveEstimation, Invalid]:
        return parse_reserve_estimation(text, inputs.petroleum_system if inputs else None)
