# petrosys/services/extraction/engine.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from petrosys.schemas.common import ExtractionIssue, MeasuredValue, RecordStatus
from petrosys.services.extraction.patterns import (
    DEFAULT_CONFIDENCE,
    as_percent,
    find_value,
    search_confidence,
    search_uncertainty,
    sentence_from,
)
from petrosys.services.validation import (
    clamp_non_negative,
    clamp_percentage,
    gap,
    status_from_counts,
    violation,
)


class FieldKind(str, Enum):
    PERCENT = "percent"
    PROBABILITY = "probability"
    NON_NEGATIVE = "non_negative"
    BEARING = "bearing"
    VALUE = "value"


# (from unit, to unit) -> factor
UNIT_CONVERSIONS: Dict[Tuple[str, str], float] = {
    ("km", "m"): 1000.0,
    ("ft", "m"): 0.3048,
    ("m", "km"): 0.001,
    ("sqkm", "km2"): 1.0,
    ("tcf", "bcf"): 1000.0,
}

ANY_LENGTH = (None, "m", "km", "ft")
PERCENT_UNITS = (None, "%", "percent")


@dataclass(frozen=True)
class FieldRule:
    """
    Maps one record field to the keyword anchors that locate it in prose.

    Attributes:
        name: Field name on the record
        keywords: Anchors in priority order
        kind: Domain check applied to the matched value
        units: Accepted units (None entry = bare number); None accepts anything
        target_unit: Unit the stored value is expressed in; matched values in a
            convertible unit are converted
        default: Value stored when nothing matches
    """
    name: str
    keywords: Tuple[str, ...]
    kind: FieldKind = FieldKind.PERCENT
    units: Optional[Tuple[Optional[str], ...]] = None
    target_unit: Optional[str] = None
    default: float = 0.0


@dataclass
class FieldExtraction:
    values: Dict[str, float] = field(default_factory=dict)
    found: List[str] = field(default_factory=list)
    issues: List[ExtractionIssue] = field(default_factory=list)
    total: int = 0

    @property
    def extracted(self) -> bool:
        return bool(self.found)

    @property
    def coverage(self) -> float:
        return round(100.0 * len(self.found) / self.total, 2) if self.total else 0.0

    @property
    def status(self) -> RecordStatus:
        return status_from_counts(len(self.found), self.total)

    def optional(self, name: str) -> Optional[float]:
        return self.values[name] if name in self.found else None


def _path(prefix: str, name: str) -> str:
    return f"{prefix}.{name}" if prefix else name


def convert(value: float, unit: Optional[str], target_unit: Optional[str]) -> float:
    if not unit or not target_unit or unit == target_unit:
        return value
    return value * UNIT_CONVERSIONS.get((unit, target_unit), 1.0)


def apply_rule(text: str, rule: FieldRule, prefix: str = "") -> Tuple[Optional[float], List[ExtractionIssue]]:
    """Run one rule; returns (None, [gap]) when the field is absent from the text."""
    path = _path(prefix, rule.name)
    match = find_value(text, rule.keywords, rule.units)
    if match is None:
        return None, [gap(path, f"No value found for: {', '.join(rule.keywords)}")]

    value = convert(match.value, match.unit, rule.target_unit)
    issue = None
    if rule.kind == FieldKind.PROBABILITY:
        value, issue = clamp_percentage(as_percent(value, match.unit), path)
    elif rule.kind == FieldKind.PERCENT:
        value, issue = clamp_percentage(value, path)
    elif rule.kind == FieldKind.NON_NEGATIVE:
        value, issue = clamp_non_negative(value, path)
    elif rule.kind == FieldKind.BEARING and value > 360.0:
        issue = violation(path, f"Bearing {value} exceeds 360 degrees, wrapped", observed=value)
        value = value % 360.0
    return value, [issue] if issue else []


def extract_fields(text: str, rules: Sequence[FieldRule], prefix: str = "") -> FieldExtraction:
    """
    Apply a rule table to a narrative.

    Fields with no match get the rule default and an extraction-gap issue;
    out-of-domain values are clamped and flagged.
    """
    result = FieldExtraction(total=len(rules))
    for rule in rules:
        value, issues = apply_rule(text, rule, prefix)
        result.issues.extend(issues)
        if value is None:
            result.values[rule.name] = rule.default
            continue
        result.values[rule.name] = value
        result.found.append(rule.name)
    return result


def measure(
    text: str,
    rule: FieldRule,
    prefix: str = "",
) -> Tuple[Optional[MeasuredValue], List[ExtractionIssue]]:
    """
    A value with the uncertainty and confidence stated in the same sentence.

    Returns (None, [gap]) when the value is absent.
    """
    value, issues = apply_rule(text, rule, prefix)
    if value is None:
        return None, issues

    match = find_value(text, rule.keywords, rule.units)
    segment = sentence_from(text, match.start)
    stated = search_confidence(segment)
    confidence, issue = clamp_percentage(DEFAULT_CONFIDENCE if stated is None else stated, _path(prefix, rule.name) + ".confidence")
    if issue:
        issues.append(issue)
    uncertainty = search_uncertainty(segment) or 0.0
    return MeasuredValue(value=value, uncertainty=uncertainty, confidence=confidence), issues
