# petrosys/services/validation.py
import logging
from typing import Any, List, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from petrosys.schemas.common import (
    ExtractionIssue,
    Invalid,
    IssueKind,
    RangeEstimate,
    RecordStatus,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def gap(field: str, message: str) -> ExtractionIssue:
    return ExtractionIssue(kind=IssueKind.EXTRACTION_GAP, field=field, message=message)


def violation(field: str, message: str, observed: Any = None) -> ExtractionIssue:
    return ExtractionIssue(kind=IssueKind.INVARIANT_VIOLATION, field=field, message=message, observed=observed)


def data_quality(field: str, message: str, observed: Any = None) -> ExtractionIssue:
    return ExtractionIssue(kind=IssueKind.DATA_QUALITY, field=field, message=message, observed=observed)


def clamp_percentage(value: float, field: str) -> Tuple[float, Optional[ExtractionIssue]]:
    """Clamp to [0, 100] and report the clamp; never clamps silently."""
    if 0.0 <= value <= 100.0:
        return value, None
    clamped = min(max(value, 0.0), 100.0)
    return clamped, violation(field, f"Percentage {value} outside [0, 100], clamped to {clamped}", observed=value)


def clamp_non_negative(value: float, field: str) -> Tuple[float, Optional[ExtractionIssue]]:
    if value >= 0.0:
        return value, None
    return 0.0, violation(field, f"Value {value} must be non-negative, set to 0", observed=value)


def validate_range(
    triple: Optional[Tuple[float, float, float]],
    confidence: float,
    field: str,
) -> Tuple[RangeEstimate, List[ExtractionIssue]]:
    """
    Validate a (low, best, high) triple.

    A triple that is not monotonic is discarded and flagged rather than
    reordered, because reordering would silently relabel a low case as the
    best case.
    """
    issues: List[ExtractionIssue] = []
    confidence, issue = clamp_percentage(confidence, f"{field}.confidence")
    if issue:
        issues.append(issue)

    if triple is None:
        issues.append(gap(field, "No low/best/high range found"))
        return RangeEstimate(confidence=confidence, valid=False), issues

    low, best, high = triple
    if not (low <= best <= high):
        issues.append(violation(
            field,
            f"Range is not ordered low <= best <= high (low={low}, best={best}, high={high}); discarded",
            observed={"low": low, "best": best, "high": high},
        ))
        return RangeEstimate(confidence=confidence, valid=False), issues

    return RangeEstimate(low=low, best=best, high=high, confidence=confidence, valid=True), issues


def status_from_counts(found: int, total: int) -> RecordStatus:
    if total == 0 or found == total:
        return RecordStatus.COMPLETE
    if found == 0:
        return RecordStatus.EMPTY
    return RecordStatus.PARTIAL


def build_record(model_cls: Type[M], **data: Any) -> Union[M, Invalid]:
    """
    Construct a record, or return a tagged Invalid listing the failing fields.

    Args:
        model_cls: Record model to construct
        **data: Field values

    Returns:
        The validated record, or Invalid when pydantic rejects the data
    """
    try:
        return model_cls(**data)
    except ValidationError as e:
        errors = tuple(
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        )
        logger.warning(f"Could not construct {model_cls.__name__}: {len(errors)} invalid field(s)")
        return Invalid(record_type=model_cls.__name__, errors=errors)
