"""
Tests for record invariants and the validation helpers.
"""
import pytest
from pydantic import ValidationError

from petrosys.schemas.common import (
    AnalysisRecord,
    ExtractionIssue,
    Invalid,
    IssueKind,
    RangeEstimate,
    RecordStatus,
)
from petrosys.schemas.inputs import GeologicalAnalogyInput, PipelineInput
from petrosys.schemas.petroleum_system import PetroleumSystem, Source
from petrosys.schemas.reserves import RecoveryPrediction, ReserveEstimation
from petrosys.services.validation import (
    build_record,
    clamp_non_negative,
    clamp_percentage,
    gap,
    status_from_counts,
    validate_range,
    violation,
)


def test_record_is_invalid_only_with_a_violation():
    with_gap = AnalysisRecord(issues=(gap("source.quality", "missing"),))
    with_violation = AnalysisRecord(issues=(violation("oil_in_place", "reversed"),))
    assert with_gap.valid
    assert not with_violation.valid
    assert with_violation.issues_of(IssueKind.INVARIANT_VIOLATION)[0].field == "oil_in_place"


def test_valid_is_serialized():
    record = ReserveEstimation(issues=(violation("oil_in_place", "reversed"),))
    assert record.model_dump(mode="json")["valid"] is False


def test_records_are_frozen():
    record = PetroleumSystem()
    with pytest.raises(ValidationError):
        record.status = RecordStatus.EMPTY


def test_percentage_bounds_are_enforced_by_the_schema():
    with pytest.raises(ValidationError):
        Source(quality=120.0)
    with pytest.raises(ValidationError):
        RangeEstimate(low=-5.0)


def test_monotonic_range_is_kept():
    estimate, issues = validate_range((25.0, 45.0, 70.0), 75.0, "oil_in_place")
    assert (estimate.low, estimate.best, estimate.high, estimate.confidence) == (25.0, 45.0, 70.0, 75.0)
    assert estimate.valid
    assert issues == []


def test_reversed_range_is_discarded_not_reordered():
    estimate, issues = validate_range((70.0, 45.0, 25.0), 75.0, "oil_in_place")
    assert not estimate.valid
    assert (estimate.low, estimate.best, estimate.high) == (0.0, 0.0, 0.0)
    assert issues[0].kind == IssueKind.INVARIANT_VIOLATION
    assert issues[0].observed == {"low": 70.0, "best": 45.0, "high": 25.0}


def test_flat_range_is_monotonic():
    estimate, _ = validate_range((40.0, 40.0, 40.0), 50.0, "gas_in_place")
    assert estimate.valid


def test_missing_range_is_a_gap():
    estimate, issues = validate_range(None, 50.0, "gas_in_place")
    assert not estimate.valid
    assert issues[0].kind == IssueKind.EXTRACTION_GAP


def test_clamping_is_always_reported():
    assert clamp_percentage(55.0, "x") == (55.0, None)
    value, issue = clamp_percentage(-3.0, "x")
    assert value == 0.0
    assert issue.kind == IssueKind.INVARIANT_VIOLATION
    value, issue = clamp_non_negative(-10.0, "thickness")
    assert value == 0.0
    assert issue.observed == -10.0


def test_status_from_counts():
    assert status_from_counts(5, 5) == RecordStatus.COMPLETE
    assert status_from_counts(2, 5) == RecordStatus.PARTIAL
    assert status_from_counts(0, 5) == RecordStatus.EMPTY


def test_build_record_returns_invalid_instead_of_raising():
    result = build_record(RecoveryPrediction, primary=150.0)
    assert isinstance(result, Invalid)
    assert result.record_type == "RecoveryPrediction"
    assert result.errors[0]["field"] == "primary"
    assert result.valid is False


def test_issue_is_hashable_and_comparable():
    a = ExtractionIssue(kind=IssueKind.DATA_QUALITY, field="f", message="m")
    b = ExtractionIssue(kind=IssueKind.DATA_QUALITY, field="f", message="m")
    assert a == b
    assert len({a, b}) == 1


def test_analogy_input_requires_a_target_name():
    with pytest.raises(ValidationError):
        GeologicalAnalogyInput(target_basin={"location": "offshore"})
    assert GeologicalAnalogyInput(target_basin={"name": "Taranaki Basin"}).candidate_basins == []


def test_pipeline_input_accepts_fallback_records():
    inputs = PipelineInput.model_validate({
        "name": "Prospect A",
        "petroleum_system": PetroleumSystem().model_dump(mode="json"),
    })
    assert isinstance(inputs.petroleum_system, PetroleumSystem)
    assert inputs.reserve_estimation is None
