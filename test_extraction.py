"""
Tests for the keyword-anchored pattern extractor and the rule engine.
"""
import pytest

from petrosys.schemas.common import IssueKind, RecordStatus
from petrosys.services.extraction import (
    FieldKind,
    FieldRule,
    anchored_segment,
    apply_rule,
    extract_choice,
    extract_conditional_probabilities,
    extract_confidence,
    extract_coordinates,
    extract_fields,
    extract_numerical_value,
    extract_orientation,
    extract_probability,
    extract_range,
    extract_scenarios,
    extract_sentences,
    extract_terms,
    extract_uncertainty,
    find_basin_names,
    find_value,
    mask_conditional_probabilities,
    measure,
    same_basin,
    search_numerical_value,
    split_sentences,
)
from petrosys.services.extraction.engine import ANY_LENGTH, PERCENT_UNITS
from petrosys.services.extraction.rules import BASEMENT_DEPTH_RULE, SEAL_RULES, STRESS_RULES


# --- Pattern extractor ---

def test_value_after_keyword():
    match = find_value("Average porosity of 18% in the Brent sands", ("porosity",))
    assert match.value == 18.0
    assert match.unit == "%"


def test_value_before_keyword():
    assert search_numerical_value("A 4,500 m basement depth was modelled.", ("basement depth",)) == 4500.0


def test_first_keyword_wins_over_earlier_text():
    text = "Porosity 10% in the shaly interval. Average porosity 15% overall."
    assert search_numerical_value(text, ("average porosity", "porosity")) == 15.0


def test_earliest_match_wins_for_one_keyword():
    assert search_numerical_value("porosity 10% and porosity 20%", ("porosity",)) == 10.0


def test_unit_filter_skips_other_quantities():
    text = "Closure area 25 km2, vertical closure 150 m."
    assert search_numerical_value(text, ("closure",), ANY_LENGTH) == 150.0


def test_missing_value_defaults_to_zero():
    assert extract_numerical_value("No porosity data were reported", ("permeability",)) == 0.0
    assert search_numerical_value("", ("porosity",)) is None


def test_range_is_returned_in_textual_order():
    text = "Oil in place: low 70, best 45, high 25 MMBO."
    assert extract_range(text, "oil in place") == (70.0, 45.0, 25.0)


def test_range_missing_returns_zeros():
    assert extract_range("No volumes were estimated.", "oil in place") == (0.0, 0.0, 0.0)


def test_confidence_default_and_stated():
    assert extract_confidence("Nothing about certainty here.") == 50.0
    assert extract_confidence("Estimate made with confidence: 80%") == 80.0
    assert extract_confidence("We have 65% confidence in the seal") == 65.0


def test_confidence_scoped_to_anchor_sentence():
    text = "Oil in place: low 10, best 20, high 30. Gas in place with confidence 90%."
    assert extract_confidence(text, anchor="oil in place") == 50.0
    assert extract_confidence(text, anchor="gas in place") == 90.0


def test_anchored_segment_stops_at_the_sentence_end():
    text = "Source quality 82%, confidence 70%. Reservoir porosity 12%, confidence 40%."
    assert anchored_segment(text, "reservoir") == "Reservoir porosity 12%, confidence 40%"
    assert anchored_segment(text, "seal") == ""


def test_extract_sentences_in_order_and_limited():
    text = "Seal is a thick shale. Porosity 12%. The shale seal is regional."
    assert extract_sentences(text, ("seal",)) == ["Seal is a thick shale.", "The shale seal is regional."]
    assert extract_sentences(text, ("seal",), limit=1) == ["Seal is a thick shale."]


def test_uncertainty():
    assert extract_uncertainty("Depth 3200 m ±150 m") == 150.0
    assert extract_uncertainty("Depth 3200 m +/- 80 m") == 80.0
    assert extract_uncertainty("Depth 3200 m") == 0.0


def test_probability_fraction_and_percent():
    assert extract_probability("probability of success 0.35") == pytest.approx(35.0)
    assert extract_probability("a 40% probability of charge") == 40.0
    assert extract_probability("no claim made") == 0.0


def test_choice_follows_table_order():
    choices = (("combination", ("combination",)), ("structural", ("structural", "anticline")))
    assert extract_choice("A structural and stratigraphic combination trap", choices, "unknown") == "combination"
    assert extract_choice("A gentle anticline", choices, "unknown") == "structural"
    assert extract_choice("Nothing stated", choices, "unknown") == "unknown"


def test_terms_and_orientation():
    text = "Faults trend NE-SW and bound a half-graben; a second fault and a horst lie east."
    assert extract_terms(text, ("fault", "horst", "half-graben")) == ["half graben", "fault", "horst"]
    assert extract_orientation(text) == "NE-SW"
    assert extract_orientation("no bearing given") is None


def test_conditional_probabilities():
    text = "P(seal | trap) = 70%. The probability of charge given source is 0.6."
    assert extract_conditional_probabilities(text) == [
        ("seal", "trap", 70.0),
        ("charge", "source", pytest.approx(60.0)),
    ]


def test_masked_conditionals_keep_positions():
    text = "Seal probability 60%. P(seal | trap) = 70%."
    masked = mask_conditional_probabilities(text)
    assert len(masked) == len(text)
    assert search_numerical_value(masked, ("trap",)) is None
    assert search_numerical_value(masked, ("seal",)) == 60.0


def test_basin_names_in_textual_order():
    text = "The North Sea Basin is the closest analogue. The Sirte Basin shows similar rifting."
    names = [name for _, name in find_basin_names(text)]
    assert names == ["North Sea Basin", "Sirte Basin"]
    assert same_basin("Sirte Basin", "sirte")


def test_scenarios():
    text = "Scenario base: 60% probability of a four-way closure. Downside scenario carries 25%."
    scenarios = extract_scenarios(text)
    assert [(name, probability) for name, probability, _ in scenarios] == [("base", 60.0), ("downside", 25.0)]


def test_coordinates():
    assert extract_coordinates("Drill at x = 1250.5, y = -340 for the crest") == (1250.5, -340.0)
    assert extract_coordinates("Drill at (12, 34)") == (12.0, 34.0)
    assert extract_coordinates("Location undecided") is None


def test_split_sentences_keeps_decimals():
    assert split_sentences("Porosity 12.5%. Permeability 150 mD.") == ["Porosity 12.5%.", "Permeability 150 mD."]


def test_extraction_is_idempotent():
    text = "Seal integrity 85%, seal thickness 60 m, lateral continuity 70%."
    first = extract_fields(text, SEAL_RULES, "seal")
    second = extract_fields(text, SEAL_RULES, "seal")
    assert first == second


# --- Rule engine ---

def test_percentage_out_of_range_is_clamped_and_flagged():
    rule = FieldRule("integrity", ("seal integrity",), FieldKind.PERCENT, PERCENT_UNITS)
    value, issues = apply_rule("Seal integrity 120%", rule, "seal")
    assert value == 100.0
    assert len(issues) == 1
    assert issues[0].kind == IssueKind.INVARIANT_VIOLATION
    assert issues[0].field == "seal.integrity"
    assert issues[0].observed == 120.0


def test_missing_field_is_a_gap():
    rule = FieldRule("integrity", ("seal integrity",), FieldKind.PERCENT, PERCENT_UNITS)
    value, issues = apply_rule("Nothing about the seal", rule, "seal")
    assert value is None
    assert issues[0].kind == IssueKind.EXTRACTION_GAP


def test_unit_conversion_to_target_unit():
    rule = FieldRule("distance", ("migration distance",), FieldKind.NON_NEGATIVE, ANY_LENGTH, "km")
    value, issues = apply_rule("Migration distance of 2,500 m along the carrier bed", rule)
    assert value == pytest.approx(2.5)
    assert issues == []


def test_probability_fraction_is_read_as_percent():
    rule = FieldRule("seal", ("seal probability",), FieldKind.PROBABILITY, PERCENT_UNITS)
    value, _ = apply_rule("Seal probability 0.8", rule)
    assert value == pytest.approx(80.0)


def test_bearing_above_360_is_wrapped():
    value, issues = apply_rule("SHmax orientation 400", STRESS_RULES[0], "stress_field")
    assert value == pytest.approx(40.0)
    assert issues[0].kind == IssueKind.INVARIANT_VIOLATION


def test_field_table_reports_partial_coverage():
    result = extract_fields("Seal integrity 80%. Seal thickness 40 m.", SEAL_RULES, "seal")
    assert result.values == {"integrity": 80.0, "thickness": 40.0, "continuity": 0.0}
    assert result.found == ["integrity", "thickness"]
    assert result.status == RecordStatus.PARTIAL
    assert result.coverage == pytest.approx(66.67)
    assert result.optional("continuity") is None
    assert [i.field for i in result.issues] == ["seal.continuity"]


def test_measure_reads_uncertainty_and_confidence_from_the_sentence():
    text = "Basement depth 4.2 km ± 300 m, confidence 70%. Sediments are 3 km thick."
    value, issues = measure(text, BASEMENT_DEPTH_RULE)
    assert value.value == pytest.approx(4200.0)
    assert value.uncertainty == 300.0
    assert value.confidence == 70.0
    assert issues == []
