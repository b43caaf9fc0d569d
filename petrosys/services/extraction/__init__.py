# petrosys/services/extraction/__init__.py
# Export extraction functions to simplify imports
from petrosys.services.extraction.patterns import (
    anchored_segment,
    as_percent,
    contains_any,
    extract_choice,
    extract_conditional_probabilities,
    extract_confidence,
    extract_coordinates,
    extract_numerical_value,
    extract_orientation,
    extract_probability,
    extract_range,
    extract_scenarios,
    extract_sentences,
    extract_terms,
    extract_uncertainty,
    find_basin_names,
    find_range,
    find_value,
    mask_conditional_probabilities,
    same_basin,
    search_confidence,
    search_numerical_value,
    search_probability,
    search_range,
    search_uncertainty,
    sentence_from,
    split_sentences,
)
from petrosys.services.extraction.engine import (
    FieldExtraction,
    FieldKind,
    FieldRule,
    apply_rule,
    extract_fields,
    measure,
)

__all__ = [
    "anchored_segment",
    "as_percent",
    "contains_any",
    "extract_choice",
    "extract_conditional_probabilities",
    "extract_confidence",
    "extract_coordinates",
    "extract_numerical_value",
    "extract_orientation",
    "extract_probability",
    "extract_range",
    "extract_scenarios",
    "extract_sentences",
    "extract_terms",
    "extract_uncertainty",
    "find_basin_names",
    "find_range",
    "find_value",
    "mask_conditional_probabilities",
    "same_basin",
    "search_confidence",
    "search_numerical_value",
    "search_probability",
    "search_range",
    "search_uncertainty",
    "sentence_from",
    "split_sentences",
    "FieldExtraction",
    "FieldKind",
    "FieldRule",
    "apply_rule",
    "extract_fields",
    "measure",
]
