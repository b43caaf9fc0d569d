# petrosys/services/analysis/recovery_prediction.py
import logging
from typing import Optional, Union

from petrosys.schemas.common import Invalid
from petrosys.schemas.inputs import RecoveryPredictionInput
from petrosys.schemas.reserves import RecoveryMethod, RecoveryPrediction
from petrosys.services.analysis.base import BaseAnalyzer
from petrosys.services.extraction import extract_fields, extract_sentences
from petrosys.services.extraction.rules import LIMITING_FACTOR_KEYWORDS, RECOVERY_RULES
from petrosys.services.validation import build_record, data_quality

logger = logging.getLogger(__name__)

STAGE_ORDER = ("primary", "secondary", "tertiary", "ultimate")


def parse_recovery_prediction(
    text: str,
    method: RecoveryMethod = RecoveryMethod.UNSPECIFIED,
) -> Union[RecoveryPrediction, Invalid]:
    """
    Recovery factors by stage. Unstated stages stay None.

    Factors are expected to be cumulative (ultimate >= tertiary >= secondary
    >= primary); a decrease is reported as a data-quality warning and the
    values are kept as stated.
    """
    fields = extract_fields(text, RECOVERY_RULES)
    issues = list(fields.issues)
    factors = {name: fields.optional(name) for name in STAGE_ORDER}

    stated = [(name, factors[name]) for name in STAGE_ORDER if factors[name] is not None]
    for (lower_name, lower), (upper_name, upper) in zip(stated, stated[1:]):
        if upper < lower:
            issues.append(data_quality(
                upper_name,
                f"{upper_name.title()} recovery ({upper}%) is below {lower_name} recovery ({lower}%)",
                observed={lower_name: lower, upper_name: upper},
            ))

    return build_record(
        RecoveryPrediction,
        method=method,
        limiting_factors=tuple(extract_sentences(text, LIMITING_FACTOR_KEYWORDS, limit=5)),
        status=fields.status,
        issues=tuple(issues),
        **factors,
    )


class RecoveryPredictionAnalyzer(BaseAnalyzer[RecoveryPredictionInput, RecoveryPrediction]):
    """Predicts staged recovery factors from rock and fluid properties."""
    name = "recovery_prediction"
    prompt_key = "recovery_prediction"

    def parse(self, text: str, inputs: Optional[RecoveryPredictionInput] = None) -> Union[RecoveryPrediction, Invalid]:
        method = inputs.recovery_method if inputs else RecoveryMethod.UNSPECIFIED
        return parse_recovery_prediction(text, method)
