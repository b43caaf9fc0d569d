# petrosys/services/analysis/risk_assessment.py
import logging
from typing import Optional, Union

from petrosys.schemas.common import Invalid
from petrosys.schemas.inputs import RiskAssessmentInput
from petrosys.schemas.risk import EconomicRisk, GeologicalRisk, RiskAssessment, TechnicalRisk
from petrosys.services.analysis.base import BaseAnalyzer
from petrosys.services.analysis.chance_policy import ChancePolicy
from petrosys.services.extraction import FieldExtraction, extract_fields
from petrosys.services.extraction.rules import (
    ECONOMIC_RISK_RULES,
    GEOLOGICAL_RISK_RULES,
    TECHNICAL_RISK_RULES,
)
from petrosys.services.validation import build_record, status_from_counts

logger = logging.getLogger(__name__)


def _missing(fields: FieldExtraction) -> tuple:
    return tuple(name for name in fields.values if name not in fields.found)


def parse_risk_assessment(text: str, policy: Optional[ChancePolicy] = None) -> Union[RiskAssessment, Invalid]:
    """
    Risk scores by category. The overall chance is always derived from the
    scores with `policy`; chance figures quoted in the narrative are ignored.
    """
    policy = policy or ChancePolicy.from_settings()
    geo = extract_fields(text, GEOLOGICAL_RISK_RULES, "geological_risk")
    econ = extract_fields(text, ECONOMIC_RISK_RULES, "economic_risk")
    tech = extract_fields(text, TECHNICAL_RISK_RULES, "technical_risk")

    geological_risk = GeologicalRisk(**geo.values, missing=_missing(geo))
    economic_risk = EconomicRisk(**econ.values, missing=_missing(econ))
    technical_risk = TechnicalRisk(**tech.values, missing=_missing(tech))

    found = len(geo.found) + len(econ.found) + len(tech.found)
    total = geo.total + econ.total + tech.total
    return build_record(
        RiskAssessment,
        geological_risk=geological_risk,
        economic_risk=economic_risk,
        technical_risk=technical_risk,
        overall_chance=policy.derive(geological_risk, economic_risk, technical_risk),
        status=status_from_counts(found, total),
        issues=tuple(geo.issues + econ.issues + tech.issues),
    )


class RiskAssessmentAnalyzer(BaseAnalyzer[RiskAssessmentInput, RiskAssessment]):
    """Geological, economic and technical risk with a derived overall chance of success."""
    name = "risk_assessment"
    prompt_key = "risk_assessment"

    def __init__(self, client, policy: Optional[ChancePolicy] = None):
        super().__init__(client)
        self.policy = policy or ChancePolicy.from_settings()

    def parse(self, text: str, inputs: Optional[RiskAssessmentInput] = None) -> Union[RiskAssessment, Invalid]:
        return parse_risk_assessment(text, self.policy)
