# petrosys/schemas/risk.py
from typing import Optional, Tuple

from pydantic import Field

from petrosys.schemas.common import AnalysisRecord, FrozenModel

# All risk scores are 0-100 where 100 is the highest risk.


class GeologicalRisk(FrozenModel):
    source: float = Field(0.0, ge=0, le=100)
    reservoir: float = Field(0.0, ge=0, le=100)
    seal: float = Field(0.0, ge=0, le=100)
    trap: float = Field(0.0, ge=0, le=100)
    timing: float = Field(0.0, ge=0, le=100)
    missing: Tuple[str, ...] = Field((), description="Scores not found in the narrative")


class EconomicRisk(FrozenModel):
    oil_price: float = Field(0.0, ge=0, le=100)
    cost: float = Field(0.0, ge=0, le=100)
    market: float = Field(0.0, ge=0, le=100)
    regulatory: float = Field(0.0, ge=0, le=100)
    missing: Tuple[str, ...] = Field((), description="Scores not found in the narrative")


class TechnicalRisk(FrozenModel):
    drilling: float = Field(0.0, ge=0, le=100)
    completion: float = Field(0.0, ge=0, le=100)
    production: float = Field(0.0, ge=0, le=100)
    infrastructure: float = Field(0.0, ge=0, le=100)
    missing: Tuple[str, ...] = Field((), description="Scores not found in the narrative")


class OverallChance(FrozenModel):
    """Chance of success, %. Always derived from the risk scores."""
    geological: float = Field(0.0, ge=0, le=100)
    commercial: float = Field(0.0, ge=0, le=100)
    combined: float = Field(0.0, ge=0, le=100)
    policy: str = Field("weighted", description="Combination policy used for the combined chance")


class RiskAssessment(AnalysisRecord):
    geological_risk: GeologicalRisk = GeologicalRisk()
    economic_risk: EconomicRisk = EconomicRisk()
    technical_risk: TechnicalRisk = TechnicalRisk()
    overall_chance: OverallChance = OverallChance()


class ElementProbabilities(FrozenModel):
    """Probability of presence and effectiveness of each play element, %."""
    source: Optional[float] = Field(None, ge=0, le=100)
    migration: Optional[float] = Field(None, ge=0, le=100)
    reservoir: Optional[float] = Field(None, ge=0, le=100)
    seal: Optional[float] = Field(None, ge=0, le=100)
    trap: Optional[float] = Field(None, ge=0, le=100)
    timing: Optional[float] = Field(None, ge=0, le=100)


class ConditionalProbability(FrozenModel):
    event: str
    given: str
    probability: float = Field(..., ge=0, le=100)


class ChanceFactors(AnalysisRecord):
    element_probabilities: ElementProbabilities = ElementProbabilities()
    conditional_probabilities: Tuple[ConditionalProbability, ...] = ()
    geological_chance: float = Field(0.0, ge=0, le=100, description="Product of element probabilities, %")
    commercial_chance: float = Field(0.0, ge=0, le=100, description="Commercial chance stated in the narrative, %")
    expected_value: Optional[float] = Field(None, description="Expected monetary value, $MM")
