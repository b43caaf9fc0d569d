# petrosys/services/analysis/chance_policy.py
import logging
from typing import Iterable

import numpy as np

from petrosys.core.config import settings
from petrosys.schemas.risk import EconomicRisk, GeologicalRisk, OverallChance, TechnicalRisk

logger = logging.getLogger(__name__)

COMBINATIONS = ("weighted", "product")


class ChancePolicy:
    """
    Derives chance of success (%) from risk scores (0-100, 100 = highest risk).

    geological = prod(1 - risk/100) over source, reservoir, seal, trap, timing
    commercial = (1 - mean(economic)/100) * (1 - mean(technical)/100)
    combined   = weighted mean of the two, or their product

    Scores the narrative did not provide are replaced by `missing_risk`.
    """

    def __init__(
        self,
        combination: str = "weighted",
        geological_weight: float = 0.5,
        commercial_weight: float = 0.5,
        missing_risk: float = 50.0,
    ):
        combination = combination.strip().lower()
        if combination not in COMBINATIONS:
            raise ValueError(f"Unsupported chance combination: {combination}")
        if geological_weight < 0 or commercial_weight < 0 or geological_weight + commercial_weight <= 0:
            raise ValueError("Chance weights must be non-negative and not both zero")
        if not 0.0 <= missing_risk <= 100.0:
            raise ValueError("Missing-risk substitute must be within [0, 100]")
        self.combination = combination
        self.geological_weight = geological_weight
        self.commercial_weight = commercial_weight
        self.missing_risk = missing_risk

    @classmethod
    def from_settings(cls, config=None) -> "ChancePolicy":
        config = config or settings
        return cls(
            combination=config.CHANCE_COMBINATION,
            geological_weight=config.CHANCE_GEOLOGICAL_WEIGHT,
            commercial_weight=config.CHANCE_COMMERCIAL_WEIGHT,
            missing_risk=config.CHANCE_MISSING_RISK,
        )

    def _scores(self, record, names: Iterable[str]) -> np.ndarray:
        missing = set(record.missing)
        return np.array(
            [self.missing_risk if name in missing else getattr(record, name) for name in names],
            dtype=float,
        )

    def geological_chance(self, risk: GeologicalRisk) -> float:
        scores = self._scores(risk, ("source", "reservoir", "seal", "trap", "timing"))
        return float(np.prod(1.0 - scores / 100.0) * 100.0)

    def commercial_chance(self, economic: EconomicRisk, technical: TechnicalRisk) -> float:
        econ = self._scores(economic, ("oil_price", "cost", "market", "regulatory"))
        tech = self._scores(technical, ("drilling", "completion", "production", "infrastructure"))
        return float((1.0 - econ.mean() / 100.0) * (1.0 - tech.mean() / 100.0) * 100.0)

    def combine(self, geological: float, commercial: float) -> float:
        if self.combination == "product":
            return geological * commercial / 100.0
        weights = np.array([self.geological_weight, self.commercial_weight])
        return float(np.average([geological, commercial], weights=weights))

    def derive(
        self,
        geological_risk: GeologicalRisk,
        economic_risk: EconomicRisk,
        technical_risk: TechnicalRisk,
    ) -> OverallChance:
        geological = self.geological_chance(geological_risk)
        commercial = self.commercial_chance(economic_risk, technical_risk)
        combined = self.combine(geological, commercial)
        logger.debug(
            f"Chance ({self.combination}): geological={geological:.2f}, "
            f"commercial={commercial:.2f}, combined={combined:.2f}"
        )
        return OverallChance(
            geological=_pct(geological),
            commercial=_pct(commercial),
            combined=_pct(combined),
            policy=self.combination,
        )


def _pct(value: float) -> float:
    return round(float(np.clip(value, 0.0, 100.0)), 2)
