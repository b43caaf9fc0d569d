# petrosys/services/analysis/charge_history.py
import logging
from typing import Optional, Union

from petrosys.schemas.charge import (
    AccumulationEvent,
    ChargeHistory,
    CriticalMoment,
    GenerationEvent,
    MigrationEvent,
    TimelinePosition,
)
from petrosys.schemas.common import Invalid
from petrosys.schemas.inputs import ChargeHistoryInput
from petrosys.schemas.petroleum_system import PetroleumSystem
from petrosys.services.analysis.base import BaseAnalyzer
from petrosys.services.extraction import extract_choice, extract_fields
from petrosys.services.extraction.rules import CHARGE_RULES, TIMELINE_CUES
from petrosys.services.validation import build_record, data_quality

logger = logging.getLogger(__name__)

# Ages closer than this are treated as the same event
COEVAL_TOLERANCE_MA = 1.0


def timeline_position(
    trap_formation_ma: Optional[float],
    peak_generation_ma: Optional[float],
    text: str = "",
) -> TimelinePosition:
    """
    Place trap formation relative to peak generation.

    Ages are in Ma, so the larger number is the older event. Textual cues are
    used only when either age is missing.
    """
    if trap_formation_ma is not None and peak_generation_ma is not None:
        if abs(trap_formation_ma - peak_generation_ma) <= COEVAL_TOLERANCE_MA:
            return TimelinePosition.COEVAL
        if trap_formation_ma > peak_generation_ma:
            return TimelinePosition.TRAP_PREDATES_GENERATION
        return TimelinePosition.TRAP_POSTDATES_GENERATION
    return extract_choice(text, TIMELINE_CUES, TimelinePosition.UNKNOWN)


def parse_charge_history(
    text: str,
    petroleum_system: Optional[PetroleumSystem] = None,
) -> Union[ChargeHistory, Invalid]:
    fields = extract_fields(text, CHARGE_RULES)
    issues = list(fields.issues)

    trap_formation = fields.optional("trap_formation")
    peak_generation = fields.optional("generation_age")
    position = timeline_position(trap_formation, peak_generation, text)
    if position == TimelinePosition.TRAP_POSTDATES_GENERATION:
        issues.append(data_quality(
            "critical_moment.position",
            "Trap formed after peak generation; early charge may have been lost",
            observed={"trap_formation_ma": trap_formation, "peak_generation_ma": peak_generation},
        ))

    if petroleum_system is not None and not petroleum_system.source.extracted:
        issues.append(data_quality("petroleum_system.source", "Charge modelled without an extracted source element"))

    return build_record(
        ChargeHistory,
        generation=GenerationEvent(age_ma=peak_generation, volume=fields.values["generation_volume"]),
        migration=MigrationEvent(
            age_ma=fields.optional("migration_age"),
            efficiency=fields.values["migration_efficiency"],
        ),
        accumulation=AccumulationEvent(
            age_ma=fields.optional("accumulation_age"),
            preservation=fields.values["preservation"],
        ),
        critical_moment=CriticalMoment(
            age_ma=fields.optional("critical_moment"),
            trap_formation_ma=trap_formation,
            peak_generation_ma=peak_generation,
            position=position,
        ),
        charge_risk=fields.values["charge_risk"],
        status=fields.status,
        issues=tuple(issues),
    )


class ChargeHistoryAnalyzer(BaseAnalyzer[ChargeHistoryInput, ChargeHistory]):
    """Models generation, migration and accumulation timing against trap formation."""
    name = "charge_history"
    prompt_key = "charge_history"

    def parse(self, text: str, inputs: Optional[ChargeHistoryInput] = None) -> Union[ChargeHistory, Invalid]:
        return parse_charge_history(text, inputs.petroleum_system if inputs else None)
