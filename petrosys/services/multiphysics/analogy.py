# petrosys/services/multiphysics/analogy.py
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from petrosys.schemas.common import AnalysisError, Invalid
from petrosys.schemas.inputs import GeologicalAnalogyInput
from petrosys.schemas.multiphysics import AnalogousElements, GeologicalAnalogy, TransferredKnowledge
from petrosys.services.analysis.base import BaseAnalyzer, log_record_summary
from petrosys.services.extraction import (
    apply_rule,
    extract_fields,
    extract_sentences,
    extract_terms,
    find_basin_names,
    same_basin,
    search_confidence,
)
from petrosys.services.extraction.rules import (
    ANALOG_PERMEABILITY_RULE,
    ANALOG_POROSITY_RULE,
    ANALOGY_RULES,
)
from petrosys.services.validation import build_record, clamp_percentage, status_from_counts

logger = logging.getLogger(__name__)

ANALOG_TRAP_TERMS = (
    "structural", "stratigraphic", "combination", "anticline", "fault-bounded", "tilted fault block",
    "pinch-out", "reef", "salt dome", "four-way",
)
RISK_KEYWORDS = ("risk", "uncertain", "concern", "challenge")


def _basin_name(basin: Dict[str, Any]) -> Optional[str]:
    name = basin.get("name") if isinstance(basin, dict) else None
    return str(name) if name else None


def parse_analogy(segment: str, source_basin: str, target_basin: str) -> Union[GeologicalAnalogy, Invalid]:
    """One analogue from the part of the narrative that discusses it."""
    fields = extract_fields(segment, ANALOGY_RULES)
    porosity, porosity_issues = apply_rule(segment, ANALOG_POROSITY_RULE, "transferred_knowledge")
    permeability, permeability_issues = apply_rule(segment, ANALOG_PERMEABILITY_RULE, "transferred_knowledge")

    stated = search_confidence(segment)
    confidence, confidence_issue = clamp_percentage(50.0 if stated is None else stated, "confidence_level")
    issues = list(fields.issues) + porosity_issues + permeability_issues
    if confidence_issue:
        issues.append(confidence_issue)

    knowledge = TransferredKnowledge(
        porosity=porosity,
        permeability=permeability,
        trap_types=tuple(extract_terms(segment, ANALOG_TRAP_TERMS)),
        risk_factors=tuple(extract_sentences(segment, RISK_KEYWORDS, limit=3)),
    )
    values = fields.values
    return build_record(
        GeologicalAnalogy,
        source_basin=source_basin,
        target_basin=target_basin,
        similarity_score=values["similarity_score"],
        analogous_elements=AnalogousElements(
            structural_style=values["structural_style"],
            stratigraphy=values["stratigraphy"],
            tectonic_setting=values["tectonic_setting"],
            thermal_history=values["thermal_history"],
        ),
        transferred_knowledge=knowledge,
        confidence_level=confidence,
        status=status_from_counts(
            len(fields.found) + int(porosity is not None) + int(permeability is not None),
            fields.total + 2,
        ),
        issues=tuple(issues),
    )


def parse_analogies(
    text: str,
    target_basin: str,
    candidates: Sequence[str] = (),
) -> Tuple[Union[GeologicalAnalogy, Invalid], ...]:
    """
    One analogy per basin named in the narrative, excluding the target.

    Each basin is parsed from its first mention up to the first mention of
    the next basin, so figures are not attributed across basins.
    """
    mentions = find_basin_names(text, known=candidates)
    positions = [start for start, _ in mentions] + [len(text)]
    analogies = []
    for index, (start, name) in enumerate(mentions):
        if same_basin(name, target_basin):
            continue
        segment = text[start:positions[index + 1]]
        analogies.append(parse_analogy(segment, name, target_basin))
    return tuple(analogies)


class GeologicalAnalogyAnalyzer(BaseAnalyzer[GeologicalAnalogyInput, Tuple[GeologicalAnalogy, ...]]):
    """Ranks analogue basins against a target basin and lists transferable knowledge."""
    name = "geological_analogy"
    prompt_key = "geological_analogy"

    def parse(
        self, text: str, inputs: Optional[GeologicalAnalogyInput] = None
    ) -> Tuple[Union[GeologicalAnalogy, Invalid], ...]:
        target = _basin_name(inputs.target_basin) if inputs else None
        candidates = [n for n in (_basin_name(b) for b in inputs.candidate_basins) if n] if inputs else []
        return parse_analogies(text, target or "", candidates)

    def analyze(
        self, inputs: GeologicalAnalogyInput
    ) -> Union[Tuple[Union[GeologicalAnalogy, Invalid], ...], AnalysisError]:
        result = super().analyze(inputs)
        if isinstance(result, tuple):
            if not result:
                logger.warning(f"{self.name}: no analogue basin named in the narrative")
            for analogy in result:
                log_record_summary(f"{self.name}[{getattr(analogy, 'source_basin', '?')}]", analogy)
        return result
