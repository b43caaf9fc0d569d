# petrosys/services/analysis/system_integration.py
import logging
from typing import List, Optional, Tuple, Union

from petrosys.schemas.common import ExtractionIssue, Invalid
from petrosys.schemas.inputs import SystemIntegrationInput
from petrosys.schemas.petroleum_system import (
    GenerationTiming,
    Migration,
    MigrationTiming,
    PetroleumSystem,
    Reservoir,
    Seal,
    Source,
    Trap,
    TrapType,
)
from petrosys.services.analysis.base import BaseAnalyzer
from petrosys.services.extraction import (
    FieldExtraction,
    contains_any,
    extract_choice,
    extract_fields,
    extract_sentences,
)
from petrosys.services.extraction.rules import (
    MIGRATION_RULES,
    MIGRATION_TIMING_CHOICES,
    RESERVOIR_RULES,
    SEAL_RULES,
    SOURCE_RULES,
    SOURCE_TIMING_CHOICES,
    TRAP_KEYWORDS,
    TRAP_RULES,
    TRAP_TYPE_CHOICES,
)
from petrosys.services.validation import build_record, gap, status_from_counts

logger = logging.getLogger(__name__)

PATHWAY_KEYWORDS = ("pathway", "carrier bed", "conduit", "migration route", "fault conduit")
SOURCE_CONTEXT = ("source", "generation", "kerogen")
MIGRATION_CONTEXT = ("migration", "migrated", "charge")
TRAP_CONTEXT = TRAP_KEYWORDS + ("pinch-out", "anticlinal")


def _scoped(text: str, keywords) -> str:
    return " ".join(extract_sentences(text, keywords, limit=20))


def _element_meta(fields: FieldExtraction, extra_found: int = 0, extra_total: int = 0) -> dict:
    found = len(fields.found) + extra_found
    total = fields.total + extra_total
    return {
        "extracted": found > 0,
        "coverage": round(100.0 * found / total, 2) if total else 0.0,
    }


def parse_source(text: str) -> Tuple[Source, List[ExtractionIssue]]:
    fields = extract_fields(text, SOURCE_RULES, "source")
    timing = extract_choice(_scoped(text, SOURCE_CONTEXT), SOURCE_TIMING_CHOICES, GenerationTiming.UNKNOWN)
    known = int(timing != GenerationTiming.UNKNOWN)
    source = Source(**fields.values, timing=timing, **_element_meta(fields, known, 1))
    return source, fields.issues


def parse_migration(text: str) -> Tuple[Migration, List[ExtractionIssue]]:
    fields = extract_fields(text, MIGRATION_RULES, "migration")
    pathways = tuple(extract_sentences(text, PATHWAY_KEYWORDS, limit=5))
    timing = extract_choice(_scoped(text, MIGRATION_CONTEXT), MIGRATION_TIMING_CHOICES, MigrationTiming.UNKNOWN)
    issues = list(fields.issues)
    if not pathways:
        issues.append(gap("migration.pathways", "No migration pathway described"))
    known = int(bool(pathways)) + int(timing != MigrationTiming.UNKNOWN)
    migration = Migration(pathways=pathways, timing=timing, **fields.values, **_element_meta(fields, known, 2))
    return migration, issues


def parse_reservoir(text: str) -> Tuple[Reservoir, List[ExtractionIssue]]:
    fields = extract_fields(text, RESERVOIR_RULES, "reservoir")
    return Reservoir(**fields.values, **_element_meta(fields)), fields.issues


def parse_seal(text: str) -> Tuple[Seal, List[ExtractionIssue]]:
    fields = extract_fields(text, SEAL_RULES, "seal")
    return Seal(**fields.values, **_element_meta(fields)), fields.issues


def trap_type(text: str) -> TrapType:
    """
    Stated trap type, read only from sentences about the trap; a bare
    trap/closure mention defaults to structural.
    """
    scoped = _scoped(text, TRAP_CONTEXT)
    stated = extract_choice(scoped, TRAP_TYPE_CHOICES, None)
    if stated is not None:
        return stated
    return TrapType.STRUCTURAL if contains_any(scoped, TRAP_KEYWORDS) else TrapType.UNKNOWN


def parse_trap(text: str) -> Tuple[Trap, List[ExtractionIssue]]:
    fields = extract_fields(text, TRAP_RULES, "trap")
    kind = trap_type(text)
    known = int(kind != TrapType.UNKNOWN)
    trap = Trap(type=kind, **fields.values, **_element_meta(fields, known, 1))
    return trap, fields.issues


def parse_petroleum_system(text: str) -> Union[PetroleumSystem, Invalid]:
    """
    Extract the five petroleum-system elements independently.

    An element missing from the narrative does not affect the others; the
    record is then `partial` and every unmatched field carries a gap issue.
    """
    source, source_issues = parse_source(text)
    migration, migration_issues = parse_migration(text)
    reservoir, reservoir_issues = parse_reservoir(text)
    seal, seal_issues = parse_seal(text)
    trap, trap_issues = parse_trap(text)

    elements = (source, migration, reservoir, seal, trap)
    found = sum(1 for e in elements if e.extracted)
    return build_record(
        PetroleumSystem,
        source=source,
        migration=migration,
        reservoir=reservoir,
        seal=seal,
        trap=trap,
        status=status_from_counts(found, len(elements)),
        issues=tuple(source_issues + migration_issues + reservoir_issues + seal_issues + trap_issues),
    )


class SystemIntegrationAnalyzer(BaseAnalyzer[SystemIntegrationInput, PetroleumSystem]):
    """Integrates geological, geochemical, geophysical and basin-history data into a PetroleumSystem."""
    name = "system_integration"
    prompt_key = "system_integration"

    def parse(self, text: str, inputs: Optional[SystemIntegrationInput] = None) -> Union[PetroleumSystem, Invalid]:
        return parse_petroleum_system(text)
