# petrosys/schemas/petroleum_system.py
from enum import Enum
from typing import Tuple

from pydantic import Field

from petrosys.schemas.common import AnalysisRecord, FrozenModel


class GenerationTiming(str, Enum):
    EARLY = "early"
    LATE = "late"
    OPTIMAL = "optimal"
    UNKNOWN = "unknown"


class MigrationTiming(str, Enum):
    RECENT = "recent"
    ANCIENT = "ancient"
    MULTIPLE_PHASES = "multiple_phases"
    UNKNOWN = "unknown"


class TrapType(str, Enum):
    STRUCTURAL = "structural"
    STRATIGRAPHIC = "stratigraphic"
    COMBINATION = "combination"
    UNKNOWN = "unknown"


class ElementRecord(FrozenModel):
    extracted: bool = Field(False, description="True when at least one field was found in the text")
    coverage: float = Field(0.0, ge=0, le=100, description="Share of fields found in the text, %")


class Source(ElementRecord):
    quality: float = Field(0.0, ge=0, le=100, description="Source rock quality, %")
    maturity: float = Field(0.0, ge=0, le=100, description="Thermal maturity score, %")
    volume: float = Field(0.0, ge=0, description="Generated volume, million tonnes")
    timing: GenerationTiming = GenerationTiming.UNKNOWN


class Migration(ElementRecord):
    pathways: Tuple[str, ...] = ()
    efficiency: float = Field(0.0, ge=0, le=100, description="Migration efficiency, %")
    distance: float = Field(0.0, ge=0, description="Migration distance, km")
    timing: MigrationTiming = MigrationTiming.UNKNOWN


class Reservoir(ElementRecord):
    quality: float = Field(0.0, ge=0, le=100, description="Reservoir quality, %")
    porosity: float = Field(0.0, ge=0, le=100, description="Porosity, %")
    permeability: float = Field(0.0, ge=0, description="Permeability, mD")
    thickness: float = Field(0.0, ge=0, description="Net thickness, m")


class Seal(ElementRecord):
    integrity: float = Field(0.0, ge=0, le=100, description="Seal integrity, %")
    thickness: float = Field(0.0, ge=0, description="Seal thickness, m")
    continuity: float = Field(0.0, ge=0, le=100, description="Lateral continuity, %")


class Trap(ElementRecord):
    type: TrapType = TrapType.UNKNOWN
    closure: float = Field(0.0, ge=0, description="Vertical closure, m")
    area: float = Field(0.0, ge=0, description="Closure area, km²")
    integrity: float = Field(0.0, ge=0, le=100, description="Trap integrity, %")


class PetroleumSystem(AnalysisRecord):
    source: Source = Source()
    migration: Migration = Migration()
    reservoir: Reservoir = Reservoir()
    seal: Seal = Seal()
    trap: Trap = Trap()

    @property
    def elements(self) -> dict:
        return {
            "source": self.source,
            "migration": self.migration,
            "reservoir": self.reservoir,
            "seal": self.seal,
            "trap": self.trap,
        }

    @property
    def partial(self) -> bool:
        return any(not e.extracted for e in self.elements.values())
