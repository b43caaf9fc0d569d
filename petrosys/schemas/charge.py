# petrosys/schemas/charge.py
from enum import Enum
from typing import Optional

from pydantic import Field

from petrosys.schemas.common import AnalysisRecord, FrozenModel


class TimelinePosition(str, Enum):
    """Where trap formation sits relative to peak hydrocarbon generation."""
    TRAP_PREDATES_GENERATION = "trap_predates_generation"
    COEVAL = "coeval"
    TRAP_POSTDATES_GENERATION = "trap_postdates_generation"
    UNKNOWN = "unknown"


class GenerationEvent(FrozenModel):
    age_ma: Optional[float] = Field(None, ge=0, description="Onset or peak of generation, Ma")
    volume: float = Field(0.0, ge=0, description="Generated volume, million tonnes")


class MigrationEvent(FrozenModel):
    age_ma: Optional[float] = Field(None, ge=0, description="Main migration phase, Ma")
    efficiency: float = Field(0.0, ge=0, le=100, description="Migration efficiency, %")


class AccumulationEvent(FrozenModel):
    age_ma: Optional[float] = Field(None, ge=0, description="Accumulation, Ma")
    preservation: float = Field(0.0, ge=0, le=100, description="Preservation potential, %")


class CriticalMoment(FrozenModel):
    age_ma: Optional[float] = Field(None, ge=0, description="Critical moment, Ma")
    trap_formation_ma: Optional[float] = Field(None, ge=0, description="Trap formation, Ma")
    peak_generation_ma: Optional[float] = Field(None, ge=0, description="Peak generation, Ma")
    position: TimelinePosition = TimelinePosition.UNKNOWN


class ChargeHistory(AnalysisRecord):
    generation: GenerationEvent = GenerationEvent()
    migration: MigrationEvent = MigrationEvent()
    accumulation: AccumulationEvent = AccumulationEvent()
    critical_moment: CriticalMoment = CriticalMoment()
    charge_risk: float = Field(0.0, ge=0, le=100, description="Charge risk, % (100 = highest risk)")
