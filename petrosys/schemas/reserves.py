# petrosys/schemas/reserves.py
from enum import Enum
from typing import Optional, Tuple

from pydantic import Field

from petrosys.schemas.common import AnalysisRecord, RangeEstimate, RecoverableEstimate


class RecoveryMethod(str, Enum):
    PRIMARY = "primary"
    WATERFLOOD = "waterflood"
    GAS_INJECTION = "gas_injection"
    THERMAL = "thermal"
    CHEMICAL = "chemical"
    MISCIBLE = "miscible"
    UNSPECIFIED = "unspecified"


class ReserveEstimation(AnalysisRecord):
    """
    Volumetric in-place and recoverable estimates.

    Oil volumes are in MMbbl, gas volumes in Bcf. Each in-place range is
    validated on its own, so a malformed gas range leaves the oil range intact.
    """
    oil_in_place: RangeEstimate = RangeEstimate()
    gas_in_place: RangeEstimate = RangeEstimate()
    recoverable_oil: RecoverableEstimate = RecoverableEstimate()
    recoverable_gas: RecoverableEstimate = RecoverableEstimate()


class RecoveryPrediction(AnalysisRecord):
    method: RecoveryMethod = RecoveryMethod.UNSPECIFIED
    primary: Optional[float] = Field(None, ge=0, le=100, description="Primary recovery factor, %")
    secondary: Optional[float] = Field(None, ge=0, le=100, description="Secondary recovery factor, %")
    tertiary: Optional[float] = Field(None, ge=0, le=100, description="Tertiary / EOR recovery factor, %")
    ultimate: Optional[float] = Field(None, ge=0, le=100, description="Ultimate recovery factor, %")
    limiting_factors: Tuple[str, ...] = ()
