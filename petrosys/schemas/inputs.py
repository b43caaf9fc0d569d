# petrosys/schemas/inputs.py
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from petrosys.schemas.petroleum_system import PetroleumSystem
from petrosys.schemas.reserves import RecoveryMethod, ReserveEstimation
from petrosys.schemas.risk import RiskAssessment


class SystemIntegrationInput(BaseModel):
    geological_data: Dict[str, Any] = Field(default_factory=dict, description="Stratigraphy, lithology, structure")
    geochemical_data: Dict[str, Any] = Field(default_factory=dict, description="TOC, Rock-Eval, biomarkers")
    geophysical_data: Dict[str, Any] = Field(default_factory=dict, description="Seismic, gravity, magnetic interpretation")
    basin_history: Dict[str, Any] = Field(default_factory=dict, description="Tectonic and burial events")


class ChargeHistoryInput(BaseModel):
    petroleum_system: PetroleumSystem
    thermal_history: Dict[str, Any] = Field(default_factory=dict)
    burial_history: Dict[str, Any] = Field(default_factory=dict)


class ReserveEstimationInput(BaseModel):
    reservoir_parameters: Dict[str, Any] = Field(default_factory=dict, description="Area, thickness, porosity, saturation")
    fluid_properties: Dict[str, Any] = Field(default_factory=dict, description="Bo, Bg, API gravity")
    uncertainty_factors: Dict[str, Any] = Field(default_factory=dict)
    petroleum_system: Optional[PetroleumSystem] = Field(None, description="Upstream system context")


class RecoveryPredictionInput(BaseModel):
    rock_properties: Dict[str, Any] = Field(default_factory=dict)
    fluid_properties: Dict[str, Any] = Field(default_factory=dict)
    recovery_method: RecoveryMethod = RecoveryMethod.UNSPECIFIED


class RiskAssessmentInput(BaseModel):
    petroleum_system: PetroleumSystem
    reserve_estimation: ReserveEstimation
    economic_parameters: Dict[str, Any] = Field(default_factory=dict, description="Prices, costs, fiscal terms")


class ChanceCalculationInput(BaseModel):
    risk_assessment: RiskAssessment
    analog_data: Dict[str, Any] = Field(default_factory=dict)


class GravityMagneticInput(BaseModel):
    gravity_data: Dict[str, Any] = Field(default_factory=dict)
    magnetic_data: Dict[str, Any] = Field(default_factory=dict)
    regional_constraints: Dict[str, Any] = Field(default_factory=dict)


class GeologicalAnalogyInput(BaseModel):
    target_basin: Dict[str, Any] = Field(..., description="Must contain a 'name' entry")
    candidate_basins: List[Dict[str, Any]] = Field(default_factory=list)

    @field_validator("target_basin")
    def check_target_name(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        if not str(v.get("name") or "").strip():
            raise ValueError("target_basin must have a name")
        return v


class BayesianUncertaintyInput(BaseModel):
    geological_model: Dict[str, Any] = Field(default_factory=dict)
    data_quality: Dict[str, Any] = Field(default_factory=dict)
    modeling_assumptions: Dict[str, Any] = Field(default_factory=dict)


class GeochemicalProxyInput(BaseModel):
    hyperspectral_data: Dict[str, Any] = Field(default_factory=dict)
    soil_gas_data: Dict[str, Any] = Field(default_factory=dict)
    microbial_data: Dict[str, Any] = Field(default_factory=dict)


class GeomechanicalInput(BaseModel):
    insar_data: Dict[str, Any] = Field(default_factory=dict)
    fracture_mapping: Dict[str, Any] = Field(default_factory=dict)
    topographic_data: Dict[str, Any] = Field(default_factory=dict)


class ThermalAnomalyInput(BaseModel):
    thermal_data: Dict[str, Any] = Field(default_factory=dict)
    microseepage_indicators: Dict[str, Any] = Field(default_factory=dict)
    heat_flow_data: Dict[str, Any] = Field(default_factory=dict)


class SurfaceCorrelationInput(BaseModel):
    geochemical: GeochemicalProxyInput = Field(default_factory=GeochemicalProxyInput)
    geomechanical: GeomechanicalInput = Field(default_factory=GeomechanicalInput)
    thermal: ThermalAnomalyInput = Field(default_factory=ThermalAnomalyInput)


class PipelineInput(BaseModel):
    """
    Raw inputs for a full pipeline run.

    The optional petroleum_system and reserve_estimation records are fallbacks:
    they stand in for the corresponding stage output when that stage fails or
    extracts nothing.
    """
    name: Optional[str] = Field(None, description="Prospect or basin label")
    geological_data: Dict[str, Any] = Field(default_factory=dict)
    geochemical_data: Dict[str, Any] = Field(default_factory=dict)
    geophysical_data: Dict[str, Any] = Field(default_factory=dict)
    basin_history: Dict[str, Any] = Field(default_factory=dict)
    thermal_history: Dict[str, Any] = Field(default_factory=dict)
    burial_history: Dict[str, Any] = Field(default_factory=dict)
    reservoir_parameters: Dict[str, Any] = Field(default_factory=dict)
    fluid_properties: Dict[str, Any] = Field(default_factory=dict)
    uncertainty_factors: Dict[str, Any] = Field(default_factory=dict)
    rock_properties: Dict[str, Any] = Field(default_factory=dict)
    recovery_method: RecoveryMethod = RecoveryMethod.UNSPECIFIED
    economic_parameters: Dict[str, Any] = Field(default_factory=dict)
    analog_data: Dict[str, Any] = Field(default_factory=dict)
    petroleum_system: Optional[PetroleumSystem] = None
    reserve_estimation: Optional[ReserveEstimation] = None


class NarrativeParseInput(BaseModel):
    record_type: str = Field(..., description="One of the parser names, e.g. 'petroleum_system'")
    narrative: str
    context: Dict[str, Any] = Field(default_factory=dict, description="Parser context, e.g. target_basin or recovery_method")
