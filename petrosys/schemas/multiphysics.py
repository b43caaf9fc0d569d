# petrosys/schemas/multiphysics.py
from enum import Enum
from typing import Optional, Tuple

from pydantic import Field

from petrosys.schemas.common import AnalysisRecord, Distribution, FrozenModel, MeasuredValue


# --- Gravity-magnetic inversion ---

class BasinType(str, Enum):
    RIFT = "rift"
    FORELAND = "foreland"
    PASSIVE_MARGIN = "passive_margin"
    INTRACRATONIC = "intracratonic"
    UNKNOWN = "unknown"


class Complexity(str, Enum):
    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"
    UNKNOWN = "unknown"


class BasinArchitecture(FrozenModel):
    type: BasinType = BasinType.UNKNOWN
    complexity: Complexity = Complexity.UNKNOWN
    structural_elements: Tuple[str, ...] = ()


class Fault(FrozenModel):
    depth: float = Field(0.0, ge=0, description="m")
    orientation: Optional[str] = None
    displacement: float = Field(0.0, ge=0, description="m")
    confidence: float = Field(50.0, ge=0, le=100)


class Anticline(FrozenModel):
    amplitude: float = Field(0.0, ge=0, description="m")
    wavelength: float = Field(0.0, ge=0, description="km")
    depth: float = Field(0.0, ge=0, description="m")
    confidence: float = Field(50.0, ge=0, le=100)


class DeepStructures(FrozenModel):
    faults: Tuple[Fault, ...] = ()
    anticlines: Tuple[Anticline, ...] = ()


class GravityMagneticInversion(AnalysisRecord):
    basement_depth: MeasuredValue = Field(MeasuredValue(), description="Basement depth, m")
    sedimentary_thickness: MeasuredValue = Field(MeasuredValue(), description="Sedimentary thickness, m")
    basin_architecture: BasinArchitecture = BasinArchitecture()
    deep_structures: DeepStructures = DeepStructures()


# --- Geological analogy ---

class AnalogousElements(FrozenModel):
    structural_style: float = Field(0.0, ge=0, le=100)
    stratigraphy: float = Field(0.0, ge=0, le=100)
    tectonic_setting: float = Field(0.0, ge=0, le=100)
    thermal_history: float = Field(0.0, ge=0, le=100)


class TransferredKnowledge(FrozenModel):
    porosity: Optional[float] = Field(None, ge=0, le=100, description="%")
    permeability: Optional[float] = Field(None, ge=0, description="mD")
    trap_types: Tuple[str, ...] = ()
    risk_factors: Tuple[str, ...] = ()


class GeologicalAnalogy(AnalysisRecord):
    source_basin: str
    target_basin: str
    similarity_score: float = Field(0.0, ge=0, le=100)
    analogous_elements: AnalogousElements = AnalogousElements()
    transferred_knowledge: TransferredKnowledge = TransferredKnowledge()
    confidence_level: float = Field(50.0, ge=0, le=100)


# --- Bayesian uncertainty ---

class DepthUncertainty(FrozenModel):
    shallow: Distribution = Distribution()
    intermediate: Distribution = Distribution()
    deep: Distribution = Distribution()


class PropertyUncertainty(FrozenModel):
    porosity: Distribution = Field(Distribution(), description="%")
    permeability: Distribution = Field(Distribution(), description="mD")
    thickness: Distribution = Field(Distribution(), description="m")


class Scenario(FrozenModel):
    name: str
    probability: float = Field(0.0, ge=0, le=100)
    description: str = ""


class DrillingLocation(FrozenModel):
    x: Optional[float] = None
    y: Optional[float] = None
    confidence: float = Field(50.0, ge=0, le=100)


class ExpectedReserves(FrozenModel):
    """Expected reserves in MMbbl. P90 is the low case, P10 the high case."""
    mean: float = Field(0.0, ge=0)
    p10: float = Field(0.0, ge=0)
    p90: float = Field(0.0, ge=0)


class RiskWeightedDecisions(FrozenModel):
    drilling_location: DrillingLocation = DrillingLocation()
    target_depth: MeasuredValue = Field(MeasuredValue(), description="Target depth, m")
    expected_reserves: ExpectedReserves = ExpectedReserves()


class BayesianUncertainty(AnalysisRecord):
    depth_uncertainty: DepthUncertainty = DepthUncertainty()
    property_uncertainty: PropertyUncertainty = PropertyUncertainty()
    scenarios: Tuple[Scenario, ...] = ()
    risk_weighted_decisions: RiskWeightedDecisions = RiskWeightedDecisions()


# --- Surface-subsurface correlation ---

class SpatialPattern(str, Enum):
    POINT = "point"
    LINEAR = "linear"
    AREAL = "areal"
    CIRCULAR = "circular"
    IRREGULAR = "irregular"
    UNKNOWN = "unknown"


class StressRegime(str, Enum):
    EXTENSIONAL = "extensional"
    COMPRESSIONAL = "compressional"
    STRIKE_SLIP = "strike_slip"
    UNKNOWN = "unknown"


class MaturityLevel(str, Enum):
    IMMATURE = "immature"
    OIL_WINDOW = "oil_window"
    GAS_WINDOW = "gas_window"
    OVERMATURE = "overmature"
    UNKNOWN = "unknown"


class SoilGas(FrozenModel):
    methane_anomaly: float = Field(0.0, ge=0, description="ppm above background")
    ethane_anomaly: float = Field(0.0, ge=0, description="ppm above background")
    propane_anomaly: float = Field(0.0, ge=0, description="ppm above background")
    confidence: float = Field(50.0, ge=0, le=100)


class MicrobialAnomalies(FrozenModel):
    hydrocarbon_degraders: float = Field(0.0, ge=0, description="Relative abundance")
    anomaly_strength: float = Field(0.0, ge=0, le=100)
    spatial_pattern: SpatialPattern = SpatialPattern.UNKNOWN


class MineralAlteration(FrozenModel):
    kaolinite: float = Field(0.0, ge=0, le=100)
    illite: float = Field(0.0, ge=0, le=100)
    smectite: float = Field(0.0, ge=0, le=100)
    calcite: float = Field(0.0, ge=0, le=100)
    dolomite: float = Field(0.0, ge=0, le=100)
    goethite: float = Field(0.0, ge=0, le=100)
    hematite: float = Field(0.0, ge=0, le=100)
    alteration_index: float = Field(0.0, ge=0, le=100)


class GeochemicalProxies(AnalysisRecord):
    soil_gas: SoilGas = SoilGas()
    microbial_anomalies: MicrobialAnomalies = MicrobialAnomalies()
    mineral_alteration: MineralAlteration = MineralAlteration()


class StressField(FrozenModel):
    orientation: float = Field(0.0, ge=0, le=360, description="Degrees from north")
    magnitude: float = Field(0.0, ge=0, description="MPa")
    regime: StressRegime = StressRegime.UNKNOWN


class FractureDensity(FrozenModel):
    surface: float = Field(0.0, ge=0, description="Fractures per km")
    predicted_subsurface: float = Field(0.0, ge=0, description="Fractures per km")
    confidence: float = Field(50.0, ge=0, le=100)


class DifferentialCompaction(FrozenModel):
    magnitude: float = Field(0.0, ge=0, description="m")
    pattern: SpatialPattern = SpatialPattern.UNKNOWN
    interpretation: str = ""


class GeomechanicalExpressions(AnalysisRecord):
    stress_field: StressField = StressField()
    fracture_density: FractureDensity = FractureDensity()
    differential_compaction: DifferentialCompaction = DifferentialCompaction()


class Microseepage(FrozenModel):
    temperature_anomaly: float = Field(0.0, ge=0, description="°C above background")
    spatial_extent: float = Field(0.0, ge=0, description="m")
    confidence: float = Field(50.0, ge=0, le=100)


class GeothermalGradient(FrozenModel):
    surface_gradient: float = Field(0.0, ge=0, description="°C/km")
    predicted_subsurface: float = Field(0.0, ge=0, description="°C/km")
    heat_flow: float = Field(0.0, ge=0, description="mW/m²")


class MaturationIndicators(FrozenModel):
    vitrinite_equivalent: float = Field(0.0, ge=0, description="%Ro")
    maturity_level: MaturityLevel = MaturityLevel.UNKNOWN
    confidence: float = Field(50.0, ge=0, le=100)


class ThermalAnomalies(AnalysisRecord):
    microseepage: Microseepage = Microseepage()
    geothermal_gradient: GeothermalGradient = GeothermalGradient()
    maturation_indicators: MaturationIndicators = MaturationIndicators()


class SurfaceSubsurfaceCorrelation(AnalysisRecord):
    geochemical_proxies: GeochemicalProxies = GeochemicalProxies(status="empty")
    geomechanical_expressions: GeomechanicalExpressions = GeomechanicalExpressions(status="empty")
    thermal_anomalies: ThermalAnomalies = ThermalAnomalies(status="empty")
