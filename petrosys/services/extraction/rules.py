# petrosys/services/extraction/rules.py
# Keyword -> field tables. Keywords are tried in order; put specific phrases
# before generic ones.
from petrosys.schemas.charge import TimelinePosition
from petrosys.schemas.common import DistributionType
from petrosys.schemas.multiphysics import (
    BasinType,
    Complexity,
    MaturityLevel,
    SpatialPattern,
    StressRegime,
)
from petrosys.schemas.petroleum_system import GenerationTiming, MigrationTiming, TrapType
from petrosys.services.extraction.engine import ANY_LENGTH, PERCENT_UNITS, FieldKind, FieldRule

P = FieldKind.PERCENT
NN = FieldKind.NON_NEGATIVE

AGE_UNITS = ("ma", "mya", "myr")

# --- Petroleum system ---

SOURCE_RULES = (
    FieldRule("quality", ("source rock quality", "source quality", "source rock potential"), P, PERCENT_UNITS),
    FieldRule("maturity", ("thermal maturity", "source maturity", "maturity"), P, PERCENT_UNITS),
    FieldRule("volume", ("generated volume", "generation volume", "source volume", "generative volume"), NN,
              (None, "mt")),
)

MIGRATION_RULES = (
    FieldRule("efficiency", ("migration efficiency", "expulsion efficiency"), P, PERCENT_UNITS),
    FieldRule("distance", ("migration distance", "lateral migration", "migration pathway length"), NN,
              ANY_LENGTH, "km"),
)

RESERVOIR_RULES = (
    FieldRule("quality", ("reservoir quality",), P, PERCENT_UNITS),
    FieldRule("porosity", ("average porosity", "porosity"), P, PERCENT_UNITS),
    FieldRule("permeability", ("average permeability", "permeability"), NN, (None, "md")),
    FieldRule("thickness", ("reservoir thickness", "net pay", "net reservoir thickness", "gross thickness"), NN,
              ANY_LENGTH, "m"),
)

SEAL_RULES = (
    FieldRule("integrity", ("seal integrity", "seal quality", "seal capacity"), P, PERCENT_UNITS),
    FieldRule("thickness", ("seal thickness", "caprock thickness", "top seal thickness"), NN, ANY_LENGTH, "m"),
    FieldRule("continuity", ("seal continuity", "lateral continuity", "continuity"), P, PERCENT_UNITS),
)

TRAP_RULES = (
    FieldRule("closure", ("vertical closure", "closure height", "structural relief", "closure"), NN,
              ANY_LENGTH, "m"),
    FieldRule("area", ("closure area", "trap area", "areal extent", "structure area"), NN,
              (None, "km2", "sqkm"), "km2"),
    FieldRule("integrity", ("trap integrity", "trap quality"), P, PERCENT_UNITS),
)

SOURCE_TIMING_CHOICES = (
    (GenerationTiming.OPTIMAL, ("optimal timing", "optimal", "well-timed")),
    (GenerationTiming.EARLY, ("early generation", "early")),
    (GenerationTiming.LATE, ("late generation", "late")),
)

MIGRATION_TIMING_CHOICES = (
    (MigrationTiming.MULTIPLE_PHASES, ("multiple phases", "multiple migration", "multi-phase", "episodic")),
    (MigrationTiming.RECENT, ("recent migration", "recent", "ongoing")),
    (MigrationTiming.ANCIENT, ("ancient migration", "ancient", "paleo")),
)

TRAP_TYPE_CHOICES = (
    (TrapType.COMBINATION, ("combination trap", "combination", "combined structural-stratigraphic")),
    (TrapType.STRATIGRAPHIC, ("stratigraphic trap", "stratigraphic pinch-out", "pinch-out", "stratigraphic")),
    (TrapType.STRUCTURAL, ("structural trap", "anticlinal", "fault-bounded", "four-way", "structural")),
)

TRAP_KEYWORDS = ("trap", "closure", "anticline", "fault-bounded", "four-way")

# --- Charge history ---

CHARGE_RULES = (
    FieldRule("generation_age", ("peak generation", "peak oil generation", "main generation", "generation"),
              NN, AGE_UNITS),
    FieldRule("generation_volume", ("generated volume", "generation volume", "expelled volume"), NN,
              (None, "mt")),
    FieldRule("migration_age", ("main migration", "peak migration", "migration"), NN, AGE_UNITS),
    FieldRule("migration_efficiency", ("migration efficiency", "expulsion efficiency"), P, PERCENT_UNITS),
    FieldRule("accumulation_age", ("accumulation", "charge of the trap", "reservoir charge"), NN, AGE_UNITS),
    FieldRule("preservation", ("preservation potential", "preservation"), P, PERCENT_UNITS),
    FieldRule("trap_formation", ("trap formation", "trap formed", "trap development", "structuring"),
              NN, AGE_UNITS),
    FieldRule("critical_moment", ("critical moment",), NN, AGE_UNITS),
    FieldRule("charge_risk", ("charge risk",), P, PERCENT_UNITS),
)

TIMELINE_CUES = (
    (TimelinePosition.TRAP_POSTDATES_GENERATION,
     ("trap postdates", "trap formed after", "after peak generation", "postdates peak generation",
      "late trap formation", "trap formation postdates")),
    (TimelinePosition.TRAP_PREDATES_GENERATION,
     ("trap predates", "trap formed before", "before peak generation", "predates peak generation",
      "trap formation predates", "traps were in place")),
    (TimelinePosition.COEVAL, ("coeval", "contemporaneous", "synchronous")),
)

# --- Reserves ---

OIL_IN_PLACE_KEYWORDS = ("oil in place", "stoiip", "ooip", "oil-in-place")
GAS_IN_PLACE_KEYWORDS = ("gas in place", "giip", "ogip", "gas-in-place")
RECOVERABLE_OIL_KEYWORDS = ("recoverable oil", "oil reserves", "recoverable reserves")
RECOVERABLE_GAS_KEYWORDS = ("recoverable gas", "gas reserves")
RECOVERY_FACTOR_KEYWORDS = ("recovery factor", "rf")

# --- Recovery ---

RECOVERY_RULES = (
    FieldRule("primary", ("primary recovery factor", "primary recovery", "primary"), P, PERCENT_UNITS),
    FieldRule("secondary", ("secondary recovery factor", "secondary recovery", "waterflood recovery", "secondary"),
              P, PERCENT_UNITS),
    FieldRule("tertiary", ("tertiary recovery factor", "tertiary recovery", "enhanced oil recovery", "eor",
                           "tertiary"), P, PERCENT_UNITS),
    FieldRule("ultimate", ("ultimate recovery factor", "ultimate recovery", "ultimate"), P, PERCENT_UNITS),
)

LIMITING_FACTOR_KEYWORDS = ("limit", "limiting", "constrain", "reduce recovery", "heterogeneity", "barrier")

# --- Risk ---

GEOLOGICAL_RISK_RULES = (
    FieldRule("source", ("source risk", "source rock risk"), P, PERCENT_UNITS),
    FieldRule("reservoir", ("reservoir risk",), P, PERCENT_UNITS),
    FieldRule("seal", ("seal risk", "containment risk"), P, PERCENT_UNITS),
    FieldRule("trap", ("trap risk", "structural risk"), P, PERCENT_UNITS),
    FieldRule("timing", ("timing risk", "charge timing risk"), P, PERCENT_UNITS),
)

ECONOMIC_RISK_RULES = (
    FieldRule("oil_price", ("oil price risk", "price risk", "commodity price risk"), P, PERCENT_UNITS),
    FieldRule("cost", ("cost risk", "capex risk"), P, PERCENT_UNITS),
    FieldRule("market", ("market risk", "market access risk"), P, PERCENT_UNITS),
    FieldRule("regulatory", ("regulatory risk", "fiscal risk"), P, PERCENT_UNITS),
)

TECHNICAL_RISK_RULES = (
    FieldRule("drilling", ("drilling risk",), P, PERCENT_UNITS),
    FieldRule("completion", ("completion risk",), P, PERCENT_UNITS),
    FieldRule("production", ("production risk",), P, PERCENT_UNITS),
    FieldRule("infrastructure", ("infrastructure risk", "facilities risk"), P, PERCENT_UNITS),
)

# --- Chance factors ---

PR = FieldKind.PROBABILITY

ELEMENT_PROBABILITY_RULES = tuple(
    FieldRule(element, (f"{element} probability", f"probability of {element}", f"p{element}",
                        f"{element} presence", f"{element} effectiveness", element), PR, PERCENT_UNITS)
    for element in ("source", "migration", "reservoir", "seal", "trap", "timing")
)

COMMERCIAL_CHANCE_RULE = FieldRule(
    "commercial_chance",
    ("commercial chance of success", "commercial chance", "commercial probability", "commercial success"),
    PR, PERCENT_UNITS,
)

EXPECTED_VALUE_RULE = FieldRule(
    "expected_value", ("expected monetary value", "emv", "expected value"), FieldKind.VALUE,
)

# --- Gravity-magnetic inversion ---

BASEMENT_DEPTH_RULE = FieldRule("basement_depth", ("basement depth", "depth to basement", "basement"), NN,
                                ANY_LENGTH, "m")
SEDIMENTARY_THICKNESS_RULE = FieldRule(
    "sedimentary_thickness",
    ("sedimentary thickness", "sediment thickness", "sedimentary fill", "sedimentary section"),
    NN, ANY_LENGTH, "m",
)

BASIN_TYPE_CHOICES = (
    (BasinType.RIFT, ("rift", "graben", "extensional basin")),
    (BasinType.FORELAND, ("foreland",)),
    (BasinType.PASSIVE_MARGIN, ("passive margin", "passive-margin")),
    (BasinType.INTRACRATONIC, ("intracratonic", "cratonic sag", "sag basin")),
)

COMPLEXITY_CHOICES = (
    (Complexity.COMPLEX, ("highly complex", "complex")),
    (Complexity.MODERATE, ("moderate", "moderately")),
    (Complexity.SIMPLE, ("simple",)),
)

STRUCTURAL_TERMS = ("fault", "anticline", "syncline", "basement high", "graben", "horst", "salt dome",
                    "half-graben", "inversion structure")

FAULT_RULES = (
    FieldRule("depth", ("depth", "at"), NN, ("m", "km", "ft"), "m"),
    FieldRule("displacement", ("displacement", "throw", "offset"), NN, ANY_LENGTH, "m"),
)

ANTICLINE_RULES = (
    FieldRule("amplitude", ("amplitude", "relief"), NN, ANY_LENGTH, "m"),
    FieldRule("wavelength", ("wavelength", "width"), NN, ("km", "m"), "km"),
    FieldRule("depth", ("depth", "crest at"), NN, ("m", "km", "ft"), "m"),
)

# --- Geological analogy ---

ANALOGY_RULES = (
    FieldRule("similarity_score", ("similarity score", "overall similarity", "similarity"), P, PERCENT_UNITS),
    FieldRule("structural_style", ("structural style", "structural similarity"), P, PERCENT_UNITS),
    FieldRule("stratigraphy", ("stratigraphy", "stratigraphic correlation", "stratigraphic similarity"), P,
              PERCENT_UNITS),
    FieldRule("tectonic_setting", ("tectonic setting", "tectonic similarity", "tectonic"), P, PERCENT_UNITS),
    FieldRule("thermal_history", ("thermal history", "thermal similarity", "thermal"), P, PERCENT_UNITS),
)

ANALOG_POROSITY_RULE = FieldRule("porosity", ("porosity",), P, PERCENT_UNITS)
ANALOG_PERMEABILITY_RULE = FieldRule("permeability", ("permeability",), NN, (None, "md"))

# --- Bayesian uncertainty ---

DEPTH_LEVELS = ("shallow", "intermediate", "deep")
DISTRIBUTION_PROPERTIES = ("porosity", "permeability", "thickness")

MEAN_KEYWORDS = ("mean", "expected", "average", "mu", "μ")
STD_KEYWORDS = ("standard deviation", "std dev", "std", "sigma", "σ", "sd")

DISTRIBUTION_CHOICES = (
    (DistributionType.LOGNORMAL, ("lognormal", "log-normal", "log normal")),
    (DistributionType.NORMAL, ("normal", "gaussian")),
    (DistributionType.TRIANGULAR, ("triangular",)),
    (DistributionType.UNIFORM, ("uniform",)),
)

TARGET_DEPTH_RULE = FieldRule("target_depth", ("target depth", "optimal target depth", "drilling depth"), NN,
                              ANY_LENGTH, "m")
RESERVES_MEAN_RULE = FieldRule("mean", ("expected reserves", "mean reserves", "mean"), NN)
RESERVES_P10_RULE = FieldRule("p10", ("p10",), NN)
RESERVES_P90_RULE = FieldRule("p90", ("p90",), NN)

# --- Surface-subsurface correlation ---

PPM = (None, "ppm")

SOIL_GAS_RULES = (
    FieldRule("methane_anomaly", ("methane anomaly", "methane", "c1"), NN, PPM),
    FieldRule("ethane_anomaly", ("ethane anomaly", "ethane", "c2"), NN, PPM),
    FieldRule("propane_anomaly", ("propane anomaly", "propane", "c3"), NN, PPM),
)

MICROBIAL_RULES = (
    FieldRule("hydrocarbon_degraders", ("hydrocarbon degraders", "hydrocarbon-oxidizing bacteria", "degraders"),
              NN),
    FieldRule("anomaly_strength", ("anomaly strength", "microbial anomaly strength", "microbial anomaly"), P,
              PERCENT_UNITS),
)

MINERAL_RULES = tuple(
    FieldRule(mineral, (mineral,), P, PERCENT_UNITS)
    for mineral in ("kaolinite", "illite", "smectite", "calcite", "dolomite", "goethite", "hematite")
) + (FieldRule("alteration_index", ("alteration index", "integrated alteration index"), P, PERCENT_UNITS),)

SPATIAL_PATTERN_CHOICES = (
    (SpatialPattern.AREAL, ("areal", "halo", "widespread")),
    (SpatialPattern.LINEAR, ("linear", "lineament", "along faults")),
    (SpatialPattern.CIRCULAR, ("circular", "ring", "annular")),
    (SpatialPattern.POINT, ("point", "localized", "localised", "spot")),
    (SpatialPattern.IRREGULAR, ("irregular", "patchy")),
)

STRESS_RULES = (
    FieldRule("orientation", ("shmax orientation", "stress orientation", "maximum horizontal stress",
                              "shmax", "azimuth", "orientation"), FieldKind.BEARING),
    FieldRule("magnitude", ("stress magnitude", "magnitude"), NN, (None, "mpa")),
)

STRESS_REGIME_CHOICES = (
    (StressRegime.STRIKE_SLIP, ("strike-slip", "strike slip", "transtensional", "transpressional")),
    (StressRegime.COMPRESSIONAL, ("compressional", "thrust", "reverse faulting")),
    (StressRegime.EXTENSIONAL, ("extensional", "normal faulting")),
)

FRACTURE_RULES = (
    FieldRule("surface", ("surface fracture density", "fracture density at surface", "surface"), NN),
    FieldRule("predicted_subsurface", ("predicted subsurface fracture density", "subsurface fracture density",
                                       "predicted subsurface", "subsurface"), NN),
)

COMPACTION_RULE = FieldRule("magnitude", ("differential compaction", "compaction magnitude", "compaction"), NN,
                            ANY_LENGTH, "m")

MICROSEEPAGE_RULES = (
    FieldRule("temperature_anomaly", ("temperature anomaly", "thermal anomaly", "anomaly"), NN,
              (None, "°c", "degc", "degreesc")),
    FieldRule("spatial_extent", ("spatial extent", "extent", "anomaly width"), NN, ANY_LENGTH, "m"),
)

GRADIENT_RULES = (
    FieldRule("surface_gradient", ("surface gradient", "surface geothermal gradient", "geothermal gradient"), NN,
              (None, "°c/km")),
    FieldRule("predicted_subsurface", ("predicted subsurface gradient", "subsurface gradient",
                                       "predicted subsurface"), NN, (None, "°c/km")),
    FieldRule("heat_flow", ("heat flow", "heat-flow"), NN, (None, "mw/m2")),
)

VITRINITE_RULE = FieldRule("vitrinite_equivalent", ("vitrinite reflectance equivalent", "vitrinite equivalent",
                                                    "vitrinite reflectance", "ro"), NN, (None, "%ro", "%"))

MATURITY_LEVEL_CHOICES = (
    (MaturityLevel.OVERMATURE, ("overmature", "over-mature", "post-mature")),
    (MaturityLevel.GAS_WINDOW, ("gas window", "dry gas window", "wet gas window")),
    (MaturityLevel.OIL_WINDOW, ("oil window",)),
    (MaturityLevel.IMMATURE, ("immature",)),
)
