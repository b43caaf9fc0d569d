# petrosys/services/reasoning/prompts.py
# Minimal role/payload templates. Each entry is (system role, request title, items to provide).
from typing import Dict, NamedTuple, Tuple


class PromptTemplate(NamedTuple):
    system: str
    title: str
    instructions: Tuple[str, ...]


PROMPTS: Dict[str, PromptTemplate] = {
    "system_integration": PromptTemplate(
        "You are a senior petroleum systems analyst integrating multi-disciplinary data.",
        "Integrate this data into a petroleum system analysis",
        (
            "SOURCE: rock quality %, thermal maturity %, volume (Mt), generation timing",
            "MIGRATION: pathways, efficiency %, distance (km), timing",
            "RESERVOIR: quality %, porosity %, permeability (mD), thickness (m)",
            "SEAL: integrity %, thickness (m), continuity %",
            "TRAP: type, closure (m), area (km²), integrity %",
        ),
    ),
    "charge_history": PromptTemplate(
        "You are a basin modelling expert in thermal and burial history for charge modelling.",
        "Model the charge history for this petroleum system",
        (
            "Peak generation age (Ma) and generated volume (Mt)",
            "Main migration age (Ma) and migration efficiency %",
            "Accumulation age (Ma) and preservation potential %",
            "Trap formation age (Ma) and critical moment (Ma)",
            "Charge risk %",
        ),
    ),
    "reserve_estimation": PromptTemplate(
        "You are a reservoir engineer performing volumetric reserve estimation with uncertainty.",
        "Estimate hydrocarbon volumes using the volumetric method",
        (
            "Oil in place: low, best, high (MMbbl) with confidence %",
            "Gas in place: low, best, high (Bcf) with confidence %",
            "Recoverable oil (MMbbl) with recovery factor % and ± uncertainty",
            "Recoverable gas (Bcf) with recovery factor % and ± uncertainty",
        ),
    ),
    "recovery_prediction": PromptTemplate(
        "You are a recovery specialist predicting recovery factors from rock and fluid properties.",
        "Predict recovery factors for this reservoir",
        (
            "Primary recovery factor %",
            "Secondary recovery factor %",
            "Tertiary / enhanced recovery factor %",
            "Ultimate recovery factor %",
            "Factors limiting recovery",
        ),
    ),
    "risk_assessment": PromptTemplate(
        "You are a risk specialist in petroleum exploration and development.",
        "Assess the risks of this petroleum prospect",
        (
            "Geological risks (0-100, 100 = highest): source, reservoir, seal, trap, timing",
            "Economic risks (0-100): oil price, cost, market, regulatory",
            "Technical risks (0-100): drilling, completion, production, infrastructure",
        ),
    ),
    "chance_calculation": PromptTemplate(
        "You are a risk analyst calculating chance factors for petroleum exploration.",
        "Calculate chance factors for this petroleum play",
        (
            "Probability of presence for each play element (source, migration, reservoir, seal, trap, timing)",
            "Conditional probabilities, written as P(event | given) = N%",
            "Commercial chance of success %",
            "Expected monetary value ($MM)",
        ),
    ),
    "gravity_magnetic": PromptTemplate(
        "You are a geophysicist specialising in gravity and magnetic inversion for basin analysis.",
        "Invert this potential-field data",
        (
            "Basement depth (m) with ± uncertainty and confidence %",
            "Sedimentary thickness (m) with ± uncertainty",
            "Basin architecture: type, complexity, structural elements",
            "Deep structures: faults (depth, orientation, displacement) and anticlines (amplitude, wavelength, depth)",
        ),
    ),
    "geological_analogy": PromptTemplate(
        "You are a petroleum geologist with expertise in global basin analogues.",
        "Find geological analogues for the target basin",
        (
            "Name each analogue basin as '<Name> Basin' and give its overall similarity %",
            "Structural style, stratigraphy, tectonic setting and thermal history similarity %",
            "Transferable knowledge: porosity %, permeability (mD), trap types, risk factors",
            "Confidence %",
        ),
    ),
    "bayesian_uncertainty": PromptTemplate(
        "You are a quantitative geoscientist performing Bayesian uncertainty analysis.",
        "Quantify the uncertainty of this geological model",
        (
            "Depth uncertainty at shallow, intermediate and deep levels (mean, standard deviation in m)",
            "Porosity, permeability and thickness distributions (mean, standard deviation, distribution type)",
            "Geological scenarios with probabilities, as 'Scenario <name>: N% probability'",
            "Target depth (m), expected reserves mean, P10 and P90 (MMbbl)",
        ),
    ),
    "geochemical_proxies": PromptTemplate(
        "You are a geochemist specialising in surface proxies for subsurface hydrocarbons.",
        "Analyse the surface geochemical proxies",
        (
            "Soil gas anomalies: methane, ethane, propane (ppm) with confidence %",
            "Microbial anomalies: hydrocarbon degraders, anomaly strength %, spatial pattern",
            "Mineral alteration percentages and an integrated alteration index %",
        ),
    ),
    "geomechanical_expressions": PromptTemplate(
        "You are a structural geologist analysing geomechanical surface expressions.",
        "Analyse the geomechanical surface expressions",
        (
            "Stress field: orientation (degrees), magnitude (MPa), regime",
            "Fracture density at surface and predicted subsurface (per km) with confidence %",
            "Differential compaction magnitude (m), pattern and interpretation",
        ),
    ),
    "thermal_anomalies": PromptTemplate(
        "You are a geothermal specialist relating thermal anomalies to hydrocarbon systems.",
        "Map the thermal anomalies",
        (
            "Microseepage temperature anomaly (°C), spatial extent (m) and confidence %",
            "Surface and predicted subsurface geothermal gradient (°C/km), heat flow (mW/m²)",
            "Vitrinite reflectance equivalent (%Ro) and maturity level",
        ),
    ),
}
