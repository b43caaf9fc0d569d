# petrosys/services/multiphysics/__init__.py
# Export analyzers and parsers to simplify imports
from petrosys.services.multiphysics.gravity_magnetic import GravityMagneticInversionAnalyzer, parse_gravity_magnetic
from petrosys.services.multiphysics.analogy import GeologicalAnalogyAnalyzer, parse_analogies
from petrosys.services.multiphysics.bayesian import BayesianUncertaintyAnalyzer, parse_bayesian_uncertainty
from petrosys.services.multiphysics.surface_correlation import (
    SurfaceSubsurfaceAnalyzer,
    parse_geochemical_proxies,
    parse_geomechanical_expressions,
    parse_thermal_anomalies,
)

__all__ = [
    "GravityMagneticInversionAnalyzer",
    "GeologicalAnalogyAnalyzer",
    "BayesianUncertaintyAnalyzer",
    "SurfaceSubsurfaceAnalyzer",
    "parse_gravity_magnetic",
    "parse_analogies",
    "parse_bayesian_uncertainty",
    "parse_geochemical_proxies",
    "parse_geomechanical_expressions",
    "parse_thermal_anomalies",
]
