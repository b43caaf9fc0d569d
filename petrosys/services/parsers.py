# petrosys/services/parsers.py
# Narrative parsers by record type, for parsing stored narratives without a reasoning call.
import logging
from typing import Any, Callable, Dict, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from petrosys.schemas.petroleum_system import PetroleumSystem
from petrosys.schemas.reserves import RecoveryMethod
from petrosys.schemas.risk import RiskAssessment
from petrosys.services.analysis import (
    ChancePolicy,
    parse_chance_factors,
    parse_charge_history,
    parse_petroleum_system,
    parse_recovery_prediction,
    parse_reserve_estimation,
    parse_risk_assessment,
)
from petrosys.services.multiphysics import (
    parse_analogies,
    parse_bayesian_uncertainty,
    parse_geochemical_proxies,
    parse_geomechanical_expressions,
    parse_gravity_magnetic,
    parse_thermal_anomalies,
)
from petrosys.utils.error_handling import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _context_record(context: Dict[str, Any], key: str, model: Type[M]) -> Optional[M]:
    value = context.get(key)
    if value is None:
        return None
    try:
        return model.model_validate(value)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid '{key}' in parser context", details={"errors": [
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]} for err in e.errors()
        ]}) from e


def _recovery(text: str, context: Dict[str, Any]):
    method = context.get("recovery_method", RecoveryMethod.UNSPECIFIED.value)
    try:
        method = RecoveryMethod(method)
    except ValueError as e:
        raise ValidationError(f"Unknown recovery method: {method}") from e
    return parse_recovery_prediction(text, method)


def _analogies(text: str, context: Dict[str, Any]):
    target = context.get("target_basin") or ""
    if isinstance(target, dict):
        target = target.get("name") or ""
    candidates = [b.get("name") if isinstance(b, dict) else str(b) for b in context.get("candidate_basins", [])]
    return parse_analogies(text, str(target), [c for c in candidates if c])


PARSERS: Dict[str, Callable[[str, Dict[str, Any]], Any]] = {
    "petroleum_system": lambda text, context: parse_petroleum_system(text),
    "charge_history": lambda text, context: parse_charge_history(
        text, _context_record(context, "petroleum_system", PetroleumSystem)
    ),
    "reserve_estimation": lambda text, context: parse_reserve_estimation(
        text, _context_record(context, "petroleum_system", PetroleumSystem)
    ),
    "recovery_prediction": _recovery,
    "risk_assessment": lambda text, context: parse_risk_assessment(text, ChancePolicy.from_settings()),
    "chance_factors": lambda text, context: parse_chance_factors(
        text, _context_record(context, "risk_assessment", RiskAssessment)
    ),
    "gravity_magnetic_inversion": lambda text, context: parse_gravity_magnetic(text),
    "geological_analogy": _analogies,
    "bayesian_uncertainty": lambda text, context: parse_bayesian_uncertainty(text),
    "geochemical_proxies": lambda text, context: parse_geochemical_proxies(text),
    "geomechanical_expressions": lambda text, context: parse_geomechanical_expressions(text),
    "thermal_anomalies": lambda text, context: parse_thermal_anomalies(text),
}


def parse_narrative(record_type: str, narrative: str, context: Optional[Dict[str, Any]] = None) -> Any:
    """
    Parse a narrative into the named record type.

    Raises:
        NotFoundError: If the record type is unknown
        ValidationError: If the context holds malformed upstream records
    """
    parser = PARSERS.get(record_type)
    if parser is None:
        raise NotFoundError(
            f"Unknown record type: {record_type}",
            details={"available": sorted(PARSERS)},
        )
    logger.info(f"Parsing {len(narrative)}-character narrative as {record_type}")
    return parser(narrative, context or {})
