# petrosys/services/analysis/__init__.py
# Export analyzers and parsers to simplify imports
from petrosys.services.analysis.base import BaseAnalyzer
from petrosys.services.analysis.chance_policy import ChancePolicy
from petrosys.services.analysis.system_integration import SystemIntegrationAnalyzer, parse_petroleum_system
from petrosys.services.analysis.charge_history import ChargeHistoryAnalyzer, parse_charge_history
from petrosys.services.analysis.reserve_estimation import ReserveEstimationAnalyzer, parse_reserve_estimation
from petrosys.services.analysis.recovery_prediction import RecoveryPredictionAnalyzer, parse_recovery_prediction
from petrosys.services.analysis.risk_assessment import RiskAssessmentAnalyzer, parse_risk_assessment
from petrosys.services.analysis.chance_calculation import ChanceCalculationAnalyzer, parse_chance_factors

__all__ = [
    "BaseAnalyzer",
    "ChancePolicy",
    "SystemIntegrationAnalyzer",
    "ChargeHistoryAnalyzer",
    "ReserveEstimationAnalyzer",
    "RecoveryPredictionAnalyzer",
    "RiskAssessmentAnalyzer",
    "ChanceCalculationAnalyzer",
    "parse_petroleum_system",
    "parse_charge_history",
    "parse_reserve_estimation",
    "parse_recovery_prediction",
    "parse_risk_assessment",
    "parse_chance_factors",
]
