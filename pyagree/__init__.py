"""pyagree: chance-corrected agreement coefficients from rating-distribution tables."""

from pyagree.api import AgreementAnalysis, AnalysisResults, agreement_summary
from pyagree.exceptions import (
    AgreementError,
    DegenerateVariance,
    InvalidInput,
    UndefinedCoefficient,
    UnknownWeightScheme,
    WeightMatrixShapeMismatch,
)
from pyagree.ira import (
    EstimationResult,
    WeightScheme,
    brennan_prediger_dist,
    fleiss_kappa_dist,
    gwet_ac1_dist,
    krippendorff_alpha_dist,
    percent_agreement_dist,
    weight_matrix,
)

__version__ = "0.1.0"

__all__ = [
    "AgreementAnalysis",
    "AgreementError",
    "AnalysisResults",
    "DegenerateVariance",
    "EstimationResult",
    "InvalidInput",
    "UndefinedCoefficient",
    "UnknownWeightScheme",
    "WeightMatrixShapeMismatch",
    "WeightScheme",
    "agreement_summary",
    "brennan_prediger_dist",
    "fleiss_kappa_dist",
    "gwet_ac1_dist",
    "krippendorff_alpha_dist",
    "percent_agreement_dist",
    "weight_matrix",
]
