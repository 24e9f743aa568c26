"""Inter-Rater Agreement (IRA) coefficients for rating-distribution tables."""

from pyagree.ira.brennan_prediger import BrennanPredigerPolicy, brennan_prediger_dist
from pyagree.ira.engine import AgreementEngine, AgreementPolicy
from pyagree.ira.gwet import GwetPolicy, gwet_ac1_dist
from pyagree.ira.kappa import FleissPolicy, fleiss_kappa_dist
from pyagree.ira.krippendorff import KrippendorffPolicy, krippendorff_alpha_dist
from pyagree.ira.percent import PercentAgreementPolicy, percent_agreement_dist
from pyagree.ira.results import EstimationResult
from pyagree.ira.weights import (
    CategoryAxis,
    CustomWeights,
    NamedWeights,
    WeightScheme,
    bipolar_weights,
    circular_weights,
    identity_weights,
    linear_weights,
    ordinal_weights,
    quadratic_weights,
    radical_weights,
    ratio_weights,
    weight_matrix,
)

# Policies by short name, in the order the coefficients are usually reported.
POLICIES: dict[str, type[AgreementPolicy]] = {
    "gwet": GwetPolicy,
    "fleiss": FleissPolicy,
    "krippendorff": KrippendorffPolicy,
    "brennan_prediger": BrennanPredigerPolicy,
    "percent": PercentAgreementPolicy,
}

__all__ = [
    "POLICIES",
    "AgreementEngine",
    "AgreementPolicy",
    "BrennanPredigerPolicy",
    "CategoryAxis",
    "CustomWeights",
    "EstimationResult",
    "FleissPolicy",
    "GwetPolicy",
    "KrippendorffPolicy",
    "NamedWeights",
    "PercentAgreementPolicy",
    "WeightScheme",
    "bipolar_weights",
    "brennan_prediger_dist",
    "circular_weights",
    "fleiss_kappa_dist",
    "gwet_ac1_dist",
    "identity_weights",
    "krippendorff_alpha_dist",
    "linear_weights",
    "ordinal_weights",
    "percent_agreement_dist",
    "quadratic_weights",
    "radical_weights",
    "ratio_weights",
    "weight_matrix",
]
