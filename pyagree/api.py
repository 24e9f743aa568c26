"""High-level user facade for agreement analysis."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

import pandas as pd
from loguru import logger

from pyagree.config import ComputeSettings, PyagreeSettings, get_settings
from pyagree.data.tables import as_distribution_table
from pyagree.exceptions import InvalidInput
from pyagree.ira import POLICIES, AgreementEngine
from pyagree.ira.results import EstimationResult
from pyagree.ira.weights import WeightSpec, weight_spec
from pyagree.types import CategoriesLike, RatingsLike, WeightsLike

_FRAME_COLUMNS = ["coeff_name", "coeff", "stderr", "conf_int", "p_value", "pa", "pe"]


@dataclass(slots=True)
class AnalysisResults:
    """Results of ``AgreementAnalysis.fit``, keyed by coefficient short name."""

    results: dict[str, EstimationResult]

    def get(self, name: str) -> EstimationResult:
        """Return the result for one coefficient (``"gwet"``, ``"fleiss"``, ...)."""
        try:
            return self.results[name]
        except KeyError:
            raise KeyError(
                f"No result for {name!r}; available: {', '.join(self.results)}"
            ) from None

    def __iter__(self) -> Iterator[EstimationResult]:
        return iter(self.results.values())

    def __len__(self) -> int:
        return len(self.results)

    def to_frame(self) -> pd.DataFrame:
        """One row per coefficient, in the order they were requested."""
        rows = []
        for result in self.results.values():
            record = result.to_dict()
            rows.append({col: record[col] for col in _FRAME_COLUMNS})
        return pd.DataFrame(rows, columns=_FRAME_COLUMNS)


class AgreementAnalysis:
    """Run several agreement coefficients over one rating-distribution table."""

    def __init__(
        self,
        *,
        weights: WeightsLike | WeightSpec | None = None,
        categ: CategoriesLike | None = None,
        conflev: float | None = None,
        population_size: float | None = None,
        coefficients: Sequence[str] | None = None,
        n_jobs: int | None = None,
        settings: PyagreeSettings | None = None,
    ):
        self.settings = settings or get_settings()
        if weights is None:
            weights = self.settings.weights.default_scheme
        # Resolve names once so an unknown scheme fails here, not per coefficient.
        self.weights = weight_spec(
            weights, unknown_policy=self.settings.weights.unknown_scheme_policy
        )
        self.categ = categ
        self.conflev = conflev
        self.population_size = population_size
        self.coefficients = self._validate_coefficients(coefficients)
        self.n_jobs = self._validate_n_jobs(n_jobs)

    def fit(self, ratings: RatingsLike) -> AnalysisResults:
        """Estimate every requested coefficient and return the collected results."""
        kwargs: dict[str, Any] = {
            "weights": self.weights,
            "categ": self.categ,
            "conflev": self.conflev,
            "population_size": self.population_size,
        }

        table = as_distribution_table(ratings)

        def run(name: str) -> EstimationResult:
            engine = AgreementEngine(POLICIES[name](), settings=self.settings)
            return engine.estimate(table, **kwargs)

        if self.n_jobs > 1 and len(self.coefficients) > 1:
            logger.debug(f"Running {len(self.coefficients)} estimators on {self.n_jobs} threads")
            with ThreadPoolExecutor(max_workers=self.n_jobs) as pool:
                estimates = list(pool.map(run, self.coefficients))
        else:
            estimates = [run(name) for name in self.coefficients]

        return AnalysisResults(results=dict(zip(self.coefficients, estimates)))

    def _validate_coefficients(self, coefficients: Sequence[str] | None) -> list[str]:
        if coefficients is None:
            return list(POLICIES)
        if isinstance(coefficients, str):
            coefficients = [coefficients]

        names = [name.strip().lower() for name in coefficients]
        unknown = [name for name in names if name not in POLICIES]
        if unknown:
            raise InvalidInput(
                f"Unsupported coefficient(s): {unknown}. Supported: {', '.join(POLICIES)}."
            )
        if not names:
            raise InvalidInput("At least one coefficient must be requested.")
        return list(dict.fromkeys(names))

    def _validate_n_jobs(self, n_jobs: int | None) -> int:
        if n_jobs is None:
            return self.settings.compute.n_jobs
        if n_jobs != -1 and n_jobs < 1:
            raise InvalidInput("n_jobs must be -1 or a positive integer")
        return ComputeSettings(n_jobs=n_jobs).n_jobs


def agreement_summary(ratings: RatingsLike, **kwargs: Any) -> pd.DataFrame:
    """Shortcut for ``AgreementAnalysis(**kwargs).fit(ratings).to_frame()``."""
    return AgreementAnalysis(**kwargs).fit(ratings).to_frame()
