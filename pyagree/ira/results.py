"""Result record produced by every estimator."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

import pandas as pd


@dataclass(frozen=True, slots=True)
class EstimationResult:
    """Point estimate, its linearized standard error and t-based inference.

    ``p_value`` is ``None`` when the standard error is zero and the test
    statistic is undefined.
    """

    coeff_name: str
    coeff: float
    stderr: float
    conf_int: tuple[float, float]
    p_value: float | None
    pa: float
    pe: float
    weights_name: str
    n_subjects: int
    n_categories: int
    conflev: float
    ci_decimals: int = 3

    @property
    def conf_int_label(self) -> str:
        """Confidence interval formatted as ``"(low,high)"``."""
        low, high = self.conf_int
        digits = self.ci_decimals
        return f"({low:.{digits}f},{high:.{digits}f})"

    def to_dict(self) -> dict[str, Any]:
        record = asdict(self)
        record["conf_int"] = self.conf_int_label
        record["ci_lower"], record["ci_upper"] = self.conf_int
        del record["ci_decimals"]
        return record

    def to_frame(self) -> pd.DataFrame:
        """One-row frame in the classic ``coeff_name ... pe`` column layout."""
        record = self.to_dict()
        columns = ["coeff_name", "coeff", "stderr", "conf_int", "p_value", "pa", "pe"]
        return pd.DataFrame([{col: record[col] for col in columns}])

    def __str__(self) -> str:
        p_value = "undefined" if self.p_value is None else f"{self.p_value:.4g}"
        return (
            f"{self.coeff_name}: {self.coeff:.4f} "
            f"(SE {self.stderr:.4f}, {self.conflev:.0%} CI {self.conf_int_label}, "
            f"p-value {p_value}; pa={self.pa:.4f}, pe={self.pe:.4f})"
        )
