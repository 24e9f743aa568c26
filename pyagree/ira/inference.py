"""t-based confidence intervals and p-values for agreement coefficients."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal

from loguru import logger
from scipy import stats

from pyagree.exceptions import DegenerateVariance, InvalidInput

# Standard errors below this are treated as exactly zero.
_ZERO_STDERR = 1e-12


@dataclass(frozen=True)
class Inference:
    """Standard error, confidence interval and p-value for one estimate."""

    stderr: float
    conf_int: tuple[float, float]
    p_value: float | None


def t_critical(conflev: float, df: int) -> float:
    """Two-sided Student-t critical value ``t_{1-(1-conflev)/2, df}``."""
    if not 0.0 < conflev < 1.0:
        raise InvalidInput(f"conflev must lie strictly between 0 and 1; got {conflev}.")
    if df < 1:
        raise InvalidInput(f"At least one degree of freedom is required; got {df}.")
    return float(stats.t.ppf(1.0 - (1.0 - conflev) / 2.0, df))


def confidence_interval(
    estimate: float, stderr: float, df: int, conflev: float
) -> tuple[float, float]:
    """Symmetric t interval around ``estimate``; the upper bound never exceeds 1."""
    margin = stderr * t_critical(conflev, df)
    return estimate - margin, min(1.0, estimate + margin)


def p_value(estimate: float, stderr: float, df: int) -> float | None:
    """Two-sided p-value for H0: coefficient = 0, or ``None`` when ``stderr`` is zero."""
    if stderr < _ZERO_STDERR:
        return None
    statistic = estimate / stderr
    return float(2.0 * stats.t.sf(abs(statistic), df))


def infer(
    estimate: float,
    variance: float,
    *,
    df: int,
    conflev: float,
    degenerate: Literal["warn", "raise"] = "warn",
) -> Inference:
    """Turn a point estimate and its variance into an ``Inference``.

    Args:
        estimate: Coefficient value.
        variance: Linearized sampling variance of the coefficient.
        df: Degrees of freedom (number of subjects minus one).
        conflev: Confidence level in (0, 1).
        degenerate: ``"raise"`` raises ``DegenerateVariance`` on a zero standard
            error; ``"warn"`` logs and reports an undefined p-value.
    """
    stderr = math.sqrt(max(variance, 0.0))
    conf_int = confidence_interval(estimate, stderr, df, conflev)
    p = p_value(estimate, stderr, df)

    if p is None:
        message = f"Standard error is zero for estimate {estimate:.6g}; p-value is undefined"
        if degenerate == "raise":
            raise DegenerateVariance(message)
        logger.warning(message)

    return Inference(stderr=stderr, conf_int=conf_int, p_value=p)
