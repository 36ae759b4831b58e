"""Analytic GWAS power for a single variant and a quantitative trait.

Power is computed from the non-centrality parameter (NCP) of the 1-df
chi-square association statistic under the alternative,

    NCP = n * q² / (1 - q²),

where q² is the fraction of trait variance explained by the variant
(Visscher et al. 2017, Am J Hum Genet 101:5-22, Appendix A).  The test
rejects when the statistic exceeds the central χ²₁ critical value for the
chosen p-value threshold, so power is the upper tail of χ²₁(NCP) at that
critical value.

Covariates are assumed uncorrelated with the variant.  With strongly
stratified variants and PC adjustment the formula no longer holds and a
simulation-based estimate is more appropriate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple

import numpy as np
import pandas as pd
import scipy.stats as ss

from .validation import (
    as_scalar,
    as_vector,
    check_pval,
    check_sample_size,
    check_vector_range,
)

logger = logging.getLogger(__name__)

GENOME_WIDE_PVAL = 5e-8
SUGGESTIVE_PVAL = 1e-5
MAX_MAF = 0.5


@dataclass(frozen=True)
class PowerGrid:
    """Power values over two varying design quantities.

    ``values[i, j]`` belongs to ``rows[i]`` and ``columns[j]``.  Masked cells
    are undefined (the NCP was negative or not finite) and are distinct from a
    computed power of 0.
    """

    values: np.ma.MaskedArray
    rows: np.ndarray
    columns: np.ndarray
    row_name: str
    column_name: str

    def __post_init__(self) -> None:
        for arr in (self.values, self.rows, self.columns):
            arr.flags.writeable = False
        np.ma.getmaskarray(self.values).flags.writeable = False

    @property
    def shape(self) -> Tuple[int, int]:
        return self.values.shape

    @property
    def defined(self) -> np.ndarray:
        """Boolean array, True where a power value exists."""
        return ~np.ma.getmaskarray(self.values)

    def cell(self, i: int, j: int) -> Optional[float]:
        """Power at ``(i, j)``, or ``None`` when the cell is undefined."""
        if not self.defined[i, j]:
            return None
        return float(self.values.data[i, j])

    def to_frame(self) -> pd.DataFrame:
        """Wide table with NaN for undefined cells."""
        frame = pd.DataFrame(
            self.values.filled(np.nan),
            index=pd.Index(self.rows, name=self.row_name),
            columns=pd.Index(self.columns, name=self.column_name),
        )
        return frame

    def to_long(self) -> pd.DataFrame:
        """One (row, column, power) record per cell in row-major order."""
        n_rows, n_cols = self.shape
        return pd.DataFrame(
            {
                self.row_name: np.repeat(self.rows, n_cols),
                self.column_name: np.tile(self.columns, n_rows),
                "power": self.values.filled(np.nan).reshape(-1),
            }
        )


def significance_threshold(pval: float) -> float:
    """Critical value ``x`` with ``P(χ²₁ > x) = pval``."""
    return float(ss.chi2.isf(pval, df=1))


def ncp_from_qsq(n: Any, qsq: Any) -> np.ndarray:
    """Element-wise ``n * qsq / (1 - qsq)``; inf/nan are left in place."""
    n = np.asarray(n, dtype=float)
    qsq = np.asarray(qsq, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        return n * qsq / (1.0 - qsq)


def qsq_from_het(beta: Any, het: Any) -> np.ndarray:
    """Variance explained from effect size and heterozygote frequency."""
    return np.asarray(het, dtype=float) * np.asarray(beta, dtype=float) ** 2


def qsq_from_maf(beta: Any, maf: Any) -> np.ndarray:
    """Variance explained from effect size and MAF, assuming HWE."""
    maf = np.asarray(maf, dtype=float)
    return 2.0 * maf * (1.0 - maf) * np.asarray(beta, dtype=float) ** 2


def power_from_ncp(ncp: Any, threshold: float) -> np.ma.MaskedArray:
    """Upper tail of χ²₁(ncp) at ``threshold``; masked where ncp is unusable."""
    ncp = np.asarray(ncp, dtype=float)
    with np.errstate(invalid="ignore"):
        valid = np.isfinite(ncp) & (ncp >= 0)
    power = np.zeros(ncp.shape, dtype=float)

    central = valid & (ncp == 0)
    shifted = valid & ~central
    if central.any():
        power[central] = ss.chi2.sf(threshold, df=1)
    if shifted.any():
        tail = ss.ncx2.sf(threshold, df=1, nc=ncp[shifted])
        # the tail evaluation returns nan far beyond the threshold, where power is 1
        power[shifted] = np.where(np.isnan(tail), 1.0, np.clip(tail, 0.0, 1.0))
    return np.ma.MaskedArray(power, mask=~valid)


def _power_grid(
    ncp: np.ndarray,
    pval: float,
    rows: np.ndarray,
    columns: np.ndarray,
    row_name: str,
    column_name: str,
) -> PowerGrid:
    threshold = significance_threshold(pval)
    logger.debug(
        "χ²₁ threshold %.6g for pval=%g over a %dx%d grid",
        threshold,
        pval,
        rows.size,
        columns.size,
    )
    values = power_from_ncp(ncp, threshold)
    n_undefined = int(np.ma.count_masked(values))
    if n_undefined:
        logger.debug("%d of %d cells have no defined power", n_undefined, values.size)
    return PowerGrid(
        values=values,
        rows=rows.copy(),
        columns=columns.copy(),
        row_name=row_name,
        column_name=column_name,
    )


def power_n_qsq(n=None, qsq=None, pval: float = GENOME_WIDE_PVAL) -> PowerGrid:
    """Power over sample sizes ``n`` (rows) and variance explained ``qsq`` (columns).

    Cells with ``qsq == 1`` are undefined.

    Example: ``power_n_qsq(n=[1000, 2000, 3000], qsq=[0.01, 0.02], pval=5e-8)``
    """
    n = as_vector(n, "n")
    qsq = as_vector(qsq, "qsq")
    pval = as_scalar(pval, "pval")
    check_vector_range(n, "n", lower=0)
    check_vector_range(qsq, "qsq", lower=0, upper=1)
    check_pval(pval)

    ncp = ncp_from_qsq(n[:, None], qsq[None, :])
    return _power_grid(ncp, pval, n, qsq, "n", "qsq")


def power_beta_het(beta=None, het=None, n=None, pval: float = GENOME_WIDE_PVAL) -> PowerGrid:
    """Power over effect sizes ``beta`` (rows) and heterozygote frequencies ``het`` (columns).

    ``beta`` is in trait SD units and only its square matters.  Large effects
    can push ``het * beta**2`` to 1 or above; those cells are undefined.
    """
    beta = as_vector(beta, "beta")
    het = as_vector(het, "het")
    n = as_scalar(n, "n")
    pval = as_scalar(pval, "pval")
    check_vector_range(beta, "beta")
    check_vector_range(het, "het", lower=0, upper=1)
    check_sample_size(n)
    check_pval(pval)

    qsq = qsq_from_het(beta[:, None], het[None, :])
    return _power_grid(ncp_from_qsq(n, qsq), pval, beta, het, "beta", "het")


def power_beta_maf(beta=None, maf=None, n=None, pval: float = GENOME_WIDE_PVAL) -> PowerGrid:
    """Power over effect sizes ``beta`` (rows) and minor allele frequencies ``maf`` (columns).

    Heterozygote frequency is taken as ``2 * maf * (1 - maf)``, so this is
    only appropriate when Hardy-Weinberg equilibrium holds.
    """
    beta = as_vector(beta, "beta")
    maf = as_vector(maf, "maf")
    n = as_scalar(n, "n")
    pval = as_scalar(pval, "pval")
    check_vector_range(beta, "beta")
    check_vector_range(maf, "maf", lower=0, upper=MAX_MAF)
    check_sample_size(n)
    check_pval(pval)

    qsq = qsq_from_maf(beta[:, None], maf[None, :])
    return _power_grid(ncp_from_qsq(n, qsq), pval, beta, maf, "beta", "maf")
