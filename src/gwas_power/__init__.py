"""Analytic power calculations for single-variant quantitative-trait GWAS."""

from .power import (  # noqa: F401
    GENOME_WIDE_PVAL,
    SUGGESTIVE_PVAL,
    PowerGrid,
    power_beta_het,
    power_beta_maf,
    power_n_qsq,
)
from .validation import InvalidParameter  # noqa: F401

__all__ = [
    "GENOME_WIDE_PVAL",
    "SUGGESTIVE_PVAL",
    "InvalidParameter",
    "PowerGrid",
    "power_beta_het",
    "power_beta_maf",
    "power_n_qsq",
]
