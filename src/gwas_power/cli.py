"""Command-line helpers for gwas_power."""

from __future__ import annotations

import argparse
import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import List

import matplotlib.pyplot as plt
import numpy as np

from .plots import power_heatmap
from .power import GENOME_WIDE_PVAL, PowerGrid, power_beta_het, power_beta_maf, power_n_qsq
from .validation import InvalidParameter

AXIS_LABELS = {
    "n": "n",
    "qsq": "q-squared",
    "beta": "beta",
    "het": "heterozygote frequency",
    "maf": "MAF",
}


def _decimal_places(token: str) -> int:
    exponent = Decimal(token.strip()).as_tuple().exponent
    return max(0, -exponent) if isinstance(exponent, int) else 0


def parse_values(tokens: List[str]) -> List[float]:
    """Expand ``start:stop:step`` tokens (stop inclusive) and plain numbers."""
    values: List[float] = []
    for token in tokens:
        if ":" not in token:
            values.append(float(token))
            continue
        parts = token.split(":")
        if len(parts) != 3:
            raise argparse.ArgumentTypeError(f"Range '{token}' must look like start:stop:step.")
        start, stop, step = (float(p) for p in parts)
        if step <= 0 or stop < start:
            raise argparse.ArgumentTypeError(f"Range '{token}' is empty.")
        count = int(np.floor((stop - start) / step + 1e-6)) + 1
        places = max(_decimal_places(parts[0]), _decimal_places(parts[2]))
        values.extend(round(float(v), places) for v in start + step * np.arange(count))
    return values


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--pval",
        type=float,
        default=GENOME_WIDE_PVAL,
        help="P-value threshold for significance (default: genome-wide 5e-8).",
    )
    parser.add_argument(
        "--results-csv",
        type=Path,
        help="Optional path to store the power grid as CSV.",
    )
    parser.add_argument(
        "--results-json",
        type=Path,
        help="Optional path to store the power grid as JSON.",
    )
    parser.add_argument(
        "--heatmap-path",
        type=Path,
        help="Optional path to save a heatmap of the grid (PNG/PDF).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gwas-power",
        description="Analytic power of a single-variant quantitative-trait GWAS.",
    )
    sub = parser.add_subparsers(dest="mode", required=True)

    p = sub.add_parser("n-qsq", help="Vary sample size and variance explained.")
    p.add_argument("--n", nargs="+", required=True, help="Sample sizes or start:stop:step.")
    p.add_argument("--qsq", nargs="+", required=True, help="Variance explained by the variant.")
    _add_common(p)

    p = sub.add_parser("beta-het", help="Vary effect size and heterozygote frequency.")
    p.add_argument("--beta", nargs="+", required=True, help="Effect sizes in trait SD units.")
    p.add_argument("--het", nargs="+", required=True, help="Heterozygote frequencies.")
    p.add_argument("--n", type=float, required=True, help="Sample size.")
    _add_common(p)

    p = sub.add_parser("beta-maf", help="Vary effect size and minor allele frequency (HWE).")
    p.add_argument("--beta", nargs="+", required=True, help="Effect sizes in trait SD units.")
    p.add_argument("--maf", nargs="+", required=True, help="Minor allele frequencies (<= 0.5).")
    p.add_argument("--n", type=float, required=True, help="Sample size.")
    _add_common(p)
    return parser


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        if args.mode == "n-qsq":
            args.n = parse_values(args.n)
            args.qsq = parse_values(args.qsq)
        else:
            args.beta = parse_values(args.beta)
            other = "het" if args.mode == "beta-het" else "maf"
            setattr(args, other, parse_values(getattr(args, other)))
    except (ValueError, argparse.ArgumentTypeError) as exc:
        parser.error(str(exc))
    args.parser = parser
    return args


def compute_grid(args: argparse.Namespace) -> PowerGrid:
    if args.mode == "n-qsq":
        return power_n_qsq(n=args.n, qsq=args.qsq, pval=args.pval)
    if args.mode == "beta-het":
        return power_beta_het(beta=args.beta, het=args.het, n=args.n, pval=args.pval)
    return power_beta_maf(beta=args.beta, maf=args.maf, n=args.n, pval=args.pval)


def grid_payload(grid: PowerGrid) -> dict:
    power = [
        [grid.cell(i, j) for j in range(grid.shape[1])]
        for i in range(grid.shape[0])
    ]
    return {
        "row_name": grid.row_name,
        "column_name": grid.column_name,
        "rows": grid.rows.tolist(),
        "columns": grid.columns.tolist(),
        "power": power,
    }


def main(argv: List[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        grid = compute_grid(args)
    except InvalidParameter as exc:
        args.parser.error(str(exc))

    df = grid.to_frame()
    print(
        df.to_string(
            float_format=lambda x: f"{x:.6g}",
            na_rep="NA",
        )
    )

    if args.results_csv:
        args.results_csv.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(args.results_csv, na_rep="NA")
        print(f"CSV grid written to {args.results_csv.resolve()}")

    if args.results_json:
        args.results_json.parent.mkdir(parents=True, exist_ok=True)
        args.results_json.write_text(json.dumps(grid_payload(grid), indent=2))
        print(f"JSON grid written to {args.results_json.resolve()}")

    if args.heatmap_path:
        fig = power_heatmap(
            grid,
            xlabel=AXIS_LABELS[grid.row_name],
            ylabel=AXIS_LABELS[grid.column_name],
            output=args.heatmap_path,
        )
        plt.close(fig)
        print(f"Heatmap saved to {args.heatmap_path.resolve()}")


if __name__ == "__main__":
    main()
