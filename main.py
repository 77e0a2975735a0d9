#!/usr/bin/env python3
"""
Command-line entry point for the statistics engine.
"""

# Pipeline overview:
# 1) Parse the subcommand and its numeric parameters.
# 2) Invoke exactly one engine operation (sample / evaluate / fit).
# 3) Round distribution samples for display and print the result as JSON.
# 4) Optionally store the full-precision result with provenance metadata.

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import time

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from statlab.errors import StatlabError
from statlab.output import DEFAULT_OUTPUT_DIR, save_analysis
from statlab.reporting import points_to_records, round_for_display, total_mass
from statlab.schema import DistributionFamily, TestKind
from statlab.stats import evaluate, fit, sample
from statlab.stats.hypothesis import DEFAULT_SIGNIFICANCE_LEVEL

DISCRETE_FAMILIES = (DistributionFamily.BINOMIAL, DistributionFamily.POISSON)


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--save", action="store_true", help="Store the result under --outdir."
    )
    parser.add_argument(
        "--outdir",
        default=DEFAULT_OUTPUT_DIR,
        help=f"Output directory for stored results (default: {DEFAULT_OUTPUT_DIR}).",
    )
    parser.add_argument(
        "--description", default="", help="Free-text note stored with the result."
    )


def _build_arg_parser() -> argparse.ArgumentParser:
    """Build command-line parser for module execution."""
    parser = argparse.ArgumentParser(
        description="Sample distributions, run one-sample t-tests and fit regressions."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    normal = sub.add_parser("normal", help="Normal PDF over mean ± 4 sd.")
    normal.add_argument("--mean", type=float, required=True)
    normal.add_argument("--std-dev", type=float, required=True)

    binomial = sub.add_parser("binomial", help="Binomial PMF over 0..n.")
    binomial.add_argument("--n", type=int, required=True, help="Number of trials.")
    binomial.add_argument("--p", type=float, required=True, help="Success probability.")

    for name, text in (("poisson", "Poisson PMF."), ("exponential", "Exponential PDF over [0, 5/lambda].")):
        family = sub.add_parser(name, help=text)
        family.add_argument("--lambda", dest="lam", type=float, required=True, help="Rate.")

    ttest = sub.add_parser("ttest", help="One-sample test of the mean.")
    ttest.add_argument("--sample", type=float, nargs="+", required=True)
    ttest.add_argument(
        "--mu", type=float, required=True, help="Hypothesized population mean."
    )
    ttest.add_argument(
        "--alpha",
        type=float,
        default=DEFAULT_SIGNIFICANCE_LEVEL,
        help="Significance level: 0.01, 0.05 or 0.10 (any value in (0, 1) with --exact).",
    )
    ttest.add_argument(
        "--test-kind",
        default=TestKind.T_TEST.value,
        choices=[k.value for k in TestKind],
    )
    ttest.add_argument(
        "--exact",
        action="store_true",
        help="Use the Student-t distribution instead of the lookup table.",
    )

    regression = sub.add_parser("regression", help="Ordinary least-squares line fit.")
    regression.add_argument("--x", type=float, nargs="+", required=True)
    regression.add_argument("--y", type=float, nargs="+", required=True)

    for subparser in sub.choices.values():
        _add_common_options(subparser)
    return parser


def _distribution_parameters(args: argparse.Namespace) -> dict:
    if args.command == "normal":
        return {"mean": args.mean, "stdDev": args.std_dev}
    if args.command == "binomial":
        return {"n": args.n, "p": args.p}
    return {"lambda": args.lam}


def run(args: argparse.Namespace) -> object:
    """Execute one parsed command and return its JSON-ready payload."""
    if args.command in {f.value for f in DistributionFamily}:
        family = DistributionFamily(args.command)
        parameters = _distribution_parameters(args)
        points = sample(family, parameters)
        logging.info("Sampled %d %s points", len(points), family.value)
        if family in DISCRETE_FAMILIES:
            logging.info("Total mass over emitted range: %.6f", total_mass(points))
        if args.save:
            save_analysis(
                points,
                "distribution",
                output_dir=args.outdir,
                parameters=parameters,
                description=args.description,
                analysis_type=family.value,
            )
        return points_to_records(round_for_display(family, points))

    if args.command == "ttest":
        result = evaluate(
            args.sample,
            args.mu,
            significance_level=args.alpha,
            test_kind=args.test_kind,
            exact=args.exact,
        )
        logging.info(
            "t = %.4f, critical value = %.4f, reject null: %s",
            result.statistic,
            result.critical_value,
            result.reject_null,
        )
        if args.save:
            save_analysis(
                result,
                "hypothesis",
                output_dir=args.outdir,
                parameters={
                    "sampleData": list(args.sample),
                    "populationMean": args.mu,
                    "significanceLevel": args.alpha,
                },
                description=args.description,
                analysis_type=result.test_kind.value,
            )
        return result.to_dict()

    result = fit(args.x, args.y)
    logging.info("Fitted %s (R² = %.4f, n = %d)", result.equation, result.r_squared, result.n)
    if args.save:
        save_analysis(
            result,
            "regression",
            output_dir=args.outdir,
            parameters={"xData": list(args.x), "yData": list(args.y)},
            description=args.description,
            analysis_type="linear",
        )
    return result.to_dict()


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint; prints the result as JSON on stdout."""
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    start_time = time.time()
    try:
        payload = run(args)
    except StatlabError as exc:
        logging.error("%s failed: %s", args.command, exc)
        print(f"error: {exc}", file=sys.stderr)
        return 2

    print(json.dumps(payload, indent=2))
    logging.info("Completed %s in %.3f seconds", args.command, time.time() - start_time)
    return 0


if __name__ == "__main__":
    sys.exit(main())
